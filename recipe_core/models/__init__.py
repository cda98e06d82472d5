"""Recipe entity and the fixed category list."""

from .recipe import (
    Recipe,
    Difficulty,
    LEGACY_DIFFICULTY_LABELS,
    LOCAL_ID_PREFIX,
    SAMPLE_ID_PREFIX,
    REQUIRED_FIELDS,
    USER_FIELDS,
    missing_required_fields,
)
from .categories import (
    RecipeCategory,
    CATEGORIES,
    CATEGORY_IDS,
    get_category,
    category_label,
)

__all__ = [
    "Recipe",
    "Difficulty",
    "LEGACY_DIFFICULTY_LABELS",
    "LOCAL_ID_PREFIX",
    "SAMPLE_ID_PREFIX",
    "REQUIRED_FIELDS",
    "USER_FIELDS",
    "missing_required_fields",
    "RecipeCategory",
    "CATEGORIES",
    "CATEGORY_IDS",
    "get_category",
    "category_label",
]

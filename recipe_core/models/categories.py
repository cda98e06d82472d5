# =============================================================================
# recipe_core/models/categories.py
# Fixed Recipe Category List
# =============================================================================

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class RecipeCategory:
    id: str
    name: str
    icon: str


CATEGORIES: List[RecipeCategory] = [
    RecipeCategory("salads", "Salads", "🥗"),
    RecipeCategory("soups", "Soups", "🍲"),
    RecipeCategory("meat", "Meat", "🥩"),
    RecipeCategory("pastries", "Pastries", "🥐"),
    RecipeCategory("cakes", "Cakes", "🎂"),
    RecipeCategory("cookies", "Cookies", "🍪"),
    RecipeCategory("desserts", "Desserts", "🍨"),
    RecipeCategory("breakfast", "Breakfast", "🥚"),
    RecipeCategory("sides", "Sides", "🥘"),
    RecipeCategory("sauces", "Sauces", "🥣"),
    RecipeCategory("healthy", "Healthy", "🥑"),
]

CATEGORY_IDS = [category.id for category in CATEGORIES]

_BY_ID: Dict[str, RecipeCategory] = {category.id: category for category in CATEGORIES}


def get_category(category_id: str) -> Optional[RecipeCategory]:
    return _BY_ID.get(category_id)


def category_label(category_id: str) -> str:
    """Icon and name for display; unknown ids are shown as-is."""
    category = _BY_ID.get(category_id)
    if category is None:
        return category_id
    return f"{category.icon} {category.name}"

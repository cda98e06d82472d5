# =============================================================================
# recipe_core/models/recipe.py
# Recipe Entity
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class Difficulty(Enum):
    """Closed set of difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Rows written by older clients carry the Hebrew labels.
LEGACY_DIFFICULTY_LABELS = {
    "קל": Difficulty.EASY,
    "בינוני": Difficulty.MEDIUM,
    "קשה": Difficulty.HARD,
}

REQUIRED_FIELDS = ("title", "category", "ingredients", "directions")

# Fields a user sets directly; server-owned fields are id and timestamps.
USER_FIELDS = (
    "title",
    "description",
    "category",
    "ingredients",
    "directions",
    "additional_instructions",
    "images",
    "prep_time",
    "difficulty",
    "is_favorite",
    "current_step",
)


@dataclass
class Recipe:
    """A single recipe, in the shape application state works with."""
    id: str
    title: str
    category: str
    ingredients: List[str] = field(default_factory=list)
    directions: List[str] = field(default_factory=list)
    additional_instructions: Dict[str, List[str]] = field(default_factory=dict)
    images: List[str] = field(default_factory=list)
    prep_time: str = ""
    difficulty: Optional[Difficulty] = None
    description: str = ""
    is_favorite: bool = False
    current_step: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    @property
    def is_local(self) -> bool:
        """True when the id was synthesized on this device."""
        return self.id.startswith(LOCAL_ID_PREFIX)

    def with_changes(self, **changes: Any) -> Recipe:
        """Return a copy with ``changes`` applied; id and created_at never change."""
        changes.pop("id", None)
        changes.pop("created_at", None)
        return replace(self, **changes)

    def user_fields(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in USER_FIELDS}


LOCAL_ID_PREFIX = "local-"
SAMPLE_ID_PREFIX = "sample-"


def missing_required_fields(data: Mapping[str, Any]) -> List[str]:
    """
    List the required fields that are absent or empty in ``data``.

    Text fields count as empty when blank; ingredients and directions need at
    least one non-blank line, given as a list or as its JSON text.
    """
    from recipe_core.data.normalize import decode_list

    missing = []
    for name in ("title", "category"):
        value = data.get(name)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
    for name in ("ingredients", "directions"):
        lines = decode_list(data.get(name), name)
        if not any(line.strip() for line in lines):
            missing.append(name)
    return missing

# =============================================================================
# recipe_core/data/normalize.py
# Recipe Row Normalization
# =============================================================================
"""
Turns the rows the remote store and the on-device mirror hand back into
:class:`~recipe_core.models.Recipe` objects, and back again.

Rows are loosely shaped: container fields (ingredients, directions, images,
additional_instructions) arrive either already parsed or as JSON-encoded text,
keys may be snake_case or camelCase, and timestamps are ISO strings. Nothing in
here raises on bad input; malformed fields are logged and replaced by an empty
value of the right type.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from recipe_core.models.recipe import (
    Difficulty,
    LEGACY_DIFFICULTY_LABELS,
    Recipe,
)

logger = logging.getLogger(__name__)


# =============================================================================
# STORED FIELD VARIANTS
# =============================================================================

@dataclass(frozen=True)
class Encoded:
    """A container field persisted as JSON text."""
    text: str


@dataclass(frozen=True)
class Decoded:
    """A container field that is already a Python value."""
    container: Any


StoredField = Union[Encoded, Decoded]


def classify_field(raw: Any) -> StoredField:
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        return Encoded(text)
    return Decoded(raw)


def _unwrap(raw: Any, field_name: str) -> Any:
    stored = classify_field(raw)
    if isinstance(stored, Decoded):
        return stored.container
    if not stored.text.strip():
        return None
    try:
        return json.loads(stored.text)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Could not decode '{field_name}' ({e}); using an empty value")
        return None


def decode_list(raw: Any, field_name: str = "list") -> List[str]:
    """Decode a stored sequence of text lines; anything else becomes ``[]``."""
    value = _unwrap(raw, field_name)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning(f"Expected a list for '{field_name}', got {type(value).__name__}")
        return []
    return [str(item) for item in value if item is not None]


def decode_mapping(raw: Any, field_name: str = "mapping") -> Dict[str, List[str]]:
    """Decode section name -> lines; malformed sections are dropped."""
    value = _unwrap(raw, field_name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning(f"Expected a mapping for '{field_name}', got {type(value).__name__}")
        return {}

    sections: Dict[str, List[str]] = {}
    for section, lines in value.items():
        if isinstance(lines, (list, tuple)):
            sections[str(section)] = [str(line) for line in lines if line is not None]
        elif isinstance(lines, str):
            sections[str(section)] = [lines]
        else:
            logger.warning(f"Dropping malformed section '{section}' in '{field_name}'")
    return sections


def parse_timestamp(raw: Any) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    ts = pd.to_datetime(raw, errors="coerce", utc=True)
    if pd.isna(ts):
        logger.warning(f"Unparseable timestamp: {raw!r}")
        return None
    return ts.to_pydatetime()


def parse_difficulty(raw: Any) -> Optional[Difficulty]:
    if isinstance(raw, Difficulty):
        return raw
    if not raw or not isinstance(raw, str):
        return None
    text = raw.strip()
    if text in LEGACY_DIFFICULTY_LABELS:
        return LEGACY_DIFFICULTY_LABELS[text]
    try:
        return Difficulty(text.lower())
    except ValueError:
        return None


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "1", "t", "yes")
    return bool(raw)


def _parse_int(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _pick(row: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in row:
        return row[snake]
    return row.get(camel, default)


# =============================================================================
# ROW <-> RECIPE
# =============================================================================

def normalize_recipe(row: Mapping[str, Any]) -> Recipe:
    """Build a :class:`Recipe` from a remote or stored row."""
    return Recipe(
        id=str(row.get("id", "")),
        title=str(row.get("title") or ""),
        category=str(row.get("category") or ""),
        ingredients=decode_list(row.get("ingredients"), "ingredients"),
        directions=decode_list(row.get("directions"), "directions"),
        additional_instructions=decode_mapping(
            _pick(row, "additional_instructions", "additionalInstructions"),
            "additional_instructions",
        ),
        images=decode_list(row.get("images"), "images"),
        prep_time=str(_pick(row, "prep_time", "prepTime") or ""),
        difficulty=parse_difficulty(row.get("difficulty")),
        description=str(row.get("description") or ""),
        is_favorite=_parse_bool(_pick(row, "is_favorite", "isFavorite", False)),
        current_step=_parse_int(_pick(row, "current_step", "currentStep", 0)),
        created_at=parse_timestamp(_pick(row, "created_at", "createdAt")),
        updated_at=parse_timestamp(_pick(row, "updated_at", "updatedAt")),
    )


def normalize_recipes(rows: Iterable[Any]) -> List[Recipe]:
    """Normalize many rows, skipping anything that is not a mapping."""
    recipes = []
    for row in rows or []:
        if isinstance(row, Mapping):
            recipes.append(normalize_recipe(row))
        else:
            logger.warning(f"Skipping malformed recipe row of type {type(row).__name__}")
    return recipes


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def recipe_to_row(recipe: Recipe) -> Dict[str, Any]:
    """JSON-serializable row, the shape kept in the offline mirror."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "description": recipe.description,
        "category": recipe.category,
        "ingredients": list(recipe.ingredients),
        "directions": list(recipe.directions),
        "additional_instructions": {
            section: list(lines)
            for section, lines in recipe.additional_instructions.items()
        },
        "images": list(recipe.images),
        "prep_time": recipe.prep_time,
        "difficulty": recipe.difficulty.value if recipe.difficulty else None,
        "is_favorite": recipe.is_favorite,
        "current_step": recipe.current_step,
        "created_at": _format_timestamp(recipe.created_at),
        "updated_at": _format_timestamp(recipe.updated_at),
    }


def to_payload(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Request body for create/update.

    Containers are sent as plain JSON structures; enums and timestamps are
    converted to text. Server-owned keys are dropped.
    """
    payload: Dict[str, Any] = {}
    for key, value in fields.items():
        if key in ("id", "created_at", "updated_at"):
            continue
        if isinstance(value, Difficulty):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, tuple):
            value = list(value)
        payload[key] = value
    return payload


def coerce_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Bring a partial update into the types :class:`Recipe` holds."""
    coerced: Dict[str, Any] = {}
    for key, value in changes.items():
        if key in ("ingredients", "directions", "images"):
            coerced[key] = decode_list(value, key)
        elif key == "additional_instructions":
            coerced[key] = decode_mapping(value, key)
        elif key == "difficulty":
            coerced[key] = parse_difficulty(value)
        elif key == "is_favorite":
            coerced[key] = _parse_bool(value)
        elif key == "current_step":
            coerced[key] = _parse_int(value)
        elif key in ("title", "category", "description", "prep_time"):
            coerced[key] = "" if value is None else str(value)
    return coerced


def recipes_to_dataframe(recipes: Iterable[Recipe]) -> pd.DataFrame:
    """Flat table of recipes for the list view."""
    records = [
        {
            "Title": recipe.title,
            "Category": recipe.category,
            "Difficulty": recipe.difficulty.label if recipe.difficulty else "",
            "Prep time": recipe.prep_time,
            "Ingredients": len(recipe.ingredients),
            "Steps": len(recipe.directions),
            "Favorite": recipe.is_favorite,
            "Created": recipe.created_at,
        }
        for recipe in recipes
    ]
    columns = ["Title", "Category", "Difficulty", "Prep time", "Ingredients", "Steps", "Favorite", "Created"]
    return pd.DataFrame.from_records(records, columns=columns)

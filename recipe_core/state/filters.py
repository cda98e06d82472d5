# =============================================================================
# recipe_core/state/filters.py
# Recipe Filtering and Sorting
# =============================================================================

from __future__ import annotations
import locale
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Iterable, List, Optional

from recipe_core.models import Difficulty, Recipe


class SortOrder(Enum):
    NONE = "none"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    DATE_NEWEST = "date-newest"
    DATE_OLDEST = "date-oldest"


class PresenceFilter(Enum):
    """Tri-state filter: ignore, require, or exclude."""
    ANY = "any"
    WITH = "with"
    WITHOUT = "without"


@dataclass(frozen=True)
class RecipeFilters:
    """Independent criteria, combined with AND. Defaults match everything."""
    query: str = ""
    category: Optional[str] = None
    favorites_only: bool = False
    recent_only: bool = False
    difficulty: Optional[Difficulty] = None
    images: PresenceFilter = PresenceFilter.ANY
    ingredient: str = ""
    ingredient_mode: PresenceFilter = PresenceFilter.WITH
    sort: SortOrder = SortOrder.NONE

    def with_changes(self, **changes) -> RecipeFilters:
        return replace(self, **changes)

    @property
    def is_active(self) -> bool:
        return self != RecipeFilters()

    def active_names(self) -> List[str]:
        default = RecipeFilters()
        return [f.name for f in fields(self) if getattr(self, f.name) != getattr(default, f.name)]


def matches_query(recipe: Recipe, query: str) -> bool:
    """Case-insensitive substring match on title, ingredients or directions."""
    needle = query.strip().casefold()
    if not needle:
        return True
    if needle in recipe.title.casefold():
        return True
    if any(needle in line.casefold() for line in recipe.ingredients):
        return True
    return any(needle in line.casefold() for line in recipe.directions)


def _has_ingredient(recipe: Recipe, fragment: str) -> bool:
    needle = fragment.strip().casefold()
    return any(needle in line.casefold() for line in recipe.ingredients)


def _created_key(recipe: Recipe) -> float:
    if recipe.created_at is None:
        return float("-inf")
    return recipe.created_at.timestamp()


def _title_key(recipe: Recipe) -> str:
    return locale.strxfrm(recipe.title.casefold())


def sort_recipes(recipes: List[Recipe], order: SortOrder) -> List[Recipe]:
    """Stable sort; SortOrder.NONE keeps the given order."""
    if order is SortOrder.NAME_ASC:
        return sorted(recipes, key=_title_key)
    if order is SortOrder.NAME_DESC:
        return sorted(recipes, key=_title_key, reverse=True)
    if order is SortOrder.DATE_NEWEST:
        return sorted(recipes, key=_created_key, reverse=True)
    if order is SortOrder.DATE_OLDEST:
        return sorted(recipes, key=_created_key)
    return list(recipes)


def apply_filters(recipes: Iterable[Recipe], filters: RecipeFilters) -> List[Recipe]:
    """
    Filter then sort, without touching the input.

    Every criterion narrows the result; relative order is preserved unless a
    sort is chosen. ``recent_only`` puts the newest first when no explicit
    sort is set.
    """
    result = [recipe for recipe in recipes if matches_query(recipe, filters.query)]

    if filters.category:
        result = [recipe for recipe in result if recipe.category == filters.category]

    if filters.favorites_only:
        result = [recipe for recipe in result if recipe.is_favorite]

    if filters.difficulty is not None:
        result = [recipe for recipe in result if recipe.difficulty == filters.difficulty]

    if filters.images is PresenceFilter.WITH:
        result = [recipe for recipe in result if recipe.images]
    elif filters.images is PresenceFilter.WITHOUT:
        result = [recipe for recipe in result if not recipe.images]

    if filters.ingredient.strip():
        if filters.ingredient_mode is PresenceFilter.WITHOUT:
            result = [recipe for recipe in result if not _has_ingredient(recipe, filters.ingredient)]
        elif filters.ingredient_mode is PresenceFilter.WITH:
            result = [recipe for recipe in result if _has_ingredient(recipe, filters.ingredient)]

    if filters.sort is not SortOrder.NONE:
        return sort_recipes(result, filters.sort)
    if filters.recent_only:
        return sort_recipes(result, SortOrder.DATE_NEWEST)
    return result

# =============================================================================
# recipe_core/offline/offline_mirror.py
# Offline Copy of the Recipe Collection
# =============================================================================
"""
OfflineMirror - the last known recipe collection, kept on this machine with
no expiry so the catalog stays usable while the remote store is unreachable.

The collection lives under one canonical key. Older clients spread copies over
several keys; ``migrate()`` folds those into the canonical key once, and
``save()`` keeps every key that still holds data in step so any reader sees
the same collection.
"""

from __future__ import annotations
import json
from datetime import datetime
from typing import Any, List, Optional
import logging

from recipe_core.data.normalize import normalize_recipes, recipe_to_row
from recipe_core.data.sample_recipes import build_sample_recipes
from recipe_core.errors import LocalStorageError
from recipe_core.models import Recipe
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)


MIRROR_KEY = "offline_recipes"
LEGACY_MIRROR_KEYS = ("fallback_recipes", "hebrew-recipes", "recipes-cache")
MIGRATION_MARKER_KEY = "offline_recipes_migrated"


class OfflineMirror:
    """Durable, TTL-less copy of the recipe collection."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._migrated = False

    # =========================================================================
    # RAW ACCESS
    # =========================================================================

    def _read_rows(self, key: str) -> Optional[List[Any]]:
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt offline copy under '{key}': {e}")
            return None
        if not isinstance(rows, list):
            logger.warning(f"Ignoring offline copy under '{key}': not a list")
            return None
        return rows

    def _write_rows(self, key: str, rows: List[Any]) -> None:
        self.storage.set_item(key, json.dumps(rows, ensure_ascii=False, default=str))

    # =========================================================================
    # MIGRATION
    # =========================================================================

    def migrate(self) -> int:
        """
        Merge legacy copies into the canonical key, once.

        Rows are merged by id in key order; the first occurrence of an id wins.

        Returns:
            Number of rows in the canonical copy after migration (0 if skipped)
        """
        self._migrated = True
        if self.storage.get_item(MIGRATION_MARKER_KEY) is not None:
            return 0

        merged: List[Any] = []
        seen = set()
        for key in (MIRROR_KEY,) + LEGACY_MIRROR_KEYS:
            for row in self._read_rows(key) or []:
                row_id = row.get("id") if isinstance(row, dict) else None
                if row_id is None or row_id in seen:
                    continue
                seen.add(row_id)
                merged.append(row)

        try:
            if merged:
                self._write_rows(MIRROR_KEY, merged)
            self.storage.set_item(MIGRATION_MARKER_KEY, datetime.now().isoformat())
        except LocalStorageError as e:
            logger.warning(f"Offline copy migration failed: {e}")
            self._migrated = False
            return 0

        if merged:
            logger.info(f"Migrated {len(merged)} recipes into '{MIRROR_KEY}'")
        return len(merged)

    def _ensure_migrated(self) -> None:
        if not self._migrated:
            self.migrate()

    # =========================================================================
    # COLLECTION OPERATIONS
    # =========================================================================

    def populated_keys(self) -> List[str]:
        """Keys holding a non-empty collection, canonical key first."""
        self._ensure_migrated()
        return [
            key
            for key in (MIRROR_KEY,) + LEGACY_MIRROR_KEYS
            if self._read_rows(key)
        ]

    def load(self) -> List[Recipe]:
        """Read the collection from the first populated key."""
        for key in self.populated_keys():
            return normalize_recipes(self._read_rows(key) or [])
        return []

    def save(self, recipes: List[Recipe]) -> None:
        """
        Write the collection to the canonical key and every key holding data.

        Raises:
            LocalStorageError: If any write fails
        """
        rows = [recipe_to_row(recipe) for recipe in recipes]
        targets = [MIRROR_KEY] + [key for key in self.populated_keys() if key != MIRROR_KEY]
        for key in targets:
            self._write_rows(key, rows)
        logger.debug(f"Saved {len(rows)} recipes to {targets}")

    def find(self, recipe_id: str) -> Optional[Recipe]:
        """Look the id up in each populated key in order."""
        for key in self.populated_keys():
            for recipe in normalize_recipes(self._read_rows(key) or []):
                if recipe.id == recipe_id:
                    return recipe
        return None

    def prepend(self, recipe: Recipe) -> None:
        recipes = [existing for existing in self.load() if existing.id != recipe.id]
        self.save([recipe] + recipes)

    def replace(self, recipe: Recipe) -> bool:
        """
        Swap in ``recipe`` in the first key that holds its id and save that
        collection everywhere.

        Returns:
            False if no key holds the id
        """
        for key in self.populated_keys():
            recipes = normalize_recipes(self._read_rows(key) or [])
            for index, existing in enumerate(recipes):
                if existing.id == recipe.id:
                    recipes[index] = recipe
                    self.save(recipes)
                    return True
        return False

    def remove(self, recipe_id: str) -> bool:
        """
        Drop the id from every key holding data.

        Returns:
            True if the id was present under any key
        """
        removed = False
        for key in self.populated_keys():
            rows = self._read_rows(key) or []
            kept = [row for row in rows if not (isinstance(row, dict) and row.get("id") == recipe_id)]
            if len(kept) != len(rows):
                self._write_rows(key, kept)
                removed = True
        return removed

    def seed_samples(self, now: Optional[datetime] = None) -> List[Recipe]:
        """Write the sample recipes when the mirror is empty; return the collection."""
        existing = self.load()
        if existing:
            return existing
        samples = build_sample_recipes(now)
        self.save(samples)
        logger.info(f"Seeded offline copy with {len(samples)} sample recipes")
        return samples

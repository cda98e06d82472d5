# =============================================================================
# recipe_core/offline/cache_manager.py
# TTL Cache over Local Storage
# =============================================================================
"""
CacheManager - short-lived cache of remote responses.

Entries are stored as JSON ``{"value", "stored_at", "ttl"}`` under keys
prefixed with ``cache_``. An entry older than its TTL is deleted when read.
Nothing here raises on storage trouble; the cache is an optimisation and a
failed write only costs a later remote round trip.
"""

from __future__ import annotations
import json
import time
from typing import Any, Callable, Dict, Optional
import logging

from recipe_core.errors import LocalStorageError
from .local_storage import LocalStorage
from .offline_mirror import MIRROR_KEY

logger = logging.getLogger(__name__)


CACHE_PREFIX = "cache_"
DEFAULT_TTL_SECONDS = 300


class CacheKeys:
    """Logical cache keys used by the data service."""
    ALL_RECIPES = "all_recipes"
    FAVORITE_RECIPES = "favorite_recipes"
    RECENT_RECIPES = "recent_recipes"

    @staticmethod
    def recipe(recipe_id: str) -> str:
        return f"recipe_{recipe_id}"

    @staticmethod
    def by_category(category: str) -> str:
        return f"recipes_category_{category}"


CACHE_KEYS = CacheKeys


# Keys written by older clients for the offline copy and UI preferences.
# clear() removes them as part of a full reset.
LEGACY_KEYS = (
    "fallback_recipes",
    "recipes-cache",
    "recipes-cache-timestamp",
    "hebrew-recipes",
    "recipe-favorites",
    "recipe-view-mode",
)


class CacheManager:
    """
    Time-to-live cache persisted through :class:`LocalStorage`.

    Args:
        storage: Durable key/value backend
        default_ttl: TTL in seconds when ``set`` is called without one
        clock: Returns the current time in seconds
        extra_reset_keys: Additional keys removed by ``clear()``
    """

    def __init__(
        self,
        storage: LocalStorage,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        extra_reset_keys: tuple = (),
    ):
        self.storage = storage
        self.default_ttl = default_ttl
        self._clock = clock
        self._reset_keys = tuple(LEGACY_KEYS) + (MIRROR_KEY,) + tuple(extra_reset_keys)

    @staticmethod
    def _storage_key(key: str) -> str:
        return f"{CACHE_PREFIX}{key}"

    # =========================================================================
    # ENTRY OPERATIONS
    # =========================================================================

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        entry = {
            "value": value,
            "stored_at": self._clock(),
            "ttl": self.default_ttl if ttl_seconds is None else ttl_seconds,
        }
        try:
            self.storage.set_item(self._storage_key(key), json.dumps(entry, default=str))
        except (LocalStorageError, TypeError, ValueError) as e:
            logger.warning(f"Error caching '{key}': {e}")

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing, expired or corrupt."""
        storage_key = self._storage_key(key)
        raw = self.storage.get_item(storage_key)
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            stored_at = float(entry["stored_at"])
            ttl = float(entry["ttl"])
            value = entry["value"]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Removing corrupt cache entry '{key}': {e}")
            self._remove(storage_key)
            return None

        if self._clock() - stored_at > ttl:
            logger.debug(f"Cache entry '{key}' expired")
            self._remove(storage_key)
            return None

        return value

    def delete(self, key: str) -> None:
        self._remove(self._storage_key(key))

    def invalidate_all(self) -> int:
        """
        Remove every TTL entry. The offline mirror is left alone.

        Returns:
            Number of entries removed
        """
        removed = 0
        for storage_key in self.storage.keys():
            if storage_key.startswith(CACHE_PREFIX):
                self._remove(storage_key)
                removed += 1
        logger.debug(f"Invalidated {removed} cache entries")
        return removed

    def clear(self) -> None:
        """Full reset: TTL entries plus the offline copy and stored UI preferences."""
        removed = self.invalidate_all()
        for key in self._reset_keys:
            self._remove(key)
        logger.info(f"Cache cleared ({removed} entries, {len(self._reset_keys)} reset keys)")

    def _remove(self, storage_key: str) -> None:
        try:
            self.storage.remove_item(storage_key)
        except LocalStorageError as e:
            logger.warning(f"Error removing '{storage_key}': {e}")

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        now = self._clock()
        stats = {
            "total_items": 0,
            "expired_items": 0,
            "keys": [],
        }

        for storage_key in self.storage.keys():
            if not storage_key.startswith(CACHE_PREFIX):
                continue
            key = storage_key[len(CACHE_PREFIX):]
            try:
                entry = json.loads(self.storage.get_item(storage_key) or "")
                expired = now - float(entry["stored_at"]) > float(entry["ttl"])
            except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                expired = True

            if expired:
                stats["expired_items"] += 1
            else:
                stats["total_items"] += 1
                stats["keys"].append(key)

        return stats

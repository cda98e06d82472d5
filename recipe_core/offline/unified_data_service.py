# =============================================================================
# recipe_core/offline/unified_data_service.py
# Recipe Data Service - Single API for Online/Offline Recipe Operations
# =============================================================================
"""
RecipeDataService - the one place that decides how recipes are read and
persisted right now.

For every operation the service:
- Probes the remote store (no remembered "online" flag is used for routing)
- Talks to the remote store through the retrying connector when reachable
- Falls back to the offline copy on this machine when it is not
- Normalizes every row into a Recipe before handing it back

Usage:
------
from recipe_core.offline import get_data_service

service = get_data_service()

recipes = service.get_all_recipes()
created = service.add_recipe({
    "title": "Soup",
    "category": "soups",
    "ingredients": ["water"],
    "directions": ["boil"],
})
service.toggle_favorite(created.id, True)
"""

from __future__ import annotations
import random
import string
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

from recipe_core.api import RecipeAPIConnector, load_api_config, load_storage_path
from recipe_core.data.normalize import (
    coerce_changes,
    normalize_recipe,
    normalize_recipes,
    recipe_to_row,
    to_payload,
)
from recipe_core.data.sample_recipes import build_sample_recipes
from recipe_core.errors import (
    LocalStorageError,
    NotFoundError,
    PersistenceError,
    TransientRemoteError,
    ValidationError,
)
from recipe_core.logging import LogContext
from recipe_core.models import LOCAL_ID_PREFIX, Recipe, missing_required_fields
from .cache_manager import CACHE_KEYS, CacheManager
from .connection_manager import ConnectionManager
from .local_storage import LocalStorage
from .offline_mirror import OfflineMirror

logger = logging.getLogger(__name__)

VIEW_MODE_KEY = "recipe-view-mode"


class DataOrigin:
    """Where the last recipe list came from."""
    CACHE = "cache"
    REMOTE = "remote"
    MIRROR = "mirror"
    SAMPLES = "samples"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_local_id(now: Optional[datetime] = None) -> str:
    """
    Id for a recipe created while the remote store is unreachable.

    ``local-<epoch ms>-<9 base36 chars>``; server ids never carry the prefix.
    """
    moment = now or _utcnow()
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{LOCAL_ID_PREFIX}{millis}-{suffix}"


class RecipeDataService:
    """
    Data access facade over the remote recipe store and the local copy.

    Args:
        connector: Retrying HTTP connector for the recipe store
        connection_manager: Availability probe
        cache: Short-lived response cache
        mirror: TTL-less offline copy of the collection
        clock: Returns the current time (timezone-aware)
    """

    def __init__(
        self,
        connector: RecipeAPIConnector,
        connection_manager: ConnectionManager,
        cache: CacheManager,
        mirror: OfflineMirror,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.connector = connector
        self.connection_manager = connection_manager
        self.cache = cache
        self.mirror = mirror
        self._clock = clock
        self.last_origin: Optional[str] = None

    @classmethod
    def from_config(cls) -> RecipeDataService:
        """Build the service from Streamlit secrets / environment settings."""
        connector = RecipeAPIConnector(load_api_config())
        storage = LocalStorage(load_storage_path())
        return cls(
            connector=connector,
            connection_manager=ConnectionManager(connector),
            cache=CacheManager(storage),
            mirror=OfflineMirror(storage),
        )

    # =========================================================================
    # CONNECTION
    # =========================================================================

    def _is_remote_available(self) -> bool:
        return self.connection_manager.probe()

    def check_connection(self) -> bool:
        """Probe the remote store now."""
        return self._is_remote_available()

    # =========================================================================
    # READS
    # =========================================================================

    def get_all_recipes(self) -> List[Recipe]:
        """
        The full collection, from the freshest source available.

        Order of preference: unexpired cache, remote store, offline copy,
        built-in samples. Never raises for remote trouble.
        """
        cached = self.cache.get(CACHE_KEYS.ALL_RECIPES)
        if isinstance(cached, list) and cached:
            logger.debug(f"Using cached recipes ({len(cached)})")
            self.last_origin = DataOrigin.CACHE
            return normalize_recipes(cached)

        if self._is_remote_available():
            try:
                with LogContext(logger, "Fetching recipes from remote store"):
                    recipes = normalize_recipes(self.connector.fetch_recipes())
            except TransientRemoteError as e:
                logger.warning(f"Remote fetch failed, using offline copy: {e.message}")
            else:
                rows = [recipe_to_row(recipe) for recipe in recipes]
                self.cache.set(CACHE_KEYS.ALL_RECIPES, rows)
                try:
                    self.mirror.save(recipes)
                except LocalStorageError as e:
                    logger.warning(f"Could not refresh offline copy: {e.message}")
                self.last_origin = DataOrigin.REMOTE
                return recipes

        return self._load_offline()

    def _load_offline(self) -> List[Recipe]:
        try:
            recipes = self.mirror.load()
            if recipes:
                logger.info(f"Serving {len(recipes)} recipes from offline copy")
                self.last_origin = DataOrigin.MIRROR
                return recipes
            self.last_origin = DataOrigin.SAMPLES
            return self.mirror.seed_samples(self._clock())
        except LocalStorageError as e:
            logger.error(f"Offline copy unavailable: {e.message}")
            self.last_origin = DataOrigin.SAMPLES
            return build_sample_recipes(self._clock())

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """
        One recipe by id.

        Returns:
            The recipe, or None when the remote store answers 404 or no
            reachable copy holds the id
        """
        if str(recipe_id).startswith(LOCAL_ID_PREFIX):
            try:
                return self.mirror.find(recipe_id)
            except LocalStorageError as e:
                logger.warning(f"Offline copy unavailable for {recipe_id}: {e.message}")
                return None

        if self._is_remote_available():
            try:
                row = self.connector.fetch_recipe(recipe_id)
            except TransientRemoteError as e:
                logger.warning(f"Remote fetch of {recipe_id} failed, checking offline copy: {e.message}")
            else:
                if row is None:
                    return None
                recipe = normalize_recipe(row)
                self.cache.set(CACHE_KEYS.recipe(recipe_id), recipe_to_row(recipe))
                return recipe

        for recipe in self.get_all_recipes():
            if recipe.id == recipe_id:
                return recipe
        return None

    def get_recipes_by_category(self, category: str) -> List[Recipe]:
        cache_key = CACHE_KEYS.by_category(category)
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return normalize_recipes(cached)

        recipes = [recipe for recipe in self.get_all_recipes() if recipe.category == category]
        self.cache.set(cache_key, [recipe_to_row(recipe) for recipe in recipes])
        return recipes

    def get_favorite_recipes(self) -> List[Recipe]:
        cached = self.cache.get(CACHE_KEYS.FAVORITE_RECIPES)
        if isinstance(cached, list):
            return normalize_recipes(cached)

        recipes = [recipe for recipe in self.get_all_recipes() if recipe.is_favorite]
        self.cache.set(CACHE_KEYS.FAVORITE_RECIPES, [recipe_to_row(recipe) for recipe in recipes])
        return recipes

    # =========================================================================
    # WRITES
    # =========================================================================

    def add_recipe(self, data: Mapping[str, Any]) -> Recipe:
        """
        Create a recipe, remotely when possible, otherwise in the offline copy.

        Raises:
            ValidationError: title, category, ingredients or directions missing
            PersistenceError: Neither the remote store nor the offline copy
                accepted the recipe
        """
        missing = missing_required_fields(data)
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        fields = coerce_changes(data)
        fields.setdefault("is_favorite", False)

        if self._is_remote_available():
            try:
                with LogContext(logger, f"Creating recipe '{fields['title']}'"):
                    row = self.connector.create_recipe(to_payload(fields))
                recipe = normalize_recipe(row)
            except TransientRemoteError as e:
                logger.warning(f"Remote create failed, saving locally: {e.message}")
            else:
                self.cache.invalidate_all()
                return recipe

        return self._add_locally(fields)

    def _add_locally(self, fields: Dict[str, Any]) -> Recipe:
        now = self._clock()
        recipe = Recipe(id=generate_local_id(now), title="", category="", created_at=now, updated_at=now)
        recipe = recipe.with_changes(**fields)

        try:
            self.mirror.prepend(recipe)
        except LocalStorageError as e:
            raise PersistenceError(
                f"Could not save '{recipe.title}' on this device: {e.message}",
                operation="create",
            ) from e

        self.cache.invalidate_all()
        logger.info(f"Recipe {recipe.id} saved to offline copy")
        return recipe

    def update_recipe(self, recipe_id: str, changes: Mapping[str, Any]) -> Recipe:
        """
        Apply a partial update.

        Raises:
            NotFoundError: No store holds the id
            PersistenceError: Remote failed and the offline copy could not be written
        """
        fields = coerce_changes(changes)
        previous_category = self._known_category(recipe_id)

        if not str(recipe_id).startswith(LOCAL_ID_PREFIX) and self._is_remote_available():
            try:
                with LogContext(logger, f"Updating recipe {recipe_id}"):
                    row = self.connector.update_recipe(recipe_id, to_payload(fields))
                recipe = normalize_recipe(row)
            except TransientRemoteError as e:
                logger.warning(f"Remote update of {recipe_id} failed, updating offline copy: {e.message}")
            else:
                self._invalidate_recipe(recipe_id, previous_category, recipe.category)
                return recipe

        return self._update_locally(recipe_id, fields, previous_category)

    def _update_locally(
        self,
        recipe_id: str,
        fields: Dict[str, Any],
        previous_category: Optional[str],
    ) -> Recipe:
        existing = self.mirror.find(recipe_id)
        if existing is None:
            raise NotFoundError(f"Recipe {recipe_id} not found", recipe_id=recipe_id)

        recipe = existing.with_changes(**fields, updated_at=self._clock())
        try:
            self.mirror.replace(recipe)
        except LocalStorageError as e:
            raise PersistenceError(
                f"Could not save changes to '{existing.title}' on this device: {e.message}",
                operation="update",
            ) from e

        self._invalidate_recipe(recipe_id, previous_category, recipe.category)
        return recipe

    def toggle_favorite(self, recipe_id: str, is_favorite: bool) -> Recipe:
        return self.update_recipe(recipe_id, {"is_favorite": is_favorite})

    def delete_recipe(self, recipe_id: str) -> None:
        """
        Delete a recipe from the remote store and every offline copy key.

        A remote 404 counts as success. Offline copy failures are logged.

        Raises:
            PersistenceError: The remote delete failed and the offline copy
                could not be written either
        """
        remote_failed = False
        if not str(recipe_id).startswith(LOCAL_ID_PREFIX) and self._is_remote_available():
            try:
                self.connector.delete_recipe(recipe_id)
            except TransientRemoteError as e:
                remote_failed = True
                logger.warning(f"Remote delete of {recipe_id} failed: {e.message}")

        try:
            if self.mirror.remove(recipe_id):
                logger.info(f"Recipe {recipe_id} removed from offline copy")
        except LocalStorageError as e:
            logger.warning(f"Could not remove {recipe_id} from offline copy: {e.message}")
            if remote_failed:
                raise PersistenceError(
                    f"Could not delete recipe {recipe_id}: {e.message}",
                    operation="delete",
                ) from e

        self.cache.invalidate_all()

    # =========================================================================
    # CACHE MAINTENANCE
    # =========================================================================

    def _known_category(self, recipe_id: str) -> Optional[str]:
        cached = self.cache.get(CACHE_KEYS.recipe(recipe_id))
        if isinstance(cached, dict) and cached.get("category"):
            return str(cached["category"])
        existing = self.mirror.find(recipe_id)
        return existing.category if existing else None

    def _invalidate_recipe(self, recipe_id: str, *categories: Optional[str]) -> None:
        self.cache.delete(CACHE_KEYS.ALL_RECIPES)
        self.cache.delete(CACHE_KEYS.recipe(recipe_id))
        self.cache.delete(CACHE_KEYS.FAVORITE_RECIPES)
        self.cache.delete(CACHE_KEYS.RECENT_RECIPES)
        for category in set(categories):
            if category:
                self.cache.delete(CACHE_KEYS.by_category(category))

    def sync_with_database(self) -> bool:
        """
        Drop cached responses when the remote store is reachable so the next
        list comes straight from it.

        Returns:
            Whether the remote store was reachable
        """
        if not self._is_remote_available():
            logger.info("Sync skipped: recipe store unreachable")
            return False
        self.cache.invalidate_all()
        logger.info("Cache invalidated for sync with recipe store")
        return True

    def clear_cache(self) -> None:
        """Full local reset: cached responses, offline copy and legacy keys."""
        self.cache.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.cache.get_stats()

    # =========================================================================
    # UI PREFERENCES
    # =========================================================================

    def get_view_mode(self) -> Optional[str]:
        """Saved list layout, or None when never chosen."""
        return self.mirror.storage.get_item(VIEW_MODE_KEY)

    def save_view_mode(self, mode: str) -> None:
        try:
            self.mirror.storage.set_item(VIEW_MODE_KEY, mode)
        except LocalStorageError as e:
            logger.warning(f"Could not save view mode: {e.message}")

    def get_status(self) -> Dict[str, Any]:
        """Status information for UI display."""
        return {
            "connection": self.connection_manager.get_status_display(),
            "last_origin": self.last_origin,
            "cache": self.get_cache_stats(),
            "offline_keys": self.mirror.populated_keys(),
        }


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_data_service: Optional[RecipeDataService] = None
_service_lock = threading.Lock()


def get_data_service() -> RecipeDataService:
    """
    Get the process-wide RecipeDataService built from configuration.

    Usage:
        from recipe_core.offline import get_data_service

        service = get_data_service()
        recipes = service.get_all_recipes()
    """
    global _data_service
    if _data_service is None:
        with _service_lock:
            if _data_service is None:
                _data_service = RecipeDataService.from_config()
    return _data_service

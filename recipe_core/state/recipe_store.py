# =============================================================================
# recipe_core/state/recipe_store.py
# Application State Store for the Recipe Catalog
# =============================================================================
"""
RecipeStore - the in-memory working set of recipes for one session.

Pages read recipes and filtered views from here and call the mutation
methods; the store talks to RecipeDataService and never lets a failed
mutation escape as an exception.

Mutations are optimistic and run in three phases recorded on a
MutationResult:

1. apply-tentative: the in-memory collection changes at once
2. await-confirm:   the data service persists the change
3. commit-or-revert: the entry is replaced by what was persisted, or the
                     pre-mutation value is restored and ``error`` is set
"""

from __future__ import annotations
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from recipe_core.data.normalize import coerce_changes
from recipe_core.errors import RecipeCatalogError
from recipe_core.logging import get_logger
from recipe_core.models import Recipe, missing_required_fields
from recipe_core.offline.unified_data_service import DataOrigin, RecipeDataService
from .filters import RecipeFilters, apply_filters

logger = get_logger(__name__)


DEFAULT_STALENESS_SECONDS = 30.0
PENDING_ID_PREFIX = "pending-"


class DataSource(Enum):
    """Indicator for the UI: where the current list came from."""
    CHECKING = "checking"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class ViewMode(Enum):
    LARGE = "large"
    MEDIUM = "medium"
    LIST = "list"


class MutationPhase(Enum):
    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"


@dataclass
class MutationResult:
    """Outcome of one optimistic mutation, phase by phase."""
    operation: str
    recipe_id: Optional[str]
    phase: MutationPhase = MutationPhase.TENTATIVE
    previous: Optional[Recipe] = None
    tentative: Optional[Recipe] = None
    committed: Optional[Recipe] = None
    error: Optional[str] = None
    _done: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.phase is MutationPhase.CONFIRMED

    @property
    def is_resolved(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> MutationResult:
        """Block until the mutation is confirmed or reverted."""
        self._done.wait(timeout)
        return self

    def _resolve(self, phase: MutationPhase, committed: Optional[Recipe] = None, error: Optional[str] = None) -> None:
        self.phase = phase
        self.committed = committed
        self.error = error
        self._done.set()


class RecipeStore:
    """
    Session-scoped recipe collection with filters and optimistic mutations.

    Args:
        service: Data access facade
        staleness_seconds: Minimum age of the last load before
            ``refresh_if_stale`` reloads
        background: Confirm mutations on a daemon thread instead of inline
        clock: Monotonic seconds, used for staleness
    """

    def __init__(
        self,
        service: RecipeDataService,
        staleness_seconds: float = DEFAULT_STALENESS_SECONDS,
        background: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.service = service
        self.staleness_seconds = staleness_seconds
        self.background = background
        self._clock = clock
        self._lock = threading.RLock()

        self._recipes: List[Recipe] = []
        self.filters = RecipeFilters()
        self.loading = False
        self.error: Optional[str] = None
        self.data_source = DataSource.CHECKING
        self.last_loaded_at: Optional[float] = None
        self.view_mode = self._saved_view_mode()
        self._in_flight = 0
        self._discarded: Set[str] = set()

    # =========================================================================
    # COLLECTION ACCESS
    # =========================================================================

    @property
    def recipes(self) -> List[Recipe]:
        with self._lock:
            return list(self._recipes)

    @property
    def pending_mutations(self) -> int:
        return self._in_flight

    def find(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            for recipe in self._recipes:
                if recipe.id == recipe_id:
                    return recipe
        return None

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """In-memory lookup first, then the data service."""
        recipe = self.find(recipe_id)
        if recipe is not None:
            return recipe
        try:
            return self.service.get_recipe(recipe_id)
        except RecipeCatalogError as e:
            logger.warning(f"Could not load recipe {recipe_id}: {e.message}")
            self.error = e.message
            return None

    def _index_of(self, recipe_id: str) -> int:
        for index, recipe in enumerate(self._recipes):
            if recipe.id == recipe_id:
                return index
        return -1

    def _put(self, recipe_id: str, recipe: Recipe) -> None:
        index = self._index_of(recipe_id)
        if index >= 0:
            self._recipes[index] = recipe

    # =========================================================================
    # LOADING
    # =========================================================================

    def load_recipes(self) -> bool:
        """
        Explicit refresh through the data service.

        Returns:
            True if a list was loaded; on failure the current recipes are kept
        """
        with self._lock:
            self.loading = True
            self.data_source = DataSource.CHECKING

        try:
            recipes = self.service.get_all_recipes()
            origin = self.service.last_origin
            if origin == DataOrigin.REMOTE:
                connected = True
            elif origin == DataOrigin.CACHE:
                connected = self.service.check_connection()
            else:
                connected = False
        except Exception as e:
            logger.error(f"Loading recipes failed: {e}", exc_info=True)
            with self._lock:
                self.error = getattr(e, "message", str(e))
                self.data_source = DataSource.DISCONNECTED
                self.loading = False
            return False

        with self._lock:
            self._recipes = list(recipes)
            self.error = None
            self.data_source = DataSource.CONNECTED if connected else DataSource.DISCONNECTED
            self.last_loaded_at = self._clock()
            self.loading = False

        logger.info(f"Loaded {len(recipes)} recipes ({self.data_source.value}, origin={origin})")
        return True

    def is_stale(self) -> bool:
        if self.last_loaded_at is None:
            return True
        return self._clock() - self.last_loaded_at >= self.staleness_seconds

    def refresh_if_stale(self) -> bool:
        """
        Reload when the last load is older than the staleness threshold.

        Skipped while an optimistic mutation is awaiting confirmation so the
        refresh cannot overwrite it.

        Returns:
            True if a reload happened
        """
        if self._in_flight > 0:
            logger.debug("Refresh skipped: mutation in flight")
            return False
        if self.loading or not self.is_stale():
            return False
        return self.load_recipes()

    def on_visibility_change(self, visible: bool) -> bool:
        """Called when the view is shown again after being hidden."""
        if not visible:
            return False
        return self.refresh_if_stale()

    # =========================================================================
    # OPTIMISTIC MUTATIONS
    # =========================================================================

    def _confirm(
        self,
        result: MutationResult,
        call: Callable[[], Optional[Recipe]],
        commit: Callable[[Optional[Recipe]], None],
        revert: Callable[[], None],
    ) -> None:
        try:
            committed = call()
        except Exception as e:
            message = e.message if isinstance(e, RecipeCatalogError) else str(e)
            with self._lock:
                revert()
                self.error = message
                self._in_flight -= 1
            logger.warning(f"{result.operation} of {result.recipe_id} failed, reverted: {message}")
            result._resolve(MutationPhase.REVERTED, error=message)
        else:
            with self._lock:
                commit(committed)
                self._in_flight -= 1
            result._resolve(MutationPhase.CONFIRMED, committed=committed)

    def _dispatch(
        self,
        result: MutationResult,
        call: Callable[[], Optional[Recipe]],
        commit: Callable[[Optional[Recipe]], None],
        revert: Callable[[], None],
    ) -> MutationResult:
        with self._lock:
            self._in_flight += 1
        if self.background:
            worker = threading.Thread(
                target=self._confirm,
                args=(result, call, commit, revert),
                name=f"recipe-{result.operation}",
                daemon=True,
            )
            worker.start()
        else:
            self._confirm(result, call, commit, revert)
        return result

    @staticmethod
    def _rejected(operation: str, recipe_id: Optional[str], message: str) -> MutationResult:
        result = MutationResult(operation=operation, recipe_id=recipe_id)
        result._resolve(MutationPhase.REVERTED, error=message)
        return result

    def add_recipe(self, data: Mapping[str, Any]) -> MutationResult:
        """Show the new recipe at once under a pending id, then persist it."""
        missing = missing_required_fields(data)
        if missing:
            message = f"Missing required fields: {', '.join(missing)}"
            self.error = message
            return self._rejected("create", None, message)

        pending_id = f"{PENDING_ID_PREFIX}{uuid.uuid4().hex}"
        tentative = Recipe(id=pending_id, title="", category="").with_changes(**coerce_changes(data))
        result = MutationResult(operation="create", recipe_id=pending_id, tentative=tentative)

        with self._lock:
            self._recipes.insert(0, tentative)

        def call() -> Recipe:
            created = self.service.add_recipe(data)
            with self._lock:
                discarded = pending_id in self._discarded
                if not discarded and self._index_of(pending_id) >= 0:
                    self._put(pending_id, created)
                elif not discarded and self._index_of(created.id) < 0:
                    self._recipes.insert(0, created)
            if discarded:
                # deleted while pending; the saved copy has to go too
                try:
                    self.service.delete_recipe(created.id)
                except RecipeCatalogError as e:
                    logger.warning(f"Could not remove {created.id} deleted while pending: {e.message}")
            return created

        def commit(created: Optional[Recipe]) -> None:
            result.recipe_id = created.id
            self._discarded.discard(pending_id)

        def revert() -> None:
            self._discarded.discard(pending_id)
            index = self._index_of(pending_id)
            if index >= 0:
                del self._recipes[index]

        return self._dispatch(result, call, commit, revert)

    def update_recipe(self, recipe_id: str, changes: Mapping[str, Any]) -> MutationResult:
        """Apply ``changes`` in memory at once, then persist them."""
        with self._lock:
            previous = self.find(recipe_id)
            if previous is None:
                message = f"Recipe {recipe_id} not found"
                self.error = message
                return self._rejected("update", recipe_id, message)
            fields = coerce_changes(changes)
            tentative = previous.with_changes(**fields)
            self._put(recipe_id, tentative)

        result = MutationResult(
            operation="update",
            recipe_id=recipe_id,
            previous=previous,
            tentative=tentative,
        )

        def commit(updated: Optional[Recipe]) -> None:
            self._put(recipe_id, updated)

        def revert() -> None:
            current = self.find(recipe_id)
            if current is not None:
                restored = {name: getattr(previous, name) for name in fields}
                self._put(recipe_id, current.with_changes(**restored))

        return self._dispatch(
            result,
            lambda: self.service.update_recipe(recipe_id, changes),
            commit,
            revert,
        )

    def toggle_favorite(self, recipe_id: str, is_favorite: Optional[bool] = None) -> MutationResult:
        """Flip the favorite flag, or set it when ``is_favorite`` is given."""
        if is_favorite is None:
            current = self.find(recipe_id)
            if current is None:
                message = f"Recipe {recipe_id} not found"
                self.error = message
                return self._rejected("update", recipe_id, message)
            is_favorite = not current.is_favorite
        return self.update_recipe(recipe_id, {"is_favorite": is_favorite})

    def delete_recipe(self, recipe_id: str) -> MutationResult:
        """Remove at once; put the recipe back at its old position on failure."""
        with self._lock:
            index = self._index_of(recipe_id)
            if index < 0:
                message = f"Recipe {recipe_id} not found"
                self.error = message
                return self._rejected("delete", recipe_id, message)
            previous = self._recipes.pop(index)
            result = MutationResult(operation="delete", recipe_id=recipe_id, previous=previous)
            if recipe_id.startswith(PENDING_ID_PREFIX):
                # create still in flight; it removes the saved copy once it lands
                self._discarded.add(recipe_id)
                result._resolve(MutationPhase.CONFIRMED)
                return result

        def call() -> None:
            self.service.delete_recipe(recipe_id)
            return None

        def commit(_: Optional[Recipe]) -> None:
            pass

        def revert() -> None:
            if self._index_of(recipe_id) < 0:
                self._recipes.insert(min(index, len(self._recipes)), previous)

        return self._dispatch(result, call, commit, revert)

    # =========================================================================
    # FILTERS AND VIEWS
    # =========================================================================

    def set_filters(self, **changes: Any) -> RecipeFilters:
        self.filters = self.filters.with_changes(**changes)
        return self.filters

    def reset_filters(self) -> None:
        self.filters = RecipeFilters()

    def get_filtered_recipes(self) -> List[Recipe]:
        return apply_filters(self.recipes, self.filters)

    def _saved_view_mode(self) -> ViewMode:
        try:
            return ViewMode(self.service.get_view_mode())
        except (ValueError, TypeError):
            return ViewMode.MEDIUM

    def set_view_mode(self, mode: ViewMode) -> None:
        """Switch layouts; the choice is kept across sessions."""
        if mode is not self.view_mode:
            self.view_mode = mode
            self.service.save_view_mode(mode.value)

    def clear_error(self) -> None:
        self.error = None

    def status(self) -> Dict[str, Any]:
        return {
            "data_source": self.data_source.value,
            "loading": self.loading,
            "error": self.error,
            "recipes": len(self._recipes),
            "pending_mutations": self._in_flight,
        }

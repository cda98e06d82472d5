import streamlit as st

from recipe_core.offline.unified_data_service import RecipeDataService
from recipe_core.state.recipe_store import RecipeStore

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    "recipe_store": None,
    "selected_recipe_id": None,
    "cooking_progress": {},
    "cooking_timers": None,
    "authenticated": False,
    "debug_mode": False,
}


@st.cache_resource
def get_recipe_service() -> RecipeDataService:
    """One data service per server process, shared by every session."""
    return RecipeDataService.from_config()


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v


def get_store() -> RecipeStore:
    """
    The session's RecipeStore, created on first use.

    A rerun means the page is on screen again, so it counts as the view
    becoming visible: the store reloads only when the last load is older
    than the staleness threshold.
    """
    init_state()
    store = st.session_state["recipe_store"]
    if store is None:
        store = RecipeStore(get_recipe_service())
        st.session_state["recipe_store"] = store
        store.load_recipes()
    else:
        store.on_visibility_change(True)
    return store


def refresh_store() -> RecipeStore:
    """Explicit refresh: drop cached responses and reload."""
    store = get_store()
    store.service.sync_with_database()
    store.load_recipes()
    return store


def clear_session_and_cache():
    """Clear session state and every locally stored recipe entry."""
    get_recipe_service().clear_cache()

    # Clear session state (except auth)
    auth_keys = ["authenticated", "email"]
    for key in list(st.session_state.keys()):
        if key not in auth_keys:
            del st.session_state[key]

    # Re-initialize defaults
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v

from __future__ import annotations
import streamlit as st
from recipe_core.logging import setup_logging
from recipe_core.ui.theme import apply_css
from recipe_core.ui.components import header, status_badge, filters_sidebar, recipe_grid
from recipe_core.auth import initialize_navigation, protected_action
from recipe_core.errors import ErrorContext, safe_execute
from recipe_core.state.session import get_store, refresh_store, clear_session_and_cache

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Recipe Catalog",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "_logging_ready" not in st.session_state:
    setup_logging(log_to_file=False)
    st.session_state["_logging_ready"] = True

apply_css()
initialize_navigation()

store = get_store()

# ============================================================================
# HEADER & STATUS
# ============================================================================
header("Recipe Catalog", "Family recipes, searchable and ready for the kitchen")

status_col, refresh_col, add_col = st.columns([4, 1, 1])
with status_col:
    status_badge(store.data_source)
with refresh_col:
    if st.button("🔄 Refresh", use_container_width=True):
        refresh_store()
        st.rerun()
with add_col:
    if st.button("➕ Add recipe", use_container_width=True):
        protected_action(lambda: st.switch_page("pages/02_Add_Recipe.py"))
        st.rerun()

if store.error:
    st.warning(store.error)
    if st.button("Dismiss"):
        store.clear_error()
        st.rerun()

# ============================================================================
# FILTERS & RECIPES
# ============================================================================
filters_sidebar(store)

recipes = store.get_filtered_recipes()
if store.filters.is_active:
    st.caption(f"{len(recipes)} of {len(store.recipes)} recipes")

recipe_grid(store, recipes)

# ============================================================================
# LOCAL DATA
# ============================================================================
with st.sidebar.expander("⚙️ Local data"):
    status = safe_execute(store.service.get_status, default={},
                          error_message="Local data status is unavailable")
    st.json({"store": store.status(), "service": status}, expanded=False)
    if st.button("Clear local copy and cache"):
        with ErrorContext("Clearing local data"):
            clear_session_and_cache()
        st.rerun()

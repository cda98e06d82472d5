from __future__ import annotations
import streamlit as st
from recipe_core.ui.theme import apply_css
from recipe_core.ui.components import header, open_recipe
from recipe_core.ui.recipe_form import recipe_form
from recipe_core.auth import initialize_navigation, require_authentication
from recipe_core.state.session import get_store
from recipe_core.models import missing_required_fields

st.set_page_config(page_title="Add Recipe", page_icon="➕", layout="wide")
apply_css()
initialize_navigation()
require_authentication()

store = get_store()

header("Add Recipe", "Fields marked * are required", icon="➕")
st.page_link("Welcome.py", label="← Back to recipes")

data = recipe_form("add_recipe_form", submit_label="Add recipe")

if data is not None:
    missing = missing_required_fields(data)
    if missing:
        st.error(f"Please fill in: {', '.join(missing)}")
    else:
        with st.spinner("Saving recipe..."):
            result = store.add_recipe(data)
        if result.succeeded:
            if result.committed.is_local:
                st.info("Saved on this device. It will be visible here while the recipe store is unreachable.")
            open_recipe(result.committed.id)
        else:
            st.error(f"Could not save the recipe: {result.error}")

from __future__ import annotations
import streamlit as st
from recipe_core.ui.theme import apply_css
from recipe_core.ui.components import header, open_recipe
from recipe_core.ui.recipe_form import changed_fields, recipe_form
from recipe_core.auth import initialize_navigation, require_authentication
from recipe_core.state.session import get_store
from recipe_core.models import missing_required_fields

st.set_page_config(page_title="Edit Recipe", page_icon="✏️", layout="wide")
apply_css()
initialize_navigation()
require_authentication()

store = get_store()
recipe_id = st.session_state.get("selected_recipe_id")
recipe = store.get_recipe(recipe_id) if recipe_id else None

if recipe is None:
    st.error("Recipe not found.")
    st.page_link("Welcome.py", label="← Back to recipes")
    st.stop()

header(f"Edit: {recipe.title}", "Fields marked * are required", icon="✏️")
st.page_link("pages/01_Recipe.py", label="← Back to recipe")

data = recipe_form(f"edit_recipe_form_{recipe.id}", recipe=recipe, submit_label="Save changes")

if data is not None:
    missing = missing_required_fields(data)
    if missing:
        st.error(f"Please fill in: {', '.join(missing)}")
    else:
        changes = changed_fields(recipe, data)
        if not changes:
            st.info("Nothing changed.")
        else:
            with st.spinner("Saving changes..."):
                result = store.update_recipe(recipe.id, changes)
            if result.succeeded:
                open_recipe(recipe.id)
            else:
                st.error(f"Could not save the changes: {result.error}")

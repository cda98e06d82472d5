from __future__ import annotations
import html
import streamlit as st
from recipe_core.ui.theme import apply_css
from recipe_core.ui.components import header, ingredient_checklist, report_mutation
from recipe_core.auth import initialize_navigation, protected_action
from recipe_core.state.session import get_store
from recipe_core.cooking import MultiTimer, ProgressTracker
from recipe_core.errors import error_boundary
from recipe_core.models import category_label

st.set_page_config(page_title="Recipe", page_icon="🍲", layout="wide")
apply_css()
initialize_navigation()

store = get_store()
recipe_id = st.session_state.get("selected_recipe_id") or st.query_params.get("id")

if not recipe_id:
    st.info("Pick a recipe on the home page first.")
    st.page_link("Welcome.py", label="← Back to recipes")
    st.stop()

recipe = store.get_recipe(recipe_id)
if recipe is None:
    st.error("Recipe not found. It may have been deleted.")
    st.page_link("Welcome.py", label="← Back to recipes")
    st.stop()

st.query_params["id"] = recipe.id

# ============================================================================
# HEADER & ACTIONS
# ============================================================================
header(recipe.title, recipe.description or category_label(recipe.category), icon="🍲")
st.page_link("Welcome.py", label="← Back to recipes")

fav_col, edit_col, delete_col = st.columns(3)
with fav_col:
    label = "❤️ Favorite" if recipe.is_favorite else "🤍 Add to favorites"
    if st.button(label, use_container_width=True):
        report_mutation(store.toggle_favorite(recipe.id), "Favorites updated")
        st.rerun()
with edit_col:
    if st.button("✏️ Edit", use_container_width=True):
        protected_action(lambda: st.switch_page("pages/03_Edit_Recipe.py"))
        st.rerun()
with delete_col:
    if st.button("🗑️ Delete", use_container_width=True):
        def _confirm_delete():
            st.session_state["confirm_delete"] = recipe.id
        protected_action(_confirm_delete)
        st.rerun()

if st.session_state.get("confirm_delete") == recipe.id:
    st.warning(f"Delete '{recipe.title}'? This cannot be undone.")
    yes_col, no_col = st.columns(2)
    if yes_col.button("Yes, delete"):
        st.session_state.pop("confirm_delete", None)
        result = store.delete_recipe(recipe.id)
        if result.succeeded:
            st.session_state["selected_recipe_id"] = None
            st.switch_page("Welcome.py")
        report_mutation(result, "Recipe deleted")
    if no_col.button("Cancel"):
        st.session_state.pop("confirm_delete", None)
        st.rerun()

# ============================================================================
# DETAILS
# ============================================================================
info = [category_label(recipe.category)]
if recipe.prep_time:
    info.append(f"⏱️ {recipe.prep_time}")
if recipe.difficulty:
    info.append(f"Difficulty: {recipe.difficulty.label}")
st.caption(" · ".join(info))


@error_boundary(error_message="Some images could not be displayed")
def _render_images(images):
    st.image(images[0], use_container_width=True)
    if len(images) > 1:
        st.image(images[1:], width=160)


if recipe.images:
    _render_images(recipe.images)

ingredients_col, steps_col = st.columns([1, 2])

with ingredients_col:
    st.markdown("### 🧂 Ingredients")
    ingredient_checklist(recipe)


# ============================================================================
# COOKING MODE
# ============================================================================
def _tracker() -> ProgressTracker:
    trackers = st.session_state.setdefault("cooking_progress", {})
    tracker = trackers.get(recipe.id)
    if tracker is None or tracker.directions.steps != recipe.directions:
        tracker = ProgressTracker.for_recipe(recipe)
        trackers[recipe.id] = tracker
    return tracker


def _save_step(tracker: ProgressTracker):
    if tracker.current_step != recipe.current_step:
        store.update_recipe(recipe.id, {"current_step": tracker.current_step})


def _render_steps(steps, progress, key_prefix, on_change=None):
    for index, step in enumerate(steps):
        step_col, text_col = st.columns([1, 12])
        marker = "✅" if progress.is_completed(index) else str(index + 1)
        if step_col.button(marker, key=f"{key_prefix}_{index}"):
            progress.click(index)
            if on_change:
                on_change()
            st.rerun()
        css = "step-done" if progress.is_completed(index) else (
            "step-current" if index == progress.current else "")
        text_col.markdown(f'<div class="{css}">{html.escape(step)}</div>', unsafe_allow_html=True)


with steps_col:
    tracker = _tracker()
    st.markdown("### 👩‍🍳 Directions")
    st.progress(tracker.directions.percent_complete / 100,
                text=f"{tracker.directions.current}/{tracker.directions.total} steps")
    _render_steps(recipe.directions, tracker.directions, f"step_{recipe.id}",
                  on_change=lambda: _save_step(tracker))

    if tracker.directions.is_finished:
        st.success("All steps done. Enjoy! 🎉")
    if st.button("Restart cooking"):
        tracker.reset()
        _save_step(tracker)
        st.rerun()

    for name, progress in tracker.sections.items():
        st.markdown(f"#### {html.escape(name)}")
        _render_steps(progress.steps, progress, f"sec_{recipe.id}_{name}")


# ============================================================================
# TIMERS
# ============================================================================
if st.session_state.get("cooking_timers") is None:
    st.session_state["cooking_timers"] = MultiTimer()
timers: MultiTimer = st.session_state["cooking_timers"]

with st.sidebar:
    st.markdown("## ⏲️ Timers")
    with st.form("new_timer", clear_on_submit=True):
        name = st.text_input("Name", value=f"Timer {len(timers) + 1}")
        minutes = st.number_input("Minutes", min_value=0, max_value=600, value=10)
        seconds = st.number_input("Seconds", min_value=0, max_value=59, value=0)
        if st.form_submit_button("Start timer") and (minutes or seconds):
            timers.add(name.strip() or f"Timer {len(timers) + 1}", minutes * 60 + seconds)


@st.fragment(run_every=1)
def _timer_panel():
    for timer in timers.timers():
        with st.container(border=True):
            st.markdown(f"**{html.escape(timer.label)}**")
            state = "⏰ Done!" if timer.is_expired else timer.display
            st.markdown(f'<div class="timer-display">{state}</div>', unsafe_allow_html=True)
            c1, c2, c3, c4 = st.columns(4)
            if timer.is_running and not timer.is_expired:
                if c1.button("⏸", key=f"pause_{timer.label}"):
                    timer.pause()
            elif not timer.is_expired:
                if c1.button("▶", key=f"start_{timer.label}"):
                    timer.start()
            if c2.button("+1", key=f"plus_{timer.label}"):
                timer.add_minutes(1)
            if c3.button("-1", key=f"minus_{timer.label}"):
                timer.add_minutes(-1)
            if c4.button("✖", key=f"remove_{timer.label}"):
                timers.remove(timer.label)
                st.rerun()


with st.sidebar:
    _timer_panel()

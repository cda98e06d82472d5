import html
from typing import List

import streamlit as st

from recipe_core.data.normalize import recipes_to_dataframe
from recipe_core.models import CATEGORIES, Difficulty, Recipe, category_label
from recipe_core.state.filters import PresenceFilter, SortOrder
from recipe_core.state.recipe_store import DataSource, MutationResult, RecipeStore, ViewMode
from .theme import (CARD_IMAGE_HEIGHT, DANGER_COLOR, SUCCESS_COLOR,
                    WARNING_COLOR)

RECIPE_PAGE = "pages/01_Recipe.py"

_STATUS_STYLE = {
    DataSource.CONNECTED: (SUCCESS_COLOR, "🟢 Connected"),
    DataSource.DISCONNECTED: (DANGER_COLOR, "🔴 Offline copy"),
    DataSource.CHECKING: (WARNING_COLOR, "🟡 Checking..."),
}

SORT_LABELS = {
    SortOrder.NONE: "Default order",
    SortOrder.NAME_ASC: "Name A-Z",
    SortOrder.NAME_DESC: "Name Z-A",
    SortOrder.DATE_NEWEST: "Newest first",
    SortOrder.DATE_OLDEST: "Oldest first",
}


def header(title: str, subtitle: str, icon: str = "🍳"):
    st.markdown(f"""
        <div class="main-header">
            <div style="display:flex;gap:1.2rem;align-items:center;">
                <div style="font-size:3rem;filter:drop-shadow(0 0 15px rgba(255,255,255,.5));">{icon}</div>
                <div>
                    <h1 style="margin:0; font-size:2.4rem; color:white;">{html.escape(title)}</h1>
                    <p style="margin:.35rem 0 0 0;color:rgba(255,255,255,.85);font-size:1.05rem">{html.escape(subtitle)}</p>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)


def status_badge(source: DataSource):
    color, label = _STATUS_STYLE[source]
    st.markdown(
        f'<span class="status-badge" style="background:{color}">{label}</span>',
        unsafe_allow_html=True,
    )


def report_mutation(result: MutationResult, success_message: str):
    """Toast for a confirmed mutation, warning for a reverted one."""
    if result.succeeded:
        st.toast(success_message)
    elif result.is_resolved and result.error:
        st.warning(f"Change not saved: {result.error}")


def open_recipe(recipe_id: str):
    st.session_state["selected_recipe_id"] = recipe_id
    st.switch_page(RECIPE_PAGE)


def recipe_card(store: RecipeStore, recipe: Recipe, view_mode: ViewMode):
    image = recipe.primary_image
    image_html = ""
    if image:
        height = CARD_IMAGE_HEIGHT.get(view_mode.value, 180)
        image_html = f'<img src="{html.escape(image, quote=True)}" style="height:{height}px" />'

    meta = [category_label(recipe.category)]
    if recipe.prep_time:
        meta.append(f"⏱️ {html.escape(recipe.prep_time)}")
    if recipe.difficulty:
        meta.append(recipe.difficulty.label)

    st.markdown(f"""
        <div class="recipe-card">
            {image_html}
            <h4>{html.escape(recipe.title)}</h4>
            <div class="recipe-meta">{' · '.join(meta)}</div>
        </div>
    """, unsafe_allow_html=True)

    open_col, fav_col = st.columns([3, 1])
    with open_col:
        if st.button("Open", key=f"open_{recipe.id}", use_container_width=True):
            open_recipe(recipe.id)
    with fav_col:
        icon = "❤️" if recipe.is_favorite else "🤍"
        if st.button(icon, key=f"fav_{recipe.id}", help="Toggle favorite"):
            report_mutation(store.toggle_favorite(recipe.id), "Favorites updated")
            st.rerun()


def recipe_grid(store: RecipeStore, recipes: List[Recipe]):
    if not recipes:
        st.info("No recipes match the current filters.")
        return

    if store.view_mode is ViewMode.LIST:
        df = recipes_to_dataframe(recipes)
        df["Category"] = df["Category"].map(category_label)
        st.dataframe(df, use_container_width=True, hide_index=True)
        choice = st.selectbox(
            "Open recipe",
            options=[recipe.id for recipe in recipes],
            format_func=lambda rid: next(r.title for r in recipes if r.id == rid),
            index=None,
        )
        if choice:
            open_recipe(choice)
        return

    columns_per_row = 2 if store.view_mode is ViewMode.LARGE else 3
    for start in range(0, len(recipes), columns_per_row):
        columns = st.columns(columns_per_row)
        for column, recipe in zip(columns, recipes[start:start + columns_per_row]):
            with column:
                recipe_card(store, recipe, store.view_mode)


def ingredient_checklist(recipe: Recipe):
    """Tick-off list; keys follow line position since lines can repeat."""
    for index, line in enumerate(recipe.ingredients):
        st.checkbox(line, key=f"ing_{recipe.id}_{index}")


def filters_sidebar(store: RecipeStore):
    """Sidebar controls bound to the store's filters."""
    filters = store.filters
    with st.sidebar:
        st.markdown("## 🔎 Find recipes")
        query = st.text_input("Search", value=filters.query, placeholder="Title, ingredient or step")

        category_ids = [None] + [category.id for category in CATEGORIES]
        category = st.selectbox(
            "Category",
            options=category_ids,
            index=category_ids.index(filters.category) if filters.category in category_ids else 0,
            format_func=lambda cid: "All categories" if cid is None else category_label(cid),
        )

        favorites_only = st.toggle("Favorites only", value=filters.favorites_only)
        recent_only = st.toggle("Recently added", value=filters.recent_only)

        difficulties = [None] + list(Difficulty)
        difficulty = st.selectbox(
            "Difficulty",
            options=difficulties,
            index=difficulties.index(filters.difficulty),
            format_func=lambda d: "Any" if d is None else d.label,
        )

        images = st.radio(
            "Images",
            options=list(PresenceFilter),
            index=list(PresenceFilter).index(filters.images),
            format_func=lambda p: {"any": "Any", "with": "With images", "without": "Without images"}[p.value],
            horizontal=True,
        )

        ingredient = st.text_input("Ingredient", value=filters.ingredient, placeholder="e.g. flour")
        ingredient_mode = st.radio(
            "Ingredient filter",
            options=[PresenceFilter.WITH, PresenceFilter.WITHOUT],
            index=0 if filters.ingredient_mode is not PresenceFilter.WITHOUT else 1,
            format_func=lambda p: "Contains" if p is PresenceFilter.WITH else "Does not contain",
            horizontal=True,
        )

        sort = st.selectbox(
            "Sort",
            options=list(SortOrder),
            index=list(SortOrder).index(filters.sort),
            format_func=SORT_LABELS.get,
        )

        store.set_filters(
            query=query,
            category=category,
            favorites_only=favorites_only,
            recent_only=recent_only,
            difficulty=difficulty,
            images=images,
            ingredient=ingredient,
            ingredient_mode=ingredient_mode,
            sort=sort,
        )

        if store.filters.is_active and st.button("Reset filters"):
            store.reset_filters()
            st.rerun()

        st.markdown("---")
        view = st.radio(
            "View",
            options=list(ViewMode),
            index=list(ViewMode).index(store.view_mode),
            format_func=lambda v: v.value.capitalize(),
            horizontal=True,
        )
        store.set_view_mode(view)
        st.caption(f"{len(store.recipes)} recipes")

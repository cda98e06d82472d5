import base64
from typing import Any, Dict, List, Mapping, Optional, Tuple

import streamlit as st

from recipe_core.models import CATEGORIES, Difficulty, Recipe, category_label


def split_lines(text: str) -> List[str]:
    """One entry per non-blank line, surrounding whitespace removed."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def parse_sections(text: str) -> Dict[str, List[str]]:
    """
    Additional instructions typed as::

        ## Sauce
        Melt the butter
        Whisk in the flour

    Lines before the first heading are ignored.
    """
    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for line in split_lines(text):
        if line.startswith("##"):
            current = line.lstrip("#").strip()
            if current:
                sections.setdefault(current, [])
            else:
                current = None
        elif current is not None:
            sections[current].append(line)
    return {name: lines for name, lines in sections.items() if lines}


def format_sections(sections: Dict[str, List[str]]) -> str:
    blocks = []
    for name, lines in sections.items():
        blocks.append("\n".join([f"## {name}"] + list(lines)))
    return "\n\n".join(blocks)


def to_data_url(uploaded) -> str:
    encoded = base64.b64encode(uploaded.getvalue()).decode("ascii")
    return f"data:{uploaded.type or 'image/jpeg'};base64,{encoded}"


def merge_images(existing: List[str], link_text: str, uploaded: List[str]) -> List[str]:
    """
    Images after an edit, in display order.

    Uploaded images already on the recipe stay where they are. Linked images
    still listed keep their slots, filled in the order they are listed now.
    New links, then new uploads, go at the end.
    """
    links = list(dict.fromkeys(split_lines(link_text)))
    known = set(existing)
    relisted = iter([link for link in links if link in known])

    images = []
    for image in existing:
        if image.startswith("data:"):
            images.append(image)
        elif image in links:
            images.append(next(relisted, image))
    images += [link for link in links if link not in known]
    return images + list(uploaded)


def category_options(recipe: Optional[Recipe]) -> Tuple[List[str], int]:
    """Category ids for the select box, and the index to preselect."""
    options = [category.id for category in CATEGORIES]
    if recipe is None or not recipe.category:
        return options, 0
    if recipe.category not in options:
        options.append(recipe.category)
    return options, options.index(recipe.category)


def changed_fields(recipe: Recipe, data: Mapping[str, Any]) -> Dict[str, Any]:
    return {name: value for name, value in data.items() if getattr(recipe, name) != value}


def recipe_form(key: str, recipe: Optional[Recipe] = None, submit_label: str = "Save recipe") -> Optional[Dict[str, Any]]:
    """
    Add/edit form.

    Returns:
        The submitted fields, or None if the form was not submitted
    """
    category_ids, category_index = category_options(recipe)
    difficulties = [None] + list(Difficulty)
    if category_index >= len(CATEGORIES):
        st.warning(
            f"Category '{recipe.category}' is not one of the standard categories. "
            "It is kept unless you pick another."
        )

    with st.form(key):
        title = st.text_input("Title *", value=recipe.title if recipe else "")
        description = st.text_area("Description", value=recipe.description if recipe else "", height=80)

        col1, col2, col3 = st.columns(3)
        with col1:
            category = st.selectbox(
                "Category *",
                options=category_ids,
                index=category_index,
                format_func=category_label,
            )
        with col2:
            prep_time = st.text_input("Prep time", value=recipe.prep_time if recipe else "")
        with col3:
            difficulty = st.selectbox(
                "Difficulty",
                options=difficulties,
                index=difficulties.index(recipe.difficulty) if recipe else 0,
                format_func=lambda d: "-" if d is None else d.label,
            )

        ingredients = st.text_area(
            "Ingredients * (one per line)",
            value="\n".join(recipe.ingredients) if recipe else "",
            height=180,
        )
        directions = st.text_area(
            "Directions * (one step per line)",
            value="\n".join(recipe.directions) if recipe else "",
            height=180,
        )
        extra = st.text_area(
            "Additional instructions (start each section with '## Name')",
            value=format_sections(recipe.additional_instructions) if recipe else "",
            height=120,
        )

        image_links = st.text_area(
            "Image links (one per line)",
            value="\n".join(i for i in recipe.images if not i.startswith("data:")) if recipe else "",
            height=80,
        )
        uploads = st.file_uploader(
            "Upload images",
            type=["png", "jpg", "jpeg", "webp"],
            accept_multiple_files=True,
        )

        submitted = st.form_submit_button(submit_label)

    if not submitted:
        return None

    existing = recipe.images if recipe else []
    images = merge_images(existing, image_links, [to_data_url(f) for f in uploads or []])

    return {
        "title": title.strip(),
        "description": description.strip(),
        "category": category,
        "prep_time": prep_time.strip(),
        "difficulty": difficulty,
        "ingredients": split_lines(ingredients),
        "directions": split_lines(directions),
        "additional_instructions": parse_sections(extra),
        "images": images,
    }

# =============================================================================
# recipe_core/data/sample_recipes.py
# Built-in Sample Recipes
# =============================================================================
"""
Sample recipes shown when neither the remote store nor the offline mirror has
anything. They are written into the mirror so they can be edited like any
other recipe.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from recipe_core.models.recipe import Difficulty, Recipe, SAMPLE_ID_PREFIX


SAMPLE_RECIPES: List[Dict[str, Any]] = [
    {
        "title": "Israeli Salad",
        "description": "Finely diced vegetables with lemon and olive oil.",
        "category": "salads",
        "ingredients": [
            "3 cucumbers",
            "4 tomatoes",
            "1 red onion",
            "Juice of 1 lemon",
            "3 tbsp olive oil",
            "Salt and pepper",
        ],
        "directions": [
            "Dice the cucumbers, tomatoes and onion finely.",
            "Mix in a large bowl.",
            "Dress with lemon juice, olive oil, salt and pepper just before serving.",
        ],
        "prep_time": "15 minutes",
        "difficulty": Difficulty.EASY,
    },
    {
        "title": "Lentil Soup",
        "description": "A thick red lentil soup with cumin.",
        "category": "soups",
        "ingredients": [
            "2 cups red lentils",
            "1 onion",
            "2 carrots",
            "2 cloves garlic",
            "1 tsp cumin",
            "8 cups water",
        ],
        "directions": [
            "Chop the onion, carrots and garlic.",
            "Sweat the vegetables in oil for 5 minutes.",
            "Add lentils, cumin and water and simmer for 30 minutes.",
            "Blend until smooth and season to taste.",
        ],
        "additional_instructions": {
            "Serving": ["Top with a squeeze of lemon and chopped parsley."],
        },
        "prep_time": "45 minutes",
        "difficulty": Difficulty.EASY,
    },
    {
        "title": "Shakshuka",
        "description": "Eggs poached in a spiced tomato and pepper sauce.",
        "category": "breakfast",
        "ingredients": [
            "6 eggs",
            "1 can crushed tomatoes",
            "1 red pepper",
            "1 onion",
            "1 tsp paprika",
            "1/2 tsp cumin",
        ],
        "directions": [
            "Fry the onion and pepper until soft.",
            "Add spices and tomatoes and cook for 10 minutes.",
            "Make wells in the sauce and crack in the eggs.",
            "Cover and cook until the whites are set.",
        ],
        "prep_time": "30 minutes",
        "difficulty": Difficulty.MEDIUM,
        "is_favorite": True,
    },
    {
        "title": "Chocolate Babka",
        "description": "Braided yeast cake with a chocolate filling.",
        "category": "cakes",
        "ingredients": [
            "500 g flour",
            "10 g dry yeast",
            "100 g sugar",
            "2 eggs",
            "120 ml milk",
            "120 g butter",
            "200 g dark chocolate",
        ],
        "directions": [
            "Knead the dough and let it rise for 1 hour.",
            "Melt chocolate with butter for the filling.",
            "Roll out the dough, spread the filling and roll up.",
            "Cut lengthwise, braid and place in a loaf tin.",
            "Bake at 180°C for 35 minutes.",
        ],
        "additional_instructions": {
            "Syrup": ["Boil 1/2 cup sugar with 1/3 cup water and brush over the warm cake."],
        },
        "prep_time": "3 hours",
        "difficulty": Difficulty.HARD,
    },
]


def build_sample_recipes(now: Optional[datetime] = None) -> List[Recipe]:
    """Sample recipes with ids ``sample-<n>``, each created one day before the previous."""
    now = now or datetime.now(timezone.utc)
    recipes = []
    for index, sample in enumerate(SAMPLE_RECIPES):
        stamp = now - timedelta(days=index)
        recipes.append(
            Recipe(
                id=f"{SAMPLE_ID_PREFIX}{index}",
                title=sample["title"],
                category=sample["category"],
                ingredients=list(sample["ingredients"]),
                directions=list(sample["directions"]),
                additional_instructions={
                    section: list(lines)
                    for section, lines in sample.get("additional_instructions", {}).items()
                },
                images=list(sample.get("images", [])),
                prep_time=sample.get("prep_time", ""),
                difficulty=sample.get("difficulty"),
                description=sample.get("description", ""),
                is_favorite=sample.get("is_favorite", False),
                current_step=0,
                created_at=stamp,
                updated_at=stamp,
            )
        )
    return recipes

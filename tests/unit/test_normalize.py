# =============================================================================
# tests/unit/test_normalize.py
# Unit Tests for Recipe Row Normalization
# =============================================================================

import json
from datetime import datetime, timezone

import pytest

from recipe_core.data.normalize import (
    Decoded,
    Encoded,
    classify_field,
    coerce_changes,
    decode_list,
    decode_mapping,
    normalize_recipe,
    normalize_recipes,
    recipe_to_row,
    recipes_to_dataframe,
    to_payload,
)
from recipe_core.models import Difficulty, missing_required_fields


class TestFieldVariants:
    """Encoded text vs already-decoded containers"""

    def test_classify(self):
        assert classify_field('["a"]') == Encoded('["a"]')
        assert classify_field(["a"]) == Decoded(["a"])

    def test_decode_list_from_text_and_container(self):
        assert decode_list('["eggs", "milk"]') == ["eggs", "milk"]
        assert decode_list(["eggs", "milk"]) == ["eggs", "milk"]

    @pytest.mark.parametrize("raw", ["{broken", "", None, "42", '{"a": 1}', 7])
    def test_decode_list_degrades_to_empty(self, raw):
        assert decode_list(raw) == []

    def test_decode_mapping(self):
        raw = json.dumps({"Sauce": ["melt butter", "add flour"], "Topping": "sprinkle sugar"})
        assert decode_mapping(raw) == {
            "Sauce": ["melt butter", "add flour"],
            "Topping": ["sprinkle sugar"],
        }

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", None, 3])
    def test_decode_mapping_degrades_to_empty(self, raw):
        assert decode_mapping(raw) == {}


class TestNormalizeRecipe:
    """Rows from the remote store and legacy mirrors"""

    def test_encoded_row(self):
        row = {
            "id": 7,
            "title": "Shakshuka",
            "category": "breakfast",
            "ingredients": '["eggs", "tomatoes"]',
            "directions": '["simmer", "crack eggs"]',
            "additional_instructions": '{"Serving": ["with bread"]}',
            "images": "[]",
            "difficulty": "medium",
            "is_favorite": "true",
            "created_at": "2024-03-01T12:00:00.000Z",
            "updated_at": "2024-03-02T12:00:00.000Z",
        }
        recipe = normalize_recipe(row)

        assert recipe.id == "7"
        assert recipe.ingredients == ["eggs", "tomatoes"]
        assert recipe.directions == ["simmer", "crack eggs"]
        assert recipe.additional_instructions == {"Serving": ["with bread"]}
        assert recipe.images == []
        assert recipe.difficulty is Difficulty.MEDIUM
        assert recipe.is_favorite is True
        assert recipe.created_at == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_camel_case_and_legacy_labels(self):
        row = {
            "id": "a",
            "title": "Cake",
            "category": "cakes",
            "ingredients": ["flour"],
            "directions": ["bake"],
            "additionalInstructions": {"Glaze": ["mix"]},
            "prepTime": "1 hour",
            "isFavorite": True,
            "difficulty": "קשה",
        }
        recipe = normalize_recipe(row)

        assert recipe.additional_instructions == {"Glaze": ["mix"]}
        assert recipe.prep_time == "1 hour"
        assert recipe.is_favorite is True
        assert recipe.difficulty is Difficulty.HARD

    def test_malformed_fields_never_raise(self):
        recipe = normalize_recipe({
            "id": "x",
            "title": None,
            "ingredients": "{{{",
            "directions": 12,
            "created_at": "yesterday-ish",
            "current_step": "two",
        })

        assert recipe.title == ""
        assert recipe.ingredients == []
        assert recipe.directions == []
        assert recipe.created_at is None
        assert recipe.current_step == 0

    def test_normalize_recipes_skips_non_mappings(self):
        recipes = normalize_recipes([{"id": "1", "title": "A"}, "junk", None])
        assert [r.id for r in recipes] == ["1"]

    def test_row_round_trip(self, five_recipes):
        for recipe in five_recipes:
            assert normalize_recipe(json.loads(json.dumps(recipe_to_row(recipe)))) == recipe


class TestPayloads:
    """Request bodies and partial updates"""

    def test_payload_drops_server_fields(self):
        payload = to_payload({
            "id": "1",
            "created_at": datetime.now(),
            "title": "Soup",
            "difficulty": Difficulty.EASY,
            "ingredients": ("water",),
        })
        assert payload == {"title": "Soup", "difficulty": "easy", "ingredients": ["water"]}

    def test_coerce_changes_ignores_unknown_keys(self):
        changes = coerce_changes({
            "is_favorite": 1,
            "ingredients": '["salt"]',
            "difficulty": "hard",
            "id": "hijack",
            "color": "blue",
        })
        assert changes == {
            "is_favorite": True,
            "ingredients": ["salt"],
            "difficulty": Difficulty.HARD,
        }

    def test_dataframe_columns(self, five_recipes):
        df = recipes_to_dataframe(five_recipes)
        assert len(df) == 5
        assert list(df["Title"])[:2] == ["Tomato Soup", "Greek Salad"]
        assert df["Favorite"].sum() == 2


class TestRequiredFields:
    """Required-field check accepts the same list forms as updates"""

    def test_json_text_lists_count_as_present(self):
        data = {
            "title": "Soup",
            "category": "soups",
            "ingredients": '["water"]',
            "directions": json.dumps(["boil"]),
        }

        assert missing_required_fields(data) == []
        assert coerce_changes(data)["ingredients"] == ["water"]

    @pytest.mark.parametrize("value", [None, [], ["  "], "[]", '["", " "]', "water"])
    def test_empty_or_undecodable_lines_are_missing(self, value):
        data = {"title": "Soup", "category": "soups", "ingredients": value, "directions": ["boil"]}

        assert missing_required_fields(data) == ["ingredients"]

    def test_blank_text_fields(self):
        assert missing_required_fields({"title": " ", "ingredients": ["a"], "directions": ["b"]}) == [
            "title",
            "category",
        ]

# =============================================================================
# tests/integration/test_recipe_flow.py
# End-to-end Tests: Store -> Data Service -> Connector / Local Storage
# =============================================================================

import json

import pytest

from recipe_core.offline.offline_mirror import MIRROR_KEY, OfflineMirror
from recipe_core.state.filters import SortOrder
from recipe_core.state.recipe_store import DataSource, MutationPhase, RecipeStore


@pytest.fixture
def store(service, fake_clock):
    return RecipeStore(service, clock=fake_clock)


def _mirror_ids(storage):
    raw = storage.get_item(MIRROR_KEY)
    return [row["id"] for row in json.loads(raw)] if raw else []


class TestOnlineFlow:
    """Remote store reachable"""

    def test_create_then_read_back(self, store, service, remote, soup_data):
        store.load_recipes()
        assert store.data_source is DataSource.CONNECTED

        result = store.add_recipe(soup_data)

        assert result.succeeded
        created = result.committed
        assert created.id
        assert not created.is_local
        assert created.created_at == created.updated_at
        assert created.is_favorite is False

        fetched = service.get_recipe(created.id)
        assert fetched.title == "Soup"
        assert fetched.ingredients == ["water"]
        assert fetched.directions == ["boil"]

    def test_delete_twice(self, store, service, remote, storage, soup_data):
        created = store.add_recipe(soup_data).committed
        store.load_recipes()
        assert created.id in _mirror_ids(storage)

        service.delete_recipe(created.id)
        service.delete_recipe(created.id)

        assert created.id not in remote.rows
        assert created.id not in _mirror_ids(storage)
        assert service.get_recipe(created.id) is None

    def test_favorite_round_trip(self, store, remote, soup_data):
        created = store.add_recipe(soup_data).committed

        assert store.toggle_favorite(created.id).succeeded
        assert remote.rows[created.id]["is_favorite"] is True

        store.load_recipes()
        store.set_filters(favorites_only=True, sort=SortOrder.NAME_ASC)
        assert [r.id for r in store.get_filtered_recipes()] == [created.id]

    def test_cooking_step_persisted(self, store, service, remote):
        row = remote.seed(title="Cake", category="cakes", ingredients=["flour"], directions=["mix", "bake"])
        store.load_recipes()

        assert store.update_recipe(row["id"], {"current_step": 1}).succeeded
        assert remote.rows[row["id"]]["current_step"] == 1


class TestOfflineFlow:
    """Remote store unreachable"""

    def test_offline_create_listed_once(self, store, service, remote, storage, soup_data):
        remote.online = False
        store.load_recipes()
        assert store.data_source is DataSource.DISCONNECTED
        samples = len(store.recipes)

        result = store.add_recipe(soup_data)
        assert result.succeeded
        assert result.committed.is_local

        store.load_recipes()
        listed = [r for r in store.recipes if r.id == result.committed.id]
        assert len(listed) == 1
        assert len(store.recipes) == samples + 1

    def test_offline_edit_and_delete(self, store, remote, storage, soup_data):
        remote.online = False
        created = store.add_recipe(soup_data).committed

        updated = store.update_recipe(created.id, {"title": "Cold Soup"})
        assert updated.succeeded
        assert OfflineMirror(storage).find(created.id).title == "Cold Soup"

        assert store.delete_recipe(created.id).succeeded
        assert created.id not in _mirror_ids(storage)

    def test_validation_gate(self, store, remote, storage, soup_data):
        soup_data["ingredients"] = ["  "]

        result = store.add_recipe(soup_data)

        assert result.phase is MutationPhase.REVERTED
        assert remote.calls == []
        assert storage.keys() == []

    def test_legacy_keys_migrated_on_first_read(self, service, remote, storage):
        storage.set_item("hebrew-recipes", json.dumps([
            {"id": "old-1", "title": "Grandma's Soup", "category": "soups",
             "ingredients": "[\"water\"]", "directions": "[\"boil\"]"},
        ]))
        remote.online = False

        recipes = service.get_all_recipes()

        assert [r.id for r in recipes] == ["old-1"]
        assert recipes[0].ingredients == ["water"]
        assert _mirror_ids(storage) == ["old-1"]

    def test_reconnect_replaces_offline_copy(self, store, service, remote, storage):
        remote.online = False
        store.load_recipes()
        assert store.data_source is DataSource.DISCONNECTED

        remote.online = True
        row = remote.seed(title="Server Soup", category="soups", ingredients=["water"], directions=["boil"])
        service.sync_with_database()
        store.load_recipes()

        assert store.data_source is DataSource.CONNECTED
        assert [r.id for r in store.recipes] == [row["id"]]
        assert _mirror_ids(storage) == [row["id"]]

# =============================================================================
# tests/unit/test_cache_manager.py
# Unit Tests for CacheManager and LocalStorage
# =============================================================================

import json

import pytest

from recipe_core.errors import LocalStorageError
from recipe_core.offline.cache_manager import CACHE_KEYS, CacheManager, LEGACY_KEYS
from recipe_core.offline.offline_mirror import MIRROR_KEY


class TestLocalStorage:
    """Test the SQLite key/value backend"""

    def test_set_get_remove(self, storage):
        storage.set_item("greeting", "shalom")
        assert storage.get_item("greeting") == "shalom"

        storage.remove_item("greeting")
        assert storage.get_item("greeting") is None

    def test_survives_reopen(self, tmp_path):
        """Values persist across instances pointing at the same file"""
        from recipe_core.offline.local_storage import LocalStorage

        first = LocalStorage(tmp_path / "db.sqlite")
        first.set_item("k", "v")
        first.close()

        second = LocalStorage(tmp_path / "db.sqlite")
        assert second.get_item("k") == "v"
        second.close()

    def test_keys_and_clear(self, storage):
        storage.set_item("b", "2")
        storage.set_item("a", "1")
        assert storage.keys() == ["a", "b"]

        storage.clear()
        assert storage.keys() == []


class TestCacheTTL:
    """Test time-to-live behaviour"""

    @pytest.mark.parametrize("ttl", [1, 60, 300])
    def test_value_returned_before_expiry(self, cache, fake_clock, ttl):
        cache.set("key", {"n": 1}, ttl_seconds=ttl)
        fake_clock.advance(ttl - 0.5)

        assert cache.get("key") == {"n": 1}

    @pytest.mark.parametrize("ttl", [1, 60, 300])
    def test_value_absent_and_removed_after_expiry(self, cache, storage, fake_clock, ttl):
        cache.set("key", [1, 2, 3], ttl_seconds=ttl)
        fake_clock.advance(ttl + 0.5)

        assert cache.get("key") is None
        assert storage.get_item("cache_key") is None

    def test_default_ttl_is_five_minutes(self, cache, fake_clock):
        cache.set("key", "value")
        fake_clock.advance(299)
        assert cache.get("key") == "value"

        fake_clock.advance(2)
        assert cache.get("key") is None

    def test_entry_shape(self, cache, storage, fake_clock):
        cache.set("key", "value", ttl_seconds=10)
        entry = json.loads(storage.get_item("cache_key"))

        assert entry == {"value": "value", "stored_at": fake_clock.now, "ttl": 10}

    def test_set_overwrites(self, cache):
        cache.set("key", "old")
        cache.set("key", "new")
        assert cache.get("key") == "new"


class TestCacheRobustness:
    """Corrupt entries and storage failures never raise"""

    def test_corrupt_entry_is_removed(self, cache, storage):
        storage.set_item("cache_broken", "{not json")

        assert cache.get("broken") is None
        assert storage.get_item("cache_broken") is None

    def test_entry_missing_fields_is_removed(self, cache, storage):
        storage.set_item("cache_partial", json.dumps({"value": 1}))

        assert cache.get("partial") is None
        assert storage.get_item("cache_partial") is None

    def test_write_failure_is_logged_not_raised(self, storage, fake_clock, monkeypatch, caplog):
        cache = CacheManager(storage, clock=fake_clock)

        def fail(key, value):
            raise LocalStorageError("quota exceeded", key=key)

        monkeypatch.setattr(storage, "set_item", fail)
        cache.set("key", "value")

        assert "Error caching 'key'" in caplog.text


class TestCacheClear:
    """Test invalidation and full reset"""

    def test_invalidate_all_keeps_mirror(self, cache, storage):
        cache.set(CACHE_KEYS.ALL_RECIPES, [])
        cache.set(CACHE_KEYS.recipe("1"), {})
        storage.set_item(MIRROR_KEY, "[]")

        assert cache.invalidate_all() == 2
        assert storage.get_item(MIRROR_KEY) == "[]"

    def test_clear_removes_legacy_and_mirror_keys(self, cache, storage):
        cache.set(CACHE_KEYS.FAVORITE_RECIPES, [])
        storage.set_item(MIRROR_KEY, "[]")
        for key in LEGACY_KEYS:
            storage.set_item(key, "x")
        storage.set_item("unrelated", "keep")

        cache.clear()

        assert storage.keys() == ["unrelated"]

    def test_delete_single_entry(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")

        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_stats_count_live_entries(self, cache, fake_clock):
        cache.set("short", 1, ttl_seconds=5)
        cache.set("long", 2, ttl_seconds=500)
        fake_clock.advance(10)

        stats = cache.get_stats()
        assert stats["total_items"] == 1
        assert stats["expired_items"] == 1
        assert stats["keys"] == ["long"]

    def test_category_key_format(self):
        assert CACHE_KEYS.by_category("soups") == "recipes_category_soups"
        assert CACHE_KEYS.recipe("42") == "recipe_42"

# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import json
import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from recipe_core.api.base_connector import APIConfig
from recipe_core.api.recipe_connector import RecipeAPIConnector
from recipe_core.models import Difficulty, Recipe
from recipe_core.offline.cache_manager import CacheManager
from recipe_core.offline.connection_manager import ConnectionManager
from recipe_core.offline.local_storage import LocalStorage
from recipe_core.offline.offline_mirror import OfflineMirror
from recipe_core.offline.unified_data_service import RecipeDataService


BASE_URL = "http://recipes.test/api"
EPOCH = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# FAKE REMOTE STORE
# =============================================================================

def make_response(status: int, body: Any = None, url: str = BASE_URL) -> requests.Response:
    """Build a real requests.Response with a JSON body"""
    response = requests.Response()
    response.status_code = status
    response.reason = {200: "OK", 201: "Created", 400: "Bad Request", 404: "Not Found",
                       500: "Internal Server Error", 503: "Service Unavailable"}.get(status, "")
    response.url = url
    response.headers["Content-Type"] = "application/json"
    response._content = b"" if body is None else json.dumps(body).encode()
    return response


class FakeRecipeServer:
    """
    In-memory stand-in for the recipe store, used as the connector's session.

    Container fields are kept as JSON text the way the relational store
    returns them, so every response goes through normalization.
    """

    def __init__(self):
        self.headers = CaseInsensitiveDict()
        self.online = True
        self.healthy = True
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str]] = []
        self._failures: Dict[Tuple[str, str], List[int]] = {}
        self._ids = itertools.count(1)
        self._ticks = itertools.count(0)

    # ---- test controls -------------------------------------------------------

    def fail(self, method: str, path: str, times: int = 1, status: int = 500) -> None:
        """Answer the next ``times`` matching requests with ``status``"""
        self._failures.setdefault((method, path), []).extend([status] * times)

    def seed(self, **fields) -> Dict[str, Any]:
        row = self._store_row(fields)
        return row

    def calls_to(self, method: str, prefix: str = "") -> int:
        return sum(1 for m, p in self.calls if m == method and p.startswith(prefix))

    # ---- internals -----------------------------------------------------------

    def _timestamp(self) -> str:
        return (EPOCH + timedelta(seconds=next(self._ticks))).isoformat()

    def _store_row(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        stamp = self._timestamp()
        row_id = str(next(self._ids))
        row = {
            "id": row_id,
            "title": fields.get("title", ""),
            "description": fields.get("description", ""),
            "category": fields.get("category", ""),
            "ingredients": json.dumps(fields.get("ingredients", [])),
            "directions": json.dumps(fields.get("directions", [])),
            "additional_instructions": json.dumps(fields.get("additional_instructions", {})),
            "images": json.dumps(fields.get("images", [])),
            "prep_time": fields.get("prep_time", ""),
            "difficulty": fields.get("difficulty"),
            "is_favorite": bool(fields.get("is_favorite", False)),
            "current_step": fields.get("current_step", 0),
            "created_at": stamp,
            "updated_at": stamp,
        }
        self.rows[row_id] = row
        return row

    def request(self, method: str, url: str, json: Optional[Dict[str, Any]] = None, timeout: Any = None):
        path = url[len(BASE_URL):].strip("/")
        self.calls.append((method, path))

        if not self.online:
            raise requests.exceptions.ConnectionError("Connection refused")

        pending = self._failures.get((method, path))
        if pending:
            return make_response(pending.pop(0), {"error": "Database unavailable"}, url)

        if path == "test-connection":
            return make_response(200, {"connected": self.healthy, "timestamp": self._timestamp()}, url)

        if path == "recipes":
            if method == "GET":
                return make_response(200, list(self.rows.values()), url)
            if method == "POST":
                missing = [f for f in ("title", "category", "ingredients", "directions") if not json.get(f)]
                if missing:
                    return make_response(400, {"error": "Missing required fields"}, url)
                return make_response(201, self._store_row(json), url)

        if path.startswith("recipes/"):
            recipe_id = path.split("/", 1)[1]
            row = self.rows.get(recipe_id)
            if row is None:
                return make_response(404, {"error": "Recipe not found"}, url)
            if method == "GET":
                return make_response(200, row, url)
            if method == "PUT":
                for key, value in json.items():
                    if key in ("ingredients", "directions", "images", "additional_instructions"):
                        value = _dumps(value)
                    row[key] = value
                row["updated_at"] = self._timestamp()
                return make_response(200, row, url)
            if method == "DELETE":
                del self.rows[recipe_id]
                return make_response(200, {"message": "Recipe deleted successfully"}, url)

        return make_response(404, {"error": "Unknown route"}, url)


def _dumps(value: Any) -> str:
    return json.dumps(value)


class FakeClock:
    """Controllable time source (seconds)"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def storage(tmp_path):
    """SQLite-backed local storage in a temp directory"""
    local = LocalStorage(tmp_path / "recipes.db")
    yield local
    local.close()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def remote():
    return FakeRecipeServer()


@pytest.fixture
def sleeps():
    """Delays requested by the retry helper"""
    return []


@pytest.fixture
def api_config():
    return APIConfig(api_name="recipes", base_url=BASE_URL, retry_delay=1.0)


@pytest.fixture
def connector(api_config, remote, sleeps):
    return RecipeAPIConnector(api_config, session=remote, sleep=sleeps.append)


@pytest.fixture
def cache(storage, fake_clock):
    return CacheManager(storage, clock=fake_clock)


@pytest.fixture
def mirror(storage):
    return OfflineMirror(storage)


@pytest.fixture
def service(connector, cache, mirror):
    return RecipeDataService(
        connector=connector,
        connection_manager=ConnectionManager(connector),
        cache=cache,
        mirror=mirror,
    )


@pytest.fixture
def soup_data():
    return {
        "title": "Soup",
        "category": "soups",
        "ingredients": ["water"],
        "directions": ["boil"],
    }


def make_recipe(recipe_id: str, title: str, category: str = "soups", **fields) -> Recipe:
    """Recipe with sensible defaults for tests"""
    defaults = {
        "ingredients": ["salt"],
        "directions": ["cook"],
        "created_at": EPOCH,
        "updated_at": EPOCH,
    }
    defaults.update(fields)
    return Recipe(id=recipe_id, title=title, category=category, **defaults)


@pytest.fixture
def five_recipes():
    """5 recipes across 3 categories, 2 of them favorites"""
    return [
        make_recipe("1", "Tomato Soup", "soups", is_favorite=True,
                    ingredients=["tomatoes", "flour"], created_at=EPOCH),
        make_recipe("2", "Greek Salad", "salads", difficulty=Difficulty.EASY,
                    images=["https://img.test/salad.jpg"], created_at=EPOCH + timedelta(days=1)),
        make_recipe("3", "Lentil Soup", "soups", ingredients=["lentils", "cumin"],
                    directions=["Rinse the lentils", "Simmer"], created_at=EPOCH + timedelta(days=2)),
        make_recipe("4", "Apple Cake", "cakes", is_favorite=True, difficulty=Difficulty.MEDIUM,
                    ingredients=["apples", "flour", "sugar"], created_at=EPOCH + timedelta(days=3)),
        make_recipe("5", "Onion Soup", "soups", is_favorite=False,
                    created_at=EPOCH + timedelta(days=4)),
    ]

# =============================================================================
# tests/unit/test_recipe_connector.py
# Unit Tests for the Recipe Store HTTP Connector
# =============================================================================

from unittest.mock import MagicMock

import pytest
import requests

from recipe_core.api.base_connector import retry_api_call
from recipe_core.api.recipe_connector import RecipeAPIConnector
from recipe_core.errors import NotFoundError, TransientRemoteError
from tests.conftest import BASE_URL, make_response


class TestRetry:
    """Exponential backoff around remote calls"""

    def test_succeeds_after_transient_failures(self):
        sleeps = []
        outcomes = [TransientRemoteError("boom"), TransientRemoteError("boom"), "ok"]

        def call():
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        assert retry_api_call(call, max_attempts=3, initial_delay=1.0, sleep=sleeps.append) == "ok"
        assert sleeps == [1.0, 2.0]

    def test_raises_last_error_when_exhausted(self):
        sleeps = []
        call = MagicMock(side_effect=TransientRemoteError("still down"))

        with pytest.raises(TransientRemoteError, match="still down"):
            retry_api_call(call, max_attempts=3, initial_delay=1.0, sleep=sleeps.append)

        assert call.call_count == 3
        assert sleeps == [1.0, 2.0]

    def test_other_errors_are_not_retried(self):
        sleeps = []
        call = MagicMock(side_effect=NotFoundError("gone"))

        with pytest.raises(NotFoundError):
            retry_api_call(call, max_attempts=3, sleep=sleeps.append)

        assert call.call_count == 1
        assert sleeps == []


class TestHealthProbe:
    """check_health never raises and is never retried"""

    def test_healthy(self, connector):
        assert connector.check_health() is True

    def test_reports_disconnected(self, connector, remote):
        remote.healthy = False
        assert connector.check_health() is False

    def test_offline(self, connector, remote, sleeps):
        remote.online = False

        assert connector.check_health() is False
        assert remote.calls_to("GET", "test-connection") == 1
        assert sleeps == []

    def test_server_error(self, connector, remote):
        remote.fail("GET", "test-connection", status=500)
        assert connector.check_health() is False

    @pytest.mark.parametrize("body,expected", [
        ({"success": True}, True),
        ({"connected": False, "success": True}, False),
        ({"status": "ok"}, False),
        (["connected"], False),
    ])
    def test_body_variants(self, api_config, body, expected):
        session = MagicMock()
        session.headers = {}
        session.request.return_value = make_response(200, body)
        connector = RecipeAPIConnector(api_config, session=session)

        assert connector.check_health() is expected

    def test_non_json_body(self, api_config):
        response = make_response(200)
        response._content = b"<html>maintenance</html>"
        session = MagicMock()
        session.headers = {}
        session.request.return_value = response
        connector = RecipeAPIConnector(api_config, session=session)

        assert connector.check_health() is False

    def test_probe_uses_short_timeout(self, api_config):
        session = MagicMock()
        session.headers = {}
        session.request.return_value = make_response(200, {"connected": True})
        RecipeAPIConnector(api_config, session=session).check_health()

        assert session.request.call_args.kwargs["timeout"] == 5.0


class TestReads:
    """List and by-id fetches"""

    def test_fetch_recipes_retries_then_succeeds(self, connector, remote, sleeps):
        remote.seed(title="Soup", category="soups", ingredients=["water"], directions=["boil"])
        remote.fail("GET", "recipes", times=2)

        rows = connector.fetch_recipes()

        assert [row["title"] for row in rows] == ["Soup"]
        assert remote.calls_to("GET", "recipes") == 3
        assert sleeps == [1.0, 2.0]

    def test_fetch_recipes_gives_up(self, connector, remote, sleeps):
        remote.fail("GET", "recipes", times=3, status=503)

        with pytest.raises(TransientRemoteError) as exc_info:
            connector.fetch_recipes()

        assert exc_info.value.status_code == 503
        assert "Database unavailable" in exc_info.value.message
        assert sleeps == [1.0, 2.0]

    def test_fetch_recipe_not_found_is_none(self, connector, remote, sleeps):
        assert connector.fetch_recipe("999") is None
        assert remote.calls_to("GET", "recipes/999") == 1
        assert sleeps == []

    def test_fetch_recipe(self, connector, remote):
        row = remote.seed(title="Cake", category="cakes")
        assert connector.fetch_recipe(row["id"])["title"] == "Cake"

    def test_recipe_id_is_url_quoted(self, api_config):
        session = MagicMock()
        session.headers = {}
        session.request.return_value = make_response(404, {"error": "Recipe not found"})
        RecipeAPIConnector(api_config, session=session).fetch_recipe("a/b")

        assert session.request.call_args.kwargs["url"] == f"{BASE_URL}/recipes/a%2Fb"


class TestWrites:
    """Create, update and delete"""

    def test_create_sends_json_body(self, connector, remote, soup_data):
        row = connector.create_recipe(soup_data)

        assert row["title"] == "Soup"
        assert row["created_at"] == row["updated_at"]
        assert row["id"] in remote.rows

    def test_update_not_found_is_not_retried(self, connector, remote, sleeps):
        with pytest.raises(NotFoundError) as exc_info:
            connector.update_recipe("999", {"title": "x"})

        assert exc_info.value.recipe_id == "999"
        assert remote.calls_to("PUT") == 1
        assert sleeps == []

    def test_update_returns_row(self, connector, remote):
        row = remote.seed(title="Cake", category="cakes")
        updated = connector.update_recipe(row["id"], {"is_favorite": True})

        assert updated["is_favorite"] is True
        assert updated["updated_at"] > updated["created_at"]

    def test_delete(self, connector, remote):
        row = remote.seed(title="Cake", category="cakes")

        assert connector.delete_recipe(row["id"]) is True
        assert connector.delete_recipe(row["id"]) is False
        assert remote.rows == {}

    def test_network_error_becomes_transient(self, connector, remote, sleeps):
        remote.online = False

        with pytest.raises(TransientRemoteError):
            connector.delete_recipe("1")

        assert remote.calls_to("DELETE") == 3
        assert sleeps == [1.0, 2.0]


class TestSessionSetup:
    """Headers applied to the underlying session"""

    def test_bearer_token(self, api_config):
        api_config.api_key = "secret-token"
        session = requests.Session()
        RecipeAPIConnector(api_config, session=session)

        assert session.headers["Authorization"] == "Bearer secret-token"
        assert session.headers["Content-Type"] == "application/json"

    def test_no_token_no_header(self, connector, remote):
        assert "Authorization" not in remote.headers

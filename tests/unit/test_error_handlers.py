# =============================================================================
# tests/unit/test_error_handlers.py
# Unit Tests for Error Taxonomy and Handlers
# =============================================================================

import logging
from unittest.mock import MagicMock

import pytest

from recipe_core.errors import (
    ErrorContext,
    NotFoundError,
    PersistenceError,
    TransientRemoteError,
    ValidationError,
    error_boundary,
    handle_error,
    safe_execute,
)
from recipe_core.errors import handlers
from recipe_core.logging import LogContext, resolve_level


@pytest.fixture
def mock_st(monkeypatch):
    st = MagicMock()
    st.session_state = {}
    monkeypatch.setattr(handlers, "st", st)
    return st


class TestExceptions:
    """Codes, details and recoverability"""

    def test_validation_error(self):
        error = ValidationError("Missing required fields: title", missing_fields=["title"])

        assert error.code == "RECIPE_001"
        assert error.details == {"missing_fields": ["title"]}
        assert error.recoverable
        assert str(error) == "[RECIPE_001] Missing required fields: title | Details: {'missing_fields': ['title']}"

    def test_persistence_error_is_blocking(self):
        error = PersistenceError("disk full", operation="create")

        assert not error.recoverable
        assert error.to_dict()["details"] == {"operation": "create"}

    def test_not_found_keeps_id(self):
        assert NotFoundError("gone", recipe_id="7").recipe_id == "7"


class TestHandlers:
    """User feedback for caught errors"""

    def test_not_found_shown_as_info(self, mock_st):
        handle_error(NotFoundError("Recipe 7 not found"))

        mock_st.info.assert_called_once_with("Recipe 7 not found")
        mock_st.error.assert_not_called()

    def test_validation_lists_missing_fields(self, mock_st):
        handle_error(ValidationError("Missing required fields", missing_fields=["title", "directions"]))

        mock_st.warning.assert_called_once_with("Please fill in: title, directions")

    def test_persistence_error_shown_as_banner(self, mock_st):
        handle_error(PersistenceError("disk full"))

        mock_st.error.assert_called_once()
        assert "disk full" in mock_st.error.call_args.args[0]

    def test_safe_execute_returns_default(self, mock_st):
        def boom():
            raise RuntimeError("nope")

        assert safe_execute(boom, default={}, error_message="Status unavailable") == {}
        mock_st.warning.assert_called_once_with("Status unavailable")

    def test_safe_execute_passes_arguments(self, mock_st):
        assert safe_execute(lambda a, b=0: a + b, 1, b=2) == 3

    def test_error_context_suppresses_recoverable(self, mock_st):
        with ErrorContext("Clearing local data"):
            raise ValidationError("bad")

        mock_st.warning.assert_called_once_with("bad")

    def test_error_context_can_propagate(self, mock_st):
        with pytest.raises(KeyError):
            with ErrorContext("Loading", recoverable=False):
                raise KeyError("x")

    def test_error_boundary(self, mock_st):
        @error_boundary(default_return="fallback", error_message="Images failed")
        def render():
            raise ValueError("bad url")

        assert render() == "fallback"
        mock_st.error.assert_called_once_with("Images failed")


class TestLogContext:
    """Timing and failure logging"""

    def test_success_logged(self, caplog):
        logger = logging.getLogger("recipe_core.test")
        with caplog.at_level(logging.INFO, logger="recipe_core.test"):
            with LogContext(logger, "Fetching recipes") as ctx:
                pass

        assert ctx.elapsed_ms is not None
        assert "Fetching recipes... done in" in caplog.text

    def test_recoverable_failure_is_warning(self, caplog):
        logger = logging.getLogger("recipe_core.test")
        with caplog.at_level(logging.INFO, logger="recipe_core.test"):
            with pytest.raises(TransientRemoteError):
                with LogContext(logger, "Creating recipe"):
                    raise TransientRemoteError("timeout")

        assert [r.levelno for r in caplog.records][-1] == logging.WARNING

    def test_other_failure_is_error(self, caplog):
        logger = logging.getLogger("recipe_core.test")
        with caplog.at_level(logging.INFO, logger="recipe_core.test"):
            with pytest.raises(PersistenceError):
                with LogContext(logger, "Saving locally"):
                    raise PersistenceError("disk full")

        assert caplog.records[-1].levelno == logging.ERROR
        assert caplog.records[-1].exc_info is not None

    @pytest.mark.parametrize("level,expected", [
        ("debug", logging.DEBUG),
        (logging.WARNING, logging.WARNING),
        ("nonsense", logging.INFO),
    ])
    def test_resolve_level(self, level, expected):
        assert resolve_level(level) == expected

    def test_resolve_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("RECIPE_LOG_LEVEL", "error")
        assert resolve_level() == logging.ERROR

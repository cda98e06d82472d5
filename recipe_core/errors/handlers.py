# =============================================================================
# recipe_core/errors/handlers.py
# Turning Caught Errors into Page Feedback
# =============================================================================

from __future__ import annotations
import functools
import logging
from typing import Any, Callable, Optional, TypeVar

import streamlit as st

from recipe_core.logging import get_logger
from .exceptions import NotFoundError, PersistenceError, RecipeCatalogError, ValidationError

logger = get_logger(__name__)

T = TypeVar("T")


def describe_error(error: Exception) -> str:
    """Short text for the page; catalog errors carry their own message."""
    if isinstance(error, ValidationError) and error.missing_fields:
        return f"Please fill in: {', '.join(error.missing_fields)}"
    if isinstance(error, RecipeCatalogError):
        return error.message
    return str(error) or error.__class__.__name__


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Log ``error`` and show it on the page.

    PersistenceError (nothing was saved anywhere) gets the blocking error
    banner. A missing recipe is shown as information and anything else as a
    warning, since the catalog keeps working from whatever data it has.
    """
    message = user_message or describe_error(error)

    if isinstance(error, RecipeCatalogError):
        logger.log(
            logging.ERROR if not error.recoverable else logging.WARNING,
            f"[{error.code}] {error.message}",
            extra={"details": error.to_dict()},
        )
    else:
        logger.error(f"Unexpected {error.__class__.__name__}: {error}", exc_info=error)

    if not show_user_message:
        return

    if isinstance(error, PersistenceError):
        st.error(f"Could not save your changes: {message}")
    elif isinstance(error, NotFoundError):
        st.info(message)
    else:
        st.warning(message)

    if st.session_state.get("debug_mode", False) and isinstance(error, RecipeCatalogError):
        with st.expander("Error details", expanded=False):
            st.json(error.to_dict())


def safe_execute(
    func: Callable[..., T],
    *args,
    default: Optional[T] = None,
    error_message: Optional[str] = None,
    **kwargs,
) -> Optional[T]:
    """
    Call ``func``; on failure show feedback and return ``default``.

    Usage:
        status = safe_execute(service.get_status, default={},
                              error_message="Local data status is unavailable")
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        handle_error(e, user_message=error_message)
        return default


class ErrorContext:
    """
    Wrap a user-triggered operation on a page.

    Failures are shown through :func:`handle_error` and swallowed so the rest
    of the page still renders, unless ``recoverable`` is False.

    Usage:
        with ErrorContext("Clearing local data"):
            clear_session_and_cache()
    """

    def __init__(self, operation: str, recoverable: bool = True):
        self.operation = operation
        self.recoverable = recoverable
        self.failed = False

    def __enter__(self) -> ErrorContext:
        logger.debug(f"{self.operation}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            logger.info(f"{self.operation}: done")
            return False
        if not issubclass(exc_type, Exception):
            return False

        self.failed = True
        user_message = None if isinstance(exc_val, RecipeCatalogError) else f"{self.operation} failed"
        handle_error(exc_val, user_message=user_message)
        return self.recoverable


def error_boundary(
    default_return: Any = None,
    error_message: Optional[str] = None,
):
    """
    Decorator for page sections that may fail without taking the page down.

    Usage:
        @error_boundary(error_message="Some images could not be displayed")
        def _render_images(images):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Section {func.__name__} failed: {e}", exc_info=True)
                if error_message:
                    st.error(error_message)
                return default_return

        return wrapper

    return decorator

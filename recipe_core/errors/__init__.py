# =============================================================================
# recipe_core/errors/__init__.py
# Centralized Error Handling for the Recipe Catalog
# =============================================================================

from .exceptions import (
    RecipeCatalogError,
    ValidationError,
    NotFoundError,
    TransientRemoteError,
    PersistenceError,
    LocalStorageError,
    ConfigurationError,
)

from .handlers import (
    describe_error,
    handle_error,
    safe_execute,
    ErrorContext,
    error_boundary,
)

__all__ = [
    # Exceptions
    "RecipeCatalogError",
    "ValidationError",
    "NotFoundError",
    "TransientRemoteError",
    "PersistenceError",
    "LocalStorageError",
    "ConfigurationError",
    # Handlers
    "describe_error",
    "handle_error",
    "safe_execute",
    "ErrorContext",
    "error_boundary",
]

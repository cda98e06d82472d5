# =============================================================================
# recipe_core/errors/exceptions.py
# Custom Exception Hierarchy for the Recipe Catalog
# =============================================================================

from typing import Optional, Dict, Any, List


class RecipeCatalogError(Exception):
    """
    Base exception for all recipe catalog errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "RECIPE_001")
        details: Additional context as a dictionary
        recoverable: Whether the UI can carry on after the error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "RC_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# RECIPE EXCEPTIONS
# =============================================================================

class ValidationError(RecipeCatalogError):
    """Raised when a recipe is missing required fields. Never retried."""

    def __init__(
        self,
        message: str,
        missing_fields: Optional[List[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_fields:
            details["missing_fields"] = list(missing_fields)

        super().__init__(
            message=message,
            code="RECIPE_001",
            details=details,
            **kwargs,
        )
        self.missing_fields = list(missing_fields or [])


class NotFoundError(RecipeCatalogError):
    """Raised when a recipe is absent from every reachable store"""

    def __init__(
        self,
        message: str,
        recipe_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if recipe_id is not None:
            details["recipe_id"] = recipe_id

        super().__init__(
            message=message,
            code="RECIPE_404",
            details=details,
            **kwargs,
        )
        self.recipe_id = recipe_id


# =============================================================================
# REMOTE STORE EXCEPTIONS
# =============================================================================

class TransientRemoteError(RecipeCatalogError):
    """Raised on network errors, timeouts and non-success HTTP statuses"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status_code is not None:
            details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint

        super().__init__(
            message=message,
            code="REMOTE_001",
            details=details,
            **kwargs,
        )
        self.status_code = status_code


# =============================================================================
# LOCAL STORAGE EXCEPTIONS
# =============================================================================

class PersistenceError(RecipeCatalogError):
    """Raised when both the remote store and the local fallback failed"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        kwargs.setdefault("recoverable", False)

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


class LocalStorageError(RecipeCatalogError):
    """Raised when the on-device key/value storage cannot be read or written"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            code="STORE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(RecipeCatalogError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            **kwargs,
        )

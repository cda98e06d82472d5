"""
Write gate for the recipe catalog.
A single shared credential protects adding, editing and deleting recipes.

⚠️ Not multi-user authentication: there are no accounts or roles, only one
household credential checked against a bcrypt hash.
"""

from .authentication import (
    verify_credentials,
    authenticate,
    check_authentication,
    logout_user,
    require_authentication,
    protected_action,
    request_authentication,
    hash_password,
)
from .navigation import (
    add_logout_button,
    render_auth_prompt,
    initialize_navigation,
)

__all__ = [
    "verify_credentials",
    "authenticate",
    "check_authentication",
    "logout_user",
    "require_authentication",
    "protected_action",
    "request_authentication",
    "hash_password",
    "add_logout_button",
    "render_auth_prompt",
    "initialize_navigation",
]

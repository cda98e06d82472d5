"""
Write gate for the recipe catalog.

⚠️ SINGLE SHARED CREDENTIAL - NOT MULTI-USER AUTHENTICATION
Browsing is open. Adding, editing and deleting recipes requires the one
household credential configured in st.secrets["auth"] or the
RECIPE_ADMIN_EMAIL / RECIPE_ADMIN_PASSWORD_HASH environment variables.
The password is stored as a bcrypt hash.
"""

import logging
from typing import Any, Callable, Dict, Optional

import bcrypt
import streamlit as st

from recipe_core.api.config_manager import load_auth_config

logger = logging.getLogger(__name__)


# ==================== CREDENTIAL CHECK ====================

def verify_credentials(
    email: str,
    password: str,
    credentials: Optional[Dict[str, Optional[str]]] = None,
) -> bool:
    """
    Check an email/password pair against the configured credential.

    The email comparison ignores case and surrounding whitespace.

    Returns:
        bool: True only if both match; False when no credential is configured
    """
    credentials = credentials if credentials is not None else load_auth_config()
    expected_email = credentials.get("email")
    password_hash = credentials.get("password_hash")

    if not expected_email or not password_hash:
        logger.warning("Write gate has no credential configured; all sign-ins refused")
        return False

    if (email or "").strip().lower() != expected_email.strip().lower():
        return False

    try:
        return bcrypt.checkpw((password or "").encode(), password_hash.encode())
    except ValueError as e:
        logger.error(f"Configured password hash is not a valid bcrypt hash: {e}")
        return False


# ==================== SESSION HELPERS ====================

def authenticate(email: str, password: str) -> bool:
    """
    Sign in for this session.

    Returns:
        bool: True if the credential matched
    """
    if verify_credentials(email, password):
        st.session_state.authenticated = True
        st.session_state.email = email.strip().lower()
        st.session_state.show_auth_form = False
        logger.info("Write access granted")
        return True

    logger.info("Sign-in refused")
    return False


def check_authentication() -> bool:
    """
    Check if the current session may change recipes.

    Returns:
        bool: True if authenticated, False otherwise
    """
    return st.session_state.get("authenticated", False)


def logout_user():
    """
    Sign out and clear authentication session state.
    """
    keys_to_clear = [
        "authenticated",
        "email",
        "show_auth_form",
    ]

    for key in keys_to_clear:
        if key in st.session_state:
            del st.session_state[key]


def initialize_session_state():
    """
    Initialize session state variables for authentication.
    Call this at the start of your main app.
    """
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False

    if "show_auth_form" not in st.session_state:
        st.session_state.show_auth_form = False


def request_authentication():
    """Ask the page to show the sign-in form on the next render."""
    st.session_state.show_auth_form = True


# ==================== PAGE PROTECTION ====================

def render_login_form() -> bool:
    """
    Sign-in form for the write gate.

    Returns:
        bool: True if the user signed in with this submission
    """
    with st.form("recipe_auth_form", clear_on_submit=False):
        st.markdown("#### 🔒 Sign in to change recipes")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        if authenticate(email, password):
            st.success("Signed in")
            return True
        st.error("Incorrect email or password")
    return False


def require_authentication():
    """
    Protect a page that changes recipes.

    Renders the sign-in form and stops the script until the session is
    authenticated.
    """
    initialize_session_state()
    if check_authentication():
        return

    if render_login_form():
        st.rerun()
    st.stop()


def protected_action(action: Callable[[], Any]) -> Optional[Any]:
    """
    Run ``action`` when authenticated, otherwise request sign-in.

    Returns:
        The action's result, or None if it was not run
    """
    if check_authentication():
        return action()

    request_authentication()
    return None


# ==================== PASSWORD HASHING UTILITY ====================
# Use this to generate the hash for secrets.toml

def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: Hashed password

    Example:
        >>> hash_password("mypassword123")
        '$2b$12$...'
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


if __name__ == "__main__":
    import getpass

    print("Password Hash Generator")
    print("=" * 50)
    print("\nPaste the hash into secrets.toml as [auth] password_hash")
    print(f"\n{hash_password(getpass.getpass('Password: '))}")

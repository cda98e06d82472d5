"""
API Configuration Manager
Resolves remote store, local storage and write-gate settings from
Streamlit secrets, environment variables or defaults
"""
from typing import Any, Dict, Optional
from pathlib import Path
import logging
import os

import streamlit as st

from recipe_core.errors import ConfigurationError
from .base_connector import APIConfig

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_DB_PATH = Path("local_data") / "recipes.db"

_TIMEOUT_FIELDS = ("probe_timeout", "read_timeout", "write_timeout", "retry_delay")


def _read_secrets(section: str, subsection: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a section from Streamlit secrets

    Expected secrets.toml format:
    [api.recipes]
    base_url = "https://recipes.example.com/api"
    api_key = "your_api_key"
    read_timeout = 10

    [auth]
    email = "cook@example.com"
    password_hash = "$2b$12$..."
    """
    try:
        if hasattr(st, "secrets") and section in st.secrets:
            values = st.secrets[section]
            if subsection is not None:
                if subsection not in values:
                    return {}
                values = values[subsection]
            return dict(values)
    except Exception as e:
        # st.secrets raises when no secrets.toml exists at all
        logger.debug(f"No Streamlit secrets for [{section}]: {e}")
    return {}


def load_api_config() -> APIConfig:
    """
    Remote store configuration.

    Precedence: st.secrets["api"]["recipes"], then RECIPE_API_URL /
    RECIPE_API_KEY, then the local development default.
    """
    secrets = _read_secrets("api", "recipes")

    base_url = secrets.get("base_url") or os.getenv("RECIPE_API_URL") or DEFAULT_BASE_URL
    api_key = secrets.get("api_key") or os.getenv("RECIPE_API_KEY") or None

    config = APIConfig(api_name="recipes", base_url=base_url, api_key=api_key)

    for name in _TIMEOUT_FIELDS:
        if name in secrets:
            try:
                setattr(config, name, float(secrets[name]))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid value for api.recipes.{name}: {secrets[name]!r}",
                    config_key=f"api.recipes.{name}",
                ) from e
    if "max_retries" in secrets:
        try:
            config.max_retries = max(1, int(secrets["max_retries"]))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for api.recipes.max_retries: {secrets['max_retries']!r}",
                config_key="api.recipes.max_retries",
            ) from e

    logger.info(f"Recipe store configured at {config.base_url}")
    return config


def load_storage_path() -> Path:
    """Location of the local SQLite file (RECIPE_LOCAL_DB or local_data/recipes.db)"""
    configured = os.getenv("RECIPE_LOCAL_DB")
    return Path(configured) if configured else DEFAULT_DB_PATH


def load_auth_config() -> Dict[str, Optional[str]]:
    """
    Shared write-gate credential.

    Returns:
        {"email": ..., "password_hash": ...}; values are None when unset
    """
    secrets = _read_secrets("auth")
    return {
        "email": secrets.get("email") or os.getenv("RECIPE_ADMIN_EMAIL"),
        "password_hash": secrets.get("password_hash") or os.getenv("RECIPE_ADMIN_PASSWORD_HASH"),
    }

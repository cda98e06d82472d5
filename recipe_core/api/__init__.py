"""
Remote Recipe Store Access
Connector for the recipe store HTTP API, retry helper and configuration
"""

from .base_connector import BaseAPIConnector, APIConfig, retry_api_call
from .recipe_connector import RecipeAPIConnector
from .config_manager import load_api_config, load_storage_path, load_auth_config

__all__ = [
    # Base classes
    "BaseAPIConnector",
    "APIConfig",
    "retry_api_call",

    # Recipe store
    "RecipeAPIConnector",

    # Configuration
    "load_api_config",
    "load_storage_path",
    "load_auth_config",
]

# =============================================================================
# recipe_core/offline/__init__.py
# Offline-First Data Layer for the Recipe Catalog
# =============================================================================
"""
Offline-First Data Layer

The catalog keeps working whether or not the remote recipe store answers.

Architecture:
------------
┌─────────────────────────────────────────────────────────────────┐
│                      OFFLINE-FIRST DATA LAYER                    │
├─────────────────────────────────────────────────────────────────┤
│                                                                  │
│   ┌──────────────────────────────────────────────────────────┐  │
│   │                 RecipeDataService                         │  │
│   │         (Single API - the store uses this only)           │  │
│   └──────────────────────────────────────────────────────────┘  │
│          │                  │                     │              │
│          ▼                  ▼                     ▼              │
│   ┌──────────────┐  ┌──────────────┐     ┌──────────────────┐   │
│   │ ConnectionMgr│  │ CacheManager │     │  OfflineMirror   │   │
│   │   (probe)    │  │  (TTL cache) │     │ (no expiry copy) │   │
│   └──────────────┘  └──────────────┘     └──────────────────┘   │
│          │                  │                     │              │
│          ▼                  └──────────┬──────────┘              │
│ ┌──────────────────┐                   ▼                        │
│ │RecipeAPIConnector│           ┌──────────────┐                 │
│ │ (retry/backoff)  │           │ LocalStorage │                 │
│ └──────────────────┘           │   (SQLite)   │                 │
│                                └──────────────┘                 │
└─────────────────────────────────────────────────────────────────┘

Usage:
------
from recipe_core.offline import get_data_service

service = get_data_service()
recipes = service.get_all_recipes()
"""

from recipe_core.offline.local_storage import LocalStorage

from recipe_core.offline.connection_manager import (
    ConnectionManager,
    ConnectionState,
    ConnectionStatus,
)

from recipe_core.offline.offline_mirror import (
    OfflineMirror,
    MIRROR_KEY,
    LEGACY_MIRROR_KEYS,
)

from recipe_core.offline.cache_manager import (
    CacheManager,
    CACHE_KEYS,
    DEFAULT_TTL_SECONDS,
)

from recipe_core.offline.unified_data_service import (
    RecipeDataService,
    DataOrigin,
    generate_local_id,
    get_data_service,
)

__all__ = [
    # Local Storage
    "LocalStorage",
    # Connection Management
    "ConnectionManager",
    "ConnectionState",
    "ConnectionStatus",
    # Offline Copy
    "OfflineMirror",
    "MIRROR_KEY",
    "LEGACY_MIRROR_KEYS",
    # Cache Management
    "CacheManager",
    "CACHE_KEYS",
    "DEFAULT_TTL_SECONDS",
    # Data Service (Main API)
    "RecipeDataService",
    "DataOrigin",
    "generate_local_id",
    "get_data_service",
]

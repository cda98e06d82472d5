# =============================================================================
# recipe_core/offline/local_storage.py
# Durable Key/Value Storage on the Local Machine
# =============================================================================
"""
LocalStorage - string key to string value persistence backed by SQLite.

Everything the offline layer keeps on this machine (TTL cache entries, the
offline recipe mirror, migration markers) goes through here.

Features:
- Single ``local_storage`` table, created on first use
- Thread-local connections (background confirmations run on their own thread)
- Write failures raised as LocalStorageError
"""

from __future__ import annotations
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union
import logging

from recipe_core.errors import LocalStorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Key/value store in a SQLite file scoped to one machine/profile."""

    DEFAULT_DB_PATH = Path("local_data") / "recipes.db"

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS local_storage (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize local storage.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self._ensure_directory()
        self._local = threading.local()
        self._init_lock = threading.Lock()
        self._initialized = False

    def _ensure_directory(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=5.0,
            )
        conn = self._local.connection
        if not self._initialized:
            with self._init_lock:
                if not self._initialized:
                    conn.execute(self.SCHEMA)
                    conn.commit()
                    self._initialized = True
                    logger.info(f"Local storage initialized at: {self.db_path}")
        return conn

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    # =========================================================================
    # KEY/VALUE OPERATIONS
    # =========================================================================

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for ``key``, or None when absent."""
        try:
            row = self._get_connection().execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Local storage read failed for '{key}': {e}")
            return None
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO local_storage (key, value, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    (key, value, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            raise LocalStorageError(f"Could not write '{key}': {e}", key=key) from e

    def remove_item(self, key: str) -> None:
        try:
            with self.transaction() as conn:
                conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise LocalStorageError(f"Could not remove '{key}': {e}", key=key) from e

    def keys(self) -> List[str]:
        try:
            rows = self._get_connection().execute(
                "SELECT key FROM local_storage ORDER BY key"
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning(f"Local storage key listing failed: {e}")
            return []
        return [row[0] for row in rows]

    def clear(self) -> None:
        """Remove every key."""
        try:
            with self.transaction() as conn:
                conn.execute("DELETE FROM local_storage")
        except sqlite3.Error as e:
            raise LocalStorageError(f"Could not clear local storage: {e}") from e

    def close(self) -> None:
        """Close this thread's database connection."""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None

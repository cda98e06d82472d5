# =============================================================================
# recipe_core/offline/connection_manager.py
# Remote Availability Probe and Connection Status
# =============================================================================
"""
ConnectionManager - answers "is the recipe store reachable right now?".

Features:
- One health request per probe with a short timeout; never raises
- Display state (status, last check, last online, failure count)
- Event callbacks for status changes

The data service probes before every remote-dependent operation. The stored
state is for display only and is never consulted to route a request.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
import logging

from recipe_core.api.base_connector import BaseAPIConnector

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"           # Recipe store answered the health check
    OFFLINE = "offline"         # Health check failed
    CHECKING = "checking"       # Currently checking status
    UNKNOWN = "unknown"         # Initial state


@dataclass
class ConnectionState:
    """Current connection state with metadata."""
    status: ConnectionStatus = ConnectionStatus.UNKNOWN
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0


class ConnectionManager:
    """
    Availability probe for the remote recipe store.

    Usage:
        manager = ConnectionManager(connector)
        if manager.probe():
            # Talk to the remote store
        else:
            # Serve from the offline copy
    """

    def __init__(self, connector: BaseAPIConnector):
        self.connector = connector
        self._state = ConnectionState()
        self._callbacks: List[Callable[[ConnectionState], None]] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> ConnectionState:
        """Get current connection state."""
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        """Get current status."""
        return self._state.status

    @property
    def is_online(self) -> bool:
        """Status of the most recent probe."""
        return self._state.status == ConnectionStatus.ONLINE

    def probe(self) -> bool:
        """
        Check whether the recipe store is reachable and healthy.

        Returns:
            True if the health endpoint confirmed connectivity
        """
        with self._lock:
            old_status = self._state.status
            self._state.status = ConnectionStatus.CHECKING
            self._state.last_check = datetime.now()

        try:
            reachable = bool(self.connector.check_health())
        except Exception as e:
            logger.warning(f"Health check raised unexpectedly: {e}")
            reachable = False

        with self._lock:
            if reachable:
                self._state.status = ConnectionStatus.ONLINE
                self._state.last_online = datetime.now()
                self._state.consecutive_failures = 0
            else:
                self._state.status = ConnectionStatus.OFFLINE
                self._state.consecutive_failures += 1
            new_status = self._state.status

        if old_status != new_status:
            logger.info(f"Connection status changed: {old_status.value} -> {new_status.value}")
            self._notify_callbacks()

        return reachable

    def check_connection(self) -> ConnectionState:
        """Probe and return the updated state."""
        self.probe()
        return self._state

    def register_callback(self, callback: Callable[[ConnectionState], None]) -> None:
        """
        Register a callback for connection status changes.

        Args:
            callback: Function called with ConnectionState when status changes
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[ConnectionState], None]) -> None:
        """Remove a registered callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in list(self._callbacks):
            try:
                callback(self._state)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}")

    def get_status_display(self) -> dict:
        """Get status information for UI display."""
        return {
            "status": self._state.status.value,
            "is_online": self.is_online,
            "base_url": self.connector.config.base_url,
            "last_check": self._state.last_check.isoformat() if self._state.last_check else None,
            "last_online": self._state.last_online.isoformat() if self._state.last_online else None,
            "failures": self._state.consecutive_failures,
        }

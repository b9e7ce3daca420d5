"""Single-slot registry for the browser's hot reload connection."""

import threading
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class ConnectionRegistry:
    """Holds at most one upgraded connection eligible for reload pushes.

    The watcher thread and the upgrade thread both touch the slot, so every
    read, replace and write happens under one lock. The lock is never held
    while acquiring anything else.

    A connection is any object with ``sendall`` and ``close``, normally the
    raw socket left behind by a WebSocket upgrade.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._lock = threading.Lock()
        self._connection: Optional[Any] = None

    @property
    def has_connection(self) -> bool:
        """Whether a connection is currently held."""
        with self._lock:
            return self._connection is not None

    def store(self, connection: Any) -> None:
        """Install a connection, replacing and closing any previous one.

        Args:
            connection: The upgraded transport
        """
        with self._lock:
            previous = self._connection
            self._connection = connection
            if previous is not None and previous is not connection:
                self._close_quietly(previous)
        logger.info("Hot reload connection stored", replaced=previous is not None)

    def notify(self, payload: bytes) -> bool:
        """Write ``payload`` to the held connection, if there is one.

        Failures are logged and dropped. A broken connection stays in the
        slot until a fresh upgrade replaces it.

        Args:
            payload: Bytes to send

        Returns:
            True if the payload was written
        """
        with self._lock:
            if self._connection is None:
                return False
            try:
                self._connection.sendall(payload)
            except Exception as e:
                logger.debug("Reload notification dropped", error=str(e))
                return False
        return True

    def close(self) -> None:
        """Close and forget the held connection."""
        with self._lock:
            connection, self._connection = self._connection, None
            if connection is not None:
                self._close_quietly(connection)

    @staticmethod
    def _close_quietly(connection: Any) -> None:
        try:
            connection.close()
        except Exception as e:
            logger.debug("Error closing connection", error=str(e))

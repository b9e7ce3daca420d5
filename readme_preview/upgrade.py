"""Hot reload WebSocket upgrade, run on its own short-lived thread."""

import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import Callable, Optional

import structlog

from .handshake import handshake_headers
from .registry import ConnectionRegistry

logger = structlog.get_logger(__name__)

NONCE_HEADER = "Sec-WebSocket-Key"


def perform_upgrade(
    handler: BaseHTTPRequestHandler,
    registry: ConnectionRegistry,
    detach: Callable[[object], None],
) -> bool:
    """Answer a WebSocket upgrade request and keep the socket for reloads.

    Without a nonce header the client gets a 400 and the registry is left
    alone. Otherwise the 101 response is written, the socket is detached
    from the server's close path and stored in the registry. Nothing is
    ever read back from the upgraded socket.

    Args:
        handler: The request handler that received the upgrade request
        registry: Registry that will own the upgraded connection
        detach: Callback telling the server not to close the socket

    Returns:
        True if the connection was upgraded
    """
    nonce = (handler.headers.get(NONCE_HEADER) or "").strip()
    # the request/response cycle ends here either way
    handler.close_connection = True

    if not nonce:
        logger.warning("Upgrade request without nonce", client=handler.client_address[0])
        handler.send_response(HTTPStatus.BAD_REQUEST)
        handler.send_header("Content-Length", "0")
        handler.send_header("Connection", "close")
        handler.end_headers()
        return False

    handler.send_response(HTTPStatus.SWITCHING_PROTOCOLS)
    for name, value in handshake_headers(nonce):
        handler.send_header(name, value)
    handler.end_headers()
    handler.wfile.flush()

    detach(handler.connection)
    registry.store(handler.connection)
    logger.info("Hot reload connection upgraded", client=handler.client_address[0])
    return True


class UpgradeWorker(threading.Thread):
    """Runs one upgrade attempt off the accept loop's thread.

    The caller joins the worker before accepting the next request, so at
    most one upgrade is in flight at any time.
    """

    def __init__(
        self,
        handler: BaseHTTPRequestHandler,
        registry: ConnectionRegistry,
        detach: Callable[[object], None],
    ) -> None:
        super().__init__(name="hot-reload-upgrade", daemon=True)
        self.handler = handler
        self.registry = registry
        self.detach = detach
        self.upgraded = False
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.upgraded = perform_upgrade(self.handler, self.registry, self.detach)
        except Exception as e:
            self.error = e
            logger.error("Upgrade failed", error=str(e))

    def upgrade(self) -> bool:
        """Start the worker, wait for it and report whether it upgraded."""
        self.start()
        self.join()
        return self.upgraded

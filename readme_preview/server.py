"""The preview HTTP server and its accept loop."""

import socket
from http.server import HTTPServer
from typing import Any, Optional, Set, Tuple

import structlog

from . import config
from .context import PreviewContext
from .display import StatusDisplay
from .errors import ServerBindError
from .router import PreviewRequestHandler

logger = structlog.get_logger(__name__)


class PreviewServer(HTTPServer):
    """Single-threaded HTTP server for one readme preview.

    Requests are handled one at a time on the thread calling
    ``serve_forever``. A socket taken over by a WebSocket upgrade is
    detached so the server does not close it after the request.
    """

    def __init__(
        self,
        context: PreviewContext,
        host: str = config.DEFAULT_HOST,
        port: int = config.DEFAULT_PORT,
        public_host: Optional[str] = None,
        display: Optional[StatusDisplay] = None,
    ) -> None:
        """Bind the server.

        Args:
            context: Shared preview state
            host: Address to bind
            port: Port to bind, 0 for an OS-assigned port
            public_host: Hostname the browser uses to reach the server,
                defaults to the bound address
            display: Optional status display

        Raises:
            ServerBindError: If the address cannot be bound
        """
        self.context = context
        self.display = display
        self._detached: Set[Any] = set()

        try:
            super().__init__((host, port), PreviewRequestHandler)
        except (OSError, OverflowError) as e:
            logger.error("Failed to bind preview server", host=host, port=port, error=str(e))
            raise ServerBindError(host, port, str(e)) from e

        bound_host, bound_port = self.server_address[:2]
        self._endpoint: Tuple[str, int] = (bound_host, bound_port)
        context.endpoint = self._endpoint

        self.ws_host = public_host or bound_host
        self.ws_port = config.websocket_port(self.ws_host, bound_port)
        logger.info(
            "Preview server bound",
            host=bound_host,
            port=bound_port,
            ws_host=self.ws_host,
            ws_port=self.ws_port,
        )

    def server_bind(self) -> None:
        # skip HTTPServer's reverse DNS lookup of the bound address
        super(HTTPServer, self).server_bind()
        host, port = self.server_address[:2]
        self.server_name = host
        self.server_port = port

    @property
    def endpoint(self) -> Tuple[str, int]:
        """Bound (host, port)."""
        return self._endpoint

    @property
    def url(self) -> str:
        host, port = self._endpoint
        return f"http://{host}:{port}"

    def detach(self, request: socket.socket) -> None:
        """Leave ``request`` open when its handler finishes."""
        self._detached.add(request)

    def shutdown_request(self, request: Any) -> None:
        if request in self._detached:
            self._detached.discard(request)
            return
        super().shutdown_request(request)

    def handle_error(self, request: Any, client_address: Tuple[str, int]) -> None:
        logger.error("Request handling failed", client=client_address[0], exc_info=True)

"""HTTP request dispatch for the preview server."""

from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import Any
from urllib.parse import urlsplit

import structlog

from . import assets, config
from .renderer import text_to_html
from .upgrade import UpgradeWorker

logger = structlog.get_logger(__name__)


class PreviewRequestHandler(BaseHTTPRequestHandler):
    """Routes one request: upgrade, asset, readme page or redirect.

    ``self.server`` is a :class:`readme_preview.server.PreviewServer`.
    Each plain response closes its connection so the single-threaded
    accept loop never waits on an idle keep-alive socket.
    """

    protocol_version = "HTTP/1.1"
    server_version = f"{config.APP_NAME}/{config.APP_VERSION}"
    # browsers open speculative sockets that never send a request
    timeout = 5

    def do_GET(self) -> None:
        path = urlsplit(self.path).path

        if path == config.UPGRADE_PATH:
            self._handle_upgrade()
        elif path == "/":
            self._send_readme()
        elif assets.is_asset(path):
            self._send_asset(path)
        else:
            self._redirect_home()

    def _handle_upgrade(self) -> None:
        server: Any = self.server
        worker = UpgradeWorker(self, server.context.registry, server.detach)
        if worker.upgrade() and server.display is not None:
            server.display.standing_by()

    def _send_readme(self) -> None:
        server: Any = self.server
        readme = server.context.readme
        try:
            text = readme.read_text(encoding="utf-8")
            body = assets.render_page(
                text_to_html(text, config.README_DOCUMENT_NAME),
                readme.name,
                server.ws_host,
                server.ws_port,
            )
        except Exception as e:
            logger.error("Failed to render readme", path=str(readme), error=str(e))
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to render readme")
            return
        self._send_body(body, "text/html; charset=utf-8")

    def _send_asset(self, path: str) -> None:
        try:
            asset = assets.load_asset(path)
        except OSError as e:
            logger.error("Failed to load asset", path=path, error=str(e))
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to load asset")
            return
        self._send_body(asset.body, asset.content_type)

    def _redirect_home(self) -> None:
        self.send_response(HTTPStatus.PERMANENT_REDIRECT)
        self.send_header("Location", "/")
        self.send_header("Cache-Control", "no-cache")
        self.send_header("Content-Length", "0")
        self.send_header("Connection", "close")
        self.end_headers()

    def _send_body(self, body: bytes, content_type: str) -> None:
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("HTTP request", client=self.client_address[0], message=format % args)

"""Wires the watcher, server and shutdown handling into one preview run."""

import webbrowser
from pathlib import Path
from typing import Optional

import structlog

from . import config
from .context import PreviewContext
from .display import StatusDisplay
from .errors import ReadmeNotFoundError
from .server import PreviewServer
from .shutdown import ShutdownController
from .watcher import ReadmeWatcher

logger = structlog.get_logger(__name__)


def check_readme(path: Path) -> Path:
    """Make sure the readme exists and can be read.

    Args:
        path: Readme path given by the operator

    Returns:
        The absolute path of the readme

    Raises:
        ReadmeNotFoundError: If the file is missing or unreadable
    """
    readme = Path(path).expanduser().resolve()
    try:
        readme.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Readme not readable", path=str(readme), error=str(e))
        raise ReadmeNotFoundError(readme) from e
    return readme


class PreviewApp:
    """Serves one readme with hot reload until interrupted."""

    def __init__(
        self,
        settings: config.PreviewSettings,
        display: Optional[StatusDisplay] = None,
    ) -> None:
        """Initialize the app.

        Args:
            settings: Resolved run options
            display: Status display, defaults to one on stdout
        """
        self.settings = settings
        self.display = display if display is not None else StatusDisplay()
        self.context: Optional[PreviewContext] = None
        self.watcher: Optional[ReadmeWatcher] = None
        self.server: Optional[PreviewServer] = None

    def start(self) -> PreviewServer:
        """Validate the readme, start watching it and bind the server.

        Raises:
            ReadmeNotFoundError: If the readme cannot be read
            ServerBindError: If the server cannot bind
        """
        self.display.banner()
        readme = check_readme(self.settings.readme)
        self.display.found_readme(str(readme))

        self.context = PreviewContext(readme=readme)
        self.watcher = ReadmeWatcher(readme, self.context.registry, self.display)
        self.watcher.start()
        self.display.awaiting_updates()

        try:
            self.server = PreviewServer(
                self.context,
                host=config.DEFAULT_HOST,
                port=self.settings.port,
                public_host=self.settings.host,
                display=self.display,
            )
        except Exception:
            self.watcher.stop()
            raise

        self.display.serving(self.server.url)
        if self.settings.open_browser:
            webbrowser.open(self.server.url)
        self.display.browser(self.settings.open_browser)
        return self.server

    def run(self) -> None:
        """Start the preview and serve until interrupted."""
        server = self.start()
        controller = ShutdownController(self.context, server, self.display)
        controller.install()
        logger.info("Serving readme preview", url=server.url)
        try:
            if self.context.is_running:
                server.serve_forever()
        finally:
            controller.restore()
            self.stop()

    def stop(self) -> None:
        """Release the watcher, the hot reload connection and the socket."""
        if self.watcher is not None:
            self.watcher.stop()
        if self.context is not None:
            self.context.registry.close()
        if self.server is not None:
            self.server.server_close()
        self.display.restore()
        logger.info("Preview stopped")

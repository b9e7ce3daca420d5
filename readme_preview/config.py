"""Configuration settings for readme-preview."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

# Application settings
APP_NAME: Final[str] = "readme-preview"
APP_VERSION: Final[str] = "0.1.0"

# Environment and logging
ENVIRONMENT: Final[str] = os.getenv("README_PREVIEW_ENV", "production")
LOG_LEVEL: Final[int] = int(os.getenv("README_PREVIEW_LOG_LEVEL", "20"))

# Server settings
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8080  # 0 lets the OS pick a free port
TUNNEL_WS_PORT: Final[int] = 80

# Hot reload protocol
UPGRADE_PATH: Final[str] = "/ws"
SUBPROTOCOL: Final[str] = "hot_reload"
WEBSOCKET_MAGIC: Final[str] = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"
# FIN + text opcode, unmasked, 5 byte payload "Hello"
RELOAD_FRAME: Final[bytes] = bytes([0x81, 0x05, 0x48, 0x65, 0x6C, 0x6C, 0x6F])
RECONNECT_DELAY_MS: Final[int] = 5000

# Paths
ASSETS_DIR: Final[Path] = Path(__file__).parent / "static"
PAGE_TEMPLATE: Final[Path] = ASSETS_DIR / "index.html"

# Markdown rendering
MARKDOWN_EXTENSIONS: Final[list[str]] = [
    "tables",
    "fenced_code",
    "codehilite",
    "toc",
    "sane_lists",
]
# Pygments style for the generated code highlighting stylesheet
HIGHLIGHT_STYLE: Final[str] = "default"
HIGHLIGHT_CSS_CLASS: Final[str] = "codehilite"
# logical document name; the watched file renders as Markdown whatever its suffix
README_DOCUMENT_NAME: Final[str] = "README.md"


@dataclass
class PreviewSettings:
    """Resolved options for a preview run.

    Args:
        readme: Path to the readme being previewed
        host: Hostname the browser uses to reach the hot reload endpoint;
            the server itself always binds loopback
        port: Port to bind, 0 for an OS-assigned port
        open_browser: Whether to open the default browser on startup
    """

    readme: Path
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    open_browser: bool = False

    @classmethod
    def from_args(cls, args: Any) -> "PreviewSettings":
        """Build settings from parsed command-line arguments."""
        return cls(
            readme=Path(args.readme).expanduser().resolve(),
            host=args.host,
            port=args.port,
            open_browser=args.open,
        )


def websocket_port(host: str, port: int) -> int:
    """Return the port the browser script should upgrade on.

    A non-loopback hostname means the page is reached through a tunnel
    that only forwards port 80.

    Args:
        host: Hostname given by the operator
        port: Port the server is bound to

    Returns:
        Port to embed in served pages
    """
    if host != DEFAULT_HOST:
        return TUNNEL_WS_PORT
    return port

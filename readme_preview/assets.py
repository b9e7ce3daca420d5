"""Static assets and the page template served alongside the readme."""

from dataclasses import dataclass
from functools import lru_cache
from html import escape
from typing import Dict, Final, Tuple

from pygments.formatters import HtmlFormatter

from . import config

# request path -> (file under ASSETS_DIR, content type)
ASSETS: Final[Dict[str, Tuple[str, str]]] = {
    "/ws.js": ("ws.js", "text/javascript; charset=utf-8"),
    "/preview.css": ("preview.css", "text/css; charset=utf-8"),
    "/favicon.svg": ("favicon.svg", "image/svg+xml"),
}

# code highlighting rules, generated from the Pygments style
HIGHLIGHT_PATH: Final[str] = "/highlight.css"


@dataclass(frozen=True)
class Asset:
    """A static payload and its content type."""

    body: bytes
    content_type: str


@lru_cache(maxsize=None)
def highlight_css() -> str:
    """Stylesheet for the spans ``codehilite`` emits in fenced code blocks."""
    formatter = HtmlFormatter(style=config.HIGHLIGHT_STYLE)
    return formatter.get_style_defs(f".{config.HIGHLIGHT_CSS_CLASS}")


def is_asset(path: str) -> bool:
    return path in ASSETS or path == HIGHLIGHT_PATH


def load_asset(path: str) -> Asset:
    """Read the asset served at ``path``.

    Args:
        path: Request path, e.g. ``/ws.js``

    Returns:
        The asset bytes with their content type

    Raises:
        KeyError: If ``path`` is not a known asset
        OSError: If the asset file cannot be read
    """
    if path == HIGHLIGHT_PATH:
        return Asset(highlight_css().encode("utf-8"), "text/css; charset=utf-8")
    filename, content_type = ASSETS[path]
    return Asset((config.ASSETS_DIR / filename).read_bytes(), content_type)


def render_page(readme_html: str, name: str, ws_host: str, ws_port: int) -> bytes:
    """Embed rendered readme HTML in the preview page.

    Args:
        readme_html: Output of the document renderer
        name: Display name of the readme
        ws_host: Host the browser should upgrade against
        ws_port: Port the browser should upgrade against

    Returns:
        The complete page, UTF-8 encoded
    """
    template = config.PAGE_TEMPLATE.read_text(encoding="utf-8")
    replacements = {
        "{{name}}": escape(name),
        "{{hot_reload_host}}": escape(ws_host),
        "{{hot_reload_port}}": str(ws_port),
        "{{reconnect_delay}}": str(config.RECONNECT_DELAY_MS),
    }
    for placeholder, value in replacements.items():
        template = template.replace(placeholder, value)
    # readme last so its text is never scanned for placeholders
    return template.replace("{{readme}}", readme_html).encode("utf-8")

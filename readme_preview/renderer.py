"""Readme to HTML conversion.

Markdown readmes go through python-markdown with the extensions a package
registry page typically supports. Anything that does not look like
Markdown is shown verbatim in a ``<pre>`` block.
"""

import html
from pathlib import PurePath
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urljoin, urlsplit
from xml.etree.ElementTree import Element

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from . import config

MARKDOWN_SUFFIXES = {"", ".md", ".markdown", ".mdown", ".mkdn", ".mkd"}
LINK_ATTRIBUTES = ("href", "src")


def _is_relative(url: str) -> bool:
    if not url or url.startswith("#"):
        return False
    parts = urlsplit(url)
    return not parts.scheme and not parts.netloc


class BaseUrlTreeprocessor(Treeprocessor):
    """Prefixes relative link and image targets with a base URL."""

    def __init__(self, md: markdown.Markdown, base_url: str) -> None:
        super().__init__(md)
        self.base_url = base_url.rstrip("/") + "/"

    def run(self, root: Element) -> None:
        for element in root.iter():
            for attribute in LINK_ATTRIBUTES:
                value = element.get(attribute)
                if value and _is_relative(value):
                    element.set(attribute, urljoin(self.base_url, value.lstrip("/")))


class BaseUrlExtension(Extension):
    """Markdown extension wiring in :class:`BaseUrlTreeprocessor`."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {"base_url": ["", "Prefix for relative links and images"]}
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        base_url = self.getConfig("base_url")
        if base_url:
            md.treeprocessors.register(BaseUrlTreeprocessor(md, base_url), "base_url", 5)


def is_markdown(name: str) -> bool:
    """Whether a document with this name should be rendered as Markdown.

    Args:
        name: Logical file name of the document, e.g. ``README.md``

    Returns:
        True for Markdown suffixes and suffix-less names
    """
    return PurePath(name).suffix.lower() in MARKDOWN_SUFFIXES


def text_to_html(
    text: str,
    name: str,
    base_url: Optional[str] = None,
    extension_configs: Optional[Mapping[str, Dict[str, Any]]] = None,
) -> str:
    """Render a readme to an HTML fragment.

    Args:
        text: Raw document text
        name: Logical file name, used to pick the renderer
        base_url: Optional prefix for relative links and images
        extension_configs: Optional python-markdown extension settings

    Returns:
        The rendered HTML, empty for an empty document
    """
    if not text.strip():
        return ""

    if not is_markdown(name):
        return f"<pre>{html.escape(text)}</pre>"

    extensions: list = list(config.MARKDOWN_EXTENSIONS)
    if base_url:
        extensions.append(BaseUrlExtension(base_url=base_url))

    md = markdown.Markdown(
        extensions=extensions,
        extension_configs=dict(extension_configs or {}),
        output_format="html",
    )
    return md.convert(text)

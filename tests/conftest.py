"""Shared fixtures for the readme-preview tests."""

import threading
import time
from pathlib import Path
from typing import Callable, Iterator

import pytest

from readme_preview.context import PreviewContext
from readme_preview.server import PreviewServer


def wait_for(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll ``condition`` until it holds or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.02)
    return condition()


@pytest.fixture
def readme(tmp_path: Path) -> Path:
    """A readme containing just ``Hello``."""
    path = tmp_path / "README.md"
    path.write_text("Hello", encoding="utf-8")
    return path.resolve()


@pytest.fixture
def context(readme: Path) -> PreviewContext:
    return PreviewContext(readme=readme)


@pytest.fixture
def live_server(context: PreviewContext) -> Iterator[PreviewServer]:
    """A preview server on an OS-assigned port, serving on a thread."""
    server = PreviewServer(context, port=0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        thread.join(timeout=5.0)
        context.registry.close()
        server.server_close()

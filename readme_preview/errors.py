"""Exceptions raised by readme-preview."""

from pathlib import Path


class PreviewError(Exception):
    """Base class for fatal preview errors."""


class ReadmeNotFoundError(PreviewError):
    """The readme to preview is missing or unreadable."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"readme not found at {path}")


class ServerBindError(PreviewError):
    """The preview server could not bind its address."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        self.host = host
        self.port = port
        super().__init__(f"cannot bind {host}:{port}: {reason}")

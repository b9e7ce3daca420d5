"""Process-wide state shared between the preview components."""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from .registry import ConnectionRegistry


@dataclass
class PreviewContext:
    """State shared by the accept loop, the watcher and the upgrade thread.

    Args:
        readme: Absolute path of the watched readme, fixed for the run
        registry: The one hot reload connection slot
        running: Set while the server should keep accepting requests
        endpoint: Bound (host, port), filled in once the server binds
    """

    readme: Path
    registry: ConnectionRegistry = field(default_factory=ConnectionRegistry)
    running: threading.Event = field(default_factory=threading.Event)
    endpoint: Optional[Tuple[str, int]] = None

    def __post_init__(self) -> None:
        self.running.set()

    @property
    def is_running(self) -> bool:
        return self.running.is_set()

"""Background watcher that turns readme writes into reload pushes."""

import os
from pathlib import Path
from typing import Optional

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from . import config
from .display import StatusDisplay
from .registry import ConnectionRegistry

logger = structlog.get_logger(__name__)


def _same_file(candidate: object, target: Path) -> bool:
    if not candidate:
        return False
    return os.path.abspath(os.fsdecode(candidate)) == str(target)


class ReadmeWatcher(FileSystemEventHandler):
    """Watches one file and pushes a reload frame on every write.

    Writes are not debounced. An editor that saves in several steps
    produces several notifications, which is harmless because reloading
    is idempotent.
    """

    def __init__(
        self,
        readme: Path,
        registry: ConnectionRegistry,
        display: Optional[StatusDisplay] = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            readme: The file to watch
            registry: Where reload notifications are sent
            display: Optional status display to keep the counter on
        """
        super().__init__()
        self.readme = Path(os.path.abspath(readme))
        self.registry = registry
        self.display = display
        self.modification_count = 0
        self._observer: Optional[Observer] = None

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and _same_file(event.src_path, self.readme):
            self.record_write()

    def on_moved(self, event: FileSystemEvent) -> None:
        # atomic saves write a temp file and rename it over the target
        if not event.is_directory and _same_file(getattr(event, "dest_path", None), self.readme):
            self.record_write()

    def record_write(self) -> None:
        """Count one write and tell the browser to reload."""
        self.modification_count += 1
        delivered = self.registry.notify(config.RELOAD_FRAME)
        logger.debug(
            "Readme modified",
            path=str(self.readme),
            count=self.modification_count,
            delivered=delivered,
        )
        if self.display is not None:
            self.display.updates(self.modification_count)

    def start(self) -> None:
        """Start observing the readme on a background thread."""
        if self._observer is not None:
            return
        observer = Observer()
        observer.daemon = True
        observer.schedule(self, str(self.readme.parent), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Watching readme", path=str(self.readme))

    def stop(self) -> None:
        """Stop observing and wait for the observer thread."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
        logger.info("Stopped watching readme")

    @property
    def is_alive(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

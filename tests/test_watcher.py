"""Tests for the readme watcher."""

from pathlib import Path
from unittest.mock import Mock

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from conftest import wait_for
from readme_preview import config
from readme_preview.registry import ConnectionRegistry
from readme_preview.watcher import ReadmeWatcher


@pytest.fixture
def registry() -> Mock:
    return Mock(spec=ConnectionRegistry)


def test_watcher_init(readme: Path, registry: Mock) -> None:
    """Test ReadmeWatcher initialization."""
    watcher = ReadmeWatcher(readme, registry)

    assert watcher.readme == readme
    assert watcher.modification_count == 0
    assert watcher.is_alive is False


@pytest.mark.parametrize("writes", [1, 3, 10])
def test_each_write_counts_and_notifies(readme: Path, registry: Mock, writes: int) -> None:
    """N write events give N notifications and a count of exactly N."""
    watcher = ReadmeWatcher(readme, registry)

    for _ in range(writes):
        watcher.dispatch(FileModifiedEvent(str(readme)))

    assert watcher.modification_count == writes
    assert registry.notify.call_count == writes
    registry.notify.assert_called_with(config.RELOAD_FRAME)


def test_atomic_save_counts_as_write(readme: Path, registry: Mock) -> None:
    """A temp file renamed over the readme is a write."""
    watcher = ReadmeWatcher(readme, registry)

    watcher.dispatch(FileMovedEvent(str(readme.parent / ".README.md.swp"), str(readme)))

    assert watcher.modification_count == 1
    registry.notify.assert_called_once_with(config.RELOAD_FRAME)


def test_unrelated_events_are_ignored(readme: Path, registry: Mock) -> None:
    """Other files, directories and non-write events do not count."""
    watcher = ReadmeWatcher(readme, registry)
    other = readme.parent / "CHANGELOG.md"

    watcher.dispatch(FileModifiedEvent(str(other)))
    watcher.dispatch(DirModifiedEvent(str(readme.parent)))
    watcher.dispatch(FileCreatedEvent(str(other)))
    watcher.dispatch(FileMovedEvent(str(readme), str(other)))

    assert watcher.modification_count == 0
    registry.notify.assert_not_called()


def test_write_updates_display(readme: Path, registry: Mock) -> None:
    display = Mock()
    watcher = ReadmeWatcher(readme, registry, display)

    watcher.dispatch(FileModifiedEvent(str(readme)))
    watcher.dispatch(FileModifiedEvent(str(readme)))

    assert [c.args for c in display.updates.call_args_list] == [(1,), (2,)]


def test_write_without_connection_still_counts(readme: Path) -> None:
    """With nothing registered the notification is lost but the count moves."""
    watcher = ReadmeWatcher(readme, ConnectionRegistry())

    watcher.dispatch(FileModifiedEvent(str(readme)))

    assert watcher.modification_count == 1


def test_observer_sees_file_writes(readme: Path) -> None:
    """Test the background observer against a real file."""
    registry = Mock(spec=ConnectionRegistry)
    watcher = ReadmeWatcher(readme, registry)
    watcher.start()
    try:
        assert watcher.is_alive
        with readme.open("a", encoding="utf-8") as f:
            f.write(", world")

        assert wait_for(lambda: watcher.modification_count >= 1)
        registry.notify.assert_called_with(config.RELOAD_FRAME)
    finally:
        watcher.stop()

    assert watcher.is_alive is False


def test_stop_without_start_is_noop(readme: Path, registry: Mock) -> None:
    watcher = ReadmeWatcher(readme, registry)
    watcher.stop()
    assert watcher.is_alive is False

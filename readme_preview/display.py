"""Terminal status lines shown to the operator."""

import sys
import threading
from typing import Optional, TextIO

from . import config

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_LINE = "\r\x1b[2K"


class StatusDisplay:
    """Writes the preview's progress to the terminal.

    Both the main thread and the watcher thread report here, so writes
    are serialized. Cursor control codes are only emitted on a TTY.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        """Initialize the display.

        Args:
            stream: Output stream, defaults to stdout
        """
        self.stream = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()
        self._counter_shown = False
        self._cursor_hidden = False

    @property
    def is_tty(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def _write(self, text: str) -> None:
        with self._lock:
            if self._counter_shown:
                # keep the in-place counter on its own line
                self.stream.write("\n")
                self._counter_shown = False
            self.stream.write(text + "\n")
            self.stream.flush()

    def banner(self) -> None:
        if self.is_tty:
            with self._lock:
                self.stream.write(HIDE_CURSOR)
                self._cursor_hidden = True
        self._write(f"📦 {config.APP_NAME} v{config.APP_VERSION} (Ctrl-C to quit)\n")

    def found_readme(self, path: str) -> None:
        self._write(f"🟢 found readme at {path}")

    def awaiting_updates(self) -> None:
        self._write("🟢 awaiting updates...")

    def serving(self, url: str) -> None:
        self._write(f"🟢 preview running at {url}")

    def browser(self, opened: bool) -> None:
        if opened:
            self._write("🟢 opening browser...")
        else:
            self._write("⚫ browser opener off (use --open)")

    def standing_by(self) -> None:
        self._write("🔥 hot reload standing by...")

    def updates(self, count: int) -> None:
        """Show the readme modification counter.

        Args:
            count: Number of writes observed so far
        """
        line = f"💚 readme updates => {count}"
        with self._lock:
            if self.is_tty:
                self.stream.write(CLEAR_LINE + line)
                self._counter_shown = True
            else:
                self.stream.write(line + "\n")
            self.stream.flush()

    def restore(self) -> None:
        """Put the terminal back the way it was found."""
        with self._lock:
            if self._counter_shown:
                self.stream.write("\n")
                self._counter_shown = False
            if self._cursor_hidden:
                self.stream.write(SHOW_CURSOR)
                self._cursor_hidden = False
            self.stream.flush()

    def farewell(self) -> None:
        self.restore()
        self._write("👋 preview stopped, nice work!")

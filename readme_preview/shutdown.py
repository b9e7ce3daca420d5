"""Interrupt handling for a clean exit from the accept loop."""

import signal
import threading
from typing import Any, Dict, Optional, Sequence

import structlog

from .context import PreviewContext
from .display import StatusDisplay

logger = structlog.get_logger(__name__)


class ShutdownController:
    """Stops the preview server when the process is interrupted.

    ``server.shutdown()`` waits for ``serve_forever`` to return, and the
    signal handler runs on the same thread as the accept loop, so the
    shutdown call is made from a helper thread.
    """

    def __init__(
        self,
        context: PreviewContext,
        server: Any,
        display: Optional[StatusDisplay] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            context: Shared preview state holding the running flag
            server: Server whose ``serve_forever`` loop should stop
            display: Optional status display to restore
        """
        self.context = context
        self.server = server
        self.display = display
        self._previous: Dict[int, Any] = {}
        self._lock = threading.Lock()
        self._shutdown_thread: Optional[threading.Thread] = None

    def install(self, signals: Sequence[int] = (signal.SIGINT, signal.SIGTERM)) -> None:
        """Install the interrupt handler. Must run on the main thread."""
        for signum in signals:
            self._previous[signum] = signal.signal(signum, self.handle_interrupt)

    def restore(self) -> None:
        """Reinstall the handlers that were active before :meth:`install`."""
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def handle_interrupt(self, signum: Optional[int] = None, frame: Any = None) -> None:
        """Flip the running flag and unblock the accept loop.

        The handler may interrupt the accept-loop thread while it holds the
        display lock, so everything that takes a lock outside this
        controller runs on the helper thread.
        """
        with self._lock:
            if not self.context.is_running:
                return
            self.context.running.clear()

        self._shutdown_thread = threading.Thread(
            target=self._shut_down, args=(signum,), name="preview-shutdown", daemon=True
        )
        self._shutdown_thread.start()

    def _shut_down(self, signum: Optional[int]) -> None:
        logger.info("Interrupt received, shutting down", signal=signum)
        if self.display is not None:
            self.display.farewell()
        self.server.shutdown()

"""Tests for the shutdown controller."""

import io
import signal
import threading
from pathlib import Path
from unittest.mock import Mock, call, patch

from readme_preview.context import PreviewContext
from readme_preview.display import StatusDisplay
from readme_preview.server import PreviewServer
from readme_preview.shutdown import ShutdownController


def test_interrupt_flips_flag_and_unblocks_server(context: PreviewContext) -> None:
    """Test an interrupt against a mocked server."""
    server, display = Mock(), Mock()
    controller = ShutdownController(context, server, display)

    controller.handle_interrupt(signal.SIGINT, None)
    controller._shutdown_thread.join(timeout=5.0)

    assert context.is_running is False
    server.shutdown.assert_called_once()
    display.farewell.assert_called_once()


def test_second_interrupt_has_no_effect(context: PreviewContext) -> None:
    server, display = Mock(), Mock()
    controller = ShutdownController(context, server, display)

    controller.handle_interrupt(signal.SIGINT, None)
    controller._shutdown_thread.join(timeout=5.0)
    controller.handle_interrupt(signal.SIGINT, None)

    server.shutdown.assert_called_once()
    display.farewell.assert_called_once()


def test_interrupt_while_display_is_writing(context: PreviewContext) -> None:
    """An interrupt landing mid-write returns at once and shuts down afterwards."""
    stream = io.StringIO()
    display = StatusDisplay(stream)
    server = Mock()
    controller = ShutdownController(context, server, display)

    with display._lock:
        handler = threading.Thread(target=controller.handle_interrupt, args=(signal.SIGINT, None))
        handler.start()
        handler.join(timeout=2.0)

        assert not handler.is_alive()
        assert context.is_running is False

    controller._shutdown_thread.join(timeout=5.0)

    server.shutdown.assert_called_once()
    assert "preview stopped" in stream.getvalue()


def test_interrupt_stops_real_accept_loop(context: PreviewContext) -> None:
    """The accept loop returns after an interrupt handled on another thread."""
    server = PreviewServer(context, port=0)
    loop = threading.Thread(target=server.serve_forever, daemon=True)
    loop.start()
    try:
        ShutdownController(context, server).handle_interrupt()
        loop.join(timeout=5.0)
        assert not loop.is_alive()
    finally:
        server.server_close()


def test_install_and_restore_handlers(context: PreviewContext) -> None:
    """Test that handlers are installed and the previous ones put back."""
    controller = ShutdownController(context, Mock())
    previous = Mock()

    with patch("readme_preview.shutdown.signal") as mock_signal:
        mock_signal.signal.return_value = previous
        controller.install([signal.SIGINT, signal.SIGTERM])
        controller.restore()

    assert mock_signal.signal.call_args_list[:2] == [
        call(signal.SIGINT, controller.handle_interrupt),
        call(signal.SIGTERM, controller.handle_interrupt),
    ]
    assert mock_signal.signal.call_args_list[2:] == [
        call(signal.SIGINT, previous),
        call(signal.SIGTERM, previous),
    ]


def test_context_starts_running(readme: Path) -> None:
    context = PreviewContext(readme=readme)
    assert context.is_running is True
    assert context.endpoint is None
    assert context.registry.has_connection is False

#!/usr/bin/env python3
"""Accumulator daemon.

The AccumulatorService is constructed once at process start and owns every
long-lived piece: the clipboard resource, the scheduler, the accumulator,
the control server and the paste listener. Control connections and the
paste listener reach the accumulator through the service, never through
module-level state.

Usage:
    clipaccum --daemon --socket /path/to/socket
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

from clipaccum.accumulator import Accumulator
from clipaccum.accumulator_state import AccumulatorState
from clipaccum.control_server import start_control_server
from clipaccum.control_socket import cleanup_socket
from clipaccum.paste_listener import PasteListener
from clipaccum.scheduler import Scheduler

if TYPE_CHECKING:
    from clipaccum.clipboard_resource import ClipboardResource

logger = logging.getLogger(__name__)


class AccumulatorService:
    """Owns and runs the accumulator with its collaborators.

    Args:
        clipboard: Opened clipboard resource. Closed by the service on exit.
        socket_path: Path of the control socket.
        state: Initial accumulator flags.
        paste_hotkey: Whether to listen for the global paste shortcut.
    """

    def __init__(
        self,
        clipboard: ClipboardResource,
        socket_path: str,
        state: AccumulatorState | None = None,
        paste_hotkey: bool = True,
    ) -> None:
        self.clipboard = clipboard
        self.socket_path = socket_path
        self.scheduler = Scheduler()
        self.accumulator = Accumulator(clipboard, self.scheduler, state)
        self.paste_hotkey = paste_hotkey
        self.paste_listener: PasteListener | None = None
        self.server: asyncio.AbstractServer | None = None
        self.shutdown_requested = asyncio.Event()

    async def start(self) -> None:
        """Start polling, the control server and the paste listener."""
        await self.accumulator.start()
        self.server = await start_control_server(
            self.socket_path, self.accumulator, self.shutdown_requested.set
        )
        if self.paste_hotkey:
            listener = PasteListener(
                asyncio.get_running_loop(), self.accumulator.handle_paste_signal
            )
            if listener.start():
                self.paste_listener = listener

    async def stop(self) -> None:
        """Stop every component and release the clipboard and socket."""
        if self.paste_listener is not None:
            self.paste_listener.stop()
            self.paste_listener = None
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            cleanup_socket(self.socket_path)
        try:
            await self.accumulator.stop()
        finally:
            await self.clipboard.close()

    async def run(self) -> None:
        """Run until SIGINT, SIGTERM or a quit command, then shut down cleanly."""
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGINT, self.shutdown_requested.set)
        loop.add_signal_handler(signal.SIGTERM, self.shutdown_requested.set)
        try:
            await self.start()
            logger.debug("Accumulator daemon running")
            await self.shutdown_requested.wait()
            logger.debug("Shutdown requested")
        finally:
            await self.stop()
            loop.remove_signal_handler(signal.SIGINT)
            loop.remove_signal_handler(signal.SIGTERM)


async def run_daemon(
    backend: str,
    socket_path: str,
    state: AccumulatorState,
    paste_hotkey: bool,
) -> None:
    """Open the clipboard backend and run the daemon until signalled.

    Args:
        backend: Clipboard backend name ("auto", "x11" or "macos").
        socket_path: Path of the control socket.
        state: Initial accumulator flags.
        paste_hotkey: Whether to listen for the global paste shortcut.
    """
    from clipaccum.clipboard_resource import open_clipboard

    clipboard = await open_clipboard(backend)
    service = AccumulatorService(clipboard, socket_path, state, paste_hotkey)
    await service.run()

#!/usr/bin/env python3
"""Global paste hotkey detection.

Listens for the platform paste shortcut (Cmd+V on macOS, Ctrl+V elsewhere)
with pynput's GlobalHotKeys on a background thread. The hotkey callback
never touches accumulator state itself: it hands the signal over to the
event loop with call_soon_threadsafe.

pynput needs an X server on Linux and Accessibility permission on macOS.
When it cannot start, the daemon keeps running without paste detection.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


def paste_hotkey(platform: str | None = None) -> str:
    """Return the pynput combo string for the platform paste shortcut."""
    platform = platform or sys.platform
    return "<cmd>+v" if platform == "darwin" else "<ctrl>+v"


class PasteListener:
    """Forwards paste hotkey presses to a callback on the event loop.

    Args:
        loop: Event loop that must run on_paste.
        on_paste: Callback invoked on the loop for each paste.
        hotkey: pynput combo string. Defaults to the platform shortcut.
        platform: sys.platform value to act for. Defaults to the running one.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        on_paste: Callable[[], Any],
        hotkey: str | None = None,
        platform: str | None = None,
    ) -> None:
        self.loop = loop
        self.on_paste = on_paste
        self.platform = platform or sys.platform
        self.hotkey = hotkey or paste_hotkey(self.platform)
        self._listener: Any = None

    @property
    def running(self) -> bool:
        return self._listener is not None

    def _on_hotkey(self) -> None:
        # Runs on the pynput thread.
        logger.debug("Paste hotkey %s pressed", self.hotkey)
        self.loop.call_soon_threadsafe(self.on_paste)

    def start(self) -> bool:
        """Start listening on a daemon thread.

        Returns:
            True if the listener is running, False if pynput is unavailable.
        """
        try:
            from pynput import keyboard
        except ImportError as e:
            logger.warning("Paste detection unavailable, pynput failed to load: %s", e)
            return False

        listener = keyboard.GlobalHotKeys({self.hotkey: self._on_hotkey})
        listener.daemon = True
        listener.start()
        self._listener = listener
        if self.platform == "darwin":
            self._check_trusted(listener)
        logger.debug("Listening for paste hotkey %s", self.hotkey)
        return True

    def _check_trusted(self, listener: Any) -> None:
        # pynput sets IS_TRUSTED from AXIsProcessTrusted once its thread is up.
        listener.wait()
        if not getattr(listener, "IS_TRUSTED", True):
            logger.warning(
                "Accessibility permission is required to detect paste; add this "
                "application under System Settings > Privacy & Security > Accessibility"
            )

    def stop(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None

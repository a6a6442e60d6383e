#!/usr/bin/env python3
"""macOS clipboard resource backed by NSPasteboard.

The general pasteboard already exposes a change counter (changeCount),
which increments on every clearContents call. PyObjC calls are cheap and
non-blocking, so they run directly on the event loop.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

logger = logging.getLogger(__name__)


def load_appkit() -> Any:
    """Import AppKit from PyObjC.

    Returns:
        The AppKit module.

    Raises:
        SystemExit: If PyObjC is not installed.
    """
    try:
        import AppKit
    except ImportError:
        print("Error: PyObjC AppKit bindings are not installed.", file=sys.stderr)
        print("Install them with: pip install 'clipaccum[macos]'", file=sys.stderr)
        sys.exit(1)
    return AppKit


class MacClipboard:
    """General pasteboard as a change-counted text resource."""

    def __init__(self, pasteboard: Any, string_type: Any) -> None:
        self.pasteboard = pasteboard
        self.string_type = string_type

    @classmethod
    def open(cls) -> MacClipboard:
        appkit = load_appkit()
        return cls(appkit.NSPasteboard.generalPasteboard(), appkit.NSPasteboardTypeString)

    async def read_change_count(self) -> int:
        return int(self.pasteboard.changeCount())

    async def read_text(self) -> str | None:
        try:
            text = self.pasteboard.stringForType_(self.string_type)
        except Exception as e:
            logger.debug("Pasteboard read failed: %s", e)
            return None
        return None if text is None else str(text)

    async def write_text(self, text: str) -> bool:
        self.pasteboard.clearContents()
        if not self.pasteboard.setString_forType_(text, self.string_type):
            logger.debug("Pasteboard rejected the string")
            return False
        return True

    async def clear(self) -> None:
        self.pasteboard.clearContents()

    async def close(self) -> None:
        pass

#!/usr/bin/env python3
"""Clipboard resource contract and backend selection.

The accumulator only talks to the system clipboard through the
ClipboardResource protocol. Backends:
- x11: python-xlib with the XFixes extension (x11_clipboard)
- macos: PyObjC AppKit NSPasteboard (macos_clipboard)

Backend modules are imported lazily so that a missing platform library only
matters when that backend is selected.
"""

from __future__ import annotations

import sys
from typing import Protocol

BACKENDS = ("auto", "x11", "macos")


class ClipboardResource(Protocol):
    """Shared system clipboard observed through a change counter."""

    async def read_change_count(self) -> int:
        """Return the counter that increments on every clipboard write."""
        ...

    async def read_text(self) -> str | None:
        """Return the text payload, or None if absent, non-text or unreadable."""
        ...

    async def write_text(self, text: str) -> bool:
        """Replace the clipboard content with text. Return False on failure."""
        ...

    async def clear(self) -> None:
        """Empty the clipboard."""
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
        ...


def resolve_backend(name: str, platform: str | None = None) -> str:
    """Map a backend option to a concrete backend name.

    Args:
        name: One of BACKENDS.
        platform: Platform string to resolve "auto" against. Defaults to
            sys.platform.

    Returns:
        "x11" or "macos".

    Raises:
        ValueError: If name is not a known backend.
    """
    if name not in BACKENDS:
        raise ValueError(f"Unknown clipboard backend: {name}")
    if name != "auto":
        return name
    platform = platform or sys.platform
    return "macos" if platform == "darwin" else "x11"


async def open_clipboard(name: str) -> ClipboardResource:
    """Open the clipboard backend selected by name.

    Args:
        name: One of BACKENDS.

    Returns:
        A ready-to-use clipboard resource.

    Raises:
        SystemExit: If the platform clipboard is unavailable.
    """
    backend = resolve_backend(name)
    if backend == "macos":
        from clipaccum.macos_clipboard import MacClipboard

        return MacClipboard.open()

    from clipaccum.x11_clipboard import X11Clipboard

    return await X11Clipboard.open()

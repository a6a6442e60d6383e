#!/usr/bin/env python3
"""X11 clipboard resource.

X11 has no clipboard change counter, so this backend derives one: every
XFixes SetSelectionOwnerNotify for CLIPBOARD increments it, whether the new
owner is another application, our own hidden window, or nobody at all.

The display file descriptor is integrated into the event loop with
add_reader(). A pump task answers SelectionRequest events while we own
CLIPBOARD and counts owner changes. Display access from the pump and from
the public methods is serialized by a single lock.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from Xlib import X

from clipaccum.clipboard import create_hidden_window, get_display_fd, validate_display
from clipaccum.clipboard_events import register_xfixes_events, release_ownership, take_ownership
from clipaccum.clipboard_io import decode_text, read_clipboard_content
from clipaccum.clipboard_selection import (
    handle_selection_request,
    is_owner_notify,
    process_pending_events,
)

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)


class X11Clipboard:
    """CLIPBOARD selection exposed as a change-counted text resource.

    Attributes:
        display: The X11 display connection.
        window: Hidden window that owns CLIPBOARD after our writes.
        clipboard_atom: Cached CLIPBOARD atom.
        change_count: Number of CLIPBOARD owner changes observed.
        content: UTF-8 bytes served while we own CLIPBOARD.
        acquisition_time: Server timestamp of our ownership, or None.
        deferred_events: Events put aside during clipboard reads.
    """

    def __init__(self, display: Display, window: Window, clipboard_atom: int) -> None:
        self.display = display
        self.window = window
        self.clipboard_atom = clipboard_atom
        self.change_count = 0
        self.content = b""
        self.acquisition_time: int | None = None
        self.deferred_events: list[Event] = []
        self._io_lock = asyncio.Lock()
        self._x11_event = asyncio.Event()
        self._pump_task: asyncio.Task[None] | None = None
        self._display_fd: int | None = None

    @classmethod
    async def open(cls) -> X11Clipboard:
        """Connect to X11, register for CLIPBOARD changes and start pumping.

        Raises:
            SystemExit: If the X11 display is unavailable.
        """
        display = validate_display()
        window = create_hidden_window(display)
        clipboard_atom = display.intern_atom("CLIPBOARD")
        register_xfixes_events(display, window, clipboard_atom)

        clipboard = cls(display, window, clipboard_atom)
        clipboard.attach()
        return clipboard

    def attach(self) -> None:
        """Watch the display fd and start the event pump on the running loop."""
        loop = asyncio.get_running_loop()
        self._display_fd = get_display_fd(self.display)
        loop.add_reader(self._display_fd, self._x11_event.set)
        self._pump_task = loop.create_task(self._pump())

    async def close(self) -> None:
        """Stop the event pump and close the display connection."""
        if self._display_fd is not None:
            asyncio.get_running_loop().remove_reader(self._display_fd)
            self._display_fd = None
        if self._pump_task is not None:
            self._pump_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._pump_task
            self._pump_task = None
        self.display.close()

    async def _pump(self) -> None:
        while True:
            await self._x11_event.wait()
            self._x11_event.clear()
            async with self._io_lock:
                self.process_events()

    def _owns(self, owner: object) -> bool:
        return getattr(owner, "id", X.NONE) == self.window.id

    def process_events(self) -> None:
        """Handle pending and deferred events. Caller holds the I/O lock."""
        for event in process_pending_events(self.display, self.deferred_events):
            if event.type == X.SelectionRequest:
                handle_selection_request(
                    self.display, event, self.content, self.acquisition_time
                )
            elif is_owner_notify(event) and event.selection == self.clipboard_atom:
                self.change_count += 1
                if self._owns(event.owner):
                    self.acquisition_time = event.timestamp
                else:
                    self.acquisition_time = None
                logger.debug("CLIPBOARD owner changed, change count %d", self.change_count)

    async def read_change_count(self) -> int:
        async with self._io_lock:
            self.process_events()
            return self.change_count

    async def read_text(self) -> str | None:
        async with self._io_lock:
            owner = self.display.get_selection_owner(self.clipboard_atom)
            if self._owns(owner):
                return decode_text(self.content)
            content = await read_clipboard_content(
                self.display, self.window, self.clipboard_atom, self.deferred_events
            )
            self.process_events()
        return decode_text(content)

    async def write_text(self, text: str) -> bool:
        async with self._io_lock:
            self.content = text.encode("utf-8")
            acquired = take_ownership(self.display, self.window, self.clipboard_atom)
            self.process_events()
        return acquired

    async def clear(self) -> None:
        async with self._io_lock:
            self.content = b""
            release_ownership(self.display, self.clipboard_atom)
            self.process_events()

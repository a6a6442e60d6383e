"""X11 clipboard reads.

This module reads the CLIPBOARD selection from another client through the
selection conversion protocol: request UTF8_STRING into a property on our
hidden window, wait for SelectionNotify, then read and delete the property.

Any failure (no owner, refused conversion, timeout, undecodable bytes) is
reported as None, which the accumulator treats as "no actionable change".
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from Xlib import X

from clipaccum.clipboard_selection import wait_for_event_type
from clipaccum.constants import CLIPBOARD_TIMEOUT

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)

# Property on our window that receives converted selection data.
TRANSFER_PROPERTY = "CLIPACCUM_SEL"


async def read_clipboard_content(
    display: Display,
    window: Window,
    selection_atom: int,
    deferred_events: list[Event],
    timeout: float = CLIPBOARD_TIMEOUT,
) -> bytes | None:
    """Read selection content from its current owner.

    The blocking wait runs in a worker thread; the caller must hold the
    lock that serializes display access.

    Args:
        display: The X11 display connection.
        window: The window to receive selection data.
        selection_atom: The selection atom to read.
        deferred_events: List collecting events seen during the read.
        timeout: Seconds to wait for the owner to answer.

    Returns:
        Content bytes if successful, None on failure/empty/timeout.
    """
    try:
        owner = display.get_selection_owner(selection_atom)
        if owner == X.NONE:
            logger.debug("No selection owner for atom %s", selection_atom)
            return None

        utf8_atom = display.intern_atom("UTF8_STRING")
        prop_atom = display.intern_atom(TRANSFER_PROPERTY)
        window.convert_selection(selection_atom, utf8_atom, prop_atom, X.CurrentTime)
        display.flush()

        event = await asyncio.to_thread(
            wait_for_event_type, display, X.SelectionNotify, deferred_events, timeout
        )
        if event is None:
            logger.debug("Clipboard read timed out after %s seconds", timeout)
            return None
        if event.property == X.NONE:
            logger.debug("Selection owner refused UTF8_STRING conversion")
            return None
        return _read_selection_property(display, window, prop_atom)

    except Exception as e:
        logger.debug("Clipboard read failed: %s", e)
        return None


def _read_selection_property(
    display: Display, window: Window, prop_atom: int
) -> bytes | None:
    """Read and delete the transfer property from our window."""
    try:
        prop = window.get_full_property(prop_atom, X.AnyPropertyType)
        window.delete_property(prop_atom)
        display.flush()
    except Exception as e:
        logger.debug("Failed to read selection property: %s", e)
        return None

    if prop is None:
        logger.debug("Selection property was empty")
        return None
    data = prop.value
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def decode_text(content: bytes | None) -> str | None:
    """Decode clipboard bytes as UTF-8 text.

    Args:
        content: Raw selection bytes, or None.

    Returns:
        The decoded text, or None if content is None or not valid UTF-8.
    """
    if content is None:
        return None
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Clipboard content is not valid UTF-8, ignoring")
        return None

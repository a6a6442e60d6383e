"""X11 CLIPBOARD ownership and change notification.

This module provides functions for registering XFixes selection owner
notifications and for taking or dropping ownership of the CLIPBOARD
selection. Every ownership change, including our own, produces one
SetSelectionOwnerNotify event, which the X11 backend counts as a clipboard
change.
"""

from __future__ import annotations

import logging

from Xlib import X
from Xlib.protocol import request

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)


def register_xfixes_events(display: Display, window: Window, clipboard_atom: int) -> None:
    """Register for XFixes owner change notifications on CLIPBOARD.

    Args:
        display: The X11 display connection.
        window: The window to receive selection events.
        clipboard_atom: The CLIPBOARD atom.
    """
    from Xlib.ext import xfixes

    xfixes.query_version(display)
    mask = xfixes.XFixesSetSelectionOwnerNotifyMask
    xfixes.select_selection_input(display, window.id, clipboard_atom, mask)
    display.flush()


def take_ownership(display: Display, window: Window, selection_atom: int) -> bool:
    """Take ownership of a selection so we serve its content.

    Args:
        display: The X11 display connection.
        window: The window to own the selection.
        selection_atom: The selection atom to own.

    Returns:
        True on success, False if another client kept ownership.
    """
    try:
        window.set_selection_owner(selection_atom, X.CurrentTime)
        display.flush()

        owner = display.get_selection_owner(selection_atom)
        if owner != window:
            logger.debug("Another client kept selection ownership")
            return False
        return True

    except Exception as e:
        logger.debug("Taking selection ownership failed: %s", e)
        return False


def release_ownership(display: Display, selection_atom: int) -> None:
    """Leave a selection without any owner, emptying it for all clients.

    Args:
        display: The X11 display connection.
        selection_atom: The selection atom to empty.
    """
    request.SetSelectionOwner(
        display=display.display,
        onerror=None,
        window=X.NONE,
        selection=selection_atom,
        time=X.CurrentTime,
    )
    # Round-trip so the resulting owner notification is already queued.
    display.sync()

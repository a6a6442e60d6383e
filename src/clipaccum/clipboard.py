"""X11 display setup for the clipboard backend.

This module provides functions for connecting to the X server and creating
the hidden window that owns CLIPBOARD whenever the accumulator writes its
buffer. It uses the python-xlib library.

The module handles:
- Validating X11 display connectivity, retrying while the server comes up
- Creating hidden windows for clipboard ownership
- Exposing the display file descriptor for asyncio integration
"""

from __future__ import annotations

import os
import sys

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed
from Xlib import X
from Xlib.error import DisplayError

from clipaccum.constants import DISPLAY_OPEN_ATTEMPTS, DISPLAY_OPEN_WAIT

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window


@retry(
    wait=wait_fixed(DISPLAY_OPEN_WAIT),
    retry=retry_if_exception_type((DisplayError, OSError)),
    stop=stop_after_attempt(DISPLAY_OPEN_ATTEMPTS),
    reraise=True,
)
def _open_display(display_name: str) -> Display:
    """Open an X11 connection, retrying transient connection failures."""
    from Xlib.display import Display as XDisplay
    return XDisplay(display_name)


def validate_display() -> Display:
    """Validate X11 connectivity and return Display object.

    Checks that the DISPLAY environment variable is set and opens an X11
    connection. Called at startup to fail fast if X11 is not available.

    Returns:
        Display object for X11 operations.

    Raises:
        SystemExit: If DISPLAY is unset or X11 connection fails.
    """
    display_name = os.environ.get("DISPLAY")
    if not display_name:
        print("Error: DISPLAY environment variable is not set.", file=sys.stderr)
        print("X11 display is required for clipboard access.", file=sys.stderr)
        sys.exit(1)

    try:
        return _open_display(display_name)
    except Exception as e:
        print(f"Error: Failed to connect to X11 display: {e}", file=sys.stderr)
        sys.exit(1)


def get_display_fd(display: Display) -> int:
    """Get the file descriptor for the X11 display connection.

    Args:
        display: The X11 display connection.

    Returns:
        File descriptor number for use with loop.add_reader().
    """
    return display.fileno()


def create_hidden_window(display: Display) -> Window:
    """Create a 1x1 unmapped window for clipboard ownership.

    Args:
        display: The X11 display connection.

    Returns:
        A Window object for owning the CLIPBOARD selection.
    """
    screen = display.screen()
    return screen.root.create_window(
        0, 0, 1, 1, 0, screen.root_depth, event_mask=X.PropertyChangeMask,
    )

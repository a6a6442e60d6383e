#!/usr/bin/env python3
"""Control commands.

Maps the text commands received over the control socket onto accumulator
operations. These are the toggles and actions of a menu or settings window:

    enable | disable          toggle accumulation
    newline on|off            separate copies with a newline
    clear-on-paste on|off     clear the buffer after the next paste
    clear                     empty the buffer and the clipboard
    paste                     act as if a paste was detected
    status                    report flags and the buffer
    quit                      stop the daemon

Responses start with "ok" or "error: <reason>".
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipaccum.accumulator import Accumulator, StatusReport

logger = logging.getLogger(__name__)

OK = "ok"
ERROR_PREFIX = "error: "

_SWITCH_VALUES = {"on": True, "off": False}


def format_status(report: StatusReport) -> str:
    """Render a status report as key=value lines, a blank line, and the buffer."""
    lines = [
        OK,
        f"enabled={int(report.enabled)}",
        f"clear_on_paste={int(report.clear_on_paste)}",
        f"insert_newline={int(report.insert_newline)}",
        f"buffer_length={report.buffer_length}",
        "",
        report.buffer,
    ]
    return "\n".join(lines)


def _parse_switch(words: list[str]) -> bool | None:
    if len(words) != 2:
        return None
    return _SWITCH_VALUES.get(words[1].lower())


async def dispatch_command(
    accumulator: Accumulator,
    command: str,
    on_quit: Callable[[], None] | None = None,
) -> str:
    """Run one control command against the accumulator.

    Args:
        accumulator: The accumulator to operate on.
        command: Command text, e.g. "newline off".
        on_quit: Called for "quit". Without it quit is refused.

    Returns:
        The response text.
    """
    words = command.split()
    if not words:
        return ERROR_PREFIX + "empty command"
    name = words[0].lower()
    logger.debug("Control command %r", command)

    if name in ("enable", "disable") and len(words) == 1:
        await accumulator.set_enabled(name == "enable")
        return OK
    if name == "clear" and len(words) == 1:
        await accumulator.clear()
        return OK
    if name == "paste" and len(words) == 1:
        scheduled = accumulator.handle_paste_signal()
        return OK if scheduled is not None else OK + "\nclear on paste not active"
    if name == "status" and len(words) == 1:
        return format_status(accumulator.status())
    if name == "quit" and len(words) == 1:
        if on_quit is None:
            return ERROR_PREFIX + "quit not available"
        logger.debug("Quit requested over control socket")
        on_quit()
        return OK
    if name in ("newline", "clear-on-paste"):
        value = _parse_switch(words)
        if value is None:
            return ERROR_PREFIX + f"usage: {name} on|off"
        if name == "newline":
            accumulator.set_insert_newline(value)
        else:
            accumulator.set_clear_on_paste(value)
        return OK
    return ERROR_PREFIX + f"unknown command: {command.strip()}"


def is_error(response: str) -> bool:
    return response.startswith(ERROR_PREFIX)

"""X11 selection event handling.

While the accumulator owns CLIPBOARD, other applications ask for the buffer
through SelectionRequest events. This module answers those requests and
drains pending events from the display without blocking the event loop.

Supported targets: TARGETS, UTF8_STRING, STRING and TIMESTAMP. Anything
else is refused with property=None.
"""

from __future__ import annotations

import logging
import select
import time

from Xlib import X, Xatom
from Xlib.protocol.event import SelectionNotify

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionRequest
    from Xlib.protocol.rq import Event

logger = logging.getLogger(__name__)

OWNER_NOTIFY = "SetSelectionOwnerNotify"


def is_owner_notify(event: Event) -> bool:
    """Return True for XFixes SetSelectionOwnerNotify events."""
    return type(event).__name__ == OWNER_NOTIFY


def handle_selection_request(
    display: Display,
    event: SelectionRequest,
    content: bytes,
    acquisition_time: int | None,
) -> None:
    """Answer a SelectionRequest for the content we own.

    Args:
        display: The X11 display connection.
        event: The SelectionRequest event.
        content: UTF-8 encoded buffer to serve.
        acquisition_time: X server timestamp of our ownership, or None if
            not yet known. Used for TIMESTAMP responses.
    """
    targets_atom = display.intern_atom("TARGETS")
    utf8_atom = display.intern_atom("UTF8_STRING")
    timestamp_atom = display.intern_atom("TIMESTAMP")
    prop = event.property

    if event.target == targets_atom:
        event.requestor.change_property(
            prop, Xatom.ATOM, 32, [targets_atom, utf8_atom, Xatom.STRING, timestamp_atom]
        )
    elif event.target in (utf8_atom, Xatom.STRING):
        event.requestor.change_property(prop, event.target, 8, content)
    elif event.target == timestamp_atom and acquisition_time is not None:
        event.requestor.change_property(prop, Xatom.INTEGER, 32, [acquisition_time])
    else:
        logger.debug("Refusing selection target %s", event.target)
        prop = X.NONE

    event.requestor.send_event(
        SelectionNotify(
            time=event.time,
            requestor=event.requestor.id,
            selection=event.selection,
            target=event.target,
            property=prop,
        ),
        event_mask=0,
    )
    display.flush()


def process_pending_events(
    display: Display, deferred_events: list[Event] | None = None
) -> list[Event]:
    """Collect events already pending on the display without blocking.

    Args:
        display: The X11 display connection.
        deferred_events: Events put aside during a clipboard read. They are
            drained first to preserve ordering.

    Returns:
        SelectionRequest and SetSelectionOwnerNotify events, in order.
    """
    events: list[Event] = []
    if deferred_events:
        events.extend(deferred_events)
        deferred_events.clear()
    while display.pending_events() > 0:
        event = display.next_event()
        if event.type == X.SelectionRequest or is_owner_notify(event):
            events.append(event)
    return events


def wait_for_event_type(
    display: Display,
    target_event_type: int,
    deferred_events: list[Event],
    timeout: float,
) -> Event | None:
    """Block until an event of the target type arrives or timeout expires.

    Other relevant events are appended to deferred_events. Only call this
    when the event is expected, e.g. right after convert_selection. The
    wait is bounded so the worker thread running it stops reading from the
    display once the caller has given up.

    Args:
        display: The X11 display connection.
        target_event_type: The X11 event type to wait for.
        deferred_events: List collecting other events seen while waiting.
        timeout: Seconds to wait before giving up.

    Returns:
        The matching event, or None on timeout.
    """
    deadline = time.monotonic() + timeout
    while True:
        if display.pending_events() == 0:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            readable, _, _ = select.select([display.fileno()], [], [], remaining)
            if not readable:
                return None
            continue
        event = display.next_event()
        if event.type == target_event_type:
            return event
        if event.type == X.SelectionRequest or is_owner_notify(event):
            deferred_events.append(event)

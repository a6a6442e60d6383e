#!/usr/bin/env python3
"""Clipboard accumulation state machine.

This module provides the Accumulator, which polls the clipboard change
counter and folds every newly copied text into one growing buffer that it
writes back to the clipboard. It has two states, enabled and disabled;
polling only happens while enabled.

All methods must be called on the event loop that owns the scheduler.
poll(), clear() and set_enabled() additionally serialize on one lock, since
they await clipboard I/O between reading and writing the buffer.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clipaccum.accumulator_state import AccumulatorState
from clipaccum.constants import PASTE_CLEAR_DELAY, POLL_INTERVAL

if TYPE_CHECKING:
    from clipaccum.clipboard_resource import ClipboardResource
    from clipaccum.scheduler import DelayedTask, RecurringTimer, Scheduler

logger = logging.getLogger(__name__)


def _preview(text: str, limit: int = 50) -> str:
    """Shorten text for log output."""
    return text[:limit] + ("..." if len(text) > limit else "")


@dataclass(frozen=True)
class StatusReport:
    """Snapshot of the accumulator for display."""

    enabled: bool
    clear_on_paste: bool
    insert_newline: bool
    buffer: str

    @property
    def buffer_length(self) -> int:
        return len(self.buffer)


class Accumulator:
    """Polling state machine that owns the cumulative clipboard buffer.

    Args:
        clipboard: The clipboard resource to poll and write.
        scheduler: Scheduler for the poll timer and delayed clears.
        state: Initial state. Defaults to enabled, newline separated,
            no clear on paste.
        poll_interval: Seconds between polls.
        paste_clear_delay: Seconds between a paste signal and the clear.
    """

    def __init__(
        self,
        clipboard: ClipboardResource,
        scheduler: Scheduler,
        state: AccumulatorState | None = None,
        poll_interval: float = POLL_INTERVAL,
        paste_clear_delay: float = PASTE_CLEAR_DELAY,
    ) -> None:
        self.clipboard = clipboard
        self.scheduler = scheduler
        self.state = state or AccumulatorState()
        self.poll_interval = poll_interval
        self.paste_clear_delay = paste_clear_delay
        self._lock = asyncio.Lock()
        self._timer: RecurringTimer | None = None

    @property
    def buffer(self) -> str:
        return self.state.buffer

    @property
    def polling(self) -> bool:
        """True while the poll timer is running."""
        return self._timer is not None and self._timer.active

    def status(self) -> StatusReport:
        return StatusReport(
            enabled=self.state.enabled,
            clear_on_paste=self.state.clear_on_paste,
            insert_newline=self.state.insert_newline,
            buffer=self.state.buffer,
        )

    async def start(self) -> None:
        """Sync with the current clipboard and begin polling if enabled.

        Content already on the clipboard at startup is treated as seen and
        will not be accumulated.
        """
        async with self._lock:
            self.state.mark_seen(await self.clipboard.read_change_count())
        logger.debug(
            "Accumulator started at change count %d",
            self.state.last_seen_change_count,
        )
        if self.state.enabled:
            self._start_polling()

    async def stop(self) -> None:
        """Stop polling and drop pending delayed clears. Used on shutdown."""
        self._stop_polling()
        await self.scheduler.cancel_all()

    def _start_polling(self) -> None:
        if self.polling:
            return
        self._timer = self.scheduler.every(self.poll_interval, self.poll)
        logger.debug("Clipboard polling started")

    def _stop_polling(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.debug("Clipboard polling stopped")

    async def set_enabled(self, enabled: bool) -> None:
        """Enable or disable accumulation.

        Disabling stops polling and empties the buffer but leaves the live
        clipboard alone. A clear already scheduled by a paste signal still
        runs.

        Args:
            enabled: New enabled flag.
        """
        async with self._lock:
            self.state.enabled = enabled
            if enabled:
                self._start_polling()
            else:
                self._stop_polling()
                self.state.reset_buffer()
        logger.debug("Accumulation %s", "enabled" if enabled else "disabled")

    def set_clear_on_paste(self, clear_on_paste: bool) -> None:
        self.state.clear_on_paste = clear_on_paste

    def set_insert_newline(self, insert_newline: bool) -> None:
        self.state.insert_newline = insert_newline

    async def poll(self) -> None:
        """Check the clipboard once and accumulate newly copied text."""
        async with self._lock:
            await self._poll_locked()

    async def _poll_locked(self) -> None:
        state = self.state
        change_count = await self.clipboard.read_change_count()
        if not state.has_changed(change_count):
            return

        logger.debug(
            "Change detected: count %d, last handled %d",
            change_count, state.last_seen_change_count,
        )

        payload = await self.clipboard.read_text()
        if not payload:
            logger.debug("Clipboard is empty or not text, ignoring")
            state.mark_seen(change_count)
            return

        if state.is_echo(payload):
            logger.debug("Clipboard holds our own write, ignoring")
            state.mark_seen(change_count)
            return

        logger.debug("Appending %r", _preview(payload))
        state.append(payload)
        if not await self.clipboard.write_text(state.buffer):
            logger.warning("Failed to write accumulated text to clipboard")

        state.mark_seen(await self.clipboard.read_change_count())
        logger.debug(
            "Wrote %d characters, change count now %d",
            len(state.buffer), state.last_seen_change_count,
        )

    def handle_paste_signal(self) -> DelayedTask | None:
        """React to a paste performed by the user.

        When both accumulation and clear-on-paste are on, schedules clear()
        after a short delay so the paste still reads the full buffer.

        Returns:
            The scheduled clear, or None if nothing was scheduled.
        """
        if not (self.state.enabled and self.state.clear_on_paste):
            logger.debug("Paste detected, clear on paste not active")
            return None
        logger.debug("Paste detected, clearing in %.2fs", self.paste_clear_delay)
        return self.scheduler.call_later(self.paste_clear_delay, self.clear)

    async def clear(self) -> None:
        """Empty the buffer and the live clipboard."""
        async with self._lock:
            self.state.reset_buffer()
            await self.clipboard.clear()
            self.state.mark_seen(await self.clipboard.read_change_count())
        logger.debug("Buffer and clipboard cleared")

#!/usr/bin/env python3
"""Recurring timers and delayed one-shot tasks on the asyncio event loop.

Every callback is a coroutine function run as a task on the loop the
scheduler was created on, the same loop that runs all accumulator state
mutations. Timers never overlap: a callback finishes before the next sleep
starts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class RecurringTimer:
    """Runs a callback every interval seconds until cancelled."""

    def __init__(self, interval: float, callback: Callback) -> None:
        self.interval = interval
        self._callback = callback
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._callback()
            except Exception:
                # The next tick is the retry.
                logger.exception("Timer callback failed")

    @property
    def active(self) -> bool:
        """True until the timer is cancelled."""
        return not (self._cancelled or self._task.done())

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""
        self._cancelled = True
        self._task.cancel()

    async def wait_cancelled(self) -> None:
        """Wait until a cancelled timer task has actually finished."""
        with suppress(asyncio.CancelledError):
            await self._task


class DelayedTask:
    """Runs a callback once after delay seconds unless cancelled first."""

    def __init__(self, delay: float, callback: Callback) -> None:
        self.delay = delay
        self._callback = callback
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        try:
            await self._callback()
        except Exception:
            logger.exception("Delayed task failed")

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    def cancel(self) -> None:
        self._task.cancel()

    async def wait(self) -> None:
        """Wait for the callback to run or the task to be cancelled."""
        with suppress(asyncio.CancelledError):
            await self._task


class Scheduler:
    """Creates and tracks timers and delayed tasks.

    Must be used from inside a running event loop.
    """

    def __init__(self) -> None:
        self._timers: list[RecurringTimer] = []
        self._delayed: list[DelayedTask] = []

    def every(self, interval: float, callback: Callback) -> RecurringTimer:
        """Start a recurring timer.

        Args:
            interval: Seconds between callback invocations.
            callback: Coroutine function to run on each tick.

        Returns:
            The running RecurringTimer.
        """
        self._timers = [timer for timer in self._timers if timer.active]
        timer = RecurringTimer(interval, callback)
        self._timers.append(timer)
        logger.debug("Started timer every %.2fs", interval)
        return timer

    def call_later(self, delay: float, callback: Callback) -> DelayedTask:
        """Schedule a one-shot callback.

        Args:
            delay: Seconds to wait before running the callback.
            callback: Coroutine function to run once.

        Returns:
            The pending DelayedTask.
        """
        self._delayed = [task for task in self._delayed if not task.done]
        task = DelayedTask(delay, callback)
        self._delayed.append(task)
        logger.debug("Scheduled delayed task in %.2fs", delay)
        return task

    async def cancel_all(self) -> None:
        """Cancel every timer and pending delayed task and wait for them."""
        timers, self._timers = self._timers, []
        delayed, self._delayed = self._delayed, []
        for timer in timers:
            timer.cancel()
        for task in delayed:
            task.cancel()
        for timer in timers:
            await timer.wait_cancelled()
        for task in delayed:
            await task.wait()

#!/usr/bin/env python3
"""Pytest fixtures for clipaccum tests.

Provides an in-memory clipboard with a change counter, a manual scheduler
that fires timers only when told to, and temporary socket paths.
"""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable, Generator
from pathlib import Path

import pytest

from clipaccum.accumulator import Accumulator
from clipaccum.accumulator_state import AccumulatorState


class FakeClipboard:
    """In-memory clipboard resource.

    Every write or clear increments change_count, like a real pasteboard.
    copy() simulates another application copying text.
    """

    def __init__(self, text: str | None = None) -> None:
        self.text = text
        self.change_count = 0
        self.writes: list[str] = []
        self.clears = 0
        self.closed = False
        self.write_result = True

    def copy(self, text: str | None) -> None:
        self.text = text
        self.change_count += 1

    async def read_change_count(self) -> int:
        return self.change_count

    async def read_text(self) -> str | None:
        return self.text

    async def write_text(self, text: str) -> bool:
        self.writes.append(text)
        self.copy(text)
        return self.write_result

    async def clear(self) -> None:
        self.clears += 1
        self.copy(None)

    async def close(self) -> None:
        self.closed = True


class FakeHandle:
    """Timer or delayed task recorded by ManualScheduler."""

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.done = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True

    async def fire(self) -> None:
        assert not self.cancelled, "fired a cancelled task"
        await self.callback()


class ManualScheduler:
    """Scheduler double: records timers and delayed tasks without running them."""

    def __init__(self) -> None:
        self.timers: list[FakeHandle] = []
        self.delayed: list[FakeHandle] = []

    def every(self, interval: float, callback: Callable[[], Awaitable[None]]) -> FakeHandle:
        handle = FakeHandle(interval, callback)
        self.timers.append(handle)
        return handle

    def call_later(self, delay: float, callback: Callable[[], Awaitable[None]]) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.delayed.append(handle)
        return handle

    async def cancel_all(self) -> None:
        for handle in self.timers + self.delayed:
            handle.cancel()

    @property
    def active_timers(self) -> list[FakeHandle]:
        return [t for t in self.timers if t.active]

    async def fire_delayed(self) -> None:
        """Run every pending, uncancelled delayed task once."""
        pending, self.delayed = self.delayed, []
        for handle in pending:
            if not handle.cancelled:
                await handle.fire()
                handle.done = True


@pytest.fixture
def clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a scheduler that only runs callbacks on demand."""
    return ManualScheduler()


@pytest.fixture
def accumulator(clipboard: FakeClipboard, scheduler: ManualScheduler) -> Accumulator:
    """Create an accumulator with default flags over the fakes."""
    return Accumulator(clipboard, scheduler, AccumulatorState())


@pytest.fixture
def temp_socket_path(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary path for Unix domain socket testing.

    Kept short because AF_UNIX paths are limited to about 100 bytes.
    """
    socket_path = Path(os.environ.get("TMPDIR", "/tmp")) / f"clipaccum-{os.getpid()}-{tmp_path.name[-12:]}.sock"
    yield socket_path
    if socket_path.exists():
        socket_path.unlink()

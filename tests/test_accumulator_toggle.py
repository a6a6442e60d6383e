#!/usr/bin/env python3
"""
Tests for Accumulator start, enable/disable, clear, and paste handling.
"""
import pytest

from clipaccum.accumulator import Accumulator
from clipaccum.accumulator_state import AccumulatorState
from clipaccum.constants import PASTE_CLEAR_DELAY, POLL_INTERVAL


async def fill(accumulator, clipboard, *copies: str) -> None:
    """Copy each text externally and poll after each one."""
    for text in copies:
        clipboard.copy(text)
        await accumulator.poll()


@pytest.mark.asyncio
async def test_start_syncs_counter_and_polls(accumulator, clipboard, scheduler) -> None:
    """Test start ignores content already on the clipboard and starts polling."""
    clipboard.copy("already there")
    await accumulator.start()
    assert accumulator.state.last_seen_change_count == clipboard.change_count
    assert len(scheduler.active_timers) == 1
    assert scheduler.timers[0].delay == POLL_INTERVAL

    await scheduler.timers[0].fire()
    assert accumulator.buffer == ""


@pytest.mark.asyncio
async def test_start_disabled_does_not_poll(clipboard, scheduler) -> None:
    """Test a disabled accumulator starts without a poll timer."""
    accumulator = Accumulator(clipboard, scheduler, AccumulatorState(enabled=False))
    await accumulator.start()
    assert scheduler.active_timers == []
    assert accumulator.polling is False


@pytest.mark.asyncio
async def test_disable_resets_buffer_not_clipboard(accumulator, clipboard, scheduler) -> None:
    """Test disabling stops polling and empties only the buffer."""
    await accumulator.start()
    await fill(accumulator, clipboard, "A", "B")
    await accumulator.set_enabled(False)
    assert accumulator.buffer == ""
    assert accumulator.state.enabled is False
    assert clipboard.text == "A\nB"
    assert clipboard.clears == 0
    assert scheduler.active_timers == []


@pytest.mark.asyncio
async def test_disable_then_enable_starts_fresh(accumulator, clipboard, scheduler) -> None:
    """Test re-enabling after a disable accumulates from an empty buffer."""
    await accumulator.start()
    await fill(accumulator, clipboard, "A", "B")
    await accumulator.set_enabled(False)
    await accumulator.set_enabled(True)
    assert len(scheduler.active_timers) == 1

    await fill(accumulator, clipboard, "C")
    assert accumulator.buffer == "C"
    assert clipboard.text == "C"


@pytest.mark.asyncio
async def test_enable_twice_keeps_one_timer(accumulator, scheduler) -> None:
    """Test enabling an enabled accumulator does not add a timer."""
    await accumulator.start()
    await accumulator.set_enabled(True)
    assert len(scheduler.active_timers) == 1


@pytest.mark.asyncio
async def test_clear_empties_buffer_and_clipboard(accumulator, clipboard) -> None:
    """Test clear empties both and resyncs the counter."""
    await fill(accumulator, clipboard, "A", "B")
    await accumulator.clear()
    assert accumulator.buffer == ""
    assert clipboard.text is None
    assert clipboard.clears == 1
    assert accumulator.state.last_seen_change_count == clipboard.change_count

    await accumulator.poll()
    assert clipboard.writes == ["A", "A\nB"]


@pytest.mark.asyncio
async def test_paste_signal_schedules_clear(accumulator, clipboard, scheduler) -> None:
    """Test a paste with clear_on_paste clears after the delay."""
    accumulator.set_clear_on_paste(True)
    await fill(accumulator, clipboard, "A", "B")

    task = accumulator.handle_paste_signal()
    assert task is not None
    assert task.delay == PASTE_CLEAR_DELAY
    assert accumulator.buffer == "A\nB"

    await scheduler.fire_delayed()
    assert accumulator.buffer == ""
    assert clipboard.text is None
    assert clipboard.clears == 1


@pytest.mark.asyncio
async def test_paste_signal_without_clear_on_paste(accumulator, clipboard, scheduler) -> None:
    """Test a paste without clear_on_paste leaves the buffer alone."""
    await fill(accumulator, clipboard, "A", "B")
    assert accumulator.handle_paste_signal() is None
    await scheduler.fire_delayed()
    assert accumulator.buffer == "A\nB"
    assert clipboard.clears == 0


@pytest.mark.asyncio
async def test_paste_signal_while_disabled(accumulator, scheduler) -> None:
    """Test a paste while disabled schedules nothing."""
    accumulator.set_clear_on_paste(True)
    await accumulator.set_enabled(False)
    assert accumulator.handle_paste_signal() is None
    assert scheduler.delayed == []


@pytest.mark.asyncio
async def test_pending_clear_survives_disable(accumulator, clipboard, scheduler) -> None:
    """Test disabling does not retract a clear already scheduled."""
    accumulator.set_clear_on_paste(True)
    await fill(accumulator, clipboard, "A")
    accumulator.handle_paste_signal()
    await accumulator.set_enabled(False)

    await scheduler.fire_delayed()
    assert clipboard.clears == 1
    assert clipboard.text is None


@pytest.mark.asyncio
async def test_stop_cancels_pending_clear(accumulator, clipboard, scheduler) -> None:
    """Test shutdown cancels the poll timer and pending clears."""
    accumulator.set_clear_on_paste(True)
    await accumulator.start()
    await fill(accumulator, clipboard, "A")
    task = accumulator.handle_paste_signal()
    await accumulator.stop()
    assert task.cancelled is True
    assert accumulator.polling is False


def test_status_reports_flags_and_buffer(accumulator) -> None:
    """Test status snapshots the flags and buffer."""
    accumulator.state.buffer = "abc"
    accumulator.set_insert_newline(False)
    report = accumulator.status()
    assert report.enabled is True
    assert report.clear_on_paste is False
    assert report.insert_newline is False
    assert report.buffer == "abc"
    assert report.buffer_length == 3

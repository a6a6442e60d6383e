#!/usr/bin/env python3
"""
Accumulator state and echo detection.

Writing the merged buffer back to the clipboard bumps the clipboard change
counter, so the next poll sees a "change" that we authored ourselves.
Without tracking, that change would be appended to the buffer again and
every poll would grow it without bound.

The state tracks two values for loop prevention:
- buffer: the text we last wrote, compared against the clipboard payload
- last_seen_change_count: the counter value already handled

Critical ordering: last_seen_change_count must be re-read AFTER writing the
clipboard, never assumed from the value seen before the write.
"""
from dataclasses import dataclass


@dataclass
class AccumulatorState:
    """
    Flags and buffer owned by the accumulator.

    Attributes:
        enabled: Whether clipboard polling and accumulation are active.
        clear_on_paste: Whether a paste signal schedules a clear.
        insert_newline: Whether appended copies are separated by a newline.
        buffer: Accumulated text, always something we wrote or empty.
        last_seen_change_count: Clipboard change counter already handled.
    """

    enabled: bool = True
    clear_on_paste: bool = False
    insert_newline: bool = True
    buffer: str = ""
    last_seen_change_count: int = 0

    def has_changed(self, change_count: int) -> bool:
        """
        Check if the clipboard counter moved since the last handled change.

        Args:
            change_count: Current clipboard change counter.

        Returns:
            True if change_count differs from last_seen_change_count.
        """
        return change_count != self.last_seen_change_count

    def is_echo(self, payload: str) -> bool:
        """
        Check if payload is our own previous write.

        The comparison is on the whole payload: external content identical
        to the current buffer is treated as an echo as well.

        Args:
            payload: Text currently on the clipboard.

        Returns:
            True if payload equals the buffer exactly.
        """
        return payload == self.buffer

    def append(self, payload: str) -> str:
        """
        Append newly copied text to the buffer.

        The first copy into an empty buffer is taken as is, with no
        separator in front of it.

        Args:
            payload: Newly copied text.

        Returns:
            The updated buffer.
        """
        if not self.buffer:
            self.buffer = payload
        elif self.insert_newline:
            self.buffer += "\n" + payload
        else:
            self.buffer += payload
        return self.buffer

    def mark_seen(self, change_count: int) -> None:
        """
        Record a clipboard change counter as handled.

        Args:
            change_count: Counter value to remember.
        """
        self.last_seen_change_count = change_count

    def reset_buffer(self) -> None:
        """Drop the accumulated text without touching the flags."""
        self.buffer = ""

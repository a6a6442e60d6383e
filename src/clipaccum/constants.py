#!/usr/bin/env python3
"""Timing and retry constants for clipaccum.

These constants control how often the clipboard is polled, how long the
paste-clear waits for a paste to land, and how control clients and the X11
backend retry while their peers come up.
"""

# Interval between clipboard polls in seconds.
POLL_INTERVAL: float = 0.5

# Delay before clearing after a paste, so the paste reads the full buffer.
PASTE_CLEAR_DELAY: float = 0.2

# Timeout in seconds for clipboard reads when the owner is unresponsive.
CLIPBOARD_TIMEOUT: float = 2.0

# Control client retry parameters for exponential backoff.
# Initial delay between connection attempts in seconds.
CONNECT_INITIAL_WAIT: float = 0.1

# Maximum delay between connection attempts in seconds.
CONNECT_MAX_WAIT: float = 1.0

# Multiplier for exponential backoff (delay = initial * multiplier^attempt).
CONNECT_WAIT_MULTIPLIER: float = 2.0

# Connection attempts before the control client gives up.
CONNECT_ATTEMPTS: int = 5

# Attempts to open the X11 display before giving up.
DISPLAY_OPEN_ATTEMPTS: int = 3

# Fixed delay between X11 display open attempts in seconds.
DISPLAY_OPEN_WAIT: float = 0.5

#!/usr/bin/env python3
"""Control socket file utilities.

This module provides utility functions for managing the Unix domain socket
the daemon listens on for control commands, including:
- Checking socket state (active vs stale)
- Socket cleanup on shutdown
"""

from __future__ import annotations

import os
import socket
import sys


def check_socket_state(socket_path: str) -> None:
    """Check socket file state and handle stale sockets.

    If the socket file exists, attempts to connect to determine if another
    daemon is running. A refused connection means the file is stale and it
    is unlinked. A successful connection means the socket is in use.

    Args:
        socket_path: Path to the Unix domain socket file.

    Raises:
        SystemExit: If socket is in use by an active daemon or on other errors.
    """
    if not os.path.exists(socket_path):
        return

    test_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        test_socket.connect(socket_path)
        print(f"Error: Socket already in use by active daemon: {socket_path}",
            file=sys.stderr)
        sys.exit(1)
    except ConnectionRefusedError:
        os.unlink(socket_path)
    except OSError as e:
        print(f"Error: Cannot access socket {socket_path}: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        test_socket.close()


def cleanup_socket(socket_path: str) -> None:
    """Remove socket file on shutdown.

    Args:
        socket_path: Path to the Unix domain socket file to remove.
    """
    try:
        os.unlink(socket_path)
    except FileNotFoundError:
        pass

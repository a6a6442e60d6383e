#!/usr/bin/env python3
"""Control client with connection retry.

Sends a single command to a running daemon. Connection attempts are retried
with tenacity exponential backoff, bounded so a missing daemon is reported
quickly instead of waiting forever.
"""

from __future__ import annotations

import asyncio
import logging

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from clipaccum.constants import (
    CONNECT_ATTEMPTS,
    CONNECT_INITIAL_WAIT,
    CONNECT_MAX_WAIT,
    CONNECT_WAIT_MULTIPLIER,
)
from clipaccum.protocol import encode_message, read_message

logger = logging.getLogger(__name__)


@retry(
    wait=wait_exponential(
        multiplier=CONNECT_INITIAL_WAIT,
        exp_base=CONNECT_WAIT_MULTIPLIER,
        min=CONNECT_INITIAL_WAIT,
        max=CONNECT_MAX_WAIT,
    ),
    retry=retry_if_exception_type(ConnectionError),
    stop=stop_after_attempt(CONNECT_ATTEMPTS),
    reraise=True,
)
async def connect_to_daemon(
    socket_path: str,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to the daemon's control socket.

    Args:
        socket_path: Path to the Unix domain socket.

    Returns:
        Tuple of (StreamReader, StreamWriter) for the connection.

    Raises:
        ConnectionError: If every attempt fails (socket missing, refused, ...).
    """
    logger.debug("Connecting to daemon at %s", socket_path)
    try:
        return await asyncio.open_unix_connection(socket_path)
    except OSError as e:
        logger.debug("Connection to %s failed: %s", socket_path, e)
        raise ConnectionError(f"Failed to connect to {socket_path}: {e}") from e


async def send_command(socket_path: str, command: str) -> str:
    """Send one control command and return the daemon's response.

    Args:
        socket_path: Path to the Unix domain socket.
        command: Command text.

    Returns:
        The response text.

    Raises:
        ConnectionError: If the daemon cannot be reached.
        ProtocolError: If the response is malformed.
    """
    reader, writer = await connect_to_daemon(socket_path)
    try:
        writer.write(encode_message(command))
        await writer.drain()
        return await read_message(reader)
    finally:
        writer.close()
        await writer.wait_closed()

#!/usr/bin/env python3
"""Control server.

Listens on a Unix domain socket and answers one netstring-framed command
per connection. A broken connection is logged and closed; it never stops
the daemon.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from clipaccum.control import dispatch_command
from clipaccum.control_socket import check_socket_state
from clipaccum.protocol import ProtocolError, encode_message, read_message

if TYPE_CHECKING:
    from clipaccum.accumulator import Accumulator

logger = logging.getLogger(__name__)


async def handle_control_connection(
    accumulator: Accumulator,
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    on_quit: Callable[[], None] | None = None,
) -> None:
    """Read one command, run it, write the response and close.

    Args:
        accumulator: The accumulator commands operate on.
        reader: The asyncio StreamReader for the connection.
        writer: The asyncio StreamWriter for the connection.
        on_quit: Called when a client sends "quit".
    """
    try:
        command = await read_message(reader)
        response = await dispatch_command(accumulator, command, on_quit)
        writer.write(encode_message(response))
        await writer.drain()
    except ProtocolError as e:
        logger.warning("Control protocol error: %s", e)
    except ConnectionError as e:
        logger.warning("Control connection error: %s", e)
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except ConnectionError:
            pass


async def start_control_server(
    socket_path: str,
    accumulator: Accumulator,
    on_quit: Callable[[], None] | None = None,
) -> asyncio.AbstractServer:
    """Prepare the socket path and start accepting control connections.

    Args:
        socket_path: Path to the Unix domain socket to listen on.
        accumulator: The accumulator commands operate on.
        on_quit: Called when a client sends "quit".

    Returns:
        The listening server.

    Raises:
        SystemExit: If another daemon already listens on socket_path.
    """
    check_socket_state(socket_path)
    server = await asyncio.start_unix_server(
        lambda r, w: handle_control_connection(accumulator, r, w, on_quit),
        path=socket_path,
    )
    logger.debug("Control socket listening on %s", socket_path)
    return server

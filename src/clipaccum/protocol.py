#!/usr/bin/env python3
"""
Netstring framing for control commands and responses.

Each control connection carries exactly one request and one response, both
framed as netstrings: <length>:<content>, where length is ASCII decimal
digits, followed by a colon, the raw content bytes, and a trailing comma.

Example: "6:status," is the request for a status report.

Content is UTF-8 text, limited to 10 MB so that a status report with a
large buffer still fits.
"""
import asyncio

# Maximum size of a request or response in bytes (10 MB).
MAX_CONTENT_SIZE: int = 10485760

# Maximum digits in the length field (8 digits allows up to 99999999 bytes).
MAX_LENGTH_DIGITS: int = 8


class ProtocolError(Exception):
    """
    Exception raised for malformed control frames.

    Raised when netstring parsing fails due to invalid format, size
    violations, undecodable text, or a connection closed mid-frame.
    """


def encode_netstring(data: bytes) -> bytes:
    """
    Encode raw bytes as a netstring.

    Raises:
        ProtocolError: If data exceeds MAX_CONTENT_SIZE.
    """
    if len(data) > MAX_CONTENT_SIZE:
        raise ProtocolError(f"Content size {len(data)} exceeds limit {MAX_CONTENT_SIZE}")
    return f"{len(data)}:".encode("ascii") + data + b","


def encode_message(text: str) -> bytes:
    """Encode a text message as a UTF-8 netstring."""
    return encode_netstring(text.encode("utf-8"))


async def read_netstring(reader: asyncio.StreamReader) -> bytes:
    """
    Read and decode a netstring from an async stream.

    Args:
        reader: asyncio StreamReader to read from.

    Returns:
        Decoded content bytes.

    Raises:
        ProtocolError: On invalid format, size violation, or connection closed.
    """
    length_bytes = b""
    while len(length_bytes) < MAX_LENGTH_DIGITS + 1:
        byte = await reader.read(1)
        if not byte:
            raise ProtocolError("Connection closed while reading length field")
        if byte == b":":
            break
        if not byte.isdigit():
            raise ProtocolError(f"Invalid character in length field: {byte!r}")
        length_bytes += byte
    else:
        raise ProtocolError("Length field exceeds maximum digits")
    if not length_bytes:
        raise ProtocolError("Empty length field")
    length = int(length_bytes.decode("ascii"))
    if length > MAX_CONTENT_SIZE:
        raise ProtocolError(f"Content size {length} exceeds limit {MAX_CONTENT_SIZE}")
    try:
        content = await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise ProtocolError(f"Connection closed after {len(e.partial)} bytes") from e
    comma = await reader.read(1)
    if comma != b",":
        raise ProtocolError(f"Expected comma terminator, got {comma!r}")
    return content


async def read_message(reader: asyncio.StreamReader) -> str:
    """
    Read one netstring and decode it as UTF-8 text.

    Raises:
        ProtocolError: On framing errors or invalid UTF-8.
    """
    content = await read_netstring(reader)
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Message is not valid UTF-8: {e}") from e

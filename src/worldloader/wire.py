"""Framing for the client sync stream.

A sync packet is the world name followed by the world configuration:

    [u16 length][utf-8 name][u32 length][json WorldConfig]

All lengths are big-endian byte counts.
"""

import struct
from io import BytesIO
from typing import BinaryIO

from .config import WorldConfig
from .exceptions import StreamFormatError

_STRING_HEADER = struct.Struct(">H")
_BLOB_HEADER = struct.Struct(">I")


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise StreamFormatError(f"Stream truncated: wanted {size} bytes, got {got}")
    return data


def read_string(stream: BinaryIO) -> str:
    """Read a length-prefixed UTF-8 string.

    Raises:
        StreamFormatError: If the stream ends early or the bytes are not UTF-8.
    """
    (length,) = _STRING_HEADER.unpack(_read_exact(stream, _STRING_HEADER.size))
    raw = _read_exact(stream, length)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StreamFormatError(f"String is not valid UTF-8: {e}") from e


def write_string(stream: BinaryIO, value: str) -> None:
    """Write a length-prefixed UTF-8 string."""
    raw = value.encode("utf-8")
    if len(raw) > 0xFFFF:
        raise ValueError(f"String too long for stream: {len(raw)} bytes")
    stream.write(_STRING_HEADER.pack(len(raw)))
    stream.write(raw)


def read_blob(stream: BinaryIO) -> bytes:
    """Read a length-prefixed byte payload.

    Raises:
        StreamFormatError: If the stream ends early.
    """
    (length,) = _BLOB_HEADER.unpack(_read_exact(stream, _BLOB_HEADER.size))
    return _read_exact(stream, length)


def write_blob(stream: BinaryIO, payload: bytes) -> None:
    """Write a length-prefixed byte payload."""
    stream.write(_BLOB_HEADER.pack(len(payload)))
    stream.write(payload)


def encode_world_packet(world_name: str, config: WorldConfig) -> bytes:
    """Build the sync packet a server sends to a joining client.

    Args:
        world_name: Name the client should register the world under.
        config: The world's configuration, with resolved biome ids.

    Returns:
        Packet bytes ready to be read by a client load.
    """
    out = BytesIO()
    write_string(out, world_name)
    write_blob(out, config.model_dump_json().encode("utf-8"))
    return out.getvalue()

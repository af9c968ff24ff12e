"""
Timestamp tokens of the telemetry log.

Every frame in a .tlog is followed by an 8-byte microsecond timestamp.
Loggers disagree on its byte order and the file does not say which one was
used, so each token is read big-endian and byte-swapped when the result
lies in the future. A log recorded on a machine with a wrong clock can
defeat this check; such timestamps are passed through as decoded.
"""

import struct
import time
from typing import Optional


TIMESTAMP_SIZE = 8

_BIG_ENDIAN_U64 = struct.Struct(">Q")
_LITTLE_ENDIAN_U64 = struct.Struct("<Q")


def now_usecs() -> int:
    """Wall-clock time in microseconds, at millisecond resolution."""
    return int(time.time() * 1000) * 1000


def byteswap_u64(value: int) -> int:
    return _LITTLE_ENDIAN_U64.unpack(_BIG_ENDIAN_U64.pack(value))[0]


def decode_timestamp(raw: bytes, now_us: Optional[int] = None) -> int:
    """
    Decode one timestamp token.

    Args:
        raw: Exactly TIMESTAMP_SIZE bytes
        now_us: Reference "now" in microseconds (defaults to the wall clock)

    Returns:
        Timestamp in microseconds since the epoch
    """
    if len(raw) != TIMESTAMP_SIZE:
        raise ValueError(f"Timestamp token needs {TIMESTAMP_SIZE} bytes, got {len(raw)}")

    timestamp = _BIG_ENDIAN_U64.unpack(raw)[0]
    if now_us is None:
        now_us = now_usecs()
    if timestamp > now_us:
        timestamp = _LITTLE_ENDIAN_U64.unpack(raw)[0]
    return timestamp


def encode_timestamp(timestamp_us: int) -> bytes:
    """Big-endian token, as written by ground stations."""
    return _BIG_ENDIAN_U64.pack(timestamp_us)


def read_timestamp(stream, now_us: Optional[int] = None) -> Optional[int]:
    """Read and decode the next token; None when the stream ends first."""
    raw = stream.read(TIMESTAMP_SIZE)
    if len(raw) < TIMESTAMP_SIZE:
        return None
    return decode_timestamp(raw, now_us)

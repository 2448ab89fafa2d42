"""
Internal token policies shared by the decoders.
"""

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import IO, Optional, Union

logger = logging.getLogger(__name__)

UNDEFINED_PATTERN = re.compile(r"^-+$")
RFC3339_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2})(?::(\d{2})(?:\.(\d+))?)?"
    r"([Zz]|[+-]\d{2}:\d{2})$"
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

STATION_ID_LENGTH = 5

ByteSource = Union[bytes, bytearray, memoryview, IO[bytes]]


def is_undefined(token: str) -> bool:
    """Return True for the upstream "not reported" marker (one or more dashes)."""
    return bool(UNDEFINED_PATTERN.match(token))


def parse_float(token: str) -> Optional[float]:
    """Parse a float, returning None for unparseable or non-finite text."""
    try:
        value = float(token)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except (TypeError, ValueError):
        return None


def to_epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch for a timezone-aware datetime."""
    return (dt - EPOCH) // timedelta(milliseconds=1)


def parse_rfc3339_millis(text: str) -> int:
    """
    Convert RFC 3339 timestamp text to epoch milliseconds.

    Seconds and fractional seconds are optional, but an offset (``Z`` or
    ``+HH:MM``) is required. Fractions are cut to microseconds.

    Raises:
        ValueError: If the text is not a timestamp with an offset.
    """
    match = RFC3339_PATTERN.match(text.strip())
    if match is None:
        raise ValueError(f"Not an RFC 3339 timestamp: {text!r}")

    date, hours_minutes, seconds, fraction, offset = match.groups()
    normalized = f"{date}T{hours_minutes}:{seconds or '00'}"
    if fraction:
        normalized += "." + fraction[:6].ljust(6, "0")
    normalized += "+00:00" if offset in ("Z", "z") else offset

    # fromisoformat still rejects out-of-range fields such as month 13
    return to_epoch_millis(datetime.fromisoformat(normalized))


def pad_station_id(station: str) -> str:
    """Right-pad short station ids with underscores, as used in DWD file names."""
    return station.ljust(STATION_ID_LENGTH, "_")


def decode_text(payload: bytes) -> str:
    """Decode upstream text as UTF-8 (BOM allowed), falling back to Latin-1."""
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Payload is not valid UTF-8, decoding as Latin-1")
        return payload.decode("latin-1")


def read_bytes(source: ByteSource) -> bytes:
    """Read a byte payload from raw bytes or a binary file-like object."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    return source.read()

"""
Decoder for DWD POI weather reports (``{station}-BEOB.csv``).

The file is semicolon-delimited without quoting and is read positionally:

- row 0: property names (the first two columns are date and time)
- row 1: units, one per property
- row 2: German free-text descriptions, ignored
- rows 3+: ``dd.mm.yy;HH:MM;value;value;...`` in UTC

Values use a comma as decimal separator and one or more dashes for
"not reported".
"""

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import (
    MalformedRowError,
    MissingHeaderRowError,
    MissingUnitRowError,
    UnitCountMismatchError,
)
from .models import WeatherReport
from .utils import (
    ByteSource,
    decode_text,
    is_undefined,
    parse_float,
    read_bytes,
    to_epoch_millis,
)

logger = logging.getLogger(__name__)

DELIMITER = ";"
RESERVED_COLUMNS = 2  # date, time
TIMESTAMP_FORMAT = "%d.%m.%y %H:%M"
TIMESTAMP_KEY = "timestamp"


def _next_row(rows: Iterator[List[str]], missing_error: type) -> List[str]:
    try:
        row = next(rows)
    except StopIteration:
        raise missing_error() from None
    except csv.Error as e:
        raise MalformedRowError(f"{MalformedRowError.default_message} ({e})") from e
    if not row:
        raise missing_error()
    return row


def _fit_to_width(row: List[str], width: int) -> List[str]:
    """Ignore the empty field a trailing delimiter leaves behind."""
    if len(row) == width + 1 and row[-1] == "":
        return row[:-1]
    return row


def _parse_timestamp(date: str, time: str) -> Optional[int]:
    try:
        dt = datetime.strptime(f"{date.strip()} {time.strip()}", TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return to_epoch_millis(dt.replace(tzinfo=timezone.utc))


def _parse_value(raw: str) -> Any:
    value = parse_float(raw.replace(",", "."))
    return raw if value is None else value


def _parse_row(
    row: List[str], properties: List[str], width: int
) -> Optional[Dict[str, Any]]:
    row = _fit_to_width(row, width)
    if len(row) != width:
        return None

    timestamp = _parse_timestamp(row[0], row[1])
    if timestamp is None:
        return None

    record: Dict[str, Any] = {TIMESTAMP_KEY: timestamp}
    for prop, raw in zip(properties, row[RESERVED_COLUMNS:]):
        if not raw.strip() or is_undefined(raw.strip()):
            continue
        record[prop] = _parse_value(raw)
    return record


def decode_weather_report(source: ByteSource) -> WeatherReport:
    """
    Decode a POI weather report.

    Rows with an unparseable date/time or the wrong number of columns are
    dropped. Values that are not numbers are kept as text.

    Args:
        source: CSV content as bytes or a binary stream

    Returns:
        WeatherReport with units and one record per usable row

    Raises:
        MissingHeaderRowError: If there is no property row
        MissingUnitRowError: If there is no unit row
        UnitCountMismatchError: If units and properties differ in number
        MalformedRowError: If the property or unit row cannot be read
    """
    text = decode_text(read_bytes(source))
    rows = csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER)

    header = _next_row(rows, MissingHeaderRowError)
    if len(header) > RESERVED_COLUMNS and header[-1] == "":
        header = header[:-1]
    properties = header[RESERVED_COLUMNS:]
    width = len(properties) + RESERVED_COLUMNS

    unit_row = _fit_to_width(_next_row(rows, MissingUnitRowError), width)
    units = unit_row[RESERVED_COLUMNS:]
    if len(units) != len(properties):
        raise UnitCountMismatchError(
            f"{UnitCountMismatchError.default_message} "
            f"({len(properties)} properties, {len(units)} units)"
        )

    # free-text description row
    try:
        next(rows, None)
    except csv.Error as e:
        logger.debug(f"Unreadable description row: {e}")

    data = []
    dropped = 0
    while True:
        try:
            row = next(rows)
        except StopIteration:
            break
        except csv.Error as e:
            logger.debug(f"Dropping unreadable report row: {e}")
            dropped += 1
            continue

        record = _parse_row(row, properties, width)
        if record is None:
            if row:
                logger.debug(f"Dropping malformed report row: {row!r}")
                dropped += 1
            continue
        data.append(record)

    if dropped:
        logger.debug(f"Dropped {dropped} report rows")

    return WeatherReport(units=dict(zip(properties, units)), data=data)

"""
Decoder for the MOSMIX station catalog (``mosmix_stationskatalog.cfg``).

The catalog is one or more text tables separated by blank lines. Each table
starts with a title line and a column header line. Two revisions exist:

- whitespace-tokenized: every data line holds six tokens
  ``id icao name lat lon elevation``, optionally below a six-column
  underline;
- fixed-width: the third line is a rule line (runs of ``-`` or ``=``) whose
  ten run lengths give the column widths.

The layout is detected per table from the segment count of the rule line,
so catalogs mixing both revisions decode as well.
"""

import logging
import re
from enum import Enum
from typing import List, Optional, Sequence, Union

from .models import StationRecord
from .utils import decode_text, is_undefined, parse_float, parse_int

logger = logging.getLogger(__name__)

TABLE_SEPARATOR = re.compile(r"\n[ \t]*\n")
RULE_LINE = re.compile(r"^[\s=-]*[=-][\s=-]*$")

HEADER_LINES = 2
WHITESPACE_FIELDS = 6
FIXED_WIDTH_FIELDS = 10


class CatalogLayout(Enum):
    WHITESPACE = "whitespace"
    UNDERLINED_WHITESPACE = "underlined_whitespace"
    FIXED_WIDTH = "fixed_width"
    UNSUPPORTED = "unsupported"


def decode_station_catalog(text: Union[str, bytes]) -> List[StationRecord]:
    """
    Decode a station catalog into station records, in source order.

    Never raises for malformed content: lines with the wrong shape are
    dropped, tables with an unusable rule line are skipped and unparseable
    numbers default to zero.

    Args:
        text: Full catalog text, or its raw bytes (UTF-8 or Latin-1)

    Returns:
        List of StationRecord objects (empty if nothing could be decoded)
    """
    if isinstance(text, (bytes, bytearray)):
        text = decode_text(bytes(text))
    text = text.replace("\r\n", "\n")

    stations: List[StationRecord] = []
    for table_idx, table in enumerate(TABLE_SEPARATOR.split(text)):
        lines = table.strip("\n").split("\n")
        layout = detect_layout(lines)

        if layout is CatalogLayout.FIXED_WIDTH:
            widths = [len(run) for run in lines[HEADER_LINES].split()]
            stations.extend(
                _parse_fixed_width_table(lines[HEADER_LINES + 1 :], widths)
            )
        elif layout is CatalogLayout.UNDERLINED_WHITESPACE:
            stations.extend(_parse_whitespace_table(lines[HEADER_LINES + 1 :]))
        elif layout is CatalogLayout.WHITESPACE:
            stations.extend(_parse_whitespace_table(lines[HEADER_LINES:]))
        else:
            first_row = lines[HEADER_LINES + 1] if len(lines) > HEADER_LINES + 1 else ""
            logger.warning(
                f"Skipping catalog table {table_idx} ({lines[0]!r}): rule line has "
                f"{len(lines[HEADER_LINES].split())} columns, expected "
                f"{WHITESPACE_FIELDS} or {FIXED_WIDTH_FIELDS}; first row {first_row!r}"
            )

    logger.debug(f"Decoded {len(stations)} stations from catalog")
    return stations


def detect_layout(lines: Sequence[str]) -> CatalogLayout:
    """Pick the table layout from the segment count of the third line's rule."""
    if len(lines) <= HEADER_LINES or not RULE_LINE.match(lines[HEADER_LINES]):
        return CatalogLayout.WHITESPACE

    segments = len(lines[HEADER_LINES].split())
    if segments == FIXED_WIDTH_FIELDS:
        return CatalogLayout.FIXED_WIDTH
    if segments == WHITESPACE_FIELDS:
        return CatalogLayout.UNDERLINED_WHITESPACE
    return CatalogLayout.UNSUPPORTED


def _optional_text(value: str) -> Optional[str]:
    if not value or is_undefined(value):
        return None
    return value


def _parse_whitespace_table(rows: Sequence[str]) -> List[StationRecord]:
    stations = []
    for row in rows:
        tokens = row.split()
        if len(tokens) != WHITESPACE_FIELDS:
            if tokens:
                logger.debug(f"Dropping catalog line with {len(tokens)} tokens: {row!r}")
            continue

        station_id, icao, name, lat, lon, elevation = tokens
        stations.append(
            StationRecord(
                id=station_id,
                icao=_optional_text(icao),
                name=name,
                latitude=parse_float(lat) or 0.0,
                longitude=parse_float(lon) or 0.0,
                elevation=parse_int(elevation) or 0,
            )
        )
    return stations


def _slice_fixed_width(row: str, widths: Sequence[int]) -> Optional[List[str]]:
    """Cut a line into fields, each followed by one separator column."""
    fields = []
    offset = 0
    for width in widths:
        end = offset + width
        if end > len(row):
            return None
        fields.append(row[offset:end].strip())
        offset = end + 1
    return fields


def _parse_fixed_width_table(
    rows: Sequence[str], widths: Sequence[int]
) -> List[StationRecord]:
    stations = []
    for row in rows:
        fields = _slice_fixed_width(row, widths)
        if fields is None:
            if row.strip():
                logger.debug(f"Dropping short catalog line: {row!r}")
            continue

        (
            cluster_id,
            coefficient,
            station_id,
            icao,
            name,
            lat,
            lon,
            elevation,
            model_height,
            station_type,
        ) = fields

        coefficient_value = parse_int(coefficient)
        if coefficient_value is not None and coefficient_value < 0:
            coefficient_value = None

        stations.append(
            StationRecord(
                id=station_id,
                icao=_optional_text(icao),
                name=name,
                latitude=parse_float(lat) or 0.0,
                longitude=parse_float(lon) or 0.0,
                elevation=parse_int(elevation) or 0,
                cluster_id=parse_int(cluster_id) or 0,
                coefficient=coefficient_value,
                model_height=parse_int(model_height),
                station_type=station_type,
            )
        )
    return stations

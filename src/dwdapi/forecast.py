"""
Decoder for MOSMIX point forecasts.

DWD publishes one KMZ archive per station; its sole entry is a KML document
with two parts:

- ``Document/ExtendedData/ProductDefinition``: issuer, generating process,
  issue time, referenced model runs and the list of forecast time steps;
- ``Document/Placemark``: the station name, description, coordinates and one
  ``Forecast`` element per parameter holding whitespace-separated values,
  one per time step.

The decoder turns this into a ``ForecastDocument`` whose series are keyed by
the canonical names from :mod:`dwdapi.elements`.
"""

import io
import logging
import xml.etree.ElementTree as ET
import zipfile
import zlib
from typing import Dict, List, Optional

from .elements import TIME_STEPS_KEY, canonical_key
from .exceptions import (
    BadZipFileError,
    InvalidDocumentError,
    InvalidIssueTimeError,
    NoZipEntryError,
)
from .models import ForecastDocument, ForecastReferenceModel
from .utils import ByteSource, parse_float, parse_rfc3339_millis, read_bytes

logger = logging.getLogger(__name__)


def _local_name(name: str) -> str:
    return name.rsplit("}", 1)[-1]


def _strip_namespaces(root: ET.Element) -> None:
    """Drop namespace prefixes from tags and attribute names, in place."""
    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = _local_name(element.tag)
        if element.attrib:
            attrib = {_local_name(k): v for k, v in element.attrib.items()}
            element.attrib.clear()
            element.attrib.update(attrib)


def _child(parent: ET.Element, tag: str) -> ET.Element:
    element = parent.find(tag)
    if element is None:
        raise InvalidDocumentError(
            f"Couldn't read KML document (missing <{tag}> in <{parent.tag}>)"
        )
    return element


def _field(parent: ET.Element, name: str, default: Optional[str] = None) -> str:
    """Read a single-valued field given either as attribute or child element."""
    if name in parent.attrib:
        return parent.attrib[name].strip()
    element = parent.find(name)
    if element is not None:
        return (element.text or "").strip()
    if default is not None:
        return default
    raise InvalidDocumentError(
        f"Couldn't read KML document (missing {name} in <{parent.tag}>)"
    )


def _timestamp_or_zero(text: str) -> int:
    try:
        return parse_rfc3339_millis(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp {text!r}, using epoch 0")
        return 0


def _parse_values(raw: str) -> List[Optional[float]]:
    # non-numeric tokens such as "-" are the upstream's inline missing marker
    return [parse_float(token) for token in raw.split()]


def _build_series(
    forecasts: List[ET.Element], time_steps: List[str]
) -> Dict[str, List[Optional[float]]]:
    steps = [float(_timestamp_or_zero(step)) for step in time_steps]
    n_steps = len(steps)

    series: Dict[str, List[Optional[float]]] = {TIME_STEPS_KEY: steps}
    for forecast in forecasts:
        element_name = _field(forecast, "elementName", default="")
        values = _parse_values(_field(forecast, "value", default=""))

        if len(values) != n_steps:
            logger.debug(
                f"Dropping element {element_name!r}: {len(values)} values "
                f"for {n_steps} time steps"
            )
            continue

        key = canonical_key(element_name)
        if key is None:
            logger.debug(f"Dropping unmapped element {element_name!r}")
            continue

        series[key] = values

    return series


def decode_forecast(source: ByteSource) -> ForecastDocument:
    """
    Decode one MOSMIX KML document.

    Args:
        source: The KML document as bytes or a binary stream

    Returns:
        ForecastDocument with one series per known, complete element

    Raises:
        InvalidDocumentError: If the XML is unreadable or required parts are missing
        InvalidIssueTimeError: If the issue time is not an RFC 3339 timestamp
    """
    try:
        root = ET.fromstring(read_bytes(source))
    except ET.ParseError as e:
        raise InvalidDocumentError(f"Couldn't read KML document ({e})") from e

    _strip_namespaces(root)

    document = _child(root, "Document")
    product = _child(_child(document, "ExtendedData"), "ProductDefinition")
    placemark = _child(document, "Placemark")

    issue_time_text = _field(product, "IssueTime")
    try:
        issue_time = parse_rfc3339_millis(issue_time_text)
    except ValueError as e:
        raise InvalidIssueTimeError(
            f"Couldn't parse issue-time {issue_time_text!r} ({e})"
        ) from e

    reference_models = [
        ForecastReferenceModel(
            name=_field(model, "name"),
            reference_time=_timestamp_or_zero(_field(model, "referenceTime")),
        )
        for model in _child(product, "ReferencedModel").findall("Model")
    ]

    time_steps = [
        (step.text or "").strip()
        for step in _child(product, "ForecastTimeSteps").findall("TimeStep")
    ]

    point = _child(placemark, "Point")
    forecasts = _child(placemark, "ExtendedData").findall("Forecast")
    series = _build_series(forecasts, time_steps)

    return ForecastDocument(
        name=_field(placemark, "name"),
        description=_field(placemark, "description"),
        coordinates=_field(point, "coordinates", default=""),
        issuer=_field(product, "Issuer"),
        generating_process=_field(product, "GeneratingProcess"),
        issue_time=issue_time,
        reference_models=reference_models,
        time_steps_count=len(time_steps),
        series=series,
    )


def decode_kmz(data: bytes) -> ForecastDocument:
    """
    Unpack a KMZ archive and decode the KML document it holds.

    Raises:
        BadZipFileError: If the payload is not a zip archive
        NoZipEntryError: If the archive is empty or its entry unreadable
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise BadZipFileError() from e

    with archive:
        entries = archive.infolist()
        if not entries:
            raise NoZipEntryError()
        try:
            with archive.open(entries[0]) as kml:
                return decode_forecast(kml)
        except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError) as e:
            raise NoZipEntryError(f"Couldn't read forecast zip entry ({e})") from e

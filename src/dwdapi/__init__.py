"""
Python client for DWD (Deutscher Wetterdienst) open weather data.

Decode MOSMIX station catalogs, MOSMIX point forecasts and POI observation
reports into uniform, JSON-ready structures.
"""

try:
    from importlib import metadata

    __version__ = metadata.version(__name__)
except Exception:
    __version__ = "unknown"

from .client import DWDClient
from .config import ClientConfig
from .convenience import get_forecast, get_stations, get_weather_report
from .elements import ELEMENT_KEYS, TIME_STEPS_KEY, canonical_key
from .exceptions import (
    BadZipFileError,
    DWDConnectionError,
    DWDError,
    DWDNotFoundError,
    DWDStructuralError,
    InvalidDocumentError,
    InvalidIssueTimeError,
    MalformedRowError,
    MissingHeaderRowError,
    MissingUnitRowError,
    NoForecastError,
    NoReportError,
    NoStationListingError,
    NoZipEntryError,
    UnitCountMismatchError,
)
from .forecast import decode_forecast, decode_kmz
from .models import ForecastDocument, ForecastReferenceModel, StationRecord, WeatherReport
from .report import decode_weather_report
from .stations import CatalogLayout, decode_station_catalog
from .sync import get_forecast_sync, get_stations_sync, get_weather_report_sync
from .utils import is_undefined

__all__ = [
    # Client
    "DWDClient",
    "ClientConfig",
    # Decoders
    "decode_station_catalog",
    "decode_forecast",
    "decode_kmz",
    "decode_weather_report",
    "CatalogLayout",
    "is_undefined",
    # Element table
    "ELEMENT_KEYS",
    "TIME_STEPS_KEY",
    "canonical_key",
    # Models
    "StationRecord",
    "ForecastDocument",
    "ForecastReferenceModel",
    "WeatherReport",
    # Convenience
    "get_stations",
    "get_forecast",
    "get_weather_report",
    "get_stations_sync",
    "get_forecast_sync",
    "get_weather_report_sync",
    # Exceptions
    "DWDError",
    "DWDConnectionError",
    "DWDNotFoundError",
    "DWDStructuralError",
    "NoStationListingError",
    "NoForecastError",
    "NoReportError",
    "MissingHeaderRowError",
    "MissingUnitRowError",
    "UnitCountMismatchError",
    "MalformedRowError",
    "BadZipFileError",
    "NoZipEntryError",
    "InvalidDocumentError",
    "InvalidIssueTimeError",
]

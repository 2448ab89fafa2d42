"""
Data models for decoded DWD station catalogs, forecasts and weather reports.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .elements import TIME_STEPS_KEY


def _require_pandas() -> Any:
    try:
        import pandas as pd
    except ImportError:
        raise ImportError(
            "pandas is required for DataFrame conversion. Install with: pip install pandas"
        ) from None
    return pd


@dataclass(frozen=True)
class StationRecord:
    """One row of the MOSMIX station catalog."""

    id: str
    icao: Optional[str]
    name: str
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: int = 0
    # only present in the fixed-width catalog revision
    cluster_id: Optional[int] = None
    coefficient: Optional[int] = None
    model_height: Optional[int] = None
    station_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ForecastReferenceModel:
    """A numerical model run the forecast was derived from."""

    name: str
    reference_time: int  # epoch milliseconds, 0 if unknown


@dataclass(frozen=True)
class ForecastDocument:
    """
    One decoded MOSMIX forecast for a single station.

    ``series`` maps canonical keys to one value per time step. The
    ``"time_steps"`` entry holds the epoch-millisecond timestamps themselves,
    and every entry has exactly ``time_steps_count`` values.
    """

    name: str
    description: str
    coordinates: str
    issuer: str
    generating_process: str
    issue_time: int
    reference_models: List[ForecastReferenceModel] = field(default_factory=list)
    time_steps_count: int = 0
    series: Dict[str, List[Optional[float]]] = field(default_factory=dict)

    @property
    def time_steps(self) -> List[Optional[float]]:
        return self.series.get(TIME_STEPS_KEY, [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "coordinates": self.coordinates,
            "issuer": self.issuer,
            "generating_process": self.generating_process,
            "issue_time": self.issue_time,
            "reference_models": [asdict(m) for m in self.reference_models],
            "time_steps_count": self.time_steps_count,
            "series": {key: list(values) for key, values in self.series.items()},
        }

    def to_pandas(self) -> Any:
        """One row per time step, with a UTC ``time`` column in front."""
        pd = _require_pandas()

        columns: Dict[str, Any] = {
            "time": pd.to_datetime(self.time_steps, unit="ms", utc=True)
        }
        for key, values in self.series.items():
            if key != TIME_STEPS_KEY:
                columns[key] = values
        return pd.DataFrame(columns)


@dataclass(frozen=True)
class WeatherReport:
    """
    One decoded POI observation report.

    ``units`` maps each property of the header row to its unit. Each entry of
    ``data`` holds a ``timestamp`` (epoch milliseconds) plus the properties
    that were reported for it; unreported properties are absent.
    """

    units: Dict[str, str] = field(default_factory=dict)
    data: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "units": dict(self.units),
            "data": [dict(row) for row in self.data],
        }

    def to_pandas(self) -> Any:
        """One row per observation; unreported values become NaN."""
        pd = _require_pandas()

        df = pd.DataFrame(self.data, columns=["timestamp", *self.units.keys()])
        df["timestamp"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
        return df

"""
Client configuration for dwdapi.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_STATIONS_URL = (
    "https://www.dwd.de/DE/leistungen/met_verfahren_mosmix/"
    "mosmix_stationskatalog.cfg?view=nasPublication"
)
DEFAULT_FORECAST_URL = (
    "https://opendata.dwd.de/weather/local_forecasts/mos/MOSMIX_L/"
    "single_stations/{station}/kml/MOSMIX_L_LATEST_{station}.kmz"
)
DEFAULT_REPORT_URL = (
    "https://opendata.dwd.de/weather/weather_reports/poi/{station}-BEOB.csv"
)


@dataclass
class ClientConfig:
    """Settings for DWDClient.

    URL templates are formatted with a ``station`` keyword.
    """

    timeout: float = 30.0
    stations_url: str = DEFAULT_STATIONS_URL
    forecast_url_template: str = DEFAULT_FORECAST_URL
    report_url_template: str = DEFAULT_REPORT_URL
    decode_workers: int = 4
    user_agent: str = "dwdapi/0.1.0"

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.decode_workers < 1:
            raise ValueError(
                f"decode_workers must be at least 1, got {self.decode_workers}"
            )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ClientConfig":
        """
        Build a config from ``DWD_API_*`` environment variables.

        Variables from a ``.env`` file are loaded first without overriding
        the process environment.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        load_dotenv(dotenv_path)

        def _number(name: str, default: float, kind: type) -> float:
            raw = os.environ.get(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return kind(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {name}: {raw!r}") from None

        return cls(
            timeout=_number("DWD_API_TIMEOUT", cls.timeout, float),
            stations_url=os.environ.get("DWD_API_STATIONS_URL", DEFAULT_STATIONS_URL),
            forecast_url_template=os.environ.get(
                "DWD_API_FORECAST_URL", DEFAULT_FORECAST_URL
            ),
            report_url_template=os.environ.get("DWD_API_REPORT_URL", DEFAULT_REPORT_URL),
            decode_workers=int(_number("DWD_API_DECODE_WORKERS", cls.decode_workers, int)),
        )

"""
Async client for the DWD open data endpoints.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Type, TypeVar

import httpx

from .config import ClientConfig
from .exceptions import (
    DWDConnectionError,
    DWDNotFoundError,
    NoForecastError,
    NoReportError,
    NoStationListingError,
)
from .forecast import decode_kmz
from .models import ForecastDocument, StationRecord, WeatherReport
from .report import decode_weather_report
from .stations import decode_station_catalog
from .utils import pad_station_id

logger = logging.getLogger(__name__)

R = TypeVar("R")


class DWDClient:
    """
    Client for DWD station catalogs, MOSMIX forecasts and POI weather reports.

    Downloads happen on the event loop; decoding (zip, XML, CSV) runs in a
    bounded thread pool so large documents do not block other requests.

    Example:
        >>> async with DWDClient() as client:
        ...     forecast = await client.get_forecast("10865")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        timeout: Optional[float] = None,
    ):
        self.config = config or ClientConfig()
        self.timeout = timeout if timeout is not None else self.config.timeout
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
        )
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.decode_workers,
            thread_name_prefix="dwdapi-decode",
        )

    async def close(self) -> None:
        """Close the HTTP client and the decode pool."""
        await self._client.aclose()
        self._executor.shutdown(wait=False)

    async def __aenter__(self) -> "DWDClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _fetch(self, url: str, not_found: Type[DWDNotFoundError]) -> httpx.Response:
        """GET a resource, mapping transport and status failures to DWD errors."""
        logger.debug(f"Fetching {url}")
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response

        except httpx.TimeoutException as e:
            raise DWDConnectionError(f"Request timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise not_found() from e
            elif e.response.status_code == 429:
                raise DWDConnectionError("Rate limit exceeded") from e
            elif e.response.status_code >= 500:
                raise DWDConnectionError("DWD service temporarily unavailable") from e
            else:
                raise DWDConnectionError(
                    f"HTTP error {e.response.status_code}: {e}"
                ) from e
        except httpx.RequestError as e:
            raise DWDConnectionError(f"Network error: {e}") from e

    async def _decode(self, decoder: Callable[..., R], *args: Any) -> R:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, functools.partial(decoder, *args)
        )

    def forecast_url(self, station: str) -> str:
        return self.config.forecast_url_template.format(station=station)

    def report_url(self, station: str) -> str:
        return self.config.report_url_template.format(station=pad_station_id(station))

    async def get_stations(self) -> List[StationRecord]:
        """
        Get the MOSMIX station catalog.

        Returns:
            List of StationRecord objects in catalog order

        Raises:
            NoStationListingError: If the catalog is not published
            DWDConnectionError: On network or server failures
        """
        response = await self._fetch(self.config.stations_url, NoStationListingError)
        return await self._decode(decode_station_catalog, response.content)

    async def get_forecast(self, station: str) -> ForecastDocument:
        """
        Get the latest MOSMIX_L forecast for a station.

        Args:
            station: MOSMIX station id (e.g., '10865' or 'P0489')

        Raises:
            NoForecastError: If no forecast exists for the station
            DWDStructuralError: If the KMZ archive or KML document is unusable
            DWDConnectionError: On network or server failures
        """
        response = await self._fetch(self.forecast_url(station), NoForecastError)
        return await self._decode(decode_kmz, response.content)

    async def get_weather_report(self, station: str) -> WeatherReport:
        """
        Get the latest POI observation report for a station.

        Args:
            station: Station id; ids shorter than 5 characters are padded with '_'

        Raises:
            NoReportError: If no report exists for the station
            DWDStructuralError: If the CSV lacks its header or unit rows
            DWDConnectionError: On network or server failures
        """
        response = await self._fetch(self.report_url(station), NoReportError)
        return await self._decode(decode_weather_report, response.content)

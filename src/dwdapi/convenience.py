"""
Convenience functions for one-off DWD requests.

Each function uses the given client or, if none is passed, a temporary
DWDClient configured from the environment that is closed afterwards.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from .client import DWDClient
from .config import ClientConfig
from .models import ForecastDocument, StationRecord, WeatherReport


@asynccontextmanager
async def _borrow_client(client: Optional[DWDClient]) -> AsyncIterator[DWDClient]:
    if client is not None:
        yield client
        return

    temp_client = DWDClient(ClientConfig.from_env())
    try:
        yield temp_client
    finally:
        await temp_client.close()


async def get_stations(client: Optional[DWDClient] = None) -> List[StationRecord]:
    """
    Get all MOSMIX stations.

    Args:
        client: Optional DWDClient instance

    Returns:
        List of StationRecord objects

    Examples:
        >>> stations = await get_stations()
        >>> berlin = [s for s in stations if s.icao == "EDDB"]
    """
    async with _borrow_client(client) as c:
        return await c.get_stations()


async def get_forecast(
    station: str, client: Optional[DWDClient] = None
) -> ForecastDocument:
    """
    Get the latest MOSMIX_L forecast for a station.

    Args:
        station: MOSMIX station id (e.g., '10865')
        client: Optional DWDClient instance

    Examples:
        >>> forecast = await get_forecast("10865")
        >>> df = forecast.to_pandas()
    """
    async with _borrow_client(client) as c:
        return await c.get_forecast(station)


async def get_weather_report(
    station: str, client: Optional[DWDClient] = None
) -> WeatherReport:
    """
    Get the latest POI observation report for a station.

    Args:
        station: Station id (e.g., '10865'); short ids are padded with '_'
        client: Optional DWDClient instance
    """
    async with _borrow_client(client) as c:
        return await c.get_weather_report(station)

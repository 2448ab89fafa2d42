"""
Synchronous wrapper functions for dwdapi.

This module provides blocking versions of the convenience functions for
scripts and notebooks that do not run an event loop.

Usage:
    # Instead of this async code:
    async with DWDClient() as client:
        forecast = await client.get_forecast("10865")

    # Use this sync code:
    from dwdapi.sync import get_forecast_sync
    forecast = get_forecast_sync("10865")
"""

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, TypeVar

from .convenience import get_forecast, get_stations, get_weather_report

if TYPE_CHECKING:
    from .client import DWDClient
    from .models import ForecastDocument, StationRecord, WeatherReport

R = TypeVar("R")


class AsyncSyncBridge:
    """Runs async functions to completion from synchronous code."""

    @staticmethod
    def run_async(
        async_fn: Callable[..., Awaitable[R]],
        args: tuple = (),
        kwargs: Optional[dict] = None,
    ) -> R:
        """Run an async function synchronously.

        Args:
            async_fn: Async function to run
            args: Positional arguments for the function
            kwargs: Keyword arguments for the function

        Returns:
            Result of running the async function

        Raises:
            RuntimeError: If called from within an existing event loop
        """
        if kwargs is None:
            kwargs = {}

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot use sync version from within an existing asyncio event loop. "
                "Use the async version instead."
            )

        return asyncio.run(async_fn(*args, **kwargs))


def get_stations_sync(client: Optional["DWDClient"] = None) -> List["StationRecord"]:
    """Synchronous version of get_stations.

    Examples:
        >>> stations = get_stations_sync()
        >>> len(stations) > 0
        True
    """
    return AsyncSyncBridge.run_async(get_stations, kwargs={"client": client})


def get_forecast_sync(
    station: str, client: Optional["DWDClient"] = None
) -> "ForecastDocument":
    """Synchronous version of get_forecast."""
    return AsyncSyncBridge.run_async(
        get_forecast, args=(station,), kwargs={"client": client}
    )


def get_weather_report_sync(
    station: str, client: Optional["DWDClient"] = None
) -> "WeatherReport":
    """Synchronous version of get_weather_report.

    Args:
        station: Station id (e.g., '10865')
        client: DWDClient instance. If not provided, creates temporary client
    """
    return AsyncSyncBridge.run_async(
        get_weather_report, args=(station,), kwargs={"client": client}
    )

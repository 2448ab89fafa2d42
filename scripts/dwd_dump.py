#!/usr/bin/env python3
"""
Fetch or decode DWD data and print the normalized JSON.

Examples:
    python scripts/dwd_dump.py stations
    python scripts/dwd_dump.py forecast 10865
    python scripts/dwd_dump.py report 10865 --file 10865-BEOB.csv
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from dwdapi import (
    ClientConfig,
    DWDClient,
    DWDError,
    decode_kmz,
    decode_station_catalog,
    decode_weather_report,
)

logger = logging.getLogger("dwd_dump")


def decode_file(kind: str, path: Path) -> Any:
    """Decode a previously downloaded file instead of fetching it."""
    if kind == "stations":
        return [s.to_dict() for s in decode_station_catalog(path.read_bytes())]
    if kind == "forecast":
        return decode_kmz(path.read_bytes()).to_dict()
    return decode_weather_report(path.read_bytes()).to_dict()


async def fetch(kind: str, station: Optional[str], config: ClientConfig) -> Any:
    async with DWDClient(config) as client:
        if kind == "stations":
            return [s.to_dict() for s in await client.get_stations()]
        if kind == "forecast":
            return (await client.get_forecast(station)).to_dict()
        return (await client.get_weather_report(station)).to_dict()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("kind", choices=["stations", "forecast", "report"])
    parser.add_argument("station", nargs="?", help="Station id (forecast/report)")
    parser.add_argument("--file", type=Path, help="Decode a local file instead")
    parser.add_argument("--env-file", help="Path to a .env file with DWD_API_* settings")
    parser.add_argument("--indent", type=int, default=2)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.kind != "stations" and not args.station and not args.file:
        parser.error(f"{args.kind} requires a station id")

    try:
        if args.file:
            result = decode_file(args.kind, args.file)
        else:
            config = ClientConfig.from_env(args.env_file)
            result = asyncio.run(fetch(args.kind, args.station, config))
    except DWDError as e:
        logger.error(f"{e.kind}: {e}")
        return 1

    json.dump(result, sys.stdout, indent=args.indent, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

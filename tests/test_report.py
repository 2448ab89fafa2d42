"""
Tests for the POI weather report decoder.
"""

import io
from datetime import datetime, timezone

import pytest

from dwdapi.exceptions import (
    DWDStructuralError,
    MalformedRowError,
    MissingHeaderRowError,
    MissingUnitRowError,
    UnitCountMismatchError,
)
from dwdapi.models import WeatherReport
from dwdapi.report import decode_weather_report

REPORT = (
    "Parameter description;Parameter description;cloud_cover_total;"
    "dry_bulb_temperature_at_2_meter_above_ground;present_weather;maximum_wind_speed_last_hour\n"
    "Unit;;%;Grad C;CODE_TABLE;km/h\n"
    "Beschreibung;Beschreibung;Wolkenbedeckung;Temperatur (2m);aktuelles Wetter;Windspitze\n"
    "19.10.26;12:00;100;12,5;----;n/a\n"
    "19.10.26;11:00;---;11,9;2;20\n"
    "bad;row;1;2;3;4\n"
    "19.10.26;10:00;1;2\n"
).encode("utf-8")


def millis(*args):
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


class TestDecodeWeatherReport:
    """Test decoding of well-formed reports."""

    def test_units(self):
        report = decode_weather_report(REPORT)
        assert report.units == {
            "cloud_cover_total": "%",
            "dry_bulb_temperature_at_2_meter_above_ground": "Grad C",
            "present_weather": "CODE_TABLE",
            "maximum_wind_speed_last_hour": "km/h",
        }

    def test_rows(self):
        report = decode_weather_report(io.BytesIO(REPORT))

        assert report.data == [
            {
                "timestamp": millis(2026, 10, 19, 12, 0),
                "cloud_cover_total": 100.0,
                "dry_bulb_temperature_at_2_meter_above_ground": 12.5,
                "maximum_wind_speed_last_hour": "n/a",
            },
            {
                "timestamp": millis(2026, 10, 19, 11, 0),
                "dry_bulb_temperature_at_2_meter_above_ground": 11.9,
                "present_weather": 2.0,
                "maximum_wind_speed_last_hour": 20.0,
            },
        ]

    def test_minimal_report_with_trailing_delimiters(self):
        report = decode_weather_report(
            b"Date;Time;TTT;\n;;C;\nKommentar;;;\n01.01.23;00:00;12,5\n"
        )
        assert report.units == {"TTT": "C"}
        assert report.data == [{"timestamp": 1672531200000, "TTT": 12.5}]

    def test_undefined_values_are_absent(self):
        report = decode_weather_report(b"D;T;A;B\n;;x;y\n-;-;-;-\n01.01.23;00:00;----;1\n")
        (row,) = report.data
        assert "A" not in row
        assert row["B"] == 1.0

    def test_blank_values_are_absent(self):
        report = decode_weather_report(b"D;T;A;B\n;;x;y\n-\n01.01.23;00:00;;1\n")
        assert report.data == [{"timestamp": 1672531200000, "B": 1.0}]

    def test_only_headers(self):
        report = decode_weather_report(b"D;T;A\n;;x\ncomment\n")
        assert report == WeatherReport(units={"A": "x"}, data=[])

    def test_latin1_fallback(self):
        report = decode_weather_report("D;T;A\n;;Grad °C\n\n".encode("latin-1"))
        assert report.units == {"A": "Grad °C"}

    def test_crlf_line_endings(self):
        report = decode_weather_report(REPORT.replace(b"\n", b"\r\n"))
        assert len(report.data) == 2

    def test_decoding_is_idempotent(self):
        assert decode_weather_report(REPORT) == decode_weather_report(REPORT)


class TestDecodeWeatherReportErrors:
    """Test structural failures of the report decoder."""

    def test_empty_input(self):
        with pytest.raises(MissingHeaderRowError):
            decode_weather_report(b"")

    def test_missing_unit_row(self):
        with pytest.raises(MissingUnitRowError) as exc_info:
            decode_weather_report(b"Date;Time;TTT\n")
        assert exc_info.value.kind == "missing_unit_row"
        assert exc_info.value.status_code == 500

    def test_unit_count_mismatch(self):
        with pytest.raises(UnitCountMismatchError):
            decode_weather_report(b"Date;Time;A;B\n;;C\ncomment\n01.01.23;00:00;1;2\n")

    def test_too_many_units(self):
        with pytest.raises(UnitCountMismatchError):
            decode_weather_report(b"Date;Time;A\n;;C;D;E\n")

    def test_unreadable_header_row(self):
        huge_field = b"x" * 200_000
        with pytest.raises(MalformedRowError):
            decode_weather_report(b"Date;Time;" + huge_field + b"\n;;C\n")

    def test_errors_are_structural(self):
        for error in (
            MissingHeaderRowError,
            MissingUnitRowError,
            UnitCountMismatchError,
            MalformedRowError,
        ):
            assert issubclass(error, DWDStructuralError)

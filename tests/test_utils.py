"""
Tests for shared token policies, configuration and model serialization.
"""

import io

import pytest

from dwdapi.config import DEFAULT_REPORT_URL, ClientConfig
from dwdapi.models import ForecastDocument, ForecastReferenceModel, StationRecord, WeatherReport
from dwdapi.utils import (
    decode_text,
    is_undefined,
    pad_station_id,
    parse_float,
    parse_int,
    parse_rfc3339_millis,
    read_bytes,
)


class TestTokenPolicies:
    """Test the helpers every decoder shares."""

    @pytest.mark.parametrize("token", ["-", "--", "----------"])
    def test_undefined_sentinel(self, token):
        assert is_undefined(token)

    @pytest.mark.parametrize("token", ["", "-1", "- -", "0", "n/a", "-.-"])
    def test_defined_tokens(self, token):
        assert not is_undefined(token)

    def test_parse_float(self):
        assert parse_float("12.5") == 12.5
        assert parse_float(" -3 ") == -3.0
        assert parse_float("-") is None
        assert parse_float("nan") is None
        assert parse_float("inf") is None
        assert parse_float("12,5") is None

    def test_parse_int(self):
        assert parse_int("515") == 515
        assert parse_int("-4") == -4
        assert parse_int("51.5") is None
        assert parse_int("") is None

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2023-01-01T00:00Z", 1672531200000),
            ("2023-01-01T00:00:00Z", 1672531200000),
            ("2023-01-01T00:00:00.000Z", 1672531200000),
            ("2023-01-01T01:00:00+01:00", 1672531200000),
            ("2023-01-01T00:00:00.250Z", 1672531200250),
            ("1969-12-31T23:59:59Z", -1000),
            ("2023-01-01T00:00:00.5Z", 1672531200500),
            ("2023-01-01T00:00:00.123456789Z", 1672531200123),
            ("2023-01-01t00:00:00z", 1672531200000),
            ("2023-01-01 00:00:00-01:00", 1672534800000),
        ],
    )
    def test_parse_rfc3339_millis(self, text, expected):
        assert parse_rfc3339_millis(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "2023-01-01T00:00",
            "01.01.23 00:00",
            "now",
            "2023-01-01T06Z",
            "2023-W01-1T06:00Z",
            "20230101T060000Z",
            "2023-13-01T00:00Z",
            "2023-01-01T00:00:00.Z",
        ],
    )
    def test_parse_rfc3339_millis_rejects(self, text):
        with pytest.raises(ValueError):
            parse_rfc3339_millis(text)

    @pytest.mark.parametrize(
        "station, expected",
        [("1", "1____"), ("P1", "P1___"), ("10865", "10865"), ("123456", "123456")],
    )
    def test_pad_station_id(self, station, expected):
        assert pad_station_id(station) == expected

    @pytest.mark.parametrize(
        "payload",
        ["MÜNCHEN".encode("utf-8"), "MÜNCHEN".encode("utf-8-sig"), "MÜNCHEN".encode("latin-1")],
    )
    def test_decode_text(self, payload):
        assert decode_text(payload) == "MÜNCHEN"

    def test_read_bytes(self):
        assert read_bytes(b"abc") == b"abc"
        assert read_bytes(bytearray(b"abc")) == b"abc"
        assert read_bytes(io.BytesIO(b"abc")) == b"abc"


class TestClientConfig:
    """Test configuration defaults and environment loading."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.timeout == 30.0
        assert config.decode_workers == 4
        assert config.report_url_template == DEFAULT_REPORT_URL

    @pytest.mark.parametrize("kwargs", [{"timeout": 0}, {"decode_workers": 0}])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ClientConfig(**kwargs)

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DWD_API_TIMEOUT", "12.5")
        monkeypatch.setenv("DWD_API_DECODE_WORKERS", "2")
        monkeypatch.setenv("DWD_API_REPORT_URL", "http://localhost/{station}.csv")
        monkeypatch.delenv("DWD_API_STATIONS_URL", raising=False)

        config = ClientConfig.from_env(str(tmp_path / "missing.env"))

        assert config.timeout == 12.5
        assert config.decode_workers == 2
        assert config.report_url_template == "http://localhost/{station}.csv"
        assert config.stations_url.startswith("https://www.dwd.de/")

    def test_from_env_file(self, monkeypatch, tmp_path):
        # register the variable so monkeypatch removes what the .env file sets
        monkeypatch.setenv("DWD_API_DECODE_WORKERS", "1")
        monkeypatch.delenv("DWD_API_DECODE_WORKERS")
        env_file = tmp_path / ".env"
        env_file.write_text("DWD_API_DECODE_WORKERS=7\n")

        config = ClientConfig.from_env(str(env_file))

        assert config.decode_workers == 7

    def test_from_env_invalid_number(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DWD_API_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="DWD_API_TIMEOUT"):
            ClientConfig.from_env(str(tmp_path / "missing.env"))


FORECAST = ForecastDocument(
    name="10865",
    description="MUENCHEN-STADT",
    coordinates="11.55,48.16,521.0",
    issuer="Deutscher Wetterdienst",
    generating_process="DWD MOSMIX hourly, Version 1.0",
    issue_time=1672531200000,
    reference_models=[ForecastReferenceModel("ICON", 1672520400000)],
    time_steps_count=2,
    series={
        "time_steps": [1672552800000.0, 1672574400000.0],
        "temp": [280.1, None],
    },
)

REPORT = WeatherReport(
    units={"TTT": "C", "FF": "km/h"},
    data=[
        {"timestamp": 1672531200000, "TTT": 12.5},
        {"timestamp": 1672534800000, "TTT": 12.0, "FF": 3.0},
    ],
)


class TestModels:
    """Test JSON and DataFrame conversion of the decoded models."""

    def test_station_to_dict(self):
        station = StationRecord(id="01001", icao="ENJA", name="JAN_MAYEN", latitude=70.56)
        assert station.to_dict() == {
            "id": "01001",
            "icao": "ENJA",
            "name": "JAN_MAYEN",
            "latitude": 70.56,
            "longitude": 0.0,
            "elevation": 0,
            "cluster_id": None,
            "coefficient": None,
            "model_height": None,
            "station_type": None,
        }

    def test_forecast_to_dict(self):
        result = FORECAST.to_dict()
        assert result["reference_models"] == [
            {"name": "ICON", "reference_time": 1672520400000}
        ]
        assert result["series"]["temp"] == [280.1, None]
        assert result["time_steps_count"] == 2
        assert FORECAST.time_steps == [1672552800000.0, 1672574400000.0]

    def test_report_to_dict(self):
        assert REPORT.to_dict() == {"units": REPORT.units, "data": REPORT.data}

    def test_forecast_to_pandas(self):
        pd = pytest.importorskip("pandas")

        df = FORECAST.to_pandas()

        assert list(df.columns) == ["time", "temp"]
        assert len(df) == 2
        assert df["time"].iloc[0] == pd.Timestamp("2023-01-01T06:00Z")
        assert pd.isna(df["temp"].iloc[1])

    def test_report_to_pandas(self):
        pd = pytest.importorskip("pandas")

        df = REPORT.to_pandas()

        assert list(df.columns) == ["timestamp", "TTT", "FF"]
        assert df["timestamp"].iloc[1] == pd.Timestamp("2023-01-01T01:00Z")
        assert pd.isna(df["FF"].iloc[0])
        assert df["FF"].iloc[1] == 3.0

"""Tests for the marine forecast client with a mocked requests session."""

import math
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
import requests

from wave_alert.clients.marine_client import MARINE_API_URL, FetchError, MarineForecastClient
from wave_alert.core.detector import detect_exceedances


def make_response(payload=None, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = payload
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(session: MagicMock) -> MarineForecastClient:
    return MarineForecastClient(timezone="Asia/Jerusalem", timeout=5, session=session)


class TestFetch:
    def test_success(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response({
            "hourly": {
                "time": ["2024-06-10T00:00", "2024-06-10T01:00", "2024-06-10T02:00"],
                "wave_height": [0.5, 1.25, None],
            }
        })

        df = client.fetch(32.82, 34.96)

        assert list(df.columns) == ["time", "wave_height_m"]
        assert len(df) == 3
        assert str(df["time"].dt.tz) == "Asia/Jerusalem"
        assert df["time"].iloc[1].hour == 1
        assert df["wave_height_m"].iloc[1] == 1.25
        assert math.isnan(df["wave_height_m"].iloc[2])

    def test_request_parameters(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response({"hourly": {"time": [], "wave_height": []}})

        client.fetch(32.82, 34.96)

        args, kwargs = session.get.call_args
        assert args[0] == MARINE_API_URL
        assert kwargs["params"] == {
            "latitude": 32.82,
            "longitude": 34.96,
            "hourly": "wave_height",
            "timezone": "Asia/Jerusalem",
        }
        assert kwargs["timeout"] == 5

    def test_user_agent_header(self, session: MagicMock):
        MarineForecastClient(timezone="UTC", session=session)
        session.headers.__setitem__.assert_called_with("User-Agent", "WaveAlert/1.0")

    def test_empty_series(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response({"hourly": {"time": [], "wave_height": []}})
        df = client.fetch(0, 0)
        assert df.empty

    def test_non_success_status(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response(status_code=503)
        with pytest.raises(FetchError, match="API error 503"):
            client.fetch(32.82, 34.96)

    def test_transport_error(self, client: MarineForecastClient, session: MagicMock):
        session.get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(FetchError, match="Request failed: connection refused"):
            client.fetch(32.82, 34.96)

    def test_timeout_surfaces_as_fetch_error(self, client: MarineForecastClient, session: MagicMock):
        session.get.side_effect = requests.Timeout("read timed out")
        with pytest.raises(FetchError):
            client.fetch(32.82, 34.96)

    def test_invalid_json(self, client: MarineForecastClient, session: MagicMock):
        response = make_response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response
        with pytest.raises(FetchError, match="invalid JSON"):
            client.fetch(32.82, 34.96)

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"hourly": None},
            {"hourly": {"time": ["2024-06-10T00:00"]}},
            {"hourly": {"wave_height": [1.0]}},
            ["not", "an", "object"],
        ],
    )
    def test_missing_arrays(self, client: MarineForecastClient, session: MagicMock, payload):
        session.get.return_value = make_response(payload)
        with pytest.raises(FetchError, match="Malformed response"):
            client.fetch(32.82, 34.96)

    def test_mismatched_lengths(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response({
            "hourly": {"time": ["2024-06-10T00:00", "2024-06-10T01:00"], "wave_height": [1.0]}
        })
        with pytest.raises(FetchError, match="2 times but 1 wave heights"):
            client.fetch(32.82, 34.96)

    def test_bad_timestamps(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response({
            "hourly": {"time": ["not-a-time"], "wave_height": [1.0]}
        })
        with pytest.raises(FetchError, match="bad timestamps"):
            client.fetch(32.82, 34.96)


class TestDaylightSavingTransitions:
    def test_single_repeated_hour_is_kept(self, client: MarineForecastClient, session: MagicMock):
        # Jerusalem falls back at 02:00 on 2024-10-27, so 01:00 occurs twice
        session.get.return_value = make_response({
            "hourly": {
                "time": ["2024-10-27T00:00", "2024-10-27T01:00", "2024-10-27T02:00"],
                "wave_height": [0.1, 2.5, 0.1],
            }
        })

        df = client.fetch(32.82, 34.96)

        assert len(df) == 3
        assert df["time"].iloc[1].utcoffset() == timedelta(hours=3)
        now = datetime(2024, 10, 26, 12, tzinfo=timezone.utc)
        hits = detect_exceedances(df, 0.8, 2, now=now)
        assert [h.height_m for h in hits] == [2.5]

    def test_both_copies_of_repeated_hour(self, client: MarineForecastClient, session: MagicMock):
        session.get.return_value = make_response({
            "hourly": {
                "time": [
                    "2024-10-27T00:00",
                    "2024-10-27T01:00",
                    "2024-10-27T01:00",
                    "2024-10-27T02:00",
                ],
                "wave_height": [0.1, 1.0, 1.1, 0.1],
            }
        })

        df = client.fetch(32.82, 34.96)

        offsets = [t.utcoffset() for t in df["time"]]
        assert offsets == [timedelta(hours=h) for h in (3, 3, 2, 2)]
        assert df["time"].is_monotonic_increasing

    def test_skipped_spring_hour_shifts_forward(self, client: MarineForecastClient, session: MagicMock):
        # Jerusalem springs forward at 02:00 on 2024-03-29
        session.get.return_value = make_response({
            "hourly": {
                "time": ["2024-03-29T01:00", "2024-03-29T02:00", "2024-03-29T03:00"],
                "wave_height": [0.1, 1.5, 0.1],
            }
        })

        df = client.fetch(32.82, 34.96)

        assert len(df) == 3
        assert df["time"].notna().all()

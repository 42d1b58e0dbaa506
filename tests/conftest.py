"""Shared test fixtures."""

from datetime import datetime, timezone
from typing import Optional

import pandas as pd
import pytest

from wave_alert.clients.marine_client import FetchError
from wave_alert.core.config import AlertConfig
from wave_alert.core.location import Location

# Monday
MONDAY = datetime(2024, 6, 10, tzinfo=timezone.utc)


def make_series(start, heights: list, tz: str = "UTC") -> pd.DataFrame:
    """Hourly series starting at ``start`` (local wall-clock in ``tz``)."""
    times = pd.date_range(start=pd.Timestamp(start), periods=len(heights), freq=pd.Timedelta(hours=1), tz=tz)
    values = [float("nan") if h is None else float(h) for h in heights]
    return pd.DataFrame({"time": times, "wave_height_m": values})


class FakeForecastClient:
    """Returns canned series per latitude; raises for latitudes listed in ``failures``."""

    def __init__(self, series: dict, failures: Optional[dict] = None):
        self.series = series
        self.failures = failures or {}
        self.calls = []

    def fetch(self, lat: float, lon: float) -> pd.DataFrame:
        self.calls.append((lat, lon))
        if lat in self.failures:
            raise FetchError(self.failures[lat])
        return self.series[lat]


@pytest.fixture
def now() -> datetime:
    return MONDAY


@pytest.fixture
def haifa() -> Location:
    return Location(name="Haifa", lat=32.82, lon=34.96)


@pytest.fixture
def three_locations() -> tuple:
    return (
        Location(name="Haifa", lat=32.82, lon=34.96),
        Location(name="Tel Aviv", lat=32.08, lon=34.76),
        Location(name="Ashkelon", lat=31.67, lon=34.55),
    )


@pytest.fixture
def config(three_locations) -> AlertConfig:
    return AlertConfig(
        threshold_m=0.8,
        lookahead_days=2,
        timezone="UTC",
        locations=three_locations,
        recipients=("ops@example.com", "surf@example.com"),
    )

"""Open-Meteo Marine API client for hourly wave height forecasts.

Returns the hourly series for a single coordinate, with timestamps localized
to the timezone passed to the provider. No API key required.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd
import pytz
import requests

logger = logging.getLogger(__name__)

MARINE_API_URL = "https://marine-api.open-meteo.com/v1/marine"
REQUEST_TIMEOUT = 10
USER_AGENT = "WaveAlert/1.0"

SERIES_COLUMNS = ["time", "wave_height_m"]


class FetchError(Exception):
    """Exception raised when a forecast cannot be fetched or parsed."""

    pass


class MarineForecastClient:
    """Client for fetching hourly wave height from Open-Meteo Marine."""

    def __init__(
        self,
        timezone: str,
        base_url: str = MARINE_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the marine forecast client.

        Args:
            timezone: IANA timezone passed to the provider and used to
                localize the returned timestamps (e.g., "Asia/Jerusalem").
            base_url: Marine API endpoint.
            timeout: Per-request timeout in seconds.
            session: Optional pre-built requests session.
        """
        self.timezone = timezone
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    def fetch(self, lat: float, lon: float) -> pd.DataFrame:
        """Fetch the hourly wave height series for a coordinate.

        Args:
            lat: Latitude of the location
            lon: Longitude of the location

        Returns:
            DataFrame with columns: time (tz-aware), wave_height_m

        Raises:
            FetchError: On transport failure, non-success status, or a
                payload without matching time/wave_height arrays.
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": "wave_height",
            "timezone": self.timezone,
        }

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request failed: {e}") from e

        if not response.ok:
            raise FetchError(f"API error {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Malformed response: invalid JSON ({e})") from e

        series = self._parse_hourly(payload)
        logger.debug(f"Fetched {len(series)} hourly records for {lat}, {lon}")
        return series

    def _parse_hourly(self, payload) -> pd.DataFrame:
        """Convert the provider's parallel hourly arrays into a DataFrame."""
        hourly = payload.get("hourly") if isinstance(payload, dict) else None
        if not isinstance(hourly, dict):
            raise FetchError("Malformed response: missing 'hourly' block")

        times = hourly.get("time")
        heights = hourly.get("wave_height")
        if not isinstance(times, list) or not isinstance(heights, list):
            raise FetchError("Malformed response: missing 'time' or 'wave_height' array")
        if len(times) != len(heights):
            raise FetchError(
                f"Malformed response: {len(times)} times but {len(heights)} wave heights"
            )

        if not times:
            return pd.DataFrame(columns=SERIES_COLUMNS)

        try:
            parsed = pd.to_datetime(pd.Series(times))
        except (ValueError, TypeError) as e:
            raise FetchError(f"Malformed response: bad timestamps ({e})") from e

        # Provider times are local wall-clock for the requested timezone
        if parsed.dt.tz is None:
            parsed = self._localize(parsed)
        else:
            parsed = parsed.dt.tz_convert(self.timezone)

        return pd.DataFrame({
            "time": parsed,
            "wave_height_m": pd.to_numeric(pd.Series(heights), errors="coerce"),
        })

    def _localize(self, parsed: pd.Series) -> pd.Series:
        """Attach the timezone, keeping every row across DST transitions."""
        try:
            return parsed.dt.tz_localize(
                self.timezone, ambiguous="infer", nonexistent="shift_forward"
            )
        except (ValueError, pytz.exceptions.InvalidTimeError) as e:
            # Repeated fall-back hour without both copies: take the earlier (DST) offset
            logger.debug(f"Could not infer DST for ambiguous times, using DST offset: {e}")
            return parsed.dt.tz_localize(
                self.timezone,
                ambiguous=np.ones(len(parsed), dtype=bool),
                nonexistent="shift_forward",
            )

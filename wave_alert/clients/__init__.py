"""API clients for marine forecast data."""

from wave_alert.clients.marine_client import FetchError, MarineForecastClient

__all__ = [
    "FetchError",
    "MarineForecastClient",
]

"""Per-location exceedance check.

Runs fetch -> detect -> group -> peak for one location and returns a typed
result. Rendering to text lives in the formatter.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Union

from wave_alert.clients.marine_client import MarineForecastClient
from wave_alert.core.config import AlertConfig
from wave_alert.core.detector import ExceedanceHit, detect_exceedances
from wave_alert.core.grouper import group_by_day, peak_per_day
from wave_alert.core.location import Location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayPeak:
    """Highest hit within one day bucket."""
    day: str
    hit: ExceedanceHit


@dataclass(frozen=True)
class ExceedanceReport:
    """Location with at least one exceedance in the horizon."""
    location: Location
    threshold_m: float
    peaks: list[DayPeak] = field(default_factory=list)
    timezone: str = "UTC"


@dataclass(frozen=True)
class QuietReport:
    """Location with no exceedance in the horizon."""
    location: Location
    threshold_m: float
    lookahead_days: int


@dataclass(frozen=True)
class ErrorReport:
    """Location whose check failed."""
    location: Location
    message: str


LocationResult = Union[ExceedanceReport, QuietReport, ErrorReport]


class LocationReporter:
    """Checks one location at a time against the configured threshold."""

    def __init__(
        self,
        config: AlertConfig,
        client: Optional[MarineForecastClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the reporter.

        Args:
            config: Alert settings (threshold, lookahead, timezone, grouping)
            client: Forecast client. Defaults to a MarineForecastClient for
                the configured timezone.
            clock: Returns the reference "now" (tz-aware). Defaults to the
                current time in the configured timezone.
        """
        self.config = config
        self.client = client or MarineForecastClient(
            timezone=config.timezone, timeout=config.request_timeout
        )
        self.clock = clock or (lambda: datetime.now(config.tzinfo))

    def check(self, location: Location) -> LocationResult:
        """Check a location. Never raises; failures become an ErrorReport."""
        cfg = self.config
        try:
            series = self.client.fetch(location.lat, location.lon)
            hits = detect_exceedances(series, cfg.threshold_m, cfg.lookahead_days, now=self.clock())

            if not hits:
                return QuietReport(location, cfg.threshold_m, cfg.lookahead_days)

            groups = group_by_day(hits, cfg.tzinfo, cfg.day_grouping)
            peaks = [DayPeak(day, hit) for day, hit in peak_per_day(groups)]
            logger.info(f"{location.name}: {len(hits)} hours >= {cfg.threshold_m}m over {len(peaks)} day(s)")
            return ExceedanceReport(location, cfg.threshold_m, peaks, cfg.timezone)

        except Exception as e:
            logger.warning(f"Check failed for {location.name}: {e}")
            return ErrorReport(location, str(e))

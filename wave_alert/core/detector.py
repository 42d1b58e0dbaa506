"""Exceedance detection over an hourly wave height series."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import pandas as pd


@dataclass(frozen=True)
class ExceedanceHit:
    """One forecast hour at or above the threshold."""
    timestamp: datetime
    height_m: float


def detect_exceedances(
    series: pd.DataFrame,
    threshold_m: float,
    lookahead_days: int,
    now: Optional[datetime] = None,
) -> list[ExceedanceHit]:
    """Extract hours with wave height >= threshold up to now + lookahead.

    Args:
        series: DataFrame with tz-aware ``time`` and ``wave_height_m`` columns,
            ascending in time
        threshold_m: Inclusive wave height threshold in meters
        lookahead_days: Horizon length in days
        now: Reference instant (tz-aware). Defaults to the current time.

    Returns:
        Hits in input order. An empty list means no exceedance.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    if series.empty:
        return []

    cutoff = pd.Timestamp(now + timedelta(days=lookahead_days))
    heights = series["wave_height_m"]
    # NaN heights compare False and drop out here
    mask = (series["time"] <= cutoff) & (heights >= threshold_m)

    return [
        ExceedanceHit(timestamp=row.time.to_pydatetime(), height_m=float(row.wave_height_m))
        for row in series.loc[mask].itertuples(index=False)
    ]

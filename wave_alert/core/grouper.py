"""Grouping of exceedance hits by day and per-day peak selection.

By default days are keyed on the short weekday label only, so hits a week
apart share one bucket. Pass ``grouping="date"`` to key on the calendar date.
"""

from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce

from wave_alert.core.detector import ExceedanceHit

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def meters_to_cm(meters: float) -> int:
    """Convert meters to whole centimeters, rounding half up.

    Rounds on the decimal representation so that 1.005 m gives 101 cm.
    """
    cm = Decimal(repr(meters)) * 100
    return int(cm.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def day_label(timestamp: datetime, tz: tzinfo, grouping: str = "weekday") -> str:
    """Label for the day a timestamp falls on in the given timezone."""
    local = timestamp.astimezone(tz)
    weekday = WEEKDAY_LABELS[local.weekday()]
    if grouping == "date":
        return f"{weekday} {local:%Y-%m-%d}"
    return weekday


def group_by_day(
    hits: list[ExceedanceHit],
    tz: tzinfo,
    grouping: str = "weekday",
) -> dict[str, list[ExceedanceHit]]:
    """Bucket hits by day label, preserving first-seen order of days and hits."""
    groups: dict[str, list[ExceedanceHit]] = {}
    for hit in hits:
        groups.setdefault(day_label(hit.timestamp, tz, grouping), []).append(hit)
    return groups


def _higher(a: ExceedanceHit, b: ExceedanceHit) -> ExceedanceHit:
    # Ties keep the earlier hit
    return b if b.height_m > a.height_m else a


def peak_per_day(groups: dict[str, list[ExceedanceHit]]) -> list[tuple[str, ExceedanceHit]]:
    """Reduce each day bucket to its highest hit."""
    return [(day, reduce(_higher, hits)) for day, hits in groups.items() if hits]

"""Format location results for email delivery.

Text is the canonical form; the HTML body wraps the same text in <pre>.
"""

import html
from zoneinfo import ZoneInfo

from wave_alert.core.grouper import meters_to_cm
from wave_alert.digests.location_report import (
    ErrorReport,
    ExceedanceReport,
    LocationResult,
    QuietReport,
)

REPORT_SEPARATOR = "\n\n"


def format_threshold_m(threshold_m: float) -> str:
    """Configured threshold as written, dropping a trailing ".0" (0.8, 1, 1.25)."""
    text = repr(float(threshold_m))
    return text[:-2] if text.endswith(".0") else text


def format_location(result: LocationResult) -> str:
    """Render one location result as a text block."""
    if isinstance(result, ErrorReport):
        return f"[{result.location.name}] Error: {result.message}"

    if isinstance(result, QuietReport):
        return (
            f"[{result.location.name}] No waves >= {format_threshold_m(result.threshold_m)}m "
            f"in next {result.lookahead_days} days"
        )

    if isinstance(result, ExceedanceReport):
        tz = ZoneInfo(result.timezone)
        loc = result.location
        lines = [
            f"🌊 {loc.name} (Lat/Lon: {loc.lat:.3f}, {loc.lon:.3f})",
            f"Threshold: {meters_to_cm(result.threshold_m)} cm",
        ]
        for peak in result.peaks:
            local = peak.hit.timestamp.astimezone(tz)
            lines.append(
                f"- {peak.day}: peak ~{meters_to_cm(peak.hit.height_m)} cm at {local:%H:%M}"
            )
        return "\n".join(lines)

    raise TypeError(f"Unsupported result type: {type(result).__name__}")


def format_report_text(results: list[LocationResult]) -> str:
    """Join location blocks into the composite report."""
    return REPORT_SEPARATOR.join(format_location(r) for r in results)


def format_report_html(text: str) -> str:
    """Wrap the composite text report for an HTML email body."""
    return f"<pre>{html.escape(text)}</pre>"

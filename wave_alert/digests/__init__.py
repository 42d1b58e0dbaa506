"""Per-location reports and the composite run report."""

from wave_alert.digests.formatter import (
    format_location,
    format_report_html,
    format_report_text,
)
from wave_alert.digests.location_report import (
    DayPeak,
    ErrorReport,
    ExceedanceReport,
    LocationReporter,
    LocationResult,
    QuietReport,
)
from wave_alert.digests.run_coordinator import RunCoordinator, RunOutcome

__all__ = [
    # Formatter
    "format_location",
    "format_report_html",
    "format_report_text",
    # Location report
    "DayPeak",
    "ErrorReport",
    "ExceedanceReport",
    "LocationReporter",
    "LocationResult",
    "QuietReport",
    # Coordinator
    "RunCoordinator",
    "RunOutcome",
]

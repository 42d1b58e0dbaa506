"""Run coordinator.

Checks every configured location concurrently, joins the results in
configuration order and hands the composite report to the notifier once.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from wave_alert.core.config import AlertConfig
from wave_alert.delivery.sendgrid_sender import DeliveryError, EmailResult, SendGridSender
from wave_alert.digests.formatter import format_report_html, format_report_text
from wave_alert.digests.location_report import LocationReporter, LocationResult

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """What a dispatched run produced."""
    text: str
    results: list[LocationResult]
    delivered: bool = False
    email: Optional[EmailResult] = None
    error: Optional[str] = None


class RunCoordinator:
    """Fans out location checks and dispatches the composite report."""

    def __init__(
        self,
        config: AlertConfig,
        reporter: Optional[LocationReporter] = None,
        notifier: Optional[SendGridSender] = None,
    ):
        self.config = config
        self.reporter = reporter or LocationReporter(config)
        self.notifier = notifier
        self._run_lock = threading.Lock()

    def collect(self) -> list[LocationResult]:
        """Check all locations, returning results in configuration order."""
        locations = list(self.config.locations)
        if not locations:
            return []

        workers = min(self.config.max_workers, len(locations))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wave-check") as pool:
            # map() yields in submission order
            return list(pool.map(self.reporter.check, locations))

    def run_once(self) -> str:
        """Build the composite text report for all locations."""
        return format_report_text(self.collect())

    def dispatch(self, send: bool = True) -> Optional[RunOutcome]:
        """Run once and deliver the report.

        A run started while another is still in progress is skipped.
        Delivery failures are logged, never raised.

        Args:
            send: Deliver via the notifier. False builds the report only.

        Returns:
            RunOutcome, or None if the run was skipped
        """
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Previous run still in progress, skipping this trigger")
            return None

        try:
            now = datetime.now(self.config.tzinfo)
            logger.info(
                f"[{now:%Y-%m-%d %H:%M:%S}] Checking {len(self.config.locations)} locations..."
            )

            results = self.collect()
            outcome = RunOutcome(text=format_report_text(results), results=results)

            if not send:
                logger.info(f"Report not sent (dry run):\n{outcome.text}")
                return outcome

            if self.notifier is None:
                outcome.error = "No notifier configured"
                logger.error(f"[MAIL] Error: {outcome.error}")
                return outcome

            try:
                outcome.email = self.notifier.send_report(
                    recipients=list(self.config.recipients),
                    subject=self.config.subject,
                    text_content=outcome.text,
                    html_content=format_report_html(outcome.text),
                )
                outcome.delivered = True
                logger.info("[MAIL] Sent successfully")
            except DeliveryError as e:
                outcome.error = str(e)
                logger.error(f"[MAIL] Error: {e}")

            return outcome
        finally:
            self._run_lock.release()

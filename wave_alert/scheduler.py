"""Periodic trigger for alert runs.

Runs the coordinator once at start, then daily at the configured local time.
Each run executes on its own thread; the coordinator skips a trigger that
arrives while the previous run is still going.
"""

import logging
import re
import signal
import threading
import time
from typing import Optional

import schedule

from wave_alert.core.config import ConfigError
from wave_alert.digests.run_coordinator import RunCoordinator

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")
_NUMBER = re.compile(r"^\d{1,2}$")


def parse_schedule(expr: str) -> str:
    """Convert a schedule expression into a daily "HH:MM" time.

    Accepts "HH:MM" or a daily cron expression "M H * * *".

    Raises:
        ConfigError: For anything that is not a single daily time
    """
    expr = (expr or "").strip()

    match = _HHMM.match(expr)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
    else:
        fields = expr.split()
        if len(fields) != 5 or fields[2:] != ["*", "*", "*"]:
            raise ConfigError(f"Unsupported schedule {expr!r}: expected 'M H * * *' or 'HH:MM'")
        minute_field, hour_field = fields[0], fields[1]
        if not (_NUMBER.match(minute_field) and _NUMBER.match(hour_field)):
            raise ConfigError(f"Unsupported schedule {expr!r}: minute and hour must be numbers")
        minute, hour = int(minute_field), int(hour_field)

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ConfigError(f"Schedule time out of range: {expr!r}")

    return f"{hour:02d}:{minute:02d}"


class AlertScheduler:
    """Runs alert dispatches on a daily schedule until stopped."""

    def __init__(
        self,
        coordinator: RunCoordinator,
        scheduler: Optional[schedule.Scheduler] = None,
        poll_interval: float = 1.0,
        send: bool = True,
    ):
        self.coordinator = coordinator
        self.scheduler = scheduler or schedule.Scheduler()
        self.poll_interval = poll_interval
        self.send = send
        self.run_at = parse_schedule(coordinator.config.schedule)
        self._running = False
        self._threads: list[threading.Thread] = []

    def register(self) -> schedule.Job:
        """Register the daily job in the configured timezone."""
        tz = self.coordinator.config.timezone
        job = self.scheduler.every().day.at(self.run_at, tz).do(self.trigger)
        logger.info(f"Wave alert scheduled daily at {self.run_at} ({tz})")
        return job

    def trigger(self) -> threading.Thread:
        """Start one dispatch on a background thread."""
        thread = threading.Thread(
            target=self.coordinator.dispatch,
            kwargs={"send": self.send},
            name="wave-alert-run",
            daemon=True,
        )
        thread.start()
        self._threads = [t for t in self._threads if t.is_alive()] + [thread]
        return thread

    def start(self, run_immediately: bool = True) -> None:
        """Register the job and block until SIGINT/SIGTERM."""
        self._setup_signals()
        self.register()
        self._running = True

        if run_immediately:
            self.trigger()

        try:
            while self._running:
                self.scheduler.run_pending()
                time.sleep(self.poll_interval)
        except KeyboardInterrupt:
            logger.info("Scheduler interrupted by keyboard")
        finally:
            self.stop()

    def stop(self, wait: float = 30.0) -> None:
        """Stop the loop and wait briefly for in-flight runs."""
        self._running = False
        self.scheduler.clear()
        for thread in self._threads:
            thread.join(timeout=wait)

    def _setup_signals(self) -> None:
        """Handle SIGTERM and SIGINT for graceful shutdown."""
        def _stop(signum: int, frame: object) -> None:
            logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
            self._running = False

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)

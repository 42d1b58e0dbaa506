#!/usr/bin/env python3
"""Wave alert runner.

Checks the marine forecast for every configured location and emails one
consolidated report of hours where wave height meets the threshold.

Usage:
    # Run now, then daily on CRON_SCHEDULE
    python scripts/run_alert.py

    # Single run, then exit
    python scripts/run_alert.py --once

    # Print the report without sending
    python scripts/run_alert.py --once --dry-run

    # Use a specific .env and locations file
    python scripts/run_alert.py --env-file prod.env --locations-file config/locations.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wave_alert.core.config import ConfigError, load_config
from wave_alert.delivery.sendgrid_sender import SendGridSender
from wave_alert.digests.run_coordinator import RunCoordinator
from wave_alert.scheduler import AlertScheduler


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Quiet down noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Check marine forecasts and email a wave height alert",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single check and exit instead of scheduling",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the report but don't send it",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        help="Load settings from this .env file (default: ./.env)",
    )

    parser.add_argument(
        "--locations-file",
        type=Path,
        help="YAML file with additional locations",
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the report to file (with --once)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(env_file=args.env_file, locations_file=args.locations_file)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if not config.locations:
        print("No locations configured. Set LOCATIONS=\"name|lat|lon,...\".", file=sys.stderr)
        return 1

    notifier = None if args.dry_run else SendGridSender(from_email=config.from_email)
    coordinator = RunCoordinator(config, notifier=notifier)

    if args.once:
        outcome = coordinator.dispatch(send=not args.dry_run)
        if args.output:
            output_path = Path(args.output)
            output_path.write_text(outcome.text)
            print(f"Report written to: {output_path}", file=sys.stderr)
        else:
            print(outcome.text)
        return 0

    try:
        scheduler = AlertScheduler(coordinator, send=not args.dry_run)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    scheduler.start(run_immediately=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())

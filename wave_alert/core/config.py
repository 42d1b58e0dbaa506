"""Alert configuration.

Read once at startup from the environment (optionally seeded from a .env
file) and passed explicitly to the reporter, coordinator and scheduler.
"""

import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv

from wave_alert.core.location import Location, load_locations_file, parse_locations

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_M = 0.8
DEFAULT_LOOKAHEAD_DAYS = 2
DEFAULT_TIMEZONE = "Asia/Jerusalem"
DEFAULT_SCHEDULE = "0 18 * * *"
DEFAULT_FROM_EMAIL = "wave-alert@example.com"
DEFAULT_SUBJECT = "🌊 Daily Wave Alert"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_MAX_WORKERS = 8

DAY_GROUPINGS = ("weekday", "date")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class ConfigError(ValueError):
    """Raised for configuration values that cannot fall back to a default."""

    pass


@dataclass(frozen=True)
class AlertConfig:
    """Immutable settings for one alerting process."""
    threshold_m: float = DEFAULT_THRESHOLD_M
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS
    timezone: str = DEFAULT_TIMEZONE
    schedule: str = DEFAULT_SCHEDULE
    locations: tuple[Location, ...] = field(default_factory=tuple)
    recipients: tuple[str, ...] = field(default_factory=tuple)
    from_email: str = DEFAULT_FROM_EMAIL
    subject: str = DEFAULT_SUBJECT
    day_grouping: str = "weekday"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self):
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {self.timezone!r}") from e
        if self.day_grouping not in DAY_GROUPINGS:
            raise ConfigError(
                f"DAY_GROUPING must be one of {', '.join(DAY_GROUPINGS)}, got {self.day_grouping!r}"
            )
        if self.max_workers < 1:
            raise ConfigError("MAX_WORKERS must be at least 1")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _parse_float(raw: Optional[str], default: float) -> float:
    """Parse a float setting; unparseable, non-finite or zero falls back to default."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value == 0:
        return default
    return value


def _parse_positive_float(raw: Optional[str], default: float) -> float:
    """Parse a float setting that must be positive; anything else falls back to default."""
    value = _parse_float(raw, default)
    return value if value > 0 else default


def _parse_int(raw: Optional[str], default: int) -> int:
    """Parse the leading integer of a setting; missing or zero falls back to default."""
    match = _LEADING_INT.match(raw or "")
    if not match:
        return default
    value = int(match.group(1))
    return value or default


def _parse_list(raw: Optional[str]) -> tuple[str, ...]:
    return tuple(item.strip() for item in (raw or "").split(",") if item.strip())


def load_config(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
    locations_file: Optional[Path] = None,
) -> AlertConfig:
    """Build an AlertConfig from environment variables.

    Args:
        env: Mapping to read from. Defaults to os.environ, after loading
            env_file (or a .env in the working directory) into it.
        env_file: Optional .env file. Existing environment variables win.
        locations_file: Optional YAML locations file. Defaults to the
            LOCATIONS_FILE variable.

    Returns:
        AlertConfig

    Raises:
        ConfigError: For an unknown timezone, day grouping, or an
            unreadable locations file.
    """
    if env is None:
        if env_file is not None:
            load_dotenv(dotenv_path=env_file)
        else:
            load_dotenv()
        env = os.environ

    locations = parse_locations(env.get("LOCATIONS", ""))

    locations_path = locations_file or env.get("LOCATIONS_FILE")
    if locations_path:
        try:
            locations.extend(load_locations_file(Path(locations_path)))
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not load locations file: {e}") from e

    config = AlertConfig(
        threshold_m=_parse_float(env.get("THRESHOLD_METERS"), DEFAULT_THRESHOLD_M),
        lookahead_days=_parse_int(env.get("LOOKAHEAD_DAYS"), DEFAULT_LOOKAHEAD_DAYS),
        timezone=env.get("TZ") or DEFAULT_TIMEZONE,
        schedule=env.get("CRON_SCHEDULE") or DEFAULT_SCHEDULE,
        locations=tuple(locations),
        recipients=_parse_list(env.get("ALERT_TO_EMAILS")),
        from_email=env.get("SENDGRID_FROM_EMAIL") or DEFAULT_FROM_EMAIL,
        subject=env.get("ALERT_SUBJECT") or DEFAULT_SUBJECT,
        day_grouping=(env.get("DAY_GROUPING") or "weekday").strip().lower(),
        request_timeout=_parse_positive_float(env.get("REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT),
        max_workers=_parse_int(env.get("MAX_WORKERS"), DEFAULT_MAX_WORKERS),
    )

    logger.debug(
        f"Loaded config: {len(config.locations)} locations, threshold {config.threshold_m}m, "
        f"lookahead {config.lookahead_days}d, tz {config.timezone}"
    )
    return config

"""Core models, configuration and exceedance logic."""

from wave_alert.core.config import AlertConfig, ConfigError, load_config
from wave_alert.core.detector import ExceedanceHit, detect_exceedances
from wave_alert.core.grouper import (
    day_label,
    group_by_day,
    meters_to_cm,
    peak_per_day,
)
from wave_alert.core.location import Location, load_locations_file, parse_locations

__all__ = [
    # Config
    "AlertConfig",
    "ConfigError",
    "load_config",
    # Detector
    "ExceedanceHit",
    "detect_exceedances",
    # Grouper
    "day_label",
    "group_by_day",
    "meters_to_cm",
    "peak_per_day",
    # Location
    "Location",
    "load_locations_file",
    "parse_locations",
]

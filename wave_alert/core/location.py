"""Location model and loaders.

Locations come from the LOCATIONS environment string ("name|lat|lon,...")
and optionally from a YAML file with a top-level ``locations`` list.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """A named coastal coordinate to monitor."""
    name: str
    lat: float
    lon: float

    def __post_init__(self):
        if not self.name:
            raise ValueError("Location name must be non-empty")
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            raise ValueError(f"Location {self.name!r} has non-finite coordinates")


def _to_float(value) -> Optional[float]:
    """Parse a coordinate, returning None for anything non-numeric."""
    try:
        result = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _make_location(name, lat, lon) -> Optional[Location]:
    name = (name or "").strip() if isinstance(name, str) else ""
    lat_f = _to_float(lat)
    lon_f = _to_float(lon)
    if not name or lat_f is None or lon_f is None:
        return None
    return Location(name=name, lat=lat_f, lon=lon_f)


def parse_locations(raw: str) -> list[Location]:
    """Parse a "name|lat|lon" list separated by commas.

    Malformed entries are skipped with a warning.

    Args:
        raw: e.g. "Haifa|32.82|34.96,Tel Aviv|32.08|34.76"

    Returns:
        Locations in input order
    """
    locations = []
    for entry in (raw or "").split(","):
        if not entry.strip():
            continue
        parts = entry.split("|")
        parts += [None] * (3 - len(parts))
        location = _make_location(parts[0], parts[1], parts[2])
        if location is None:
            logger.warning(f"Skipping malformed location entry: {entry.strip()!r}")
            continue
        locations.append(location)
    return locations


def load_locations_file(path: Path) -> list[Location]:
    """Load locations from a YAML file.

    Expected shape::

        locations:
          - name: Haifa
            lat: 32.82
            lon: 34.96

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML does not have a ``locations`` list
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Could not find locations file: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("locations") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f"{path} must contain a 'locations' list")

    locations = []
    for item in entries:
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed location in {path}: {item!r}")
            continue
        location = _make_location(item.get("name"), item.get("lat"), item.get("lon"))
        if location is None:
            logger.warning(f"Skipping malformed location in {path}: {item!r}")
            continue
        locations.append(location)
    return locations

"""Movement sources — ways of telling the game where the player is.

Every source reduces to the same event: "the player is now at position
P".  The session never needs to know which source produced it.

- ``ManualSteps``: one tile per key press in a cardinal direction.
- ``ReplayPositionFeed``: a recorded track of position fixes read from a
  YAML file, standing in for a live device location feed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml

from tokengrid.world.coords import DEFAULT_TILE_DEGREES, LatLng

logger = logging.getLogger(__name__)


def _is_coordinate(value: object) -> bool:
    # YAML reads true, .nan and .inf as bool and float
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class Direction(Enum):
    """Cardinal unit steps as ``(d_lat, d_lng)`` tile multiples."""

    NORTH = (1, 0)
    SOUTH = (-1, 0)
    EAST = (0, 1)
    WEST = (0, -1)


class PositionSourceUnavailable(RuntimeError):
    """Raised when a live position source cannot supply fixes."""


@dataclass(frozen=True)
class ManualSteps:
    """Moves the player one tile at a time.

    Attributes:
        tile_degrees: Step size in degrees.
    """

    tile_degrees: float = DEFAULT_TILE_DEGREES

    def step(self, position: LatLng, direction: Direction) -> LatLng:
        """Return ``position`` moved one tile in ``direction``."""
        d_lat, d_lng = direction.value
        return LatLng(
            position.lat + d_lat * self.tile_degrees,
            position.lng + d_lng * self.tile_degrees,
        )


class ReplayPositionFeed:
    """Replays position fixes from a YAML track file.

    The file holds a list of ``{lat: ..., lng: ...}`` mappings (or
    ``[lat, lng]`` pairs).  Fixes are delivered one per ``poll()``.

    Attributes:
        path: Track file location.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._fixes = self._read_track()
        self._cursor: Iterator[LatLng] = iter(self._fixes)
        logger.info("Loaded %d position fixes from %s", len(self._fixes), self.path)

    def _read_track(self) -> list[LatLng]:
        try:
            with self.path.open("r") as f:
                data = yaml.safe_load(f) or []
        except (OSError, yaml.YAMLError) as exc:
            msg = f"cannot read position track {self.path}: {exc}"
            raise PositionSourceUnavailable(msg) from exc

        if not isinstance(data, list):
            msg = f"position track {self.path} must be a list of fixes"
            raise PositionSourceUnavailable(msg)

        fixes: list[LatLng] = []
        for entry in data:
            if isinstance(entry, dict):
                lat, lng = entry.get("lat"), entry.get("lng")
            elif isinstance(entry, list) and len(entry) == 2:
                lat, lng = entry
            else:
                lat = lng = None
            if not (_is_coordinate(lat) and _is_coordinate(lng)):
                msg = f"bad fix in {self.path}: {entry!r}"
                raise PositionSourceUnavailable(msg)
            fixes.append(LatLng(float(lat), float(lng)))
        return fixes

    def __len__(self) -> int:
        return len(self._fixes)

    def poll(self) -> LatLng | None:
        """Return the next fix, or None once the track is exhausted."""
        return next(self._cursor, None)

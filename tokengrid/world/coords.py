"""Coordinates — map continuous lat/lng positions onto the cell grid.

Cells are fixed-size squares measured in degrees from the global origin
(0°, 0°).  Anchoring at a fixed origin rather than at the player's
starting point keeps every ``CellId`` globally meaningful, so a saved
override at ``(i, j)`` refers to the same patch of ground in every
session.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_TILE_DEGREES = 1e-4


@dataclass(frozen=True)
class LatLng:
    """A continuous geographic position in degrees.

    Attributes:
        lat: Latitude.
        lng: Longitude.
    """

    lat: float
    lng: float


@dataclass(frozen=True, order=True)
class CellId:
    """Integer address of one grid cell.

    Attributes:
        i: Latitude band index (south → north).
        j: Longitude band index (west → east).
    """

    i: int
    j: int

    def offset(self, di: int, dj: int) -> CellId:
        """Return the cell ``di`` rows and ``dj`` columns away."""
        return CellId(self.i + di, self.j + dj)


@dataclass(frozen=True)
class Bounds:
    """An axis-aligned lat/lng rectangle.

    Attributes:
        south_west: Minimum corner.
        north_east: Maximum corner.
    """

    south_west: LatLng
    north_east: LatLng

    @property
    def center(self) -> LatLng:
        """Return the midpoint of the rectangle."""
        return LatLng(
            (self.south_west.lat + self.north_east.lat) / 2,
            (self.south_west.lng + self.north_east.lng) / 2,
        )

    def recentred(self, center: LatLng) -> Bounds:
        """Return a rectangle of the same size centred on ``center``."""
        half_lat = (self.north_east.lat - self.south_west.lat) / 2
        half_lng = (self.north_east.lng - self.south_west.lng) / 2
        return Bounds(
            LatLng(center.lat - half_lat, center.lng - half_lng),
            LatLng(center.lat + half_lat, center.lng + half_lng),
        )


def to_cell_id(position: LatLng, step: float = DEFAULT_TILE_DEGREES) -> CellId:
    """Return the cell containing ``position``.

    Args:
        position: Continuous position in degrees.
        step: Tile size in degrees.
    """
    return CellId(math.floor(position.lat / step), math.floor(position.lng / step))


def cell_bounds(cell_id: CellId, step: float = DEFAULT_TILE_DEGREES) -> Bounds:
    """Return the south-west and north-east corners of a cell."""
    return Bounds(
        LatLng(cell_id.i * step, cell_id.j * step),
        LatLng((cell_id.i + 1) * step, (cell_id.j + 1) * step),
    )


def cell_center(cell_id: CellId, step: float = DEFAULT_TILE_DEGREES) -> LatLng:
    """Return the midpoint of a cell.

    ``to_cell_id(cell_center(c)) == c`` holds for every cell: the centre
    sits half a tile inside both edges, far from any floor boundary.
    """
    return LatLng((cell_id.i + 0.5) * step, (cell_id.j + 0.5) * step)


def chebyshev(a: CellId, b: CellId) -> int:
    """Return the Chebyshev (king-move) distance between two cells."""
    return max(abs(a.i - b.i), abs(a.j - b.j))

"""Player — position and single-slot inventory."""

from __future__ import annotations

from dataclasses import dataclass

from tokengrid.world.cell import CellState
from tokengrid.world.coords import LatLng


@dataclass
class PlayerState:
    """Mutable state of the player.

    Attributes:
        position: Current continuous position in degrees.
        inventory: Token held in hand, or None.
    """

    position: LatLng
    inventory: CellState = None

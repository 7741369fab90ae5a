"""Cell — state and view types for grid cells.

A cell has no object of its own: its identity is its ``CellId`` and its
contents are looked up on demand.  The only per-cell records are the
lightweight rendering handles kept while a cell is on screen, and the
``CellView`` tuples handed out to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tokengrid.world.coords import CellId

# A token value (1, 2, 4, ... 128) or None for an empty cell.
CellState = Optional[int]


@dataclass
class MaterializedCell:
    """Rendering handle for an on-screen cell.

    Holds no token state; contents are always read through the cell
    store.

    Attributes:
        cell_id: Which cell this handle represents.
        in_range: Advisory flag: is the cell within interaction range of
            the player.
    """

    cell_id: CellId
    in_range: bool = False


@dataclass(frozen=True)
class CellView:
    """Snapshot of one visible cell for the renderer.

    Attributes:
        cell_id: Cell address.
        state: Effective token value, or None.
        in_range: Whether the player can interact with it right now.
    """

    cell_id: CellId
    state: CellState
    in_range: bool

"""Viewport scheduler — decides which cells are materialized.

Whenever the player moves or the visible region changes, the scheduler
computes the set of cells covering the view (plus a margin so cells do
not pop in at the edges), then diffs it against the store's materialized
set.  Memory spent on unmodified cells is therefore bounded by the size of
the view, no matter how far the player travels.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from tokengrid.world.coords import (
    DEFAULT_TILE_DEGREES,
    Bounds,
    CellId,
    chebyshev,
)
from tokengrid.world.store import CellStore

logger = logging.getLogger(__name__)


@dataclass
class ViewportScheduler:
    """Spawns and despawns cells to track the visible region.

    Attributes:
        store: The cell store to populate and evict from.
        tile_degrees: Tile size in degrees.
        margin: Extra rings of cells kept around the visible bounds.
        interaction_radius: Chebyshev radius used for in-range flags.
    """

    store: CellStore
    tile_degrees: float = DEFAULT_TILE_DEGREES
    margin: int = 1
    interaction_radius: int = 3

    def required_cells(self, bounds: Bounds) -> frozenset[CellId]:
        """Return every cell needed to cover ``bounds``.

        Args:
            bounds: Visible region in degrees.

        Returns:
            All ``CellId`` in ``[iMin - m, iMax + m] x [jMin - m, jMax + m]``.
        """
        step = self.tile_degrees
        i_min = math.floor(bounds.south_west.lat / step) - self.margin
        i_max = math.floor(bounds.north_east.lat / step) + self.margin
        j_min = math.floor(bounds.south_west.lng / step) - self.margin
        j_max = math.floor(bounds.north_east.lng / step) + self.margin
        return frozenset(
            CellId(i, j)
            for i in range(i_min, i_max + 1)
            for j in range(j_min, j_max + 1)
        )

    def sync(self, required: frozenset[CellId]) -> tuple[int, int]:
        """Materialize missing cells and evict ones no longer required.

        Calling this twice with the same set is a no-op the second time.

        Returns:
            ``(spawned, evicted)`` counts.
        """
        current = self.store.materialized_ids
        to_spawn = required - current
        to_evict = current - required
        for cell_id in to_evict:
            self.store.evict(cell_id)
        for cell_id in to_spawn:
            self.store.materialize(cell_id)
        if to_spawn or to_evict:
            logger.debug(
                "Viewport sync: +%d -%d (%d live)",
                len(to_spawn),
                len(to_evict),
                len(self.store),
            )
        return len(to_spawn), len(to_evict)

    def refresh_range(self, player_cell: CellId) -> None:
        """Update the advisory in-range flag on every materialized cell."""
        for handle in self.store:
            handle.in_range = (
                chebyshev(handle.cell_id, player_cell) <= self.interaction_radius
            )

    def update(self, bounds: Bounds, player_cell: CellId) -> None:
        """Sync to ``bounds`` and recolour cells around ``player_cell``."""
        self.sync(self.required_cells(bounds))
        self.refresh_range(player_cell)

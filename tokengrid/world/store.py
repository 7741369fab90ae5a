"""CellStore — flyweight materialized set plus memento override map.

The store keeps exactly two containers, both keyed by ``CellId``:

- ``materialized``: rendering handles for cells currently on screen.
  Ephemeral; safe to drop and rebuild at any time.
- ``overrides``: the state of every cell the player has ever changed.
  Sparse and persistent.

A cell's effective state is its override when one exists, otherwise the
generator's natural state.  Overrides are written at mutation time
(write-through), never on eviction, and are never garbage-collected even
when they happen to equal the natural state again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from tokengrid.world.cell import CellState, MaterializedCell
from tokengrid.world.coords import CellId
from tokengrid.world.generator import Generator

logger = logging.getLogger(__name__)


@dataclass
class CellStore:
    """Owns all cell state for a game session.

    Attributes:
        generator: Source of natural cell state.
    """

    generator: Generator = field(default_factory=Generator)
    _materialized: dict[CellId, MaterializedCell] = field(
        init=False,
        default_factory=dict,
        repr=False,
    )
    _overrides: dict[CellId, CellState] = field(
        init=False,
        default_factory=dict,
        repr=False,
    )

    @property
    def overrides(self) -> Mapping[CellId, CellState]:
        """Read-only view of the override map."""
        return MappingProxyType(self._overrides)

    @property
    def materialized_ids(self) -> frozenset[CellId]:
        """The set of currently materialized cells."""
        return frozenset(self._materialized)

    def __len__(self) -> int:
        return len(self._materialized)

    def __iter__(self) -> Iterator[MaterializedCell]:
        return iter(self._materialized.values())

    def is_materialized(self, cell_id: CellId) -> bool:
        """Return True if ``cell_id`` currently has a rendering handle."""
        return cell_id in self._materialized

    def natural_state(self, cell_id: CellId) -> CellState:
        """Return what the generator alone says about ``cell_id``."""
        return self.generator.natural(cell_id)

    def effective_state(self, cell_id: CellId) -> CellState:
        """Return the override for ``cell_id`` if any, else its natural state."""
        if cell_id in self._overrides:
            return self._overrides[cell_id]
        return self.generator.natural(cell_id)

    def materialize(self, cell_id: CellId) -> MaterializedCell:
        """Ensure ``cell_id`` has a rendering handle and return it.

        Never touches the override map.
        """
        handle = self._materialized.get(cell_id)
        if handle is None:
            handle = MaterializedCell(cell_id=cell_id)
            self._materialized[cell_id] = handle
        return handle

    def evict(self, cell_id: CellId) -> None:
        """Drop the rendering handle for ``cell_id``.

        Modified cells already have their override recorded, so there is
        nothing to write here.
        """
        self._materialized.pop(cell_id, None)

    def record(self, cell_id: CellId, state: CellState) -> None:
        """Write ``state`` as the override for ``cell_id``."""
        self._overrides[cell_id] = state
        logger.debug("Override %s -> %s", cell_id, state)

    def load_overrides(self, overrides: Iterable[tuple[CellId, CellState]]) -> None:
        """Replace the override map with restored snapshot entries."""
        self._overrides = dict(overrides)
        logger.debug("Restored %d overrides", len(self._overrides))

    def reset(self) -> None:
        """Forget every override and every materialized cell."""
        self._overrides.clear()
        self._materialized.clear()

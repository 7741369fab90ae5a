"""Rules — the pickup / place / merge state machine.

One interaction takes the player's single-slot inventory and a target
cell's effective state and yields a classified result plus the new
inventory and cell state.  The function is pure; applying the outcome
(override write, snapshot, celebration) is the session's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tokengrid.world.cell import CellState


class ResultKind(Enum):
    """Classification of an interaction attempt."""

    OUT_OF_RANGE = auto()
    NOTHING_TO_DO = auto()
    PICKED_UP = auto()
    PLACED = auto()
    MERGED = auto()
    NO_VALID_INTERACTION = auto()


@dataclass(frozen=True)
class InteractionResult:
    """Outcome of one interaction.

    Attributes:
        kind: What happened.
        value: Token involved (picked up, placed, or the merged total);
            None when nothing moved.
        inventory: Player inventory after the interaction.
        cell_state: Target cell state after the interaction.
    """

    kind: ResultKind
    value: int | None
    inventory: CellState
    cell_state: CellState

    @property
    def changed_cell(self) -> bool:
        """Return True if the target cell's state was modified."""
        return self.kind in (
            ResultKind.PICKED_UP,
            ResultKind.PLACED,
            ResultKind.MERGED,
        )


def resolve(
    inventory: CellState,
    cell_state: CellState,
    *,
    distance: int,
    radius: int = 3,
) -> InteractionResult:
    """Apply the interaction rules to one cell.

    The range check always comes first: a cell farther than ``radius``
    is out of range whatever the inventory and cell hold.

    Args:
        inventory: Token in the player's hand, or None.
        cell_state: Effective state of the target cell.
        distance: Chebyshev distance from the player's cell to the target.
        radius: Maximum interaction distance.

    Returns:
        The classified result with post-interaction inventory and cell
        state.
    """
    if distance > radius:
        return InteractionResult(ResultKind.OUT_OF_RANGE, None, inventory, cell_state)

    if inventory is None:
        if cell_state is None:
            return InteractionResult(ResultKind.NOTHING_TO_DO, None, None, None)
        return InteractionResult(ResultKind.PICKED_UP, cell_state, cell_state, None)

    if cell_state is None:
        return InteractionResult(ResultKind.PLACED, inventory, None, inventory)

    if cell_state == inventory:
        merged = inventory * 2
        return InteractionResult(ResultKind.MERGED, merged, None, merged)

    return InteractionResult(
        ResultKind.NO_VALID_INTERACTION,
        None,
        inventory,
        cell_state,
    )

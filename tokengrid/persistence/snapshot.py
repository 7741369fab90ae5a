"""Snapshot codec — save and restore a game to durable storage.

A snapshot holds everything that cannot be regenerated: the player's
inventory and position, and the override map.  Natural cell state is
never written.  The serialized shape is::

    {
      "inventory": 4 | null,
      "position": {"lat": 36.9979, "lng": -122.057},
      "overrides": [[i, j, 8 | null], ...]
    }

Each save fully replaces the previous snapshot.  A snapshot that fails to
parse or validate is discarded and the game starts fresh.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError

from tokengrid.game.player import PlayerState
from tokengrid.persistence.storage import SnapshotStorage
from tokengrid.world.cell import CellState
from tokengrid.world.coords import CellId, LatLng

logger = logging.getLogger(__name__)


class CorruptSnapshotError(ValueError):
    """Raised when stored data is not a well-formed snapshot."""


def _check_token(value: int) -> int:
    # tokens only ever double from 1, 2 or 4
    if value <= 0 or value & (value - 1):
        msg = f"token must be a positive power of two, got {value}"
        raise ValueError(msg)
    return value


Token = Annotated[int, AfterValidator(_check_token)]


class PositionModel(BaseModel):
    """Serialized player position."""

    model_config = ConfigDict(strict=True, allow_inf_nan=False, frozen=True)

    lat: float
    lng: float


class SnapshotModel(BaseModel):
    """Serialized snapshot.

    Strict mode keeps JSON ``true``/``false`` and numeric strings out of
    integer fields; non-finite coordinates are rejected.
    """

    model_config = ConfigDict(strict=True, allow_inf_nan=False, frozen=True)

    inventory: Optional[Token]
    position: PositionModel
    overrides: list[tuple[int, int, Optional[Token]]]


@dataclass
class Snapshot:
    """Decoded contents of a saved game.

    Attributes:
        player: Restored player state.
        overrides: Restored override map.
    """

    player: PlayerState
    overrides: dict[CellId, CellState]


def encode(
    player: PlayerState,
    overrides: Mapping[CellId, CellState],
) -> SnapshotModel:
    """Build the snapshot model, overrides sorted by cell id."""
    return SnapshotModel(
        inventory=player.inventory,
        position=PositionModel(lat=player.position.lat, lng=player.position.lng),
        overrides=[
            (cell_id.i, cell_id.j, state)
            for cell_id, state in sorted(overrides.items())
        ],
    )


def decode(raw: str | bytes) -> Snapshot:
    """Validate and decode serialized snapshot JSON.

    Raises:
        CorruptSnapshotError: If the data is not valid UTF-8 JSON or any
            part of the structure is malformed.
    """
    try:
        model = SnapshotModel.model_validate_json(raw)
    except (ValidationError, UnicodeDecodeError) as exc:
        raise CorruptSnapshotError(str(exc)) from exc

    player = PlayerState(
        position=LatLng(model.position.lat, model.position.lng),
        inventory=model.inventory,
    )
    overrides = {CellId(i, j): state for i, j, state in model.overrides}
    return Snapshot(player=player, overrides=overrides)


class SnapshotCodec:
    """Reads and writes snapshots through a storage backend.

    Attributes:
        storage: Where the serialized snapshot lives.
    """

    def __init__(self, storage: SnapshotStorage) -> None:
        self.storage = storage

    def save(self, player: PlayerState, overrides: Mapping[CellId, CellState]) -> None:
        """Serialize and overwrite the stored snapshot."""
        model = encode(player, overrides)
        self.storage.write(model.model_dump_json().encode("utf-8"))

    def load(self) -> Snapshot | None:
        """Return the stored snapshot, or None if absent or corrupt.

        Corrupt data is deleted so the next session starts cleanly.
        """
        raw = self.storage.read()
        if raw is None:
            return None
        try:
            return decode(raw)
        except CorruptSnapshotError as exc:
            logger.warning("Discarding corrupt snapshot: %s", exc)
            self.storage.delete()
            return None

    def reset(self) -> None:
        """Delete the stored snapshot."""
        self.storage.delete()

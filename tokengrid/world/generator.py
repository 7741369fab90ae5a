"""Generator — deterministic natural state for any cell.

The natural (never-touched) contents of a cell are a pure function of its
``CellId``.  Nothing about unmodified cells is ever stored: the cell store
just asks the generator again whenever a cell is materialized.
"""

from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass

from tokengrid.world.cell import CellState
from tokengrid.world.coords import CellId

_HAS_TOKEN_SALT = "hasToken"
_TOKEN_SALT = "token"


def luck(key: str) -> float:
    """Hash ``key`` to a float in ``[0, 1)``.

    Uses the first 32 bits of a SHA-256 digest so results are stable
    across processes and interpreter versions (unlike ``hash()``).
    """
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big") / 2**32


def _key(cell_id: CellId, salt: str) -> str:
    return f"{cell_id.i},{cell_id.j},{salt}"


@dataclass(frozen=True)
class Generator:
    """Deterministic cell-content generator.

    Attributes:
        spawn_probability: Chance that a cell naturally holds a token.
        token_values: Values a natural token is drawn from, uniformly.
    """

    spawn_probability: float = 0.3
    token_values: tuple[int, ...] = (1, 2, 4)

    def natural(self, cell_id: CellId) -> CellState:
        """Return the unmodified state of ``cell_id``.

        A cell holds a token iff ``luck("i,j,hasToken")`` falls below the
        spawn probability; the value is then picked by
        ``luck("i,j,token")``.
        """
        if luck(_key(cell_id, _HAS_TOKEN_SALT)) >= self.spawn_probability:
            return None
        index = math.floor(luck(_key(cell_id, _TOKEN_SALT)) * len(self.token_values))
        return self.token_values[index]

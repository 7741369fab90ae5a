"""GameSession — the context object every core operation runs through.

A session owns all mutable game state (player, cell store, viewport,
snapshot codec, status line) and exposes the small event surface the
renderer and input devices talk to:

- ``report_viewport(bounds)`` when the visible map region changes;
- ``report_player_moved(position)`` for any movement source;
- ``interact(cell_id)`` for a click/tap on a cell;
- ``list_materialized_cells()`` to draw the current view.

Every handler runs to completion before the next event, so nothing here
needs locking.  Any change to a cell is written to the override map and
snapshotted immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from tokengrid.game.movement import (
    Direction,
    ManualSteps,
    PositionSourceUnavailable,
    ReplayPositionFeed,
)
from tokengrid.game.player import PlayerState
from tokengrid.game.rules import InteractionResult, ResultKind, resolve
from tokengrid.game.status import StatusLine
from tokengrid.persistence.snapshot import SnapshotCodec
from tokengrid.persistence.storage import InMemoryStorage, SnapshotStorage
from tokengrid.simulation.config import GameConfig
from tokengrid.world.cell import CellView
from tokengrid.world.coords import Bounds, CellId, LatLng, chebyshev, to_cell_id
from tokengrid.world.generator import Generator
from tokengrid.world.store import CellStore
from tokengrid.world.viewport import ViewportScheduler

logger = logging.getLogger(__name__)

InteractionListener = Callable[[CellId, InteractionResult], None]
CelebrationListener = Callable[[CellId, int], None]

TOO_FAR_NOTICE = "Too far - move closer to interact"
NO_VALID_NOTICE = "No valid interaction here"
NO_LOCATION_NOTICE = "Live location unavailable - use the arrow keys"


@dataclass
class GameSession:
    """All state for one game, plus the operations that change it.

    Attributes:
        config: Game parameters.
        storage: Durable slot for snapshots.
        player: Position and inventory.
        store: Flyweight/memento cell store.
        scheduler: Viewport-driven spawn/despawn.
        codec: Snapshot reader/writer over ``storage``.
        status: Status line with expiring notices.
        viewport: Current visible region in degrees.
        feed: Active live position source, if any.
    """

    config: GameConfig = field(default_factory=GameConfig)
    storage: SnapshotStorage = field(default_factory=InMemoryStorage)
    player: PlayerState = field(init=False)
    store: CellStore = field(init=False)
    scheduler: ViewportScheduler = field(init=False)
    codec: SnapshotCodec = field(init=False)
    status: StatusLine = field(init=False)
    viewport: Bounds = field(init=False)
    feed: ReplayPositionFeed | None = field(init=False, default=None)
    _steps: ManualSteps = field(init=False, repr=False)
    _interaction_listeners: list[InteractionListener] = field(
        init=False,
        default_factory=list,
        repr=False,
    )
    _celebration_listeners: list[CelebrationListener] = field(
        init=False,
        default_factory=list,
        repr=False,
    )

    def __post_init__(self) -> None:
        """Build the world from config and restore any saved game."""
        cfg = self.config
        self.store = CellStore(
            generator=Generator(
                spawn_probability=cfg.spawn_probability,
                token_values=cfg.token_values,
            ),
        )
        self.scheduler = ViewportScheduler(
            store=self.store,
            tile_degrees=cfg.tile_degrees,
            margin=cfg.viewport_margin,
            interaction_radius=cfg.interaction_radius,
        )
        self.codec = SnapshotCodec(self.storage)
        self.status = StatusLine(duration=cfg.notice_seconds)
        self._steps = ManualSteps(tile_degrees=cfg.tile_degrees)

        snapshot = self.codec.load()
        if snapshot is None:
            self.player = PlayerState(position=cfg.start_position)
        else:
            self.player = snapshot.player
            self.store.load_overrides(snapshot.overrides.items())
            logger.info(
                "Resumed game at %s with %d overrides",
                self.player.position,
                len(snapshot.overrides),
            )

        self.viewport = self.default_viewport(self.player.position)
        self._refresh_cells()

    # -- queries -------------------------------------------------------

    @property
    def player_cell(self) -> CellId:
        """The cell the player is standing in."""
        return to_cell_id(self.player.position, self.config.tile_degrees)

    def default_viewport(self, center: LatLng) -> Bounds:
        """Return a ``view_rows`` x ``view_cols`` region around ``center``."""
        half_lat = self.config.view_rows * self.config.tile_degrees / 2
        half_lng = self.config.view_cols * self.config.tile_degrees / 2
        return Bounds(
            LatLng(center.lat - half_lat, center.lng - half_lng),
            LatLng(center.lat + half_lat, center.lng + half_lng),
        )

    def list_materialized_cells(self) -> list[CellView]:
        """Return every visible cell with its effective state and range flag."""
        return [
            CellView(
                cell_id=handle.cell_id,
                state=self.store.effective_state(handle.cell_id),
                in_range=handle.in_range,
            )
            for handle in sorted(self.store, key=lambda h: h.cell_id)
        ]

    def status_text(self) -> str:
        """Current status line: an active notice, else the inventory."""
        held = "empty" if self.player.inventory is None else self.player.inventory
        return self.status.text(f"Inventory: {held}")

    # -- listeners -----------------------------------------------------

    def on_interaction(self, listener: InteractionListener) -> None:
        """Call ``listener(cell_id, result)`` after every interaction."""
        self._interaction_listeners.append(listener)

    def on_celebrate(self, listener: CelebrationListener) -> None:
        """Call ``listener(cell_id, value)`` when a merge reaches the win value."""
        self._celebration_listeners.append(listener)

    # -- events --------------------------------------------------------

    def report_viewport(self, bounds: Bounds) -> None:
        """Handle a pan/zoom of the visible region."""
        self.viewport = bounds
        self._refresh_cells()

    def report_player_moved(self, position: LatLng) -> None:
        """Handle any player movement, whatever its source."""
        self.player.position = position
        if self.config.follow_player:
            self.viewport = self.viewport.recentred(position)
        self._refresh_cells()
        self.save()

    def step(self, direction: Direction) -> None:
        """Move the player one tile in ``direction``."""
        self.report_player_moved(self._steps.step(self.player.position, direction))

    def attach_position_feed(self, path: str) -> bool:
        """Switch to a replayed position track, if it can be read.

        On failure the session stays on manual steps and shows a notice.

        Returns:
            True if the feed was attached.
        """
        try:
            self.feed = ReplayPositionFeed(path)
        except PositionSourceUnavailable as exc:
            logger.warning("Falling back to manual movement: %s", exc)
            self.feed = None
            self.status.notify(NO_LOCATION_NOTICE)
            return False
        return True

    def poll_position(self) -> bool:
        """Apply the next fix from the live feed, if there is one.

        Returns:
            True if the player moved.
        """
        if self.feed is None:
            return False
        fix = self.feed.poll()
        if fix is None:
            return False
        self.report_player_moved(fix)
        return True

    def interact(self, cell_id: CellId) -> InteractionResult:
        """Handle a click/tap on ``cell_id``.

        Returns:
            The classified result.  Out-of-range and invalid attempts are
            reported here rather than raised.
        """
        result = resolve(
            self.player.inventory,
            self.store.effective_state(cell_id),
            distance=chebyshev(self.player_cell, cell_id),
            radius=self.config.interaction_radius,
        )

        if result.changed_cell:
            self.store.record(cell_id, result.cell_state)
            self.player.inventory = result.inventory
            self.save()
            logger.info("%s %s at %s", result.kind.name, result.value, cell_id)
        elif result.kind is ResultKind.OUT_OF_RANGE:
            self.status.notify(TOO_FAR_NOTICE)
        elif result.kind is ResultKind.NO_VALID_INTERACTION:
            self.status.notify(NO_VALID_NOTICE)

        for listener in self._interaction_listeners:
            listener(cell_id, result)

        if result.kind is ResultKind.MERGED and result.value == self.config.win_value:
            logger.info("Reached %d at %s", result.value, cell_id)
            for celebrate in self._celebration_listeners:
                celebrate(cell_id, result.value)

        return result

    def reset(self) -> None:
        """Start over: clear overrides, inventory, position, and the save."""
        self.store.reset()
        self.codec.reset()
        self.player = PlayerState(position=self.config.start_position)
        self.viewport = self.default_viewport(self.player.position)
        self.status.clear()
        self._refresh_cells()
        logger.info("Game reset")

    def save(self) -> None:
        """Snapshot the player and override map."""
        self.codec.save(self.player, self.store.overrides)

    def _refresh_cells(self) -> None:
        self.scheduler.update(self.viewport, self.player_cell)

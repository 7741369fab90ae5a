"""Pygame 2D client for tokengrid.

Draws the session's materialized cells as a map-like grid around the
player, shades cells that are out of interaction range, and labels tokens.
Arrow keys step the player one tile; clicking a cell interacts with it.
The client only talks to the core through ``GameSession``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from tokengrid.game.session import GameSession
    from tokengrid.world.cell import CellView

from tokengrid.game.movement import Direction
from tokengrid.world.coords import CellId, LatLng, cell_bounds, to_cell_id

# Colour palette
_BG = (235, 235, 225)
_GRID_LINE = (102, 102, 102)
_OUT_OF_RANGE = (255, 204, 204)
_PLAYER = (30, 90, 200)
_TEXT = (30, 30, 30)

# Token colour range (pale yellow for 1 -> deep orange for the win value)
_TOKEN_LO = np.array([255, 240, 170], dtype=np.float64)
_TOKEN_HI = np.array([230, 90, 20], dtype=np.float64)


class PygameRenderer:
    """Renders a GameSession into a Pygame window.

    Attributes:
        session: The game session to display and drive.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    _KEY_DIRECTIONS: ClassVar[dict[int, Direction]] = {
        pygame.K_UP: Direction.NORTH,
        pygame.K_DOWN: Direction.SOUTH,
        pygame.K_RIGHT: Direction.EAST,
        pygame.K_LEFT: Direction.WEST,
    }

    def __init__(
        self,
        session: GameSession,
        cell_size: int = 24,
        fix_interval: float = 1.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            session: The session to render.
            cell_size: Pixel width/height per grid cell.
            fix_interval: Seconds between live position fixes.
        """
        self.session = session
        self.cell_size = cell_size
        self.fix_interval = fix_interval
        self._fix_accumulator = 0.0

        self._map_w = session.config.view_cols * cell_size
        self._map_h = session.config.view_rows * cell_size
        self._status_height = 28

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self._map_w, self._map_h + self._status_height),
        )
        pygame.display.set_caption("tokengrid")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", max(10, cell_size // 2))
        self.status_font = pygame.font.SysFont("monospace", 14)
        self.running = True

        session.on_celebrate(self._celebrate)

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, poll the position feed, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if self.session.feed is not None:
                self._fix_accumulator += dt
                if self._fix_accumulator >= self.fix_interval:
                    self._fix_accumulator = 0.0
                    self.session.poll_position()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    self.session.reset()
                elif event.key in self._KEY_DIRECTIONS:
                    self.session.step(self._KEY_DIRECTIONS[event.key])
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                if y < self._map_h:
                    self.session.interact(self._cell_at_pixel(x, y))

    def _celebrate(self, cell_id: CellId, value: int) -> None:
        self.session.status.notify(f"Congratulations! You made a token of {value}!")

    # -- coordinate helpers -------------------------------------------

    def _degrees_per_pixel(self) -> tuple[float, float]:
        view = self.session.viewport
        lat_span = view.north_east.lat - view.south_west.lat
        lng_span = view.north_east.lng - view.south_west.lng
        return lat_span / self._map_h, lng_span / self._map_w

    def _to_pixel(self, position: LatLng) -> tuple[int, int]:
        view = self.session.viewport
        lat_pp, lng_pp = self._degrees_per_pixel()
        x = (position.lng - view.south_west.lng) / lng_pp
        y = (view.north_east.lat - position.lat) / lat_pp
        return round(x), round(y)

    def _cell_at_pixel(self, x: int, y: int) -> CellId:
        view = self.session.viewport
        lat_pp, lng_pp = self._degrees_per_pixel()
        position = LatLng(
            view.north_east.lat - y * lat_pp,
            view.south_west.lng + x * lng_pp,
        )
        return to_cell_id(position, self.session.config.tile_degrees)

    # -- drawing -------------------------------------------------------

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        for view in self.session.list_materialized_cells():
            self._draw_cell(view)
        self._draw_player()
        self._draw_status()
        pygame.display.flip()

    def _token_colour(self, value: int) -> list[int]:
        top = math.log2(self.session.config.win_value)
        t = min(math.log2(value) / top, 1.0) if top > 0 else 1.0
        colour = _TOKEN_LO + t * (_TOKEN_HI - _TOKEN_LO)
        return colour.astype(int).tolist()

    def _draw_cell(self, view: CellView) -> None:
        """Draw one cell outline, range shading, and token label."""
        bounds = cell_bounds(view.cell_id, self.session.config.tile_degrees)
        x0, y0 = self._to_pixel(LatLng(bounds.north_east.lat, bounds.south_west.lng))
        x1, y1 = self._to_pixel(LatLng(bounds.south_west.lat, bounds.north_east.lng))
        rect = pygame.Rect(x0, y0, x1 - x0, y1 - y0)

        if not view.in_range:
            pygame.draw.rect(self.screen, _OUT_OF_RANGE, rect)
        if view.state is not None:
            pygame.draw.rect(
                self.screen,
                self._token_colour(view.state),
                rect.inflate(-4, -4),
            )
            label = self.font.render(str(view.state), True, _TEXT)
            self.screen.blit(label, label.get_rect(center=rect.center))
        pygame.draw.rect(self.screen, _GRID_LINE, rect, width=1)

    def _draw_player(self) -> None:
        """Draw the player marker at its continuous position."""
        cx, cy = self._to_pixel(self.session.player.position)
        pygame.draw.circle(self.screen, _PLAYER, (cx, cy), max(4, self.cell_size // 3))

    def _draw_status(self) -> None:
        """Draw the status bar beneath the map."""
        lines = [
            self.session.status_text(),
            "arrows: move  click: interact  R: reset  ESC: quit",
        ]
        surf = self.status_font.render("   |   ".join(lines), True, _TEXT)
        self.screen.blit(surf, (8, self._map_h + 6))

"""Config — load game parameters from YAML files.

Tunable constants (tile size, spawn odds, interaction radius, view size,
save location) live in YAML and are parsed into a typed dataclass here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from tokengrid.world.coords import LatLng


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        tile_degrees: Cell size in degrees of latitude/longitude.
        spawn_probability: Chance a cell naturally holds a token.
        token_values: Values natural tokens are drawn from.
        interaction_radius: Chebyshev radius (in cells) the player can
            reach.
        viewport_margin: Extra rings of cells materialized beyond the
            visible bounds.
        win_value: Merged value that triggers the celebration.
        start_lat: Latitude for a fresh game.
        start_lng: Longitude for a fresh game.
        view_rows: Visible cells vertically (default viewport).
        view_cols: Visible cells horizontally (default viewport).
        follow_player: Re-centre the viewport on the player after moves.
        notice_seconds: How long advisory notices stay visible.
        save_path: Snapshot file used by the CLI.
    """

    tile_degrees: float = 1e-4
    spawn_probability: float = 0.3
    token_values: tuple[int, ...] = (1, 2, 4)
    interaction_radius: int = 3
    viewport_margin: int = 1
    win_value: int = 128

    # UC Santa Cruz campus
    start_lat: float = 36.997936938057016
    start_lng: float = -122.05703507501151

    view_rows: int = 21
    view_cols: int = 31
    follow_player: bool = True
    notice_seconds: float = 3.0
    save_path: str = "tokengrid_save.json"

    @property
    def start_position(self) -> LatLng:
        """Where a fresh game places the player."""
        return LatLng(self.start_lat, self.start_lng)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            tile_degrees=data.get("tile_degrees", cls.tile_degrees),
            spawn_probability=data.get("spawn_probability", cls.spawn_probability),
            token_values=tuple(data.get("token_values", cls.token_values)),
            interaction_radius=data.get(
                "interaction_radius",
                cls.interaction_radius,
            ),
            viewport_margin=data.get("viewport_margin", cls.viewport_margin),
            win_value=data.get("win_value", cls.win_value),
            start_lat=data.get("start_lat", cls.start_lat),
            start_lng=data.get("start_lng", cls.start_lng),
            view_rows=data.get("view_rows", cls.view_rows),
            view_cols=data.get("view_cols", cls.view_cols),
            follow_player=data.get("follow_player", cls.follow_player),
            notice_seconds=data.get("notice_seconds", cls.notice_seconds),
            save_path=data.get("save_path", cls.save_path),
        )

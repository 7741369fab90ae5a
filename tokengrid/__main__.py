"""Entry point for ``python -m tokengrid``.

Loads the default YAML config, resumes (or starts) a game saved to a JSON
file, and opens a Pygame window to play it.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from tokengrid.game.session import GameSession
from tokengrid.persistence.storage import JsonFileStorage
from tokengrid.simulation.config import GameConfig
from tokengrid.ui.pygame_client import PygameRenderer

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, create session, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="tokengrid",
        description="tokengrid - collect and merge tokens on a real-world grid",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--save",
        type=pathlib.Path,
        default=None,
        help="Snapshot file (default: save_path from the config)",
    )
    parser.add_argument(
        "--track",
        type=pathlib.Path,
        default=None,
        help="YAML list of lat/lng fixes to replay as a live location",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=24,
        help="Pixel size per grid cell (default: 24)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_yaml(args.config)
    save_path = args.save if args.save is not None else config.save_path
    session = GameSession(config=config, storage=JsonFileStorage(save_path))
    if args.track is not None:
        session.attach_position_feed(str(args.track))

    renderer = PygameRenderer(session=session, cell_size=args.cell_size)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()

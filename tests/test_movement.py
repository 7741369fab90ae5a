"""Tests for movement sources and the status line."""

from pathlib import Path

import pytest

from tokengrid.game.movement import (
    Direction,
    ManualSteps,
    PositionSourceUnavailable,
    ReplayPositionFeed,
)
from tokengrid.game.status import StatusLine
from tokengrid.world.coords import CellId, LatLng, cell_center, to_cell_id


class TestManualSteps:
    """Tests for one-tile cardinal steps."""

    @pytest.mark.parametrize(
        ("direction", "expected"),
        [
            (Direction.NORTH, CellId(1, 0)),
            (Direction.SOUTH, CellId(-1, 0)),
            (Direction.EAST, CellId(0, 1)),
            (Direction.WEST, CellId(0, -1)),
        ],
    )
    def test_step(self, direction: Direction, expected: CellId) -> None:
        steps = ManualSteps()
        moved = steps.step(cell_center(CellId(0, 0)), direction)
        assert to_cell_id(moved) == expected


class TestReplayPositionFeed:
    """Tests for the recorded-track position source."""

    def test_reads_both_fix_shapes(self, tmp_path: Path) -> None:
        track = tmp_path / "track.yaml"
        track.write_text("- {lat: 1.5, lng: 2.5}\n- [3, 4]\n")
        feed = ReplayPositionFeed(track)
        assert len(feed) == 2
        assert feed.poll() == LatLng(1.5, 2.5)
        assert feed.poll() == LatLng(3.0, 4.0)
        assert feed.poll() is None

    def test_missing_file_unavailable(self, tmp_path: Path) -> None:
        with pytest.raises(PositionSourceUnavailable):
            ReplayPositionFeed(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "fix",
        [
            "{lat: north, lng: 2}",
            "{lat: .nan, lng: 2}",
            "{lat: 1, lng: .inf}",
            "[-.inf, 2]",
            "{lat: true, lng: 2}",
            "[1, false]",
        ],
    )
    def test_bad_fix_unavailable(self, tmp_path: Path, fix: str) -> None:
        track = tmp_path / "track.yaml"
        track.write_text(f"- {fix}\n")
        with pytest.raises(PositionSourceUnavailable):
            ReplayPositionFeed(track)

    def test_not_a_list_unavailable(self, tmp_path: Path) -> None:
        track = tmp_path / "track.yaml"
        track.write_text("lat: 1\nlng: 2\n")
        with pytest.raises(PositionSourceUnavailable):
            ReplayPositionFeed(track)


class TestStatusLine:
    """Tests for auto-expiring notices."""

    def test_default_text(self, clock) -> None:
        status = StatusLine(duration=3.0, clock=clock)
        assert status.text("Inventory: empty") == "Inventory: empty"

    def test_notice_expires(self, clock) -> None:
        status = StatusLine(duration=3.0, clock=clock)
        status.notify("Too far")
        clock.advance(2.9)
        assert status.text("default") == "Too far"
        clock.advance(0.2)
        assert status.text("default") == "default"
        assert status.notice is None

    def test_new_notice_restarts_timer(self, clock) -> None:
        status = StatusLine(duration=3.0, clock=clock)
        status.notify("one")
        clock.advance(2.0)
        status.notify("two")
        clock.advance(2.0)
        assert status.notice == "two"

    def test_clear(self, clock) -> None:
        status = StatusLine(clock=clock)
        status.notify("x")
        status.clear()
        assert status.notice is None

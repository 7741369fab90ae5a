"""Tests for tokengrid.world — coordinates, generator, and cell store."""

import random

import pytest

from tokengrid.simulation.config import GameConfig
from tokengrid.world.cell import MaterializedCell
from tokengrid.world.coords import (
    Bounds,
    CellId,
    LatLng,
    cell_bounds,
    cell_center,
    chebyshev,
    to_cell_id,
)
from tokengrid.world.generator import Generator, luck
from tokengrid.world.store import CellStore


class TestCoords:
    """Tests for the lat/lng <-> CellId mapping."""

    def test_origin_cell(self) -> None:
        assert to_cell_id(LatLng(0.0, 0.0)) == CellId(0, 0)

    def test_negative_coordinates_floor(self) -> None:
        # Just south-west of the origin lands in (-1, -1), not (0, 0)
        assert to_cell_id(LatLng(-0.00001, -0.00001)) == CellId(-1, -1)

    def test_start_position_cell(self, default_config: GameConfig) -> None:
        cell = to_cell_id(default_config.start_position)
        assert cell == CellId(369979, -1220571)

    def test_bounds(self) -> None:
        bounds = cell_bounds(CellId(2, -3), step=1.0)
        assert bounds.south_west == LatLng(2.0, -3.0)
        assert bounds.north_east == LatLng(3.0, -2.0)

    def test_center_is_midpoint(self) -> None:
        assert cell_center(CellId(2, -3), step=1.0) == LatLng(2.5, -2.5)

    def test_round_trip(self) -> None:
        rnd = random.Random(7)
        cells = [CellId(0, 0), CellId(-1, -1), CellId(900000, -1800000)]
        cells += [
            CellId(rnd.randint(-900000, 900000), rnd.randint(-1800000, 1800000))
            for _ in range(500)
        ]
        for cell in cells:
            assert to_cell_id(cell_center(cell)) == cell

    def test_cell_ids_are_hashable_keys(self) -> None:
        lookup = {CellId(1, 2): "a"}
        assert lookup[CellId(1, 2)] == "a"
        assert CellId(1, 2) != CellId(2, 1)

    def test_chebyshev(self) -> None:
        assert chebyshev(CellId(0, 0), CellId(3, -2)) == 3
        assert chebyshev(CellId(-4, 1), CellId(0, 0)) == 4
        assert chebyshev(CellId(5, 5), CellId(5, 5)) == 0

    def test_recentred_keeps_size(self) -> None:
        bounds = Bounds(LatLng(0.0, 0.0), LatLng(2.0, 4.0))
        moved = bounds.recentred(LatLng(10.0, 10.0))
        assert moved.south_west == LatLng(9.0, 8.0)
        assert moved.north_east == LatLng(11.0, 12.0)
        assert moved.center == LatLng(10.0, 10.0)


class TestGenerator:
    """Tests for deterministic natural state."""

    def test_luck_is_stable_sha256(self) -> None:
        # First 32 bits of sha256("0,0,hasToken")
        assert luck("0,0,hasToken") == 0xEC785336 / 2**32

    def test_luck_range(self) -> None:
        for n in range(200):
            assert 0.0 <= luck(f"{n},{-n},token") < 1.0

    def test_known_empty_cell(self) -> None:
        assert Generator().natural(CellId(0, 0)) is None

    def test_natural_is_repeatable(self) -> None:
        gen_a = Generator()
        gen_b = Generator()
        for i in range(-10, 10):
            for j in range(-10, 10):
                cell = CellId(i, j)
                assert gen_a.natural(cell) == gen_a.natural(cell) == gen_b.natural(cell)

    def test_values_drawn_from_token_values(self) -> None:
        gen = Generator()
        states = {gen.natural(CellId(i, j)) for i in range(40) for j in range(40)}
        assert states <= {None, 1, 2, 4}
        assert {1, 2, 4} <= states

    def test_spawn_rate_near_probability(self) -> None:
        gen = Generator()
        cells = [CellId(i, j) for i in range(60) for j in range(60)]
        filled = sum(gen.natural(c) is not None for c in cells)
        assert 0.25 < filled / len(cells) < 0.35

    def test_zero_probability_spawns_nothing(self) -> None:
        gen = Generator(spawn_probability=0.0)
        assert all(gen.natural(CellId(i, 0)) is None for i in range(100))


class TestCellStore:
    """Tests for the flyweight/memento store."""

    def test_effective_defaults_to_natural(self, store: CellStore) -> None:
        for i in range(20):
            cell = CellId(i, -i)
            assert store.effective_state(cell) == store.natural_state(cell)

    def test_materialize_does_not_create_overrides(self, store: CellStore) -> None:
        for i in range(20):
            store.materialize(CellId(i, 0))
        assert len(store) == 20
        assert len(store.overrides) == 0

    def test_materialize_is_idempotent(self, store: CellStore) -> None:
        first = store.materialize(CellId(1, 1))
        second = store.materialize(CellId(1, 1))
        assert first is second
        assert isinstance(first, MaterializedCell)
        assert len(store) == 1

    def test_evict_unknown_is_noop(self, store: CellStore) -> None:
        store.evict(CellId(9, 9))
        assert len(store) == 0

    def test_no_farming(self, store: CellStore) -> None:
        """Spawn/despawn cycles never change an untouched cell."""
        cells = [CellId(i, j) for i in range(8) for j in range(8)]
        natural = {c: store.natural_state(c) for c in cells}
        for _ in range(5):
            for c in cells:
                store.materialize(c)
            for c in cells:
                assert store.effective_state(c) == natural[c]
                store.evict(c)
        assert len(store) == 0
        assert len(store.overrides) == 0

    def test_override_survives_eviction(self, store: CellStore) -> None:
        cell = CellId(3, 4)
        store.materialize(cell)
        store.record(cell, 64)
        for _ in range(3):
            store.evict(cell)
            assert store.effective_state(cell) == 64
            store.materialize(cell)
            assert store.effective_state(cell) == 64

    def test_override_equal_to_natural_is_kept(self, store: CellStore) -> None:
        cell = CellId(0, 0)
        store.record(cell, store.natural_state(cell))
        assert cell in store.overrides

    def test_empty_override_hides_natural_token(self, store: CellStore) -> None:
        cell = next(
            CellId(i, 0) for i in range(100) if store.natural_state(CellId(i, 0))
        )
        store.record(cell, None)
        assert store.effective_state(cell) is None

    def test_overrides_view_is_read_only(self, store: CellStore) -> None:
        with pytest.raises(TypeError):
            store.overrides[CellId(0, 0)] = 2  # type: ignore[index]

    def test_reset_clears_everything(self, store: CellStore) -> None:
        store.materialize(CellId(0, 0))
        store.record(CellId(0, 0), 8)
        store.reset()
        assert len(store) == 0
        assert len(store.overrides) == 0

    def test_load_overrides_replaces(self, store: CellStore) -> None:
        store.record(CellId(1, 1), 2)
        store.load_overrides([(CellId(0, 0), 8)])
        assert dict(store.overrides) == {CellId(0, 0): 8}

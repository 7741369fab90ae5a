"""Shared fixtures for the tokengrid test suite."""

from __future__ import annotations

import pytest

from tokengrid.game.session import GameSession
from tokengrid.persistence.storage import InMemoryStorage
from tokengrid.simulation.config import GameConfig
from tokengrid.world.coords import LatLng
from tokengrid.world.generator import Generator
from tokengrid.world.store import CellStore


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """A clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def default_config() -> GameConfig:
    """Default game config (no YAML file needed)."""
    return GameConfig()


@pytest.fixture
def origin_config() -> GameConfig:
    """Config starting at the centre of cell (0, 0) with a small view."""
    return GameConfig(
        start_lat=0.5e-4,
        start_lng=0.5e-4,
        view_rows=5,
        view_cols=7,
    )


@pytest.fixture
def store() -> CellStore:
    """An empty cell store with the default generator."""
    return CellStore(generator=Generator())


@pytest.fixture
def storage() -> InMemoryStorage:
    """An empty in-memory snapshot slot."""
    return InMemoryStorage()


@pytest.fixture
def session(origin_config: GameConfig, storage: InMemoryStorage) -> GameSession:
    """A fresh session standing in cell (0, 0)."""
    return GameSession(config=origin_config, storage=storage)


@pytest.fixture
def classroom() -> LatLng:
    """The default start position, rounded."""
    return LatLng(36.9979, -122.0570)

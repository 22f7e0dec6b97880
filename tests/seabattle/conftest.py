from __future__ import annotations

import random

import pytest

from seabattle.game.core.coordinates import Coordinate
from seabattle.game.core.placement import NO_SHIP, ShipId, ShipPlacementField, ShipState
from seabattle.game.core.visibility import VisibilityField


def _make_field(size: int, ships: dict[int, list[tuple[int, int]]]) -> ShipPlacementField:
    """Build a placement field from ``{ship_id: [(row, col), ...]}``."""
    occupied = {
        Coordinate(row, col): ShipState.ship(ShipId(ship_id))
        for ship_id, cells in ships.items()
        for row, col in cells
    }
    return ShipPlacementField.from_indexes(
        size, lambda row, col: occupied.get(Coordinate(row, col), NO_SHIP)
    )


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def empty_visibility() -> VisibilityField:
    return VisibilityField.default_field(5)


@pytest.fixture
def make_field():
    return _make_field

import random

import pytest

from seabattle.game.core.coordinates import Coordinate
from seabattle.game.core.fleet import (
    FleetBuilder,
    Orientation,
    PlacementError,
    is_straight_run,
    random_fleet,
    ship_run,
)
from seabattle.game.core.placement import NO_SHIP, ShipId


def test_ship_run_horizontal_and_vertical() -> None:
    assert ship_run(Coordinate(1, 2), 3, Orientation.HORIZONTAL) == [
        Coordinate(1, 2),
        Coordinate(1, 3),
        Coordinate(1, 4),
    ]
    assert ship_run(Coordinate(1, 2), 3, Orientation.VERTICAL) == [
        Coordinate(1, 2),
        Coordinate(2, 2),
        Coordinate(3, 2),
    ]
    with pytest.raises(ValueError):
        ship_run(Coordinate(0, 0), 0, Orientation.VERTICAL)


def test_is_straight_run() -> None:
    assert is_straight_run([Coordinate(0, 0)])
    assert is_straight_run([Coordinate(0, 2), Coordinate(0, 1), Coordinate(0, 0)])
    assert not is_straight_run([])
    assert not is_straight_run([Coordinate(0, 0), Coordinate(0, 2)])
    assert not is_straight_run([Coordinate(0, 0), Coordinate(1, 1)])
    assert not is_straight_run([Coordinate(0, 0), Coordinate(0, 0)])


def test_place_allocates_increasing_ids_and_writes_cells() -> None:
    builder = FleetBuilder.empty(6)
    first = builder.place(ship_run(Coordinate(0, 0), 2, Orientation.HORIZONTAL))
    second = builder.place(ship_run(Coordinate(3, 0), 3, Orientation.VERTICAL))
    assert first == ShipId(1)
    assert second == ShipId(2)
    assert builder.field.ship_cells(first) == {Coordinate(0, 0), Coordinate(0, 1)}
    assert len(builder.field.ship_cells(second)) == 3


def test_builder_continues_after_existing_ids() -> None:
    builder = FleetBuilder.empty(5)
    builder.place([Coordinate(0, 0)])
    resumed = FleetBuilder(builder.field)
    assert resumed.place([Coordinate(4, 4)]) == ShipId(2)


def test_rejects_touching_including_diagonal() -> None:
    builder = FleetBuilder.empty(5)
    builder.place(ship_run(Coordinate(1, 1), 2, Orientation.HORIZONTAL))
    assert not builder.can_place([Coordinate(2, 3)])
    assert not builder.can_place([Coordinate(0, 0)])
    assert not builder.can_place([Coordinate(1, 1)])
    assert builder.can_place([Coordinate(3, 3)])
    valid, reason = builder.validate([Coordinate(2, 1)])
    assert not valid
    assert "touch" in reason


def test_rejects_out_of_bounds_and_bent_ships() -> None:
    builder = FleetBuilder.empty(4)
    valid, reason = builder.validate(ship_run(Coordinate(0, 2), 3, Orientation.HORIZONTAL))
    assert not valid
    assert "outside" in reason
    with pytest.raises(PlacementError):
        builder.place([Coordinate(0, 0), Coordinate(1, 1)])
    with pytest.raises(PlacementError):
        builder.place([])


def test_random_fleet_places_non_touching_ships(seeded_rng: random.Random) -> None:
    lengths = [4, 3, 3, 2, 2, 2, 1, 1, 1, 1]
    field = random_fleet(seeded_rng, 10, lengths)
    assert sorted(len(field.ship_cells(ship_id)) for ship_id in field.ship_ids()) == sorted(lengths)
    for ship_id in field.ship_ids():
        for coord in field.ship_cells(ship_id):
            with field.get(coord) as cell:
                assert set(field.neighbouring_ship_ids(cell)) <= {ship_id}


def test_random_fleet_gives_up_when_ships_cannot_fit() -> None:
    with pytest.raises(PlacementError):
        random_fleet(random.Random(1), 3, [3, 3, 3], attempts=5)


def test_ids_are_not_reused_after_cells_are_cleared() -> None:
    builder = FleetBuilder.empty(5)
    builder.place([Coordinate(0, 0)])
    last = builder.place([Coordinate(4, 4)])
    with builder.field.get_mut(Coordinate(4, 4)) as cell:
        cell.value = NO_SHIP
    assert last not in builder.field.ship_index
    assert FleetBuilder(builder.field).place([Coordinate(2, 2)]) == ShipId(3)

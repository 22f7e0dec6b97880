from seabattle.game.core.coordinates import DIRECTIONS, Coordinate, Direction


def test_directions_enumerate_clockwise_from_up_left() -> None:
    assert DIRECTIONS == (
        Direction.UP_LEFT,
        Direction.UP,
        Direction.UP_RIGHT,
        Direction.RIGHT,
        Direction.DOWN_RIGHT,
        Direction.DOWN,
        Direction.DOWN_LEFT,
        Direction.LEFT,
    )


def test_apply_steps_one_cell() -> None:
    origin = Coordinate(2, 2)
    assert Direction.UP_LEFT.apply(origin) == Coordinate(1, 1)
    assert Direction.UP.apply(origin) == Coordinate(1, 2)
    assert Direction.UP_RIGHT.apply(origin) == Coordinate(1, 3)
    assert Direction.RIGHT.apply(origin) == Coordinate(2, 3)
    assert Direction.DOWN_RIGHT.apply(origin) == Coordinate(3, 3)
    assert Direction.DOWN.apply(origin) == Coordinate(3, 2)
    assert Direction.DOWN_LEFT.apply(origin) == Coordinate(3, 1)
    assert Direction.LEFT.apply(origin) == Coordinate(2, 1)


def test_apply_below_zero_yields_none() -> None:
    corner = Coordinate(0, 0)
    assert Direction.UP.apply(corner) is None
    assert Direction.LEFT.apply(corner) is None
    assert Direction.UP_RIGHT.apply(corner) is None
    assert Direction.DOWN_LEFT.apply(corner) is None
    assert Direction.DOWN_RIGHT.apply(corner) == Coordinate(1, 1)


def test_apply_does_not_check_upper_bound() -> None:
    assert Direction.DOWN_RIGHT.apply(Coordinate(9, 9)) == Coordinate(10, 10)

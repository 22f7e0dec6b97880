"""Ship placement with id allocation and the no-touching rule."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from enum import StrEnum

from seabattle.game.core.coordinates import Coordinate
from seabattle.game.core.placement import ShipId, ShipPlacementField, ShipState

logger = logging.getLogger(__name__)


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


class PlacementError(ValueError):
    """A ship cannot be placed at the requested cells."""


def ship_run(bow: Coordinate, length: int, orientation: Orientation) -> list[Coordinate]:
    """Compute the cells of a straight ship starting at ``bow``."""
    if length <= 0:
        raise ValueError(f"Ship length must be positive, got {length}.")
    if orientation is Orientation.HORIZONTAL:
        return [Coordinate(bow.row, bow.col + i) for i in range(length)]
    return [Coordinate(bow.row + i, bow.col) for i in range(length)]


def is_straight_run(cells: Sequence[Coordinate]) -> bool:
    """Return whether the cells form one contiguous horizontal or vertical line."""
    if not cells:
        return False
    rows = {cell.row for cell in cells}
    cols = {cell.col for cell in cells}
    if len(rows) == 1:
        line = sorted(cell.col for cell in cells)
    elif len(cols) == 1:
        line = sorted(cell.row for cell in cells)
    else:
        return False
    return line == list(range(line[0], line[0] + len(cells)))


class FleetBuilder:
    """Places ships on a field and hands out ship ids that are never reused."""

    def __init__(self, field: ShipPlacementField) -> None:
        self._field = field

    @classmethod
    def empty(cls, size: int) -> FleetBuilder:
        return cls(ShipPlacementField.default_field(size))

    @property
    def field(self) -> ShipPlacementField:
        return self._field

    def validate(self, cells: Sequence[Coordinate]) -> tuple[bool, str]:
        """Validate a placement and return ``(valid, reason)``."""
        if not cells:
            return False, "Ship must occupy at least one cell."
        for cell in cells:
            if not self._field.contains(cell):
                size = self._field.size
                return False, f"Cell ({cell.row}, {cell.col}) is outside the {size}x{size} field."
        if not is_straight_run(cells):
            return False, "Ship cells must form a straight contiguous run."
        for cell in cells:
            with self._field.get(cell) as view:
                occupant = self._field.has_ship(view)
                neighbours = self._field.neighbouring_ship_ids(view)
            if occupant is not None:
                return False, f"Cell ({cell.row}, {cell.col}) is already occupied."
            if neighbours:
                return False, f"Ship would touch ship {neighbours[0].value}."
        return True, ""

    def can_place(self, cells: Sequence[Coordinate]) -> bool:
        return self.validate(cells)[0]

    def place(self, cells: Sequence[Coordinate]) -> ShipId:
        """Place a ship and return its newly allocated id."""
        valid, reason = self.validate(cells)
        if not valid:
            raise PlacementError(reason)
        ship_id = self._field.ship_index.allocate()
        state = ShipState.ship(ship_id)
        for cell in cells:
            with self._field.get_mut(cell) as view:
                view.value = state
        logger.debug("ship_placed id=%d cells=%d", ship_id.value, len(cells))
        return ship_id


def random_fleet(
    rng: random.Random,
    size: int,
    lengths: Sequence[int],
    *,
    attempts: int = 400,
) -> ShipPlacementField:
    """Generate a field with non-touching ships of the given lengths."""
    for _ in range(attempts):
        builder = FleetBuilder.empty(size)
        if _place_all(builder, rng, lengths):
            return builder.field
    raise PlacementError(f"Failed to place ships {list(lengths)} on a {size}x{size} field.")


def _place_all(builder: FleetBuilder, rng: random.Random, lengths: Sequence[int]) -> bool:
    for length in lengths:
        candidates = _candidate_runs(builder, length)
        if not candidates:
            return False
        builder.place(rng.choice(candidates))
    return True


def _candidate_runs(builder: FleetBuilder, length: int) -> list[list[Coordinate]]:
    size = builder.field.size
    # A single cell reads the same in both orientations.
    orientations = (Orientation.HORIZONTAL,) if length == 1 else tuple(Orientation)
    candidates: list[list[Coordinate]] = []
    for orientation in orientations:
        max_row = size if orientation is Orientation.HORIZONTAL else size - length + 1
        max_col = size - length + 1 if orientation is Orientation.HORIZONTAL else size
        for row in range(max_row):
            for col in range(max_col):
                cells = ship_run(Coordinate(row, col), length, orientation)
                if builder.can_place(cells):
                    candidates.append(cells)
    return candidates

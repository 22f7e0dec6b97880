"""Grid coordinates and compass directions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Grid position; only meaningful relative to a grid size."""

    row: int
    col: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)


class Direction(Enum):
    """The eight compass directions as (row, col) deltas."""

    UP_LEFT = (-1, -1)
    UP = (-1, 0)
    UP_RIGHT = (-1, 1)
    RIGHT = (0, 1)
    DOWN_RIGHT = (1, 1)
    DOWN = (1, 0)
    DOWN_LEFT = (1, -1)
    LEFT = (0, -1)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value

    def apply(self, coord: Coordinate) -> Coordinate | None:
        """Step one cell in this direction.

        Returns None when the step would leave the grid through row or column zero.
        The upper bound depends on the grid and is not checked here.
        """
        d_row, d_col = self.value
        row = coord.row + d_row
        col = coord.col + d_col
        if row < 0 or col < 0:
            return None
        return Coordinate(row, col)


DIRECTIONS: tuple[Direction, ...] = tuple(Direction)

"""Fixed-size square grid with bounds-checked, borrow-tracked cell views.

A grid hands out short-lived views bound to one coordinate. Any number of
read-only ``CellView`` objects may be live at once, or exactly one
``CellViewMut``, never both. Views count as live until they are released
(explicitly, by leaving a ``with`` block, or by being garbage collected).
"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Iterator, Sequence
from typing import Any, Generic, TypeVar

import numpy as np

from seabattle.game.core.coordinates import DIRECTIONS, Coordinate, Direction
from seabattle.game.core.errors import BorrowError, CellOutOfBound

T = TypeVar("T")
GridT = TypeVar("GridT", bound="Grid[Any]")


class Grid(Generic[T]):
    """Square grid of ``size * size`` cells stored row-major in a flat array."""

    def __init__(self, size: int, cells: Sequence[T]) -> None:
        if size < 0:
            raise ValueError(f"Grid size must be non-negative, got {size}.")
        if len(cells) != size * size:
            raise ValueError(f"Grid of size {size} needs {size * size} cells, got {len(cells)}.")
        self._size = size
        self._cells = np.empty(size * size, dtype=object)
        for offset, value in enumerate(cells):
            self._cells[offset] = value
        self._views: weakref.WeakSet[_BaseCellView[T]] = weakref.WeakSet()

    @classmethod
    def from_indexes(cls: type[GridT], size: int, generator: Callable[[int, int], Any]) -> GridT:
        """Build a grid by calling ``generator(row, col)`` for every cell in row-major order."""
        return cls(size, [generator(row, col) for row in range(size) for col in range(size)])

    @classmethod
    def from_nested_slices(cls: type[GridT], rows: Sequence[Sequence[Any]]) -> GridT:
        """Build a grid from a list of equally long rows.

        Ragged or non-square input is malformed construction data and raises ``ValueError``.
        """
        size = len(rows)
        cells: list[Any] = []
        for index, row in enumerate(rows):
            if len(row) != size:
                raise ValueError(f"Row {index} has {len(row)} cells, expected {size}.")
            cells.extend(row)
        return cls(size, cells)

    @classmethod
    def default_field(
        cls: type[GridT], size: int, default: Callable[[], Any] | None = None
    ) -> GridT:
        """Build a grid with every cell set to the default value."""
        factory = default if default is not None else cls.default_cell_factory()
        return cls(size, [factory() for _ in range(size * size)])

    @classmethod
    def default_cell_factory(cls) -> Callable[[], T]:
        """Return the factory producing this grid type's default cell."""
        raise TypeError(f"{cls.__name__} has no default cell value; pass a factory.")

    @property
    def size(self) -> int:
        return self._size

    def contains(self, coord: Coordinate) -> bool:
        """Return whether the coordinate is inside this grid."""
        return 0 <= coord.row < self._size and 0 <= coord.col < self._size

    def validate(self, coord: Coordinate) -> Coordinate:
        """Return the coordinate unchanged or raise ``CellOutOfBound``."""
        if not self.contains(coord):
            raise CellOutOfBound(self._size, coord.row, coord.col)
        return coord

    def get(self, coord: Coordinate) -> CellView[T]:
        """Return a read-only view of the cell at ``coord``."""
        self.validate(coord)
        if self._writer() is not None:
            raise BorrowError(f"Cannot read {coord}: grid is mutably borrowed.")
        return self._attach(CellView(self, coord))

    def get_mut(self, coord: Coordinate) -> CellViewMut[T]:
        """Return the single mutable view of the cell at ``coord``."""
        self.validate(coord)
        if len(self._views):
            raise BorrowError(f"Cannot write {coord}: grid already has live views.")
        return self._attach(CellViewMut(self, coord))

    def coordinates(self) -> Iterator[Coordinate]:
        """Yield every coordinate in row-major order."""
        for row, col in np.ndindex(self._size, self._size):
            yield Coordinate(row, col)

    def rows(self) -> list[list[T]]:
        """Return a row-major snapshot of all cells."""
        return self.as_array().tolist()

    def as_array(self) -> np.ndarray:
        """Return a read-only ``(size, size)`` view over the cells."""
        if self._writer() is not None:
            raise BorrowError("Cannot read cells: grid is mutably borrowed.")
        view = self._cells.reshape(self._size, self._size)
        view.flags.writeable = False
        return view

    def _offset(self, coord: Coordinate) -> int:
        return coord.row * self._size + coord.col

    def _read(self, coord: Coordinate) -> T:
        return self._cells[self._offset(coord)]

    def _write(self, coord: Coordinate, value: T) -> None:
        self._cells[self._offset(coord)] = value

    def _writer(self) -> CellViewMut[T] | None:
        for view in self._views:
            if isinstance(view, CellViewMut):
                return view
        return None

    def _attach(self, view: _ViewT) -> _ViewT:
        self._views.add(view)
        return view

    def _detach(self, view: _BaseCellView[T]) -> None:
        self._views.discard(view)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        if type(self) is not type(other) or self._size != other._size:
            return False
        return bool(np.array_equal(self._cells, other._cells))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size})"


class _BaseCellView(Generic[T]):
    """Shared state of read-only and mutable cell views."""

    __slots__ = ("_grid", "_coord", "_released", "__weakref__")

    def __init__(self, grid: Grid[T], coord: Coordinate) -> None:
        self._grid = grid
        self._coord = coord
        self._released = False

    @property
    def grid(self) -> Grid[T]:
        return self._grid

    @property
    def coord(self) -> Coordinate:
        return self._coord

    @property
    def released(self) -> bool:
        return self._released

    @property
    def value(self) -> T:
        self._ensure_live()
        return self._grid._read(self._coord)

    def release(self) -> None:
        """End this view's borrow. Safe to call more than once."""
        if not self._released:
            self._released = True
            self._grid._detach(self)

    def _ensure_live(self) -> None:
        if self._released:
            raise BorrowError(f"Cell view at {self._coord} has been released.")

    def _neighbour_coord(self, direction: Direction) -> Coordinate | None:
        self._ensure_live()
        coord = direction.apply(self._coord)
        if coord is None or not self._grid.contains(coord):
            return None
        return coord

    def __enter__(self: _ViewT) -> _ViewT:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"{type(self).__name__}(row={self._coord.row}, col={self._coord.col}, {state})"


_ViewT = TypeVar("_ViewT", bound=_BaseCellView[Any])


class CellView(_BaseCellView[T]):
    """Read-only view of one grid cell."""

    __slots__ = ()

    def neighbour(self, direction: Direction) -> CellView[T] | None:
        """Return a view of the adjacent cell, or None when it is off-grid."""
        coord = self._neighbour_coord(direction)
        if coord is None:
            return None
        return self._grid.get(coord)

    def neighbours(self) -> list[CellView[T]]:
        """Return views of all in-grid neighbours in ``Direction`` order."""
        result: list[CellView[T]] = []
        for direction in DIRECTIONS:
            neighbour = self.neighbour(direction)
            if neighbour is not None:
                result.append(neighbour)
        return result


class CellViewMut(_BaseCellView[T]):
    """Exclusive read-write view of one grid cell."""

    __slots__ = ()

    @property
    def value(self) -> T:
        self._ensure_live()
        return self._grid._read(self._coord)

    @value.setter
    def value(self, new_value: T) -> None:
        self._ensure_live()
        self._grid._write(self._coord, new_value)

    def neighbour(self, direction: Direction) -> CellViewMut[T] | None:
        """Move the exclusive borrow to the adjacent cell.

        This view is released when a neighbour is returned. It stays live when the
        neighbour is off-grid and None is returned.
        """
        coord = self._neighbour_coord(direction)
        if coord is None:
            return None
        self.release()
        return self._grid.get_mut(coord)

    def downgrade(self) -> CellView[T]:
        """Trade this mutable view for a read-only view of the same cell."""
        self._ensure_live()
        self.release()
        return self._grid.get(self._coord)

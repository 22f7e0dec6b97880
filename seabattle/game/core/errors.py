"""Errors raised by grid access."""

from __future__ import annotations


class FieldError(Exception):
    """Base class for recoverable grid errors."""


class CellOutOfBound(FieldError):
    """Coordinate lies outside ``[0, size) x [0, size)``."""

    def __init__(self, size: int, row: int, col: int) -> None:
        super().__init__(f"Cell out of bound ({row}:{col} in {size}:{size})")
        self.size = size
        self.row = row
        self.col = col

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellOutOfBound):
            return NotImplemented
        return (self.size, self.row, self.col) == (other.size, other.row, other.col)

    def __hash__(self) -> int:
        return hash((self.size, self.row, self.col))


class BorrowError(RuntimeError):
    """A cell view was requested or used in violation of the single-writer rule."""

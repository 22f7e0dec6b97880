"""Grid primitives, placement/visibility fields and shot resolution."""

from seabattle.game.core.coordinates import DIRECTIONS, Coordinate, Direction
from seabattle.game.core.errors import BorrowError, CellOutOfBound, FieldError
from seabattle.game.core.fleet import FleetBuilder, Orientation, PlacementError, random_fleet, ship_run
from seabattle.game.core.grid import CellView, CellViewMut, Grid
from seabattle.game.core.placement import NO_SHIP, ShipId, ShipIndex, ShipPlacementField, ShipState
from seabattle.game.core.shot_resolution import PlayingMessage, all_ships_sunk, check_hit
from seabattle.game.core.visibility import VisibilityField, VisibilityState

__all__ = [
    "DIRECTIONS",
    "NO_SHIP",
    "BorrowError",
    "CellOutOfBound",
    "CellView",
    "CellViewMut",
    "Coordinate",
    "Direction",
    "FieldError",
    "FleetBuilder",
    "Grid",
    "Orientation",
    "PlacementError",
    "PlayingMessage",
    "ShipId",
    "ShipIndex",
    "ShipPlacementField",
    "ShipState",
    "VisibilityField",
    "VisibilityState",
    "all_ships_sunk",
    "check_hit",
    "random_fleet",
    "ship_run",
]

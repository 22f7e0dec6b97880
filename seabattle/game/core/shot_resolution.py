"""Shot outcome evaluation (water/hit/sunk/ineffective)."""

from __future__ import annotations

import logging
from enum import StrEnum

from seabattle.game.core.coordinates import Coordinate
from seabattle.game.core.placement import ShipId, ShipPlacementField
from seabattle.game.core.visibility import VisibilityField, VisibilityState

logger = logging.getLogger(__name__)


class PlayingMessage(StrEnum):
    """Outcome of a single shot."""

    WATER_HIT = "WATER_HIT"
    SHIP_HIT = "SHIP_HIT"
    SHIP_SUNK = "SHIP_SUNK"
    INEFFECTIVE_HIT = "INEFFECTIVE_HIT"

    def turn_ends(self) -> bool:
        """Return whether the turn passes to the opponent."""
        return self is not PlayingMessage.INEFFECTIVE_HIT


def check_hit(
    visibility_field: VisibilityField,
    opponent_field: ShipPlacementField,
    attempt: Coordinate,
) -> PlayingMessage:
    """Resolve a shot at ``attempt`` and record it in ``visibility_field``.

    Raises ``CellOutOfBound`` before touching either field when the coordinate
    or any cell of the hit ship is outside the visibility or opponent field.
    Shots at cells that are no longer ``UNKNOWN`` return ``INEFFECTIVE_HIT`` and change nothing.
    """
    with visibility_field.get(attempt) as seen:
        known = seen.value
    if known != VisibilityState.UNKNOWN:
        logger.debug("shot_ineffective row=%d col=%d state=%s", attempt.row, attempt.col, known)
        return PlayingMessage.INEFFECTIVE_HIT

    with opponent_field.get(attempt) as target:
        ship_id = opponent_field.has_ship(target)

    if ship_id is None:
        _mark(visibility_field, attempt, VisibilityState.MISS_SHOWN)
        result = PlayingMessage.WATER_HIT
    else:
        # Every ship cell must validate before the visibility cell is written.
        sunk = _is_sunk(visibility_field, opponent_field, ship_id, hit=attempt)
        _mark(visibility_field, attempt, VisibilityState.HIT_SHOWN)
        result = PlayingMessage.SHIP_SUNK if sunk else PlayingMessage.SHIP_HIT
    logger.debug("shot_resolved row=%d col=%d result=%s", attempt.row, attempt.col, result)
    return result


def all_ships_sunk(visibility_field: VisibilityField, opponent_field: ShipPlacementField) -> bool:
    """Return whether every indexed opponent ship is fully ``HIT_SHOWN``.

    A field without ships counts as sunk.
    """
    return all(
        _is_sunk(visibility_field, opponent_field, ship_id) for ship_id in opponent_field.ship_ids()
    )


def _mark(visibility_field: VisibilityField, coord: Coordinate, state: VisibilityState) -> None:
    with visibility_field.get_mut(coord) as cell:
        cell.value = state


def _is_sunk(
    visibility_field: VisibilityField,
    opponent_field: ShipPlacementField,
    ship_id: ShipId,
    *,
    hit: Coordinate | None = None,
) -> bool:
    """Return whether every cell of the ship is hit, counting ``hit`` as hit.

    All ship cells are validated against the visibility field first.
    """
    cells = opponent_field.ship_cells(ship_id)
    for coord in cells:
        visibility_field.validate(coord)
    for coord in cells:
        if coord == hit:
            continue
        with visibility_field.get(coord) as cell:
            if cell.value != VisibilityState.HIT_SHOWN:
                return False
    return True

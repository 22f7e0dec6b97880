"""What a firing player knows about the opponent's field."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from seabattle.game.core.grid import Grid


class VisibilityState(StrEnum):
    """Knowledge about one opponent cell."""

    UNKNOWN = "UNKNOWN"
    # Revealed without being fired at; produced by session-layer rules only.
    AUTO_SHOWN = "AUTO_SHOWN"
    MISS_SHOWN = "MISS_SHOWN"
    HIT_SHOWN = "HIT_SHOWN"


class VisibilityField(Grid[VisibilityState]):
    """Per-player grid of visibility states over the opponent's board."""

    @classmethod
    def default_cell_factory(cls) -> Callable[[], VisibilityState]:
        return lambda: VisibilityState.UNKNOWN

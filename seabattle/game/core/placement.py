"""Ship placement field and its ship-to-cells reverse index."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from seabattle.game.core.coordinates import Coordinate
from seabattle.game.core.grid import CellView, Grid


@dataclass(frozen=True, slots=True, order=True)
class ShipId:
    """Positive identifier of one ship within a player's fleet."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(f"ShipId must be positive, got {self.value}.")


@dataclass(frozen=True, slots=True)
class ShipState:
    """Content of one placement cell: empty water or part of a ship."""

    ship_id: ShipId | None = None

    @classmethod
    def ship(cls, ship_id: ShipId) -> ShipState:
        return cls(ship_id)

    @property
    def is_ship(self) -> bool:
        return self.ship_id is not None


NO_SHIP = ShipState()


@dataclass(slots=True)
class ShipIndex:
    """Reverse index from ship id to the coordinates it occupies."""

    _cells: dict[ShipId, set[Coordinate]] = field(default_factory=dict)
    _highest: int = 0

    def add(self, ship_id: ShipId, coord: Coordinate) -> None:
        self._cells.setdefault(ship_id, set()).add(coord)
        self._highest = max(self._highest, ship_id.value)

    @property
    def highest_id(self) -> int:
        """Largest id ever indexed or allocated, 0 when none."""
        return self._highest

    def allocate(self) -> ShipId:
        """Reserve an id above every id this index has seen."""
        self._highest += 1
        return ShipId(self._highest)

    def discard(self, ship_id: ShipId, coord: Coordinate) -> None:
        cells = self._cells.get(ship_id)
        if cells is None:
            return
        cells.discard(coord)
        if not cells:
            del self._cells[ship_id]

    def cells_of(self, ship_id: ShipId) -> frozenset[Coordinate]:
        """Return the cells of a ship, empty for unknown ids."""
        return frozenset(self._cells.get(ship_id, ()))

    def ship_ids(self) -> list[ShipId]:
        return sorted(self._cells)

    def __contains__(self, ship_id: object) -> bool:
        return ship_id in self._cells

    def __len__(self) -> int:
        return len(self._cells)


class ShipPlacementField(Grid[ShipState]):
    """Grid of ship states used during setup and as the target of shots.

    Every write keeps the embedded ``ShipIndex`` in sync, so sunk detection
    never has to scan the whole field.
    """

    def __init__(self, size: int, cells: Sequence[ShipState]) -> None:
        super().__init__(size, cells)
        self._index = ShipIndex()
        for coord in self.coordinates():
            state = self._read(coord)
            if state.ship_id is not None:
                self._index.add(state.ship_id, coord)

    @classmethod
    def default_cell_factory(cls) -> Callable[[], ShipState]:
        return lambda: NO_SHIP

    @property
    def ship_index(self) -> ShipIndex:
        return self._index

    def ship_ids(self) -> list[ShipId]:
        return self._index.ship_ids()

    def ship_cells(self, ship_id: ShipId) -> frozenset[Coordinate]:
        return self._index.cells_of(ship_id)

    def has_ship(self, cell: CellView[ShipState]) -> ShipId | None:
        """Return the id of the ship occupying the viewed cell, if any."""
        self._check_owner(cell)
        return cell.value.ship_id

    def neighbouring_ship_ids(self, cell: CellView[ShipState]) -> list[ShipId]:
        """Return ids of ships in the eight cells around the viewed cell.

        A ship touching several neighbouring cells is reported once per cell.
        """
        self._check_owner(cell)
        ids: list[ShipId] = []
        for neighbour in cell.neighbours():
            with neighbour:
                ship_id = neighbour.value.ship_id
            if ship_id is not None:
                ids.append(ship_id)
        return ids

    def _write(self, coord: Coordinate, value: ShipState) -> None:
        previous = self._read(coord)
        if previous.ship_id is not None:
            self._index.discard(previous.ship_id, coord)
        super()._write(coord, value)
        if value.ship_id is not None:
            self._index.add(value.ship_id, coord)

    def _check_owner(self, cell: CellView[ShipState]) -> None:
        if cell.grid is not self:
            raise ValueError("Cell view belongs to a different field.")

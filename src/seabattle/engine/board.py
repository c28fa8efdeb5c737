"""Board model and ship placement for the SeaBattle engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum

from seabattle.telemetry import get_meter, get_tracer

from .ship import FLEET_LENGTHS, Coordinate, Orientation, Ship, new_ship_id, ship_name

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.board")
meter = get_meter("seabattle.engine.board")

BOARD_SIZE = 8
DEFAULT_PLACEMENT_ATTEMPTS = 100

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_ship_placements",
    unit="1",
    description="Number of ship placements committed or abandoned",
)


class CellState(Enum):
    """Resolved state of a board cell from the perspective of shots taken."""

    EMPTY = "empty"
    HIT = "hit"
    MISS = "miss"


@dataclass(frozen=True)
class Cell:
    """One grid position; ship presence is tracked apart from the shot state."""

    row: int
    col: int
    state: CellState = CellState.EMPTY
    has_ship: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.row, self.col)


@dataclass(frozen=True)
class Board:
    """An 8×8 grid of cells plus the ships placed on it.

    Boards are immutable values. Every operation that changes a board returns
    a new one, sharing untouched rows with the old snapshot.
    """

    cells: tuple[tuple[Cell, ...], ...]
    ships: tuple[Ship, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        return len(self.cells)

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.row < self.size and 0 <= coord.col < self.size

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def cell_at(self, coord: Coordinate) -> Cell:
        return self.cells[coord.row][coord.col]

    def empty_cells(self) -> list[Coordinate]:
        """Return, in row-major order, every coordinate not yet fired upon."""
        return [
            cell.coordinate
            for row in self.cells
            for cell in row
            if cell.state is CellState.EMPTY
        ]

    def ship_at(self, coord: Coordinate) -> Ship | None:
        for ship in self.ships:
            if ship.occupies(coord):
                return ship
        return None

    def remaining_ships(self) -> list[Ship]:
        return [ship for ship in self.ships if not ship.sunk]

    def occupied_coordinates(self) -> set[Coordinate]:
        coords: set[Coordinate] = set()
        for ship in self.ships:
            coords.update(ship.positions)
        return coords

    def with_cells(self, updates: list[Cell]) -> Board:
        """Return a copy with the given cells swapped in."""
        rows = list(self.cells)
        for cell in updates:
            row = list(rows[cell.row])
            row[cell.col] = cell
            rows[cell.row] = tuple(row)
        return replace(self, cells=tuple(rows))

    def with_ship(self, ship: Ship) -> Board:
        """Return a copy where the ship sharing ``ship.id`` is replaced."""
        ships = tuple(ship if existing.id == ship.id else existing for existing in self.ships)
        return replace(self, ships=ships)


@dataclass(frozen=True)
class FleetPlacement:
    """Outcome of random fleet seeding."""

    board: Board
    placed: tuple[int, ...]
    skipped: tuple[int, ...]

    @property
    def complete(self) -> bool:
        return not self.skipped


def create_empty_board() -> Board:
    """Return a board with every cell empty and no ships."""
    cells = tuple(
        tuple(Cell(row, col) for col in range(BOARD_SIZE)) for row in range(BOARD_SIZE)
    )
    return Board(cells=cells)


def ship_run(row: int, col: int, length: int, orientation: Orientation) -> list[Coordinate]:
    """Coordinates covered by a ship extending right or down from its start."""
    if orientation is Orientation.HORIZONTAL:
        return [Coordinate(row, col + offset) for offset in range(length)]
    return [Coordinate(row + offset, col) for offset in range(length)]


def can_place_ship(
    board: Board, row: int, col: int, length: int, orientation: Orientation
) -> bool:
    """Determine whether a ship fits inside the grid without overlapping another."""
    for coord in ship_run(row, col, length, orientation):
        if not board.is_valid_coordinate(coord):
            return False
        if board.cell_at(coord).has_ship:
            return False
    return True


def place_ship(
    board: Board, row: int, col: int, length: int, orientation: Orientation
) -> Board:
    """Commit a ship to a copy of the board.

    Placement is not re-validated here; gate every call on ``can_place_ship``.
    """
    with tracer.start_as_current_span("board.place_ship") as span:
        span.set_attribute("ship.length", length)
        span.set_attribute("ship.start.row", row)
        span.set_attribute("ship.start.col", col)
        span.set_attribute("ship.orientation", orientation.value)
        positions = tuple(ship_run(row, col, length, orientation))
        ship = Ship(
            id=new_ship_id(),
            name=ship_name(length),
            length=length,
            positions=positions,
            orientation=orientation,
        )
        updated = board.with_cells(
            [replace(board.cell_at(coord), has_ship=True) for coord in positions]
        )
        PLACEMENT_COUNTER.add(1, attributes={"result": "success"})
        logger.info(
            "ship_placed",
            extra={
                "ship_name": ship.name,
                "orientation": orientation.name,
                "row": row,
                "col": col,
            },
        )
        return replace(updated, ships=updated.ships + (ship,))


def seed_fleet(
    board: Board,
    rng: random.Random | None = None,
    max_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
    lengths: tuple[int, ...] = FLEET_LENGTHS,
) -> FleetPlacement:
    """Randomly place ships, the whole fleet by default, skipping any that run out of attempts."""
    rng = rng or random.Random()
    with tracer.start_as_current_span("board.seed_fleet") as span:
        placed: list[int] = []
        skipped: list[int] = []
        for length in lengths:
            for attempt in range(1, max_attempts + 1):
                row = rng.randrange(board.size)
                col = rng.randrange(board.size)
                orientation = Orientation.HORIZONTAL if rng.random() < 0.5 else Orientation.VERTICAL
                if can_place_ship(board, row, col, length, orientation):
                    board = place_ship(board, row, col, length, orientation)
                    placed.append(length)
                    logger.debug(
                        "random_ship_placed", extra={"length": length, "attempts": attempt}
                    )
                    break
            else:
                skipped.append(length)
                PLACEMENT_COUNTER.add(1, attributes={"result": "skipped"})
                logger.warning(
                    "fleet_ship_skipped", extra={"length": length, "attempts": max_attempts}
                )
        span.set_attribute("fleet.placed", len(placed))
        span.set_attribute("fleet.skipped", len(skipped))
        return FleetPlacement(board=board, placed=tuple(placed), skipped=tuple(skipped))


def place_ships_randomly(board: Board, rng: random.Random | None = None) -> Board:
    """Return a copy of the board with the fleet placed at random."""
    return seed_fleet(board, rng).board

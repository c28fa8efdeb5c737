"""Ship domain model for the SeaBattle engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum

FLEET_LENGTHS: tuple[int, ...] = (5, 3, 2)

SHIP_NAMES: dict[int, str] = {
    5: "Warship",
    3: "Submarine",
    2: "Destroyer",
}


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int

    def neighbours(self) -> list[Coordinate]:
        """Return the orthogonal neighbours in the order up, down, left, right."""
        return [
            Coordinate(self.row - 1, self.col),
            Coordinate(self.row + 1, self.col),
            Coordinate(self.row, self.col - 1),
            Coordinate(self.row, self.col + 1),
        ]

    def is_checkerboard(self) -> bool:
        return (self.row + self.col) % 2 == 0


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def toggled(self) -> Orientation:
        return Orientation.VERTICAL if self is Orientation.HORIZONTAL else Orientation.HORIZONTAL


def ship_name(length: int) -> str:
    """Resolve the display name of a ship from its length."""
    return SHIP_NAMES.get(length, "Ship")


def new_ship_id() -> str:
    return f"ship-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Ship:
    """A single ship placed on a board.

    Ships are values: registering a hit returns an updated copy so that older
    board snapshots keep their own view of the fleet.
    """

    id: str
    name: str
    length: int
    positions: tuple[Coordinate, ...]
    orientation: Orientation
    hits: int = 0
    sunk: bool = False

    def occupies(self, coord: Coordinate) -> bool:
        return coord in self.positions

    def register_hit(self) -> Ship:
        """Return a copy with one more hit, sinking the ship at full length."""
        if self.sunk:
            return self
        hits = min(self.hits + 1, self.length)
        return replace(self, hits=hits, sunk=hits >= self.length)

    def overlaps(self, other: Ship) -> bool:
        """Return True if any coordinate overlaps with another ship."""
        return bool(set(self.positions) & set(other.positions))

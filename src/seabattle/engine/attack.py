"""Shot resolution and win detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from seabattle.telemetry import get_meter, get_tracer

from .board import Board, CellState
from .ship import Coordinate, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.attack")
meter = get_meter("seabattle.engine.attack")

SHOT_COUNTER = meter.create_counter(
    "seabattle_engine_shots",
    unit="1",
    description="Shots received by a board",
)


class ShotRejected(ValueError):
    """Raised for shots outside the grid or at an already resolved cell."""


@dataclass(frozen=True)
class AttackResult:
    """Updated board plus the outcome of a single shot."""

    board: Board
    hit: bool
    sunk: bool
    ship: Ship | None = None


def attack(board: Board, row: int, col: int) -> AttackResult:
    """Fire at (row, col) and return the resulting board and outcome."""
    coord = Coordinate(row, col)
    with tracer.start_as_current_span("board.receive_shot") as span:
        span.set_attribute("shot.row", row)
        span.set_attribute("shot.col", col)
        if not board.is_valid_coordinate(coord):
            logger.error("shot_rejected", extra={"row": row, "col": col, "reason": "out_of_bounds"})
            raise ShotRejected("Shot out of bounds.")
        cell = board.cell_at(coord)
        if cell.state is not CellState.EMPTY:
            logger.error("shot_rejected", extra={"row": row, "col": col, "reason": "duplicate"})
            raise ShotRejected("Cell has already been targeted.")

        if not cell.has_ship:
            updated = board.with_cells([replace(cell, state=CellState.MISS)])
            span.set_attribute("shot.outcome", "miss")
            SHOT_COUNTER.add(1, attributes={"outcome": "miss"})
            logger.info("shot_miss", extra={"row": row, "col": col})
            return AttackResult(board=updated, hit=False, sunk=False)

        updated = board.with_cells([replace(cell, state=CellState.HIT)])
        ship = board.ship_at(coord)
        if ship is None:
            # Cell flagged as occupied without an owning ship; count it as a plain hit.
            span.set_attribute("shot.outcome", "hit")
            SHOT_COUNTER.add(1, attributes={"outcome": "hit"})
            logger.warning("shot_hit_without_ship", extra={"row": row, "col": col})
            return AttackResult(board=updated, hit=True, sunk=False)

        ship = ship.register_hit()
        updated = updated.with_ship(ship)
        outcome = "sunk" if ship.sunk else "hit"
        span.set_attribute("shot.outcome", outcome)
        SHOT_COUNTER.add(1, attributes={"outcome": outcome})
        logger.info(
            "ship_sunk" if ship.sunk else "shot_hit",
            extra={"row": row, "col": col, "ship_name": ship.name, "hits": ship.hits},
        )
        return AttackResult(board=updated, hit=True, sunk=ship.sunk, ship=ship)


def is_game_over(board: Board) -> bool:
    """True once every ship on the board is sunk; an empty fleet counts as sunk."""
    return all(ship.sunk for ship in board.ships)

"""Computer opponent shot selection.

The opponent only knows which cells of the human board it has already
resolved. Medium difficulty hunts at random and then probes the orthogonal
neighbours of every hit. Hard difficulty samples checkerboard parity cells,
which any ship of length two or more must touch, and does not follow up on
hits.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from opentelemetry.trace import Span

from seabattle.engine.board import Board, CellState
from seabattle.engine.ship import Coordinate
from seabattle.telemetry import get_meter, get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.ai.targeting")
meter = get_meter("seabattle.ai.targeting")

FALLBACK_MOVE = Coordinate(0, 0)

MOVE_COUNTER = meter.create_counter(
    "seabattle_ai_moves",
    unit="1",
    description="Moves chosen by the computer opponent",
)


class Difficulty(Enum):
    """Opponent strength tiers."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, text: str) -> Difficulty:
        try:
            return cls(text.strip().lower())
        except ValueError as exc:
            choices = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown difficulty {text!r}; expected one of {choices}.") from exc


@dataclass
class TargetingState:
    """Cross-turn memory of the opponent for one game."""

    last_hit: Coordinate | None = None
    queue: deque[Coordinate] = field(default_factory=deque)

    def reset(self) -> None:
        self.last_hit = None
        self.queue.clear()


class OpponentAI:
    """Chooses the computer's shots and remembers hits between turns."""

    def __init__(self, rng: random.Random | None = None, state: TargetingState | None = None) -> None:
        self.rng = rng or random.Random()
        self.state = state if state is not None else TargetingState()

    def get_move(self, board: Board, difficulty: Difficulty) -> Coordinate:
        """Pick the next cell to fire at among the cells still unresolved."""
        with tracer.start_as_current_span("opponent.get_move") as span:
            span.set_attribute("difficulty", difficulty.value)
            available = board.empty_cells()
            if not available:
                logger.warning("opponent_no_empty_cells", extra={"difficulty": difficulty.value})
                return self._chosen(FALLBACK_MOVE, difficulty, "fallback", span)

            if difficulty is Difficulty.MEDIUM:
                while self.state.queue:
                    candidate = self.state.queue.popleft()
                    if board.cell_at(candidate).state is CellState.EMPTY:
                        return self._chosen(candidate, difficulty, "queue", span)
                    logger.debug(
                        "opponent_stale_candidate",
                        extra={"row": candidate.row, "col": candidate.col},
                    )
            elif difficulty is Difficulty.HARD:
                parity = [coord for coord in available if coord.is_checkerboard()]
                if parity:
                    return self._chosen(self.rng.choice(parity), difficulty, "parity", span)

            return self._chosen(self.rng.choice(available), difficulty, "random", span)

    def update_state(self, row: int, col: int, hit: bool, board: Board) -> None:
        """Queue the unresolved neighbours of a hit; misses leave memory alone."""
        if not hit:
            return
        shot = Coordinate(row, col)
        self.state.last_hit = shot
        for neighbour in shot.neighbours():
            if not board.is_valid_coordinate(neighbour):
                continue
            if board.cell_at(neighbour).state is CellState.EMPTY:
                self.state.queue.append(neighbour)
        logger.debug(
            "opponent_state_updated",
            extra={"row": row, "col": col, "queued": len(self.state.queue)},
        )

    def reset_state(self) -> None:
        self.state.reset()

    def _chosen(
        self, coord: Coordinate, difficulty: Difficulty, source: str, span: Span
    ) -> Coordinate:
        span.set_attribute("move.row", coord.row)
        span.set_attribute("move.col", coord.col)
        span.set_attribute("move.source", source)
        MOVE_COUNTER.add(1, attributes={"difficulty": difficulty.value, "source": source})
        logger.debug(
            "opponent_move",
            extra={
                "difficulty": difficulty.value,
                "source": source,
                "row": coord.row,
                "col": coord.col,
            },
        )
        return coord


def get_ai_move(
    board: Board,
    difficulty: Difficulty,
    state: TargetingState,
    rng: random.Random | None = None,
) -> Coordinate:
    return OpponentAI(rng, state).get_move(board, difficulty)


def update_ai_state(state: TargetingState, row: int, col: int, hit: bool, board: Board) -> None:
    OpponentAI(state=state).update_state(row, col, hit, board)


def reset_ai_state(state: TargetingState) -> None:
    state.reset()

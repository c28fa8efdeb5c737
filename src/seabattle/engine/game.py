"""Human versus computer game session."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from seabattle.ai.targeting import Difficulty, OpponentAI
from seabattle.telemetry import get_meter, get_tracer

from .attack import AttackResult, ShotRejected, attack, is_game_over
from .board import (
    DEFAULT_PLACEMENT_ATTEMPTS,
    Board,
    CellState,
    can_place_ship,
    create_empty_board,
    place_ship,
    seed_fleet,
)
from .ship import FLEET_LENGTHS, Coordinate, Orientation

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")
meter = get_meter("seabattle.engine.game")

MOVE_COUNTER = meter.create_counter(
    "seabattle_engine_moves",
    unit="1",
    description="Number of moves accepted by a GameSession",
)

MSG_SETUP = "Place your ships on the board!"
MSG_INVALID_PLACEMENT = "Cannot place ship here. Try a different position."
MSG_BATTLE = "Battle begins! Attack the enemy fleet!"
MSG_HIT = "Direct hit!"
MSG_SUNK = "Ship sunk!"
MSG_MISS = "Miss!"
MSG_AI_HIT = "AI hit your ship!"
MSG_AI_SUNK = "AI sunk your ship!"
MSG_AI_MISS = "AI missed!"
MSG_VICTORY = "Victory! You sank all enemy ships!"
MSG_DEFEAT = "Defeat! The AI sunk all your ships!"


class GamePhase(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    PLAYING = "playing"
    ENDED = "ended"


class Player(Enum):
    """The two sides of a match."""

    HUMAN = "player"
    COMPUTER = "ai"

    def opponent(self) -> Player:
        """Return the opposing player."""
        return Player.COMPUTER if self is Player.HUMAN else Player.HUMAN


@dataclass(frozen=True)
class ShipStatus:
    name: str
    length: int
    hits: int
    sunk: bool


@dataclass(frozen=True)
class BoardView:
    """Renderable view of a board.

    ``grid`` holds one symbol per cell: ``"hit"``, ``"miss"``, ``"ship"`` or
    ``"empty"``. Unresolved ship cells only appear as ``"ship"`` when the view
    was built for the board's owner. Per-ship hit counts are likewise zeroed
    in the opponent's view; only the sunk flag is shown.
    """

    grid: tuple[tuple[str, ...], ...]
    fleet: tuple[ShipStatus, ...]

    @classmethod
    def from_board(cls, board: Board, reveal_ships: bool) -> BoardView:
        grid = []
        for row in board.cells:
            symbols = []
            for cell in row:
                if cell.state is not CellState.EMPTY:
                    symbols.append(cell.state.value)
                elif reveal_ships and cell.has_ship:
                    symbols.append("ship")
                else:
                    symbols.append("empty")
            grid.append(tuple(symbols))
        fleet = tuple(
            ShipStatus(
                name=ship.name,
                length=ship.length,
                hits=ship.hits if reveal_ships else 0,
                sunk=ship.sunk,
            )
            for ship in board.ships
        )
        return cls(grid=tuple(grid), fleet=fleet)


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the current session."""

    phase: GamePhase
    current_player: Player
    winner: Player | None
    difficulty: Difficulty
    message: str
    own_view: BoardView
    enemy_view: BoardView
    next_ship_length: int | None
    orientation: Orientation


class GameSession:
    """Coordinates setup, turns and win detection for one human versus the computer.

    A session owns its boards and opponent memory exclusively; concurrent games
    need separate sessions. Calls that arrive in the wrong phase or turn are
    ignored rather than raised.
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng_seed: int | None = None,
        placement_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
    ) -> None:
        self._rng = random.Random(rng_seed)
        self.difficulty = difficulty
        self.placement_attempts = placement_attempts
        self.opponent = OpponentAI(rng=self._rng)
        self._new_game()

    def _new_game(self) -> None:
        self.opponent.reset_state()
        self.player_board: Board = create_empty_board()
        self.computer_board: Board = self._seed(create_empty_board())
        self.phase = GamePhase.SETUP
        self.current_player = Player.HUMAN
        self.winner: Player | None = None
        self.ship_index = 0
        self.orientation = Orientation.HORIZONTAL
        self.message = MSG_SETUP

    def _seed(self, board: Board, lengths: tuple[int, ...] = FLEET_LENGTHS) -> Board:
        result = seed_fleet(
            board, self._rng, max_attempts=self.placement_attempts, lengths=lengths
        )
        if not result.complete:
            logger.warning("fleet_incomplete", extra={"skipped": list(result.skipped)})
        return result.board

    @property
    def current_ship_length(self) -> int | None:
        """Length of the next ship to place, or None once the fleet is down."""
        if self.ship_index >= len(FLEET_LENGTHS):
            return None
        return FLEET_LENGTHS[self.ship_index]

    def toggle_orientation(self) -> Orientation:
        self.orientation = self.orientation.toggled()
        return self.orientation

    def change_difficulty(self, difficulty: Difficulty) -> None:
        self.difficulty = difficulty
        logger.info("difficulty_changed", extra={"difficulty": difficulty.value})

    def place_next_ship(self, row: int, col: int) -> bool:
        """Place the next fleet ship at (row, col) using the current orientation."""
        length = self.current_ship_length
        if self.phase is not GamePhase.SETUP or length is None:
            return False
        if not can_place_ship(self.player_board, row, col, length, self.orientation):
            self.message = MSG_INVALID_PLACEMENT
            logger.info(
                "placement_rejected",
                extra={"row": row, "col": col, "length": length, "orientation": self.orientation.name},
            )
            return False

        self.player_board = place_ship(self.player_board, row, col, length, self.orientation)
        self.ship_index += 1
        if self.current_ship_length is None:
            self._start_battle()
        return True

    def auto_place_fleet(self) -> None:
        """Randomly place whatever is left of the human fleet and start play."""
        if self.phase is not GamePhase.SETUP:
            return
        self.player_board = self._seed(self.player_board, FLEET_LENGTHS[self.ship_index:])
        self.ship_index = len(FLEET_LENGTHS)
        self._start_battle()

    def _start_battle(self) -> None:
        self.phase = GamePhase.PLAYING
        self.current_player = Player.HUMAN
        self.message = MSG_BATTLE
        logger.info("game_battle_started", extra={"difficulty": self.difficulty.value})

    def player_attack(self, row: int, col: int) -> AttackResult | None:
        """Fire the human's shot at the computer board, or None if it is not accepted."""
        if self.phase is not GamePhase.PLAYING or self.current_player is not Player.HUMAN:
            return None
        target = Coordinate(row, col)
        if not self.computer_board.is_valid_coordinate(target):
            return None
        if self.computer_board.cell_at(target).state is not CellState.EMPTY:
            return None

        with tracer.start_as_current_span("game.player_attack") as span:
            span.set_attribute("row", row)
            span.set_attribute("col", col)
            result = attack(self.computer_board, row, col)
            self.computer_board = result.board
            MOVE_COUNTER.add(1, attributes={"player": Player.HUMAN.value, "hit": result.hit})
            self.message = MSG_SUNK if result.sunk else MSG_HIT if result.hit else MSG_MISS

            if is_game_over(self.computer_board):
                self._finish(Player.HUMAN)
            else:
                self.current_player = Player.COMPUTER
            return result

    def computer_turn(self) -> tuple[Coordinate, AttackResult] | None:
        """Let the computer fire one shot at the human board."""
        if self.phase is not GamePhase.PLAYING or self.current_player is not Player.COMPUTER:
            return None

        with tracer.start_as_current_span("game.computer_turn") as span:
            move = self.opponent.get_move(self.player_board, self.difficulty)
            span.set_attribute("row", move.row)
            span.set_attribute("col", move.col)
            try:
                result = attack(self.player_board, move.row, move.col)
            except ShotRejected:
                # Only reachable through the fallback move on a fully resolved board.
                logger.error("computer_move_rejected", extra={"row": move.row, "col": move.col})
                return None
            self.player_board = result.board
            self.opponent.update_state(move.row, move.col, result.hit, result.board)
            MOVE_COUNTER.add(1, attributes={"player": Player.COMPUTER.value, "hit": result.hit})
            self.message = MSG_AI_SUNK if result.sunk else MSG_AI_HIT if result.hit else MSG_AI_MISS

            if is_game_over(self.player_board):
                self._finish(Player.COMPUTER)
            else:
                self.current_player = Player.HUMAN
            return move, result

    def _finish(self, winner: Player) -> None:
        self.winner = winner
        self.phase = GamePhase.ENDED
        self.message = MSG_VICTORY if winner is Player.HUMAN else MSG_DEFEAT
        logger.info("game_finished", extra={"winner": winner.value})

    def reset(self) -> None:
        """Start a new game, keeping the chosen difficulty."""
        self._new_game()
        logger.info("game_reset", extra={"difficulty": self.difficulty.value})

    def valid_targets(self) -> list[Coordinate]:
        """Cells of the computer board the human may still fire at."""
        if self.phase is not GamePhase.PLAYING:
            return []
        return self.computer_board.empty_cells()

    def get_state(self) -> GameState:
        """Return an immutable view of the current match."""
        return GameState(
            phase=self.phase,
            current_player=self.current_player,
            winner=self.winner,
            difficulty=self.difficulty,
            message=self.message,
            own_view=BoardView.from_board(self.player_board, reveal_ships=True),
            enemy_view=BoardView.from_board(self.computer_board, reveal_ships=False),
            next_ship_length=self.current_ship_length,
            orientation=self.orientation,
        )

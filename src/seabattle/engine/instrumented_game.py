"""Game session with telemetry hooks."""

from __future__ import annotations

import time

from opentelemetry.trace import Span

from seabattle.engine.attack import AttackResult
from seabattle.engine.game import GamePhase, GameSession, Player
from seabattle.engine.ship import Coordinate
from seabattle.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedGameSession(GameSession):
    """Wraps GameSession with tracing, metrics, and logging."""

    def __init__(self, *args, **kwargs) -> None:
        self._logger = get_logger("seabattle.engine")
        self._tracer = get_tracer("seabattle.engine")
        self._game_id = 0
        self._game_start_time: float | None = None
        self._shots = 0
        super().__init__(*args, **kwargs)

    def _new_game(self) -> None:
        super()._new_game()
        self._game_id += 1
        self._game_start_time = time.perf_counter()
        self._shots = 0

    def reset(self) -> None:
        with self._tracer.start_as_current_span("seabattle.engine.reset") as span:
            super().reset()
            span.set_attribute("game.id", self._game_id)
            span.set_attribute("computer_ships", len(self.computer_board.ships))
            record_game_metric("seabattle_game_reset_total", 1, {"difficulty": self.difficulty.value})
            self._logger.info("Game %d reset difficulty=%s", self._game_id, self.difficulty.value)

    def player_attack(self, row: int, col: int) -> AttackResult | None:
        with self._tracer.start_as_current_span("seabattle.engine.player_attack") as span:
            span.set_attribute("game.id", self._game_id)
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)
            result = super().player_attack(row, col)
            if result is None:
                span.set_attribute("accepted", False)
                record_game_metric(
                    "seabattle_game_ignored_moves_total", 1, {"player": Player.HUMAN.value}
                )
                return None
            self._record_shot(span, Player.HUMAN, Coordinate(row, col), result)
            return result

    def computer_turn(self) -> tuple[Coordinate, AttackResult] | None:
        with self._tracer.start_as_current_span("seabattle.engine.computer_turn") as span:
            span.set_attribute("game.id", self._game_id)
            span.set_attribute("difficulty", self.difficulty.value)
            outcome = super().computer_turn()
            if outcome is None:
                span.set_attribute("accepted", False)
                return None
            move, result = outcome
            self._record_shot(span, Player.COMPUTER, move, result)
            return outcome

    def _record_shot(
        self, span: Span, player: Player, coord: Coordinate, result: AttackResult
    ) -> None:
        self._shots += 1
        outcome = "sunk" if result.sunk else "hit" if result.hit else "miss"
        span.set_attribute("accepted", True)
        span.set_attribute("shot_outcome", outcome)
        record_game_metric("seabattle_shots_total", 1, {"player": player.value})
        record_game_metric(
            "seabattle_shots_by_result_total", 1, {"player": player.value, "result": outcome}
        )
        self._logger.info(
            "%s fired at (%d,%d) outcome=%s", player.value, coord.row, coord.col, outcome
        )
        if self.phase is GamePhase.ENDED and self.winner is not None:
            span.set_attribute("winner", self.winner.value)
            self._finish_game()

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0
        winner = self.winner.value if self.winner else "unknown"
        attrs = {"winner": winner, "difficulty": self.difficulty.value}
        record_game_metric("seabattle_game_completed_total", 1, attrs)
        record_game_metric("seabattle_game_duration_seconds", duration, attrs)

        with self._tracer.start_as_current_span("seabattle.engine.game_complete") as span:
            span.set_attribute("game.id", self._game_id)
            span.set_attribute("winner", winner)
            span.set_attribute("shots", self._shots)
            span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Game %d finished. Winner=%s shots=%d duration_s=%.3f",
            self._game_id,
            winner,
            self._shots,
            duration,
        )

"""Command-line front-end for playing SeaBattle against the computer."""

from __future__ import annotations

import argparse
import time
from typing import Sequence

from seabattle.ai.targeting import Difficulty
from seabattle.engine.board import BOARD_SIZE
from seabattle.engine.game import BoardView, GamePhase, GameSession, Player
from seabattle.engine.instrumented_game import InstrumentedGameSession
from seabattle.engine.ship import Coordinate
from seabattle.settings import GameSettings
from seabattle.telemetry import init_telemetry
from seabattle.telemetry.logger import configure_console

ROW_LABELS = "ABCDEFGH"

SYMBOLS = {"hit": "X", "miss": "o", "ship": "S", "empty": "."}


def parse_coordinate(text: str) -> Coordinate:
    """Parse ``A5`` style or ``"3 7"`` style input into a zero-based coordinate."""
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    if cleaned[0].isalpha():
        if cleaned[0] not in ROW_LABELS:
            raise ValueError(f"Row must be between A and {ROW_LABELS[-1]}.")
        row = ROW_LABELS.index(cleaned[0])
        try:
            col = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError(f"Column must be a number between 1 and {BOARD_SIZE}.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or '3 7'.")
        try:
            row, col = map(int, parts)
        except ValueError as exc:
            raise ValueError("Use formats like A5 or '3 7'.") from exc
    if row not in range(BOARD_SIZE) or col not in range(BOARD_SIZE):
        raise ValueError(f"Coordinates must be within the {BOARD_SIZE}x{BOARD_SIZE} board.")
    return Coordinate(row, col)


def label(coord: Coordinate) -> str:
    return f"{ROW_LABELS[coord.row]}{coord.col + 1}"


def format_board(view: BoardView) -> str:
    header = "    " + " ".join(f"{col + 1:>2}" for col in range(len(view.grid)))
    rows = [header]
    for row, cells in enumerate(view.grid):
        symbols = " ".join(f"{SYMBOLS[cell]:>2}" for cell in cells)
        rows.append(f"{ROW_LABELS[row]} |{symbols}")
    return "\n".join(rows)


def format_fleet(view: BoardView, reveal_hits: bool) -> str:
    lines = []
    for ship in view.fleet:
        if ship.sunk:
            status = "Sunk"
        elif reveal_hits:
            status = f"{ship.hits}/{ship.length} hits"
        else:
            status = "Unknown"
        lines.append(f"  {ship.name:<10} {status}")
    return "\n".join(lines)


def _prompt(message: str) -> str:
    raw = input(message).strip()
    if raw.lower() == "q":
        raise SystemExit("Goodbye!")
    return raw


def _manual_setup(session: GameSession) -> None:
    while session.phase is GamePhase.SETUP:
        state = session.get_state()
        print("\nYour fleet:")
        print(format_board(state.own_view))
        raw = _prompt(
            f"Place ship of length {state.next_ship_length} ({state.orientation.value}). "
            "Start cell, 'o' to rotate, 'r' for random, 'q' to quit: "
        )
        if raw.lower() == "o":
            session.toggle_orientation()
            continue
        if raw.lower() == "r":
            session.auto_place_fleet()
            break
        try:
            coord = parse_coordinate(raw)
        except ValueError as exc:
            print(f"Invalid coordinate: {exc}")
            continue
        if not session.place_next_ship(coord.row, coord.col):
            print(session.message)


def _prompt_target(valid: Sequence[Coordinate]) -> Coordinate:
    valid_set = set(valid)
    while True:
        raw = _prompt("Enter target coordinate (e.g., A5) or 'q' to quit: ")
        try:
            coord = parse_coordinate(raw)
        except ValueError as exc:
            print(f"Invalid input: {exc}")
            continue
        if coord not in valid_set:
            print("That cell has already been targeted. Choose another.")
            continue
        return coord


def play_game(settings: GameSettings, seed: int | None = None, auto_place: bool = False) -> None:
    print("Welcome to SeaBattle! Sink the enemy fleet before they sink yours.\n")
    session = InstrumentedGameSession(
        difficulty=settings.difficulty,
        rng_seed=seed,
        placement_attempts=settings.placement_attempts,
    )
    print(f"Difficulty: {session.difficulty.value}")

    if auto_place:
        session.auto_place_fleet()
        print("Your ships have been positioned automatically.")
    else:
        _manual_setup(session)
    print(session.message)

    while session.phase is GamePhase.PLAYING:
        state = session.get_state()
        print("\nYour Fleet:")
        print(format_board(state.own_view))
        print(format_fleet(state.own_view, reveal_hits=True))
        print("\nEnemy Waters:")
        print(format_board(state.enemy_view))
        print(format_fleet(state.enemy_view, reveal_hits=False))

        coord = _prompt_target(session.valid_targets())
        session.player_attack(coord.row, coord.col)
        print(f"You fired at {label(coord)}: {session.message}")
        if session.current_player is not Player.COMPUTER:
            continue

        time.sleep(settings.ai_delay_seconds)
        outcome = session.computer_turn()
        if outcome is not None:
            move, _ = outcome
            print(f"The AI fired at {label(move)}: {session.message}")

    print(f"\n{session.message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play SeaBattle via the CLI.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--difficulty",
        choices=[item.value for item in Difficulty],
        default=None,
        help="Computer opponent strength (default from SEABATTLE_DIFFICULTY or medium).",
    )
    parser.add_argument(
        "--delay", type=float, default=None, help="Seconds to wait before the computer fires."
    )
    parser.add_argument(
        "--auto-place", action="store_true", help="Place your fleet randomly instead of by hand."
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_console()
    init_telemetry()
    settings = GameSettings.from_env(difficulty=args.difficulty, ai_delay_seconds=args.delay)
    play_game(settings, seed=args.seed, auto_place=args.auto_place)


if __name__ == "__main__":
    main()

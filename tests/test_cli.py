"""Tests for the command-line helpers."""

import pytest
from seabattle.cli import build_parser, format_board, format_fleet, parse_coordinate
from seabattle.engine.attack import attack
from seabattle.engine.board import create_empty_board, place_ship
from seabattle.engine.game import BoardView
from seabattle.engine.ship import Coordinate, Orientation


@pytest.mark.parametrize(
    "text, expected",
    [("A1", Coordinate(0, 0)), ("h8", Coordinate(7, 7)), (" C5 ", Coordinate(2, 4)), ("3 7", Coordinate(3, 7))],
)
def test_parse_coordinate(text: str, expected: Coordinate) -> None:
    assert parse_coordinate(text) == expected


@pytest.mark.parametrize("text", ["", "I1", "A9", "A", "1", "8 0", "x y"])
def test_parse_coordinate_rejects_bad_input(text: str) -> None:
    with pytest.raises(ValueError):
        parse_coordinate(text)


def test_format_board_hides_ships_in_enemy_view() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    board = attack(board, 0, 0).board
    board = attack(board, 1, 1).board

    own = format_board(BoardView.from_board(board, reveal_ships=True)).splitlines()
    enemy = format_board(BoardView.from_board(board, reveal_ships=False)).splitlines()
    assert own[1].split("|")[1].split()[:2] == ["X", "S"]
    assert enemy[1].split("|")[1].split()[:2] == ["X", "."]
    assert enemy[2].split("|")[1].split()[1] == "o"
    assert len(own) == 9


def test_format_fleet_hides_enemy_hit_counts() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    board = attack(board, 0, 0).board
    own = BoardView.from_board(board, reveal_ships=True)
    enemy = BoardView.from_board(board, reveal_ships=False)
    assert "1/2 hits" in format_fleet(own, reveal_hits=True)
    assert "Unknown" in format_fleet(enemy, reveal_hits=False)


def test_parser_options() -> None:
    args = build_parser().parse_args(["--seed", "4", "--difficulty", "hard", "--auto-place"])
    assert args.seed == 4
    assert args.difficulty == "hard"
    assert args.auto_place is True
    assert args.delay is None

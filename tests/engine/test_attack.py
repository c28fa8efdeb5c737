"""Tests for shot resolution and win detection."""

import pytest
from seabattle.engine.attack import ShotRejected, attack, is_game_over
from seabattle.engine.board import CellState, create_empty_board, place_ship
from seabattle.engine.ship import Orientation


def test_hit_then_sink_scenario() -> None:
    board = place_ship(create_empty_board(), 2, 2, 3, Orientation.HORIZONTAL)
    assert [(c.row, c.col) for c in board.ships[0].positions] == [(2, 2), (2, 3), (2, 4)]

    first = attack(board, 2, 2)
    assert (first.hit, first.sunk) == (True, False)
    second = attack(first.board, 2, 3)
    assert (second.hit, second.sunk) == (True, False)
    third = attack(second.board, 2, 4)
    assert (third.hit, third.sunk) == (True, True)
    assert third.ship is not None and third.ship.sunk
    assert is_game_over(third.board)


def test_game_not_over_until_whole_fleet_sunk() -> None:
    board = place_ship(create_empty_board(), 2, 2, 3, Orientation.HORIZONTAL)
    board = place_ship(board, 5, 0, 2, Orientation.VERTICAL)
    for col in (2, 3, 4):
        board = attack(board, 2, col).board
    assert not is_game_over(board)
    board = attack(board, 5, 0).board
    assert not is_game_over(board)
    board = attack(board, 6, 0).board
    assert is_game_over(board)


def test_hit_increments_exactly_one_ship() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    board = place_ship(board, 4, 4, 3, Orientation.VERTICAL)
    result = attack(board, 5, 4)
    assert result.board.cell(5, 4).state is CellState.HIT
    hits = {ship.length: ship.hits for ship in result.board.ships}
    assert hits == {2: 0, 3: 1}


def test_miss_leaves_ships_unchanged() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    result = attack(board, 7, 7)
    assert not result.hit and not result.sunk
    assert result.ship is None
    assert result.board.cell(7, 7).state is CellState.MISS
    assert result.board.ships == board.ships


def test_attack_does_not_mutate_input_board() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    attack(board, 0, 0)
    assert board.cell(0, 0).state is CellState.EMPTY
    assert board.ships[0].hits == 0


def test_repeat_attack_is_rejected_without_double_counting() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    board = attack(board, 0, 0).board
    with pytest.raises(ShotRejected):
        attack(board, 0, 0)
    assert board.ships[0].hits == 1

    board = attack(board, 3, 3).board
    with pytest.raises(ValueError):
        attack(board, 3, 3)


def test_out_of_bounds_attack_rejected() -> None:
    with pytest.raises(ShotRejected):
        attack(create_empty_board(), 8, 0)


def test_empty_fleet_is_game_over() -> None:
    assert is_game_over(create_empty_board())

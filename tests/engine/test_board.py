"""Tests for the board model and ship placement."""

import random

import pytest
from seabattle.engine.board import (
    BOARD_SIZE,
    CellState,
    can_place_ship,
    create_empty_board,
    place_ship,
    place_ships_randomly,
    seed_fleet,
    ship_run,
)
from seabattle.engine.ship import FLEET_LENGTHS, Coordinate, Orientation


def test_empty_board_has_no_ships_and_empty_cells() -> None:
    board = create_empty_board()
    assert board.size == BOARD_SIZE
    assert board.ships == ()
    assert all(
        cell.state is CellState.EMPTY and not cell.has_ship for row in board.cells for cell in row
    )
    assert len(board.empty_cells()) == BOARD_SIZE * BOARD_SIZE


@pytest.mark.parametrize(
    "row, col, length, orientation",
    [
        (0, 0, 5, Orientation.HORIZONTAL),
        (0, 3, 5, Orientation.HORIZONTAL),
        (3, 7, 5, Orientation.VERTICAL),
        (7, 6, 2, Orientation.HORIZONTAL),
    ],
)
def test_valid_placement_marks_exactly_the_run(row, col, length, orientation) -> None:
    board = create_empty_board()
    assert can_place_ship(board, row, col, length, orientation)

    placed = place_ship(board, row, col, length, orientation)
    run = ship_run(row, col, length, orientation)
    occupied = [cell.coordinate for r in placed.cells for cell in r if cell.has_ship]
    assert sorted(occupied, key=lambda c: (c.row, c.col)) == sorted(
        run, key=lambda c: (c.row, c.col)
    )
    assert len(placed.ships) == 1
    ship = placed.ships[0]
    assert list(ship.positions) == run
    assert ship.hits == 0 and not ship.sunk
    assert ship.orientation is orientation


@pytest.mark.parametrize(
    "row, col, length, orientation",
    [
        (0, 4, 5, Orientation.HORIZONTAL),
        (4, 0, 5, Orientation.VERTICAL),
        (7, 7, 2, Orientation.HORIZONTAL),
        (-1, 0, 2, Orientation.VERTICAL),
        (8, 0, 2, Orientation.HORIZONTAL),
    ],
)
def test_out_of_bounds_placement_rejected(row, col, length, orientation) -> None:
    assert not can_place_ship(create_empty_board(), row, col, length, orientation)


def test_overlapping_placement_rejected() -> None:
    board = place_ship(create_empty_board(), 2, 2, 3, Orientation.HORIZONTAL)
    assert not can_place_ship(board, 0, 3, 3, Orientation.VERTICAL)
    assert not can_place_ship(board, 2, 0, 3, Orientation.HORIZONTAL)
    assert can_place_ship(board, 3, 2, 3, Orientation.HORIZONTAL)


def test_place_ship_leaves_previous_snapshot_untouched() -> None:
    empty = create_empty_board()
    placed = place_ship(empty, 1, 1, 2, Orientation.VERTICAL)
    assert empty.ships == ()
    assert not empty.cell(1, 1).has_ship
    assert placed.cell(1, 1).has_ship and placed.cell(2, 1).has_ship


def test_ship_ids_are_unique() -> None:
    board = place_ship(create_empty_board(), 0, 0, 2, Orientation.HORIZONTAL)
    board = place_ship(board, 5, 0, 2, Orientation.HORIZONTAL)
    assert board.ships[0].id != board.ships[1].id


@pytest.mark.parametrize("seed", range(25))
def test_random_placement_populates_fleet_without_overlap(seed: int) -> None:
    board = place_ships_randomly(create_empty_board(), random.Random(seed))
    assert [ship.length for ship in board.ships] == list(FLEET_LENGTHS)
    coords = [coord for ship in board.ships for coord in ship.positions]
    assert len(coords) == len(set(coords)), "Ships should not overlap"
    assert all(board.is_valid_coordinate(coord) for coord in coords)
    assert board.occupied_coordinates() == {
        cell.coordinate for row in board.cells for cell in row if cell.has_ship
    }


def test_seed_fleet_reports_skipped_ships() -> None:
    board = create_empty_board()
    # Every cell occupied.
    for row in range(BOARD_SIZE):
        board = place_ship(board, row, 0, 5, Orientation.HORIZONTAL)
        board = place_ship(board, row, 5, 3, Orientation.HORIZONTAL)

    result = seed_fleet(board, random.Random(0), max_attempts=10)
    assert result.skipped == FLEET_LENGTHS
    assert result.placed == ()
    assert not result.complete
    assert result.board is board


def test_seed_fleet_complete_on_empty_board() -> None:
    result = seed_fleet(create_empty_board(), random.Random(7))
    assert result.complete
    assert result.placed == FLEET_LENGTHS

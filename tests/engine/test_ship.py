"""Tests for Ship domain logic."""

from seabattle.engine.ship import Coordinate, Orientation, Ship, ship_name


def _ship(length: int = 3) -> Ship:
    positions = tuple(Coordinate(3, 3 + offset) for offset in range(length))
    return Ship("ship-test", ship_name(length), length, positions, Orientation.HORIZONTAL)


def test_ship_names_follow_length() -> None:
    assert ship_name(5) == "Warship"
    assert ship_name(3) == "Submarine"
    assert ship_name(2) == "Destroyer"
    assert ship_name(4) == "Ship"


def test_ship_hit_and_sink() -> None:
    ship = _ship(3)
    for idx in range(1, ship.length + 1):
        ship = ship.register_hit()
        assert ship.hits == idx
        assert ship.sunk is (idx == ship.length)


def test_register_hit_returns_new_value() -> None:
    original = _ship(2)
    updated = original.register_hit()
    assert original.hits == 0
    assert updated.hits == 1


def test_hits_never_exceed_length() -> None:
    ship = _ship(2).register_hit().register_hit().register_hit()
    assert ship.hits == 2
    assert ship.sunk


def test_neighbours_are_up_down_left_right() -> None:
    assert Coordinate(3, 3).neighbours() == [
        Coordinate(2, 3),
        Coordinate(4, 3),
        Coordinate(3, 2),
        Coordinate(3, 4),
    ]


def test_orientation_toggle() -> None:
    assert Orientation.HORIZONTAL.toggled() is Orientation.VERTICAL
    assert Orientation.VERTICAL.toggled() is Orientation.HORIZONTAL

"""Tests for random fleet placement."""

import random

from salvo.engine.board import CellState, is_valid_coordinate
from salvo.engine.placement import does_collide, place_fleet, place_one_ship
from salvo.engine.ship import DEFAULT_FLEET, Orientation, Ship, ShipSpec


def test_does_collide_detects_shared_cell() -> None:
    existing = [Ship("Destroyer", 3, 2, 2, Orientation.HORIZONTAL)]
    crossing = Ship("Destroyer", 3, 0, 3, Orientation.VERTICAL)
    assert does_collide(existing, crossing)


def test_does_collide_false_for_disjoint_ships() -> None:
    existing = [Ship("Destroyer", 3, 2, 2, Orientation.HORIZONTAL)]
    beside = Ship("Destroyer", 3, 3, 2, Orientation.HORIZONTAL)
    assert not does_collide(existing, beside)
    assert not does_collide([], beside)


def test_place_one_ship_fits_on_grid_and_avoids_existing() -> None:
    rng = random.Random(7)
    existing = [Ship("Battleship", 5, 0, 0, Orientation.HORIZONTAL)]
    for _ in range(200):
        ship = place_one_ship(4, existing, rng, name="Destroyer")
        assert ship.hits == 0
        assert ship.name == "Destroyer"
        assert all(is_valid_coordinate(cell.row, cell.col) for cell in ship.cells())
        assert not does_collide(existing, ship)


def test_place_one_ship_falls_back_to_origin_when_attempts_run_out() -> None:
    # A full-length ship always crosses one of the two walls.
    walls = [
        Ship("Wall", 10, 0, 5, Orientation.VERTICAL),
        Ship("Wall", 10, 5, 0, Orientation.HORIZONTAL),
    ]
    ship = place_one_ship(10, walls, random.Random(1), name="Long", max_attempts=50)
    assert (ship.row, ship.col, ship.orientation) == (0, 0, Orientation.HORIZONTAL)
    assert ship.length == 10


def test_place_fleet_produces_disjoint_in_bounds_ships() -> None:
    for seed in range(100):
        side = place_fleet(DEFAULT_FLEET, random.Random(seed))
        assert [ship.length for ship in side.fleet] == [5, 4, 4]
        cells = [cell for ship in side.fleet for cell in ship.cells()]
        assert len(cells) == len(set(cells)), "Ships should not overlap"
        assert all(is_valid_coordinate(cell.row, cell.col) for cell in cells)


def test_place_fleet_marks_ship_cells_on_board() -> None:
    side = place_fleet(DEFAULT_FLEET, random.Random(3))
    ship_cells = {cell for ship in side.fleet for cell in ship.cells()}
    assert side.board.count(CellState.SHIP) == 13
    for coord in side.board.coordinates():
        expected = CellState.SHIP if coord in ship_cells else CellState.EMPTY
        assert side.board.cell(coord.row, coord.col) is expected


def test_place_fleet_honours_custom_composition() -> None:
    specs = [ShipSpec("Submarine", 3), ShipSpec("Patrol", 2)]
    side = place_fleet(specs, random.Random(11))
    assert [(ship.name, ship.length) for ship in side.fleet] == [("Submarine", 3), ("Patrol", 2)]

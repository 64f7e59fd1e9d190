"""Tests for the attack resolver."""

import pytest
from salvo.engine.attack import AttackOutcome, is_fleet_destroyed, resolve_attack, ship_at
from salvo.engine.board import CellState, Coordinate, create_empty_board
from salvo.engine.ship import Orientation, Ship


def _board_with(ships: tuple[Ship, ...]):
    board = create_empty_board()
    for ship in ships:
        for cell in ship.cells():
            board = board.with_cell(cell.row, cell.col, CellState.SHIP)
    return board


def test_miss_marks_cell_and_keeps_fleet() -> None:
    fleet = (Ship("Destroyer", 2, 0, 0, Orientation.HORIZONTAL),)
    board = _board_with(fleet)

    result = resolve_attack(board, fleet, 5, 5)

    assert result.outcome is AttackOutcome.MISS
    assert result.board.cell(5, 5) is CellState.MISS
    assert result.fleet == fleet
    assert result.ship is None
    assert not result.is_hit
    assert board.cell(5, 5) is CellState.EMPTY


def test_hit_increments_ship_and_returns_new_copies() -> None:
    fleet = (
        Ship("Battleship", 5, 9, 0, Orientation.HORIZONTAL),
        Ship("Destroyer", 4, 0, 0, Orientation.VERTICAL),
    )
    board = _board_with(fleet)

    result = resolve_attack(board, fleet, 2, 0)

    assert result.outcome is AttackOutcome.HIT
    assert result.board.cell(2, 0) is CellState.HIT
    assert result.fleet[1].hits == 1
    assert result.fleet[0] is fleet[0]
    assert result.ship == result.fleet[1]
    assert result.board is not board
    assert result.fleet is not fleet
    assert fleet[1].hits == 0
    assert board.cell(2, 0) is CellState.SHIP


def test_sinking_a_two_cell_destroyer() -> None:
    fleet = (Ship("DESTROYER", 2, 0, 0, Orientation.HORIZONTAL, hits=1),)
    board = _board_with(fleet).with_cell(0, 0, CellState.HIT)

    result = resolve_attack(board, fleet, 0, 1)

    assert result.outcome is AttackOutcome.SUNK
    assert result.board.cell(0, 1) is CellState.HIT
    assert result.fleet[0].hits == 2
    assert result.ship is not None and result.ship.name == "DESTROYER"
    assert is_fleet_destroyed(result.fleet)


def test_repeat_attack_is_rejected_without_changes() -> None:
    fleet = (Ship("Destroyer", 2, 0, 0, Orientation.HORIZONTAL),)
    board = _board_with(fleet)

    first = resolve_attack(board, fleet, 0, 0)
    second = resolve_attack(first.board, first.fleet, 0, 0)

    assert second.outcome is AttackOutcome.REJECTED
    assert second.board is first.board
    assert second.fleet is first.fleet
    assert second.fleet[0].hits == 1


@pytest.mark.parametrize(("row", "col"), [(-1, 0), (0, 10), (10, 3)])
def test_out_of_bounds_attack_raises(row: int, col: int) -> None:
    with pytest.raises(ValueError):
        resolve_attack(create_empty_board(), (), row, col)


def test_hit_accounting_counts_each_distinct_cell() -> None:
    ship = Ship("Battleship", 5, 3, 2, Orientation.HORIZONTAL)
    fleet = (ship,)
    board = _board_with(fleet)
    for expected_hits, cell in enumerate(ship.cells(), start=1):
        result = resolve_attack(board, fleet, cell.row, cell.col)
        board, fleet = result.board, result.fleet
        assert fleet[0].hits == expected_hits
        assert is_fleet_destroyed(fleet) is (expected_hits == ship.length)


def test_is_fleet_destroyed_requires_every_ship() -> None:
    fleet = (
        Ship("Destroyer", 2, 0, 0, Orientation.HORIZONTAL, hits=2),
        Ship("Destroyer", 2, 5, 5, Orientation.VERTICAL, hits=1),
    )
    assert not is_fleet_destroyed(fleet)
    assert is_fleet_destroyed(fleet[:1])


def test_ship_at_finds_occupying_ship() -> None:
    fleet = (
        Ship("Destroyer", 2, 0, 0, Orientation.HORIZONTAL),
        Ship("Destroyer", 2, 5, 5, Orientation.VERTICAL),
    )
    assert ship_at(fleet, Coordinate(6, 5)) == 1
    assert ship_at(fleet, Coordinate(9, 9)) is None

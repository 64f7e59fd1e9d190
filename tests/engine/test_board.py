"""Tests for board primitives and coordinate labels."""

import pytest
from salvo.engine.board import (
    BOARD_SIZE,
    CellState,
    Coordinate,
    InvalidLabel,
    ParsedLabel,
    create_empty_board,
    format_coordinate_label,
    has_been_attacked,
    is_valid_coordinate,
    parse_coordinate_label,
)


def test_empty_board_is_ten_by_ten_and_empty() -> None:
    board = create_empty_board()
    assert board.size == BOARD_SIZE == 10
    assert all(len(row) == 10 for row in board.cells)
    assert board.count(CellState.EMPTY) == 100


def test_with_cell_returns_new_board_and_leaves_original() -> None:
    board = create_empty_board()
    updated = board.with_cell(2, 3, CellState.MISS)
    assert updated is not board
    assert updated.cell(2, 3) is CellState.MISS
    assert board.cell(2, 3) is CellState.EMPTY


def test_cell_access_out_of_bounds_raises() -> None:
    board = create_empty_board()
    with pytest.raises(ValueError):
        board.cell(10, 0)
    with pytest.raises(ValueError):
        board.with_cell(0, -1, CellState.HIT)


@pytest.mark.parametrize(
    ("row", "col", "expected"),
    [(0, 0, True), (9, 9, True), (-1, 0, False), (0, 10, False), (10, 10, False)],
)
def test_is_valid_coordinate(row: int, col: int, expected: bool) -> None:
    assert is_valid_coordinate(row, col) is expected


def test_has_been_attacked_only_for_miss_and_hit() -> None:
    assert has_been_attacked(CellState.MISS)
    assert has_been_attacked(CellState.HIT)
    assert not has_been_attacked(CellState.EMPTY)
    assert not has_been_attacked(CellState.SHIP)


def test_parse_label_maps_letter_to_column_and_number_to_row() -> None:
    assert parse_coordinate_label("A1") == ParsedLabel(Coordinate(0, 0))
    assert parse_coordinate_label("J10") == ParsedLabel(Coordinate(9, 9))
    assert parse_coordinate_label("C7") == ParsedLabel(Coordinate(6, 2))


def test_parse_label_is_case_insensitive() -> None:
    assert parse_coordinate_label("b4") == ParsedLabel(Coordinate(3, 1))


@pytest.mark.parametrize(
    "label", ["Z1", "A0", "A11", "", "A1B", "A", "10", " A1", "A01", "K5", "\u01311", "\uff211"]
)
def test_parse_label_failures(label: str) -> None:
    result = parse_coordinate_label(label)
    assert isinstance(result, InvalidLabel)
    assert result.label == label
    assert result.reason


def test_every_label_round_trips() -> None:
    for letter in "ABCDEFGHIJ":
        for number in range(1, 11):
            label = f"{letter}{number}"
            for variant in (label, label.lower()):
                parsed = parse_coordinate_label(variant)
                assert isinstance(parsed, ParsedLabel)
                assert format_coordinate_label(parsed.coordinate) == label


def test_coordinate_label_property() -> None:
    assert Coordinate(4, 1).label == "B5"
    with pytest.raises(ValueError):
        format_coordinate_label(Coordinate(10, 0))

"""Grid, coordinate and label primitives for the Salvo engine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

BOARD_SIZE = 10
COLUMN_LETTERS = "ABCDEFGHIJ"

_LABEL_PATTERN = re.compile(r"[A-J](10|[1-9])")


class CellState(Enum):
    """Contents of a single grid cell."""

    EMPTY = 0
    SHIP = 1
    MISS = 2
    HIT = 3


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int

    @property
    def label(self) -> str:
        return format_coordinate_label(self)


@dataclass(frozen=True)
class Board:
    """Immutable square grid of cell states.

    Every update returns a new board, so callers can rely on identity to
    detect change.
    """

    cells: tuple[tuple[CellState, ...], ...]

    def __post_init__(self) -> None:
        if any(len(row) != len(self.cells) for row in self.cells):
            raise ValueError("Board must be square.")

    @property
    def size(self) -> int:
        return len(self.cells)

    def cell(self, row: int, col: int) -> CellState:
        """Return the state at ``(row, col)``; out-of-range access is an error."""
        if not is_valid_coordinate(row, col, self.size):
            raise ValueError(f"Cell ({row}, {col}) is outside the {self.size}x{self.size} board.")
        return self.cells[row][col]

    def with_cell(self, row: int, col: int, state: CellState) -> Board:
        """Return a copy of the board with one cell replaced."""
        self.cell(row, col)
        updated_row = self.cells[row][:col] + (state,) + self.cells[row][col + 1 :]
        return Board(self.cells[:row] + (updated_row,) + self.cells[row + 1 :])

    def coordinates(self) -> Iterator[Coordinate]:
        """Iterate all coordinates in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield Coordinate(row, col)

    def count(self, state: CellState) -> int:
        return sum(row.count(state) for row in self.cells)


def create_empty_board(size: int = BOARD_SIZE) -> Board:
    return Board(tuple(tuple(CellState.EMPTY for _ in range(size)) for _ in range(size)))


def is_valid_coordinate(row: int, col: int, size: int = BOARD_SIZE) -> bool:
    """Check whether a coordinate lies inside the board boundaries."""
    return 0 <= row < size and 0 <= col < size


def has_been_attacked(cell: CellState) -> bool:
    return cell is CellState.MISS or cell is CellState.HIT


@dataclass(frozen=True)
class ParsedLabel:
    """A label that named a cell on the board."""

    coordinate: Coordinate


@dataclass(frozen=True)
class InvalidLabel:
    """A label that could not be turned into a coordinate."""

    label: str
    reason: str


LabelParse = Union[ParsedLabel, InvalidLabel]


def parse_coordinate_label(label: str) -> LabelParse:
    """Parse labels such as ``A1`` or ``j10``.

    The letter picks the column (``A`` is column 0) and the number picks the
    row (``1`` is row 0). No whitespace or extra characters are tolerated.
    """
    if not label:
        return InvalidLabel(label, "Label is empty.")
    normalised = label[0].upper() + label[1:]
    if not label.isascii() or _LABEL_PATTERN.fullmatch(normalised) is None:
        return InvalidLabel(label, "Use a letter A-J followed by a number 1-10.")
    col = COLUMN_LETTERS.index(normalised[0])
    row = int(normalised[1:]) - 1
    return ParsedLabel(Coordinate(row, col))


def format_coordinate_label(coordinate: Coordinate) -> str:
    if not is_valid_coordinate(coordinate.row, coordinate.col):
        raise ValueError(f"{coordinate} has no label.")
    return f"{COLUMN_LETTERS[coordinate.col]}{coordinate.row + 1}"

"""Ship domain model for the Salvo engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .board import Coordinate

BATTLESHIP_LENGTH = 5
DESTROYER_LENGTH = 4


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class ShipSpec:
    """One entry of a fleet composition."""

    name: str
    length: int


DEFAULT_FLEET: tuple[ShipSpec, ...] = (
    ShipSpec("Battleship", BATTLESHIP_LENGTH),
    ShipSpec("Destroyer", DESTROYER_LENGTH),
    ShipSpec("Destroyer", DESTROYER_LENGTH),
)


@dataclass(frozen=True)
class Ship:
    """A single vessel anchored at ``(row, col)``.

    Horizontal ships extend to the right of the anchor, vertical ships extend
    downwards. Ships are immutable; a hit produces a new instance.
    """

    name: str
    length: int
    row: int
    col: int
    orientation: Orientation
    hits: int = 0

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"Ship length must be positive, got {self.length}.")
        if not 0 <= self.hits <= self.length:
            raise ValueError(f"Ship hits must be within 0..{self.length}, got {self.hits}.")

    @property
    def anchor(self) -> Coordinate:
        return Coordinate(self.row, self.col)

    @property
    def is_destroyed(self) -> bool:
        return self.hits == self.length

    def cells(self) -> tuple[Coordinate, ...]:
        """Return the ordered coordinates occupied by this ship."""
        if self.orientation is Orientation.HORIZONTAL:
            return tuple(Coordinate(self.row, self.col + offset) for offset in range(self.length))
        return tuple(Coordinate(self.row + offset, self.col) for offset in range(self.length))

    def occupies(self, coordinate: Coordinate) -> bool:
        if self.orientation is Orientation.HORIZONTAL:
            return coordinate.row == self.row and self.col <= coordinate.col < self.col + self.length
        return coordinate.col == self.col and self.row <= coordinate.row < self.row + self.length

    def register_hit(self) -> Ship:
        """Return a copy of this ship with one more hit recorded."""
        return replace(self, hits=self.hits + 1)


Fleet = tuple[Ship, ...]

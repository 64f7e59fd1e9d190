"""Hunt/target strategy used by the computer opponent.

The strategy keeps no memory between turns. Each call inspects the board
and fleet it is given and picks from the best available tier:

* pattern targets extend a line of two or more live hits at either end,
* adjacent targets are the open neighbours of any live hit,
* random targets are every cell not yet attacked.

Hits on ships that are already sunk are ignored. Candidate lists may repeat
a cell that is reachable from more than one hit, which weights the random
choice towards it.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from salvo.telemetry import get_tracer

from .board import Board, CellState, Coordinate, has_been_attacked, is_valid_coordinate
from .ship import Fleet

logger = logging.getLogger(__name__)
tracer = get_tracer("salvo.engine.targeting")

# up, down, left, right
DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
# right and down; the walk covers the opposite direction too
LINE_AXES: tuple[tuple[int, int], ...] = ((0, 1), (1, 0))

FALLBACK_TARGET = Coordinate(0, 0)


class TargetTier(Enum):
    """Which rule produced the candidate list."""

    PATTERN = "pattern"
    ADJACENT = "adjacent"
    RANDOM = "random"
    NONE = "none"


@dataclass(frozen=True)
class TargetCandidates:
    tier: TargetTier
    cells: tuple[Coordinate, ...]


class _HitMap:
    """Answers "is this a live hit / an open cell" for one board and fleet."""

    def __init__(self, board: Board, fleet: Fleet) -> None:
        self.board = board
        self.cold: set[Coordinate] = {
            cell for ship in fleet if ship.is_destroyed for cell in ship.cells()
        }

    def in_bounds(self, row: int, col: int) -> bool:
        return is_valid_coordinate(row, col, self.board.size)

    def is_live(self, row: int, col: int) -> bool:
        return (
            self.in_bounds(row, col)
            and self.board.cell(row, col) is CellState.HIT
            and Coordinate(row, col) not in self.cold
        )

    def is_open(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and not has_been_attacked(self.board.cell(row, col))

    def live_hits(self) -> list[Coordinate]:
        return [coord for coord in self.board.coordinates() if self.is_live(coord.row, coord.col)]

    def walk_past_line(self, start: Coordinate, d_row: int, d_col: int) -> Coordinate | None:
        """Step from ``start`` over consecutive live hits; return the open cell beyond."""
        row, col = start.row + d_row, start.col + d_col
        while self.is_live(row, col):
            row, col = row + d_row, col + d_col
        return Coordinate(row, col) if self.is_open(row, col) else None


def is_live_hit(board: Board, fleet: Fleet, coordinate: Coordinate) -> bool:
    """True for a HIT cell that does not belong to a sunk ship."""
    return _HitMap(board, fleet).is_live(coordinate.row, coordinate.col)


def pattern_targets(board: Board, fleet: Fleet) -> list[Coordinate]:
    hit_map = _HitMap(board, fleet)
    targets: list[Coordinate] = []
    for hit in hit_map.live_hits():
        for d_row, d_col in LINE_AXES:
            if not hit_map.is_live(hit.row + d_row, hit.col + d_col):
                continue
            for end in (
                hit_map.walk_past_line(hit, -d_row, -d_col),
                hit_map.walk_past_line(hit, d_row, d_col),
            ):
                if end is not None:
                    targets.append(end)
    return targets


def adjacent_targets(board: Board, fleet: Fleet) -> list[Coordinate]:
    hit_map = _HitMap(board, fleet)
    return [
        Coordinate(hit.row + d_row, hit.col + d_col)
        for hit in hit_map.live_hits()
        for d_row, d_col in DIRECTIONS
        if hit_map.is_open(hit.row + d_row, hit.col + d_col)
    ]


def random_targets(board: Board) -> list[Coordinate]:
    return [
        coord for coord in board.coordinates() if not has_been_attacked(board.cell(coord.row, coord.col))
    ]


def candidate_targets(board: Board, fleet: Fleet) -> TargetCandidates:
    """Return the highest-priority non-empty candidate list."""
    patterns = pattern_targets(board, fleet)
    if patterns:
        return TargetCandidates(TargetTier.PATTERN, tuple(patterns))
    adjacent = adjacent_targets(board, fleet)
    if adjacent:
        return TargetCandidates(TargetTier.ADJACENT, tuple(adjacent))
    remaining = random_targets(board)
    if remaining:
        return TargetCandidates(TargetTier.RANDOM, tuple(remaining))
    return TargetCandidates(TargetTier.NONE, ())


def choose_target(board: Board, fleet: Fleet, rng: random.Random | None = None) -> Coordinate:
    """Pick the computer's next attack against ``board``."""
    rng = rng or random.Random()
    with tracer.start_as_current_span("targeting.choose_target") as span:
        candidates = candidate_targets(board, fleet)
        span.set_attribute("targeting.tier", candidates.tier.value)
        span.set_attribute("targeting.candidates", len(candidates.cells))
        if not candidates.cells:
            logger.warning("targeting_no_open_cells")
            return FALLBACK_TARGET
        target = rng.choice(candidates.cells)
        logger.debug(
            "targeting_tier_selected",
            extra={
                "tier": candidates.tier.value,
                "candidates": len(candidates.cells),
                "row": target.row,
                "col": target.col,
            },
        )
        return target

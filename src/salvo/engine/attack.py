"""Applying a single attack to one side's board and fleet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from salvo.telemetry import get_meter, get_tracer

from .board import Board, CellState, Coordinate, has_been_attacked, is_valid_coordinate
from .ship import Fleet, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("salvo.engine.attack")
meter = get_meter("salvo.engine.attack")

ATTACK_COUNTER = meter.create_counter(
    "salvo_engine_attacks",
    unit="1",
    description="Attacks resolved against a side, by outcome",
)


class AttackOutcome(Enum):
    """Result category of a resolved attack."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AttackResult:
    """New board and fleet after an attack, plus what happened."""

    board: Board
    fleet: Fleet
    outcome: AttackOutcome
    coordinate: Coordinate
    ship: Ship | None = None

    @property
    def is_hit(self) -> bool:
        return self.outcome in (AttackOutcome.HIT, AttackOutcome.SUNK)


def ship_at(fleet: Fleet, coordinate: Coordinate) -> int | None:
    """Index of the first ship occupying ``coordinate``, or None."""
    for index, ship in enumerate(fleet):
        if ship.occupies(coordinate):
            return index
    return None


def resolve_attack(board: Board, fleet: Fleet, row: int, col: int) -> AttackResult:
    """Attack ``(row, col)`` and return the updated board and fleet.

    The inputs are left untouched. Attacking a cell that was already attacked
    returns the same board and fleet with a ``REJECTED`` outcome. Coordinates
    outside the board raise ``ValueError``.
    """
    coordinate = Coordinate(row, col)
    with tracer.start_as_current_span("attack.resolve") as span:
        span.set_attribute("attack.row", row)
        span.set_attribute("attack.col", col)
        if not is_valid_coordinate(row, col, board.size):
            logger.error("attack_out_of_bounds", extra={"row": row, "col": col})
            raise ValueError(f"Attack at ({row}, {col}) is outside the board.")

        if has_been_attacked(board.cell(row, col)):
            span.set_attribute("attack.outcome", AttackOutcome.REJECTED.value)
            ATTACK_COUNTER.add(1, attributes={"outcome": AttackOutcome.REJECTED.value})
            logger.info("attack_rejected", extra={"row": row, "col": col})
            return AttackResult(board, fleet, AttackOutcome.REJECTED, coordinate)

        index = ship_at(fleet, coordinate)
        if index is None:
            span.set_attribute("attack.outcome", AttackOutcome.MISS.value)
            ATTACK_COUNTER.add(1, attributes={"outcome": AttackOutcome.MISS.value})
            logger.info("attack_miss", extra={"row": row, "col": col})
            return AttackResult(
                board.with_cell(row, col, CellState.MISS),
                fleet,
                AttackOutcome.MISS,
                coordinate,
            )

        ship = fleet[index].register_hit()
        outcome = AttackOutcome.SUNK if ship.is_destroyed else AttackOutcome.HIT
        span.set_attribute("attack.outcome", outcome.value)
        span.set_attribute("ship.name", ship.name)
        ATTACK_COUNTER.add(1, attributes={"outcome": outcome.value})
        logger.info(
            "attack_hit",
            extra={
                "row": row,
                "col": col,
                "ship_name": ship.name,
                "ship_hits": ship.hits,
                "sunk": ship.is_destroyed,
            },
        )
        return AttackResult(
            board.with_cell(row, col, CellState.HIT),
            tuple(fleet[:index]) + (ship,) + tuple(fleet[index + 1 :]),
            outcome,
            coordinate,
            ship,
        )


def is_fleet_destroyed(fleet: Fleet) -> bool:
    return all(ship.is_destroyed for ship in fleet)

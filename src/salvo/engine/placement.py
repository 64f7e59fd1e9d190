"""Random, collision-free fleet placement."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Sequence

from salvo.telemetry import get_meter, get_tracer

from .board import BOARD_SIZE, Board, CellState, create_empty_board
from .ship import DEFAULT_FLEET, Fleet, Orientation, Ship, ShipSpec

logger = logging.getLogger(__name__)
tracer = get_tracer("salvo.engine.placement")
meter = get_meter("salvo.engine.placement")

MAX_PLACEMENT_ATTEMPTS = 1000

PLACEMENT_COUNTER = meter.create_counter(
    "salvo_engine_ship_placements",
    unit="1",
    description="Ships placed, by result",
)


@dataclass(frozen=True)
class Side:
    """One player's board together with the fleet drawn on it."""

    board: Board
    fleet: Fleet


def does_collide(existing_ships: Iterable[Ship], candidate: Ship) -> bool:
    """Return True if ``candidate`` shares a cell with any existing ship."""
    candidate_cells = set(candidate.cells())
    return any(not candidate_cells.isdisjoint(ship.cells()) for ship in existing_ships)


def place_one_ship(
    length: int,
    existing_ships: Sequence[Ship],
    rng: random.Random,
    name: str = "Ship",
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
    size: int = BOARD_SIZE,
) -> Ship:
    """Sample placements until one fits without touching ``existing_ships``.

    After ``max_attempts`` failures the ship is put at the origin, horizontal.
    That fallback is not checked for collisions.
    """
    for attempt in range(1, max_attempts + 1):
        horizontal = rng.random() < 0.5
        max_row = size if horizontal else size - length + 1
        max_col = size - length + 1 if horizontal else size
        candidate = Ship(
            name=name,
            length=length,
            row=rng.randrange(max_row),
            col=rng.randrange(max_col),
            orientation=Orientation.HORIZONTAL if horizontal else Orientation.VERTICAL,
        )
        if not does_collide(existing_ships, candidate):
            PLACEMENT_COUNTER.add(1, attributes={"result": "success"})
            logger.debug(
                "ship_placed",
                extra={
                    "ship_name": name,
                    "orientation": candidate.orientation.name,
                    "row": candidate.row,
                    "col": candidate.col,
                    "attempts": attempt,
                },
            )
            return candidate

    PLACEMENT_COUNTER.add(1, attributes={"result": "fallback"})
    logger.warning(
        "ship_placement_fallback",
        extra={"ship_name": name, "length": length, "attempts": max_attempts},
    )
    return Ship(name=name, length=length, row=0, col=0, orientation=Orientation.HORIZONTAL)


def place_fleet(
    fleet_specs: Sequence[ShipSpec] = DEFAULT_FLEET,
    rng: random.Random | None = None,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
    size: int = BOARD_SIZE,
) -> Side:
    """Place every ship of the fleet in order and draw them on a fresh board."""
    rng = rng or random.Random()
    with tracer.start_as_current_span("placement.place_fleet") as span:
        span.set_attribute("fleet.size", len(fleet_specs))
        ships: list[Ship] = []
        for spec in fleet_specs:
            ships.append(
                place_one_ship(
                    spec.length,
                    ships,
                    rng,
                    name=spec.name,
                    max_attempts=max_attempts,
                    size=size,
                )
            )

        board = create_empty_board(size)
        for ship in ships:
            for cell in ship.cells():
                board = board.with_cell(cell.row, cell.col, CellState.SHIP)
        span.set_attribute("board.ship_cells", board.count(CellState.SHIP))
        return Side(board=board, fleet=tuple(ships))

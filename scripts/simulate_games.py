#!/usr/bin/env python3
"""
Headless benchmark for the computer's targeting strategy.

Run from repo root:

    PYTHONPATH=src python3 scripts/simulate_games.py --games 500 --seed 7

For every game a fresh fleet is placed and the strategy fires until the
fleet is destroyed. The same fleets are also cleared by a purely random
shooter so the two shot counts can be compared.
"""

from __future__ import annotations

import argparse
import logging
import random
import statistics
from typing import Callable

from salvo.config import load_settings
from salvo.engine.attack import is_fleet_destroyed, resolve_attack
from salvo.engine.board import Board, Coordinate
from salvo.engine.placement import Side, place_fleet
from salvo.engine.ship import Fleet
from salvo.engine.targeting import choose_target, random_targets
from salvo.telemetry import configure_console_logging, init_telemetry, record_game_metric

logger = logging.getLogger("salvo.simulate")

Shooter = Callable[[Board, Fleet, random.Random], Coordinate]


def _random_shooter(board: Board, fleet: Fleet, rng: random.Random) -> Coordinate:
    return rng.choice(random_targets(board))


def shots_to_clear(side: Side, shooter: Shooter, rng: random.Random) -> int:
    board, fleet = side.board, side.fleet
    shots = 0
    # Overlapping fallback placements can leave a fleet that never sinks.
    while not is_fleet_destroyed(fleet) and shots < board.size * board.size:
        target = shooter(board, fleet, rng)
        result = resolve_attack(board, fleet, target.row, target.col)
        board, fleet = result.board, result.fleet
        shots += 1
    return shots


def positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Benchmark the Salvo targeting strategy.")
    parser.add_argument("--games", type=positive_int, default=200, help="Number of fleets to clear.")
    parser.add_argument("--seed", type=int, default=None, help="Optional RNG seed.")
    return parser


def main() -> None:
    args = build_parser().parse_args()

    configure_console_logging(logging.INFO)
    init_telemetry()
    settings = load_settings()
    rng = random.Random(args.seed)

    smart: list[int] = []
    naive: list[int] = []
    for game in range(args.games):
        side = place_fleet(settings.fleet_specs, rng, max_attempts=settings.max_placement_attempts)
        smart.append(shots_to_clear(side, choose_target, rng))
        naive.append(shots_to_clear(side, _random_shooter, rng))
        record_game_metric("salvo_simulated_games_total", 1)
        logger.debug("simulated_game", extra={"game": game, "smart": smart[-1], "naive": naive[-1]})

    print(f"Games simulated: {args.games}")
    print(f"Hunt/target: mean={statistics.mean(smart):.1f} median={statistics.median(smart)} best={min(smart)}")
    print(f"Random:      mean={statistics.mean(naive):.1f} median={statistics.median(naive)} best={min(naive)}")


if __name__ == "__main__":
    main()

"""Command-line driver for playing Salvo against the computer."""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
from pathlib import Path
from typing import Callable, Sequence

from salvo.config import GameSettings, load_settings
from salvo.engine.board import COLUMN_LETTERS, Board, CellState
from salvo.engine.instrumented_session import InstrumentedGameSession
from salvo.engine.scheduler import AsyncioScheduler
from salvo.engine.session import GameSession, GameStatus, Message, MessageKind
from salvo.engine.ship import Fleet
from salvo.preferences import load_preferences, set_instructions_seen
from salvo.telemetry import configure_console_logging, init_telemetry

INSTRUCTIONS = """\
How to play:
  * Both fleets are placed at random on a 10x10 grid.
  * Fire by typing a column letter and a row number, e.g. A5 or j10.
  * After each of your shots the computer fires back at your board.
  * X marks a hit, o a miss, S one of your own ships.
  * Sink every enemy ship before the computer sinks yours. Type q to quit.
"""

_MESSAGE_PREFIX = {
    MessageKind.SUCCESS: "[+]",
    MessageKind.ERROR: "[!]",
    MessageKind.WARNING: "[?]",
    MessageKind.INFO: "[-]",
}

_POLL_SECONDS = 0.05


def format_board(board: Board, show_ships: bool) -> str:
    """Render a board as text; unhit ships are drawn only when ``show_ships``."""
    header = "    " + " ".join(f"{letter:>2}" for letter in COLUMN_LETTERS[: board.size])
    rows = [header]
    for row in range(board.size):
        symbols = []
        for col in range(board.size):
            state = board.cell(row, col)
            if state is CellState.HIT:
                symbol = "X"
            elif state is CellState.MISS:
                symbol = "o"
            elif state is CellState.SHIP and show_ships:
                symbol = "S"
            else:
                symbol = "."
            symbols.append(f"{symbol:>2}")
        rows.append(f"{row + 1:>2} |" + " ".join(symbols))
    return "\n".join(rows)


def format_message(message: Message) -> str:
    return f"{_MESSAGE_PREFIX[message.kind]} {message.text}"


def format_tally(fleet: Fleet) -> str:
    sunk = sum(1 for ship in fleet if ship.is_destroyed)
    return f"{sunk}/{len(fleet)} sunk"


def render_session(session: GameSession) -> str:
    if session.player_board is None or session.computer_board is None:
        return "Preparing a new game..."
    return "\n".join(
        [
            f"Your board ({format_tally(session.player_fleet)}):",
            format_board(session.player_board, show_ships=True),
            "",
            f"Enemy waters ({format_tally(session.computer_fleet)}):",
            format_board(session.computer_board, show_ships=False),
        ]
    )


async def _wait_until(condition: Callable[[], bool]) -> None:
    while not condition():
        await asyncio.sleep(_POLL_SECONDS)


async def _ask(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, input, prompt)


def _show_instructions_once(preferences_path: Path, force: bool) -> None:
    if force or not load_preferences(preferences_path).instructions_seen:
        print(INSTRUCTIONS)
        set_instructions_seen(preferences_path, True)


async def play_game(
    settings: GameSettings,
    seed: int | None = None,
    show_instructions: bool = False,
) -> None:
    session = InstrumentedGameSession(
        settings=settings,
        scheduler=AsyncioScheduler(),
        rng=random.Random(seed),
    )
    session.subscribe(lambda message: print(format_message(message)))

    print("Welcome to Salvo!\n")
    _show_instructions_once(settings.preferences_path, show_instructions)
    session.initialize_game()

    while True:
        await _wait_until(lambda: not session.computer_turn_pending)

        if session.status is GameStatus.GAME_OVER:
            print("\n" + render_session(session))
            again = (await _ask("Play again? [y/N]: ")).strip().lower()
            if again not in {"y", "yes"}:
                break
            set_instructions_seen(settings.preferences_path, False)
            session.reset_game()
            await _wait_until(lambda: session.status is GameStatus.PLAYING)
            _show_instructions_once(settings.preferences_path, False)
            continue

        print("\n" + render_session(session))
        raw = (await _ask("Enter target (e.g., A5) or 'q' to quit: ")).strip()
        if raw.lower() == "q":
            break
        session.handle_player_attack(raw)

    print("Goodbye!")


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Salvo in the terminal.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--show-instructions",
        action="store_true",
        help="Print the instructions even if they were shown before.",
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level for engine diagnostics."
    )
    args = parser.parse_args(argv)

    configure_console_logging(getattr(logging, args.log_level.upper(), logging.WARNING))
    init_telemetry()
    try:
        asyncio.run(
            play_game(load_settings(), seed=args.seed, show_instructions=args.show_instructions)
        )
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")


if __name__ == "__main__":
    main()

"""Human-versus-computer game session and turn controller."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from salvo.config import GameSettings

from .attack import AttackOutcome, AttackResult, is_fleet_destroyed, resolve_attack
from .board import Board, InvalidLabel, has_been_attacked, parse_coordinate_label
from .placement import Side, place_fleet
from .scheduler import AsyncioScheduler, Scheduler
from .ship import Fleet
from .targeting import choose_target

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """High-level lifecycle of a session."""

    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game over"


class Player(Enum):
    """The two participants."""

    PLAYER = "player"
    COMPUTER = "computer"

    def opponent(self) -> Player:
        return Player.COMPUTER if self is Player.PLAYER else Player.PLAYER


class MessageKind(Enum):
    """How a UI should present a message."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Message:
    text: str
    kind: MessageKind


MessageListener = Callable[[Message], None]

INVALID_COORDINATES = Message("Invalid coordinates.", MessageKind.ERROR)
ALREADY_ATTACKED = Message("You already attacked this cell.", MessageKind.WARNING)


def describe_attack(attacker: Player, result: AttackResult) -> Message:
    """Turn a resolved attack into the message shown to the human."""
    by_player = attacker is Player.PLAYER
    if result.outcome is AttackOutcome.SUNK and result.ship is not None:
        if by_player:
            return Message(f"{result.ship.name} sunk!", MessageKind.SUCCESS)
        return Message(f"Your {result.ship.name} was sunk!", MessageKind.ERROR)
    if result.outcome is AttackOutcome.HIT:
        if by_player:
            return Message("You hit the enemy ship!", MessageKind.SUCCESS)
        return Message("Computer hit your ship!", MessageKind.ERROR)
    return Message("You missed." if by_player else "Computer missed.", MessageKind.INFO)


def describe_win(winner: Player) -> Message:
    if winner is Player.PLAYER:
        return Message("Congratulations! You won!", MessageKind.SUCCESS)
    return Message("Computer won!", MessageKind.ERROR)


class GameSession:
    """Owns both sides and funnels every state change through its operations.

    The computer answers each player attack after ``computer_attack_delay``
    seconds via the scheduler. Delayed callbacks remember the session
    generation they were scheduled in and do nothing once a reset or new game
    has moved it on. Without a ``scheduler`` the session uses the running
    asyncio loop and must be created inside it.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._rng = rng or random.Random()
        self._sides: dict[Player, Side] = {}
        self._status = GameStatus.SETUP
        self._message: Message | None = None
        self._winner: Player | None = None
        self._generation = 0
        self._pending_task: int | None = None
        self._pending_reset: int | None = None
        self._listeners: list[MessageListener] = []

    # Queries

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def message(self) -> Message | None:
        return self._message

    @property
    def winner(self) -> Player | None:
        return self._winner

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def computer_turn_pending(self) -> bool:
        return self._pending_task is not None

    @property
    def player_side(self) -> Side | None:
        return self._sides.get(Player.PLAYER)

    @property
    def computer_side(self) -> Side | None:
        return self._sides.get(Player.COMPUTER)

    @property
    def player_board(self) -> Board | None:
        side = self.player_side
        return side.board if side else None

    @property
    def computer_board(self) -> Board | None:
        side = self.computer_side
        return side.board if side else None

    @property
    def player_fleet(self) -> Fleet:
        side = self.player_side
        return side.fleet if side else ()

    @property
    def computer_fleet(self) -> Fleet:
        side = self.computer_side
        return side.fleet if side else ()

    # Messages

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        """Call ``listener`` with every published message until unsubscribed."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def show_message(self, message: Message) -> None:
        self._message = message
        for listener in list(self._listeners):
            listener(message)

    def dismiss_message(self) -> None:
        self._message = None

    # Lifecycle

    def initialize_game(self) -> None:
        """Place fresh fleets for both sides and start playing."""
        specs = self.settings.fleet_specs
        attempts = self.settings.max_placement_attempts
        sides = {
            Player.PLAYER: place_fleet(specs, self._rng, max_attempts=attempts),
            Player.COMPUTER: place_fleet(specs, self._rng, max_attempts=attempts),
        }
        self._cancel_scheduled()
        self._generation += 1
        self._sides = sides
        self._message = None
        self._winner = None
        self._status = GameStatus.PLAYING
        logger.info("game_initialized", extra={"generation": self._generation})

    def reset_game(self) -> None:
        """Clear everything and start a new game after ``reset_delay`` seconds."""
        generation = self._generation + 1

        def reinitialize() -> None:
            if self._generation != generation or self._status is not GameStatus.SETUP:
                logger.debug("stale_reinitialize_skipped", extra={"generation": generation})
                return
            self._pending_reset = None
            self.initialize_game()

        # Scheduling first leaves the session untouched if the scheduler fails.
        reset_task = self.scheduler.call_later(self.settings.reset_delay, reinitialize)
        self._cancel_scheduled()
        self._pending_reset = reset_task
        self._generation = generation
        self._sides = {}
        self._status = GameStatus.SETUP
        self._message = None
        self._winner = None
        logger.info("game_reset", extra={"generation": generation})

    def _cancel_scheduled(self) -> None:
        for task_id in (self._pending_task, self._pending_reset):
            if task_id is not None:
                self.scheduler.cancel(task_id)
        self._pending_task = None
        self._pending_reset = None

    # Turns

    def attack(self, attacker: Player, row: int, col: int) -> AttackResult | None:
        """Run one attack by ``attacker``.

        Returns None when the attack was ignored: the game is not in progress,
        the player tried to move during the computer's turn, or the cell was
        already attacked.
        """
        if self._status is not GameStatus.PLAYING:
            logger.debug("attack_ignored_not_playing", extra={"attacker": attacker.value})
            return None
        if attacker is Player.PLAYER and self.computer_turn_pending:
            logger.debug("attack_ignored_computer_turn", extra={"attacker": attacker.value})
            return None

        defender = attacker.opponent()
        side = self._sides[defender]
        result = resolve_attack(side.board, side.fleet, row, col)
        if result.outcome is AttackOutcome.REJECTED:
            return None

        if is_fleet_destroyed(result.fleet):
            self._sides[defender] = Side(board=result.board, fleet=result.fleet)
            self._status = GameStatus.GAME_OVER
            self._winner = attacker
            self._cancel_scheduled()
            logger.info("game_over", extra={"winner": attacker.value})
            self.show_message(describe_win(attacker))
            return result

        if attacker is Player.PLAYER:
            # The turn is only committed once the counter-attack is queued.
            self._schedule_computer_turn()
        self._sides[defender] = Side(board=result.board, fleet=result.fleet)
        self.show_message(describe_attack(attacker, result))
        return result

    def handle_player_attack(self, label: str) -> AttackResult | None:
        """Validate a typed label and attack with it on the player's behalf."""
        if self._status is not GameStatus.PLAYING or self.computer_turn_pending:
            return None
        parsed = parse_coordinate_label(label)
        if isinstance(parsed, InvalidLabel):
            logger.debug("player_label_invalid", extra={"label": label, "reason": parsed.reason})
            self.show_message(INVALID_COORDINATES)
            return None
        target = parsed.coordinate
        if has_been_attacked(self._sides[Player.COMPUTER].board.cell(target.row, target.col)):
            self.show_message(ALREADY_ATTACKED)
            return None
        return self.attack(Player.PLAYER, target.row, target.col)

    def _schedule_computer_turn(self) -> None:
        generation = self._generation

        def counter_attack() -> None:
            if self._generation != generation or self._status is not GameStatus.PLAYING:
                logger.debug("stale_counter_attack_skipped", extra={"generation": generation})
                return
            self._pending_task = None
            self.computer_attack()

        self._pending_task = self.scheduler.call_later(
            self.settings.computer_attack_delay, counter_attack
        )

    def computer_attack(self) -> AttackResult | None:
        """Let the targeting strategy pick a cell on the player's board and fire."""
        if self._status is not GameStatus.PLAYING:
            return None
        side = self._sides[Player.PLAYER]
        target = choose_target(side.board, side.fleet, self._rng)
        return self.attack(Player.COMPUTER, target.row, target.col)

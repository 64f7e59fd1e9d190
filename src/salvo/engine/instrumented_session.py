"""Game session with telemetry hooks."""

from __future__ import annotations

import time

from salvo.engine.attack import AttackResult
from salvo.engine.session import GameSession, GameStatus, Player
from salvo.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedGameSession(GameSession):
    """Wraps GameSession with tracing, metrics, and logging."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("salvo.session")
        self._tracer = get_tracer("salvo.session")
        self._game_span = None
        self._game_start_time: float | None = None
        self._turns = 0

    def initialize_game(self) -> None:
        self._start_game_span()
        with self._tracer.start_as_current_span("salvo.session.initialize") as span:
            super().initialize_game()
            span.set_attribute("generation", self.generation)
            span.set_attribute("player_ships", len(self.player_fleet))
            span.set_attribute("computer_ships", len(self.computer_fleet))
            record_game_metric("salvo_game_setup_total", 1, {"ships": len(self.player_fleet)})
            self._logger.info("Game %d initialised", self.generation)

    def reset_game(self) -> None:
        with self._tracer.start_as_current_span("salvo.session.reset") as span:
            span.set_attribute("previous_status", self.status.value)
            if self.status is GameStatus.PLAYING:
                record_game_metric("salvo_game_abandoned_total", 1)
            self._close_game_span()
            super().reset_game()

    def attack(self, attacker: Player, row: int, col: int) -> AttackResult | None:
        with self._tracer.start_as_current_span("salvo.session.attack") as span:
            span.set_attribute("generation", self.generation)
            span.set_attribute("attacker", attacker.value)
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)

            try:
                result = super().attack(attacker, row, col)
            except ValueError as exc:
                record_game_metric(
                    "salvo_invalid_attacks_total",
                    1,
                    {"attacker": attacker.value, "reason": "out_of_bounds"},
                )
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error("Invalid attack by %s at (%d,%d): %s", attacker.value, row, col, exc)
                raise

            if result is None:
                span.set_attribute("ignored", True)
                return None

            self._turns += 1
            span.set_attribute("outcome", result.outcome.value)
            record_game_metric("salvo_attacks_total", 1, {"attacker": attacker.value})
            record_game_metric(
                "salvo_attacks_by_result_total",
                1,
                {"attacker": attacker.value, "result": result.outcome.value},
            )
            self._logger.info(
                "attack attacker=%s coord=%s outcome=%s",
                attacker.value,
                result.coordinate.label,
                result.outcome.value,
            )

            if self.status is GameStatus.GAME_OVER and self.winner is not None:
                span.set_attribute("winner", self.winner.value)
                self._finish_game()
            return result

    def _start_game_span(self) -> None:
        self._close_game_span()
        self._game_start_time = time.perf_counter()
        self._turns = 0
        self._game_span = self._tracer.start_span("salvo.session.game")

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0
        winner = self.winner.value if self.winner else "unknown"

        record_game_metric("salvo_game_completed_total", 1, {"winner": winner})
        record_game_metric("salvo_game_duration_seconds", duration, {"winner": winner})

        with self._tracer.start_as_current_span("salvo.session.game_complete") as span:
            span.set_attribute("generation", self.generation)
            span.set_attribute("winner", winner)
            span.set_attribute("turns", self._turns)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("winner", winner)
            self._game_span.set_attribute("turns", self._turns)

        self._logger.info("Game finished. Winner=%s turns=%d duration_s=%.3f", winner, self._turns, duration)
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span is not None:
            self._game_span.end()
            self._game_span = None

"""Game settings loaded from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from salvo.engine.board import BOARD_SIZE
from salvo.engine.ship import DEFAULT_FLEET, ShipSpec

DEFAULT_PREFERENCES_PATH = Path.home() / ".salvo" / "preferences.json"


class ShipSetting(BaseModel):
    name: str = Field(min_length=1)
    length: int = Field(gt=0, le=BOARD_SIZE)

    def to_spec(self) -> ShipSpec:
        return ShipSpec(self.name, self.length)


def parse_fleet(raw: str) -> list[ShipSetting]:
    """Parse ``"Battleship:5,Destroyer:4"`` into ship settings."""
    ships: list[ShipSetting] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        name, sep, length = part.rpartition(":")
        if not sep:
            raise ValueError(f"Fleet entry {part!r} must look like Name:length.")
        ships.append(ShipSetting(name=name.strip(), length=int(length)))
    return ships


class GameSettings(BaseModel):
    """Tunable pacing and fleet composition."""

    computer_attack_delay: float = Field(default=1.5, ge=0.0)
    reset_delay: float = Field(default=1.0, ge=0.0)
    max_placement_attempts: int = Field(default=1000, gt=0)
    fleet: list[ShipSetting] = Field(
        default_factory=lambda: [ShipSetting(name=s.name, length=s.length) for s in DEFAULT_FLEET]
    )
    preferences_path: Path = DEFAULT_PREFERENCES_PATH

    @field_validator("fleet")
    @classmethod
    def _fleet_not_empty(cls, value: list[ShipSetting]) -> list[ShipSetting]:
        if not value:
            raise ValueError("fleet must contain at least one ship")
        return value

    @property
    def fleet_specs(self) -> tuple[ShipSpec, ...]:
        return tuple(ship.to_spec() for ship in self.fleet)

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameSettings":
        """Construct settings from `SALVO_*` variables."""

        data: Dict[str, Any] = {}
        env_fields = {
            "computer_attack_delay": "SALVO_COMPUTER_ATTACK_DELAY",
            "reset_delay": "SALVO_RESET_DELAY",
            "max_placement_attempts": "SALVO_MAX_PLACEMENT_ATTEMPTS",
            "preferences_path": "SALVO_PREFERENCES_PATH",
        }
        for name, env_name in env_fields.items():
            value = os.getenv(env_name)
            if value:
                data[name] = value

        fleet_env = os.getenv("SALVO_FLEET")
        if fleet_env:
            data["fleet"] = parse_fleet(fleet_env)

        data.update(overrides)
        return cls(**data)


@lru_cache(maxsize=1)
def load_settings() -> GameSettings:
    """Load and cache game settings from the environment."""

    return GameSettings.from_env()

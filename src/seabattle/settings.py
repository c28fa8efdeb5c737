"""Game settings loaded from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, field_validator

from seabattle.ai.targeting import Difficulty
from seabattle.engine.board import DEFAULT_PLACEMENT_ATTEMPTS


class GameSettings(BaseModel):
    """Tunables for a game session and its front-end."""

    difficulty: Difficulty = Difficulty.MEDIUM
    ai_delay_seconds: float = Field(default=1.0, ge=0)
    placement_attempts: int = Field(default=DEFAULT_PLACEMENT_ATTEMPTS, ge=1)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Difficulty.parse(value)
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> GameSettings:
        """Build settings from `SEABATTLE_*` variables, then apply overrides."""
        data: dict[str, Any] = {}
        env_map = {
            "difficulty": "SEABATTLE_DIFFICULTY",
            "ai_delay_seconds": "SEABATTLE_AI_DELAY",
            "placement_attempts": "SEABATTLE_PLACEMENT_ATTEMPTS",
        }
        for key, env_name in env_map.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[key] = value.strip()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)


@lru_cache(maxsize=1)
def load_settings() -> GameSettings:
    """Load and cache game settings from the environment."""
    return GameSettings.from_env()

"""Computer opponent exports."""

from .targeting import (
    Difficulty,
    OpponentAI,
    TargetingState,
    get_ai_move,
    reset_ai_state,
    update_ai_state,
)

__all__ = [
    "Difficulty",
    "OpponentAI",
    "TargetingState",
    "get_ai_move",
    "reset_ai_state",
    "update_ai_state",
]

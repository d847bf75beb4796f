"""
longdiv.game - Player-level game loop over the division engine and rewards
"""

from .loop import (
    CompletedProblem,
    GameLoop,
    LifetimeProgress,
    LoopStepResult,
    PlayerProgress,
    SessionProgress,
)

__all__ = [
    "GameLoop",
    "PlayerProgress",
    "SessionProgress",
    "LifetimeProgress",
    "CompletedProblem",
    "LoopStepResult",
]

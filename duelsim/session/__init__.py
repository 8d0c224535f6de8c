"""
Session Module - In-memory matches and the step driver.

A match is created from two decks and a seed, stepped one phase (or
one combat record) at a time, and dropped when ended. Nothing is
persisted: the seed and decks are enough to replay any game.
"""

from .manager import MatchManager, Match, MatchStatus
from .game_loop import GameLoop, LoopState, StepResult

__all__ = [
    "MatchManager",
    "Match",
    "MatchStatus",
    "GameLoop",
    "LoopState",
    "StepResult",
]

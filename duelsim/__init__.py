"""
Duelsim - Deterministic two-player card battle simulator

Given two decks, two tactics profiles and a seed, the engine plays a full
game with no human input and produces:
- A terminal GameResult
- A complete, replayable action log
- Heuristic AI decisions for deployment and attack targeting
"""

__version__ = "0.1.0"

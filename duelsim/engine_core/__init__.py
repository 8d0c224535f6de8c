"""
Engine Core - Deterministic card battle simulation.

The engine is the runtime that:
1. Builds a GameState from two decks and a seed
2. Drives it through draw, energy, deploy, battle and end phases
3. Resolves card effects, keywords and deaths
4. Records every observable change in an append-only ActionLog
"""

from .rng import SeededRandom
from .cards import Card, CardEffect, CardTemplate, CardType, EffectAction, EffectTrigger, Faction, Keyword, TacticsType
from .state import FieldCard, GamePhase, GameResult, GameState, PlayerState
from .action import ActionLog, ActionResult, ActionType, GameAction
from .effect_resolver import EffectContext, EffectResolver
from .death_sweeper import DeathSweeper
from .invariants import InvariantViolation
from .phases import PhaseMachine
from .combat import BattleIterator, resolve_battle
from .engine import (
    GameEngine,
    check_game_end,
    create_initial_game_state,
    execute_full_game,
    process_game_step,
)

__all__ = [
    "SeededRandom",
    "Card",
    "CardEffect",
    "CardTemplate",
    "CardType",
    "EffectAction",
    "EffectTrigger",
    "Faction",
    "Keyword",
    "TacticsType",
    "FieldCard",
    "GamePhase",
    "GameResult",
    "GameState",
    "PlayerState",
    "ActionLog",
    "ActionResult",
    "ActionType",
    "GameAction",
    "EffectContext",
    "EffectResolver",
    "DeathSweeper",
    "InvariantViolation",
    "PhaseMachine",
    "BattleIterator",
    "resolve_battle",
    "GameEngine",
    "check_game_end",
    "create_initial_game_state",
    "execute_full_game",
    "process_game_step",
]

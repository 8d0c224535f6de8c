"""
Game rules constants.

Limits shared by the state model, phase machine and AI.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class GameRules:
    """Fixed limits of the card battler."""
    deck_size: int = 20
    initial_life: int = 15
    initial_hand_size: int = 3
    initial_energy: int = 0
    hand_limit: int = 7
    field_limit: int = 5
    energy_limit: int = 8
    card_copy_limit: int = 2
    turn_limit: int = 30
    deploy_iteration_limit: int = 10
    chain_depth_limit: int = 3
    fatigue_damage: int = 1


RULES = GameRules()

# Combat keyword tuning
POISON_DURATION = 2
POISON_DAMAGE = 1

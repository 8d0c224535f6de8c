"""
Tactics Profiles - How each tactics type values a creature.

Every profile scores a creature card with one formula:

    attack_weight * attack + health_weight * health
    - cost_weight * cost
    + efficiency_weight * (attack + health) / max(cost, 1)

Profiles differ only in their weights.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.cards import TacticsType

if TYPE_CHECKING:
    from ..engine_core.cards import Card


@dataclass(frozen=True)
class TacticsProfile:
    """
    A play style for deployment and attacks.

    player_attack_chance is the probability of going face when no
    guard forces a creature target.
    """
    name: str
    description: str = ""
    attack_weight: float = 0.0
    health_weight: float = 0.0
    cost_weight: float = 0.0
    efficiency_weight: float = 0.0
    player_attack_chance: float = 0.3

    def creature_score(self, card: Card) -> float:
        efficiency = (card.attack + card.health) / max(card.cost, 1)
        return (
            self.attack_weight * card.attack
            + self.health_weight * card.health
            - self.cost_weight * card.cost
            + self.efficiency_weight * efficiency
        )


# ============================================================================
# Predefined Profiles
# ============================================================================

AGGRESSIVE = TacticsProfile(
    name="Aggressive",
    description="Values attack twice as much as health",
    attack_weight=2.0,
    health_weight=1.0,
    cost_weight=1.0,
)


DEFENSIVE = TacticsProfile(
    name="Defensive",
    description="Values health twice as much as attack",
    attack_weight=1.0,
    health_weight=2.0,
    cost_weight=1.0,
)


TEMPO = TacticsProfile(
    name="Tempo",
    description="Cheap, stat-efficient creatures first",
    cost_weight=2.0,
    efficiency_weight=3.0,
)


BALANCED = TacticsProfile(
    name="Balanced",
    description="Plain stats per energy",
    efficiency_weight=1.0,
)


PROFILES: dict[TacticsType, TacticsProfile] = {
    TacticsType.AGGRESSIVE: AGGRESSIVE,
    TacticsType.DEFENSIVE: DEFENSIVE,
    TacticsType.TEMPO: TEMPO,
    TacticsType.BALANCED: BALANCED,
}


def get_profile(tactics: TacticsType | str) -> TacticsProfile:
    """Profile for a tactics type; unknown values fall back to balanced."""
    try:
        return PROFILES[TacticsType(tactics)]
    except ValueError:
        return BALANCED

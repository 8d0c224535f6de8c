"""
AI Policy - Interface for automated deployment and attack decisions.

The engine asks a policy two questions:
- How good is playing this hand card right now?
- What should this creature attack?

Policies must be pure with respect to the state they are shown; any
randomness comes from the SeededRandom the engine passes in.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.cards import Keyword
from ..engine_core.state import opponent_of
from .evaluator import CardEvaluator, EvaluationWeights
from .personality import get_profile

if TYPE_CHECKING:
    from ..engine_core.cards import Card
    from ..engine_core.rng import SeededRandom
    from ..engine_core.state import FieldCard, GameState


@dataclass
class AttackChoice:
    """
    Target picked for one attack.

    target is None when the attack goes to the enemy player.
    """
    target: FieldCard | None = None
    explanation: str = ""

    @property
    def targets_player(self) -> bool:
        return self.target is None


def attack_candidates(attacker: FieldCard, state: GameState) -> list[FieldCard]:
    """Living, visible enemy creatures."""
    enemy = state.players[opponent_of(attacker.owner)]
    return [c for c in enemy.field if c.is_alive and not c.is_stealthed]


class AIPolicy(ABC):
    """
    Abstract base class for AI policies.
    """

    @abstractmethod
    def score_card_for_play(self, card: Card, state: GameState, player_id: str) -> float:
        """
        Score a hand card for deployment.

        The engine plays the highest-scoring legal card; ties keep
        hand order.
        """
        pass

    @abstractmethod
    def choose_attack_target(
        self,
        attacker: FieldCard,
        state: GameState,
        rng: SeededRandom,
    ) -> AttackChoice:
        """
        Pick what the attacker hits.

        Guard is enforced by the engine regardless of the answer.
        """
        pass

    def get_name(self) -> str:
        """Get the policy name."""
        return self.__class__.__name__


class HeuristicPolicy(AIPolicy):
    """
    Tactics-driven policy.

    Deployment scores come from CardEvaluator. Attacks prefer guards,
    then go face with the profile's player_attack_chance, otherwise hit
    the most threatening visible creature.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.evaluator = CardEvaluator(weights)

    def score_card_for_play(self, card: Card, state: GameState, player_id: str) -> float:
        return self.evaluator.score_card_for_play(card, state, player_id)

    def choose_attack_target(
        self,
        attacker: FieldCard,
        state: GameState,
        rng: SeededRandom,
    ) -> AttackChoice:
        candidates = attack_candidates(attacker, state)
        if not candidates:
            return AttackChoice(explanation="No visible creatures")

        guards = [c for c in candidates if c.has_active_keyword(Keyword.GUARD)]
        if guards:
            return AttackChoice(rng.choice(guards), "Guard must be attacked")

        profile = get_profile(state.players[attacker.owner].tactics)
        if rng.next() < profile.player_attack_chance:
            return AttackChoice(explanation="Going face")

        best = candidates[0]
        best_threat = self.threat(best)
        for card in candidates[1:]:
            threat = self.threat(card)
            if threat > best_threat:
                best, best_threat = card, threat
        return AttackChoice(best, f"Highest threat ({best_threat})")

    def threat(self, card: FieldCard) -> int:
        score = card.total_attack + card.current_health
        if card.keywords:
            score += int(self.evaluator.weights.keyword_threat)
        return score


class GreedyPolicy(AIPolicy):
    """
    Deterministic baseline without randomness.

    Plays the most expensive card and always trades into the first
    visible enemy creature. Useful for testing.
    """

    def score_card_for_play(self, card: Card, state: GameState, player_id: str) -> float:
        return float(card.cost)

    def choose_attack_target(
        self,
        attacker: FieldCard,
        state: GameState,
        rng: SeededRandom,
    ) -> AttackChoice:
        candidates = attack_candidates(attacker, state)
        if candidates:
            return AttackChoice(candidates[0], "First visible creature")
        return AttackChoice(explanation="No visible creatures")


class FaceAttackPolicy(GreedyPolicy):
    """Greedy deployment, always attacks the enemy player."""

    def choose_attack_target(
        self,
        attacker: FieldCard,
        state: GameState,
        rng: SeededRandom,
    ) -> AttackChoice:
        return AttackChoice(explanation="Always face")

"""
Card Evaluator - Scores hand cards for deployment.

A card's score is:
- a base score from the player's tactics profile (spells: cost-based)
- plus a faction bonus reflecting what that faction wants on the board

Spells that could not resolve against anything score a large penalty.
Scores are pure: the same card and state always give the same number.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING

from ..engine_core.cards import EffectAction, EffectTarget, EffectTrigger, Faction, Keyword
from ..engine_core.constants import RULES
from ..engine_core.state import opponent_of
from ..engine_core.targeting import has_valid_targets
from .personality import get_profile

if TYPE_CHECKING:
    from ..engine_core.cards import Card
    from ..engine_core.state import GameState, PlayerState


DEBUFF_ACTIONS = frozenset({EffectAction.DEBUFF_ATTACK, EffectAction.DEBUFF_HEALTH})
DESTROY_ACTIONS = frozenset({EffectAction.DESTROY_DECK_TOP, EffectAction.DESTROY_ALL_CREATURES})


@dataclass
class EvaluationWeights:
    """
    Weights for card scoring.

    Higher values = more importance.
    """
    spell_cost_multiplier: float = 1.5
    invalid_target_penalty: float = -1000.0

    # Necromancer
    echo_per_graveyard: float = 3.0
    on_death_effect: float = 5.0

    # Knight
    formation_per_ally: float = 4.0
    guard: float = 6.0

    # Berserker
    per_life_deficit: float = 1.5
    high_attack: float = 2.0

    # Mage
    spell_play: float = 15.0
    on_spell_play_trigger: float = 10.0
    hand_advantage: float = 2.0
    card_draw: float = 8.0
    spell_synergy: float = 5.0
    aoe_target_rich: float = 4.0

    # Inquisitor
    debuff_per_enemy: float = 3.0
    silence_stun: float = 8.0

    # Attack targeting
    keyword_threat: float = 5.0


def _has_trigger(card: Card, trigger: EffectTrigger) -> bool:
    return any(e.trigger == trigger for e in card.effects)


def _has_action(card: Card, actions) -> bool:
    return any(e.action in actions for e in card.effects)


class CardEvaluator:
    """
    Scores cards for play using tactics profiles and faction bonuses.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()
        self._faction_bonus: dict[Faction, Callable[[Card, PlayerState, PlayerState], float]] = {
            Faction.NECROMANCER: self._necromancer_bonus,
            Faction.KNIGHT: self._knight_bonus,
            Faction.BERSERKER: self._berserker_bonus,
            Faction.MAGE: self._mage_bonus,
            Faction.INQUISITOR: self._inquisitor_bonus,
        }

    def score_card_for_play(self, card: Card, state: GameState, player_id: str) -> float:
        if card.is_spell and not has_valid_targets(state, card, player_id):
            return self.weights.invalid_target_penalty
        return self.base_score(card, state, player_id) + self.faction_bonus(card, state, player_id)

    def base_score(self, card: Card, state: GameState, player_id: str) -> float:
        if card.is_spell:
            return card.cost * self.weights.spell_cost_multiplier
        profile = get_profile(state.players[player_id].tactics)
        return profile.creature_score(card)

    def faction_bonus(self, card: Card, state: GameState, player_id: str) -> float:
        player = state.players[player_id]
        opponent = state.players[opponent_of(player_id)]
        scorer = self._faction_bonus.get(player.faction)
        return scorer(card, player, opponent) if scorer else 0.0

    # =========================================================================
    # Faction bonuses
    # =========================================================================

    def _necromancer_bonus(self, card: Card, player: PlayerState, opponent: PlayerState) -> float:
        bonus = 0.0
        if card.has_keyword(Keyword.ECHO):
            bonus += len(player.graveyard) * self.weights.echo_per_graveyard
        if _has_trigger(card, EffectTrigger.ON_DEATH):
            bonus += self.weights.on_death_effect
        return bonus

    def _knight_bonus(self, card: Card, player: PlayerState, opponent: PlayerState) -> float:
        bonus = 0.0
        if card.has_keyword(Keyword.FORMATION):
            bonus += len(player.field) * self.weights.formation_per_ally
        if card.has_keyword(Keyword.GUARD):
            bonus += self.weights.guard
        return bonus

    def _berserker_bonus(self, card: Card, player: PlayerState, opponent: PlayerState) -> float:
        bonus = 0.0
        deficit = RULES.initial_life - player.life
        if deficit > 0:
            bonus += deficit * self.weights.per_life_deficit
        if card.is_creature and card.attack > card.health:
            bonus += card.attack * self.weights.high_attack
        return bonus

    def _mage_bonus(self, card: Card, player: PlayerState, opponent: PlayerState) -> float:
        w = self.weights
        bonus = 0.0
        if card.is_spell:
            bonus += w.spell_play
        if _has_trigger(card, EffectTrigger.ON_SPELL_PLAY):
            bonus += w.on_spell_play_trigger

        hand_advantage = len(player.hand) - len(opponent.hand)
        if hand_advantage > 0 and card.is_spell:
            bonus += hand_advantage * w.hand_advantage

        if _has_action(card, {EffectAction.DRAW_CARD}):
            bonus += w.card_draw

        synergy = [c for c in player.field if c.effects_for(EffectTrigger.ON_SPELL_PLAY)]
        if card.is_spell and synergy:
            bonus += len(synergy) * w.spell_synergy

        has_aoe = any(
            e.target == EffectTarget.ENEMY_ALL
            and (e.action == EffectAction.DAMAGE or e.action in DEBUFF_ACTIONS)
            for e in card.effects
        )
        if has_aoe and len(opponent.field) >= 2:
            bonus += len(opponent.field) * w.aoe_target_rich
        return bonus

    def _inquisitor_bonus(self, card: Card, player: PlayerState, opponent: PlayerState) -> float:
        bonus = 0.0
        if _has_action(card, DEBUFF_ACTIONS | DESTROY_ACTIONS):
            bonus += len(opponent.field) * self.weights.debuff_per_enemy
        if _has_action(card, {EffectAction.SILENCE, EffectAction.STUN}):
            bonus += self.weights.silence_stun
        return bonus

"""
Phase Machine - Drives one turn through draw, energy, deploy, battle and end.

Transitions are one-directional and total: advance_phase always has a
next phase, and end wraps to the next player's draw with turn + 1.

Whether the game is over is not decided here. Callers check for a
GameResult between steps and stop advancing once one exists.
"""

from __future__ import annotations
from enum import Enum
from typing import Callable, TYPE_CHECKING
import logging

from .action import ActionResult, EndStage
from .cards import Card, EffectTrigger
from .combat import resolve_battle
from .conditions import check_play_conditions
from .constants import RULES
from .state import (
    FieldCard,
    GamePhase,
    PHASE_ORDER,
    StatusType,
    draw_from_deck,
    move_hand_to_field,
    move_hand_to_graveyard,
    opponent_of,
)
from .targeting import has_valid_targets

if TYPE_CHECKING:
    from ..bots.policy import AIPolicy
    from .effect_resolver import EffectResolver
    from .state import GameState

logger = logging.getLogger(__name__)

POISON_SOURCE = "poison_effect"


class PlayError(str, Enum):
    """Error codes for rejected play requests."""
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    INSUFFICIENT_ENERGY = "INSUFFICIENT_ENERGY"
    FIELD_FULL = "FIELD_FULL"
    PLAY_CONDITION_FAILED = "PLAY_CONDITION_FAILED"


class PhaseMachine:
    """
    Runs the phase handler for the current phase, then advances.

    Usage:
        machine = PhaseMachine(resolver, policy)
        while not state.is_over:
            machine.process_phase(state)
            ...
    """

    def __init__(self, resolver: EffectResolver, policy: AIPolicy):
        self.resolver = resolver
        self.policy = policy

    def process_phase(self, state: GameState) -> None:
        handlers: dict[GamePhase, Callable[[GameState], None]] = {
            GamePhase.DRAW: self.process_draw_phase,
            GamePhase.ENERGY: self.process_energy_phase,
            GamePhase.DEPLOY: self.process_deploy_phase,
            GamePhase.BATTLE: self.process_battle_phase,
            GamePhase.END: self.process_end_phase,
        }
        handlers[state.phase](state)

    def advance_phase(self, state: GameState) -> None:
        """
        Move to the next phase.

        Passives are re-derived at every boundary. The wrap from end to
        draw is logged under the incoming player.
        """
        self.resolver.apply_passive_effects(state)

        index = PHASE_ORDER.index(state.phase)
        next_phase = PHASE_ORDER[(index + 1) % len(PHASE_ORDER)]

        if next_phase == GamePhase.DRAW:
            next_player = opponent_of(state.current_player)
            state.action_log.add_phase_change(next_player, state.phase.value, next_phase.value)
            state.current_player = next_player
            state.turn_number += 1
        else:
            state.action_log.add_phase_change(state.current_player, state.phase.value, next_phase.value)

        logger.debug(
            "Turn %d %s: %s -> %s",
            state.turn_number, state.current_player, state.phase.value, next_phase.value,
        )
        state.phase = next_phase

    # =========================================================================
    # Draw / energy
    # =========================================================================

    def process_draw_phase(self, state: GameState) -> None:
        """Draw one card, or take fatigue damage from an empty deck."""
        self.resolver.process_effect_trigger(
            state, EffectTrigger.TURN_START, None, state.current_player
        )

        player = state.current
        if player.hand_full:
            self.advance_phase(state)
            return

        hand_before = len(player.hand)
        drawn = draw_from_deck(player)
        if drawn is not None:
            state.action_log.add_card_draw(
                player.player_id,
                card_id=drawn.instance_id,
                hand_size_before=hand_before,
                hand_size_after=len(player.hand),
                deck_size_after=len(player.deck),
            )
        else:
            life_before = player.life
            player.life = max(0, player.life - RULES.fatigue_damage)
            state.action_log.add_card_draw(
                player.player_id,
                card_id=None,
                hand_size_before=hand_before,
                hand_size_after=len(player.hand),
                deck_size_after=0,
                fatigue={"life_before": life_before, "life_after": player.life},
            )

        self.advance_phase(state)

    def process_energy_phase(self, state: GameState) -> None:
        """Raise max energy by one (capped), then refill."""
        player = state.current
        max_before = player.max_energy
        max_after = min(player.max_energy + 1, RULES.energy_limit)
        if max_after != max_before:
            player.max_energy = max_after
            state.action_log.add_energy_update(player.player_id, max_before, max_after)

        energy_before = player.energy
        if energy_before != player.max_energy:
            player.energy = player.max_energy
            state.action_log.add_energy_refill(player.player_id, energy_before, player.energy)

        self.advance_phase(state)

    # =========================================================================
    # Deploy
    # =========================================================================

    def can_play_card(self, state: GameState, card: Card, player_id: str) -> bool:
        return self.check_play(state, card, player_id) is None

    def check_play(self, state: GameState, card: Card, player_id: str) -> PlayError | None:
        """The reason a card cannot be played right now, or None."""
        player = state.players[player_id]
        if player.energy < card.cost:
            return PlayError.INSUFFICIENT_ENERGY
        if card.is_creature and player.field_full:
            return PlayError.FIELD_FULL
        if not check_play_conditions(state, card, player_id):
            return PlayError.PLAY_CONDITION_FAILED
        if card.is_spell and not has_valid_targets(state, card, player_id):
            return PlayError.PLAY_CONDITION_FAILED
        return None

    def play_card(self, state: GameState, player_id: str, instance_id: str) -> ActionResult:
        """
        Play a card from hand: creatures go to the field tail, spells
        resolve from the graveyard.
        """
        player = state.players[player_id]
        card = player.find_hand_card(instance_id)
        if card is None:
            return ActionResult.failure(
                f"Card {instance_id} is not in {player_id}'s hand",
                PlayError.CARD_NOT_IN_HAND.value,
            )

        error = self.check_play(state, card, player_id)
        if error is not None:
            return ActionResult.failure(f"Cannot play {instance_id}: {error.value}", error.value)

        mark = len(state.action_log)
        energy_before = player.energy
        player.energy -= card.cost
        energy = {"before": energy_before, "after": player.energy}

        if card.is_creature:
            field_card = move_hand_to_field(state, player, instance_id)
            state.action_log.add_card_play(
                player_id,
                card_id=instance_id,
                position=field_card.position,
                initial_stats={"attack": card.attack, "health": card.health},
                player_energy=energy,
            )
            self.resolver.process_effect_trigger(
                state, EffectTrigger.ON_PLAY, field_card, player_id, field_card
            )
        else:
            move_hand_to_graveyard(player, instance_id)
            state.action_log.add_card_play(
                player_id, card_id=instance_id, position=-1, player_energy=energy
            )
            self.resolver.process_effect_trigger(
                state, EffectTrigger.ON_PLAY, card, player_id, card
            )
            self.resolver.process_effect_trigger(
                state, EffectTrigger.ON_SPELL_PLAY, None, player_id, card
            )

        return ActionResult.ok(state.action_log.since(mark))

    def select_card_to_play(self, state: GameState, player_id: str) -> Card | None:
        """Highest-scoring playable card; ties keep hand order."""
        player = state.players[player_id]
        playable = [c for c in player.hand if self.can_play_card(state, c, player_id)]
        if not playable:
            return None
        best = playable[0]
        best_score = self.policy.score_card_for_play(best, state, player_id)
        for card in playable[1:]:
            score = self.policy.score_card_for_play(card, state, player_id)
            if score > best_score:
                best, best_score = card, score
        return best

    def process_deploy_phase(self, state: GameState) -> None:
        """
        Place the best card, then re-evaluate against the changed state.

        Bounded by the deploy iteration limit.
        """
        self.resolver.apply_passive_effects(state)
        player_id = state.current_player

        for _ in range(RULES.deploy_iteration_limit):
            card = self.select_card_to_play(state, player_id)
            if card is None:
                break
            result = self.play_card(state, player_id, card.instance_id)
            if not result:
                logger.warning("Deploy of %s failed: %s", card.instance_id, result.error)
                break
            if state.players[player_id].life <= 0 or state.opponent.life <= 0:
                break

        self.advance_phase(state)

    # =========================================================================
    # Battle / end
    # =========================================================================

    def process_battle_phase(self, state: GameState) -> None:
        resolve_battle(state, self.resolver, self.policy)
        self.advance_phase(state)

    def process_end_phase(self, state: GameState) -> None:
        """status_tick, then cleanup, then turn_end triggers."""
        first = state.current_player
        order = (first, opponent_of(first))

        state.action_log.add_end_stage(first, EndStage.STATUS_TICK)
        for player_id in order:
            self._tick_statuses(state, player_id)

        state.action_log.add_end_stage(first, EndStage.CLEANUP)
        for player_id in order:
            for card in state.players[player_id].field:
                card.is_stealthed = False
                card.has_attacked = False
                card.readied_this_turn = False
                card.status_effects = [
                    s for s in card.status_effects
                    if s.duration is None or s.duration > 0
                ]

        state.action_log.add_end_stage(first, EndStage.TURN_END_TRIGGER)
        self.resolver.process_effect_trigger(state, EffectTrigger.TURN_END, None, first)

        self.advance_phase(state)

    def _tick_statuses(self, state: GameState, player_id: str) -> None:
        """
        Decrement durations and apply poison for one side.

        Poison deaths are collected during the scan and destroyed after it.
        """
        poisoned_dead: list[FieldCard] = []
        for card in state.players[player_id].field:
            for status in card.status_effects:
                if status.status_type == StatusType.POISON:
                    before = card.current_health
                    card.current_health = max(0, card.current_health - status.damage)
                    state.action_log.add_effect_trigger(
                        player_id,
                        source_card_id=POISON_SOURCE,
                        effect_type="damage",
                        effect_value=status.damage,
                        target_ids=[card.instance_id],
                        value_changes={
                            card.instance_id: {"health": {"before": before, "after": card.current_health}},
                        },
                    )
                    if card.current_health <= 0 and before > 0:
                        poisoned_dead.append(card)
                if status.duration is not None:
                    status.duration -= 1

        for card in poisoned_dead:
            self.resolver.deaths.handle_creature_death(state, card, "effect", POISON_SOURCE)
        self.resolver.deaths.evaluate_pending_deaths(state, "effect", POISON_SOURCE)

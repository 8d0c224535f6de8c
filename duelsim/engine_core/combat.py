"""
Combat - Attacker loop and the step-wise battle iterator.

Each attack runs four ordered stages:
1. attack_declare   - on_attack fires, target chosen, guard enforced
2. damage_defender  - attacker's effective attack hits the target;
                      lifesteal, poison, trample resolve in that order
3. damage_attacker  - the defending creature's pre-combat attack (plus
                      retaliate) hits back, even if it is already at 0
4. deaths           - both participants checked, destroyed in one batch

BattleIterator yields every log record as it is produced and only runs
the next stage when the caller pulls past the current one. resolve_battle
simply drains the iterator, so stepping and running synchronously cannot
diverge.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, TYPE_CHECKING
import logging
import math

from .action import CombatStage, GameAction
from .cards import EffectTrigger, Keyword
from .constants import POISON_DAMAGE, POISON_DURATION
from .rng import SeededRandom
from .state import FieldCard, GamePhase, StatusEffect, StatusType, opponent_of

if TYPE_CHECKING:
    from ..bots.policy import AIPolicy
    from .effect_resolver import EffectResolver
    from .state import GameState

logger = logging.getLogger(__name__)


def can_attack(card: FieldCard, turn_number: int) -> bool:
    """Attack eligibility, evaluated fresh before every attack."""
    if card.current_health <= 0 or card.has_attacked or card.is_stunned:
        return False
    return card.has_active_keyword(Keyword.RUSH) or card.summon_turn < turn_number


def next_attacker(state: GameState) -> FieldCard | None:
    for card in state.current.field:
        if can_attack(card, state.turn_number):
            return card
    return None


def attack_rng(state: GameState, attacker: FieldCard) -> SeededRandom:
    return SeededRandom(f"{state.random_seed}{state.turn_number}{state.phase.value}{attacker.instance_id}")


def eligible_guards(state: GameState, player_id: str) -> list[FieldCard]:
    return [
        c for c in state.players[player_id].field
        if c.is_alive and not c.is_stealthed and c.has_active_keyword(Keyword.GUARD)
    ]


@dataclass
class PendingAttack:
    """Pre-combat snapshot of one attack."""
    attacker: FieldCard
    target: FieldCard | None
    defender_damage: int
    attacker_damage: int = 0
    retaliate_damage: int = 0

    @property
    def defender_id(self) -> str:
        return opponent_of(self.attacker.owner)


class BattleIterator:
    """
    Pull-based driver for one battle phase.

    Usage:
        for action in BattleIterator(state, resolver, policy):
            render(action)
    """

    def __init__(self, state: GameState, resolver: EffectResolver, policy: AIPolicy):
        self.state = state
        self.resolver = resolver
        self.policy = policy
        self.attacks_resolved = 0
        self.current_attacker_id: str | None = None
        self._mark = len(state.action_log)
        self._steps = self._run()

    def __iter__(self) -> Iterator[GameAction]:
        return self

    def __next__(self) -> GameAction:
        return next(self._steps)

    def close(self) -> None:
        self._steps.close()

    def _drain(self) -> Iterator[GameAction]:
        """Yield records appended since the last drain, one at a time."""
        while self._mark < len(self.state.action_log):
            action = self.state.action_log[self._mark]
            self._mark += 1
            yield action

    def _battle_decided(self) -> bool:
        return any(p.life <= 0 for p in self.state.players.values())

    def _run(self) -> Iterator[GameAction]:
        state = self.state
        if state.phase != GamePhase.BATTLE:
            return

        while not self._battle_decided():
            attacker = next_attacker(state)
            if attacker is None:
                break
            self.current_attacker_id = attacker.instance_id

            pending = self._declare(attacker)
            yield from self._drain()
            if pending is None:
                continue

            sweeper = self.resolver.deaths
            with sweeper.deferring(*self._participant_ids(pending)):
                self._damage_defender(pending)
                yield from self._drain()
                self._damage_attacker(pending)
                yield from self._drain()
                dead = self._dead_participants(pending)

            self._deaths(pending, dead)
            yield from self._drain()
            self.attacks_resolved += 1

        self.current_attacker_id = None

    @staticmethod
    def _participant_ids(pending: PendingAttack) -> list[str]:
        ids = [pending.attacker.instance_id]
        if pending.target is not None:
            ids.append(pending.target.instance_id)
        return ids

    # =========================================================================
    # Stages
    # =========================================================================

    def _declare(self, attacker: FieldCard) -> PendingAttack | None:
        state = self.state
        attacker.has_attacked = True
        self.resolver.process_effect_trigger(
            state, EffectTrigger.ON_ATTACK, attacker, attacker.owner, attacker
        )
        if state.find_field_card(attacker.instance_id) is not attacker or attacker.current_health <= 0:
            logger.debug("Attacker %s fell during on_attack", attacker.instance_id)
            return None

        rng = attack_rng(state, attacker)
        choice = self.policy.choose_attack_target(attacker, state, rng)
        target = choice.target

        defender_id = opponent_of(attacker.owner)
        guards = eligible_guards(state, defender_id)
        if guards and all(target is not g for g in guards):
            target = rng.choice(guards)

        pending = PendingAttack(
            attacker=attacker,
            target=target,
            defender_damage=max(0, attacker.total_attack),
        )
        if target is not None:
            target_attack = max(0, target.total_attack)
            if target.has_active_keyword(Keyword.RETALIATE):
                pending.retaliate_damage = math.ceil(target_attack / 2)
            pending.attacker_damage = target_attack + pending.retaliate_damage

        state.action_log.add_combat_stage(
            attacker.owner,
            CombatStage.ATTACK_DECLARE,
            attacker.instance_id,
            target.instance_id if target is not None else None,
        )
        return pending

    def _damage_defender(self, pending: PendingAttack) -> None:
        state = self.state
        attacker = pending.attacker
        target = pending.target
        damage = pending.defender_damage
        owner_id = attacker.owner
        defender = state.players[pending.defender_id]

        if target is None:
            before = defender.life
            defender.life = max(0, defender.life - damage)
            state.action_log.add_combat_stage(
                owner_id, CombatStage.DAMAGE_DEFENDER, attacker.instance_id,
                defender.player_id, {"damage": damage},
            )
            state.action_log.add_card_attack(
                owner_id, attacker.instance_id, defender.player_id, damage,
                target_player_life={"before": before, "after": defender.life},
            )
            self._lifesteal(attacker, defender.player_id, before - defender.life)
            self.resolver.deaths.evaluate_pending_deaths(state, "system", attacker.instance_id)
            return

        before = target.current_health
        target.current_health = max(0, before - damage)
        actual = before - target.current_health
        if damage > 0:
            self.resolver.process_effect_trigger(
                state, EffectTrigger.ON_DAMAGE_TAKEN, target, target.owner, attacker
            )
        state.action_log.add_combat_stage(
            owner_id, CombatStage.DAMAGE_DEFENDER, attacker.instance_id,
            target.instance_id, {"damage": damage},
        )
        state.action_log.add_card_attack(
            owner_id, attacker.instance_id, target.instance_id, damage,
            target_health={"before": before, "after": target.current_health},
        )

        self._lifesteal(attacker, target.instance_id, actual)
        if attacker.has_active_keyword(Keyword.POISON):
            existing = target.get_status(StatusType.POISON)
            if existing is None:
                target.status_effects.append(
                    StatusEffect(StatusType.POISON, duration=POISON_DURATION, damage=POISON_DAMAGE)
                )
            else:
                existing.duration = POISON_DURATION
            state.action_log.add_keyword_trigger(
                owner_id, Keyword.POISON.value, attacker.instance_id, target.instance_id, POISON_DAMAGE
            )
        if attacker.has_active_keyword(Keyword.TRAMPLE):
            excess = damage - before
            if excess > 0:
                defender.life = max(0, defender.life - excess)
                state.action_log.add_keyword_trigger(
                    owner_id, Keyword.TRAMPLE.value, attacker.instance_id, defender.player_id, excess
                )

        self.resolver.deaths.evaluate_pending_deaths(state, "system", attacker.instance_id)

    def _lifesteal(self, attacker: FieldCard, target_id: str, actual: int) -> None:
        if actual <= 0 or not attacker.has_active_keyword(Keyword.LIFESTEAL):
            return
        owner = self.state.players[attacker.owner]
        owner.life += actual
        self.state.action_log.add_keyword_trigger(
            attacker.owner, Keyword.LIFESTEAL.value, attacker.instance_id, target_id, actual
        )

    def _damage_attacker(self, pending: PendingAttack) -> None:
        """Return damage from pre-combat stats; skipped for player targets."""
        state = self.state
        target = pending.target
        attacker = pending.attacker
        if target is None or pending.attacker_damage <= 0:
            return

        if pending.retaliate_damage > 0:
            state.action_log.add_keyword_trigger(
                target.owner, Keyword.RETALIATE.value, target.instance_id,
                attacker.instance_id, pending.retaliate_damage,
            )

        before = attacker.current_health
        attacker.current_health = max(0, before - pending.attacker_damage)
        self.resolver.process_effect_trigger(
            state, EffectTrigger.ON_DAMAGE_TAKEN, attacker, attacker.owner, target
        )
        state.action_log.add_combat_stage(
            target.owner, CombatStage.DAMAGE_ATTACKER, target.instance_id, attacker.instance_id,
            {"damage": pending.attacker_damage, "retaliate": pending.retaliate_damage},
        )
        state.action_log.add_card_attack(
            target.owner, target.instance_id, attacker.instance_id, pending.attacker_damage,
            attacker_health={"before": before, "after": attacker.current_health},
        )
        self.resolver.deaths.evaluate_pending_deaths(state, "system", target.instance_id)

    def _dead_participants(self, pending: PendingAttack) -> list[FieldCard]:
        """Target first, then attacker; only cards still on their field."""
        dead = []
        for card in (pending.target, pending.attacker):
            if card is None or card.current_health > 0:
                continue
            if self.state.players[card.owner].find_field_card(card.instance_id) is card:
                dead.append(card)
        return dead

    def _deaths(self, pending: PendingAttack, dead: list[FieldCard]) -> None:
        if not dead:
            return
        state = self.state
        attacker = pending.attacker
        state.action_log.add_combat_stage(
            attacker.owner, CombatStage.DEATHS, attacker.instance_id,
            values={"destroyed": [c.instance_id for c in dead]},
        )
        sweeper = self.resolver.deaths
        # Keep the batch out of nested sweeps so each gets a combat record
        with sweeper.deferring(*[c.instance_id for c in dead]):
            for card in dead:
                sweeper.handle_creature_death(state, card, "combat", attacker.instance_id)
        sweeper.evaluate_pending_deaths(state, "combat", attacker.instance_id)


def resolve_battle(state: GameState, resolver: EffectResolver, policy: AIPolicy) -> list[GameAction]:
    """Run the whole battle phase by draining a BattleIterator."""
    return list(BattleIterator(state, resolver, policy))

"""
Effect Resolver - Turns declared card effects into state mutations.

This module handles:
- Trigger dispatch (single-card, player-scoped and global triggers)
- Activation conditions, evaluated against the pre-execution snapshot
- Target resolution with selection rules
- Dynamic values computed from zone counts
- Conditional branches
- Chain-on-kill continuations (bounded depth)
- Passive effects as a reset-and-replay projection

Every action in EffectAction has exactly one handler; the resolver refuses
to construct if one is missing. A fault inside one effect is logged and
treated as a no-op for that effect so the game can always finish.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Callable, TYPE_CHECKING
import logging
import math

from .cards import (
    Card,
    CardEffect,
    CardTemplate,
    CardType,
    ChainOnKill,
    DynamicFilter,
    DynamicSource,
    DynamicValue,
    EffectAction,
    EffectTarget,
    EffectTrigger,
)
from .conditions import check_condition
from .constants import RULES
from .death_sweeper import DeathSweeper
from .invariants import InvariantViolation
from .rng import SeededRandom
from .state import (
    PLAYER_IDS,
    FieldCard,
    StatusEffect,
    StatusType,
    draw_from_deck,
    move_deck_to_hand,
    move_deck_top_to_graveyard,
    move_field_to_banished,
    move_graveyard_to_field,
    move_hand_to_graveyard,
    opponent_of,
    place_on_field,
)
from .targeting import apply_selection_rules, resolve_targets

if TYPE_CHECKING:
    from .state import GameState

logger = logging.getLogger(__name__)


SINGLE_CARD_TRIGGERS = frozenset({
    EffectTrigger.ON_PLAY,
    EffectTrigger.ON_DEATH,
    EffectTrigger.ON_DAMAGE_TAKEN,
    EffectTrigger.ON_ATTACK,
})

PLAYER_SCOPED_TRIGGERS = frozenset({
    EffectTrigger.ON_SPELL_PLAY,
    EffectTrigger.ON_ALLY_DEATH,
})

SYSTEM_SOURCE = "system"


def source_id_of(source: Card | FieldCard | None) -> str:
    return source.instance_id if source is not None else SYSTEM_SOURCE


def effect_rng(state: GameState, source: Card | FieldCard | None) -> SeededRandom:
    """Fresh RNG per effect: a function of (seed, turn, source identity)."""
    return SeededRandom(f"{state.random_seed}{state.turn_number}{source_id_of(source)}")


def token_template(faction) -> CardTemplate:
    return CardTemplate(
        template_id="token",
        name="Token",
        card_type=CardType.CREATURE,
        faction=faction,
        cost=0,
        attack=1,
        health=1,
    )


@dataclass
class EffectContext:
    """
    Everything a handler needs to resolve one effect.

    targets is already narrowed by selection rules; value is final.
    """
    state: GameState
    effect: CardEffect
    source: Card | FieldCard | None
    player_id: str
    targets: list[FieldCard]
    value: int
    rng: SeededRandom
    depth: int = 0
    killed: list[FieldCard] = field(default_factory=list)

    @property
    def source_id(self) -> str:
        return source_id_of(self.source)

    @property
    def opponent_id(self) -> str:
        return opponent_of(self.player_id)

    @property
    def is_passive(self) -> bool:
        return self.effect.trigger == EffectTrigger.PASSIVE


def _change(before: Any, after: Any) -> dict[str, Any]:
    return {"before": before, "after": after}


class EffectResolver:
    """
    Executes card effects against a GameState.

    Usage:
        resolver = EffectResolver()
        resolver.process_effect_trigger(state, EffectTrigger.ON_PLAY, card, "player1")
        resolver.apply_passive_effects(state)
    """

    def __init__(self):
        self.deaths = DeathSweeper(self)
        self._handlers: dict[EffectAction, Callable[[EffectContext], None]] = {
            EffectAction.DAMAGE: self._handle_damage,
            EffectAction.HEAL: self._handle_heal,
            EffectAction.BUFF_ATTACK: self._handle_buff_attack,
            EffectAction.BUFF_HEALTH: self._handle_buff_health,
            EffectAction.DEBUFF_ATTACK: self._handle_debuff_attack,
            EffectAction.DEBUFF_HEALTH: self._handle_debuff_health,
            EffectAction.SUMMON: self._handle_summon,
            EffectAction.DRAW_CARD: self._handle_draw_card,
            EffectAction.SILENCE: self._handle_silence,
            EffectAction.RESURRECT: self._handle_resurrect,
            EffectAction.STUN: self._handle_stun,
            EffectAction.READY: self._handle_ready,
            EffectAction.DESTROY_DECK_TOP: self._handle_destroy_deck_top,
            EffectAction.SWAP_ATTACK_HEALTH: self._handle_swap_attack_health,
            EffectAction.HAND_DISCARD: self._handle_hand_discard,
            EffectAction.DESTROY_ALL_CREATURES: self._handle_destroy_all_creatures,
            EffectAction.APPLY_BRAND: self._handle_apply_brand,
            EffectAction.BANISH: self._handle_banish,
            EffectAction.DECK_SEARCH: self._handle_deck_search,
        }
        missing = [a.value for a in EffectAction if a not in self._handlers]
        if missing:
            raise RuntimeError(f"No handler for effect actions: {missing}")

    # =========================================================================
    # Public entry points
    # =========================================================================

    def process_effect_trigger(
        self,
        state: GameState,
        trigger: EffectTrigger,
        source_card: Card | FieldCard | None = None,
        source_player_id: str | None = None,
        triggering_card: Card | FieldCard | None = None,
    ) -> None:
        """
        Dispatch a trigger point to every card entitled to react.

        Passive effects are never dispatched here; see apply_passive_effects.
        """
        if trigger == EffectTrigger.PASSIVE:
            return

        if trigger in SINGLE_CARD_TRIGGERS:
            self._trigger_single_card(state, trigger, source_card, source_player_id, triggering_card)
        elif trigger in PLAYER_SCOPED_TRIGGERS:
            self._trigger_player_scoped(state, trigger, source_player_id, triggering_card)
        else:
            self._trigger_global(state, trigger, source_player_id, triggering_card)

        self.deaths.evaluate_pending_deaths(state, "trigger", source_id_of(source_card))

    def execute_all_card_effects(
        self,
        state: GameState,
        source_card: Card | FieldCard,
        player_id: str,
        trigger: EffectTrigger,
    ) -> None:
        """
        Run every effect of a card for a trigger.

        All activation conditions are evaluated first, against the state as
        it was before any of them ran.
        """
        effects = source_card.effects_for(trigger)
        enabled = [check_condition(state, e.activation_condition, player_id) for e in effects]
        for effect, active in zip(effects, enabled):
            if active:
                self._execute(state, effect, source_card, player_id)

    def execute_card_effect(
        self,
        state: GameState,
        effect: CardEffect,
        source_card: Card | FieldCard | None,
        source_player_id: str,
    ) -> None:
        """Run exactly one effect end to end, activation condition included."""
        if not check_condition(state, effect.activation_condition, source_player_id):
            return
        self._execute(state, effect, source_card, source_player_id)

    def apply_passive_effects(self, state: GameState) -> None:
        """
        Reset every passive modifier, then replay all eligible passives.

        Passive state is thereby a pure function of the current board.
        """
        before = {c.instance_id: (c.total_attack, c.max_health, c.current_health) for c in state.all_field_cards()}

        for card in state.all_field_cards():
            if card.passive_health_modifier > 0:
                card.current_health = max(0, card.current_health - card.passive_health_modifier)
            card.passive_attack_modifier = 0
            card.passive_health_modifier = 0

        for player_id in PLAYER_IDS:
            for card in list(state.players[player_id].field):
                if card.is_silenced:
                    continue
                for effect in card.effects_for(EffectTrigger.PASSIVE):
                    self.execute_card_effect(state, effect, card, player_id)

        changes: dict[str, dict[str, Any]] = {}
        for card in state.all_field_cards():
            old = before.get(card.instance_id)
            new = (card.total_attack, card.max_health, card.current_health)
            if old is not None and old != new:
                changes[card.instance_id] = {
                    "attack": _change(old[0], new[0]),
                    "health": _change(old[2], new[2]),
                }
        if changes:
            state.action_log.add_effect_trigger(
                state.current_player,
                source_card_id=SYSTEM_SOURCE,
                effect_type=EffectTrigger.PASSIVE.value,
                effect_value=0,
                target_ids=list(changes),
                value_changes=changes,
            )

        self.deaths.evaluate_pending_deaths(state, "passive")

    def resolve_value(
        self,
        state: GameState,
        effect: CardEffect,
        source: Card | FieldCard | None,
        player_id: str,
    ) -> int:
        if effect.dynamic_value is None:
            return effect.value
        return self.dynamic_value(state, effect.dynamic_value, source, player_id)

    def dynamic_value(
        self,
        state: GameState,
        descriptor: DynamicValue,
        source: Card | FieldCard | None,
        player_id: str,
    ) -> int:
        """Count cards in a named zone, optionally filtered, plus base_value."""
        player = state.players[player_id]
        opponent = state.players[opponent_of(player_id)]
        source_id = source_id_of(source)
        flt = descriptor.filter

        if descriptor.source == DynamicSource.GRAVEYARD:
            zone: list = player.graveyard
        elif descriptor.source == DynamicSource.FIELD:
            zone = player.field
        else:
            zone = opponent.field

        if flt == DynamicFilter.CREATURES:
            zone = [c for c in zone if c.card_type == CardType.CREATURE]
        elif flt == DynamicFilter.ALIVE:
            zone = [c for c in zone if not isinstance(c, FieldCard) or c.is_alive]
        elif flt == DynamicFilter.EXCLUDE_SELF:
            zone = [c for c in zone if c.instance_id != source_id]
        elif flt == DynamicFilter.HAS_BRAND:
            zone = [c for c in zone if isinstance(c, FieldCard) and c.is_branded]

        return len(zone) + descriptor.base_value

    # =========================================================================
    # Trigger dispatch
    # =========================================================================

    def _trigger_single_card(self, state, trigger, source_card, player_id, triggering_card):
        if source_card is None or player_id is None:
            return
        if isinstance(source_card, FieldCard) and source_card.is_silenced:
            return
        if not source_card.effects_for(trigger):
            return
        state.action_log.add_trigger_event(
            player_id,
            trigger.value,
            source_card.instance_id,
            triggering_card.instance_id if triggering_card is not None else None,
        )
        self.execute_all_card_effects(state, source_card, player_id, trigger)

    def _trigger_player_scoped(self, state, trigger, player_id, triggering_card):
        if player_id is None:
            return
        self._trigger_field(state, trigger, player_id, triggering_card)

    def _trigger_global(self, state, trigger, player_id, triggering_card):
        first = player_id or state.current_player
        for pid in (first, opponent_of(first)):
            self._trigger_field(state, trigger, pid, triggering_card)

    def _trigger_field(self, state, trigger, player_id, triggering_card):
        player = state.players[player_id]
        for card in list(player.field):
            if player.find_field_card(card.instance_id) is not card:
                continue
            if card.is_silenced or not card.is_alive:
                continue
            if not card.effects_for(trigger):
                continue
            state.action_log.add_trigger_event(
                player_id,
                trigger.value,
                card.instance_id,
                triggering_card.instance_id if triggering_card is not None else None,
            )
            self.execute_all_card_effects(state, card, player_id, trigger)

    # =========================================================================
    # Single-effect resolution
    # =========================================================================

    def _execute(
        self,
        state: GameState,
        effect: CardEffect,
        source: Card | FieldCard | None,
        player_id: str,
        depth: int = 0,
        rng: SeededRandom | None = None,
        exclude_ids: tuple[str, ...] = (),
    ) -> None:
        try:
            self._resolve(state, effect, source, player_id, depth, rng, exclude_ids)
        except InvariantViolation:
            raise
        except Exception:
            logger.error(
                "Effect %s from %s failed; skipped",
                effect.action.value,
                source_id_of(source),
                exc_info=True,
            )

    def _resolve(self, state, effect, source, player_id, depth, rng, exclude_ids):
        rng = rng or effect_rng(state, source)
        targets = self._initial_targets(state, effect, source, player_id, rng, exclude_ids)
        value = self.resolve_value(state, effect, source, player_id)

        if effect.conditional_effect is not None:
            branch_effect = effect.conditional_effect
            if check_condition(state, branch_effect.condition, player_id):
                branch = branch_effect.if_true
            else:
                branch = branch_effect.if_false
            for sub_effect in branch:
                self._execute(state, sub_effect, source, player_id, depth)
            return

        handler = self._handlers.get(effect.action)
        if handler is None:
            logger.warning("No handler for action type %s", effect.action)
            return

        alive_before = {t.instance_id for t in targets if t.is_alive}
        ctx = EffectContext(
            state=state,
            effect=effect,
            source=source,
            player_id=player_id,
            targets=targets,
            value=value,
            rng=rng,
            depth=depth,
        )
        handler(ctx)

        if effect.chain_on_kill is not None:
            killed = [t for t in targets if t.instance_id in alive_before and t.current_health <= 0]
            self._run_chain(ctx, effect.chain_on_kill, killed)

    def _initial_targets(self, state, effect, source, player_id, rng, exclude_ids) -> list[FieldCard]:
        target = effect.target
        if target == EffectTarget.SELF:
            live = self._live_instance(state, source)
            candidates = [live] if live is not None else []
            return apply_selection_rules(candidates, effect.selection_rules, source_id_of(source))
        if target.is_player:
            return []
        return resolve_targets(
            state,
            target,
            player_id,
            rng,
            rules=effect.selection_rules,
            source_id=source_id_of(source),
            exclude_ids=exclude_ids,
        )

    def _live_instance(self, state, source) -> FieldCard | None:
        """The on-field instance of the source, if it is a creature on a field."""
        if source is None or source.card_type != CardType.CREATURE:
            return None
        return state.find_field_card(source.instance_id)

    def _run_chain(self, ctx: EffectContext, chain: ChainOnKill, killed: list[FieldCard]) -> None:
        if not killed:
            return
        if ctx.depth + 1 > RULES.chain_depth_limit:
            logger.debug("Chain depth limit reached for %s", ctx.source_id)
            return

        chained = CardEffect(
            trigger=ctx.effect.trigger,
            target=chain.target,
            action=chain.action,
            value=chain.value,
            selection_rules=chain.selection_rules,
            chain_on_kill=chain.chain_on_kill,
        )
        excluded = {k.instance_id for k in killed}
        if chain.exclude_original_target:
            excluded.update(t.instance_id for t in ctx.targets)

        for _ in killed:
            self._execute(
                ctx.state,
                chained,
                ctx.source,
                ctx.player_id,
                depth=ctx.depth + 1,
                rng=ctx.rng,
                exclude_ids=tuple(sorted(excluded)),
            )

    def _log(
        self,
        ctx: EffectContext,
        changes: dict[str, dict[str, Any]],
        value: int | None = None,
        target_ids: list[str] | None = None,
        target_player_id: str | None = None,
    ) -> None:
        ctx.state.action_log.add_effect_trigger(
            ctx.player_id,
            source_card_id=ctx.source_id,
            effect_type=ctx.effect.action.value,
            effect_value=ctx.value if value is None else value,
            target_ids=list(changes) if target_ids is None else target_ids,
            target_player_id=target_player_id,
            value_changes=changes,
        )

    # =========================================================================
    # Handlers: damage and healing
    # =========================================================================

    def _handle_damage(self, ctx: EffectContext) -> None:
        """
        Damage creatures, or a player's life for player targets.

        Targets reduced to <= 0 are destroyed right after the record.
        """
        state = ctx.state
        changes: dict[str, dict[str, Any]] = {}

        if ctx.effect.target.is_player:
            victim_id = ctx.opponent_id if ctx.effect.target == EffectTarget.PLAYER else ctx.player_id
            victim = state.players[victim_id]
            before = victim.life
            victim.life = max(0, victim.life - ctx.value)
            changes[victim_id] = {"life": _change(before, victim.life)}
            self._log(ctx, changes, target_ids=[], target_player_id=victim_id)
            return

        for target in ctx.targets:
            before = target.current_health
            target.current_health = max(0, target.current_health - ctx.value)
            changes[target.instance_id] = {"health": _change(before, target.current_health)}
        self._log(ctx, changes)

        for target in ctx.targets:
            self.deaths.destroy_if_dead(state, target, "effect", ctx.source_id)

    def _handle_heal(self, ctx: EffectContext) -> None:
        state = ctx.state
        changes: dict[str, dict[str, Any]] = {}

        if ctx.effect.target.is_player:
            player = state.players[ctx.player_id]
            before = player.life
            player.life += ctx.value
            changes[ctx.player_id] = {"life": _change(before, player.life)}
            self._log(ctx, changes, target_ids=[], target_player_id=ctx.player_id)
            return

        for target in ctx.targets:
            before = target.current_health
            target.current_health = min(target.max_health, target.current_health + ctx.value)
            changes[target.instance_id] = {"health": _change(before, target.current_health)}
        self._log(ctx, changes)

    # =========================================================================
    # Handlers: modifiers
    # =========================================================================

    def _handle_buff_attack(self, ctx: EffectContext) -> None:
        if ctx.is_passive:
            for target in ctx.targets:
                target.passive_attack_modifier += ctx.value
            return

        changes = {}
        for target in ctx.targets:
            before = target.total_attack
            target.attack_modifier += ctx.value
            changes[target.instance_id] = {"attack": _change(before, target.total_attack)}
        self._log(ctx, changes)

    def _handle_buff_health(self, ctx: EffectContext) -> None:
        if ctx.is_passive:
            for target in ctx.targets:
                target.passive_health_modifier += ctx.value
                target.current_health += ctx.value
            return

        changes = {}
        for target in ctx.targets:
            before = target.current_health
            target.health_modifier += ctx.value
            target.current_health += ctx.value
            changes[target.instance_id] = {"health": _change(before, target.current_health)}
        self._log(ctx, changes)

    def _handle_debuff_attack(self, ctx: EffectContext) -> None:
        changes = {}
        for target in ctx.targets:
            before = target.total_attack
            target.attack_modifier = max(-target.base_attack, target.attack_modifier - ctx.value)
            changes[target.instance_id] = {"attack": _change(before, target.total_attack)}
        self._log(ctx, changes)

    def _handle_debuff_health(self, ctx: EffectContext) -> None:
        changes = {}
        for target in ctx.targets:
            before = target.current_health
            target.health_modifier -= ctx.value
            if target.current_health > target.max_health:
                target.current_health = target.max_health
            changes[target.instance_id] = {"health": _change(before, target.current_health)}
        self._log(ctx, changes)

        for target in ctx.targets:
            self.deaths.destroy_if_dead(ctx.state, target, "effect", ctx.source_id)

    def _handle_swap_attack_health(self, ctx: EffectContext) -> None:
        """Swap effective attack and max health; current health keeps its ratio."""
        changes = {}
        for target in ctx.targets:
            old_attack = target.total_attack
            old_max = target.max_health
            old_current = target.current_health
            ratio = old_current / old_max if old_max > 0 else 0

            target.passive_attack_modifier = 0
            target.passive_health_modifier = 0
            target.attack_modifier = old_max - target.base_attack
            target.health_modifier = old_attack - target.base_health
            target.current_health = math.ceil(target.max_health * ratio)

            changes[target.instance_id] = {
                "attack": _change(old_attack, target.total_attack),
                "health": _change(old_current, target.current_health),
            }
        self._log(ctx, changes, value=1)

        for target in ctx.targets:
            self.deaths.destroy_if_dead(ctx.state, target, "effect", ctx.source_id)

    # =========================================================================
    # Handlers: statuses and flags
    # =========================================================================

    def _handle_silence(self, ctx: EffectContext) -> None:
        changes = {}
        for target in ctx.targets:
            changes[target.instance_id] = {"silenced": _change(target.is_silenced, True)}
            target.is_silenced = True
        self._log(ctx, changes)

    def _handle_stun(self, ctx: EffectContext) -> None:
        changes = {}
        for target in ctx.targets:
            existing = target.get_status(StatusType.STUN)
            before = existing.duration if existing is not None else 0
            if existing is None:
                target.status_effects.append(StatusEffect(StatusType.STUN, duration=ctx.value))
                after = ctx.value
            else:
                existing.duration = max(existing.duration or 0, ctx.value)
                after = existing.duration
            changes[target.instance_id] = {"stun": _change(before, after)}
        self._log(ctx, changes)

    def _handle_ready(self, ctx: EffectContext) -> None:
        changes = {}
        for target in ctx.targets:
            if target.readied_this_turn:
                continue
            changes[target.instance_id] = {"has_attacked": _change(target.has_attacked, False)}
            target.has_attacked = False
            target.readied_this_turn = True
        if changes:
            self._log(ctx, changes)

    def _handle_apply_brand(self, ctx: EffectContext) -> None:
        changes = {}
        for target in ctx.targets:
            if target.is_branded:
                continue
            target.status_effects.append(StatusEffect(StatusType.BRANDED))
            changes[target.instance_id] = {"branded": _change(False, True)}
        if changes:
            self._log(ctx, changes)

    # =========================================================================
    # Handlers: zones
    # =========================================================================

    def _handle_summon(self, ctx: EffectContext) -> None:
        state = ctx.state
        player = state.players[ctx.player_id]
        template = token_template(player.faction)
        summoned = []
        for _ in range(max(0, ctx.value)):
            if player.field_full:
                break
            token = Card(template=template, instance_id=state.next_token_id(ctx.player_id))
            field_card = FieldCard.from_card(
                token,
                ctx.player_id,
                state.turn_number,
                entered_sequence=len(state.action_log),
            )
            place_on_field(player, field_card)
            summoned.append(field_card)
        if summoned:
            changes = {fc.instance_id: {"summoned": _change(None, fc.stats())} for fc in summoned}
            self._log(ctx, changes)

    def _handle_resurrect(self, ctx: EffectContext) -> None:
        """Return distinct random creatures from the graveyard at base stats."""
        state = ctx.state
        player = state.players[ctx.player_id]
        pool = [c for c in player.graveyard if c.is_creature]
        pool = apply_selection_rules(pool, ctx.effect.selection_rules, ctx.source_id)
        returned = []
        for _ in range(max(0, ctx.value)):
            if player.field_full or not pool:
                break
            chosen = ctx.rng.choice(pool)
            pool.remove(chosen)
            field_card = move_graveyard_to_field(state, player, chosen.instance_id)
            if field_card is not None:
                returned.append(field_card)
        if returned:
            changes = {fc.instance_id: {"resurrected": _change(None, fc.stats())} for fc in returned}
            self._log(ctx, changes)

    def _handle_draw_card(self, ctx: EffectContext) -> None:
        state = ctx.state
        player = state.players[ctx.player_id]
        hand_before = len(player.hand)
        life_before = player.life
        for _ in range(max(0, ctx.value)):
            if player.hand_full:
                break
            if draw_from_deck(player) is None:
                player.life = max(0, player.life - RULES.fatigue_damage)
        changes: dict[str, Any] = {"hand": _change(hand_before, len(player.hand))}
        if player.life != life_before:
            changes["life"] = _change(life_before, player.life)
        self._log(ctx, {ctx.player_id: changes}, target_ids=[], target_player_id=ctx.player_id)

    def _handle_destroy_deck_top(self, ctx: EffectContext) -> None:
        opponent = ctx.state.players[ctx.opponent_id]
        if not opponent.deck or opponent.deck[-1].cost < ctx.value:
            return
        milled = move_deck_top_to_graveyard(opponent)
        self._log(
            ctx,
            {ctx.opponent_id: {"deck_top": _change(milled.instance_id, None)}},
            value=milled.cost,
            target_ids=[],
            target_player_id=ctx.opponent_id,
        )

    def _handle_hand_discard(self, ctx: EffectContext) -> None:
        opponent = ctx.state.players[ctx.opponent_id]
        discarded = []
        for _ in range(max(0, ctx.value)):
            pool = apply_selection_rules(opponent.hand, ctx.effect.selection_rules, ctx.source_id)
            chosen = ctx.rng.choice(pool)
            if chosen is None:
                break
            move_hand_to_graveyard(opponent, chosen.instance_id)
            discarded.append(chosen.instance_id)
        if discarded:
            self._log(
                ctx,
                {ctx.opponent_id: {"discarded": _change(None, discarded)}},
                target_ids=[],
                target_player_id=ctx.opponent_id,
            )

    def _handle_destroy_all_creatures(self, ctx: EffectContext) -> None:
        changes = {}
        for card in ctx.state.all_field_cards():
            if card.current_health <= 0:
                continue
            changes[card.instance_id] = {"health": _change(card.current_health, 0)}
            card.current_health = 0
        self._log(ctx, changes)
        self.deaths.evaluate_pending_deaths(ctx.state, "effect", ctx.source_id)

    def _handle_banish(self, ctx: EffectContext) -> None:
        """Remove targets from the game; on_death does not fire."""
        changes = {}
        for target in ctx.targets:
            owner = ctx.state.players[target.owner]
            if move_field_to_banished(owner, target.instance_id) is not None:
                changes[target.instance_id] = {"zone": _change("field", "banished")}
        if changes:
            self._log(ctx, changes)

    def _handle_deck_search(self, ctx: EffectContext) -> None:
        player = ctx.state.players[ctx.player_id]
        if player.hand_full:
            return
        pool = apply_selection_rules(player.deck, ctx.effect.selection_rules, ctx.source_id)
        chosen = ctx.rng.choice(pool)
        if chosen is None:
            return
        move_deck_to_hand(player, chosen.instance_id)
        self._log(
            ctx,
            {ctx.player_id: {"searched": _change(None, chosen.instance_id)}},
            target_ids=[],
            target_player_id=ctx.player_id,
        )

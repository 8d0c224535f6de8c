"""
Targeting - Resolve symbolic target specifiers into field cards.

- ally_all / enemy_all: every living card on that side
- enemy_*: cards with the untargetable keyword are never candidates
- *_random: exactly one pick via the RNG, from the pool AFTER selection
  rules have narrowed it
- self / player / self_player: empty; callers handle those themselves

Selection rules are a small predicate language combined with AND.
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Sequence, TypeVar

from .cards import (
    Card,
    EffectTrigger,
    EffectTarget,
    FilterOperator,
    FilterRule,
    FilterType,
    Keyword,
)
from .state import FieldCard, opponent_of

if TYPE_CHECKING:
    from .rng import SeededRandom
    from .state import GameState

T = TypeVar("T", Card, FieldCard)


def target_pool(state: GameState, target: EffectTarget, player_id: str) -> list[FieldCard]:
    """All candidates for a target specifier, before any random pick."""
    if target.is_ally:
        return state.players[player_id].living_field()
    if target.is_enemy:
        opponent = state.players[opponent_of(player_id)]
        return [
            c for c in opponent.field
            if c.is_alive and not c.has_keyword(Keyword.UNTARGETABLE)
        ]
    return []


def resolve_targets(
    state: GameState,
    target: EffectTarget,
    player_id: str,
    rng: SeededRandom,
    rules: Sequence[FilterRule] = (),
    source_id: str | None = None,
    exclude_ids: Iterable[str] = (),
) -> list[FieldCard]:
    """
    Resolve a specifier with selection rules applied to the pool first.

    For random specifiers this makes "no valid target" (empty result) and
    "valid target chosen" mutually exclusive.
    """
    excluded = set(exclude_ids)
    pool = [c for c in target_pool(state, target, player_id) if c.instance_id not in excluded]
    pool = apply_selection_rules(pool, rules, source_id)
    if target.is_random:
        picked = rng.choice(pool)
        return [picked] if picked is not None else []
    return pool


# =============================================================================
# Selection rules
# =============================================================================

def _health_of(target: Card | FieldCard) -> int:
    if isinstance(target, FieldCard):
        return target.current_health
    return target.health


def _is_branded(target: Card | FieldCard) -> bool:
    return isinstance(target, FieldCard) and target.is_branded


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _numeric_match(actual: int, rule: FilterRule) -> bool:
    op = rule.operator
    if op == FilterOperator.RANGE:
        min_ok = rule.min_value is None or actual >= rule.min_value
        max_ok = rule.max_value is None or actual <= rule.max_value
        return min_ok and max_ok
    if op == FilterOperator.GTE:
        return actual >= rule.value
    if op == FilterOperator.LTE:
        return actual <= rule.value
    if op == FilterOperator.EQ:
        return actual == rule.value
    return actual != rule.value


def matches_rule(target: Card | FieldCard, rule: FilterRule, source_id: str | None = None) -> bool:
    """Evaluate one rule against a card in any zone."""
    kind = rule.filter_type

    if kind == FilterType.BRAND:
        branded = _is_branded(target)
        return branded if rule.operator == FilterOperator.HAS else not branded

    if kind == FilterType.PROPERTY:
        if not rule.property_name:
            return True
        actual = getattr(target, rule.property_name, None)
        return _plain(actual) == _plain(rule.value)

    if kind == FilterType.COST:
        return _numeric_match(target.cost, rule)

    if kind == FilterType.HEALTH:
        return _numeric_match(_health_of(target), rule)

    if kind == FilterType.KEYWORD:
        keyword = rule.value if isinstance(rule.value, Keyword) else Keyword(rule.value)
        has = target.has_keyword(keyword)
        return has if rule.operator != FilterOperator.NOT_HAS else not has

    if kind == FilterType.EXCLUDE_SELF:
        return source_id is None or target.instance_id != source_id

    if kind == FilterType.CARD_TYPE:
        return target.card_type.value == _plain(rule.value)

    if kind == FilterType.FACTION:
        return target.faction.value == _plain(rule.value)

    return True


def apply_selection_rules(
    candidates: Sequence[T],
    rules: Sequence[FilterRule],
    source_id: str | None = None,
) -> list[T]:
    """Keep candidates satisfying every rule."""
    if not rules:
        return list(candidates)
    return [
        c for c in candidates
        if all(matches_rule(c, rule, source_id) for rule in rules)
    ]


def has_valid_targets(state: GameState, card: Card, player_id: str) -> bool:
    """
    Whether any on_play effect of a card could resolve against something.

    Player-level and self targets always count; creature targets need a
    non-empty pool after selection rules.
    """
    effects = card.effects_for(EffectTrigger.ON_PLAY)
    if not effects:
        return True
    for effect in effects:
        if effect.target.is_player or effect.target == EffectTarget.SELF:
            return True
        pool = target_pool(state, effect.target, player_id)
        if apply_selection_rules(pool, effect.selection_rules, card.instance_id):
            return True
    return False

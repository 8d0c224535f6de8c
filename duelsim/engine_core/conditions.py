"""
Condition evaluation - (subject, operator, value) against the current state.

Pure and side-effect free: the same snapshot always gives the same answer.
Used both for effect activation conditions and for card play conditions.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable

from .cards import (
    Card,
    ConditionOperator,
    ConditionSubject,
    EffectCondition,
    OPPONENT_LIFE_VALUE,
)
from .state import opponent_of

if TYPE_CHECKING:
    from .state import GameState


def subject_value(state: GameState, subject: ConditionSubject, player_id: str) -> int | bool:
    """Read the scalar a condition subject refers to."""
    player = state.players[player_id]
    opponent = state.players[opponent_of(player_id)]

    if subject == ConditionSubject.GRAVEYARD:
        return len(player.graveyard)
    if subject == ConditionSubject.ALLY_COUNT:
        return len(player.living_field())
    if subject == ConditionSubject.PLAYER_LIFE:
        return player.life
    if subject == ConditionSubject.OPPONENT_LIFE:
        return opponent.life
    if subject == ConditionSubject.BRANDED_ENEMY_COUNT:
        return sum(1 for c in opponent.field if c.is_alive and c.is_branded)
    if subject == ConditionSubject.HAS_BRANDED_ENEMY:
        return any(c.is_alive and c.is_branded for c in opponent.field)
    if subject == ConditionSubject.ENEMY_CREATURE_COUNT:
        return len(opponent.living_field())
    return 0


def _compare(left: int | bool, right: int | bool, operator: ConditionOperator | str) -> bool:
    """Perform comparison operation. Unknown operators hold vacuously."""
    op = operator.value if isinstance(operator, ConditionOperator) else str(operator)
    try:
        if op == "gte":
            return left >= right
        elif op == "lte":
            return left <= right
        elif op == "lt":
            return left < right
        elif op == "gt":
            return left > right
        elif op == "eq":
            return left == right
    except TypeError:
        return False
    return True


def check_condition(state: GameState, condition: EffectCondition | None, player_id: str) -> bool:
    """Evaluate one condition for player_id; an absent condition is true."""
    if condition is None:
        return True

    left = subject_value(state, condition.subject, player_id)
    if condition.value == OPPONENT_LIFE_VALUE:
        right = state.players[opponent_of(player_id)].life
    else:
        right = condition.value
        if isinstance(left, bool) and isinstance(right, int) and not isinstance(right, bool):
            right = bool(right)

    return _compare(left, right, condition.operator)


def check_all(state: GameState, conditions: Iterable[EffectCondition], player_id: str) -> bool:
    return all(check_condition(state, c, player_id) for c in conditions)


def check_play_conditions(state: GameState, card: Card, player_id: str) -> bool:
    """Whether every play condition of the card holds for player_id."""
    return check_all(state, card.play_conditions, player_id)

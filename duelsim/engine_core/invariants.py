"""
Invariant checks - Consistency assertions over a GameState.

Violations are programming-logic bugs, not player-facing errors:
- strict mode (development): raise InvariantViolation
- lenient mode (production): log a warning and auto-correct
"""

from __future__ import annotations
from collections import Counter
from typing import TYPE_CHECKING, Iterable
import logging

from ..config import get_settings
from .action import ActionType
from .death_sweeper import find_unrecorded_dead
from .state import PLAYER_IDS

if TYPE_CHECKING:
    from .death_sweeper import DeathSweeper
    from .state import FieldCard, GameState

logger = logging.getLogger(__name__)

ZONE_NAMES = ("deck", "hand", "field", "graveyard", "banished")


class InvariantViolation(Exception):
    """Raised in strict mode when a state invariant does not hold."""


def _strict(strict: bool | None) -> bool:
    return get_settings().strict_invariants if strict is None else strict


def _recent_actions_for(state: GameState, instance_id: str, limit: int = 5) -> list[str]:
    found = []
    for action in reversed(list(state.action_log)):
        if instance_id in str(action.data):
            found.append(f"#{action.sequence} {action.action_type.value}")
            if len(found) >= limit:
                break
    return found


def describe_lingering(state: GameState, card: FieldCard) -> str:
    last_stage = None
    for action in reversed(list(state.action_log)):
        if action.action_type == ActionType.COMBAT_STAGE and card.instance_id in str(action.data):
            last_stage = action.data.get("stage")
            break
    lines = [
        "lingering dead creature (hp<=0) not destroyed",
        f" card={card.instance_id} name={card.name} owner={card.owner} pos={card.position}",
        f" health: current={card.current_health} max={card.max_health}"
        f" mods(h={card.health_modifier} ph={card.passive_health_modifier})",
        f" attack: total={card.total_attack}",
        f" statuses={[s.to_dict() for s in card.status_effects]}",
        f" phase={state.phase.value} turn={state.turn_number} current={state.current_player}",
        f" last_combat_stage={last_stage or 'none'}",
        f" zone_presence={zone_presence(state, card.instance_id)}",
        f" recent={_recent_actions_for(state, card.instance_id)}",
    ]
    return "\n".join(lines)


def assert_no_lingering_dead(
    state: GameState,
    sweeper: DeathSweeper | None = None,
    strict: bool | None = None,
) -> list[str]:
    """
    Check that no field card sits at health <= 0 without a destruction record.

    Returns the ids auto-corrected in lenient mode.
    """
    lingering = find_unrecorded_dead(state)
    if not lingering:
        return []

    if _strict(strict):
        raise InvariantViolation(describe_lingering(state, lingering[0]))

    corrected = []
    for card in lingering:
        logger.warning("Invariant violation: %s", describe_lingering(state, card))
        if sweeper is not None and sweeper.handle_creature_death(state, card, "invariant"):
            corrected.append(card.instance_id)
    return corrected


def zone_presence(state: GameState, instance_id: str) -> dict[str, int]:
    presence = {}
    for player_id in PLAYER_IDS:
        zones = state.players[player_id].zone_ids()
        for zone in ZONE_NAMES:
            count = zones[zone].count(instance_id)
            if count:
                presence[f"{zone}_{player_id}"] = count
    return presence


def zone_counts(state: GameState) -> Counter:
    counts: Counter = Counter()
    for player_id in PLAYER_IDS:
        for ids in state.players[player_id].zone_ids().values():
            counts.update(ids)
    return counts


def find_zone_violations(state: GameState, expected_ids: Iterable[str] = ()) -> dict[str, int]:
    """
    Instance ids present in a number of zones other than one.

    Ids listed in expected_ids but found nowhere are reported with 0.
    """
    counts = zone_counts(state)
    violations = {iid: n for iid, n in counts.items() if n != 1}
    for iid in expected_ids:
        if counts.get(iid, 0) == 0:
            violations[iid] = 0
    return violations


def assert_zone_conservation(
    state: GameState,
    expected_ids: Iterable[str] = (),
    strict: bool | None = None,
) -> dict[str, int]:
    violations = find_zone_violations(state, expected_ids)
    if violations:
        message = f"zone conservation violated: {violations}"
        if _strict(strict):
            raise InvariantViolation(message)
        logger.warning("Invariant violation: %s", message)
    return violations

"""
Action Log - Append-only record of every observable state change.

The log is:
- Strictly sequenced: sequence == index, gap-free
- Append-only: records are never mutated or reordered
- The only channel a presentation layer reads

Timestamps are presentation metadata; replay comparisons use replay_key(),
which leaves them out.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator
import json
import time


class ActionType(Enum):
    """Kinds of log records."""
    PHASE_CHANGE = "phase_change"
    CARD_PLAY = "card_play"
    CARD_DRAW = "card_draw"
    ENERGY_UPDATE = "energy_update"
    ENERGY_REFILL = "energy_refill"
    CARD_ATTACK = "card_attack"
    CREATURE_DESTROYED = "creature_destroyed"
    EFFECT_TRIGGER = "effect_trigger"
    TRIGGER_EVENT = "trigger_event"
    KEYWORD_TRIGGER = "keyword_trigger"
    END_STAGE = "end_stage"
    COMBAT_STAGE = "combat_stage"


class CombatStage(Enum):
    ATTACK_DECLARE = "attack_declare"
    DAMAGE_DEFENDER = "damage_defender"
    DAMAGE_ATTACKER = "damage_attacker"
    DEATHS = "deaths"


class EndStage(Enum):
    STATUS_TICK = "status_tick"
    CLEANUP = "cleanup"
    TURN_END_TRIGGER = "turn_end_trigger"


@dataclass(frozen=True)
class GameAction:
    """
    One immutable log record.

    data holds plain JSON-compatible values (ids, ints, strings, dicts).
    """
    sequence: int
    player_id: str
    action_type: ActionType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0

    def replay_key(self) -> tuple[int, str, str, str]:
        """Everything but the timestamp, in a canonical form."""
        return (
            self.sequence,
            self.player_id,
            self.action_type.value,
            json.dumps(self.data, sort_keys=True, default=str),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "player_id": self.player_id,
            "type": self.action_type.value,
            "data": deepcopy(self.data),
            "timestamp": self.timestamp,
        }


class ActionLog:
    """
    Ordered, append-only sequence of GameAction records.

    Usage:
        log = ActionLog()
        log.add_phase_change("player1", "draw", "energy")
        for action in log.since(mark):
            ...
    """

    def __init__(self, clock: Callable[[], float] | None = None):
        self._actions: list[GameAction] = []
        self._clock = clock or time.time

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[GameAction]:
        return iter(self._actions)

    def __getitem__(self, index):
        return self._actions[index]

    def __deepcopy__(self, memo):
        copied = ActionLog(self._clock)
        # Records are frozen; sharing them is safe
        copied._actions = list(self._actions)
        return copied

    def append(self, player_id: str, action_type: ActionType, data: dict[str, Any] | None = None) -> GameAction:
        """Append a record; sequence is assigned from the current length."""
        action = GameAction(
            sequence=len(self._actions),
            player_id=player_id,
            action_type=action_type,
            data=deepcopy(data or {}),
            timestamp=self._clock(),
        )
        self._actions.append(action)
        return action

    def since(self, index: int) -> list[GameAction]:
        """Records appended at or after index."""
        return self._actions[index:]

    def of_type(self, action_type: ActionType) -> list[GameAction]:
        return [a for a in self._actions if a.action_type == action_type]

    def destroyed_ids(self) -> set[str]:
        """Instance ids that already have a destruction record."""
        return {
            a.data["destroyed_card_id"]
            for a in self._actions
            if a.action_type == ActionType.CREATURE_DESTROYED
        }

    def last_destroyed_sequences(self) -> dict[str, int]:
        """Instance id → sequence of its most recent destruction record."""
        latest: dict[str, int] = {}
        for action in self._actions:
            if action.action_type == ActionType.CREATURE_DESTROYED:
                latest[action.data["destroyed_card_id"]] = action.sequence
        return latest

    def replay_keys(self) -> list[tuple[int, str, str, str]]:
        return [a.replay_key() for a in self._actions]

    def to_list(self) -> list[dict[str, Any]]:
        return [a.to_dict() for a in self._actions]

    # =========================================================================
    # Typed helpers
    # =========================================================================

    def add_phase_change(self, player_id: str, from_phase: str, to_phase: str) -> GameAction:
        return self.append(player_id, ActionType.PHASE_CHANGE, {
            "from_phase": from_phase,
            "to_phase": to_phase,
        })

    def add_card_play(
        self,
        player_id: str,
        card_id: str,
        position: int,
        initial_stats: dict[str, int] | None = None,
        player_energy: dict[str, int] | None = None,
    ) -> GameAction:
        data: dict[str, Any] = {"card_id": card_id, "position": position}
        if initial_stats is not None:
            data["initial_stats"] = initial_stats
        if player_energy is not None:
            data["player_energy"] = player_energy
        return self.append(player_id, ActionType.CARD_PLAY, data)

    def add_card_draw(
        self,
        player_id: str,
        card_id: str | None,
        hand_size_before: int,
        hand_size_after: int,
        deck_size_after: int,
        fatigue: dict[str, int] | None = None,
    ) -> GameAction:
        data: dict[str, Any] = {
            "card_id": card_id,
            "hand_size_before": hand_size_before,
            "hand_size_after": hand_size_after,
            "deck_size_after": deck_size_after,
        }
        if fatigue is not None:
            data["fatigue"] = fatigue
        return self.append(player_id, ActionType.CARD_DRAW, data)

    def add_energy_update(self, player_id: str, max_before: int, max_after: int) -> GameAction:
        return self.append(player_id, ActionType.ENERGY_UPDATE, {
            "max_energy_before": max_before,
            "max_energy_after": max_after,
        })

    def add_energy_refill(self, player_id: str, energy_before: int, energy_after: int) -> GameAction:
        return self.append(player_id, ActionType.ENERGY_REFILL, {
            "energy_before": energy_before,
            "energy_after": energy_after,
        })

    def add_card_attack(
        self,
        player_id: str,
        attacker_card_id: str,
        target_id: str,
        damage: int,
        target_health: dict[str, int] | None = None,
        attacker_health: dict[str, int] | None = None,
        target_player_life: dict[str, int] | None = None,
    ) -> GameAction:
        data: dict[str, Any] = {
            "attacker_card_id": attacker_card_id,
            "target_id": target_id,
            "damage": damage,
        }
        if target_health is not None:
            data["target_health"] = target_health
        if attacker_health is not None:
            data["attacker_health"] = attacker_health
        if target_player_life is not None:
            data["target_player_life"] = target_player_life
        return self.append(player_id, ActionType.CARD_ATTACK, data)

    def add_creature_destroyed(
        self,
        player_id: str,
        destroyed_card_id: str,
        source: str,
        source_card_id: str | None,
        snapshot: dict[str, Any],
    ) -> GameAction:
        return self.append(player_id, ActionType.CREATURE_DESTROYED, {
            "destroyed_card_id": destroyed_card_id,
            "source": source,
            "source_card_id": source_card_id,
            "card_snapshot": snapshot,
        })

    def add_effect_trigger(
        self,
        player_id: str,
        source_card_id: str,
        effect_type: str,
        effect_value: int,
        target_ids: list[str],
        target_player_id: str | None = None,
        value_changes: dict[str, dict[str, Any]] | None = None,
    ) -> GameAction:
        data: dict[str, Any] = {
            "source_card_id": source_card_id,
            "effect_type": effect_type,
            "effect_value": effect_value,
            "target_ids": list(target_ids),
        }
        if target_player_id is not None:
            data["target_player_id"] = target_player_id
        if value_changes:
            data["value_changes"] = value_changes
        return self.append(player_id, ActionType.EFFECT_TRIGGER, data)

    def add_trigger_event(
        self,
        player_id: str,
        trigger_type: str,
        source_card_id: str | None,
        target_card_id: str | None = None,
    ) -> GameAction:
        return self.append(player_id, ActionType.TRIGGER_EVENT, {
            "trigger_type": trigger_type,
            "source_card_id": source_card_id,
            "target_card_id": target_card_id,
        })

    def add_keyword_trigger(
        self,
        player_id: str,
        keyword: str,
        source_card_id: str,
        target_id: str,
        value: int,
    ) -> GameAction:
        return self.append(player_id, ActionType.KEYWORD_TRIGGER, {
            "keyword": keyword,
            "source_card_id": source_card_id,
            "target_id": target_id,
            "value": value,
        })

    def add_end_stage(self, player_id: str, stage: EndStage, details: dict[str, Any] | None = None) -> GameAction:
        data: dict[str, Any] = {"stage": stage.value}
        if details:
            data["details"] = details
        return self.append(player_id, ActionType.END_STAGE, data)

    def add_combat_stage(
        self,
        player_id: str,
        stage: CombatStage,
        attacker_id: str,
        target_id: str | None = None,
        values: dict[str, Any] | None = None,
    ) -> GameAction:
        data: dict[str, Any] = {"stage": stage.value, "attacker_id": attacker_id}
        if target_id is not None:
            data["target_id"] = target_id
        if values is not None:
            data["values"] = values
        return self.append(player_id, ActionType.COMBAT_STAGE, data)


@dataclass
class ActionResult:
    """
    Result of an operation requested by a caller (e.g. playing a card).

    Truthy only on success, so callers can use it as a boolean signal.
    """
    success: bool
    error: str | None = None
    error_code: str | None = None
    actions: list[GameAction] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(cls, actions: list[GameAction] | None = None) -> ActionResult:
        """Create a success result with the records it produced."""
        return cls(success=True, actions=actions or [])

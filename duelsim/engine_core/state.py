"""
Game State - Mutable container for one simulated game.

Design principles:
- Single writer: the driver mutates GameState in place
- Identity by instance id: duplicates of a template coexist
- Zone transitions go through the primitives at the bottom of this module
- Snapshot by deep copy only (tests, replays)
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import time

from .action import ActionLog
from .cards import Card, CardEffect, CardType, EffectTrigger, Faction, Keyword, TacticsType
from .constants import RULES


PLAYER_IDS = ("player1", "player2")


def opponent_of(player_id: str) -> str:
    return "player2" if player_id == "player1" else "player1"


class GamePhase(Enum):
    """Turn phases, in cycle order."""
    DRAW = "draw"
    ENERGY = "energy"
    DEPLOY = "deploy"
    BATTLE = "battle"
    END = "end"


PHASE_ORDER = [GamePhase.DRAW, GamePhase.ENERGY, GamePhase.DEPLOY, GamePhase.BATTLE, GamePhase.END]


class StatusType(Enum):
    POISON = "poison"
    STUN = "stun"
    BRANDED = "branded"


class EndReason(Enum):
    LIFE_ZERO = "life_zero"
    TIMEOUT = "timeout"


@dataclass
class StatusEffect:
    """
    A status on a field card.

    duration None means the status never expires (branded).
    """
    status_type: StatusType
    duration: int | None = None
    damage: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.status_type.value}
        if self.duration is not None:
            data["duration"] = self.duration
        if self.status_type == StatusType.POISON:
            data["damage"] = self.damage
        return data


@dataclass
class FieldCard:
    """
    A live creature instance on a field.

    The underlying Card keeps its instance id for its whole life, so the
    same id follows it from hand to field to graveyard.
    """
    card: Card
    owner: str
    current_health: int
    summon_turn: int = 0
    position: int = 0
    attack_modifier: int = 0
    health_modifier: int = 0
    passive_attack_modifier: int = 0
    passive_health_modifier: int = 0
    has_attacked: bool = False
    is_silenced: bool = False
    is_stealthed: bool = False
    readied_this_turn: bool = False
    status_effects: list[StatusEffect] = field(default_factory=list)
    # Log length when this instance entered the field
    entered_sequence: int = 0

    @classmethod
    def from_card(
        cls,
        card: Card,
        owner: str,
        summon_turn: int,
        position: int = 0,
        entered_sequence: int = 0,
    ) -> FieldCard:
        return cls(
            card=card,
            owner=owner,
            current_health=card.health,
            summon_turn=summon_turn,
            position=position,
            is_stealthed=card.has_keyword(Keyword.STEALTH),
            entered_sequence=entered_sequence,
        )

    # Template passthrough

    @property
    def instance_id(self) -> str:
        return self.card.instance_id

    @property
    def template_id(self) -> str:
        return self.card.template_id

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def faction(self) -> Faction:
        return self.card.faction

    @property
    def cost(self) -> int:
        return self.card.cost

    @property
    def card_type(self) -> CardType:
        return self.card.card_type

    @property
    def keywords(self) -> frozenset[Keyword]:
        return self.card.keywords

    @property
    def effects(self) -> tuple[CardEffect, ...]:
        return self.card.effects

    @property
    def base_attack(self) -> int:
        return self.card.attack

    @property
    def base_health(self) -> int:
        return self.card.health

    # Derived stats

    @property
    def total_attack(self) -> int:
        return self.base_attack + self.attack_modifier + self.passive_attack_modifier

    @property
    def max_health(self) -> int:
        return self.base_health + self.health_modifier + self.passive_health_modifier

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    @property
    def is_stunned(self) -> bool:
        return self.has_status(StatusType.STUN)

    @property
    def is_branded(self) -> bool:
        return self.has_status(StatusType.BRANDED)

    def has_keyword(self, keyword: Keyword) -> bool:
        return keyword in self.card.keywords

    def has_active_keyword(self, keyword: Keyword) -> bool:
        """Keyword present and not suppressed by silence."""
        return not self.is_silenced and keyword in self.card.keywords

    def has_status(self, status_type: StatusType) -> bool:
        return any(s.status_type == status_type for s in self.status_effects)

    def get_status(self, status_type: StatusType) -> StatusEffect | None:
        for status in self.status_effects:
            if status.status_type == status_type:
                return status
        return None

    def effects_for(self, trigger: EffectTrigger) -> list[CardEffect]:
        return self.card.effects_for(trigger)

    def stats(self) -> dict[str, int]:
        return {
            "attack": self.total_attack,
            "health": self.current_health,
        }

    def snapshot(self) -> dict[str, Any]:
        """Stats at this moment, kept in destruction records."""
        return {
            "instance_id": self.instance_id,
            "template_id": self.template_id,
            "owner": self.owner,
            "name": self.name,
            "attack_total": self.total_attack,
            "health_total": self.max_health,
            "current_health": self.current_health,
            "base_attack": self.base_attack,
            "base_health": self.base_health,
            "keywords": sorted(k.value for k in self.keywords),
        }


@dataclass
class PlayerState:
    """One side of the table: life, energy and five zones."""
    player_id: str
    faction: Faction
    tactics: TacticsType
    life: int = RULES.initial_life
    energy: int = RULES.initial_energy
    max_energy: int = RULES.initial_energy
    deck: list[Card] = field(default_factory=list)
    hand: list[Card] = field(default_factory=list)
    graveyard: list[Card] = field(default_factory=list)
    banished: list[Card] = field(default_factory=list)
    # Declared last: the name shadows dataclasses.field in the class body
    field: list[FieldCard] = field(default_factory=list)

    def find_field_card(self, instance_id: str) -> FieldCard | None:
        for card in self.field:
            if card.instance_id == instance_id:
                return card
        return None

    def find_hand_card(self, instance_id: str) -> Card | None:
        for card in self.hand:
            if card.instance_id == instance_id:
                return card
        return None

    def living_field(self) -> list[FieldCard]:
        return [c for c in self.field if c.is_alive]

    @property
    def field_full(self) -> bool:
        return len(self.field) >= RULES.field_limit

    @property
    def hand_full(self) -> bool:
        return len(self.hand) >= RULES.hand_limit

    def zone_ids(self) -> dict[str, list[str]]:
        return {
            "deck": [c.instance_id for c in self.deck],
            "hand": [c.instance_id for c in self.hand],
            "field": [c.instance_id for c in self.field],
            "graveyard": [c.instance_id for c in self.graveyard],
            "banished": [c.instance_id for c in self.banished],
        }


@dataclass
class GameResult:
    """Terminal outcome; winner None is a draw."""
    winner: str | None
    reason: EndReason
    total_turns: int
    duration_seconds: float = 0.0
    end_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner,
            "reason": self.reason.value,
            "total_turns": self.total_turns,
            "duration_seconds": self.duration_seconds,
            "end_time": self.end_time,
        }


@dataclass
class GameState:
    """
    Root aggregate for one game.

    Mutated in place by every resolver; deep_copy() exists for snapshots.
    """
    game_id: str
    players: dict[str, PlayerState]
    current_player: str = "player1"
    turn_number: int = 1
    phase: GamePhase = GamePhase.DRAW
    action_log: ActionLog = field(default_factory=ActionLog)
    result: GameResult | None = None
    random_seed: str = ""
    start_time: float = field(default_factory=time.time)
    token_counter: int = 0

    @property
    def current(self) -> PlayerState:
        return self.players[self.current_player]

    @property
    def opponent(self) -> PlayerState:
        return self.players[opponent_of(self.current_player)]

    @property
    def is_over(self) -> bool:
        return self.result is not None

    def find_field_card(self, instance_id: str) -> FieldCard | None:
        for player_id in PLAYER_IDS:
            card = self.players[player_id].find_field_card(instance_id)
            if card is not None:
                return card
        return None

    def all_field_cards(self) -> list[FieldCard]:
        return [c for pid in PLAYER_IDS for c in self.players[pid].field]

    def next_token_id(self, player_id: str) -> str:
        self.token_counter += 1
        return f"token@{player_id}:{self.token_counter}"

    def deep_copy(self) -> GameState:
        return deepcopy(self)

    def set_clock(self, clock: Callable[[], float]) -> None:
        """Replace the log clock (fixed clocks make logs byte-identical)."""
        self.action_log._clock = clock


# =============================================================================
# Zone transitions
#
# The only sanctioned ways to move cards between zones. Each removes by
# identity from one source zone and appends to one destination; a request
# for a card not present in the claimed source zone is a no-op (None/False).
# =============================================================================

def reindex_field(player: PlayerState) -> None:
    """Dense 0..n-1 positions, preserving order."""
    for index, card in enumerate(player.field):
        card.position = index


def _pop_by_id(zone: list, instance_id: str):
    for index, card in enumerate(zone):
        if card.instance_id == instance_id:
            return zone.pop(index)
    return None


def place_on_field(player: PlayerState, field_card: FieldCard, position: int | None = None) -> bool:
    """Insert a field card (tail by default). False when the field is full."""
    if player.field_full:
        return False
    if position is None or position >= len(player.field):
        player.field.append(field_card)
    else:
        player.field.insert(max(0, position), field_card)
    reindex_field(player)
    return True


def remove_from_hand(player: PlayerState, instance_id: str) -> Card | None:
    return _pop_by_id(player.hand, instance_id)


def move_hand_to_field(state: GameState, player: PlayerState, instance_id: str) -> FieldCard | None:
    """hand → field for a creature card."""
    card = player.find_hand_card(instance_id)
    if card is None or not card.is_creature or player.field_full:
        return None
    remove_from_hand(player, instance_id)
    field_card = FieldCard.from_card(
        card, player.player_id, state.turn_number, entered_sequence=len(state.action_log)
    )
    place_on_field(player, field_card)
    return field_card


def move_hand_to_graveyard(player: PlayerState, instance_id: str) -> Card | None:
    card = remove_from_hand(player, instance_id)
    if card is not None:
        player.graveyard.append(card)
    return card


def move_field_to_graveyard(player: PlayerState, instance_id: str) -> FieldCard | None:
    field_card = _pop_by_id(player.field, instance_id)
    if field_card is None:
        return None
    player.graveyard.append(field_card.card)
    reindex_field(player)
    return field_card


def move_field_to_banished(player: PlayerState, instance_id: str) -> FieldCard | None:
    field_card = _pop_by_id(player.field, instance_id)
    if field_card is None:
        return None
    player.banished.append(field_card.card)
    reindex_field(player)
    return field_card


def move_graveyard_to_field(state: GameState, player: PlayerState, instance_id: str) -> FieldCard | None:
    """graveyard → field; the card returns fresh at base stats."""
    if player.field_full:
        return None
    card = _pop_by_id(player.graveyard, instance_id)
    if card is None:
        return None
    field_card = FieldCard.from_card(
        card, player.player_id, state.turn_number, entered_sequence=len(state.action_log)
    )
    field_card.has_attacked = True
    place_on_field(player, field_card)
    return field_card


def draw_from_deck(player: PlayerState) -> Card | None:
    """deck → hand from the top (end of the list). None on an empty deck."""
    if not player.deck:
        return None
    card = player.deck.pop()
    player.hand.append(card)
    return card


def move_deck_to_hand(player: PlayerState, instance_id: str) -> Card | None:
    card = _pop_by_id(player.deck, instance_id)
    if card is not None:
        player.hand.append(card)
    return card


def move_deck_top_to_graveyard(player: PlayerState) -> Card | None:
    if not player.deck:
        return None
    card = player.deck.pop()
    player.graveyard.append(card)
    return card

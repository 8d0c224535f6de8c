"""
Card definitions - Templates, effects and the symbolic effect vocabulary.

A CardTemplate is immutable master data. A Card is one copy of a template
inside a game, identified by its instance id. Effects are declared as data:
- trigger: when the effect is considered
- target: who it resolves against
- action: which handler mutates the state
- value / dynamic_value: how strong it is
- activation_condition, selection_rules, conditional_effect, chain_on_kill
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CardType(Enum):
    CREATURE = "creature"
    SPELL = "spell"


class Faction(Enum):
    NECROMANCER = "necromancer"
    BERSERKER = "berserker"
    MAGE = "mage"
    KNIGHT = "knight"
    INQUISITOR = "inquisitor"


class TacticsType(Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    TEMPO = "tempo"


class Keyword(Enum):
    GUARD = "guard"
    LIFESTEAL = "lifesteal"
    STEALTH = "stealth"
    POISON = "poison"
    RETALIATE = "retaliate"
    ECHO = "echo"
    FORMATION = "formation"
    RUSH = "rush"
    TRAMPLE = "trample"
    UNTARGETABLE = "untargetable"


class EffectTrigger(Enum):
    """Named event points at which effects are considered."""
    ON_PLAY = "on_play"
    ON_DEATH = "on_death"
    ON_ATTACK = "on_attack"
    ON_DAMAGE_TAKEN = "on_damage_taken"
    TURN_START = "turn_start"
    TURN_END = "turn_end"
    PASSIVE = "passive"
    ON_ALLY_DEATH = "on_ally_death"
    ON_SPELL_PLAY = "on_spell_play"


class EffectTarget(Enum):
    SELF = "self"
    ALLY_ALL = "ally_all"
    ALLY_RANDOM = "ally_random"
    ENEMY_ALL = "enemy_all"
    ENEMY_RANDOM = "enemy_random"
    PLAYER = "player"
    SELF_PLAYER = "self_player"

    @property
    def is_random(self) -> bool:
        return self in (EffectTarget.ALLY_RANDOM, EffectTarget.ENEMY_RANDOM)

    @property
    def is_enemy(self) -> bool:
        return self in (EffectTarget.ENEMY_ALL, EffectTarget.ENEMY_RANDOM)

    @property
    def is_ally(self) -> bool:
        return self in (EffectTarget.ALLY_ALL, EffectTarget.ALLY_RANDOM)

    @property
    def is_player(self) -> bool:
        return self in (EffectTarget.PLAYER, EffectTarget.SELF_PLAYER)


class EffectAction(Enum):
    """Closed set of effect actions; every member needs a handler."""
    DAMAGE = "damage"
    HEAL = "heal"
    BUFF_ATTACK = "buff_attack"
    BUFF_HEALTH = "buff_health"
    DEBUFF_ATTACK = "debuff_attack"
    DEBUFF_HEALTH = "debuff_health"
    SUMMON = "summon"
    DRAW_CARD = "draw_card"
    SILENCE = "silence"
    RESURRECT = "resurrect"
    STUN = "stun"
    READY = "ready"
    DESTROY_DECK_TOP = "destroy_deck_top"
    SWAP_ATTACK_HEALTH = "swap_attack_health"
    HAND_DISCARD = "hand_discard"
    DESTROY_ALL_CREATURES = "destroy_all_creatures"
    APPLY_BRAND = "apply_brand"
    BANISH = "banish"
    DECK_SEARCH = "deck_search"


class ConditionSubject(Enum):
    GRAVEYARD = "graveyard"
    ALLY_COUNT = "allyCount"
    PLAYER_LIFE = "playerLife"
    OPPONENT_LIFE = "opponentLife"
    BRANDED_ENEMY_COUNT = "brandedEnemyCount"
    HAS_BRANDED_ENEMY = "hasBrandedEnemy"
    ENEMY_CREATURE_COUNT = "enemyCreatureCount"


class ConditionOperator(Enum):
    GTE = "gte"
    LTE = "lte"
    LT = "lt"
    GT = "gt"
    EQ = "eq"


class FilterType(Enum):
    BRAND = "brand"
    PROPERTY = "property"
    COST = "cost"
    KEYWORD = "keyword"
    HEALTH = "health"
    EXCLUDE_SELF = "exclude_self"
    CARD_TYPE = "card_type"
    FACTION = "faction"


class FilterOperator(Enum):
    EQ = "eq"
    GTE = "gte"
    LTE = "lte"
    HAS = "has"
    NOT_HAS = "not_has"
    RANGE = "range"


class DynamicSource(Enum):
    GRAVEYARD = "graveyard"
    FIELD = "field"
    ENEMY_FIELD = "enemy_field"


class DynamicFilter(Enum):
    CREATURES = "creatures"
    ALIVE = "alive"
    EXCLUDE_SELF = "exclude_self"
    HAS_BRAND = "has_brand"


# Literal accepted as a condition value meaning "the opponent's life"
OPPONENT_LIFE_VALUE = "opponentLife"


@dataclass(frozen=True)
class EffectCondition:
    """(subject, operator, value) evaluated against the current state."""
    subject: ConditionSubject
    operator: ConditionOperator | str
    value: int | str = 0


@dataclass(frozen=True)
class FilterRule:
    """
    A single selection predicate.

    Examples:
    - FilterRule(FilterType.BRAND, FilterOperator.HAS)
    - FilterRule(FilterType.COST, FilterOperator.RANGE, min_value=1, max_value=3)
    - FilterRule(FilterType.PROPERTY, FilterOperator.EQ, value="Token", property_name="name")
    """
    filter_type: FilterType
    operator: FilterOperator = FilterOperator.EQ
    value: Any = None
    min_value: int | None = None
    max_value: int | None = None
    property_name: str | None = None


@dataclass(frozen=True)
class DynamicValue:
    """Effect value computed from a zone count at resolution time."""
    source: DynamicSource
    filter: DynamicFilter | None = None
    base_value: int = 0


@dataclass(frozen=True)
class ConditionalEffect:
    condition: EffectCondition
    if_true: tuple[CardEffect, ...] = ()
    if_false: tuple[CardEffect, ...] = ()


@dataclass(frozen=True)
class ChainOnKill:
    """
    Continuation fired once per creature killed by the parent effect.

    The continuation's target pool excludes the killed creatures, and all
    of the parent's targets when exclude_original_target is set.
    """
    action: EffectAction
    value: int
    target: EffectTarget = EffectTarget.ENEMY_RANDOM
    exclude_original_target: bool = True
    selection_rules: tuple[FilterRule, ...] = ()
    chain_on_kill: ChainOnKill | None = None


@dataclass(frozen=True)
class CardEffect:
    trigger: EffectTrigger
    target: EffectTarget
    action: EffectAction
    value: int = 0
    dynamic_value: DynamicValue | None = None
    activation_condition: EffectCondition | None = None
    selection_rules: tuple[FilterRule, ...] = ()
    conditional_effect: ConditionalEffect | None = None
    chain_on_kill: ChainOnKill | None = None


@dataclass(frozen=True)
class CardTemplate:
    """
    Immutable master data for a card.

    Creatures carry attack/health; spells leave them at 0.
    """
    template_id: str
    name: str
    card_type: CardType
    faction: Faction
    cost: int
    attack: int = 0
    health: int = 0
    keywords: frozenset[Keyword] = frozenset()
    effects: tuple[CardEffect, ...] = ()
    play_conditions: tuple[EffectCondition, ...] = ()
    flavor: str = ""

    @property
    def is_creature(self) -> bool:
        return self.card_type == CardType.CREATURE

    @property
    def is_spell(self) -> bool:
        return self.card_type == CardType.SPELL

    def effects_for(self, trigger: EffectTrigger) -> list[CardEffect]:
        return [e for e in self.effects if e.trigger == trigger]

    def has_keyword(self, keyword: Keyword) -> bool:
        return keyword in self.keywords


@dataclass
class Card:
    """
    One copy of a template inside a game (hand, deck, graveyard, banished).

    Identity is the instance id; duplicates of a template coexist.
    """
    template: CardTemplate
    instance_id: str

    def __hash__(self):
        return hash(self.instance_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.instance_id == other.instance_id

    @property
    def template_id(self) -> str:
        return self.template.template_id

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def card_type(self) -> CardType:
        return self.template.card_type

    @property
    def faction(self) -> Faction:
        return self.template.faction

    @property
    def cost(self) -> int:
        return self.template.cost

    @property
    def attack(self) -> int:
        return self.template.attack

    @property
    def health(self) -> int:
        return self.template.health

    @property
    def keywords(self) -> frozenset[Keyword]:
        return self.template.keywords

    @property
    def effects(self) -> tuple[CardEffect, ...]:
        return self.template.effects

    @property
    def play_conditions(self) -> tuple[EffectCondition, ...]:
        return self.template.play_conditions

    @property
    def is_creature(self) -> bool:
        return self.template.is_creature

    @property
    def is_spell(self) -> bool:
        return self.template.is_spell

    def has_keyword(self, keyword: Keyword) -> bool:
        return keyword in self.template.keywords

    def effects_for(self, trigger: EffectTrigger) -> list[CardEffect]:
        return self.template.effects_for(trigger)


def instantiate_cards(templates: list[CardTemplate], player_id: str) -> list[Card]:
    """Give each template copy a deterministic instance id."""
    return [
        Card(template=template, instance_id=f"{template.template_id}@{player_id}:{index}")
        for index, template in enumerate(templates)
    ]

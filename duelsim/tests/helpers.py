"""
Builders for hand-made game states.

Tests place cards directly into zones instead of playing them, so a
scenario needs only the cards it is about.
"""

from ..catalog.cards import creature, spell
from ..engine_core.action import ActionLog
from ..engine_core.cards import Card, CardTemplate, Faction, TacticsType
from ..engine_core.state import FieldCard, GamePhase, GameState, PlayerState, place_on_field


def fixed_clock() -> float:
    return 0.0


def vanilla(template_id, attack, health, cost=1, keywords=(), effects=(), faction=Faction.KNIGHT) -> CardTemplate:
    """A creature template with nothing but what the test asks for."""
    return creature(template_id, template_id.title(), faction, cost, attack, health,
                    keywords=keywords, effects=effects)


def sorcery(template_id, effects=(), cost=1, play_conditions=(), faction=Faction.MAGE) -> CardTemplate:
    return spell(template_id, template_id.title(), faction, cost,
                 effects=effects, play_conditions=play_conditions)


def make_state(
    seed="test-seed",
    turn=3,
    phase=GamePhase.DEPLOY,
    current="player1",
    factions=(Faction.KNIGHT, Faction.BERSERKER),
    tactics=(TacticsType.BALANCED, TacticsType.BALANCED),
) -> GameState:
    """An empty board: no cards anywhere, full life, fixed clock."""
    return GameState(
        game_id="test_game",
        players={
            "player1": PlayerState("player1", factions[0], tactics[0]),
            "player2": PlayerState("player2", factions[1], tactics[1]),
        },
        current_player=current,
        turn_number=turn,
        phase=phase,
        action_log=ActionLog(fixed_clock),
        random_seed=seed,
    )


def _new_card(state: GameState, player_id: str, template: CardTemplate) -> Card:
    player = state.players[player_id]
    count = sum(len(ids) for ids in player.zone_ids().values())
    return Card(template=template, instance_id=f"{template.template_id}@{player_id}:t{count}")


def put_on_field(state: GameState, player_id: str, template: CardTemplate, summon_turn=None) -> FieldCard:
    """Place a creature that has been on the field since before this turn."""
    card = _new_card(state, player_id, template)
    field_card = FieldCard.from_card(
        card,
        player_id,
        state.turn_number - 1 if summon_turn is None else summon_turn,
        entered_sequence=len(state.action_log),
    )
    place_on_field(state.players[player_id], field_card)
    return field_card


def put_in_hand(state: GameState, player_id: str, template: CardTemplate) -> Card:
    card = _new_card(state, player_id, template)
    state.players[player_id].hand.append(card)
    return card


def put_in_deck(state: GameState, player_id: str, template: CardTemplate) -> Card:
    """Append to the deck; the last card put in is the top card."""
    card = _new_card(state, player_id, template)
    state.players[player_id].deck.append(card)
    return card


def put_in_graveyard(state: GameState, player_id: str, template: CardTemplate) -> Card:
    card = _new_card(state, player_id, template)
    state.players[player_id].graveyard.append(card)
    return card


class FixedRandom:
    """Stand-in RNG: next() always returns one value, choice() the first item."""

    def __init__(self, value: float = 0.99):
        self.value = value

    def next(self) -> float:
        return self.value

    def next_int(self, minimum: int, maximum: int) -> int:
        return minimum

    def choice(self, items):
        return items[0] if items else None

    def shuffle(self, items):
        return list(items)

"""
Tests for the state model and zone transitions.

Tests:
- FieldCard derived stats
- Zone primitives move by identity and refuse bad requests
- Snapshots are independent
"""

from ..engine_core.cards import Keyword
from ..engine_core.state import (
    EndReason,
    GameResult,
    draw_from_deck,
    move_deck_top_to_graveyard,
    move_field_to_banished,
    move_field_to_graveyard,
    move_graveyard_to_field,
    move_hand_to_field,
    move_hand_to_graveyard,
    opponent_of,
)
from .helpers import put_in_deck, put_in_graveyard, put_in_hand, put_on_field, sorcery, vanilla


class TestFieldCard:
    """Tests for FieldCard stats."""

    def test_total_attack_includes_modifiers(self, state):
        """Attack is base plus both modifier kinds."""
        card = put_on_field(state, "player1", vanilla("grunt", 2, 3))
        card.attack_modifier = 1
        card.passive_attack_modifier = 2
        assert card.total_attack == 5

    def test_max_health_includes_modifiers(self, state):
        """Max health is base plus both modifier kinds."""
        card = put_on_field(state, "player1", vanilla("grunt", 2, 3))
        card.health_modifier = 2
        card.passive_health_modifier = 1
        assert card.max_health == 6

    def test_silence_suppresses_keywords(self, state):
        """Silenced cards keep keywords but none are active."""
        card = put_on_field(state, "player1", vanilla("wall", 0, 5, keywords=[Keyword.GUARD]))
        card.is_silenced = True
        assert card.has_keyword(Keyword.GUARD)
        assert not card.has_active_keyword(Keyword.GUARD)

    def test_stealth_on_entry(self, state):
        """Stealth creatures enter stealthed."""
        card = put_on_field(state, "player1", vanilla("sneak", 1, 1, keywords=[Keyword.STEALTH]))
        assert card.is_stealthed


class TestZoneTransitions:
    """Tests for zone primitives."""

    def test_hand_to_field(self, state):
        """A creature leaves hand and enters the field tail."""
        player = state.players["player1"]
        card = put_in_hand(state, "player1", vanilla("grunt", 2, 2))

        field_card = move_hand_to_field(state, player, card.instance_id)

        assert field_card is not None
        assert player.hand == []
        assert player.field == [field_card]
        assert field_card.summon_turn == state.turn_number
        assert field_card.current_health == 2

    def test_spell_cannot_enter_field(self, state):
        """Spells are refused by hand → field."""
        player = state.players["player1"]
        card = put_in_hand(state, "player1", sorcery("bolt"))
        assert move_hand_to_field(state, player, card.instance_id) is None
        assert player.hand == [card]

    def test_full_field_refuses(self, state):
        """No sixth creature."""
        player = state.players["player1"]
        for i in range(5):
            put_on_field(state, "player1", vanilla(f"grunt{i}", 1, 1))
        card = put_in_hand(state, "player1", vanilla("late", 1, 1))

        assert move_hand_to_field(state, player, card.instance_id) is None
        assert len(player.field) == 5
        assert card in player.hand

    def test_missing_card_is_noop(self, state):
        """Moving a card that is not in the source zone changes nothing."""
        player = state.players["player1"]
        assert move_hand_to_field(state, player, "ghost") is None
        assert move_field_to_graveyard(player, "ghost") is None
        assert move_hand_to_graveyard(player, "ghost") is None

    def test_field_to_graveyard_reindexes(self, state):
        """Positions stay dense after a removal."""
        player = state.players["player1"]
        first = put_on_field(state, "player1", vanilla("a", 1, 1))
        second = put_on_field(state, "player1", vanilla("b", 1, 1))
        third = put_on_field(state, "player1", vanilla("c", 1, 1))

        move_field_to_graveyard(player, second.instance_id)

        assert [c.position for c in player.field] == [0, 1]
        assert player.field == [first, third]
        assert player.graveyard == [second.card]

    def test_field_to_banished(self, state):
        """Banished cards leave the field for the banished zone."""
        player = state.players["player1"]
        card = put_on_field(state, "player1", vanilla("a", 1, 1))
        move_field_to_banished(player, card.instance_id)
        assert player.field == []
        assert player.banished == [card.card]
        assert player.graveyard == []

    def test_graveyard_to_field_fresh(self, state):
        """Resurrection keeps the id and returns at base stats, exhausted."""
        player = state.players["player1"]
        card = put_in_graveyard(state, "player1", vanilla("risen", 2, 3))

        field_card = move_graveyard_to_field(state, player, card.instance_id)

        assert field_card.instance_id == card.instance_id
        assert field_card.current_health == 3
        assert field_card.total_attack == 2
        assert field_card.has_attacked
        assert player.graveyard == []

    def test_draw_takes_top(self, state):
        """The last card in the deck list is the top."""
        player = state.players["player1"]
        put_in_deck(state, "player1", vanilla("bottom", 1, 1))
        top = put_in_deck(state, "player1", vanilla("top", 1, 1))

        assert draw_from_deck(player) is top
        assert player.hand == [top]

    def test_draw_empty_deck(self, state):
        """Drawing from an empty deck returns None."""
        assert draw_from_deck(state.players["player1"]) is None

    def test_deck_top_to_graveyard(self, state):
        """Milling moves the top card to the graveyard."""
        player = state.players["player2"]
        top = put_in_deck(state, "player2", vanilla("top", 1, 1))
        assert move_deck_top_to_graveyard(player) is top
        assert player.graveyard == [top]


class TestGameState:
    """Tests for GameState helpers."""

    def test_opponent_of(self):
        assert opponent_of("player1") == "player2"
        assert opponent_of("player2") == "player1"

    def test_token_ids_are_sequential(self, state):
        """Token ids come from one per-game counter."""
        assert state.next_token_id("player1") == "token@player1:1"
        assert state.next_token_id("player2") == "token@player2:2"

    def test_deep_copy_is_independent(self, state):
        """Mutating a copy leaves the original alone."""
        put_on_field(state, "player1", vanilla("a", 1, 3))
        state.action_log.add_phase_change("player1", "draw", "energy")

        copy = state.deep_copy()
        copy.players["player1"].field[0].current_health = 0
        copy.players["player1"].life = 1
        copy.action_log.add_phase_change("player1", "energy", "deploy")

        assert state.players["player1"].field[0].current_health == 3
        assert state.players["player1"].life == 15
        assert len(state.action_log) == 1
        assert len(copy.action_log) == 2

    def test_find_field_card_searches_both_sides(self, state):
        mine = put_on_field(state, "player1", vanilla("a", 1, 1))
        theirs = put_on_field(state, "player2", vanilla("b", 1, 1))
        assert state.find_field_card(mine.instance_id) is mine
        assert state.find_field_card(theirs.instance_id) is theirs
        assert state.find_field_card("ghost") is None

    def test_result_to_dict(self):
        result = GameResult(winner=None, reason=EndReason.TIMEOUT, total_turns=31)
        assert result.to_dict()["reason"] == "timeout"
        assert result.to_dict()["winner"] is None

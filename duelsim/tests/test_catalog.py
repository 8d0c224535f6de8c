"""
Tests for the card registry and sample decks.
"""

import pytest

from ..catalog import ALL_CARDS, FACTION_CARDS, SAMPLE_DECKS, CardRegistry, build_deck, get_sample_deck, resolve_templates, validate_deck
from ..catalog.decks import list_sample_decks
from ..engine_core.cards import CardType, EffectAction, Faction


class TestRegistry:
    """Tests for CardRegistry."""

    def test_default_has_every_card(self):
        registry = CardRegistry.default()
        assert len(registry) == len(ALL_CARDS)

    def test_template_ids_are_unique(self):
        ids = [t.template_id for t in ALL_CARDS]
        assert len(ids) == len(set(ids))

    def test_get_unknown_raises(self):
        with pytest.raises(KeyError, match="Unknown card"):
            CardRegistry.default().get("nope")

    def test_find_unknown_is_none(self):
        assert CardRegistry.default().find("nope") is None

    def test_duplicate_registration_rejected(self):
        registry = CardRegistry.default()
        with pytest.raises(ValueError):
            registry.register(ALL_CARDS[0])

    def test_by_faction(self):
        registry = CardRegistry.default()
        mages = registry.by_faction("mage")
        assert mages
        assert all(t.faction == Faction.MAGE for t in mages)

    def test_every_faction_has_cards(self):
        assert set(FACTION_CARDS) == set(Faction)

    def test_spells_have_no_stats(self):
        for template in ALL_CARDS:
            if template.card_type == CardType.SPELL:
                assert template.attack == 0
                assert template.health == 0
            else:
                assert template.health > 0

    def test_catalog_covers_zone_actions(self):
        used = {e.action for t in ALL_CARDS for e in t.effects}
        assert EffectAction.DAMAGE in used
        assert EffectAction.BANISH in used
        assert EffectAction.DECK_SEARCH in used


class TestSampleDecks:
    """Tests for the built-in decks."""

    def test_one_deck_per_faction(self):
        assert sorted(d.faction.value for d in SAMPLE_DECKS) == sorted(f.value for f in Faction)
        assert len(list_sample_decks()) == 5

    @pytest.mark.parametrize("deck", SAMPLE_DECKS, ids=lambda d: d.deck_id)
    def test_decks_are_legal(self, deck):
        registry = CardRegistry.default()
        assert validate_deck(deck.card_ids, registry) == []
        assert all(registry.get(tid).faction == deck.faction for tid in deck.card_ids)

    def test_lookup_by_faction_or_id(self):
        by_id = get_sample_deck("knight_iron_phalanx")
        assert get_sample_deck("knight") is by_id
        assert get_sample_deck(Faction.KNIGHT) is by_id

    def test_unknown_deck(self):
        with pytest.raises(KeyError):
            get_sample_deck("dragons")

    def test_validate_reports_problems(self):
        errors = validate_deck(["mag_storm"] * 3 + ["ghost_card"], CardRegistry.default())
        assert any("20 cards" in e for e in errors)
        assert any("Too many copies of mag_storm" in e for e in errors)
        assert any("Unknown card: ghost_card" in e for e in errors)

    def test_resolve_rejects_illegal(self):
        with pytest.raises(ValueError, match="Unknown card"):
            resolve_templates(["ghost_card"] * 20)

    def test_build_deck_ids(self):
        deck = build_deck(get_sample_deck("mage").card_ids, "player2")
        assert len(deck) == 20
        assert deck[0].instance_id == f"{deck[0].template_id}@player2:0"
        assert len({c.instance_id for c in deck}) == 20

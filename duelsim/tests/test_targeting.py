"""
Tests for condition evaluation and target resolution.

Tests:
- Condition subjects, operators and the opponentLife literal
- Pools exclude untargetable and dead cards
- Selection rules narrow the pool before a random pick
- Spell target validity
"""

from ..engine_core.cards import (
    CardEffect,
    ConditionOperator,
    ConditionSubject,
    EffectAction,
    EffectCondition,
    EffectTarget,
    EffectTrigger,
    Faction,
    FilterOperator,
    FilterRule,
    FilterType,
    Keyword,
)
from ..engine_core.conditions import check_condition, check_play_conditions
from ..engine_core.rng import SeededRandom
from ..engine_core.state import StatusEffect, StatusType
from ..engine_core.targeting import (
    apply_selection_rules,
    has_valid_targets,
    matches_rule,
    resolve_targets,
    target_pool,
)
from .helpers import put_in_graveyard, put_in_hand, put_on_field, sorcery, vanilla


class TestConditions:
    """Tests for check_condition."""

    def test_none_is_true(self, state):
        assert check_condition(state, None, "player1")

    def test_ally_count_counts_living(self, state):
        """Dead cards still on the field are not allies."""
        put_on_field(state, "player1", vanilla("a", 1, 1))
        dead = put_on_field(state, "player1", vanilla("b", 1, 1))
        dead.current_health = 0
        cond = EffectCondition(ConditionSubject.ALLY_COUNT, ConditionOperator.EQ, 1)
        assert check_condition(state, cond, "player1")

    def test_graveyard_count(self, state):
        put_in_graveyard(state, "player1", vanilla("a", 1, 1))
        put_in_graveyard(state, "player1", vanilla("b", 1, 1))
        cond = EffectCondition(ConditionSubject.GRAVEYARD, ConditionOperator.GTE, 2)
        assert check_condition(state, cond, "player1")
        assert not check_condition(state, cond, "player2")

    def test_opponent_life_literal(self, state):
        """The literal 'opponentLife' compares against the opponent's life."""
        state.players["player1"].life = 10
        state.players["player2"].life = 12
        cond = EffectCondition(ConditionSubject.PLAYER_LIFE, ConditionOperator.LT, "opponentLife")
        assert check_condition(state, cond, "player1")
        assert not check_condition(state, cond, "player2")

    def test_has_branded_enemy(self, state):
        enemy = put_on_field(state, "player2", vanilla("a", 1, 1))
        cond = EffectCondition(ConditionSubject.HAS_BRANDED_ENEMY, ConditionOperator.EQ, 1)
        assert not check_condition(state, cond, "player1")
        enemy.status_effects.append(StatusEffect(StatusType.BRANDED))
        assert check_condition(state, cond, "player1")

    def test_unknown_operator_holds(self, state):
        """An operator outside the known set is vacuously true."""
        cond = EffectCondition(ConditionSubject.PLAYER_LIFE, "between", 99)
        assert check_condition(state, cond, "player1")

    def test_play_conditions(self, state):
        needs_enemy = EffectCondition(ConditionSubject.ENEMY_CREATURE_COUNT, ConditionOperator.GTE, 1)
        card = put_in_hand(state, "player1", sorcery("purge", play_conditions=[needs_enemy]))
        assert not check_play_conditions(state, card, "player1")
        put_on_field(state, "player2", vanilla("a", 1, 1))
        assert check_play_conditions(state, card, "player1")


class TestTargetPool:
    """Tests for target_pool and resolve_targets."""

    def test_enemy_pool_skips_untargetable(self, state):
        visible = put_on_field(state, "player2", vanilla("a", 1, 1))
        put_on_field(state, "player2", vanilla("b", 1, 1, keywords=[Keyword.UNTARGETABLE]))
        assert target_pool(state, EffectTarget.ENEMY_ALL, "player1") == [visible]

    def test_ally_pool_keeps_untargetable(self, state):
        """Untargetable only protects against enemy effects."""
        card = put_on_field(state, "player1", vanilla("b", 1, 1, keywords=[Keyword.UNTARGETABLE]))
        assert target_pool(state, EffectTarget.ALLY_ALL, "player1") == [card]

    def test_pool_skips_dead(self, state):
        dead = put_on_field(state, "player2", vanilla("a", 1, 1))
        dead.current_health = 0
        assert target_pool(state, EffectTarget.ENEMY_ALL, "player1") == []

    def test_player_targets_have_no_pool(self, state):
        put_on_field(state, "player2", vanilla("a", 1, 1))
        assert target_pool(state, EffectTarget.PLAYER, "player1") == []

    def test_random_picks_one(self, state):
        for i in range(4):
            put_on_field(state, "player2", vanilla(f"e{i}", 1, 1))
        picked = resolve_targets(state, EffectTarget.ENEMY_RANDOM, "player1", SeededRandom("x"))
        assert len(picked) == 1

    def test_rules_applied_before_random_pick(self, state):
        """A random pick only ever lands on a card that passes the rules."""
        for i in range(4):
            put_on_field(state, "player2", vanilla(f"big{i}", 1, 5))
        small = put_on_field(state, "player2", vanilla("small", 1, 1))
        rule = FilterRule(FilterType.HEALTH, FilterOperator.LTE, value=2)

        for seed in ("s1", "s2", "s3", "s4", "s5"):
            picked = resolve_targets(
                state, EffectTarget.ENEMY_RANDOM, "player1", SeededRandom(seed), rules=[rule]
            )
            assert picked == [small]

    def test_random_with_no_match_is_empty(self, state):
        put_on_field(state, "player2", vanilla("big", 1, 5))
        rule = FilterRule(FilterType.HEALTH, FilterOperator.LTE, value=2)
        assert resolve_targets(
            state, EffectTarget.ENEMY_RANDOM, "player1", SeededRandom("x"), rules=[rule]
        ) == []

    def test_exclude_ids(self, state):
        first = put_on_field(state, "player2", vanilla("a", 1, 1))
        second = put_on_field(state, "player2", vanilla("b", 1, 1))
        picked = resolve_targets(
            state, EffectTarget.ENEMY_ALL, "player1", SeededRandom("x"),
            exclude_ids=[first.instance_id],
        )
        assert picked == [second]


class TestSelectionRules:
    """Tests for matches_rule and apply_selection_rules."""

    def test_brand_rule(self, state):
        card = put_on_field(state, "player2", vanilla("a", 1, 1))
        has_brand = FilterRule(FilterType.BRAND, FilterOperator.HAS)
        no_brand = FilterRule(FilterType.BRAND, FilterOperator.NOT_HAS)
        assert not matches_rule(card, has_brand)
        assert matches_rule(card, no_brand)
        card.status_effects.append(StatusEffect(StatusType.BRANDED))
        assert matches_rule(card, has_brand)

    def test_cost_range(self, state):
        rule = FilterRule(FilterType.COST, FilterOperator.RANGE, min_value=2, max_value=3)
        cheap = put_in_hand(state, "player1", vanilla("cheap", 1, 1, cost=1))
        mid = put_in_hand(state, "player1", vanilla("mid", 1, 1, cost=3))
        assert not matches_rule(cheap, rule)
        assert matches_rule(mid, rule)

    def test_health_uses_current_on_field(self, state):
        card = put_on_field(state, "player2", vanilla("a", 1, 5))
        card.current_health = 2
        assert matches_rule(card, FilterRule(FilterType.HEALTH, FilterOperator.LTE, value=2))

    def test_keyword_rule(self, state):
        guard = put_on_field(state, "player2", vanilla("g", 1, 1, keywords=[Keyword.GUARD]))
        plain = put_on_field(state, "player2", vanilla("p", 1, 1))
        rule = FilterRule(FilterType.KEYWORD, FilterOperator.HAS, value=Keyword.GUARD)
        assert apply_selection_rules([guard, plain], [rule]) == [guard]

    def test_keyword_rule_accepts_string(self, state):
        guard = put_on_field(state, "player2", vanilla("g", 1, 1, keywords=[Keyword.GUARD]))
        assert matches_rule(guard, FilterRule(FilterType.KEYWORD, FilterOperator.HAS, value="guard"))

    def test_exclude_self(self, state):
        me = put_on_field(state, "player1", vanilla("me", 1, 1))
        other = put_on_field(state, "player1", vanilla("other", 1, 1))
        rule = FilterRule(FilterType.EXCLUDE_SELF)
        assert apply_selection_rules([me, other], [rule], me.instance_id) == [other]

    def test_property_rule(self, state):
        card = put_in_hand(state, "player1", vanilla("token_like", 1, 1))
        rule = FilterRule(FilterType.PROPERTY, value="Token_Like", property_name="name")
        assert matches_rule(card, rule)

    def test_faction_and_card_type(self, state):
        mage_spell = put_in_hand(state, "player1", sorcery("bolt"))
        assert matches_rule(mage_spell, FilterRule(FilterType.FACTION, value=Faction.MAGE))
        assert matches_rule(mage_spell, FilterRule(FilterType.CARD_TYPE, value="spell"))
        assert not matches_rule(mage_spell, FilterRule(FilterType.CARD_TYPE, value="creature"))

    def test_rules_combine_with_and(self, state):
        rules = [
            FilterRule(FilterType.COST, FilterOperator.GTE, value=2),
            FilterRule(FilterType.KEYWORD, FilterOperator.HAS, value=Keyword.GUARD),
        ]
        cheap_guard = put_on_field(state, "player2", vanilla("cg", 1, 1, cost=1, keywords=[Keyword.GUARD]))
        big_guard = put_on_field(state, "player2", vanilla("bg", 1, 1, cost=4, keywords=[Keyword.GUARD]))
        big_plain = put_on_field(state, "player2", vanilla("bp", 1, 1, cost=4))
        assert apply_selection_rules([cheap_guard, big_guard, big_plain], rules) == [big_guard]


class TestHasValidTargets:
    """Tests for spell target validity."""

    def _damage_spell(self, target, rules=()):
        return sorcery("bolt", effects=[CardEffect(
            EffectTrigger.ON_PLAY, target, EffectAction.DAMAGE, 2, selection_rules=tuple(rules),
        )])

    def test_enemy_spell_needs_enemy(self, state):
        card = put_in_hand(state, "player1", self._damage_spell(EffectTarget.ENEMY_RANDOM))
        assert not has_valid_targets(state, card, "player1")
        put_on_field(state, "player2", vanilla("a", 1, 1))
        assert has_valid_targets(state, card, "player1")

    def test_player_target_always_valid(self, state):
        card = put_in_hand(state, "player1", self._damage_spell(EffectTarget.PLAYER))
        assert has_valid_targets(state, card, "player1")

    def test_rules_can_empty_the_pool(self, state):
        put_on_field(state, "player2", vanilla("a", 1, 5))
        rule = FilterRule(FilterType.HEALTH, FilterOperator.LTE, value=2)
        card = put_in_hand(state, "player1", self._damage_spell(EffectTarget.ENEMY_ALL, [rule]))
        assert not has_valid_targets(state, card, "player1")

    def test_untargetable_only_enemy_is_invalid(self, state):
        put_on_field(state, "player2", vanilla("a", 1, 1, keywords=[Keyword.UNTARGETABLE]))
        card = put_in_hand(state, "player1", self._damage_spell(EffectTarget.ENEMY_RANDOM))
        assert not has_valid_targets(state, card, "player1")

    def test_no_on_play_effects_is_valid(self, state):
        card = put_in_hand(state, "player1", sorcery("blank"))
        assert has_valid_targets(state, card, "player1")

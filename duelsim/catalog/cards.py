"""
Built-in Cards - Template definitions for the five factions.

Each faction leans on a different part of the effect vocabulary:
- Necromancer: graveyard counts, resurrection, tokens
- Berserker: rush, trample, low-life conditionals
- Mage: spells, spell-play synergies, chained damage
- Knight: guard, passives, healing
- Inquisitor: brands, silence, hand and deck disruption
"""

from __future__ import annotations

from ..engine_core.cards import (
    CardEffect,
    CardTemplate,
    CardType,
    ChainOnKill,
    ConditionOperator,
    ConditionSubject,
    ConditionalEffect,
    DynamicFilter,
    DynamicSource,
    DynamicValue,
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


def _fx(trigger: EffectTrigger, target: EffectTarget, action: EffectAction, value: int = 0, **kwargs) -> CardEffect:
    return CardEffect(trigger=trigger, target=target, action=action, value=value, **kwargs)


def _cond(subject: ConditionSubject, operator: ConditionOperator, value: int | str) -> EffectCondition:
    return EffectCondition(subject=subject, operator=operator, value=value)


def creature(template_id, name, faction, cost, attack, health, keywords=(), effects=(), play_conditions=(), flavor=""):
    return CardTemplate(
        template_id=template_id,
        name=name,
        card_type=CardType.CREATURE,
        faction=faction,
        cost=cost,
        attack=attack,
        health=health,
        keywords=frozenset(keywords),
        effects=tuple(effects),
        play_conditions=tuple(play_conditions),
        flavor=flavor,
    )


def spell(template_id, name, faction, cost, effects=(), play_conditions=(), flavor=""):
    return CardTemplate(
        template_id=template_id,
        name=name,
        card_type=CardType.SPELL,
        faction=faction,
        cost=cost,
        effects=tuple(effects),
        play_conditions=tuple(play_conditions),
        flavor=flavor,
    )


T = EffectTrigger
TG = EffectTarget
A = EffectAction
S = ConditionSubject
OP = ConditionOperator

HAS_ENEMY = _cond(S.ENEMY_CREATURE_COUNT, OP.GTE, 1)
HAS_ALLY = _cond(S.ALLY_COUNT, OP.GTE, 1)
BRANDED = FilterRule(FilterType.BRAND, FilterOperator.HAS)
NOT_SELF = FilterRule(FilterType.EXCLUDE_SELF)


# ============================================================================
# Necromancer
# ============================================================================

NECRO = Faction.NECROMANCER

NECROMANCER_CARDS: list[CardTemplate] = [
    creature("necro_skeleton", "Skeleton Swordsman", NECRO, 1, 2, 1,
             flavor="Old bones, older oaths."),
    creature("necro_zombie", "Rotting Guard", NECRO, 2, 1, 3,
             effects=[_fx(T.ON_DEATH, TG.ALLY_ALL, A.BUFF_ATTACK, 1)]),
    creature("necro_wraith", "Wraith Assassin", NECRO, 3, 3, 3,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.DEBUFF_ATTACK, 1)]),
    creature("necro_necromancer", "Bone Caller", NECRO, 2, 1, 2,
             effects=[_fx(T.TURN_END, TG.SELF, A.SUMMON, 1)]),
    creature("necro_ghoul", "Scavenging Ghoul", NECRO, 1, 1, 1,
             effects=[_fx(T.ON_PLAY, TG.SELF, A.DRAW_CARD, 1)]),
    creature("necro_harvester", "Soul Harvester", NECRO, 2, 2, 2,
             effects=[_fx(T.ON_ALLY_DEATH, TG.SELF, A.BUFF_ATTACK, 1)],
             flavor="Each one that falls makes me stronger."),
    creature("necro_grave_master", "Master of the Crypt", NECRO, 4, 3, 4,
             effects=[_fx(T.ON_PLAY, TG.SELF, A.RESURRECT, 1)]),
    creature("necro_grave_giant", "Barrow Giant", NECRO, 4, 3, 5, keywords=[Keyword.GUARD],
             effects=[_fx(T.ON_PLAY, TG.SELF, A.BUFF_ATTACK, 0,
                          dynamic_value=DynamicValue(DynamicSource.GRAVEYARD, DynamicFilter.CREATURES))]),
    creature("necro_librarian", "Whispering Archivist", NECRO, 3, 2, 3,
             effects=[_fx(T.ON_PLAY, TG.SELF, A.DECK_SEARCH, 1,
                          selection_rules=(
                              FilterRule(FilterType.CARD_TYPE, value="creature"),
                              FilterRule(FilterType.COST, FilterOperator.RANGE, min_value=1, max_value=2),
                          ))]),
    spell("necro_soul_offering", "Soul Offering", NECRO, 1,
          effects=[_fx(T.ON_PLAY, TG.SELF, A.RESURRECT, 2,
                       selection_rules=(FilterRule(FilterType.COST, FilterOperator.LTE, value=2),))],
          play_conditions=[_cond(S.GRAVEYARD, OP.GTE, 2)]),
    spell("necro_soul_vortex", "Soul Vortex", NECRO, 6,
          effects=[
              _fx(T.ON_PLAY, TG.ENEMY_ALL, A.DESTROY_ALL_CREATURES),
              _fx(T.ON_PLAY, TG.SELF, A.SUMMON, 0,
                  dynamic_value=DynamicValue(DynamicSource.GRAVEYARD, DynamicFilter.CREATURES)),
          ],
          play_conditions=[_cond(S.ENEMY_CREATURE_COUNT, OP.GTE, 3)]),
]


# ============================================================================
# Berserker
# ============================================================================

BER = Faction.BERSERKER

BERSERKER_CARDS: list[CardTemplate] = [
    creature("ber_warrior", "Pit Fighter", BER, 1, 2, 1),
    creature("ber_raider", "Reckless Raider", BER, 2, 3, 1, keywords=[Keyword.RUSH]),
    creature("ber_berserker", "Blood Berserker", BER, 3, 3, 3,
             effects=[_fx(T.ON_DAMAGE_TAKEN, TG.SELF, A.BUFF_ATTACK, 1)]),
    creature("ber_fury", "Fury of the Steppe", BER, 2, 2, 2, keywords=[Keyword.TRAMPLE]),
    creature("ber_bomber", "Powder Runner", BER, 2, 1, 2,
             effects=[_fx(T.ON_DEATH, TG.ENEMY_RANDOM, A.DAMAGE, 2)]),
    creature("ber_bloodletter", "Bloodletter", BER, 3, 3, 2, keywords=[Keyword.LIFESTEAL]),
    creature("ber_twin_axe", "Twin-Axe Reaver", BER, 4, 3, 3,
             effects=[_fx(T.ON_ATTACK, TG.SELF, A.READY)],
             flavor="One swing was never enough."),
    creature("ber_desperate_berserker", "Desperate Berserker", BER, 3, 2, 4,
             effects=[_fx(T.PASSIVE, TG.SELF, A.BUFF_ATTACK, 2,
                          activation_condition=_cond(S.PLAYER_LIFE, OP.LTE, 8))]),
    creature("ber_champion", "Warlord Champion", BER, 5, 5, 4,
             keywords=[Keyword.TRAMPLE, Keyword.RETALIATE]),
    spell("ber_last_stand", "Last Stand", BER, 1,
          effects=[_fx(T.ON_PLAY, TG.ALLY_RANDOM, A.BUFF_ATTACK,
                       conditional_effect=ConditionalEffect(
                           condition=_cond(S.PLAYER_LIFE, OP.LTE, 7),
                           if_true=(_fx(T.ON_PLAY, TG.ALLY_ALL, A.BUFF_ATTACK, 2),),
                           if_false=(_fx(T.ON_PLAY, TG.ALLY_RANDOM, A.BUFF_ATTACK, 1),),
                       ))],
          play_conditions=[HAS_ALLY]),
    spell("ber_blood_awakening_spell", "Blood Awakening", BER, 2,
          effects=[
              _fx(T.ON_PLAY, TG.SELF_PLAYER, A.DAMAGE, 2),
              _fx(T.ON_PLAY, TG.ALLY_ALL, A.BUFF_ATTACK, 2),
          ],
          play_conditions=[HAS_ALLY, _cond(S.PLAYER_LIFE, OP.GT, 4)]),
]


# ============================================================================
# Mage
# ============================================================================

MAG = Faction.MAGE

MAGE_CARDS: list[CardTemplate] = [
    creature("mag_apprentice", "Eager Apprentice", MAG, 1, 1, 2,
             effects=[_fx(T.ON_SPELL_PLAY, TG.SELF, A.BUFF_ATTACK, 1)]),
    creature("mag_familiar", "Inkling Familiar", MAG, 2, 2, 2,
             effects=[_fx(T.ON_PLAY, TG.SELF, A.DRAW_CARD, 1)]),
    creature("mag_scholar", "Tower Scholar", MAG, 2, 1, 3,
             effects=[_fx(T.ON_SPELL_PLAY, TG.SELF, A.DRAW_CARD, 1)]),
    creature("mag_elementalist", "Elementalist", MAG, 3, 2, 3,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.DAMAGE, 2)]),
    creature("mag_frost_mage", "Frost Weaver", MAG, 3, 2, 3,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.STUN, 2)]),
    creature("mag_stargazer_sage", "Stargazer Sage", MAG, 4, 3, 4,
             effects=[_fx(T.ON_PLAY, TG.SELF, A.DECK_SEARCH, 1,
                          selection_rules=(FilterRule(FilterType.CARD_TYPE, value="spell"),))]),
    spell("mag_storm", "Arcane Storm", MAG, 3,
          effects=[_fx(T.ON_PLAY, TG.ENEMY_ALL, A.DAMAGE, 1)],
          play_conditions=[HAS_ENEMY]),
    spell("mag_torrent", "Mana Torrent", MAG, 2,
          effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.DAMAGE, 3)],
          play_conditions=[HAS_ENEMY]),
    spell("mag_arcane_lightning", "Arcane Lightning", MAG, 4,
          effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.DAMAGE, 4,
                       chain_on_kill=ChainOnKill(
                           action=A.DAMAGE,
                           value=2,
                           chain_on_kill=ChainOnKill(action=A.DAMAGE, value=1),
                       ))],
          play_conditions=[HAS_ENEMY],
          flavor="It never strikes only once."),
    spell("mag_reality_collapse", "Reality Collapse", MAG, 2,
          effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.SWAP_ATTACK_HEALTH)],
          play_conditions=[HAS_ENEMY]),
    spell("mag_meteor", "Meteor", MAG, 6,
          effects=[_fx(T.ON_PLAY, TG.PLAYER, A.DAMAGE, 4)]),
]


# ============================================================================
# Knight
# ============================================================================

KNI = Faction.KNIGHT

KNIGHT_CARDS: list[CardTemplate] = [
    creature("kni_squire", "Shield Squire", KNI, 1, 1, 2, keywords=[Keyword.GUARD]),
    creature("kni_crusader", "Crusader", KNI, 3, 3, 3, keywords=[Keyword.FORMATION]),
    creature("kni_chaplain", "Field Chaplain", KNI, 2, 1, 3,
             effects=[_fx(T.TURN_END, TG.ALLY_RANDOM, A.HEAL, 2)]),
    creature("kni_paladin", "Paladin", KNI, 4, 3, 4, keywords=[Keyword.GUARD],
             effects=[_fx(T.ON_PLAY, TG.ALLY_ALL, A.HEAL, 2)]),
    creature("kni_guardian", "Bastion Guardian", KNI, 3, 2, 5, keywords=[Keyword.GUARD]),
    creature("kni_templar", "Templar Captain", KNI, 3, 3, 2,
             effects=[_fx(T.PASSIVE, TG.ALLY_ALL, A.BUFF_ATTACK, 1, selection_rules=(NOT_SELF,))]),
    creature("kni_banneret", "Banneret", KNI, 5, 4, 5, keywords=[Keyword.FORMATION],
             effects=[_fx(T.PASSIVE, TG.ALLY_ALL, A.BUFF_HEALTH, 1, selection_rules=(NOT_SELF,))]),
    creature("kni_galleon", "Iron Galleon", KNI, 6, 5, 6, keywords=[Keyword.GUARD],
             effects=[_fx(T.ON_PLAY, TG.SELF, A.SUMMON, 2)]),
    spell("kni_vow_of_unity", "Vow of Unity", KNI, 2,
          effects=[_fx(T.ON_PLAY, TG.ALLY_ALL, A.BUFF_HEALTH, 1)],
          play_conditions=[_cond(S.ALLY_COUNT, OP.GTE, 2)]),
    spell("kni_sword_oath", "Oath of the Sword", KNI, 1,
          effects=[_fx(T.ON_PLAY, TG.ALLY_RANDOM, A.BUFF_ATTACK, 2)],
          play_conditions=[HAS_ALLY]),
    spell("kni_holy_light", "Holy Light", KNI, 2,
          effects=[_fx(T.ON_PLAY, TG.SELF_PLAYER, A.HEAL, 4)],
          play_conditions=[_cond(S.PLAYER_LIFE, OP.LTE, 12)]),
]


# ============================================================================
# Inquisitor
# ============================================================================

INQ = Faction.INQUISITOR

INQUISITOR_CARDS: list[CardTemplate] = [
    creature("inq_zealot", "Hooded Zealot", INQ, 1, 1, 1, keywords=[Keyword.STEALTH],
             effects=[_fx(T.ON_PLAY, TG.PLAYER, A.DESTROY_DECK_TOP, 2)]),
    creature("inq_interrogator", "Interrogator", INQ, 2, 2, 2,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.APPLY_BRAND)]),
    creature("inq_venomtongue", "Venomtongue", INQ, 2, 1, 3, keywords=[Keyword.POISON]),
    creature("inq_confessor", "Confessor", INQ, 2, 2, 2,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.DEBUFF_HEALTH, 1)]),
    creature("inq_truth_extractor", "Truth Extractor", INQ, 3, 2, 3,
             effects=[_fx(T.ON_PLAY, TG.PLAYER, A.HAND_DISCARD, 1)]),
    creature("inq_torturer", "Torturer", INQ, 3, 3, 2,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.DAMAGE, 2, selection_rules=(BRANDED,))]),
    creature("inq_purifier", "Purifier", INQ, 3, 2, 4,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_ALL, A.DEBUFF_ATTACK, 1,
                          selection_rules=(BRANDED,),
                          activation_condition=_cond(S.BRANDED_ENEMY_COUNT, OP.GTE, 1))]),
    creature("inq_executor", "Executioner", INQ, 4, 3, 3,
             effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.BANISH,
                          selection_rules=(
                              BRANDED,
                              FilterRule(FilterType.HEALTH, FilterOperator.LTE, value=3),
                          ))]),
    creature("inq_inquisitor", "Grand Inquisitor", INQ, 5, 4, 5, keywords=[Keyword.UNTARGETABLE],
             effects=[_fx(T.ON_PLAY, TG.ENEMY_ALL, A.APPLY_BRAND)]),
    spell("inq_writ_of_silence", "Writ of Silence", INQ, 2,
          effects=[_fx(T.ON_PLAY, TG.ENEMY_RANDOM, A.SILENCE)],
          play_conditions=[HAS_ENEMY]),
    spell("inq_purifying_flame", "Purifying Flame", INQ, 3,
          effects=[_fx(T.ON_PLAY, TG.ENEMY_ALL, A.DAMAGE, 2, selection_rules=(BRANDED,))],
          play_conditions=[_cond(S.HAS_BRANDED_ENEMY, OP.EQ, 1)]),
]


FACTION_CARDS: dict[Faction, list[CardTemplate]] = {
    Faction.NECROMANCER: NECROMANCER_CARDS,
    Faction.BERSERKER: BERSERKER_CARDS,
    Faction.MAGE: MAGE_CARDS,
    Faction.KNIGHT: KNIGHT_CARDS,
    Faction.INQUISITOR: INQUISITOR_CARDS,
}

ALL_CARDS: list[CardTemplate] = [t for cards in FACTION_CARDS.values() for t in cards]

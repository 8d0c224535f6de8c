"""
Sample Decks - One ready-made 20-card deck per faction.

Decks are lists of template ids; build_deck resolves them against a
registry and validates size and copy limits.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from ..engine_core.cards import Card, CardTemplate, Faction, instantiate_cards
from ..engine_core.constants import RULES
from .registry import CardRegistry


@dataclass(frozen=True)
class SampleDeck:
    deck_id: str
    name: str
    faction: Faction
    card_ids: tuple[str, ...]
    core_card_ids: tuple[str, ...] = field(default_factory=tuple)


def _pairs(*template_ids: str) -> tuple[str, ...]:
    return tuple(tid for tid in template_ids for _ in range(2))


SAMPLE_DECKS: list[SampleDeck] = [
    SampleDeck(
        deck_id="necromancer_endless_harvest",
        name="Endless Harvest",
        faction=Faction.NECROMANCER,
        core_card_ids=("necro_harvester", "necro_librarian"),
        card_ids=_pairs(
            "necro_skeleton", "necro_ghoul", "necro_zombie", "necro_necromancer",
            "necro_harvester", "necro_wraith", "necro_librarian", "necro_grave_master",
            "necro_grave_giant", "necro_soul_offering",
        ),
    ),
    SampleDeck(
        deck_id="berserker_glory_in_adversity",
        name="Glory in Adversity",
        faction=Faction.BERSERKER,
        core_card_ids=("ber_desperate_berserker", "ber_last_stand"),
        card_ids=_pairs(
            "ber_warrior", "ber_raider", "ber_fury", "ber_bomber", "ber_berserker",
            "ber_bloodletter", "ber_desperate_berserker", "ber_twin_axe",
            "ber_last_stand", "ber_blood_awakening_spell",
        ),
    ),
    SampleDeck(
        deck_id="mage_starlit_ritual",
        name="Starlit Ritual",
        faction=Faction.MAGE,
        core_card_ids=("mag_scholar", "mag_stargazer_sage"),
        card_ids=_pairs(
            "mag_apprentice", "mag_familiar", "mag_scholar", "mag_elementalist",
            "mag_frost_mage", "mag_stargazer_sage", "mag_torrent", "mag_storm",
            "mag_reality_collapse", "mag_arcane_lightning",
        ),
    ),
    SampleDeck(
        deck_id="knight_iron_phalanx",
        name="Iron Phalanx",
        faction=Faction.KNIGHT,
        core_card_ids=("kni_squire", "kni_vow_of_unity"),
        card_ids=_pairs(
            "kni_squire", "kni_sword_oath", "kni_chaplain", "kni_vow_of_unity",
            "kni_crusader", "kni_guardian", "kni_templar", "kni_paladin",
            "kni_banneret", "kni_holy_light",
        ),
    ),
    SampleDeck(
        deck_id="inquisitor_silent_court",
        name="The Silent Court",
        faction=Faction.INQUISITOR,
        core_card_ids=("inq_writ_of_silence", "inq_truth_extractor"),
        card_ids=_pairs(
            "inq_zealot", "inq_interrogator", "inq_venomtongue", "inq_confessor",
            "inq_writ_of_silence", "inq_truth_extractor", "inq_torturer",
            "inq_purifier", "inq_purifying_flame", "inq_executor",
        ),
    ),
]


def list_sample_decks() -> list[SampleDeck]:
    return list(SAMPLE_DECKS)


def get_sample_deck(key: str | Faction) -> SampleDeck:
    """
    Look up a sample deck by deck id or faction name.

    Raises KeyError if nothing matches.
    """
    value = key.value if isinstance(key, Faction) else key
    for deck in SAMPLE_DECKS:
        if deck.deck_id == value or deck.faction.value == value:
            return deck
    raise KeyError(f"Unknown deck: {value}")


def validate_deck(card_ids: Sequence[str], registry: CardRegistry) -> list[str]:
    """Problems with a deck list; empty when it is legal."""
    errors = []
    if len(card_ids) != RULES.deck_size:
        errors.append(f"Deck must contain {RULES.deck_size} cards, got {len(card_ids)}")
    for template_id, count in sorted(Counter(card_ids).items()):
        if template_id not in registry:
            errors.append(f"Unknown card: {template_id}")
        elif count > RULES.card_copy_limit:
            errors.append(f"Too many copies of {template_id}: {count} > {RULES.card_copy_limit}")
    return errors


def resolve_templates(card_ids: Sequence[str], registry: CardRegistry | None = None) -> list[CardTemplate]:
    """Template ids to templates; raises ValueError if the list is illegal."""
    registry = registry or CardRegistry.default()
    errors = validate_deck(card_ids, registry)
    if errors:
        raise ValueError("; ".join(errors))
    return [registry.get(tid) for tid in card_ids]


def build_deck(
    card_ids: Sequence[str],
    player_id: str,
    registry: CardRegistry | None = None,
) -> list[Card]:
    """Instantiate a deck list for one player with deterministic instance ids."""
    return instantiate_cards(resolve_templates(card_ids, registry), player_id)

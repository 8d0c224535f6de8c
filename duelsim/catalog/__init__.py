"""
Catalog - Built-in card templates and sample decks.
"""

from .cards import ALL_CARDS, FACTION_CARDS
from .registry import CardRegistry
from .decks import SAMPLE_DECKS, SampleDeck, build_deck, get_sample_deck, resolve_templates, validate_deck

__all__ = [
    "ALL_CARDS",
    "FACTION_CARDS",
    "CardRegistry",
    "SAMPLE_DECKS",
    "SampleDeck",
    "build_deck",
    "get_sample_deck",
    "resolve_templates",
    "validate_deck",
]

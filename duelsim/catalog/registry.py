"""
Card Registry - Lookup of immutable card templates.

The engine never mutates templates; the registry is the only supply of
them for decks, the API and the CLI.
"""

from __future__ import annotations
from typing import Iterable

from ..engine_core.cards import CardTemplate, Faction
from .cards import ALL_CARDS


class CardRegistry:
    """
    Templates keyed by template id.

    Usage:
        registry = CardRegistry.default()
        registry.get("mag_storm")
        registry.by_faction(Faction.MAGE)
    """

    def __init__(self, templates: Iterable[CardTemplate] = ()):
        self._templates: dict[str, CardTemplate] = {}
        for template in templates:
            self.register(template)

    @classmethod
    def default(cls) -> CardRegistry:
        return cls(ALL_CARDS)

    def register(self, template: CardTemplate) -> None:
        if template.template_id in self._templates:
            raise ValueError(f"Duplicate template id: {template.template_id}")
        self._templates[template.template_id] = template

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def get(self, template_id: str) -> CardTemplate:
        """Look up a template; raises KeyError for an unknown id."""
        try:
            return self._templates[template_id]
        except KeyError:
            raise KeyError(f"Unknown card: {template_id}") from None

    def find(self, template_id: str) -> CardTemplate | None:
        return self._templates.get(template_id)

    def all(self) -> list[CardTemplate]:
        return list(self._templates.values())

    def by_faction(self, faction: Faction | str) -> list[CardTemplate]:
        faction = Faction(faction)
        return [t for t in self._templates.values() if t.faction == faction]

"""
Death Sweeper - The single destruction path and the idempotent sweep.

handle_creature_death is the only way a creature dies:
1. log creature_destroyed with a snapshot of its stats
2. fire the card's own on_death effects
3. move it to its owner's graveyard
4. fire on_ally_death for the owner's remaining field, reindex positions

evaluate_pending_deaths scans both fields for cards at health <= 0 that
have no destruction record since they entered the field, and destroys
them. Running it twice in a row is a no-op the second time.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator
import logging

from .cards import EffectTrigger
from .state import PLAYER_IDS, FieldCard, move_field_to_graveyard

if TYPE_CHECKING:
    from .effect_resolver import EffectResolver
    from .state import GameState

logger = logging.getLogger(__name__)


def destruction_recorded(card: FieldCard, destroyed: dict[str, int]) -> bool:
    """Whether this field instance already has a destruction record."""
    sequence = destroyed.get(card.instance_id)
    return sequence is not None and sequence >= card.entered_sequence


def find_unrecorded_dead(state: GameState, skip: set[str] | frozenset[str] = frozenset()) -> list[FieldCard]:
    """Field cards at health <= 0 with no destruction record, player1 first."""
    destroyed = state.action_log.last_destroyed_sequences()
    pending = []
    for player_id in PLAYER_IDS:
        for card in state.players[player_id].field:
            if card.current_health > 0 or card.instance_id in skip:
                continue
            if not destruction_recorded(card, destroyed):
                pending.append(card)
    return pending


class DeathSweeper:
    """
    Destruction processing bound to an EffectResolver for trigger dispatch.

    Combat defers the deaths of its two participants until its deaths
    stage; while deferred, neither the sweep nor immediate-kill paths
    touch them.
    """

    def __init__(self, resolver: EffectResolver):
        self.resolver = resolver
        self._deferred: set[str] = set()
        self._sweeping = False

    @contextmanager
    def deferring(self, *instance_ids: str) -> Iterator[None]:
        added = [i for i in instance_ids if i not in self._deferred]
        self._deferred.update(added)
        try:
            yield
        finally:
            self._deferred.difference_update(added)

    def is_deferred(self, instance_id: str) -> bool:
        return instance_id in self._deferred

    def destroy_if_dead(
        self,
        state: GameState,
        card: FieldCard,
        source: str = "effect",
        source_card_id: str | None = None,
    ) -> bool:
        """Immediate destruction after direct damage, unless deferred."""
        if card.current_health > 0 or self.is_deferred(card.instance_id):
            return False
        return self.handle_creature_death(state, card, source, source_card_id)

    def handle_creature_death(
        self,
        state: GameState,
        card: FieldCard,
        source: str = "effect",
        source_card_id: str | None = None,
    ) -> bool:
        """
        Destroy a field card. No-op (False) if it is no longer on its field.
        """
        owner = state.players[card.owner]
        if owner.find_field_card(card.instance_id) is not card:
            return False

        state.action_log.add_creature_destroyed(
            card.owner,
            destroyed_card_id=card.instance_id,
            source=source,
            source_card_id=source_card_id,
            snapshot=card.snapshot(),
        )
        logger.debug("Creature %s destroyed (%s)", card.instance_id, source)

        self.resolver.process_effect_trigger(
            state, EffectTrigger.ON_DEATH, card, card.owner, card
        )

        # on_death effects may already have moved it (e.g. banish)
        if move_field_to_graveyard(owner, card.instance_id) is None:
            return True

        self.resolver.process_effect_trigger(
            state, EffectTrigger.ON_ALLY_DEATH, None, card.owner, card
        )
        return True

    def evaluate_pending_deaths(
        self,
        state: GameState,
        origin: str = "system",
        source_card_id: str | None = None,
    ) -> list[str]:
        """
        Destroy every unrecorded dead card until none remain.

        Returns the instance ids destroyed by this call. A call made while
        a sweep is already running returns [] at once; the running sweep
        picks up the cascade under its own origin.
        """
        if self._sweeping:
            return []
        destroyed: list[str] = []
        self._sweeping = True
        try:
            while True:
                pending = find_unrecorded_dead(state, skip=self._deferred)
                if not pending:
                    break
                progressed = False
                for card in pending:
                    if self.handle_creature_death(state, card, origin, source_card_id or origin):
                        destroyed.append(card.instance_id)
                        progressed = True
                if not progressed:
                    break
        finally:
            self._sweeping = False
        return destroyed

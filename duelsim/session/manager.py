"""
Match Manager - Creates and tracks in-memory matches.

A match is one seeded game plus the loop that steps it. Matches live
only in memory and are dropped when ended; nothing is persisted, since
any game can be rebuilt from its decks and seed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence, TYPE_CHECKING
import logging
import time
import uuid

from ..engine_core.engine import GameEngine, create_initial_game_state
from .game_loop import GameLoop, StepResult

if TYPE_CHECKING:
    from ..bots.policy import AIPolicy
    from ..engine_core.cards import Card, CardTemplate, Faction, TacticsType
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class MatchStatus(Enum):
    """State of a match."""
    ACTIVE = "active"
    FINISHED = "finished"
    ABANDONED = "abandoned"


@dataclass
class Match:
    """
    One simulated game and its step driver.

    metadata carries whatever the creator wants echoed back (deck ids,
    tactics) and is never read by the engine.
    """
    match_id: str
    state: GameState
    loop: GameLoop
    created_at: float
    status: MatchStatus = MatchStatus.ACTIVE
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return self.status == MatchStatus.ACTIVE and self.state.result is None

    def step(self) -> StepResult:
        result = self.loop.step()
        if result.is_over:
            self.status = MatchStatus.FINISHED
        return result

    def run_to_completion(self) -> GameState:
        self.loop.run_to_completion()
        self.status = MatchStatus.FINISHED
        return self.state


class MatchManager:
    """
    Manages matches.

    Usage:
        manager = MatchManager()
        match = manager.create_match(deck1, deck2, ...)
        match.step()
        manager.end_match(match.match_id)
    """

    def __init__(self, engine_factory: Callable[[], GameEngine] | None = None):
        self._matches: dict[str, Match] = {}
        self._engine_factory = engine_factory or GameEngine

    def __len__(self) -> int:
        return len(self._matches)

    def create_match(
        self,
        player1_deck: Sequence[Card | CardTemplate],
        player2_deck: Sequence[Card | CardTemplate],
        player1_faction: Faction,
        player2_faction: Faction,
        player1_tactics: TacticsType,
        player2_tactics: TacticsType,
        random_seed: str,
        policy: AIPolicy | None = None,
        step_combat: bool = True,
        metadata: dict[str, Any] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> Match:
        """
        Create a new match.

        The match id doubles as the game id.
        """
        match_id = str(uuid.uuid4())
        state = create_initial_game_state(
            match_id,
            player1_deck,
            player2_deck,
            player1_faction,
            player2_faction,
            player1_tactics,
            player2_tactics,
            random_seed,
            clock=clock,
        )
        engine = GameEngine(policy=policy) if policy is not None else self._engine_factory()
        match = Match(
            match_id=match_id,
            state=state,
            loop=GameLoop(state, engine, step_combat=step_combat),
            created_at=time.time(),
            metadata=dict(metadata or {}),
        )
        self._matches[match_id] = match
        logger.info("Match %s created", match_id)
        return match

    def get_match(self, match_id: str) -> Match | None:
        """Get a match by ID."""
        return self._matches.get(match_id)

    def end_match(self, match_id: str) -> bool:
        """
        Drop a match from memory.

        A match that has not finished is marked abandoned. Returns False
        if no such match exists.
        """
        match = self._matches.pop(match_id, None)
        if match is None:
            return False
        match.loop.close()
        if match.status == MatchStatus.ACTIVE:
            match.status = MatchStatus.ABANDONED
        logger.info("Match %s ended (%s)", match_id, match.status.value)
        return True

    def list_matches(self) -> list[str]:
        return list(self._matches)

    def list_active_matches(self) -> list[str]:
        """List IDs of matches still in progress."""
        return [mid for mid, match in self._matches.items() if match.is_active()]

    def cleanup_stale_matches(self, max_age_seconds: int = 3600) -> int:
        """Drop finished matches older than max_age; returns how many."""
        now = time.time()
        stale = [
            mid for mid, match in self._matches.items()
            if now - match.created_at > max_age_seconds and not match.is_active()
        ]
        for mid in stale:
            self.end_match(mid)
        return len(stale)

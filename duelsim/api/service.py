"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Resolves deck ids and card lists into templates
2. Runs full games and manages steppable matches
3. Formats engine objects as response models

This layer is framework-agnostic; lookup failures surface as KeyError
or ValueError and the app maps them to error codes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence
import logging
import uuid

from .schemas import (
    # Requests
    GameSetup,
    SimulateRequest,
    CreateMatchRequest,
    # Responses
    CardListResponse,
    DeckListResponse,
    SimulateResponse,
    MatchResponse,
    StepResponse,
    ErrorResponse,
    # Shared
    ActionInfo,
    CardInfo,
    DeckInfo,
    FieldCardInfo,
    GameResultInfo,
    PlayerInfo,
    StatusInfo,
    # Enums
    ErrorCode,
    MatchStatusValue,
)
from ..catalog import CardRegistry, get_sample_deck, resolve_templates
from ..catalog.decks import list_sample_decks
from ..engine_core.action import GameAction
from ..engine_core.cards import CardTemplate, Faction
from ..engine_core.engine import GameEngine, execute_full_game
from ..engine_core.state import FieldCard, GameResult, GameState, PlayerState
from ..session import Match, MatchManager

logger = logging.getLogger(__name__)


@dataclass
class SimulationService:
    """
    Main API service.

    Usage:
        service = SimulationService()

        # One-shot game
        response = service.simulate(SimulateRequest(deck1="mage", deck2="knight", seed="s"))

        # Steppable match
        match = service.create_match(CreateMatchRequest(deck1="mage", deck2="knight", seed="s"))
        step = service.step_match(match.match_id)
    """
    registry: CardRegistry = field(default_factory=CardRegistry.default)
    match_manager: MatchManager = field(default_factory=MatchManager)

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_cards(self, faction: Faction | None = None) -> CardListResponse:
        templates = self.registry.by_faction(faction) if faction else self.registry.all()
        cards = [self._card_info(t) for t in templates]
        return CardListResponse(cards=cards, count=len(cards))

    def list_decks(self) -> DeckListResponse:
        decks = [
            DeckInfo(
                deck_id=deck.deck_id,
                name=deck.name,
                faction=deck.faction.value,
                card_ids=list(deck.card_ids),
                core_card_ids=list(deck.core_card_ids),
            )
            for deck in list_sample_decks()
        ]
        return DeckListResponse(decks=decks, count=len(decks))

    # =========================================================================
    # Games
    # =========================================================================

    def simulate(self, request: SimulateRequest) -> SimulateResponse:
        """
        Run one full game to a result.

        Raises KeyError for an unknown deck and ValueError for an
        illegal deck list.
        """
        deck1, faction1 = self._resolve_side(request.deck1, request.cards1, request.faction1, "player1")
        deck2, faction2 = self._resolve_side(request.deck2, request.cards2, request.faction2, "player2")

        game_id = str(uuid.uuid4())
        state = execute_full_game(
            game_id,
            deck1,
            deck2,
            faction1,
            faction2,
            request.tactics1,
            request.tactics2,
            request.seed,
            engine=GameEngine(),
        )
        logger.info("Simulated game %s (seed=%s)", game_id, request.seed)

        return SimulateResponse(
            game_id=game_id,
            seed=request.seed,
            result=self._result_info(state.result),
            players=self._players(state),
            action_count=len(state.action_log),
            actions=self._actions(state.action_log) if request.include_log else None,
        )

    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        deck1, faction1 = self._resolve_side(request.deck1, request.cards1, request.faction1, "player1")
        deck2, faction2 = self._resolve_side(request.deck2, request.cards2, request.faction2, "player2")

        match = self.match_manager.create_match(
            deck1,
            deck2,
            faction1,
            faction2,
            request.tactics1,
            request.tactics2,
            request.seed,
            step_combat=request.step_combat,
            metadata={"seed": request.seed},
        )
        return self._match_response(match)

    def get_match(self, match_id: str) -> MatchResponse | ErrorResponse:
        match = self.match_manager.get_match(match_id)
        if match is None:
            return self._not_found(match_id)
        return self._match_response(match)

    def step_match(self, match_id: str) -> StepResponse | ErrorResponse:
        """Advance a match by one step."""
        match = self.match_manager.get_match(match_id)
        if match is None:
            return self._not_found(match_id)

        step = match.step()
        return StepResponse(
            match_id=match_id,
            status=MatchStatusValue(match.status.value),
            loop_state=step.loop_state.value,
            phase=step.phase.value,
            turn_number=step.turn_number,
            current_player=step.current_player,
            phase_completed=step.phase_completed,
            actions=self._actions(step.actions),
            result=self._result_info(match.state.result),
        )

    def end_match(self, match_id: str) -> bool:
        return self.match_manager.end_match(match_id)

    def list_matches(self) -> list[str]:
        return self.match_manager.list_matches()

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _resolve_side(
        self,
        deck_key: str | None,
        card_ids: Sequence[str] | None,
        faction: Faction | None,
        player_id: str,
    ) -> tuple[list[CardTemplate], Faction]:
        """Templates and faction for one side of a GameSetup."""
        if card_ids:
            templates = resolve_templates(card_ids, self.registry)
            return templates, faction or templates[0].faction
        if deck_key:
            deck = get_sample_deck(deck_key)
            return resolve_templates(deck.card_ids, self.registry), faction or deck.faction
        raise ValueError(f"No deck given for {player_id}")

    @staticmethod
    def _not_found(match_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Match not found: {match_id}",
            error_code=ErrorCode.MATCH_NOT_FOUND,
        )

    def _match_response(self, match: Match) -> MatchResponse:
        state = match.state
        return MatchResponse(
            match_id=match.match_id,
            status=MatchStatusValue(match.status.value),
            turn_number=state.turn_number,
            phase=state.phase.value,
            current_player=state.current_player,
            players=self._players(state),
            action_count=len(state.action_log),
            result=self._result_info(state.result),
            created_at=match.created_at,
        )

    @staticmethod
    def _card_info(template: CardTemplate) -> CardInfo:
        return CardInfo(
            template_id=template.template_id,
            name=template.name,
            card_type=template.card_type.value,
            faction=template.faction.value,
            cost=template.cost,
            attack=template.attack,
            health=template.health,
            keywords=sorted(k.value for k in template.keywords),
            effect_count=len(template.effects),
            flavor=template.flavor,
        )

    def _players(self, state: GameState) -> list[PlayerInfo]:
        return [self._player_info(state.players[pid]) for pid in ("player1", "player2")]

    def _player_info(self, player: PlayerState) -> PlayerInfo:
        return PlayerInfo(
            player_id=player.player_id,
            faction=player.faction.value,
            tactics=player.tactics.value,
            life=player.life,
            energy=player.energy,
            max_energy=player.max_energy,
            hand_size=len(player.hand),
            deck_size=len(player.deck),
            graveyard_size=len(player.graveyard),
            banished_size=len(player.banished),
            field=[self._field_card_info(c) for c in player.field],
        )

    @staticmethod
    def _field_card_info(card: FieldCard) -> FieldCardInfo:
        return FieldCardInfo(
            instance_id=card.instance_id,
            template_id=card.template_id,
            name=card.name,
            position=card.position,
            attack=card.total_attack,
            health=card.current_health,
            max_health=card.max_health,
            keywords=sorted(k.value for k in card.keywords),
            statuses=[StatusInfo(**s.to_dict()) for s in card.status_effects],
            has_attacked=card.has_attacked,
            is_silenced=card.is_silenced,
        )

    @staticmethod
    def _actions(actions: Sequence[GameAction]) -> list[ActionInfo]:
        return [ActionInfo(**a.to_dict()) for a in actions]

    @staticmethod
    def _result_info(result: GameResult | None) -> GameResultInfo | None:
        if result is None:
            return None
        return GameResultInfo(
            winner=result.winner,
            reason=result.reason.value,
            total_turns=result.total_turns,
            duration_seconds=result.duration_seconds,
        )

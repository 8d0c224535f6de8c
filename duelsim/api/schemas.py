"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the simulator.
Enum-valued fields reuse the engine enums so invalid factions or
tactics are rejected at validation time.

Error Codes:
- UNKNOWN_DECK: Sample deck id or faction not found
- UNKNOWN_CARD: A deck list names a card template that does not exist
- MATCH_NOT_FOUND: Match does not exist or has been ended
- VALIDATION_ERROR: Request is well-formed but not playable (deck size, copies)
- INTERNAL_ERROR: Unexpected failure while simulating
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.cards import Faction, TacticsType


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    UNKNOWN_DECK = "UNKNOWN_DECK"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MatchStatusValue(str, Enum):
    """Match status values."""
    ACTIVE = "active"
    FINISHED = "finished"
    ABANDONED = "abandoned"


# =============================================================================
# Catalog models
# =============================================================================

class CardInfo(BaseModel):
    """A card template."""
    template_id: str
    name: str
    card_type: str = Field(description="creature or spell")
    faction: str
    cost: int
    attack: int = 0
    health: int = 0
    keywords: list[str] = Field(default_factory=list)
    effect_count: int = 0
    flavor: str = ""

    model_config = {"from_attributes": True}


class CardListResponse(BaseModel):
    """Response listing card templates."""
    cards: list[CardInfo]
    count: int


class DeckInfo(BaseModel):
    """A built-in sample deck."""
    deck_id: str
    name: str
    faction: str
    card_ids: list[str]
    core_card_ids: list[str] = Field(default_factory=list)


class DeckListResponse(BaseModel):
    """Response listing sample decks."""
    decks: list[DeckInfo]
    count: int


# =============================================================================
# Game state models
# =============================================================================

class StatusInfo(BaseModel):
    """A status effect on a creature."""
    type: str
    duration: Optional[int] = None
    damage: Optional[int] = None


class FieldCardInfo(BaseModel):
    """A creature on a field."""
    instance_id: str
    template_id: str
    name: str
    position: int
    attack: int
    health: int
    max_health: int
    keywords: list[str] = Field(default_factory=list)
    statuses: list[StatusInfo] = Field(default_factory=list)
    has_attacked: bool = False
    is_silenced: bool = False


class PlayerInfo(BaseModel):
    """One side of the table; hidden zones are reported as counts."""
    player_id: str
    faction: str
    tactics: str
    life: int
    energy: int
    max_energy: int
    hand_size: int
    deck_size: int
    graveyard_size: int
    banished_size: int
    field: list[FieldCardInfo] = Field(default_factory=list)


class ActionInfo(BaseModel):
    """One action log record."""
    sequence: int
    player_id: str
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: float = 0.0


class GameResultInfo(BaseModel):
    """Terminal result of a game."""
    winner: Optional[str] = Field(None, description="player1, player2, or null for a draw")
    reason: str = Field(description="life_zero or timeout")
    total_turns: int
    duration_seconds: float = 0.0


# =============================================================================
# Requests
# =============================================================================

class GameSetup(BaseModel):
    """
    Two sides of a game.

    Each side is either a sample deck (by id or faction name) or an
    explicit list of template ids. Faction defaults to the deck's.
    """
    deck1: Optional[str] = Field(None, description="Sample deck id or faction for player1")
    deck2: Optional[str] = Field(None, description="Sample deck id or faction for player2")
    cards1: Optional[list[str]] = Field(None, description="Template ids for player1")
    cards2: Optional[list[str]] = Field(None, description="Template ids for player2")
    faction1: Optional[Faction] = None
    faction2: Optional[Faction] = None
    tactics1: TacticsType = TacticsType.BALANCED
    tactics2: TacticsType = TacticsType.BALANCED
    seed: str = Field(..., min_length=1, description="Game seed; same seed and decks replay identically")


class SimulateRequest(GameSetup):
    """Run one full game."""
    include_log: bool = Field(False, description="Return the full action log")


class CreateMatchRequest(GameSetup):
    """Create a steppable match."""
    step_combat: bool = Field(True, description="Step battles one record at a time")


# =============================================================================
# Responses
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SimulateResponse(BaseModel):
    """Result of a full simulated game."""
    game_id: str
    seed: str
    result: GameResultInfo
    players: list[PlayerInfo]
    action_count: int
    actions: Optional[list[ActionInfo]] = None
    api_version: str = "v1"


class MatchResponse(BaseModel):
    """Current state of a match."""
    match_id: str
    status: MatchStatusValue
    turn_number: int
    phase: str
    current_player: str
    players: list[PlayerInfo]
    action_count: int
    result: Optional[GameResultInfo] = None
    created_at: float
    api_version: str = "v1"


class StepResponse(BaseModel):
    """Records produced by one step of a match."""
    match_id: str
    status: MatchStatusValue
    loop_state: str = Field(description="ready, in_battle or game_over")
    phase: str
    turn_number: int
    current_player: str
    phase_completed: bool
    actions: list[ActionInfo] = Field(default_factory=list)
    result: Optional[GameResultInfo] = None
    api_version: str = "v1"


class MatchListResponse(BaseModel):
    """Response listing matches."""
    matches: list[str]
    count: int


class EndMatchResponse(BaseModel):
    """Response after ending a match."""
    success: bool
    match_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str

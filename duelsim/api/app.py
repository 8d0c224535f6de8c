"""
FastAPI Application - REST API for the simulator.

Endpoints:
    GET    /api/v1/cards                 List card templates (optional faction filter)
    GET    /api/v1/decks                 List sample decks
    POST   /api/v1/simulate              Run one full game
    POST   /api/v1/matches               Create a steppable match
    GET    /api/v1/matches               List matches
    GET    /api/v1/matches/{id}          Get match state
    POST   /api/v1/matches/{id}/step     Advance a match by one step
    DELETE /api/v1/matches/{id}          End a match

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging

from .. import __version__
from ..config import get_settings

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional SimulationService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Query
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from ..engine_core.cards import Faction
    from .service import SimulationService
    from .schemas import (
        # Request models
        SimulateRequest,
        CreateMatchRequest,
        # Response models
        CardListResponse,
        DeckListResponse,
        SimulateResponse,
        MatchResponse,
        StepResponse,
        MatchListResponse,
        EndMatchResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    settings = get_settings()

    app = FastAPI(
        title="Duelsim API",
        description="""
Deterministic two-player card battle simulator.

A game is a pure function of its two decks, tactics and seed: the same
request always produces the same action log.

## Error Codes

| Code | Description |
|------|-------------|
| `UNKNOWN_DECK` | Sample deck id or faction not found |
| `UNKNOWN_CARD` | Deck list names an unknown card template |
| `MATCH_NOT_FOUND` | Match does not exist |
| `VALIDATION_ERROR` | Deck list is not playable |
| `INTERNAL_ERROR` | Unexpected simulation failure |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or SimulationService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def setup_error_response(error: Exception) -> JSONResponse:
        """Map a deck resolution failure to an error response."""
        message = error.args[0] if error.args else str(error)
        if isinstance(error, KeyError):
            return make_error_response(ErrorCode.UNKNOWN_DECK, message, status_code=404)
        if "Unknown card" in message:
            return make_error_response(ErrorCode.UNKNOWN_CARD, message)
        return make_error_response(ErrorCode.VALIDATION_ERROR, message)

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/cards",
        response_model=CardListResponse,
        tags=["Catalog"],
        summary="List card templates",
    )
    async def list_cards(
        faction: Optional[Faction] = Query(None, description="Only cards of this faction"),
    ) -> CardListResponse:
        """List built-in card templates, optionally filtered by faction."""
        return api_service.list_cards(faction)

    @app.get(
        "/api/v1/decks",
        response_model=DeckListResponse,
        tags=["Catalog"],
        summary="List sample decks",
    )
    async def list_decks() -> DeckListResponse:
        """List the built-in 20-card sample decks."""
        return api_service.list_decks()

    # =========================================================================
    # Simulation Endpoint
    # =========================================================================

    @app.post(
        "/api/v1/simulate",
        response_model=SimulateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Illegal deck"},
            404: {"model": ErrorResponse, "description": "Unknown deck"},
            500: {"model": ErrorResponse, "description": "Simulation failed"},
        },
        tags=["Simulation"],
        summary="Run one full game",
    )
    async def simulate(request: SimulateRequest) -> Union[SimulateResponse, JSONResponse]:
        """
        Run a game from setup to result.

        Set `include_log=true` to receive every action record.
        """
        try:
            return api_service.simulate(request)
        except (KeyError, ValueError) as e:
            return setup_error_response(e)
        except Exception as e:
            logger.error("Simulation failed (seed=%s)", request.seed, exc_info=True)
            return make_error_response(ErrorCode.INTERNAL_ERROR, str(e), status_code=500)

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Illegal deck"},
            404: {"model": ErrorResponse, "description": "Unknown deck"},
        },
        tags=["Matches"],
        summary="Create a steppable match",
    )
    async def create_match(request: CreateMatchRequest) -> Union[MatchResponse, JSONResponse]:
        """Create a match that is advanced with `POST /matches/{id}/step`."""
        try:
            return api_service.create_match(request)
        except (KeyError, ValueError) as e:
            return setup_error_response(e)

    @app.get(
        "/api/v1/matches",
        response_model=MatchListResponse,
        tags=["Matches"],
        summary="List matches",
    )
    async def list_matches() -> MatchListResponse:
        matches = api_service.list_matches()
        return MatchListResponse(matches=matches, count=len(matches))

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get match state",
    )
    async def get_match(match_id: str) -> Union[MatchResponse, JSONResponse]:
        """Get the current state of a match."""
        response = api_service.get_match(match_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.post(
        "/api/v1/matches/{match_id}/step",
        response_model=StepResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Advance a match by one step",
    )
    async def step_match(match_id: str) -> Union[StepResponse, JSONResponse]:
        """
        Advance one phase, or one combat record while a battle is in progress.

        Stepping a finished match returns its result with no new actions.
        """
        response = api_service.step_match(match_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=EndMatchResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="End a match",
    )
    async def end_match(match_id: str) -> Union[EndMatchResponse, JSONResponse]:
        """End a match and release it."""
        if not api_service.end_match(match_id):
            return make_error_response(
                ErrorCode.MATCH_NOT_FOUND, f"Match not found: {match_id}", status_code=404
            )
        return EndMatchResponse(success=True, match_id=match_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="duelsim",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Duelsim API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app

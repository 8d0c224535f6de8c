"""
API Module - HTTP interface to the simulator.

Clients can:
1. Browse the card catalog and sample decks
2. Run a full seeded game in one request
3. Create a match and step through it phase by phase

Matches are in-memory only.
"""

from .schemas import (
    # Requests
    SimulateRequest,
    CreateMatchRequest,
    # Responses
    SimulateResponse,
    MatchResponse,
    StepResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from .service import SimulationService
from .app import create_app

__all__ = [
    "SimulateRequest",
    "CreateMatchRequest",
    "SimulateResponse",
    "MatchResponse",
    "StepResponse",
    "ErrorResponse",
    "HealthResponse",
    "ErrorCode",
    "SimulationService",
    "create_app",
]

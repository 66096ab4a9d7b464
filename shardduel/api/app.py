"""
FastAPI Application - REST API for the card duel.

Endpoints:
    GET    /api/v1/health                  Health check
    POST   /api/v1/matches                 Start a match
    GET    /api/v1/matches                 List matches
    GET    /api/v1/matches/{id}            Get match snapshot
    DELETE /api/v1/matches/{id}            End match
    POST   /api/v1/matches/{id}/actions    Apply an action
    GET    /api/v1/cards                   Card catalog

Turn Flow:
    1. POST /actions {"action": "draw"} reveals the active card
    2. play / stash / discard resolves it
    3. finish_turn runs the AI turn and scores the level in one step
    4. Between some levels the phase is "merchant": accept_offer or
       skip_merchant to continue

All bodies are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging
import os

from .. import __version__

# Environment configuration
SHARDDUEL_ENV = os.getenv("SHARDDUEL_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateMatchRequest,
        ActionRequest,
        # Response models
        GameStateResponse,
        ActionResponse,
        ErrorResponse,
        MatchListResponse,
        EndMatchResponse,
        CardListResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Shard Duel API",
        description="""
Deterministic card duel against a scripted AI.

## Error Codes

| Code | HTTP | Description |
|------|------|-------------|
| `invalidPhase` | 409 | Action not allowed in the current phase |
| `maxDrawsReached` | 409 | No draws left this level |
| `emptyDeck` | 409 | The deck is empty |
| `noHoldCard` | 409 | Hold slot or backpack slot is empty |
| `merchantUnavailable` | 409 | No merchant, no such offer, or not affordable |
| `MATCH_NOT_FOUND` | 404 | Match does not exist |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService()
    logger.debug("Created app (env=%s)", SHARDDUEL_ENV)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Map a service error to its HTTP status."""
        status_code = 404 if error.error_code == ErrorCode.MATCH_NOT_FOUND else 409
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=GameStateResponse,
        status_code=201,
        tags=["Matches"],
        summary="Start a new match",
    )
    async def create_match(request: Optional[CreateMatchRequest] = None) -> GameStateResponse:
        """
        Start a new match.

        Pass a `seed` to get a reproducible match.
        """
        return api_service.create_match(request or CreateMatchRequest())

    @app.get(
        "/api/v1/matches",
        response_model=MatchListResponse,
        tags=["Matches"],
        summary="List matches",
    )
    async def list_matches() -> MatchListResponse:
        """List all match IDs, finished ones included."""
        return api_service.list_matches()

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get match snapshot",
    )
    async def get_match(match_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the current snapshot of a match."""
        response = api_service.get_match(match_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=EndMatchResponse,
        tags=["Matches"],
        summary="End a match",
    )
    async def end_match(
        match_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndMatchResponse:
        """End a match and release its state."""
        success = api_service.end_match(match_id, reason)
        return EndMatchResponse(success=success, match_id=match_id)

    @app.post(
        "/api/v1/matches/{match_id}/actions",
        response_model=ActionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Unknown match"},
            409: {"model": ErrorResponse, "description": "Action rejected by the rules"},
        },
        tags=["Matches"],
        summary="Apply an action",
    )
    async def apply_action(
        match_id: str,
        request: ActionRequest,
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Apply one action.

        `index` is required for `accept_offer` and `unpack_backpack`.
        """
        response = api_service.apply_action(match_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Catalog
    # =========================================================================

    @app.get(
        "/api/v1/cards",
        response_model=CardListResponse,
        tags=["Cards"],
        summary="List card definitions",
    )
    async def list_cards(
        level: Annotated[Optional[int], Query(ge=1, description="Only cards available at this level")] = None,
    ) -> CardListResponse:
        """The card catalog, merchant exclusives included."""
        return api_service.list_cards(level)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="shardduel-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Shard Duel API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn shardduel.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass

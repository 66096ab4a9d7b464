"""
API Module - HTTP interface.

Exposes the engine via REST API. A client:
1. Starts a match (optionally with a seed)
2. Submits actions and renders the returned snapshot
3. Ends the match when done

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateMatchRequest,
    ActionRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    ErrorResponse,
    MatchListResponse,
    EndMatchResponse,
    CardListResponse,
    HealthResponse,
    # Shared
    PlayerInfo,
    CardInfo,
    DeckInfo,
    MerchantOfferInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateMatchRequest",
    "ActionRequest",
    # Responses
    "GameStateResponse",
    "ActionResponse",
    "ErrorResponse",
    "MatchListResponse",
    "EndMatchResponse",
    "CardListResponse",
    "HealthResponse",
    # Shared
    "PlayerInfo",
    "CardInfo",
    "DeckInfo",
    "MerchantOfferInfo",
    # Service
    "APIService",
    "create_app",
]

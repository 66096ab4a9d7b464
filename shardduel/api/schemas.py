"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- invalidPhase / maxDrawsReached / emptyDeck / noHoldCard /
  merchantUnavailable: the engine rejected the action (HTTP 409)
- MATCH_NOT_FOUND: Match does not exist or has been ended (HTTP 404)
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class MatchStatus(str, Enum):
    """Match status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"


class ActionName(str, Enum):
    """Actions a client may submit. Values match the engine's ActionType."""
    DRAW = "draw"
    PLAY = "play"
    STASH = "stash"
    DISCARD = "discard"
    RELEASE = "release"
    DISCARD_HOLD = "discard_hold"
    UNPACK_BACKPACK = "unpack_backpack"
    FINISH_TURN = "finish_turn"
    ACCEPT_OFFER = "accept_offer"
    SKIP_MERCHANT = "skip_merchant"


class ErrorCode(str, Enum):
    """Structured error codes. Engine rule violations keep their engine names."""
    INVALID_PHASE = "invalidPhase"
    MAX_DRAWS_REACHED = "maxDrawsReached"
    EMPTY_DECK = "emptyDeck"
    NO_HOLD_CARD = "noHoldCard"
    MERCHANT_UNAVAILABLE = "merchantUnavailable"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardEffectInfo(BaseModel):
    """A card's effect as resolved on the instance."""
    effect_type: str
    value: Optional[float] = None
    extra_draws: int = 0


class CardInfo(BaseModel):
    """A card instance for display."""
    instance_id: str
    definition_id: str
    name: str
    rarity: str
    description: str = ""
    effect: CardEffectInfo


class CatalogCardInfo(BaseModel):
    """A card definition from the catalog."""
    id: str
    name: str
    description: str = ""
    rarity: str
    level_min: int
    level_max: int
    base_weight: float
    max_copies: Optional[int] = None
    effect_type: str
    value: Optional[float] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    extra_draws: int = 0
    merchant_only: bool = False


class PassTokenInfo(BaseModel):
    level: int
    threshold: float


class BuffInfo(BaseModel):
    """A permanent buff; `kind` is the id of the card that granted it."""
    kind: str
    name: str
    stacks: float


class PlayerInfo(BaseModel):
    """One side of the duel."""
    label: str
    is_ai: bool
    score: float
    draws_used: int
    max_draws: int
    extra_draws: int
    draws_remaining: int
    hold_card: Optional[CardInfo] = None
    backpack: list[CardInfo] = Field(default_factory=list)
    victory_shards: int = 0
    wins: int = 0
    shields: int = 0
    pass_tokens: list[PassTokenInfo] = Field(default_factory=list)
    merchant_tokens: int = 0
    buffs: list[BuffInfo] = Field(default_factory=list)


class DeckInfo(BaseModel):
    """Public view of the shared deck. Card order is never exposed."""
    remaining: int
    discarded: int
    original_size: int
    carried_over: int = 0
    remaining_rare: int
    remaining_shards: int


class MerchantOfferInfo(BaseModel):
    index: int
    card: CardInfo
    cost_type: str
    cost_value: int
    cost_description: str
    affordable: bool


class LegalActionInfo(BaseModel):
    """An action that would succeed if submitted now."""
    action: ActionName
    index: Optional[int] = None


# =============================================================================
# Requests
# =============================================================================

class CreateMatchRequest(BaseModel):
    """Request to start a match."""
    seed: Optional[int] = Field(
        None, ge=0, description="Match seed; the same seed replays the same match"
    )


class ActionRequest(BaseModel):
    """Request to apply one action to a match."""
    action: ActionName
    index: Optional[int] = Field(
        None, ge=0, description="Offer index for accept_offer, backpack slot for unpack_backpack"
    )


# =============================================================================
# Responses
# =============================================================================

class GameStateResponse(BaseModel):
    """Full snapshot of a match."""
    match_id: str
    status: MatchStatus
    seed: int
    phase: str
    level: int
    level_name: str
    total_levels: int
    player: PlayerInfo
    ai: PlayerInfo
    deck: DeckInfo
    active_card: Optional[CardInfo] = None
    merchant_offers: list[MerchantOfferInfo] = Field(default_factory=list)
    legal_actions: list[LegalActionInfo] = Field(default_factory=list)
    winner: Optional[str] = None
    log: list[str] = Field(default_factory=list)

    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Result of a successful action."""
    success: bool = True
    messages: list[str] = Field(default_factory=list, description="Log lines added by this action")
    game_state: GameStateResponse


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class MatchListResponse(BaseModel):
    """Response listing matches."""
    matches: list[str]
    count: int


class EndMatchResponse(BaseModel):
    """Response after ending a match."""
    success: bool
    match_id: str


class CardListResponse(BaseModel):
    """Catalog listing."""
    cards: list[CatalogCardInfo]
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str

"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Formats snapshots for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Methods return either the response model or an ErrorResponse; they never
raise for a rule violation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateMatchRequest,
    ActionRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    ErrorResponse,
    MatchListResponse,
    CardListResponse,
    # Shared
    CardInfo,
    CardEffectInfo,
    CatalogCardInfo,
    PlayerInfo,
    PassTokenInfo,
    BuffInfo,
    DeckInfo,
    MerchantOfferInfo,
    LegalActionInfo,
    # Enums
    ActionName,
    ErrorCode,
    MatchStatus,
)
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.merchant import can_afford
from ..engine_core.state import CardInstance, PlayerState
from ..games.duel.cards import CARD_LIBRARY, MERCHANT_EXCLUSIVE, CardDefinition, MERCHANT_ONLY_TAG
from ..games.duel.levels import get_level_config
from ..session import SessionManager, Session

logger = logging.getLogger(__name__)


def card_to_info(card: CardInstance) -> CardInfo:
    return CardInfo(
        instance_id=card.instance_id,
        definition_id=card.definition_id,
        name=card.name,
        rarity=card.rarity.value,
        description=card.description,
        effect=CardEffectInfo(
            effect_type=card.effect.effect_type.value,
            value=card.effect.value,
            extra_draws=card.effect.extra_draws,
        ),
    )


def definition_to_info(definition: CardDefinition) -> CatalogCardInfo:
    low, high = definition.level_range
    return CatalogCardInfo(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        rarity=definition.rarity.value,
        level_min=low,
        level_max=high,
        base_weight=definition.base_weight,
        max_copies=definition.max_copies,
        effect_type=definition.effect.effect_type.value,
        value=definition.effect.value,
        min_value=definition.effect.min_value,
        max_value=definition.effect.max_value,
        extra_draws=definition.effect.extra_draws,
        merchant_only=MERCHANT_ONLY_TAG in definition.tags,
    )


def player_to_info(player: PlayerState) -> PlayerInfo:
    return PlayerInfo(
        label=player.label,
        is_ai=player.is_ai,
        score=player.score,
        draws_used=player.draws_used,
        max_draws=player.max_draws,
        extra_draws=player.extra_draws,
        draws_remaining=player.draws_remaining,
        hold_card=card_to_info(player.hold_slot) if player.hold_slot else None,
        backpack=[card_to_info(c) for c in player.backpack],
        victory_shards=player.victory_shards,
        wins=player.wins,
        shields=player.shields,
        pass_tokens=[PassTokenInfo(level=t.level, threshold=t.threshold) for t in player.pass_tokens],
        merchant_tokens=player.merchant_tokens,
        buffs=[BuffInfo(kind=b.kind, name=b.name, stacks=b.stacks) for b in player.buffs],
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        state = service.create_match(CreateMatchRequest(seed=7))
        result = service.apply_action(state.match_id, ActionRequest(action="draw"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_match(self, request: CreateMatchRequest) -> GameStateResponse:
        """Start a match and return its first snapshot."""
        session = self.session_manager.create_session(seed=request.seed)
        logger.info("Match %s created (seed=%d)", session.session_id, session.seed)
        return self._session_to_response(session)

    def get_match(self, match_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return self._not_found(match_id)
        return self._session_to_response(session)

    def list_matches(self) -> MatchListResponse:
        matches = self.session_manager.list_sessions()
        return MatchListResponse(matches=matches, count=len(matches))

    def end_match(self, match_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(match_id, reason)

    def apply_action(self, match_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """
        Apply one action to a match.

        A rejected action leaves the match unchanged and comes back as an
        ErrorResponse whose error_code is the engine's error type.
        """
        session = self.session_manager.get_session(match_id)
        if not session:
            return self._not_found(match_id)

        action = Action(action_type=ActionType(request.action.value), index=request.index)
        result = session.apply(action)
        if not result.success:
            return ErrorResponse(
                error=result.error.message,
                error_code=ErrorCode(result.error_code),
                details={"action": request.action.value, "index": request.index},
            )

        return ActionResponse(
            success=True,
            messages=result.messages,
            game_state=self._session_to_response(session),
        )

    def list_cards(self, level: int | None = None) -> CardListResponse:
        """Catalog listing, optionally only the cards that can appear at `level`."""
        definitions = CARD_LIBRARY + MERCHANT_EXCLUSIVE
        if level is not None:
            definitions = [d for d in definitions if d.available_at(level)]
        cards = [definition_to_info(d) for d in definitions]
        return CardListResponse(cards=cards, count=len(cards))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _not_found(self, match_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Match {match_id} not found",
            error_code=ErrorCode.MATCH_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> GameStateResponse:
        state = session.game_state
        level_config = get_level_config(state.level)
        deck = state.deck

        return GameStateResponse(
            match_id=session.session_id,
            status=MatchStatus.ACTIVE if session.is_active() else MatchStatus.GAME_OVER,
            seed=session.seed,
            phase=state.phase.value,
            level=state.level,
            level_name=level_config.name,
            total_levels=state.config.total_levels,
            player=player_to_info(state.player),
            ai=player_to_info(state.ai),
            deck=DeckInfo(
                remaining=len(deck.draw_pile),
                discarded=len(deck.discard_pile),
                original_size=deck.original_size,
                carried_over=deck.carried_over,
                remaining_rare=deck.public_info.remaining_rare,
                remaining_shards=deck.public_info.remaining_shards,
            ),
            active_card=card_to_info(state.active_card) if state.active_card else None,
            merchant_offers=[
                MerchantOfferInfo(
                    index=i,
                    card=card_to_info(offer.card),
                    cost_type=offer.cost.cost_type.value,
                    cost_value=offer.cost.cost_value,
                    cost_description=offer.cost.description,
                    affordable=can_afford(state.player, offer.cost),
                )
                for i, offer in enumerate(state.merchant_offers)
            ],
            legal_actions=[
                LegalActionInfo(action=ActionName(a.action_type.value), index=a.index)
                for a in legal_actions(state)
            ],
            winner=state.winner,
            log=list(state.log),
        )

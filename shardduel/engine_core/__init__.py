"""
Engine Core - Deterministic game state management and effect resolution.

The engine is the runtime that:
1. Creates the initial GameState from a seed
2. Generates legal actions
3. Applies actions via the reducer
4. Resolves card effects
5. Scores levels and runs the merchant between them
"""

from .state import (
    GameState, GamePhase, PlayerState, DeckState, PublicInfo,
    CardInstance, CardEffect, EffectType, Rarity, PassToken, PlayerBuff, BuffHook,
    MerchantCost, MerchantCostType, MerchantOffer, InvariantError,
)
from .action import Action, ActionType, ActionResult, EngineError, ErrorType
from .rng import SeededRng
from .effect_resolver import EffectResolver, apply_card_to
from .buffs import BUFF_HANDLERS, run_buff_hooks
from .reducer import (
    Reducer,
    apply_action,
    create_initial_state,
    draw_card,
    play_active_card,
    stash_active_card,
    discard_active_card,
    release_hold_card,
    discard_hold_card,
    unpack_backpack,
    finish_player_turn,
    skip_merchant,
    accept_merchant_offer,
)
from .action_generator import legal_actions

__all__ = [
    "GameState",
    "GamePhase",
    "PlayerState",
    "DeckState",
    "PublicInfo",
    "CardInstance",
    "CardEffect",
    "EffectType",
    "Rarity",
    "PassToken",
    "PlayerBuff",
    "BuffHook",
    "MerchantCost",
    "MerchantCostType",
    "MerchantOffer",
    "InvariantError",
    "Action",
    "ActionType",
    "ActionResult",
    "EngineError",
    "ErrorType",
    "SeededRng",
    "EffectResolver",
    "apply_card_to",
    "BUFF_HANDLERS",
    "run_buff_hooks",
    "Reducer",
    "apply_action",
    "create_initial_state",
    "draw_card",
    "play_active_card",
    "stash_active_card",
    "discard_active_card",
    "release_hold_card",
    "discard_hold_card",
    "unpack_backpack",
    "finish_player_turn",
    "skip_merchant",
    "accept_merchant_offer",
    "legal_actions",
]

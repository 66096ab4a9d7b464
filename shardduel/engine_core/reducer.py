"""
Reducer - Applies actions to game state.

Every state transition the outside world can request is one of the
operation functions below; Reducer.apply() / apply_action() dispatch an
Action to them so the API and CLI share a single entry point.

Design principles:
- Pure function: (state, action) -> new_state. The input snapshot is
  never modified; operations clone() and mutate the clone.
- Validates before applying. Rule violations come back as a failed
  ActionResult carrying an EngineError.
- Card semantics are delegated to the effect resolver, the AI turn to
  bots.ai_turn, and level transitions to level_flow.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import time
from typing import Callable

from ..config import MatchConfig, BASE_MATCH_CONFIG
from .rng import SeededRng
from .state import GameState, GamePhase, PlayerState, BuffHook, PLAYER_LABEL, AI_LABEL
from .action import Action, ActionType, ActionResult, ErrorType
from .effect_resolver import apply_card_to
from .buffs import run_buff_hooks
from .level_flow import advance_level, reset_player_for_level, resolve_level_end
from .merchant import can_afford, apply_merchant_cost
from ..bots.ai_turn import run_ai_turn
from ..games.duel.deck import build_deck_for_level
from ..games.duel.levels import get_level_config

logger = logging.getLogger(__name__)


def _default_seed() -> int:
    return int(time.time() * 1000) & 0xFFFFFFFF


def _success(state: GameState, messages: list[str]) -> ActionResult:
    state.append_log(*messages)
    return ActionResult.success_with_state(state, messages)


def _in_player_turn(state: GameState) -> ActionResult | None:
    if state.phase != GamePhase.PLAYER_TURN:
        return ActionResult.failure(
            ErrorType.INVALID_PHASE, f"Not the player's turn (phase: {state.phase.value})"
        )
    return None


# ============================================================================
# Setup
# ============================================================================

def create_initial_state(seed: int | None = None, config: MatchConfig | None = None) -> GameState:
    """
    Start a match at level 1 with a freshly built deck.

    Without a seed, one is derived from the clock.
    """
    if seed is None:
        seed = _default_seed()
    config = config or BASE_MATCH_CONFIG

    state = GameState(
        phase=GamePhase.PLAYER_TURN,
        level=1,
        player=PlayerState(label=PLAYER_LABEL, log_prefix="Player"),
        ai=PlayerState(label=AI_LABEL, log_prefix="AI", is_ai=True),
        config=config,
    )

    rng = SeededRng(seed)
    state.deck = build_deck_for_level(state.level, rng, state.alloc_instance_id)
    state.rng_seed = rng.get_seed()

    level_config = get_level_config(state.level)
    for p in state.players:
        reset_player_for_level(p, level_config)

    state.append_log(
        "Welcome to the Shard Duel!",
        f"Entering level {state.level}: {level_config.name}",
    )
    logger.debug("Created match with seed %d", seed)
    return state


# ============================================================================
# Player turn
# ============================================================================

def draw_card(state: GameState) -> ActionResult:
    """Reveal the top card of the deck as the active card."""
    error = _in_player_turn(state)
    if error:
        return error
    if state.active_card is not None:
        return ActionResult.failure(
            ErrorType.INVALID_PHASE, "Resolve the current card before drawing another"
        )
    budget = state.player.draw_budget
    if state.player.draws_used >= budget:
        return ActionResult.failure(
            ErrorType.MAX_DRAWS_REACHED, f"No draws left this level ({budget} allowed)"
        )
    if state.deck.is_empty:
        return ActionResult.failure(ErrorType.EMPTY_DECK, "The deck is empty")

    new_state = state.clone()
    player = new_state.player
    card = new_state.deck.take_top()
    player.draws_used += 1
    new_state.active_card = card

    messages = [
        f"{player.log_prefix} draws {card.name} ({player.draws_used}/{player.draw_budget})"
    ]
    messages.extend(run_buff_hooks(new_state, player, BuffHook.AFTER_DRAW, card))
    return _success(new_state, messages)


def _require_active_card(state: GameState) -> ActionResult | None:
    error = _in_player_turn(state)
    if error:
        return error
    if state.active_card is None:
        return ActionResult.failure(ErrorType.INVALID_PHASE, "There is no card to resolve")
    return None


def play_active_card(state: GameState) -> ActionResult:
    """Resolve the active card for the player, then discard it."""
    error = _require_active_card(state)
    if error:
        return error

    new_state = state.clone()
    card = new_state.active_card
    new_state.active_card = None
    messages = apply_card_to(new_state, new_state.player, new_state.ai, card)
    new_state.deck.discard(card)
    messages.extend(run_buff_hooks(new_state, new_state.player, BuffHook.AFTER_PLAY, card))
    return _success(new_state, messages)


def stash_active_card(state: GameState) -> ActionResult:
    """Put the active card into the empty hold slot without resolving it."""
    error = _require_active_card(state)
    if error:
        return error
    if state.player.is_holding:
        return ActionResult.failure(ErrorType.INVALID_PHASE, "The hold slot is already taken")

    new_state = state.clone()
    card = new_state.active_card
    new_state.player.hold_slot = card
    new_state.active_card = None
    messages = [f"{new_state.player.log_prefix} holds {card.name}"]
    messages.extend(run_buff_hooks(new_state, new_state.player, BuffHook.AFTER_STASH, card))
    return _success(new_state, messages)


def discard_active_card(state: GameState) -> ActionResult:
    """Throw the active card away unresolved."""
    error = _require_active_card(state)
    if error:
        return error

    new_state = state.clone()
    card = new_state.active_card
    new_state.active_card = None
    new_state.deck.discard(card)
    messages = [f"{new_state.player.log_prefix} discards {card.name}"]
    messages.extend(run_buff_hooks(new_state, new_state.player, BuffHook.AFTER_DISCARD, card))
    return _success(new_state, messages)


def release_hold_card(state: GameState) -> ActionResult:
    """Resolve the held card as if it had just been played."""
    error = _in_player_turn(state)
    if error:
        return error
    if state.active_card is not None:
        return ActionResult.failure(
            ErrorType.INVALID_PHASE, "Resolve the current card before releasing the held one"
        )
    if not state.player.is_holding:
        return ActionResult.failure(ErrorType.NO_HOLD_CARD, "The hold slot is empty")

    new_state = state.clone()
    player = new_state.player
    card = player.hold_slot
    player.hold_slot = None
    messages = [f"{player.log_prefix} releases held card {card.name}"]
    messages.extend(apply_card_to(new_state, player, new_state.ai, card))
    new_state.deck.discard(card)
    messages.extend(run_buff_hooks(new_state, player, BuffHook.AFTER_RELEASE, card))
    return _success(new_state, messages)


def discard_hold_card(state: GameState) -> ActionResult:
    """Throw the held card away without resolving it."""
    error = _in_player_turn(state)
    if error:
        return error
    if state.active_card is not None:
        return ActionResult.failure(
            ErrorType.INVALID_PHASE, "Resolve the current card before discarding the held one"
        )
    if not state.player.is_holding:
        return ActionResult.failure(ErrorType.NO_HOLD_CARD, "The hold slot is empty")

    new_state = state.clone()
    player = new_state.player
    card = player.hold_slot
    player.hold_slot = None
    new_state.deck.discard(card)
    messages = [f"{player.log_prefix} discards held card {card.name}"]
    messages.extend(run_buff_hooks(new_state, player, BuffHook.AFTER_DISCARD, card))
    return _success(new_state, messages)


def unpack_backpack(state: GameState, index: int) -> ActionResult:
    """
    Move a backpack card into the hold slot.

    A card already in the hold slot goes to the end of the backpack.
    An empty backpack or an out-of-range index (None included) fails
    with NO_HOLD_CARD, since there is no card to put in the slot.
    """
    error = _in_player_turn(state)
    if error:
        return error
    if state.active_card is not None:
        return ActionResult.failure(
            ErrorType.INVALID_PHASE, "Resolve the current card before unpacking"
        )
    if index is None or not 0 <= index < len(state.player.backpack):
        return ActionResult.failure(ErrorType.NO_HOLD_CARD, f"No backpack card at slot {index}")

    new_state = state.clone()
    player = new_state.player
    card = player.backpack.pop(index)
    if player.hold_slot is not None:
        player.backpack.append(player.hold_slot)
    player.hold_slot = card
    return _success(new_state, [f"{player.log_prefix} takes {card.name} out of the backpack"])


def finish_player_turn(state: GameState) -> ActionResult:
    """
    End the player's turn: the AI plays, then the level is scored.

    Outside the player turn, or with a card still pending, this is a no-op
    that reports success with the unchanged state.
    """
    if state.phase != GamePhase.PLAYER_TURN or state.active_card is not None:
        return ActionResult.success_with_state(state, [])

    new_state = state.clone()
    new_state.phase = GamePhase.AI_TURN
    messages = [f"{new_state.player.log_prefix} ends the turn"]
    new_state.append_log(*messages)
    logger.debug("Level %d: AI turn starts", new_state.level)

    messages.extend(run_ai_turn(new_state))
    messages.extend(resolve_level_end(new_state))
    return ActionResult.success_with_state(new_state, messages)


# ============================================================================
# Merchant
# ============================================================================

def skip_merchant(state: GameState) -> ActionResult:
    """Leave the merchant without buying and start the next level."""
    if state.phase != GamePhase.MERCHANT:
        return ActionResult.failure(ErrorType.MERCHANT_UNAVAILABLE, "The merchant is not here")

    new_state = state.clone()
    messages = [f"{new_state.player.log_prefix} walks past the merchant"]
    new_state.append_log(*messages)
    messages.extend(advance_level(new_state))
    return ActionResult.success_with_state(new_state, messages)


def accept_merchant_offer(state: GameState, index: int) -> ActionResult:
    """
    Buy one offer and start the next level.

    The card goes to the hold slot when it is free, otherwise to the
    backpack.
    """
    if state.phase != GamePhase.MERCHANT:
        return ActionResult.failure(ErrorType.MERCHANT_UNAVAILABLE, "The merchant is not here")
    if index is None or not 0 <= index < len(state.merchant_offers):
        return ActionResult.failure(ErrorType.MERCHANT_UNAVAILABLE, f"No offer at slot {index}")
    offer = state.merchant_offers[index]
    if not can_afford(state.player, offer.cost):
        return ActionResult.failure(
            ErrorType.MERCHANT_UNAVAILABLE,
            f"Cannot afford {offer.card.name}: {offer.cost.description}",
        )

    new_state = state.clone()
    player = new_state.player
    offer = new_state.merchant_offers[index]
    if player.hold_slot is None:
        player.hold_slot = offer.card
        placed = f"{player.log_prefix} buys {offer.card.name} into the hold slot"
    else:
        player.backpack.append(offer.card)
        placed = f"{player.log_prefix} buys {offer.card.name} into the backpack"
    messages = [placed, apply_merchant_cost(player, offer.cost)]
    new_state.merchant_offers = []
    new_state.append_log(*messages)

    messages.extend(advance_level(new_state))
    return ActionResult.success_with_state(new_state, messages)


# ============================================================================
# Dispatch
# ============================================================================

@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                ErrorType.INVALID_PHASE, f"No handler for action type: {action.action_type}"
            )
        result = handler(state, action)
        if result.success:
            logger.debug(
                "%s -> phase=%s level=%d",
                action.action_type.value, result.new_state.phase.value, result.new_state.level,
            )
        return result

    def _get_handler(self, action_type: ActionType) -> Callable[[GameState, Action], ActionResult] | None:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.DRAW: lambda s, a: draw_card(s),
            ActionType.PLAY: lambda s, a: play_active_card(s),
            ActionType.STASH: lambda s, a: stash_active_card(s),
            ActionType.DISCARD: lambda s, a: discard_active_card(s),
            ActionType.RELEASE: lambda s, a: release_hold_card(s),
            ActionType.DISCARD_HOLD: lambda s, a: discard_hold_card(s),
            ActionType.UNPACK_BACKPACK: lambda s, a: unpack_backpack(s, a.index),
            ActionType.FINISH_TURN: lambda s, a: finish_player_turn(s),
            ActionType.ACCEPT_OFFER: lambda s, a: accept_merchant_offer(s, a.index),
            ActionType.SKIP_MERCHANT: lambda s, a: skip_merchant(s),
        }
        return handlers.get(action_type)


def apply_action(state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)

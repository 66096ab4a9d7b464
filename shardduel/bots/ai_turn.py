"""
AI Turn - Simulates the AI's whole turn in one pass.

The AI draws from the same deck as the player and resolves every card
through apply_card_to(), so there is no AI-only card logic. Its buffs
react to the same hooks as the player's. Randomness (the early-stop
coin) comes from the state's seed chain.
"""

from __future__ import annotations
import logging

from ..engine_core.effect_resolver import apply_card_to
from ..engine_core.buffs import run_buff_hooks
from ..engine_core.rng import SeededRng
from ..engine_core.state import GameState, BuffHook
from ..games.duel.levels import get_level_config, base_draw_window
from .policy import Decision, PolicySnapshot, decide_ai_action

logger = logging.getLogger(__name__)

EARLY_STOP_CONTINUE_CHANCE = 0.35


def _should_draw(state: GameState, rng: SeededRng, base_draws: int) -> bool:
    ai, player = state.ai, state.player
    if ai.draws_used >= ai.draw_budget:
        return False
    if state.deck.is_empty:
        return False
    if ai.score >= player.score and ai.draws_used >= base_draws:
        return rng.next() < EARLY_STOP_CONTINUE_CHANCE
    return True


def run_ai_turn(state: GameState) -> list[str]:
    """
    Play the AI's turn on a working copy. Returns the new log lines.

    The draw budget is re-read every iteration, so extra draws earned
    mid-turn are usable in the same turn. Once the AI is not behind and
    has taken its base draws, each further draw happens only with
    probability EARLY_STOP_CONTINUE_CHANCE.
    """
    ai, player = state.ai, state.player
    rng = SeededRng(state.rng_seed)
    base_draws, _ = base_draw_window(state.config, get_level_config(state.level))
    messages: list[str] = []

    while _should_draw(state, rng, base_draws):
        card = state.deck.take_top()
        ai.draws_used += 1
        messages.append(f"{ai.log_prefix} draws {card.name}")
        messages.extend(run_buff_hooks(state, ai, BuffHook.AFTER_DRAW, card))

        decision = decide_ai_action(card.effect.effect_type, PolicySnapshot.of(ai, player))
        logger.debug("AI %s %s (score %s vs %s)", decision.value, card.instance_id, ai.score, player.score)

        if decision == Decision.HOLD:
            ai.hold_slot = card
            messages.append(f"{ai.log_prefix} holds {card.name}")
            messages.extend(run_buff_hooks(state, ai, BuffHook.AFTER_STASH, card))
            continue

        messages.extend(apply_card_to(state, ai, player, card))
        state.deck.discard(card)
        messages.extend(run_buff_hooks(state, ai, BuffHook.AFTER_PLAY, card))

    if ai.is_holding and ai.score < player.score:
        held = ai.hold_slot
        ai.hold_slot = None
        messages.append(f"{ai.log_prefix} releases held card {held.name}")
        messages.extend(apply_card_to(state, ai, player, held))
        state.deck.discard(held)
        messages.extend(run_buff_hooks(state, ai, BuffHook.AFTER_RELEASE, held))

    state.rng_seed = rng.get_seed()
    state.append_log(*messages)
    return messages

"""
Level Flow - Level end, victory checks, and the move to the next level.

All functions here mutate the working copy they are given and append
their messages to state.log. They are called from the reducer after it
has cloned the caller's snapshot.
"""

from __future__ import annotations
import logging

from .rng import SeededRng
from .state import GameState, GamePhase, PlayerState
from .effect_resolver import fmt_score
from .merchant import prepare_merchant, apply_pending_penalties
from ..games.duel.deck import build_deck_for_level
from ..games.duel.levels import LevelConfig, get_level_config, is_merchant_level

logger = logging.getLogger(__name__)


def reset_player_for_level(player: PlayerState, level_config: LevelConfig) -> None:
    """Per-level counters go back to their starting values; the rest carries over."""
    player.score = 1
    player.draws_used = 0
    player.extra_draws = 0
    player.max_draws = level_config.base_max_draws


def _redeem_pass_tokens(state: GameState, player: PlayerState) -> list[str]:
    messages = []
    kept = []
    for token in player.pass_tokens:
        if token.level != state.level:
            kept.append(token)
            continue
        if player.score < token.threshold:
            player.score = token.threshold
            messages.append(
                f"{player.log_prefix}'s level pass lifts the score to {fmt_score(token.threshold)}"
            )
        else:
            messages.append(
                f"{player.log_prefix}'s level pass is spent; the score is already "
                f"{fmt_score(player.score)}"
            )
    player.pass_tokens = kept
    return messages


def check_winner(state: GameState) -> str | None:
    """
    Match winner, if any.

    Shard victory outranks the series; within each rule the player is
    checked before the AI.
    """
    for p in state.players:
        if p.victory_shards >= state.config.shards_to_win:
            return p.label
    for p in state.players:
        if p.wins >= state.config.wins_to_win:
            return p.label
    return None


def resolve_level_end(state: GameState) -> list[str]:
    """
    Score the level and route to match end, the merchant, or the next level.
    """
    state.phase = GamePhase.LEVEL_END
    messages: list[str] = []

    for p in state.players:
        messages.extend(_redeem_pass_tokens(state, p))

    player, ai = state.player, state.ai
    summary = (
        f"Level {state.level} ends: {player.log_prefix} {fmt_score(player.score)} "
        f"vs {ai.log_prefix} {fmt_score(ai.score)}"
    )
    if player.score > ai.score:
        player.wins += 1
        messages.append(f"{summary}. {player.log_prefix} takes the level ({player.wins} win(s))")
    elif ai.score > player.score:
        ai.wins += 1
        messages.append(f"{summary}. {ai.log_prefix} takes the level ({ai.wins} win(s))")
    else:
        messages.append(f"{summary}. A draw, no win awarded")
    state.append_log(*messages)

    logger.info(
        "Level %d result: player=%s ai=%s wins=%d-%d",
        state.level, player.score, ai.score, player.wins, ai.wins,
    )

    winner = check_winner(state)
    if winner:
        state.winner = winner
        state.phase = GamePhase.MATCH_END
        end_message = f"Match over: {winner} wins!"
        state.append_log(end_message)
        messages.append(end_message)
        logger.info("Match won by %s at level %d", winner, state.level)
        return messages

    if is_merchant_level(state.level) and state.level < state.config.total_levels:
        messages.extend(prepare_merchant(state))
        return messages

    messages.extend(advance_level(state))
    return messages


def advance_level(state: GameState) -> list[str]:
    """
    Move to the next level, or end the match once the ladder is exhausted.

    The new deck continues the seed chain, so the whole match replays from
    the initial seed.
    """
    state.level += 1
    state.merchant_offers = []
    state.active_card = None

    if state.level > state.config.total_levels:
        state.phase = GamePhase.MATCH_END
        message = "All levels are done. The match ends without a winner."
        state.append_log(message)
        logger.info("Match drawn out after %d levels", state.config.total_levels)
        return [message]

    rng = SeededRng(state.rng_seed)
    state.deck = build_deck_for_level(state.level, rng, state.alloc_instance_id)
    state.rng_seed = rng.get_seed()
    state.deck.carried_over = sum(
        len(p.backpack) + (1 if p.is_holding else 0) for p in state.players
    )

    level_config = get_level_config(state.level)
    message = f"Entering level {state.level}: {level_config.name}"
    state.append_log(message)
    messages = [message]

    for p in state.players:
        reset_player_for_level(p, level_config)
        messages.extend(apply_pending_penalties(state, p))

    state.phase = GamePhase.PLAYER_TURN
    logger.debug("Advanced to level %d (seed=%d)", state.level, state.rng_seed)
    return messages

"""
Merchant - Offers between levels and the prices attached to them.

After a merchant level the travelling merchant lays out OFFER_COUNT cards
from the exclusive pool of the coming level. Each offer carries a cost
drawn from its rarity's price list:

- scorePenalty: paid immediately, and only if the score stays positive
- nextDrawPenalty: fewer base draws when the next level starts
- startScorePenalty: a lower starting score next level
"""

from __future__ import annotations
import logging

from .rng import SeededRng
from .state import (
    GameState, GamePhase, PlayerState, Rarity,
    MerchantCost, MerchantCostType, MerchantOffer,
)
from ..games.duel.cards import get_merchant_pool, create_instance

logger = logging.getLogger(__name__)

OFFER_COUNT = 3


def _score_penalty(value: int) -> MerchantCost:
    return MerchantCost(MerchantCostType.SCORE_PENALTY, value, f"Pay {value} points now")


def _draw_penalty(value: int) -> MerchantCost:
    return MerchantCost(
        MerchantCostType.NEXT_DRAW_PENALTY, value, f"{value} fewer draw(s) next level"
    )


def _start_penalty(value: int) -> MerchantCost:
    return MerchantCost(
        MerchantCostType.START_SCORE_PENALTY, value, f"Start next level {value} points lower"
    )


MERCHANT_COST_POOL: dict[Rarity, list[MerchantCost]] = {
    Rarity.COMMON: [_score_penalty(6), _draw_penalty(1)],
    Rarity.UNCOMMON: [_score_penalty(9), _draw_penalty(1), _start_penalty(4)],
    Rarity.RARE: [_score_penalty(12), _draw_penalty(2), _start_penalty(8)],
    Rarity.LEGENDARY: [_score_penalty(18), _draw_penalty(2), _start_penalty(12)],
}


def pick_merchant_cost(rarity: Rarity, rng: SeededRng) -> MerchantCost:
    pool = MERCHANT_COST_POOL.get(rarity, MERCHANT_COST_POOL[Rarity.COMMON])
    return rng.choice(pool)


def prepare_merchant(state: GameState) -> list[str]:
    """
    Enter the merchant phase on a working copy.

    Offers are sampled with replacement from the next level's exclusive
    pool, so the same card may be offered more than once.
    """
    rng = SeededRng(state.rng_seed)
    pool = get_merchant_pool(state.level + 1)

    offers: list[MerchantOffer] = []
    if pool:
        for _ in range(OFFER_COUNT):
            definition = rng.choice(pool)
            card = create_instance(definition, rng, state.alloc_instance_id)
            offers.append(MerchantOffer(card=card, cost=pick_merchant_cost(card.rarity, rng)))

    state.rng_seed = rng.get_seed()
    state.merchant_offers = offers
    state.phase = GamePhase.MERCHANT

    logger.debug(
        "Merchant after level %d offers %s",
        state.level,
        [(o.card.definition_id, o.cost.cost_type.value, o.cost.cost_value) for o in offers],
    )
    message = "A travelling merchant appears. Choose an offer or move on."
    state.append_log(message)
    return [message]


def can_afford(player: PlayerState, cost: MerchantCost) -> bool:
    """Only a score cost can be unaffordable; the score must stay above zero."""
    if cost.cost_type == MerchantCostType.SCORE_PENALTY:
        return player.score > cost.cost_value
    return True


def apply_merchant_cost(player: PlayerState, cost: MerchantCost) -> str:
    """Pay a score cost now, or queue a penalty for the next level start."""
    if cost.cost_type == MerchantCostType.SCORE_PENALTY:
        player.score = max(0, player.score - cost.cost_value)
        return f"{player.log_prefix} pays the price: {cost.description}"
    player.pending_penalties.append(cost)
    return f"{player.log_prefix} accepts the price: {cost.description}"


def apply_pending_penalties(state: GameState, player: PlayerState) -> list[str]:
    """Apply queued merchant penalties after a player has been reset for a level."""
    if not player.pending_penalties:
        return []

    draw_penalty = sum(
        c.cost_value for c in player.pending_penalties
        if c.cost_type == MerchantCostType.NEXT_DRAW_PENALTY
    )
    start_penalty = sum(
        c.cost_value for c in player.pending_penalties
        if c.cost_type == MerchantCostType.START_SCORE_PENALTY
    )
    player.pending_penalties = []

    messages = []
    if draw_penalty > 0:
        player.max_draws = max(1, player.max_draws - draw_penalty)
        messages.append(
            f"{player.log_prefix}'s draw limit drops by {draw_penalty} (now {player.max_draws})"
        )
    if start_penalty > 0:
        player.score = max(0, player.score - start_penalty)
        messages.append(f"{player.log_prefix} starts the level {start_penalty} points lower")

    state.append_log(*messages)
    return messages

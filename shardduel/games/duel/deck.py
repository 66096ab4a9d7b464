"""
Deck Builder - Expands weighted definitions into a shuffled level deck.
"""

from __future__ import annotations
import logging
import math
from typing import Callable

from ...engine_core.rng import SeededRng
from ...engine_core.state import CardInstance, DeckState
from .cards import get_cards_for_level, create_instance
from .levels import get_level_config

logger = logging.getLogger(__name__)


class DeckBuildError(ValueError):
    """The catalog cannot produce a deck for this level."""


def build_deck_for_level(
    level: int,
    rng: SeededRng,
    allocate_id: Callable[[str], str],
) -> DeckState:
    """
    Build the shared deck for a level.

    Each eligible definition contributes ceil(base_weight * adjustment)
    copies, where adjustment = ceil(deck_size / total weight), so the pool
    is always at least deck_size before truncation. max_copies caps a
    definition regardless of weight. The pool is shuffled with `rng` and
    cut to deck_size.

    Raises DeckBuildError if no eligible definition carries weight.
    """
    level_config = get_level_config(level)
    deck_size = level_config.deck_size
    definitions = get_cards_for_level(level)

    weight_sum = sum(d.base_weight for d in definitions)
    if weight_sum <= 0:
        raise DeckBuildError(f"No weighted cards available for level {level}")

    adjustment = math.ceil(deck_size / weight_sum)

    pool: list[CardInstance] = []
    for definition in definitions:
        copies = math.ceil(definition.base_weight * adjustment)
        if definition.max_copies is not None:
            copies = min(copies, definition.max_copies)
        for _ in range(copies):
            pool.append(create_instance(definition, rng, allocate_id))

    draw_pile = rng.shuffle(pool)[:deck_size]
    deck = DeckState(draw_pile=draw_pile, original_size=len(draw_pile))
    deck.public_info = deck.recount()

    logger.debug(
        "Built level %d deck: %d cards from a pool of %d (rare=%d, shards=%d, seed=%d)",
        level,
        len(draw_pile),
        len(pool),
        deck.public_info.remaining_rare,
        deck.public_info.remaining_shards,
        rng.get_seed(),
    )
    return deck

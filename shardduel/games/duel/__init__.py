"""
Shard Duel - The five-floor card duel.

A player and a scripted AI draw from one shared, seeded deck per level.
Key mechanics:
- A per-level draw budget (base draws plus earned extra draws)
- One hold slot, with a backpack for overflow
- Shields that absorb a single negative effect
- Pass tokens that floor a score at level end
- Victory shards: collect enough to win the match outright

This module contains:
- Card definitions and the merchant-exclusive pool
- The level schedule
- The weighted deck builder
"""

from .cards import (
    CardDefinition,
    CARD_LIBRARY,
    MERCHANT_EXCLUSIVE,
    get_definition,
    get_cards_for_level,
    get_merchant_pool,
    create_instance,
    clone_instance,
)
from .levels import LevelConfig, LEVEL_CONFIGS, MERCHANT_LEVELS, get_level_config
from .deck import build_deck_for_level, DeckBuildError

__all__ = [
    "CardDefinition",
    "CARD_LIBRARY",
    "MERCHANT_EXCLUSIVE",
    "get_definition",
    "get_cards_for_level",
    "get_merchant_pool",
    "create_instance",
    "clone_instance",
    "LevelConfig",
    "LEVEL_CONFIGS",
    "MERCHANT_LEVELS",
    "get_level_config",
    "build_deck_for_level",
    "DeckBuildError",
]

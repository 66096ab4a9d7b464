"""
Level schedule - Per-level configuration and the merchant schedule.
"""

from __future__ import annotations
from dataclasses import dataclass

from ...config import MatchConfig


@dataclass(frozen=True)
class LevelConfig:
    level: int
    name: str
    base_max_draws: int
    deck_size: int


LEVEL_CONFIGS: list[LevelConfig] = [
    LevelConfig(level=1, name="Entrance Trial", base_max_draws=3, deck_size=30),
    LevelConfig(level=2, name="Deepening Strategy", base_max_draws=4, deck_size=24),
    LevelConfig(level=3, name="Pivot Point", base_max_draws=4, deck_size=20),
    LevelConfig(level=4, name="Pressure Peak", base_max_draws=5, deck_size=30),
    LevelConfig(level=5, name="Final Verdict", base_max_draws=5, deck_size=36),
]

# The merchant appears after these levels (if another level follows)
MERCHANT_LEVELS = frozenset({2, 4})


def get_level_config(level: int) -> LevelConfig:
    """Config for a level; levels past the table reuse the last entry."""
    for config in LEVEL_CONFIGS:
        if config.level == level:
            return config
    return LEVEL_CONFIGS[-1]


def is_merchant_level(level: int) -> bool:
    return level in MERCHANT_LEVELS


def base_draw_window(config: MatchConfig, level_config: LevelConfig) -> tuple[int, int]:
    """
    (low, high) draws a player is expected to take in a level.

    The AI treats `low` as the point after which it may stop early.
    """
    high = min(config.base_draw_max, level_config.base_max_draws)
    return min(config.base_draw_min, high), high

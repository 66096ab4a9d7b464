"""
Match configuration.

Fixed parameters for one match. Defaults follow the five-floor ladder;
deployments may override the two headline numbers through the environment:

    SHARDDUEL_TOTAL_LEVELS     number of levels before a draw-out
    SHARDDUEL_SHARDS_TO_WIN    victory shards needed for a shard victory
"""

from __future__ import annotations
from dataclasses import dataclass
import os

VICTORY_SHARDS_TO_WIN = 3
WINS_TO_TAKE_SERIES = 3


@dataclass(frozen=True)
class MatchConfig:
    """Match-wide rules that never change after create_initial_state()."""
    total_levels: int = 5
    shards_to_win: int = VICTORY_SHARDS_TO_WIN
    wins_to_win: int = WINS_TO_TAKE_SERIES
    base_draw_min: int = 3
    base_draw_max: int = 5

    def __post_init__(self):
        if self.total_levels < 1:
            raise ValueError("total_levels must be at least 1")
        if self.shards_to_win < 1:
            raise ValueError("shards_to_win must be at least 1")
        if self.base_draw_min > self.base_draw_max:
            raise ValueError("base_draw_min cannot exceed base_draw_max")

    @classmethod
    def from_env(cls) -> MatchConfig:
        """Build a config, letting environment variables override defaults."""
        defaults = cls()
        return cls(
            total_levels=int(os.getenv("SHARDDUEL_TOTAL_LEVELS", defaults.total_levels)),
            shards_to_win=int(os.getenv("SHARDDUEL_SHARDS_TO_WIN", defaults.shards_to_win)),
        )


BASE_MATCH_CONFIG = MatchConfig()

"""
Seeded Random Source - Deterministic pseudo-random numbers.

The engine never touches the global `random` module. Every consumer of
randomness (deck building, merchant offers, AI turn) creates a SeededRng
from GameState.rng_seed, draws what it needs, and writes get_seed() back
so the next consumer continues the same chain.

The recurrence is a 32-bit linear congruential generator:

    seed = (seed * 1664525 + 1013904223) mod 2**32
    next() = seed / 2**32
"""

from __future__ import annotations
from typing import Sequence, TypeVar

T = TypeVar("T")

RNG_MOD = 0x100000000
RNG_MULT = 1664525
RNG_INC = 1013904223


class SeededRng:
    """Integer-recurrence RNG whose whole state is one 32-bit seed."""

    def __init__(self, seed: int):
        self._current = seed & 0xFFFFFFFF

    def next(self) -> float:
        """Advance the seed and return a float in [0, 1)."""
        self._current = (self._current * RNG_MULT + RNG_INC) & 0xFFFFFFFF
        return self._current / RNG_MOD

    def get_seed(self) -> int:
        """Current (post-advance) seed, for checkpointing into GameState."""
        return self._current

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError("randrange() needs a positive bound")
        return int(self.next() * n)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element uniformly by index."""
        return items[self.randrange(len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """
        Fisher-Yates shuffle from the tail.

        Returns a new list; the input is left untouched.
        """
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

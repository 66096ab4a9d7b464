"""
Pytest fixtures for Shard Duel tests.
"""

import itertools

import pytest

from ..engine_core.reducer import create_initial_state
from ..engine_core.state import (
    GameState, CardInstance, CardEffect, EffectType, Rarity,
)


@pytest.fixture
def fresh_state() -> GameState:
    """Level 1, player to act, seed 1."""
    return create_initial_state(seed=1)


@pytest.fixture
def make_card():
    """
    Factory for hand-built card instances.

    Ids are unique within a test and never collide with engine-allocated
    ids (those carry a catalog definition id as prefix).
    """
    counter = itertools.count(1)

    def _make(
        effect_type: EffectType = EffectType.ADD,
        value=None,
        *,
        definition_id: str = "linear-boost",
        name: str = "Test Card",
        rarity: Rarity = Rarity.COMMON,
        extra_draws: int = 0,
    ) -> CardInstance:
        return CardInstance(
            instance_id=f"test-{next(counter)}",
            definition_id=definition_id,
            name=name,
            rarity=rarity,
            effect=CardEffect(effect_type=effect_type, value=value, extra_draws=extra_draws),
        )

    return _make


@pytest.fixture
def stack_deck():
    """
    Put cards on top of a state's draw pile, keeping the deck counters valid.

    Mutates and returns the state; use on a state the test owns.
    """
    def _stack(state: GameState, *cards: CardInstance, replace: bool = False) -> GameState:
        deck = state.deck
        deck.draw_pile = list(cards) + ([] if replace else deck.draw_pile)
        deck.original_size = len(deck.draw_pile) + len(deck.discard_pile)
        deck.public_info = deck.recount()
        return state

    return _stack

"""
Tests for the reducer (state transitions).

Tests:
- Match setup
- Player turn operations and their error cases
- Copy-on-write: earlier snapshots never change
- Action dispatch
"""

import pytest

from ..engine_core.action import Action, ActionType, ErrorType
from ..engine_core.reducer import (
    Reducer,
    apply_action,
    create_initial_state,
    draw_card,
    play_active_card,
    stash_active_card,
    discard_active_card,
    release_hold_card,
    discard_hold_card,
    unpack_backpack,
    finish_player_turn,
)
from ..engine_core.state import GamePhase, EffectType, PublicInfo, Rarity
from ..config import MatchConfig


def _draw(state):
    result = draw_card(state)
    assert result.success, result.error
    return result.new_state


class TestSetup:

    def test_initial_state(self, fresh_state):
        state = fresh_state
        assert state.phase == GamePhase.PLAYER_TURN
        assert state.level == 1
        assert state.player.score == 1 and state.ai.score == 1
        assert state.player.max_draws == 3
        assert len(state.deck.draw_pile) == 30
        assert state.log[0] == "Welcome to the Shard Duel!"
        assert "Entrance Trial" in state.log[1]
        assert state.winner is None

    def test_same_seed_same_state(self):
        assert create_initial_state(seed=9) == create_initial_state(seed=9)

    def test_different_seed_different_deck(self):
        a = create_initial_state(seed=9).deck.draw_pile
        b = create_initial_state(seed=10).deck.draw_pile
        assert a != b

    def test_seed_chain_stored(self):
        assert create_initial_state(seed=9).rng_seed != 9

    def test_without_seed(self):
        state = create_initial_state()
        assert len(state.deck.draw_pile) == 30

    def test_custom_config(self):
        state = create_initial_state(seed=1, config=MatchConfig(total_levels=2))
        assert state.config.total_levels == 2


class TestDrawCard:

    def test_draw(self, fresh_state):
        top = fresh_state.deck.draw_pile[0]
        result = draw_card(fresh_state)

        assert result.success
        new_state = result.new_state
        assert new_state.active_card == top
        assert new_state.player.draws_used == 1
        assert len(new_state.deck.draw_pile) == 29
        assert result.messages and new_state.log[-1] == result.messages[-1]

    def test_draw_leaves_old_snapshot_alone(self, fresh_state):
        before = fresh_state.clone()
        draw_card(fresh_state)
        assert fresh_state == before

    def test_draw_with_active_card_fails(self, fresh_state):
        result = draw_card(_draw(fresh_state))
        assert not result.success
        assert result.error.type == ErrorType.INVALID_PHASE
        assert result.new_state is None

    def test_draw_budget_enforced(self, fresh_state):
        state = fresh_state
        draws = 0
        while True:
            result = draw_card(state)
            if not result.success:
                break
            draws += 1
            state = discard_active_card(result.new_state).new_state
            assert state.player.draws_used == draws

        assert result.error_code == "maxDrawsReached"
        assert draws == fresh_state.player.draw_budget

    def test_extra_draws_extend_budget(self, fresh_state):
        state = fresh_state
        state.player.draws_used = state.player.max_draws
        assert draw_card(state).error.type == ErrorType.MAX_DRAWS_REACHED
        state.player.extra_draws = 1
        assert draw_card(state).success

    def test_empty_deck(self, fresh_state):
        fresh_state.deck.draw_pile = []
        fresh_state.deck.public_info = PublicInfo()
        result = draw_card(fresh_state)
        assert result.error.type == ErrorType.EMPTY_DECK

    def test_wrong_phase(self, fresh_state):
        fresh_state.phase = GamePhase.MERCHANT
        assert draw_card(fresh_state).error.type == ErrorType.INVALID_PHASE

    def test_public_counters_follow_draws(self, fresh_state, make_card, stack_deck):
        shard = make_card(EffectType.VICTORY_SHARD, 1, definition_id="victory-shard", rarity=Rarity.RARE)
        state = stack_deck(fresh_state, shard)
        before = state.deck.public_info.remaining_shards

        state = _draw(state)
        assert state.deck.public_info.remaining_shards == before - 1
        assert state.deck.public_info == state.deck.recount()


class TestResolveActiveCard:

    def test_add_five_scenario(self, fresh_state, make_card, stack_deck):
        """Seed 1, level 1: drawing and playing an add-5 card takes the score from 1 to 6."""
        state = stack_deck(fresh_state, make_card(EffectType.ADD, 5))
        result = play_active_card(_draw(state))

        assert result.success
        assert result.new_state.player.score == 6
        assert any("+5" in line for line in result.new_state.log)
        assert result.new_state.active_card is None
        assert result.new_state.deck.discard_pile[-1].effect.value == 5

    def test_play_without_active_card(self, fresh_state):
        assert play_active_card(fresh_state).error.type == ErrorType.INVALID_PHASE

    def test_stash(self, fresh_state):
        state = _draw(fresh_state)
        card = state.active_card
        result = stash_active_card(state)
        assert result.new_state.player.hold_slot == card
        assert result.new_state.active_card is None

    def test_stash_with_full_hold_slot(self, fresh_state, make_card):
        fresh_state.player.hold_slot = make_card()
        result = stash_active_card(_draw(fresh_state))
        assert result.error.type == ErrorType.INVALID_PHASE

    def test_discard(self, fresh_state):
        state = _draw(fresh_state)
        card = state.active_card
        new_state = discard_active_card(state).new_state
        assert new_state.deck.discard_pile == [card]
        assert new_state.player.score == 1

    def test_discard_without_active_card(self, fresh_state):
        assert discard_active_card(fresh_state).error.type == ErrorType.INVALID_PHASE


class TestHoldSlot:

    def test_release(self, fresh_state, make_card):
        card = make_card(EffectType.ADD, 3)
        fresh_state.player.hold_slot = card
        result = release_hold_card(fresh_state)

        assert result.success
        assert result.new_state.player.score == 4
        assert result.new_state.player.hold_slot is None
        assert result.new_state.deck.discard_pile[-1] == card

    def test_release_empty_slot(self, fresh_state):
        assert release_hold_card(fresh_state).error.type == ErrorType.NO_HOLD_CARD

    def test_release_with_active_card(self, fresh_state, make_card):
        fresh_state.player.hold_slot = make_card()
        assert release_hold_card(_draw(fresh_state)).error.type == ErrorType.INVALID_PHASE

    def test_unpack_into_empty_slot(self, fresh_state, make_card):
        card = make_card()
        fresh_state.player.backpack = [card]
        new_state = unpack_backpack(fresh_state, 0).new_state
        assert new_state.player.hold_slot == card
        assert new_state.player.backpack == []

    def test_unpack_swaps_held_card_to_backpack_end(self, fresh_state, make_card):
        held, first, second = make_card(), make_card(), make_card()
        fresh_state.player.hold_slot = held
        fresh_state.player.backpack = [first, second]
        new_state = unpack_backpack(fresh_state, 0).new_state
        assert new_state.player.hold_slot == first
        assert new_state.player.backpack == [second, held]

    def test_discard_hold(self, fresh_state, make_card):
        card = make_card(EffectType.ADD, 3, name="Held Boost")
        fresh_state.player.hold_slot = card
        result = discard_hold_card(fresh_state)

        assert result.success
        assert result.new_state.player.score == 1
        assert result.new_state.player.hold_slot is None
        assert result.new_state.deck.discard_pile[-1] == card
        assert result.messages == ["Player discards held card Held Boost"]
        assert fresh_state.player.hold_slot == card

    def test_discard_hold_empty_slot(self, fresh_state):
        assert discard_hold_card(fresh_state).error.type == ErrorType.NO_HOLD_CARD

    def test_discard_hold_with_active_card(self, fresh_state, make_card):
        fresh_state.player.hold_slot = make_card()
        assert discard_hold_card(_draw(fresh_state)).error.type == ErrorType.INVALID_PHASE

    def test_discard_hold_wrong_phase(self, fresh_state, make_card):
        fresh_state.player.hold_slot = make_card()
        fresh_state.phase = GamePhase.MERCHANT
        assert discard_hold_card(fresh_state).error.type == ErrorType.INVALID_PHASE

    @pytest.mark.parametrize("index", [None, 0, 1, -1])
    def test_unpack_bad_index_or_empty_backpack(self, fresh_state, index):
        assert unpack_backpack(fresh_state, index).error.type == ErrorType.NO_HOLD_CARD


class TestFinishTurn:

    def test_noop_with_active_card(self, fresh_state):
        state = _draw(fresh_state)
        result = finish_player_turn(state)
        assert result.success
        assert result.new_state is state
        assert result.messages == []

    def test_noop_outside_player_turn(self, fresh_state):
        fresh_state.phase = GamePhase.MERCHANT
        result = finish_player_turn(fresh_state)
        assert result.success and result.new_state is fresh_state

    def test_runs_ai_and_level_end(self, fresh_state):
        result = finish_player_turn(fresh_state)
        state = result.new_state

        assert result.success
        assert state.level == 2
        assert state.phase == GamePhase.PLAYER_TURN
        assert state.player.score == 1 and state.ai.score == 1
        assert state.player.max_draws == 4
        assert any(m.startswith("Level 1 ends") for m in result.messages)
        assert any("Deepening Strategy" in m for m in result.messages)
        assert state.log[-len(result.messages):] == result.messages
        assert fresh_state.level == 1


class TestDispatch:

    def test_apply_action_routes(self, fresh_state):
        result = apply_action(fresh_state, Action.draw())
        assert result.success
        assert result.new_state.active_card is not None

    def test_discard_hold_routes(self, fresh_state, make_card):
        fresh_state.player.hold_slot = make_card()
        result = apply_action(fresh_state, Action.discard_hold())
        assert result.success
        assert result.new_state.player.hold_slot is None

    def test_index_passed_through(self, fresh_state, make_card):
        fresh_state.player.backpack = [make_card()]
        result = apply_action(fresh_state, Action.unpack(0))
        assert result.success

    def test_missing_index_rejected(self, fresh_state):
        result = apply_action(fresh_state, Action(action_type=ActionType.UNPACK_BACKPACK))
        assert result.error.type == ErrorType.NO_HOLD_CARD

    def test_unknown_action_type(self, fresh_state):
        result = Reducer().apply(fresh_state, Action(action_type="teleport"))
        assert not result.success
        assert result.error_code == "invalidPhase"

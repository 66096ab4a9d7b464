"""
Tests for the AI turn and the bot policies.

Tests:
- The AI's play-or-hold rule
- Whole AI turns on stacked decks
- Policies only pick legal actions
"""

import dataclasses

import pytest

from ..bots import (
    BotDecision, BotPolicy, Decision, FirstLegalPolicy, PolicySnapshot, ScriptedPolicy,
    decide_ai_action, run_ai_turn,
)
from ..engine_core.action import ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.state import EffectType, GamePhase, MerchantCost, MerchantCostType, MerchantOffer


def _snap(score=5, opponent_score=5, is_holding=False):
    return PolicySnapshot(score=score, opponent_score=opponent_score, is_holding=is_holding)


class TestPlayOrHold:

    @pytest.mark.parametrize("effect_type", [
        EffectType.VICTORY_SHARD, EffectType.LEVEL_PASS, EffectType.SHIELD,
        EffectType.EXTRA_DRAW, EffectType.ADD, EffectType.TRANSFER, EffectType.STEAL,
    ])
    def test_always_played(self, effect_type):
        assert decide_ai_action(effect_type, _snap(score=50, opponent_score=1)) == Decision.PLAY

    @pytest.mark.parametrize("effect_type,snapshot,expected", [
        (EffectType.MULTIPLY, _snap(score=8, opponent_score=3), Decision.HOLD),
        (EffectType.MULTIPLY, _snap(score=3, opponent_score=8), Decision.PLAY),
        (EffectType.MULTIPLY, _snap(score=8, opponent_score=3, is_holding=True), Decision.PLAY),
        (EffectType.RESET, _snap(score=5, opponent_score=10), Decision.PLAY),
        (EffectType.RESET, _snap(score=6, opponent_score=10), Decision.HOLD),
        (EffectType.DUPLICATE, _snap(), Decision.HOLD),
        (EffectType.DUPLICATE, _snap(is_holding=True), Decision.PLAY),
        (EffectType.WILDCARD, _snap(score=2, opponent_score=9), Decision.PLAY),
        (EffectType.WILDCARD, _snap(score=9, opponent_score=2), Decision.HOLD),
        (EffectType.WILDCARD, _snap(score=9, opponent_score=2, is_holding=True), Decision.PLAY),
        (EffectType.SET, _snap(), Decision.PLAY),
        (EffectType.BUFF, _snap(), Decision.PLAY),
        (EffectType.NONE, _snap(), Decision.PLAY),
    ])
    def test_conditional(self, effect_type, snapshot, expected):
        assert decide_ai_action(effect_type, snapshot) == expected

    def test_snapshot_of_players(self, fresh_state, make_card):
        fresh_state.ai.hold_slot = make_card()
        fresh_state.player.score = 4
        snapshot = PolicySnapshot.of(fresh_state.ai, fresh_state.player)
        assert snapshot.is_holding
        assert snapshot.is_behind


class TestAiTurn:

    def test_shielded_player_blocks_steal(self, fresh_state, make_card, stack_deck):
        state = stack_deck(fresh_state, make_card(EffectType.STEAL, 3), replace=True)
        state.player.shields = 1

        messages = run_ai_turn(state)

        assert state.player.shields == 0
        assert state.player.score == 1
        assert state.ai.score == 1
        assert any("blocked" in m for m in state.log)
        assert state.log[-len(messages):] == messages

    def test_holds_multiply_while_ahead(self, fresh_state, make_card, stack_deck):
        card = make_card(EffectType.MULTIPLY, 2, name="Power Double")
        state = stack_deck(fresh_state, card, replace=True)
        state.ai.score = 5

        messages = run_ai_turn(state)

        assert state.ai.hold_slot == card
        assert state.ai.score == 5
        assert messages == ["AI draws Power Double", "AI holds Power Double"]

    def test_releases_held_card_when_behind(self, fresh_state, make_card, stack_deck):
        held = make_card(EffectType.ADD, 4, name="Held Boost")
        state = stack_deck(fresh_state, replace=True)
        state.ai.hold_slot = held
        state.player.score = 10

        messages = run_ai_turn(state)

        assert state.ai.hold_slot is None
        assert state.ai.score == 5
        assert state.deck.discard_pile == [held]
        assert messages[0] == "AI releases held card Held Boost"

    def test_stops_at_budget_when_behind(self, fresh_state, make_card, stack_deck):
        state = stack_deck(fresh_state, *[make_card(EffectType.ADD, 1) for _ in range(6)], replace=True)
        state.player.score = 100

        run_ai_turn(state)

        assert state.ai.draws_used == state.ai.max_draws == 3
        assert len(state.deck.draw_pile) == 3
        assert state.ai.score == 4

    def test_extra_draws_usable_same_turn(self, fresh_state, make_card, stack_deck):
        cards = [make_card(EffectType.ADD, 1, extra_draws=1)]
        cards += [make_card(EffectType.ADD, 1) for _ in range(5)]
        state = stack_deck(fresh_state, *cards, replace=True)
        state.player.score = 100

        run_ai_turn(state)

        assert state.ai.draws_used == 4
        assert len(state.deck.draw_pile) == 2

    def test_empty_deck_ends_turn(self, fresh_state, stack_deck):
        state = stack_deck(fresh_state, replace=True)
        assert run_ai_turn(state) == []
        assert state.ai.draws_used == 0

    def test_early_stop_consumes_seed_chain(self, fresh_state, make_card, stack_deck):
        state = stack_deck(fresh_state, *[make_card(EffectType.ADD, 1) for _ in range(6)], replace=True)
        state.ai.score = 50
        state.ai.extra_draws = 3
        seed = state.rng_seed

        run_ai_turn(state)

        assert 3 <= state.ai.draws_used <= 6
        assert state.rng_seed != seed

    def test_deterministic(self, fresh_state):
        a, b = fresh_state.clone(), fresh_state.clone()
        assert run_ai_turn(a) == run_ai_turn(b)
        assert a == b


class TestPolicies:

    def test_first_legal(self, fresh_state):
        legal = legal_actions(fresh_state)
        decision = FirstLegalPolicy().select_action(fresh_state, legal)
        assert decision.action == legal[0]

    def test_holding_offers_release_and_discard_hold(self, fresh_state, make_card):
        fresh_state.player.hold_slot = make_card()
        kinds = [a.action_type for a in legal_actions(fresh_state)]
        assert kinds == [
            ActionType.DRAW, ActionType.RELEASE, ActionType.DISCARD_HOLD, ActionType.FINISH_TURN,
        ]

    @pytest.mark.parametrize("policy", [FirstLegalPolicy(), ScriptedPolicy()])
    def test_no_legal_actions(self, fresh_state, policy):
        with pytest.raises(ValueError):
            policy.select_action(fresh_state, [])

    def test_decision_holds_action_and_explanation(self, fresh_state):
        decision = FirstLegalPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert [f.name for f in dataclasses.fields(BotDecision)] == ["action", "explanation"]
        assert decision.explanation == "Selected first legal action"

    def test_policies_are_bot_policies(self):
        assert isinstance(ScriptedPolicy(), BotPolicy)
        assert ScriptedPolicy().get_name() == "ScriptedPolicy"

    def test_scripted_draws_first(self, fresh_state):
        decision = ScriptedPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert decision.action.action_type == ActionType.DRAW

    def test_scripted_stashes_multiply_when_ahead(self, fresh_state, make_card):
        fresh_state.player.score = 8
        fresh_state.active_card = make_card(EffectType.MULTIPLY, 2)
        decision = ScriptedPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert decision.action.action_type == ActionType.STASH

    def test_scripted_plays_when_slot_taken(self, fresh_state, make_card):
        fresh_state.player.score = 8
        fresh_state.player.hold_slot = make_card()
        fresh_state.active_card = make_card(EffectType.MULTIPLY, 2)
        decision = ScriptedPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert decision.action.action_type == ActionType.PLAY

    def test_scripted_releases_when_behind(self, fresh_state, make_card):
        fresh_state.player.draws_used = fresh_state.player.max_draws
        fresh_state.player.hold_slot = make_card()
        fresh_state.ai.score = 9
        decision = ScriptedPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert decision.action.action_type == ActionType.RELEASE

    def test_scripted_finishes_turn(self, fresh_state):
        fresh_state.player.draws_used = fresh_state.player.max_draws
        decision = ScriptedPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert decision.action.action_type == ActionType.FINISH_TURN

    def test_scripted_merchant(self, fresh_state, make_card):
        fresh_state.phase = GamePhase.MERCHANT
        fresh_state.player.score = 2
        fresh_state.merchant_offers = [
            MerchantOffer(make_card(), MerchantCost(MerchantCostType.SCORE_PENALTY, 5)),
            MerchantOffer(make_card(), MerchantCost(MerchantCostType.NEXT_DRAW_PENALTY, 1)),
        ]
        decision = ScriptedPolicy().select_action(fresh_state, legal_actions(fresh_state))
        assert decision.action.action_type == ActionType.ACCEPT_OFFER
        assert decision.action.index == 1

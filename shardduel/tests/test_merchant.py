"""
Tests for the merchant phase.
"""

import pytest

from ..engine_core.action import ErrorType
from ..engine_core.merchant import (
    MERCHANT_COST_POOL,
    OFFER_COUNT,
    apply_merchant_cost,
    can_afford,
    prepare_merchant,
)
from ..engine_core.reducer import accept_merchant_offer, skip_merchant
from ..engine_core.state import (
    EffectType, GamePhase, MerchantCost, MerchantCostType, MerchantOffer, Rarity,
)


@pytest.fixture
def merchant_state(fresh_state, make_card):
    """Level 2 finished, merchant open with three hand-built offers."""
    state = fresh_state
    state.level = 2
    state.phase = GamePhase.MERCHANT
    state.player.score = 10
    state.merchant_offers = [
        MerchantOffer(
            make_card(EffectType.SHIELD, 2, definition_id="merchant-shield", rarity=Rarity.RARE),
            MerchantCost(MerchantCostType.SCORE_PENALTY, 10, "Pay 10 points now"),
        ),
        MerchantOffer(
            make_card(EffectType.ADD, 12, definition_id="merchant-jackpot", rarity=Rarity.RARE),
            MerchantCost(MerchantCostType.NEXT_DRAW_PENALTY, 1, "1 fewer draw(s) next level"),
        ),
        MerchantOffer(
            make_card(EffectType.LEVEL_PASS, 60, definition_id="merchant-pass", rarity=Rarity.LEGENDARY),
            MerchantCost(MerchantCostType.SCORE_PENALTY, 6, "Pay 6 points now"),
        ),
    ]
    return state


class TestPrepareMerchant:

    def test_offers(self, fresh_state):
        fresh_state.level = 2
        seed = fresh_state.rng_seed
        messages = prepare_merchant(fresh_state)

        assert fresh_state.phase == GamePhase.MERCHANT
        assert len(fresh_state.merchant_offers) == OFFER_COUNT
        assert fresh_state.rng_seed != seed
        assert messages == [fresh_state.log[-1]]
        for offer in fresh_state.merchant_offers:
            assert offer.card.definition_id.startswith("merchant-")
            assert offer.cost in MERCHANT_COST_POOL[offer.card.rarity]

    def test_deterministic(self, fresh_state):
        a, b = fresh_state.clone(), fresh_state.clone()
        prepare_merchant(a)
        prepare_merchant(b)
        assert a.merchant_offers == b.merchant_offers


class TestCosts:

    @pytest.mark.parametrize("score,affordable", [(7, True), (6, False), (2, False)])
    def test_score_cost_needs_strictly_more(self, fresh_state, score, affordable):
        fresh_state.player.score = score
        cost = MerchantCost(MerchantCostType.SCORE_PENALTY, 6)
        assert can_afford(fresh_state.player, cost) is affordable

    def test_deferred_costs_always_affordable(self, fresh_state):
        fresh_state.player.score = 0
        assert can_afford(fresh_state.player, MerchantCost(MerchantCostType.NEXT_DRAW_PENALTY, 2))
        assert can_afford(fresh_state.player, MerchantCost(MerchantCostType.START_SCORE_PENALTY, 8))

    def test_score_cost_paid_now(self, fresh_state):
        fresh_state.player.score = 10
        apply_merchant_cost(fresh_state.player, MerchantCost(MerchantCostType.SCORE_PENALTY, 6))
        assert fresh_state.player.score == 4
        assert fresh_state.player.pending_penalties == []

    def test_deferred_cost_queued(self, fresh_state):
        cost = MerchantCost(MerchantCostType.START_SCORE_PENALTY, 4)
        apply_merchant_cost(fresh_state.player, cost)
        assert fresh_state.player.pending_penalties == [cost]
        assert fresh_state.player.score == 1


class TestAcceptOffer:

    def test_outside_merchant_phase(self, fresh_state):
        result = accept_merchant_offer(fresh_state, 0)
        assert result.error.type == ErrorType.MERCHANT_UNAVAILABLE

    @pytest.mark.parametrize("index", [3, -1, None])
    def test_bad_index(self, merchant_state, index):
        result = accept_merchant_offer(merchant_state, index)
        assert result.error.type == ErrorType.MERCHANT_UNAVAILABLE

    def test_score_equal_to_cost_rejected(self, merchant_state):
        result = accept_merchant_offer(merchant_state, 0)
        assert result.error.type == ErrorType.MERCHANT_UNAVAILABLE
        assert merchant_state.phase == GamePhase.MERCHANT

    def test_card_goes_to_hold_slot(self, merchant_state):
        offer = merchant_state.merchant_offers[2]
        result = accept_merchant_offer(merchant_state, 2)
        state = result.new_state

        assert result.success
        assert state.player.hold_slot == offer.card
        assert state.merchant_offers == []
        assert state.level == 3
        assert state.phase == GamePhase.PLAYER_TURN
        assert any("pays the price" in m for m in result.messages)

    def test_card_goes_to_backpack_when_holding(self, merchant_state, make_card):
        held = make_card()
        merchant_state.player.hold_slot = held
        offer = merchant_state.merchant_offers[1]
        state = accept_merchant_offer(merchant_state, 1).new_state

        assert state.player.hold_slot == held
        assert state.player.backpack == [offer.card]

    def test_draw_penalty_bites_next_level(self, merchant_state):
        state = accept_merchant_offer(merchant_state, 1).new_state
        assert state.player.max_draws == 3
        assert state.ai.max_draws == 4
        assert state.player.pending_penalties == []

    def test_snapshot_untouched(self, merchant_state):
        before = merchant_state.clone()
        accept_merchant_offer(merchant_state, 1)
        assert merchant_state == before


class TestSkipMerchant:

    def test_outside_merchant_phase(self, fresh_state):
        assert skip_merchant(fresh_state).error.type == ErrorType.MERCHANT_UNAVAILABLE

    def test_skip(self, merchant_state):
        result = skip_merchant(merchant_state)
        state = result.new_state

        assert result.success
        assert state.level == 3
        assert state.phase == GamePhase.PLAYER_TURN
        assert state.merchant_offers == []
        assert state.player.hold_slot is None
        assert state.player.max_draws == 4

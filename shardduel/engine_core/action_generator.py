"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. The API to show available actions
3. The CLI to build its prompt

Design: Generates Action objects, not just action types.
Every generated action succeeds when applied to the same state.
"""

from __future__ import annotations

from .state import GameState, GamePhase
from .action import Action
from .merchant import can_afford


def generate_player_turn_actions(state: GameState) -> list[Action]:
    player = state.player

    if state.active_card is not None:
        actions = [Action.play()]
        if not player.is_holding:
            actions.append(Action.stash())
        actions.append(Action.discard())
        return actions

    actions = []
    if player.draws_remaining > 0 and not state.deck.is_empty:
        actions.append(Action.draw())
    if player.is_holding:
        actions.append(Action.release())
        actions.append(Action.discard_hold())
    actions.extend(Action.unpack(i) for i in range(len(player.backpack)))
    actions.append(Action.finish_turn())
    return actions


def generate_merchant_actions(state: GameState) -> list[Action]:
    actions = [
        Action.accept_offer(i)
        for i, offer in enumerate(state.merchant_offers)
        if can_afford(state.player, offer.cost)
    ]
    actions.append(Action.skip_merchant())
    return actions


def legal_actions(state: GameState) -> list[Action]:
    """
    All actions the human side may take right now.

    Empty once the match is over. The AI never acts through this list;
    its turn runs inside finish_turn.
    """
    if state.phase == GamePhase.PLAYER_TURN:
        return generate_player_turn_actions(state)
    if state.phase == GamePhase.MERCHANT:
        return generate_merchant_actions(state)
    return []

"""
Bot Policy - Interface for bot decision-making.

Two layers live here:
- decide_ai_action(): the AI's play-or-hold rule for a freshly drawn
  card. It is a pure function of the effect type and a score snapshot.
- BotPolicy: picks whole actions from the legal action list. The CLI's
  `simulate` command uses one to drive the human side of a match.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType
from ..engine_core.state import EffectType

if TYPE_CHECKING:
    from ..engine_core.state import GameState, PlayerState
    from ..engine_core.action import Action

RESET_THRESHOLD_RATIO = 0.6

ALWAYS_PLAY = frozenset({
    EffectType.VICTORY_SHARD,
    EffectType.LEVEL_PASS,
    EffectType.SHIELD,
    EffectType.EXTRA_DRAW,
    EffectType.ADD,
    EffectType.TRANSFER,
    EffectType.STEAL,
})


class Decision(Enum):
    PLAY = "play"
    HOLD = "hold"


@dataclass(frozen=True)
class PolicySnapshot:
    """What the play-or-hold rule is allowed to look at."""
    score: float
    opponent_score: float
    is_holding: bool

    @property
    def is_behind(self) -> bool:
        return self.score < self.opponent_score

    @classmethod
    def of(cls, actor: PlayerState, opponent: PlayerState) -> PolicySnapshot:
        return cls(score=actor.score, opponent_score=opponent.score, is_holding=actor.is_holding)


def decide_ai_action(effect_type: EffectType, snapshot: PolicySnapshot) -> Decision:
    """
    Play the card now, or keep it in the hold slot.

    A HOLD is only honoured when the hold slot is free; with the slot
    taken the card is played.
    """
    if effect_type in ALWAYS_PLAY:
        decision = Decision.PLAY
    elif effect_type == EffectType.MULTIPLY:
        decision = Decision.PLAY if snapshot.is_holding or snapshot.is_behind else Decision.HOLD
    elif effect_type == EffectType.RESET:
        threshold = snapshot.opponent_score * RESET_THRESHOLD_RATIO
        decision = Decision.PLAY if snapshot.score < threshold else Decision.HOLD
    elif effect_type == EffectType.DUPLICATE:
        decision = Decision.PLAY if snapshot.is_holding else Decision.HOLD
    elif effect_type == EffectType.WILDCARD:
        decision = Decision.PLAY if snapshot.is_behind else Decision.HOLD
    else:
        decision = Decision.PLAY

    if decision == Decision.HOLD and snapshot.is_holding:
        return Decision.PLAY
    return decision


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    """
    action: Action
    explanation: str = ""


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    """

    @abstractmethod
    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: List of legal actions to choose from

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
        )


class ScriptedPolicy(BotPolicy):
    """
    Plays the human side with the AI's own card rules.

    Draws while draws remain, plays or stashes each card with
    decide_ai_action(), releases a held card when behind before ending the
    turn, and at the merchant takes the first affordable offer.
    """

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        by_type: dict[ActionType, Action] = {}
        for action in legal_actions:
            by_type.setdefault(action.action_type, action)

        if state.active_card is not None:
            snapshot = PolicySnapshot.of(state.player, state.ai)
            decision = decide_ai_action(state.active_card.effect.effect_type, snapshot)
            if decision == Decision.HOLD and ActionType.STASH in by_type:
                return BotDecision(by_type[ActionType.STASH], f"Hold {state.active_card.name}")
            return BotDecision(by_type[ActionType.PLAY], f"Play {state.active_card.name}")

        if ActionType.ACCEPT_OFFER in by_type:
            return BotDecision(by_type[ActionType.ACCEPT_OFFER], "Take the first affordable offer")
        if ActionType.SKIP_MERCHANT in by_type:
            return BotDecision(by_type[ActionType.SKIP_MERCHANT], "Nothing affordable")

        if ActionType.DRAW in by_type:
            return BotDecision(by_type[ActionType.DRAW], "Draws remaining")

        if ActionType.RELEASE in by_type and state.player.score < state.ai.score:
            return BotDecision(by_type[ActionType.RELEASE], "Behind; release the held card")

        return BotDecision(by_type.get(ActionType.FINISH_TURN, legal_actions[0]), "End the turn")

"""
Action System - Actions, engine errors, and results.

Actions represent the state transitions a presentation layer may request:
1. Player turn actions (draw, play, stash, discard, release, discard the
   held card, unpack)
2. Turn handover (finish turn, which runs the AI and level end)
3. Merchant decisions (accept an offer, skip)

All state changes flow through actions or the operation functions they
dispatch to. Rule violations come back as EngineError values, never as
exceptions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Player turn
    DRAW = "draw"
    PLAY = "play"
    STASH = "stash"
    DISCARD = "discard"
    RELEASE = "release"
    DISCARD_HOLD = "discard_hold"
    UNPACK_BACKPACK = "unpack_backpack"

    # Turn handover
    FINISH_TURN = "finish_turn"

    # Merchant
    ACCEPT_OFFER = "accept_offer"
    SKIP_MERCHANT = "skip_merchant"


class ErrorType(Enum):
    """Recoverable rule violations."""
    INVALID_PHASE = "invalidPhase"
    MAX_DRAWS_REACHED = "maxDrawsReached"
    EMPTY_DECK = "emptyDeck"
    NO_HOLD_CARD = "noHoldCard"
    MERCHANT_UNAVAILABLE = "merchantUnavailable"


@dataclass(frozen=True)
class EngineError:
    """A rejected operation: what went wrong, in machine and human terms."""
    type: ErrorType
    message: str


@dataclass
class Action:
    """
    A request to change the game state.

    `index` is used by ACCEPT_OFFER (offer index) and UNPACK_BACKPACK
    (backpack slot); other actions ignore it.
    """
    action_type: ActionType
    index: int | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def draw(cls) -> Action:
        return cls(action_type=ActionType.DRAW)

    @classmethod
    def play(cls) -> Action:
        return cls(action_type=ActionType.PLAY)

    @classmethod
    def stash(cls) -> Action:
        return cls(action_type=ActionType.STASH)

    @classmethod
    def discard(cls) -> Action:
        return cls(action_type=ActionType.DISCARD)

    @classmethod
    def release(cls) -> Action:
        return cls(action_type=ActionType.RELEASE)

    @classmethod
    def discard_hold(cls) -> Action:
        return cls(action_type=ActionType.DISCARD_HOLD)

    @classmethod
    def unpack(cls, index: int) -> Action:
        return cls(action_type=ActionType.UNPACK_BACKPACK, index=index)

    @classmethod
    def finish_turn(cls) -> Action:
        return cls(action_type=ActionType.FINISH_TURN)

    @classmethod
    def accept_offer(cls, index: int) -> Action:
        return cls(action_type=ActionType.ACCEPT_OFFER, index=index)

    @classmethod
    def skip_merchant(cls) -> Action:
        return cls(action_type=ActionType.SKIP_MERCHANT)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - New state (if it succeeded)
    - The EngineError (if it failed)
    - The log lines appended by this action, for the UI to surface
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: EngineError | None = None
    messages: list[str] = field(default_factory=list)

    @property
    def error_code(self) -> str | None:
        return self.error.type.value if self.error else None

    @classmethod
    def failure(cls, error_type: ErrorType, message: str) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=EngineError(type=error_type, message=message))

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        messages: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, messages=messages or [])

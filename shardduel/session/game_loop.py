"""
Game Loop - Drives a session with a bot on the human side.

The loop:
1. Ask the engine for the legal actions
2. Let the policy pick one
3. Apply it to the session
4. Repeat until the match ends or the step limit is hit

Used by `shardduel simulate` and by tests that need whole matches.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.action_generator import legal_actions

if TYPE_CHECKING:
    from .manager import Session
    from ..bots.policy import BotPolicy


class LoopState(Enum):
    """State of the game loop."""
    RUNNING = "running"
    GAME_OVER = "game_over"
    STALLED = "stalled"


@dataclass
class TurnResult:
    """
    Result of one loop step.

    Contains the action taken and the log lines it produced.
    """
    success: bool
    loop_state: LoopState
    action: str | None = None
    explanation: str = ""
    messages: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    winner: str | None = None


class GameLoop:
    """
    The autoplay driver.

    Usage:
        loop = GameLoop(session, ScriptedPolicy())
        results = loop.run()
        print(session.game_state.winner)
    """

    def __init__(self, session: Session, policy: BotPolicy, max_steps: int = 1000):
        self.session = session
        self.policy = policy
        self.max_steps = max_steps
        self.state = LoopState.RUNNING

    def step(self) -> TurnResult:
        """Take one action for the human side."""
        game_state = self.session.game_state
        actions = legal_actions(game_state)
        if not actions:
            self.state = LoopState.GAME_OVER
            return TurnResult(success=True, loop_state=self.state, winner=game_state.winner)

        decision = self.policy.select_action(game_state, actions)
        result = self.session.apply(decision.action)
        if not result.success:
            self.state = LoopState.STALLED
            return TurnResult(
                success=False,
                loop_state=self.state,
                action=decision.action.action_type.value,
                explanation=decision.explanation,
                errors=[result.error.message],
            )

        if self.session.game_state.is_over:
            self.state = LoopState.GAME_OVER
        return TurnResult(
            success=True,
            loop_state=self.state,
            action=decision.action.action_type.value,
            explanation=decision.explanation,
            messages=result.messages,
            winner=self.session.game_state.winner,
        )

    def run(self) -> list[TurnResult]:
        """Step until the match ends, a step fails, or max_steps is reached."""
        results = []
        for _ in range(self.max_steps):
            result = self.step()
            results.append(result)
            if self.state != LoopState.RUNNING:
                break
        return results

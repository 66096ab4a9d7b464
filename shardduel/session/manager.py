"""
Session Manager - Creates and manages match sessions.

LIFECYCLE:
1. Client starts a match -> create an ephemeral session (in-memory only)
2. During the match every request becomes an Action applied to the
   session's current snapshot; a rejected action leaves it untouched
3. Match ends -> session stays readable until the client ends it
4. Client ends it -> session destroyed, ALL state deleted

PERSISTENCE RULES:
- No database; match history is not kept across sessions
- The seed is kept so a match can be replayed from scratch
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..config import MatchConfig
from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import apply_action, create_initial_state
from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"  # Match in progress
    GAME_OVER = "game_over"  # Match completed, still readable
    ABANDONED = "abandoned"  # Client quit


@dataclass
class Session:
    """
    An ephemeral match session.

    Holds the current snapshot only. Older snapshots are dropped as soon
    as an action succeeds.
    """
    session_id: str
    game_state: GameState
    seed: int
    created_at: float

    state: SessionState = SessionState.ACTIVE
    actions_applied: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if the match is still being played."""
        return self.state == SessionState.ACTIVE

    def apply(self, action: Action) -> ActionResult:
        """
        Apply an action to the current snapshot.

        On success the session moves to the new snapshot; on failure it
        keeps the old one.
        """
        result = apply_action(self.game_state, action)
        if result.success:
            self.game_state = result.new_state
            self.actions_applied += 1
            if self.game_state.is_over:
                self.state = SessionState.GAME_OVER
                logger.info(
                    "Session %s finished: winner=%s", self.session_id, self.game_state.winner
                )
        return result


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions with a seeded initial state
    - Track sessions
    - Clean up ended and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: MatchConfig | None = None):
        # Without an explicit config, SHARDDUEL_* environment overrides apply
        self.config = config or MatchConfig.from_env()
        self._sessions: dict[str, Session] = {}

    def create_session(self, seed: int | None = None) -> Session:
        """
        Create a new match session.

        Args:
            seed: Match seed; derived from the clock when omitted

        Returns:
            New Session at level 1, player to act
        """
        if seed is None:
            seed = int(time.time() * 1000) & 0xFFFFFFFF
        game_state = create_initial_state(seed=seed, config=self.config)
        session = Session(
            session_id=str(uuid.uuid4()),
            game_state=game_state,
            seed=seed,
            created_at=time.time(),
        )
        self._sessions[session.session_id] = session
        logger.debug("Created session %s (seed=%s)", session.session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if reason != "completed" and session.is_active():
            session.state = SessionState.ABANDONED
        logger.debug("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """IDs of all sessions, finished ones included."""
        return list(self._sessions)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose match is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

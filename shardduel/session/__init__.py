"""
Session Module - Manages ephemeral match sessions.

A session represents one match:
- Created when a client starts a match
- Holds the current game state snapshot
- Applies actions through the reducer
- Destroyed when the client ends it

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]

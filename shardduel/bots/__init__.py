"""
Bots module - The AI opponent and scripted players.

Provides:
- decide_ai_action: the AI's play-or-hold rule
- run_ai_turn: simulates the AI's whole turn
- BotPolicy: Interface for whole-action bots (FirstLegalPolicy, ScriptedPolicy)
"""

from .policy import (
    BotPolicy,
    BotDecision,
    Decision,
    FirstLegalPolicy,
    PolicySnapshot,
    ScriptedPolicy,
    decide_ai_action,
)
from .ai_turn import run_ai_turn

__all__ = [
    "BotPolicy",
    "BotDecision",
    "Decision",
    "FirstLegalPolicy",
    "PolicySnapshot",
    "ScriptedPolicy",
    "decide_ai_action",
    "run_ai_turn",
]

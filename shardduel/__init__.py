"""
Shard Duel - Deterministic card-duel engine

A seeded, rules-driven engine for a five-level card duel against a
scripted AI. The engine provides:
- State management with copy-on-write snapshots
- Legal action generation
- Deterministic effect resolution
- The AI turn simulator and the travelling merchant
"""

__version__ = "0.1.0"

from .engine_core import create_initial_state, apply_action, legal_actions

__all__ = ["create_initial_state", "apply_action", "legal_actions", "__version__"]

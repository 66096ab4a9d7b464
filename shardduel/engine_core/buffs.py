"""
Player Buffs - Persistent modifiers that react to a player's card actions.

A buff is plain data on PlayerState (kind, name, stacks), so snapshots
stay cheap to clone. What a buff does lives in a handler table keyed by
buff kind and BuffHook, the same way EffectResolver keys card effects.

Hooks fire after the action they are named for, for the human player in
the reducer and for the AI inside its turn.
"""

from __future__ import annotations
from typing import Callable

from .state import GameState, PlayerState, PlayerBuff, CardInstance, BuffHook
from .effect_resolver import fmt_score

BuffHandler = Callable[[GameState, PlayerState, PlayerBuff, CardInstance], list[str]]

ADD_AMPLIFIER = "add-amplifier"
AMPLIFIED_CARD = "linear-boost"


def _amplify_add(state: GameState, player: PlayerState, buff: PlayerBuff, card: CardInstance) -> list[str]:
    """Each Linear Boost that resolves scores `stacks` more."""
    if card.definition_id != AMPLIFIED_CARD:
        return []
    player.score += buff.stacks
    return [
        f"{buff.name} adds +{fmt_score(buff.stacks)} for {player.log_prefix} "
        f"-> {fmt_score(player.score)}"
    ]


BUFF_HANDLERS: dict[str, dict[BuffHook, BuffHandler]] = {
    ADD_AMPLIFIER: {
        BuffHook.AFTER_PLAY: _amplify_add,
        BuffHook.AFTER_RELEASE: _amplify_add,
    },
}


def run_buff_hooks(
    state: GameState,
    player: PlayerState,
    hook: BuffHook,
    card: CardInstance,
) -> list[str]:
    """
    Let each of the player's buffs react to `hook`. Returns log lines.

    Buffs fire in the order they were granted. A buff kind with no
    handler for this hook is skipped.
    """
    messages = []
    for buff in list(player.buffs):
        handler = BUFF_HANDLERS.get(buff.kind, {}).get(hook)
        if handler:
            messages.extend(handler(state, player, buff, card))
    return messages

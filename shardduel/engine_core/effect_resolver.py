"""
Effect Resolver - Applies one card's effect to the duel.

This module is the only place that knows what a card does. Manual play,
releasing a held card, and the AI turn all route through apply_card_to(),
so the human and AI paths can never disagree about card semantics.

Resolution is immediate: there are no choices, no stack, and no pause
points. The resolver mutates the working copy it is handed (callers clone
first) and returns the log lines describing what happened.

Ordering rules:
- A negative effect aimed at the opponent (transfer, steal) consumes a
  shield first; only an unshielded opponent loses score.
- CardEffect.extra_draws is granted after the primary effect, whatever
  the effect type.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable

from .state import GameState, PlayerState, CardInstance, EffectType, PassToken
from ..games.duel.cards import clone_instance

Handler = Callable[[GameState, PlayerState, PlayerState, CardInstance], list[str]]

DEFAULT_PASS_THRESHOLD = 50


def fmt_score(value: float) -> str:
    """Render a score without a trailing .0 for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _value(card: CardInstance, default: float) -> float:
    value = card.effect.value
    return default if value is None else value


def _consume_shield(actor: PlayerState, opponent: PlayerState, card: CardInstance) -> str | None:
    """
    Spend one of the opponent's shields on a negative effect.

    Returns the log line if the effect was blocked, None if the opponent
    had no shield and the effect should land.
    """
    if opponent.shields <= 0:
        return None
    opponent.shields -= 1
    return (
        f"{opponent.log_prefix}'s shield blocked {actor.log_prefix}'s {card.name} "
        f"({opponent.shields} shield(s) left)"
    )


@dataclass
class EffectResolver:
    """
    Dispatches a card to the handler for its effect type.

    Unknown effect types fall back to a message-only handler. A duplicate
    whose held card is itself a duplicate fizzles instead of recursing.
    """
    handlers: dict[EffectType, Handler] = field(default_factory=dict)

    def __post_init__(self):
        defaults: dict[EffectType, Handler] = {
            EffectType.ADD: self._add,
            EffectType.MULTIPLY: self._multiply,
            EffectType.SET: self._set,
            EffectType.RESET: self._reset,
            EffectType.EXTRA_DRAW: self._extra_draw,
            EffectType.TRANSFER: self._transfer,
            EffectType.STEAL: self._steal,
            EffectType.VICTORY_SHARD: self._victory_shard,
            EffectType.LEVEL_PASS: self._level_pass,
            EffectType.SHIELD: self._shield,
            EffectType.DUPLICATE: self._duplicate,
            EffectType.MERCHANT_TOKEN: self._merchant_token,
            EffectType.WILDCARD: self._wildcard,
            EffectType.BUFF: self._buff,
            EffectType.NONE: self._no_effect,
        }
        defaults.update(self.handlers)
        self.handlers = defaults

    def apply(
        self,
        state: GameState,
        actor: PlayerState,
        opponent: PlayerState,
        card: CardInstance,
    ) -> list[str]:
        """Resolve `card` for `actor` against `opponent`. Returns log lines."""
        handler = self.handlers.get(card.effect.effect_type, self._no_effect)
        messages = handler(state, actor, opponent, card)

        if card.effect.extra_draws:
            actor.extra_draws += card.effect.extra_draws
            messages.append(
                f"{actor.log_prefix} gains {card.effect.extra_draws} extra draw(s) "
                f"({actor.draws_remaining} left)"
            )
        return messages

    # ------------------------------------------------------------------
    # Score effects
    # ------------------------------------------------------------------

    def _add(self, state, actor, opponent, card) -> list[str]:
        value = _value(card, 0)
        actor.score += value
        return [f"{actor.log_prefix} plays {card.name}: score +{fmt_score(value)} -> {fmt_score(actor.score)}"]

    def _multiply(self, state, actor, opponent, card) -> list[str]:
        value = _value(card, 1)
        actor.score *= value
        return [f"{actor.log_prefix} plays {card.name}: score x{fmt_score(value)} -> {fmt_score(actor.score)}"]

    def _set(self, state, actor, opponent, card) -> list[str]:
        actor.score = _value(card, actor.score)
        return [f"{actor.log_prefix} plays {card.name}: score set to {fmt_score(actor.score)}"]

    def _reset(self, state, actor, opponent, card) -> list[str]:
        actor.score = _value(card, 1)
        return [f"{actor.log_prefix} plays {card.name}: score reset to {fmt_score(actor.score)}"]

    def _wildcard(self, state, actor, opponent, card) -> list[str]:
        if actor.score < opponent.score:
            actor.score, opponent.score = opponent.score, actor.score
            return [
                f"{actor.log_prefix} plays {card.name}: scores swapped, "
                f"{actor.log_prefix} {fmt_score(actor.score)} / "
                f"{opponent.log_prefix} {fmt_score(opponent.score)}"
            ]
        return [
            f"{actor.log_prefix} plays {card.name}, but is not behind "
            f"({fmt_score(actor.score)} vs {fmt_score(opponent.score)}); nothing happens"
        ]

    # ------------------------------------------------------------------
    # Effects against the opponent
    # ------------------------------------------------------------------

    def _transfer(self, state, actor, opponent, card) -> list[str]:
        value = _value(card, 0)
        blocked = _consume_shield(actor, opponent, card)
        if blocked:
            return [blocked]
        opponent.score = max(0, opponent.score - value)
        return [
            f"{actor.log_prefix} plays {card.name}: {opponent.log_prefix} loses "
            f"{fmt_score(value)} -> {fmt_score(opponent.score)}"
        ]

    def _steal(self, state, actor, opponent, card) -> list[str]:
        value = _value(card, 0)
        blocked = _consume_shield(actor, opponent, card)
        if blocked:
            return [blocked]
        opponent.score = max(0, opponent.score - value)
        actor.score += value
        return [
            f"{actor.log_prefix} plays {card.name}: steals {fmt_score(value)} -> "
            f"{fmt_score(actor.score)} ({opponent.log_prefix} {fmt_score(opponent.score)})"
        ]

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def _extra_draw(self, state, actor, opponent, card) -> list[str]:
        value = int(_value(card, 1))
        actor.extra_draws += value
        return [f"{actor.log_prefix} plays {card.name}: +{value} extra draw(s)"]

    def _victory_shard(self, state, actor, opponent, card) -> list[str]:
        actor.victory_shards += int(_value(card, 1))
        return [
            f"{actor.log_prefix} collects a victory shard "
            f"({actor.victory_shards}/{state.config.shards_to_win})"
        ]

    def _level_pass(self, state, actor, opponent, card) -> list[str]:
        threshold = _value(card, DEFAULT_PASS_THRESHOLD)
        actor.pass_tokens.append(PassToken(level=state.level, threshold=threshold))
        return [
            f"{actor.log_prefix} banks a level pass: score floor {fmt_score(threshold)} "
            f"at the end of level {state.level}"
        ]

    def _shield(self, state, actor, opponent, card) -> list[str]:
        value = int(_value(card, 1))
        actor.shields += value
        return [f"{actor.log_prefix} gains {value} shield(s) ({actor.shields} total)"]

    def _merchant_token(self, state, actor, opponent, card) -> list[str]:
        actor.merchant_tokens += int(_value(card, 1))
        return [f"{actor.log_prefix} receives a merchant token ({actor.merchant_tokens})"]

    def _buff(self, state, actor, opponent, card) -> list[str]:
        buff = actor.add_buff(card.definition_id, card.name, _value(card, 1))
        return [f"{actor.log_prefix} gains {buff.name} (x{fmt_score(buff.stacks)})"]

    # ------------------------------------------------------------------
    # Meta
    # ------------------------------------------------------------------

    def _duplicate(self, state, actor, opponent, card) -> list[str]:
        held = actor.hold_slot
        if held is None:
            return [f"{actor.log_prefix} plays {card.name}, but the hold slot is empty"]
        if held.effect.effect_type == EffectType.DUPLICATE:
            return [f"{actor.log_prefix} plays {card.name}, but a copy of a copy fizzles"]

        copy = clone_instance(held, state.alloc_instance_id)
        messages = [f"{actor.log_prefix} copies held card {held.name}"]
        messages.extend(self.apply(state, actor, opponent, copy))
        return messages

    def _no_effect(self, state, actor, opponent, card) -> list[str]:
        return [f"{card.name} has no defined effect"]


_default_resolver = EffectResolver()


def apply_card_to(
    state: GameState,
    actor: PlayerState,
    opponent: PlayerState,
    card: CardInstance,
) -> list[str]:
    """
    Convenience function to resolve a card.

    Uses a shared EffectResolver with the standard handler table.
    """
    return _default_resolver.apply(state, actor, opponent, card)

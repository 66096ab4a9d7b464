"""
Game State - Snapshot of one duel at a point in time.

Design principles:
- Immutable by convention: operations clone() and mutate the clone
- Deterministic: everything random derives from rng_seed
- Self-checking: deck public counters must match a recount of the pile
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum

from ..config import MatchConfig, BASE_MATCH_CONFIG

PLAYER_LABEL = "Player"
AI_LABEL = "AI"


class InvariantError(AssertionError):
    """Raised when engine bookkeeping contradicts itself (a defect, not a rule violation)."""


class GamePhase(Enum):
    """Top-level match phases."""
    PLAYER_TURN = "playerTurn"
    AI_TURN = "aiTurn"
    LEVEL_END = "levelEnd"
    MERCHANT = "merchant"
    MATCH_END = "matchEnd"


class Rarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"


class EffectType(Enum):
    """Kinds of card effect. Each kind has exactly one resolver handler."""
    ADD = "add"
    MULTIPLY = "multiply"
    SET = "set"
    RESET = "reset"
    EXTRA_DRAW = "extraDraw"
    TRANSFER = "transfer"
    STEAL = "steal"
    VICTORY_SHARD = "victoryShard"
    LEVEL_PASS = "levelPass"
    SHIELD = "shield"
    DUPLICATE = "duplicate"
    MERCHANT_TOKEN = "merchantToken"
    WILDCARD = "wildcard"
    BUFF = "buff"
    NONE = "none"


@dataclass(frozen=True)
class CardEffect:
    """
    Effect descriptor carried by definitions and instances.

    On a definition, min_value/max_value describe a range that is rolled
    once when an instance is created; the instance then carries a concrete
    value. extra_draws is granted after the main effect, whatever its kind.
    """
    effect_type: EffectType
    value: float | None = None
    min_value: float | None = None
    max_value: float | None = None
    extra_draws: int = 0
    notes: str = ""

    @property
    def is_randomized(self) -> bool:
        return self.min_value is not None and self.max_value is not None


@dataclass(frozen=True)
class CardInstance:
    """
    A concrete card in play.

    definition_id points back into the catalog; instance_id is unique for
    the lifetime of a match.
    """
    instance_id: str
    definition_id: str
    name: str
    rarity: Rarity
    effect: CardEffect
    description: str = ""
    tags: tuple[str, ...] = ()

    @property
    def is_rare(self) -> bool:
        """Counts toward public_info.remaining_rare."""
        return self.rarity in (Rarity.RARE, Rarity.LEGENDARY)

    @property
    def is_shard(self) -> bool:
        """Counts toward public_info.remaining_shards."""
        return self.effect.effect_type == EffectType.VICTORY_SHARD


class BuffHook(Enum):
    """Points in a card action where a player's buffs get to react."""
    AFTER_DRAW = "afterDraw"
    AFTER_PLAY = "afterPlay"
    AFTER_STASH = "afterStash"
    AFTER_DISCARD = "afterDiscard"
    AFTER_RELEASE = "afterRelease"


@dataclass
class PlayerBuff:
    """
    A persistent modifier owned by one player.

    `kind` is the definition id of the card that granted it and selects
    the buff's handlers; granting the same kind again adds to `stacks`.
    """
    kind: str
    name: str
    stacks: float = 1


@dataclass(frozen=True)
class PassToken:
    """A banked score floor, applied at the end of `level` only."""
    level: int
    threshold: float


class MerchantCostType(Enum):
    SCORE_PENALTY = "scorePenalty"
    NEXT_DRAW_PENALTY = "nextDrawPenalty"
    START_SCORE_PENALTY = "startScorePenalty"


@dataclass(frozen=True)
class MerchantCost:
    cost_type: MerchantCostType
    cost_value: int
    description: str = ""


@dataclass(frozen=True)
class MerchantOffer:
    card: CardInstance
    cost: MerchantCost


@dataclass
class PublicInfo:
    """Deck facts both players are allowed to see."""
    remaining_rare: int = 0
    remaining_shards: int = 0


@dataclass
class DeckState:
    """Shared deck for the current level."""
    draw_pile: list[CardInstance] = field(default_factory=list)
    discard_pile: list[CardInstance] = field(default_factory=list)
    public_info: PublicInfo = field(default_factory=PublicInfo)
    original_size: int = 0
    # Hold-slot and backpack cards already in play when this deck was built
    carried_over: int = 0

    @property
    def is_empty(self) -> bool:
        return len(self.draw_pile) == 0

    def take_top(self) -> CardInstance | None:
        """
        Pop the head of the draw pile and update public counters.

        Mutates in place; callers operate on a cloned state.
        """
        if not self.draw_pile:
            return None
        card = self.draw_pile.pop(0)
        if card.is_rare:
            self.public_info.remaining_rare -= 1
        if card.is_shard:
            self.public_info.remaining_shards -= 1
        if self.public_info.remaining_rare < 0 or self.public_info.remaining_shards < 0:
            raise InvariantError(
                f"Public deck counters went negative after drawing {card.instance_id}"
            )
        return card

    def discard(self, card: CardInstance) -> None:
        self.discard_pile.append(card)

    def recount(self) -> PublicInfo:
        """Exhaustive recount of the draw pile."""
        return PublicInfo(
            remaining_rare=sum(1 for c in self.draw_pile if c.is_rare),
            remaining_shards=sum(1 for c in self.draw_pile if c.is_shard),
        )


@dataclass
class PlayerState:
    """
    State for one side of the duel.

    score/draws reset every level; shards, wins, shields, pass tokens,
    merchant tokens, buffs, the hold slot and the backpack carry over.
    """
    label: str
    log_prefix: str
    is_ai: bool = False

    score: float = 1
    draws_used: int = 0
    max_draws: int = 3
    extra_draws: int = 0

    hold_slot: CardInstance | None = None
    backpack: list[CardInstance] = field(default_factory=list)

    victory_shards: int = 0
    wins: int = 0
    shields: int = 0
    pass_tokens: list[PassToken] = field(default_factory=list)
    merchant_tokens: int = 0

    # Merchant costs that bite when the next level starts
    pending_penalties: list[MerchantCost] = field(default_factory=list)

    buffs: list[PlayerBuff] = field(default_factory=list)

    @property
    def draw_budget(self) -> int:
        return self.max_draws + self.extra_draws

    @property
    def draws_remaining(self) -> int:
        return max(0, self.draw_budget - self.draws_used)

    @property
    def is_holding(self) -> bool:
        return self.hold_slot is not None

    def add_buff(self, kind: str, name: str, stacks: float) -> PlayerBuff:
        """Grant a buff, stacking onto one of the same kind if present."""
        for buff in self.buffs:
            if buff.kind == kind:
                buff.stacks += stacks
                return buff
        buff = PlayerBuff(kind=kind, name=name, stacks=stacks)
        self.buffs.append(buff)
        return buff


@dataclass
class GameState:
    """
    Complete match state.

    This is the only object the outside world sees. Every engine operation
    takes one and returns a fresh one; an old snapshot is never modified.
    """
    phase: GamePhase
    level: int
    player: PlayerState
    ai: PlayerState
    deck: DeckState = field(default_factory=DeckState)
    config: MatchConfig = BASE_MATCH_CONFIG
    active_card: CardInstance | None = None
    merchant_offers: list[MerchantOffer] = field(default_factory=list)
    log: list[str] = field(default_factory=list)
    rng_seed: int = 0
    winner: str | None = None

    # Instance-id allocator; part of the state so replays reproduce ids
    next_instance_id: int = 1

    @property
    def players(self) -> tuple[PlayerState, PlayerState]:
        return (self.player, self.ai)

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.MATCH_END

    def opponent_of(self, player: PlayerState) -> PlayerState:
        return self.ai if player is self.player else self.player

    def alloc_instance_id(self, definition_id: str) -> str:
        """Hand out the next unique instance id."""
        instance_id = f"{definition_id}-{self.next_instance_id}"
        self.next_instance_id += 1
        return instance_id

    def append_log(self, *messages: str) -> None:
        self.log.extend(messages)

    def cards_in_circulation(self) -> int:
        """
        Cards anywhere in the game: piles, active card, hold slots, backpacks.

        Always equals deck.original_size + deck.carried_over. Duplicate
        clones are resolved without being placed, so they never count.
        """
        held = sum(1 for p in self.players if p.hold_slot is not None)
        packed = sum(len(p.backpack) for p in self.players)
        active = 1 if self.active_card is not None else 0
        return len(self.deck.draw_pile) + len(self.deck.discard_pile) + active + held + packed

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

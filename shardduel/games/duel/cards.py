"""
Duel Cards - Card definitions for the five-floor ladder.

Card structure:
- Rarity (common, uncommon, rare, legendary)
- Level range (inclusive) in which the card can appear in a deck
- Base weight, scaled by the deck builder into a copy count
- Effect, optionally with a [min, max] value rolled per instance

The merchant-exclusive cards never enter a level deck; they are only
offered by the travelling merchant between levels.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import math
import re
from typing import Callable

from ...engine_core.rng import SeededRng
from ...engine_core.state import CardEffect, CardInstance, EffectType, Rarity

MERCHANT_ONLY_TAG = "merchant-only"

_LEGACY_EXTRA_DRAW = re.compile(r"^gain-extra-draw-(\d+)$")


@dataclass(frozen=True)
class CardDefinition:
    """
    A card template.

    Instances are created with create_instance(); the definition itself
    never enters a pile.
    """
    id: str
    name: str
    rarity: Rarity
    effect: CardEffect
    description: str = ""
    keywords: tuple[str, ...] = ()
    level_range: tuple[int, int] = (1, 5)
    base_weight: float = 1
    max_copies: int | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    def available_at(self, level: int) -> bool:
        low, high = self.level_range
        return low <= level <= high


def effect(
    effect_type: EffectType,
    value: float | None = None,
    min_value: float | None = None,
    max_value: float | None = None,
    notes: str = "",
) -> CardEffect:
    """
    Build a CardEffect, folding the legacy extra-draw notes into a field.

    Older card data spelled "also grant N extra draws" as the notes string
    "gain-extra-draw-N". The resolver only reads CardEffect.extra_draws.
    """
    extra_draws = 0
    match = _LEGACY_EXTRA_DRAW.match(notes)
    if match:
        extra_draws = int(match.group(1))
    return CardEffect(
        effect_type=effect_type,
        value=value,
        min_value=min_value,
        max_value=max_value,
        extra_draws=extra_draws,
        notes=notes,
    )


# ============================================================================
# Level deck cards
# ============================================================================

LINEAR_BOOST = CardDefinition(
    id="linear-boost",
    name="Linear Boost",
    description="Gain 2-6 points. Combos well with a held card.",
    keywords=("score", "combo", "low risk"),
    rarity=Rarity.COMMON,
    level_range=(1, 5),
    base_weight=6,
    effect=effect(EffectType.ADD, min_value=2, max_value=6),
    tags=("combo",),
)

PRECISE_SUBTRACT = CardDefinition(
    id="precise-subtract",
    name="Precise Subtract",
    description="Opponent loses 1-4 points. A shield absorbs it instead.",
    keywords=("disrupt", "shield breaker"),
    rarity=Rarity.COMMON,
    level_range=(2, 5),
    base_weight=4,
    effect=effect(EffectType.TRANSFER, min_value=1, max_value=4),
    tags=("aggressive",),
)

RISK_RESET = CardDefinition(
    id="risk-reset",
    name="Risk Reset",
    description="Reset your score to 1 and gain 2 extra draws.",
    keywords=("risk", "extra draw"),
    rarity=Rarity.UNCOMMON,
    level_range=(1, 5),
    base_weight=2,
    effect=effect(EffectType.RESET, value=1, notes="gain-extra-draw-2"),
    tags=("risk",),
)

POWER_DOUBLE = CardDefinition(
    id="power-double",
    name="Power Double",
    description="Multiply your score by 2.",
    keywords=("multiplier", "high reward"),
    rarity=Rarity.UNCOMMON,
    level_range=(2, 5),
    base_weight=3,
    effect=effect(EffectType.MULTIPLY, value=2),
    tags=("multiplier",),
)

TRIPLE_CHARGE = CardDefinition(
    id="triple-charge",
    name="Triple Charge",
    description="Gain 4-8 points and 1 extra draw.",
    keywords=("score", "extra draw", "combo"),
    rarity=Rarity.UNCOMMON,
    level_range=(3, 5),
    base_weight=2,
    effect=effect(EffectType.ADD, min_value=4, max_value=8, notes="gain-extra-draw-1"),
    tags=("combo",),
)

SHADOW_STEAL = CardDefinition(
    id="shadow-steal",
    name="Shadow Steal",
    description="Take 2-5 points from your opponent. A shield absorbs it instead.",
    keywords=("disrupt", "score"),
    rarity=Rarity.UNCOMMON,
    level_range=(3, 5),
    base_weight=2,
    effect=effect(EffectType.STEAL, min_value=2, max_value=5),
    tags=("aggressive",),
)

FRESH_START = CardDefinition(
    id="fresh-start",
    name="Fresh Start",
    description="Set your score to exactly 10.",
    keywords=("score", "floor"),
    rarity=Rarity.COMMON,
    level_range=(2, 5),
    base_weight=1,
    effect=effect(EffectType.SET, value=10),
    tags=("risk",),
)

SECOND_WIND = CardDefinition(
    id="second-wind",
    name="Second Wind",
    description="Gain 1 extra draw this level.",
    keywords=("extra draw",),
    rarity=Rarity.COMMON,
    level_range=(1, 5),
    base_weight=2,
    effect=effect(EffectType.EXTRA_DRAW, value=1),
    tags=("tempo",),
)

VICTORY_SHARD = CardDefinition(
    id="victory-shard",
    name="Victory Shard",
    description="Collect 3 to win the whole match outright. Carries over between levels.",
    keywords=("victory shard", "collectible"),
    rarity=Rarity.RARE,
    level_range=(1, 5),
    base_weight=1,
    max_copies=1,
    effect=effect(EffectType.VICTORY_SHARD, value=1),
    tags=("collectible",),
)

LEVEL_PASS = CardDefinition(
    id="level-pass",
    name="Level Pass",
    description="At level end, raise your score to at least 50.",
    keywords=("floor", "level pass"),
    rarity=Rarity.RARE,
    level_range=(2, 5),
    base_weight=1,
    effect=effect(EffectType.LEVEL_PASS, value=50),
    tags=("pass",),
)

HOLD_AMPLIFIER = CardDefinition(
    id="hold-amplifier",
    name="Hold Amplifier",
    description="If you hold a card, copy it and resolve the copy immediately.",
    keywords=("hold slot", "copy"),
    rarity=Rarity.RARE,
    level_range=(3, 5),
    base_weight=1,
    effect=effect(EffectType.DUPLICATE),
    tags=("combo",),
)

MERCHANT_TOKEN = CardDefinition(
    id="merchant-token",
    name="Merchant's Letter",
    description="A letter of recommendation for the travelling merchant.",
    keywords=("merchant",),
    rarity=Rarity.LEGENDARY,
    level_range=(2, 4),
    base_weight=0.3,
    effect=effect(EffectType.MERCHANT_TOKEN, value=1),
    tags=("merchant",),
)

COUNTER_SHIELD = CardDefinition(
    id="counter-shield",
    name="Counter Shield",
    description="Gain 1 shield. Blocks one negative effect.",
    keywords=("shield", "defense"),
    rarity=Rarity.UNCOMMON,
    level_range=(1, 5),
    base_weight=2,
    effect=effect(EffectType.SHIELD, value=1),
    tags=("defense",),
)

WILDCARD_SWITCH = CardDefinition(
    id="wildcard-switch",
    name="Wildcard Switch",
    description="Swap scores with your opponent. Nothing happens if you are ahead.",
    keywords=("comeback", "swap"),
    rarity=Rarity.LEGENDARY,
    level_range=(4, 5),
    base_weight=0.5,
    effect=effect(EffectType.WILDCARD),
    tags=("swing",),
)

ADD_AMPLIFIER = CardDefinition(
    id="add-amplifier",
    name="Add Amplifier",
    description="Every Linear Boost you play or release from now on scores 1-3 more. Stacks.",
    keywords=("buff", "combo", "permanent"),
    rarity=Rarity.UNCOMMON,
    level_range=(2, 5),
    base_weight=1.5,
    effect=effect(EffectType.BUFF, min_value=1, max_value=3),
    tags=("combo",),
)


CARD_LIBRARY: list[CardDefinition] = [
    LINEAR_BOOST,
    PRECISE_SUBTRACT,
    RISK_RESET,
    POWER_DOUBLE,
    TRIPLE_CHARGE,
    SHADOW_STEAL,
    FRESH_START,
    SECOND_WIND,
    VICTORY_SHARD,
    LEVEL_PASS,
    HOLD_AMPLIFIER,
    MERCHANT_TOKEN,
    COUNTER_SHIELD,
    WILDCARD_SWITCH,
    ADD_AMPLIFIER,
]


# ============================================================================
# Merchant exclusives
# ============================================================================

MERCHANT_JACKPOT = CardDefinition(
    id="merchant-jackpot",
    name="Merchant Jackpot",
    description="Gain 12 points and 1 extra draw.",
    keywords=("merchant", "extra draw"),
    rarity=Rarity.RARE,
    effect=effect(EffectType.ADD, value=12, notes="gain-extra-draw-1"),
    tags=(MERCHANT_ONLY_TAG,),
)

MERCHANT_SHIELD = CardDefinition(
    id="merchant-shield",
    name="Secret Armor",
    description="Gain 2 shields.",
    keywords=("defense", "shield"),
    rarity=Rarity.RARE,
    effect=effect(EffectType.SHIELD, value=2),
    tags=(MERCHANT_ONLY_TAG, "defense"),
)

MERCHANT_PASS = CardDefinition(
    id="merchant-pass",
    name="Global Pass",
    description="At the end of the level it is used in, raise your score to at least 60.",
    keywords=("floor", "pass"),
    rarity=Rarity.LEGENDARY,
    base_weight=0.6,
    effect=effect(EffectType.LEVEL_PASS, value=60),
    tags=(MERCHANT_ONLY_TAG, "pass"),
)


MERCHANT_EXCLUSIVE: list[CardDefinition] = [
    MERCHANT_JACKPOT,
    MERCHANT_SHIELD,
    MERCHANT_PASS,
]


# ============================================================================
# Lookup helpers
# ============================================================================

_BY_ID = {card.id: card for card in CARD_LIBRARY + MERCHANT_EXCLUSIVE}


def get_definition(definition_id: str) -> CardDefinition:
    """
    Look up a definition by id.

    An unknown id means an instance was built from data outside the
    catalog; that is a defect, so this raises KeyError.
    """
    return _BY_ID[definition_id]


def get_cards_for_level(level: int) -> list[CardDefinition]:
    """Deck-eligible definitions for a level, in declared order."""
    return [card for card in CARD_LIBRARY if card.available_at(level)]


def get_merchant_pool(level: int) -> list[CardDefinition]:
    """Merchant-exclusive definitions for a level, in declared order."""
    return [card for card in MERCHANT_EXCLUSIVE if card.available_at(level)]


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def roll_effect(card_effect: CardEffect, rng: SeededRng) -> CardEffect:
    """Resolve a [min, max] range into a concrete value."""
    if not card_effect.is_randomized:
        return card_effect
    span = card_effect.max_value - card_effect.min_value
    value = card_effect.min_value + _round_half_up(rng.next() * span)
    return replace(card_effect, value=value)


def create_instance(
    definition: CardDefinition,
    rng: SeededRng,
    allocate_id: Callable[[str], str],
) -> CardInstance:
    """Instantiate a definition with a fresh id and a rolled effect."""
    return CardInstance(
        instance_id=allocate_id(definition.id),
        definition_id=definition.id,
        name=definition.name,
        rarity=definition.rarity,
        effect=roll_effect(definition.effect, rng),
        description=definition.description,
        tags=definition.tags,
    )


def clone_instance(card: CardInstance, allocate_id: Callable[[str], str]) -> CardInstance:
    """Copy an instance under a new identity (used by duplicate)."""
    return replace(card, instance_id=allocate_id(card.definition_id))

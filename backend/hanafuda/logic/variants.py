"""
Declarative rule tables for every supported variant.

Each variant is a VariantRules value: its yaku list, category point values,
deal sizes, continuation style and dealer rotation. The engine selects one
table at match start and never branches on the variant name for scoring
data; adding a variant is a matter of adding a table here.
"""

from pydantic import BaseModel, ConfigDict

from hanafuda.logic.cards import (
    ANIMALS,
    BLUE_RIBBONS,
    BOAR,
    BRIGHTS,
    BUTTERFLIES,
    CHAFF,
    CURTAIN,
    DEER,
    MOON,
    PLAIN_RED_RIBBONS,
    POETRY_RIBBONS,
    RAIN_MAN,
    REGULAR_BRIGHTS,
    RIBBONS,
    SAKE_CUP,
    cards_of_month,
)
from hanafuda.logic.enums import CardCategory, ContinuationStyle, DealerRotation, Variant
from hanafuda.logic.yaku import SakeViewing, YakuRule

BOAR_DEER_BUTTERFLY = frozenset({BOAR, DEER, BUTTERFLIES})
WILLOW_CARDS = frozenset(cards_of_month(11))


class VariantRules(BaseModel):
    """Static rule table for one variant."""

    model_config = ConfigDict(frozen=True)

    variant: Variant
    yaku_rules: tuple[YakuRule, ...]
    card_values: dict[CardCategory, int]
    deal_sizes: dict[int, tuple[int, int]]  # num_players -> (hand size, field size)
    has_teyaku: bool = False
    continuation: ContinuationStyle = ContinuationStyle.NONE
    safe_threshold: int = 7
    dealer_rotation: DealerRotation = DealerRotation.ROTATE

    def card_value(self, category: CardCategory) -> int:
        return self.card_values[category]


KOIKOI_YAKU: tuple[YakuRule, ...] = (
    YakuRule(name="Five Brights", pool=BRIGHTS, min_count=5, points=15, exclusive_group="brights"),
    YakuRule(name="Four Brights", pool=REGULAR_BRIGHTS, min_count=4, points=10, exclusive_group="brights"),
    YakuRule(
        name="Rainy Four Brights",
        pool=BRIGHTS,
        min_count=4,
        points=8,
        required=frozenset({RAIN_MAN}),
        exclusive_group="brights",
    ),
    YakuRule(name="Three Brights", pool=REGULAR_BRIGHTS, min_count=3, points=6, exclusive_group="brights"),
    YakuRule(name="Poetry Ribbons", pool=POETRY_RIBBONS, min_count=3, points=6),
    YakuRule(name="Blue Ribbons", pool=BLUE_RIBBONS, min_count=3, points=6),
    YakuRule(name="Boar-Deer-Butterfly", pool=BOAR_DEER_BUTTERFLY, min_count=3, points=6),
    YakuRule(name="Ribbons", pool=RIBBONS, min_count=5, points=5, bonus_per_extra=1),
    YakuRule(name="Animals", pool=ANIMALS, min_count=5, points=5, bonus_per_extra=1),
    YakuRule(name="Chaff", pool=CHAFF, min_count=10, points=1, bonus_per_extra=1, sake_cup_as_chaff=True),
    YakuRule(
        name="Viewing Sake",
        pool=frozenset({CURTAIN, SAKE_CUP}),
        min_count=2,
        points=3,
        sake_viewing=SakeViewing.VIEWING,
    ),
    YakuRule(
        name="Moon Viewing Sake",
        pool=frozenset({MOON, SAKE_CUP}),
        min_count=2,
        points=3,
        sake_viewing=SakeViewing.MOON_VIEWING,
    ),
)

SAKURA_YAKU_VALUE = 50

SAKURA_YAKU: tuple[YakuRule, ...] = (
    YakuRule(name="Goko", pool=BRIGHTS, min_count=5, points=SAKURA_YAKU_VALUE, exclusive_group="brights"),
    YakuRule(name="Shiko", pool=REGULAR_BRIGHTS, min_count=4, points=SAKURA_YAKU_VALUE, exclusive_group="brights"),
    YakuRule(
        name="Ame-Shiko",
        pool=BRIGHTS,
        min_count=4,
        points=SAKURA_YAKU_VALUE,
        required=frozenset({RAIN_MAN}),
        exclusive_group="brights",
    ),
    YakuRule(name="Sanko", pool=REGULAR_BRIGHTS, min_count=3, points=SAKURA_YAKU_VALUE, exclusive_group="brights"),
    YakuRule(name="Akatan", pool=POETRY_RIBBONS, min_count=3, points=SAKURA_YAKU_VALUE),
    YakuRule(name="Aotan", pool=BLUE_RIBBONS, min_count=3, points=SAKURA_YAKU_VALUE),
    YakuRule(name="Tanzaku", pool=PLAIN_RED_RIBBONS, min_count=3, points=SAKURA_YAKU_VALUE),
    YakuRule(name="Ino-Shika-Cho", pool=BOAR_DEER_BUTTERFLY, min_count=3, points=SAKURA_YAKU_VALUE),
)

HACHI_HACHI_DEKIYAKU: tuple[YakuRule, ...] = (
    YakuRule(name="Five Brights", pool=BRIGHTS, min_count=5, points=12, exclusive_group="brights"),
    YakuRule(name="Four Brights", pool=BRIGHTS, min_count=4, points=10, exclusive_group="brights"),
    YakuRule(name="Seven Ribbons", pool=RIBBONS - WILLOW_CARDS, min_count=7, points=10),
    YakuRule(name="Poetry Ribbons", pool=POETRY_RIBBONS, min_count=3, points=7),
    YakuRule(name="Blue Ribbons", pool=BLUE_RIBBONS, min_count=3, points=7),
    YakuRule(name="Boar-Deer-Butterfly", pool=BOAR_DEER_BUTTERFLY, min_count=3, points=7),
)

KOIKOI_RULES = VariantRules(
    variant=Variant.KOIKOI,
    yaku_rules=KOIKOI_YAKU,
    card_values={CardCategory.BRIGHT: 20, CardCategory.ANIMAL: 10, CardCategory.RIBBON: 5, CardCategory.CHAFF: 1},
    deal_sizes={2: (8, 8)},
    continuation=ContinuationStyle.KOIKOI,
    safe_threshold=7,
    dealer_rotation=DealerRotation.WINNER,
)

SAKURA_RULES = VariantRules(
    variant=Variant.SAKURA,
    yaku_rules=SAKURA_YAKU,
    card_values={CardCategory.BRIGHT: 20, CardCategory.ANIMAL: 5, CardCategory.RIBBON: 10, CardCategory.CHAFF: 0},
    deal_sizes={2: (10, 8), 3: (7, 6), 4: (5, 8)},
    continuation=ContinuationStyle.NONE,
    safe_threshold=SAKURA_YAKU_VALUE,
    dealer_rotation=DealerRotation.LOSER_HEADS_UP,
)

HACHI_HACHI_RULES = VariantRules(
    variant=Variant.HACHI_HACHI,
    yaku_rules=HACHI_HACHI_DEKIYAKU,
    card_values={CardCategory.BRIGHT: 20, CardCategory.ANIMAL: 10, CardCategory.RIBBON: 5, CardCategory.CHAFF: 1},
    deal_sizes={3: (7, 6)},
    has_teyaku=True,
    continuation=ContinuationStyle.SAGE_SHOUBU,
    safe_threshold=10,
    dealer_rotation=DealerRotation.ROTATE,
)

_RULES_BY_VARIANT: dict[Variant, VariantRules] = {
    Variant.KOIKOI: KOIKOI_RULES,
    Variant.SAKURA: SAKURA_RULES,
    Variant.HACHI_HACHI: HACHI_HACHI_RULES,
}


def get_variant_rules(variant: Variant) -> VariantRules:
    """Return the rule table for a card-play variant. Match mode has no table."""
    try:
        return _RULES_BY_VARIANT[variant]
    except KeyError:
        raise ValueError(f"variant {variant.value} has no card-play rule table") from None

"""
Static catalog of the 48 hanafuda cards.

Cards are identified by a stable id (1-48, four per month in month order).
Every zone in the engine holds card ids; use get_card() to look up the
immutable Card value.
"""

from pydantic import BaseModel, ConfigDict

from hanafuda.logic.enums import CardCategory, RibbonColor

NUM_CARDS = 48
NUM_MONTHS = 12
CARDS_PER_MONTH = 4

BASE_POINTS: dict[CardCategory, int] = {
    CardCategory.BRIGHT: 20,
    CardCategory.ANIMAL: 10,
    CardCategory.RIBBON: 5,
    CardCategory.CHAFF: 1,
}

# named cards referenced by yaku tables
CRANE = 1
CURTAIN = 9
BUTTERFLIES = 21
BOAR = 25
MOON = 29
SAKE_CUP = 33
DEER = 37
RAIN_MAN = 41
LIGHTNING = 44
PHOENIX = 45

POETRY_RIBBONS = frozenset({2, 6, 10})
BLUE_RIBBONS = frozenset({22, 34, 38})
PLAIN_RED_RIBBONS = frozenset({14, 18, 26, 43})


class Card(BaseModel):
    """A single hanafuda card."""

    model_config = ConfigDict(frozen=True)

    id: int
    month: int
    category: CardCategory
    name: str
    is_special_bright: bool = False
    ribbon_color: RibbonColor | None = None

    @property
    def base_points(self) -> int:
        return BASE_POINTS[self.category]


def _bright(card_id: int, month: int, name: str, *, special: bool = False) -> Card:
    return Card(id=card_id, month=month, category=CardCategory.BRIGHT, name=name, is_special_bright=special)


def _animal(card_id: int, month: int, name: str) -> Card:
    return Card(id=card_id, month=month, category=CardCategory.ANIMAL, name=name)


def _ribbon(card_id: int, month: int, name: str, color: RibbonColor = RibbonColor.RED) -> Card:
    return Card(id=card_id, month=month, category=CardCategory.RIBBON, name=name, ribbon_color=color)


def _chaff(card_id: int, month: int, name: str) -> Card:
    return Card(id=card_id, month=month, category=CardCategory.CHAFF, name=name)


DECK: tuple[Card, ...] = (
    # January - pine
    _bright(1, 1, "Crane and Sun"),
    _ribbon(2, 1, "Pine Poetry Ribbon"),
    _chaff(3, 1, "Pine"),
    _chaff(4, 1, "Pine"),
    # February - plum blossom
    _animal(5, 2, "Bush Warbler"),
    _ribbon(6, 2, "Plum Poetry Ribbon"),
    _chaff(7, 2, "Plum Blossom"),
    _chaff(8, 2, "Plum Blossom"),
    # March - cherry blossom
    _bright(9, 3, "Curtain"),
    _ribbon(10, 3, "Cherry Poetry Ribbon"),
    _chaff(11, 3, "Cherry Blossom"),
    _chaff(12, 3, "Cherry Blossom"),
    # April - wisteria
    _animal(13, 4, "Cuckoo"),
    _ribbon(14, 4, "Wisteria Ribbon"),
    _chaff(15, 4, "Wisteria"),
    _chaff(16, 4, "Wisteria"),
    # May - iris
    _animal(17, 5, "Eight-plank Bridge"),
    _ribbon(18, 5, "Iris Ribbon"),
    _chaff(19, 5, "Iris"),
    _chaff(20, 5, "Iris"),
    # June - peony
    _animal(21, 6, "Butterflies"),
    _ribbon(22, 6, "Peony Blue Ribbon", RibbonColor.BLUE),
    _chaff(23, 6, "Peony"),
    _chaff(24, 6, "Peony"),
    # July - bush clover
    _animal(25, 7, "Boar"),
    _ribbon(26, 7, "Clover Ribbon"),
    _chaff(27, 7, "Bush Clover"),
    _chaff(28, 7, "Bush Clover"),
    # August - susuki grass
    _bright(29, 8, "Full Moon"),
    _animal(30, 8, "Geese"),
    _chaff(31, 8, "Susuki Grass"),
    _chaff(32, 8, "Susuki Grass"),
    # September - chrysanthemum
    _animal(33, 9, "Sake Cup"),
    _ribbon(34, 9, "Chrysanthemum Blue Ribbon", RibbonColor.BLUE),
    _chaff(35, 9, "Chrysanthemum"),
    _chaff(36, 9, "Chrysanthemum"),
    # October - maple
    _animal(37, 10, "Deer"),
    _ribbon(38, 10, "Maple Blue Ribbon", RibbonColor.BLUE),
    _chaff(39, 10, "Maple"),
    _chaff(40, 10, "Maple"),
    # November - willow
    _bright(41, 11, "Rain Man", special=True),
    _animal(42, 11, "Swallow"),
    _ribbon(43, 11, "Willow Ribbon"),
    _chaff(44, 11, "Lightning"),
    # December - paulownia
    _bright(45, 12, "Phoenix"),
    _chaff(46, 12, "Paulownia"),
    _chaff(47, 12, "Paulownia"),
    _chaff(48, 12, "Paulownia"),
)

ALL_CARD_IDS: tuple[int, ...] = tuple(card.id for card in DECK)

_CARDS_BY_ID: dict[int, Card] = {card.id: card for card in DECK}


def get_card(card_id: int) -> Card:
    """Look up a card by id. Raises KeyError for ids outside 1-48."""
    return _CARDS_BY_ID[card_id]


def is_valid_card_id(card_id: int) -> bool:
    return card_id in _CARDS_BY_ID


def card_month(card_id: int) -> int:
    return _CARDS_BY_ID[card_id].month


def card_category(card_id: int) -> CardCategory:
    return _CARDS_BY_ID[card_id].category


def cards_of_month(month: int) -> tuple[int, ...]:
    """Return the four card ids of a month in id order."""
    return tuple(card.id for card in DECK if card.month == month)


def cards_of_category(category: CardCategory) -> frozenset[int]:
    return frozenset(card.id for card in DECK if card.category == category)


BRIGHTS = cards_of_category(CardCategory.BRIGHT)
ANIMALS = cards_of_category(CardCategory.ANIMAL)
RIBBONS = cards_of_category(CardCategory.RIBBON)
CHAFF = cards_of_category(CardCategory.CHAFF)
REGULAR_BRIGHTS = frozenset(card_id for card_id in BRIGHTS if not get_card(card_id).is_special_bright)


def format_cards(card_ids: tuple[int, ...] | list[int]) -> str:
    """Human-readable card list for log lines."""
    return ", ".join(f"{get_card(card_id).name}#{card_id}" for card_id in card_ids)

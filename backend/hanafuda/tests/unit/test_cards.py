"""Unit tests for the static card catalog."""

import pytest

from hanafuda.logic.cards import (
    ALL_CARD_IDS,
    ANIMALS,
    BRIGHTS,
    CHAFF,
    DECK,
    NUM_CARDS,
    RAIN_MAN,
    REGULAR_BRIGHTS,
    RIBBONS,
    card_month,
    cards_of_month,
    format_cards,
    get_card,
    is_valid_card_id,
)
from hanafuda.logic.enums import CardCategory, RibbonColor


class TestDeckComposition:
    def test_forty_eight_unique_ids(self):
        assert len(DECK) == NUM_CARDS
        assert ALL_CARD_IDS == tuple(range(1, 49))

    def test_four_cards_per_month_in_id_order(self):
        for month in range(1, 13):
            assert cards_of_month(month) == tuple(range(month * 4 - 3, month * 4 + 1))

    def test_category_counts(self):
        assert len(BRIGHTS) == 5
        assert len(ANIMALS) == 9
        assert len(RIBBONS) == 10
        assert len(CHAFF) == 24

    def test_rain_man_is_the_only_special_bright(self):
        assert get_card(RAIN_MAN).is_special_bright
        assert REGULAR_BRIGHTS == BRIGHTS - {RAIN_MAN}

    def test_blue_ribbons(self):
        blue = {card.id for card in DECK if card.ribbon_color == RibbonColor.BLUE}
        assert blue == {22, 34, 38}

    def test_lightning_counts_as_chaff(self):
        assert get_card(44).category == CardCategory.CHAFF
        assert card_month(44) == 11


class TestCardLookup:
    def test_get_card(self):
        card = get_card(29)
        assert card.name == "Full Moon"
        assert card.month == 8
        assert card.base_points == 20

    def test_unknown_id_raises(self):
        with pytest.raises(KeyError):
            get_card(49)

    @pytest.mark.parametrize(("card_id", "expected"), [(1, True), (48, True), (0, False), (49, False)])
    def test_is_valid_card_id(self, card_id, expected):
        assert is_valid_card_id(card_id) is expected

    def test_format_cards(self):
        assert format_cards([1, 33]) == "Crane and Sun#1, Sake Cup#33"

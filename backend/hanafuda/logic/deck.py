"""
Deck management: shuffling and dealing per variant.

Deal order follows the table procedure: half of the field first, then the
hands in dealer-relative order, then the rest of the field. The remaining
cards form the draw deck, drawn from the front.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hanafuda.logic.cards import ALL_CARD_IDS, NUM_CARDS, card_category, card_month
from hanafuda.logic.rng import generate_shuffled_deck

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hanafuda.logic.variants import VariantRules

CHITSIOBIKI_COUNT = 3


class Deal(BaseModel):
    """Result of dealing a shuffled deck."""

    model_config = ConfigDict(frozen=True)

    hands: tuple[tuple[int, ...], ...]  # indexed by seat
    field: tuple[int, ...]
    deck: tuple[int, ...]
    turns_per_player: int


class HandTrade(BaseModel):
    """One card a player traded away for the top of the deck."""

    model_config = ConfigDict(frozen=True)

    seat: int
    given: int
    received: int


def create_deck(seed: str, round_number: int) -> tuple[int, ...]:
    """Shuffle the 48 cards for a round from the match seed."""
    return tuple(generate_shuffled_deck(seed, round_number))


def create_deck_from_cards(cards: Sequence[int]) -> tuple[int, ...]:
    """
    Use a caller-provided card order (tests, replays).

    Raises ValueError unless the order is a permutation of all 48 cards.
    """
    if len(cards) != NUM_CARDS or sorted(cards) != list(ALL_CARD_IDS):
        raise ValueError(f"deck must be a permutation of the {NUM_CARDS} card ids")
    return tuple(cards)


def get_deal_sizes(rules: VariantRules, num_players: int) -> tuple[int, int]:
    """Return (hand size, field size) for a variant and player count."""
    try:
        return rules.deal_sizes[num_players]
    except KeyError:
        raise ValueError(f"{rules.variant.value} cannot be dealt for {num_players} players") from None


def deal(
    deck: Sequence[int],
    *,
    num_players: int,
    dealer_seat: int,
    hand_size: int,
    field_size: int,
) -> Deal:
    """Deal hands and field from the front of the deck."""
    needed = hand_size * num_players + field_size
    if needed > len(deck):
        raise ValueError(f"deal needs {needed} cards but the deck holds {len(deck)}")

    cards = list(deck)
    first_field_half = field_size // 2
    field = cards[:first_field_half]
    position = first_field_half

    hands: list[tuple[int, ...]] = [() for _ in range(num_players)]
    for offset in range(num_players):
        seat = (dealer_seat + offset) % num_players
        hands[seat] = tuple(cards[position : position + hand_size])
        position += hand_size

    remaining_field = field_size - first_field_half
    field.extend(cards[position : position + remaining_field])
    position += remaining_field

    draw_deck = tuple(cards[position:])
    turns_per_player = min(hand_size, len(draw_deck) // num_players)
    return Deal(hands=tuple(hands), field=tuple(field), deck=draw_deck, turns_per_player=turns_per_player)


def trade_three_of_a_kind(dealt: Deal, rules: VariantRules) -> tuple[Deal, tuple[HandTrade, ...]]:
    """
    Sakura chitsiobiki: a hand dealt three cards of one month gives up the
    least valuable of them (highest id on ties) for the top of the deck.

    The traded card goes to the bottom of the deck. Triples are read from
    the hands as dealt, in seat order and then month order.
    """
    hands = [list(hand) for hand in dealt.hands]
    deck = list(dealt.deck)
    trades: list[HandTrade] = []
    for seat, dealt_hand in enumerate(dealt.hands):
        months = sorted({card_month(card_id) for card_id in dealt_hand})
        for month in months:
            triple = [card_id for card_id in dealt_hand if card_month(card_id) == month]
            if len(triple) != CHITSIOBIKI_COUNT or not deck:
                continue
            given = min(triple, key=lambda card_id: (rules.card_value(card_category(card_id)), -card_id))
            received = deck.pop(0)
            hands[seat][hands[seat].index(given)] = received
            deck.append(given)
            trades.append(HandTrade(seat=seat, given=given, received=received))

    traded = dealt.model_copy(update={"hands": tuple(tuple(hand) for hand in hands), "deck": tuple(deck)})
    return traded, tuple(trades)

from __future__ import annotations

from typing import TYPE_CHECKING

from hanafuda.logic.cards import ALL_CARD_IDS
from hanafuda.logic.enums import RoundPhase
from hanafuda.logic.settings import GameSettings
from hanafuda.logic.state import HanafudaGameState, HanafudaPlayer, HanafudaRoundState
from hanafuda.logic.types import SeatConfig, YakuResult

if TYPE_CHECKING:
    from collections.abc import Sequence

# 64 hex chars = 32 bytes
FIXED_SEED = "ab" * 32


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def create_player(
    seat: int = 0,
    name: str | None = None,
    *,
    hand: Sequence[int] | None = None,
    captured: Sequence[int] | None = None,
    yaku: Sequence[YakuResult] | None = None,
    is_ai: bool = False,
    continuation_count: int = 0,
) -> HanafudaPlayer:
    """Create a HanafudaPlayer with sensible defaults for testing."""
    return HanafudaPlayer(
        seat=seat,
        name=name if name is not None else f"Player{seat}",
        is_ai=is_ai,
        hand=tuple(hand) if hand is not None else (),
        dealt_hand=tuple(hand) if hand is not None else (),
        captured=tuple(captured) if captured is not None else (),
        yaku=tuple(yaku) if yaku is not None else (),
        continuation_count=continuation_count,
    )


def create_round_state(
    *,
    players: Sequence[HanafudaPlayer] | None = None,
    field: Sequence[int] = (),
    deck: Sequence[int] = (),
    fill_deck: bool = True,
    dealer_seat: int = 0,
    current_seat: int = 0,
    turn_count: int = 0,
    turns_per_player: int = 8,
    phase: RoundPhase = RoundPhase.SELECT_HAND,
    continuation_seats: Sequence[int] = (),
    field_multiplier: int = 1,
) -> HanafudaRoundState:
    """Create a HanafudaRoundState with sensible defaults for testing.

    With fill_deck, every card not placed in a hand, captured pile, the
    field or the given deck prefix is appended to the deck, so the state
    holds all 48 cards.
    """
    if players is None:
        players = tuple(create_player(seat=i) for i in range(2))
    deck_cards = list(deck)
    if fill_deck:
        placed = {*field, *deck_cards}
        for player in players:
            placed.update(player.hand)
            placed.update(player.captured)
        deck_cards.extend(card_id for card_id in ALL_CARD_IDS if card_id not in placed)
    return HanafudaRoundState(
        phase=phase,
        field=tuple(field),
        deck=tuple(deck_cards),
        players=tuple(players),
        dealer_seat=dealer_seat,
        current_seat=current_seat,
        turn_count=turn_count,
        turns_per_player=turns_per_player,
        continuation_seats=tuple(continuation_seats),
        field_multiplier=field_multiplier,
    )


def create_game_state(
    round_state: HanafudaRoundState | None = None,
    *,
    settings: GameSettings | None = None,
    round_number: int = 1,
    scores: Sequence[int] | None = None,
    seed: str = FIXED_SEED,
) -> HanafudaGameState:
    """Create a HanafudaGameState with sensible defaults for testing."""
    if round_state is None:
        round_state = create_round_state()
    game_settings = settings or GameSettings(num_players=len(round_state.players))
    return HanafudaGameState(
        settings=game_settings,
        seat_configs=tuple(SeatConfig(name=p.name, is_ai=p.is_ai) for p in round_state.players),
        round_state=round_state,
        round_number=round_number,
        dealer_seat=round_state.dealer_seat,
        scores=tuple(scores) if scores is not None else (0,) * len(round_state.players),
        seed=seed,
    )


def arrange_deck(
    *,
    field: Sequence[int],
    hands: Sequence[Sequence[int]],
    draw: Sequence[int] = (),
    dealer_seat: int = 0,
) -> list[int]:
    """Build a full 48-card order that deals exactly the given field and hands.

    The draw sequence follows the dealt cards; unused cards fill the rest in id order.
    """
    used = [*field, *(card_id for hand in hands for card_id in hand), *draw]
    if len(set(used)) != len(used):
        raise ValueError("arranged cards must be distinct")
    rest = [card_id for card_id in ALL_CARD_IDS if card_id not in set(used)]
    half = len(field) // 2
    order = list(field[:half])
    for offset in range(len(hands)):
        order.extend(hands[(dealer_seat + offset) % len(hands)])
    order.extend(field[half:])
    order.extend(draw)
    order.extend(rest)
    return order

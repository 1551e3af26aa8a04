"""
Immutable state update utilities using Pydantic model_copy.

Helpers for the common zone moves of a round. They never mutate the
input state; each returns a new round state with the change applied.
"""

from hanafuda.logic.state import HanafudaGameState, HanafudaPlayer, HanafudaRoundState

_PLAYER_FIELDS = set(HanafudaPlayer.model_fields)


def update_player(
    round_state: HanafudaRoundState,
    seat: int,
    **updates: object,
) -> HanafudaRoundState:
    """
    Return new round state with updated player at seat.

    Raises:
        ValueError: If seat is out of bounds or update fields are invalid

    """
    if not (0 <= seat < len(round_state.players)):
        raise ValueError(f"Invalid seat {seat}, expected 0-{len(round_state.players) - 1}")
    invalid_fields = set(updates) - _PLAYER_FIELDS
    if invalid_fields:
        raise ValueError(f"Invalid player fields: {invalid_fields}")
    players = list(round_state.players)
    players[seat] = round_state.players[seat].model_copy(update=updates)
    return round_state.model_copy(update={"players": tuple(players)})


def remove_from_hand(round_state: HanafudaRoundState, seat: int, card_id: int) -> HanafudaRoundState:
    hand = list(round_state.players[seat].hand)
    hand.remove(card_id)
    return update_player(round_state, seat, hand=tuple(hand))


def add_to_captured(
    round_state: HanafudaRoundState,
    seat: int,
    card_ids: tuple[int, ...],
) -> HanafudaRoundState:
    """Append cards to the captured pile, oldest capture first."""
    player = round_state.players[seat]
    return update_player(round_state, seat, captured=(*player.captured, *card_ids))


def remove_from_field(round_state: HanafudaRoundState, card_ids: tuple[int, ...]) -> HanafudaRoundState:
    removed = set(card_ids)
    field = tuple(card_id for card_id in round_state.field if card_id not in removed)
    return round_state.model_copy(update={"field": field})


def add_to_field(round_state: HanafudaRoundState, card_id: int) -> HanafudaRoundState:
    return round_state.model_copy(update={"field": (*round_state.field, card_id)})


def draw_from_deck(round_state: HanafudaRoundState) -> tuple[HanafudaRoundState, int]:
    """Take the top card of the deck. Raises ValueError when the deck is empty."""
    if not round_state.deck:
        raise ValueError("cannot draw from an empty deck")
    card_id = round_state.deck[0]
    return round_state.model_copy(update={"deck": round_state.deck[1:], "drawn_card": card_id}), card_id


def advance_turn(round_state: HanafudaRoundState) -> HanafudaRoundState:
    """Count the finished turn and pass play to the next seat."""
    next_seat = (round_state.current_seat + 1) % len(round_state.players)
    return round_state.model_copy(
        update={
            "turn_count": round_state.turn_count + 1,
            "current_seat": next_seat,
            "drawn_card": None,
            "pending_capture": None,
            "pending_decision": None,
        },
    )


def update_game_with_round(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
) -> HanafudaGameState:
    return game_state.model_copy(update={"round_state": round_state})

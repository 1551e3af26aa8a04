"""
Capture resolution: matching a played or drawn card against the field.

The resolver is read-only. It returns a CaptureInstruction that the turn
state machine applies to the round state.

Matching rules:
- no field card of the same month: the card stays on the field
- one match: the pair is captured
- two matches: the player must name the target (never auto-resolved)
- three matches: the card completes its month, all four are captured

A wild card (Sakura gaji) ignores months: it may take any one field card
outside its blocked months, and the player names the target whenever
there is more than one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hanafuda.logic.cards import CARDS_PER_MONTH, LIGHTNING, card_month, cards_of_month
from hanafuda.logic.enums import Variant
from hanafuda.logic.exceptions import CaptureChoiceRequiredError, InvalidCaptureError
from hanafuda.logic.types import CaptureInstruction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hanafuda.logic.settings import GameSettings
    from hanafuda.logic.state import HanafudaRoundState

CHOICE_CANDIDATE_COUNT = 2


def is_wild_card(card_id: int, settings: GameSettings) -> bool:
    return settings.variant == Variant.SAKURA and settings.sakura_gaji and card_id == LIGHTNING


def gaji_blocked_months(captured: Sequence[int]) -> frozenset[int]:
    """Months the wild card may not take: those the capturer would complete with it."""
    months = {card_month(card_id) for card_id in captured}
    return frozenset(
        month
        for month in months
        if sum(1 for card_id in captured if card_month(card_id) == month) == CARDS_PER_MONTH - 1
    )


def wild_restrictions(
    round_state: HanafudaRoundState,
    settings: GameSettings,
    seat: int,
    card_id: int,
) -> frozenset[int] | None:
    """Blocked months when card_id plays wild for seat, None when it plays normally."""
    if not is_wild_card(card_id, settings):
        return None
    return gaji_blocked_months(round_state.players[seat].captured)


def find_capture_candidates(
    card_id: int,
    field: Sequence[int],
    *,
    wild_blocked: frozenset[int] | None = None,
) -> tuple[int, ...]:
    """Return the field cards card_id can take, in field order.

    wild_blocked, when given, makes card_id wild.
    """
    if wild_blocked is not None:
        return tuple(field_card for field_card in field if card_month(field_card) not in wild_blocked)
    month = card_month(card_id)
    return tuple(field_card for field_card in field if card_month(field_card) == month)


def requires_choice(card_id: int, field: Sequence[int], *, wild_blocked: frozenset[int] | None = None) -> bool:
    count = len(find_capture_candidates(card_id, field, wild_blocked=wild_blocked))
    if wild_blocked is not None:
        return count > 1
    return count == CHOICE_CANDIDATE_COUNT


def resolve_capture(
    card_id: int,
    field: Sequence[int],
    chosen: int | None = None,
    *,
    wild_blocked: frozenset[int] | None = None,
) -> CaptureInstruction:
    """
    Resolve a played or drawn card against the field.

    Raises CaptureChoiceRequiredError when the target is ambiguous and none
    was given, and InvalidCaptureError when the given target is not one of
    the candidates.
    """
    wild = wild_blocked is not None
    candidates = find_capture_candidates(card_id, field, wild_blocked=wild_blocked)

    if chosen is not None and chosen not in candidates:
        raise InvalidCaptureError(f"card {chosen} is not a capture target for card {card_id}")

    if not candidates:
        return CaptureInstruction(card_id=card_id, remains_on_field=True)

    if len(candidates) == 1:
        return CaptureInstruction(
            card_id=card_id,
            captured_card_ids=(card_id, candidates[0]),
            candidates=candidates,
            is_wild=wild,
        )

    if wild or len(candidates) == CHOICE_CANDIDATE_COUNT:
        if chosen is None:
            raise CaptureChoiceRequiredError(candidates)
        return CaptureInstruction(
            card_id=card_id,
            captured_card_ids=(card_id, chosen),
            candidates=candidates,
            is_wild=wild,
        )

    # three of the month already on the field: the card completes the set
    return CaptureInstruction(
        card_id=card_id,
        captured_card_ids=(card_id, *candidates),
        candidates=candidates,
        is_four_of_a_kind=True,
    )


def find_complete_months(field: Sequence[int]) -> tuple[int, ...]:
    """Return months whose four cards all lie on the field."""
    months = sorted({card_month(card_id) for card_id in field})
    return tuple(
        month for month in months if sum(1 for card_id in field if card_month(card_id) == month) == CARDS_PER_MONTH
    )


def resolve_field_four(field: Sequence[int], month: int) -> CaptureInstruction:
    """Capture instruction for a month already complete on the field at deal time."""
    month_cards = tuple(card_id for card_id in field if card_id in cards_of_month(month))
    return CaptureInstruction(
        card_id=month_cards[0],
        captured_card_ids=month_cards,
        candidates=month_cards[1:],
        is_four_of_a_kind=True,
    )

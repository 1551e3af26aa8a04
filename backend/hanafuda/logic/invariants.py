"""
Structural invariant checks.

These never fire in correct operation. A failure is a programming fault
and raises InvariantViolationError, which the service boundary does not
catch.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

import structlog

from hanafuda.logic.cards import ALL_CARD_IDS
from hanafuda.logic.exceptions import InvariantViolationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hanafuda.logic.state import HanafudaRoundState

logger = structlog.get_logger()


def zone_contents(round_state: HanafudaRoundState) -> list[int]:
    """Every card id held by any zone, duplicates included."""
    cards: list[int] = [*round_state.deck, *round_state.field]
    if round_state.drawn_card is not None:
        # drawn card waiting for its capture choice
        cards.append(round_state.drawn_card)
    for player in round_state.players:
        cards.extend(player.hand)
        cards.extend(player.captured)
    return cards


def check_card_conservation(round_state: HanafudaRoundState) -> None:
    """Every one of the 48 cards must sit in exactly one zone."""
    counts = Counter(zone_contents(round_state))
    duplicated = sorted(card_id for card_id, count in counts.items() if count > 1)
    missing = sorted(set(ALL_CARD_IDS) - set(counts))
    unknown = sorted(set(counts) - set(ALL_CARD_IDS))
    if duplicated or missing or unknown:
        detail = f"duplicated={duplicated} missing={missing} unknown={unknown}"
        logger.error("card conservation violated", round_number=round_state.round_number, detail=detail)
        raise InvariantViolationError(invariant="card_conservation", detail=detail)


def assert_zero_sum(payments: Sequence[int], term: str) -> None:
    """A settlement term must transfer points without creating or destroying any."""
    total = sum(payments)
    if total != 0:
        detail = f"{term} payments {list(payments)} sum to {total}"
        logger.error("zero-sum violated", term=term, payments=list(payments))
        raise InvariantViolationError(invariant="zero_sum", detail=detail)

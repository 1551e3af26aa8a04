"""
Match mode: single-player concentration over the hanafuda deck.

All 48 cards lie face down in a layout derived from the seed. Each move
turns over one card; the second card of a pair either matches the first
(same month) and both leave play, or both stay face up until they are
hidden again. Scoring is 100 per match, multiplied by the length of the
current run of consecutive matches when the bonus is enabled.
"""

from __future__ import annotations

from typing import NamedTuple

import structlog
from pydantic import BaseModel, ConfigDict

from hanafuda.logic.cards import NUM_CARDS, card_month, is_valid_card_id
from hanafuda.logic.exceptions import InvalidActionError, InvalidPlayError
from hanafuda.logic.rng import generate_match_layout, generate_seed

logger = structlog.get_logger()

MATCH_POINTS = 100
PAIR_SIZE = 2


class MatchGameState(BaseModel):
    """State of one concentration game."""

    model_config = ConfigDict(frozen=True)

    seed: str
    layout: tuple[int, ...]
    matched: frozenset[int] = frozenset()
    revealed: tuple[int, ...] = ()
    consecutive: int = 0
    score: int = 0
    moves: int = 0
    consecutive_bonus: bool = True

    @property
    def finished(self) -> bool:
        return len(self.matched) == NUM_CARDS

    @property
    def has_pending_mismatch(self) -> bool:
        return len(self.revealed) == PAIR_SIZE


class MatchFlip(NamedTuple):
    """Outcome of turning over one card.

    matched is None after the first card of a pair, otherwise whether the
    pair shared a month.
    """

    state: MatchGameState
    matched: bool | None
    points: int = 0


def init_match_game(seed: str = "", *, consecutive_bonus: bool = True) -> MatchGameState:
    """Lay out a fresh concentration game; the layout is fixed by the seed."""
    game_seed = seed or generate_seed()
    state = MatchGameState(
        seed=game_seed,
        layout=tuple(generate_match_layout(game_seed)),
        consecutive_bonus=consecutive_bonus,
    )
    logger.info("match game initialized", consecutive_bonus=consecutive_bonus)
    return state


def hide_mismatch(state: MatchGameState) -> MatchGameState:
    """Turn a mismatched pair face down again."""
    if not state.has_pending_mismatch:
        raise InvalidActionError("no mismatched pair to hide")
    return state.model_copy(update={"revealed": ()})


def flip_card(state: MatchGameState, card_id: int) -> MatchFlip:
    """
    Turn over a face-down card.

    A mismatched pair still showing is hidden first. Every flip counts as a
    move.
    """
    if state.finished:
        raise InvalidActionError("all cards are already matched")
    if not is_valid_card_id(card_id):
        raise InvalidPlayError(f"invalid card id: {card_id}")
    if state.has_pending_mismatch:
        state = hide_mismatch(state)
    if card_id in state.matched or card_id in state.revealed:
        raise InvalidPlayError(f"card {card_id} is already face up")

    moves = state.moves + 1
    if not state.revealed:
        return MatchFlip(state.model_copy(update={"revealed": (card_id,), "moves": moves}), None)

    first = state.revealed[0]
    if card_month(first) != card_month(card_id):
        logger.debug("match game mismatch", first=first, second=card_id)
        new_state = state.model_copy(
            update={"revealed": (first, card_id), "consecutive": 0, "moves": moves},
        )
        return MatchFlip(new_state, matched=False)

    consecutive = state.consecutive + 1
    points = MATCH_POINTS * consecutive if state.consecutive_bonus else MATCH_POINTS
    new_state = state.model_copy(
        update={
            "matched": state.matched | {first, card_id},
            "revealed": (),
            "consecutive": consecutive,
            "score": state.score + points,
            "moves": moves,
        },
    )
    if new_state.finished:
        logger.info("match game finished", score=new_state.score, moves=new_state.moves)
    return MatchFlip(new_state, matched=True, points=points)

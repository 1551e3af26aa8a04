"""
Self-play simulation.

Drives complete matches with AI players in every seat through the same
service a human client would use. Results are a pure function of the
settings and seed, which makes them useful for regression checks and for
tuning AI thresholds.
"""

from __future__ import annotations

import structlog

from hanafuda.logic.cards import card_month
from hanafuda.logic.exceptions import InvariantViolationError
from hanafuda.logic.match_game import PAIR_SIZE, MatchGameState, flip_card, init_match_game
from hanafuda.logic.rng import generate_seed
from hanafuda.logic.service import HanafudaGameService
from hanafuda.logic.settings import GameSettings
from hanafuda.logic.state import HanafudaGameState
from hanafuda.logic.types import SeatConfig

logger = structlog.get_logger()

SIMULATION_GAME_ID = "simulation"


def run_simulated_match(settings: GameSettings, seed: str = "") -> HanafudaGameState:
    """Play a whole match with AI players in every seat and return the final state."""
    game_seed = seed or generate_seed()
    service = HanafudaGameService()
    seat_configs = [SeatConfig(name=f"AI {seat + 1}", is_ai=True) for seat in range(settings.num_players)]
    service.start_game(SIMULATION_GAME_ID, seat_configs, settings=settings, seed=game_seed)

    game_state = service.get_game_state(SIMULATION_GAME_ID)
    if game_state is None or not game_state.game_over:
        raise InvariantViolationError(
            invariant="simulation_completes",
            detail="all-AI match stopped before reaching the end",
        )
    logger.info(
        "simulated match finished",
        variant=settings.variant,
        rounds=len(game_state.ledger),
        scores=list(game_state.scores),
    )
    return game_state


def run_simulated_concentration(seed: str = "", *, consecutive_bonus: bool = True) -> MatchGameState:
    """
    Clear a concentration layout with a perfect-memory player.

    Known pairs are taken first; otherwise the next unseen card in layout
    order is turned over, paired with a remembered card of its month when
    there is one.
    """
    state = init_match_game(seed, consecutive_bonus=consecutive_bonus)
    seen: dict[int, list[int]] = {}
    unseen = list(state.layout)

    def remember(card_id: int) -> None:
        seen.setdefault(card_month(card_id), []).append(card_id)

    while not state.finished:
        known_pair = next((cards for cards in seen.values() if len(cards) >= PAIR_SIZE), None)
        if known_pair is not None:
            first, second = known_pair[0], known_pair[1]
            del known_pair[:2]
            state = flip_card(state, first).state
            state = flip_card(state, second).state
            continue

        first = unseen.pop(0)
        state = flip_card(state, first).state
        partners = seen.get(card_month(first), [])
        if partners:
            state = flip_card(state, partners.pop(0)).state
            continue

        second = unseen.pop(0)
        flip = flip_card(state, second)
        state = flip.state
        if not flip.matched:
            remember(first)
            remember(second)

    logger.info("simulated concentration finished", score=state.score, moves=state.moves)
    return state

"""
Immutable game state models for Hanafuda.

The round state owns every zone (hands, field, captured piles, deck).
Transitions never mutate a state; they return a new one built with
model_copy(update=...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hanafuda.logic.enums import GamePhase, RoundPhase
from hanafuda.logic.rng import RNG_VERSION
from hanafuda.logic.settings import DEFAULT_PAR_VALUE, GameSettings
from hanafuda.logic.types import (
    GameView,
    PendingCapture,
    PendingDecision,
    PlayerView,
    RoundRecord,
    SeatConfig,
    TeyakuResult,
    YakuResult,
)
from hanafuda.logic.variants import VariantRules, get_variant_rules


class HanafudaPlayer(BaseModel):
    """A player within one round."""

    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    is_ai: bool = False

    # zones
    hand: tuple[int, ...] = ()
    captured: tuple[int, ...] = ()

    # combinations
    dealt_hand: tuple[int, ...] = ()
    yaku: tuple[YakuResult, ...] = ()
    teyaku: tuple[TeyakuResult, ...] = ()

    continuation_count: int = 0


class HanafudaRoundState(BaseModel):
    """State of a single round."""

    model_config = ConfigDict(frozen=True)

    phase: RoundPhase = RoundPhase.DEALING
    round_number: int = 1

    # shared zones
    field: tuple[int, ...] = ()
    deck: tuple[int, ...] = ()

    players: tuple[HanafudaPlayer, ...] = ()

    # turn tracking
    dealer_seat: int = 0
    current_seat: int = 0
    turn_count: int = 0
    turns_per_player: int = 0

    # transient sub-states
    drawn_card: int | None = None
    pending_capture: PendingCapture | None = None
    pending_decision: PendingDecision | None = None
    yaku_at_turn_start: tuple[YakuResult, ...] = ()

    # continuation history: seats that pushed, in order
    continuation_seats: tuple[int, ...] = ()
    stopped_by: int | None = None

    # Sakura gaji: who captured with the wild card and the month it took
    gaji_seat: int | None = None
    gaji_month: int | None = None

    # Hachi-Hachi
    field_multiplier: int = 1
    par_value: int = DEFAULT_PAR_VALUE
    teyaku_payments: tuple[int, ...] = ()

    @property
    def total_turns(self) -> int:
        return self.turns_per_player * len(self.players)

    @property
    def turns_remaining(self) -> int:
        return max(0, self.total_turns - self.turn_count)

    def turns_remaining_for(self, seat: int) -> int:
        """Turns the seat still gets, counting the current one if it is theirs."""
        num_players = len(self.players)
        taken_before = sum(
            1 for turn in range(self.turn_count) if (self.dealer_seat + turn) % num_players == seat
        )
        return self.turns_per_player - taken_before


class HanafudaGameState(BaseModel):
    """State of a whole match."""

    model_config = ConfigDict(frozen=True)

    settings: GameSettings
    seat_configs: tuple[SeatConfig, ...]
    round_state: HanafudaRoundState
    round_number: int = 1
    dealer_seat: int = 0
    scores: tuple[int, ...] = ()
    phase: GamePhase = GamePhase.IN_PROGRESS
    seed: str = ""
    rng_version: str = RNG_VERSION
    ledger: tuple[RoundRecord, ...] = ()
    # cumulative Sakura victory-scoring wins per seat
    round_wins: tuple[int, ...] = ()

    @property
    def total_rounds(self) -> int:
        return self.settings.total_rounds

    @property
    def game_over(self) -> bool:
        return self.phase == GamePhase.FINISHED

    @property
    def rules(self) -> VariantRules:
        return get_variant_rules(self.settings.variant)


def get_player_view(game_state: HanafudaGameState, seat: int) -> GameView:
    """
    Build the read-only snapshot a seat is allowed to see.

    Other players' hands and the deck order stay hidden; only counts are shown.
    """
    round_state = game_state.round_state
    players = tuple(
        PlayerView(
            seat=player.seat,
            name=player.name,
            is_ai=player.is_ai,
            hand=player.hand if player.seat == seat else None,
            hand_count=len(player.hand),
            captured=player.captured,
            yaku=player.yaku,
            score=game_state.scores[player.seat],
            round_wins=game_state.round_wins[player.seat] if game_state.round_wins else 0,
        )
        for player in round_state.players
    )
    pending = round_state.pending_capture
    decision = round_state.pending_decision
    return GameView(
        seat=seat,
        variant=game_state.settings.variant,
        game_phase=game_state.phase,
        round_phase=round_state.phase,
        round_number=game_state.round_number,
        total_rounds=game_state.total_rounds,
        dealer_seat=round_state.dealer_seat,
        current_seat=round_state.current_seat,
        field=round_state.field,
        deck_count=len(round_state.deck),
        drawn_card=round_state.drawn_card,
        capture_candidates=pending.candidates if pending is not None and pending.seat == seat else (),
        awaiting_decision=decision is not None and decision.seat == seat,
        field_multiplier=round_state.field_multiplier,
        turns_remaining=round_state.turns_remaining,
        players=players,
    )

"""
Pydantic models for game logic data structures.

Contains typed models for yaku results, capture instructions, score
breakdowns, the round ledger, action payloads and the read-only player
views that cross component boundaries.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hanafuda.logic.enums import (
    CaptureSource,
    Decision,
    GamePhase,
    RoundOutcome,
    RoundPhase,
    Variant,
)
from hanafuda.logic.rng import validate_seed_hex


class SeatConfig(BaseModel):
    """Configuration for a single seat at match start."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_ai: bool = False


class YakuResult(BaseModel):
    """A completed scoring combination."""

    model_config = ConfigDict(frozen=True)

    name: str
    points: int
    card_ids: tuple[int, ...]


class YakuProgress(BaseModel):
    """Progress toward an unfinished combination."""

    model_config = ConfigDict(frozen=True)

    name: str
    current: int
    needed: int
    is_possible: bool


class TeyakuResult(BaseModel):
    """A combination judged on the dealt hand (Hachi-Hachi)."""

    model_config = ConfigDict(frozen=True)

    name: str
    points: int


class CaptureInstruction(BaseModel):
    """
    Outcome of resolving one played or drawn card against the field.

    The state machine applies it atomically: every id in captured_card_ids
    leaves the hand/field and is appended to the player's captured pile in
    this order. When remains_on_field is set the played card is placed on
    the field instead.
    """

    model_config = ConfigDict(frozen=True)

    card_id: int
    captured_card_ids: tuple[int, ...] = ()
    remains_on_field: bool = False
    candidates: tuple[int, ...] = ()
    is_four_of_a_kind: bool = False
    is_wild: bool = False


class PendingCapture(BaseModel):
    """Capture-choice sub-state: the played or drawn card waits for a target."""

    model_config = ConfigDict(frozen=True)

    seat: int
    card_id: int
    source: CaptureSource
    candidates: tuple[int, ...]


class PendingDecision(BaseModel):
    """A continuation decision the active player owes."""

    model_config = ConfigDict(frozen=True)

    seat: int
    yaku: tuple[YakuResult, ...]
    points: int


class PlayerScoreLine(BaseModel):
    """One player's part of a round's score breakdown."""

    model_config = ConfigDict(frozen=True)

    seat: int
    yaku: tuple[YakuResult, ...] = ()
    base_points: int = 0
    auto_doubled: bool = False
    continuation_multiplier: int = 1
    card_points: int = 0
    card_score: int = 0
    teyaku_payment: int = 0
    dekiyaku_payment: int = 0
    penalty: int = 0
    total: int = 0


class ScoreBreakdown(BaseModel):
    """Full score breakdown for a finished round."""

    model_config = ConfigDict(frozen=True)

    variant: Variant
    outcome: RoundOutcome
    winner_seat: int | None = None
    field_multiplier: int = 1
    lines: tuple[PlayerScoreLine, ...]

    @property
    def deltas(self) -> tuple[int, ...]:
        return tuple(line.total for line in self.lines)


class RoundRecord(BaseModel):
    """One entry of the match score ledger."""

    model_config = ConfigDict(frozen=True)

    round_number: int
    dealer_seat: int
    outcome: RoundOutcome
    winner_seat: int | None
    deltas: tuple[int, ...]
    scores_after: tuple[int, ...]
    # wins awarded this round under Sakura victory scoring
    round_wins: tuple[int, ...] = ()


class PlayerStanding(BaseModel):
    """Final standing of a player in the match."""

    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    score: int
    round_wins: int = 0


class GameEndResult(BaseModel):
    """Result of a finished match."""

    model_config = ConfigDict(frozen=True)

    winner_seat: int
    standings: tuple[PlayerStanding, ...]
    num_rounds: int


class PlayerView(BaseModel):
    """Public view of a player. Hand contents are only filled in for the viewer."""

    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    is_ai: bool
    hand: tuple[int, ...] | None = None
    hand_count: int
    captured: tuple[int, ...]
    yaku: tuple[YakuResult, ...]
    score: int
    round_wins: int = 0


class GameView(BaseModel):
    """Read-only snapshot of the match for one seat."""

    model_config = ConfigDict(frozen=True)

    seat: int
    variant: Variant
    game_phase: GamePhase
    round_phase: RoundPhase
    round_number: int
    total_rounds: int
    dealer_seat: int
    current_seat: int
    field: tuple[int, ...]
    deck_count: int
    drawn_card: int | None
    capture_candidates: tuple[int, ...] = ()
    awaiting_decision: bool = False
    field_multiplier: int = 1
    turns_remaining: int
    players: tuple[PlayerView, ...]


class PlayCardData(BaseModel):
    """Payload for GameAction.PLAY_CARD."""

    card_id: int = Field(ge=1, le=48)
    target_card_id: int | None = Field(default=None, ge=1, le=48)


class ChooseCaptureData(BaseModel):
    """Payload for GameAction.CHOOSE_CAPTURE."""

    field_card_id: int = Field(ge=1, le=48)


class DecisionData(BaseModel):
    """Payload for GameAction.DECIDE."""

    decision: Decision


class AIPlayerAction(BaseModel):
    """Card play chosen by the AI player."""

    model_config = ConfigDict(frozen=True)

    card_id: int
    target_card_id: int | None = None


class NewMatchData(BaseModel):
    """Payload for GameAction.NEW_MATCH; an empty seed draws a fresh one."""

    seed: str = ""

    @field_validator("seed")
    @classmethod
    def _check_seed(cls, value: str) -> str:
        if value:
            validate_seed_hex(value)
        return value

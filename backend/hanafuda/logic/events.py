"""Domain event models and service event transport container.

Domain event classes are the canonical event types for the game logic layer.
Every state transition returns a list of them for the caller (UI, animation
layer, tests) to drain; events never feed back into rule decisions.
ServiceEvent is the transport wrapper used to route events to seats.
convert_events() maps domain events into ServiceEvent containers with typed
routing targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from hanafuda.logic.enums import CaptureSource, Decision, GameErrorCode, RoundPhase
from hanafuda.logic.types import (
    GameView,
    PlayerStanding,
    ScoreBreakdown,
    TeyakuResult,
    YakuResult,
)

# ---------------------------------------------------------------------------
# Typed routing targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BroadcastTarget:
    """Event should be sent to all players in the game."""


@dataclass(frozen=True)
class SeatTarget:
    """Event should be sent to a specific seat."""

    seat: int


EventTarget = BroadcastTarget | SeatTarget


def parse_event_target(value: str) -> EventTarget:
    """Parse a string target into a typed EventTarget."""
    if value == "all":
        return BroadcastTarget()
    if value.startswith("seat_"):
        seat = int(value.split("_")[1])
        if seat < 0:
            raise ValueError(f"invalid seat number in target: {value}")
        return SeatTarget(seat=seat)
    raise ValueError(f"invalid target value: {value}")


def seat_target(seat: int) -> str:
    return f"seat_{seat}"


# ---------------------------------------------------------------------------
# Event type enum
# ---------------------------------------------------------------------------


class EventType(StrEnum):
    """Types of game events."""

    GAME_STARTED = "game_started"
    ROUND_STARTED = "round_started"
    TEYAKU = "teyaku"
    TURN = "turn"
    CARD_PLAYED = "card_played"
    CARD_DRAWN = "card_drawn"
    CAPTURE = "capture"
    FOUR_OF_A_KIND = "four_of_a_kind"
    CAPTURE_CHOICE = "capture_choice"
    YAKU_COMPLETED = "yaku_completed"
    DECISION_PROMPT = "decision_prompt"
    DECISION_MADE = "decision_made"
    ROUND_END = "round_end"
    GAME_END = "game_end"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Domain event models
# ---------------------------------------------------------------------------


class GameEvent(BaseModel):
    """Base class for all domain game events."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    target: str


class GameStartedEvent(GameEvent):
    """Event broadcast when a match starts."""

    type: Literal[EventType.GAME_STARTED] = EventType.GAME_STARTED
    target: str = "all"
    game_id: str
    player_names: list[str]
    dealer_seat: int


class RoundStartedEvent(GameEvent):
    """Event sent to each seat when a round starts, carrying that seat's view."""

    type: Literal[EventType.ROUND_STARTED] = EventType.ROUND_STARTED
    view: GameView


class TeyakuEvent(GameEvent):
    """Event broadcast when a player's dealt hand scores teyaku."""

    type: Literal[EventType.TEYAKU] = EventType.TEYAKU
    target: str = "all"
    seat: int
    teyaku: list[TeyakuResult]
    payment: int


class TurnEvent(GameEvent):
    """Event sent to the player whose turn begins or who owes an action."""

    type: Literal[EventType.TURN] = EventType.TURN
    current_seat: int
    phase: RoundPhase
    turns_remaining: int


class CardPlayedEvent(GameEvent):
    """Event broadcast when a card leaves a hand."""

    type: Literal[EventType.CARD_PLAYED] = EventType.CARD_PLAYED
    target: str = "all"
    seat: int
    card_id: int


class CardDrawnEvent(GameEvent):
    """Event broadcast when the top card of the deck is turned over."""

    type: Literal[EventType.CARD_DRAWN] = EventType.CARD_DRAWN
    target: str = "all"
    seat: int
    card_id: int
    deck_count: int


class CaptureEvent(GameEvent):
    """Event broadcast after a played or drawn card is resolved against the field.

    card_ids lists the exact cards moved to the captured pile; it is empty
    when the card was placed on the field.
    """

    type: Literal[EventType.CAPTURE] = EventType.CAPTURE
    target: str = "all"
    seat: int
    source: CaptureSource
    card_id: int
    card_ids: list[int]
    wild: bool = False
    placed_on_field: bool = False


class FourOfAKindEvent(GameEvent):
    """Event broadcast when all four cards of a month are captured together."""

    type: Literal[EventType.FOUR_OF_A_KIND] = EventType.FOUR_OF_A_KIND
    target: str = "all"
    seat: int
    month: int
    card_ids: list[int]


class CaptureChoiceEvent(GameEvent):
    """Event sent to the active player when a card matches two field cards."""

    type: Literal[EventType.CAPTURE_CHOICE] = EventType.CAPTURE_CHOICE
    seat: int
    card_id: int
    source: CaptureSource
    candidates: list[int]


class YakuCompletedEvent(GameEvent):
    """Event broadcast when a player completes or improves combinations."""

    type: Literal[EventType.YAKU_COMPLETED] = EventType.YAKU_COMPLETED
    target: str = "all"
    seat: int
    yaku: list[YakuResult]
    points: int


class DecisionPromptEvent(GameEvent):
    """Event sent to the player who must choose to continue or stop."""

    type: Literal[EventType.DECISION_PROMPT] = EventType.DECISION_PROMPT
    seat: int
    yaku: list[YakuResult]
    points: int
    turns_remaining: int


class DecisionMadeEvent(GameEvent):
    """Event broadcast when a continuation decision is made."""

    type: Literal[EventType.DECISION_MADE] = EventType.DECISION_MADE
    target: str = "all"
    seat: int
    decision: Decision
    continuation_count: int


class RoundEndEvent(GameEvent):
    """Event broadcast when a round ends."""

    type: Literal[EventType.ROUND_END] = EventType.ROUND_END
    target: str = "all"
    round_number: int
    result: ScoreBreakdown
    scores: list[int]


class GameEndedEvent(GameEvent):
    """Event broadcast when the match ends."""

    type: Literal[EventType.GAME_END] = EventType.GAME_END
    target: str = "all"
    winner_seat: int
    standings: list[PlayerStanding]
    num_rounds: int


class ErrorEvent(GameEvent):
    """Event sent to a player when an action is rejected."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    code: GameErrorCode
    message: str


Event = (
    GameStartedEvent
    | RoundStartedEvent
    | TeyakuEvent
    | TurnEvent
    | CardPlayedEvent
    | CardDrawnEvent
    | CaptureEvent
    | FourOfAKindEvent
    | CaptureChoiceEvent
    | YakuCompletedEvent
    | DecisionPromptEvent
    | DecisionMadeEvent
    | RoundEndEvent
    | GameEndedEvent
    | ErrorEvent
)


# ---------------------------------------------------------------------------
# Service event transport container
# ---------------------------------------------------------------------------


class ServiceEvent(BaseModel):
    """Event transport container for game service layer.

    Uses typed internal targets (BroadcastTarget / SeatTarget) for routing.
    """

    model_config = {"arbitrary_types_allowed": True}

    event: EventType
    data: GameEvent
    target: EventTarget = BroadcastTarget()

    @model_validator(mode="after")
    def _ensure_event_matches_data(self) -> ServiceEvent:
        if self.event.value != self.data.type.value:
            raise ValueError(
                f"ServiceEvent.event '{self.event.value}' does not match data.type '{self.data.type.value}'",
            )
        return self


def convert_events(raw_events: list[GameEvent]) -> list[ServiceEvent]:
    """Convert domain events to service events with typed targets."""
    return [
        ServiceEvent(event=event.type, data=event, target=parse_event_target(event.target)) for event in raw_events
    ]


def extract_round_result(events: list[ServiceEvent]) -> ScoreBreakdown | None:
    """Extract the round result from a list of service events."""
    for event in events:
        if event.event == EventType.ROUND_END and isinstance(event.data, RoundEndEvent):
            return event.data.result
    return None

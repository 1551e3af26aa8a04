"""Typed domain exceptions for game rule violations.

All rule violations raised by the engine use subclasses of GameRuleError
rather than raw ValueError. This enables consistent catch-and-convert at
the service boundary, where they become ErrorEvent responses and the game
state is left unchanged.

InvariantViolationError sits outside that hierarchy: it signals a
programming fault (a lost or duplicated card, or a payment that does not
sum to zero) and is never converted into an ErrorEvent.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations.

    Raised by domain logic (turn.py, capture.py, game.py) when a player
    action violates game rules. Caught at the service boundary
    (action_handlers.py) and converted to ErrorEvent responses.
    """


class InvalidPlayError(GameRuleError):
    """Card cannot be played (not in the player's hand)."""


class InvalidCaptureError(GameRuleError):
    """Chosen field card is not a legal capture target."""


class CaptureChoiceRequiredError(GameRuleError):
    """Several field cards match and no target was chosen."""

    def __init__(self, candidates: tuple[int, ...]) -> None:
        self.candidates = candidates
        super().__init__(f"capture choice required among {list(candidates)}")


class InvalidDecisionError(GameRuleError):
    """Continuation decision is not expected or not valid."""


class InvalidActionError(GameRuleError):
    """Action is not valid in the current game state (wrong phase)."""


class NotYourTurnError(GameRuleError):
    """Action submitted by a seat that is not the active player."""

    def __init__(self, seat: int, current_seat: int) -> None:
        self.seat = seat
        self.current_seat = current_seat
        super().__init__(f"seat {seat} acted but it is seat {current_seat}'s turn")


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain values the engine cannot honor."""


class InvariantViolationError(Exception):
    """Raised when engine state breaks a structural invariant.

    Attributes:
        invariant: Short name of the violated invariant (e.g. "card_conservation").
        detail: Human-readable description of what was found.

    """

    def __init__(self, *, invariant: str, detail: str) -> None:
        self.invariant = invariant
        self.detail = detail
        super().__init__(f"{invariant} violated: {detail}")

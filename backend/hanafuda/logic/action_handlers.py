"""
Action handlers for game actions.

Each handler validates input, runs the matching state transition and
returns an ActionResult. This is the boundary where GameRuleError is caught
and turned into an ErrorEvent for the acting seat; a rejected action
returns no new state, so the caller's state stays untouched.
"""

import structlog

from hanafuda.logic.action_result import ActionResult
from hanafuda.logic.enums import GameErrorCode
from hanafuda.logic.events import ErrorEvent, seat_target
from hanafuda.logic.exceptions import (
    CaptureChoiceRequiredError,
    GameRuleError,
    InvalidActionError,
    InvalidCaptureError,
    InvalidDecisionError,
    InvalidPlayError,
    NotYourTurnError,
)
from hanafuda.logic.game import round_start_events, start_next_round
from hanafuda.logic.state import HanafudaGameState
from hanafuda.logic.turn import process_capture_choice, process_continuation_decision, process_play_card
from hanafuda.logic.types import ChooseCaptureData, DecisionData, PlayCardData

logger = structlog.get_logger()

_ERROR_CODES: dict[type[GameRuleError], GameErrorCode] = {
    NotYourTurnError: GameErrorCode.NOT_YOUR_TURN,
    InvalidPlayError: GameErrorCode.INVALID_PLAY,
    CaptureChoiceRequiredError: GameErrorCode.CAPTURE_CHOICE_REQUIRED,
    InvalidCaptureError: GameErrorCode.INVALID_CAPTURE,
    InvalidDecisionError: GameErrorCode.INVALID_DECISION,
    InvalidActionError: GameErrorCode.INVALID_ACTION,
}


def error_code_for(error: GameRuleError) -> GameErrorCode:
    return _ERROR_CODES.get(type(error), GameErrorCode.GAME_ERROR)


def create_error_result(seat: int, error: GameRuleError) -> ActionResult:
    """Reject an action: error event for the acting seat, no new state."""
    code = error_code_for(error)
    logger.warning("action rejected", seat=seat, code=code, reason=str(error))
    return ActionResult([ErrorEvent(code=code, message=str(error), target=seat_target(seat))])


def handle_play_card(game_state: HanafudaGameState, seat: int, data: PlayCardData) -> ActionResult:
    try:
        return process_play_card(game_state, seat, data.card_id, data.target_card_id)
    except GameRuleError as e:
        return create_error_result(seat, e)


def handle_choose_capture(game_state: HanafudaGameState, seat: int, data: ChooseCaptureData) -> ActionResult:
    try:
        return process_capture_choice(game_state, seat, data.field_card_id)
    except GameRuleError as e:
        return create_error_result(seat, e)


def handle_decide(game_state: HanafudaGameState, seat: int, data: DecisionData) -> ActionResult:
    try:
        return process_continuation_decision(game_state, seat, data.decision)
    except GameRuleError as e:
        return create_error_result(seat, e)


def handle_next_round(game_state: HanafudaGameState, seat: int) -> ActionResult:
    """Deal the next round after the current one has been scored."""
    try:
        new_state = start_next_round(game_state)
    except GameRuleError as e:
        return create_error_result(seat, e)
    return ActionResult(round_start_events(new_state), new_state)

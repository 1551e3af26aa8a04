"""
Turn state machine for a Hanafuda round.

The only writer of round state during play. A turn runs:

    select_hand -> [select_hand_match] -> drawing -> [select_drawn_match]
    -> yaku_check -> [continuation_decision] -> turn_handover

Public transitions validate the acting seat and phase, raise a
GameRuleError subclass without touching state when the action is illegal,
and otherwise run the turn forward until the next point that needs player
input (or the round ends).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from hanafuda.logic.action_result import ActionResult
from hanafuda.logic.capture import find_capture_candidates, requires_choice, resolve_capture, wild_restrictions
from hanafuda.logic.cards import card_month
from hanafuda.logic.enums import (
    CaptureSource,
    ContinuationStyle,
    Decision,
    RoundOutcome,
    RoundPhase,
    Variant,
)
from hanafuda.logic.events import (
    CaptureChoiceEvent,
    CaptureEvent,
    CardDrawnEvent,
    CardPlayedEvent,
    DecisionMadeEvent,
    DecisionPromptEvent,
    FourOfAKindEvent,
    GameEvent,
    TurnEvent,
    YakuCompletedEvent,
    seat_target,
)
from hanafuda.logic.exceptions import (
    InvalidActionError,
    InvalidCaptureError,
    InvalidDecisionError,
    InvalidPlayError,
    NotYourTurnError,
)
from hanafuda.logic.game import process_round_end
from hanafuda.logic.invariants import check_card_conservation
from hanafuda.logic.scoring import (
    exhaustion_scorers,
    score_hachi_hachi_round,
    score_koikoi_round,
    score_sakura_round,
)
from hanafuda.logic.state_utils import (
    add_to_captured,
    add_to_field,
    advance_turn,
    draw_from_deck,
    remove_from_field,
    remove_from_hand,
    update_game_with_round,
    update_player,
)
from hanafuda.logic.types import CaptureInstruction, PendingCapture, PendingDecision, ScoreBreakdown
from hanafuda.logic.yaku import evaluate_yaku, find_new_yaku, total_yaku_points

if TYPE_CHECKING:
    from hanafuda.logic.state import HanafudaGameState, HanafudaRoundState

logger = structlog.get_logger()


def _require_in_progress(game_state: HanafudaGameState) -> None:
    if game_state.game_over:
        raise InvalidActionError("match is over")


def _require_turn(round_state: HanafudaRoundState, seat: int, phases: tuple[RoundPhase, ...], action: str) -> None:
    if round_state.phase not in phases:
        raise InvalidActionError(f"cannot {action} during {round_state.phase.value}")
    if seat != round_state.current_seat:
        raise NotYourTurnError(seat, round_state.current_seat)


def _finish(events: list[GameEvent], game_state: HanafudaGameState) -> ActionResult:
    check_card_conservation(game_state.round_state)
    return ActionResult(events, game_state)


# ---------------------------------------------------------------------------
# Public transitions
# ---------------------------------------------------------------------------


def process_play_card(
    game_state: HanafudaGameState,
    seat: int,
    card_id: int,
    target_card_id: int | None = None,
) -> ActionResult:
    """
    Play a card from the active player's hand.

    When the card matches two field cards and no target is given, the turn
    stops in select_hand_match and a CaptureChoiceEvent is sent; the card
    stays in hand until the choice is made.
    """
    _require_in_progress(game_state)
    round_state = game_state.round_state
    _require_turn(round_state, seat, (RoundPhase.SELECT_HAND,), "play a card")

    player = round_state.players[seat]
    if card_id not in player.hand:
        logger.warning("played card not in hand", seat=seat, card_id=card_id)
        raise InvalidPlayError(f"card {card_id} is not in seat {seat}'s hand")

    wild_blocked = wild_restrictions(round_state, game_state.settings, seat, card_id)
    candidates = find_capture_candidates(card_id, round_state.field, wild_blocked=wild_blocked)
    if target_card_id is not None and target_card_id not in candidates:
        raise InvalidCaptureError(f"card {target_card_id} is not a capture target for card {card_id}")

    if target_card_id is None and requires_choice(card_id, round_state.field, wild_blocked=wild_blocked):
        round_state = round_state.model_copy(
            update={
                "phase": RoundPhase.SELECT_HAND_MATCH,
                "pending_capture": PendingCapture(
                    seat=seat,
                    card_id=card_id,
                    source=CaptureSource.HAND,
                    candidates=candidates,
                ),
            },
        )
        events: list[GameEvent] = [
            CaptureChoiceEvent(
                seat=seat,
                card_id=card_id,
                source=CaptureSource.HAND,
                candidates=list(candidates),
                target=seat_target(seat),
            ),
        ]
        return _finish(events, update_game_with_round(game_state, round_state))

    instruction = resolve_capture(card_id, round_state.field, target_card_id, wild_blocked=wild_blocked)
    events = [CardPlayedEvent(seat=seat, card_id=card_id)]
    round_state, capture_events = _apply_capture(round_state, seat, instruction, CaptureSource.HAND)
    events.extend(capture_events)
    return _run_draw(game_state, round_state, events)


def process_capture_choice(
    game_state: HanafudaGameState,
    seat: int,
    field_card_id: int,
) -> ActionResult:
    """Resolve a pending capture choice for the played or drawn card."""
    _require_in_progress(game_state)
    round_state = game_state.round_state
    _require_turn(
        round_state,
        seat,
        (RoundPhase.SELECT_HAND_MATCH, RoundPhase.SELECT_DRAWN_MATCH),
        "choose a capture",
    )
    pending = round_state.pending_capture
    if pending is None:
        raise InvalidActionError("no capture choice is pending")

    wild_blocked = wild_restrictions(round_state, game_state.settings, seat, pending.card_id)
    instruction = resolve_capture(pending.card_id, round_state.field, field_card_id, wild_blocked=wild_blocked)
    round_state = round_state.model_copy(update={"pending_capture": None})
    events: list[GameEvent] = []
    if pending.source == CaptureSource.HAND:
        events.append(CardPlayedEvent(seat=seat, card_id=pending.card_id))
    round_state, capture_events = _apply_capture(round_state, seat, instruction, pending.source)
    events.extend(capture_events)

    if pending.source == CaptureSource.HAND:
        return _run_draw(game_state, round_state, events)
    return _run_yaku_check(game_state, round_state, events)


def process_continuation_decision(
    game_state: HanafudaGameState,
    seat: int,
    decision: Decision,
) -> ActionResult:
    """
    Apply a koi-koi / sage (continue) or stop / shoubu decision.

    The decision is final: stop ends the round with this seat scoring,
    continue records the push and hands the turn over.
    """
    _require_in_progress(game_state)
    round_state = game_state.round_state
    pending = round_state.pending_decision
    if round_state.phase != RoundPhase.CONTINUATION_DECISION or pending is None:
        raise InvalidDecisionError("no continuation decision is pending")
    if seat != pending.seat:
        raise NotYourTurnError(seat, pending.seat)

    player = round_state.players[seat]
    if decision == Decision.STOP:
        logger.info("player stopped", seat=seat, points=pending.points)
        events: list[GameEvent] = [
            DecisionMadeEvent(seat=seat, decision=decision, continuation_count=player.continuation_count),
        ]
        return _end_round(game_state, round_state, events, RoundOutcome.STOPPED, stopper=seat)

    continuation_count = player.continuation_count + 1
    round_state = update_player(round_state, seat, continuation_count=continuation_count)
    round_state = round_state.model_copy(
        update={
            "pending_decision": None,
            "continuation_seats": (*round_state.continuation_seats, seat),
        },
    )
    logger.info("player continued", seat=seat, points=pending.points, continuation_count=continuation_count)
    events = [DecisionMadeEvent(seat=seat, decision=decision, continuation_count=continuation_count)]
    return _handover(game_state, round_state, events)


# ---------------------------------------------------------------------------
# Internal steps
# ---------------------------------------------------------------------------


def _apply_capture(
    round_state: HanafudaRoundState,
    seat: int,
    instruction: CaptureInstruction,
    source: CaptureSource,
) -> tuple[HanafudaRoundState, list[GameEvent]]:
    """Apply a capture instruction atomically to the zones."""
    card_id = instruction.card_id
    if source == CaptureSource.HAND:
        round_state = remove_from_hand(round_state, seat, card_id)
    else:
        round_state = round_state.model_copy(update={"drawn_card": None})

    if instruction.remains_on_field:
        round_state = add_to_field(round_state, card_id)
        return round_state, [
            CaptureEvent(seat=seat, source=source, card_id=card_id, card_ids=[], placed_on_field=True),
        ]

    field_cards = tuple(captured for captured in instruction.captured_card_ids if captured != card_id)
    round_state = remove_from_field(round_state, field_cards)
    round_state = add_to_captured(round_state, seat, instruction.captured_card_ids)
    if instruction.is_wild:
        month = card_month(field_cards[0])
        round_state = round_state.model_copy(update={"gaji_seat": seat, "gaji_month": month})
        logger.info("gaji captured", seat=seat, target=field_cards[0], month=month)
    events: list[GameEvent] = [
        CaptureEvent(
            seat=seat,
            source=source,
            card_id=card_id,
            card_ids=list(instruction.captured_card_ids),
            wild=instruction.is_wild,
        ),
    ]
    if instruction.is_four_of_a_kind:
        logger.debug("four of a kind captured", seat=seat, month=card_month(card_id))
        events.append(
            FourOfAKindEvent(seat=seat, month=card_month(card_id), card_ids=list(instruction.captured_card_ids)),
        )
    return round_state, events


def _run_draw(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
    events: list[GameEvent],
) -> ActionResult:
    """Turn over the top card of the deck and resolve it against the field."""
    seat = round_state.current_seat
    if not round_state.deck:
        return _run_yaku_check(game_state, round_state, events)

    round_state = round_state.model_copy(update={"phase": RoundPhase.DRAWING})
    round_state, card_id = draw_from_deck(round_state)
    events.append(CardDrawnEvent(seat=seat, card_id=card_id, deck_count=len(round_state.deck)))

    wild_blocked = wild_restrictions(round_state, game_state.settings, seat, card_id)
    if requires_choice(card_id, round_state.field, wild_blocked=wild_blocked):
        candidates = find_capture_candidates(card_id, round_state.field, wild_blocked=wild_blocked)
        round_state = round_state.model_copy(
            update={
                "phase": RoundPhase.SELECT_DRAWN_MATCH,
                "pending_capture": PendingCapture(
                    seat=seat,
                    card_id=card_id,
                    source=CaptureSource.DRAWN,
                    candidates=candidates,
                ),
            },
        )
        events.append(
            CaptureChoiceEvent(
                seat=seat,
                card_id=card_id,
                source=CaptureSource.DRAWN,
                candidates=list(candidates),
                target=seat_target(seat),
            ),
        )
        return _finish(events, update_game_with_round(game_state, round_state))

    instruction = resolve_capture(card_id, round_state.field, wild_blocked=wild_blocked)
    round_state, capture_events = _apply_capture(round_state, seat, instruction, CaptureSource.DRAWN)
    events.extend(capture_events)
    return _run_yaku_check(game_state, round_state, events)


def _decision_enabled(game_state: HanafudaGameState) -> bool:
    continuation = game_state.rules.continuation
    if continuation == ContinuationStyle.NONE:
        return False
    if continuation == ContinuationStyle.KOIKOI:
        return game_state.settings.koikoi_enabled
    return True


def _run_yaku_check(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
    events: list[GameEvent],
) -> ActionResult:
    """Evaluate the active player's captured pile and request a decision on new yaku."""
    seat = round_state.current_seat
    round_state = round_state.model_copy(update={"phase": RoundPhase.YAKU_CHECK})
    player = round_state.players[seat]
    yaku = evaluate_yaku(player.captured, game_state.rules.yaku_rules, game_state.settings)
    round_state = update_player(round_state, seat, yaku=yaku)

    new_yaku = find_new_yaku(round_state.yaku_at_turn_start, yaku)
    if not new_yaku:
        return _handover(game_state, round_state, events)

    points = total_yaku_points(yaku)
    logger.info("yaku completed", seat=seat, yaku=[result.name for result in new_yaku], points=points)
    events.append(YakuCompletedEvent(seat=seat, yaku=list(new_yaku), points=points))

    if not _decision_enabled(game_state):
        return _handover(game_state, round_state, events)

    if round_state.turns_remaining_for(seat) <= 1:
        # no turn left to improve on: the round stops here
        events.append(
            DecisionMadeEvent(seat=seat, decision=Decision.STOP, continuation_count=player.continuation_count),
        )
        return _end_round(game_state, round_state, events, RoundOutcome.STOPPED, stopper=seat)

    round_state = round_state.model_copy(
        update={
            "phase": RoundPhase.CONTINUATION_DECISION,
            "pending_decision": PendingDecision(seat=seat, yaku=yaku, points=points),
        },
    )
    events.append(
        DecisionPromptEvent(
            seat=seat,
            yaku=list(yaku),
            points=points,
            turns_remaining=round_state.turns_remaining_for(seat) - 1,
            target=seat_target(seat),
        ),
    )
    return _finish(events, update_game_with_round(game_state, round_state))


def _handover(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
    events: list[GameEvent],
) -> ActionResult:
    """End the turn and pass play on, or end the round when every turn is used."""
    round_state = advance_turn(round_state.model_copy(update={"phase": RoundPhase.TURN_HANDOVER}))
    if round_state.turn_count >= round_state.total_turns:
        return _end_round(game_state, round_state, events, RoundOutcome.EXHAUSTED, stopper=None)

    next_player = round_state.players[round_state.current_seat]
    round_state = round_state.model_copy(
        update={"phase": RoundPhase.SELECT_HAND, "yaku_at_turn_start": next_player.yaku},
    )
    events.append(
        TurnEvent(
            current_seat=next_player.seat,
            phase=round_state.phase,
            turns_remaining=round_state.turns_remaining,
            target=seat_target(next_player.seat),
        ),
    )
    return _finish(events, update_game_with_round(game_state, round_state))


def score_round(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
    outcome: RoundOutcome,
    stopper: int | None,
) -> ScoreBreakdown:
    """Dispatch round scoring to the active variant."""
    settings = game_state.settings
    rules = game_state.rules
    if settings.variant == Variant.SAKURA:
        return score_sakura_round(round_state, settings, rules)
    if settings.variant == Variant.HACHI_HACHI:
        return score_hachi_hachi_round(round_state, settings, rules, stopper, outcome)
    scoring_seats = (stopper,) if stopper is not None else exhaustion_scorers(round_state, settings)
    return score_koikoi_round(round_state, settings, scoring_seats, outcome)


def _end_round(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
    events: list[GameEvent],
    outcome: RoundOutcome,
    stopper: int | None,
) -> ActionResult:
    round_state = _apply_gaji_bonus(game_state, round_state, events)
    round_state = round_state.model_copy(
        update={
            "phase": RoundPhase.ROUND_END,
            "stopped_by": stopper,
            "pending_decision": None,
            "pending_capture": None,
        },
    )
    breakdown = score_round(game_state, round_state, outcome, stopper)
    game_state = update_game_with_round(game_state, round_state)
    game_state, end_events = process_round_end(game_state, breakdown)
    events.extend(end_events)
    return _finish(events, game_state)


def _apply_gaji_bonus(
    game_state: HanafudaGameState,
    round_state: HanafudaRoundState,
    events: list[GameEvent],
) -> HanafudaRoundState:
    """Sweep field cards of the month taken with the gaji into its capturer's pile."""
    seat = round_state.gaji_seat
    month = round_state.gaji_month
    if seat is None or month is None:
        return round_state
    bonus = tuple(card_id for card_id in round_state.field if card_month(card_id) == month)
    if not bonus:
        return round_state

    round_state = remove_from_field(round_state, bonus)
    round_state = add_to_captured(round_state, seat, bonus)
    captured = round_state.players[seat].captured
    round_state = update_player(
        round_state,
        seat,
        yaku=evaluate_yaku(captured, game_state.rules.yaku_rules, game_state.settings),
    )
    logger.info("gaji bonus", seat=seat, month=month, card_ids=list(bonus))
    events.append(
        CaptureEvent(seat=seat, source=CaptureSource.GAJI_BONUS, card_id=bonus[0], card_ids=list(bonus)),
    )
    return round_state

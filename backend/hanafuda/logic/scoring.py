"""
Round scoring for every card-play variant.

All functions are pure: they read a round state snapshot and return a
ScoreBreakdown. Settlement terms that move points between players are
checked to sum to zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from hanafuda.logic.cards import card_category, card_month
from hanafuda.logic.enums import FieldSizeRule, MultiplierMode, RoundOutcome, SimultaneousScoring
from hanafuda.logic.invariants import assert_zero_sum
from hanafuda.logic.teyaku import teyaku_value
from hanafuda.logic.types import PlayerScoreLine, ScoreBreakdown
from hanafuda.logic.yaku import total_yaku_points

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hanafuda.logic.settings import GameSettings
    from hanafuda.logic.state import HanafudaRoundState
    from hanafuda.logic.variants import VariantRules

logger = structlog.get_logger()

AUTO_DOUBLE_THRESHOLD = 7
GRAND_FIELD_MONTHS = frozenset({11, 12})
LARGE_FIELD_MONTHS = frozenset({1, 3, 8})
GRAND_FIELD_MULTIPLIER = 4
LARGE_FIELD_MULTIPLIER = 2
# Sakura basa (100+) and chu (50+) margins both count as two wins
BASA_CHU_MARGIN = 50
BASA_CHU_WINS = 2


def card_points(card_ids: Sequence[int], rules: VariantRules) -> int:
    """Sum of the variant's category values over a set of cards."""
    return sum(rules.card_value(card_category(card_id)) for card_id in card_ids)


def continuation_multiplier(num_pushes: int, mode: MultiplierMode) -> int:
    """Multiplier earned by koi-koi calls made this round."""
    if num_pushes == 0:
        return 1
    if mode == MultiplierMode.DOUBLE:
        return 2
    return 1 + num_pushes


def compute_field_multiplier(field: Sequence[int], rule: FieldSizeRule) -> int:
    """
    Derive the Hachi-Hachi field multiplier from the dealt field.

    A November or December card makes a grand field (4x), otherwise a
    January, March or August card makes a large field (2x).
    """
    if rule == FieldSizeRule.FIXED:
        return 1
    months = {card_month(card_id) for card_id in field}
    if months & GRAND_FIELD_MONTHS:
        return GRAND_FIELD_MULTIPLIER
    if months & LARGE_FIELD_MONTHS:
        return LARGE_FIELD_MULTIPLIER
    return 1


def settle_zero_sum(values: Sequence[int], term: str) -> tuple[int, ...]:
    """
    Each player collects their value from every other player.

    Returns the net payment per seat; the result always sums to zero.
    """
    total = sum(values)
    count = len(values)
    net = tuple(value * (count - 1) - (total - value) for value in values)
    assert_zero_sum(net, term)
    return net


def _pick_winner(totals: Sequence[int], dealer_seat: int) -> int:
    """Highest total wins; the dealer wins ties, then dealer-relative seat order."""
    count = len(totals)
    return max(
        range(count),
        key=lambda seat: (totals[seat], seat == dealer_seat, -((seat - dealer_seat) % count)),
    )


def exhaustion_scorers(round_state: HanafudaRoundState, settings: GameSettings) -> tuple[int, ...]:
    """
    Seats that score their held yaku when a round runs out without a stop.

    Players who pushed score nothing. When more than one player still holds
    unscored yaku, the simultaneous scoring setting decides who is paid.
    """
    holders = tuple(
        player.seat
        for player in round_state.players
        if player.yaku and player.seat not in round_state.continuation_seats
    )
    if len(holders) <= 1:
        return holders
    if settings.simultaneous_scoring == SimultaneousScoring.BOTH:
        return holders
    if settings.simultaneous_scoring == SimultaneousScoring.DEALER:
        return tuple(seat for seat in holders if seat == round_state.dealer_seat)
    return ()


def score_koikoi_round(
    round_state: HanafudaRoundState,
    settings: GameSettings,
    scoring_seats: Sequence[int],
    outcome: RoundOutcome,
) -> ScoreBreakdown:
    """
    Classic scoring: sum of yaku, doubled at 7+ when enabled, times the
    continuation multiplier. Only scoring seats receive points.
    """
    multiplier = continuation_multiplier(len(round_state.continuation_seats), settings.multiplier_mode)
    lines: list[PlayerScoreLine] = []
    for player in round_state.players:
        if player.seat not in scoring_seats:
            lines.append(PlayerScoreLine(seat=player.seat))
            continue
        base = total_yaku_points(player.yaku)
        doubled = settings.auto_double_7_plus and base >= AUTO_DOUBLE_THRESHOLD
        points = base * 2 if doubled else base
        lines.append(
            PlayerScoreLine(
                seat=player.seat,
                yaku=player.yaku,
                base_points=base,
                auto_doubled=doubled,
                continuation_multiplier=multiplier,
                total=points * multiplier,
            ),
        )

    scored = [line for line in lines if line.total > 0]
    if not scored:
        outcome = RoundOutcome.DRAW
        winner = None
    else:
        winner = max(scored, key=lambda line: (line.total, line.seat == round_state.dealer_seat)).seat

    logger.debug("koikoi round scored", winner=winner, multiplier=multiplier, outcome=outcome)
    return ScoreBreakdown(variant=settings.variant, outcome=outcome, winner_seat=winner, lines=tuple(lines))


def score_sakura_round(
    round_state: HanafudaRoundState,
    settings: GameSettings,
    rules: VariantRules,
) -> ScoreBreakdown:
    """
    Sakura scoring: captured card points minus a penalty for every
    combination held by each other player. With both_players_score the
    achiever gains the combination value instead.
    """
    yaku_values = [total_yaku_points(player.yaku) for player in round_state.players]
    all_yaku_value = sum(yaku_values)
    lines: list[PlayerScoreLine] = []
    for player in round_state.players:
        points = card_points(player.captured, rules)
        if settings.sakura_both_players_score:
            penalty = 0
            total = points + yaku_values[player.seat]
        else:
            penalty = all_yaku_value - yaku_values[player.seat]
            total = points - penalty
        lines.append(
            PlayerScoreLine(
                seat=player.seat,
                yaku=player.yaku,
                base_points=yaku_values[player.seat],
                card_points=points,
                card_score=points,
                penalty=penalty,
                total=total,
            ),
        )

    winner = _pick_winner([line.total for line in lines], round_state.dealer_seat)
    return ScoreBreakdown(
        variant=settings.variant,
        outcome=RoundOutcome.EXHAUSTED,
        winner_seat=winner,
        lines=tuple(lines),
    )


def sakura_round_wins(breakdown: ScoreBreakdown, *, basa_chu: bool = False) -> tuple[int, ...]:
    """Wins awarded for a Sakura round under victory scoring: the round winner gets one.

    With basa_chu a winning margin of 50 or more over the best other total
    counts twice.
    """
    wins = [0] * len(breakdown.lines)
    winner = breakdown.winner_seat
    if winner is None:
        return tuple(wins)
    wins[winner] = 1
    if basa_chu:
        totals = breakdown.deltas
        best_other = max(total for seat, total in enumerate(totals) if seat != winner)
        if totals[winner] - best_other >= BASA_CHU_MARGIN:
            wins[winner] = BASA_CHU_WINS
    return tuple(wins)


def teyaku_settlement(round_state: HanafudaRoundState) -> tuple[int, ...]:
    """Zero-sum teyaku payments, scaled by the field multiplier."""
    values = [teyaku_value(player.teyaku) * round_state.field_multiplier for player in round_state.players]
    return settle_zero_sum(values, "teyaku")


def score_hachi_hachi_round(
    round_state: HanafudaRoundState,
    settings: GameSettings,
    rules: VariantRules,
    shoubu_seat: int | None,
    outcome: RoundOutcome,
) -> ScoreBreakdown:
    """
    Hachi-Hachi scoring, three independent terms per player:

    1. teyaku payments settled at deal time
    2. (captured points - par value) * field multiplier
    3. dekiyaku payments, only for the player who called shoubu
    """
    multiplier = round_state.field_multiplier
    count = len(round_state.players)
    teyaku_payments = round_state.teyaku_payments or (0,) * count

    dekiyaku_values = [0] * count
    if shoubu_seat is not None:
        dekiyaku_values[shoubu_seat] = total_yaku_points(round_state.players[shoubu_seat].yaku) * multiplier
    dekiyaku_payments = settle_zero_sum(dekiyaku_values, "dekiyaku")

    lines: list[PlayerScoreLine] = []
    for player in round_state.players:
        points = card_points(player.captured, rules)
        card_score = (points - round_state.par_value) * multiplier
        total = teyaku_payments[player.seat] + card_score + dekiyaku_payments[player.seat]
        lines.append(
            PlayerScoreLine(
                seat=player.seat,
                yaku=player.yaku if player.seat == shoubu_seat else (),
                base_points=total_yaku_points(player.yaku) if player.seat == shoubu_seat else 0,
                continuation_multiplier=multiplier,
                card_points=points,
                card_score=card_score,
                teyaku_payment=teyaku_payments[player.seat],
                dekiyaku_payment=dekiyaku_payments[player.seat],
                total=total,
            ),
        )

    if shoubu_seat is not None:
        winner = shoubu_seat
    else:
        winner = _pick_winner([line.total for line in lines], round_state.dealer_seat)
    return ScoreBreakdown(
        variant=settings.variant,
        outcome=outcome,
        winner_seat=winner,
        field_multiplier=multiplier,
        lines=tuple(lines),
    )

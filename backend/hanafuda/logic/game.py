"""
Match initialization and progression for Hanafuda.

Owns everything between rounds: dealing a new round, applying a round's
score breakdown to the match totals and ledger, dealer rotation and the
match-end check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from hanafuda.logic.capture import find_complete_months, resolve_field_four
from hanafuda.logic.cards import card_month
from hanafuda.logic.deck import create_deck, create_deck_from_cards, deal, get_deal_sizes, trade_three_of_a_kind
from hanafuda.logic.enums import DealerRotation, GamePhase, RoundPhase, Variant
from hanafuda.logic.events import (
    FourOfAKindEvent,
    GameEndedEvent,
    GameEvent,
    RoundEndEvent,
    RoundStartedEvent,
    TeyakuEvent,
    TurnEvent,
    seat_target,
)
from hanafuda.logic.exceptions import InvalidActionError, UnsupportedSettingsError
from hanafuda.logic.rng import determine_first_dealer, generate_seed
from hanafuda.logic.scoring import compute_field_multiplier, sakura_round_wins, teyaku_settlement
from hanafuda.logic.settings import GameSettings, validate_settings
from hanafuda.logic.state import (
    HanafudaGameState,
    HanafudaPlayer,
    HanafudaRoundState,
    get_player_view,
)
from hanafuda.logic.state_utils import add_to_captured, remove_from_field
from hanafuda.logic.teyaku import evaluate_teyaku
from hanafuda.logic.types import GameEndResult, PlayerStanding, RoundRecord, ScoreBreakdown, SeatConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger()

HEADS_UP_PLAYERS = 2


def init_game(
    seat_configs: Sequence[SeatConfig],
    settings: GameSettings | None = None,
    seed: str = "",
    deck: Sequence[int] | None = None,
) -> HanafudaGameState:
    """
    Initialize a new match and deal its first round.

    The first dealer is drawn from the seed. When a deck order is provided
    (tests, replays) it is used for the first round and seat 0 deals.
    Later rounds are always shuffled from the seed; one is generated when
    none is given.
    """
    game_settings = settings or GameSettings()
    validate_settings(game_settings)
    if game_settings.variant == Variant.MATCH:
        raise UnsupportedSettingsError("match mode is played with match_game.init_match_game")
    if len(seat_configs) != game_settings.num_players:
        raise UnsupportedSettingsError(
            f"expected {game_settings.num_players} seat configs, got {len(seat_configs)}",
        )

    game_seed = seed or generate_seed()
    if deck is not None:
        dealer_seat = 0
    else:
        dealer_seat, _ = determine_first_dealer(game_seed, game_settings.num_players)

    game_state = HanafudaGameState(
        settings=game_settings,
        seat_configs=tuple(seat_configs),
        round_state=HanafudaRoundState(),
        dealer_seat=dealer_seat,
        scores=(0,) * game_settings.num_players,
        seed=game_seed,
    )
    logger.info(
        "match initialized",
        variant=game_settings.variant,
        num_players=game_settings.num_players,
        total_rounds=game_settings.total_rounds,
        dealer_seat=dealer_seat,
    )
    return init_round(game_state, deck=deck)


def init_round(
    game_state: HanafudaGameState,
    deck: Sequence[int] | None = None,
) -> HanafudaGameState:
    """
    Deal a new round and leave it waiting for the dealer's first play.

    Dealing also settles everything fixed at deal time: a month lying
    complete on the field goes to the dealer, and in Hachi-Hachi the field
    multiplier and teyaku payments are determined.
    """
    settings = game_state.settings
    rules = game_state.rules
    num_players = settings.num_players
    dealer_seat = game_state.dealer_seat

    cards = create_deck_from_cards(deck) if deck is not None else create_deck(game_state.seed, game_state.round_number)
    hand_size, field_size = get_deal_sizes(rules, num_players)
    dealt = deal(cards, num_players=num_players, dealer_seat=dealer_seat, hand_size=hand_size, field_size=field_size)
    if settings.variant == Variant.SAKURA and settings.sakura_chitsiobiki:
        dealt, trades = trade_three_of_a_kind(dealt, rules)
        for trade in trades:
            logger.info("chitsiobiki trade", seat=trade.seat, given=trade.given, received=trade.received)

    players = tuple(
        HanafudaPlayer(
            seat=seat,
            name=config.name,
            is_ai=config.is_ai,
            hand=dealt.hands[seat],
            dealt_hand=dealt.hands[seat],
        )
        for seat, config in enumerate(game_state.seat_configs)
    )
    round_state = HanafudaRoundState(
        phase=RoundPhase.DEALING,
        round_number=game_state.round_number,
        field=dealt.field,
        deck=dealt.deck,
        players=players,
        dealer_seat=dealer_seat,
        current_seat=dealer_seat,
        turns_per_player=dealt.turns_per_player,
        par_value=settings.par_value,
    )

    for month in find_complete_months(round_state.field):
        instruction = resolve_field_four(round_state.field, month)
        round_state = remove_from_field(round_state, instruction.captured_card_ids)
        round_state = add_to_captured(round_state, dealer_seat, instruction.captured_card_ids)
        logger.info("initial field capture", seat=dealer_seat, month=month)

    if rules.has_teyaku:
        players = tuple(
            player.model_copy(update={"teyaku": evaluate_teyaku(player.dealt_hand)})
            for player in round_state.players
        )
        round_state = round_state.model_copy(
            update={
                "players": players,
                "field_multiplier": compute_field_multiplier(dealt.field, settings.field_size_rule),
            },
        )
        round_state = round_state.model_copy(update={"teyaku_payments": teyaku_settlement(round_state)})

    round_state = round_state.model_copy(update={"phase": RoundPhase.SELECT_HAND})
    logger.info(
        "round dealt",
        round_number=game_state.round_number,
        dealer_seat=dealer_seat,
        turns_per_player=dealt.turns_per_player,
        field_multiplier=round_state.field_multiplier,
    )
    return game_state.model_copy(update={"round_state": round_state})


def round_start_events(game_state: HanafudaGameState) -> list[GameEvent]:
    """Events announcing a freshly dealt round: per-seat views, deal-time captures and teyaku."""
    round_state = game_state.round_state
    events: list[GameEvent] = [
        RoundStartedEvent(view=get_player_view(game_state, player.seat), target=seat_target(player.seat))
        for player in round_state.players
    ]

    dealer = round_state.players[round_state.dealer_seat]
    months = sorted({card_month(card_id) for card_id in dealer.captured})
    events.extend(
        FourOfAKindEvent(
            seat=dealer.seat,
            month=month,
            card_ids=[card_id for card_id in dealer.captured if card_month(card_id) == month],
        )
        for month in months
    )

    if round_state.teyaku_payments:
        events.extend(
            TeyakuEvent(seat=player.seat, teyaku=list(player.teyaku), payment=round_state.teyaku_payments[player.seat])
            for player in round_state.players
            if player.teyaku
        )

    events.append(
        TurnEvent(
            current_seat=round_state.current_seat,
            phase=round_state.phase,
            turns_remaining=round_state.turns_remaining,
            target=seat_target(round_state.current_seat),
        ),
    )
    return events


def next_dealer_seat(
    game_state: HanafudaGameState,
    breakdown: ScoreBreakdown,
) -> int:
    """Pick the next round's dealer according to the variant's rotation rule."""
    dealer = game_state.dealer_seat
    num_players = game_state.settings.num_players
    rotation = game_state.rules.dealer_rotation
    winner = breakdown.winner_seat

    if rotation == DealerRotation.WINNER:
        return winner if winner is not None else dealer
    if rotation == DealerRotation.LOSER_HEADS_UP and num_players == HEADS_UP_PLAYERS:
        return 1 - winner if winner is not None else dealer
    return (dealer + 1) % num_players


def check_game_end(game_state: HanafudaGameState) -> bool:
    """Match ends after the configured number of rounds or when a score reaches the early-win threshold."""
    if game_state.round_number > game_state.total_rounds:
        return True
    threshold = game_state.settings.early_win_threshold
    return threshold is not None and any(score >= threshold for score in game_state.scores)


def _uses_victory_scoring(settings: GameSettings) -> bool:
    return settings.variant == Variant.SAKURA and settings.sakura_victory_scoring


def finalize_game(game_state: HanafudaGameState) -> GameEndResult:
    """
    Build final standings, highest score first, ties broken by seat order.

    Under Sakura victory scoring round wins rank first and points break ties.
    """
    round_wins = game_state.round_wins or (0,) * len(game_state.seat_configs)
    victory = _uses_victory_scoring(game_state.settings)
    standings = sorted(
        (
            PlayerStanding(seat=seat, name=config.name, score=game_state.scores[seat], round_wins=round_wins[seat])
            for seat, config in enumerate(game_state.seat_configs)
        ),
        key=lambda standing: (-standing.round_wins if victory else 0, -standing.score, standing.seat),
    )
    return GameEndResult(winner_seat=standings[0].seat, standings=tuple(standings), num_rounds=len(game_state.ledger))


def process_round_end(
    game_state: HanafudaGameState,
    breakdown: ScoreBreakdown,
) -> tuple[HanafudaGameState, list[GameEvent]]:
    """Apply a round's score breakdown to the match and advance the round counter."""
    if len(breakdown.lines) != len(game_state.scores):
        raise ValueError("score breakdown does not match the number of players")

    scores = tuple(score + delta for score, delta in zip(game_state.scores, breakdown.deltas, strict=True))
    awarded = (
        sakura_round_wins(breakdown, basa_chu=game_state.settings.sakura_basa_chu)
        if _uses_victory_scoring(game_state.settings)
        else (0,) * len(scores)
    )
    previous_wins = game_state.round_wins or (0,) * len(scores)
    round_wins = tuple(wins + new for wins, new in zip(previous_wins, awarded, strict=True))
    record = RoundRecord(
        round_number=game_state.round_number,
        dealer_seat=game_state.dealer_seat,
        outcome=breakdown.outcome,
        winner_seat=breakdown.winner_seat,
        deltas=breakdown.deltas,
        scores_after=scores,
        round_wins=awarded,
    )
    new_state = game_state.model_copy(
        update={
            "scores": scores,
            "round_wins": round_wins,
            "ledger": (*game_state.ledger, record),
            "round_number": game_state.round_number + 1,
            "dealer_seat": next_dealer_seat(game_state, breakdown),
        },
    )
    logger.info(
        "round ended",
        round_number=record.round_number,
        outcome=breakdown.outcome,
        winner_seat=breakdown.winner_seat,
        deltas=list(breakdown.deltas),
        scores=list(scores),
        round_wins=list(round_wins),
    )

    events: list[GameEvent] = [RoundEndEvent(round_number=record.round_number, result=breakdown, scores=list(scores))]

    if check_game_end(new_state):
        new_state = new_state.model_copy(update={"phase": GamePhase.FINISHED})
        result = finalize_game(new_state)
        logger.info("match ended", winner_seat=result.winner_seat, num_rounds=result.num_rounds)
        events.append(
            GameEndedEvent(
                winner_seat=result.winner_seat,
                standings=list(result.standings),
                num_rounds=result.num_rounds,
            ),
        )
    return new_state, events


def start_next_round(game_state: HanafudaGameState) -> HanafudaGameState:
    """Deal the next round once the current one has been scored."""
    if game_state.game_over:
        raise InvalidActionError("match is over; start a new match")
    if game_state.round_state.phase != RoundPhase.ROUND_END:
        raise InvalidActionError(f"cannot start the next round during {game_state.round_state.phase.value}")
    return init_round(game_state)

import pytest
from pydantic import ValidationError

from hanafuda.logic.enums import CaptureSource, RoundPhase
from hanafuda.logic.state import get_player_view
from hanafuda.logic.state_utils import advance_turn, draw_from_deck, update_player
from hanafuda.logic.types import PendingCapture, PendingDecision
from hanafuda.tests.conftest import create_game_state, create_player, create_round_state


class TestFrozenState:
    def test_round_state_is_frozen(self):
        round_state = create_round_state()

        with pytest.raises(ValidationError):
            round_state.turn_count = 3

    def test_player_is_frozen(self):
        player = create_player(0, hand=(1,))

        with pytest.raises(ValidationError):
            player.hand = ()


class TestTurnsRemaining:
    def test_counts_only_the_seats_turns(self):
        round_state = create_round_state(dealer_seat=1, current_seat=1, turns_per_player=3)

        assert round_state.turns_remaining_for(1) == 3
        assert round_state.turns_remaining_for(0) == 3

        after_one = round_state.model_copy(update={"turn_count": 1})

        assert after_one.turns_remaining_for(1) == 2
        assert after_one.turns_remaining_for(0) == 3
        assert after_one.turns_remaining == 5


class TestStateUtils:
    def test_update_player_rejects_unknown_field(self):
        with pytest.raises(ValueError, match="Invalid player fields"):
            update_player(create_round_state(), 0, score=3)

    def test_update_player_rejects_bad_seat(self):
        with pytest.raises(ValueError, match="Invalid seat"):
            update_player(create_round_state(), 5, hand=())

    def test_draw_from_empty_deck(self):
        round_state = create_round_state(fill_deck=False)

        with pytest.raises(ValueError, match="empty deck"):
            draw_from_deck(round_state)

    def test_advance_turn_wraps_and_clears_sub_states(self):
        round_state = create_round_state(current_seat=1, phase=RoundPhase.TURN_HANDOVER).model_copy(
            update={"drawn_card": 5},
        )

        advanced = advance_turn(round_state)

        assert advanced.current_seat == 0
        assert advanced.turn_count == 1
        assert advanced.drawn_card is None


class TestPlayerView:
    def test_hides_other_hands_and_deck(self):
        players = (create_player(0, hand=(1, 2)), create_player(1, hand=(5, 6, 7)))
        game_state = create_game_state(create_round_state(players=players, field=(9,)))

        view = get_player_view(game_state, 1)

        assert view.seat == 1
        assert view.players[1].hand == (5, 6, 7)
        assert view.players[0].hand is None
        assert view.players[0].hand_count == 2
        assert view.field == (9,)
        assert view.deck_count == 48 - 6
        assert not hasattr(view, "deck")

    def test_capture_candidates_only_for_the_choosing_seat(self):
        round_state = create_round_state(
            players=(create_player(0, hand=(1,)), create_player(1)),
            field=(2, 3),
            phase=RoundPhase.SELECT_HAND_MATCH,
        ).model_copy(
            update={
                "pending_capture": PendingCapture(seat=0, card_id=1, source=CaptureSource.HAND, candidates=(2, 3)),
            },
        )
        game_state = create_game_state(round_state)

        assert get_player_view(game_state, 0).capture_candidates == (2, 3)
        assert get_player_view(game_state, 1).capture_candidates == ()

    def test_awaiting_decision(self):
        round_state = create_round_state(phase=RoundPhase.CONTINUATION_DECISION).model_copy(
            update={"pending_decision": PendingDecision(seat=1, yaku=(), points=6)},
        )
        game_state = create_game_state(round_state)

        assert get_player_view(game_state, 1).awaiting_decision
        assert not get_player_view(game_state, 0).awaiting_decision

    def test_shows_round_wins(self):
        game_state = create_game_state().model_copy(update={"round_wins": (2, 1)})

        view = get_player_view(game_state, 0)

        assert [player.round_wins for player in view.players] == [2, 1]

"""Tests for AIPlayerController phase-to-action mapping."""

from hanafuda.logic.ai_player import AIPlayer
from hanafuda.logic.ai_player_controller import AIPlayerController
from hanafuda.logic.enums import CaptureSource, Decision, GameAction, GamePhase, RoundPhase
from hanafuda.logic.types import PendingCapture, PendingDecision, YakuResult
from hanafuda.tests.conftest import create_game_state, create_player, create_round_state


def _game_state(**round_updates):
    players = (create_player(0, hand=(1, 5)), create_player(1, hand=(13, 17), is_ai=True))
    round_state = create_round_state(players=players, field=(2, 3, 9), current_seat=1)
    return create_game_state(round_state.model_copy(update=round_updates))


class TestAIPlayerController:
    def test_identity(self):
        controller = AIPlayerController({1: AIPlayer()})

        assert controller.is_ai_player(1)
        assert not controller.is_ai_player(0)
        assert controller.ai_player_seats == {1}

    def test_play_card_on_own_turn(self):
        controller = AIPlayerController({1: AIPlayer()})

        action, data = controller.get_turn_action(1, _game_state())

        assert action == GameAction.PLAY_CARD
        assert data["card_id"] in (13, 17)

    def test_no_action_off_turn(self):
        controller = AIPlayerController({0: AIPlayer()})

        assert controller.get_turn_action(0, _game_state()) is None

    def test_no_action_for_human_seat(self):
        controller = AIPlayerController({1: AIPlayer()})

        assert controller.get_turn_action(0, _game_state(current_seat=0)) is None

    def test_capture_choice(self):
        controller = AIPlayerController({1: AIPlayer()})
        game_state = _game_state(
            phase=RoundPhase.SELECT_DRAWN_MATCH,
            pending_capture=PendingCapture(seat=1, card_id=4, source=CaptureSource.DRAWN, candidates=(2, 3)),
        )

        assert controller.get_turn_action(1, game_state) == (GameAction.CHOOSE_CAPTURE, {"field_card_id": 2})

    def test_decision(self):
        controller = AIPlayerController({1: AIPlayer()})
        yaku = (YakuResult(name="Five Brights", points=15, card_ids=(1, 9, 29, 41, 45)),)
        game_state = _game_state(
            phase=RoundPhase.CONTINUATION_DECISION,
            pending_decision=PendingDecision(seat=1, yaku=yaku, points=15),
        )
        players = list(game_state.round_state.players)
        players[1] = players[1].model_copy(update={"yaku": yaku})
        game_state = game_state.model_copy(
            update={"round_state": game_state.round_state.model_copy(update={"players": tuple(players)})},
        )

        assert controller.get_turn_action(1, game_state) == (GameAction.DECIDE, {"decision": Decision.STOP})

    def test_no_action_after_match_end(self):
        controller = AIPlayerController({1: AIPlayer()})
        game_state = _game_state().model_copy(update={"phase": GamePhase.FINISHED})

        assert controller.get_turn_action(1, game_state) is None

"""Unit tests for HanafudaGameService orchestration and service-level edge cases."""

import pytest

from hanafuda.logic.ai_player import AIPlayer
from hanafuda.logic.ai_player_controller import AIPlayerController
from hanafuda.logic.enums import GameAction, GameErrorCode, GamePhase, Variant
from hanafuda.logic.events import BroadcastTarget, EventType, SeatTarget
from hanafuda.logic.service import HanafudaGameService
from hanafuda.logic.settings import default_settings
from hanafuda.logic.types import SeatConfig
from hanafuda.tests.conftest import FIXED_SEED

HUMAN_AND_AI = [SeatConfig(name="Human"), SeatConfig(name="Bot", is_ai=True)]
ALL_AI = [SeatConfig(name="Bot 1", is_ai=True), SeatConfig(name="Bot 2", is_ai=True)]


def _event_types(events):
    return [event.event for event in events]


def _play_human_to_end(service, game_id, seat, *, max_actions=500):
    """Drive the human seat with the heuristic AI until the match ends."""
    stand_in = AIPlayerController({seat: AIPlayer()})
    all_events = []
    for _ in range(max_actions):
        game_state = service.get_game_state(game_id)
        if game_state is None or game_state.game_over:
            return all_events
        if service.is_round_advance_pending(game_id):
            all_events.extend(service.handle_action(game_id, "Human", GameAction.NEXT_ROUND, {}))
            continue
        action_data = stand_in.get_turn_action(seat, game_state)
        assert action_data is not None, "human seat owes no action but the game is waiting"
        action, data = action_data
        all_events.extend(service.handle_action(game_id, "Human", action, data))
    pytest.fail("match did not finish")


class TestStartGame:
    def test_first_event_is_game_started(self):
        service = HanafudaGameService()

        events = service.start_game("game1", HUMAN_AND_AI, seed=FIXED_SEED)

        assert events[0].event == EventType.GAME_STARTED
        assert events[0].target == BroadcastTarget()
        assert events[0].data.player_names == ["Human", "Bot"]
        assert EventType.ROUND_STARTED in _event_types(events)

    def test_ai_plays_until_human_must_act(self):
        service = HanafudaGameService()
        service.start_game("game1", HUMAN_AND_AI, seed=FIXED_SEED)

        game_state = service.get_game_state("game1")

        assert HanafudaGameService._acting_seat(game_state) == 0 or service.is_round_advance_pending("game1")

    def test_all_ai_match_runs_to_completion(self):
        service = HanafudaGameService()

        events = service.start_game("game1", ALL_AI, settings=default_settings(Variant.KOIKOI, total_rounds=2))

        game_state = service.get_game_state("game1")
        assert game_state.phase == GamePhase.FINISHED
        assert len(game_state.ledger) == 2
        assert _event_types(events).count(EventType.ROUND_END) == 2
        assert _event_types(events)[-1] == EventType.GAME_END

    def test_auto_cleanup_removes_finished_game(self):
        service = HanafudaGameService(auto_cleanup=True)

        service.start_game("game1", ALL_AI, settings=default_settings(Variant.SAKURA, total_rounds=1))

        assert service.get_game_state("game1") is None


class TestHumanPlay:
    def test_human_plays_match_to_end(self):
        service = HanafudaGameService()
        settings = default_settings(Variant.KOIKOI, total_rounds=2)
        service.start_game("game1", HUMAN_AND_AI, settings=settings, seed=FIXED_SEED)
        seat = service.get_player_seat("game1", "Human")

        events = _play_human_to_end(service, "game1", seat)

        assert EventType.ERROR not in _event_types(events)
        assert service.get_game_state("game1").game_over
        assert len(service.get_game_state("game1").ledger) == 2

    def test_round_waits_for_confirmation(self):
        service = HanafudaGameService()
        service.start_game("game1", HUMAN_AND_AI, settings=default_settings(Variant.KOIKOI), seed=FIXED_SEED)
        stand_in = AIPlayerController({0: AIPlayer()})

        while not service.is_round_advance_pending("game1"):
            action, data = stand_in.get_turn_action(0, service.get_game_state("game1"))
            service.handle_action("game1", "Human", action, data)

        round_number = service.get_game_state("game1").round_number
        events = service.handle_action("game1", "Human", GameAction.NEXT_ROUND, {})

        started = [event for event in events if event.event == EventType.ROUND_STARTED]
        assert started
        assert started[0].data.view.round_number == round_number


class TestErrors:
    @pytest.fixture
    def service(self):
        service = HanafudaGameService()
        service.start_game("game1", HUMAN_AND_AI, seed=FIXED_SEED)
        return service

    def test_unknown_game(self, service):
        events = service.handle_action("nope", "Human", GameAction.PLAY_CARD, {"card_id": 1})

        assert events[0].data.code == GameErrorCode.GAME_ERROR

    def test_unknown_player(self, service):
        events = service.handle_action("game1", "Stranger", GameAction.PLAY_CARD, {"card_id": 1})

        assert events[0].data.code == GameErrorCode.GAME_ERROR
        assert events[0].data.message == "player not in game"

    def test_ai_seat_cannot_be_impersonated(self, service):
        assert service.get_player_seat("game1", "Bot") is None

    def test_card_not_in_hand_leaves_state(self, service):
        before = service.get_game_state("game1")
        hand = set(before.round_state.players[0].hand)
        foreign = next(card_id for card_id in range(1, 49) if card_id not in hand)

        events = service.handle_action("game1", "Human", GameAction.PLAY_CARD, {"card_id": foreign})

        assert events[0].data.code in (GameErrorCode.INVALID_PLAY, GameErrorCode.INVALID_ACTION)
        assert events[0].target == SeatTarget(seat=0)
        assert service.get_game_state("game1") is before

    def test_validation_error(self, service):
        events = service.handle_action("game1", "Human", GameAction.PLAY_CARD, {"card_id": "moon"})

        assert events[0].data.code == GameErrorCode.VALIDATION_ERROR

    def test_unknown_action(self, service):
        events = service.handle_action("game1", "Human", "shuffle", {})

        assert events[0].data.code == GameErrorCode.UNKNOWN_ACTION

    def test_next_round_without_round_end(self, service):
        events = service.handle_action("game1", "Human", GameAction.NEXT_ROUND, {})

        assert events[0].data.code == GameErrorCode.INVALID_ACTION

    def test_new_match_while_in_progress(self, service):
        events = service.handle_action("game1", "Human", GameAction.NEW_MATCH, {})

        assert events[0].data.code == GameErrorCode.INVALID_ACTION


class TestNewMatch:
    def _finished_service(self):
        service = HanafudaGameService()
        settings = default_settings(Variant.KOIKOI, total_rounds=1)
        service.start_game("game1", HUMAN_AND_AI, settings=settings, seed=FIXED_SEED)
        _play_human_to_end(service, "game1", 0)
        return service

    def test_restart_with_same_seats_and_settings(self):
        service = self._finished_service()

        events = service.handle_action("game1", "Human", GameAction.NEW_MATCH, {"seed": "cd" * 32})

        game_state = service.get_game_state("game1")
        assert events[0].event == EventType.GAME_STARTED
        assert game_state.seed == "cd" * 32
        assert game_state.settings.total_rounds == 1
        assert game_state.scores == (0, 0)
        assert game_state.ledger == ()

    def test_invalid_seed(self):
        service = self._finished_service()

        events = service.handle_action("game1", "Human", GameAction.NEW_MATCH, {"seed": "xyz"})

        assert events[0].data.code == GameErrorCode.VALIDATION_ERROR


class TestQueries:
    def test_player_view(self):
        service = HanafudaGameService()
        service.start_game("game1", HUMAN_AND_AI, seed=FIXED_SEED)

        view = service.get_player_view("game1", 0)

        assert view.players[0].hand is not None
        assert view.players[1].hand is None
        assert service.get_player_view("nope", 0) is None

    def test_cleanup(self):
        service = HanafudaGameService()
        service.start_game("game1", HUMAN_AND_AI, seed=FIXED_SEED)

        service.cleanup_game("game1")

        assert service.get_game_state("game1") is None
        assert service.get_player_seat("game1", "Human") is None

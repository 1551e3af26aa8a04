"""
HanafudaGameService: session orchestration for Hanafuda matches.

Orchestrates game logic, AI player turns, round advancement and event
generation. Action handlers stay pure and return new state; the service
owns the stored state for every game id and swaps it from each result.
The engine has no suspension points, so the service is synchronous.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any

import structlog
from pydantic import ValidationError

from hanafuda.logic.action_handlers import (
    handle_choose_capture,
    handle_decide,
    handle_next_round,
    handle_play_card,
)
from hanafuda.logic.action_result import ActionResult
from hanafuda.logic.ai_player import AIPlayer
from hanafuda.logic.ai_player_controller import AIPlayerController
from hanafuda.logic.enums import GameAction, GameErrorCode, RoundPhase
from hanafuda.logic.events import (
    ErrorEvent,
    EventType,
    GameStartedEvent,
    ServiceEvent,
    convert_events,
    seat_target,
)
from hanafuda.logic.game import init_game, round_start_events
from hanafuda.logic.settings import GameSettings
from hanafuda.logic.state import HanafudaGameState, get_player_view
from hanafuda.logic.types import (
    ChooseCaptureData,
    DecisionData,
    GameView,
    NewMatchData,
    PlayCardData,
    SeatConfig,
)

logger = structlog.get_logger()

# upper bound on AI actions within one round; a round needs far fewer
AI_ACTIONS_PER_ROUND_LIMIT = 200


@dataclass
class PendingRoundAdvance:
    """Tracks which players have confirmed readiness for the next round."""

    confirmed_seats: set[int] = dataclass_field(default_factory=set)
    required_seats: set[int] = dataclass_field(default_factory=set)  # human seats only

    @property
    def all_confirmed(self) -> bool:
        return self.required_seats.issubset(self.confirmed_seats)


class HanafudaGameService:
    """
    Game service for Hanafuda.

    Maintains game states for multiple concurrent games.
    """

    def __init__(self, *, auto_cleanup: bool = False) -> None:
        self._games: dict[str, HanafudaGameState] = {}
        self._ai_controllers: dict[str, AIPlayerController] = {}
        self._pending_advances: dict[str, PendingRoundAdvance] = {}
        self._auto_cleanup = auto_cleanup

    def start_game(
        self,
        game_id: str,
        seat_configs: Sequence[SeatConfig],
        *,
        settings: GameSettings | None = None,
        seed: str = "",
        deck: Sequence[int] | None = None,
    ) -> list[ServiceEvent]:
        """
        Start a new match with the given seats.

        Returns the game_started broadcast followed by the first round's
        events, plus any AI player turns that run before a human must act.
        When seed is provided, the match is deterministically reproducible.
        """
        game_state = init_game(seat_configs, settings=settings, seed=seed, deck=deck)
        self._games[game_id] = game_state
        self._pending_advances.pop(game_id, None)
        self._ai_controllers[game_id] = AIPlayerController(
            {seat: AIPlayer() for seat, config in enumerate(seat_configs) if config.is_ai},
        )
        logger.info(
            "game started",
            game_id=game_id,
            variant=game_state.settings.variant,
            players=[config.name for config in seat_configs],
        )

        events = [self._create_game_started_event(game_id, game_state)]
        events.extend(convert_events(round_start_events(game_state)))
        events.extend(self._process_ai_followup(game_id))
        return events

    def _create_game_started_event(self, game_id: str, game_state: HanafudaGameState) -> ServiceEvent:
        """Create a single game_started event broadcast to all players."""
        return ServiceEvent(
            event=EventType.GAME_STARTED,
            data=GameStartedEvent(
                game_id=game_id,
                player_names=[config.name for config in game_state.seat_configs],
                dealer_seat=game_state.dealer_seat,
            ),
        )

    def handle_action(
        self,
        game_id: str,
        player_name: str,
        action: GameAction,
        data: dict[str, Any],
    ) -> list[ServiceEvent]:
        """
        Handle a game action from a player.

        Processes the action and triggers AI player turns as needed.
        """
        game_state = self._games.get(game_id)
        if game_state is None:
            logger.debug("action for unknown game", game_id=game_id, player=player_name)
            return self._create_error_event(GameErrorCode.GAME_ERROR, "game not found")

        seat = self._find_player_seat(game_id, game_state, player_name)
        if seat is None:
            logger.warning("action from player not in game", game_id=game_id, player=player_name)
            return self._create_error_event(GameErrorCode.GAME_ERROR, "player not in game")

        logger.info("player action", game_id=game_id, player=player_name, seat=seat, action=action)

        if action == GameAction.NEW_MATCH:
            return self._handle_new_match(game_id, seat, data)
        if action == GameAction.NEXT_ROUND:
            return self._handle_confirm_round(game_id, seat)

        events = self._dispatch_and_process(game_id, seat, action, data)
        events.extend(self._process_ai_followup(game_id))
        return events

    def _dispatch_and_process(
        self, game_id: str, seat: int, action: GameAction, data: dict[str, Any]
    ) -> list[ServiceEvent]:
        """
        Dispatch action to its handler and process the result.

        Updates stored state from ActionResult.new_game_state. Does NOT trigger
        AI followup; that is handled by the top-level caller.
        """
        game_state = self._games[game_id]
        try:
            result = self._execute_data_action(game_state, seat, action, data)
        except ValidationError as e:
            logger.warning("invalid action data", game_id=game_id, seat=seat, action=action, error=str(e))
            return self._create_error_event(
                GameErrorCode.VALIDATION_ERROR,
                f"invalid action data: {e}",
                target=seat_target(seat),
            )

        if result is None:
            logger.warning("unknown action", game_id=game_id, seat=seat, action=action)
            return self._create_error_event(
                GameErrorCode.UNKNOWN_ACTION,
                f"unknown action: {action}",
                target=seat_target(seat),
            )

        self._update_state_from_result(game_id, result)
        events = convert_events(result.events)
        self._check_round_end(game_id)
        return events

    def _execute_data_action(
        self, game_state: HanafudaGameState, seat: int, action: GameAction, data: dict[str, Any]
    ) -> ActionResult | None:
        """Execute data-carrying actions and return the result."""
        if action == GameAction.PLAY_CARD:
            return handle_play_card(game_state, seat, PlayCardData(**data))
        if action == GameAction.CHOOSE_CAPTURE:
            return handle_choose_capture(game_state, seat, ChooseCaptureData(**data))
        if action == GameAction.DECIDE:
            return handle_decide(game_state, seat, DecisionData(**data))
        return None

    def _update_state_from_result(self, game_id: str, result: ActionResult) -> None:
        """Update stored state from ActionResult if new state was returned."""
        if result.new_game_state is not None:
            self._games[game_id] = result.new_game_state

    def _check_round_end(self, game_id: str) -> None:
        """After a scored round, finish the game or wait for round confirmations."""
        game_state = self._games[game_id]
        if game_state.round_state.phase != RoundPhase.ROUND_END or game_id in self._pending_advances:
            return

        if game_state.game_over:
            logger.info("game ended", game_id=game_id, scores=list(game_state.scores))
            if self._auto_cleanup:
                self.cleanup_game(game_id)
            return

        ai_seats = self._ai_controllers[game_id].ai_player_seats
        self._pending_advances[game_id] = PendingRoundAdvance(
            confirmed_seats=set(ai_seats),  # AI players auto-confirm
            required_seats={seat for seat in range(game_state.settings.num_players) if seat not in ai_seats},
        )

    def _handle_confirm_round(self, game_id: str, seat: int) -> list[ServiceEvent]:
        """Handle a player confirming readiness for the next round."""
        pending = self._pending_advances.get(game_id)
        if pending is None:
            return self._create_error_event(
                GameErrorCode.INVALID_ACTION,
                "no round pending confirmation",
                target=seat_target(seat),
            )

        pending.confirmed_seats.add(seat)
        if not pending.all_confirmed:
            return []  # still waiting for other players

        events = self._start_next_round(game_id)
        events.extend(self._process_ai_followup(game_id))
        return events

    def _start_next_round(self, game_id: str) -> list[ServiceEvent]:
        """Deal the next round once every human player has confirmed."""
        self._pending_advances.pop(game_id, None)
        game_state = self._games[game_id]
        result = handle_next_round(game_state, game_state.dealer_seat)
        self._update_state_from_result(game_id, result)
        return convert_events(result.events)

    def _handle_new_match(self, game_id: str, seat: int, data: dict[str, Any]) -> list[ServiceEvent]:
        """Restart a finished match with the same seats and settings."""
        game_state = self._games[game_id]
        if not game_state.game_over:
            return self._create_error_event(
                GameErrorCode.INVALID_ACTION,
                "match is still in progress",
                target=seat_target(seat),
            )
        try:
            payload = NewMatchData(**data)
        except ValidationError as e:
            logger.warning("invalid action data", game_id=game_id, seat=seat, action=GameAction.NEW_MATCH, error=str(e))
            return self._create_error_event(
                GameErrorCode.VALIDATION_ERROR,
                f"invalid action data: {e}",
                target=seat_target(seat),
            )
        return self.start_game(
            game_id,
            game_state.seat_configs,
            settings=game_state.settings,
            seed=payload.seed,
        )

    def _process_ai_followup(self, game_id: str) -> list[ServiceEvent]:
        """
        Process AI player actions iteratively.

        Loops until a human player owes an action, a round waits for human
        confirmation, or the match ends. Rounds that every player has
        confirmed are dealt here.
        """
        all_events: list[ServiceEvent] = []
        ai_controller = self._ai_controllers.get(game_id)
        if ai_controller is None:
            return all_events

        actions_this_round = 0
        while actions_this_round < AI_ACTIONS_PER_ROUND_LIMIT:
            # re-fetch state each iteration as it may have been updated
            game_state = self._games.get(game_id)
            if game_state is None or game_state.game_over:
                return all_events

            if game_state.round_state.phase == RoundPhase.ROUND_END:
                pending = self._pending_advances.get(game_id)
                if pending is None or not pending.all_confirmed:
                    return all_events
                all_events.extend(self._start_next_round(game_id))
                actions_this_round = 0
                continue

            seat = self._acting_seat(game_state)
            if seat is None or not ai_controller.is_ai_player(seat):
                return all_events

            action_data = ai_controller.get_turn_action(seat, game_state)
            if action_data is None:
                return all_events

            action, data = action_data
            all_events.extend(self._dispatch_and_process(game_id, seat, action, data))
            actions_this_round += 1

        logger.error("AI action limit reached", game_id=game_id, limit=AI_ACTIONS_PER_ROUND_LIMIT)
        return all_events

    @staticmethod
    def _acting_seat(game_state: HanafudaGameState) -> int | None:
        """Seat that owes the next action, or None when the round is not waiting on a player."""
        round_state = game_state.round_state
        if round_state.pending_capture is not None:
            return round_state.pending_capture.seat
        if round_state.pending_decision is not None:
            return round_state.pending_decision.seat
        if round_state.phase == RoundPhase.SELECT_HAND:
            return round_state.current_seat
        return None

    def _find_player_seat(self, game_id: str, game_state: HanafudaGameState, player_name: str) -> int | None:
        """Find the seat number for a human player by name."""
        ai_controller = self._ai_controllers.get(game_id)
        for seat, config in enumerate(game_state.seat_configs):
            if config.name == player_name:
                if ai_controller and ai_controller.is_ai_player(seat):
                    continue
                return seat
        return None

    def _create_error_event(self, code: GameErrorCode, message: str, target: str = "all") -> list[ServiceEvent]:
        """Create an error event wrapped in a ServiceEvent."""
        return convert_events([ErrorEvent(code=code, message=message, target=target)])

    def get_player_seat(self, game_id: str, player_name: str) -> int | None:
        """Get the seat number for a human player by name."""
        game_state = self._games.get(game_id)
        if game_state is None:
            return None
        return self._find_player_seat(game_id, game_state, player_name)

    def get_game_state(self, game_id: str) -> HanafudaGameState | None:
        """Return the current game state, or None if game doesn't exist."""
        return self._games.get(game_id)

    def get_player_view(self, game_id: str, seat: int) -> GameView | None:
        """Return what one seat may see of the game, or None if game doesn't exist."""
        game_state = self._games.get(game_id)
        if game_state is None:
            return None
        return get_player_view(game_state, seat)

    def is_round_advance_pending(self, game_id: str) -> bool:
        """Check if a round advance is waiting for human confirmation."""
        return game_id in self._pending_advances

    def cleanup_game(self, game_id: str) -> None:
        """Remove all state for a game."""
        self._games.pop(game_id, None)
        self._ai_controllers.pop(game_id, None)
        self._pending_advances.pop(game_id, None)

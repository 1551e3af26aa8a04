"""
AI player controller as a pure decision-maker.

Maps the phase the round is in to the action an AI seat would submit.
Orchestration is handled by HanafudaGameService.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from hanafuda.logic.enums import GameAction, RoundPhase

if TYPE_CHECKING:
    from hanafuda.logic.ai_player import AIPlayer
    from hanafuda.logic.state import HanafudaGameState


class AIPlayerController:
    """
    Decision-maker for AI players.

    Provides methods to check AI player identity and get AI player decisions
    as (GameAction, data) pairs. Does not orchestrate game flow.
    """

    def __init__(self, ai_players: dict[int, AIPlayer]) -> None:
        self._ai_players = ai_players

    def _get_ai_player(self, seat: int) -> AIPlayer | None:
        return self._ai_players.get(seat)

    def is_ai_player(self, seat: int) -> bool:
        """Check if a seat is occupied by an AI player."""
        return seat in self._ai_players

    @property
    def ai_player_seats(self) -> set[int]:
        """Return the set of seats occupied by AI players."""
        return set(self._ai_players.keys())

    def get_turn_action(
        self,
        seat: int,
        game_state: HanafudaGameState,
    ) -> tuple[GameAction, dict[str, Any]] | None:
        """
        Get the AI player's next action as (GameAction, data).

        Returns None if the seat is not an AI player or owes no action.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None or game_state.game_over:
            return None

        round_state = game_state.round_state
        rules = game_state.rules
        player = round_state.players[seat]

        if round_state.phase == RoundPhase.SELECT_HAND and round_state.current_seat == seat:
            action = ai_player.select_play(player, round_state, rules, game_state.settings)
            return GameAction.PLAY_CARD, {"card_id": action.card_id, "target_card_id": action.target_card_id}

        pending_capture = round_state.pending_capture
        if pending_capture is not None and pending_capture.seat == seat:
            target = ai_player.select_capture(pending_capture.candidates, rules)
            return GameAction.CHOOSE_CAPTURE, {"field_card_id": target}

        pending_decision = round_state.pending_decision
        if pending_decision is not None and pending_decision.seat == seat:
            decision = ai_player.decide_continuation(player, round_state, rules, game_state.settings)
            return GameAction.DECIDE, {"decision": decision}

        return None

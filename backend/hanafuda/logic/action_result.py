"""Shared result type for state transitions and action handlers.

Lives in a neutral module to avoid import cycles between turn.py,
game.py and action_handlers.py.
"""

from typing import NamedTuple

from hanafuda.logic.events import GameEvent
from hanafuda.logic.state import HanafudaGameState


class ActionResult(NamedTuple):
    """
    Result of a state transition.

    Contains the events produced and the new immutable game state. When
    new_game_state is None the action was rejected and the caller keeps
    its current state.
    """

    events: list[GameEvent]
    new_game_state: HanafudaGameState | None = None

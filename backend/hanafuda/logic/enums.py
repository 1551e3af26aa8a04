"""
String enum definitions for Hanafuda game concepts.
"""

from enum import Enum


class CardCategory(str, Enum):
    """Scoring category printed on every card."""

    BRIGHT = "bright"
    ANIMAL = "animal"
    RIBBON = "ribbon"
    CHAFF = "chaff"


# deterministic priority used for tie-breaks: bright > animal > ribbon > chaff
CATEGORY_PRIORITY: dict[CardCategory, int] = {
    CardCategory.BRIGHT: 0,
    CardCategory.ANIMAL: 1,
    CardCategory.RIBBON: 2,
    CardCategory.CHAFF: 3,
}


class RibbonColor(str, Enum):
    RED = "red"
    BLUE = "blue"


class Variant(str, Enum):
    """Rule variant selected at match start."""

    KOIKOI = "koikoi"
    SAKURA = "sakura"
    HACHI_HACHI = "hachi_hachi"
    MATCH = "match"


class ContinuationStyle(str, Enum):
    """How a variant reacts to a newly completed yaku."""

    KOIKOI = "koikoi"  # koi-koi (continue) or stop
    SAGE_SHOUBU = "sage_shoubu"  # sage (continue) or shoubu (stop)
    NONE = "none"  # yaku are recorded, scored at round end


class DealerRotation(str, Enum):
    WINNER = "winner"  # round winner deals next, draws keep the dealer
    LOSER_HEADS_UP = "loser_heads_up"  # 2 players: loser deals, otherwise rotate
    ROTATE = "rotate"


class RoundPhase(str, Enum):
    """Phase of a single round (turn state machine)."""

    DEALING = "dealing"
    SELECT_HAND = "select_hand"
    SELECT_HAND_MATCH = "select_hand_match"
    DRAWING = "drawing"
    SELECT_DRAWN_MATCH = "select_drawn_match"
    YAKU_CHECK = "yaku_check"
    CONTINUATION_DECISION = "continuation_decision"
    TURN_HANDOVER = "turn_handover"
    ROUND_END = "round_end"


class GamePhase(str, Enum):
    """Phase of the whole match."""

    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class CaptureSource(str, Enum):
    """Where the card that triggered a capture came from."""

    HAND = "hand"
    DRAWN = "drawn"
    FIELD = "field"  # initial field capture by the dealer
    GAJI_BONUS = "gaji_bonus"  # month paired with the wild card, swept at round end


class Decision(str, Enum):
    """Continuation decision after a new yaku."""

    CONTINUE = "continue"  # koi-koi / sage
    STOP = "stop"  # shoubu


class RoundOutcome(str, Enum):
    """How a round ended."""

    STOPPED = "stopped"
    EXHAUSTED = "exhausted"
    DRAW = "draw"


class MultiplierMode(str, Enum):
    """Continuation multiplier arithmetic."""

    DOUBLE = "double"  # 2x once anybody pushed
    CUMULATIVE = "cumulative"  # 2x, 3x, 4x... per push


class SakeViewingMode(str, Enum):
    """When the viewing-sake combinations count."""

    ALWAYS = "always"
    NEVER = "never"
    REQUIRE_OTHER = "require_other"


class SimultaneousScoring(str, Enum):
    """Who scores held yaku when a round runs out without a stop."""

    BOTH = "both"
    DEALER = "dealer"
    NONE = "none"


class FieldSizeRule(str, Enum):
    """How the Hachi-Hachi field multiplier is derived."""

    BY_FIELD = "by_field"  # small (1x), large (2x) or grand (4x) field
    FIXED = "fixed"  # always 1x


class GameAction(str, Enum):
    """Actions dispatched from client to game service."""

    PLAY_CARD = "play_card"
    CHOOSE_CAPTURE = "choose_capture"
    DECIDE = "decide"
    NEXT_ROUND = "next_round"
    NEW_MATCH = "new_match"


class GameErrorCode(str, Enum):
    """Error codes sent to clients for invalid game actions."""

    NOT_YOUR_TURN = "not_your_turn"
    INVALID_PLAY = "invalid_play"
    INVALID_CAPTURE = "invalid_capture"
    CAPTURE_CHOICE_REQUIRED = "capture_choice_required"
    INVALID_DECISION = "invalid_decision"
    INVALID_ACTION = "invalid_action"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN_ACTION = "unknown_action"
    GAME_ERROR = "game_error"

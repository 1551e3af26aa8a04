"""Centralized match settings for Hanafuda - all configurable gameplay rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hanafuda.logic.enums import (
    FieldSizeRule,
    MultiplierMode,
    SakeViewingMode,
    SimultaneousScoring,
    Variant,
)
from hanafuda.logic.exceptions import UnsupportedSettingsError

SUPPORTED_PLAYER_COUNTS: dict[Variant, tuple[int, ...]] = {
    Variant.KOIKOI: (2,),
    Variant.SAKURA: (2, 3, 4),
    Variant.HACHI_HACHI: (3,),
    Variant.MATCH: (1,),
}

DEFAULT_PAR_VALUE = 88


class GameSettings(BaseModel):
    """
    Configuration surface consumed at match start.

    Treated as an immutable input per match; changing any value requires
    starting a new match.
    """

    model_config = ConfigDict(frozen=True)

    # --- Match Structure ---
    variant: Variant = Variant.KOIKOI
    num_players: int = 2
    total_rounds: int = 12
    early_win_threshold: int | None = None

    # --- Koi-Koi ---
    koikoi_enabled: bool = True
    multiplier_mode: MultiplierMode = MultiplierMode.DOUBLE
    auto_double_7_plus: bool = True
    simultaneous_scoring: SimultaneousScoring = SimultaneousScoring.BOTH
    viewing_sake_mode: SakeViewingMode = SakeViewingMode.ALWAYS
    moon_viewing_sake_mode: SakeViewingMode = SakeViewingMode.ALWAYS
    sake_cup_counts_as_chaff: bool = False

    # --- Sakura ---
    sakura_both_players_score: bool = False
    # lightning chaff (card 44) captures any field card when played or drawn
    sakura_gaji: bool = False
    # three cards of one month in a dealt hand: the weakest is traded for the top of the deck
    sakura_chitsiobiki: bool = False
    # rank the match by round wins instead of points
    sakura_victory_scoring: bool = False
    # a round won by 50 or more points counts as two wins
    sakura_basa_chu: bool = False

    # --- Hachi-Hachi ---
    par_value: int = DEFAULT_PAR_VALUE
    field_size_rule: FieldSizeRule = FieldSizeRule.BY_FIELD

    # --- Opponent Policy ---
    ai_stop_threshold: int | None = None

    # --- Match (concentration) ---
    match_consecutive_bonus: bool = True


def default_settings(variant: Variant, **overrides: object) -> GameSettings:
    """Build settings with the player count and round count a variant is usually played with."""
    defaults: dict[Variant, dict[str, object]] = {
        Variant.KOIKOI: {"num_players": 2, "total_rounds": 12},
        Variant.SAKURA: {"num_players": 2, "total_rounds": 6},
        Variant.HACHI_HACHI: {"num_players": 3, "total_rounds": 12},
        Variant.MATCH: {"num_players": 1, "total_rounds": 1},
    }
    values = {"variant": variant, **defaults[variant], **overrides}
    return GameSettings.model_validate(values)


def validate_settings(settings: GameSettings) -> None:
    """Validate that all settings values are supported by the engine.

    Raises UnsupportedSettingsError listing every unsupported value.
    """
    errors: list[str] = []

    allowed = SUPPORTED_PLAYER_COUNTS[settings.variant]
    if settings.num_players not in allowed:
        errors.append(
            f"num_players={settings.num_players} is not supported for {settings.variant.value} "
            f"(allowed: {', '.join(str(n) for n in allowed)})"
        )

    if settings.total_rounds < 1:
        errors.append(f"total_rounds={settings.total_rounds} must be at least 1")

    if settings.early_win_threshold is not None and settings.early_win_threshold <= 0:
        errors.append(f"early_win_threshold={settings.early_win_threshold} must be positive")

    if settings.par_value <= 0:
        errors.append(f"par_value={settings.par_value} must be positive")

    if settings.ai_stop_threshold is not None and settings.ai_stop_threshold <= 0:
        errors.append(f"ai_stop_threshold={settings.ai_stop_threshold} must be positive")

    if settings.sakura_basa_chu and not settings.sakura_victory_scoring:
        errors.append("sakura_basa_chu requires sakura_victory_scoring")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))

"""Engine configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from hanafuda.logic.enums import Variant
from hanafuda.logic.settings import GameSettings, default_settings


class EngineConfig(BaseSettings):
    model_config = {"env_prefix": "HANAFUDA_"}

    default_variant: Variant = Variant.KOIKOI
    # None keeps the variant's usual round count
    default_rounds: int | None = Field(default=None, ge=1)
    log_dir: str | None = Field(default=None, min_length=1)

    def game_settings(self, variant: Variant | None = None, **overrides: object) -> GameSettings:
        """Settings for a new match, falling back to the configured defaults."""
        if self.default_rounds is not None:
            overrides.setdefault("total_rounds", self.default_rounds)
        return default_settings(variant or self.default_variant, **overrides)

"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.playback.fade import FadeCurve
from ..domain.playback.value_objects import DEFAULT_VOLUME
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    DelayMs,
    FadeStepFloat,
    IntervalMs,
    NonEmptyStr,
    PositiveFloat,
    UnitInterval,
)


class PlaybackSettings(BaseModel):
    """Audio playback and fade configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_volume: UnitInterval = DEFAULT_VOLUME
    fade_step: FadeStepFloat = 0.01
    fade_interval_ms: IntervalMs = Field(
        default=50, validation_alias=AliasChoices("fade_interval_ms", "fade_interval")
    )
    fade_start_delay_ms: DelayMs = Field(
        default=1000, validation_alias=AliasChoices("fade_start_delay_ms", "fade_delay")
    )
    autoplay_delay_ms: DelayMs = Field(
        default=500, validation_alias=AliasChoices("autoplay_delay_ms", "autoplay_delay")
    )
    sampling_interval_ms: IntervalMs = Field(
        default=16, validation_alias=AliasChoices("sampling_interval_ms", "sampling_interval")
    )
    skip_seconds: PositiveFloat = 10.0

    @property
    def fade_interval_seconds(self) -> float:
        return self.fade_interval_ms / 1000

    @property
    def fade_start_delay_seconds(self) -> float:
        return self.fade_start_delay_ms / 1000

    @property
    def autoplay_delay_seconds(self) -> float:
        return self.autoplay_delay_ms / 1000

    @property
    def sampling_interval_seconds(self) -> float:
        return self.sampling_interval_ms / 1000

    def fade_curve(self, target: float | None = None) -> FadeCurve:
        """Build the fade ramp toward *target* (the default volume when omitted)."""
        return FadeCurve(
            target=self.default_volume if target is None else target,
            step=self.fade_step,
            interval_seconds=self.fade_interval_seconds,
            start_delay_seconds=self.fade_start_delay_seconds,
        )


class EngineSettings(BaseModel):
    """Headless media engine configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ffprobe_path: NonEmptyStr = Field(
        default="ffprobe", validation_alias=AliasChoices("ffprobe_path", "ffprobe")
    )


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYBACK__DEFAULT_VOLUME, PLAYBACK__FADE_STEP, etc. (nested with ``__``)
    - ENGINE__FFPROBE_PATH
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

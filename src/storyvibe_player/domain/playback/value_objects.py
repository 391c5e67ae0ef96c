"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

import math
from enum import Enum, StrEnum

from pydantic import BaseModel, ConfigDict

from storyvibe_player.domain.shared.exceptions import ValidationError
from storyvibe_player.domain.shared.messages import ErrorMessages
from storyvibe_player.domain.shared.types import MAX_SOURCE_URL_LENGTH, UnitInterval

DEFAULT_VOLUME = 0.7
"""Volume restored on unmute when no audible level was ever set."""


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - IDLE -> LOADING (load)
    - LOADING -> READY (metadata ready)
    - LOADING -> FAILED (load error)
    - READY -> PLAYING (play)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (play)
    - PLAYING -> ENDED (natural end without loop)
    - ENDED -> PLAYING (replay from the start)

    FAILED is terminal for a session.
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    FAILED = "failed"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.LOADING},
            PlaybackState.LOADING: {PlaybackState.READY, PlaybackState.FAILED},
            PlaybackState.READY: {PlaybackState.PLAYING},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.ENDED},
            PlaybackState.PAUSED: {PlaybackState.PLAYING},
            PlaybackState.ENDED: {PlaybackState.PLAYING},
        }
        return target in valid_transitions.get(self, set())

    @property
    def can_play(self) -> bool:
        return self in {PlaybackState.READY, PlaybackState.PAUSED, PlaybackState.ENDED}

    @property
    def can_seek(self) -> bool:
        return self in {PlaybackState.READY, PlaybackState.PLAYING, PlaybackState.PAUSED}

    @property
    def is_loaded(self) -> bool:
        return self in {
            PlaybackState.READY,
            PlaybackState.PLAYING,
            PlaybackState.PAUSED,
            PlaybackState.ENDED,
        }

    @property
    def is_terminal(self) -> bool:
        return self == PlaybackState.FAILED


class MediaEvent(StrEnum):
    """Events a media engine signals to its listeners."""

    LOADED_METADATA = "loadedmetadata"
    ENDED = "ended"
    ERROR = "error"


class PlaybackOptions(BaseModel):
    """Configuration supplied by the view when a session is created."""

    model_config = ConfigDict(frozen=True, strict=True)

    loop: bool = True
    fade_enabled: bool = True
    auto_play: bool = False
    initial_volume: UnitInterval = DEFAULT_VOLUME

    @property
    def fades_in(self) -> bool:
        """True when the session ramps volume up after autoplay."""
        return self.fade_enabled and self.auto_play


def require_source_url(source_url: str) -> str:
    """Return *source_url* unchanged, or raise ValidationError if it is empty or too long."""
    if not source_url or len(source_url) > MAX_SOURCE_URL_LENGTH:
        raise ValidationError(
            ErrorMessages.INVALID_SOURCE_URL.format(max_length=MAX_SOURCE_URL_LENGTH),
            field="source_url",
        )
    return source_url


def clamp_volume(value: float) -> float:
    """Clamp a volume level to [0, 1]; NaN becomes 0."""
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def known_duration(duration: float | None) -> float:
    """Normalise an engine-reported duration; unknown, NaN or infinite values become 0."""
    if duration is None or not math.isfinite(duration) or duration < 0:
        return 0.0
    return float(duration)


def clamp_position(seconds: float, duration: float) -> float:
    """Clamp a position to [0, duration]; only the lower bound applies while duration is unknown."""
    if math.isnan(seconds):
        return 0.0
    if math.isinf(seconds) and duration <= 0:
        return 0.0
    seconds = max(0.0, seconds)
    if duration > 0:
        return min(seconds, duration)
    return seconds

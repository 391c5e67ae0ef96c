"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from storyvibe_player.domain.playback.value_objects import (
    DEFAULT_VOLUME,
    PlaybackOptions,
    PlaybackState,
    clamp_position,
    clamp_volume,
    known_duration,
)
from storyvibe_player.domain.shared.exceptions import InvalidOperationError
from storyvibe_player.domain.shared.types import (
    NonNegativeFloat,
    SourceUrlStr,
    UnitInterval,
)


class PlaybackSnapshot(BaseModel):
    """Read-only view of a session, suitable for UI binding."""

    model_config = ConfigDict(frozen=True)

    source_url: str
    state: PlaybackState
    position: NonNegativeFloat = 0.0
    duration: NonNegativeFloat = 0.0
    volume: UnitInterval = DEFAULT_VOLUME
    muted: bool = False
    loop: bool = True
    error_message: str | None = None

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.muted else self.volume

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    @property
    def is_loading(self) -> bool:
        return self.state in {PlaybackState.IDLE, PlaybackState.LOADING}

    @property
    def has_failed(self) -> bool:
        return self.state == PlaybackState.FAILED


class PlaybackSession(BaseModel):
    """Aggregate root holding the state of one loaded audio track."""

    model_config = ConfigDict(strict=True)

    source_url: SourceUrlStr
    options: PlaybackOptions = Field(default_factory=PlaybackOptions)
    state: PlaybackState = PlaybackState.IDLE
    duration: NonNegativeFloat = 0.0
    position: NonNegativeFloat = 0.0
    volume: UnitInterval = DEFAULT_VOLUME
    muted: bool = False
    last_audible_volume: UnitInterval = 0.0
    error_message: str | None = None
    disposed: bool = False
    fade_pending: bool = False

    @classmethod
    def create(cls, source_url: str, options: PlaybackOptions | None = None) -> PlaybackSession:
        options = options or PlaybackOptions()
        return cls(
            source_url=source_url,
            options=options,
            volume=options.initial_volume,
            last_audible_volume=options.initial_volume,
        )

    @property
    def loop(self) -> bool:
        return self.options.loop

    @property
    def fade_enabled(self) -> bool:
        return self.options.fade_enabled

    @property
    def effective_volume(self) -> float:
        """Audible output level; recomputed on every read."""
        return 0.0 if self.muted else self.volume

    @property
    def is_active(self) -> bool:
        """True while the session can still make progress."""
        return not self.disposed and not self.state.is_terminal

    def transition_to(self, target: PlaybackState) -> PlaybackState:
        """Move to *target*, returning the previous state."""
        if self.disposed or not self.state.can_transition_to(target):
            current = "disposed" if self.disposed else self.state.value
            raise InvalidOperationError(operation=f"transition to {target.value}", current_state=current)
        previous = self.state
        self.state = target
        return previous

    def begin_loading(self) -> PlaybackState:
        return self.transition_to(PlaybackState.LOADING)

    def mark_ready(self, duration: float | None) -> PlaybackState:
        previous = self.transition_to(PlaybackState.READY)
        self.duration = known_duration(duration)
        self.position = 0.0
        return previous

    def mark_failed(self, reason: str) -> PlaybackState:
        previous = self.transition_to(PlaybackState.FAILED)
        self.error_message = reason
        return previous

    def mark_playing(self) -> PlaybackState:
        if self.state == PlaybackState.ENDED:
            self.position = 0.0
        return self.transition_to(PlaybackState.PLAYING)

    def mark_paused(self, position: float) -> PlaybackState:
        previous = self.transition_to(PlaybackState.PAUSED)
        self.update_position(position)
        return previous

    def mark_ended(self) -> PlaybackState:
        previous = self.transition_to(PlaybackState.ENDED)
        self.position = 0.0
        return previous

    def update_position(self, seconds: float) -> float:
        self.position = clamp_position(seconds, self.duration)
        return self.position

    def seek_to(self, seconds: float) -> float:
        if not self.state.can_seek or self.disposed:
            raise InvalidOperationError(operation="seek", current_state=self.state.value)
        return self.update_position(seconds)

    def set_volume(self, value: float) -> float:
        """Set the user volume; a positive level also lifts an active mute."""
        self.fade_pending = False
        self.volume = clamp_volume(value)
        if self.volume > 0:
            self.last_audible_volume = self.volume
            self.muted = False
        return self.volume

    def hold_for_fade(self) -> None:
        """Silence the track until the autoplay fade-in takes over."""
        self.set_fade_level(0.0)
        self.fade_pending = True

    def claim_fade(self) -> bool:
        """Consume the pending fade-in; False when the user already set a level."""
        pending = self.fade_pending
        self.fade_pending = False
        return pending

    def set_fade_level(self, value: float) -> float:
        """Set the volume from a fade step; mute is left untouched."""
        self.volume = clamp_volume(value)
        if self.volume > 0:
            self.last_audible_volume = self.volume
        return self.volume

    def toggle_mute(self) -> bool:
        self.fade_pending = False
        if self.muted:
            self.muted = False
            if self.volume <= 0:
                self.volume = self.last_audible_volume or DEFAULT_VOLUME
        else:
            self.muted = True
        return self.muted

    def mark_disposed(self) -> None:
        self.disposed = True

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            source_url=self.source_url,
            state=self.state,
            position=self.position,
            duration=self.duration,
            volume=self.volume,
            muted=self.muted,
            loop=self.loop,
            error_message=self.error_message,
        )

"""
Playback Bounded Context

Domain logic for a single audio session: state machine, volume and
position rules, fade ramp and emitted events.
"""

from storyvibe_player.domain.playback.entities import PlaybackSession, PlaybackSnapshot
from storyvibe_player.domain.playback.events import (
    PlaybackEvent,
    PlaybackLoadFailed,
    PlaybackRejected,
    PlaybackSessionDisposed,
    PlaybackStateChanged,
)
from storyvibe_player.domain.playback.fade import FadeCurve
from storyvibe_player.domain.playback.formatting import format_time
from storyvibe_player.domain.playback.value_objects import (
    MediaEvent,
    PlaybackOptions,
    PlaybackState,
)

__all__ = [
    # Entities
    "PlaybackSession",
    "PlaybackSnapshot",
    # Value Objects
    "PlaybackState",
    "PlaybackOptions",
    "MediaEvent",
    "FadeCurve",
    # Events
    "PlaybackEvent",
    "PlaybackStateChanged",
    "PlaybackLoadFailed",
    "PlaybackRejected",
    "PlaybackSessionDisposed",
    # Helpers
    "format_time",
]

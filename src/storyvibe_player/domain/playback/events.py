"""Domain events emitted by the playback controller."""

from __future__ import annotations

from storyvibe_player.domain.playback.value_objects import PlaybackState
from storyvibe_player.domain.shared.events import DomainEvent


class PlaybackEvent(DomainEvent):
    """Base for every event about one audio session."""

    source_url: str = ""


class PlaybackStateChanged(PlaybackEvent):
    previous: PlaybackState = PlaybackState.IDLE
    current: PlaybackState = PlaybackState.IDLE


class PlaybackLoadFailed(PlaybackEvent):
    reason: str = ""


class PlaybackRejected(PlaybackEvent):
    reason: str = ""
    autoplay: bool = False


class PlaybackSessionDisposed(PlaybackEvent):
    final_state: PlaybackState = PlaybackState.IDLE

"""Query for the display state of a player instance."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict

from storyvibe_player.domain.playback.formatting import format_time
from storyvibe_player.domain.shared.messages import DisplayMessages
from storyvibe_player.domain.shared.types import NonNegativeFloat, PositiveFloat, UnitInterval

if TYPE_CHECKING:
    from ..services.playback_controller import AudioPlaybackController

PlayerStatus = Literal["loading", "failed", "ready"]


class GetPlayerViewQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    show_controls: bool = True
    skip_seconds: PositiveFloat = 10.0


class PlayerView(BaseModel):
    """Everything a player widget renders, derived from one snapshot."""

    model_config = ConfigDict(frozen=True)

    status: PlayerStatus
    message: str | None = None
    title: str = ""
    show_controls: bool = True
    is_playing: bool = False
    is_muted: bool = False
    play_label: str = DisplayMessages.PLAY
    mute_label: str = DisplayMessages.MUTE
    skip_backward_label: str = ""
    skip_forward_label: str = ""
    seek_label: str = DisplayMessages.SEEK
    volume_label: str = DisplayMessages.VOLUME
    seek_value: NonNegativeFloat = 0.0
    seek_max: NonNegativeFloat = 0.0
    volume_value: UnitInterval = 0.0
    time_label: str = "0:00 / 0:00"


class GetPlayerViewHandler:

    def __init__(self, *, controller: AudioPlaybackController) -> None:
        self._controller = controller

    def handle(self, query: GetPlayerViewQuery) -> PlayerView:
        snapshot = self._controller.snapshot()

        if snapshot.has_failed:
            return PlayerView(
                status="failed", message=DisplayMessages.LOAD_FAILED, title=query.title
            )

        if not snapshot.state.is_loaded:
            return PlayerView(
                status="loading", message=DisplayMessages.LOADING, title=query.title
            )

        return PlayerView(
            status="ready",
            title=query.title,
            show_controls=query.show_controls,
            is_playing=snapshot.is_playing,
            is_muted=snapshot.muted,
            play_label=DisplayMessages.PAUSE if snapshot.is_playing else DisplayMessages.PLAY,
            mute_label=DisplayMessages.UNMUTE if snapshot.muted else DisplayMessages.MUTE,
            skip_backward_label=DisplayMessages.SKIP_BACKWARD.format(seconds=query.skip_seconds),
            skip_forward_label=DisplayMessages.SKIP_FORWARD.format(seconds=query.skip_seconds),
            seek_value=snapshot.position,
            seek_max=snapshot.duration,
            volume_value=snapshot.effective_volume,
            time_label=f"{format_time(snapshot.position)} / {format_time(snapshot.duration)}",
        )

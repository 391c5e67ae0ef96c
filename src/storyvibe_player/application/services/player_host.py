"""A mounted player instance in a reading view."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from storyvibe_player.application.queries.get_player_view import (
    GetPlayerViewHandler,
    GetPlayerViewQuery,
    PlayerView,
)
from storyvibe_player.domain.playback.value_objects import PlaybackOptions, require_source_url
from storyvibe_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.playback.entities import PlaybackSnapshot
    from .playback_controller import AudioPlaybackController

logger = logging.getLogger(__name__)


class PlayerHost:
    """Binds one controller to the track a view currently shows.

    Mounting a different URL (or different options) disposes the previous
    session before loading the new one, so at most one session is live per
    host. Remounting the same healthy track keeps the existing session.
    """

    def __init__(
        self,
        controller: AudioPlaybackController,
        *,
        title: str = "",
        show_controls: bool = True,
        skip_seconds: float = 10.0,
    ) -> None:
        self._controller = controller
        self._title = title
        self._show_controls = show_controls
        self._skip_seconds = skip_seconds
        self._view_handler = GetPlayerViewHandler(controller=controller)

    @property
    def controller(self) -> AudioPlaybackController:
        return self._controller

    @property
    def is_mounted(self) -> bool:
        session = self._controller.session
        return session is not None and not session.disposed

    def mount(
        self, source_url: str, options: PlaybackOptions | None = None, *, title: str | None = None
    ) -> PlaybackSnapshot:
        require_source_url(source_url)
        if title is not None:
            self._title = title

        session = self._controller.session
        if (
            session is not None
            and session.is_active
            and session.source_url == source_url
            and (options is None or options == session.options)
        ):
            logger.debug(LogTemplates.HOST_REMOUNT_SAME_URL, source_url)
            return session.snapshot()

        self._controller.dispose()
        snapshot = self._controller.load(source_url, options)
        logger.info(LogTemplates.HOST_MOUNTED, source_url)
        return snapshot

    def unmount(self) -> None:
        was_mounted = self.is_mounted
        self._controller.dispose()
        if was_mounted:
            logger.info(LogTemplates.HOST_UNMOUNTED)

    def view(self) -> PlayerView:
        return self._view_handler.handle(
            GetPlayerViewQuery(
                title=self._title,
                show_controls=self._show_controls,
                skip_seconds=self._skip_seconds,
            )
        )

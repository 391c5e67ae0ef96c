"""Dependency Injection Container

Builds the player's object graph from settings: the event bus, the media
engine factory, playback controllers and mounted player hosts. Shared
components are created lazily and cached; controllers and hosts are
created fresh for each player instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.media_engine import EngineFactory
    from ..application.services.playback_controller import AudioPlaybackController
    from ..application.services.player_host import PlayerHost
    from ..domain.shared.events import EventBus
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Each container owns its own event bus; nothing is process-global.
    """

    settings: Settings
    _event_bus: EventBus | None = None
    _engine_factory: EngineFactory | None = None
    _hosts: list[PlayerHost] = field(default_factory=list)

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def engine_factory(self) -> EngineFactory:
        """Factory for media engines; defaults to the headless ffprobe engine."""
        if self._engine_factory is None:
            from ..infrastructure.audio.headless_engine import HeadlessMediaEngine

            engine_settings = self.settings.engine

            def factory(source_url: str) -> HeadlessMediaEngine:
                return HeadlessMediaEngine(source_url, settings=engine_settings)

            self._engine_factory = factory
        return self._engine_factory

    def set_engine_factory(self, factory: EngineFactory) -> None:
        """Swap the media engine implementation (e.g. a browser bridge or a test fake)."""
        self._engine_factory = factory

    def create_controller(self) -> AudioPlaybackController:
        from ..application.services.playback_controller import AudioPlaybackController

        return AudioPlaybackController(
            self.engine_factory,
            settings=self.settings.playback,
            event_bus=self.event_bus,
        )

    def create_player_host(self, *, title: str = "", show_controls: bool = True) -> PlayerHost:
        from ..application.services.player_host import PlayerHost

        host = PlayerHost(
            self.create_controller(),
            title=title,
            show_controls=show_controls,
            skip_seconds=self.settings.playback.skip_seconds,
        )
        self._hosts.append(host)
        return host

    def shutdown(self) -> int:
        """Unmount every player host created by this container."""
        count = 0
        for host in self._hosts:
            if host.is_mounted:
                count += 1
            host.unmount()
        self._hosts.clear()

        if self._event_bus is not None:
            self._event_bus.clear()

        logger.info(LogTemplates.CONTAINER_SHUTDOWN, count)
        return count


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)

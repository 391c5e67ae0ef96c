"""Port interface for the host media engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from storyvibe_player.domain.playback.value_objects import MediaEvent
from storyvibe_player.domain.shared.exceptions import ResourceLoadError

MediaListener = Callable[[], None]


class MediaEngine(ABC):
    """Interface for one streaming audio resource.

    Engines signal :class:`MediaEvent` values to registered listeners on the
    event loop thread. ``play()`` may reject, e.g. under an autoplay policy.
    Natural looping is an engine capability: with ``loop`` set, reaching the
    end restarts from zero without signalling ``ENDED``.
    """

    @property
    @abstractmethod
    def source_url(self) -> str:
        ...

    @property
    @abstractmethod
    def duration(self) -> float:
        """Duration in seconds; NaN or 0 until metadata has loaded."""
        ...

    @property
    @abstractmethod
    def current_time(self) -> float:
        ...

    @current_time.setter
    @abstractmethod
    def current_time(self, seconds: float) -> None:
        ...

    @property
    @abstractmethod
    def volume(self) -> float:
        ...

    @volume.setter
    @abstractmethod
    def volume(self, level: float) -> None:
        ...

    @property
    @abstractmethod
    def loop(self) -> bool:
        ...

    @loop.setter
    @abstractmethod
    def loop(self, enabled: bool) -> None:
        ...

    @property
    @abstractmethod
    def error(self) -> ResourceLoadError | None:
        """The load failure reported with the last ``ERROR`` event, if any."""
        ...

    @abstractmethod
    def load(self) -> None:
        """Begin fetching the resource; completion is signalled via events."""
        ...

    @abstractmethod
    async def play(self) -> None:
        """Start or resume playback; raises if the engine refuses."""
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def add_listener(self, event: MediaEvent, listener: MediaListener) -> None:
        ...

    @abstractmethod
    def remove_listener(self, event: MediaEvent, listener: MediaListener) -> None:
        ...

    @abstractmethod
    def release(self) -> None:
        """Stop playback and free the underlying resource. Idempotent."""
        ...


EngineFactory = Callable[[str], MediaEngine]
"""Builds a fresh engine bound to a source URL."""

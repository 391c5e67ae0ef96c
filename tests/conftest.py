import asyncio
import math
from collections import defaultdict

import pytest

from storyvibe_player.application.interfaces.media_engine import MediaEngine
from storyvibe_player.config.settings import PlaybackSettings
from storyvibe_player.domain.playback.value_objects import MediaEvent
from storyvibe_player.domain.shared.exceptions import PlaybackRejectedError, ResourceLoadError

TRACK_URL = "https://media.example.com/storyvibe/chapter-1.mp3"


# ============================================================================
# Fake Media Engine
# ============================================================================


class FakeMediaEngine(MediaEngine):
    """In-memory engine whose events are fired explicitly by tests."""

    def __init__(self, source_url: str) -> None:
        self._source_url = source_url
        self._duration = math.nan
        self._current_time = 0.0
        self._volume = 1.0
        self._loop = False
        self._error: ResourceLoadError | None = None

        self.listeners: dict[MediaEvent, list] = defaultdict(list)
        self.volume_history: list[float] = []
        self.load_calls = 0
        self.play_calls = 0
        self.pause_calls = 0
        self.release_calls = 0
        self.playing = False
        self.play_error: Exception | None = None

    @property
    def source_url(self) -> str:
        return self._source_url

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def current_time(self) -> float:
        return self._current_time

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self._current_time = seconds

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, level: float) -> None:
        self._volume = level
        self.volume_history.append(level)

    @property
    def loop(self) -> bool:
        return self._loop

    @loop.setter
    def loop(self, enabled: bool) -> None:
        self._loop = enabled

    @property
    def error(self) -> ResourceLoadError | None:
        return self._error

    def load(self) -> None:
        self.load_calls += 1

    async def play(self) -> None:
        self.play_calls += 1
        await asyncio.sleep(0)
        if self.play_error is not None:
            raise self.play_error
        self.playing = True

    def pause(self) -> None:
        self.pause_calls += 1
        self.playing = False

    def add_listener(self, event, listener) -> None:
        self.listeners[event].append(listener)

    def remove_listener(self, event, listener) -> None:
        if listener in self.listeners[event]:
            self.listeners[event].remove(listener)

    def release(self) -> None:
        self.release_calls += 1
        self.playing = False

    # --- test controls ---

    def fire(self, event: MediaEvent) -> None:
        for listener in list(self.listeners[event]):
            listener()

    def emit_metadata(self, duration: float) -> None:
        self._duration = duration
        self.fire(MediaEvent.LOADED_METADATA)

    def emit_error(self, reason: str = "decode error") -> None:
        self._error = ResourceLoadError(self._source_url, reason)
        self.fire(MediaEvent.ERROR)

    def emit_ended(self) -> None:
        if self._loop:
            self._current_time = 0.0
        else:
            self.playing = False
            self._current_time = self._duration
        self.fire(MediaEvent.ENDED)

    def reject_next_play(self, reason: str = "autoplay policy") -> None:
        self.play_error = PlaybackRejectedError(self._source_url, reason)

    @property
    def listener_count(self) -> int:
        return sum(len(v) for v in self.listeners.values())


# ============================================================================
# Controller Fixtures
# ============================================================================


@pytest.fixture
def engines():
    """Every engine created by the engine factory, in creation order."""
    return []


@pytest.fixture
def engine_factory(engines):
    """Factory that builds and records fake engines."""

    def factory(source_url: str) -> FakeMediaEngine:
        engine = FakeMediaEngine(source_url)
        engines.append(engine)
        return engine

    return factory


@pytest.fixture
def fast_settings():
    """Playback settings with timers shrunk for tests."""
    return PlaybackSettings(
        fade_interval_ms=1,
        fade_start_delay_ms=0,
        autoplay_delay_ms=0,
        sampling_interval_ms=1,
    )


@pytest.fixture
def controller(engine_factory, fast_settings):
    """Playback controller wired to fake engines."""
    from storyvibe_player.application.services.playback_controller import (
        AudioPlaybackController,
    )

    return AudioPlaybackController(engine_factory, settings=fast_settings)


@pytest.fixture
def wait_until():
    """Poll a predicate on the event loop until it holds or the timeout expires."""

    async def _wait(predicate, timeout: float = 2.0) -> bool:
        deadline = asyncio.get_running_loop().time() + timeout
        while not predicate():
            if asyncio.get_running_loop().time() > deadline:
                return False
            await asyncio.sleep(0.002)
        return True

    return _wait

"""
Headless Media Engine

Infrastructure component that reads track metadata with ffprobe and
advances playback position on a monotonic clock. It renders no audio;
it drives the playback controller for previews, smoke checks of
uploaded chapter music, and server-side session handling.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections import defaultdict
from collections.abc import Callable

from storyvibe_player.application.interfaces.media_engine import MediaEngine, MediaListener
from storyvibe_player.config.settings import EngineSettings
from storyvibe_player.domain.playback.value_objects import MediaEvent, clamp_volume
from storyvibe_player.domain.shared.exceptions import PlaybackRejectedError, ResourceLoadError
from storyvibe_player.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)


class HeadlessMediaEngine(MediaEngine):
    """Clock-driven media engine backed by an ffprobe metadata lookup."""

    def __init__(
        self,
        source_url: str,
        *,
        settings: EngineSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source_url = source_url
        self._settings = settings or EngineSettings()
        self._clock = clock

        self._listeners: dict[MediaEvent, list[MediaListener]] = defaultdict(list)
        self._duration = math.nan
        self._volume = 1.0
        self._loop = False
        self._error: ResourceLoadError | None = None

        # Position is offset + elapsed clock time since started_at while playing.
        self._offset = 0.0
        self._started_at: float | None = None

        self._probe_task: asyncio.Task[None] | None = None
        self._end_handle: asyncio.TimerHandle | None = None
        self._released = False

    # === Properties ===

    @property
    def source_url(self) -> str:
        return self._source_url

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_playing(self) -> bool:
        return self._started_at is not None

    @property
    def current_time(self) -> float:
        if self._started_at is None:
            return self._offset

        elapsed = self._offset + (self._clock() - self._started_at)
        if not math.isfinite(self._duration):
            return elapsed
        if self._loop and self._duration > 0:
            return elapsed % self._duration
        return min(elapsed, self._duration)

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        seconds = max(0.0, seconds)
        if math.isfinite(self._duration):
            seconds = min(seconds, self._duration)

        self._offset = seconds
        if self._started_at is not None:
            self._started_at = self._clock()
            self._schedule_end()

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, level: float) -> None:
        self._volume = clamp_volume(level)

    @property
    def loop(self) -> bool:
        return self._loop

    @loop.setter
    def loop(self, enabled: bool) -> None:
        self._loop = enabled

    @property
    def error(self) -> ResourceLoadError | None:
        return self._error

    # === Loading ===

    def load(self) -> None:
        if self._released or self._probe_task is not None:
            return
        self._probe_task = asyncio.get_running_loop().create_task(
            self._probe(), name=f"probe:{self._source_url}"
        )

    async def _probe(self) -> None:
        cmd = [
            self._settings.ffprobe_path,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            self._source_url,
        ]
        logger.debug(LogTemplates.ENGINE_PROBING, self._source_url, self._settings.ffprobe_path)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            self._fail(ErrorMessages.PROBE_NOT_FOUND.format(path=self._settings.ffprobe_path))
            return

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            await self._reap(process)
            raise

        if process.returncode != 0:
            self._fail(
                ErrorMessages.PROBE_FAILED.format(
                    code=process.returncode,
                    stderr=stderr.decode(errors="replace").strip(),
                )
            )
            return

        duration = self._parse_duration(stdout.decode(errors="replace"))
        if duration is None:
            self._fail(ErrorMessages.PROBE_NO_DURATION)
            return

        self._duration = duration
        logger.debug(LogTemplates.ENGINE_PROBED, self._source_url, duration)
        self._dispatch(MediaEvent.LOADED_METADATA)

    async def _reap(self, process: asyncio.subprocess.Process) -> None:
        try:
            process.kill()
        except ProcessLookupError:
            return  # already exited
        try:
            await process.wait()
        except Exception as e:
            logger.debug(LogTemplates.ENGINE_PROBE_CLEANUP_FAILED, self._source_url, e)

    @staticmethod
    def _parse_duration(output: str) -> float | None:
        for line in output.splitlines():
            try:
                value = float(line.strip())
            except ValueError:
                continue
            if math.isfinite(value) and value > 0:
                return value
        return None

    def _fail(self, reason: str) -> None:
        logger.debug(LogTemplates.ENGINE_PROBE_FAILED, self._source_url, reason)
        self._error = ResourceLoadError(self._source_url, reason)
        self._dispatch(MediaEvent.ERROR)

    # === Transport ===

    async def play(self) -> None:
        if self._released:
            raise PlaybackRejectedError(self._source_url, ErrorMessages.ENGINE_RELEASED)
        if not math.isfinite(self._duration):
            raise PlaybackRejectedError(self._source_url, ErrorMessages.ENGINE_NOT_LOADED)
        if self._started_at is not None:
            return

        if self._offset >= self._duration:
            self._offset = 0.0
        self._started_at = self._clock()
        self._schedule_end()

    def pause(self) -> None:
        if self._started_at is None:
            return
        self._offset = self.current_time
        self._started_at = None
        self._cancel_end()

    def _schedule_end(self) -> None:
        self._cancel_end()
        remaining = max(0.0, self._duration - self._offset)
        self._end_handle = asyncio.get_running_loop().call_later(remaining, self._on_end)

    def _cancel_end(self) -> None:
        if self._end_handle is not None:
            self._end_handle.cancel()
            self._end_handle = None

    def _on_end(self) -> None:
        self._end_handle = None
        if self._loop:
            self._offset = 0.0
            self._started_at = self._clock()
            self._schedule_end()
            return

        self._offset = self._duration
        self._started_at = None
        self._dispatch(MediaEvent.ENDED)

    # === Listeners ===

    def add_listener(self, event: MediaEvent, listener: MediaListener) -> None:
        self._listeners[event].append(listener)

    def remove_listener(self, event: MediaEvent, listener: MediaListener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def _dispatch(self, event: MediaEvent) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                listener()
            except Exception as e:
                logger.exception(LogTemplates.ENGINE_LISTENER_ERROR, self._source_url, e)

    # === Cleanup ===

    def release(self) -> None:
        if self._released:
            return
        self._released = True

        if self._probe_task is not None and not self._probe_task.done():
            self._probe_task.cancel()
        self._probe_task = None

        self._cancel_end()
        if self._started_at is not None:
            self._offset = self.current_time
            self._started_at = None
        self._listeners.clear()
        logger.debug(LogTemplates.ENGINE_RELEASED, self._source_url)

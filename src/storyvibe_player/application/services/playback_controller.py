"""
Audio Playback Controller

Owns one streaming audio session at a time and translates user intents
(play, pause, seek, volume, mute, skip) into media engine calls. Engine
callbacks are folded into the session state machine; position sampling
and the autoplay fade-in run as cancellable tasks owned by the session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from storyvibe_player.application.services.repeating_task import RepeatingTask
from storyvibe_player.config.settings import PlaybackSettings
from storyvibe_player.domain.playback.entities import PlaybackSession, PlaybackSnapshot
from storyvibe_player.domain.playback.events import (
    PlaybackLoadFailed,
    PlaybackRejected,
    PlaybackSessionDisposed,
    PlaybackStateChanged,
)
from storyvibe_player.domain.playback.value_objects import (
    MediaEvent,
    PlaybackOptions,
    PlaybackState,
    clamp_position,
    require_source_url,
)
from storyvibe_player.domain.shared.exceptions import InvalidOperationError, ResourceLoadError
from storyvibe_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.shared.events import DomainEvent, EventBus
    from ..interfaces.media_engine import EngineFactory, MediaEngine, MediaListener

logger = logging.getLogger(__name__)

SnapshotObserver = Callable[[PlaybackSnapshot], None]


class AudioPlaybackController:
    """Transport controls for a single player instance.

    At most one session is live at a time. ``dispose()`` ends the current
    session; a new one may then be started with ``load()``. All methods must
    be called from the event loop that runs the engine.
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        *,
        settings: PlaybackSettings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._engine_factory = engine_factory
        self._settings = settings or PlaybackSettings()
        self._event_bus = event_bus

        self._session: PlaybackSession | None = None
        self._engine: MediaEngine | None = None
        self._listeners: dict[MediaEvent, MediaListener] = {}

        self._sampler: RepeatingTask | None = None
        self._fade: RepeatingTask | None = None
        self._autoplay_task: asyncio.Task[None] | None = None

        self._observers: list[SnapshotObserver] = []
        self._pending_events: set[asyncio.Task[None]] = set()

    # === Read side ===

    @property
    def session(self) -> PlaybackSession | None:
        return self._session

    @property
    def state(self) -> PlaybackState:
        return self._session.state if self._session else PlaybackState.IDLE

    @property
    def is_fading(self) -> bool:
        return self._fade is not None and self._fade.is_running

    @property
    def is_sampling(self) -> bool:
        return self._sampler is not None and self._sampler.is_running

    def snapshot(self) -> PlaybackSnapshot:
        if self._session is None:
            return PlaybackSnapshot(source_url="", state=PlaybackState.IDLE)
        return self._session.snapshot()

    def subscribe(self, observer: SnapshotObserver) -> Callable[[], None]:
        """Register a snapshot observer; returns a function that removes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def flush_events(self) -> None:
        """Wait until every domain event published so far has been handled."""
        while self._pending_events:
            await asyncio.gather(*list(self._pending_events), return_exceptions=True)

    # === Lifecycle ===

    def load(self, source_url: str, options: PlaybackOptions | None = None) -> PlaybackSnapshot:
        """Bind a new session to *source_url* and start fetching it.

        Returns while the session is still loading; readiness or failure
        arrives later through engine events.

        Raises:
            ValidationError: If *source_url* is empty or too long.
            InvalidOperationError: If a live session is still bound.
        """
        require_source_url(source_url)

        current = self._session
        if current is not None and current.is_active:
            raise InvalidOperationError(
                operation="load",
                current_state=current.state.value,
                message=ErrorMessages.SESSION_STILL_ACTIVE.format(url=source_url),
            )
        if current is not None and not current.disposed:
            logger.info(LogTemplates.SESSION_REPLACING_FAILED, current.source_url)
            self.dispose()

        options = options or PlaybackOptions(initial_volume=self._settings.default_volume)
        session = PlaybackSession.create(source_url, options)
        engine = self._engine_factory(source_url)
        engine.loop = options.loop
        engine.volume = session.effective_volume

        self._session = session
        self._engine = engine
        self._listeners = {
            MediaEvent.LOADED_METADATA: lambda: self._on_metadata(session),
            MediaEvent.ENDED: lambda: self._on_ended(session),
            MediaEvent.ERROR: lambda: self._on_error(session),
        }
        for event, listener in self._listeners.items():
            engine.add_listener(event, listener)

        logger.info(
            LogTemplates.SESSION_LOADING,
            source_url,
            options.loop,
            options.fade_enabled,
            options.auto_play,
        )
        self._transition(session, session.begin_loading)
        engine.load()
        return session.snapshot()

    def dispose(self) -> None:
        """Release the current session. Safe to call any number of times."""
        session = self._session
        if session is None or session.disposed:
            return

        self._cancel_autoplay()
        self._cancel_fade(session)
        self._stop_sampler()

        engine = self._engine
        if engine is not None:
            for event, listener in self._listeners.items():
                engine.remove_listener(event, listener)
            try:
                engine.release()
            except Exception as e:
                logger.warning(LogTemplates.ENGINE_RELEASE_FAILED, session.source_url, e)

        self._listeners = {}
        self._engine = None
        session.mark_disposed()

        logger.info(LogTemplates.SESSION_DISPOSED, session.source_url)
        self._publish(
            PlaybackSessionDisposed(source_url=session.source_url, final_state=session.state)
        )

    # === Transport ===

    async def play(self) -> bool:
        """Start or resume playback.

        Returns True when the session is playing afterwards. A rejected
        attempt is logged and leaves the state unchanged.
        """
        session = self._session
        if session is None or not session.is_active:
            return False
        self._cancel_autoplay()
        started = await self._start_playback(session, autoplay=False)
        if started and self._is_current(session) and session.claim_fade():
            self._start_fade(session)
        return started

    def pause(self) -> bool:
        session = self._live_session("pause")
        if session is None or session.state != PlaybackState.PLAYING:
            return False

        engine = self._require_engine()
        self._cancel_fade(session)
        self._stop_sampler()
        try:
            engine.pause()
        except Exception as e:
            logger.warning(LogTemplates.PLAYBACK_REJECTED, session.source_url, e)
            return False

        self._transition(session, lambda: session.mark_paused(engine.current_time))
        logger.debug(LogTemplates.PLAYBACK_PAUSED, session.source_url, session.position)
        return True

    def seek(self, target_seconds: float) -> float | None:
        """Jump to *target_seconds*, clamped to the track bounds.

        Returns the new position, or None when the session cannot seek.
        """
        session = self._live_session("seek")
        if session is None or not session.state.can_seek:
            if session is not None:
                logger.debug(
                    LogTemplates.PLAYBACK_IGNORED, "seek", session.source_url, session.state.value
                )
            return None

        position = clamp_position(target_seconds, session.duration)
        try:
            self._require_engine().current_time = position
        except Exception as e:
            logger.warning(LogTemplates.PLAYBACK_REJECTED, session.source_url, e)
            return None

        session.seek_to(position)
        logger.debug(LogTemplates.PLAYBACK_SEEK, session.source_url, position)
        self._notify(session)
        return session.position

    def skip(self, delta_seconds: float) -> float | None:
        session = self._live_session("skip")
        if session is None or not session.state.can_seek:
            return None
        if session.state == PlaybackState.PLAYING:
            session.update_position(self._require_engine().current_time)
        return self.seek(session.position + delta_seconds)

    def skip_forward(self) -> float | None:
        return self.skip(self._settings.skip_seconds)

    def skip_backward(self) -> float | None:
        return self.skip(-self._settings.skip_seconds)

    def set_volume(self, level: float) -> float | None:
        """Set the user volume in [0, 1]; cancels a running fade-in."""
        session = self._session
        if session is None or session.disposed:
            return None

        self._cancel_fade(session)
        session.set_volume(level)
        self._apply_volume(session)
        return session.volume

    def toggle_mute(self) -> bool | None:
        session = self._session
        if session is None or session.disposed:
            return None

        self._cancel_fade(session)
        muted = session.toggle_mute()
        self._apply_volume(session)
        return muted

    # === Engine callbacks ===

    def _on_metadata(self, session: PlaybackSession) -> None:
        if not self._is_current(session) or session.state != PlaybackState.LOADING:
            return

        engine = self._require_engine()
        self._transition(session, lambda: session.mark_ready(engine.duration))
        logger.info(LogTemplates.SESSION_READY, session.source_url, session.duration)

        if session.options.auto_play:
            if session.options.fades_in:
                session.hold_for_fade()
                self._apply_volume(session)
            self._schedule_autoplay(session)

    def _on_ended(self, session: PlaybackSession) -> None:
        if not self._is_current(session):
            return

        if session.loop:
            logger.debug(LogTemplates.SESSION_LOOPED, session.source_url)
            return

        if session.state != PlaybackState.PLAYING:
            return

        self._cancel_fade(session)
        self._stop_sampler()
        self._transition(session, session.mark_ended)
        try:
            self._require_engine().current_time = 0.0
        except Exception as e:
            logger.debug(LogTemplates.PLAYBACK_IGNORED, "rewind", session.source_url, e)
        logger.info(LogTemplates.SESSION_ENDED, session.source_url)

    def _on_error(self, session: PlaybackSession) -> None:
        if not self._is_current(session):
            return

        engine = self._require_engine()
        error = engine.error or ResourceLoadError(session.source_url)

        if session.state != PlaybackState.LOADING:
            logger.warning(LogTemplates.SESSION_LATE_ERROR, session.source_url, error.message)
            return

        self._cancel_autoplay()
        self._transition(session, lambda: session.mark_failed(error.message))
        logger.error(LogTemplates.SESSION_LOAD_FAILED, session.source_url, error.message)
        self._publish(PlaybackLoadFailed(source_url=session.source_url, reason=error.message))

    # === Autoplay and fade ===

    def _schedule_autoplay(self, session: PlaybackSession) -> None:
        if session.options.fades_in:
            delay = self._settings.fade_curve(session.options.initial_volume).start_delay_seconds
        else:
            delay = self._settings.autoplay_delay_seconds

        logger.debug(LogTemplates.AUTOPLAY_SCHEDULED, session.source_url, delay)
        self._autoplay_task = asyncio.get_running_loop().create_task(
            self._autoplay(session, delay), name="autoplay"
        )

    async def _autoplay(self, session: PlaybackSession, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
            started = await self._start_playback(session, autoplay=True)
        finally:
            if self._autoplay_task is asyncio.current_task():
                self._autoplay_task = None

        if not self._is_current(session):
            return

        if started:
            if session.claim_fade():
                self._start_fade(session)
            return

        logger.warning(LogTemplates.AUTOPLAY_REJECTED, session.source_url)
        if session.claim_fade():
            session.set_fade_level(session.options.initial_volume)
            self._apply_volume(session)

    def _cancel_autoplay(self) -> None:
        task = self._autoplay_task
        self._autoplay_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _start_fade(self, session: PlaybackSession) -> None:
        curve = self._settings.fade_curve(session.options.initial_volume)
        levels = curve.levels()

        def step() -> bool:
            level = next(levels, None)
            if level is None or not self._is_current(session):
                logger.debug(LogTemplates.FADE_COMPLETED, session.source_url)
                return False
            session.set_fade_level(level)
            self._apply_volume(session)
            return True

        logger.info(
            LogTemplates.FADE_STARTED, session.source_url, curve.target, curve.duration_seconds
        )
        self._fade = RepeatingTask("fade-in", step, curve.interval_seconds)
        self._fade.start()

    def _cancel_fade(self, session: PlaybackSession) -> None:
        fade = self._fade
        self._fade = None
        if fade is not None and fade.is_running:
            fade.cancel()
            logger.debug(LogTemplates.FADE_CANCELLED, session.source_url)

    # === Position sampling ===

    def _start_sampler(self, session: PlaybackSession) -> None:
        self._stop_sampler()

        def sample() -> bool:
            if not self._is_current(session) or self._engine is None:
                return False
            session.update_position(self._engine.current_time)
            self._notify(session)
            return True

        self._sampler = RepeatingTask(
            "position-sampler", sample, self._settings.sampling_interval_seconds
        )
        self._sampler.start()

    def _stop_sampler(self) -> None:
        sampler = self._sampler
        self._sampler = None
        if sampler is not None:
            sampler.cancel()

    # === Internals ===

    async def _start_playback(self, session: PlaybackSession, *, autoplay: bool) -> bool:
        if not self._is_current(session):
            return False
        if session.state == PlaybackState.PLAYING:
            return True
        if not session.state.can_play:
            logger.debug(
                LogTemplates.PLAYBACK_IGNORED, "play", session.source_url, session.state.value
            )
            return False

        engine = self._require_engine()
        try:
            if session.state == PlaybackState.ENDED:
                engine.current_time = 0.0
            await engine.play()
        except Exception as e:
            logger.warning(LogTemplates.PLAYBACK_REJECTED, session.source_url, e)
            self._publish(
                PlaybackRejected(source_url=session.source_url, reason=str(e), autoplay=autoplay)
            )
            return False

        # The engine may have been disposed or started by a concurrent call meanwhile.
        if not self._is_current(session):
            return False
        if session.state == PlaybackState.PLAYING:
            return True
        if not session.state.can_play:
            return False

        self._transition(session, session.mark_playing)
        logger.info(LogTemplates.PLAYBACK_STARTED, session.source_url)
        self._start_sampler(session)
        return True

    def _live_session(self, operation: str) -> PlaybackSession | None:
        session = self._session
        if session is None or not session.is_active:
            if session is not None:
                logger.debug(
                    LogTemplates.PLAYBACK_IGNORED, operation, session.source_url, session.state.value
                )
            return None
        return session

    def _is_current(self, session: PlaybackSession) -> bool:
        return session is self._session and not session.disposed

    def _require_engine(self) -> MediaEngine:
        if self._engine is None:
            raise InvalidOperationError(
                operation="engine access",
                current_state=self.state.value,
                message=ErrorMessages.NO_ACTIVE_SESSION,
            )
        return self._engine

    def _apply_volume(self, session: PlaybackSession) -> None:
        if self._engine is not None:
            self._engine.volume = session.effective_volume
        self._notify(session)

    def _transition(
        self, session: PlaybackSession, change: Callable[[], PlaybackState]
    ) -> None:
        previous = change()
        logger.debug(
            LogTemplates.SESSION_TRANSITION, session.source_url, previous.value, session.state.value
        )
        self._notify(session)
        self._publish(
            PlaybackStateChanged(
                source_url=session.source_url, previous=previous, current=session.state
            )
        )

    def _notify(self, session: PlaybackSession) -> None:
        if not self._observers:
            return
        snapshot = session.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.exception(LogTemplates.OBSERVER_ERROR, e)

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(LogTemplates.EVENT_NO_LOOP, type(event).__name__)
            return
        task = loop.create_task(self._event_bus.publish(event))
        self._pending_events.add(task)
        task.add_done_callback(self._pending_events.discard)

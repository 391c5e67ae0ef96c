"""Centralized message constants for error messages, logging, and player display text."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Controller Errors
    INVALID_SOURCE_URL = "Source URL must be 1 to {max_length} characters long"
    SESSION_STILL_ACTIVE = "Dispose the current session before loading '{url}'"
    NO_ACTIVE_SESSION = "No audio session is loaded"

    # Engine Errors
    ENGINE_NOT_LOADED = "Media is not loaded yet"
    ENGINE_RELEASED = "Media engine has been released"
    PROBE_NO_DURATION = "ffprobe reported no duration"
    PROBE_FAILED = "ffprobe exited with code {code}: {stderr}"
    PROBE_NOT_FOUND = "ffprobe executable not found: {path}"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class DisplayMessages:
    """Text shown by the player view."""

    LOADING = "Loading music..."
    LOAD_FAILED = "Failed to load audio file"
    PLAY = "Play"
    PAUSE = "Pause"
    MUTE = "Mute"
    UNMUTE = "Unmute"
    SKIP_BACKWARD = "Skip backward {seconds:g} seconds"
    SKIP_FORWARD = "Skip forward {seconds:g} seconds"
    SEEK = "Seek time"
    VOLUME = "Volume"
    PLAYBACK_REJECTED = "Playback was blocked: {reason}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Session Lifecycle
    SESSION_LOADING = "Loading audio session for %s (loop=%s, fade=%s, autoplay=%s)"
    SESSION_READY = "Audio ready for %s (duration=%.2fs)"
    SESSION_LOAD_FAILED = "Error loading audio file %s: %s"
    SESSION_DISPOSED = "Disposed audio session for %s"
    SESSION_REPLACING_FAILED = "Replacing failed session for %s"
    SESSION_ENDED = "Playback ended for %s"
    SESSION_LOOPED = "Track looped for %s"
    SESSION_LATE_ERROR = "Engine error after load for %s ignored: %s"
    SESSION_TRANSITION = "Session %s: %s -> %s"

    # Transport
    PLAYBACK_STARTED = "Started playing %s"
    PLAYBACK_PAUSED = "Paused %s at %.2fs"
    PLAYBACK_REJECTED = "Error playing audio %s: %s"
    PLAYBACK_IGNORED = "Ignoring %s for %s in state %s"
    PLAYBACK_SEEK = "Seek %s to %.2fs"
    AUTOPLAY_SCHEDULED = "Autoplay for %s scheduled in %.2fs"
    AUTOPLAY_REJECTED = "Error auto-playing audio %s"

    # Fade
    FADE_STARTED = "Fade-in started for %s (target=%.2f over %.2fs)"
    FADE_COMPLETED = "Fade-in completed for %s"
    FADE_CANCELLED = "Fade-in cancelled for %s"

    # Observers / Events
    OBSERVER_ERROR = "Error in playback observer: %s"
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s: %s"
    EVENT_HANDLERS_CLEARED = "Cleared all event handlers"
    EVENT_NO_LOOP = "No running event loop, dropping %s"

    # Repeating Tasks
    TASK_CALLBACK_ERROR = "Error in repeating task %s: %s"

    # Player Host
    HOST_MOUNTED = "Player mounted with %s"
    HOST_REMOUNT_SAME_URL = "Player already bound to %s, keeping session"
    HOST_UNMOUNTED = "Player unmounted"

    # Headless Engine
    ENGINE_PROBING = "Probing %s with %s"
    ENGINE_PROBED = "Probed %s: duration=%.2fs"
    ENGINE_PROBE_FAILED = "Probe failed for %s: %s"
    ENGINE_PROBE_CLEANUP_FAILED = "Could not stop ffprobe for %s: %s"
    ENGINE_LISTENER_ERROR = "Error in media listener for %s: %s"
    ENGINE_RELEASED = "Released media engine for %s"
    ENGINE_RELEASE_FAILED = "Failed to release media engine for %s: %s"

    # Application Lifecycle
    APP_STARTING = "Starting StoryVibe player in %s mode"
    APP_FATAL_ERROR = "Fatal error: %s"
    APP_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    CONTAINER_SHUTDOWN = "Container shutdown complete (%d players disposed)"

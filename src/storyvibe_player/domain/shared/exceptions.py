"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class ResourceLoadError(DomainError):
    """Raised when an audio resource cannot be fetched or decoded."""

    def __init__(self, source_url: str, reason: str | None = None) -> None:
        msg = f"Failed to load audio from '{source_url}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, code="RESOURCE_LOAD_ERROR")
        self.source_url = source_url
        self.reason = reason


class PlaybackRejectedError(DomainError):
    """Raised by a media engine that refuses to start playback."""

    def __init__(self, source_url: str, reason: str | None = None) -> None:
        msg = f"Playback rejected for '{source_url}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, code="PLAYBACK_REJECTED")
        self.source_url = source_url
        self.reason = reason

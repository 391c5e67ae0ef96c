"""
Shared Domain Kernel

Contains exceptions, message templates and constrained types shared by
the playback context.
"""

from storyvibe_player.domain.shared.exceptions import (
    DomainError,
    InvalidOperationError,
    PlaybackRejectedError,
    ResourceLoadError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "InvalidOperationError",
    "ResourceLoadError",
    "PlaybackRejectedError",
]

"""Port interfaces implemented by infrastructure adapters."""

from storyvibe_player.application.interfaces.media_engine import (
    EngineFactory,
    MediaEngine,
    MediaListener,
)

__all__ = ["MediaEngine", "MediaListener", "EngineFactory"]

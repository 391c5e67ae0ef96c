"""Audio infrastructure - headless media engine."""

from storyvibe_player.infrastructure.audio.headless_engine import HeadlessMediaEngine

__all__ = ["HeadlessMediaEngine"]

"""StoryVibe chapter music player: playback controller, fade-in and media engine port."""

__version__ = "0.1.0"

"""Time formatting for player labels."""

from __future__ import annotations

import math


def format_time(seconds: float | None) -> str:
    """Render seconds as ``m:ss``; unknown values render as ``0:00``."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "0:00"

    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"

"""Fade-in ramp used to soften autoplay."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from storyvibe_player.domain.playback.value_objects import DEFAULT_VOLUME


@dataclass(frozen=True)
class FadeCurve:
    """Linear volume ramp from silence to a target level.

    The ramp raises the volume by ``step`` every ``interval_seconds``
    after an initial ``start_delay_seconds``. The last level is exactly
    ``target``.
    """

    target: float = DEFAULT_VOLUME
    step: float = 0.01
    interval_seconds: float = 0.05
    start_delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.target <= 1.0:
            raise ValueError("Fade target must be between 0 and 1")
        if self.step <= 0:
            raise ValueError("Fade step must be positive")
        if self.interval_seconds <= 0:
            raise ValueError("Fade interval must be positive")
        if self.start_delay_seconds < 0:
            raise ValueError("Fade start delay cannot be negative")

    @property
    def step_count(self) -> int:
        # Rounded first so 0.7 / 0.01 yields 70 steps, not 71.
        return math.ceil(round(self.target / self.step, 9))

    @property
    def duration_seconds(self) -> float:
        """Time from the first step to reaching the target."""
        return max(0, self.step_count - 1) * self.interval_seconds

    def levels(self) -> Iterator[float]:
        """Yield strictly increasing volume levels ending at the target."""
        count = self.step_count
        for index in range(1, count + 1):
            if index == count:
                yield self.target
            else:
                yield min(self.target, round(index * self.step, 6))

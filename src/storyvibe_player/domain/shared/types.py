"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used by the playback models is defined here once,
so models can simply annotate their fields::

    from storyvibe_player.domain.shared.types import UnitInterval, SourceUrlStr

    class MyModel(BaseModel):
        volume: UnitInterval
        source_url: SourceUrlStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

PositiveFloat = Annotated[float, Field(gt=0.0)]
"""Float > 0.0."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]
"""Float in [0.0, 1.0], used for volume levels."""

FadeStepFloat = Annotated[float, Field(gt=0.0, le=1.0)]
"""Volume increment per fade step: (0.0, 1.0]."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

MAX_SOURCE_URL_LENGTH = 2048

SourceUrlStr = Annotated[str, Field(min_length=1, max_length=MAX_SOURCE_URL_LENGTH)]
"""Audio resource locator: a URL or a local path understood by the engine."""


# ── Settings-specific constraints ──────────────────────────────────

IntervalMs = Annotated[int, Field(ge=1, le=1000)]
"""Timer cadence in milliseconds: 1 … 1 000."""

DelayMs = Annotated[int, Field(ge=0, le=10_000)]
"""Scheduling delay in milliseconds: 0 … 10 000."""

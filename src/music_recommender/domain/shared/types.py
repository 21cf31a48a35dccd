"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from music_recommender.domain.shared.types import NonEmptyStr, UnitInterval

    class MyModel(BaseModel):
        user_id: NonEmptyStr
        confidence: UnitInterval
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

PositiveFloat = Annotated[float, Field(gt=0.0)]
"""Float > 0.0."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]
"""Float in [0.0, 1.0], used for confidence scores."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""


# ── Settings-specific constraints ──────────────────────────────────

BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
"""Database busy timeout in milliseconds: 1 000 … 30 000."""

ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
"""Database connection timeout in seconds: 1 … 60."""

MaxTokens = Annotated[int, Field(ge=1, le=8192)]
"""AI max tokens: 1 … 8 192."""

TemperatureFloat = Annotated[float, Field(ge=0.0, le=2.0)]
"""AI temperature: 0.0 … 2.0."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if isinstance(v, datetime):
        if v.tzinfo is None:
            raise ValueError("datetime must be timezone-aware (UTC)")
        return v.astimezone(UTC)
    return v


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""

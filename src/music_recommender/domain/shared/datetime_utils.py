"""UTC timestamp helpers.

Recommendation timestamps are timezone-aware UTC datetimes in memory and
ISO-8601 strings with an explicit offset in the store. Generated item ids
embed the creation time as epoch milliseconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from ...domain.shared.messages import ErrorMessages


@dataclass(frozen=True, slots=True)
class UtcDateTime:
    """Aware datetime normalised to UTC, with the storage and id encodings."""

    dt: datetime

    def __post_init__(self) -> None:
        if self.dt.tzinfo is None:
            raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
        object.__setattr__(self, "dt", self.dt.astimezone(UTC))

    @classmethod
    def from_iso(cls, value: str) -> UtcDateTime:
        """Parse a stored timestamp; a trailing ``Z`` is read as ``+00:00``."""
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return cls(datetime.fromisoformat(value))

    @property
    def iso(self) -> str:
        return self.dt.isoformat()

    @property
    def unix_millis(self) -> int:
        return int(self.dt.timestamp() * 1000)


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)

"""Time interval data models."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from clinic_calendar.errors import InvalidIntervalError


@dataclass(frozen=True)
class TimeInterval:
    """An appointment as a half-open time interval [start, end)."""

    id: str
    start: datetime
    end: datetime
    summary: str | None = None

    def __post_init__(self) -> None:
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise InvalidIntervalError(f"Interval {self.id} mixes naive and timezone-aware times")
        if self.end <= self.start:
            raise InvalidIntervalError(
                f"Interval {self.id} must end after it starts ({self.start.isoformat()} - {self.end.isoformat()})"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeInterval") -> bool:
        """Strict half-open overlap; touching endpoints do not overlap."""
        return self.start < other.end and self.end > other.start

    def with_times(self, start: datetime, end: datetime) -> "TimeInterval":
        """Return a copy of this interval at new times, keeping its id."""
        return replace(self, start=start, end=end)


@dataclass
class ConflictSet:
    """A candidate interval and the existing intervals it overlaps."""

    candidate: TimeInterval
    conflicts: list[TimeInterval] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts)

    @property
    def ids(self) -> list[str]:
        return [interval.id for interval in self.conflicts]

"""Request and response models for the calendar HTTP service."""

from datetime import datetime

from pydantic import BaseModel, model_validator

from clinic_calendar.models.interval import TimeInterval


class IntervalPayload(BaseModel):
    """An appointment interval in a request or response body."""

    id: str
    start: datetime
    end: datetime
    summary: str | None = None

    @model_validator(mode="after")
    def check_order(self) -> "IntervalPayload":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("start and end must both carry a timezone, or neither")
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self

    def to_interval(self) -> TimeInterval:
        return TimeInterval(id=self.id, start=self.start, end=self.end, summary=self.summary)

    @classmethod
    def from_interval(cls, interval: TimeInterval) -> "IntervalPayload":
        return cls(id=interval.id, start=interval.start, end=interval.end, summary=interval.summary)


class ConflictRequest(BaseModel):
    """Request model for conflict checks."""

    candidate: IntervalPayload
    existing: list[IntervalPayload]
    exclude_id: str | None = None


class ConflictResponse(BaseModel):
    """Response model for conflict checks."""

    has_conflict: bool
    conflicts: list[IntervalPayload]


class LayoutRequest(BaseModel):
    """Request model for overlap layout."""

    intervals: list[IntervalPayload]


class SlotPayload(BaseModel):
    """Layout slot of one interval."""

    id: str
    slot_index: int
    slot_count: int
    width_percent: float
    offset_percent: float


class GroupPayload(BaseModel):
    """One overlap group."""

    members: list[SlotPayload]


class LayoutResponse(BaseModel):
    """Response model for overlap layout."""

    groups: list[GroupPayload]


class SnapRequest(BaseModel):
    """Raw times produced by a drag or resize gesture."""

    start: datetime
    end: datetime


class SnapResponse(BaseModel):
    """Grid-snapped times."""

    start: datetime
    end: datetime


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str

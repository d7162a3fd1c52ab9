"""Backend calendar event models."""

from datetime import UTC, date, datetime, time, timedelta, tzinfo

from pydantic import BaseModel, Field

from clinic_calendar.errors import InvalidIntervalError
from clinic_calendar.models.interval import TimeInterval


class EventTime(BaseModel):
    """Start or end of an event; timed events carry dateTime, all-day events date."""

    date_time: datetime | None = Field(default=None, alias="dateTime")
    day: date | None = Field(default=None, alias="date")

    class Config:
        extra = "ignore"  # Ignore provider fields such as timeZone
        populate_by_name = True

    def resolve(self, tz: tzinfo = UTC) -> datetime:
        """Return the instant this time refers to; all-day dates map to midnight.

        A dateTime without an offset is read in tz, like all-day dates.
        """
        if self.date_time is not None:
            if self.date_time.tzinfo is None:
                return self.date_time.replace(tzinfo=tz)
            return self.date_time
        if self.day is not None:
            return datetime.combine(self.day, time.min, tzinfo=tz)
        raise InvalidIntervalError("Event time has neither dateTime nor date")


class Attendee(BaseModel):
    """Event attendee."""

    email: str
    display_name: str | None = Field(default=None, alias="displayName")

    class Config:
        extra = "ignore"
        populate_by_name = True


class CalendarEvent(BaseModel):
    """A calendar event as returned by the clinic backend."""

    id: str
    summary: str = ""
    description: str | None = None
    start: EventTime
    end: EventTime
    attendees: list[Attendee] | None = None

    class Config:
        extra = "ignore"

    @property
    def is_all_day(self) -> bool:
        return self.start.date_time is None

    def to_interval(self, tz: tzinfo = UTC) -> TimeInterval:
        """Convert to a TimeInterval.

        All-day events span midnight to midnight; an end date equal to the
        start date is read as the whole day.
        """
        start = self.start.resolve(tz)
        end = self.end.resolve(tz)
        if self.is_all_day and end <= start:
            end = start + timedelta(days=1)
        return TimeInterval(id=self.id, start=start, end=end, summary=self.summary or None)

    @classmethod
    def from_interval(cls, interval: TimeInterval, description: str | None = None) -> "CalendarEvent":
        """Build a timed event for an interval."""
        return cls(
            id=interval.id,
            summary=interval.summary or "",
            description=description,
            start=EventTime(date_time=interval.start),
            end=EventTime(date_time=interval.end),
        )

    def to_payload(self) -> dict:
        """Serialize for the backend, using its camelCase field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EventsEnvelope(BaseModel):
    """Response envelope of the events listing endpoint."""

    success: bool
    error: str | None = None
    events: list[CalendarEvent] = Field(default_factory=list)

    class Config:
        extra = "ignore"


class StatusEnvelope(BaseModel):
    """Response of the calendar connection status endpoint."""

    connected: bool = False

    class Config:
        extra = "ignore"

"""Error taxonomy for calendar scheduling."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clinic_calendar.models.interval import ConflictSet
    from clinic_calendar.models.mutation import PendingMutation


class CalendarError(Exception):
    """Base class for all calendar scheduling errors."""


class InvalidIntervalError(CalendarError, ValueError):
    """Raised when an interval does not end strictly after it starts."""


class DurationError(CalendarError, ValueError):
    """A proposed appointment length is outside the allowed bounds."""

    def __init__(self, minutes: float, bound: int):
        self.minutes = minutes
        self.bound = bound
        super().__init__(self.describe())

    def describe(self) -> str:
        return f"Appointment length of {self.minutes:g} minutes is out of range"


class DurationTooShortError(DurationError):
    """Appointment is shorter than the minimum length."""

    def describe(self) -> str:
        return f"Appointments must be at least {self.bound} minutes long (got {self.minutes:g})"


class DurationTooLongError(DurationError):
    """Appointment is longer than the maximum length."""

    def describe(self) -> str:
        return f"Appointments cannot be longer than {self.bound} minutes (got {self.minutes:g})"


class ConflictDetectedError(CalendarError):
    """Recoverable: the proposed interval overlaps existing appointments.

    The caller shows the conflicts and lets the user override or abandon.
    """

    def __init__(self, conflict_set: ConflictSet):
        self.conflict_set = conflict_set
        ids = ", ".join(interval.id for interval in conflict_set.conflicts)
        super().__init__(f"Appointment {conflict_set.candidate.id} conflicts with: {ids}")


class CommitError(CalendarError):
    """The remote commit of an optimistic mutation failed and was rolled back."""

    def __init__(self, message: str, mutation: PendingMutation | None = None):
        self.mutation = mutation
        super().__init__(message)


class MutationInFlightError(CalendarError):
    """A mutation for this interval is already committing."""

    def __init__(self, interval_id: str):
        self.interval_id = interval_id
        super().__init__(f"Appointment {interval_id} is still being saved, please wait")


class UnknownIntervalError(CalendarError, KeyError):
    """No interval with this id is loaded."""

    def __init__(self, interval_id: str):
        self.interval_id = interval_id
        super().__init__(interval_id)

    def __str__(self) -> str:
        return f"Appointment {self.interval_id} not found"


class BackendError(CalendarError):
    """The clinic backend rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

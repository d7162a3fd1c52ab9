"""Optimistic mutation data models."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from clinic_calendar.errors import CommitError, InvalidIntervalError
from clinic_calendar.models.interval import TimeInterval


class MutationKind(StrEnum):
    """Kinds of schedule change a user gesture can produce."""

    CREATE = "create"
    MOVE = "move"
    RESIZE = "resize"
    DELETE = "delete"


@dataclass
class PendingMutation:
    """A tentative schedule change awaiting remote confirmation."""

    kind: MutationKind
    proposed: TimeInterval | None
    original: TimeInterval | None
    snapshot: tuple[TimeInterval, ...]
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def interval_id(self) -> str:
        target = self.proposed if self.proposed is not None else self.original
        if target is None:
            raise InvalidIntervalError(f"{self.kind} mutation has neither a proposed nor an original interval")
        return target.id


_SUCCESS_VERBS = {
    MutationKind.CREATE: "created",
    MutationKind.MOVE: "moved",
    MutationKind.RESIZE: "resized",
    MutationKind.DELETE: "deleted",
}


@dataclass
class MutationOutcome:
    """Settled result of a proposed mutation."""

    success: bool
    mutation: PendingMutation
    error: CommitError | None = None

    @property
    def message(self) -> str:
        interval_id = self.mutation.interval_id
        if self.success:
            return f"Appointment {interval_id} {_SUCCESS_VERBS[self.mutation.kind]}."
        if self.mutation.kind is MutationKind.DELETE:
            return f"Could not delete appointment {interval_id}, it was restored: {self.error}"
        return f"Could not save appointment {interval_id}, the change was reverted: {self.error}"

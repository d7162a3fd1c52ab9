"""Calendar scheduling flows: create, drag, resize and delete appointments."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from cuid2 import cuid_wrapper

from clinic_calendar.config import CalendarConfig
from clinic_calendar.errors import ConflictDetectedError, DurationError, MutationInFlightError
from clinic_calendar.models.interval import TimeInterval
from clinic_calendar.models.layout import OverlapGroup
from clinic_calendar.models.mutation import MutationKind
from clinic_calendar.services.conflicts import check_conflicts
from clinic_calendar.services.layout import group_overlaps
from clinic_calendar.services.mutations import CommitCallable, MutationCoordinator
from clinic_calendar.services.snapping import (
    clamp_duration,
    snap_drag_result,
    snap_resize_result,
    snap_to_grid,
)
from clinic_calendar.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()

CommitFactory = Callable[[MutationKind, TimeInterval], CommitCallable]


class ScheduleStatus(StrEnum):
    COMMITTED = "committed"
    CONFLICT = "conflict"
    REJECTED = "rejected"
    FAILED = "failed"
    BUSY = "busy"


@dataclass
class ScheduleResult:
    """Result of a scheduling gesture, ready to show to the user."""

    status: ScheduleStatus
    interval: TimeInterval | None = None
    conflicts: list[TimeInterval] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ScheduleStatus.COMMITTED


class CalendarScheduler:
    """Interaction logic of the calendar view, without any UI.

    Durations are validated and conflicts checked against the settled
    collection before anything is applied. A conflict returns a CONFLICT
    result without writing; the caller asks the user and repeats the call
    with override=True to go ahead.
    """

    def __init__(
        self,
        coordinator: MutationCoordinator,
        commit_factory: CommitFactory,
        config: CalendarConfig | None = None,
    ):
        """Initialize scheduler.

        Args:
            coordinator: Owner of the loaded intervals
            commit_factory: Builds the remote commit for a mutation
            config: Grid and duration settings
        """
        self.coordinator = coordinator
        self.commit_factory = commit_factory
        self.config = config or CalendarConfig()

    async def create(
        self,
        start: datetime,
        end: datetime,
        summary: str | None = None,
        override: bool = False,
        interval_id: str | None = None,
    ) -> ScheduleResult:
        """Create an appointment at grid-snapped times."""
        start = snap_to_grid(start, self.config.grid_minutes)
        end = snap_to_grid(end, self.config.grid_minutes)
        rejection = self._validate_duration(start, end)
        if rejection:
            return rejection

        candidate = TimeInterval(id=interval_id or cuid(), start=start, end=end, summary=summary)
        return await self._submit(MutationKind.CREATE, candidate, override)

    async def move(self, interval_id: str, raw_start: datetime, override: bool = False) -> ScheduleResult:
        """Drag an appointment to a new start, keeping its length."""
        if self.coordinator.is_in_flight(interval_id):
            return self._busy(interval_id)

        current = self.coordinator.get(interval_id)
        start, end = snap_drag_result(raw_start, raw_start + current.duration, self.config.grid_minutes)
        rejection = self._validate_duration(start, end)
        if rejection:
            return rejection

        return await self._submit(MutationKind.MOVE, current.with_times(start, end), override)

    async def resize(self, interval_id: str, raw_end: datetime, override: bool = False) -> ScheduleResult:
        """Drag the end of an appointment; the start stays put."""
        if self.coordinator.is_in_flight(interval_id):
            return self._busy(interval_id)

        current = self.coordinator.get(interval_id)
        end = snap_resize_result(
            current.start,
            raw_end,
            self.config.grid_minutes,
            self.config.min_duration_minutes,
        )
        rejection = self._validate_duration(current.start, end)
        if rejection:
            return rejection

        return await self._submit(MutationKind.RESIZE, current.with_times(current.start, end), override)

    async def delete(self, interval_id: str) -> ScheduleResult:
        """Delete an appointment."""
        if self.coordinator.is_in_flight(interval_id):
            return self._busy(interval_id)

        current = self.coordinator.get(interval_id)
        return await self._propose(MutationKind.DELETE, current)

    def layout(self) -> list[OverlapGroup]:
        """Overlap groups of the settled collection."""
        return group_overlaps(self.coordinator.settled_intervals())

    def _validate_duration(self, start: datetime, end: datetime) -> ScheduleResult | None:
        try:
            clamp_duration(start, end, self.config.min_duration_minutes, self.config.max_duration_minutes)
        except DurationError as e:
            logger.info(f"Rejected appointment {start.isoformat()} - {end.isoformat()}: {e}")
            return ScheduleResult(status=ScheduleStatus.REJECTED, message=str(e))
        return None

    async def _submit(self, kind: MutationKind, candidate: TimeInterval, override: bool) -> ScheduleResult:
        conflict_set = check_conflicts(candidate, self.coordinator.settled_intervals(), exclude_id=candidate.id)
        conflicts = conflict_set.conflicts
        if conflict_set.has_conflict and not override:
            return ScheduleResult(
                status=ScheduleStatus.CONFLICT,
                interval=candidate,
                conflicts=conflicts,
                message=f"{ConflictDetectedError(conflict_set)}. Save anyway?",
            )
        if conflicts:
            logger.info(f"Saving {candidate.id} over {len(conflicts)} conflict(s) at the user's request")

        return await self._propose(kind, candidate, conflicts)

    async def _propose(
        self, kind: MutationKind, interval: TimeInterval, conflicts: list[TimeInterval] | None = None
    ) -> ScheduleResult:
        try:
            outcome = await self.coordinator.propose(kind, interval, self.commit_factory(kind, interval))
        except MutationInFlightError:
            return self._busy(interval.id)

        return ScheduleResult(
            status=ScheduleStatus.COMMITTED if outcome.success else ScheduleStatus.FAILED,
            interval=interval,
            conflicts=conflicts or [],
            message=outcome.message,
        )

    def _busy(self, interval_id: str) -> ScheduleResult:
        return ScheduleResult(status=ScheduleStatus.BUSY, message=str(MutationInFlightError(interval_id)))

"""Scheduling services for the clinic calendar."""

from clinic_calendar.services.conflicts import check_conflicts, find_conflicts
from clinic_calendar.services.layout import group_overlaps, layout_slots
from clinic_calendar.services.mutations import MutationCoordinator
from clinic_calendar.services.scheduler import CalendarScheduler, ScheduleResult, ScheduleStatus
from clinic_calendar.services.snapping import (
    clamp_duration,
    snap_drag_result,
    snap_resize_result,
    snap_to_grid,
)

__all__ = [
    "CalendarScheduler",
    "MutationCoordinator",
    "ScheduleResult",
    "ScheduleStatus",
    "check_conflicts",
    "clamp_duration",
    "find_conflicts",
    "group_overlaps",
    "layout_slots",
    "snap_drag_result",
    "snap_resize_result",
    "snap_to_grid",
]

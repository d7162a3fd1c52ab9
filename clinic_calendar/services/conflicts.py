"""Conflict detection between appointment intervals."""

from collections.abc import Iterable

from clinic_calendar.models.interval import ConflictSet, TimeInterval


def find_conflicts(
    candidate: TimeInterval,
    existing: Iterable[TimeInterval],
    exclude_id: str | None = None,
) -> list[TimeInterval]:
    """Return the intervals in `existing` that overlap `candidate`.

    Args:
        candidate: Proposed interval
        existing: Loaded intervals, in display order
        exclude_id: Id to skip, usually the interval being moved or resized

    Returns:
        Overlapping intervals in the order of `existing`
    """
    return [
        interval
        for interval in existing
        if interval.id != candidate.id and interval.id != exclude_id and candidate.overlaps(interval)
    ]


def check_conflicts(
    candidate: TimeInterval,
    existing: Iterable[TimeInterval],
    exclude_id: str | None = None,
) -> ConflictSet:
    """Return the conflicts of `candidate` as a ConflictSet."""
    return ConflictSet(candidate=candidate, conflicts=find_conflicts(candidate, existing, exclude_id))

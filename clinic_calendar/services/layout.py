"""Overlap grouping for side-by-side rendering of appointments."""

from collections.abc import Sequence

from clinic_calendar.models.interval import TimeInterval
from clinic_calendar.models.layout import OverlapGroup, SlotAssignment


def group_overlaps(intervals: Sequence[TimeInterval]) -> list[OverlapGroup]:
    """Partition intervals into overlap groups and assign layout slots.

    Single pass: each unassigned interval seeds a group, and only the
    remaining intervals overlapping that seed join it. Members are not
    re-tested against each other, so an interval that overlaps a member but
    not the seed starts or joins a later group.

    Groups of one interval are left out of the result.
    """
    assigned = [False] * len(intervals)
    groups: list[OverlapGroup] = []

    for i, seed in enumerate(intervals):
        if assigned[i]:
            continue
        assigned[i] = True
        members = [seed]

        for j in range(i + 1, len(intervals)):
            if not assigned[j] and seed.overlaps(intervals[j]):
                assigned[j] = True
                members.append(intervals[j])

        if len(members) == 1:
            continue

        # sorted() is stable, ties keep collection order
        ordered = sorted(members, key=lambda interval: interval.start)
        groups.append(
            OverlapGroup(
                members=[
                    SlotAssignment(interval=interval, slot_index=index, slot_count=len(ordered))
                    for index, interval in enumerate(ordered)
                ]
            )
        )

    return groups


def layout_slots(intervals: Sequence[TimeInterval]) -> dict[str, SlotAssignment]:
    """Map interval id to its slot; ids not present render at full width."""
    return {member.interval.id: member for group in group_overlaps(intervals) for member in group.members}

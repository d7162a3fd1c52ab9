"""Tests for overlap grouping and slot layout."""

from datetime import UTC, datetime

from clinic_calendar.models.interval import TimeInterval
from clinic_calendar.services.layout import group_overlaps, layout_slots


def interval(interval_id: str, start: str, end: str) -> TimeInterval:
    day = "2025-03-14"
    return TimeInterval(
        id=interval_id,
        start=datetime.fromisoformat(f"{day}T{start}").replace(tzinfo=UTC),
        end=datetime.fromisoformat(f"{day}T{end}").replace(tzinfo=UTC),
    )


def slots_by_id(groups):
    return {member.interval.id: (member.slot_index, member.slot_count) for group in groups for member in group.members}


class TestGroupOverlaps:
    """Tests for group_overlaps."""

    def test_three_pairwise_overlapping(self):
        """Test one group of three with slots in start order."""
        a = interval("A", "10:00", "11:00")
        b = interval("B", "10:30", "11:30")
        c = interval("C", "10:45", "10:50")

        groups = group_overlaps([a, b, c])

        assert len(groups) == 1
        assert groups[0].size == 3
        assert slots_by_id(groups) == {"A": (0, 3), "B": (1, 3), "C": (2, 3)}

    def test_slots_follow_start_time_not_input_order(self):
        """Test that slot indices come from ascending start."""
        late = interval("late", "10:30", "11:00")
        early = interval("early", "10:00", "11:00")

        groups = group_overlaps([late, early])

        assert slots_by_id(groups) == {"early": (0, 2), "late": (1, 2)}

    def test_ties_keep_input_order(self):
        """Test that equal starts keep their collection order."""
        first = interval("first", "10:00", "10:30")
        second = interval("second", "10:00", "11:00")

        groups = group_overlaps([first, second])

        assert groups[0].ids == ["first", "second"]

    def test_singletons_are_omitted(self):
        """Test that non-overlapping appointments get no slot."""
        groups = group_overlaps([interval("a", "09:00", "10:00"), interval("b", "10:00", "11:00")])

        assert groups == []

    def test_single_pass_is_not_transitive(self):
        """Test that members are only compared with the group's seed."""
        a = interval("A", "10:00", "10:30")
        b = interval("B", "10:15", "11:00")
        c = interval("C", "10:45", "11:15")

        groups = group_overlaps([a, b, c])

        # C overlaps B but not A, so it seeds its own group and is dropped as a singleton
        assert len(groups) == 1
        assert groups[0].ids == ["A", "B"]

    def test_later_seed_collects_leftovers(self):
        """Test that intervals left out of one group can form the next one."""
        a = interval("A", "10:00", "10:30")
        b = interval("B", "10:15", "11:00")
        c = interval("C", "10:45", "11:15")
        d = interval("D", "11:00", "11:30")

        groups = group_overlaps([a, b, c, d])

        assert [group.ids for group in groups] == [["A", "B"], ["C", "D"]]

    def test_every_interval_in_exactly_one_group(self):
        """Test that groups partition the input, counting omitted singletons."""
        intervals = [
            interval("1", "08:00", "09:00"),
            interval("2", "08:30", "09:30"),
            interval("3", "09:15", "10:00"),
            interval("4", "12:00", "13:00"),
            interval("5", "12:00", "12:15"),
            interval("6", "15:00", "16:00"),
        ]

        groups = group_overlaps(intervals)
        grouped = [interval_id for group in groups for interval_id in group.ids]

        assert len(grouped) == len(set(grouped))
        singletons = {i.id for i in intervals} - set(grouped)
        assert set(grouped) | singletons == {i.id for i in intervals}
        for group in groups:
            assert sorted(m.slot_index for m in group.members) == list(range(group.size))
            assert all(m.slot_count == group.size for m in group.members)

    def test_does_not_mutate_input(self):
        """Test that the input list keeps its order."""
        intervals = [interval("b", "10:30", "11:00"), interval("a", "10:00", "11:00")]
        before = list(intervals)

        group_overlaps(intervals)

        assert intervals == before

    def test_empty(self):
        """Test an empty calendar."""
        assert group_overlaps([]) == []


class TestSlotAssignment:
    """Tests for layout percentages."""

    def test_width_and_offset(self):
        """Test width and offset percentages in a group of three."""
        groups = group_overlaps(
            [interval("A", "10:00", "11:00"), interval("B", "10:30", "11:30"), interval("C", "10:45", "10:50")]
        )
        members = {m.interval.id: m for m in groups[0].members}

        assert members["A"].width_percent == 100 / 3
        assert members["A"].offset_percent == 0
        assert members["C"].offset_percent == 2 * (100 / 3)

    def test_as_dict(self):
        """Test the dictionary form used by the HTTP layer."""
        groups = group_overlaps([interval("A", "10:00", "11:00"), interval("B", "10:30", "11:30")])

        assert groups[0].members[1].as_dict() == {
            "id": "B",
            "slot_index": 1,
            "slot_count": 2,
            "width_percent": 50.0,
            "offset_percent": 50.0,
        }

    def test_layout_slots_lookup(self):
        """Test the id lookup; singletons are absent."""
        slots = layout_slots(
            [interval("A", "10:00", "11:00"), interval("B", "10:30", "11:30"), interval("C", "13:00", "14:00")]
        )

        assert set(slots) == {"A", "B"}
        assert slots["B"].slot_index == 1

"""Tests for conflict detection."""

from datetime import UTC, datetime

import pytest

from clinic_calendar.models.interval import TimeInterval
from clinic_calendar.services.conflicts import check_conflicts, find_conflicts


def interval(interval_id: str, start: str, end: str) -> TimeInterval:
    day = "2025-03-14"
    return TimeInterval(
        id=interval_id,
        start=datetime.fromisoformat(f"{day}T{start}").replace(tzinfo=UTC),
        end=datetime.fromisoformat(f"{day}T{end}").replace(tzinfo=UTC),
    )


class TestFindConflicts:
    """Tests for find_conflicts."""

    def test_partial_overlap(self):
        """Test a candidate overlapping one of two appointments."""
        candidate = interval("new", "14:00", "14:30")
        existing = [interval("1", "14:15", "14:45"), interval("2", "15:00", "15:30")]

        conflicts = find_conflicts(candidate, existing)

        assert [c.id for c in conflicts] == ["1"]

    def test_touching_endpoints_do_not_conflict(self):
        """Test that back-to-back appointments are not conflicts."""
        first = interval("a", "10:00", "10:30")
        second = interval("b", "10:30", "11:00")

        assert find_conflicts(first, [second]) == []
        assert find_conflicts(second, [first]) == []

    def test_containment_conflicts(self):
        """Test that an interval inside another conflicts both ways."""
        outer = interval("outer", "09:00", "12:00")
        inner = interval("inner", "10:00", "10:15")

        assert find_conflicts(inner, [outer]) == [outer]
        assert find_conflicts(outer, [inner]) == [inner]

    def test_exclude_id(self):
        """Test that the moved appointment never conflicts with its old position."""
        old = interval("a", "10:00", "11:00")
        other = interval("b", "10:30", "11:30")
        moved = interval("x", "10:15", "11:15")

        conflicts = find_conflicts(moved, [old, other], exclude_id="a")

        assert old not in conflicts
        assert conflicts == [other]

    def test_never_conflicts_with_itself(self):
        """Test that an interval sharing the candidate's id is skipped."""
        a = interval("a", "10:00", "11:00")
        b = interval("b", "10:30", "11:30")

        assert find_conflicts(a, [a, b]) == [b]

    def test_preserves_collection_order(self):
        """Test that conflicts keep the order of the collection."""
        candidate = interval("new", "09:00", "18:00")
        existing = [
            interval("late", "16:00", "17:00"),
            interval("early", "09:30", "10:00"),
            interval("outside", "18:00", "19:00"),
            interval("mid", "12:00", "13:00"),
        ]

        assert [c.id for c in find_conflicts(candidate, existing)] == ["late", "early", "mid"]

    def test_empty_collection(self):
        """Test that nothing conflicts with an empty calendar."""
        assert find_conflicts(interval("a", "10:00", "11:00"), []) == []

    def test_does_not_mutate_input(self):
        """Test that the collection is left untouched."""
        existing = [interval("1", "14:15", "14:45"), interval("2", "15:00", "15:30")]
        before = list(existing)

        find_conflicts(interval("new", "14:00", "15:15"), existing)

        assert existing == before

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (("10:00", "11:00"), ("10:30", "11:30")),
            (("10:00", "10:30"), ("10:30", "11:00")),
            (("10:00", "12:00"), ("10:15", "10:45")),
            (("08:00", "09:00"), ("13:00", "14:00")),
            (("10:00", "11:00"), ("10:00", "11:00")),
            (("10:00", "10:01"), ("09:59", "10:00")),
        ],
    )
    def test_overlap_is_symmetric(self, a, b):
        """Test that A conflicts with B exactly when B conflicts with A."""
        first = interval("a", *a)
        second = interval("b", *b)

        assert bool(find_conflicts(first, [second])) == bool(find_conflicts(second, [first]))


class TestCheckConflicts:
    """Tests for the ConflictSet wrapper."""

    def test_conflict_set(self):
        """Test that the ConflictSet carries candidate and conflicts."""
        candidate = interval("new", "14:00", "14:30")
        result = check_conflicts(candidate, [interval("1", "14:15", "14:45")])

        assert result.candidate == candidate
        assert result.has_conflict
        assert result.ids == ["1"]

    def test_no_conflict(self):
        """Test an empty ConflictSet."""
        result = check_conflicts(interval("new", "14:00", "14:30"), [interval("1", "14:30", "15:00")])

        assert not result.has_conflict
        assert result.conflicts == []

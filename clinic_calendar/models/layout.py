"""Side-by-side layout models for overlapping appointments."""

from dataclasses import dataclass, field

from clinic_calendar.models.interval import TimeInterval


@dataclass(frozen=True)
class SlotAssignment:
    """Column placement of one interval inside an overlap group."""

    interval: TimeInterval
    slot_index: int
    slot_count: int

    @property
    def width_percent(self) -> float:
        return 100 / self.slot_count

    @property
    def offset_percent(self) -> float:
        return self.slot_index * self.width_percent

    def as_dict(self) -> dict[str, str | int | float]:
        """Return the assignment as a dictionary."""
        return {
            "id": self.interval.id,
            "slot_index": self.slot_index,
            "slot_count": self.slot_count,
            "width_percent": self.width_percent,
            "offset_percent": self.offset_percent,
        }


@dataclass
class OverlapGroup:
    """A cluster of overlapping intervals rendered next to each other."""

    members: list[SlotAssignment] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def ids(self) -> list[str]:
        return [member.interval.id for member in self.members]

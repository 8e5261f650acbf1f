"""
Slot Grid Builder.

Turns a location's operating hours into an ordered list of fixed-width
TimeSlots and maps timestamps onto that grid.

Clamping: an appointment that starts before opening maps to the first slot,
and one that runs past closing maps to the last slot. Only the slot mapping
is clamped; the appointment's own start and end are never altered.
"""

import math
from datetime import datetime, time as time_type
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from models import Location, TimeSlot
from .geometry import format_12_hour, format_minutes, minute_of_day, overlaps


class SlotFormat(str, Enum):
    """How slot labels are rendered."""
    SIMPLE = "simple"            # 07:30-08:00
    RANGE = "range"              # 7:30-8:00 AM
    TWELVE_HOUR = "twelve_hour"  # 7:30 AM


def _label(start: int, end: int, label_format: SlotFormat) -> str:
    if label_format == SlotFormat.TWELVE_HOUR:
        return format_12_hour(start)
    if label_format == SlotFormat.RANGE:
        period = "PM" if (start // 60) % 24 >= 12 else "AM"
        return f"{format_12_hour(start, False)}-{format_12_hour(end, False)} {period}"
    return f"{format_minutes(start)}-{format_minutes(end)}"


class SlotGrid:
    """
    Ordered, fixed-width half-open slots from opening time onwards.
    The last slot keeps its full width even if it runs past closing.
    """

    def __init__(
        self,
        start_minute: int,
        end_minute: int,
        slot_minutes: int = 30,
        label_format: SlotFormat = SlotFormat.SIMPLE
    ):
        if slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")
        if end_minute <= start_minute:
            raise ValueError("Grid end must be strictly after grid start")

        self.start_minute = start_minute
        self.end_minute = end_minute
        self.slot_minutes = slot_minutes
        self.label_format = label_format

        self.slots: List[TimeSlot] = [
            TimeSlot(
                label=_label(m, m + slot_minutes, label_format),
                start_minute=m,
                end_minute=m + slot_minutes
            )
            for m in range(start_minute, end_minute, slot_minutes)
        ]

    @classmethod
    def from_location(cls, location: Location, label_format: SlotFormat = SlotFormat.SIMPLE) -> "SlotGrid":
        return cls.from_window(
            location.working_hours_start,
            location.working_hours_end,
            location.slot_duration_minutes,
            label_format
        )

    @classmethod
    def from_window(
        cls,
        start: time_type,
        end: time_type,
        slot_minutes: int = 30,
        label_format: SlotFormat = SlotFormat.SIMPLE
    ) -> "SlotGrid":
        return cls(
            start.hour * 60 + start.minute,
            end.hour * 60 + end.minute,
            slot_minutes,
            label_format
        )

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(self.slots)

    def __getitem__(self, index: int) -> TimeSlot:
        return self.slots[index]

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self.slots]

    # --- Lookups ---

    def slot_index_containing(self, minute: int) -> Optional[int]:
        """Index of the slot holding this minute of the day, or None outside the grid."""
        if minute < self.start_minute:
            return None
        index = (minute - self.start_minute) // self.slot_minutes
        return index if index < len(self.slots) else None

    def clamped_index(self, minute: int) -> int:
        """Like slot_index_containing, but pinned to the first/last slot."""
        if minute < self.start_minute:
            return 0
        index = (minute - self.start_minute) // self.slot_minutes
        return min(index, len(self.slots) - 1)

    def span_count(self, duration_minutes: float) -> int:
        """Number of slots a duration occupies: ceil(duration / slot width)."""
        if duration_minutes <= 0:
            return 0
        return math.ceil(duration_minutes / self.slot_minutes)

    def slot_range(self, start: datetime, end: datetime) -> Tuple[int, int]:
        """
        Clamped (first, last) slot indices for an interval.
        The end is exclusive, so an appointment ending exactly on a slot
        boundary does not claim the following slot.
        """
        first = self.clamped_index(minute_of_day(start))
        if end.date() > start.date():
            # Runs past midnight, so certainly past closing
            return first, len(self.slots) - 1

        last_minute = max(minute_of_day(end) - 1, minute_of_day(start))
        return first, max(first, self.clamped_index(last_minute))

    def slots_touching(self, start: datetime, end: datetime) -> List[int]:
        """Indices of every slot the interval overlaps (no clamping)."""
        start_min = minute_of_day(start)
        end_min = minute_of_day(end)
        if end.date() > start.date():
            end_min += 24 * 60 * (end.date() - start.date()).days

        return [
            i for i, slot in enumerate(self.slots)
            if overlaps(start_min, end_min, slot.start_minute, slot.end_minute)
        ]

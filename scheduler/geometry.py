"""
Interval Geometry.

Pure helpers over half-open [start, end) intervals. Endpoints may be
datetimes or plain minute-of-day integers, as long as both intervals use
the same kind.
"""

from datetime import datetime, timedelta
from typing import Union

TimePoint = Union[datetime, int, float]


def overlaps(start_a: TimePoint, end_a: TimePoint, start_b: TimePoint, end_b: TimePoint) -> bool:
    """True iff the intervals share time. Touching endpoints do not overlap."""
    return start_a < end_b and end_a > start_b


def _gap_minutes(delta) -> float:
    if isinstance(delta, timedelta):
        return delta.total_seconds() / 60
    return float(delta)


def is_within_buffer(
    candidate_start: TimePoint,
    candidate_end: TimePoint,
    other_start: TimePoint,
    other_end: TimePoint,
    buffer_minutes: float
) -> bool:
    """
    True when the two intervals are disjoint but closer than buffer_minutes.
    Back-to-back intervals (zero gap) count as within the buffer.
    """
    if overlaps(candidate_start, candidate_end, other_start, other_end):
        return False

    if other_end <= candidate_start:
        gap = _gap_minutes(candidate_start - other_end)
    else:
        gap = _gap_minutes(other_start - candidate_end)

    return gap < buffer_minutes


def duration_minutes(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def duration_hours(start: datetime, end: datetime) -> float:
    return duration_minutes(start, end) / 60


def minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def format_minutes(minutes: int) -> str:
    """540 -> '09:00'"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_12_hour(minutes: int, with_period: bool = True) -> str:
    """780 -> '1:00 PM'"""
    hours, mins = divmod(minutes % (24 * 60), 60)
    period = "PM" if hours >= 12 else "AM"
    display = 12 if hours % 12 == 0 else hours % 12
    text = f"{display}:{mins:02d}"
    return f"{text} {period}" if with_period else text

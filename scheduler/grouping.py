"""
Consecutive-Session Grouper.

Merges back-to-back bookings for the same patient/therapist pair into one
group so a multi-session block occupies a single contiguous region of the
slot grid instead of one cell per record.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from models import Appointment, AppointmentCategory
from .geometry import duration_minutes
from .slots import SlotGrid

DEFAULT_SLOT_MINUTES = 30


@dataclass
class SessionGroup:
    start_time: datetime
    end_time: datetime
    patient_id: Optional[str]
    staff_id: Optional[str]
    category: AppointmentCategory
    appointments: List[Appointment] = field(default_factory=list)
    slot_span: int = 1
    first_slot_index: Optional[int] = None

    @property
    def id(self) -> str:
        return f"group-{self.appointments[0].id}"

    @property
    def total_minutes(self) -> float:
        return duration_minutes(self.start_time, self.end_time)

    @property
    def is_group(self) -> bool:
        return len(self.appointments) > 1


def _continues(group: SessionGroup, appt: Appointment) -> bool:
    return (
        appt.patient_id == group.patient_id
        and appt.staff_id == group.staff_id
        and appt.category == group.category
        and appt.start_time == group.end_time
    )


def group_consecutive_sessions(
    appointments: Iterable[Appointment],
    grid: Optional[SlotGrid] = None
) -> List[SessionGroup]:
    """
    Group one subject's appointments for a day.

    Two neighbours merge only when they share patient, therapist and category
    and the first ends exactly when the second starts. Any gap, even a minute,
    keeps them apart.
    """
    ordered = sorted(appointments, key=lambda a: (a.start_time, a.id))
    groups: List[SessionGroup] = []

    for appt in ordered:
        if groups and _continues(groups[-1], appt):
            current = groups[-1]
            current.appointments.append(appt)
            current.end_time = max(current.end_time, appt.end_time)
        else:
            groups.append(SessionGroup(
                start_time=appt.start_time,
                end_time=appt.end_time,
                patient_id=appt.patient_id,
                staff_id=appt.staff_id,
                category=appt.category,
                appointments=[appt]
            ))

    span_grid = grid or SlotGrid(0, 24 * 60, DEFAULT_SLOT_MINUTES)
    for group in groups:
        group.slot_span = span_grid.span_count(group.total_minutes)
        if grid is not None:
            group.first_slot_index = grid.slot_range(group.start_time, group.end_time)[0]

    return groups

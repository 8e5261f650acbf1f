"""
Hard Constraint Validation Logic.

This module answers the question: "Is this person already booked at Time Y?"
A patient or therapist cannot be in two sessions at once. Supervisors may be,
depending on policy.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from models import Appointment
from .geometry import overlaps, is_within_buffer
from .policy import SchedulingPolicy, DEFAULT_POLICY

logger = logging.getLogger(__name__)


class SubjectRole(str, Enum):
    """Which reference on an appointment identifies the subject."""
    PATIENT = "patient"
    STAFF = "staff"
    SUPERVISOR = "supervisor"


_ROLE_ATTRIBUTE = {
    SubjectRole.PATIENT: "patient_id",
    SubjectRole.STAFF: "staff_id",
    SubjectRole.SUPERVISOR: "supervisor_id",
}


def subject_of(appointment: Appointment, role: SubjectRole) -> Optional[str]:
    return getattr(appointment, _ROLE_ATTRIBUTE[role])


def subject_appointments(
    role: SubjectRole,
    subject_id: str,
    existing: Iterable[Appointment],
    exclude_id: Optional[str] = None
) -> List[Appointment]:
    """Active appointments of one subject, minus the one being edited."""
    return [
        appt for appt in existing
        if subject_of(appt, role) == subject_id
        and appt.id != exclude_id
        and appt.is_active
    ]


@dataclass
class ConflictReport:
    """Overlaps (hard) and near-misses (soft) for one subject."""
    role: SubjectRole
    subject_id: str
    conflicts: List[Appointment] = field(default_factory=list)
    nearby: List[Appointment] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts)


class ConflictDetector:
    """
    Finds double-bookings for a candidate interval against a snapshot of
    existing appointments. Results are only as fresh as the snapshot: callers
    must re-run the check inside the transaction that performs the write.
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY

    def find_conflicts(
        self,
        role: SubjectRole,
        subject_id: str,
        start: datetime,
        end: datetime,
        existing: Iterable[Appointment],
        exclude_id: Optional[str] = None
    ) -> List[Appointment]:
        """Existing appointments of the subject that overlap [start, end)."""
        return [
            appt for appt in subject_appointments(role, subject_id, existing, exclude_id)
            if overlaps(start, end, appt.start_time, appt.end_time)
        ]

    def find_nearby(
        self,
        role: SubjectRole,
        subject_id: str,
        start: datetime,
        end: datetime,
        existing: Iterable[Appointment],
        exclude_id: Optional[str] = None,
        buffer_minutes: Optional[int] = None
    ) -> List[Appointment]:
        """Appointments that don't overlap but sit within the buffer ('tight scheduling')."""
        buffer = self.policy.buffer_minutes if buffer_minutes is None else buffer_minutes
        return [
            appt for appt in subject_appointments(role, subject_id, existing, exclude_id)
            if is_within_buffer(start, end, appt.start_time, appt.end_time, buffer)
        ]

    def check(
        self,
        role: SubjectRole,
        subject_id: str,
        start: datetime,
        end: datetime,
        existing: Iterable[Appointment],
        exclude_id: Optional[str] = None
    ) -> ConflictReport:
        existing = list(existing)
        report = ConflictReport(
            role=role,
            subject_id=subject_id,
            conflicts=self.find_conflicts(role, subject_id, start, end, existing, exclude_id),
            nearby=self.find_nearby(role, subject_id, start, end, existing, exclude_id)
        )
        if report.has_conflict:
            logger.debug(
                f"{role.value} {subject_id} double-booked against "
                f"{[a.id for a in report.conflicts]}"
            )
        return report

"""
Daily Load Checker.

Sums a subject's booked hours for one calendar day and compares the total
(including the proposed session) against the daily cap.
"""

from dataclasses import dataclass
from datetime import date as date_type
from typing import Iterable, Optional

from models import Appointment
from .conflicts import SubjectRole, subject_appointments
from .issues import IssueKind, Severity, ValidationIssue
from .policy import SchedulingPolicy, DEFAULT_POLICY


@dataclass
class DailyLoadResult:
    subject_id: str
    day: date_type
    current_hours: float
    session_hours: float
    total_hours: float
    limit_hours: float
    exceeds_limit: bool
    approaching_limit: bool
    warning: Optional[ValidationIssue] = None


class DailyLoadChecker:
    """Pure, deterministic capacity check. Never blocks a booking, only warns."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY

    def check(
        self,
        subject_id: str,
        day: date_type,
        session_hours: float,
        existing: Iterable[Appointment],
        role: SubjectRole = SubjectRole.PATIENT,
        exclude_id: Optional[str] = None
    ) -> DailyLoadResult:
        same_day = [
            appt for appt in subject_appointments(role, subject_id, existing, exclude_id)
            if appt.date == day
        ]

        # Compare in whole minutes so the cap boundary is exact
        current_minutes = round(sum(appt.duration_minutes for appt in same_day))
        total_minutes = current_minutes + round(session_hours * 60)
        limit_minutes = self.policy.daily_limit_minutes

        exceeds = total_minutes > limit_minutes
        approaching = not exceeds and total_minutes >= limit_minutes * self.policy.approaching_limit_fraction

        result = DailyLoadResult(
            subject_id=subject_id,
            day=day,
            current_hours=current_minutes / 60,
            session_hours=session_hours,
            total_hours=total_minutes / 60,
            limit_hours=self.policy.daily_limit_hours,
            exceeds_limit=exceeds,
            approaching_limit=approaching
        )
        result.warning = self._build_warning(result, role)
        return result

    def _build_warning(self, result: DailyLoadResult, role: SubjectRole) -> Optional[ValidationIssue]:
        details = {
            "current_hours": result.current_hours,
            "session_hours": result.session_hours,
            "total_hours": result.total_hours,
            "limit": result.limit_hours,
        }
        who = role.value.capitalize()
        limit = f"{result.limit_hours:g}"

        if result.exceeds_limit:
            return ValidationIssue(
                IssueKind.DAILY_LIMIT_EXCEEDED,
                f"{who} will have {result.total_hours:.1f} hours scheduled for this day (limit: {limit} hours)",
                Severity.WARNING,
                details
            )
        if result.approaching_limit:
            return ValidationIssue(
                IssueKind.APPROACHING_DAILY_LIMIT,
                f"{who} will have {result.total_hours:.1f} hours scheduled (approaching {limit} hour limit)",
                Severity.WARNING,
                details
            )
        return None

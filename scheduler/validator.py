"""
Appointment Validator.

Runs every check a proposed booking must pass before it is persisted:
1. Required fields (short-circuits)
2. Time range and minimum duration (short-circuits)
3. Double-booking for patient, therapist and (by policy) supervisor (accumulated)
4. Daily load for the primary subject (warning only)

The validator is a pure function of its inputs: the same request and
snapshot always produce the same result.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from models import Appointment, AppointmentRequest
from .conflicts import ConflictDetector, ConflictReport, SubjectRole
from .geometry import duration_minutes
from .issues import IssueKind, Severity, ValidationIssue
from .load import DailyLoadChecker
from .policy import SchedulingPolicy, DEFAULT_POLICY

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Aggregated outcome handed back to the create/update command path."""
    is_valid: bool = True
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    conflicts: List[Appointment] = field(default_factory=list)

    def add_error(self, issue: ValidationIssue) -> None:
        self.is_valid = False
        self.errors.append(issue)

    def add_warning(self, issue: ValidationIssue) -> None:
        self.warnings.append(issue)

    def add_conflicts(self, appointments: Iterable[Appointment]) -> None:
        seen = {a.id for a in self.conflicts}
        for appt in appointments:
            if appt.id not in seen:
                seen.add(appt.id)
                self.conflicts.append(appt)

    @property
    def conflict_ids(self) -> List[str]:
        return [a.id for a in self.conflicts]

    def has_error(self, kind: IssueKind) -> bool:
        return any(e.kind == kind for e in self.errors)

    def has_warning(self, kind: IssueKind) -> bool:
        return any(w.kind == kind for w in self.warnings)


def _conflict_details(appointments: List[Appointment]) -> dict:
    return {
        "appointments": [
            {
                "id": a.id,
                "patient_id": a.patient_id,
                "staff_id": a.staff_id,
                "start_time": a.start_time.isoformat(),
                "end_time": a.end_time.isoformat(),
            }
            for a in appointments
        ]
    }


class AppointmentValidator:
    """Orchestrates field, conflict and load checks into one ValidationResult."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        self.detector = ConflictDetector(self.policy)
        self.load_checker = DailyLoadChecker(self.policy)

    def validate(
        self,
        request: AppointmentRequest,
        existing: Iterable[Appointment],
        exclude_id: Optional[str] = None
    ) -> ValidationResult:
        existing = list(existing)
        exclude_id = exclude_id if exclude_id is not None else request.id
        result = ValidationResult()

        # 1. Required Fields
        self._check_required_fields(request, result)
        if not result.is_valid:
            return result

        # 2. Well-formed Interval
        self._check_time_range(request, result)
        if not result.is_valid:
            return result

        # 3. Double-Booking (all classes reported together)
        if request.patient_id:
            report = self.detector.check(
                SubjectRole.PATIENT, request.patient_id,
                request.start_time, request.end_time, existing, exclude_id
            )
            if report.has_conflict:
                result.add_error(ValidationIssue(
                    IssueKind.PATIENT_DOUBLE_BOOKING,
                    f"Patient already has {len(report.conflicts)} appointment(s) scheduled during this time",
                    Severity.ERROR,
                    _conflict_details(report.conflicts)
                ))
                result.add_conflicts(report.conflicts)

        if request.staff_id:
            report = self.detector.check(
                SubjectRole.STAFF, request.staff_id,
                request.start_time, request.end_time, existing, exclude_id
            )
            if report.has_conflict:
                result.add_error(ValidationIssue(
                    IssueKind.STAFF_DOUBLE_BOOKING,
                    f"Therapist already has {len(report.conflicts)} appointment(s) scheduled during this time",
                    Severity.ERROR,
                    _conflict_details(report.conflicts)
                ))
                result.add_conflicts(report.conflicts)
            self._warn_tight_scheduling(report, "Therapist", result)

        if request.supervisor_id:
            report = self.detector.check(
                SubjectRole.SUPERVISOR, request.supervisor_id,
                request.start_time, request.end_time, existing, exclude_id
            )
            self._apply_supervisor_policy(report, result)
            self._warn_tight_scheduling(report, "Supervisor", result)

        # 4. Daily Load (soft)
        self._check_daily_load(request, existing, exclude_id, result)

        logger.debug(
            f"Validated request {request.id or '<new>'}: valid={result.is_valid}, "
            f"errors={[e.kind.value for e in result.errors]}, "
            f"warnings={[w.kind.value for w in result.warnings]}"
        )
        return result

    def _check_required_fields(self, request: AppointmentRequest, result: ValidationResult) -> None:
        if request.category.requires_patient and not request.patient_id:
            result.add_error(ValidationIssue(IssueKind.MISSING_PATIENT, "Patient is required"))
        elif not request.patient_id and not request.staff_id:
            result.add_error(ValidationIssue(
                IssueKind.MISSING_SUBJECT, "A patient or staff member is required"
            ))

        if request.start_time is None or request.end_time is None:
            result.add_error(ValidationIssue(IssueKind.MISSING_TIMES, "Start and end times are required"))

    def _check_time_range(self, request: AppointmentRequest, result: ValidationResult) -> None:
        if request.start_time >= request.end_time:
            result.add_error(ValidationIssue(
                IssueKind.INVALID_TIME_RANGE, "End time must be after start time"
            ))
            return

        minimum = self.policy.minimum_duration_minutes
        if duration_minutes(request.start_time, request.end_time) < minimum:
            result.add_error(ValidationIssue(
                IssueKind.MINIMUM_DURATION,
                f"Appointment must be at least {minimum} minutes long",
                Severity.ERROR,
                {"minimum_minutes": minimum}
            ))

    def _apply_supervisor_policy(self, report: ConflictReport, result: ValidationResult) -> None:
        if not report.has_conflict:
            return

        if self.policy.hard_check_supervisor:
            result.add_error(ValidationIssue(
                IssueKind.SUPERVISOR_DOUBLE_BOOKING,
                f"Supervisor already has {len(report.conflicts)} appointment(s) scheduled during this time",
                Severity.ERROR,
                _conflict_details(report.conflicts)
            ))
            result.add_conflicts(report.conflicts)
        else:
            result.add_warning(ValidationIssue(
                IssueKind.SUPERVISOR_OVERLAP,
                f"Supervisor is also booked on {len(report.conflicts)} overlapping appointment(s)",
                Severity.WARNING,
                _conflict_details(report.conflicts)
            ))

    def _warn_tight_scheduling(self, report: ConflictReport, who: str, result: ValidationResult) -> None:
        if not report.nearby:
            return
        result.add_warning(ValidationIssue(
            IssueKind.TIGHT_SCHEDULING,
            f"{who} has appointments within {self.policy.buffer_minutes} minutes of this time slot",
            Severity.WARNING,
            {"role": report.role.value, **_conflict_details(report.nearby)}
        ))

    def _check_daily_load(
        self,
        request: AppointmentRequest,
        existing: List[Appointment],
        exclude_id: Optional[str],
        result: ValidationResult
    ) -> None:
        if request.patient_id:
            role, subject_id = SubjectRole.PATIENT, request.patient_id
        else:
            role, subject_id = SubjectRole.STAFF, request.staff_id

        load = self.load_checker.check(
            subject_id,
            request.start_time.date(),
            duration_minutes(request.start_time, request.end_time) / 60,
            existing,
            role=role,
            exclude_id=exclude_id
        )
        if load.warning:
            result.add_warning(load.warning)

"""
Typed validation issues.

Business outcomes (double-bookings, missing breaks, capacity) are returned as
ValidationIssue objects, never raised. Exceptions are reserved for callers
that hand the engine malformed data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class IssueKind(str, Enum):
    """Every error/warning the engine can emit."""

    # Field errors (hard, short-circuit)
    MISSING_PATIENT = "missing_patient"
    MISSING_SUBJECT = "missing_subject"
    MISSING_TIMES = "missing_times"
    INVALID_TIME_RANGE = "invalid_time_range"
    MINIMUM_DURATION = "minimum_duration"

    # Conflict errors (hard, accumulated)
    PATIENT_DOUBLE_BOOKING = "patient_double_booking"
    STAFF_DOUBLE_BOOKING = "therapist_double_booking"
    SUPERVISOR_DOUBLE_BOOKING = "supervisor_double_booking"

    # Soft scheduling warnings
    SUPERVISOR_OVERLAP = "supervisor_overlap"
    TIGHT_SCHEDULING = "tight_scheduling"

    # Capacity warnings
    DAILY_LIMIT_EXCEEDED = "daily_limit_exceeded"
    APPROACHING_DAILY_LIMIT = "approaching_daily_limit"

    # Coverage warnings
    MISSING_BREAK_CAN_SCHEDULE = "missing_lunch_can_schedule"
    MISSING_BREAK_NO_SLOTS = "missing_lunch_no_slots"
    UNNECESSARY_BREAK = "unnecessary_lunch"
    EXCESSIVE_SIMULTANEOUS_BREAKS = "excessive_simultaneous_lunch"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """One error or warning, with machine-readable details for the caller."""
    kind: IssueKind
    message: str
    severity: Severity = Severity.ERROR
    details: Dict[str, Any] = field(default_factory=dict)

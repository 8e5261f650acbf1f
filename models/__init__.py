"""
Data models package for the Clinical Staffing Scheduler.

This package exports the three core pillars of the data architecture:
1. Demand (Appointment, AppointmentRequest)
2. Supply (StaffMember, Team, Location)
3. Output (TimeSlot, BreakDraft, BreakSchedulingFailure)
"""

from .appointment import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    AppointmentCategory,
    INACTIVE_STATUSES
)

from .roster import (
    StaffMember,
    Team,
    Location
)

from .schedule import (
    TimeSlot,
    BreakDraft,
    BreakSchedulingFailure
)

__all__ = [
    # --- Demand Models ---
    "Appointment",
    "AppointmentRequest",
    "AppointmentStatus",
    "AppointmentCategory",
    "INACTIVE_STATUSES",

    # --- Roster Models ---
    "StaffMember",
    "Team",
    "Location",

    # --- Output Models ---
    "TimeSlot",
    "BreakDraft",
    "BreakSchedulingFailure",
]

"""
Appointment data models for the Clinical Staffing Scheduler.

An Appointment is a committed booking supplied by the host application.
An AppointmentRequest is the (possibly incomplete) candidate that is
checked before anything is persisted.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator, ConfigDict
from datetime import date as date_type, datetime


class AppointmentStatus(str, Enum):
    """Lifecycle state of a booking."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


# Bookings in these states no longer occupy anyone's time
INACTIVE_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})


class AppointmentCategory(str, Enum):
    """Functional type of an appointment."""
    DIRECT = "direct"
    INDIRECT = "indirect"
    SUPERVISION = "supervision"
    BREAK = "break"
    GROUP_ACTIVITY = "group-activity"
    FACILITY_CLEANING = "facility-cleaning"
    OTHER = "other"

    @property
    def requires_patient(self) -> bool:
        """Only direct therapy sessions must name a patient."""
        return self is AppointmentCategory.DIRECT


class Appointment(BaseModel):
    """
    An existing booking between a staff member and (optionally) a patient.
    The scheduler only reads these; it never mutates them.
    """

    # --- Core Identity ---
    id: str = Field(description="Unique identifier")

    # --- Subjects ---
    patient_id: Optional[str] = Field(default=None, description="Patient (None for breaks, admin time)")
    staff_id: Optional[str] = Field(default=None, description="Therapist delivering the session")
    supervisor_id: Optional[str] = Field(default=None, description="Supervising clinician (BCBA)")
    location_id: Optional[str] = Field(default=None, description="Where the session takes place")

    # --- Timing ---
    start_time: datetime = Field(description="Session start")
    end_time: datetime = Field(description="Session end (exclusive)")

    # --- Classification ---
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    category: AppointmentCategory = Field(default=AppointmentCategory.DIRECT)

    # --- Metadata ---
    title: str = Field(default="", description="Short display title")
    notes: str = Field(default="", description="Free-text notes")
    recurring: bool = Field(default=False, description="Part of a recurring series")

    @model_validator(mode='after')
    def validate_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("Appointment end_time must be strictly after start_time")
        return self

    @property
    def is_active(self) -> bool:
        """False for cancelled and no-show bookings."""
        return self.status not in INACTIVE_STATUSES

    @property
    def date(self) -> date_type:
        """Calendar date the appointment starts on."""
        return self.start_time.date()

    @property
    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "appt_0142",
            "patient_id": "pat_017",
            "staff_id": "rbt_004",
            "supervisor_id": "bcba_001",
            "location_id": "loc_main",
            "start_time": "2025-03-10T09:00:00",
            "end_time": "2025-03-10T11:00:00",
            "status": "scheduled",
            "category": "direct",
            "title": "ABA Session"
        }
    })


class AppointmentRequest(BaseModel):
    """
    A proposed create/update. Every field may be missing or inconsistent;
    the validator reports such problems as field errors instead of raising.
    """
    id: Optional[str] = Field(default=None, description="Set when updating an existing booking")
    patient_id: Optional[str] = None
    staff_id: Optional[str] = None
    supervisor_id: Optional[str] = None
    location_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    category: AppointmentCategory = AppointmentCategory.DIRECT
    title: str = ""
    notes: str = ""
    recurring: bool = False

"""
Schedule data models for the Clinical Staffing Scheduler.

This module defines the 'Output' side of the scheduling engine:
1. TimeSlot: a fixed-width bucket of a location's day
2. BreakDraft: a break the auto-scheduler wants persisted
3. BreakSchedulingFailure: a staff member the auto-scheduler could not place
"""

from typing import Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import date as date_type, datetime, timedelta

from .appointment import AppointmentCategory


class TimeSlot(BaseModel):
    """
    Half-open [start_minute, end_minute) range of a day, in minutes from midnight.
    Slots are derived from location configuration and never change afterwards.
    """
    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Display label, e.g. '12:00-12:30'")
    start_minute: int = Field(ge=0, description="Minutes from midnight (inclusive)")
    end_minute: int = Field(gt=0, description="Minutes from midnight (exclusive)")

    @model_validator(mode='after')
    def validate_range(self):
        if self.end_minute <= self.start_minute:
            raise ValueError("Slot end must be strictly after slot start")
        return self

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    def on_date(self, day: date_type) -> Tuple[datetime, datetime]:
        """Concrete start/end datetimes of this slot on a given day."""
        midnight = datetime.combine(day, datetime.min.time())
        return (
            midnight + timedelta(minutes=self.start_minute),
            midnight + timedelta(minutes=self.end_minute),
        )


class BreakDraft(BaseModel):
    """
    A break appointment ready to be handed to the bulk-create command.
    The host application persists it; the scheduler never does.
    """

    # --- Who ---
    staff_id: str = Field(description="Staff member going on break")
    staff_name: str = Field(default="", description="Display name at scheduling time")
    supervisor_id: Optional[str] = Field(default=None, description="Team lead, if known")
    location_id: Optional[str] = Field(default=None)
    patient_id: Optional[str] = Field(default=None, description="Always None for breaks")

    # --- When ---
    start_time: datetime
    end_time: datetime
    slot_label: str = Field(description="Candidate slot the break was placed in")

    # --- What ---
    category: AppointmentCategory = Field(default=AppointmentCategory.BREAK)
    title: str = Field(default="Lunch Break")
    notes: str = Field(default="Auto-scheduled lunch break")
    score: float = Field(default=0.0, description="Heuristic score of the chosen slot")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "staff_id": "rbt_004",
            "staff_name": "Dana Reyes",
            "supervisor_id": "bcba_001",
            "location_id": "loc_main",
            "patient_id": None,
            "start_time": "2025-03-10T12:00:00",
            "end_time": "2025-03-10T12:30:00",
            "slot_label": "12:00-12:30",
            "category": "break",
            "title": "Lunch Break",
            "notes": "Auto-scheduled lunch break",
            "score": 25.0
        }
    })


class BreakSchedulingFailure(BaseModel):
    """A staff member who needed a break but got none."""
    staff_id: str
    staff_name: str = ""
    reason: str = Field(description="Why no break could be placed")

"""
Roster data models for the Clinical Staffing Scheduler.

This module defines the 'Supply' side of the scheduler:
1. Staff members (therapists who deliver sessions and need breaks)
2. Teams (a supervising clinician and the staff they oversee)
3. Locations (operating hours that drive the slot grid)
"""

from typing import List, Optional
from pydantic import BaseModel, Field, model_validator, ConfigDict
from datetime import time


class StaffMember(BaseModel):
    """A roster entry. Working hours are derived from appointments, never stored."""
    id: str = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Display name")
    team_id: Optional[str] = Field(default=None, description="Team the member belongs to")


class Team(BaseModel):
    """
    A supervising clinician and their staff.
    Only used for break coverage scoring; the scheduler does not own teams.
    """
    id: str = Field(description="Unique identifier")
    name: str = Field(default="", description="Display name")
    lead_id: Optional[str] = Field(default=None, description="Supervising clinician (BCBA)")
    member_ids: List[str] = Field(default_factory=list, description="Staff on this team")

    @property
    def size(self) -> int:
        return len(self.member_ids)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "team_blue",
            "name": "Blue Team",
            "lead_id": "bcba_001",
            "member_ids": ["rbt_001", "rbt_002", "rbt_003", "rbt_004"]
        }
    })


class Location(BaseModel):
    """A clinic site. Its operating hours and slot width define its slot grid."""
    id: str = Field(description="Unique identifier")
    name: str = Field(min_length=1)
    working_hours_start: time = Field(default=time(7, 30), description="Opening time")
    working_hours_end: time = Field(default=time(18, 0), description="Closing time")
    slot_duration_minutes: int = Field(default=30, ge=5, le=240, description="Slot granularity")

    @model_validator(mode='after')
    def validate_hours(self):
        if self.working_hours_end <= self.working_hours_start:
            raise ValueError("Closing time must be strictly after opening time")
        return self

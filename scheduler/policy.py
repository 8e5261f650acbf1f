"""
Scheduling Policy.

Every tunable number the engine uses lives here, so a host application can
inject its own rules instead of editing constants scattered across modules.
DEFAULT_POLICY reproduces the reference clinic's rules.
"""

from datetime import time
from pydantic import BaseModel, Field, model_validator


class BreakScoringWeights(BaseModel):
    """Point values used by the break slot scorer."""
    center_bonus: float = Field(default=10.0, description="Slot inside the preferred core window")
    adjacent_bonus: float = Field(default=5.0, description="Slot touching the core window")
    natural_break_bonus: float = Field(default=15.0, description="Sessions on both sides of the slot")
    one_side_bonus: float = Field(default=8.0, description="Session on only one side of the slot")
    team_overlap_penalty: float = Field(default=-20.0, description="Too many teammates already on break")


class SchedulingPolicy(BaseModel):
    """Operational rules for validation and break coverage."""

    # --- Appointment Validation ---
    minimum_duration_minutes: int = Field(default=30, ge=1, description="Shortest bookable session")
    buffer_minutes: int = Field(default=15, ge=0, description="Gap below which scheduling is 'tight'")
    hard_check_supervisor: bool = Field(
        default=False,
        description="If True, supervisor (BCBA) overlaps block a booking instead of warning"
    )

    # --- Daily Load ---
    daily_limit_hours: float = Field(default=8.0, gt=0, description="Daily hour cap per subject")
    approaching_limit_fraction: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Fraction of the cap at which an early warning is raised"
    )

    # --- Break Coverage ---
    break_threshold_hours: float = Field(
        default=4.0,
        ge=0,
        description="Direct hours at or above which a break is required"
    )
    break_window_start: time = Field(default=time(11, 0), description="First candidate break slot")
    break_window_end: time = Field(default=time(13, 30), description="End of the last candidate slot")
    break_slot_minutes: int = Field(default=30, ge=5, le=120)
    preferred_break_start: time = Field(default=time(12, 0), description="Core lunch window start")
    preferred_break_end: time = Field(default=time(13, 0), description="Core lunch window end")
    scoring: BreakScoringWeights = Field(default_factory=BreakScoringWeights)

    @model_validator(mode='after')
    def validate_windows(self):
        if self.break_window_end <= self.break_window_start:
            raise ValueError("break_window_end must be after break_window_start")
        if self.preferred_break_end <= self.preferred_break_start:
            raise ValueError("preferred_break_end must be after preferred_break_start")
        return self

    @property
    def daily_limit_minutes(self) -> float:
        return self.daily_limit_hours * 60


DEFAULT_POLICY = SchedulingPolicy()


def load_policy(path: str) -> SchedulingPolicy:
    """Read a policy from a JSON file. Missing keys fall back to the defaults."""
    with open(path, 'r') as f:
        return SchedulingPolicy.model_validate_json(f.read())

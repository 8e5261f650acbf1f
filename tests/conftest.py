"""Pytest configuration and fixtures."""

from datetime import date, datetime

import pytest

from models import Appointment, AppointmentCategory, AppointmentStatus, StaffMember, Team

DAY = date(2025, 3, 10)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
def make_appointment():
    """Factory for appointments on the test day, e.g. make_appointment("a1", (9, 0), (10, 0))."""
    counter = {"n": 0}

    def _make(
        appointment_id=None,
        start=(9, 0),
        end=(10, 0),
        patient_id="pat_1",
        staff_id="rbt_a",
        supervisor_id=None,
        category=AppointmentCategory.DIRECT,
        status=AppointmentStatus.SCHEDULED,
        day=DAY,
    ):
        counter["n"] += 1
        return Appointment(
            id=appointment_id or f"appt_{counter['n']}",
            patient_id=patient_id,
            staff_id=staff_id,
            supervisor_id=supervisor_id,
            start_time=at(*start, day=day),
            end_time=at(*end, day=day),
            category=category,
            status=status,
        )

    return _make


@pytest.fixture
def lunch_gap_day(make_appointment):
    """Therapist A works 8:00-12:00 and 13:00-17:00 with no break booked."""
    return [
        make_appointment("a_am", (8, 0), (12, 0), patient_id="pat_1", staff_id="rbt_a"),
        make_appointment("a_pm", (13, 0), (17, 0), patient_id="pat_2", staff_id="rbt_a"),
    ]


@pytest.fixture
def blue_team() -> Team:
    return Team(id="team_blue", name="Blue Team", lead_id="bcba_1", member_ids=["rbt_a", "rbt_b"])


@pytest.fixture
def blue_staff():
    return [
        StaffMember(id="rbt_a", name="Alex Kim", team_id="team_blue"),
        StaffMember(id="rbt_b", name="Bea Novak", team_id="team_blue"),
    ]

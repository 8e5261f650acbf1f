"""
Break Coverage Analysis.

Per staff member: is a break required, is one already booked, and which
candidate slots are still open?
Per team: are too many people on break at the same time?
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date as date_type, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from models import Appointment, AppointmentCategory, StaffMember, Team, TimeSlot
from .geometry import format_minutes, minute_of_day, overlaps
from .issues import IssueKind, Severity, ValidationIssue
from .policy import SchedulingPolicy, DEFAULT_POLICY
from .slots import SlotGrid

logger = logging.getLogger(__name__)


def staff_day_appointments(
    staff_id: str,
    appointments: Iterable[Appointment],
    day: date_type
) -> List[Appointment]:
    """A staff member's active appointments starting on `day`, in start order."""
    return sorted(
        (a for a in appointments if a.staff_id == staff_id and a.is_active and a.date == day),
        key=lambda a: (a.start_time, a.id)
    )


@dataclass
class CoverageAnalysis:
    staff_id: str
    day: date_type
    needs_break: bool = False
    has_break: bool = False
    break_slot: Optional[Tuple[datetime, datetime]] = None
    working_hours: float = 0.0
    busy_slots: List[TimeSlot] = field(default_factory=list)
    available_slots: List[TimeSlot] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def needs_scheduling(self) -> bool:
        return self.needs_break and not self.has_break


class BreakCoverageAnalyzer:
    """
    Evaluates one staff member's day against the break policy.
    Working hours count direct sessions only; any active booking makes a
    candidate slot busy.
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        self.candidate_grid = SlotGrid.from_window(
            self.policy.break_window_start,
            self.policy.break_window_end,
            self.policy.break_slot_minutes
        )
        # A break must end inside the window, so a trailing partial slot is not offered
        self.candidate_slots: List[TimeSlot] = [
            slot for slot in self.candidate_grid
            if slot.end_minute <= self.candidate_grid.end_minute
        ]

    def analyze(self, staff_id: str, appointments: Iterable[Appointment], day: date_type) -> CoverageAnalysis:
        day_appts = staff_day_appointments(staff_id, appointments, day)
        analysis = CoverageAnalysis(staff_id=staff_id, day=day)

        # 1. Existing Break
        existing_break = next((a for a in day_appts if a.category == AppointmentCategory.BREAK), None)
        if existing_break:
            analysis.has_break = True
            analysis.break_slot = (existing_break.start_time, existing_break.end_time)

        # 2. Working Hours
        analysis.working_hours = sum(
            a.duration_hours for a in day_appts if a.category == AppointmentCategory.DIRECT
        )
        analysis.needs_break = analysis.working_hours >= self.policy.break_threshold_hours

        # 3. Split the Candidate Window
        for slot in self.candidate_slots:
            is_busy = any(
                overlaps(minute_of_day(a.start_time), self._end_minute(a),
                         slot.start_minute, slot.end_minute)
                for a in day_appts
            )
            (analysis.busy_slots if is_busy else analysis.available_slots).append(slot)

        # 4. Warnings
        self._add_warnings(analysis)
        return analysis

    @staticmethod
    def _end_minute(appointment: Appointment) -> int:
        # Appointments running past midnight occupy the rest of the day
        if appointment.end_time.date() > appointment.start_time.date():
            return 24 * 60
        return minute_of_day(appointment.end_time)

    def _add_warnings(self, analysis: CoverageAnalysis) -> None:
        if analysis.needs_break and not analysis.has_break:
            if analysis.available_slots:
                analysis.warnings.append(ValidationIssue(
                    IssueKind.MISSING_BREAK_CAN_SCHEDULE,
                    f"Missing lunch break. {len(analysis.available_slots)} slots available.",
                    Severity.WARNING,
                    {"suggested_slots": [s.label for s in analysis.available_slots]}
                ))
            else:
                analysis.warnings.append(ValidationIssue(
                    IssueKind.MISSING_BREAK_NO_SLOTS,
                    "Missing lunch break. No available lunch slots.",
                    Severity.ERROR
                ))
        elif analysis.has_break and not analysis.needs_break:
            analysis.warnings.append(ValidationIssue(
                IssueKind.UNNECESSARY_BREAK,
                f"Lunch scheduled but working <{self.policy.break_threshold_hours:g} hours.",
                Severity.INFO
            ))


@dataclass
class TeamCoverageReport:
    team_id: str
    total_staff: int
    staff_needing_break: int = 0
    staff_with_break: int = 0
    simultaneous_breaks: Dict[str, List[str]] = field(default_factory=dict)
    analyses: Dict[str, CoverageAnalysis] = field(default_factory=dict)
    warnings: List[ValidationIssue] = field(default_factory=list)


class TeamCoverageValidator:
    """Reporting only: flags slots where half the team or more is on break."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        self.analyzer = BreakCoverageAnalyzer(self.policy)

    def validate(
        self,
        team: Team,
        appointments: Iterable[Appointment],
        day: date_type,
        staff: Optional[Iterable[StaffMember]] = None
    ) -> TeamCoverageReport:
        appointments = list(appointments)
        names = {s.id: s.name for s in (staff or [])}
        report = TeamCoverageReport(team_id=team.id, total_staff=team.size)

        on_break: Dict[str, List[str]] = defaultdict(list)
        for member_id in team.member_ids:
            analysis = self.analyzer.analyze(member_id, appointments, day)
            report.analyses[member_id] = analysis

            if analysis.needs_break:
                report.staff_needing_break += 1
                if analysis.has_break:
                    report.staff_with_break += 1
                    on_break[self._rounded_slot_label(analysis.break_slot[0])].append(member_id)

        report.simultaneous_breaks = dict(on_break)

        if report.total_staff == 0:
            return report

        threshold = math.ceil(report.total_staff / 2)
        for label, member_ids in report.simultaneous_breaks.items():
            if len(member_ids) >= threshold:
                logger.info(f"Team {team.id}: {len(member_ids)} staff on break during {label}")
                report.warnings.append(ValidationIssue(
                    IssueKind.EXCESSIVE_SIMULTANEOUS_BREAKS,
                    f"{len(member_ids)} therapists at lunch during {label}. May impact coverage.",
                    Severity.WARNING,
                    {
                        "slot": label,
                        "staff": [{"id": m, "name": names.get(m, "")} for m in member_ids],
                    }
                ))
        return report

    def _rounded_slot_label(self, break_start: datetime) -> str:
        width = self.policy.break_slot_minutes
        start = (minute_of_day(break_start) // width) * width
        return f"{format_minutes(start)}-{format_minutes(start + width)}"

"""
Scheduler State Management.

This module acts as the 'Memory' of one auto-scheduling pass. It tracks:
1. Break drafts produced so far (and who on each team is already away).
2. Per-member coverage analyses.
3. Failure reporting (members left without a break).
"""

from datetime import date as date_type
from typing import Any, Dict, List, Optional, Tuple
from collections import defaultdict

from models import BreakDraft, BreakSchedulingFailure
from .coverage import CoverageAnalysis
from .geometry import minute_of_day


class BreakSchedulerState:
    """
    Maintains the mutable state of the auto-scheduler during one run.
    A fresh instance is created per run, so repeated runs never share state.
    """

    def __init__(self, day: date_type):
        self.day = day

        # The Output
        self.drafts: List[BreakDraft] = []
        self.failures: List[BreakSchedulingFailure] = []

        # Inputs to later decisions
        self.analyses: Dict[str, CoverageAnalysis] = {}
        self.team_breaks: Dict[str, List[Tuple[str, int, int]]] = defaultdict(list)

    def record_analysis(self, analysis: CoverageAnalysis) -> None:
        self.analyses[analysis.staff_id] = analysis

    def record_existing_break(self, team_id: Optional[str], staff_id: str, start_minute: int, end_minute: int) -> None:
        """Track a break that was already booked before this run."""
        if team_id:
            self.team_breaks[team_id].append((staff_id, start_minute, end_minute))

    def add_draft(self, draft: BreakDraft, team_id: Optional[str] = None) -> None:
        """Commit a break to the run. Teammates scored later will see it."""
        self.drafts.append(draft)
        if team_id:
            self.team_breaks[team_id].append(
                (draft.staff_id, minute_of_day(draft.start_time), minute_of_day(draft.end_time))
            )

    def record_failure(self, failure: BreakSchedulingFailure) -> None:
        self.failures.append(failure)

    # --- Query Methods (Used by the engine) ---

    def breaks_for_team(self, team_id: Optional[str], exclude_staff_id: str) -> List[Tuple[int, int]]:
        """Break intervals of a member's teammates (existing plus assigned this run)."""
        if not team_id:
            return []
        return [
            (start, end) for staff_id, start, end in self.team_breaks.get(team_id, [])
            if staff_id != exclude_staff_id
        ]

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        """Summary numbers for the run report."""
        needing = [a for a in self.analyses.values() if a.needs_break]
        already_covered = sum(1 for a in needing if a.has_break)
        blocked = sum(1 for a in needing if not a.has_break and not a.available_slots)

        slot_counts: Dict[str, int] = defaultdict(int)
        for draft in self.drafts:
            slot_counts[draft.slot_label] += 1

        demand = len(self.drafts) + len(self.failures)
        success_rate = (len(self.drafts) / demand * 100) if demand else 100.0

        return {
            "date": self.day.isoformat(),
            "staff_analyzed": len(self.analyses),
            "staff_needing_break": len(needing),
            "already_covered": already_covered,
            "breaks_scheduled": len(self.drafts),
            "failed_count": len(self.failures),
            "blocked_count": blocked,
            "success_rate": f"{success_rate:.1f}%",
            "breaks_per_slot": dict(sorted(slot_counts.items())),
        }

    def get_failure_report(self) -> List[Dict]:
        """Human-readable list of who was left without a break and why."""
        report = []
        for failure in self.failures:
            analysis = self.analyses.get(failure.staff_id)
            report.append({
                "staff_id": failure.staff_id,
                "staff_name": failure.staff_name,
                "reason": failure.reason,
                "working_hours": round(analysis.working_hours, 2) if analysis else None,
                "busy_slots": [s.label for s in analysis.busy_slots] if analysis else [],
            })

        # Longest working days first
        report.sort(key=lambda x: -(x["working_hours"] or 0))
        return report

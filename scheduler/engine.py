"""
The Break Auto-Scheduling Engine.

This module implements the batch "Solver" pass over one day's roster:
1. Coverage Analysis - who needs a break and which candidate slots are open.
2. Heuristic Scoring - rank open slots (lunch time, natural gaps, team coverage).
3. Greedy Commit - take the best slot per member, in roster order.

The pass is single, greedy and non-backtracking. It does not guarantee a
globally optimal (or even feasible) assignment for the whole team; members
left without a slot are reported, and the rest of the batch still runs.
"""

import logging
from datetime import date as date_type
from typing import Dict, List, Optional

from models import Appointment, BreakDraft, BreakSchedulingFailure, StaffMember, Team
from .coverage import BreakCoverageAnalyzer, staff_day_appointments
from .geometry import minute_of_day
from .policy import SchedulingPolicy, DEFAULT_POLICY
from .scoring import BreakSlotScorer
from .state import BreakSchedulerState

logger = logging.getLogger(__name__)


class BreakAutoScheduler:
    """
    Main break scheduling engine.
    Ingests a roster and a snapshot of the day's appointments, outputs break drafts.
    """

    def __init__(
        self,
        staff: List[StaffMember],
        appointments: List[Appointment],
        day: date_type,
        teams: Optional[List[Team]] = None,
        location_id: Optional[str] = None,
        policy: Optional[SchedulingPolicy] = None
    ):
        self.staff = staff
        self.appointments = appointments
        self.day = day
        self.location_id = location_id
        self.policy = policy or DEFAULT_POLICY

        # Initialize Helpers
        self.analyzer = BreakCoverageAnalyzer(self.policy)
        self.scorer = BreakSlotScorer(self.policy)

        # Lookups
        self.team_map: Dict[str, Team] = {t.id: t for t in (teams or [])}
        self.team_sizes = self._resolve_team_sizes()

    def run(self) -> BreakSchedulerState:
        """
        Execute the scheduling pass.
        """
        logger.info(f"Starting break auto-scheduler for {self.day} ({len(self.staff)} staff)")
        state = BreakSchedulerState(self.day)

        # 1. Analyze everyone first, so existing breaks count toward team coverage
        for member in self.staff:
            analysis = self.analyzer.analyze(member.id, self.appointments, self.day)
            state.record_analysis(analysis)
            if analysis.has_break:
                start, end = analysis.break_slot
                state.record_existing_break(member.team_id, member.id, minute_of_day(start), minute_of_day(end))

        # 2. Greedy pass in roster order
        for member in self.staff:
            analysis = state.analyses[member.id]
            if not analysis.needs_scheduling:
                continue

            if not analysis.available_slots:
                logger.warning(f"No open break slot for {member.name} ({member.id})")
                state.record_failure(BreakSchedulingFailure(
                    staff_id=member.id,
                    staff_name=member.name,
                    reason="No available lunch slots"
                ))
                continue

            self._assign(member, analysis.available_slots, state)

        stats = state.get_statistics()
        logger.info(
            f"Break pass complete: {stats['breaks_scheduled']} scheduled, {stats['failed_count']} failed"
        )
        return state

    def _assign(self, member: StaffMember, candidates, state: BreakSchedulerState) -> None:
        day_appts = staff_day_appointments(member.id, self.appointments, self.day)
        team_breaks = state.breaks_for_team(member.team_id, member.id)
        team_size = self.team_sizes.get(member.team_id, 0) if member.team_id else 0

        scored = [
            (self.scorer.calculate_score(slot, day_appts, team_breaks, team_size), slot)
            for slot in candidates
        ]
        best_score, best_slot = self.scorer.pick_best(scored)
        start, end = best_slot.on_date(self.day)

        team = self.team_map.get(member.team_id) if member.team_id else None
        draft = BreakDraft(
            staff_id=member.id,
            staff_name=member.name,
            supervisor_id=team.lead_id if team else None,
            location_id=self.location_id,
            start_time=start,
            end_time=end,
            slot_label=best_slot.label,
            score=best_score
        )
        state.add_draft(draft, member.team_id)
        logger.debug(f"Break for {member.id} at {best_slot.label} (score {best_score:g})")

    def _resolve_team_sizes(self) -> Dict[str, int]:
        """Team size from explicit membership where given, else from the roster."""
        sizes: Dict[str, int] = {}
        for member in self.staff:
            if member.team_id:
                sizes[member.team_id] = sizes.get(member.team_id, 0) + 1
        for team_id, team in self.team_map.items():
            if team.member_ids:
                sizes[team_id] = team.size
        return sizes

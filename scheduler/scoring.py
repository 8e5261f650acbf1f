"""
Heuristic Scoring Engine for break placement.

This module determines the 'Quality' of an open candidate break slot.
Hard constraints (is the slot free?) are settled by the coverage analyzer;
this provides a gradient that steers breaks toward mid-day gaps between
sessions while keeping enough of the team on the floor.
"""

from typing import List, Optional, Sequence, Tuple

from models import Appointment, AppointmentCategory, TimeSlot
from .geometry import minute_of_day, overlaps
from .policy import SchedulingPolicy, DEFAULT_POLICY


class BreakSlotScorer:
    """
    Evaluates candidate break slots based on soft constraints
    (lunch-time preference, natural gaps, team coverage).
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        self.weights = self.policy.scoring
        core_start, core_end = self.policy.preferred_break_start, self.policy.preferred_break_end
        self.core_start = core_start.hour * 60 + core_start.minute
        self.core_end = core_end.hour * 60 + core_end.minute

    def calculate_score(
        self,
        slot: TimeSlot,
        day_appointments: Sequence[Appointment],
        team_breaks: Sequence[Tuple[int, int]] = (),
        team_size: int = 0
    ) -> float:
        """
        Master scoring function.

        day_appointments: the staff member's own active bookings for the day
        team_breaks: (start_minute, end_minute) of teammates' breaks, excluding this member
        team_size: members on the team, including this one (0 = no team)
        """
        score = 0.0

        # 1. Lunch-time Fidelity (+10 / +5)
        score += self._score_window_position(slot)

        # 2. Natural Break (+15 / +8)
        score += self._score_natural_break(slot, day_appointments)

        # 3. Team Coverage (-20)
        score += self._score_team_overlap(slot, team_breaks, team_size)

        return score

    def _score_window_position(self, slot: TimeSlot) -> float:
        if self.core_start <= slot.start_minute and slot.end_minute <= self.core_end:
            return self.weights.center_bonus
        if slot.end_minute == self.core_start or slot.start_minute == self.core_end:
            return self.weights.adjacent_bonus
        return 0.0

    def _score_natural_break(self, slot: TimeSlot, day_appointments: Sequence[Appointment]) -> float:
        """Reward slots that split the day between sessions."""
        sessions = [a for a in day_appointments if a.category != AppointmentCategory.BREAK]

        session_before = any(minute_of_day(a.end_time) <= slot.start_minute
                             and a.end_time.date() == a.start_time.date() for a in sessions)
        session_after = any(minute_of_day(a.start_time) >= slot.end_minute for a in sessions)

        if session_before and session_after:
            return self.weights.natural_break_bonus
        if session_before or session_after:
            return self.weights.one_side_bonus
        return 0.0

    def _score_team_overlap(self, slot: TimeSlot, team_breaks: Sequence[Tuple[int, int]], team_size: int) -> float:
        """Penalise slots where half the team or more would already be away."""
        if team_size <= 1:
            return 0.0

        on_break = sum(
            1 for start, end in team_breaks
            if overlaps(slot.start_minute, slot.end_minute, start, end)
        )
        if on_break >= team_size / 2:
            return self.weights.team_overlap_penalty
        return 0.0

    def pick_best(self, scored: List[Tuple[float, TimeSlot]]) -> Optional[Tuple[float, TimeSlot]]:
        """Highest score wins; ties go to the earliest candidate."""
        best = None
        for entry in scored:
            if best is None or entry[0] > best[0]:
                best = entry
        return best

"""Unit tests for the break auto-scheduler and slot scorer."""

from datetime import time

from conftest import DAY, at
from models import AppointmentCategory, StaffMember
from scheduler.engine import BreakAutoScheduler
from scheduler.policy import BreakScoringWeights, SchedulingPolicy
from scheduler.scoring import BreakSlotScorer
from scheduler.slots import SlotGrid

BREAK = AppointmentCategory.BREAK


def split_shift(make_appointment, staff_id):
    return [
        make_appointment(f"{staff_id}_am", (8, 0), (12, 0), staff_id=staff_id),
        make_appointment(f"{staff_id}_pm", (13, 0), (17, 0), staff_id=staff_id),
    ]


def test_split_shift_gets_natural_lunch_break(lunch_gap_day):
    staff = [StaffMember(id="rbt_a", name="Alex Kim")]
    state = BreakAutoScheduler(staff, lunch_gap_day, DAY).run()

    assert len(state.drafts) == 1
    draft = state.drafts[0]
    assert draft.staff_id == "rbt_a"
    assert (draft.start_time, draft.end_time) == (at(12, 0), at(12, 30))
    assert draft.category == BREAK
    assert draft.patient_id is None
    assert draft.score == 25.0
    assert state.failures == []


def test_natural_break_beats_earlier_open_slot(make_appointment):
    appts = [
        make_appointment("am", (8, 0), (11, 30)),
        make_appointment("pm", (12, 30), (13, 30)),
    ]
    staff = [StaffMember(id="rbt_a", name="Alex Kim")]
    state = BreakAutoScheduler(staff, appts, DAY).run()
    assert state.drafts[0].slot_label == "12:00-12:30"


def test_morning_only_day_prefers_core_lunch_time(make_appointment):
    appts = [make_appointment("am", (8, 0), (12, 0))]
    state = BreakAutoScheduler([StaffMember(id="rbt_a", name="Alex Kim")], appts, DAY).run()
    assert state.drafts[0].slot_label == "12:00-12:30"
    assert state.drafts[0].score == 18.0


def test_blocked_member_fails_without_stopping_batch(make_appointment, lunch_gap_day):
    appts = lunch_gap_day + [make_appointment("b_all", (8, 0), (17, 0), staff_id="rbt_b")]
    staff = [
        StaffMember(id="rbt_b", name="Bea Novak"),
        StaffMember(id="rbt_a", name="Alex Kim"),
    ]
    state = BreakAutoScheduler(staff, appts, DAY).run()

    assert [d.staff_id for d in state.drafts] == ["rbt_a"]
    assert len(state.failures) == 1
    assert state.failures[0].staff_id == "rbt_b"
    assert state.failures[0].reason == "No available lunch slots"

    report = state.get_failure_report()
    assert report[0]["staff_name"] == "Bea Novak"
    assert report[0]["working_hours"] == 9.0


def test_members_not_needing_or_already_having_break_are_skipped(make_appointment):
    appts = [
        make_appointment("a1", (9, 0), (11, 0), staff_id="rbt_a"),
        make_appointment("b1", (8, 0), (12, 0), staff_id="rbt_b"),
        make_appointment("b2", (12, 0), (12, 30), patient_id=None, staff_id="rbt_b", category=BREAK),
    ]
    staff = [StaffMember(id="rbt_a", name="Alex Kim"), StaffMember(id="rbt_b", name="Bea Novak")]
    state = BreakAutoScheduler(staff, appts, DAY).run()

    assert state.drafts == []
    assert state.failures == []
    stats = state.get_statistics()
    assert stats["staff_needing_break"] == 1
    assert stats["already_covered"] == 1


def test_teammates_are_spread_across_slots(make_appointment, blue_staff, blue_team):
    appts = split_shift(make_appointment, "rbt_a") + split_shift(make_appointment, "rbt_b")
    state = BreakAutoScheduler(blue_staff, appts, DAY, teams=[blue_team]).run()

    assert [(d.staff_id, d.slot_label) for d in state.drafts] == [
        ("rbt_a", "12:00-12:30"),
        ("rbt_b", "12:30-13:00"),
    ]


def test_existing_teammate_break_counts_toward_coverage(make_appointment, blue_staff, blue_team):
    appts = split_shift(make_appointment, "rbt_a") + [
        make_appointment("b_am", (8, 0), (12, 0), staff_id="rbt_b"),
        make_appointment("b_lunch", (12, 0), (12, 30), patient_id=None, staff_id="rbt_b", category=BREAK),
        make_appointment("b_pm", (12, 30), (16, 0), staff_id="rbt_b"),
    ]
    state = BreakAutoScheduler(blue_staff, appts, DAY, teams=[blue_team]).run()
    assert [(d.staff_id, d.slot_label) for d in state.drafts] == [("rbt_a", "12:30-13:00")]


def test_unassigned_staff_are_not_penalised(make_appointment):
    appts = split_shift(make_appointment, "rbt_a") + split_shift(make_appointment, "rbt_b")
    staff = [StaffMember(id="rbt_a", name="Alex Kim"), StaffMember(id="rbt_b", name="Bea Novak")]
    state = BreakAutoScheduler(staff, appts, DAY).run()
    assert [d.slot_label for d in state.drafts] == ["12:00-12:30", "12:00-12:30"]


def test_draft_carries_team_lead_and_location(lunch_gap_day, blue_team):
    staff = [StaffMember(id="rbt_a", name="Alex Kim", team_id="team_blue")]
    state = BreakAutoScheduler(staff, lunch_gap_day, DAY, teams=[blue_team], location_id="loc_main").run()

    draft = state.drafts[0]
    assert draft.supervisor_id == "bcba_1"
    assert draft.location_id == "loc_main"
    assert draft.model_dump(mode="json")["category"] == "break"


def test_auto_scheduler_is_deterministic(make_appointment, blue_staff, blue_team):
    appts = split_shift(make_appointment, "rbt_a") + split_shift(make_appointment, "rbt_b")
    first = BreakAutoScheduler(blue_staff, appts, DAY, teams=[blue_team]).run()
    second = BreakAutoScheduler(blue_staff, appts, DAY, teams=[blue_team]).run()
    assert first.drafts == second.drafts
    assert first.failures == second.failures


def test_scorer_weights_come_from_policy(lunch_gap_day):
    policy = SchedulingPolicy(scoring=BreakScoringWeights(center_bonus=0, natural_break_bonus=1))
    scorer = BreakSlotScorer(policy)
    grid = SlotGrid(720, 780, 30)
    assert scorer.calculate_score(grid[0], lunch_gap_day) == 1.0


def test_scorer_team_penalty_threshold(lunch_gap_day):
    scorer = BreakSlotScorer()
    slot = SlotGrid(720, 750, 30)[0]
    base = scorer.calculate_score(slot, lunch_gap_day)

    # Team of 4: one teammate away is fine, two is half the team
    assert scorer.calculate_score(slot, lunch_gap_day, [(720, 750)], team_size=4) == base
    assert scorer.calculate_score(slot, lunch_gap_day, [(720, 750), (735, 765)], team_size=4) == base - 20


def test_pick_best_prefers_earliest_on_ties():
    grid = SlotGrid(720, 780, 30)
    best = BreakSlotScorer().pick_best([(5.0, grid[0]), (5.0, grid[1])])
    assert best[1].label == "12:00-12:30"


def test_breaks_stay_inside_a_window_that_is_not_slot_aligned(make_appointment):
    policy = SchedulingPolicy(break_window_end=time(13, 15))
    appts = [make_appointment("am", (8, 0), (13, 0))]
    state = BreakAutoScheduler([StaffMember(id="rbt_a", name="Alex Kim")], appts, DAY, policy=policy).run()

    assert state.drafts == []
    assert [f.staff_id for f in state.failures] == ["rbt_a"]

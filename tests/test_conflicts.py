"""Unit tests for the conflict detector."""

from conftest import at
from models import AppointmentStatus
from scheduler.conflicts import ConflictDetector, SubjectRole
from scheduler.policy import SchedulingPolicy


def test_patient_overlap_is_detected(make_appointment):
    existing = [make_appointment("a1", (10, 0), (11, 0), patient_id="pat_p", staff_id="rbt_a")]
    conflicts = ConflictDetector().find_conflicts(
        SubjectRole.PATIENT, "pat_p", at(10, 30), at(11, 30), existing
    )
    assert [a.id for a in conflicts] == ["a1"]


def test_other_subjects_are_ignored(make_appointment):
    existing = [make_appointment("a1", (10, 0), (11, 0), patient_id="pat_q", staff_id="rbt_b")]
    detector = ConflictDetector()
    assert detector.find_conflicts(SubjectRole.PATIENT, "pat_p", at(10, 0), at(11, 0), existing) == []
    assert detector.find_conflicts(SubjectRole.STAFF, "rbt_a", at(10, 0), at(11, 0), existing) == []


def test_cancelled_and_no_show_do_not_conflict(make_appointment):
    existing = [
        make_appointment("a1", (10, 0), (11, 0), status=AppointmentStatus.CANCELLED),
        make_appointment("a2", (10, 0), (11, 0), status=AppointmentStatus.NO_SHOW),
    ]
    conflicts = ConflictDetector().find_conflicts(
        SubjectRole.PATIENT, "pat_1", at(10, 0), at(11, 0), existing
    )
    assert conflicts == []


def test_completed_appointments_still_conflict(make_appointment):
    existing = [make_appointment("a1", (10, 0), (11, 0), status=AppointmentStatus.COMPLETED)]
    conflicts = ConflictDetector().find_conflicts(
        SubjectRole.STAFF, "rbt_a", at(10, 0), at(11, 0), existing
    )
    assert len(conflicts) == 1


def test_excluded_appointment_does_not_conflict_with_itself(make_appointment):
    existing = [make_appointment("a1", (10, 0), (11, 0))]
    conflicts = ConflictDetector().find_conflicts(
        SubjectRole.STAFF, "rbt_a", at(10, 0), at(11, 30), existing, exclude_id="a1"
    )
    assert conflicts == []


def test_back_to_back_is_nearby_not_conflict(make_appointment):
    existing = [make_appointment("a1", (9, 0), (10, 0))]
    report = ConflictDetector().check(SubjectRole.STAFF, "rbt_a", at(10, 0), at(11, 0), existing)
    assert not report.has_conflict
    assert [a.id for a in report.nearby] == ["a1"]


def test_buffer_comes_from_policy(make_appointment):
    existing = [make_appointment("a1", (9, 0), (9, 40))]
    default = ConflictDetector().find_nearby(SubjectRole.STAFF, "rbt_a", at(10, 0), at(11, 0), existing)
    wide = ConflictDetector(SchedulingPolicy(buffer_minutes=30)).find_nearby(
        SubjectRole.STAFF, "rbt_a", at(10, 0), at(11, 0), existing
    )
    assert default == []
    assert [a.id for a in wide] == ["a1"]


def test_supervisor_role_uses_supervisor_reference(make_appointment):
    existing = [make_appointment("a1", (10, 0), (11, 0), staff_id="rbt_b", supervisor_id="bcba_1")]
    conflicts = ConflictDetector().find_conflicts(
        SubjectRole.SUPERVISOR, "bcba_1", at(10, 0), at(10, 30), existing
    )
    assert [a.id for a in conflicts] == ["a1"]

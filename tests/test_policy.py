"""Unit tests for scheduling policy configuration."""

import json
from datetime import time

import pytest
from pydantic import ValidationError

from scheduler.policy import DEFAULT_POLICY, SchedulingPolicy, load_policy


def test_defaults_match_clinic_rules():
    assert DEFAULT_POLICY.minimum_duration_minutes == 30
    assert DEFAULT_POLICY.buffer_minutes == 15
    assert DEFAULT_POLICY.daily_limit_minutes == 480
    assert DEFAULT_POLICY.break_window_start == time(11, 0)
    assert DEFAULT_POLICY.break_window_end == time(13, 30)
    assert DEFAULT_POLICY.scoring.team_overlap_penalty == -20
    assert not DEFAULT_POLICY.hard_check_supervisor


def test_inverted_break_window_is_rejected():
    with pytest.raises(ValidationError):
        SchedulingPolicy(break_window_start=time(14, 0), break_window_end=time(12, 0))


def test_out_of_range_values_are_rejected():
    with pytest.raises(ValidationError):
        SchedulingPolicy(approaching_limit_fraction=1.5)
    with pytest.raises(ValidationError):
        SchedulingPolicy(daily_limit_hours=0)


def test_load_policy_overrides_only_given_keys(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps({
        "buffer_minutes": 10,
        "hard_check_supervisor": True,
        "break_window_end": "14:00:00",
        "scoring": {"center_bonus": 12}
    }))

    policy = load_policy(str(path))
    assert policy.buffer_minutes == 10
    assert policy.hard_check_supervisor
    assert policy.break_window_end == time(14, 0)
    assert policy.scoring.center_bonus == 12
    assert policy.scoring.natural_break_bonus == 15
    assert policy.daily_limit_hours == 8

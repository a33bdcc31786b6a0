from datetime import date, timedelta

import pytest

from ironlog.training.periodization import (
    determine_current_phase,
    generate_periodized_workout,
    generate_phase_recommendation,
)

TODAY = date(2025, 6, 30)


@pytest.mark.parametrize(
    "weeks, phase, week_in_phase",
    [
        (0, "HYPERTROPHY", 1),
        (3, "HYPERTROPHY", 4),
        (4, "STRENGTH", 1),
        (7, "STRENGTH", 4),
        (8, "POWER", 1),
        (10, "POWER", 3),
        (11, "DELOAD", 1),
        (12, "HYPERTROPHY", 1),
    ],
)
def test_phase_assignment(weeks, phase, week_in_phase):
    start = TODAY - timedelta(days=7 * weeks)
    result = determine_current_phase([], start_date=start, today=TODAY)
    assert result["phase"] == phase
    assert result["week_in_phase"] == week_in_phase


def test_cycle_wraps_and_counts():
    start = TODAY - timedelta(days=7 * 12 + 3)
    result = determine_current_phase([], start_date=start, today=TODAY)
    assert result["phase"] == "HYPERTROPHY"
    assert result["cycle_number"] == 2


def test_next_phase_after_deload_is_hypertrophy():
    result = determine_current_phase([], start_date=TODAY - timedelta(days=77), today=TODAY)
    assert result["phase"] == "DELOAD"
    assert result["total_weeks_in_phase"] == 1
    assert result["next_phase"] == "HYPERTROPHY"


def test_no_history_starts_with_hypertrophy():
    result = determine_current_phase([], today=TODAY)
    assert result["phase"] == "HYPERTROPHY"
    assert result["week_in_phase"] == 1
    assert result["recommendation"] == "Start with hypertrophy phase to build muscle base"


def test_start_taken_from_earliest_workout():
    history = [{"date": TODAY - timedelta(days=1)}, {"date": TODAY - timedelta(days=30)}]
    result = determine_current_phase(history, today=TODAY)
    assert result["phase"] == "STRENGTH"
    assert result["week_in_phase"] == 1


def test_phase_recommendation_text():
    assert (
        generate_phase_recommendation("HYPERTROPHY", 1, 4)
        == "Focus on muscle building with 8-15 reps (Week 1/4)"
    )
    assert (
        generate_phase_recommendation("DELOAD", 1, 1)
        == "Recovery week: Reduce volume and intensity by 40-50% (Week 1/1)"
    )


def test_periodized_primary_strength():
    workout = generate_periodized_workout("Bench Press", "STRENGTH", {"weight": 200})
    assert (workout["sets"], workout["reps"], workout["weight"]) == (4, 5, 210)


def test_periodized_accessory_hypertrophy():
    workout = generate_periodized_workout("Face Pulls", "HYPERTROPHY", {"weight": 50})
    assert (workout["sets"], workout["reps"], workout["weight"]) == (3, 14, 51)


def test_periodized_deload_cuts_weight():
    workout = generate_periodized_workout("Squat", "DELOAD", {"weight": 100})
    assert (workout["sets"], workout["reps"], workout["weight"]) == (3, 10, 60)


def test_periodized_without_history_or_unknown_phase():
    assert generate_periodized_workout("Squat", "HYPERTROPHY", None)["weight"] == 0
    assert generate_periodized_workout("Squat", "PEAKING", None) is None

from datetime import date, timedelta

from ironlog.training.progression import (
    calculate_next_workout,
    format_progression_suggestion,
    get_progression_params,
    round_to_quarter,
)

MONDAY = date(2025, 3, 3)


def _weekly(reps_weights, sets=3):
    """Sessions one week apart, oldest first."""
    return [
        {"exercise": "Bench Press", "sets": sets, "reps": reps, "weight": weight, "date": MONDAY + timedelta(weeks=i)}
        for i, (reps, weight) in enumerate(reps_weights)
    ]


def test_params_by_keyword():
    assert get_progression_params("Bench Press")["exercise_type"] == "compound"
    assert get_progression_params("Dumbbell Press")["rep_range"] == (6, 10)
    assert get_progression_params("Bicep Curls")["exercise_type"] == "isolation"
    assert get_progression_params("Pull-ups")["exercise_type"] == "bodyweight"
    assert get_progression_params("Pull-ups")["weight_increment"] == 0
    general = get_progression_params("Lat Pulldown")
    assert general["exercise_type"] == "general"
    assert general["rep_range"] == (8, 12)


def test_starter_suggestions():
    bench = calculate_next_workout([], "Bench Press")
    assert bench["suggestion"] == {"sets": 3, "reps": 8, "weight": 45}
    assert bench["is_first_workout"] is True
    assert calculate_next_workout([], "Deadlift")["suggestion"] == {"sets": 3, "reps": 5, "weight": 95}
    assert calculate_next_workout([], "Lat Pulldown")["suggestion"] == {"sets": 3, "reps": 10, "weight": 10}


def test_reps_go_up_by_one_when_successful():
    result = calculate_next_workout(_weekly([(8, 100)] * 6), "Bench Press")
    assert result["suggestion"] == {"sets": 3, "reps": 9, "weight": 100}
    assert result["confidence"] == "high"
    assert result["analysis"]["success_rate"] == 100


def test_weight_goes_up_at_rep_ceiling():
    result = calculate_next_workout(_weekly([(10, 100)] * 6), "Bench Press")
    assert result["suggestion"]["weight"] == 103.0
    assert result["suggestion"]["reps"] == 6
    assert result["analysis"]["progression_multiplier"] == 1.2


def test_increment_is_the_floor_for_light_weights():
    result = calculate_next_workout(_weekly([(10, 40)] * 3), "Bench Press")
    assert result["suggestion"]["weight"] == 42.5


def test_input_order_does_not_matter():
    workouts = _weekly([(8, 100)] * 5 + [(10, 100)])
    assert (
        calculate_next_workout(workouts, "Bench Press")["suggestion"]
        == calculate_next_workout(list(reversed(workouts)), "Bench Press")["suggestion"]
    )


def test_deload_on_steep_weekly_decline():
    workouts = _weekly([(12, 150), (8, 140), (8, 130), (8, 120)])
    result = calculate_next_workout(workouts, "Bench Press")
    assert result["suggestion"]["weight"] == 108.0
    assert result["reason"].startswith("Deload by 10%")
    assert result["status"] == "decreasing"


def test_extra_set_when_volume_drops_within_a_week():
    workouts = [
        {"exercise": "Bench Press", "sets": 3, "reps": reps, "weight": weight, "date": MONDAY + timedelta(days=i)}
        for i, (reps, weight) in enumerate([(12, 150), (8, 140), (8, 130), (8, 120)])
    ]
    result = calculate_next_workout(workouts, "Bench Press")
    assert result["suggestion"] == {"sets": 4, "reps": 8, "weight": 120}
    assert result["status"] == "insufficient_data"


def test_format_changes():
    result = {
        "suggestion": {"sets": 3, "reps": 8, "weight": 105},
        "last_workout": {"sets": 3, "reps": 8, "weight": 100},
        "reason": "r",
        "confidence": "high",
        "is_first_workout": False,
    }
    formatted = format_progression_suggestion(result)
    assert formatted["changes"] == ["Weight: 100 → 105lbs (+5)"]
    assert formatted["summary"] == "Weight: 100 → 105lbs (+5)"


def test_format_starter_and_empty():
    formatted = format_progression_suggestion(calculate_next_workout([], "Squat"))
    assert formatted["summary"] == "Starting with 3 sets × 8 reps @ 45lbs"
    assert format_progression_suggestion(None) is None


def test_quarter_rounding_sends_halves_up():
    assert round_to_quarter(113.625) == 113.75
    assert round_to_quarter(100.125) == 100.25
    assert round_to_quarter(113.6) == 113.5
    assert round_to_quarter(103.0) == 103.0

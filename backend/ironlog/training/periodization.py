"""Periodization phases and the fixed 12-week training cycle.

The cycle walks HYPERTROPHY (4 wk) -> STRENGTH (4) -> POWER (3) -> DELOAD (1)
and then starts over. ENDURANCE is a known phase that can be requested
explicitly but is not part of the automatic cycle.
"""

from datetime import date
from typing import Optional

from ironlog.core.time_utils import as_date, whole_weeks_between
from ironlog.training.catalog import get_exercise_category

PERIODIZATION_PHASES = {
    "HYPERTROPHY": {
        "name": "Hypertrophy",
        "duration": 4,  # weeks
        "rep_range": [8, 15],
        "set_range": [3, 5],
        "intensity_percent": [65, 80],  # % of 1RM
        "rest_period": [60, 90],  # seconds
        "description": "Muscle building phase with moderate weight and high volume",
    },
    "STRENGTH": {
        "name": "Strength",
        "duration": 4,
        "rep_range": [3, 6],
        "set_range": [3, 5],
        "intensity_percent": [80, 95],
        "rest_period": [180, 300],
        "description": "Maximum strength development with heavy weights",
    },
    "POWER": {
        "name": "Power",
        "duration": 3,
        "rep_range": [1, 3],
        "set_range": [3, 6],
        "intensity_percent": [85, 100],
        "rest_period": [180, 360],
        "description": "Peak strength and power with very heavy weights",
    },
    "ENDURANCE": {
        "name": "Endurance",
        "duration": 3,
        "rep_range": [15, 25],
        "set_range": [2, 4],
        "intensity_percent": [50, 70],
        "rest_period": [30, 60],
        "description": "Muscular endurance with light weight and high reps",
    },
    "DELOAD": {
        "name": "Deload",
        "duration": 1,
        "rep_range": [8, 12],
        "set_range": [2, 3],
        "intensity_percent": [50, 65],
        "rest_period": [60, 120],
        "description": "Recovery week with reduced intensity and volume",
    },
}

PHASE_CYCLE = ["HYPERTROPHY", "STRENGTH", "POWER", "DELOAD"]
PHASE_DURATIONS = [4, 4, 3, 1]
CYCLE_WEEKS = sum(PHASE_DURATIONS)


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def phase_for_week(weeks_passed: int) -> tuple[int, int]:
    """Map elapsed whole weeks to (phase index, 1-based week in phase)."""
    week_in_cycle = weeks_passed % CYCLE_WEEKS
    total = 0
    for idx, duration in enumerate(PHASE_DURATIONS):
        if week_in_cycle < total + duration:
            return idx, week_in_cycle - total + 1
        total += duration
    # unreachable: week_in_cycle < CYCLE_WEEKS
    raise AssertionError(week_in_cycle)


def determine_current_phase(
    history: list[dict],
    start_date=None,
    today: Optional[date] = None,
) -> dict:
    """Locate the current phase from an explicit start or the first workout.

    `history` is ordered most recent first, so the earliest workout is last.
    """
    today = today or date.today()
    start = as_date(start_date)
    if start is None and history:
        start = as_date(history[-1].get("date"))

    if start is None:
        return {
            "phase": "HYPERTROPHY",
            "week_in_phase": 1,
            "total_weeks_in_phase": PHASE_DURATIONS[0],
            "next_phase": "STRENGTH",
            "phase_description": PERIODIZATION_PHASES["HYPERTROPHY"]["description"],
            "recommendation": "Start with hypertrophy phase to build muscle base",
            "cycle_number": 1,
        }

    weeks_passed = max(0, whole_weeks_between(start, today))
    idx, week_in_phase = phase_for_week(weeks_passed)
    phase = PHASE_CYCLE[idx]
    total_weeks = PHASE_DURATIONS[idx]

    return {
        "phase": phase,
        "week_in_phase": week_in_phase,
        "total_weeks_in_phase": total_weeks,
        "next_phase": PHASE_CYCLE[(idx + 1) % len(PHASE_CYCLE)],
        "phase_description": PERIODIZATION_PHASES[phase]["description"],
        "recommendation": generate_phase_recommendation(phase, week_in_phase, total_weeks),
        "cycle_number": weeks_passed // CYCLE_WEEKS + 1,
    }


def generate_phase_recommendation(phase: str, week_in_phase: int, total_weeks: int) -> str:
    data = PERIODIZATION_PHASES.get(phase)

    if phase == "HYPERTROPHY":
        lo, hi = data["rep_range"]
        text = (
            f"Focus on muscle building with {lo}-{hi} reps"
            if week_in_phase <= 2
            else "Continue hypertrophy work, consider adding intensity in final weeks"
        )
    elif phase == "STRENGTH":
        lo, hi = data["rep_range"]
        text = (
            f"Build maximum strength with {lo}-{hi} reps at {data['intensity_percent'][0]}%+ intensity"
            if week_in_phase <= 2
            else "Push for new strength PRs while maintaining good form"
        )
    elif phase == "POWER":
        lo, hi = data["rep_range"]
        text = f"Peak phase: Focus on {lo}-{hi} reps at maximum weights"
    elif phase == "DELOAD":
        text = "Recovery week: Reduce volume and intensity by 40-50%"
    else:
        text = f"Follow {phase.lower()} training guidelines"

    return f"{text} (Week {week_in_phase}/{total_weeks})"


def generate_periodized_workout(exercise: str, phase: str, last_workout: Optional[dict] = None):
    """Sets/reps/weight target for one exercise in the given phase.

    Returns None for an unknown phase.
    """
    data = PERIODIZATION_PHASES.get(phase)
    if data is None:
        return None

    tier = get_exercise_category(exercise)["tier"]

    sets = _round_half_up(sum(data["set_range"]) / 2)
    reps = _round_half_up(sum(data["rep_range"]) / 2)

    if tier == "primary":
        sets = max(sets, 3)
    elif tier == "accessory":
        sets = min(sets, 3)
        reps = min(reps + 2, data["rep_range"][1])

    weight = 0
    if last_workout and last_workout.get("weight"):
        last_weight = float(last_workout["weight"])
        if phase == "DELOAD":
            weight = _round_half_up(last_weight * 0.6)
        elif phase in ("STRENGTH", "POWER"):
            weight = _round_half_up(last_weight * 1.05)
        else:
            weight = _round_half_up(last_weight * 1.02)

    return {
        "sets": sets,
        "reps": reps,
        "weight": weight,
        "phase": phase,
        "phase_description": data["description"],
        "rest_period": data["rest_period"],
        "intensity_percent": data["intensity_percent"],
        "reasoning": f"{data['name']} phase: {sets} sets x {reps} reps @ {weight}lbs",
    }

"""Progressive-overload suggester.

Looks at a rolling window of sessions for one exercise and proposes the
next target: one more rep, a heavier weight, an extra set, or a deload.
"""

import math
from typing import Optional

from ironlog.core.time_utils import as_date, iso_week_key

DEFAULT_PARAMS = {
    "weight_increment": 2.5,
    "rep_range": (8, 12),
    "base_percentage_increase": 0.025,
    "strategy": "double_progression",
}

COMPOUND_KEYWORDS = ("squat", "deadlift", "bench", "press")
ISOLATION_KEYWORDS = ("curl", "extension", "fly", "raise", "lateral", "tricep", "bicep")
BODYWEIGHT_KEYWORDS = ("pull-up", "push-up", "dip", "chin-up")

RECENT_SESSIONS = 6
MAX_SETS = 5
DELOAD_FACTOR = 0.9


def get_progression_params(exercise: str) -> dict:
    """Rep range and increments picked by keyword on the exercise name."""
    name = exercise.lower()

    if any(k in name for k in COMPOUND_KEYWORDS):
        return {
            **DEFAULT_PARAMS,
            "exercise_type": "compound",
            "weight_increment": 2.5,
            "rep_range": (6, 10),
            "base_percentage_increase": 0.025,
        }
    if any(k in name for k in ISOLATION_KEYWORDS):
        return {
            **DEFAULT_PARAMS,
            "exercise_type": "isolation",
            "weight_increment": 1.25,
            "rep_range": (10, 15),
            "base_percentage_increase": 0.02,
        }
    if any(k in name for k in BODYWEIGHT_KEYWORDS):
        return {
            **DEFAULT_PARAMS,
            "exercise_type": "bodyweight",
            "weight_increment": 0,
            "rep_range": (8, 15),
            "base_percentage_increase": 0.05,
        }
    return {**DEFAULT_PARAMS, "exercise_type": "general"}


def starter_suggestion(exercise: str) -> dict:
    name = exercise.lower()

    if "bench press" in name:
        suggestion, reason, kind = (
            {"sets": 3, "reps": 8, "weight": 45},
            "Starting with Olympic barbell (45lbs) - focus on form first",
            "compound",
        )
    elif "squat" in name:
        suggestion, reason, kind = (
            {"sets": 3, "reps": 8, "weight": 45},
            "Starting with Olympic barbell (45lbs) - master the movement pattern",
            "compound",
        )
    elif "deadlift" in name:
        suggestion, reason, kind = (
            {"sets": 3, "reps": 5, "weight": 95},
            "Starting with 95lbs (bar + 25lb plates) for proper bar height",
            "compound",
        )
    else:
        suggestion, reason, kind = (
            {"sets": 3, "reps": 10, "weight": 10},
            "Conservative starting point - adjust based on your strength level",
            "general",
        )

    return {
        "suggestion": suggestion,
        "reason": reason,
        "confidence": "medium",
        "is_first_workout": True,
        "exercise_type": kind,
        "last_workout": None,
    }


def _num(value, default=0):
    return value if value else default


def _volume(w: dict) -> float:
    return _num(w.get("sets"), 1) * _num(w.get("reps"), 1) * _num(w.get("weight"), 0)


def round_to_quarter(x: float) -> float:
    # Halves round up: 113.625 -> 113.75
    return math.floor(x * 4 + 0.5) / 4


def trend_slope(values: list[float]) -> float:
    """Least-squares slope over index, normalised by the mean of `values`."""
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_xx = sum(i * i for i in range(n))
    denom = n * sum_xx - sum_x * sum_x
    mean = sum_y / n
    if denom == 0 or mean == 0:
        return 0.0
    slope = (n * sum_xy - sum_x * sum_y) / denom
    return slope / mean


def analyze_weekly_progression(workouts: list[dict]) -> dict:
    """Week-over-week growth of total volume and average weight."""
    if len(workouts) < 2:
        return {"trend": "insufficient_data", "weekly_growth": 0.0, "consistency": 0.0, "growth_rates": []}

    weeks: dict[str, list[dict]] = {}
    for w in workouts:
        weeks.setdefault(iso_week_key(w["date"]), []).append(w)

    averages = []
    for key in sorted(weeks):
        items = weeks[key]
        averages.append(
            {
                "week": key,
                "workout_count": len(items),
                "volume": sum(_volume(w) for w in items),
                "avg_weight": sum(_num(w.get("weight")) for w in items) / len(items),
            }
        )

    if len(averages) < 2:
        return {"trend": "insufficient_data", "weekly_growth": 0.0, "consistency": 0.0, "growth_rates": []}

    growth_rates = []
    for i in range(1, len(averages)):
        cur, prev = averages[i], averages[i - 1]
        volume_growth = (cur["volume"] - prev["volume"]) / prev["volume"] if prev["volume"] > 0 else 0.0
        intensity_growth = (
            (cur["avg_weight"] - prev["avg_weight"]) / prev["avg_weight"] if prev["avg_weight"] > 0 else 0.0
        )
        growth_rates.append(
            {
                "week": i,
                "volume_growth": volume_growth,
                "intensity_growth": intensity_growth,
                "combined_growth": (volume_growth + intensity_growth) / 2,
            }
        )

    combined = [g["combined_growth"] for g in growth_rates]
    avg_growth = sum(combined) / len(combined)

    consistency = 0.0
    if len(combined) >= 2:
        variance = sum((g - avg_growth) ** 2 for g in combined) / len(combined)
        consistency = max(0.0, 1 - math.sqrt(variance) * 2)

    trend = "stable"
    if avg_growth > 0.02:
        trend = "increasing"
    elif avg_growth < -0.02:
        trend = "decreasing"

    return {
        "trend": trend,
        "weekly_growth": avg_growth,
        "consistency": consistency,
        "growth_rates": growth_rates,
    }


def analyze_volume_progression(workouts: list[dict]) -> dict:
    """Direction of session volume over the most recent sessions.

    `workouts` are most recent first; the slope is taken in chronological
    order so a rising volume reads as positive.
    """
    if len(workouts) < 3:
        return {"trend": "insufficient_data", "volume_growth": 0.0}

    recent = [_volume(w) for w in workouts[:RECENT_SESSIONS]]
    slope = trend_slope(list(reversed(recent)))
    oldest = recent[-1]
    growth = (recent[0] - oldest) / oldest if oldest else 0.0

    if slope > 0.05:
        trend = "increasing"
    elif slope < -0.05:
        trend = "decreasing"
    else:
        trend = "stable"
    return {"trend": trend, "volume_growth": growth}


def calculate_success_rate(workouts: list[dict], rep_range) -> float:
    """Share of recent sessions whose reps landed inside the target range."""
    if not workouts:
        return 0.5
    low, high = rep_range
    recent = workouts[:RECENT_SESSIONS]
    hits = sum(1 for w in recent if low <= _num(w.get("reps")) <= high)
    return hits / len(recent)


def calculate_next_workout(workouts: list[dict], exercise: str) -> dict:
    params = get_progression_params(exercise)

    if not workouts:
        return starter_suggestion(exercise)

    ordered = sorted(workouts, key=lambda w: as_date(w["date"]), reverse=True)
    last = ordered[0]
    sets = _num(last.get("sets"), 3)
    reps = _num(last.get("reps"), 10)
    weight = _num(last.get("weight"), 0)

    weekly = analyze_weekly_progression(ordered)
    volume = analyze_volume_progression(ordered)
    success_rate = calculate_success_rate(ordered, params["rep_range"])

    return _choose_progression(sets, reps, weight, weekly, volume, success_rate, params)


def _choose_progression(sets, reps, weight, weekly, volume, success_rate, params) -> dict:
    low, high = params["rep_range"]
    suggestion = {"sets": sets, "reps": reps, "weight": weight}
    reason = "Maintain current parameters"

    if success_rate >= 0.9:
        multiplier, confidence = 1.2, "high"
    elif success_rate >= 0.7:
        multiplier, confidence = 1.0, "medium"
    else:
        multiplier, confidence = 0.5, "low"

    if weekly["trend"] == "increasing" and weekly["consistency"] > 0.7:
        multiplier *= 1.1
    elif weekly["trend"] == "decreasing":
        multiplier *= 0.7

    pct = round(success_rate * 100)

    if reps < high and success_rate >= 0.8:
        suggestion["reps"] = reps + 1
        reason = f"Increase reps to {suggestion['reps']} for hypertrophy ({pct}% success rate)"
        confidence = "high"
    elif reps >= high or success_rate < 0.7:
        percentage = params["base_percentage_increase"] * multiplier
        increase = max(params["weight_increment"], weight * percentage)
        suggestion["weight"] = round_to_quarter(weight + increase)
        suggestion["reps"] = low
        reason = (
            f"Increase weight by {round(percentage * 100, 1)}% "
            f"(+{suggestion['weight'] - weight}lbs) based on {pct}% success rate"
        )
        confidence = "high" if success_rate > 0.8 else "medium"
    elif volume["trend"] == "decreasing" or success_rate < 0.5:
        if weekly["weekly_growth"] < -0.1:
            suggestion["weight"] = round_to_quarter(weight * DELOAD_FACTOR)
            reason = (
                f"Deload by 10% due to declining performance "
                f"({round(weekly['weekly_growth'] * 100)}% weekly decline)"
            )
            confidence = "high"
        else:
            suggestion["sets"] = min(sets + 1, MAX_SETS)
            reason = f"Add extra set to increase volume ({pct}% success rate)"
            confidence = "medium"

    return {
        "suggestion": suggestion,
        "reason": reason,
        "confidence": confidence,
        "strategy": params["strategy"],
        "status": weekly["trend"],
        "is_first_workout": False,
        "exercise_type": params["exercise_type"],
        "last_workout": {"sets": sets, "reps": reps, "weight": weight},
        "analysis": {
            "success_rate": pct,
            "weekly_growth": round(weekly["weekly_growth"] * 100, 1),
            "volume_trend": volume["trend"],
            "progression_multiplier": round(multiplier, 2),
        },
    }


def _signed(diff) -> str:
    return f"+{diff}" if diff > 0 else f"{diff}"


def format_progression_suggestion(result: Optional[dict]) -> Optional[dict]:
    if not result or not result.get("suggestion"):
        return None

    s = result["suggestion"]
    last = result.get("last_workout")

    if result.get("is_first_workout") or not last:
        text = f"{s['sets']} sets × {s['reps']} reps @ {s['weight']}lbs"
        return {
            "changes": [f"Starting recommendation: {text}"],
            "reason": result["reason"],
            "confidence": result["confidence"],
            "summary": f"Starting with {text}",
        }

    changes = []
    if s["weight"] != last["weight"]:
        changes.append(
            f"Weight: {last['weight']} → {s['weight']}lbs ({_signed(s['weight'] - last['weight'])})"
        )
    if s["reps"] != last["reps"]:
        changes.append(f"Reps: {last['reps']} → {s['reps']} ({_signed(s['reps'] - last['reps'])})")
    if s["sets"] != last["sets"]:
        changes.append(f"Sets: {last['sets']} → {s['sets']} ({_signed(s['sets'] - last['sets'])})")

    return {
        "changes": changes,
        "reason": result["reason"],
        "confidence": result["confidence"],
        "summary": ", ".join(changes) if changes else "Maintain current parameters",
    }

"""Long-window progressive-overload analysis across every logged exercise."""

from ironlog.core.constants import estimated_1rm
from ironlog.core.time_utils import as_date, days_between

DIRECTION_THRESHOLD = 0.1
STICKING_POINT_THRESHOLD = 0.05
PLATEAU_THRESHOLD = 0.03
LONG_PLATEAU_DAYS = 14


def calculate_trend(values: list[float]) -> dict:
    """Linear regression over session index with R² as the confidence."""
    n = len(values)
    if n < 2:
        return {"slope": 0.0, "direction": "insufficient_data", "confidence": 0.0, "change_rate": 0.0}

    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_xx = sum(i * i for i in range(n))
    denom = n * sum_xx - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denom if denom else 0.0
    intercept = (sum_y - slope * sum_x) / n

    mean = sum_y / n
    total_ss = sum((y - mean) ** 2 for y in values)
    residual_ss = sum((y - (slope * i + intercept)) ** 2 for i, y in enumerate(values))
    r_squared = 0.0 if total_ss == 0 else 1 - residual_ss / total_ss

    direction = "stable"
    if abs(slope) > DIRECTION_THRESHOLD:
        direction = "increasing" if slope > 0 else "decreasing"

    return {
        "slope": round(slope, 4),
        "direction": direction,
        "confidence": round(r_squared, 3),
        "change_rate": slope * 100,
    }


def _session_metrics(w: dict) -> dict:
    sets = w.get("sets") or 1
    reps = w.get("reps") or 1
    weight = w.get("weight") or 0
    return {
        "date": as_date(w["date"]),
        "sets": sets,
        "reps": reps,
        "weight": weight,
        "volume": sets * reps * weight,
        "intensity": weight,
        "estimated_1rm": estimated_1rm(weight, reps),
        "workload": sets * reps,
    }


def determine_progression_status(volume: dict, intensity: dict, e1rm: dict) -> str:
    trends = [volume, intensity, e1rm]
    if sum(1 for t in trends if t["direction"] == "increasing") >= 2:
        return "progressing"
    if sum(1 for t in trends if t["direction"] == "decreasing") >= 2:
        return "regressing"
    return "stagnant"


def identify_sticking_points(sessions: list[dict]) -> list[dict]:
    points = []
    for i in range(2, len(sessions)):
        current = sessions[i]["intensity"]
        prior = (sessions[i - 1]["intensity"] + sessions[i - 2]["intensity"]) / 2
        if prior and abs(current - prior) / prior < STICKING_POINT_THRESHOLD:
            points.append(
                {
                    "date": sessions[i]["date"],
                    "weight": current,
                    "type": "intensity_plateau",
                    "description": f"Intensity stuck around {current} lbs for multiple sessions",
                }
            )
    return points


def identify_plateaus(sessions: list[dict]) -> list[dict]:
    plateaus = []
    start = None
    value = None
    for i in range(1, len(sessions)):
        prev, cur = sessions[i - 1], sessions[i]
        if prev["volume"] and abs(cur["volume"] - prev["volume"]) / prev["volume"] < PLATEAU_THRESHOLD:
            if start is None:
                start, value = prev["date"], prev["volume"]
        elif start is not None:
            plateaus.append(
                {
                    "start_date": start,
                    "end_date": prev["date"],
                    "value": value,
                    "duration": days_between(start, prev["date"]),
                    "type": "volume_plateau",
                }
            )
            start = None
    return plateaus


def exercise_recommendations(name, status, volume, intensity, sticking_points, plateaus) -> list[dict]:
    recs = []
    if status == "progressing":
        recs.append(
            {
                "type": "maintain",
                "priority": "low",
                "message": f"Great progress on {name}! Continue with current progression strategy.",
            }
        )
    elif status == "stagnant":
        if intensity["direction"] == "stable":
            recs.append(
                {
                    "type": "intensity_increase",
                    "priority": "high",
                    "message": f"Increase weight by 2.5-5 lbs on {name} to break through plateau.",
                }
            )
        if volume["direction"] == "stable":
            recs.append(
                {
                    "type": "volume_increase",
                    "priority": "medium",
                    "message": f"Add an extra set or 2-3 reps per set for {name}.",
                }
            )
    elif status == "regressing":
        recs.append(
            {
                "type": "deload",
                "priority": "high",
                "message": f"Consider a deload week for {name} - reduce weight by 10-20% and focus on form.",
            }
        )

    if len(sticking_points) > 2:
        recs.append(
            {
                "type": "technique_focus",
                "priority": "medium",
                "message": f"Multiple sticking points detected on {name}. Focus on technique refinement and consider accessory exercises.",
            }
        )
    if plateaus and plateaus[-1]["duration"] > LONG_PLATEAU_DAYS:
        recs.append(
            {
                "type": "program_variation",
                "priority": "high",
                "message": f"Long plateau detected on {name}. Consider changing rep ranges, tempo, or exercise variation.",
            }
        )
    return recs


def next_progression(last: dict, status: str) -> dict:
    if status == "progressing":
        return {
            "weight": last["weight"] + 2.5,
            "sets": last["sets"],
            "reps": last["reps"],
            "rationale": "Continue linear progression with small weight increase",
        }
    if status == "stagnant":
        return {
            "options": [
                {
                    "type": "weight_increase",
                    "weight": last["weight"] + 2.5,
                    "sets": last["sets"],
                    "reps": last["reps"],
                    "rationale": "Increase weight while maintaining volume",
                },
                {
                    "type": "volume_increase",
                    "weight": last["weight"],
                    "sets": last["sets"] + 1,
                    "reps": last["reps"],
                    "rationale": "Add extra set to increase total volume",
                },
                {
                    "type": "rep_increase",
                    "weight": last["weight"],
                    "sets": last["sets"],
                    "reps": last["reps"] + 2,
                    "rationale": "Increase reps per set for volume progression",
                },
            ]
        }
    return {
        "weight": last["weight"] * 0.85,
        "sets": last["sets"],
        "reps": last["reps"],
        "rationale": "Deload to recover and rebuild strength base",
    }


def analyze_exercise(name: str, workouts: list[dict], timeframe_days: int) -> dict:
    sessions = sorted((_session_metrics(w) for w in workouts), key=lambda s: s["date"])

    volume = calculate_trend([s["volume"] for s in sessions])
    intensity = calculate_trend([s["intensity"] for s in sessions])
    e1rm = calculate_trend([s["estimated_1rm"] for s in sessions])
    workload = calculate_trend([s["workload"] for s in sessions])

    status = determine_progression_status(volume, intensity, e1rm)

    first, last = sessions[0], sessions[-1]
    rate = None
    if first["volume"] > 0:
        rate = (last["volume"] - first["volume"]) / first["volume"] * 100 * (7 / timeframe_days)

    sticking = identify_sticking_points(sessions)
    plateaus = identify_plateaus(sessions)

    return {
        "exercise_name": name,
        "total_workouts": len(sessions),
        "progression_status": status,
        "progression_rate": rate,
        "trends": {"volume": volume, "intensity": intensity, "estimated_1rm": e1rm, "workload": workload},
        "current_metrics": {
            "volume": last["volume"],
            "intensity": last["intensity"],
            "estimated_1rm": last["estimated_1rm"],
            "workload": last["workload"],
        },
        "sticking_points": sticking,
        "plateau_periods": plateaus,
        "recommendations": exercise_recommendations(name, status, volume, intensity, sticking, plateaus),
        "next_suggested_progression": next_progression(last, status),
    }


def overall_recommendations(total: int, progressing: int, avg_rate: float) -> list[dict]:
    recs = []
    ratio = progressing / total if total else 0.0
    if ratio < 0.3:
        recs.append(
            {
                "type": "program_overhaul",
                "priority": "high",
                "message": "Most exercises are stagnating. Consider a new training program or deload week.",
            }
        )
    elif ratio > 0.7:
        recs.append(
            {
                "type": "maintain_program",
                "priority": "low",
                "message": "Excellent progress across most exercises! Stay consistent with current approach.",
            }
        )
    if avg_rate < 0.5:
        recs.append(
            {
                "type": "progression_adjustment",
                "priority": "medium",
                "message": "Consider smaller, more frequent progressions to maintain steady improvement.",
            }
        )
    return recs


def analyze_overload(workouts: list[dict], timeframe_days: int, min_workouts: int = 3) -> dict:
    """Per-exercise trend analysis plus an overall verdict.

    Exercises with fewer than `min_workouts` sessions are skipped.
    """
    if not workouts:
        return {
            "message": "No workouts found for analysis",
            "exercises": {},
            "overall_analysis": None,
            "summary": {"total_workouts": 0, "timeframe_days": timeframe_days, "exercises_analyzed": 0},
        }

    by_exercise: dict[str, list[dict]] = {}
    for w in workouts:
        by_exercise.setdefault(w["exercise"], []).append(w)

    results = {}
    for name, items in by_exercise.items():
        if len(items) < min_workouts:
            continue
        results[name] = analyze_exercise(name, items, timeframe_days)

    progressing = sum(1 for a in results.values() if a["progression_status"] == "progressing")
    needs_adjustment = sum(
        1 for a in results.values() if a["progression_status"] in ("stagnant", "regressing")
    )
    rates = [a["progression_rate"] for a in results.values() if a["progression_rate"] is not None]
    avg_rate = sum(rates) / len(rates) if rates else 0.0

    overall = {
        "total_exercises": len(results),
        "exercises_with_progression": progressing,
        "exercises_needing_adjustment": needs_adjustment,
        "average_progression_rate": avg_rate,
        "recommendations": overall_recommendations(len(results), progressing, avg_rate),
    }

    return {
        "exercises": results,
        "overall_analysis": overall,
        "summary": {
            "total_workouts": len(workouts),
            "timeframe_days": timeframe_days,
            "exercises_analyzed": len(results),
        },
    }

"""Dashboard analytics over a trailing window, plus the weekly report."""

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from ironlog.core.constants import estimated_1rm
from ironlog.core.time_utils import as_date, days_between
from ironlog.training.weight_trend import weight_trend

UPCOMING_DEADLINE_DAYS = 14
RAPID_WEIGHT_CHANGE_PER_WEEK = 2


def _volume(w: dict) -> float:
    return (w.get("sets") or 1) * (w.get("reps") or 1) * float(w.get("weight") or 0)


def analyze_workouts(workouts: list[dict], timeframe_days: int) -> dict:
    if not workouts:
        return {
            "total_workouts": 0,
            "training_days": 0,
            "average_per_week": 0,
            "total_volume": 0,
            "average_volume": 0,
            "exercise_breakdown": {},
            "frequency_trend": [],
        }

    breakdown: dict[str, dict] = {}
    per_day: dict[date, int] = defaultdict(int)
    total_volume = 0.0
    for w in workouts:
        volume = _volume(w)
        total_volume += volume
        per_day[as_date(w["date"])] += 1

        stats = breakdown.setdefault(w["exercise"], {"count": 0, "total_volume": 0.0, "max_weight": 0.0})
        stats["count"] += 1
        stats["total_volume"] += volume
        stats["max_weight"] = max(stats["max_weight"], float(w.get("weight") or 0))

    return {
        "total_workouts": len(workouts),
        "training_days": len(per_day),
        "average_per_week": round(len(workouts) / timeframe_days * 7, 2),
        "total_volume": total_volume,
        "average_volume": round(total_volume / len(workouts), 1),
        "exercise_breakdown": breakdown,
        "frequency_trend": [{"date": d, "workouts": per_day[d]} for d in sorted(per_day)],
    }


def strength_progression(workouts: list[dict]) -> dict:
    """Per exercise: a daily chart series and start/current comparisons.

    Bodyweight rows (weight 0) carry no load signal and are skipped.
    """
    by_exercise: dict[str, list[dict]] = defaultdict(list)
    for w in workouts:
        if float(w.get("weight") or 0) > 0:
            by_exercise[w["exercise"]].append(w)

    result = {}
    for exercise, rows in by_exercise.items():
        rows = sorted(rows, key=lambda r: as_date(r["date"]))

        daily: dict[date, dict] = {}
        for r in rows:
            weight = float(r["weight"])
            one_rm = round(estimated_1rm(weight, r.get("reps") or 1), 1)
            day = daily.setdefault(
                as_date(r["date"]),
                {"date": as_date(r["date"]), "weight": 0.0, "one_rm": 0.0, "volume": 0.0, "workouts": 0},
            )
            day["weight"] = max(day["weight"], weight)
            day["one_rm"] = max(day["one_rm"], one_rm)
            day["volume"] += _volume(r)
            day["workouts"] += 1

        first, last = rows[0], rows[-1]
        start_weight, current_weight = float(first["weight"]), float(last["weight"])
        start_1rm = estimated_1rm(start_weight, first.get("reps") or 1)
        current_1rm = estimated_1rm(current_weight, last.get("reps") or 1)
        days = max(days_between(first["date"], last["date"]), 1)
        increase = current_weight - start_weight

        result[exercise] = {
            "chart_data": [daily[d] for d in sorted(daily)],
            "metrics": {
                "total_sessions": len(rows),
                "weight_increase": round(increase, 1),
                "one_rm_increase": round(current_1rm - start_1rm, 1),
                "average_weekly_increase": round(increase / max(days / 7, 1), 1),
                "start_weight": start_weight,
                "current_weight": current_weight,
                "start_one_rm": round(start_1rm, 1),
                "current_one_rm": round(current_1rm, 1),
                "timespan": days,
                "progress_percentage": math.floor(increase / start_weight * 100 + 0.5),
            },
        }
    return result


def analyze_weight(entries: list[dict]) -> dict:
    """Window change plus the least-squares trend across every entry in it."""
    if not entries:
        return {
            "current_weight": None,
            "weight_change": 0,
            "average_weekly_change": 0,
            "trend": "no data",
            "confidence": 0,
            "data_points": [],
            "total_entries": 0,
        }

    ordered = sorted(entries, key=lambda e: as_date(e["date"]))
    trend = weight_trend(ordered, period=len(ordered))
    return {
        "current_weight": float(ordered[-1]["weight"]),
        "weight_change": round(float(ordered[-1]["weight"]) - float(ordered[0]["weight"]), 1),
        "average_weekly_change": trend["rate"],
        "trend": trend["direction"],
        "confidence": trend["confidence"],
        "data_points": [{"date": as_date(e["date"]), "weight": float(e["weight"])} for e in ordered],
        "total_entries": len(ordered),
    }


def analyze_goals(goals: list[dict]) -> dict:
    """`goals` are goal views: stored fields plus progress and days remaining."""
    active = [g for g in goals if g["status"] == "Active"]
    completed = [g for g in goals if g["status"] == "Completed"]

    by_type: dict[str, list[float]] = defaultdict(list)
    for g in goals:
        by_type[g["goal_type"]].append(g["progress_percentage"])

    upcoming = sorted(
        (g for g in active if g["days_remaining"] <= UPCOMING_DEADLINE_DAYS),
        key=lambda g: g["days_remaining"],
    )

    return {
        "total_goals": len(goals),
        "active_goals": len(active),
        "completed_goals": len(completed),
        "average_progress": (
            round(sum(g["progress_percentage"] for g in active) / len(active), 1) if active else 0
        ),
        "goals_by_type": {
            t: {"count": len(values), "avg_progress": round(sum(values) / len(values), 1)}
            for t, values in by_type.items()
        },
        "upcoming_deadlines": [
            {
                "id": g["id"],
                "title": g["goal_title"],
                "target_date": g["target_date"],
                "days_remaining": g["days_remaining"],
                "progress": g["progress_percentage"],
            }
            for g in upcoming
        ],
    }


def analyze_progress(prs: list[dict], timeframe_days: int) -> dict:
    improvements = [float(p["max_weight"]) - float(p.get("previous_pr") or 0) for p in prs]
    total = sum(improvements)
    return {
        "total_prs": len(prs),
        "average_prs_per_week": round(len(prs) / timeframe_days * 7, 2),
        "exercises_improved": len({p["exercise"] for p in prs}),
        "total_improvement": round(total, 1),
        "average_improvement": round(total / len(prs), 1) if prs else 0,
    }


def build_summary(analytics: dict) -> dict:
    workouts = analytics.get("workout_analytics") or {}
    weight = analytics.get("weight_analytics") or {}
    goals = analytics.get("goal_analytics") or {}
    progress = analytics.get("progress_analytics") or {}
    return {
        "workout_frequency": workouts.get("average_per_week", 0),
        "total_volume": workouts.get("total_volume", 0),
        "weight_trend": weight.get("trend", "no data"),
        "active_goals": goals.get("active_goals", 0),
        "recent_prs": progress.get("total_prs", 0),
        "overall_progress": goals.get("average_progress", 0),
    }


def generate_insights(analytics: dict) -> list[dict]:
    """Short coaching notes for whichever sections were computed."""
    insights = []

    workouts = analytics.get("workout_analytics")
    if workouts:
        frequency = workouts["average_per_week"]
        if frequency < 2:
            insights.append(
                {
                    "type": "suggestion",
                    "category": "workout",
                    "message": "Consider increasing workout frequency to 3-4 times per week for optimal results.",
                    "priority": "high",
                }
            )
        elif frequency > 6:
            insights.append(
                {
                    "type": "warning",
                    "category": "workout",
                    "message": "High training frequency detected. Ensure adequate rest and recovery.",
                    "priority": "medium",
                }
            )

    weight = analytics.get("weight_analytics")
    if weight and abs(weight["average_weekly_change"]) > RAPID_WEIGHT_CHANGE_PER_WEEK:
        if weight["trend"] == "losing":
            insights.append(
                {
                    "type": "warning",
                    "category": "weight",
                    "message": "Rapid weight loss detected. Consider consulting a healthcare professional.",
                    "priority": "high",
                }
            )
        elif weight["trend"] == "gaining":
            insights.append(
                {
                    "type": "warning",
                    "category": "weight",
                    "message": "Rapid weight gain detected. Monitor nutrition and exercise balance.",
                    "priority": "medium",
                }
            )

    goals = analytics.get("goal_analytics")
    if goals and goals["active_goals"] > 0:
        if goals["average_progress"] < 25:
            insights.append(
                {
                    "type": "motivation",
                    "category": "goals",
                    "message": "Your goals are just getting started! Stay consistent to see progress.",
                    "priority": "low",
                }
            )
        elif goals["average_progress"] > 75:
            insights.append(
                {
                    "type": "celebration",
                    "category": "goals",
                    "message": "Excellent progress on your goals! You're almost there!",
                    "priority": "low",
                }
            )

    progress = analytics.get("progress_analytics")
    if progress is not None:
        if progress["total_prs"] == 0:
            insights.append(
                {
                    "type": "suggestion",
                    "category": "progress",
                    "message": "Focus on progressive overload to achieve new personal records.",
                    "priority": "medium",
                }
            )
        elif progress["total_prs"] > 3:
            insights.append(
                {
                    "type": "celebration",
                    "category": "progress",
                    "message": f"Amazing! You've set {progress['total_prs']} personal records recently!",
                    "priority": "low",
                }
            )

    return insights


# --- weekly report ------------------------------------------------------


def training_streak(days: list) -> int:
    """Consecutive training days ending at the latest one."""
    unique = sorted({as_date(d) for d in days}, reverse=True)
    if not unique:
        return 0
    streak = 1
    for newer, older in zip(unique, unique[1:]):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


def weekly_report(
    workouts: list[dict],
    weights: list[dict],
    prs: list[dict],
    goals_achieved: list[dict],
    durations: Optional[list[int]] = None,
) -> dict:
    """Summarize one week of rows already filtered to the week's bounds.

    A workout row counts as a PR when a record in the week points at it.
    """
    pr_workout_ids = {p.get("workout_id") for p in prs if p.get("workout_id") is not None}

    days: dict[date, list[dict]] = defaultdict(list)
    for w in sorted(workouts, key=lambda r: (as_date(r["date"]), r.get("id") or 0)):
        days[as_date(w["date"])].append(
            {
                "name": w["exercise"],
                "sets": w["sets"],
                "reps": w["reps"],
                "weight": float(w.get("weight") or 0),
                "is_pr": w.get("id") in pr_workout_ids,
            }
        )

    ordered_weights = sorted(weights, key=lambda e: as_date(e["date"]))
    start_weight = float(ordered_weights[0]["weight"]) if ordered_weights else None
    end_weight = float(ordered_weights[-1]["weight"]) if ordered_weights else None

    durations = [d for d in (durations or []) if d > 0]

    return {
        "summary": {
            "total_workouts": len(days),
            "total_exercises": len(workouts),
            "total_sets": sum(w["sets"] for w in workouts),
            "total_reps": sum(w["sets"] * w["reps"] for w in workouts),
            "total_weight": sum(_volume(w) for w in workouts),
            "avg_workout_duration": round(sum(durations) / len(durations)) if durations else 0,
            "streak": training_streak(list(days)),
        },
        "workouts": [{"date": d, "exercises": exercises} for d, exercises in days.items()],
        "weight": {
            "start_weight": start_weight,
            "end_weight": end_weight,
            "change": round(end_weight - start_weight, 1) if ordered_weights else 0,
            "measurements": [
                {"date": as_date(e["date"]), "weight": float(e["weight"])} for e in ordered_weights
            ],
        },
        "goals_achieved": goals_achieved,
        "personal_records": prs,
    }

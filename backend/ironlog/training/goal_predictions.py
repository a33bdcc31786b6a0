"""Likelihood that each active goal is reached by its target date."""

from datetime import date, timedelta
from typing import Optional

from ironlog.core.time_utils import as_date
from ironlog.training.weight_trend import weight_trend

WEIGHT_TREND_ENTRIES = 14
PR_SESSIONS = 10
PR_RATE_SESSIONS = 5
# Assumed training sessions per week when turning a per-session gain into a weekly rate
SESSIONS_PER_WEEK = 2.5
FREQUENCY_WINDOW_DAYS = 28
VOLUME_WORKOUTS = 20
MIN_DATA_POINTS = 3

LIKELY = ("very_likely", "likely")
AT_RISK = ("possible", "unlikely")


def _insufficient(insight: str) -> dict:
    return {"likelihood": "insufficient_data", "confidence": "low", "predicted_date": None, "insights": [insight]}


def _by_date(rows: list[dict]) -> list[dict]:
    return sorted(rows, key=lambda r: as_date(r["date"]))


def predict_body_weight(
    goal: dict, weights: list[dict], weeks_remaining: float, today: date
) -> dict:
    if len(weights) < MIN_DATA_POINTS:
        return {**_insufficient("Need more weight data points for accurate prediction"), "weekly_change_needed": 0}

    ordered = _by_date(weights)
    current = float(ordered[-1]["weight"])
    weekly_trend = weight_trend(ordered, period=WEIGHT_TREND_ENTRIES)["rate"]
    difference = float(goal["target_value"]) - current
    needed = difference / weeks_remaining

    gap = abs(weekly_trend - needed)
    if gap < 0.5:
        likelihood, confidence, insight = "very_likely", "high", "Current weight trend aligns well with goal requirements"
    elif gap < 1.0:
        likelihood, confidence, insight = "likely", "medium", "Small adjustment to current trend needed"
    elif gap < 2.0:
        likelihood, confidence, insight = "possible", "medium", "Significant change in habits required"
    else:
        likelihood, confidence, insight = "unlikely", "high", "Goal requires major lifestyle changes"

    predicted = None
    if abs(weekly_trend) > 0.1:
        predicted = today + timedelta(weeks=abs(difference / weekly_trend))

    return {
        "likelihood": likelihood,
        "confidence": confidence,
        "predicted_date": predicted,
        "weekly_change_needed": round(needed, 1),
        "current_weekly_trend": round(weekly_trend, 1),
        "insights": [insight],
    }


def progression_rate(sessions: list[dict]) -> float:
    """Spread of recent top weights per session, scaled to a week."""
    if len(sessions) < 2:
        return 0.0
    weights = [float(s["weight"]) for s in sessions]
    return (max(weights) - min(weights)) / len(sessions) * SESSIONS_PER_WEEK


def predict_exercise_pr(
    goal: dict, workouts: list[dict], weeks_remaining: float, today: date
) -> dict:
    exercise = goal.get("exercise_name")
    sessions = _by_date([w for w in workouts if w["exercise"] == exercise])[-PR_SESSIONS:]
    if len(sessions) < MIN_DATA_POINTS:
        return {
            **_insufficient(f"Need more {exercise} workout data for accurate prediction"),
            "weekly_progress_needed": 0,
        }

    current_max = max(float(s["weight"]) for s in sessions)
    increase = float(goal["target_value"]) - current_max
    rate = progression_rate(sessions[-PR_RATE_SESSIONS:])
    needed = increase / weeks_remaining

    if rate >= needed * 0.8:
        likelihood, confidence, insight = "very_likely", "high", "Strong progression trend supports goal achievement"
    elif rate >= needed * 0.5:
        likelihood, confidence, insight = "likely", "medium", "Good progress, minor adjustments may help"
    elif rate > 0:
        likelihood, confidence, insight = "possible", "medium", "Current progression rate needs improvement"
    else:
        likelihood, confidence, insight = "unlikely", "high", "No recent progression detected"

    predicted = None
    if rate > 0 and increase > 0:
        predicted = today + timedelta(weeks=increase / rate)

    return {
        "likelihood": likelihood,
        "confidence": confidence,
        "predicted_date": predicted,
        "current_max": current_max,
        "weekly_progress_needed": round(needed, 1),
        "current_progression_rate": round(rate, 1),
        "insights": [insight],
    }


def predict_frequency(goal: dict, workouts: list[dict], today: date) -> dict:
    since = today - timedelta(days=FREQUENCY_WINDOW_DAYS)
    recent = [w for w in workouts if as_date(w["date"]) >= since]
    current = len(recent) / (FREQUENCY_WINDOW_DAYS / 7)
    ratio = current / float(goal["target_value"])

    if ratio >= 0.9:
        likelihood, confidence, insight = "very_likely", "high", "Current workout frequency is on track"
    elif ratio >= 0.7:
        likelihood, confidence, insight = "likely", "medium", "Slight increase in workout frequency needed"
    elif ratio >= 0.5:
        likelihood, confidence, insight = "possible", "medium", "Significant increase in workout frequency required"
    else:
        likelihood, confidence, insight = (
            "unlikely",
            "high",
            "Major lifestyle changes needed to reach frequency goal",
        )

    return {
        "likelihood": likelihood,
        "confidence": confidence,
        "predicted_date": None,
        "current_frequency": round(current, 1),
        "target_frequency": float(goal["target_value"]),
        "insights": [insight],
    }


def weekly_volume(workouts: list[dict]) -> float:
    """Total volume spread over the weeks it likely covers, at three workouts a week."""
    if not workouts:
        return 0.0
    total = sum(w["sets"] * w["reps"] * float(w.get("weight") or 0) for w in workouts)
    return total / max(1, len(workouts) / 3)


def predict_volume(goal: dict, workouts: list[dict], weeks_remaining: float) -> dict:
    current = weekly_volume(_by_date(workouts)[-VOLUME_WORKOUTS:])
    needed = float(goal["target_value"]) / weeks_remaining
    ratio = current / needed

    if ratio >= 0.8:
        likelihood, confidence, insight = "very_likely", "high", "Current training volume supports goal achievement"
    elif ratio >= 0.6:
        likelihood, confidence, insight = "likely", "medium", "Moderate increase in training volume needed"
    elif ratio >= 0.4:
        likelihood, confidence, insight = "possible", "medium", "Significant volume increase required"
    else:
        likelihood, confidence, insight = "unlikely", "high", "Goal requires substantial training volume increase"

    return {
        "likelihood": likelihood,
        "confidence": confidence,
        "predicted_date": None,
        "current_weekly_volume": round(current),
        "weekly_volume_needed": round(needed),
        "insights": [insight],
    }


def predict_generic(progress: float, days_elapsed: int, days_total: int) -> dict:
    """Extrapolate progress so far against the share of time used."""
    projected = progress / (days_elapsed / days_total * 100) * 100

    if projected >= 95:
        likelihood, confidence, insight = "very_likely", "high", "Excellent progress rate"
    elif projected >= 80:
        likelihood, confidence, insight = "likely", "medium", "Good progress, stay consistent"
    elif projected >= 60:
        likelihood, confidence, insight = "possible", "medium", "Progress needs acceleration"
    else:
        likelihood, confidence, insight = "unlikely", "high", "Significant effort increase required"

    return {
        "likelihood": likelihood,
        "confidence": confidence,
        "predicted_date": None,
        "projected_progress": round(min(projected, 100)),
        "insights": [insight],
    }


def predict_goal(
    goal: dict,
    workouts: list[dict],
    weights: list[dict],
    today: Optional[date] = None,
) -> dict:
    """`goal` is a goal view; `workouts` are history rows, `weights` body-weight entries."""
    today = today or date.today()
    target = as_date(goal["target_date"])
    # created_at is UTC and can run a day ahead of the local date
    created = min(as_date(goal.get("created_at")) or today, today)

    days_elapsed = max(1, (today - created).days)
    days_total = max(1, (target - created).days)
    days_remaining = max(0, (target - today).days)
    # Rates needed on the target day itself are taken over one day
    weeks_remaining = max(days_remaining, 1) / 7
    progress = goal["progress_percentage"]

    goal_type = goal["goal_type"]
    if goal_type == "Body Weight":
        prediction = predict_body_weight(goal, weights, weeks_remaining, today)
    elif goal_type == "Exercise PR":
        prediction = predict_exercise_pr(goal, workouts, weeks_remaining, today)
    elif goal_type == "Frequency":
        prediction = predict_frequency(goal, workouts, today)
    elif goal_type == "Volume":
        prediction = predict_volume(goal, workouts, weeks_remaining)
    else:
        prediction = predict_generic(progress, days_elapsed, days_total)

    return {
        "goal_id": goal["id"],
        "goal_title": goal["goal_title"],
        "goal_type": goal_type,
        "target_date": target,
        "days_remaining": days_remaining,
        "current_progress": progress,
        "time_elapsed_ratio": round(days_elapsed / days_total, 2),
        **prediction,
    }


def summarize_predictions(predictions: list[dict]) -> dict:
    return {
        "total_active_goals": len(predictions),
        "predictions_generated": len(predictions),
        "likely_to_succeed": sum(1 for p in predictions if p["likelihood"] in LIKELY),
        "needs_attention": sum(1 for p in predictions if p["likelihood"] in AT_RISK),
        "insufficient_data": sum(1 for p in predictions if p["likelihood"] == "insufficient_data"),
    }

"""Exercise rotation scoring and substitution suggestions.

History entries are dicts with at least `exercise`, `weight` and `date`,
ordered most recent first (the order the workouts endpoint returns them).
"""

from datetime import date, timedelta
from typing import Optional

from ironlog.core.time_utils import as_date, days_between, whole_weeks_between
from ironlog.training.catalog import EXERCISE_CATEGORIES, exercises_in, get_exercise_category
from ironlog.training.periodization import PERIODIZATION_PHASES

RECENT_WINDOW_DAYS = 28
OVERUSE_SESSIONS = 4
OVERUSE_PENALTY_PER_SESSION = 15
STAGNATION_PENALTY = 30
STALENESS_PER_DAY = 2
MAX_SCORE = 100

RECOMMENDATION_LABELS = ["Highly Recommended", "Good Alternative"]


def _weight(entry: dict) -> float:
    try:
        return float(entry.get("weight") or 0)
    except (TypeError, ValueError):
        return 0.0


def calculate_rotation_score(exercise: str, history: list[dict], today: Optional[date] = None) -> dict:
    """Staleness/overuse score in [0, 100]; higher means rotate it back in.

    - staleness: 2 points per day since last performed, capped at 100
    - overuse: -15 per session beyond 4 in the last 28 days
    - stagnation: +30 when the latest session is not heavier than the
      3rd most recent one (the 2nd is not looked at)
    """
    today = today or date.today()
    if not history:
        return {"score": 0, "reason": "No workout history", "details": None}

    sessions = [w for w in history if w.get("exercise") == exercise]
    last = sessions[0] if sessions else None
    if last is None or not last.get("date"):
        return {"score": MAX_SCORE, "reason": "Never performed or no date", "details": None}

    days_since = days_between(last["date"], today)

    window_start = today - timedelta(days=RECENT_WINDOW_DAYS)
    recent = sum(
        1 for w in sessions if w.get("date") and as_date(w["date"]) >= window_start
    )

    staleness = min(days_since * STALENESS_PER_DAY, MAX_SCORE)
    overuse_penalty = max(0, (recent - OVERUSE_SESSIONS) * OVERUSE_PENALTY_PER_SESSION)

    stagnation_penalty = 0
    if len(sessions) >= 3:
        latest, third = _weight(sessions[0]), _weight(sessions[2])
        if not latest > third:
            stagnation_penalty = STAGNATION_PENALTY

    raw = staleness - overuse_penalty + stagnation_penalty
    score = round(min(MAX_SCORE, max(0, raw)))

    return {
        "score": score,
        "reason": f"{days_since}d ago, {recent} recent workouts",
        "details": {
            "days_since": days_since,
            "recent_frequency": recent,
            "staleness": staleness,
            "overuse_penalty": overuse_penalty,
            "stagnation_penalty": stagnation_penalty,
        },
    }


def generate_rotation_suggestions(
    current_exercise: str,
    history: list[dict],
    max_suggestions: int = 3,
    prefer_same_category: bool = True,
    include_accessory: bool = False,
    periodization_phase: Optional[str] = None,
    today: Optional[date] = None,
) -> list[dict]:
    """Rank alternatives to `current_exercise`, best first."""
    current = get_exercise_category(current_exercise)

    if prefer_same_category and current["category"] != "OTHER":
        categories = [current["category"]]
    else:
        categories = list(EXERCISE_CATEGORIES)
    alternatives = [
        ex for ex in exercises_in(categories, include_accessory) if ex != current_exercise
    ]

    phase_name = None
    if periodization_phase and periodization_phase in PERIODIZATION_PHASES:
        phase_name = PERIODIZATION_PHASES[periodization_phase]["name"]

    scored = []
    for exercise in alternatives:
        rotation = calculate_rotation_score(exercise, history, today=today)
        category = get_exercise_category(exercise)

        tier_bonus = 0
        if category["tier"] == current["tier"]:
            tier_bonus = 20
        elif category["tier"] == "primary" and current["tier"] != "primary":
            tier_bonus = 10

        phase_bonus = 0
        if phase_name == "Strength" and category["tier"] == "primary":
            phase_bonus = 15
        elif phase_name == "Hypertrophy" and category["tier"] == "secondary":
            phase_bonus = 10

        scored.append(
            {
                "exercise": exercise,
                "score": rotation["score"] + tier_bonus + phase_bonus,
                "category": category["category"],
                "tier": category["tier"],
                "reason": rotation["reason"],
                "details": rotation["details"],
                "bonuses": {"tier_bonus": tier_bonus, "phase_bonus": phase_bonus},
            }
        )

    # sorted() is stable, so ties keep catalogue order
    ranked = sorted(scored, key=lambda s: s["score"], reverse=True)[:max_suggestions]
    for idx, item in enumerate(ranked):
        item["rank"] = idx + 1
        item["recommendation"] = (
            RECOMMENDATION_LABELS[idx] if idx < len(RECOMMENDATION_LABELS) else "Consider"
        )
    return ranked


def should_rotate_exercise(
    exercise: str,
    history: list[dict],
    rotation_threshold: int = 70,
    force_rotation_after_weeks: int = 8,
    today: Optional[date] = None,
) -> dict:
    today = today or date.today()
    if not history:
        return {"should_rotate": False, "reason": "No workout history", "score": 0, "type": "NO_ROTATION"}

    rotation = calculate_rotation_score(exercise, history, today=today)

    sessions = [w for w in history if w.get("exercise") == exercise and w.get("date")]
    if sessions:
        weeks_since_first = whole_weeks_between(sessions[-1]["date"], today)
        if weeks_since_first >= force_rotation_after_weeks:
            return {
                "should_rotate": True,
                "reason": f"Forced rotation after {weeks_since_first} weeks",
                "score": MAX_SCORE,
                "type": "TIME_BASED",
            }

    if rotation["score"] >= rotation_threshold:
        return {
            "should_rotate": True,
            "reason": rotation["reason"],
            "score": rotation["score"],
            "type": "SCORE_BASED",
        }

    return {
        "should_rotate": False,
        "reason": f"Score {rotation['score']} below threshold {rotation_threshold}",
        "score": rotation["score"],
        "type": "NO_ROTATION",
    }

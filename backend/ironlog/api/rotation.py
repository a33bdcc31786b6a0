from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.api.workouts import recent_history
from ironlog.core.config import settings
from ironlog.core.errors import ValidationFailed
from ironlog.db import get_db
from ironlog.training.catalog import get_exercise_category
from ironlog.training.periodization import (
    PERIODIZATION_PHASES,
    determine_current_phase,
    generate_periodized_workout,
)
from ironlog.training.rotation import (
    calculate_rotation_score,
    generate_rotation_suggestions,
    should_rotate_exercise,
)

router = APIRouter(prefix="/rotation", tags=["rotation"])

ACTIONS = ("suggestions", "rotation-check", "phase-info", "full-analysis")


def _last_workout(history: list[dict], exercise: str) -> Optional[dict]:
    return next((w for w in history if w["exercise"] == exercise), None)


@router.get("/")
def exercise_rotation(
    action: str = Query("suggestions"),
    exercise: Optional[str] = Query(None),
    max_suggestions: int = Query(3, gt=0),
    include_accessory: bool = Query(False),
    periodization_phase: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    if action not in ACTIONS:
        raise ValidationFailed(f"Invalid action. Use: {', '.join(ACTIONS)}")
    if action != "phase-info" and not exercise:
        raise ValidationFailed(f"Exercise parameter required for {action}")

    history = recent_history(db, user_id, settings.history_limit)
    logger.info(f"Rotation {action} for {exercise or '-'} over {len(history)} workouts")

    if action == "suggestions":
        return ok(
            {
                "exercise": exercise,
                "suggestions": generate_rotation_suggestions(
                    exercise,
                    history,
                    max_suggestions=max_suggestions,
                    include_accessory=include_accessory,
                    periodization_phase=periodization_phase,
                ),
                "total_workouts": len(history),
                "exercise_category": get_exercise_category(exercise),
            }
        )

    if action == "rotation-check":
        return ok(
            {
                "exercise": exercise,
                "rotation_recommendation": should_rotate_exercise(exercise, history),
                "rotation_score": calculate_rotation_score(exercise, history),
                "exercise_category": get_exercise_category(exercise),
            }
        )

    phase = determine_current_phase(history, start_date=start_date)

    if action == "phase-info":
        periodized = None
        if exercise:
            periodized = generate_periodized_workout(
                exercise, phase["phase"], _last_workout(history, exercise)
            )
        return ok(
            {
                "current_phase": phase,
                "periodized_workout": periodized,
                "available_phases": list(PERIODIZATION_PHASES),
                "phase_details": PERIODIZATION_PHASES[phase["phase"]],
            }
        )

    # full-analysis
    exercise_history = [w for w in history if w["exercise"] == exercise]
    last = exercise_history[0] if exercise_history else None
    return ok(
        {
            "exercise": exercise,
            "analysis": {
                "rotation_suggestions": generate_rotation_suggestions(
                    exercise,
                    history,
                    max_suggestions=max_suggestions,
                    include_accessory=include_accessory,
                    periodization_phase=periodization_phase,
                ),
                "rotation_recommendation": should_rotate_exercise(exercise, history),
                "rotation_score": calculate_rotation_score(exercise, history),
                "current_phase": phase,
                "periodized_workout": generate_periodized_workout(exercise, phase["phase"], last),
                "exercise_category": get_exercise_category(exercise),
                "exercise_history": {
                    "total_workouts": len(exercise_history),
                    "last_workout": last,
                    "recent_workouts": exercise_history[:5],
                },
            },
        }
    )

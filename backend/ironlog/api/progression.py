from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.api.workouts import recent_history
from ironlog.db import get_db
from ironlog.models.workout import Workout
from ironlog.training.overload import analyze_overload
from ironlog.training.progression import calculate_next_workout, format_progression_suggestion

router = APIRouter(prefix="/progression", tags=["progression"])


@router.get("/suggestion")
def progression_suggestion(
    exercise: str = Query(...),
    workouts_to_analyze: int = Query(20, gt=0),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    history = recent_history(db, user_id, workouts_to_analyze, exercise=exercise)
    result = calculate_next_workout(history, exercise)

    logger.info(f"Progression for {exercise} from {len(history)} workouts: {result['reason']}")
    return ok(
        {
            **result,
            "formatted": format_progression_suggestion(result),
            "workouts_analyzed": len(history),
            "recent_workouts": history[:5],
        }
    )


@router.get("/analysis")
def progression_analysis(
    exercise: Optional[str] = Query(None),
    timeframe: int = Query(90, gt=0),
    min_workouts: int = Query(3, gt=0),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Trend analysis over the last `timeframe` days, per exercise."""
    since = date.today() - timedelta(days=timeframe)
    query = db.query(Workout).filter(Workout.user_id == user_id, Workout.date >= since)
    if exercise:
        query = query.filter(Workout.exercise == exercise)
    rows = query.order_by(Workout.date.asc(), Workout.id.asc()).all()

    analysis = analyze_overload([w.as_history() for w in rows], timeframe, min_workouts=min_workouts)
    logger.info(f"Overload analysis for {user_id}: {analysis['summary']['exercises_analyzed']} exercises")
    return ok(analysis)

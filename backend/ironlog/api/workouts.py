from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy import func
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.core.constants import MAX_PAGE_SIZE
from ironlog.core.errors import RecordNotFound
from ironlog.db import get_db
from ironlog.models.workout import Workout
from ironlog.schemas.workout import Pagination, WorkoutCreate, WorkoutRead

router = APIRouter(prefix="/workouts", tags=["workouts"])

SORT_COLUMNS = {
    "date": Workout.date,
    "exercise": Workout.exercise,
    "weight": Workout.weight,
}


def recent_history(db: Session, user_id: str, limit: int, exercise: Optional[str] = None) -> list[dict]:
    """Latest workouts as plain dicts, most recent first."""
    query = db.query(Workout).filter(Workout.user_id == user_id)
    if exercise is not None:
        query = query.filter(Workout.exercise == exercise)
    rows = query.order_by(Workout.date.desc(), Workout.id.desc()).limit(limit).all()
    return [w.as_history() for w in rows]


@router.post("/")
def log_workout(
    payload: WorkoutCreate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    workout = Workout(user_id=user_id, **payload.model_dump())
    db.add(workout)
    db.commit()
    db.refresh(workout)

    logger.info(f"Logged workout {workout.id}: {workout.exercise} {workout.sets}x{workout.reps} @ {workout.weight}")
    return ok(WorkoutRead.model_validate(workout), message="Workout logged successfully")


@router.get("/")
def list_workouts(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    exercise: Optional[str] = Query(None),
    limit: int = Query(MAX_PAGE_SIZE, gt=0),
    offset: int = Query(0, ge=0),
    sort_by: Literal["date", "exercise", "weight"] = Query("date"),
    sort_direction: Literal["asc", "desc"] = Query("desc"),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    """
    List workouts strictly between start_date and end_date.

      GET /workouts?start_date=2025-01-05&end_date=2025-01-13&exercise=squat
    """
    limit = min(limit, MAX_PAGE_SIZE)
    query = db.query(Workout).filter(Workout.user_id == user_id)

    # Both bounds are exclusive
    if start_date is not None:
        query = query.filter(Workout.date > start_date)
    if end_date is not None:
        query = query.filter(Workout.date < end_date)
    if exercise:
        query = query.filter(func.lower(Workout.exercise).contains(exercise.lower(), autoescape=True))

    total = query.count()

    column = SORT_COLUMNS[sort_by]
    order = column.asc() if sort_direction == "asc" else column.desc()
    rows = query.order_by(order, Workout.id.desc()).offset(offset).limit(limit).all()

    logger.info(f"Retrieved {len(rows)} of {total} workouts for {user_id}")
    return ok(
        [WorkoutRead.model_validate(w) for w in rows],
        count=len(rows),
        pagination=Pagination(offset=offset, limit=limit, total=total, has_more=offset + len(rows) < total),
    )


@router.delete("/{workout_id}")
def delete_workout(
    workout_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    workout = (
        db.query(Workout)
        .filter(Workout.id == workout_id, Workout.user_id == user_id)
        .first()
    )
    if not workout:
        raise RecordNotFound("Workout", workout_id)

    db.delete(workout)
    db.commit()

    logger.info(f"Deleted workout {workout_id}")
    return ok({"id": workout_id}, message="Workout deleted successfully")

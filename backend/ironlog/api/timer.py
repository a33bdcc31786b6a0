import time
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ironlog.api.common import current_user, ok
from ironlog.core.errors import ValidationFailed
from ironlog.core.time_utils import as_date, format_duration
from ironlog.db import get_db
from ironlog.models.timer_session import TimerSession
from ironlog.schemas.timer import SetEnd, SetStart
from ironlog.training.workout_timer import (
    WorkoutTimer,
    calculate_workout_metrics,
    generate_duration_recommendations,
)

router = APIRouter(prefix="/timer", tags=["timer"])


def get_clock() -> Callable[[], float]:
    # Overridden in tests to drive the timer deterministically
    return time.time


def _open_session(db: Session, user_id: str) -> Optional[TimerSession]:
    return (
        db.query(TimerSession)
        .filter(TimerSession.user_id == user_id, TimerSession.completed_at.is_(None))
        .order_by(TimerSession.id.desc())
        .first()
    )


def _require_open(db: Session, user_id: str) -> TimerSession:
    row = _open_session(db, user_id)
    if row is None:
        raise ValidationFailed("No active workout timer")
    return row


def _save(db: Session, row: TimerSession, timer: WorkoutTimer) -> None:
    row.state = timer.to_dict()
    # JSON columns are not mutation-tracked
    flag_modified(row, "state")
    db.commit()
    db.refresh(row)


def _view(row: Optional[TimerSession], timer: WorkoutTimer) -> dict:
    elapsed = timer.elapsed()
    return {
        "session_id": row.id if row is not None else None,
        "state": timer.state,
        "elapsed": elapsed,
        "elapsed_display": format_duration(elapsed),
        "current_rest": timer.current_rest(),
        "current_set": timer.current_set,
        "current_exercise": timer.current_exercise["name"] if timer.current_exercise else None,
        "summary": timer.summary(),
    }


@router.get("/")
def get_timer(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _open_session(db, user_id)
    timer = WorkoutTimer.from_dict(row.state if row else None, clock=clock)
    return ok(_view(row, timer))


@router.post("/start")
def start_timer(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _open_session(db, user_id)
    if row is None:
        row = TimerSession(user_id=user_id, state={})
        db.add(row)

    timer = WorkoutTimer.from_dict(row.state, clock=clock)
    timer.start()
    _save(db, row, timer)

    logger.info(f"Timer {row.id} running for {user_id}")
    return ok(_view(row, timer))


@router.post("/pause")
def pause_timer(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _require_open(db, user_id)
    timer = WorkoutTimer.from_dict(row.state, clock=clock)
    timer.pause()
    _save(db, row, timer)
    return ok(_view(row, timer))


@router.post("/stop")
def stop_timer(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _require_open(db, user_id)
    timer = WorkoutTimer.from_dict(row.state, clock=clock)
    result = timer.stop()

    row.summary = result["summary"]
    row.completed_at = datetime.now(timezone.utc)
    _save(db, row, timer)

    logger.info(f"Timer {row.id} stopped for {user_id} after {format_duration(result['total_duration'])}")
    return ok({"session_id": row.id, **result})


@router.post("/reset")
def reset_timer(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _open_session(db, user_id)
    if row is not None:
        session_id = row.id
        db.delete(row)
        db.commit()
        logger.info(f"Discarded open timer {session_id} for {user_id}")
    return ok(_view(None, WorkoutTimer(clock=clock)))


@router.post("/sets/start")
def start_set(
    payload: SetStart,
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _require_open(db, user_id)
    timer = WorkoutTimer.from_dict(row.state, clock=clock)
    timer.start_set(payload.exercise, payload.set_number)
    _save(db, row, timer)
    return ok(_view(row, timer))


@router.post("/sets/end")
def end_set(
    payload: SetEnd,
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _require_open(db, user_id)
    timer = WorkoutTimer.from_dict(row.state, clock=clock)
    if timer.current_set is None:
        raise ValidationFailed("No set in progress")
    finished = timer.end_set(reps=payload.reps, weight=payload.weight)
    _save(db, row, timer)
    return ok({**_view(row, timer), "finished_set": finished})


@router.post("/rest/end")
def end_rest(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    row = _require_open(db, user_id)
    timer = WorkoutTimer.from_dict(row.state, clock=clock)
    rested = timer.current_rest()
    timer.end_rest()
    _save(db, row, timer)
    return ok({**_view(row, timer), "rest_duration": rested})


@router.get("/analytics")
def timer_analytics(
    user_id: str = Depends(current_user),
    clock: Callable[[], float] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(TimerSession)
        .filter(TimerSession.user_id == user_id, TimerSession.completed_at.is_not(None))
        .order_by(TimerSession.completed_at.asc())
        .all()
    )
    sessions = [{**(r.summary or {}), "date": as_date(r.completed_at)} for r in rows]
    metrics = calculate_workout_metrics(sessions)

    current = None
    open_row = _open_session(db, user_id)
    if open_row is not None:
        current = WorkoutTimer.from_dict(open_row.state, clock=clock).summary()

    return ok(
        {
            "metrics": metrics,
            "recommendations": generate_duration_recommendations(metrics, current),
        }
    )

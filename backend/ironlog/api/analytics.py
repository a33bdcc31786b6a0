from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.api.goals import goal_view
from ironlog.core.errors import ValidationFailed
from ironlog.core.time_utils import as_date
from ironlog.db import get_db
from ironlog.models.body_weight import BodyWeight
from ironlog.models.goal import Goal
from ironlog.models.personal_record import PersonalRecord
from ironlog.models.timer_session import TimerSession
from ironlog.models.workout import Workout
from ironlog.schemas.body_weight import BodyWeightRead
from ironlog.schemas.personal_record import PersonalRecordRead
from ironlog.training.analytics import (
    analyze_goals,
    analyze_progress,
    analyze_weight,
    analyze_workouts,
    build_summary,
    generate_insights,
    strength_progression,
    weekly_report,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _workouts_between(db: Session, user_id: str, start: date, end: Optional[date] = None) -> list[dict]:
    query = db.query(Workout).filter(Workout.user_id == user_id, Workout.date >= start)
    if end is not None:
        query = query.filter(Workout.date <= end)
    return [w.as_history() for w in query.order_by(Workout.date.asc(), Workout.id.asc()).all()]


def _weights_between(db: Session, user_id: str, start: date, end: Optional[date] = None) -> list[dict]:
    query = db.query(BodyWeight).filter(BodyWeight.user_id == user_id, BodyWeight.date >= start)
    if end is not None:
        query = query.filter(BodyWeight.date <= end)
    rows = query.order_by(BodyWeight.date.asc(), BodyWeight.id.asc()).all()
    return [BodyWeightRead.model_validate(r).model_dump() for r in rows]


def _prs_between(db: Session, user_id: str, start: date, end: Optional[date] = None) -> list[dict]:
    query = db.query(PersonalRecord).filter(
        PersonalRecord.user_id == user_id, PersonalRecord.date_achieved >= start
    )
    if end is not None:
        query = query.filter(PersonalRecord.date_achieved <= end)
    rows = query.order_by(PersonalRecord.date_achieved.asc(), PersonalRecord.id.asc()).all()
    return [PersonalRecordRead.model_validate(r).model_dump() for r in rows]


@router.get("/")
def get_analytics(
    timeframe: int = Query(30, gt=0),
    include_workouts: bool = Query(True),
    include_weight: bool = Query(True),
    include_goals: bool = Query(True),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Dashboard sections over the last `timeframe` days plus summary and insights."""
    start = date.today() - timedelta(days=timeframe)
    analytics: dict = {}

    if include_workouts:
        workouts = _workouts_between(db, user_id, start)
        analytics["workout_analytics"] = analyze_workouts(workouts, timeframe)
        analytics["strength_progression"] = strength_progression(workouts)

    if include_weight:
        analytics["weight_analytics"] = analyze_weight(_weights_between(db, user_id, start))

    if include_goals:
        goals = db.query(Goal).filter(Goal.user_id == user_id).all()
        analytics["goal_analytics"] = analyze_goals([goal_view(g).model_dump() for g in goals])

    analytics["progress_analytics"] = analyze_progress(_prs_between(db, user_id, start), timeframe)
    analytics["summary"] = build_summary(analytics)
    analytics["insights"] = generate_insights(analytics)

    logger.info(f"Built {timeframe}-day analytics for {user_id}")
    return ok(analytics, timeframe=timeframe)


@router.get("/weekly-report")
def get_weekly_report(
    week_start: Optional[date] = Query(None),
    week_end: Optional[date] = Query(None),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Everything logged between `week_start` and `week_end`, both inclusive."""
    if week_start is None or week_end is None:
        raise ValidationFailed("week_start and week_end parameters are required")
    if week_end < week_start:
        raise ValidationFailed("week_end must not be before week_start")

    sessions = (
        db.query(TimerSession)
        .filter(TimerSession.user_id == user_id, TimerSession.completed_at.is_not(None))
        .all()
    )
    durations = [
        (s.summary or {}).get("total_duration") or 0
        for s in sessions
        if week_start <= as_date(s.completed_at) <= week_end
    ]

    achieved = [
        goal_view(g).model_dump()
        for g in db.query(Goal).filter(Goal.user_id == user_id, Goal.status == "Completed").all()
        if g.updated_at is not None and week_start <= as_date(g.updated_at) <= week_end
    ]

    report = weekly_report(
        workouts=_workouts_between(db, user_id, week_start, week_end),
        weights=_weights_between(db, user_id, week_start, week_end),
        prs=_prs_between(db, user_id, week_start, week_end),
        goals_achieved=achieved,
        durations=durations,
    )

    logger.info(f"Weekly report {week_start}..{week_end} for {user_id}: {report['summary']['total_workouts']} days")
    return ok(report, week_start=week_start, week_end=week_end)

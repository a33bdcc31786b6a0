from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy import func
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.api.workouts import recent_history
from ironlog.core.constants import DEFAULT_GOAL_LIMIT, GOAL_TRANSITIONS, PREDICTION_HISTORY
from ironlog.core.errors import RecordNotFound, ValidationFailed
from ironlog.core.time_utils import as_date, monday_of
from ironlog.db import get_db
from ironlog.models.body_weight import BodyWeight
from ironlog.models.goal import Goal
from ironlog.models.workout import Workout
from ironlog.schemas.goal import GoalArchiveRequest, GoalCreate, GoalRead, GoalUpdate
from ironlog.training.goal_predictions import predict_goal, summarize_predictions

router = APIRouter(prefix="/goals", tags=["goals"])


def progress_percentage(current: float, target: float) -> float:
    if not target or target <= 0:
        return 0.0
    return round(min(current / target * 100, 100), 2)


def milestone_status(progress: float) -> str:
    if progress >= 100:
        return "completed"
    if progress >= 75:
        return "milestone_75"
    if progress >= 50:
        return "milestone_50"
    if progress >= 25:
        return "milestone_25"
    return "started"


def urgency_level(days_remaining: int, progress: float) -> str:
    if days_remaining < 0:
        return "overdue"
    if days_remaining <= 7 and progress < 80:
        return "critical"
    if days_remaining <= 14 and progress < 60:
        return "urgent"
    if days_remaining <= 30 and progress < 40:
        return "moderate"
    return "low"


def goal_title(goal_type: str, title: Optional[str], exercise_name: Optional[str]) -> str:
    if title:
        return title
    if goal_type == "Exercise PR" and exercise_name:
        return f"{exercise_name} PR Goal"
    if goal_type == "Frequency" and exercise_name:
        return f"{exercise_name} Frequency Goal"
    return goal_type


def goal_view(goal: Goal, today: Optional[date] = None) -> GoalRead:
    """Stored goal plus the fields derived from progress and the calendar."""
    today = today or date.today()
    current = float(goal.current_value or 0)
    target = float(goal.target_value or 0)

    progress = progress_percentage(current, target)
    days_remaining = (goal.target_date - today).days

    return GoalRead(
        id=goal.id,
        user_id=goal.user_id,
        goal_type=goal.goal_type,
        title=goal.title,
        goal_title=goal_title(goal.goal_type, goal.title, goal.exercise_name),
        target_value=target,
        current_value=current,
        target_date=goal.target_date,
        exercise_name=goal.exercise_name,
        status=goal.status,
        priority=goal.priority,
        notes=goal.notes,
        created_at=goal.created_at,
        progress_percentage=progress,
        days_remaining=days_remaining,
        milestone_status=milestone_status(progress),
        is_overdue=days_remaining < 0 and goal.status == "Active",
        urgency_level=urgency_level(days_remaining, progress),
    )


def check_transition(current: str, new: str) -> None:
    if new == current:
        return
    if new not in GOAL_TRANSITIONS.get(current, set()):
        raise ValidationFailed(f"Cannot change goal status from {current} to {new}")


def _get_goal(db: Session, goal_id: int, user_id: str) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user_id).first()
    if not goal:
        raise RecordNotFound("Goal", goal_id)
    return goal


@router.get("/")
def list_goals(
    status: str = Query("Active"),
    goal_type: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_GOAL_LIMIT, gt=0),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    query = db.query(Goal).filter(Goal.user_id == user_id)
    # "all" disables the status filter
    if status != "all":
        query = query.filter(Goal.status == status)
    if goal_type:
        query = query.filter(Goal.goal_type == goal_type)
    if priority:
        query = query.filter(Goal.priority == priority)

    rows = query.order_by(Goal.created_at.desc(), Goal.id.desc()).limit(limit).all()
    logger.info(f"Retrieved {len(rows)} goals for {user_id}")
    return ok([goal_view(g) for g in rows], count=len(rows))


@router.post("/archive")
def archive_goals(
    payload: GoalArchiveRequest,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    if payload.goal_id is not None:
        goal = _get_goal(db, payload.goal_id, user_id)
        if goal.status != "Completed":
            raise ValidationFailed("Only completed goals can be archived")
        goals = [goal]
    elif payload.archive_all:
        goals = (
            db.query(Goal)
            .filter(Goal.user_id == user_id, Goal.status == "Completed")
            .all()
        )
    else:
        raise ValidationFailed("Provide goal_id or archive_all")

    for goal in goals:
        goal.status = "Archived"
    db.commit()

    logger.info(f"Archived {len(goals)} goals for {user_id}")
    return ok(
        {"archived_count": len(goals), "archived_ids": [g.id for g in goals]},
        message=f"Archived {len(goals)} goal(s)",
    )


def recalculated_value(db: Session, goal: Goal, today: date) -> Optional[float]:
    """Fresh current_value for a goal from logged data, None when unknown."""
    if goal.goal_type == "Body Weight":
        latest = (
            db.query(BodyWeight)
            .filter(BodyWeight.user_id == goal.user_id)
            .order_by(BodyWeight.date.desc(), BodyWeight.id.desc())
            .first()
        )
        return float(latest.weight) if latest else None

    if goal.goal_type == "Exercise PR":
        if not goal.exercise_name:
            return None
        best = (
            db.query(func.max(Workout.weight))
            .filter(Workout.user_id == goal.user_id, Workout.exercise == goal.exercise_name)
            .scalar()
        )
        return float(best) if best is not None else None

    if goal.goal_type == "Frequency":
        # created_at is UTC and can run a day ahead of the local date
        since = min(as_date(goal.created_at) or today, today)
        sessions = (
            db.query(func.count(func.distinct(Workout.date)))
            .filter(Workout.user_id == goal.user_id, Workout.date >= since)
            .scalar()
        )
        return float(sessions or 0)

    if goal.goal_type == "Volume":
        week_start = monday_of(today)
        rows = (
            db.query(Workout)
            .filter(Workout.user_id == goal.user_id, Workout.date >= week_start)
            .all()
        )
        return float(sum(w.sets * w.reps * float(w.weight or 0) for w in rows))

    # Custom goals are tracked by hand
    return None


@router.post("/recalculate")
def recalculate_goals(
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    today = date.today()
    goals = db.query(Goal).filter(Goal.user_id == user_id, Goal.status == "Active").all()

    updates = []
    for goal in goals:
        new_value = recalculated_value(db, goal, today)
        if new_value is None:
            continue
        old_value = float(goal.current_value or 0)
        goal.current_value = new_value
        updates.append(
            {
                "goal_id": goal.id,
                "goal_type": goal.goal_type,
                "old_value": old_value,
                "new_value": new_value,
                "old_progress": progress_percentage(old_value, float(goal.target_value)),
                "new_progress": progress_percentage(new_value, float(goal.target_value)),
            }
        )
    db.commit()

    updated = sum(1 for u in updates if u["new_value"] != u["old_value"])
    logger.info(f"Recalculated {len(goals)} goals for {user_id}, {updated} changed")
    return ok(
        updates,
        summary={"total_goals": len(goals), "updated_goals": updated},
    )


@router.get("/predictions")
def goal_predictions(
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Likelihood of each active goal being met, soonest target first."""
    today = date.today()
    goals = (
        db.query(Goal)
        .filter(Goal.user_id == user_id, Goal.status == "Active")
        .order_by(Goal.target_date.asc(), Goal.id.asc())
        .all()
    )
    if not goals:
        return ok([], summary=summarize_predictions([]), message="No active goals found")

    workouts = recent_history(db, user_id, limit=PREDICTION_HISTORY)
    weights = [
        {"date": w.date, "weight": float(w.weight)}
        for w in db.query(BodyWeight)
        .filter(BodyWeight.user_id == user_id)
        .order_by(BodyWeight.date.desc(), BodyWeight.id.desc())
        .limit(PREDICTION_HISTORY)
        .all()
    ]

    predictions = [predict_goal(goal_view(g, today).model_dump(), workouts, weights, today) for g in goals]
    logger.info(f"Predicted {len(predictions)} goals for {user_id}")
    return ok(predictions, summary=summarize_predictions(predictions))


@router.get("/{goal_id}")
def get_goal(
    goal_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    return ok(goal_view(_get_goal(db, goal_id, user_id)))


@router.post("/", status_code=201)
def create_goal(
    payload: GoalCreate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    if payload.target_value <= 0:
        raise ValidationFailed("Target value must be positive")
    if payload.target_date <= date.today():
        raise ValidationFailed("Target date must be in the future")

    goal = Goal(user_id=user_id, status="Active", **payload.model_dump())
    db.add(goal)
    db.commit()
    db.refresh(goal)

    logger.info(f"Created {goal.goal_type} goal {goal.id} for {user_id}")
    return ok(goal_view(goal), message="Goal created successfully")


@router.put("/{goal_id}")
def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    goal = _get_goal(db, goal_id, user_id)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("status") is not None:
        check_transition(goal.status, update_data["status"])
    if update_data.get("target_value") is not None and update_data["target_value"] <= 0:
        raise ValidationFailed("Target value must be positive")

    for key, value in update_data.items():
        if value is None and key in ("target_value", "current_value", "target_date", "status", "priority"):
            continue
        setattr(goal, key, value)

    db.commit()
    db.refresh(goal)

    logger.info(f"Updated goal {goal_id}")
    return ok(goal_view(goal), message="Goal updated successfully")


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    goal = _get_goal(db, goal_id, user_id)
    db.delete(goal)
    db.commit()

    logger.info(f"Deleted goal {goal_id}")
    return ok({"id": goal_id}, message="Goal deleted successfully")

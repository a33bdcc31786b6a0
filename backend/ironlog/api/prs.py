from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.core.constants import estimated_1rm
from ironlog.db import get_db
from ironlog.models.personal_record import PersonalRecord
from ironlog.models.workout import Workout
from ironlog.schemas.personal_record import PersonalRecordRead

router = APIRouter(prefix="/prs", tags=["personal-records"])


def best_sets(workouts: list[dict]) -> dict[str, dict]:
    """Per exercise, the set with the highest estimated 1RM (first one wins ties)."""
    best: dict[str, dict] = {}
    for w in workouts:
        e1rm = estimated_1rm(w["weight"], w["reps"])
        current = best.get(w["exercise"])
        if current is None or e1rm > current["estimated_1rm"]:
            best[w["exercise"]] = {**w, "estimated_1rm": e1rm}
    return best


@router.post("/detect")
def detect_prs(
    days: int = Query(7, gt=0),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    since = date.today() - timedelta(days=days)
    rows = (
        db.query(Workout)
        .filter(Workout.user_id == user_id, Workout.date > since)
        .order_by(Workout.date.desc(), Workout.id.desc())
        .all()
    )
    if not rows:
        return ok([], message="No recent workouts found", total_workouts_checked=0)

    new_prs = []
    for exercise, top in best_sets([w.as_history() for w in rows]).items():
        current = (
            db.query(PersonalRecord)
            .filter(PersonalRecord.user_id == user_id, PersonalRecord.exercise == exercise)
            .order_by(PersonalRecord.max_weight.desc())
            .first()
        )
        previous = float(current.max_weight) if current else 0.0
        if current is not None and top["weight"] <= previous:
            continue

        record = PersonalRecord(
            user_id=user_id,
            exercise=exercise,
            max_weight=top["weight"],
            reps=top["reps"],
            date_achieved=top["date"],
            workout_id=top["id"],
            previous_pr=previous,
        )
        db.add(record)
        db.flush()
        new_prs.append(
            {
                "id": record.id,
                "exercise": exercise,
                "new_pr": top["weight"],
                "previous_pr": previous,
                "improvement": top["weight"] - previous,
                "reps": top["reps"],
                "date_achieved": top["date"],
                "estimated_1rm": round(top["estimated_1rm"], 1),
            }
        )
    db.commit()

    logger.info(f"Detected {len(new_prs)} new PRs for {user_id} across {len(rows)} workouts")
    return ok(
        new_prs,
        message=f"Found {len(new_prs)} new personal records!",
        total_workouts_checked=len(rows),
    )


@router.get("/")
def list_prs(
    exercise: Optional[str] = Query(None),
    limit: int = Query(100, gt=0),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    query = db.query(PersonalRecord).filter(PersonalRecord.user_id == user_id)
    if exercise:
        query = query.filter(PersonalRecord.exercise == exercise)
    rows = query.order_by(PersonalRecord.date_achieved.desc(), PersonalRecord.id.desc()).limit(limit).all()

    all_prs = [PersonalRecordRead.model_validate(r) for r in rows]

    # Latest record per exercise; rows are newest first
    current: dict[str, PersonalRecordRead] = {}
    for pr in all_prs:
        current.setdefault(pr.exercise, pr)

    return ok(
        {
            "all_prs": all_prs,
            "current_prs": list(current.values()),
            "summary": {"total_exercises": len(current), "total_prs": len(all_prs)},
        }
    )

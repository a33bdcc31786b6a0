from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.core.config import settings
from ironlog.core.errors import RecordNotFound, ValidationFailed
from ironlog.db import get_db
from ironlog.models.body_weight import BodyWeight
from ironlog.schemas.body_weight import BodyWeightCreate, BodyWeightRead, BodyWeightUpdate
from ironlog.training.weight_trend import moving_averages, weight_trend

router = APIRouter(prefix="/weights", tags=["weights"])


def _reject_future(d: date) -> None:
    if d > date.today():
        raise ValidationFailed("Date cannot be in the future")


def _get_entry(db: Session, entry_id: int, user_id: str) -> BodyWeight:
    entry = (
        db.query(BodyWeight)
        .filter(BodyWeight.id == entry_id, BodyWeight.user_id == user_id)
        .first()
    )
    if not entry:
        raise RecordNotFound("Weight entry", entry_id)
    return entry


@router.post("/")
def log_weight(
    payload: BodyWeightCreate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    _reject_future(payload.date)

    entry = BodyWeight(
        user_id=user_id,
        weight=payload.weight,
        unit=payload.unit or settings.weight_unit,
        date=payload.date,
        notes=payload.notes,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info(f"Logged body weight {entry.weight}{entry.unit} for {user_id} on {entry.date}")
    return ok(BodyWeightRead.model_validate(entry), message="Weight logged successfully")


@router.get("/")
def list_weights(
    days: Optional[int] = Query(None, gt=0),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Entries oldest first with 7/30-entry moving averages and the current trend."""
    query = db.query(BodyWeight).filter(BodyWeight.user_id == user_id)
    if days is not None:
        query = query.filter(BodyWeight.date >= date.today() - timedelta(days=days))
    rows = query.order_by(BodyWeight.date.asc(), BodyWeight.id.asc()).all()

    entries = [BodyWeightRead.model_validate(r).model_dump() for r in rows]
    logger.info(f"Retrieved {len(entries)} weight entries for {user_id}")

    return ok(
        moving_averages(entries),
        count=len(entries),
        trend=weight_trend(entries),
    )


@router.put("/{entry_id}")
def update_weight(
    entry_id: int,
    payload: BodyWeightUpdate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    entry = _get_entry(db, entry_id, user_id)

    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("date") is not None:
        _reject_future(update_data["date"])

    for key, value in update_data.items():
        if value is None and key in ("weight", "date", "unit"):
            continue
        setattr(entry, key, value)

    db.commit()
    db.refresh(entry)

    logger.info(f"Updated weight entry {entry_id}")
    return ok(BodyWeightRead.model_validate(entry))


@router.delete("/{entry_id}")
def delete_weight(
    entry_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    entry = _get_entry(db, entry_id, user_id)
    db.delete(entry)
    db.commit()

    logger.info(f"Deleted weight entry {entry_id}")
    return ok({"id": entry_id}, message="Weight entry deleted successfully")

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ironlog.core.constants import MAX_BODY_WEIGHT


class BodyWeightCreate(BaseModel):
    weight: float = Field(gt=0, le=MAX_BODY_WEIGHT)
    date: dt.date
    unit: Optional[str] = None  # falls back to settings.weight_unit
    notes: Optional[str] = None


class BodyWeightUpdate(BaseModel):
    """All fields optional; only the ones sent are changed."""

    weight: Optional[float] = Field(default=None, gt=0, le=MAX_BODY_WEIGHT)
    date: Optional[dt.date] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class BodyWeightRead(BaseModel):
    id: int
    user_id: str
    weight: float
    unit: str
    date: dt.date
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)

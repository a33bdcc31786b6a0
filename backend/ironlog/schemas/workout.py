from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkoutBase(BaseModel):
    exercise: str
    sets: int = Field(gt=0)
    reps: int = Field(gt=0)
    weight: float = Field(default=0, ge=0)  # 0 for bodyweight movements
    date: date
    notes: Optional[str] = None

    @field_validator("exercise")
    @classmethod
    def _strip_exercise(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("exercise must not be blank")
        return v


class WorkoutCreate(WorkoutBase):
    """Schema for logging a workout."""
    pass


class WorkoutRead(WorkoutBase):
    """Schema returned when reading a workout."""

    id: int
    user_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    offset: int
    limit: int
    total: int
    has_more: bool

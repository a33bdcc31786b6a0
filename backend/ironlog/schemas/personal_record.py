import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PersonalRecordRead(BaseModel):
    id: int
    exercise: str
    max_weight: float
    reps: int
    date_achieved: dt.date
    workout_id: Optional[int] = None
    previous_pr: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

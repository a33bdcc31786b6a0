from typing import Optional

from pydantic import BaseModel, Field


class SetStart(BaseModel):
    exercise: str
    set_number: int = Field(default=1, gt=0)


class SetEnd(BaseModel):
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

GoalType = Literal["Body Weight", "Exercise PR", "Frequency", "Volume", "Custom"]
GoalStatus = Literal["Active", "Paused", "Completed", "Cancelled", "Archived"]
GoalPriority = Literal["Low", "Medium", "High"]


class GoalCreate(BaseModel):
    goal_type: GoalType
    title: Optional[str] = None
    target_value: float
    current_value: float = 0
    target_date: dt.date
    exercise_name: Optional[str] = None
    priority: GoalPriority = "Medium"
    notes: Optional[str] = None


class GoalUpdate(BaseModel):
    """Partial update; `status` moves are checked against the allowed transitions."""

    title: Optional[str] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    target_date: Optional[dt.date] = None
    exercise_name: Optional[str] = None
    status: Optional[GoalStatus] = None
    priority: Optional[GoalPriority] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class GoalRead(BaseModel):
    id: int
    user_id: str
    goal_type: str
    title: Optional[str] = None
    goal_title: str
    target_value: float
    current_value: float
    target_date: dt.date
    exercise_name: Optional[str] = None
    status: str
    priority: str
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    # Derived on read
    progress_percentage: float
    days_remaining: int
    milestone_status: str
    is_overdue: bool
    urgency_level: str


class GoalArchiveRequest(BaseModel):
    goal_id: Optional[int] = None
    archive_all: bool = False

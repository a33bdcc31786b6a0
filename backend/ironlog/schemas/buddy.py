import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BuddyRequestCreate(BaseModel):
    target_user_id: str
    message: Optional[str] = None


class BuddyRequestRead(BaseModel):
    id: int
    sender_id: str
    receiver_id: str
    status: str
    message: Optional[str] = None
    request_date: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BuddyConnectionRead(BaseModel):
    id: int
    buddy_id: str
    connected_date: Optional[dt.datetime] = None
    connection_strength: int
    shared_goals: int
    interaction_count: int
    last_interaction: Optional[dt.datetime] = None


class ShareGoalRequest(BaseModel):
    goal_id: int
    buddy_id: str
    share_level: str = "progress"


class SharedGoalRead(BaseModel):
    id: int
    goal_id: int
    owner_id: str
    shared_with_id: str
    share_level: str
    shared_date: Optional[dt.datetime] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class EncouragementCreate(BaseModel):
    receiver_id: str
    message: str
    type: str = "general"

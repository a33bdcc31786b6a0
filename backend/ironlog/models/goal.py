from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric
from sqlalchemy.sql import func
from ironlog.db import Base


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    # Body Weight, Exercise PR, Frequency, Volume, Custom
    goal_type = Column(String(20), nullable=False)
    title = Column(String, nullable=True)
    exercise_name = Column(String, nullable=True)

    target_value = Column(Numeric(10, 2), nullable=False)
    current_value = Column(Numeric(10, 2), nullable=False, default=0, server_default="0")
    target_date = Column(Date, nullable=False)

    # Active, Paused, Completed, Cancelled, Archived
    status = Column(String(20), nullable=False, default="Active", server_default="Active", index=True)
    priority = Column(String(10), nullable=False, default="Medium", server_default="Medium")
    notes = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

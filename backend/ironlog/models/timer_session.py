from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from ironlog.db import Base


class TimerSession(Base):
    __tablename__ = "timer_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    # WorkoutTimer.to_dict() output
    state = Column(JSON, nullable=False, default=dict)
    # summary() captured at stop, used for duration analytics
    summary = Column(JSON, nullable=True)

    # Set when the timer is stopped; open sessions have NULL here
    completed_at = Column(DateTime(timezone=True), nullable=True, index=True)

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

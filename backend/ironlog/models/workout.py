from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric
from sqlalchemy.sql import func
from ironlog.db import Base


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    exercise = Column(String, nullable=False, index=True)
    sets = Column(Integer, nullable=False)
    reps = Column(Integer, nullable=False)
    # Bodyweight movements are logged with weight 0
    weight = Column(Numeric(7, 2), nullable=False, server_default="0")

    date = Column(Date, nullable=False, index=True)
    notes = Column(String, nullable=True)

    # Workouts are append-only; no updated_at
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def as_history(self) -> dict:
        """Plain dict consumed by the training calculators."""
        return {
            "id": self.id,
            "exercise": self.exercise,
            "sets": self.sets,
            "reps": self.reps,
            "weight": float(self.weight or 0),
            "date": self.date,
        }

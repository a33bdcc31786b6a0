from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey
from ironlog.db import Base


class PersonalRecord(Base):
    __tablename__ = "personal_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    exercise = Column(String, nullable=False, index=True)
    max_weight = Column(Numeric(7, 2), nullable=False)
    reps = Column(Integer, nullable=False)
    date_achieved = Column(Date, nullable=False)

    # Workout the record came from; kept if the workout is later deleted
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True)
    previous_pr = Column(Numeric(7, 2), nullable=True)

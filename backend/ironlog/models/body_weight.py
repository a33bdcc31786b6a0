from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric
from sqlalchemy.sql import func
from ironlog.db import Base


class BodyWeight(Base):
    __tablename__ = "body_weights"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    weight = Column(Numeric(6, 2), nullable=False)
    unit = Column(String(8), nullable=False, server_default="lbs")
    date = Column(Date, nullable=False, index=True)
    notes = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

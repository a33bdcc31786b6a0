from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, false, true
from sqlalchemy.sql import func
from ironlog.db import Base


class BuddyConnection(Base):
    __tablename__ = "buddy_connections"

    id = Column(Integer, primary_key=True, index=True)

    # Relation is symmetric once accepted; sender only matters while pending
    sender_id = Column(String, nullable=False, index=True)
    receiver_id = Column(String, nullable=False, index=True)

    status = Column(String(12), nullable=False, server_default="pending")  # pending, accepted, removed
    message = Column(String, nullable=True)

    request_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    connected_date = Column(DateTime(timezone=True), nullable=True)
    last_interaction = Column(DateTime(timezone=True), nullable=True)
    interaction_count = Column(Integer, nullable=False, default=0, server_default="0")

    removed_date = Column(DateTime(timezone=True), nullable=True)
    removed_by = Column(String, nullable=True)

    def other_party(self, user_id: str) -> str:
        return self.receiver_id if self.sender_id == user_id else self.sender_id


class SharedGoal(Base):
    __tablename__ = "shared_goals"

    id = Column(Integer, primary_key=True, index=True)

    owner_id = Column(String, nullable=False, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    shared_with_id = Column(String, nullable=False, index=True)

    share_level = Column(String(20), nullable=False, server_default="progress")
    shared_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_date = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())


class BuddyInteraction(Base):
    __tablename__ = "buddy_interactions"

    id = Column(Integer, primary_key=True, index=True)

    sender_id = Column(String, nullable=False, index=True)
    receiver_id = Column(String, nullable=False, index=True)

    interaction_type = Column(String(20), nullable=False, server_default="encouragement")
    subtype = Column(String(20), nullable=False, server_default="general")
    message = Column(String, nullable=True)

    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    is_read = Column(Boolean, nullable=False, default=False, server_default=false())

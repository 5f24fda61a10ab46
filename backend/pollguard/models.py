import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from .database import Base


class Poll(Base):
    __tablename__ = "polls"
    __table_args__ = (Index("idx_polls_user", "user_id"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(100), nullable=False)  # auth provider user id - NO FK
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    votes = relationship(
        "Vote",
        back_populates="poll",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (Index("idx_votes_poll", "poll_id"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    poll_id = Column(Uuid(as_uuid=True), ForeignKey("polls.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(100), nullable=True)  # anonymous votes allowed
    option_index = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    poll = relationship("Poll", back_populates="votes")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(100), primary_key=True)  # auth provider user id
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

import enum
from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base import AbstractSQLModel
from app.db.mixins import TimestampsMixin
from app.core.utils.db_fields import TZAwareDateTime


class EventStatus(str, enum.Enum):
    upcoming = "upcoming"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class Events(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(TZAwareDateTime(timezone=True), nullable=False, index=True)
    location = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=EventStatus.upcoming.value)
    max_participants = Column(Integer, nullable=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    creator = relationship("Users")
    participants = relationship(
        "Users",
        secondary="event_participants_link",
        order_by="EventParticipantsLink.id",
        viewonly=True,
    )


class EventParticipantsLink(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "event_participants_link"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (UniqueConstraint("event_id", "user_id"),)

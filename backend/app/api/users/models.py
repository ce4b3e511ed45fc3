import enum
from sqlalchemy import (
    JSON,
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


class EventRelation(str, enum.Enum):
    joined = "joined"
    created = "created"


class Users(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False, unique=True)
    password = Column(String(100), nullable=False)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    causes = Column(JSON, nullable=False, default=list)

    joined_events = relationship(
        "Events",
        secondary="user_events_link",
        primaryjoin="and_(Users.id == UserEventsLink.user_id, "
        "UserEventsLink.relation == 'joined')",
        secondaryjoin="Events.id == UserEventsLink.event_id",
        order_by="Events.date",
        viewonly=True,
    )
    created_events = relationship(
        "Events",
        secondary="user_events_link",
        primaryjoin="and_(Users.id == UserEventsLink.user_id, "
        "UserEventsLink.relation == 'created')",
        secondaryjoin="Events.id == UserEventsLink.event_id",
        order_by="Events.date",
        viewonly=True,
    )


class UserEventsLink(AbstractSQLModel, TimestampsMixin):
    """The user side of event membership: joinedEvents and createdEvents."""

    __tablename__ = "user_events_link"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    relation = Column(String(10), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "event_id", "relation"),)

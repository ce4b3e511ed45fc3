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


class UrgencyLevels(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class HelpRequestStatus(str, enum.Enum):
    open = "open"
    in_progress = "in_progress"
    completed = "completed"


class HelpRequests(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "help_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(200), nullable=False)
    urgency_level = Column(String(10), nullable=False)
    volunteers_needed = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=HelpRequestStatus.open.value)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    requester = relationship("Users")
    volunteers = relationship(
        "Users",
        secondary="help_request_volunteers_link",
        order_by="HelpRequestVolunteersLink.id",
        viewonly=True,
    )


class HelpRequestVolunteersLink(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "help_request_volunteers_link"

    id = Column(Integer, primary_key=True, autoincrement=True)
    help_request_id = Column(
        Integer, ForeignKey("help_requests.id"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (UniqueConstraint("help_request_id", "user_id"),)

import enum
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean,
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


class TeamRoles(str, enum.Enum):
    admin = "admin"
    member = "member"


class Teams(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    is_private = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    creator = relationship("Users")
    members = relationship(
        "TeamMembersLink",
        order_by="TeamMembersLink.id",
        viewonly=True,
    )


class TeamMembersLink(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "team_members_link"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role = Column(String(20), nullable=False, default=TeamRoles.member.value)
    joined_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    user = relationship("Users")

    __table_args__ = (UniqueConstraint("team_id", "user_id"),)

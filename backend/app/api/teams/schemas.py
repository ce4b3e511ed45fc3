from datetime import datetime

from pydantic import Field

from app.api.teams.models import TeamRoles
from app.api.users.schemas import NonBlankStr, UserMin
from app.core.response.base_model import CustomBaseModel


class TeamCreate(CustomBaseModel):
    name: NonBlankStr = Field(...)
    description: NonBlankStr = Field(...)
    category: NonBlankStr = Field(...)
    is_private: bool = Field(False)


class TeamEdit(CustomBaseModel):
    name: NonBlankStr | None = Field(None)
    description: str | None = Field(None)
    category: NonBlankStr | None = Field(None)
    is_private: bool | None = Field(None)

    def changes(self) -> dict:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class TeamMember(CustomBaseModel):
    user: UserMin
    role: TeamRoles
    joined_at: datetime


class TeamResponse(CustomBaseModel):
    id: int
    name: str
    description: str
    category: str
    is_private: bool
    creator: UserMin
    members: list[TeamMember] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

from datetime import datetime

from pydantic import Field

from app.api.help_requests.models import HelpRequestStatus, UrgencyLevels
from app.api.users.schemas import NonBlankStr, UserMin
from app.core.response.base_model import CustomBaseModel


class HelpRequestCreate(CustomBaseModel):
    title: NonBlankStr = Field(...)
    description: NonBlankStr = Field(...)
    location: NonBlankStr = Field(...)
    urgency_level: UrgencyLevels = Field(...)
    volunteers_needed: int = Field(..., gt=0)


class HelpRequestEdit(CustomBaseModel):
    title: NonBlankStr | None = Field(None)
    description: str | None = Field(None)
    location: NonBlankStr | None = Field(None)
    urgency_level: UrgencyLevels | None = Field(None)
    volunteers_needed: int | None = Field(None, gt=0)
    status: HelpRequestStatus | None = Field(None)

    def changes(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class HelpRequestResponse(CustomBaseModel):
    id: int
    title: str
    description: str
    location: str
    urgency_level: UrgencyLevels
    volunteers_needed: int
    status: HelpRequestStatus
    requester: UserMin
    volunteers: list[UserMin] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

from datetime import datetime

from pydantic import Field

from app.api.events.models import EventStatus
from app.api.users.schemas import NonBlankStr, UserMin
from app.core.response.base_model import CustomBaseModel


class EventCreate(CustomBaseModel):
    # presence of the required fields is checked by the service so a missing
    # field reports "All fields are required" rather than a schema error
    title: str | None = Field(None)
    description: str | None = Field(None)
    date: datetime | None = Field(None)
    location: str | None = Field(None)
    category: str | None = Field(None)
    max_participants: int | None = Field(None, gt=0)


class EventEdit(CustomBaseModel):
    """Fields an event's creator may change. Anything else in the body is ignored."""

    title: NonBlankStr | None = Field(None)
    description: NonBlankStr | None = Field(None)
    status: EventStatus | None = Field(None)
    location: NonBlankStr | None = Field(None)

    def changes(self) -> dict:
        return {
            key: value.value if isinstance(value, EventStatus) else value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class EventResponse(CustomBaseModel):
    id: int
    title: str
    description: str
    date: datetime
    location: str
    category: str
    status: str
    max_participants: int | None = None
    creator: UserMin
    participants: list[UserMin] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints

from app.core.response.base_model import CustomBaseModel

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserMin(CustomBaseModel):
    id: int = Field(...)
    name: str = Field(...)
    email: str = Field(...)


class UserPublic(UserMin):
    bio: str | None = Field(None)
    skills: list[str] = Field(default_factory=list)
    causes: list[str] = Field(default_factory=list)


class UserPrivate(UserPublic):
    created_at: datetime = Field(...)
    updated_at: datetime = Field(...)


class EventSummary(CustomBaseModel):
    id: int = Field(...)
    title: str = Field(...)
    date: datetime = Field(...)
    location: str = Field(...)
    status: str = Field(...)


class UserProfileResponse(UserPrivate):
    joined_events: list[EventSummary] = Field(default_factory=list)
    created_events: list[EventSummary] = Field(default_factory=list)


class UserProfileUpdate(CustomBaseModel):
    """
    Partial profile update.

    Only keys present in the request body are applied, so an empty bio or an
    empty skills list clears the stored value. ``null`` leaves the field as is.
    """

    name: NonBlankStr | None = Field(None)
    bio: str | None = Field(None)
    skills: list[str] | None = Field(None)
    causes: list[str] | None = Field(None)

    def changes(self) -> dict:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CustomBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def ensure_utc_timezone(cls, value: Any) -> Any:
        """
        Validate and convert datetimes to UTC.

        Handles:
        - Naive datetimes (assume UTC)
        - Datetimes in other timezones (convert to UTC)
        """
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)

            if value.tzinfo != timezone.utc:
                return value.astimezone(timezone.utc)

        return value


class APIResponse(CustomBaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    message: str | None = None
    data: T | None = None

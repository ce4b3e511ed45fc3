from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.validations.exceptions import ConflictError, NotFoundError


async def validate_relations(session: AsyncSession, validation: dict[str, tuple]):
    errors = {}
    for key, (schema, value) in validation.items():
        if value == None:
            continue
        if not await session.scalar(select(exists().where(schema.id == value))):
            errors[key] = f"invalid {key}"
    if errors:
        key = next(iter(errors))
        raise NotFoundError(message=f"{key.capitalize()} not found", errors=errors)
    return True


async def validate_unique(
    session: AsyncSession, unique: dict[str, tuple], message: str = "Already exists"
):
    """
    Reject values that already exist in a unique column.

    Strings are compared case-insensitively, matching how emails are stored.
    """
    errors = {}
    for key, (schema, value) in unique.items():
        if not value:
            continue
        column = getattr(schema, key)
        if isinstance(value, str):
            query = select(exists().where(func.lower(column) == value.lower()))
        else:
            query = select(exists().where(column == value))
        if await session.scalar(query):
            errors[key] = f"{key} already exists"
    if errors:
        raise ConflictError(message=message, errors=errors)
    return True

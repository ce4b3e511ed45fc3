import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.users.models import EventRelation, UserEventsLink, Users
from app.api.users.schemas import UserProfileUpdate
from app.core.auth.authentication import get_password_hash
from app.core.validations.exceptions import ConflictError, NotFoundError
from app.core.validations.schema import validate_unique
from app.db.operations import add_to_set

logger = logging.getLogger(__name__)


async def create_user(session: AsyncSession, name: str, email: str, password: str):
    email = email.lower()
    await validate_unique(
        session, {"email": (Users, email)}, message="User already exists"
    )
    user = Users(
        name=name,
        email=email,
        password=get_password_hash(password),
        skills=[],
        causes=[],
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # lost a race against a concurrent registration with the same email
        await session.rollback()
        raise ConflictError(message="User already exists")
    logger.info(f"Registered user {user.id}")
    return user


async def get_user_profile(session: AsyncSession, user_id: int):
    user = await session.scalar(
        select(Users)
        .where(Users.id == user_id)
        .options(
            selectinload(Users.joined_events),
            selectinload(Users.created_events),
        )
        .execution_options(populate_existing=True)
    )
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_user_profile(
    session: AsyncSession, user_id: int, profile: UserProfileUpdate
):
    user = await session.scalar(select(Users).where(Users.id == user_id))
    if user is None:
        raise NotFoundError("User not found")

    for key, value in profile.changes().items():
        setattr(user, key, value)

    await session.commit()
    await session.refresh(user)
    return user


async def add_joined_event(session: AsyncSession, user_id: int, event_id: int) -> bool:
    return await add_to_set(
        session,
        UserEventsLink,
        user_id=user_id,
        event_id=event_id,
        relation=EventRelation.joined.value,
    )


async def add_created_event(session: AsyncSession, user_id: int, event_id: int) -> bool:
    return await add_to_set(
        session,
        UserEventsLink,
        user_id=user_id,
        event_id=event_id,
        relation=EventRelation.created.value,
    )

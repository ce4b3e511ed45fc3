import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.api.events.models import EventParticipantsLink, Events
from app.api.events.schemas import EventCreate, EventEdit
from app.api.users import service as user_service
from app.api.users.models import Users
from app.core.validations.exceptions import (
    AlreadyJoinedError,
    AuthorizationError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from app.core.validations.schema import validate_relations
from app.db.operations import add_to_capped_set, add_to_set, pull

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "date", "location", "category")


def _event_query():
    return (
        select(Events)
        .options(
            joinedload(Events.creator),
            selectinload(Events.participants),
        )
        .execution_options(populate_existing=True)
    )


async def get_event(session: AsyncSession, event_id: int) -> Events:
    db_event = await session.scalar(_event_query().where(Events.id == event_id))
    if db_event is None:
        raise NotFoundError("Event not found")
    return db_event


async def list_events(
    session: AsyncSession,
    category: str | None = None,
    status: str | None = None,
):
    query = _event_query()
    if category:
        query = query.where(Events.category == category)
    if status:
        query = query.where(Events.status == status)
    query = query.order_by(Events.date.asc(), Events.id.asc())
    result = await session.scalars(query)
    return result.all()


async def create_event(session: AsyncSession, user_id: int, event: EventCreate):
    missing = {
        field: "This field is required"
        for field in REQUIRED_FIELDS
        if not getattr(event, field)
    }
    if missing:
        raise ValidationError("All fields are required", errors=missing)
    await validate_relations(session, {"user": (Users, user_id)})

    db_event = Events(
        title=event.title,
        description=event.description,
        date=event.date,
        location=event.location,
        category=event.category,
        max_participants=event.max_participants,
        creator_id=user_id,
    )
    session.add(db_event)
    await session.flush()
    event_id = db_event.id
    await add_to_set(session, EventParticipantsLink, event_id=event_id, user_id=user_id)
    await session.commit()

    await user_service.add_created_event(session, user_id, event_id)
    await user_service.add_joined_event(session, user_id, event_id)
    await session.commit()
    logger.info(f"User {user_id} created event {event_id}")

    return await get_event(session, event_id)


async def update_event(
    session: AsyncSession, event_id: int, user_id: int, event: EventEdit
):
    db_event = await get_event(session, event_id)
    if db_event.creator_id != user_id:
        raise AuthorizationError("Not authorized to update this event")

    for key, value in event.changes().items():
        setattr(db_event, key, value)
    await session.commit()

    return await get_event(session, event_id)


async def join_event(session: AsyncSession, event_id: int, user_id: int):
    """
    Add the user to the event's participants and the event to the user's
    joinedEvents.

    The two writes are committed separately. If the second one fails the user
    is pulled back out of the participants; a failure of that reversal is
    logged and the caller still gets the same join error.
    """
    if not event_id or not user_id:
        raise ValidationError("Invalid user or event ID")

    db_event = await get_event(session, event_id)
    await validate_relations(session, {"user": (Users, user_id)})
    if any(participant.id == user_id for participant in db_event.participants):
        raise AlreadyJoinedError("Already joined this event")
    if (
        db_event.max_participants
        and len(db_event.participants) >= db_event.max_participants
    ):
        raise ValidationError("Event is full")

    try:
        joined = await _add_participant(session, db_event, user_id)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Error adding user {user_id} to event {event_id}")
        raise ServerError("Error joining event")
    if not joined:
        # lost a race against another join since the checks above
        if await session.scalar(
            select(EventParticipantsLink.id).where(
                EventParticipantsLink.event_id == event_id,
                EventParticipantsLink.user_id == user_id,
            )
        ):
            raise AlreadyJoinedError("Already joined this event")
        raise ValidationError("Event is full")

    try:
        await user_service.add_joined_event(session, user_id, event_id)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Error adding event {event_id} to user {user_id}")
        await _revert_join(session, event_id, user_id)
        raise ServerError("Error joining event")

    logger.info(f"User {user_id} joined event {event_id}")
    return await get_event(session, event_id)


async def _add_participant(session: AsyncSession, db_event: Events, user_id: int):
    if not db_event.max_participants:
        return await add_to_set(
            session, EventParticipantsLink, event_id=db_event.id, user_id=user_id
        )

    # serializes capped joins per event on PostgreSQL; a no-op on SQLite
    await session.scalar(
        select(Events.id).where(Events.id == db_event.id).with_for_update()
    )
    return await add_to_capped_set(
        session,
        EventParticipantsLink,
        limit=db_event.max_participants,
        scope={"event_id": db_event.id},
        event_id=db_event.id,
        user_id=user_id,
    )


async def _revert_join(session: AsyncSession, event_id: int, user_id: int):
    try:
        await pull(session, EventParticipantsLink, event_id=event_id, user_id=user_id)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(
            f"Error reverting participation of user {user_id} in event {event_id}"
        )

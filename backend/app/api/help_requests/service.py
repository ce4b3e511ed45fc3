import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.api.help_requests.models import (
    HelpRequestStatus,
    HelpRequestVolunteersLink,
    HelpRequests,
)
from app.api.help_requests.schemas import HelpRequestCreate, HelpRequestEdit
from app.api.users.models import Users
from app.core.validations.exceptions import (
    AlreadyJoinedError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from app.core.validations.schema import validate_relations
from app.db.operations import add_to_capped_set

logger = logging.getLogger(__name__)


def _help_request_query():
    return (
        select(HelpRequests)
        .options(
            joinedload(HelpRequests.requester),
            selectinload(HelpRequests.volunteers),
        )
        .execution_options(populate_existing=True)
    )


async def get_help_request(session: AsyncSession, help_request_id: int) -> HelpRequests:
    help_request = await session.scalar(
        _help_request_query().where(HelpRequests.id == help_request_id)
    )
    if help_request is None:
        raise NotFoundError("Help request not found")
    return help_request


async def list_help_requests(
    session: AsyncSession,
    status: str | None = None,
    urgency_level: str | None = None,
):
    query = _help_request_query()
    if status:
        query = query.where(HelpRequests.status == status)
    if urgency_level:
        query = query.where(HelpRequests.urgency_level == urgency_level)
    query = query.order_by(HelpRequests.created_at.desc(), HelpRequests.id.desc())
    result = await session.scalars(query)
    return result.all()


async def create_help_request(
    session: AsyncSession, user_id: int, help_request: HelpRequestCreate
):
    await validate_relations(session, {"user": (Users, user_id)})
    db_help_request = HelpRequests(
        title=help_request.title,
        description=help_request.description,
        location=help_request.location,
        urgency_level=help_request.urgency_level.value,
        volunteers_needed=help_request.volunteers_needed,
        requester_id=user_id,
    )
    session.add(db_help_request)
    await session.commit()
    logger.info(f"User {user_id} created help request {db_help_request.id}")
    return await get_help_request(session, db_help_request.id)


async def update_help_request(
    session: AsyncSession,
    help_request_id: int,
    user_id: int,
    help_request: HelpRequestEdit,
):
    db_help_request = await get_help_request(session, help_request_id)
    if db_help_request.requester_id != user_id:
        raise AuthorizationError("Not authorized to update this help request")

    for key, value in help_request.changes().items():
        setattr(db_help_request, key, value)
    await session.commit()
    return await get_help_request(session, help_request_id)


async def volunteer(session: AsyncSession, help_request_id: int, user_id: int):
    db_help_request = await get_help_request(session, help_request_id)
    await validate_relations(session, {"user": (Users, user_id)})
    if any(volunteer.id == user_id for volunteer in db_help_request.volunteers):
        raise AlreadyJoinedError("Already volunteered for this request")
    if db_help_request.status != HelpRequestStatus.open.value:
        raise ValidationError("This help request is no longer accepting volunteers")
    if len(db_help_request.volunteers) >= db_help_request.volunteers_needed:
        raise ValidationError("No more volunteers needed")

    await session.scalar(
        select(HelpRequests.id)
        .where(HelpRequests.id == help_request_id)
        .with_for_update()
    )
    added = await add_to_capped_set(
        session,
        HelpRequestVolunteersLink,
        limit=db_help_request.volunteers_needed,
        scope={"help_request_id": help_request_id},
        help_request_id=help_request_id,
        user_id=user_id,
    )
    await session.commit()
    if not added:
        if await session.scalar(
            select(HelpRequestVolunteersLink.id).where(
                HelpRequestVolunteersLink.help_request_id == help_request_id,
                HelpRequestVolunteersLink.user_id == user_id,
            )
        ):
            raise AlreadyJoinedError("Already volunteered for this request")
        raise ValidationError("No more volunteers needed")

    logger.info(f"User {user_id} volunteered for help request {help_request_id}")
    return await get_help_request(session, help_request_id)

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.api.teams.models import TeamMembersLink, TeamRoles, Teams
from app.api.teams.schemas import TeamCreate, TeamEdit
from app.api.users.models import Users
from app.core.validations.exceptions import (
    AlreadyJoinedError,
    AuthorizationError,
    NotFoundError,
)
from app.core.validations.schema import validate_relations
from app.db.operations import add_to_set

logger = logging.getLogger(__name__)


def _team_query():
    return (
        select(Teams)
        .options(
            joinedload(Teams.creator),
            selectinload(Teams.members).joinedload(TeamMembersLink.user),
        )
        .execution_options(populate_existing=True)
    )


async def get_team(session: AsyncSession, team_id: int) -> Teams:
    team = await session.scalar(_team_query().where(Teams.id == team_id))
    if team is None:
        raise NotFoundError("Team not found")
    return team


async def list_teams(session: AsyncSession, category: str | None = None):
    query = _team_query()
    if category:
        query = query.where(Teams.category == category)
    result = await session.scalars(query.order_by(Teams.created_at.desc(), Teams.id.desc()))
    return result.all()


async def create_team(session: AsyncSession, user_id: int, team: TeamCreate):
    await validate_relations(session, {"user": (Users, user_id)})
    db_team = Teams(
        name=team.name,
        description=team.description,
        category=team.category,
        is_private=team.is_private,
        created_by=user_id,
    )
    session.add(db_team)
    await session.flush()
    team_id = db_team.id
    await add_to_set(
        session,
        TeamMembersLink,
        team_id=team_id,
        user_id=user_id,
        role=TeamRoles.admin.value,
    )
    await session.commit()
    logger.info(f"User {user_id} created team {team_id}")
    return await get_team(session, team_id)


async def update_team(session: AsyncSession, team_id: int, user_id: int, team: TeamEdit):
    db_team = await get_team(session, team_id)
    is_admin = any(
        member.user_id == user_id and member.role == TeamRoles.admin.value
        for member in db_team.members
    )
    if not is_admin:
        raise AuthorizationError("Not authorized to update this team")

    for key, value in team.changes().items():
        setattr(db_team, key, value)
    await session.commit()
    return await get_team(session, team_id)


async def join_team(session: AsyncSession, team_id: int, user_id: int):
    db_team = await get_team(session, team_id)
    await validate_relations(session, {"user": (Users, user_id)})
    if any(member.user_id == user_id for member in db_team.members):
        raise AlreadyJoinedError("Already a member of this team")
    if db_team.is_private:
        raise AuthorizationError("This team is private")

    await add_to_set(
        session,
        TeamMembersLink,
        team_id=team_id,
        user_id=user_id,
        role=TeamRoles.member.value,
    )
    await session.commit()
    logger.info(f"User {user_id} joined team {team_id}")
    return await get_team(session, team_id)

from typing import List, Optional
from fastapi import APIRouter, Query, status

from app.api.teams import service
from app.api.teams.schemas import TeamCreate, TeamEdit, TeamResponse
from app.core.auth.dependencies import UserAuth
from app.core.response.base_model import APIResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/teams")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a new team")
async def create_team(
    session: SessionDep, user_id: UserAuth, team: TeamCreate
) -> APIResponse[TeamResponse]:
    db_team = await service.create_team(session, user_id, team)
    return APIResponse(
        message="Team created successfully",
        data=TeamResponse.model_validate(db_team),
    )


@router.get("", summary="List all teams")
async def list_teams(
    session: SessionDep, category: Optional[str] = Query(None)
) -> APIResponse[List[TeamResponse]]:
    teams = await service.list_teams(session, category=category)
    return APIResponse(data=[TeamResponse.model_validate(x) for x in teams])


@router.get("/{team_id}", summary="Get team info")
async def get_team(session: SessionDep, team_id: int) -> APIResponse[TeamResponse]:
    db_team = await service.get_team(session, team_id)
    return APIResponse(data=TeamResponse.model_validate(db_team))


@router.put("/{team_id}", summary="Update a team")
async def update_team(
    session: SessionDep, user_id: UserAuth, team_id: int, team: TeamEdit
) -> APIResponse[TeamResponse]:
    db_team = await service.update_team(session, team_id, user_id, team)
    return APIResponse(
        message="Team updated successfully",
        data=TeamResponse.model_validate(db_team),
    )


@router.post("/{team_id}/join", summary="Join a team")
async def join_team(
    session: SessionDep, user_id: UserAuth, team_id: int
) -> APIResponse[TeamResponse]:
    db_team = await service.join_team(session, team_id, user_id)
    return APIResponse(
        message="Successfully joined team",
        data=TeamResponse.model_validate(db_team),
    )

from typing import List, Optional
from fastapi import APIRouter, Query, status

from app.api.help_requests import service
from app.api.help_requests.models import HelpRequestStatus, UrgencyLevels
from app.api.help_requests.schemas import (
    HelpRequestCreate,
    HelpRequestEdit,
    HelpRequestResponse,
)
from app.core.auth.dependencies import UserAuth
from app.core.response.base_model import APIResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/help-requests")


@router.post(
    "", status_code=status.HTTP_201_CREATED, summary="Create a new help request"
)
async def create_help_request(
    session: SessionDep, user_id: UserAuth, help_request: HelpRequestCreate
) -> APIResponse[HelpRequestResponse]:
    db_help_request = await service.create_help_request(session, user_id, help_request)
    return APIResponse(
        message="Help request created successfully",
        data=HelpRequestResponse.model_validate(db_help_request),
    )


@router.get("", summary="List all help requests")
async def list_help_requests(
    session: SessionDep,
    request_status: Optional[HelpRequestStatus] = Query(None, alias="status"),
    urgency_level: Optional[UrgencyLevels] = Query(None, alias="urgencyLevel"),
) -> APIResponse[List[HelpRequestResponse]]:
    help_requests = await service.list_help_requests(
        session,
        status=request_status.value if request_status else None,
        urgency_level=urgency_level.value if urgency_level else None,
    )
    return APIResponse(
        data=[HelpRequestResponse.model_validate(x) for x in help_requests]
    )


@router.get("/{help_request_id}", summary="Get help request info")
async def get_help_request(
    session: SessionDep, help_request_id: int
) -> APIResponse[HelpRequestResponse]:
    db_help_request = await service.get_help_request(session, help_request_id)
    return APIResponse(data=HelpRequestResponse.model_validate(db_help_request))


@router.put("/{help_request_id}", summary="Update a help request")
async def update_help_request(
    session: SessionDep,
    user_id: UserAuth,
    help_request_id: int,
    help_request: HelpRequestEdit,
) -> APIResponse[HelpRequestResponse]:
    db_help_request = await service.update_help_request(
        session, help_request_id, user_id, help_request
    )
    return APIResponse(
        message="Help request updated successfully",
        data=HelpRequestResponse.model_validate(db_help_request),
    )


@router.post("/{help_request_id}/volunteer", summary="Volunteer for a help request")
async def volunteer(
    session: SessionDep, user_id: UserAuth, help_request_id: int
) -> APIResponse[HelpRequestResponse]:
    db_help_request = await service.volunteer(session, help_request_id, user_id)
    return APIResponse(
        message="Successfully volunteered",
        data=HelpRequestResponse.model_validate(db_help_request),
    )

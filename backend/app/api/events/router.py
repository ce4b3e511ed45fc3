from typing import List, Optional
from fastapi import APIRouter, Query, status

from app.api.events import service
from app.api.events.models import EventStatus
from app.api.events.schemas import EventCreate, EventEdit, EventResponse
from app.core.auth.dependencies import UserAuth
from app.core.response.base_model import APIResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/events")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a new event")
async def create_event(
    session: SessionDep, user_id: UserAuth, event: EventCreate
) -> APIResponse[EventResponse]:
    db_event = await service.create_event(session, user_id, event)
    return APIResponse(
        message="Event created successfully",
        data=EventResponse.model_validate(db_event),
    )


@router.get("", summary="List all events")
async def list_events(
    session: SessionDep,
    category: Optional[str] = Query(None),
    event_status: Optional[EventStatus] = Query(None, alias="status"),
) -> APIResponse[List[EventResponse]]:
    events = await service.list_events(
        session,
        category=category,
        status=event_status.value if event_status else None,
    )
    return APIResponse(data=[EventResponse.model_validate(x) for x in events])


@router.get("/{event_id}", summary="Get event info")
async def get_event(session: SessionDep, event_id: int) -> APIResponse[EventResponse]:
    db_event = await service.get_event(session, event_id)
    return APIResponse(data=EventResponse.model_validate(db_event))


@router.put("/{event_id}", summary="Update an event")
async def update_event(
    session: SessionDep, user_id: UserAuth, event_id: int, event: EventEdit
) -> APIResponse[EventResponse]:
    db_event = await service.update_event(session, event_id, user_id, event)
    return APIResponse(
        message="Event updated successfully",
        data=EventResponse.model_validate(db_event),
    )


@router.post("/{event_id}/join", summary="Join an event")
async def join_event(
    session: SessionDep, user_id: UserAuth, event_id: int
) -> APIResponse[EventResponse]:
    db_event = await service.join_event(session, event_id, user_id)
    return APIResponse(
        message="Successfully joined event",
        data=EventResponse.model_validate(db_event),
    )

from fastapi import APIRouter
from app.api.auth.router import router as auth_router
from app.api.events.router import router as events_router
from app.api.teams.router import router as teams_router
from app.api.help_requests.router import router as help_requests_router

api_router = APIRouter(
    prefix="/api",
    responses={404: {"description": "Not found"}},
)

api_router.include_router(router=auth_router, tags=["auth"])
api_router.include_router(router=events_router, tags=["events"])
api_router.include_router(router=teams_router, tags=["teams"])
api_router.include_router(router=help_requests_router, tags=["help requests"])

import logging
from fastapi import APIRouter, status

from app.api.auth import service
from app.api.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from app.api.users import service as user_service
from app.api.users.schemas import (
    UserMin,
    UserPublic,
    UserPrivate,
    UserProfileResponse,
    UserProfileUpdate,
)
from app.core.auth.dependencies import UserAuth
from app.core.response.base_model import APIResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/auth")

logger = logging.getLogger(__name__)


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, summary="Register a new user"
)
async def register(
    session: SessionDep, request: RegisterRequest
) -> APIResponse[RegisterResponse]:
    user = await user_service.create_user(
        session, name=request.name, email=request.email, password=request.password
    )
    return APIResponse(
        message="Registration successful",
        data=RegisterResponse(
            token=service.create_user_token(user),
            user=UserMin.model_validate(user),
        ),
    )


@router.post("/login", summary="Log in with email and password")
async def login(session: SessionDep, request: LoginRequest) -> APIResponse[LoginResponse]:
    user = await service.login(session, request.email, request.password)
    logger.info(f"User {user.id} logged in")
    return APIResponse(
        message="Login successful",
        data=LoginResponse(
            token=service.create_user_token(user),
            user=UserPublic.model_validate(user),
        ),
    )


@router.get("/profile", summary="Get the current user's profile")
async def get_profile(
    session: SessionDep, user_id: UserAuth
) -> APIResponse[UserProfileResponse]:
    user = await user_service.get_user_profile(session, user_id)
    return APIResponse(data=UserProfileResponse.model_validate(user))


@router.put("/profile", summary="Update the current user's profile")
async def update_profile(
    session: SessionDep, user_id: UserAuth, profile: UserProfileUpdate
) -> APIResponse[UserPrivate]:
    user = await user_service.update_user_profile(session, user_id, profile)
    return APIResponse(
        message="Profile updated successfully",
        data=UserPrivate.model_validate(user),
    )

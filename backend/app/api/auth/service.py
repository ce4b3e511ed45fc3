from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth.schemas import AuthTokenData
from app.api.users.models import Users
from app.config import settings
from app.core.auth.authentication import authenticate_user
from app.core.auth.jwt import create_access_token
from app.core.validations.exceptions import AuthError


def create_user_token(user: Users) -> str:
    token_data = AuthTokenData(user_id=user.id)
    return create_access_token(
        data=token_data.model_dump(),
        secret_key=settings.SECRET_KEY,
        expires_delta=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    )


async def login(session: AsyncSession, email: str, password: str) -> Users:
    user = await authenticate_user(session, email, password)
    if not user:
        # same answer for unknown email and wrong password
        raise AuthError("Invalid credentials")
    return user

from pydantic import EmailStr, Field

from app.core.response.base_model import CustomBaseModel
from app.api.users.schemas import NonBlankStr, UserMin, UserPublic


class AuthTokenData(CustomBaseModel):
    user_id: int


class RegisterRequest(CustomBaseModel):
    name: NonBlankStr = Field(...)
    email: EmailStr = Field(...)
    password: str = Field(..., min_length=6)


class LoginRequest(CustomBaseModel):
    email: EmailStr = Field(...)
    password: str = Field(...)


class RegisterResponse(CustomBaseModel):
    token: str
    user: UserMin


class LoginResponse(CustomBaseModel):
    token: str
    user: UserPublic

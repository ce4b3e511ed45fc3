from typing import Annotated, Optional
from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError
from pydantic import ValidationError as SchemaValidationError

from app.api.auth.schemas import AuthTokenData
from app.config import settings
from app.core.auth.jwt import decode_jwt_token
from app.core.validations.exceptions import AuthError

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
) -> int:
    """
    Resolve the bearer token on the request to the authenticated user id.

    The id is also exposed as ``request.state.user_id`` for middleware and
    logging. The user record itself is not loaded here; handlers that need it
    fetch it and report a missing user on their own terms.
    """
    if credentials is None:
        raise AuthError(
            "No token, authorization denied",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    try:
        payload = decode_jwt_token(credentials.credentials, settings.SECRET_KEY)
        token_data = AuthTokenData(**payload)
    except ExpiredSignatureError:
        raise AuthError(
            "Token has expired",
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="TOKEN_EXPIRED",
        )
    except (InvalidTokenError, SchemaValidationError):
        raise AuthError(
            "Token is not valid", status_code=status.HTTP_401_UNAUTHORIZED
        )
    request.state.user_id = token_data.user_id
    return token_data.user_id


UserAuth = Annotated[int, Depends(get_current_user_id)]

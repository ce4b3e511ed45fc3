from fastapi import status

from app.response import CustomHTTPException


class ValidationError(CustomHTTPException):
    def __init__(self, message: str = "Invalid request", errors: dict | None = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="VALIDATION_ERROR",
            errors=errors,
        )


class ConflictError(CustomHTTPException):
    def __init__(self, message: str = "Already exists", errors: dict | None = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="CONFLICT",
            errors=errors,
        )


class AuthError(CustomHTTPException):
    """Bad credentials (400) or a missing / invalid bearer token (401)."""

    def __init__(
        self,
        message: str = "Invalid credentials",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: str = "AUTH_ERROR",
    ):
        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        super().__init__(
            status_code=status_code,
            message=message,
            error_code=error_code,
            headers=headers,
        )


class AuthorizationError(CustomHTTPException):
    def __init__(self, message: str = "Not Authorized"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            error_code="FORBIDDEN",
        )


class NotFoundError(CustomHTTPException):
    def __init__(self, message: str = "Not found", errors: dict | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            error_code="NOT_FOUND",
            errors=errors,
        )


class AlreadyJoinedError(CustomHTTPException):
    def __init__(self, message: str = "Already joined"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="ALREADY_JOINED",
        )


class ServerError(CustomHTTPException):
    def __init__(self, message: str = "Internal Server Error", track_id: str | None = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            error_code="SERVER_ERROR",
            track_id=track_id,
        )

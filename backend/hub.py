import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette import status

from app.api.router import api_router
from app.config import settings
from app.db.core import create_tables
from app.response import ErrorResponse, CustomHTTPException
from app.core.utils.discord import notify_error
from app.core.middlewares.process_time_middleware import ProcessingTimeMiddleware

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES:
        await create_tables()
    yield


application = FastAPI(
    title="Volunteer Hub API",
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

application.include_router(router=api_router)
application.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
application.add_middleware(ProcessingTimeMiddleware)


@application.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    track_id = str(uuid.uuid4())
    logger.error(
        f"Unhandled error on {request.method} {request.url.path} [{track_id}]",
        exc_info=exc,
    )
    try:
        await notify_error(request, exc, track_id)
    except Exception:
        logger.exception("Error while sending error notification")
    return ErrorResponse(
        message="Internal Server Error",
        error_code="SERVER_ERROR",
        track_id=track_id,
    ).get_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


@application.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}

    for error in exc.errors():
        current = errors

        if len(error["loc"]) <= 1:
            current[error["loc"][0]] = error["msg"]
            continue

        keys = error["loc"][1:]
        for loc in keys[:-1]:
            current = current.setdefault(loc, {})
        current[keys[-1]] = error["msg"]

    return ErrorResponse(
        message="Invalid request",
        error_code="VALIDATION_ERROR",
        errors=errors,
    ).get_response(status.HTTP_400_BAD_REQUEST)


@application.exception_handler(CustomHTTPException)
async def custom_http_exception_handler(request: Request, exc: CustomHTTPException):
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return exc.get_response()


@application.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorResponse(message=str(exc.detail)).get_response(
        exc.status_code, headers=getattr(exc, "headers", None)
    )


@application.head("/ping")
async def ping():
    return Response(status_code=status.HTTP_204_NO_CONTENT)

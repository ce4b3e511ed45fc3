import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class ProcessingTimeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        processing_time = round((time.perf_counter() - start_time) * 1000, 2)

        response.headers["X-Process-Time-MS"] = str(processing_time)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"user={getattr(request.state, 'user_id', None)} {processing_time}ms"
        )

        return response

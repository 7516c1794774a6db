"""
Request middleware for logging, timing, and request ID tracking.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

from devevents.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that:
    1. Reuses the caller's X-Request-ID or assigns a short one
    2. Binds request_id/method/path to structlog contextvars for correlation
    3. Logs status code and duration, at warning level for 5xx responses
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        log = logger.warning if response.status_code >= 500 else logger.info
        log("request_completed", status_code=response.status_code, duration_ms=duration_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response

"""Request Logging: one log line per handled request."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration, tagged with the example name."""

    def __init__(self, app: ASGIApp, example: str):
        super().__init__(app)
        self.example = example

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        # An exception escaping the app is answered with a 500 further out.
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.info(
                "%s %s -> %d (%.2f ms)",
                request.method, request.url.path, status_code, duration_ms,
                extra={
                    "example": self.example,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

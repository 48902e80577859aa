"""HTTP middleware for request logging."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Slow request threshold in milliseconds
SLOW_REQUEST_THRESHOLD_MS = 1000

# Long-lived streams; their duration says nothing about server health
STREAMING_PATHS = {"/global/event"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs requests with status and timing.

    The SSE stream is logged once when opened. Other requests:
    - INFO: Successful responses
    - WARNING: 4xx errors, slow requests
    - ERROR: 5xx errors
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path in STREAMING_PATHS:
            logger.info("Event stream opened by %s", request.client.host if request.client else "unknown")
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        label = f"{request.method} {path} -> {status} ({duration_ms:.1f}ms)"
        if status >= 500:
            logger.error(label)
        elif status >= 400:
            logger.warning(label)
        elif duration_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning("%s SLOW", label)
        else:
            logger.info(label)
        return response

# File: tracker/core/middleware.py

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tracker.core.logging_config import generate_request_id, set_request_id

logger = logging.getLogger("tracker.request")

SKIP_LOGGING_PATHS = ("/healthz",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id (incoming X-Request-ID or a fresh one),
    log method, path, status and duration, and echo the id back.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        if request.url.path not in SKIP_LOGGING_PATHS:
            logger.info(
                "HTTP %s %s - %d (%.2fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
        return response

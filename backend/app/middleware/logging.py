"""
Notes API — Request Logging Middleware
========================================

What:  One access log line for every note request.
How:   When the response is ready, logs method, path, status, duration,
       request ID and client address. Error responses also carry the error
       code the exception handlers put on request.state, so a 500 from the
       store reads differently from a 500 the app raised itself.

Line format:
    PUT /notes/-Nabc -> 500 store_error in 12.3ms [a1b2c3d4] from 10.0.0.7
    GET /notes -> 200 in 4.1ms [e5f6a7b8] from 10.0.0.7

Level: 5xx → ERROR, 4xx → WARNING, otherwise INFO. Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

# Polled by monitors; not worth a line each time
UNLOGGED_PATHS = frozenset({"/health"})


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access line for each request, tagged with its error code."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        error_code = getattr(request.state, "error_code", None)
        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d%s in %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            f" {error_code}" if error_code else "",
            elapsed_ms,
            request_id_var.get(""),
            # request.client is None under in-process test transports
            request.client.host if request.client else "unknown",
        )
        return response

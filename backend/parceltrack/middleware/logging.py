"""
ParcelTrack Backend — Request Logging Middleware
=================================================

What:  One access log line per HTTP request, with status and duration.
How:   Times the downstream handler and logs on the `parceltrack.access`
       logger, with the request ID from RequestIDMiddleware.

Log line:
    PUT /api/packages/1b9d... 200 4.2ms [a1b2c3d4] from 127.0.0.1

    Structured fields are also attached via `extra` (request_id, method,
    path, status, duration_ms, client_ip) for handlers that emit JSON.

Not logged: request bodies and uploaded files (sender/recipient names,
addresses and emails are personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from parceltrack.middleware.request_id import request_id_var

logger = logging.getLogger("parceltrack.access")

# Paths that are polled and would drown the log
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration for every request.

    Level by status class:
        5xx → ERROR
        4xx → WARNING
        2xx/3xx → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response

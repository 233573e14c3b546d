"""
ParcelTrack Backend — Request ID Middleware
============================================

What:  Assigns an ID to each incoming request and returns it in X-Request-ID.
How:   Uses the client's X-Request-ID header when present, otherwise a short
       uuid4. The ID is stored in a ContextVar (for loggers and exception
       handlers) and in request.state (for route handlers).
When:  Runs before the logging middleware so access log lines carry the ID.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that tags every request and response with a correlation ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

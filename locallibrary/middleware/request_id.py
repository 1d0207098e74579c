"""
Local Library: Request ID Middleware
=====================================

What:  Assigns a short correlation ID to each request and returns it in the
       X-Request-ID response header.
Why:   Every log line written while serving a request, and the generic error
       page, can quote the same ID, so a reported error can be found in the
       server log.
How:   Reuses a client-sent X-Request-ID or generates one, then stores it in
       a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests share a thread but not this value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate the first 8 characters of a UUID4
        3. Store it in request_id_var (loggers, error handlers) and in
           request.state.request_id (templates)
        4. Echo it in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

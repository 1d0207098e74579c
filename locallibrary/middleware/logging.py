"""
Local Library: Request Logging Middleware
==========================================

What:  One access log line per HTTP request.
How:   Measures the time spent in the rest of the chain and logs method,
       path, status, duration, request ID and client address on the
       `locallibrary.access` logger.

Log levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Form bodies are never logged. /health and /static are skipped: probes and
stylesheets would drown out the page traffic.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from locallibrary.middleware.request_id import request_id_var

logger = logging.getLogger("locallibrary.access")

QUIET_PREFIXES = ("/health", "/static/")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # request.client is None under some test transports
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

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

"""
Local Library: Health Check Route
==================================

What:  Health check endpoint for monitoring and container probes.
Why:   A catalog that cannot reach its database cannot render a single page,
       so the probe checks the database, not just the process.
How:   Runs SELECT 1 on a pooled connection and reports the result.
When:  Periodically (e.g., every 30 seconds by Docker).

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from locallibrary import __version__
from locallibrary import database
from locallibrary.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the service status and whether the database answers queries.",
)
async def health_check(response: Response) -> HealthResponse:
    """
    Check the health of the service and its database.

    Returns:
        HealthResponse with database status and uptime. The status code is
        503 when the database is unreachable.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

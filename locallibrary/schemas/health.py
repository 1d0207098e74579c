"""
Local Library: Health Response Schema
======================================

What:  JSON body returned by GET /health.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Service status and database reachability.
    Who:   Returned by GET /health for container health checks and monitoring.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

"""
Exercise Tracker — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Pings the store with SELECT 1 and reports uptime.

Status levels:
    - healthy:   store reachable
    - unhealthy: store unreachable or not configured
"""

import logging
import time

from fastapi import APIRouter, Request

from exercise_tracker import __version__
from exercise_tracker.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()
    if not connected:
        logger.warning("Health check: store unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )

"""
Notes API — Health Check Route
================================

What:  Health check endpoint for monitoring and load balancer checks.
How:   Performs a shallow read of the notes collection root.
Who:   Called by container health checks and load balancers.

Status levels:
    - healthy:   The store answered (HTTP 200)
    - unhealthy: The store is unreachable or no store is configured (HTTP 200,
                 body reports it; the check itself never fails)
"""

import logging
import time

from fastapi import APIRouter, Request

from app import __version__
from app.config import settings
from app.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    store = getattr(request.app.state, "store", None)
    if store is None or not await store.health_check(settings.notes_collection):
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: store unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

"""
Inventory API - Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Sends a `ping` command to MongoDB and reports the result.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   MongoDB answered the ping
    - unhealthy: MongoDB unreachable or no client could be created
                 (still HTTP 200; the body carries the state)
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from app import __version__
from app.database import get_optional_database
from app.schemas.product import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the service and its MongoDB connection.",
)
async def health_check(
    db: Optional[AsyncDatabase] = Depends(get_optional_database),
) -> HealthResponse:
    """
    Check the health of the service and the document store.

    Returns:
        HealthResponse with database status and uptime.
    """
    db_status = "connected"
    overall = "healthy"

    if db is None:
        db_status = "disconnected"
        overall = "unhealthy"
    else:
        try:
            await db.command("ping")
        except PyMongoError as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: MongoDB unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

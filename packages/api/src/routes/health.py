# This project was developed with assistance from AI tools.
"""Liveness and database health. No authentication required."""

import logging

from db import DatabaseService, get_db_service
from fastapi import APIRouter, Depends, Response, status

from .. import __version__
from ..schemas.health import HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[HealthStatus])
async def health_check(
    response: Response,
    db_service: DatabaseService = Depends(get_db_service),
) -> list[HealthStatus]:
    """One entry per component; 503 when the database is unreachable."""
    db_health = await db_service.health_check()
    if not db_health["healthy"]:
        logger.warning("Health check: database unhealthy (%s)", db_health["message"])
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return [
        HealthStatus(name="API", status="healthy", message="LeaseDesk API is running", version=__version__),
        HealthStatus(
            name="Database",
            status="healthy" if db_health["healthy"] else "unhealthy",
            message=db_health["message"],
        ),
    ]

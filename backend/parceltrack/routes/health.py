"""
ParcelTrack Backend — Health Check Route
=========================================

What:  GET /health for Docker health checks and load balancer probes.
How:   Reads the record store once; the service is healthy only if the
       store is readable.

Status levels:
    - healthy:   record store readable (HTTP 200)
    - unhealthy: record store unreadable or malformed (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from parceltrack import __version__
from parceltrack.schemas.package import HealthResponse
from parceltrack.services.package_service import PackageService, get_package_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    service: PackageService = Depends(get_package_service),
) -> HealthResponse:
    """Probe the record store and report uptime."""
    store_status = "readable"
    overall = "healthy"

    if not await service.store.ping():
        store_status = "unreadable"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: record store unreadable")

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

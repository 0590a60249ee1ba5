"""
Product API: Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the database through the product store and reports status.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app import __version__
from app.routes.products import get_product_store
from app.schemas.product import HealthResponse
from app.services.product_store import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
    description="Returns the health status of the service and its database.",
)
async def health_check(store: ProductStore = Depends(get_product_store)):
    """
    Check the health of the service and its database.

    The ping is a single round trip (no collection scan), cheap enough to
    run every few seconds.
    """
    reachable = await store.ping()
    if not reachable:
        logger.warning("Health check: database unreachable")

    body = HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if reachable else 503, content=body.model_dump())

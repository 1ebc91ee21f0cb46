"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if database is unreachable (readiness)
    - Cache state is reported but never fails readiness (service degrades without it)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_database, get_order_services
from app.infrastructure.database import DatabaseSessionManager
from app.services.order_services import OrderServices

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "orders-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    db_manager: DatabaseSessionManager | None = Depends(get_database),
    services: OrderServices = Depends(get_order_services),
):
    """Readiness probe — database connectivity required, cache reported."""
    db_ok = await db_manager.health_check() if db_manager else False
    cache_ok = await services.cache.backend.ping()
    cache_state = "healthy" if cache_ok else "degraded"
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
                "checks": {"database": "unavailable", "cache": cache_state},
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", "cache": cache_state},
    }

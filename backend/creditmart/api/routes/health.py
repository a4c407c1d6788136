"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness);
      orders cannot be placed without it
"""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from creditmart.infrastructure import database
from creditmart.infrastructure.observability import SERVICE_NAME

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

API_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness: the process is up and serving."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": API_VERSION}


@router.get("/ready")
async def readiness_check():
    """Readiness: the database answers a trivial query."""
    manager = database.db_manager
    started = time.perf_counter()
    db_ok = await manager.health_check() if manager else False
    elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

    if not db_ok:
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "database_latency_ms": elapsed_ms,
    }

"""Health probes — liveness for the process, readiness for the database.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process serves requests
    - GET /api/v1/health/ready answers 503 until init_db() ran and while the
      database does not answer SELECT 1
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import payroll_reports.infrastructure.database as database

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "payroll-reports-api"
SERVICE_VERSION = "1.0.0"


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness():
    """Database connectivity check used by the load balancer."""
    manager = database.db_manager
    if manager is not None and await manager.is_reachable():
        return {"status": "ready", "checks": {"database": "healthy"}}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "checks": {"database": "unavailable"}},
    )

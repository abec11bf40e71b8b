"""Public info and health check endpoints"""
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tokengate.api.deps import get_services
from tokengate.errors import LedgerUnavailableError
from tokengate.schemas.data import PublicInfoResponse
from tokengate.services import TokenServices

SERVICE_NAME = "TokenGate"
SERVICE_VERSION = "0.1.0"

public_router = APIRouter(prefix="/api/public", tags=["public"])
router = APIRouter(prefix="/health", tags=["health"])

# Track startup time
STARTUP_TIME = time.time()


def _uptime() -> float:
    return round(time.time() - STARTUP_TIME, 2)


@public_router.get("/info", response_model=PublicInfoResponse)
def get_info() -> PublicInfoResponse:
    """Describe the API and list its endpoints."""
    return PublicInfoResponse(
        application=SERVICE_NAME,
        version=SERVICE_VERSION,
        description="API with JWT authentication and server-side revocation",
        endpoints=[
            "POST /api/auth/login - Obtain a token",
            "POST /api/auth/logout - Log out (revoke the token)",
            "GET /api/auth/validate - Check a token",
            "GET /api/data/user-info - User data",
            "GET /api/data/admin-data - Admin data (Admin only)",
            "GET /api/data/stats - Statistics",
        ],
    )


@public_router.get("/health")
def public_health() -> Dict[str, Any]:
    """
    Basic health check endpoint

    Returns 200 if service is running
    """
    return {
        "status": "Healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": _uptime(),
    }


@router.get("/ready")
def readiness_check(services: TokenServices = Depends(get_services)):
    """
    Readiness check - verifies the session ledger is reachable

    Returns 200 if ready to serve traffic, 503 if not ready
    """
    checks: Dict[str, Any] = {"ledger": False, "ledger_latency_ms": None}

    try:
        start = time.time()
        services.ledger.ping()
        checks["ledger"] = True
        checks["ledger_latency_ms"] = round((time.time() - start) * 1000, 2)
    except LedgerUnavailableError as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "checks": checks,
                "message": str(e),
            },
        )

    return {
        "status": "ready",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/live")
def liveness_check():
    """
    Liveness check - verifies service is alive

    Returns 200 if process is alive
    Used by Kubernetes liveness probe
    """
    return {
        "status": "alive",
        "uptime_seconds": _uptime(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

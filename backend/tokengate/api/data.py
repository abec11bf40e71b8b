"""Protected data endpoints (valid session required)"""
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends

from tokengate.api.deps import SessionContext, require_role, require_session
from tokengate.schemas.data import AdminDataResponse, StatsResponse, UserInfoResponse
from tokengate.utils.auth import ADMIN_ROLE

router = APIRouter(prefix="/api/data", tags=["data"])


@router.get("/user-info", response_model=UserInfoResponse)
def get_user_info(ctx: SessionContext = Depends(require_session)) -> UserInfoResponse:
    """Return the caller's identity and a few sample records."""
    return UserInfoResponse(
        message=f"Hello, {ctx.username}!",
        username=ctx.username,
        role=ctx.role,
        timestamp=datetime.now(timezone.utc),
        data=["Record 1", "Record 2", "Record 3"],
    )


@router.get("/admin-data", response_model=AdminDataResponse)
def get_admin_data(_: SessionContext = Depends(require_role(ADMIN_ROLE))) -> AdminDataResponse:
    """Administrative data, only for the Admin role."""
    return AdminDataResponse(
        message="This is administrative data",
        secret_info="Available to administrators only",
        access_level="Administrator",
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(ctx: SessionContext = Depends(require_session)) -> StatsResponse:
    now = datetime.now(timezone.utc)
    return StatsResponse(
        user=ctx.username,
        last_login=now - timedelta(hours=1),
        total_requests=42,
        active_since=now - timedelta(days=7),
    )

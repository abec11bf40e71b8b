"""Login, logout and token validation endpoints"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status

from tokengate.api.deps import SessionContext, get_bearer_token, get_services, require_claims
from tokengate.utils.metrics import record_login, record_logout
from tokengate.middleware.rate_limit import get_rate_limit, limiter
from tokengate.schemas.auth import LoginRequest, LoginResponse, LogoutResponse, ValidateResponse
from tokengate.services import TokenServices
from tokengate.utils.logger import logger

router = APIRouter(prefix="/api/auth", tags=["authentication"])


# ---------------------------------------------------------------------------
# POST /api/auth/login
# ---------------------------------------------------------------------------

@router.post("/login", response_model=LoginResponse)
@limiter.limit(get_rate_limit("login"))
def login(
    request: Request,
    credentials: LoginRequest,
    services: TokenServices = Depends(get_services),
) -> LoginResponse:
    """Exchange a username and password for a signed access token.

    The token becomes the caller's only current token: any token issued to
    the same username earlier stops validating (it is superseded, not revoked).
    Send it as `Authorization: Bearer <token>`; it expires after the
    configured session lifetime (8 hours by default).
    """
    principal = services.directory.authenticate(credentials.username, credentials.password)
    if principal is None:
        record_login(False)
        logger.warning(
            f"Failed login attempt for user {credentials.username}",
            extra={"username": credentials.username, "action": "login"},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    issued = services.issuer.issue(principal)
    services.ledger.activate(issued.jti, issued.username, issued.lifetime_seconds)

    record_login(True)
    logger.info(
        f"User {issued.username} logged in",
        extra={"username": issued.username, "role": issued.role, "jti": issued.jti, "action": "login"},
    )

    return LoginResponse(
        token=issued.token,
        expires_at=issued.expires_at,
        username=issued.username,
        role=issued.role,
    )


# ---------------------------------------------------------------------------
# POST /api/auth/logout
# ---------------------------------------------------------------------------

@router.post("/logout", response_model=LogoutResponse)
def logout(
    ctx: SessionContext = Depends(require_claims),
    services: TokenServices = Depends(get_services),
) -> LogoutResponse:
    """Revoke the presented token.

    Takes effect immediately for every subsequent request. Logging out with
    an already revoked or superseded (but unexpired) token succeeds and has
    no further effect.
    """
    remaining = (ctx.result.expires_at - datetime.now(timezone.utc)).total_seconds()
    services.ledger.revoke(ctx.jti, max(1.0, remaining))

    record_logout()
    logger.info(
        f"User {ctx.username} logged out",
        extra={"username": ctx.username, "jti": ctx.jti, "action": "logout"},
    )

    return LogoutResponse(message="Logged out successfully")


# ---------------------------------------------------------------------------
# GET /api/auth/validate
# ---------------------------------------------------------------------------

@router.get("/validate", response_model=ValidateResponse)
def validate(
    token: str = Depends(get_bearer_token),
    services: TokenServices = Depends(get_services),
) -> ValidateResponse:
    """Report whether the presented token is still good.

    Always answers 200 when a bearer token is present; an invalid token is
    reported as `isValid: false` with the reason.
    """
    result = services.validator.validate(token)
    return ValidateResponse(
        is_valid=result.is_valid,
        username=result.username,
        message=result.message,
        reason=result.reason.value,
    )

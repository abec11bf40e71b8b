"""API dependencies for authentication and authorization.

Every protected route resolves the caller through :func:`require_session`,
which runs the full validator (signature, claims, then ledger state). The
ledger checks are repeated on every request because a token can become
invalid without its bytes changing.

Routes that only need an authentic, unexpired token regardless of ledger
state (logout) use :func:`require_claims`.
"""
from typing import Callable, NamedTuple, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tokengate.services import TokenServices
from tokengate.utils.validator import ValidationReason, ValidationResult

_bearer_scheme = HTTPBearer(auto_error=False)


class SessionContext(NamedTuple):
    """Resolved caller identity, populated by :func:`require_session`."""
    token: str
    username: str
    role: str
    jti: str
    result: ValidationResult


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def get_services(request: Request) -> TokenServices:
    """Return the token services built at startup."""
    return request.app.state.services


def _reject(result: ValidationResult) -> HTTPException:
    if result.reason is ValidationReason.UNAVAILABLE:
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=result.message,
        )
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=result.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _context(token: str, result: ValidationResult) -> SessionContext:
    return SessionContext(
        token=token,
        username=result.username,
        role=result.role,
        jti=result.jti,
        result=result,
    )


# ---------------------------------------------------------------------------
# Bearer extraction
# ---------------------------------------------------------------------------

def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    """Require an ``Authorization: Bearer <token>`` header and return the token."""
    if not credentials or not credentials.credentials.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization: Bearer <token> header required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials.strip()


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

def require_claims(
    token: str = Depends(get_bearer_token),
    services: TokenServices = Depends(get_services),
) -> SessionContext:
    """Accept any authentic, unexpired token issued by this server."""
    result = services.validator.verify_claims(token)
    if not result.is_valid:
        raise _reject(result)
    return _context(token, result)


def require_session(
    token: str = Depends(get_bearer_token),
    services: TokenServices = Depends(get_services),
) -> SessionContext:
    """Accept only tokens that pass every validation step."""
    result = services.validator.validate(token)
    if not result.is_valid:
        raise _reject(result)
    return _context(token, result)


def require_role(role: str) -> Callable:
    """Return a FastAPI dependency that requires a valid session with ``role``.

    Usage::

        @router.get("/admin-data")
        def endpoint(ctx: SessionContext = Depends(require_role("Admin"))):
            ...
    """

    def _role_dep(ctx: SessionContext = Depends(require_session)) -> SessionContext:
        if ctx.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{role}' required (your role: '{ctx.role}')",
            )
        return ctx

    # Give FastAPI a unique name so it doesn't collapse distinct dependencies
    _role_dep.__name__ = f"require_role_{role.lower()}"
    return _role_dep

"""Application check: protected data routes must be called from a client app"""
from typing import Callable, Iterable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from tokengate.utils.logger import logger


def _matches_prefix(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


class AppCheckMiddleware(BaseHTTPMiddleware):
    """Reject requests to ``protected_paths`` that carry no User-Agent header.

    This is a coarse client check, not authentication; bearer validation
    still runs for the same routes.
    """

    def __init__(self, app: ASGIApp, protected_paths: Iterable[str] = ("/api/data",)):
        super().__init__(app)
        self.protected_paths = tuple(protected_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if any(_matches_prefix(path, prefix) for prefix in self.protected_paths):
            if not request.headers.get("user-agent", "").strip():
                logger.warning(
                    "Request without User-Agent rejected",
                    extra={"path": path, "method": request.method},
                )
                return JSONResponse(
                    status_code=403,
                    content={"detail": "Access only through the application"},
                )

        return await call_next(request)

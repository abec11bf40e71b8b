"""FastAPI application entry point"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from prometheus_fastapi_instrumentator import Instrumentator

from tokengate.api import auth, data, health
from tokengate.config import settings
from tokengate.errors import LedgerUnavailableError
from tokengate.middleware.app_check import AppCheckMiddleware
from tokengate.middleware.rate_limit import limiter
from tokengate.services import build_services
from tokengate.utils.logger import logger, setup_logging

# Setup logging
setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup: a ConfigurationError here aborts the process
    services = build_services(settings)
    app.state.services = services
    logger.info("TokenGate starting up", extra={"action": "startup"})
    logger.info(
        f"Token settings: {services.config!r}, ledger={type(services.ledger).__name__}",
        extra={"action": "startup"},
    )
    yield
    # Shutdown
    logger.info("TokenGate shutting down", extra={"action": "shutdown"})


# Create FastAPI app
app = FastAPI(
    title="TokenGate",
    description="Bearer token issuance, revocation and validation",
    version=health.SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ===== Middleware Setup =====

# User-Agent presence check for application-only routes
if settings.APP_CHECK_ENABLED:
    app.add_middleware(AppCheckMiddleware, protected_paths=settings.app_check_paths_list)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Authorization"],
)

# Monitoring middleware
if settings.METRICS_ENABLED:
    from tokengate.middleware.monitoring import MonitoringMiddleware
    app.add_middleware(MonitoringMiddleware)

    # Prometheus metrics
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/health/ready", "/health/live", "/api/public/health"],
        inprogress_name="tokengate_requests_inprogress",
        inprogress_labels=True
    )
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint=settings.METRICS_PATH, include_in_schema=False)

# Rate limiting (the limiter is disabled through RATE_LIMIT_ENABLED)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors"""
    logger.warning(
        "Rate limit exceeded",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please try again later.",
            "detail": str(exc.detail)
        }
    )

# ===== Route Setup =====

# Include routers
app.include_router(health.public_router)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(data.router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "service": health.SERVICE_NAME,
        "version": health.SERVICE_VERSION,
        "status": "operational",
        "docs": "/docs",
        "health": "/api/public/health",
        "metrics": settings.METRICS_PATH if settings.METRICS_ENABLED else None
    }


# ===== Error Handlers =====

@app.exception_handler(LedgerUnavailableError)
async def ledger_unavailable_handler(request: Request, exc: LedgerUnavailableError):
    """The ledger is the source of truth for revocation; without it nothing is granted"""
    logger.error(
        f"Session ledger unavailable: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )
    return JSONResponse(
        status_code=503,
        content={
            "error": "service_unavailable",
            "message": "Session store is unavailable. Please try again later."
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for uncaught errors"""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please contact support."
        }
    )


def run():
    """Run the service with uvicorn."""
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()

"""Application configuration"""
from dataclasses import dataclass
from typing import List, Optional

from pydantic_settings import BaseSettings

from tokengate.errors import ConfigurationError

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
MIN_SECRET_KEY_BYTES = 32


class Settings(BaseSettings):
    """Application settings"""

    # JWT signing (required; there are no safe defaults)
    JWT_SECRET_KEY: Optional[str] = None
    JWT_ISSUER: Optional[str] = None
    JWT_AUDIENCE: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"

    # Session lifetime, shared by the token exp claim and every ledger record
    SESSION_LIFETIME_SECONDS: int = 28800  # 8 hours

    # Session ledger
    LEDGER_BACKEND: str = "memory"  # memory or redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 5.0
    LEDGER_SWEEP_INTERVAL_SECONDS: int = 60

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "*"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: List[str] = ["100/minute", "1000/hour"]
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # Use redis:// for production
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Monitoring
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"

    # Requests to these path prefixes must carry a User-Agent header
    APP_CHECK_ENABLED: bool = True
    APP_CHECK_PATHS: str = "/api/data"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def app_check_paths_list(self) -> List[str]:
        return [path.strip() for path in self.APP_CHECK_PATHS.split(",") if path.strip()]


@dataclass(frozen=True)
class TokenConfig:
    """Signing material and session policy, fixed for the life of the process.

    Built once at startup by :func:`load_token_config` and handed to the
    issuer and validator, so no request ever re-reads ambient settings.
    """

    secret_key: str
    issuer: str
    audience: str
    algorithm: str = "HS256"
    lifetime_seconds: int = 28800

    def __repr__(self) -> str:
        return (
            f"TokenConfig(issuer={self.issuer!r}, audience={self.audience!r}, "
            f"algorithm={self.algorithm!r}, lifetime_seconds={self.lifetime_seconds})"
        )


def load_token_config(settings: "Settings") -> TokenConfig:
    """Validate the JWT settings and freeze them into a :class:`TokenConfig`.

    Raises:
        ConfigurationError: if the signing key, issuer or audience is missing,
            the key is too short for HMAC signing, the algorithm is not an HMAC
            algorithm, or the session lifetime is not positive.
    """
    missing = [
        name
        for name in ("JWT_SECRET_KEY", "JWT_ISSUER", "JWT_AUDIENCE")
        if not (getattr(settings, name) or "").strip()
    ]
    if missing:
        raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")

    if len(settings.JWT_SECRET_KEY.encode()) < MIN_SECRET_KEY_BYTES:
        raise ConfigurationError(
            f"JWT_SECRET_KEY must be at least {MIN_SECRET_KEY_BYTES} bytes long"
        )

    if settings.JWT_ALGORITHM not in SUPPORTED_ALGORITHMS:
        raise ConfigurationError(
            f"Unsupported JWT_ALGORITHM '{settings.JWT_ALGORITHM}' "
            f"(expected one of: {', '.join(SUPPORTED_ALGORITHMS)})"
        )

    if settings.SESSION_LIFETIME_SECONDS <= 0:
        raise ConfigurationError("SESSION_LIFETIME_SECONDS must be positive")

    return TokenConfig(
        secret_key=settings.JWT_SECRET_KEY,
        issuer=settings.JWT_ISSUER.strip(),
        audience=settings.JWT_AUDIENCE.strip(),
        algorithm=settings.JWT_ALGORITHM,
        lifetime_seconds=settings.SESSION_LIFETIME_SECONDS,
    )


settings = Settings()

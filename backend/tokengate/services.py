"""Wiring of the token lifecycle components built once at startup"""
from dataclasses import dataclass
from typing import Optional

from tokengate.config import Settings, TokenConfig, load_token_config
from tokengate.errors import ConfigurationError
from tokengate.ledger import InMemorySessionLedger, RedisSessionLedger, SessionLedger
from tokengate.utils.auth import UserDirectory
from tokengate.utils.jwt_utils import TokenIssuer
from tokengate.utils.logger import logger
from tokengate.utils.validator import TokenValidator


@dataclass(frozen=True)
class TokenServices:
    config: TokenConfig
    directory: UserDirectory
    ledger: SessionLedger
    issuer: TokenIssuer
    validator: TokenValidator


def build_ledger(settings: Settings) -> SessionLedger:
    """Create the session ledger selected by ``LEDGER_BACKEND``."""
    backend = settings.LEDGER_BACKEND.lower()
    if backend == "memory":
        return InMemorySessionLedger(sweep_interval=settings.LEDGER_SWEEP_INTERVAL_SECONDS)
    if backend == "redis":
        logger.info("Using Redis session ledger")
        return RedisSessionLedger.from_url(
            settings.REDIS_URL, socket_timeout=settings.REDIS_SOCKET_TIMEOUT
        )
    raise ConfigurationError(
        f"Unknown LEDGER_BACKEND '{settings.LEDGER_BACKEND}' (expected 'memory' or 'redis')"
    )


def build_services(settings: Settings, ledger: Optional[SessionLedger] = None) -> TokenServices:
    """Validate configuration and assemble issuer, ledger and validator.

    Raises:
        ConfigurationError: on missing or unusable JWT settings.
    """
    config = load_token_config(settings)
    if ledger is None:
        ledger = build_ledger(settings)

    return TokenServices(
        config=config,
        directory=UserDirectory(),
        ledger=ledger,
        issuer=TokenIssuer(config),
        validator=TokenValidator(config, ledger),
    )

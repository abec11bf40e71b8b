"""Exceptions raised by the token lifecycle subsystem.

An invalid token is an expected outcome and is reported through
``ValidationResult``; only the failures below are exceptional.
"""


class TokenGateError(Exception):
    """Base exception for TokenGate."""


class ConfigurationError(TokenGateError):
    """Signing key, issuer or audience missing or unusable. Fatal at startup."""


class LedgerUnavailableError(TokenGateError):
    """The session ledger's backing store could not be reached."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Session ledger unavailable during {operation}: {cause}")

"""Session ledger interface"""
from abc import ABC, abstractmethod
from typing import Optional

from tokengate.models.ledger_entry import LedgerSnapshot


class SessionLedger(ABC):
    """Volatile, expiring record of which tokens are active, revoked and current.

    Tokens are identified by their ``jti`` claim. Every record carries a
    time-to-live; once it elapses, reads behave as if the record never
    existed. Implementations must be safe to share between request threads,
    and ``activate`` must never expose the entry without the current pointer
    (or the reverse) to :meth:`snapshot`.

    Backends raise :class:`~tokengate.errors.LedgerUnavailableError` when
    their store cannot be reached.
    """

    @abstractmethod
    def activate(self, jti: str, username: str, ttl: float) -> None:
        """Mark the token active and make it the current token for ``username``."""

    @abstractmethod
    def revoke(self, jti: str, ttl: float) -> None:
        """Mark the token revoked for ``ttl`` seconds and clear its active flag now."""

    @abstractmethod
    def is_revoked(self, jti: str) -> bool:
        ...

    @abstractmethod
    def is_active(self, jti: str) -> bool:
        ...

    @abstractmethod
    def current_token_for(self, username: str) -> Optional[str]:
        """Return the jti of the most recently activated token for ``username``."""

    @abstractmethod
    def snapshot(self, jti: str, username: str) -> LedgerSnapshot:
        """Read revoked/active/current for a token and username consistently."""

    @abstractmethod
    def prune_expired(self) -> int:
        """Drop expired records, returning how many were removed."""

    @abstractmethod
    def ping(self) -> None:
        """Raise ``LedgerUnavailableError`` if the backing store is down."""

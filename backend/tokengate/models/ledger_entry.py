"""Ledger records: one entry per issued token, one current pointer per username"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class LedgerEntry:
    """Activity and revocation state for a single token, keyed by its jti.

    ``revoked_at`` is terminal: once set it is never cleared, and an entry
    with ``revoked_at`` set is never active again. ``expires_at`` is measured
    on the ledger's own clock.
    """

    jti: str
    active: bool
    expires_at: float
    revoked_at: Optional[float] = None

    @property
    def revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CurrentPointer:
    """The most recently activated token for a username."""

    username: str
    jti: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class LedgerSnapshot:
    """All three ledger facts for a (token, username) pair, read in one step."""

    revoked: bool
    active: bool
    current_jti: Optional[str]

    def is_current(self, jti: str) -> bool:
        return self.current_jti is not None and self.current_jti == jti

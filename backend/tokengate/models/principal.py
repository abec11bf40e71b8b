"""Principal and issued-token value objects"""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Principal:
    """An authenticated identity as returned by the credential directory."""

    username: str
    role: str


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed access token and the claims it carries."""

    token: str
    jti: str
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @property
    def lifetime_seconds(self) -> int:
        return int((self.expires_at - self.issued_at).total_seconds())

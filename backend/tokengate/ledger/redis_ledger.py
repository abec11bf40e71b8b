"""Session ledger backed by Redis native key expiry"""
import math
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from redis import Redis, RedisError

from tokengate.errors import LedgerUnavailableError
from tokengate.ledger.base import SessionLedger
from tokengate.models.ledger_entry import LedgerSnapshot


class RedisSessionLedger(SessionLedger):
    """Ledger shared through Redis.

    Each token is a hash at ``{prefix}:entry:{jti}`` with optional ``active``
    and ``revoked_at`` fields; each username has a string pointer at
    ``{prefix}:current:{username}``. Multi-key writes and the snapshot read
    run as MULTI/EXEC transactions.
    """

    def __init__(self, client: Redis, key_prefix: str = "tokengate"):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, redis_url: str, *, socket_timeout: float = 5.0) -> "RedisSessionLedger":
        client = Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    @staticmethod
    def _ttl_seconds(ttl: float) -> int:
        """Round up to whole seconds, at least 1; Redis rejects zero or negative TTLs."""
        return max(1, math.ceil(ttl))

    def _entry_key(self, jti: str) -> str:
        return f"{self.key_prefix}:entry:{jti}"

    def _current_key(self, username: str) -> str:
        return f"{self.key_prefix}:current:{username}"

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except RedisError as exc:
            raise LedgerUnavailableError(operation, exc) from exc

    def activate(self, jti: str, username: str, ttl: float) -> None:
        seconds = self._ttl_seconds(ttl)
        entry_key = self._entry_key(jti)
        with self._guard("activate"):
            pipe = self.client.pipeline(transaction=True)
            pipe.hset(entry_key, "active", "1")
            pipe.expire(entry_key, seconds)
            pipe.set(self._current_key(username), jti, ex=seconds)
            pipe.execute()

    def revoke(self, jti: str, ttl: float) -> None:
        entry_key = self._entry_key(jti)
        with self._guard("revoke"):
            pipe = self.client.pipeline(transaction=True)
            pipe.hsetnx(entry_key, "revoked_at", repr(time.time()))
            pipe.hdel(entry_key, "active")
            pipe.expire(entry_key, self._ttl_seconds(ttl))
            pipe.execute()

    def is_revoked(self, jti: str) -> bool:
        with self._guard("is_revoked"):
            return bool(self.client.hexists(self._entry_key(jti), "revoked_at"))

    def is_active(self, jti: str) -> bool:
        with self._guard("is_active"):
            entry = self.client.hgetall(self._entry_key(jti))
        return _is_active(entry)

    def current_token_for(self, username: str) -> Optional[str]:
        with self._guard("current_token_for"):
            return self.client.get(self._current_key(username))

    def snapshot(self, jti: str, username: str) -> LedgerSnapshot:
        with self._guard("snapshot"):
            pipe = self.client.pipeline(transaction=True)
            pipe.hgetall(self._entry_key(jti))
            pipe.get(self._current_key(username))
            entry, current = pipe.execute()

        return LedgerSnapshot(
            revoked="revoked_at" in (entry or {}),
            active=_is_active(entry),
            current_jti=current,
        )

    def prune_expired(self) -> int:
        # Redis expires keys natively
        return 0

    def ping(self) -> None:
        with self._guard("ping"):
            self.client.ping()


def _is_active(entry: Optional[dict]) -> bool:
    # A revoked token is never active, even if a stale flag survived
    return bool(entry) and entry.get("active") == "1" and "revoked_at" not in entry

"""In-process session ledger backed by dicts and a single lock"""
import threading
import time
from typing import Callable, Dict, Optional

from tokengate.ledger.base import SessionLedger
from tokengate.models.ledger_entry import CurrentPointer, LedgerEntry, LedgerSnapshot
from tokengate.utils.logger import logger


class InMemorySessionLedger(SessionLedger):
    """Thread-safe ledger for a single process.

    Every write, and every read, runs inside one short critical section, so a
    reader never sees an activation half applied. Expired records are
    dropped lazily when read, and a full sweep runs on writes at most once
    per ``sweep_interval`` seconds.
    """

    def __init__(
        self,
        sweep_interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._lock = threading.Lock()
        self._entries: Dict[str, LedgerEntry] = {}
        self._current: Dict[str, CurrentPointer] = {}
        self._last_sweep = clock()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def activate(self, jti: str, username: str, ttl: float) -> None:
        with self._lock:
            now = self._clock()
            expires_at = now + ttl
            existing = self._live_entry(jti, now)

            # A revoked token stays revoked
            revoked_at = existing.revoked_at if existing else None
            self._entries[jti] = LedgerEntry(
                jti=jti,
                active=revoked_at is None,
                expires_at=expires_at,
                revoked_at=revoked_at,
            )
            self._current[username] = CurrentPointer(
                username=username, jti=jti, expires_at=expires_at
            )
            self._maybe_sweep(now)

    def revoke(self, jti: str, ttl: float) -> None:
        with self._lock:
            now = self._clock()
            existing = self._live_entry(jti, now)
            revoked_at = existing.revoked_at if existing and existing.revoked else now
            self._entries[jti] = LedgerEntry(
                jti=jti,
                active=False,
                expires_at=now + ttl,
                revoked_at=revoked_at,
            )
            self._maybe_sweep(now)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def is_revoked(self, jti: str) -> bool:
        with self._lock:
            entry = self._live_entry(jti, self._clock())
            return entry is not None and entry.revoked

    def is_active(self, jti: str) -> bool:
        with self._lock:
            entry = self._live_entry(jti, self._clock())
            return entry is not None and entry.active

    def current_token_for(self, username: str) -> Optional[str]:
        with self._lock:
            pointer = self._live_pointer(username, self._clock())
            return pointer.jti if pointer else None

    def snapshot(self, jti: str, username: str) -> LedgerSnapshot:
        with self._lock:
            now = self._clock()
            entry = self._live_entry(jti, now)
            pointer = self._live_pointer(username, now)
            return LedgerSnapshot(
                revoked=entry is not None and entry.revoked,
                active=entry is not None and entry.active,
                current_jti=pointer.jti if pointer else None,
            )

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def prune_expired(self) -> int:
        with self._lock:
            return self._sweep(self._clock())

    def ping(self) -> None:
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # The helpers below assume the lock is held.

    def _live_entry(self, jti: str, now: float) -> Optional[LedgerEntry]:
        entry = self._entries.get(jti)
        if entry is None:
            return None
        if entry.is_expired(now):
            del self._entries[jti]
            return None
        return entry

    def _live_pointer(self, username: str, now: float) -> Optional[CurrentPointer]:
        pointer = self._current.get(username)
        if pointer is None:
            return None
        if pointer.is_expired(now):
            del self._current[username]
            return None
        return pointer

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self._sweep_interval:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        expired_entries = [jti for jti, entry in self._entries.items() if entry.is_expired(now)]
        for jti in expired_entries:
            del self._entries[jti]

        expired_pointers = [
            username for username, pointer in self._current.items() if pointer.is_expired(now)
        ]
        for username in expired_pointers:
            del self._current[username]

        self._last_sweep = now
        removed = len(expired_entries) + len(expired_pointers)
        if removed:
            logger.debug(f"Ledger sweep removed {removed} expired records")
        return removed

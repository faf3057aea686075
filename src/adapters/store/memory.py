"""
In-memory key-value store adapter - Implements KeyValueStore protocol.

Process-local store with expiring entries for tests and single-instance
development. Expired entries behave exactly like missing keys. They are
dropped when read, and every write sweeps out any others that have
expired, so keys that are never read again do not accumulate. A single
lock serializes every operation, which makes get_and_delete atomic
across threads.
"""

import threading
import time
from collections.abc import Callable


class InMemoryKeyValueStore:
    """
    Implements KeyValueStore protocol with a dict guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The clock is injectable so tests can advance time without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (value, expires_at); value is str or dict[str, str]
        self._entries: dict[str, tuple[str | dict[str, str], float]] = {}

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._sweep()
            self._entries[key] = (value, self._expiry(ttl_seconds))

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._live_value(key)
            return value if isinstance(value, str) else None

    def get_and_delete(self, key: str) -> str | None:
        with self._lock:
            value = self._live_value(key)
            if not isinstance(value, str):
                return None
            del self._entries[key]
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def hash_create(self, key: str, fields: dict[str, str], ttl_seconds: int) -> None:
        with self._lock:
            self._sweep()
            self._entries[key] = (dict(fields), self._expiry(ttl_seconds))

    def hash_get_all(self, key: str) -> dict[str, str]:
        with self._lock:
            value = self._live_value(key)
            return dict(value) if isinstance(value, dict) else {}

    def hash_set_if_exists(self, key: str, field: str, value: str) -> bool:
        with self._lock:
            current = self._live_value(key)
            if not isinstance(current, dict):
                return False
            current[field] = value
            return True

    def ping(self) -> bool:
        return True

    def _expiry(self, ttl_seconds: int) -> float:
        if ttl_seconds <= 0:
            raise ValueError(f"TTL must be positive, got {ttl_seconds}")
        return self._clock() + ttl_seconds

    def _sweep(self) -> None:
        # Caller must hold the lock
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def _live_value(self, key: str) -> str | dict[str, str] | None:
        # Caller must hold the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

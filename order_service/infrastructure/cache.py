"""
Name: Fingerprint Cache

Responsibilities:
  - Keep an in-process map of order_uid -> CacheEntry
  - Answer "has this order been seen/persisted?" and serve cached payloads
  - Expire entries by TTL (checked on every read, swept in the background)

Collaborators:
  - domain.cache.OrderCache: Port implemented here
  - metrics.py: hit/miss/expired counters and size gauge

Constraints:
  - One readers-writer lock guards the map; readers never block each other
  - No I/O under the lock
  - Never raises

Notes:
  - ttl_seconds <= 0 disables TTL (entries live for the process lifetime)
  - Expired entries are reported absent immediately; physical deletion is
    left to the sweeper
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Tuple

from ..domain.entities import CacheEntry
from ..logger import logger
from ..metrics import record_cache_lookup, set_cache_size


class ReadWriteLock:
    """
    R: Writer-preferring readers-writer lock.

    Many readers may hold the lock together; a writer holds it alone.
    Waiting writers block new readers so sweeps cannot starve.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class FingerprintCache:
    """
    Thread-safe TTL cache of order fingerprints (and optionally payloads).

    Attributes:
        ttl_seconds: Entry lifetime; <= 0 disables expiry
        sweep_interval_seconds: Background sweep period (default ttl / 2)
    """

    def __init__(
        self,
        ttl_seconds: float = 1800.0,
        *,
        sweep_interval_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        start_sweeper: bool = True,
    ):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = ReadWriteLock()
        self._ttl_seconds = ttl_seconds
        self._clock = clock

        # R: Counters are touched by concurrent readers; keep them off the RW lock
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._expired = 0

        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

        if ttl_seconds > 0:
            self.sweep_interval_seconds = sweep_interval_seconds or ttl_seconds / 2
            if start_sweeper:
                self._sweeper = threading.Thread(
                    target=self._sweep_loop,
                    name="order-cache-sweeper",
                    daemon=True,
                )
                self._sweeper.start()
        else:
            self.sweep_interval_seconds = None

    # ------------------------------------------------------------------
    # Port operations
    # ------------------------------------------------------------------

    def set(self, key: str, value: Optional[bytes] = None) -> None:
        """Insert or fully replace the entry for key."""
        entry = CacheEntry(value=value, created_at=self._clock())
        with self._lock.write():
            self._entries[key] = entry
            size = len(self._entries)
        set_cache_size(size)

    def has(self, key: str) -> bool:
        return self._lookup(key) is not None

    def get(self, key: str) -> Tuple[Optional[bytes], bool]:
        entry = self._lookup(key)
        if entry is None:
            return None, False
        return entry.value, True

    def delete(self, key: str) -> None:
        with self._lock.write():
            self._entries.pop(key, None)
            size = len(self._entries)
        set_cache_size(size)

    def dump(self) -> Dict[str, CacheEntry]:
        """Snapshot of live entries (copy taken under the shared lock)."""
        with self._lock.read():
            snapshot = dict(self._entries)
        now = self._clock()
        return {
            key: entry
            for key, entry in snapshot.items()
            if not entry.is_expired(self._ttl_seconds, now)
        }

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def sweep_expired(self) -> int:
        """
        R: Delete every expired entry in one exclusive pass.

        Returns:
            Number of entries removed
        """
        if self._ttl_seconds <= 0:
            return 0
        now = self._clock()
        with self._lock.write():
            expired = [
                key
                for key, entry in self._entries.items()
                if entry.is_expired(self._ttl_seconds, now)
            ]
            for key in expired:
                del self._entries[key]
            size = len(self._entries)
        set_cache_size(size)
        if expired:
            logger.debug(
                "Cache sweep removed expired entries",
                extra={"removed": len(expired), "size": size},
            )
        return len(expired)

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.sweep_interval_seconds):
            self.sweep_expired()

    def close(self) -> None:
        """Stop the background sweeper (idempotent)."""
        self._stop.set()
        if self._sweeper is not None and self._sweeper.is_alive():
            self._sweeper.join(timeout=5)
        self._sweeper = None

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def stats(self) -> dict:
        with self._lock.read():
            size = len(self._entries)
        with self._stats_lock:
            total = self._hits + self._misses
            return {
                "size": size,
                "ttl_seconds": self._ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
                "expired": self._expired,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def _lookup(self, key: str) -> Optional[CacheEntry]:
        with self._lock.read():
            entry = self._entries.get(key)

        if entry is None:
            self._count("miss")
            return None
        # R: Age is re-validated on every read; the sweeper only reclaims memory
        if entry.is_expired(self._ttl_seconds, self._clock()):
            self._count("expired")
            return None
        self._count("hit")
        return entry

    def _count(self, result: str) -> None:
        with self._stats_lock:
            if result == "hit":
                self._hits += 1
            else:
                self._misses += 1
                if result == "expired":
                    self._expired += 1
        record_cache_lookup(result)

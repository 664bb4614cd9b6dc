"""
In-memory result cache keyed by content hash.

Byte-identical uploads skip acquisition and parsing entirely. The cache
is a performance optimization only: two concurrent extractions of the
same bytes may both run in full, and any fault here must degrade to a
miss rather than fail the request.
"""

import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .schemas.paystub import PaystubRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL_SECONDS = 15 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


def compute_content_hash(data: bytes) -> str:
    """SHA-256 hex digest of the file bytes."""
    return hashlib.sha256(data).hexdigest()


@dataclass
class CacheEntry:
    key: str
    data: PaystubRecord
    expires_at: float


class ResultCache:
    """
    Bounded, expiring map from content hash to PaystubRecord.

    A single lock guards the entry map. Expiry is checked lazily on get()
    and eagerly by sweep(), which a daemon thread runs on an interval
    between start() and close().
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, data: bytes) -> Optional[PaystubRecord]:
        """Cached record for these bytes, or None if absent or expired."""
        key = compute_content_hash(data)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.expires_at <= self._clock():
                return None
            return entry.data

    def set(self, data: bytes, record: PaystubRecord) -> None:
        """Store a record, evicting the soonest-expiring entry when full."""
        key = compute_content_hash(data)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict_oldest()
            self._entries[key] = CacheEntry(
                key=key,
                data=record,
                expires_at=self._clock() + self.ttl_seconds,
            )

    def _evict_oldest(self) -> None:
        # Caller holds the lock
        if not self._entries:
            return
        oldest = min(self._entries.values(), key=lambda e: e.expires_at)
        del self._entries[oldest.key]
        logger.debug("Evicted cache entry %s", oldest.key[:12])

    def sweep(self) -> int:
        """Remove expired entries. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _run_sweeper(self) -> None:
        while not self._stop.wait(self.sweep_interval_seconds):
            try:
                self.sweep()
            except Exception as e:
                logger.warning("Cache sweep failed: %s", e)

    def start(self) -> None:
        """Start the background sweep thread (idempotent)."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run_sweeper,
            name="paystub-cache-sweeper",
            daemon=True,
        )
        self._thread.start()

    def close(self) -> None:
        """Stop the background sweep thread."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "ResultCache":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

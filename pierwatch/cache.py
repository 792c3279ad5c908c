"""
In-memory cache for Schiphol API responses.

Every chart on the dashboard asks for the same underlying flight list and
only processes it differently, so queries are coalesced onto two shared
keys:

- "all pages for date D" (the daily dashboard dataset)
- "single page, no date"

Freshness and expiry are separate windows. An entry is served only while
it is younger than the cache duration (10 minutes); it is kept around
until the expiry window (15 minutes) passes and is purged on the next
write. There is no background timer.

The clock is injectable so tests can move time forward deterministically.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pierwatch.config import config

logger = logging.getLogger(__name__)

SHARED_ALL_PAGES_KEY = 'dashboard-shared-all-pages'
SHARED_SINGLE_PAGE_KEY = 'dashboard-shared-single-page'


def cache_key(query) -> str:
    """
    Derive the shared cache key for a flight query.

    Direction and airline are not part of the key; every dashboard panel
    shares one upstream call.
    """
    if query.fetch_all_pages:
        suffix = f'-{query.schedule_date}' if query.schedule_date else ''
        return f'{SHARED_ALL_PAGES_KEY}{suffix}'
    return SHARED_SINGLE_PAGE_KEY


@dataclass
class CacheEntry:
    """Cached response payload and the time it was stored."""
    data: Any
    stored_at: float


class ResponseCache:
    """
    Thread-safe time-bounded memoization of fetch results.

    Last writer wins; no transactions are needed.
    """

    def __init__(
        self,
        cache_duration: Optional[float] = None,
        expiry_window: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        if cache_duration is None:
            cache_duration = config.cache.duration_seconds
        if expiry_window is None:
            expiry_window = config.cache.expiry_seconds
        self.cache_duration = cache_duration
        self.expiry_window = expiry_window
        if self.expiry_window <= self.cache_duration:
            raise ValueError('expiry_window must be greater than cache_duration')

        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at < self.cache_duration

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached response.

        Returns None if not cached or older than the cache duration.
        Stale entries are left in place for evict_expired() to purge.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry, self._clock()):
                self._hits += 1
                logger.debug(f'Cache hit for {key}')
                return entry.data
            self._misses += 1

        logger.debug(f'Cache miss for {key}')
        return None

    def put(self, key: str, data: Any) -> None:
        """Store a response, then purge anything past the expiry window."""
        with self._lock:
            self._entries[key] = CacheEntry(data=data, stored_at=self._clock())
            self.evict_expired()

    def evict_expired(self) -> int:
        """Remove entries older than the expiry window. Returns count removed."""
        with self._lock:
            now = self._clock()
            expired = [
                key for key, entry in self._entries.items()
                if now - entry.stored_at > self.expiry_window
            ]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.debug(f'Evicted {len(expired)} expired cache entries')
        return len(expired)

    def clear(self) -> int:
        """Clear entire cache. Returns count of removed entries."""
        with self._lock:
            cleared = len(self._entries)
            self._entries.clear()

        logger.info(f'Cache cleared ({cleared} entries)')
        return cleared

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            now = self._clock()
            entries = list(self._entries.values())
            lookups = self._hits + self._misses
            oldest = max((now - e.stored_at for e in entries), default=0)
            return {
                'total_entries': len(entries),
                'valid_entries': sum(1 for e in entries if self._is_fresh(e, now)),
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / lookups if lookups > 0 else 0,
                'cache_duration_minutes': self.cache_duration / 60,
                'oldest_entry_minutes': int(oldest // 60),
            }


# Singleton instance
response_cache = ResponseCache()

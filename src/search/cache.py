"""
Result caching layer.

A process-local TTL cache of search outcomes keyed by the query that
produced them: endpoint plus request parameters.  Identical
(mode, filters, page) requests inside the TTL are answered without a
second backend round-trip.  Only successful pages are stored.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Mapping

from src.core.config import get_settings
from src.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    """A single cached result."""
    key: str
    value: Any
    created_at: float
    ttl: float
    hit_count: int = 0

    @property
    def is_expired(self) -> bool:
        return (time.time() - self.created_at) > self.ttl


class ResultCache:
    """Thread-safe in-memory TTL cache for search outcomes.

    Parameters
    ----------
    ttl : float
        Time-to-live in seconds for each entry.
    max_size : int
        Maximum number of entries. Oldest entries are evicted when full.
    """

    def __init__(self, ttl: float = 300.0, max_size: int = 256):
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._max_size = max_size
        self._hits = 0
        self._misses = 0

    # ── Public API ──────────────────────────────────────

    def get(self, endpoint: str, params: Mapping[str, str]) -> Any | None:
        """Retrieve a cached result, or ``None`` on miss / expiry."""
        key = self.make_key(endpoint, params)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.is_expired:
                del self._store[key]
                self._misses += 1
                return None
            entry.hit_count += 1
            self._hits += 1
            logger.debug("Cache HIT key=%s hits=%d", key[:16], entry.hit_count)
            return entry.value

    def put(self, endpoint: str, params: Mapping[str, str], value: Any) -> None:
        key = self.make_key(endpoint, params)
        with self._lock:
            if len(self._store) >= self._max_size and key not in self._store:
                self._evict_oldest()
            self._store[key] = CacheEntry(
                key=key, value=value, created_at=time.time(), ttl=self._ttl,
            )
        logger.debug("Cache PUT key=%s size=%d", key[:16], len(self._store))

    def invalidate(self, endpoint: str | None = None, params: Mapping[str, str] | None = None) -> int:
        """Remove one entry, or flush everything when *endpoint* is None."""
        with self._lock:
            if endpoint is None:
                count = len(self._store)
                self._store.clear()
                return count
            key = self.make_key(endpoint, params or {})
            if key in self._store:
                del self._store[key]
                return 1
            return 0

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._store),
                "max_size": self._max_size,
                "ttl_seconds": self._ttl,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total, 3) if total else 0.0,
            }

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count removed."""
        with self._lock:
            expired = [k for k, v in self._store.items() if v.is_expired]
            for k in expired:
                del self._store[k]
            return len(expired)

    # ── Internals ───────────────────────────────────────

    @staticmethod
    def make_key(endpoint: str, params: Mapping[str, str]) -> str:
        """Deterministic key; parameter order does not matter."""
        raw = endpoint + "|" + json.dumps(dict(params), sort_keys=True)
        return hashlib.sha256(raw.encode()).hexdigest()

    def _evict_oldest(self) -> None:
        if not self._store:
            return
        oldest_key = min(self._store, key=lambda k: self._store[k].created_at)
        del self._store[oldest_key]


_cache: ResultCache | None = None


def get_cache() -> ResultCache:
    """Return the global cache instance."""
    global _cache
    if _cache is None:
        settings = get_settings()
        _cache = ResultCache(ttl=settings.result_cache_ttl, max_size=settings.result_cache_max_size)
    return _cache

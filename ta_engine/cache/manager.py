"""
In-memory TTL cache for provider fetches and indicator results.

Entries are keyed ``category:SYMBOL[:secondary]``. Expired entries are
deleted lazily when read; sweep() deletes everything older than the default
TTL proactively. At capacity, a batch of least-recently-accessed entries is
evicted before a new key is inserted.
"""

import hashlib
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import orjson

from ..config.defaults import CacheParams
from ..logging.config import get_cache_logger

logger = get_cache_logger(__name__)

_JSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS
ENTRY_OVERHEAD_BYTES = 32


class CacheCategory(str, Enum):
    PRICE = "price"
    INTRADAY = "intraday"
    FUNDAMENTALS = "financial"
    INDICATOR = "indicator"


@dataclass
class CacheEntry:
    """Cached value with access bookkeeping."""
    value: Any
    category: CacheCategory
    created_at: float
    last_access_at: float
    hit_count: int = 0


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time cache statistics."""
    total_entries: int
    hit_rate: float                  # Percent of lookups that hit
    hits: int
    misses: int
    memory_usage_kb: float           # Rough estimate, see CacheManager.stats
    oldest_entry: Optional[float]    # created_at of the oldest entry
    newest_entry: Optional[float]


def _serialize(value: Any) -> bytes:
    return orjson.dumps(value, option=_JSON_OPTIONS, default=str)


def hash_params(params: Any) -> str:
    """Stable short hash of a JSON-serializable parameter structure."""
    return hashlib.sha1(_serialize(params)).hexdigest()[:16]


class CacheManager:
    """Capacity-bounded TTL cache with hit/miss statistics. Thread-safe."""

    def __init__(self, params: Optional[CacheParams] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self.params = params or CacheParams()
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.RLock()

    def ttl_for(self, category: CacheCategory) -> float:
        return {
            CacheCategory.PRICE: self.params.price_ttl,
            CacheCategory.INTRADAY: self.params.intraday_ttl,
            CacheCategory.FUNDAMENTALS: self.params.fundamentals_ttl,
            CacheCategory.INDICATOR: self.params.indicator_ttl,
        }.get(category, self.params.default_ttl)

    @staticmethod
    def make_key(category: CacheCategory, symbol: str, key: Optional[str] = None) -> str:
        parts = [category.value, symbol.upper()]
        if key is not None:
            parts.append(str(key))
        return ":".join(parts)

    def get(self, category: CacheCategory, symbol: str, key: Optional[str] = None) -> Optional[Any]:
        """Return the cached value, or None on a miss (absent or expired)."""
        full_key = self.make_key(category, symbol, key)
        with self._lock:
            entry = self._entries.get(full_key)
            now = self._clock()
            if entry is None:
                self._misses += 1
                return None
            if now - entry.created_at > self.ttl_for(entry.category):
                del self._entries[full_key]
                self._misses += 1
                return None

            entry.last_access_at = now
            entry.hit_count += 1
            self._hits += 1
            return entry.value

    def set(self, category: CacheCategory, symbol: str, value: Any,
            key: Optional[str] = None) -> None:
        full_key = self.make_key(category, symbol, key)
        with self._lock:
            if full_key not in self._entries and len(self._entries) >= self.params.max_entries:
                self._evict()
            now = self._clock()
            self._entries[full_key] = CacheEntry(
                value=value,
                category=category,
                created_at=now,
                last_access_at=now,
            )

    def _evict(self) -> None:
        batch = max(1, self.params.eviction_batch)
        oldest = sorted(self._entries.items(), key=lambda item: item[1].last_access_at)[:batch]
        for full_key, _entry in oldest:
            del self._entries[full_key]
        logger.debug("Evicted least recently used entries", evicted=len(oldest))

    def sweep(self) -> int:
        """Delete entries older than the default TTL. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [
                full_key for full_key, entry in self._entries.items()
                if now - entry.created_at > self.params.default_ttl
            ]
            for full_key in expired:
                del self._entries[full_key]
        if expired:
            logger.info("Swept expired cache entries", removed=len(expired))
        return len(expired)

    def invalidate(self, category: CacheCategory, symbol: Optional[str] = None) -> int:
        """Delete all entries of a category, optionally only for one symbol."""
        prefix = self.make_key(category, symbol) if symbol else category.value
        with self._lock:
            doomed = [
                k for k in self._entries
                if k == prefix or k.startswith(prefix + ":")
            ]
            for full_key in doomed:
                del self._entries[full_key]
        return len(doomed)

    def clear_pattern(self, fragment: str) -> int:
        """Delete every entry whose key contains ``fragment``."""
        with self._lock:
            doomed = [k for k in self._entries if fragment in k]
            for full_key in doomed:
                del self._entries[full_key]
        return len(doomed)

    def clear(self) -> None:
        """Delete all entries and reset the counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        """
        Current statistics.

        Memory is estimated as two bytes per character of key and of the
        value's JSON form plus a fixed per-entry overhead.
        """
        with self._lock:
            entries = list(self._entries.items())
            hits, misses = self._hits, self._misses

        memory = sum(
            len(k) * 2 + len(_serialize(entry.value)) * 2 + ENTRY_OVERHEAD_BYTES
            for k, entry in entries
        )
        created = [entry.created_at for _, entry in entries]
        lookups = hits + misses
        return CacheStats(
            total_entries=len(entries),
            hit_rate=round(hits / lookups * 100, 2) if lookups else 0.0,
            hits=hits,
            misses=misses,
            memory_usage_kb=round(memory / 1024, 2),
            oldest_entry=min(created) if created else None,
            newest_entry=max(created) if created else None,
        )

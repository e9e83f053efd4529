"""TTL cache for provider fetches and indicator results."""

from .manager import CacheCategory, CacheEntry, CacheManager, CacheStats, hash_params

__all__ = [
    "CacheCategory",
    "CacheEntry",
    "CacheManager",
    "CacheStats",
    "hash_params",
]

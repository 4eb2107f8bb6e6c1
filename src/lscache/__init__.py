"""
lscache: namespaced, expiring key-value cache over a flat, size-bounded store.
"""

from lscache.bucket import Bucket
from lscache.service import CacheService, clear_cache_singleton, get_cache

__version__ = "0.1.0"

__all__ = [
    "Bucket",
    "CacheService",
    "__version__",
    "clear_cache_singleton",
    "get_cache",
]

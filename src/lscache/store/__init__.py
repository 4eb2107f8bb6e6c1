"""
Backing stores for lscache.

This package provides:
- StorageBackend (base.py): the flat, synchronous host store interface
- MemoryStore (memory.py): quota-bounded in-process store
- SQLiteStore (sqlite.py): quota-bounded SQLite file store
- StoreAdapter (adapter.py): the cache's only view of a backend
"""

from lscache.store.adapter import StoreAdapter
from lscache.store.base import StorageBackend
from lscache.store.memory import MemoryStore, QuotaExceeded
from lscache.store.sqlite import SQLiteStore

__all__ = [
    "MemoryStore",
    "QuotaExceeded",
    "SQLiteStore",
    "StorageBackend",
    "StoreAdapter",
]

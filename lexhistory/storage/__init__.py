"""Storage layer for persistence.

Barrel export for backends, ordering and the entry store.
"""

from .backends import MemoryBackend, JsonFileBackend, RedisBackend, build_backend
from .ordering import sort_entries, is_sorted
from .store import EntryStore, DEFAULT_HISTORY_KEY

__all__ = [
    # Backends
    "MemoryBackend",
    "JsonFileBackend",
    "RedisBackend",
    "build_backend",
    # Ordering
    "sort_entries",
    "is_sorted",
    # Store
    "EntryStore",
    "DEFAULT_HISTORY_KEY",
]

"""
Object store exports.
"""

from .base import ObjectStore, StorageError
from .memory import InMemoryObjectStore
from .sqlite import SQLiteObjectStore

__all__ = [
    "ObjectStore",
    "StorageError",
    "InMemoryObjectStore",
    "SQLiteObjectStore",
]

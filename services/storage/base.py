"""
Object store abstract interface.

Role: key -> bytes persistence for pre-recorded audio and the TTS cache.

Rules:
- get() returns None for a missing key; it never raises for absence
- put() replaces the whole object atomically (readers see old or new bytes)
- Failures raise StorageError
- No expiry or eviction
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """An object store operation failed."""
    pass


class ObjectStore(ABC):
    """
    Abstract object store boundary.
    Pipeline code must depend ONLY on this interface.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """
        Read an object.

        Args:
            key: Object key, e.g. "tts_files/<id>.mp3"

        Returns:
            Object bytes, or None if the key is absent
        """
        raise NotImplementedError

    @abstractmethod
    async def put(self, key: str, data: bytes) -> bool:
        """
        Write an object, replacing any existing value.

        Returns:
            True once the write is acknowledged
        """
        raise NotImplementedError

"""
In-memory object store for testing and offline development.

Single dict assignment per put, so concurrent writers resolve to the last
write and readers never see partial bytes.
"""

from typing import Dict, Optional

from .base import ObjectStore


class InMemoryObjectStore(ObjectStore):
    """Dict-backed object store."""

    def __init__(self, objects: Optional[Dict[str, bytes]] = None):
        self.objects: Dict[str, bytes] = dict(objects or {})

    async def get(self, key: str) -> Optional[bytes]:
        return self.objects.get(key)

    async def put(self, key: str, data: bytes) -> bool:
        self.objects[key] = bytes(data)
        return True

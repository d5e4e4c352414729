"""
In-process key-value store with the same surface as FastRedisClient.

Used when STORAGE_BACKEND=memory (local runs, tests).
"""

import asyncio
import time


class InMemoryKeyValueStore:
    def __init__(self):
        self._data: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()

    async def initialize(self):
        return None

    async def close(self):
        return None

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._data[key]
                return None
            return value

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool:
        async with self._lock:
            expires_at = time.monotonic() + ttl_s if ttl_s else None
            self._data[key] = (value, expires_at)
            return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._data.pop(key, None) is not None

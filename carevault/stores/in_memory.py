import asyncio
from typing import Dict, Optional

from carevault.core.storage import BaseKeyValueStore


class InMemoryStore(BaseKeyValueStore):
    """Zero-dependency key-value store strictly for local runs and tests."""
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        async with self.lock:
            return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"value for {key!r} must be str, got {type(value).__name__}")
        async with self.lock:
            self.data[key] = value

    async def remove(self, key: str) -> None:
        async with self.lock:
            self.data.pop(key, None)

    async def clear(self) -> None:
        async with self.lock:
            self.data.clear()

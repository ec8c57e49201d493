from typing import Optional

import redis.asyncio as redis

from carevault.core.config import KEY_PREFIX, REDIS_URL, get_logger
from carevault.core.storage import BaseKeyValueStore

logger = get_logger(__name__)


class RedisStore(BaseKeyValueStore):
    """Key-value store persisted in Redis, so state survives process restarts.

    Every key is namespaced with ``prefix`` so several demo profiles can share
    one Redis instance, and ``clear()`` only touches this profile's keys.
    """
    def __init__(self, redis_url: str = REDIS_URL, prefix: str = KEY_PREFIX, client=None):
        self.redis = client if client is not None else redis.from_url(redis_url, decode_responses=True)
        self.prefix = prefix
        logger.info(f"Using Redis store with key prefix {prefix!r}")

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(self._key(key), value)

    async def remove(self, key: str) -> None:
        await self.redis.delete(self._key(key))

    async def clear(self) -> None:
        # SCAN instead of KEYS so a large shared instance is not blocked
        keys = [k async for k in self.redis.scan_iter(match=f"{self.prefix}*")]
        if keys:
            await self.redis.delete(*keys)

    async def aclose(self) -> None:
        await self.redis.aclose()

# account_api/infrastructure/cache/redis_client.py

import redis.asyncio as redis

from account_api.config.settings import get_settings


class RedisClient:
    def __init__(self, url: str | None = None):
        self.client = redis.from_url(
            url or get_settings().redis_url,
            decode_responses=True,
        )

    async def set_cache(self, key: str, value: str, ttl: int = 300):
        await self.client.set(key, value, ex=ttl)

    async def get_cache(self, key: str):
        return await self.client.get(key)

    async def delete_key(self, key: str) -> None:
        """Delete a key."""
        await self.client.delete(key)

    async def incr_window(self, key: str, window_seconds: int) -> int:
        """Fixed-window counter: increment key, start its TTL on first hit, return the count."""
        current = await self.client.incr(key)
        if current == 1:
            await self.client.expire(key, window_seconds)
        return current

    async def close(self) -> None:
        await self.client.aclose()

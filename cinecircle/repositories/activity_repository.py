from typing import List, Optional
import redis.asyncio as redis
from redis.exceptions import RedisError

from ..exceptions import StoreUnavailableError

class ActivityRepository:
    """
    Newest-first activity list kept in a single Redis list.
    Writers LPUSH, so index 0 is always the most recent record.
    """
    def __init__(self, redis_client: redis.Redis, list_key: str):
        self.redis_client = redis_client
        self.list_key = list_key

    async def prepend(self, record: str) -> int:
        try:
            return await self.redis_client.lpush(self.list_key, record)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to write activity: {e}") from e

    async def truncate(self, max_length: int) -> None:
        """Drop everything past the newest `max_length` records."""
        try:
            await self.redis_client.ltrim(self.list_key, 0, max_length - 1)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to trim activity list: {e}") from e

    async def read_range(self, start: int, end: int) -> List[str]:
        # end is inclusive, as in LRANGE
        try:
            rows = await self.redis_client.lrange(self.list_key, start, end)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to read activity: {e}") from e
        return list(rows or [])

    async def length(self) -> int:
        try:
            return int(await self.redis_client.llen(self.list_key) or 0)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to read activity list length: {e}") from e

    async def probe(self, key: str, value: str, ttl_seconds: int = 30) -> Optional[str]:
        """Round-trip a throwaway key to check the store is reachable."""
        try:
            await self.redis_client.set(key, value, ex=ttl_seconds)
            read_back = await self.redis_client.get(key)
            await self.redis_client.delete(key)
        except RedisError as e:
            raise StoreUnavailableError(f"Store health probe failed: {e}") from e
        return read_back

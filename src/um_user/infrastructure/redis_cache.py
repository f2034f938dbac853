"""RedisUserCache — UserCacheProtocol over redis.asyncio.

Every Redis failure is re-raised as CacheUnavailableError so the accessor
can downgrade it without importing redis.
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.um_user.domain.cache import CacheUnavailableError


class RedisUserCache:
    def __init__(self, client: Redis) -> None:
        self._redis = client

    async def get(self, key: str) -> str | None:
        try:
            value = await self._redis.get(key)
        except RedisError as exc:
            raise CacheUnavailableError(f"GET {key} failed: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value)
        except RedisError as exc:
            raise CacheUnavailableError(f"SETEX {key} failed: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            raise CacheUnavailableError(f"DEL {key} failed: {exc}") from exc

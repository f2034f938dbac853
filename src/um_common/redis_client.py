"""Redis client lifecycle — used for the user record cache only.

The client is created once in the application lifespan and stored on
``app.state.redis``; request handlers receive it through a dependency
instead of reaching for a module-level global.
"""

import logging

import redis.asyncio as aioredis
from fastapi import Request
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)


async def create_redis(url: str | None = None) -> aioredis.Redis:
    """Create the Redis connection pool and probe it once.

    A failed probe is logged, not raised: the cache is best-effort and every
    read falls through to PostgreSQL while Redis is down.
    """
    client = aioredis.from_url(
        url or settings.REDIS_URL,
        decode_responses=True,
    )
    try:
        await client.ping()
        logger.info("Connected to Redis server")
    except RedisError as exc:
        logger.warning("Redis unavailable at startup, serving without cache: %s", exc)
    return client


async def close_redis(client: aioredis.Redis | None) -> None:
    """Close the Redis connection pool."""
    if client is not None:
        await client.aclose()
        logger.info("Redis connection closed")


def get_redis(request: Request) -> aioredis.Redis:
    """FastAPI dependency: the process-wide client created at startup."""
    return request.app.state.redis  # type: ignore[no-any-return]

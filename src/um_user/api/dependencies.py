"""FastAPI wiring for the user record accessor.

The store is stateless; the cache adapter wraps the process-wide Redis client
created in the application lifespan.
"""

import redis.asyncio as aioredis
from fastapi import Depends

from src.um_common.redis_client import get_redis
from src.um_user.application.accessor import UserCacheAsideAccessor
from src.um_user.application.service import UserApplicationService
from src.um_user.infrastructure.persistence import UserRepository
from src.um_user.infrastructure.redis_cache import RedisUserCache

_repository = UserRepository()


def get_user_accessor(
    redis: aioredis.Redis = Depends(get_redis),
) -> UserCacheAsideAccessor:
    return UserCacheAsideAccessor(store=_repository, cache=RedisUserCache(redis))


def get_user_service(
    accessor: UserCacheAsideAccessor = Depends(get_user_accessor),
) -> UserApplicationService:
    return UserApplicationService(accessor)

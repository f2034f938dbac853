"""UserCacheAsideAccessor — single-record reads through Redis, writes to PostgreSQL.

Consistency contract:
  - fetch: cache hit returns the cached copy; a miss reads the store and
    populates the cache with a TTL.
  - create: store only. The next fetch populates the cache.
  - update/delete: store first, commit, THEN delete the cache key. Never
    overwrite a cached entry. If the store write fails, the cache is not
    touched.
  - The TTL bounds staleness when an invalidation is lost (crash between
    commit and DEL, Redis outage during DEL).

Every cache call is best-effort: failures are logged and downgraded to a
miss or a no-op. Store failures propagate.
"""

import logging
from collections.abc import Awaitable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.um_common.errors import EmailExistsError, InternalError, UserNotFoundError
from src.um_user.domain.cache import (
    CacheUnavailableError,
    UserCacheProtocol,
    deserialize_user,
    serialize_user,
    user_cache_key,
)
from src.um_user.domain.models import (
    Pagination,
    StoreOutcome,
    StoreResult,
    User,
    UserFilters,
    UserPage,
)
from src.um_user.domain.repository import UserStoreProtocol

logger = logging.getLogger(__name__)


class UserCacheAsideAccessor:
    def __init__(
        self,
        store: UserStoreProtocol,
        cache: UserCacheProtocol,
        ttl_seconds: int | None = None,
        key_prefix: str | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.USER_CACHE_TTL_SECONDS
        self._prefix = key_prefix if key_prefix is not None else settings.USER_CACHE_PREFIX

    def cache_key(self, user_id: int) -> str:
        return user_cache_key(self._prefix, user_id)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch(self, db: AsyncSession, user_id: int) -> User | None:
        """Return the user, or None when no record exists."""
        cached = await self._get_cached(user_id)
        if cached is not None:
            logger.info("User %s retrieved from cache", user_id)
            return cached

        user = await self._store.find_by_id(db, user_id)
        if user is None:
            return None

        await self._cache_user(user)
        logger.info("User %s retrieved from database", user_id)
        return user

    async def create(self, db: AsyncSession, data: dict[str, Any]) -> User:
        result = await self._write(db, self._store.create(db, data))
        self._raise_for_outcome(result, user_id=None)
        assert result.user is not None
        logger.info("User created with ID: %s", result.user.id)
        return result.user

    async def update(self, db: AsyncSession, user_id: int, changes: dict[str, Any]) -> User:
        result = await self._write(db, self._store.update(db, user_id, changes))
        self._raise_for_outcome(result, user_id=user_id)
        # Committed: only now is it safe to drop the cached copy.
        await self._remove_cached(user_id)
        assert result.user is not None
        logger.info("User %s updated", user_id)
        return result.user

    async def delete(self, db: AsyncSession, user_id: int) -> bool:
        result = await self._write(db, self._store.delete(db, user_id))
        self._raise_for_outcome(result, user_id=user_id)
        await self._remove_cached(user_id)
        logger.info("User %s deleted", user_id)
        return True

    async def list_users(
        self,
        db: AsyncSession,
        filters: UserFilters,
        pagination: Pagination,
    ) -> UserPage:
        """Filtered, paginated listing. Never cached."""
        total = await self._store.count(db, filters)
        users = await self._store.find_many(
            db, filters, pagination.offset, pagination.limit
        )
        logger.info("Users list retrieved from database total=%d", total)
        return UserPage(
            items=users,
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    # ------------------------------------------------------------------
    # Store helpers
    # ------------------------------------------------------------------

    async def _write(
        self, db: AsyncSession, pending: Awaitable[StoreResult]
    ) -> StoreResult:
        """Await a store write and commit it; roll back on any non-OK outcome."""
        try:
            result = await pending
            if result.ok:
                await db.commit()
            else:
                await db.rollback()
        except Exception:
            await db.rollback()
            raise
        return result

    @staticmethod
    def _raise_for_outcome(result: StoreResult, user_id: int | None) -> None:
        if result.outcome is StoreOutcome.OK:
            return
        if result.outcome is StoreOutcome.CONFLICT:
            raise EmailExistsError()
        if result.outcome is StoreOutcome.NOT_FOUND and user_id is not None:
            raise UserNotFoundError(user_id)
        logger.error("Store write failed user_id=%s detail=%s", user_id, result.detail)
        raise InternalError()

    # ------------------------------------------------------------------
    # Cache helpers (best-effort)
    # ------------------------------------------------------------------

    async def _get_cached(self, user_id: int) -> User | None:
        key = self.cache_key(user_id)
        try:
            raw = await self._cache.get(key)
        except CacheUnavailableError as exc:
            logger.warning("Error getting cached user %s: %s", user_id, exc)
            return None
        if raw is None:
            return None
        try:
            return deserialize_user(raw)
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None

    async def _cache_user(self, user: User) -> None:
        try:
            await self._cache.set_with_expiry(
                self.cache_key(user.id), self._ttl, serialize_user(user)
            )
        except CacheUnavailableError as exc:
            logger.warning("Error caching user %s: %s", user.id, exc)

    async def _remove_cached(self, user_id: int) -> None:
        try:
            await self._cache.delete(self.cache_key(user_id))
        except CacheUnavailableError as exc:
            logger.warning("Error removing cached user %s: %s", user_id, exc)

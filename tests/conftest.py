"""Shared test fixtures.

JWT_SECRET has no default in Settings, so it is provided here before any
module imports config.settings.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests")

import dataclasses  # noqa: E402
from collections.abc import AsyncIterator  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.um_user.application.accessor import UserCacheAsideAccessor  # noqa: E402
from src.um_user.domain.cache import CacheUnavailableError  # noqa: E402
from src.um_user.domain.models import StoreResult, User, UserFilters  # noqa: E402

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


class FakeUserStore:
    """In-memory UserStoreProtocol. Each created record is one second newer."""

    def __init__(self, events: list[str]) -> None:
        self.rows: dict[int, User] = {}
        self.events = events
        self.reads = 0
        self.fail_writes = False
        self._next_id = 1

    async def create(self, db: Any, data: dict[str, Any]) -> StoreResult:
        self.events.append("store.create")
        if any(u.email == data["email"] for u in self.rows.values()):
            return StoreResult.conflict("email")
        user = User(
            id=self._next_id,
            name=data["name"],
            email=data["email"],
            gender=data.get("gender"),
            role=data.get("role", "user"),
            created_at=BASE_TIME + timedelta(seconds=self._next_id),
        )
        self.rows[user.id] = user
        self._next_id += 1
        return StoreResult.success(dataclasses.replace(user))

    async def find_by_id(self, db: Any, user_id: int) -> User | None:
        self.reads += 1
        user = self.rows.get(user_id)
        return dataclasses.replace(user) if user else None

    def _matching(self, filters: UserFilters) -> list[User]:
        users = list(self.rows.values())
        if filters.gender:
            users = [u for u in users if u.gender == filters.gender]
        if filters.role:
            users = [u for u in users if u.role == filters.role]
        if filters.search:
            term = filters.search.lower()
            users = [u for u in users if term in u.name.lower() or term in u.email.lower()]
        return sorted(users, key=lambda u: (u.created_at, u.id), reverse=True)

    async def find_many(
        self, db: Any, filters: UserFilters, offset: int, limit: int
    ) -> list[User]:
        return self._matching(filters)[offset:offset + limit]

    async def count(self, db: Any, filters: UserFilters) -> int:
        return len(self._matching(filters))

    async def update(self, db: Any, user_id: int, changes: dict[str, Any]) -> StoreResult:
        self.events.append("store.update")
        if self.fail_writes:
            raise ConnectionError("database unavailable")
        user = self.rows.get(user_id)
        if user is None:
            return StoreResult.not_found()
        email = changes.get("email")
        if email and any(u.email == email and u.id != user_id for u in self.rows.values()):
            return StoreResult.conflict("email")
        updated = dataclasses.replace(user, **changes)
        self.rows[user_id] = updated
        return StoreResult.success(dataclasses.replace(updated))

    async def delete(self, db: Any, user_id: int) -> StoreResult:
        self.events.append("store.delete")
        if self.fail_writes:
            raise ConnectionError("database unavailable")
        if self.rows.pop(user_id, None) is None:
            return StoreResult.not_found()
        return StoreResult.success()


class FakeUserCache:
    """In-memory UserCacheProtocol with TTL and an outage switch."""

    def __init__(self, events: list[str]) -> None:
        self.entries: dict[str, tuple[str, float]] = {}
        self.events = events
        self.now = 0.0
        self.down = False

    def _check(self) -> None:
        if self.down:
            raise CacheUnavailableError("connection refused")

    async def get(self, key: str) -> str | None:
        self.events.append("cache.get")
        self._check()
        entry = self.entries.get(key)
        if entry is None or entry[1] <= self.now:
            return None
        return entry[0]

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self.events.append("cache.set")
        self._check()
        self.entries[key] = (value, self.now + ttl_seconds)

    async def delete(self, key: str) -> None:
        self.events.append("cache.delete")
        self._check()
        self.entries.pop(key, None)


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def store(events: list[str]) -> FakeUserStore:
    return FakeUserStore(events)


@pytest.fixture
def cache(events: list[str]) -> FakeUserCache:
    return FakeUserCache(events)


@pytest.fixture
def db(events: list[str]) -> AsyncMock:
    session = AsyncMock()
    session.commit = AsyncMock(side_effect=lambda: events.append("db.commit"))
    session.rollback = AsyncMock(side_effect=lambda: events.append("db.rollback"))
    return session


@pytest.fixture
def accessor(store: FakeUserStore, cache: FakeUserCache) -> UserCacheAsideAccessor:
    return UserCacheAsideAccessor(store=store, cache=cache, ttl_seconds=3600, key_prefix="user:")


@pytest.fixture
async def client(
    accessor: UserCacheAsideAccessor, db: AsyncMock
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the store, cache and DB session swapped for fakes."""
    from src.main import app
    from src.um_common.database import get_db_session
    from src.um_user.api.dependencies import get_user_accessor

    async def _db() -> AsyncIterator[AsyncMock]:
        yield db

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_user_accessor] = lambda: accessor
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_user.domain.models import StoreResult, User, UserFilters


class UserStoreProtocol(Protocol):
    async def create(self, db: AsyncSession, data: dict[str, Any]) -> StoreResult: ...

    async def find_by_id(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def find_many(
        self,
        db: AsyncSession,
        filters: UserFilters,
        offset: int,
        limit: int,
    ) -> list[User]: ...

    async def count(self, db: AsyncSession, filters: UserFilters) -> int: ...

    async def update(
        self, db: AsyncSession, user_id: int, changes: dict[str, Any]
    ) -> StoreResult: ...

    async def delete(self, db: AsyncSession, user_id: int) -> StoreResult: ...

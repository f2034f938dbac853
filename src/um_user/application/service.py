"""UserApplicationService — thin composition layer over the accessor.

Turns validated inputs into accessor calls and domain records into response
schemas. Transactions are committed inside the accessor so cache
invalidation can follow the commit.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.errors import UserNotFoundError
from src.um_user.application.accessor import UserCacheAsideAccessor
from src.um_user.application.schemas import UserListResponse, UserOut
from src.um_user.application.validators import (
    CreateUserInput,
    ListUsersQuery,
    UpdateUserInput,
)
from src.um_user.domain.models import Pagination, UserFilters


class UserApplicationService:
    def __init__(self, accessor: UserCacheAsideAccessor) -> None:
        self._accessor = accessor

    async def get_user(self, db: AsyncSession, user_id: int) -> UserOut:
        user = await self._accessor.fetch(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return UserOut.from_domain(user)

    async def list_users(self, db: AsyncSession, query: ListUsersQuery) -> UserListResponse:
        filters = UserFilters(
            gender=query.gender.value if query.gender else None,
            role=query.role.value if query.role else None,
            search=query.search,
        )
        page = await self._accessor.list_users(
            db, filters, Pagination(page=query.page, limit=query.limit)
        )
        return UserListResponse.from_page(page)

    async def create_user(self, db: AsyncSession, body: CreateUserInput) -> UserOut:
        # Omitted role falls back to the column default ('user').
        data = body.model_dump(mode="json", exclude_none=True)
        user = await self._accessor.create(db, data)
        return UserOut.from_domain(user)

    async def update_user(
        self, db: AsyncSession, user_id: int, body: UpdateUserInput
    ) -> UserOut:
        user = await self._accessor.update(db, user_id, body.changes())
        return UserOut.from_domain(user)

    async def delete_user(self, db: AsyncSession, user_id: int) -> None:
        await self._accessor.delete(db, user_id)

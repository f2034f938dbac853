"""UserRepository — concrete implementation of UserStoreProtocol.

Writes use INSERT/UPDATE/DELETE ... RETURNING so a single round trip both
mutates and reports the outcome. A RETURNING result of 0 rows means the id
does not exist.

Transaction ownership: the CALLER (accessor) commits or rolls back. Write
methods translate unique violations into StoreResult.conflict and never
leak driver error codes upward. Connectivity errors propagate unchanged.
"""

from typing import Any

from sqlalchemy import Select, delete, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_user.domain.models import StoreResult, User, UserFilters
from src.um_user.infrastructure.db_models import UserORM

_UNIQUE_VIOLATION = "23505"  # PostgreSQL SQLSTATE


def _to_domain(row: UserORM) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        gender=row.gender,
        role=row.role,
        created_at=row.created_at,
    )


def _integrity_to_result(exc: IntegrityError) -> StoreResult:
    """Map a constraint violation to CONFLICT(field) or a generic ERROR."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    message = str(orig)
    is_unique = sqlstate == _UNIQUE_VIOLATION or "unique" in message.lower()
    if is_unique and "email" in message:
        return StoreResult.conflict("email")
    return StoreResult.error(message)


def _apply_filters(stmt: Select[Any], filters: UserFilters) -> Select[Any]:
    if filters.gender:
        stmt = stmt.where(UserORM.gender == filters.gender)
    if filters.role:
        stmt = stmt.where(UserORM.role == filters.role)
    if filters.search:
        stmt = stmt.where(
            or_(
                UserORM.name.icontains(filters.search, autoescape=True),
                UserORM.email.icontains(filters.search, autoescape=True),
            )
        )
    return stmt


class UserRepository:
    """Concrete repository over an AsyncSession supplied per call."""

    async def create(self, db: AsyncSession, data: dict[str, Any]) -> StoreResult:
        try:
            result = await db.execute(insert(UserORM).values(**data).returning(UserORM))
        except IntegrityError as exc:
            return _integrity_to_result(exc)
        return StoreResult.success(_to_domain(result.scalar_one()))

    async def find_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(select(UserORM).where(UserORM.id == user_id))
        row = result.scalar_one_or_none()
        return _to_domain(row) if row else None

    async def find_many(
        self,
        db: AsyncSession,
        filters: UserFilters,
        offset: int,
        limit: int,
    ) -> list[User]:
        stmt = (
            _apply_filters(select(UserORM), filters)
            .order_by(UserORM.created_at.desc(), UserORM.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(stmt)
        return [_to_domain(row) for row in result.scalars().all()]

    async def count(self, db: AsyncSession, filters: UserFilters) -> int:
        stmt = _apply_filters(select(func.count()).select_from(UserORM), filters)
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def update(
        self, db: AsyncSession, user_id: int, changes: dict[str, Any]
    ) -> StoreResult:
        stmt = (
            update(UserORM)
            .where(UserORM.id == user_id)
            .values(**changes)
            .returning(UserORM)
        )
        try:
            result = await db.execute(stmt)
        except IntegrityError as exc:
            return _integrity_to_result(exc)
        row = result.scalar_one_or_none()
        if row is None:
            return StoreResult.not_found()
        return StoreResult.success(_to_domain(row))

    async def delete(self, db: AsyncSession, user_id: int) -> StoreResult:
        result = await db.execute(
            delete(UserORM).where(UserORM.id == user_id).returning(UserORM.id)
        )
        if result.scalar_one_or_none() is None:
            return StoreResult.not_found()
        return StoreResult.success()

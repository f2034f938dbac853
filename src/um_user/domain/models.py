"""Domain models for um_user — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass
class User:
    id: int
    name: str
    email: str
    gender: str | None
    role: str
    created_at: datetime


@dataclass
class UserFilters:
    gender: str | None = None
    role: str | None = None
    search: str | None = None  # case-insensitive substring of name or email


@dataclass
class Pagination:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class UserPage:
    items: list[User]
    total: int      # matches after filters, before pagination
    page: int
    limit: int


class StoreOutcome(str, Enum):
    OK = "OK"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


@dataclass
class StoreResult:
    """Outcome of a store write, so callers never inspect driver error codes."""

    outcome: StoreOutcome
    user: User | None = None
    field: str | None = None   # set on CONFLICT, e.g. "email"
    detail: str | None = None  # set on ERROR, for logs only

    @property
    def ok(self) -> bool:
        return self.outcome is StoreOutcome.OK

    @classmethod
    def success(cls, user: User | None = None) -> "StoreResult":
        return cls(StoreOutcome.OK, user=user)

    @classmethod
    def conflict(cls, field_name: str) -> "StoreResult":
        return cls(StoreOutcome.CONFLICT, field=field_name)

    @classmethod
    def not_found(cls) -> "StoreResult":
        return cls(StoreOutcome.NOT_FOUND)

    @classmethod
    def error(cls, detail: str) -> "StoreResult":
        return cls(StoreOutcome.ERROR, detail=detail)


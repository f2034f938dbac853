"""Pydantic response schemas for um_user.

All responses are wrapped in ApiResponse at the router layer.
"""

import math

from pydantic import BaseModel

from src.um_user.domain.models import User, UserPage


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    gender: str | None
    role: str
    created_at: str

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            gender=user.gender,
            role=user.role,
            created_at=user.created_at.isoformat(),
        )


class UserListResponse(BaseModel):
    items: list[UserOut]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_page(cls, page: UserPage) -> "UserListResponse":
        return cls(
            items=[UserOut.from_domain(u) for u in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=math.ceil(page.total / page.limit) if page.limit else 0,
        )

"""User record cache — port, key derivation and wire format.

Cache-aside for single records keyed by id:
  - Cache key: f"{USER_CACHE_PREFIX}{user_id}", e.g. "user:42"
  - Read: cache → DB on miss → populate cache with TTL
  - Write: DB first, then invalidate (never overwrite)
"""

import json
from datetime import datetime
from typing import Protocol

from src.um_user.domain.models import User


class CacheUnavailableError(Exception):
    """Raised by cache adapters when the backend cannot serve a call."""


class UserCacheProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


def user_cache_key(prefix: str, user_id: int) -> str:
    return f"{prefix}{user_id}"


def serialize_user(user: User) -> str:
    return json.dumps(
        {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "gender": user.gender,
            "role": user.role,
            "created_at": user.created_at.isoformat(),
        },
        separators=(",", ":"),
    )


def deserialize_user(raw: str) -> User:
    """Decode a cached entry. Raises ValueError/KeyError/TypeError on a bad payload."""
    data = json.loads(raw)
    return User(
        id=int(data["id"]),
        name=data["name"],
        email=data["email"],
        gender=data["gender"],
        role=data["role"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )

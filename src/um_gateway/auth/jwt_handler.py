"""JWT access token creation and verification.

Tokens carry the user id (``sub``) and role so authorization checks need no
database round trip. A role change therefore takes effect for new tokens
only; existing tokens keep their role until expiry (JWT_EXPIRE_MINUTES).

Using HS256 (symmetric HMAC) with a single JWT_SECRET.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.um_common.errors import InvalidTokenError
from src.um_user.application.validators import validate_user_id

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def access_token_ttl_seconds() -> int:
    return int(_ACCESS_EXPIRE.total_seconds())


def create_access_token(user_id: int, role: str) -> str:
    """Issue an access token for ``user_id`` with its current ``role``."""
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Returns:
        Decoded payload with at minimum {"sub", "role", "type"}.

    Raises:
        InvalidTokenError: bad signature, expired, wrong type, missing role
            or a subject that is not a user id.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidTokenError() from None

    if payload.get("type") != "access" or not payload.get("role"):
        raise InvalidTokenError()
    if not validate_user_id(str(payload.get("sub", ""))).ok:
        raise InvalidTokenError()
    return payload

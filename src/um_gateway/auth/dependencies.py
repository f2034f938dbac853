"""FastAPI dependencies: current principal and role guards.

Usage in any protected router:
    from src.um_gateway.auth.dependencies import require_admin

    @router.get("/protected")
    async def protected(principal: Principal = Depends(require_admin)):
        ...
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.um_common.enums import Role
from src.um_common.errors import AccessDeniedError, InvalidTokenError, ValidationFailedError
from src.um_gateway.auth.jwt_handler import decode_token
from src.um_user.application.validators import validate_user_id

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is reported through our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


async def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Validate the Bearer token and return who is calling.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        logger.warning("No token provided")
        raise InvalidTokenError()

    payload = decode_token(credentials.credentials)
    principal = Principal(user_id=int(payload["sub"]), role=str(payload["role"]))
    request.state.principal = principal
    logger.debug("Token verified user_id=%s role=%s", principal.user_id, principal.role)
    return principal


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Raises HTTP 403 unless the caller is an admin."""
    if not principal.is_admin:
        logger.warning("Admin access denied user_id=%s", principal.user_id)
        raise AccessDeniedError()
    return principal


async def require_self_or_admin(
    request: Request,
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Raises HTTP 400 for a malformed ``{user_id}`` path segment and HTTP 403
    when a non-admin targets another user's id.

    The segment is parsed with the same validator the user routes use, so the
    id checked here is the id the route acts on.
    """
    raw_id = request.path_params.get("user_id")
    if raw_id is None:
        return principal
    parsed = validate_user_id(raw_id)
    if not parsed.ok:
        raise ValidationFailedError([e.to_dict() for e in parsed.errors], "Invalid user ID")
    if not principal.is_admin and parsed.value != principal.user_id:
        logger.warning(
            "User %s denied access to user %s", principal.user_id, parsed.value
        )
        raise AccessDeniedError()
    return principal

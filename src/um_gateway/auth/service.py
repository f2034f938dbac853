"""Token issuance: look up the user and sign an access token."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.errors import InvalidCredentialsError
from src.um_gateway.auth.jwt_handler import create_access_token
from src.um_user.application.accessor import UserCacheAsideAccessor


class AuthService:
    def __init__(self, accessor: UserCacheAsideAccessor) -> None:
        self._accessor = accessor

    async def issue_access_token(self, db: AsyncSession, user_id: int) -> str:
        """Sign a token carrying the user's current role.

        Unknown ids raise InvalidCredentialsError (401), not 404, so the
        endpoint does not double as a user-existence probe.
        """
        user = await self._accessor.fetch(db, user_id)
        if user is None:
            raise InvalidCredentialsError()
        return create_access_token(user.id, user.role)

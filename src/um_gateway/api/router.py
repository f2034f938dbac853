"""Auth API router: issue an access token for an existing user.

POST /auth  {"user_id": 42}  →  {"access_token": ..., "token_type": "Bearer", ...}
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.database import get_db_session
from src.um_common.errors import ValidationFailedError
from src.um_common.response import ApiResponse, success_response
from src.um_gateway.auth.jwt_handler import access_token_ttl_seconds
from src.um_gateway.auth.service import AuthService
from src.um_user.api.dependencies import get_user_accessor
from src.um_user.application.accessor import UserCacheAsideAccessor
from src.um_user.application.validators import validate_token_request

router = APIRouter(prefix="/auth", tags=["auth"])


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Issue access token",
)
async def issue_token(
    request: Request,
    accessor: Annotated[UserCacheAsideAccessor, Depends(get_user_accessor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    payload: Annotated[Any, Body()] = None,
) -> ApiResponse:
    result = validate_token_request(payload)
    if not result.ok:
        raise ValidationFailedError([e.to_dict() for e in result.errors], "User ID is required")
    assert result.value is not None

    token = await AuthService(accessor).issue_access_token(db, result.value.user_id)

    data = TokenResponse(access_token=token, expires_in=access_token_ttl_seconds())
    resp = success_response(data.model_dump(), "Authentication successful")
    resp.request_id = _get_request_id(request)
    return resp

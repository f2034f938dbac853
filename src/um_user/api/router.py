"""User CRUD endpoints.

GET    /users/{user_id}   — self or admin
GET    /users             — admin; filters + page/limit pagination
POST   /users             — admin
PUT    /users/{user_id}   — self or admin (only admins may change role)
DELETE /users/{user_id}   — admin

Bodies and query strings go through the named validators in
application/validators.py, so every input error is a 400 with field errors.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.database import get_db_session
from src.um_common.errors import AccessDeniedError, ValidationFailedError
from src.um_common.response import ApiResponse, success_response
from src.um_gateway.auth.dependencies import Principal, require_admin, require_self_or_admin
from src.um_user.api.dependencies import get_user_service
from src.um_user.application.service import UserApplicationService
from src.um_user.application.validators import (
    ValidationResult,
    validate_create_user,
    validate_list_query,
    validate_update_user,
    validate_user_id,
)

router = APIRouter(prefix="/users", tags=["users"])

Service = Annotated[UserApplicationService, Depends(get_user_service)]
Db = Annotated[AsyncSession, Depends(get_db_session)]


def _unwrap(result: ValidationResult[Any], message: str = "Validation error") -> Any:
    if not result.ok:
        raise ValidationFailedError([e.to_dict() for e in result.errors], message)
    return result.value


def _respond(request: Request, data: Any, message: str) -> ApiResponse:
    resp = success_response(data, message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{user_id}", response_model=ApiResponse, summary="Get user by id")
async def get_user(
    user_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(require_self_or_admin)],
    service: Service,
    db: Db,
) -> ApiResponse:
    uid = _unwrap(validate_user_id(user_id), "Invalid user ID")
    user = await service.get_user(db, uid)
    return _respond(request, user.model_dump(), "User retrieved successfully")


@router.get("", response_model=ApiResponse, summary="List users")
async def list_users(
    request: Request,
    principal: Annotated[Principal, Depends(require_admin)],
    service: Service,
    db: Db,
) -> ApiResponse:
    query = _unwrap(validate_list_query(dict(request.query_params)))
    result = await service.list_users(db, query)
    return _respond(request, result.model_dump(), "Users retrieved successfully")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create user",
)
async def create_user(
    request: Request,
    principal: Annotated[Principal, Depends(require_admin)],
    service: Service,
    db: Db,
    payload: Annotated[Any, Body()] = None,
) -> ApiResponse:
    body = _unwrap(validate_create_user(payload))
    user = await service.create_user(db, body)
    return _respond(request, user.model_dump(), "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse, summary="Update user")
async def update_user(
    user_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(require_self_or_admin)],
    service: Service,
    db: Db,
    payload: Annotated[Any, Body()] = None,
) -> ApiResponse:
    uid = _unwrap(validate_user_id(user_id), "Invalid user ID")
    body = _unwrap(validate_update_user(payload))
    if "role" in body.model_fields_set and not principal.is_admin:
        raise AccessDeniedError()
    user = await service.update_user(db, uid, body)
    return _respond(request, user.model_dump(), "User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse, summary="Delete user")
async def delete_user(
    user_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(require_admin)],
    service: Service,
    db: Db,
) -> ApiResponse:
    uid = _unwrap(validate_user_id(user_id), "Invalid user ID")
    await service.delete_user(db, uid)
    return _respond(request, None, "User deleted successfully")

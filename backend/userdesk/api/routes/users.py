"""Users Routes — CRUD endpoints plus the gated bulk-delete maintenance operation.

Invariants:
    - Routes never contain business logic (delegate to UserService)
    - DELETE /nuke registered before DELETE /{user_id} so "nuke" is never an id
    - Bulk delete requires X-Admin-Token equal to the admin_token of the
      Settings the app was built with (app.state.settings);
      with no token configured the operation is disabled
    - Errors raised as UserDeskError subclasses, rendered by api/error_handlers.py

Design Decisions:
    - Constant-time token comparison (secrets.compare_digest)
    - isActive taken as a raw string and coerced in core/user_query.py so any
      non-"true" value filters inactive users
"""

import logging
import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from userdesk.core.domain_types import DEFAULT_SKIP, DEFAULT_TAKE
from userdesk.core.errors import AuthenticationError, OperationDisabledError
from userdesk.core.user_query import build_user_query
from userdesk.infrastructure.database import get_db
from userdesk.schemas.user import (
    DeleteUserResponse,
    NukeUsersResponse,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from userdesk.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def require_admin_token(
    request: Request,
    x_admin_token: str | None = Header(None),
) -> None:
    """Gate destructive maintenance endpoints behind the app's admin token."""
    expected = request.app.state.settings.admin_token
    if not expected:
        raise OperationDisabledError("Bulk user deletion")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        logger.warning("Rejected bulk delete: bad admin token")
        raise AuthenticationError()


@router.get("", response_model=UserListResponse)
async def list_users(
    search: str | None = Query(None, description="Substring of name or email"),
    role: str | None = Query(None),
    is_active: str | None = Query(None, alias="isActive"),
    skip: int = Query(DEFAULT_SKIP, ge=0),
    take: int = Query(DEFAULT_TAKE, ge=1),
    service: UserService = Depends(get_user_service),
):
    """List users, newest first, with optional filters and pagination."""
    query = build_user_query(
        search=search, role=role, is_active=is_active, skip=skip, take=take,
    )
    users, total = await service.list_users(query)
    return UserListResponse(
        data=[UserResponse.model_validate(u) for u in users], total=total,
    )


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, service: UserService = Depends(get_user_service),
):
    """Create a user. 409 when the email is taken."""
    return await service.create_user(body)


@router.delete(
    "/nuke",
    response_model=NukeUsersResponse,
    tags=["maintenance"],
    dependencies=[Depends(require_admin_token)],
)
async def nuke_users(service: UserService = Depends(get_user_service)):
    """Delete every user. Requires X-Admin-Token."""
    cleared = await service.nuke_users()
    return NukeUsersResponse(
        message="All users cleared successfully",
        timestamp=datetime.now(timezone.utc),
        cleared_count=cleared,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    """Get one user by id."""
    return await service.get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """Partially update a user; only fields present in the body change."""
    return await service.update_user(user_id, body)


@router.delete("/{user_id}", response_model=DeleteUserResponse)
async def delete_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    """Delete one user and echo the deleted record."""
    user = await service.delete_user(user_id)
    return DeleteUserResponse(
        message="User deleted successfully",
        deleted_user=UserResponse.model_validate(user),
    )

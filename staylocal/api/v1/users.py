"""Admin user management routes."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import Pagination, get_db, get_pagination, require_admin
from staylocal.errors import NotFoundError, ValidationFailure
from staylocal.models.enums import Role
from staylocal.models.user import User
from staylocal.schemas.auth import MessageResponse, UserResponse
from staylocal.schemas.user import ActiveUpdate, RoleUpdate, UserListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


async def _get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=UserListResponse)
async def list_users(
    role: Role | None = Query(None),
    is_active: bool | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> UserListResponse:
    """Return users newest first, optionally filtered by role and status."""
    filters = []
    if role is not None:
        filters.append(User.role == role.value)
    if is_active is not None:
        filters.append(User.is_active.is_(is_active))

    total = (await db.execute(select(func.count()).select_from(User).where(*filters))).scalar_one()
    result = await db.execute(
        select(User)
        .where(*filters)
        .order_by(User.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in result.scalars().all()],
        total=total,
        page=pagination.page,
        pages=pagination.pages(total),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> UserResponse:
    return UserResponse.model_validate(await _get_user(db, user_id))


@router.put("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: uuid.UUID,
    body: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserResponse:
    user = await _get_user(db, user_id)
    user.role = body.role.value
    await db.flush()
    logger.info("Admin %s set role of user %s to %s", admin.id, user.id, user.role)
    return UserResponse.model_validate(user)


@router.put("/{user_id}/status", response_model=UserResponse)
async def update_status(
    user_id: uuid.UUID,
    body: ActiveUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserResponse:
    """Activate or deactivate an account. Deactivated accounts cannot authenticate."""
    user = await _get_user(db, user_id)
    user.is_active = body.is_active
    await db.flush()
    logger.info("Admin %s %s user %s", admin.id, "activated" if body.is_active else "deactivated", user.id)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> MessageResponse:
    if user_id == admin.id:
        raise ValidationFailure("You cannot delete your own account")

    user = await _get_user(db, user_id)
    await db.delete(user)
    await db.flush()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return MessageResponse(message="User deleted")

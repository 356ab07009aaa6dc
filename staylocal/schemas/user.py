"""Pydantic v2 schemas for admin user management."""

from pydantic import BaseModel

from staylocal.models.enums import Role
from staylocal.schemas.auth import UserResponse


class RoleUpdate(BaseModel):
    role: Role


class ActiveUpdate(BaseModel):
    is_active: bool


class UserListResponse(BaseModel):
    """Paginated list of users."""

    items: list[UserResponse]
    total: int
    page: int
    pages: int

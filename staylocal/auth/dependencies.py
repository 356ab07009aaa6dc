"""FastAPI authentication dependencies for route protection."""

from collections.abc import Awaitable, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.auth.jwt import TokenType, decode_token
from staylocal.auth.permissions import role_allowed
from staylocal.database import get_db
from staylocal.errors import ForbiddenError, UnauthorizedError
from staylocal.models.enums import Role
from staylocal.models.user import User

# auto_error is off so a missing header is reported as 401, not 403.
_bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the Bearer token, then return the authenticated user.

    Raises:
        UnauthorizedError: If the token is missing, invalid, expired, of the
            wrong type, names an unknown user, or names a deactivated account.
    """
    if credentials is None:
        raise UnauthorizedError("Not authorized - No token provided")

    try:
        claims = decode_token(credentials.credentials, TokenType.access)
    except JWTError:
        raise UnauthorizedError("Not authorized - Invalid token") from None

    result = await db.execute(select(User).where(User.id == claims.user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise UnauthorizedError("User not found")

    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")

    return user


def require_roles(*roles: Role) -> Callable[..., Awaitable[User]]:
    """Create a dependency that admits only the given roles.

    Usage::

        @router.put("/{id}/approve")
        async def approve(user: User = Depends(require_roles(Role.admin))):
            ...
    """
    if not roles:
        raise ValueError("require_roles needs at least one role")

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not role_allowed(user, roles):
            raise ForbiddenError(f"Role '{user.role}' is not authorized to access this resource")
        return user

    return dependency


require_host = require_roles(Role.host, Role.admin)
require_admin = require_roles(Role.admin)

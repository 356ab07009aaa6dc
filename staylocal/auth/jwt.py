"""Access and refresh tokens for StayLocal sessions.

Both tokens are HS256 JWTs whose ``sub`` is the user's id and whose ``type``
says what the token may be used for. Access tokens also carry the user's
role at issue time; authorization still reads the role from the database.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import JWTError, jwt

from staylocal.config import settings
from staylocal.models.enums import Role
from staylocal.models.user import User


class TokenType(str, Enum):
    access = "access"
    refresh = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    user_id: uuid.UUID
    token_type: TokenType
    expires_at: datetime
    role: Role | None = None


def _default_lifetime(token_type: TokenType) -> timedelta:
    if token_type is TokenType.access:
        return timedelta(minutes=settings.jwt_access_token_expire_minutes)
    return timedelta(days=settings.jwt_refresh_token_expire_days)


def encode_token(
    user_id: uuid.UUID,
    token_type: TokenType,
    *,
    role: Role | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token of ``token_type`` for ``user_id``.

    ``expires_delta`` overrides the configured lifetime for that token type.
    """
    now = datetime.now(timezone.utc)
    payload: dict = {
        "sub": str(user_id),
        "type": token_type.value,
        "iat": now,
        "exp": now + (expires_delta or _default_lifetime(token_type)),
    }
    if role is not None:
        payload["role"] = role.value
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, expected_type: TokenType) -> TokenClaims:
    """Verify ``token`` and return its claims.

    Raises:
        jose.JWTError: If the token is invalid, expired or malformed, is not
            of ``expected_type``, or does not name a user id.
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

    if payload.get("type") != expected_type.value:
        raise JWTError(f"Expected a {expected_type.value} token")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
        role = Role(payload["role"]) if "role" in payload else None
    except ValueError:
        raise JWTError("Malformed token claims") from None

    return TokenClaims(
        user_id=user_id,
        token_type=expected_type,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        role=role,
    )


def create_token_pair(user: User) -> dict[str, str]:
    """Issue an access/refresh pair for ``user``.

    Returns:
        Dictionary with ``access_token``, ``refresh_token``, and ``token_type``.
    """
    return {
        "access_token": encode_token(user.id, TokenType.access, role=user.role_enum),
        "refresh_token": encode_token(user.id, TokenType.refresh),
        "token_type": "bearer",
    }

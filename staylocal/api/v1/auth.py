"""Auth API router: register, login, refresh, and the caller's own profile."""

import logging

from fastapi import APIRouter, Depends, status
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import get_current_user, get_db
from staylocal.auth.jwt import TokenType, create_token_pair, decode_token
from staylocal.auth.passwords import hash_password, verify_password
from staylocal.errors import ConflictError, ForbiddenError, UnauthorizedError
from staylocal.models.user import User
from staylocal.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    tokens = create_token_pair(user)
    return AuthResponse(user=UserResponse.model_validate(user), tokens=TokenResponse(**tokens))


# ---------------------------------------------------------------------------
# POST /register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    """Register a traveler or host with email and password."""
    email = body.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Email already registered")

    user = User(
        email=email,
        hashed_password=hash_password(body.password),
        name=body.name,
        phone=body.phone,
        role=body.role.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("Registered %s user %s", user.role, user.id)
    return _auth_response(user)


# ---------------------------------------------------------------------------
# POST /login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    """Authenticate with email and password."""
    result = await db.execute(select(User).where(User.email == body.email.lower()))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.hashed_password):
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        raise ForbiddenError("Account is inactive")

    return _auth_response(user)


# ---------------------------------------------------------------------------
# POST /refresh
# ---------------------------------------------------------------------------


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
    """Exchange a valid refresh token for a new token pair."""
    try:
        claims = decode_token(body.refresh_token, TokenType.refresh)
    except JWTError:
        raise UnauthorizedError("Invalid or expired refresh token") from None

    user = await db.get(User, claims.user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or inactive")

    return TokenResponse(**create_token_pair(user))


# ---------------------------------------------------------------------------
# /me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the currently authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Update name, phone or avatar. Only explicitly set fields are changed."""
    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(current_user, field, value)
    await db.flush()
    return UserResponse.model_validate(current_user)


@router.put("/password", response_model=MessageResponse)
async def change_password(
    body: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    if not verify_password(body.current_password, current_user.hashed_password):
        raise UnauthorizedError("Current password is incorrect")

    current_user.hashed_password = hash_password(body.new_password)
    await db.flush()
    logger.info("User %s changed password", current_user.id)
    return MessageResponse(message="Password updated")

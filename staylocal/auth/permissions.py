"""Role and ownership rules.

Two gates apply to protected operations:

1. the coarse role gate (``require_roles`` in ``staylocal.auth.dependencies``)
   decides whether a role may call the operation at all;
2. the ownership gate below decides whether *this* caller may act on *this*
   resource. It runs even when the role gate passed, so a host can still be
   refused for a property that belongs to another host.

Both gates dispatch over every ``Role`` member explicitly; adding a role
without deciding its rules raises instead of silently granting access.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from staylocal.errors import ForbiddenError
from staylocal.models.enums import Role

if TYPE_CHECKING:
    from staylocal.models.reservation import Reservation
    from staylocal.models.user import User


def is_admin(user: User) -> bool:
    return user.role_enum is Role.admin


def role_allowed(user: User, allowed: tuple[Role, ...]) -> bool:
    """Coarse role gate."""
    return user.role_enum in allowed


def owns(user: User, owner_id: uuid.UUID) -> bool:
    """Whether ``user`` may act on a resource owned by ``owner_id``.

    Admins may act on anything; hosts and travelers only on what they own.
    """
    role = user.role_enum
    if role is Role.admin:
        return True
    if role is Role.host or role is Role.traveler:
        return user.id == owner_id
    raise ValueError(f"Unhandled role: {role!r}")


def ensure_owner_or_admin(user: User, owner_id: uuid.UUID, message: str = "Not authorized") -> None:
    if not owns(user, owner_id):
        raise ForbiddenError(message)


def is_participant(user: User, reservation: Reservation) -> bool:
    """Guest of record, host of record, or an admin."""
    return owns(user, reservation.guest_id) or owns(user, reservation.host_id)


def ensure_participant_or_admin(
    user: User,
    reservation: Reservation,
    message: str = "Not authorized to access this reservation",
) -> None:
    if not is_participant(user, reservation):
        raise ForbiddenError(message)

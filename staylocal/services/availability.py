"""Availability checks for a property over a requested stay.

Stays are half-open ``[check_in, check_out)`` intervals: the check-out day of
one stay may be the check-in day of the next. Only reservations that still
hold their dates (``pending`` and ``confirmed``) block a new request.
"""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.models.enums import BLOCKING_STATUSES
from staylocal.models.reservation import Reservation

logger = logging.getLogger(__name__)


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Whether ``[a_start, a_end)`` and ``[b_start, b_end)`` share a night."""
    return a_start < b_end and a_end > b_start


async def find_conflicting_reservation(
    db: AsyncSession,
    property_id: uuid.UUID,
    check_in: date,
    check_out: date,
    exclude_reservation_id: uuid.UUID | None = None,
) -> Reservation | None:
    """Return the first blocking reservation overlapping the stay, if any."""
    query = select(Reservation).where(
        Reservation.property_id == property_id,
        Reservation.status.in_([s.value for s in BLOCKING_STATUSES]),
        Reservation.check_in < check_out,
        Reservation.check_out > check_in,
    )
    if exclude_reservation_id is not None:
        query = query.where(Reservation.id != exclude_reservation_id)

    result = await db.execute(query.order_by(Reservation.check_in).limit(1))
    conflict = result.scalar_one_or_none()
    if conflict is not None:
        logger.info(
            "Stay %s..%s on property %s conflicts with reservation %s",
            check_in,
            check_out,
            property_id,
            conflict.id,
        )
    return conflict

"""Reservation lifecycle: booking, confirmation, rejection, cancellation,
review, completion, and the admin overrides.

State machine::

    pending ──confirm──▶ confirmed ──(stay ends)──▶ completed ──▶ review (once)
       │                    │
       ├──reject──▶ rejected
       └──cancel──▶ cancelled ◀──cancel──┘

Every transition that another party should hear about emits a notification
through ``notify``, which never fails the transition itself.

Booking is a check-then-insert. The property row is locked with
``SELECT ... FOR UPDATE`` for the rest of the transaction, which serialises
concurrent bookings of the same property on PostgreSQL. Databases without
row locks (SQLite) leave a window between the conflict check and
the insert.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.auth.permissions import ensure_owner_or_admin, ensure_participant_or_admin
from staylocal.database import utcnow
from staylocal.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailure
from staylocal.models.enums import NotificationType, PaymentStatus, ReservationStatus
from staylocal.models.property import Property
from staylocal.models.reservation import Reservation
from staylocal.models.user import User
from staylocal.services.availability import find_conflicting_reservation
from staylocal.services.notification_service import notify
from staylocal.services.pricing import quote_stay

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = "No reason provided"
CANCELLABLE_STATUSES = (ReservationStatus.pending, ReservationStatus.confirmed)


@dataclass
class BookingRequest:
    property_id: uuid.UUID
    check_in: date
    check_out: date
    num_guests: int = 1
    special_requests: str | None = None


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_reservation(db: AsyncSession, reservation_id: uuid.UUID) -> Reservation:
    reservation = await db.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found")
    return reservation


async def get_reservation_for_participant(db: AsyncSession, reservation_id: uuid.UUID, user: User) -> Reservation:
    """Fetch a reservation the caller is a party to (or any, for admins)."""
    reservation = await get_reservation(db, reservation_id)
    ensure_participant_or_admin(user, reservation)
    return reservation


@dataclass
class ReservationPage:
    items: list[Reservation]
    total: int


async def list_reservations(
    db: AsyncSession,
    *,
    guest_id: uuid.UUID | None = None,
    host_id: uuid.UUID | None = None,
    status: ReservationStatus | None = None,
    offset: int = 0,
    limit: int = 20,
) -> ReservationPage:
    """Newest-first page of reservations, optionally scoped to a guest or host."""
    filters = []
    if guest_id is not None:
        filters.append(Reservation.guest_id == guest_id)
    if host_id is not None:
        filters.append(Reservation.host_id == host_id)
    if status is not None:
        filters.append(Reservation.status == status.value)

    total = (await db.execute(select(func.count()).select_from(Reservation).where(*filters))).scalar_one()
    result = await db.execute(
        select(Reservation).where(*filters).order_by(Reservation.created_at.desc()).offset(offset).limit(limit)
    )
    return ReservationPage(items=list(result.scalars().all()), total=total)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def create_reservation(db: AsyncSession, guest: User, request: BookingRequest) -> Reservation:
    """Book a stay for ``guest``.

    Checks, in order: the property exists, it is open for booking, the party
    fits, the dates are free, and the stay is at least one night. On success
    the reservation is stored as ``pending`` with a frozen pricing snapshot
    and the host is notified.

    Raises:
        NotFoundError: Unknown property.
        ConflictError: Property unavailable/unapproved, or overlapping dates.
        ValidationFailure: Too many guests, or a stay shorter than one night.
    """
    result = await db.execute(select(Property).where(Property.id == request.property_id).with_for_update())
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError("Property not found")

    if not prop.is_available or not prop.is_approved:
        raise ConflictError("Property is not available")

    if request.num_guests > prop.max_guests:
        raise ValidationFailure(f"Property can only accommodate {prop.max_guests} guests")

    conflict = await find_conflicting_reservation(db, prop.id, request.check_in, request.check_out)
    if conflict is not None:
        raise ConflictError("Property is not available for these dates")

    price = quote_stay(prop.price_per_night, request.check_in, request.check_out, currency=prop.currency)

    reservation = Reservation(
        property_id=prop.id,
        guest_id=guest.id,
        host_id=prop.host_id,
        check_in=request.check_in,
        check_out=request.check_out,
        num_guests=request.num_guests,
        price_per_night=price.price_per_night,
        nights=price.nights,
        subtotal=price.subtotal,
        service_fee=price.service_fee,
        cleaning_fee=price.cleaning_fee,
        taxes=price.taxes,
        total=price.total,
        currency=price.currency,
        status=ReservationStatus.pending.value,
        payment_status=PaymentStatus.pending.value,
        special_requests=request.special_requests,
    )
    db.add(reservation)
    await db.flush()
    await db.refresh(reservation)

    logger.info(
        "Reservation %s created: property=%s guest=%s %s..%s total=%s",
        reservation.id,
        prop.id,
        guest.id,
        request.check_in,
        request.check_out,
        price.total,
    )

    await notify(
        db,
        recipient_id=prop.host_id,
        sender_id=guest.id,
        type=NotificationType.reservation_request,
        title="New Reservation Request",
        message=f"You have a new reservation request for {prop.title}",
        related_property_id=prop.id,
        related_reservation_id=reservation.id,
    )
    return reservation


# ---------------------------------------------------------------------------
# Host decisions
# ---------------------------------------------------------------------------


async def _decide(db: AsyncSession, reservation_id: uuid.UUID, user: User, target: ReservationStatus) -> Reservation:
    reservation = await get_reservation(db, reservation_id)
    ensure_owner_or_admin(user, reservation.host_id)

    if reservation.status != ReservationStatus.pending.value:
        raise ConflictError(f"Reservation cannot be {target.value}: it is {reservation.status}")

    reservation.status = target.value
    await db.flush()
    logger.info("Reservation %s %s by user %s", reservation.id, target.value, user.id)
    return reservation


async def confirm_reservation(db: AsyncSession, reservation_id: uuid.UUID, user: User) -> Reservation:
    """Host of record (or an admin) accepts a pending reservation."""
    reservation = await _decide(db, reservation_id, user, ReservationStatus.confirmed)
    await notify(
        db,
        recipient_id=reservation.guest_id,
        sender_id=user.id,
        type=NotificationType.reservation_confirmed,
        title="Reservation Confirmed",
        message=f"Your reservation for {reservation.property.title} has been confirmed!",
        related_property_id=reservation.property_id,
        related_reservation_id=reservation.id,
    )
    return reservation


async def reject_reservation(db: AsyncSession, reservation_id: uuid.UUID, user: User) -> Reservation:
    """Host of record (or an admin) declines a pending reservation."""
    reservation = await _decide(db, reservation_id, user, ReservationStatus.rejected)
    await notify(
        db,
        recipient_id=reservation.guest_id,
        sender_id=user.id,
        type=NotificationType.reservation_cancelled,
        title="Reservation Declined",
        message=f"Your reservation request for {reservation.property.title} was declined by the host",
        related_property_id=reservation.property_id,
        related_reservation_id=reservation.id,
    )
    return reservation


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


async def cancel_reservation(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    user: User,
    reason: str | None = None,
) -> Reservation:
    """Cancel a pending or confirmed reservation.

    The refund is always the full reservation total. A reservation that was
    already paid moves to ``refunded``. The party that did not cancel is
    notified; when an admin cancels on nobody's behalf both parties are.
    """
    reservation = await get_reservation(db, reservation_id)
    ensure_participant_or_admin(user, reservation, "Not authorized")

    if reservation.status not in {s.value for s in CANCELLABLE_STATUSES}:
        raise ConflictError("Reservation cannot be cancelled")

    reservation.status = ReservationStatus.cancelled.value
    reservation.cancelled_by_id = user.id
    reservation.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON
    reservation.cancelled_at = utcnow()
    reservation.refund_amount = reservation.total

    was_paid = reservation.payment_status == PaymentStatus.paid.value
    if was_paid:
        reservation.payment_status = PaymentStatus.refunded.value

    await db.flush()
    logger.info(
        "Reservation %s cancelled by user %s (refund %s %s)",
        reservation.id,
        user.id,
        reservation.refund_amount,
        reservation.currency,
    )

    title = reservation.property.title
    if user.id == reservation.guest_id:
        recipients = [reservation.host_id]
    elif user.id == reservation.host_id:
        recipients = [reservation.guest_id]
    else:
        recipients = [reservation.guest_id, reservation.host_id]

    for recipient_id in recipients:
        await notify(
            db,
            recipient_id=recipient_id,
            sender_id=user.id,
            type=NotificationType.reservation_cancelled,
            title="Reservation Cancelled",
            message=f"Reservation for {title} has been cancelled",
            related_property_id=reservation.property_id,
            related_reservation_id=reservation.id,
        )

    if was_paid:
        await notify(
            db,
            recipient_id=reservation.guest_id,
            sender_id=user.id,
            type=NotificationType.payment_refunded,
            title="Payment Refunded",
            message=f"{reservation.refund_amount} {reservation.currency} will be refunded for your stay at {title}",
            related_property_id=reservation.property_id,
            related_reservation_id=reservation.id,
        )
    return reservation


# ---------------------------------------------------------------------------
# Reviews and ratings
# ---------------------------------------------------------------------------


def round_rating(total: int, count: int) -> float:
    """Mean rating rounded half-up to one decimal place; 0.0 with no reviews."""
    if count == 0:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


async def recompute_property_rating(db: AsyncSession, property_id: uuid.UUID) -> Property:
    """Recompute a property's rating from every reviewed reservation.

    This is a full rescan rather than an incremental update, so it always
    reflects the stored reviews exactly.
    """
    row = (
        await db.execute(
            select(func.coalesce(func.sum(Reservation.review_rating), 0), func.count(Reservation.review_rating)).where(
                Reservation.property_id == property_id,
                Reservation.review_rating.is_not(None),
            )
        )
    ).one()
    total, count = int(row[0]), int(row[1])

    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    prop.rating_average = round_rating(total, count)
    prop.rating_count = count
    await db.flush()
    return prop


async def add_review(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    user: User,
    rating: int,
    comment: str | None = None,
) -> Reservation:
    """Attach the guest's review to a completed reservation, once.

    Raises:
        ForbiddenError: Caller is not the guest of record (admins included).
        ConflictError: Reservation not completed, or already reviewed.
    """
    reservation = await get_reservation(db, reservation_id)

    if reservation.guest_id != user.id:
        raise ForbiddenError("Only the guest can leave a review")

    if reservation.status != ReservationStatus.completed.value:
        raise ConflictError("Can only review completed reservations")

    if reservation.has_review:
        raise ConflictError("Review already exists")

    if not 1 <= rating <= 5:
        raise ValidationFailure("Rating must be between 1 and 5")

    reservation.review_rating = rating
    reservation.review_comment = comment
    reservation.reviewed_at = utcnow()
    await db.flush()

    prop = await recompute_property_rating(db, reservation.property_id)
    logger.info(
        "Review %d/5 on reservation %s; property %s now %.1f (%d)",
        rating,
        reservation.id,
        prop.id,
        prop.rating_average,
        prop.rating_count,
    )

    await notify(
        db,
        recipient_id=reservation.host_id,
        sender_id=user.id,
        type=NotificationType.new_review,
        title="New Review",
        message=f"{user.name} rated {prop.title} {rating}/5",
        related_property_id=prop.id,
        related_reservation_id=reservation.id,
    )
    return reservation


# ---------------------------------------------------------------------------
# Completion and admin overrides
# ---------------------------------------------------------------------------


async def _notify_completed(db: AsyncSession, reservation: Reservation) -> None:
    await notify(
        db,
        recipient_id=reservation.guest_id,
        type=NotificationType.reservation_completed,
        title="Stay Completed",
        message=f"Your stay at {reservation.property.title} is complete. Leave a review!",
        related_property_id=reservation.property_id,
        related_reservation_id=reservation.id,
    )


async def complete_finished_stays(db: AsyncSession, today: date) -> list[Reservation]:
    """Mark confirmed reservations whose check-out has passed as completed."""
    result = await db.execute(
        select(Reservation).where(
            Reservation.status == ReservationStatus.confirmed.value,
            Reservation.check_out <= today,
        )
    )
    completed = list(result.scalars().all())
    for reservation in completed:
        reservation.status = ReservationStatus.completed.value
    await db.flush()

    for reservation in completed:
        await _notify_completed(db, reservation)

    logger.info("Completed %d finished stays (as of %s)", len(completed), today)
    return completed


async def force_status(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    admin: User,
    status: ReservationStatus,
) -> Reservation:
    """Admin override: set any status without transition checks."""
    reservation = await get_reservation(db, reservation_id)
    previous = reservation.status
    reservation.status = status.value
    await db.flush()
    logger.warning("Reservation %s status forced %s -> %s by admin %s", reservation.id, previous, status.value, admin.id)

    if status is ReservationStatus.completed and previous != status.value:
        await _notify_completed(db, reservation)
    return reservation


async def set_payment_status(
    db: AsyncSession,
    reservation_id: uuid.UUID,
    admin: User,
    payment_status: PaymentStatus,
) -> Reservation:
    """Admin bookkeeping of the payment status.

    Payment status is tracked alongside the reservation status and is not
    validated against it.
    """
    reservation = await get_reservation(db, reservation_id)
    previous = reservation.payment_status
    reservation.payment_status = payment_status.value
    await db.flush()
    logger.info("Reservation %s payment %s -> %s", reservation.id, previous, payment_status.value)

    if previous == payment_status.value:
        return reservation

    title = reservation.property.title
    if payment_status is PaymentStatus.paid:
        await notify(
            db,
            recipient_id=reservation.host_id,
            sender_id=admin.id,
            type=NotificationType.payment_received,
            title="Payment Received",
            message=f"Payment of {reservation.total} {reservation.currency} received for {title}",
            related_property_id=reservation.property_id,
            related_reservation_id=reservation.id,
        )
    elif payment_status is PaymentStatus.refunded:
        await notify(
            db,
            recipient_id=reservation.guest_id,
            sender_id=admin.id,
            type=NotificationType.payment_refunded,
            title="Payment Refunded",
            message=f"Your payment for {title} has been refunded",
            related_property_id=reservation.property_id,
            related_reservation_id=reservation.id,
        )
    return reservation

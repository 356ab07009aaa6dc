"""Notification emitter and recipient-side notification queries.

``notify`` is best-effort: the insert runs inside a SAVEPOINT, and any failure
is logged and rolled back to that savepoint only. The business operation that
triggered it is never failed or rolled back because of a notification.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.database import utcnow
from staylocal.errors import NotFoundError
from staylocal.models.enums import NotificationType
from staylocal.models.notification import Notification

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 500


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


async def notify(
    db: AsyncSession,
    *,
    recipient_id: uuid.UUID,
    type: NotificationType,
    title: str,
    message: str,
    sender_id: uuid.UUID | None = None,
    related_property_id: uuid.UUID | None = None,
    related_reservation_id: uuid.UUID | None = None,
) -> Notification | None:
    """Persist a notification for ``recipient_id``.

    Returns the notification, or ``None`` when it could not be stored.
    """
    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type.value,
        title=_clip(title, TITLE_MAX_LENGTH),
        message=_clip(message, MESSAGE_MAX_LENGTH),
        related_property_id=related_property_id,
        related_reservation_id=related_reservation_id,
    )
    try:
        async with db.begin_nested():
            db.add(notification)
    except Exception:
        logger.exception("Failed to create %s notification for user %s", type.value, recipient_id)
        return None

    logger.info("Notification %s (%s) -> user %s", notification.id, type.value, recipient_id)
    return notification


@dataclass
class NotificationPage:
    items: list[Notification]
    total: int
    unread_count: int


async def list_notifications(
    db: AsyncSession,
    recipient_id: uuid.UUID,
    *,
    unread_only: bool = False,
    offset: int = 0,
    limit: int = 20,
) -> NotificationPage:
    filters = [Notification.recipient_id == recipient_id]
    if unread_only:
        filters.append(Notification.is_read.is_(False))

    total = (await db.execute(select(func.count()).select_from(Notification).where(*filters))).scalar_one()
    unread_count = (
        await db.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
        )
    ).scalar_one()

    # Notifications created earlier in this session still need their sender loaded.
    result = await db.execute(
        select(Notification)
        .where(*filters)
        .order_by(Notification.created_at.desc())
        .offset(offset)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return NotificationPage(items=list(result.scalars().all()), total=total, unread_count=unread_count)


async def _get_owned(db: AsyncSession, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Notification:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.recipient_id == recipient_id,
        )
        .execution_options(populate_existing=True)
    )
    notification = result.scalar_one_or_none()
    # Someone else's notification is reported exactly like a missing one.
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


async def mark_read(db: AsyncSession, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Notification:
    notification = await _get_owned(db, notification_id, recipient_id)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        await db.flush()
    return notification


async def mark_all_read(db: AsyncSession, recipient_id: uuid.UUID) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
        .values(is_read=True, read_at=utcnow())
    )
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> None:
    notification = await _get_owned(db, notification_id, recipient_id)
    await db.delete(notification)
    await db.flush()


async def delete_all(db: AsyncSession, recipient_id: uuid.UUID) -> int:
    result = await db.execute(delete(Notification).where(Notification.recipient_id == recipient_id))
    return result.rowcount or 0

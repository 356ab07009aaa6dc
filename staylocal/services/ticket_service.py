"""Support tickets: threads between a user and the admins."""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.auth.permissions import ensure_owner_or_admin, is_admin
from staylocal.database import utcnow
from staylocal.errors import NotFoundError
from staylocal.models.enums import NotificationType, SenderRole, TicketCategory, TicketPriority, TicketStatus
from staylocal.models.ticket import Ticket, TicketMessage
from staylocal.models.user import User
from staylocal.services.notification_service import notify

logger = logging.getLogger(__name__)


@dataclass
class TicketPage:
    items: list[Ticket]
    total: int


def _sender_role(user: User) -> SenderRole:
    return SenderRole.admin if is_admin(user) else SenderRole.user


async def get_ticket(db: AsyncSession, ticket_id: uuid.UUID) -> Ticket:
    ticket = await db.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket not found")
    return ticket


async def get_ticket_for(db: AsyncSession, ticket_id: uuid.UUID, user: User) -> Ticket:
    ticket = await get_ticket(db, ticket_id)
    ensure_owner_or_admin(user, ticket.user_id, "Not authorized to access this ticket")
    return ticket


async def list_tickets(
    db: AsyncSession,
    user: User,
    *,
    status: TicketStatus | None = None,
    offset: int = 0,
    limit: int = 20,
) -> TicketPage:
    """The caller's tickets (every ticket for admins), most recently updated first."""
    filters = []
    if not is_admin(user):
        filters.append(Ticket.user_id == user.id)
    if status is not None:
        filters.append(Ticket.status == status.value)

    total = (await db.execute(select(func.count()).select_from(Ticket).where(*filters))).scalar_one()
    result = await db.execute(
        select(Ticket).where(*filters).order_by(Ticket.updated_at.desc()).offset(offset).limit(limit)
    )
    return TicketPage(items=list(result.scalars().all()), total=total)


async def open_ticket(
    db: AsyncSession,
    user: User,
    subject: str,
    message: str,
    category: TicketCategory = TicketCategory.other,
    priority: TicketPriority = TicketPriority.medium,
) -> Ticket:
    ticket = Ticket(
        user_id=user.id,
        subject=subject,
        category=category.value,
        priority=priority.value,
        status=TicketStatus.open.value,
        messages=[TicketMessage(sender_id=user.id, sender_role=_sender_role(user).value, message=message)],
    )
    db.add(ticket)
    await db.flush()
    logger.info("Ticket %s opened by user %s (%s/%s)", ticket.id, user.id, ticket.category, ticket.priority)
    return ticket


async def reply(db: AsyncSession, ticket_id: uuid.UUID, user: User, message: str) -> Ticket:
    """Append a message. An admin reply picks up an open ticket and notifies its owner."""
    ticket = await get_ticket(db, ticket_id)
    ensure_owner_or_admin(user, ticket.user_id, "Not authorized to reply to this ticket")

    role = _sender_role(user)
    ticket.messages.append(TicketMessage(sender_id=user.id, sender_role=role.value, message=message))
    if role is SenderRole.admin and ticket.status == TicketStatus.open.value:
        ticket.status = TicketStatus.in_progress.value
    ticket.updated_at = utcnow()
    await db.flush()

    if role is SenderRole.admin and ticket.user_id != user.id:
        await notify(
            db,
            recipient_id=ticket.user_id,
            sender_id=user.id,
            type=NotificationType.system_message,
            title="New Reply to Your Ticket",
            message=f'Admin replied to your ticket: "{ticket.subject}"',
        )
    return ticket


async def set_status(db: AsyncSession, ticket_id: uuid.UUID, admin: User, status: TicketStatus) -> Ticket:
    ticket = await get_ticket(db, ticket_id)
    ticket.status = status.value
    await db.flush()
    logger.info("Ticket %s set to %s by admin %s", ticket.id, status.value, admin.id)

    await notify(
        db,
        recipient_id=ticket.user_id,
        sender_id=admin.id,
        type=NotificationType.system_message,
        title="Ticket Status Updated",
        message=f'Your ticket "{ticket.subject}" status changed to: {status.value}',
    )
    return ticket


async def delete_ticket(db: AsyncSession, ticket_id: uuid.UUID) -> None:
    ticket = await get_ticket(db, ticket_id)
    await db.delete(ticket)
    await db.flush()

"""Support ticket and ticket message models."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staylocal.database import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow
from staylocal.models.enums import TicketCategory, TicketPriority, TicketStatus


class Ticket(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A support conversation opened by a user and answered by admins."""

    __tablename__ = "tickets"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(20), default=TicketCategory.other.value, nullable=False)
    priority: Mapped[str] = mapped_column(String(20), default=TicketPriority.medium.value, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=TicketStatus.open.value, nullable=False, index=True)

    # Relationships
    user: Mapped["User"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    messages: Mapped[list["TicketMessage"]] = relationship(
        back_populates="ticket",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="TicketMessage.created_at",
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, user_id={self.user_id}, status={self.status!r})>"


class TicketMessage(UUIDPrimaryKeyMixin, Base):
    """A single message in a ticket thread. Messages are immutable (no updated_at)."""

    __tablename__ = "ticket_messages"

    ticket_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tickets.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_role: Mapped[str] = mapped_column(String(10), nullable=False)  # 'user', 'admin'
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, server_default=func.now())

    # Relationships
    ticket: Mapped["Ticket"] = relationship(back_populates="messages", lazy="raise")

    __table_args__ = (Index("ix_ticket_messages_ticket_id_created_at", "ticket_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<TicketMessage(id={self.id}, ticket_id={self.ticket_id}, sender_role={self.sender_role!r})>"

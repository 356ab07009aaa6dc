"""Reservation model: a guest's stay at a property with a frozen price snapshot."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staylocal.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from staylocal.models.enums import PaymentStatus, ReservationStatus


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A booking of a property by a guest for ``[check_in, check_out)``.

    ``host_id`` is copied from the property when the reservation is created.
    The pricing columns are a snapshot taken at the same moment and are never
    recomputed. Review and cancellation columns stay NULL until the matching
    lifecycle step happens.
    """

    __tablename__ = "reservations"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    host_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    num_guests: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # Pricing snapshot
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    service_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    cleaning_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    taxes: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD")

    status: Mapped[str] = mapped_column(String(20), default=ReservationStatus.pending.value, nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default=PaymentStatus.pending.value, nullable=False)
    special_requests: Mapped[str | None] = mapped_column(String(500), default=None)

    # Review (set once, by the guest, after completion)
    review_rating: Mapped[int | None] = mapped_column(Integer, default=None)
    review_comment: Mapped[str | None] = mapped_column(Text, default=None)
    reviewed_at: Mapped[datetime | None] = mapped_column(default=None)

    # Cancellation record
    cancelled_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        default=None,
    )
    cancellation_reason: Mapped[str | None] = mapped_column(String(500), default=None)
    cancelled_at: Mapped[datetime | None] = mapped_column(default=None)
    refund_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), default=None)

    @property
    def has_review(self) -> bool:
        return self.review_rating is not None

    # Relationships
    property: Mapped["Property"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    guest: Mapped["User"] = relationship(foreign_keys=[guest_id], lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    host: Mapped["User"] = relationship(foreign_keys=[host_id], lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        CheckConstraint("check_out > check_in", name="ck_reservations_dates"),
        CheckConstraint("num_guests >= 1", name="ck_reservations_num_guests"),
        CheckConstraint(
            "review_rating IS NULL OR (review_rating >= 1 AND review_rating <= 5)",
            name="ck_reservations_review_rating",
        ),
        Index("ix_reservations_guest_status", "guest_id", "status"),
        Index("ix_reservations_host_status", "host_id", "status"),
        Index("ix_reservations_property_dates", "property_id", "check_in", "check_out"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, property_id={self.property_id}, guest_id={self.guest_id}, status={self.status})>"
        )

"""Property model: short-term rental listings owned by a host."""

import uuid
from decimal import Decimal

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staylocal.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


def default_house_rules() -> dict:
    return {
        "check_in": "15:00",
        "check_out": "11:00",
        "smoking_allowed": False,
        "pets_allowed": False,
        "parties_allowed": False,
    }


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A listing that travelers can book.

    ``rating_average`` and ``rating_count`` are derived from reviews on the
    property's reservations and are only written by the review flow.
    """

    __tablename__ = "properties"

    host_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    property_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)

    # Address
    city: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    state: Mapped[str | None] = mapped_column(String(120), default=None)
    country: Mapped[str] = mapped_column(String(120), default="USA")
    zip_code: Mapped[str | None] = mapped_column(String(20), default=None)
    full_address: Mapped[str | None] = mapped_column(String(500), default=None)
    latitude: Mapped[float] = mapped_column(Float, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, default=0.0)

    # Price
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, index=True)
    currency: Mapped[str] = mapped_column(String(3), default="USD")

    # Capacity
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, default=1)
    beds: Mapped[int] = mapped_column(Integer, default=1)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1)

    amenities: Mapped[list] = mapped_column(JSON, default=list)
    images: Mapped[list] = mapped_column(JSON, default=list)  # [{"url": ..., "caption": ...}]
    house_rules: Mapped[dict] = mapped_column(JSON, default=default_house_rules)

    rating_average: Mapped[float] = mapped_column(Float, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)

    is_available: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Relationships
    host: Mapped["User"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        CheckConstraint("max_guests >= 1", name="ck_properties_max_guests"),
        CheckConstraint("rating_average >= 0 AND rating_average <= 5", name="ck_properties_rating_range"),
        CheckConstraint("price_per_night >= 0", name="ck_properties_price"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title!r}, type={self.property_type!r})>"

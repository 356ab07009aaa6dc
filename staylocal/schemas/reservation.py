"""Pydantic v2 request/response schemas for reservation endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from staylocal.models.enums import PaymentStatus, ReservationStatus
from staylocal.schemas.auth import UserPublic
from staylocal.schemas.property import PropertySummary

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    """Schema for requesting a stay."""

    property_id: uuid.UUID
    check_in: date
    check_out: date
    num_guests: int = Field(1, ge=1)
    special_requests: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_dates(self) -> "ReservationCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class CancelRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=500)


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReservationResponse(BaseModel):
    """Reservation with its frozen pricing snapshot."""

    id: uuid.UUID
    property_id: uuid.UUID
    guest_id: uuid.UUID
    host_id: uuid.UUID
    check_in: date
    check_out: date
    num_guests: int
    price_per_night: Decimal
    nights: int
    subtotal: Decimal
    service_fee: Decimal
    cleaning_fee: Decimal
    taxes: Decimal
    total: Decimal
    currency: str
    status: str
    payment_status: str
    special_requests: str | None = None
    review_rating: int | None = None
    review_comment: str | None = None
    reviewed_at: datetime | None = None
    cancelled_by_id: uuid.UUID | None = None
    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None
    refund_amount: Decimal | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationDetailResponse(ReservationResponse):
    """Reservation plus the property and both parties."""

    property: PropertySummary
    guest: UserPublic
    host: UserPublic


class ReservationListResponse(BaseModel):
    """Paginated list of reservations."""

    items: list[ReservationDetailResponse]
    total: int
    page: int
    pages: int

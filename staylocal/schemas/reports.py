"""Pydantic v2 schemas for the reporting endpoints."""

from decimal import Decimal

from pydantic import BaseModel


class CountBucket(BaseModel):
    """A group key with the number of rows in it."""

    key: str
    count: int


class StatusBucket(BaseModel):
    status: str
    count: int
    revenue: Decimal = Decimal("0")


class RevenueBucket(BaseModel):
    """Revenue for one time bucket (``2024-06``, ``2024-W23`` or ``2024-06-03``)."""

    period: str
    revenue: Decimal
    service_fees: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    count: int


# ---------------------------------------------------------------------------
# Admin dashboard
# ---------------------------------------------------------------------------


class UserCounts(BaseModel):
    total: int
    hosts: int
    travelers: int
    recent_signups: int


class PropertyCounts(BaseModel):
    total: int
    approved: int
    pending: int
    by_type: list[CountBucket]
    top_cities: list[CountBucket]


class ReservationCounts(BaseModel):
    total: int
    recent: int
    by_status: list[StatusBucket]
    monthly_revenue: list[RevenueBucket]


class DashboardResponse(BaseModel):
    users: UserCounts
    properties: PropertyCounts
    reservations: ReservationCounts


# ---------------------------------------------------------------------------
# Host stats
# ---------------------------------------------------------------------------


class HostPropertyCounts(BaseModel):
    total: int
    approved: int
    pending: int
    total_capacity: int


class HostReservationCounts(BaseModel):
    total: int
    by_status: list[StatusBucket]


class HostRevenue(BaseModel):
    total: Decimal
    monthly: list[RevenueBucket]


class HostRating(BaseModel):
    average: float
    total_reviews: int


class HostStatsResponse(BaseModel):
    properties: HostPropertyCounts
    reservations: HostReservationCounts
    revenue: HostRevenue
    rating: HostRating


# ---------------------------------------------------------------------------
# Revenue and user activity
# ---------------------------------------------------------------------------


class RevenueSummary(BaseModel):
    total_revenue: Decimal
    total_service_fees: Decimal
    total_taxes: Decimal
    total_reservations: int


class RevenueReportResponse(BaseModel):
    period: str
    details: list[RevenueBucket]
    summary: RevenueSummary


class TopBooker(BaseModel):
    user_id: str
    name: str
    email: str
    total_bookings: int
    total_spent: Decimal


class UserActivityResponse(BaseModel):
    new_users: list[CountBucket]
    active_users: int
    top_bookers: list[TopBooker]

"""Read-only rollups for the admin dashboard and host statistics.

Status, type and city breakdowns are SQL ``GROUP BY`` queries. Time series
are bucketed in Python over the fetched rows so the same code runs on every
database dialect. Revenue only counts confirmed and completed reservations
and is attributed to the date the reservation was made.
"""

from __future__ import annotations

import uuid
from collections import OrderedDict
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.database import utcnow
from staylocal.models.enums import REVENUE_STATUSES, Role
from staylocal.models.property import Property
from staylocal.models.reservation import Reservation
from staylocal.models.user import User
from staylocal.schemas.reports import (
    CountBucket,
    DashboardResponse,
    HostPropertyCounts,
    HostRating,
    HostReservationCounts,
    HostRevenue,
    HostStatsResponse,
    PropertyCounts,
    ReservationCounts,
    RevenueBucket,
    RevenueReportResponse,
    RevenueSummary,
    StatusBucket,
    TopBooker,
    UserActivityResponse,
    UserCounts,
)

ZERO = Decimal("0")
_REVENUE_VALUES = [s.value for s in REVENUE_STATUSES]


class Period(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


def bucket_key(moment: datetime | date, period: Period) -> str:
    """Label of the time bucket that ``moment`` falls in."""
    if period is Period.daily:
        return moment.strftime("%Y-%m-%d")
    if period is Period.weekly:
        year, week, _ = moment.isocalendar()
        return f"{year}-W{week:02d}"
    return moment.strftime("%Y-%m")


def month_floor(moment: datetime, months_back: int) -> datetime:
    """First instant of the month ``months_back`` calendar months before ``moment``."""
    index = moment.year * 12 + (moment.month - 1) - months_back
    return datetime(index // 12, index % 12 + 1, 1)


def bucket_revenue(
    rows: Iterable[tuple[datetime, Decimal, Decimal, Decimal]],
    period: Period,
) -> list[RevenueBucket]:
    """Group ``(created_at, total, service_fee, taxes)`` rows into sorted buckets."""
    buckets: dict[str, list] = {}
    for created_at, total, service_fee, taxes in sorted(rows, key=lambda r: r[0]):
        acc = buckets.setdefault(bucket_key(created_at, period), [ZERO, ZERO, ZERO, 0])
        acc[0] += Decimal(total or 0)
        acc[1] += Decimal(service_fee or 0)
        acc[2] += Decimal(taxes or 0)
        acc[3] += 1
    return [
        RevenueBucket(period=key, revenue=acc[0], service_fees=acc[1], taxes=acc[2], count=acc[3])
        for key, acc in sorted(buckets.items())
    ]


def count_by(items: Iterable[datetime], key: Callable[[datetime], str]) -> list[CountBucket]:
    counts: OrderedDict[str, int] = OrderedDict()
    for item in sorted(items):
        label = key(item)
        counts[label] = counts.get(label, 0) + 1
    return [CountBucket(key=label, count=n) for label, n in counts.items()]


async def _count(db: AsyncSession, model, *filters) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*filters))).scalar_one()


async def _status_buckets(db: AsyncSession, *filters) -> list[StatusBucket]:
    result = await db.execute(
        select(Reservation.status, func.count(), func.coalesce(func.sum(Reservation.total), 0))
        .where(*filters)
        .group_by(Reservation.status)
        .order_by(Reservation.status)
    )
    return [StatusBucket(status=status, count=count, revenue=Decimal(total)) for status, count, total in result.all()]


async def _revenue_rows(db: AsyncSession, *filters) -> list[tuple[datetime, Decimal, Decimal, Decimal]]:
    result = await db.execute(
        select(Reservation.created_at, Reservation.total, Reservation.service_fee, Reservation.taxes).where(
            Reservation.status.in_(_REVENUE_VALUES), *filters
        )
    )
    return [tuple(row) for row in result.all()]


# ---------------------------------------------------------------------------
# Admin dashboard
# ---------------------------------------------------------------------------


async def dashboard(db: AsyncSession, now: datetime | None = None) -> DashboardResponse:
    """Platform-wide counts plus twelve months of revenue."""
    now = now or utcnow()
    thirty_days_ago = now - timedelta(days=30)

    users = UserCounts(
        total=await _count(db, User),
        hosts=await _count(db, User, User.role == Role.host.value),
        travelers=await _count(db, User, User.role == Role.traveler.value),
        recent_signups=await _count(db, User, User.created_at >= thirty_days_ago),
    )

    by_type = await db.execute(
        select(Property.property_type, func.count())
        .where(Property.is_approved.is_(True))
        .group_by(Property.property_type)
        .order_by(Property.property_type)
    )
    top_cities = await db.execute(
        select(Property.city, func.count().label("n"))
        .where(Property.is_approved.is_(True))
        .group_by(Property.city)
        .order_by(func.count().desc(), Property.city)
        .limit(10)
    )
    approved = await _count(db, Property, Property.is_approved.is_(True))
    total_properties = await _count(db, Property)
    properties = PropertyCounts(
        total=total_properties,
        approved=approved,
        pending=total_properties - approved,
        by_type=[CountBucket(key=key, count=n) for key, n in by_type.all()],
        top_cities=[CountBucket(key=key, count=n) for key, n in top_cities.all()],
    )

    rows = await _revenue_rows(db, Reservation.created_at >= month_floor(now, 11))
    reservations = ReservationCounts(
        total=await _count(db, Reservation),
        recent=await _count(db, Reservation, Reservation.created_at >= thirty_days_ago),
        by_status=await _status_buckets(db),
        monthly_revenue=bucket_revenue(rows, Period.monthly),
    )
    return DashboardResponse(users=users, properties=properties, reservations=reservations)


# ---------------------------------------------------------------------------
# Host stats
# ---------------------------------------------------------------------------


async def host_stats(db: AsyncSession, host_id: uuid.UUID, now: datetime | None = None) -> HostStatsResponse:
    """Portfolio, booking, revenue and rating summary for one host."""
    now = now or utcnow()

    result = await db.execute(select(Property).where(Property.host_id == host_id))
    props = list(result.scalars().all())
    approved = sum(1 for p in props if p.is_approved)

    by_status = await _status_buckets(db, Reservation.host_id == host_id)

    all_rows = await _revenue_rows(db, Reservation.host_id == host_id)
    window_start = month_floor(now, 5)
    recent_rows = [row for row in all_rows if row[0] >= window_start]

    rated = [p for p in props if p.rating_count > 0]
    if rated:
        mean = sum(Decimal(str(p.rating_average)) for p in rated) / len(rated)
        average = float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    else:
        average = 0.0

    return HostStatsResponse(
        properties=HostPropertyCounts(
            total=len(props),
            approved=approved,
            pending=len(props) - approved,
            total_capacity=sum(p.max_guests for p in props),
        ),
        reservations=HostReservationCounts(total=sum(b.count for b in by_status), by_status=by_status),
        revenue=HostRevenue(
            total=sum((Decimal(row[1]) for row in all_rows), ZERO),
            monthly=bucket_revenue(recent_rows, Period.monthly),
        ),
        rating=HostRating(average=average, total_reviews=sum(p.rating_count for p in rated)),
    )


# ---------------------------------------------------------------------------
# Revenue and user activity
# ---------------------------------------------------------------------------


async def revenue_report(db: AsyncSession, period: Period = Period.monthly) -> RevenueReportResponse:
    rows = await _revenue_rows(db)
    details = bucket_revenue(rows, period)
    summary = RevenueSummary(
        total_revenue=sum((b.revenue for b in details), ZERO),
        total_service_fees=sum((b.service_fees for b in details), ZERO),
        total_taxes=sum((b.taxes for b in details), ZERO),
        total_reservations=sum(b.count for b in details),
    )
    return RevenueReportResponse(period=period.value, details=details, summary=summary)


def _range_filters(column, start_date: date | None, end_date: date | None) -> list:
    filters = []
    if start_date is not None:
        filters.append(column >= datetime.combine(start_date, datetime.min.time()))
    if end_date is not None:
        # end date is inclusive
        filters.append(column < datetime.combine(end_date + timedelta(days=1), datetime.min.time()))
    return filters


async def user_activity(
    db: AsyncSession,
    start_date: date | None = None,
    end_date: date | None = None,
) -> UserActivityResponse:
    """Sign-ups per day, distinct booking guests, and the top ten bookers in a date range."""
    signups = await db.execute(select(User.created_at).where(*_range_filters(User.created_at, start_date, end_date)))
    new_users = count_by(signups.scalars().all(), lambda moment: bucket_key(moment, Period.daily))

    reservation_range = _range_filters(Reservation.created_at, start_date, end_date)
    active_users = (
        await db.execute(select(func.count(distinct(Reservation.guest_id))).where(*reservation_range))
    ).scalar_one()

    bookings = func.count(Reservation.id).label("bookings")
    top = await db.execute(
        select(User.id, User.name, User.email, bookings, func.coalesce(func.sum(Reservation.total), 0))
        .join(User, User.id == Reservation.guest_id)
        .where(Reservation.status.in_(_REVENUE_VALUES), *reservation_range)
        .group_by(User.id, User.name, User.email)
        .order_by(bookings.desc(), User.name)
        .limit(10)
    )
    top_bookers = [
        TopBooker(user_id=str(user_id), name=name, email=email, total_bookings=count, total_spent=Decimal(spent))
        for user_id, name, email, count, spent in top.all()
    ]
    return UserActivityResponse(new_users=new_users, active_users=active_users, top_bookers=top_bookers)

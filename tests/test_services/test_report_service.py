"""Tests for report bucketing helpers and the report queries."""

from datetime import date, datetime
from decimal import Decimal

from staylocal.models.enums import PaymentStatus
from staylocal.services import report_service
from staylocal.services import reservation_service as svc
from staylocal.services.report_service import Period, bucket_key, bucket_revenue, month_floor
from staylocal.services.reservation_service import BookingRequest


class TestBucketing:
    def test_bucket_keys(self):
        moment = datetime(2024, 6, 3, 15, 30)
        assert bucket_key(moment, Period.daily) == "2024-06-03"
        assert bucket_key(moment, Period.weekly) == "2024-W23"
        assert bucket_key(moment, Period.monthly) == "2024-06"

    def test_iso_week_crosses_year(self):
        assert bucket_key(date(2024, 12, 30), Period.weekly) == "2025-W01"

    def test_month_floor(self):
        now = datetime(2024, 6, 17, 12, 0)
        assert month_floor(now, 0) == datetime(2024, 6, 1)
        assert month_floor(now, 5) == datetime(2024, 1, 1)
        assert month_floor(now, 11) == datetime(2023, 7, 1)

    def test_bucket_revenue(self):
        rows = [
            (datetime(2024, 6, 20), Decimal("177"), Decimal("15"), Decimal("12")),
            (datetime(2024, 5, 2), Decimal("354"), Decimal("30"), Decimal("24")),
            (datetime(2024, 6, 1), Decimal("100"), Decimal("0"), Decimal("0")),
        ]
        buckets = bucket_revenue(rows, Period.monthly)
        assert [b.period for b in buckets] == ["2024-05", "2024-06"]
        assert buckets[0].revenue == Decimal("354")
        assert buckets[1].revenue == Decimal("277")
        assert buckets[1].service_fees == Decimal("15")
        assert buckets[1].count == 2


async def _book(db, guest, prop, check_in, check_out, created_at):
    reservation = await svc.create_reservation(db, guest, BookingRequest(prop.id, check_in, check_out))
    reservation.created_at = created_at
    await db.flush()
    return reservation


class TestReportQueries:
    async def test_revenue_counts_confirmed_and_completed_only(
        self, db_session, traveler, other_traveler, host, listed_property
    ):
        confirmed = await _book(
            db_session, traveler, listed_property, date(2024, 6, 1), date(2024, 6, 4), datetime(2024, 5, 10)
        )
        await _book(
            db_session, other_traveler, listed_property, date(2024, 6, 10), date(2024, 6, 11), datetime(2024, 5, 11)
        )
        await svc.confirm_reservation(db_session, confirmed.id, host)

        report = await report_service.revenue_report(db_session, Period.monthly)

        assert report.period == "monthly"
        assert [b.period for b in report.details] == ["2024-05"]
        assert report.summary.total_reservations == 1
        assert report.summary.total_revenue == Decimal("354")
        assert report.summary.total_service_fees == Decimal("30")
        assert report.summary.total_taxes == Decimal("24")

    async def test_dashboard(self, db_session, traveler, host, admin, make_property, listed_property):
        await make_property(host, title="Awaiting review", city="Salem", is_approved=False)
        reservation = await _book(
            db_session, traveler, listed_property, date(2024, 6, 1), date(2024, 6, 4), datetime(2024, 6, 2)
        )
        await svc.confirm_reservation(db_session, reservation.id, host)

        result = await report_service.dashboard(db_session, now=datetime(2024, 6, 15))

        assert result.users.total == 3
        assert result.users.hosts == 1
        assert result.users.travelers == 1
        assert result.properties.total == 2
        assert result.properties.approved == 1
        assert result.properties.pending == 1
        assert [(b.key, b.count) for b in result.properties.top_cities] == [("Bend", 1)]
        assert result.reservations.total == 1
        assert [(b.status, b.count) for b in result.reservations.by_status] == [("confirmed", 1)]
        assert [b.period for b in result.reservations.monthly_revenue] == ["2024-06"]

    async def test_host_stats_only_cover_own_properties(
        self, db_session, traveler, host, other_host, make_property, listed_property
    ):
        elsewhere = await make_property(other_host, title="Someone else's")
        mine = await _book(
            db_session, traveler, listed_property, date(2024, 6, 1), date(2024, 6, 4), datetime(2024, 6, 1)
        )
        await _book(db_session, traveler, elsewhere, date(2024, 6, 1), date(2024, 6, 4), datetime(2024, 6, 1))
        await svc.confirm_reservation(db_session, mine.id, host)

        stats = await report_service.host_stats(db_session, host.id, now=datetime(2024, 6, 15))

        assert stats.properties.total == 1
        assert stats.properties.total_capacity == listed_property.max_guests
        assert stats.reservations.total == 1
        assert stats.revenue.total == Decimal("354")
        assert [b.period for b in stats.revenue.monthly] == ["2024-06"]
        assert stats.rating.total_reviews == 0
        assert stats.rating.average == 0.0

    async def test_user_activity_range(self, db_session, traveler, other_traveler, host, admin, listed_property):
        booked = await _book(
            db_session, traveler, listed_property, date(2024, 6, 1), date(2024, 6, 4), datetime(2024, 6, 2, 23, 0)
        )
        await _book(
            db_session, other_traveler, listed_property, date(2024, 7, 1), date(2024, 7, 2), datetime(2024, 7, 1)
        )
        await svc.confirm_reservation(db_session, booked.id, host)
        await svc.set_payment_status(db_session, booked.id, admin, PaymentStatus.paid)

        activity = await report_service.user_activity(db_session, date(2024, 6, 1), date(2024, 6, 2))

        assert activity.active_users == 1
        assert len(activity.top_bookers) == 1
        top = activity.top_bookers[0]
        assert top.user_id == str(traveler.id)
        assert top.total_bookings == 1
        assert top.total_spent == Decimal("354")

"""Tests for the reservation receipt text and PDF."""

from datetime import date

from staylocal.models.enums import PaymentStatus
from staylocal.services import reservation_service as svc
from staylocal.services.receipt import receipt_filename, render_receipt, render_receipt_pdf
from staylocal.services.reservation_service import BookingRequest


class TestReceipt:
    async def test_sections_and_amounts(self, db_session, traveler, host, listed_property):
        reservation = await svc.create_reservation(
            db_session,
            traveler,
            BookingRequest(listed_property.id, date(2024, 6, 1), date(2024, 6, 4), num_guests=2),
        )
        text = render_receipt(reservation)

        for heading in ("Guest Information", "Property Details", "Stay Details", "Payment Summary"):
            assert heading in text
        assert traveler.name in text
        assert host.name in text
        assert listed_property.title in text
        assert "Saturday, June 01, 2024" in text
        assert "100.00 USD x 3 nights" in text
        assert "300.00 USD" in text
        assert "354.00 USD" in text
        assert "Refund" not in text

    async def test_refund_line_after_cancellation(self, db_session, traveler, host, admin, listed_property):
        reservation = await svc.create_reservation(
            db_session, traveler, BookingRequest(listed_property.id, date(2024, 6, 1), date(2024, 6, 4))
        )
        await svc.set_payment_status(db_session, reservation.id, admin, PaymentStatus.paid)
        await svc.cancel_reservation(db_session, reservation.id, traveler)

        text = render_receipt(reservation)
        assert "Refunded" in text
        assert "Refund:" in text

    async def test_filename(self, db_session, traveler, listed_property):
        reservation = await svc.create_reservation(
            db_session, traveler, BookingRequest(listed_property.id, date(2024, 6, 1), date(2024, 6, 2))
        )
        assert receipt_filename(reservation) == f"reservation-{reservation.id}.pdf"

    async def test_pdf_document(self, db_session, traveler, listed_property):
        reservation = await svc.create_reservation(
            db_session, traveler, BookingRequest(listed_property.id, date(2024, 6, 1), date(2024, 6, 4))
        )
        document = render_receipt_pdf(reservation)
        assert document.startswith(b"%PDF-")
        assert document.rstrip().endswith(b"%%EOF")

    async def test_pdf_tolerates_non_latin_names(self, db_session, make_user, listed_property):
        guest = await make_user(name="Søren 田中")
        reservation = await svc.create_reservation(
            db_session, guest, BookingRequest(listed_property.id, date(2024, 6, 1), date(2024, 6, 4))
        )
        assert "Søren 田中" in render_receipt(reservation)
        assert render_receipt_pdf(reservation).startswith(b"%PDF-")

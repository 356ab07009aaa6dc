"""Payment receipt rendered from a reservation's pricing snapshot.

``render_receipt`` lays the receipt out as fixed-width text; ``render_receipt_pdf``
sets that text on an A4 page in a monospace core font.
"""

from decimal import Decimal

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from staylocal.config import settings
from staylocal.models.reservation import Reservation

WIDTH = 60
PDF_FONT_SIZE = 10
PDF_LINE_HEIGHT = 5


def _line(label: str, value: object) -> str:
    return f"{label + ':':<20}{value}"


def _money(amount: Decimal | None, currency: str) -> str:
    return f"{Decimal(amount or 0):,.2f} {currency}"


def _section(title: str) -> list[str]:
    return ["", title, "-" * len(title)]


def receipt_filename(reservation: Reservation) -> str:
    return f"reservation-{reservation.id}.pdf"


def render_receipt(reservation: Reservation) -> str:
    """Render the receipt text. Requires the property, guest and host to be loaded."""
    prop = reservation.property
    guest = reservation.guest
    host = reservation.host
    currency = reservation.currency
    address = prop.full_address or ", ".join(part for part in (prop.city, prop.state, prop.country) if part)

    lines = [
        settings.app_name.center(WIDTH),
        "Reservation Receipt".center(WIDTH),
        "=" * WIDTH,
        _line("Reservation ID", reservation.id),
        _line("Booking Date", reservation.created_at.strftime("%Y-%m-%d %H:%M UTC")),
    ]

    lines += _section("Guest Information")
    lines.append(_line("Name", guest.name))
    lines.append(_line("Email", guest.email))
    if guest.phone:
        lines.append(_line("Phone", guest.phone))

    lines += _section("Property Details")
    lines.append(_line("Property", prop.title))
    lines.append(_line("Address", address or "N/A"))
    lines.append(_line("Host", host.name))

    lines += _section("Stay Details")
    lines.append(_line("Check-in", reservation.check_in.strftime("%A, %B %d, %Y")))
    lines.append(_line("Check-out", reservation.check_out.strftime("%A, %B %d, %Y")))
    lines.append(_line("Number of Guests", reservation.num_guests))
    lines.append(_line("Number of Nights", reservation.nights))
    lines.append(_line("Status", reservation.status.capitalize()))

    lines += _section("Payment Summary")
    lines.append(
        _line(
            "Nightly Rate",
            f"{_money(reservation.price_per_night, currency)} x {reservation.nights} nights",
        )
    )
    lines.append(_line("Subtotal", _money(reservation.subtotal, currency)))
    if reservation.cleaning_fee:
        lines.append(_line("Cleaning Fee", _money(reservation.cleaning_fee, currency)))
    lines.append(_line("Service Fee", _money(reservation.service_fee, currency)))
    lines.append(_line("Taxes", _money(reservation.taxes, currency)))
    lines.append("-" * WIDTH)
    lines.append(_line("Total", _money(reservation.total, currency)))
    lines.append(_line("Payment Status", reservation.payment_status.capitalize()))
    if reservation.refund_amount is not None:
        lines.append(_line("Refund", _money(reservation.refund_amount, currency)))

    lines += ["", "=" * WIDTH, "This is an electronically generated receipt.".center(WIDTH), ""]
    return "\n".join(lines)


def render_receipt_pdf(reservation: Reservation) -> bytes:
    """Render the receipt as a single-page PDF document."""
    pdf = FPDF(format="A4")
    pdf.set_title(f"Reservation Receipt {reservation.id}")
    pdf.set_author(settings.app_name)
    pdf.add_page()
    pdf.set_font("Courier", size=PDF_FONT_SIZE)
    for line in render_receipt(reservation).splitlines():
        # Core fonts only cover Latin-1.
        safe = line.encode("latin-1", "replace").decode("latin-1")
        pdf.cell(0, PDF_LINE_HEIGHT, text=safe, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    return bytes(pdf.output())

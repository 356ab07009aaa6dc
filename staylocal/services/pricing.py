"""Stay pricing: nights × nightly rate plus service fee and taxes.

Each fee line is rounded to a whole currency unit (half-up) on its own before
the lines are summed, so ``total`` is not always exactly
``rate * nights * (1 + fee_rate + tax_rate)``. Receipts and reports rely on
this exact breakdown, so keep the rounding per line.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from staylocal.config import settings
from staylocal.errors import ValidationFailure

MIN_NIGHTS = 1


@dataclass(frozen=True)
class PriceBreakdown:
    price_per_night: Decimal
    nights: int
    subtotal: Decimal
    service_fee: Decimal
    taxes: Decimal
    total: Decimal
    currency: str
    cleaning_fee: Decimal = Decimal("0")


def round_half_up(value: Decimal) -> Decimal:
    """Round to the nearest whole unit, ties away from zero."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two dates (negative or zero for a degenerate range)."""
    return (check_out - check_in).days


def calculate_price(
    price_per_night: Decimal | int | float,
    nights: int,
    currency: str | None = None,
    service_fee_rate: Decimal | None = None,
    tax_rate: Decimal | None = None,
) -> PriceBreakdown:
    """Compute the price breakdown for a stay.

    Args:
        price_per_night: Non-negative nightly rate.
        nights: Number of nights; must be at least ``MIN_NIGHTS``.
        currency: ISO currency code, defaults to ``settings.default_currency``.
        service_fee_rate: Overrides ``settings.service_fee_rate``.
        tax_rate: Overrides ``settings.tax_rate``.

    Raises:
        ValidationFailure: If ``nights`` is below the minimum or the rate is negative.
    """
    if nights < MIN_NIGHTS:
        raise ValidationFailure("Minimum stay is 1 night")

    rate = Decimal(str(price_per_night))
    if rate < 0:
        raise ValidationFailure("Price per night cannot be negative")

    fee_rate = settings.service_fee_rate if service_fee_rate is None else service_fee_rate
    tax = settings.tax_rate if tax_rate is None else tax_rate

    subtotal = rate * nights
    service_fee = round_half_up(subtotal * fee_rate)
    taxes = round_half_up(subtotal * tax)

    return PriceBreakdown(
        price_per_night=rate,
        nights=nights,
        subtotal=subtotal,
        service_fee=service_fee,
        taxes=taxes,
        total=subtotal + service_fee + taxes,
        currency=currency or settings.default_currency,
    )


def quote_stay(price_per_night: Decimal, check_in: date, check_out: date, currency: str | None = None) -> PriceBreakdown:
    """Price a ``[check_in, check_out)`` stay."""
    return calculate_price(price_per_night, count_nights(check_in, check_out), currency=currency)

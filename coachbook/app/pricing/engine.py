"""Pure price, fee and summary calculations for bookable services."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from .models import PaymentSummary, PricedService
from .money import (
    DEFAULT_CURRENCY,
    DEFAULT_LOCALE,
    ZERO,
    format_currency,
    parse_amount,
    round_cents,
)

DEFAULT_BASE_DURATION_MINUTES = 60
MEMBERSHIP_TOTAL_LABEL = "FREE"


def calculate_effective_price(
    service: Optional[PricedService],
    selected_duration: Optional[object] = None,
) -> Decimal:
    """Return the price for ``service`` at ``selected_duration`` minutes.

    Fixed-duration services, or calls without a duration, return the base
    price unchanged. Variable-duration services scale linearly against the
    service's own duration (60 minutes when it has none).
    """

    base_price = parse_amount(getattr(service, "price", None))
    if not getattr(service, "is_variable_duration", False):
        return base_price

    duration = parse_amount(selected_duration)
    if duration <= 0:
        return base_price

    base_duration = parse_amount(getattr(service, "duration_minutes", None))
    if base_duration <= 0:
        base_duration = Decimal(DEFAULT_BASE_DURATION_MINUTES)
    return round_cents(duration / base_duration * base_price)


def calculate_platform_fee(subtotal: object, fee_rate: object = 0) -> Decimal:
    """Platform fee for ``subtotal``; rounding happens when the summary is rendered."""

    return parse_amount(subtotal) * parse_amount(fee_rate)


def build_payment_summary(
    service: Optional[PricedService],
    duration_minutes: Optional[object] = None,
    platform_fee_rate: object = 0,
    is_membership_booking: bool = False,
    *,
    locale: str = DEFAULT_LOCALE,
    currency: str = DEFAULT_CURRENCY,
) -> PaymentSummary:
    """Build the subtotal / fee / total breakdown for a booking."""

    subtotal = calculate_effective_price(service, duration_minutes)
    if is_membership_booking:
        platform_fee = ZERO
        total = ZERO
    else:
        platform_fee = calculate_platform_fee(subtotal, platform_fee_rate)
        total = subtotal + platform_fee

    total_formatted = format_currency(total, locale=locale, currency=currency)
    return PaymentSummary(
        subtotal=subtotal,
        platform_fee=platform_fee,
        total=total,
        platform_fee_percent=round_cents(parse_amount(platform_fee_rate) * 100),
        is_membership_booking=is_membership_booking,
        subtotal_formatted=format_currency(subtotal, locale=locale, currency=currency),
        platform_fee_formatted=format_currency(platform_fee, locale=locale, currency=currency),
        total_formatted=total_formatted,
        total_label=MEMBERSHIP_TOTAL_LABEL if is_membership_booking else total_formatted,
    )

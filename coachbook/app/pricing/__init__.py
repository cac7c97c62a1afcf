"""Pricing engine: effective prices, platform fees and payment summaries."""

from .engine import (
    DEFAULT_BASE_DURATION_MINUTES,
    MEMBERSHIP_TOTAL_LABEL,
    build_payment_summary,
    calculate_effective_price,
    calculate_platform_fee,
)
from .models import PaymentSummary, PricedService
from .money import (
    DEFAULT_CURRENCY,
    DEFAULT_LOCALE,
    format_currency,
    parse_amount,
    parse_currency,
    round_cents,
)

__all__ = [
    "DEFAULT_BASE_DURATION_MINUTES",
    "DEFAULT_CURRENCY",
    "DEFAULT_LOCALE",
    "MEMBERSHIP_TOTAL_LABEL",
    "PaymentSummary",
    "PricedService",
    "build_payment_summary",
    "calculate_effective_price",
    "calculate_platform_fee",
    "format_currency",
    "parse_amount",
    "parse_currency",
    "round_cents",
]

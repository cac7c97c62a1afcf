"""Unit tests for effective prices, platform fees and payment summaries."""
from __future__ import annotations

from decimal import Decimal

import pytest

from coachbook.app.bookings import Service
from coachbook.app.pricing import (
    MEMBERSHIP_TOTAL_LABEL,
    build_payment_summary,
    calculate_effective_price,
    calculate_platform_fee,
    format_currency,
    parse_amount,
    parse_currency,
    round_cents,
)


def _service(**overrides) -> Service:
    data = {"id": 5, "name": "Private Lesson", "price": "80.00", "duration_minutes": 60}
    data.update(overrides)
    return Service(**data)


@pytest.mark.parametrize("duration", [None, 0, 30, 90, 240])
def test_fixed_duration_price_ignores_selected_duration(duration):
    service = _service(is_variable_duration=False)

    assert calculate_effective_price(service, duration) == Decimal("80.00")


def test_variable_duration_price_scales_with_selected_minutes():
    service = _service(is_variable_duration=True, allowed_durations=[30, 60, 90])

    assert calculate_effective_price(service, 30) == Decimal("40.00")
    assert calculate_effective_price(service, 90) == Decimal("120.00")


def test_variable_price_doubles_within_a_cent():
    service = _service(price="47.99", duration_minutes=45, is_variable_duration=True)

    for minutes in range(5, 125, 5):
        single = calculate_effective_price(service, minutes)
        double = calculate_effective_price(service, minutes * 2)
        assert abs(double - single * 2) <= Decimal("0.01")


def test_variable_price_without_base_duration_uses_an_hour():
    service = _service(price="60", duration_minutes=None, is_variable_duration=True)

    assert calculate_effective_price(service, 90) == Decimal("90.00")


def test_variable_price_without_duration_returns_base_price():
    service = _service(is_variable_duration=True)

    assert calculate_effective_price(service, None) == Decimal("80.00")
    assert calculate_effective_price(service, -30) == Decimal("80.00")


@pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity", "-inf", None, "", True])
def test_malformed_amounts_fall_back_to_zero(raw):
    assert parse_amount(raw) == Decimal("0")


def test_service_with_corrupt_price_is_free_rather_than_nan():
    service = _service(price="not-a-number")

    summary = build_payment_summary(service, None, Decimal("0.03"))

    assert service.price == Decimal("0")
    assert summary.total == Decimal("0")
    assert summary.total_formatted == "$0.00"


def test_platform_fee_is_not_rounded():
    assert calculate_platform_fee(Decimal("33.33"), Decimal("0.03")) == Decimal("0.9999")
    assert calculate_platform_fee(Decimal("33.33")) == Decimal("0")


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("2.675"), Decimal("2.68")),
        (Decimal("0.005"), Decimal("0.01")),
        (Decimal("0.004"), Decimal("0.00")),
        ("19.999", Decimal("20.00")),
    ],
)
def test_round_cents_rounds_half_up(value, expected):
    assert round_cents(value) == expected


def test_payment_summary_adds_platform_fee():
    summary = build_payment_summary(_service(price="100.00"), None, Decimal("0.03"))

    assert summary.subtotal == Decimal("100.00")
    assert summary.platform_fee == Decimal("3.00")
    assert summary.total == Decimal("103.00")
    assert summary.platform_fee_percent == Decimal("3.00")
    assert summary.is_membership_booking is False
    assert summary.subtotal_formatted == "$100.00"
    assert summary.platform_fee_formatted == "$3.00"
    assert summary.total_formatted == "$103.00"
    assert summary.total_label == "$103.00"


@pytest.mark.parametrize("fee_rate", [Decimal("0"), Decimal("0.03"), Decimal("0.25"), "0.5"])
def test_membership_summary_is_always_free(fee_rate):
    summary = build_payment_summary(_service(price="100.00"), None, fee_rate, True)

    assert summary.platform_fee == Decimal("0")
    assert summary.total == Decimal("0")
    assert summary.subtotal == Decimal("100.00")
    assert summary.total_formatted == "$0.00"
    assert summary.total_label == MEMBERSHIP_TOTAL_LABEL


def test_summary_uses_variable_duration_subtotal():
    service = _service(price="80", is_variable_duration=True)

    summary = build_payment_summary(service, 90, Decimal("0.05"))

    assert summary.subtotal == Decimal("120.00")
    assert round_cents(summary.platform_fee) == Decimal("6.00")
    assert summary.total_formatted == "$126.00"


@pytest.mark.parametrize(
    "amount, kwargs, expected",
    [
        (Decimal("1234.5"), {}, "$1,234.50"),
        (Decimal("0"), {}, "$0.00"),
        (Decimal("-5"), {}, "-$5.00"),
        (Decimal("1234567.891"), {}, "$1,234,567.89"),
        (Decimal("1234.5"), {"locale": "de-DE", "currency": "EUR"}, "1.234,50\u00a0€"),
        (Decimal("99.9"), {"locale": "en-GB", "currency": "GBP"}, "£99.90"),
        (Decimal("5"), {"currency": "CHF"}, "CHF\u00a05.00"),
        (Decimal("12"), {"locale": "xx-YY"}, "$12.00"),
    ],
)
def test_format_currency(amount, kwargs, expected):
    assert format_currency(amount, **kwargs) == expected


@pytest.mark.parametrize("locale, currency", [("en-US", "USD"), ("de-DE", "EUR"), ("fr-FR", "EUR")])
@pytest.mark.parametrize("amount", ["0", "0.1", "12.345", "999.995", "1234567.8", "-42.5"])
def test_format_currency_is_idempotent(locale, currency, amount):
    formatted = format_currency(amount, locale=locale, currency=currency)

    reparsed = parse_currency(formatted, locale=locale)

    assert format_currency(reparsed, locale=locale, currency=currency) == formatted
    assert format_currency(amount, locale=locale, currency=currency) == formatted

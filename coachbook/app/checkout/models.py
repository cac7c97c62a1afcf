"""Membership purchase models and quote calculation."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..bookings import Person
from ..memberships import MembershipPlan
from ..pricing import (
    DEFAULT_CURRENCY,
    DEFAULT_LOCALE,
    format_currency,
    parse_amount,
    round_cents,
)

BILLING_CYCLE_LABELS = {
    "month": "Monthly",
    "year": "Yearly",
    "week": "Weekly",
    "quarter": "Quarterly",
}


def get_billing_cycle_label(cycle: Optional[str]) -> Optional[str]:
    return BILLING_CYCLE_LABELS.get(cycle or "", cycle)


class BillingCycle(BaseModel):
    """One purchasable billing cadence of a membership plan."""

    id: int
    billing_cycle: str = "month"
    price: Decimal = Decimal("0")

    model_config = ConfigDict(frozen=True)

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: object) -> Decimal:
        return parse_amount(value)

    @property
    def label(self) -> Optional[str]:
        return get_billing_cycle_label(self.billing_cycle)


class MembershipQuote(BaseModel):
    """Price of a plan for one billing cycle, including the platform fee."""

    cycle_price: Decimal
    platform_fee: Decimal
    total: Decimal
    cycle_label: Optional[str] = None
    cycle_price_formatted: str
    platform_fee_formatted: str
    total_formatted: str

    model_config = ConfigDict(frozen=True)


def build_membership_quote(
    plan: MembershipPlan,
    billing_cycle: Optional[BillingCycle],
    fee_rate: object,
    *,
    locale: str = DEFAULT_LOCALE,
    currency: str = DEFAULT_CURRENCY,
) -> MembershipQuote:
    """Quote ``plan`` for ``billing_cycle``; without a cycle the monthly price applies."""

    if billing_cycle is not None:
        cycle_price = billing_cycle.price
    else:
        cycle_price = plan.monthly_price or plan.price
    platform_fee = round_cents(cycle_price * parse_amount(fee_rate))
    total = cycle_price + platform_fee
    return MembershipQuote(
        cycle_price=cycle_price,
        platform_fee=platform_fee,
        total=total,
        cycle_label=billing_cycle.label if billing_cycle else None,
        cycle_price_formatted=format_currency(cycle_price, locale=locale, currency=currency),
        platform_fee_formatted=format_currency(platform_fee, locale=locale, currency=currency),
        total_formatted=format_currency(total, locale=locale, currency=currency),
    )


class MembershipCheckoutRequest(BaseModel):
    """A client's purchase of a membership plan."""

    client: Person
    plan: MembershipPlan
    billing_cycle: Optional[BillingCycle] = None
    card_token: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class MembershipCheckoutResult(BaseModel):
    subscription_id: Optional[str] = None
    subscription_status: Optional[str] = None
    quote: MembershipQuote
    title: str
    message: str

    model_config = ConfigDict(frozen=True)

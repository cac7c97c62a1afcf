"""Value objects produced by the pricing engine."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict


class PricedService(Protocol):
    """The subset of a bookable service the pricing engine reads."""

    price: object
    duration_minutes: Optional[int]
    is_variable_duration: bool


class PaymentSummary(BaseModel):
    """Price breakdown shown before a booking is confirmed.

    Recomputed on every request from the service, the membership decision
    and the tenant's fee rate; it is never persisted.
    """

    subtotal: Decimal
    platform_fee: Decimal
    total: Decimal
    platform_fee_percent: Decimal
    is_membership_booking: bool
    subtotal_formatted: str
    platform_fee_formatted: str
    total_formatted: str
    total_label: str

    model_config = ConfigDict(frozen=True)

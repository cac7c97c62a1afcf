"""Payment configuration and gateway request/response models."""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..pricing import parse_amount

DEFAULT_FEE_RATE = Decimal("0.03")
DEFAULT_FEE_DESCRIPTION = "Platform service fee"


class EcommerceConfig(BaseModel):
    """Tenant payment settings, read once per booking attempt."""

    platform_fee_rate: Decimal = DEFAULT_FEE_RATE
    fee_description: str = DEFAULT_FEE_DESCRIPTION
    payments_enabled: bool = False
    connect_account_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api(cls, payload: Optional[Mapping[str, Any]]) -> "EcommerceConfig":
        """Build from ``GET /config/ecommerce``; missing pieces keep their defaults."""

        payload = payload or {}
        fees = payload.get("fees") or {}
        stripe_settings = payload.get("stripe") or {}

        values: Dict[str, Any] = {}
        percentage = fees.get("platform_fee_percentage")
        if isinstance(percentage, (int, float, Decimal)) and not isinstance(percentage, bool):
            values["platform_fee_rate"] = parse_amount(percentage) / Decimal(100)
        if fees.get("platform_fee_description"):
            values["fee_description"] = str(fees["platform_fee_description"])

        account_id = stripe_settings.get("account_id")
        if account_id and stripe_settings.get("account_type") != "none":
            values["payments_enabled"] = True
            values["connect_account_id"] = str(account_id)

        return cls(**values)


class BillingDetails(BaseModel):
    """Cardholder details sent along with a card confirmation."""

    name: str
    email: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def to_stripe(self) -> Dict[str, str]:
        return self.model_dump(exclude_none=True)


class PaymentIntentRequest(BaseModel):
    """Body of ``POST /billing/service-payment`` for a pending booking."""

    client_id: int
    service_id: int
    booking_id: int
    metadata: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class PaymentIntentResult(BaseModel):
    """Payment intent prepared by the tenant backend on the connect account."""

    success: bool = False
    client_secret: Optional[str] = None
    payment_intent_id: Optional[str] = None
    service_amount: Decimal = Decimal("0")
    platform_fee: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    connect_account: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("service_amount", "platform_fee", "total_amount", mode="before")
    @classmethod
    def _parse_money(cls, value: object) -> Decimal:
        return parse_amount(value)

    @property
    def is_usable(self) -> bool:
        return self.success and bool(self.client_secret)


class PaymentConfirmation(BaseModel):
    """Outcome of confirming a payment intent with card details."""

    payment_intent_id: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def succeeded(self) -> bool:
        return self.error is None and bool(self.payment_intent_id)


class PaymentMethodResult(BaseModel):
    """A reusable payment method created from a card token."""

    id: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class MembershipSubscriptionRequest(BaseModel):
    """Body of ``POST /billing/membership-subscription``."""

    client_id: int
    membership_plan_id: int
    billing_cycle_id: int
    payment_method_id: str

    model_config = ConfigDict(frozen=True)


class MembershipSubscriptionResult(BaseModel):
    success: bool = False
    client_secret: Optional[str] = None
    subscription_id: Optional[str] = None
    subscription_status: Optional[str] = None
    amount: Decimal = Decimal("0")
    platform_fee: Decimal = Decimal("0")
    error: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("amount", "platform_fee", mode="before")
    @classmethod
    def _parse_money(cls, value: object) -> Decimal:
        return parse_amount(value)

    @field_validator("subscription_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> Optional[str]:
        return None if value is None else str(value)

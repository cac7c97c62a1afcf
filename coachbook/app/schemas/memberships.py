"""API schemas for membership checkout endpoints."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..bookings import Caller
from ..checkout import BillingCycle, MembershipCheckoutRequest, MembershipCheckoutResult, MembershipQuote
from ..memberships import MembershipPlan


class MembershipCheckoutBody(BaseModel):
    plan: MembershipPlan
    billing_cycle: Optional[BillingCycle] = Field(alias="billingCycle", default=None)
    card_token: Optional[str] = Field(alias="cardToken", default=None)

    model_config = ConfigDict(populate_by_name=True)

    def to_checkout_request(self, caller: Caller) -> MembershipCheckoutRequest:
        return MembershipCheckoutRequest(
            client=caller.user,
            plan=self.plan,
            billing_cycle=self.billing_cycle,
            card_token=self.card_token,
        )


class MembershipQuoteResponse(BaseModel):
    cycle_price: Decimal = Field(alias="cyclePrice")
    platform_fee: Decimal = Field(alias="platformFee")
    total: Decimal
    cycle_label: Optional[str] = Field(alias="cycleLabel", default=None)
    cycle_price_formatted: str = Field(alias="cyclePriceFormatted")
    platform_fee_formatted: str = Field(alias="platformFeeFormatted")
    total_formatted: str = Field(alias="totalFormatted")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_quote(cls, quote: MembershipQuote) -> "MembershipQuoteResponse":
        return cls(**quote.model_dump())


class MembershipCheckoutResponse(BaseModel):
    subscription_id: Optional[str] = Field(alias="subscriptionId", default=None)
    subscription_status: Optional[str] = Field(alias="subscriptionStatus", default=None)
    quote: MembershipQuoteResponse
    title: str
    message: str

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: MembershipCheckoutResult) -> "MembershipCheckoutResponse":
        return cls(
            subscription_id=result.subscription_id,
            subscription_status=result.subscription_status,
            quote=MembershipQuoteResponse.from_quote(result.quote),
            title=result.title,
            message=result.message,
        )

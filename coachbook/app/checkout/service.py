"""Membership checkout: tokenize the card, then subscribe through the tenant."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..errors import PreconditionFailure, SubscriptionCreationFailure, extract_error_message
from ..payments import (
    BillingDetails,
    MembershipSubscriptionRequest,
    MembershipSubscriptionResult,
    PaymentMethodResult,
)
from ..pricing import DEFAULT_CURRENCY, DEFAULT_LOCALE
from ..saga import EcommerceConfigSource, load_ecommerce_config
from .models import (
    MembershipCheckoutRequest,
    MembershipCheckoutResult,
    MembershipQuote,
    build_membership_quote,
)

logger = logging.getLogger("membership_checkout")

PURCHASE_FAILED_MESSAGE = "Failed to purchase membership."


class MembershipBillingGateway(Protocol):
    """Payment processor operations needed to start a membership."""

    def create_payment_method(
        self,
        card_token: str,
        *,
        billing_details: BillingDetails,
        connect_account_id: Optional[str] = None,
    ) -> PaymentMethodResult:
        ...

    def create_membership_subscription(
        self, request: MembershipSubscriptionRequest
    ) -> MembershipSubscriptionResult:
        ...


@dataclass
class MembershipCheckoutService:
    """Sells membership plans to clients paying by card."""

    gateway: MembershipBillingGateway
    config_source: EcommerceConfigSource
    locale: str = DEFAULT_LOCALE
    currency: str = DEFAULT_CURRENCY

    def quote(self, request: MembershipCheckoutRequest) -> MembershipQuote:
        config = load_ecommerce_config(self.config_source)
        return build_membership_quote(
            request.plan,
            request.billing_cycle,
            config.platform_fee_rate,
            locale=self.locale,
            currency=self.currency,
        )

    def purchase(self, request: MembershipCheckoutRequest) -> MembershipCheckoutResult:
        config = load_ecommerce_config(self.config_source)
        if not config.payments_enabled:
            raise PreconditionFailure(
                code="payments_disabled",
                message="Card payments are not yet available for this organization.",
                title="Purchase Failed",
            )
        if request.billing_cycle is None:
            raise PreconditionFailure(
                code="billing_cycle_required",
                message="No billing cycle selected. Please go back and select a plan.",
                title="Billing Cycle Required",
            )
        if not request.card_token:
            raise PreconditionFailure(
                code="card_required",
                message="Please enter your card details.",
                title="Card Required",
            )

        quote = build_membership_quote(
            request.plan,
            request.billing_cycle,
            config.platform_fee_rate,
            locale=self.locale,
            currency=self.currency,
        )
        billing_details = BillingDetails(
            name=request.client.full_name or "Customer",
            email=request.client.email,
        )

        try:
            method = self.gateway.create_payment_method(
                request.card_token,
                billing_details=billing_details,
                connect_account_id=config.connect_account_id,
            )
            if method.error or not method.id:
                raise SubscriptionCreationFailure(
                    code="payment_method_failed",
                    message=method.error or "Failed to create payment method.",
                    title="Purchase Failed",
                )

            result = self.gateway.create_membership_subscription(
                MembershipSubscriptionRequest(
                    client_id=request.client.id,
                    membership_plan_id=request.plan.id,
                    billing_cycle_id=request.billing_cycle.id,
                    payment_method_id=method.id,
                )
            )
            if not result.success:
                raise SubscriptionCreationFailure(
                    code="subscription_failed",
                    message=result.error or result.message or "Subscription creation failed.",
                    title="Purchase Failed",
                )
        except SubscriptionCreationFailure:
            raise
        except Exception as exc:
            logger.warning(
                "Membership purchase failed client=%s plan=%s: %s",
                request.client.id,
                request.plan.id,
                exc,
            )
            raise SubscriptionCreationFailure(
                code="subscription_failed",
                message=extract_error_message(exc, PURCHASE_FAILED_MESSAGE),
                title="Purchase Failed",
            ) from exc

        logger.info(
            "Membership purchased client=%s plan=%s subscription=%s",
            request.client.id,
            request.plan.id,
            result.subscription_id,
        )
        return MembershipCheckoutResult(
            subscription_id=result.subscription_id,
            subscription_status=result.subscription_status,
            quote=quote,
            title="Membership Activated",
            message=f"You are now a {request.plan.name} member!",
        )

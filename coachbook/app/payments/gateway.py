"""Stripe-backed payment gateway for one-off bookings and membership billing."""
from __future__ import annotations

import logging
import threading
from typing import Optional, Set

import stripe

from ...api import TenantApiClient
from .models import (
    BillingDetails,
    MembershipSubscriptionRequest,
    MembershipSubscriptionResult,
    PaymentConfirmation,
    PaymentIntentRequest,
    PaymentIntentResult,
    PaymentMethodResult,
)

logger = logging.getLogger("payments")

CONFIRMED_INTENT_STATUSES = frozenset({"succeeded", "processing", "requires_capture"})


def payment_intent_id_from_secret(client_secret: str) -> str:
    """``pi_123_secret_abc`` -> ``pi_123``."""

    intent_id, separator, _ = client_secret.partition("_secret_")
    if not separator or not intent_id:
        raise ValueError("Malformed payment intent client secret")
    return intent_id


class StripePaymentGateway:
    """Creates intents through the tenant API and confirms cards with Stripe.

    Payment intents are created server side by the tenant backend, which owns
    the fee split on the connect account. Card confirmation and payment method
    creation talk to Stripe directly, scoped to the tenant's connect account.
    """

    def __init__(self, api: TenantApiClient, *, stripe_api_key: Optional[str] = None) -> None:
        self._api = api
        self._stripe_api_key = stripe_api_key
        self._notified: Set[str] = set()
        self._lock = threading.Lock()

    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResult:
        body = self._api.post("/billing/service-payment", json=request.model_dump(exclude_defaults=True))
        result = PaymentIntentResult.model_validate(body)
        logger.info(
            "Payment intent requested booking=%s intent=%s success=%s",
            request.booking_id,
            result.payment_intent_id,
            result.success,
        )
        return result

    def confirm_payment(
        self,
        client_secret: str,
        *,
        billing_details: BillingDetails,
        card_token: str,
        connect_account_id: Optional[str] = None,
    ) -> PaymentConfirmation:
        try:
            intent_id = payment_intent_id_from_secret(client_secret)
        except ValueError as exc:
            return PaymentConfirmation(error=str(exc))

        try:
            intent = stripe.PaymentIntent.confirm(
                intent_id,
                payment_method_data={
                    "type": "card",
                    "card": {"token": card_token},
                    "billing_details": billing_details.to_stripe(),
                },
                api_key=self._stripe_api_key,
                stripe_account=connect_account_id,
            )
        except stripe.CardError as exc:
            logger.info("Card declined for intent %s: %s", intent_id, exc.user_message or exc)
            return PaymentConfirmation(payment_intent_id=intent_id, error=exc.user_message or str(exc))
        except stripe.StripeError as exc:
            logger.warning("Stripe error confirming intent %s: %s", intent_id, exc)
            return PaymentConfirmation(payment_intent_id=intent_id, error=exc.user_message or str(exc))

        if intent.status not in CONFIRMED_INTENT_STATUSES:
            return PaymentConfirmation(
                payment_intent_id=intent.id,
                status=intent.status,
                error=f"Payment could not be completed (status: {intent.status}).",
            )
        return PaymentConfirmation(payment_intent_id=intent.id, status=intent.status)

    def notify_payment_success(self, payment_intent_id: str) -> None:
        """Tell the tenant backend the intent succeeded; repeat calls are no-ops."""

        with self._lock:
            if payment_intent_id in self._notified:
                logger.debug("Payment success already recorded for %s", payment_intent_id)
                return
        self._api.post("/billing/payment-success", json={"payment_intent_id": payment_intent_id})
        with self._lock:
            self._notified.add(payment_intent_id)

    def create_payment_method(
        self,
        card_token: str,
        *,
        billing_details: BillingDetails,
        connect_account_id: Optional[str] = None,
    ) -> PaymentMethodResult:
        try:
            method = stripe.PaymentMethod.create(
                type="card",
                card={"token": card_token},
                billing_details=billing_details.to_stripe(),
                api_key=self._stripe_api_key,
                stripe_account=connect_account_id,
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe error creating payment method: %s", exc)
            return PaymentMethodResult(error=exc.user_message or str(exc))
        return PaymentMethodResult(id=method.id)

    def create_membership_subscription(
        self, request: MembershipSubscriptionRequest
    ) -> MembershipSubscriptionResult:
        body = self._api.post("/billing/membership-subscription", json=request.model_dump())
        return MembershipSubscriptionResult.model_validate(body)

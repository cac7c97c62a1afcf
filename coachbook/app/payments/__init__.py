"""Payment configuration, gateway models and the Stripe gateway."""

from .models import (
    DEFAULT_FEE_DESCRIPTION,
    DEFAULT_FEE_RATE,
    BillingDetails,
    EcommerceConfig,
    MembershipSubscriptionRequest,
    MembershipSubscriptionResult,
    PaymentConfirmation,
    PaymentIntentRequest,
    PaymentIntentResult,
    PaymentMethodResult,
)

__all__ = [
    "DEFAULT_FEE_DESCRIPTION",
    "DEFAULT_FEE_RATE",
    "BillingDetails",
    "EcommerceConfig",
    "MembershipSubscriptionRequest",
    "MembershipSubscriptionResult",
    "PaymentConfirmation",
    "PaymentIntentRequest",
    "PaymentIntentResult",
    "PaymentMethodResult",
]

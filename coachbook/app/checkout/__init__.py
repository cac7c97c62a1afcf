"""Membership plan checkout."""

from .models import (
    BILLING_CYCLE_LABELS,
    BillingCycle,
    MembershipCheckoutRequest,
    MembershipCheckoutResult,
    MembershipQuote,
    build_membership_quote,
    get_billing_cycle_label,
)
from .service import MembershipBillingGateway, MembershipCheckoutService

__all__ = [
    "BILLING_CYCLE_LABELS",
    "BillingCycle",
    "MembershipBillingGateway",
    "MembershipCheckoutRequest",
    "MembershipCheckoutResult",
    "MembershipCheckoutService",
    "MembershipQuote",
    "build_membership_quote",
    "get_billing_cycle_label",
]

"""Membership models and coverage decisions for bookings."""

from .allotments import AllotmentUsage, summarize_allotments
from .eligibility import (
    EligibilityOutcome,
    MembershipDirectory,
    MembershipEligibility,
    MembershipEligibilityResolver,
    evaluate_eligibility,
)
from .models import MembershipPlan, MembershipSubscription, PlanService, StripeStatus

__all__ = [
    "AllotmentUsage",
    "EligibilityOutcome",
    "MembershipDirectory",
    "MembershipEligibility",
    "MembershipEligibilityResolver",
    "MembershipPlan",
    "MembershipSubscription",
    "PlanService",
    "StripeStatus",
    "evaluate_eligibility",
    "summarize_allotments",
]

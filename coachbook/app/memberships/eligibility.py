"""Decides whether a client's membership covers a requested service."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import MembershipSubscription, PlanService

logger = logging.getLogger(__name__)


class MembershipDirectory(Protocol):
    """Lookup of a client's current membership."""

    def get_current_membership(self, client_id: int) -> Optional[MembershipSubscription]:
        ...


class EligibilityOutcome(str, Enum):
    """Possible results of an eligibility check."""

    NO_MEMBERSHIP = "no_membership"
    PAUSED = "paused"
    COVERED = "covered"
    NOT_COVERED = "not_covered"


class MembershipEligibility(BaseModel):
    """Tagged eligibility result; only ``COVERED`` carries usage linkage."""

    outcome: EligibilityOutcome
    subscription_id: Optional[int] = None
    plan_service_id: Optional[int] = None
    remaining: Optional[int] = None
    plan_name: Optional[str] = None
    plan_services: Tuple[PlanService, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @property
    def is_covered(self) -> bool:
        return self.outcome == EligibilityOutcome.COVERED

    @classmethod
    def no_membership(cls, subscription: Optional[MembershipSubscription] = None) -> "MembershipEligibility":
        return cls(
            outcome=EligibilityOutcome.NO_MEMBERSHIP,
            plan_name=subscription.plan_name if subscription else None,
        )

    @classmethod
    def paused(cls, subscription: MembershipSubscription) -> "MembershipEligibility":
        return cls(
            outcome=EligibilityOutcome.PAUSED,
            subscription_id=subscription.id,
            plan_name=subscription.plan_name,
        )

    @classmethod
    def covered(
        cls,
        subscription: MembershipSubscription,
        plan_service: PlanService,
    ) -> "MembershipEligibility":
        return cls(
            outcome=EligibilityOutcome.COVERED,
            subscription_id=subscription.id,
            plan_service_id=plan_service.id,
            remaining=plan_service.remaining_quantity,
            plan_name=subscription.plan_name,
            plan_services=subscription.plan_services,
        )

    @classmethod
    def not_covered(cls, subscription: MembershipSubscription) -> "MembershipEligibility":
        return cls(
            outcome=EligibilityOutcome.NOT_COVERED,
            subscription_id=subscription.id,
            plan_name=subscription.plan_name,
            plan_services=subscription.plan_services,
        )


def evaluate_eligibility(
    subscription: Optional[MembershipSubscription],
    service_id: int,
    now: datetime,
) -> MembershipEligibility:
    """Classify ``subscription`` for ``service_id`` at ``now``.

    Status and the pause window are evaluated before usage: a paused
    membership is never reported as covered, whatever its remaining usage.
    """

    if subscription is None or not subscription.is_active_for_usage(now):
        return MembershipEligibility.no_membership(subscription)

    if subscription.is_paused_at(now):
        return MembershipEligibility.paused(subscription)

    plan_service = subscription.plan_service_for(service_id)
    if plan_service is None or not plan_service.has_remaining_usage:
        return MembershipEligibility.not_covered(subscription)

    return MembershipEligibility.covered(subscription, plan_service)


class MembershipEligibilityResolver:
    """Fetches a client's membership and evaluates coverage for a service."""

    def __init__(
        self,
        directory: MembershipDirectory,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._directory = directory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def resolve(
        self,
        client_id: int,
        service_id: int,
        now: Optional[datetime] = None,
    ) -> MembershipEligibility:
        moment = now or self._clock()
        try:
            subscription = self._directory.get_current_membership(client_id)
        except Exception as exc:
            logger.warning(
                "Failed to fetch membership status for client %s: %s", client_id, exc
            )
            return MembershipEligibility.no_membership()

        eligibility = evaluate_eligibility(subscription, service_id, moment)
        logger.debug(
            "Membership eligibility client=%s service=%s outcome=%s",
            client_id,
            service_id,
            eligibility.outcome.value,
        )
        return eligibility

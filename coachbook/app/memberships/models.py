"""Domain models for client memberships and their service allotments."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..pricing import parse_amount


class StripeStatus(str, Enum):
    """Subscription status as reported by the payment processor."""

    ACTIVE = "active"
    CANCELED = "canceled"
    CANCELLED = "cancelled"
    OTHER = "other"

    @classmethod
    def normalize(cls, value: object) -> "StripeStatus":
        lowered = str(value or "").strip().lower()
        try:
            return cls(lowered)
        except ValueError:
            return cls.OTHER

    @property
    def is_canceled(self) -> bool:
        return self in {StripeStatus.CANCELED, StripeStatus.CANCELLED}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class PlanService(BaseModel):
    """Allotment of one service inside a membership plan."""

    id: Optional[int] = None
    membership_plan_id: Optional[int] = None
    service_id: int
    service_name: Optional[str] = None
    quantity: int = 0
    used_quantity: int = 0
    remaining_quantity: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _lift_service_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("service_name"):
            service = data.get("service")
            if isinstance(service, dict) and service.get("name"):
                data = {**data, "service_name": service["name"]}
        return data

    @field_validator("quantity", "used_quantity", mode="before")
    @classmethod
    def _default_counts(cls, value: object) -> object:
        return 0 if value is None else value

    @property
    def has_remaining_usage(self) -> bool:
        """``True`` when unlimited or at least one use remains this cycle."""

        return self.remaining_quantity is None or self.remaining_quantity > 0


class MembershipPlan(BaseModel):
    """A purchasable membership plan."""

    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Decimal("0")
    monthly_price: Optional[Decimal] = None
    plan_services: Tuple[PlanService, ...] = Field(default_factory=tuple)
    benefits: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: object) -> Decimal:
        return parse_amount(value)

    @field_validator("monthly_price", mode="before")
    @classmethod
    def _parse_monthly_price(cls, value: object) -> Optional[Decimal]:
        return None if value is None else parse_amount(value)

    @field_validator("plan_services", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return () if value is None else value

    @field_validator("benefits", mode="before")
    @classmethod
    def _flatten_benefits(cls, value: object) -> object:
        if value is None:
            return ()
        if not isinstance(value, (list, tuple)):
            return value
        flattened = []
        for benefit in value:
            if isinstance(benefit, dict):
                benefit = benefit.get("description") or benefit.get("name") or ""
            flattened.append(str(benefit))
        return tuple(flattened)


class MembershipSubscription(BaseModel):
    """A client's current membership as returned by the tenant API."""

    id: int
    client_id: Optional[int] = None
    plan: Optional[MembershipPlan] = Field(default=None, alias="membership_plan")
    stripe_status: StripeStatus = StripeStatus.OTHER
    is_paused: bool = False
    pause_start_at: Optional[datetime] = None
    pause_end_at: Optional[datetime] = None
    end_date: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _accept_ends_at(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("end_date") is None and data.get("ends_at"):
            data = {**data, "end_date": data["ends_at"]}
        return data

    @field_validator("stripe_status", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> StripeStatus:
        return StripeStatus.normalize(value)

    @field_validator("is_paused", mode="before")
    @classmethod
    def _paused_flag(cls, value: object) -> bool:
        return bool(value)

    @field_validator("pause_start_at", "pause_end_at", "end_date")
    @classmethod
    def _ensure_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @property
    def plan_name(self) -> Optional[str]:
        return self.plan.name if self.plan else None

    @property
    def plan_services(self) -> Tuple[PlanService, ...]:
        return self.plan.plan_services if self.plan else ()

    def is_active_for_usage(self, now: datetime) -> bool:
        """Active status, or canceled with an end date that has not passed."""

        if self.stripe_status == StripeStatus.ACTIVE:
            return True
        if self.stripe_status.is_canceled:
            return self.end_date is None or self.end_date >= _as_utc(now)
        return False

    def is_paused_at(self, now: datetime) -> bool:
        """Whether ``now`` falls inside the pause window ``[start, end)``."""

        if not self.is_paused:
            return False
        moment = _as_utc(now)
        if self.pause_start_at is not None and moment < self.pause_start_at:
            return False
        if self.pause_end_at is not None and moment >= self.pause_end_at:
            return False
        return True

    def plan_service_for(self, service_id: int) -> Optional[PlanService]:
        for plan_service in self.plan_services:
            if plan_service.service_id == service_id:
                return plan_service
        return None

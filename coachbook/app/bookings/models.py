"""Domain models for booking requests and persisted booking payloads."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..pricing import parse_amount


class BookingType(str, Enum):
    """How a booking is paid for."""

    MEMBERSHIP = "membership"
    ONE_OFF = "one_off"


class BookingStatus(str, Enum):
    """Lifecycle status of a booking record."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookableType(str, Enum):
    """Polymorphic owner of a booking on the tenant backend."""

    COACH = "App\\Models\\User"
    SERVICE = "App\\Models\\Service"


class CallerRole(str, Enum):
    """Role the signed-in user is acting under."""

    ADMIN = "admin"
    COACH = "coach"
    CLIENT = "client"


COACH_ROLES = frozenset({CallerRole.ADMIN, CallerRole.COACH})


class Person(BaseModel):
    """A user of the tenant: client, coach or staff member."""

    id: int
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Caller(BaseModel):
    """The authenticated user driving a booking."""

    user: Person
    role: CallerRole = CallerRole.CLIENT

    model_config = ConfigDict(frozen=True)

    @property
    def is_coach(self) -> bool:
        return self.role in COACH_ROLES


class Service(BaseModel):
    """A bookable service offered by the tenant."""

    id: int
    name: str = ""
    price: Decimal = Decimal("0")
    duration_minutes: Optional[int] = None
    is_variable_duration: bool = False
    allowed_durations: Tuple[int, ...] = Field(default_factory=tuple)
    requires_resource: bool = False
    requires_coach: bool = False
    location_ids: Tuple[int, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: object) -> Decimal:
        return parse_amount(value)

    @field_validator("allowed_durations", "location_ids", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return () if value is None else value

    @model_validator(mode="before")
    @classmethod
    def _fixed_duration_has_no_choices(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("is_variable_duration") and data.get("allowed_durations"):
            data = {**data, "allowed_durations": ()}
        return data


class Location(BaseModel):
    id: int
    name: str = ""

    model_config = ConfigDict(frozen=True)


class Resource(BaseModel):
    id: int
    name: str = ""

    model_config = ConfigDict(frozen=True)


class TimeSlot(BaseModel):
    """The chosen session window."""

    start_time: datetime
    end_time: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _ordered(self) -> "TimeSlot":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class BookingRequest(BaseModel):
    """Everything the caller selected before confirming a booking."""

    caller: Caller
    client: Optional[Person] = None
    service: Service
    location: Location
    coach: Optional[Person] = None
    time_slot: TimeSlot
    selected_resource: Optional[Resource] = None
    duration_minutes: Optional[int] = None
    notes: str = ""
    card_token: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def client_id(self) -> Optional[int]:
        """Coaches book on behalf of ``client``; everyone else books for themselves."""

        if self.caller.is_coach:
            return self.client.id if self.client else None
        return self.caller.user.id

    @property
    def billing_contact(self) -> Optional[Person]:
        if self.caller.is_coach:
            return self.client
        return self.caller.user


class BookingPayload(BaseModel):
    """Request body for creating a booking on the tenant backend."""

    client_id: int
    booking_type: BookingType
    location_id: int
    service_ids: Tuple[int, ...] = Field(min_length=1)
    bookable_type: BookableType
    bookable_id: int
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    notes: str = ""
    resource_ids: Optional[Tuple[int, ...]] = None
    duration_minutes: Optional[int] = None
    membership_subscription_id: Optional[int] = None
    membership_plan_service_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    def to_request_body(self) -> Dict[str, Any]:
        """JSON body with optional fields omitted rather than sent as null."""

        return self.model_dump(mode="json", exclude_none=True)


class CreatedBooking(BaseModel):
    """Identifier of a booking returned by the booking store."""

    id: int
    status: Optional[BookingStatus] = None

    model_config = ConfigDict(frozen=True)


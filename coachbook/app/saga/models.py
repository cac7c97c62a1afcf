"""Phases, paths and results of the booking confirmation saga."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..bookings import BookingStatus, BookingType
from ..memberships import AllotmentUsage, MembershipEligibility
from ..payments import EcommerceConfig
from ..pricing import PaymentSummary

logger = logging.getLogger("booking_saga")


class SagaPhase(str, Enum):
    """Where a confirmation attempt currently is."""

    IDLE = "idle"
    BOOKING_PENDING = "booking_pending"
    PAYMENT_AUTHORIZING = "payment_authorizing"
    PAYMENT_CONFIRMING = "payment_confirming"
    FINALIZED = "finalized"
    CANCELLING = "cancelling"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {SagaPhase.FINALIZED, SagaPhase.FAILED}


class BookingPath(str, Enum):
    """How a booking is settled."""

    MEMBERSHIP = "membership"
    ONE_OFF_PAYMENT = "one_off_payment"
    NO_PAYMENT = "no_payment"

    @property
    def booking_type(self) -> BookingType:
        return BookingType.MEMBERSHIP if self is BookingPath.MEMBERSHIP else BookingType.ONE_OFF

    @property
    def initial_status(self) -> BookingStatus:
        """Only paid bookings start out pending; nothing follows the others."""

        if self is BookingPath.ONE_OFF_PAYMENT:
            return BookingStatus.PENDING
        return BookingStatus.CONFIRMED


def select_booking_path(eligibility: MembershipEligibility, config: EcommerceConfig) -> BookingPath:
    if eligibility.is_covered:
        return BookingPath.MEMBERSHIP
    if config.payments_enabled:
        return BookingPath.ONE_OFF_PAYMENT
    return BookingPath.NO_PAYMENT


# Phase states of the one-off payment path. Each step consumes the previous
# state; compensation only ever receives a state holding a booking id.


@dataclass(frozen=True)
class BookingHeld:
    booking_id: int


@dataclass(frozen=True)
class PaymentAuthorized:
    booking_id: int
    payment_intent_id: Optional[str]
    client_secret: str


@dataclass(frozen=True)
class PaymentConfirmed:
    booking_id: int
    payment_intent_id: str


@dataclass
class SagaRun:
    """Phase bookkeeping for a single confirmation attempt."""

    phase: SagaPhase = SagaPhase.IDLE
    history: List[SagaPhase] = field(default_factory=lambda: [SagaPhase.IDLE])

    def advance(self, phase: SagaPhase) -> None:
        if self.phase.is_terminal:
            raise RuntimeError(f"Saga already finished in phase {self.phase.value}")
        logger.debug("Booking saga %s -> %s", self.phase.value, phase.value)
        self.phase = phase
        self.history.append(phase)


class BookingConfirmation(BaseModel):
    """Outcome of a successful confirmation, including the alert shown to users."""

    booking_id: int
    path: BookingPath
    booking_type: BookingType
    status: BookingStatus
    payment_intent_id: Optional[str] = None
    summary: PaymentSummary
    eligibility: MembershipEligibility
    phases: Tuple[SagaPhase, ...]
    title: str
    message: str

    model_config = ConfigDict(frozen=True)


class BookingPreview(BaseModel):
    """What a caller sees before confirming: path, price and membership usage."""

    path: BookingPath
    eligibility: MembershipEligibility
    summary: PaymentSummary
    fee_description: str
    payments_enabled: bool
    allotments: Tuple[AllotmentUsage, ...] = ()

    model_config = ConfigDict(frozen=True)

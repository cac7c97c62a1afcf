"""API schemas for booking confirmation endpoints."""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..bookings import BookingRequest, BookingStatus, BookingType, Caller, Location, Person, Resource, Service, TimeSlot
from ..memberships import EligibilityOutcome
from ..pricing import PaymentSummary
from ..saga import BookingConfirmation, BookingPath, BookingPreview, SagaPhase


class BookingConfirmRequest(BaseModel):
    client: Optional[Person] = None
    service: Service
    location: Location
    coach: Optional[Person] = None
    time_slot: TimeSlot = Field(alias="timeSlot")
    selected_resource: Optional[Resource] = Field(alias="selectedResource", default=None)
    duration_minutes: Optional[int] = Field(alias="durationMinutes", default=None, gt=0)
    notes: str = ""
    card_token: Optional[str] = Field(alias="cardToken", default=None)

    model_config = ConfigDict(populate_by_name=True)

    def to_booking_request(self, caller: Caller) -> BookingRequest:
        return BookingRequest(
            caller=caller,
            client=self.client,
            service=self.service,
            location=self.location,
            coach=self.coach,
            time_slot=self.time_slot,
            selected_resource=self.selected_resource,
            duration_minutes=self.duration_minutes,
            notes=self.notes,
            card_token=self.card_token,
        )


class PaymentSummaryResponse(BaseModel):
    subtotal: Decimal
    platform_fee: Decimal = Field(alias="platformFee")
    total: Decimal
    platform_fee_percent: Decimal = Field(alias="platformFeePercent")
    is_membership_booking: bool = Field(alias="isMembershipBooking")
    subtotal_formatted: str = Field(alias="subtotalFormatted")
    platform_fee_formatted: str = Field(alias="platformFeeFormatted")
    total_formatted: str = Field(alias="totalFormatted")
    total_label: str = Field(alias="totalLabel")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_summary(cls, summary: PaymentSummary) -> "PaymentSummaryResponse":
        return cls(**summary.model_dump())


class AllotmentUsageResponse(BaseModel):
    service_id: int = Field(alias="serviceId")
    service_name: str = Field(alias="serviceName")
    used: int
    total: int
    remaining: int
    progress: float
    is_current: bool = Field(alias="isCurrent")

    model_config = ConfigDict(populate_by_name=True)


class BookingPreviewResponse(BaseModel):
    path: BookingPath
    eligibility: EligibilityOutcome
    plan_name: Optional[str] = Field(alias="planName", default=None)
    remaining: Optional[int] = None
    summary: PaymentSummaryResponse
    fee_description: str = Field(alias="feeDescription")
    payments_enabled: bool = Field(alias="paymentsEnabled")
    allotments: List[AllotmentUsageResponse] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_preview(cls, preview: BookingPreview) -> "BookingPreviewResponse":
        return cls(
            path=preview.path,
            eligibility=preview.eligibility.outcome,
            plan_name=preview.eligibility.plan_name,
            remaining=preview.eligibility.remaining,
            summary=PaymentSummaryResponse.from_summary(preview.summary),
            fee_description=preview.fee_description,
            payments_enabled=preview.payments_enabled,
            allotments=[AllotmentUsageResponse(**row.to_dict()) for row in preview.allotments],
        )


class BookingConfirmationResponse(BaseModel):
    booking_id: int = Field(alias="bookingId")
    path: BookingPath
    booking_type: BookingType = Field(alias="bookingType")
    status: BookingStatus
    payment_intent_id: Optional[str] = Field(alias="paymentIntentId", default=None)
    summary: PaymentSummaryResponse
    phases: List[SagaPhase]
    title: str
    message: str

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_confirmation(cls, confirmation: BookingConfirmation) -> "BookingConfirmationResponse":
        return cls(
            booking_id=confirmation.booking_id,
            path=confirmation.path,
            booking_type=confirmation.booking_type,
            status=confirmation.status,
            payment_intent_id=confirmation.payment_intent_id,
            summary=PaymentSummaryResponse.from_summary(confirmation.summary),
            phases=list(confirmation.phases),
            title=confirmation.title,
            message=confirmation.message,
        )

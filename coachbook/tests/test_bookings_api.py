from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from fastapi import HTTPException

from coachbook import app_context
from coachbook.app.bookings import BookingRequest, BookingStatus, BookingType, Caller, CallerRole, Person, Service
from coachbook.app.checkout import BillingCycle, MembershipCheckoutRequest, MembershipCheckoutResult, build_membership_quote
from coachbook.app.errors import PaymentConfirmationFailure, PreconditionFailure
from coachbook.app.memberships import EligibilityOutcome, MembershipEligibility, MembershipPlan
from coachbook.app.memberships.allotments import AllotmentUsage
from coachbook.app.pricing import build_payment_summary
from coachbook.app.routes import bookings as booking_routes
from coachbook.app.routes import memberships as membership_routes
from coachbook.app.saga import BookingConfirmation, BookingPath, BookingPreview, SagaPhase
from coachbook.app.schemas.bookings import (
    BookingConfirmationResponse,
    BookingConfirmRequest,
    BookingPreviewResponse,
)
from coachbook.app.schemas.memberships import MembershipCheckoutBody, MembershipCheckoutResponse
from coachbook.app.services import booking_confirmation as booking_services

START = datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)
CLIENT = Caller(user=Person(id=42, first_name="Ada", last_name="Lovelace", email="ada@example.com"), role=CallerRole.CLIENT)
COACH = Caller(user=Person(id=9, first_name="Grace", last_name="Hopper"), role=CallerRole.COACH)
SERVICE = Service(id=5, name="Private Lesson", price="80.00", duration_minutes=60)
PLAN = MembershipPlan(id=3, name="Gold", price="120.00", monthly_price="40.00")


def _body(**overrides) -> BookingConfirmRequest:
    data = {
        "service": {"id": 5, "name": "Private Lesson", "price": "80.00", "duration_minutes": 60},
        "location": {"id": 2, "name": "Main Court"},
        "timeSlot": {"start_time": START.isoformat(), "end_time": (START + timedelta(hours=1)).isoformat()},
        "cardToken": "tok_visa",
    }
    data.update(overrides)
    return BookingConfirmRequest.model_validate(data)


class FakeBookingService:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.requests: List[BookingRequest] = []

    def _check(self, request: BookingRequest) -> None:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

    def preview(self, request: BookingRequest) -> BookingPreview:
        self._check(request)
        return BookingPreview(
            path=BookingPath.ONE_OFF_PAYMENT,
            eligibility=MembershipEligibility(outcome=EligibilityOutcome.NOT_COVERED, subscription_id=7, plan_name="Gold"),
            summary=build_payment_summary(SERVICE, None, Decimal("0.03")),
            fee_description="Platform service fee",
            payments_enabled=True,
            allotments=(
                AllotmentUsage(
                    service_id=6,
                    service_name="Group Clinic",
                    used=1,
                    total=4,
                    remaining=3,
                    progress=25.0,
                    is_current=False,
                ),
            ),
        )

    def confirm(self, request: BookingRequest) -> BookingConfirmation:
        self._check(request)
        return BookingConfirmation(
            booking_id=500,
            path=BookingPath.ONE_OFF_PAYMENT,
            booking_type=BookingType.ONE_OFF,
            status=BookingStatus.CONFIRMED,
            payment_intent_id="pi_1",
            summary=build_payment_summary(SERVICE, None, Decimal("0.03")),
            eligibility=MembershipEligibility(outcome=EligibilityOutcome.NO_MEMBERSHIP),
            phases=(
                SagaPhase.IDLE,
                SagaPhase.BOOKING_PENDING,
                SagaPhase.PAYMENT_AUTHORIZING,
                SagaPhase.PAYMENT_CONFIRMING,
                SagaPhase.FINALIZED,
            ),
            title="Payment Successful",
            message="Your booking has been confirmed and payment processed.",
        )


class FakeCheckoutService:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.requests: List[MembershipCheckoutRequest] = []

    def quote(self, request: MembershipCheckoutRequest):
        self.requests.append(request)
        return build_membership_quote(request.plan, request.billing_cycle, Decimal("0.03"))

    def purchase(self, request: MembershipCheckoutRequest) -> MembershipCheckoutResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return MembershipCheckoutResult(
            subscription_id="sub_1",
            subscription_status="active",
            quote=build_membership_quote(request.plan, request.billing_cycle, Decimal("0.03")),
            title="Membership Activated",
            message=f"You are now a {request.plan.name} member!",
        )


def test_confirm_booking_returns_confirmation(monkeypatch):
    service = FakeBookingService()
    monkeypatch.setattr(booking_services, "get_booking_confirmation_service", lambda: service)

    response = booking_routes.confirm_booking(_body(notes="Bring racket"), current_caller=CLIENT)

    assert isinstance(response, BookingConfirmationResponse)
    assert response.booking_id == 500
    assert response.status == BookingStatus.CONFIRMED
    assert response.summary.total == Decimal("82.40")
    assert response.phases[-1] == SagaPhase.FINALIZED
    (request,) = service.requests
    assert request.caller == CLIENT
    assert request.card_token == "tok_visa"
    assert request.notes == "Bring racket"
    assert request.time_slot.start_time == START


def test_confirm_response_uses_camel_case_aliases(monkeypatch):
    monkeypatch.setattr(booking_services, "get_booking_confirmation_service", lambda: FakeBookingService())

    body = booking_routes.confirm_booking(_body(), current_caller=CLIENT).model_dump(by_alias=True, mode="json")

    assert body["bookingId"] == 500
    assert body["paymentIntentId"] == "pi_1"
    assert body["summary"]["totalFormatted"] == "$82.40"


def test_booking_flow_errors_become_http_errors(monkeypatch):
    error = PaymentConfirmationFailure(
        code="payment_confirmation_failed",
        message="Your card was declined.",
        phase="payment_confirming",
    )
    monkeypatch.setattr(booking_services, "get_booking_confirmation_service", lambda: FakeBookingService(error))

    with pytest.raises(HTTPException) as excinfo:
        booking_routes.confirm_booking(_body(), current_caller=CLIENT)

    assert excinfo.value.status_code == 402
    assert excinfo.value.detail["message"] == "Your card was declined."
    assert excinfo.value.detail["title"] == "Payment Failed"


def test_preview_returns_summary_and_allotments(monkeypatch):
    monkeypatch.setattr(booking_services, "get_booking_confirmation_service", lambda: FakeBookingService())

    response = booking_routes.preview_booking(_body(), current_caller=CLIENT)

    assert isinstance(response, BookingPreviewResponse)
    assert response.path == BookingPath.ONE_OFF_PAYMENT
    assert response.eligibility == EligibilityOutcome.NOT_COVERED
    assert response.plan_name == "Gold"
    assert response.summary.platform_fee == Decimal("2.40")
    assert response.allotments[0].service_name == "Group Clinic"
    assert response.model_dump(by_alias=True)["allotments"][0]["isCurrent"] is False


def test_preview_precondition_failure_is_unprocessable(monkeypatch):
    error = PreconditionFailure(code="resource_required", message="Please select a resource.", title="Error")
    monkeypatch.setattr(booking_services, "get_booking_confirmation_service", lambda: FakeBookingService(error))

    with pytest.raises(HTTPException) as excinfo:
        booking_routes.preview_booking(_body(), current_caller=CLIENT)

    assert excinfo.value.status_code == 422
    assert excinfo.value.detail["error"] == "resource_required"


def test_request_accepts_snake_case_fields():
    body = _body(duration_minutes=90, selected_resource={"id": 31})

    request = body.to_booking_request(CLIENT)

    assert request.duration_minutes == 90
    assert request.selected_resource.id == 31


def test_membership_quote(monkeypatch):
    monkeypatch.setattr(booking_services, "get_membership_checkout_service", lambda: FakeCheckoutService())
    payload = MembershipCheckoutBody.model_validate(
        {"plan": PLAN.model_dump(), "billingCycle": {"id": 8, "billing_cycle": "month", "price": "49.99"}}
    )

    response = membership_routes.quote_membership(payload, current_caller=CLIENT)

    assert response.total == Decimal("51.49")
    assert response.cycle_label == "Monthly"


def test_membership_checkout_purchases_for_the_caller(monkeypatch):
    service = FakeCheckoutService()
    monkeypatch.setattr(booking_services, "get_membership_checkout_service", lambda: service)
    payload = MembershipCheckoutBody(plan=PLAN, billing_cycle=BillingCycle(id=8, price="49.99"), card_token="tok_visa")

    response = membership_routes.checkout_membership(payload, current_caller=CLIENT)

    assert isinstance(response, MembershipCheckoutResponse)
    assert response.subscription_id == "sub_1"
    assert response.message == "You are now a Gold member!"
    assert service.requests[0].client == CLIENT.user


def test_membership_checkout_rejects_coaches(monkeypatch):
    service = FakeCheckoutService()
    monkeypatch.setattr(booking_services, "get_membership_checkout_service", lambda: service)
    payload = MembershipCheckoutBody(plan=PLAN, card_token="tok_visa")

    with pytest.raises(HTTPException) as excinfo:
        membership_routes.checkout_membership(payload, current_caller=COACH)

    assert excinfo.value.status_code == 403
    assert service.requests == []


def test_membership_checkout_failure_is_mapped(monkeypatch):
    error = PreconditionFailure(
        code="billing_cycle_required",
        message="No billing cycle selected. Please go back and select a plan.",
        title="Billing Cycle Required",
    )
    monkeypatch.setattr(booking_services, "get_membership_checkout_service", lambda: FakeCheckoutService(error))
    payload = MembershipCheckoutBody(plan=PLAN, card_token="tok_visa")

    with pytest.raises(HTTPException) as excinfo:
        membership_routes.checkout_membership(payload, current_caller=CLIENT)

    assert excinfo.value.status_code == 422
    assert excinfo.value.detail["title"] == "Billing Cycle Required"


def test_current_caller_dependency_delegates_to_app_context(monkeypatch):
    captured: Dict[str, object] = {}

    def fake_get_current_caller(**kwargs):
        captured.update(kwargs)
        return COACH

    monkeypatch.setattr(app_context, "_get_current_caller", fake_get_current_caller)

    caller = booking_routes.get_current_caller(authorization="Bearer abc", x_active_role="coach")

    assert caller == COACH
    assert captured == {"authorization": "Bearer abc", "active_role": "coach"}


def test_unconfigured_app_context_raises(monkeypatch):
    monkeypatch.setattr(app_context, "_get_current_caller", None)

    with pytest.raises(RuntimeError):
        app_context.get_current_caller(authorization=None)


def test_application_mounts_booking_and_membership_routes():
    from coachbook.main import app, healthz

    paths = {route.path for route in app.routes}

    assert "/api/bookings/confirm" in paths
    assert "/api/bookings/payment-summary" in paths
    assert "/api/memberships/checkout" in paths
    assert "/api/memberships/quote" in paths
    assert healthz() == {"ok": True}

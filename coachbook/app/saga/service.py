"""Booking confirmation saga: create, pay, finalize, or cancel what was held."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from ..bookings import (
    BookingPayload,
    BookingRequest,
    BookingStatus,
    CreatedBooking,
    build_booking_payload,
)
from ..errors import (
    BookingCreationFailure,
    BookingFlowError,
    CompensationFailure,
    FinalizationFailure,
    PaymentAuthorizationFailure,
    PaymentConfirmationFailure,
    PreconditionFailure,
    extract_error_message,
)
from ..memberships import MembershipEligibility, MembershipEligibilityResolver, summarize_allotments
from ..payments import (
    BillingDetails,
    EcommerceConfig,
    PaymentConfirmation,
    PaymentIntentRequest,
    PaymentIntentResult,
)
from ..pricing import DEFAULT_CURRENCY, DEFAULT_LOCALE, PaymentSummary, build_payment_summary, round_cents
from .models import (
    BookingConfirmation,
    BookingHeld,
    BookingPath,
    BookingPreview,
    PaymentAuthorized,
    PaymentConfirmed,
    SagaPhase,
    SagaRun,
    select_booking_path,
)

logger = logging.getLogger("booking_saga")

CLIENT_MISSING_MESSAGE = "Client information is missing."
RESOURCE_REQUIRED_MESSAGE = (
    "This service requires a resource to be selected. "
    "Please go back and select a different time slot."
)
MEMBERSHIP_REQUIRED_MESSAGE = (
    "This client does not have an active membership with available usage for this service. "
    "Bookings through the coach app require a membership."
)
CARD_REQUIRED_MESSAGE = "Please enter your card details to proceed."


class BookingStore(Protocol):
    """Creates and cancels booking records."""

    def create_booking(self, payload: BookingPayload) -> CreatedBooking:
        ...

    def cancel_booking(self, booking_id: int) -> None:
        ...


class PaymentGateway(Protocol):
    """Payment processor operations used by the one-off payment path."""

    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResult:
        ...

    def confirm_payment(
        self,
        client_secret: str,
        *,
        billing_details: BillingDetails,
        card_token: str,
        connect_account_id: Optional[str] = None,
    ) -> PaymentConfirmation:
        ...

    def notify_payment_success(self, payment_intent_id: str) -> None:
        """Record a successful payment; calling twice for one intent is a no-op."""


class EcommerceConfigSource(Protocol):
    def get_ecommerce_config(self) -> EcommerceConfig:
        ...


class ErrorReporter(Protocol):
    """Receives failures that are logged but never shown to the caller."""

    def report(self, error: BookingFlowError) -> None:
        ...


@dataclass(frozen=True)
class _BookingPlan:
    client_id: int
    config: EcommerceConfig
    eligibility: MembershipEligibility
    path: BookingPath
    summary: PaymentSummary


def load_ecommerce_config(source: EcommerceConfigSource) -> EcommerceConfig:
    """Read tenant payment settings, keeping the defaults when they are unavailable."""

    try:
        return source.get_ecommerce_config()
    except Exception as exc:
        logger.warning("Failed to load ecommerce config, using defaults: %s", exc)
        return EcommerceConfig()


class BookingConfirmationService:
    """Runs one booking confirmation attempt from preconditions to a terminal phase."""

    def __init__(
        self,
        booking_store: BookingStore,
        payment_gateway: PaymentGateway,
        config_source: EcommerceConfigSource,
        resolver: MembershipEligibilityResolver,
        error_reporter: Optional[ErrorReporter] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        locale: str = DEFAULT_LOCALE,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._bookings = booking_store
        self._payments = payment_gateway
        self._config_source = config_source
        self._resolver = resolver
        self._error_reporter = error_reporter
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._locale = locale
        self._currency = currency

    def _summarize(
        self,
        request: BookingRequest,
        config: EcommerceConfig,
        eligibility: MembershipEligibility,
    ) -> PaymentSummary:
        return build_payment_summary(
            request.service,
            request.duration_minutes,
            config.platform_fee_rate,
            eligibility.is_covered,
            locale=self._locale,
            currency=self._currency,
        )

    def _resolve(self, request: BookingRequest, client_id: int):
        config = load_ecommerce_config(self._config_source)
        eligibility = self._resolver.resolve(client_id, request.service.id, now=self._clock())
        return config, eligibility

    def _plan(self, request: BookingRequest) -> _BookingPlan:
        client_id = request.client_id
        if client_id is None:
            raise PreconditionFailure(
                code="client_missing", message=CLIENT_MISSING_MESSAGE, title="Error"
            )
        if request.service.requires_resource and request.selected_resource is None:
            raise PreconditionFailure(
                code="resource_required", message=RESOURCE_REQUIRED_MESSAGE, title="Error"
            )

        config, eligibility = self._resolve(request, client_id)

        if request.caller.is_coach and not eligibility.is_covered:
            raise PreconditionFailure(
                code="membership_required",
                message=MEMBERSHIP_REQUIRED_MESSAGE,
                title="Membership Required",
                detail={"eligibility": eligibility.outcome.value},
            )

        path = select_booking_path(eligibility, config)
        if path is BookingPath.ONE_OFF_PAYMENT and not request.card_token:
            raise PreconditionFailure(
                code="card_required", message=CARD_REQUIRED_MESSAGE, title="Card Required"
            )

        return _BookingPlan(
            client_id=client_id,
            config=config,
            eligibility=eligibility,
            path=path,
            summary=self._summarize(request, config, eligibility),
        )

    def preview(self, request: BookingRequest) -> BookingPreview:
        """Price and membership usage for a request without creating anything."""

        client_id = request.client_id
        if client_id is None:
            raise PreconditionFailure(
                code="client_missing", message=CLIENT_MISSING_MESSAGE, title="Error"
            )
        config, eligibility = self._resolve(request, client_id)
        return BookingPreview(
            path=select_booking_path(eligibility, config),
            eligibility=eligibility,
            summary=self._summarize(request, config, eligibility),
            fee_description=config.fee_description,
            payments_enabled=config.payments_enabled,
            allotments=tuple(summarize_allotments(eligibility.plan_services, request.service.id)),
        )

    def confirm(self, request: BookingRequest) -> BookingConfirmation:
        """Create the booking and settle it along the path its eligibility selects.

        Preconditions are checked before any side effect. On the one-off
        payment path any failure after the pending booking exists cancels it
        exactly once and the triggering error is raised.
        """

        plan = self._plan(request)
        run = SagaRun()
        logger.info(
            "Confirming booking client=%s service=%s path=%s",
            plan.client_id,
            request.service.id,
            plan.path.value,
        )
        if plan.path is BookingPath.ONE_OFF_PAYMENT:
            return self._confirm_with_payment(request, plan, run)
        return self._confirm_without_payment(request, plan, run)

    def _create_booking(
        self,
        request: BookingRequest,
        plan: _BookingPlan,
        run: SagaRun,
        status: BookingStatus,
    ) -> CreatedBooking:
        payload = build_booking_payload(
            request,
            client_id=plan.client_id,
            eligibility=plan.eligibility,
            status=status,
        )
        run.advance(SagaPhase.BOOKING_PENDING)
        try:
            return self._bookings.create_booking(payload)
        except Exception as exc:
            run.advance(SagaPhase.FAILED)
            logger.warning("Booking creation failed for client %s: %s", plan.client_id, exc)
            raise BookingCreationFailure(
                code="booking_creation_failed",
                message=extract_error_message(exc),
                phase=SagaPhase.BOOKING_PENDING.value,
            ) from exc

    def _confirm_without_payment(
        self,
        request: BookingRequest,
        plan: _BookingPlan,
        run: SagaRun,
    ) -> BookingConfirmation:
        booking = self._create_booking(request, plan, run, BookingStatus.CONFIRMED)
        run.advance(SagaPhase.FINALIZED)

        if plan.path is BookingPath.MEMBERSHIP:
            message = "Your session has been booked using your membership."
        else:
            message = "Your session has been booked."
        return self._result(booking.id, plan, run, title="Booking Confirmed", message=message)

    def _confirm_with_payment(
        self,
        request: BookingRequest,
        plan: _BookingPlan,
        run: SagaRun,
    ) -> BookingConfirmation:
        booking = self._create_booking(request, plan, run, BookingStatus.PENDING)
        held = BookingHeld(booking_id=booking.id)

        try:
            authorized = self._authorize(request, plan, run, held)
            confirmed = self._confirm_card(request, plan, run, authorized)
            self._finalize(confirmed)
        except BookingFlowError as exc:
            if exc.compensable:
                self._compensate(held, run, exc)
            else:
                run.advance(SagaPhase.FAILED)
            raise

        run.advance(SagaPhase.FINALIZED)
        logger.info(
            "Booking %s paid with intent %s", confirmed.booking_id, confirmed.payment_intent_id
        )
        return self._result(
            confirmed.booking_id,
            plan,
            run,
            title="Payment Successful",
            message="Your booking has been confirmed and payment processed.",
            payment_intent_id=confirmed.payment_intent_id,
        )

    def _authorize(
        self,
        request: BookingRequest,
        plan: _BookingPlan,
        run: SagaRun,
        held: BookingHeld,
    ) -> PaymentAuthorized:
        run.advance(SagaPhase.PAYMENT_AUTHORIZING)
        intent_request = PaymentIntentRequest(
            client_id=plan.client_id,
            service_id=request.service.id,
            booking_id=held.booking_id,
            metadata={
                "service_amount": str(round_cents(plan.summary.subtotal)),
                "platform_fee": str(round_cents(plan.summary.platform_fee)),
                "total_amount": str(round_cents(plan.summary.total)),
            },
        )
        try:
            intent = self._payments.create_payment_intent(intent_request)
        except Exception as exc:
            raise PaymentAuthorizationFailure(
                code="payment_intent_failed",
                message=extract_error_message(exc, "Failed to create payment."),
                phase=SagaPhase.PAYMENT_AUTHORIZING.value,
            ) from exc

        if not intent.is_usable:
            raise PaymentAuthorizationFailure(
                code="payment_intent_failed",
                message=intent.error or "Failed to create payment.",
                phase=SagaPhase.PAYMENT_AUTHORIZING.value,
            )
        return PaymentAuthorized(
            booking_id=held.booking_id,
            payment_intent_id=intent.payment_intent_id,
            client_secret=intent.client_secret,
        )

    def _confirm_card(
        self,
        request: BookingRequest,
        plan: _BookingPlan,
        run: SagaRun,
        authorized: PaymentAuthorized,
    ) -> PaymentConfirmed:
        run.advance(SagaPhase.PAYMENT_CONFIRMING)
        contact = request.billing_contact
        billing_details = BillingDetails(
            name=contact.full_name if contact else "",
            email=contact.email if contact else None,
        )
        try:
            confirmation = self._payments.confirm_payment(
                authorized.client_secret,
                billing_details=billing_details,
                card_token=request.card_token,
                connect_account_id=plan.config.connect_account_id,
            )
        except Exception as exc:
            raise PaymentConfirmationFailure(
                code="payment_confirmation_failed",
                message=extract_error_message(exc, "Payment failed."),
                phase=SagaPhase.PAYMENT_CONFIRMING.value,
            ) from exc

        if not confirmation.succeeded:
            raise PaymentConfirmationFailure(
                code="payment_confirmation_failed",
                message=confirmation.error or "Payment failed.",
                phase=SagaPhase.PAYMENT_CONFIRMING.value,
            )
        return PaymentConfirmed(
            booking_id=authorized.booking_id,
            payment_intent_id=confirmation.payment_intent_id,
        )

    def _finalize(self, confirmed: PaymentConfirmed) -> None:
        try:
            self._payments.notify_payment_success(confirmed.payment_intent_id)
        except Exception as exc:
            raise FinalizationFailure(
                code="payment_finalization_failed",
                message=extract_error_message(exc),
                phase=SagaPhase.PAYMENT_CONFIRMING.value,
            ) from exc

    def _compensate(self, held: BookingHeld, run: SagaRun, cause: BookingFlowError) -> None:
        """Release the held slot once; failures here are reported, never raised."""

        run.advance(SagaPhase.CANCELLING)
        logger.info(
            "Cancelling pending booking %s after %s failure", held.booking_id, cause.phase
        )
        try:
            self._bookings.cancel_booking(held.booking_id)
        except Exception as exc:
            logger.warning(
                "Failed to cancel pending booking %s after payment failure: %s",
                held.booking_id,
                exc,
            )
            self._report(
                CompensationFailure(
                    code="compensation_failed",
                    message=extract_error_message(exc),
                    phase=SagaPhase.CANCELLING.value,
                    booking_id=held.booking_id,
                    detail={"booking_id": held.booking_id, "cause": cause.code},
                )
            )
        finally:
            run.advance(SagaPhase.FAILED)

    def _report(self, error: BookingFlowError) -> None:
        if self._error_reporter is None:
            return
        try:
            self._error_reporter.report(error)
        except Exception:
            logger.exception("Error reporter failed while reporting %s", error.code)

    def _result(
        self,
        booking_id: int,
        plan: _BookingPlan,
        run: SagaRun,
        *,
        title: str,
        message: str,
        payment_intent_id: Optional[str] = None,
    ) -> BookingConfirmation:
        return BookingConfirmation(
            booking_id=booking_id,
            path=plan.path,
            booking_type=plan.path.booking_type,
            status=BookingStatus.CONFIRMED,
            payment_intent_id=payment_intent_id,
            summary=plan.summary,
            eligibility=plan.eligibility,
            phases=tuple(run.history),
            title=title,
            message=message,
        )

"""Application wiring for the booking confirmation and membership checkout services."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache

from ...api import ApiError, TenantApiClient
from ...config import AppConfig, load_app_config
from ..bookings.repository import RestBookingStore
from ..checkout import MembershipCheckoutService
from ..errors import BookingFlowError
from ..memberships import MembershipEligibilityResolver
from ..memberships.repository import RestMembershipDirectory
from ..payments.gateway import StripePaymentGateway
from ..payments.repository import RestEcommerceConfigSource
from ..saga import BookingConfirmationService, ErrorReporter

logger = logging.getLogger("booking_confirmation")


class LoggingErrorReporter(ErrorReporter):
    """Reporter that records subordinate failures to the application logger."""

    def report(self, error: BookingFlowError) -> None:
        logger.error(
            "Booking flow failure code=%s phase=%s detail=%s",
            error.code,
            error.phase,
            dict(error.payload),
        )


class TenantErrorReporter(ErrorReporter):
    """Relays failures to the tenant's ``/errors/report`` endpoint."""

    def __init__(self, api: TenantApiClient, *, environment: str) -> None:
        self._api = api
        self._environment = environment

    def report(self, error: BookingFlowError) -> None:
        LoggingErrorReporter().report(error)
        body = {
            "message": error.message,
            "name": type(error).__name__,
            "stack": None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": self._environment,
            "extra": {"source": "BookingSaga", **dict(error.payload)},
        }
        try:
            self._api.post("/errors/report", json=body)
        except ApiError as exc:
            logger.warning("Failed to report %s to tenant: %s", error.code, exc)


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    return load_app_config()


@lru_cache(maxsize=1)
def get_api_client() -> TenantApiClient:
    return TenantApiClient(get_app_config())


@lru_cache(maxsize=1)
def get_payment_gateway() -> StripePaymentGateway:
    return StripePaymentGateway(get_api_client(), stripe_api_key=get_app_config().stripe_secret_key)


@lru_cache(maxsize=1)
def get_booking_confirmation_service() -> BookingConfirmationService:
    config = get_app_config()
    api = get_api_client()
    if config.report_errors:
        reporter: ErrorReporter = TenantErrorReporter(api, environment=config.environment)
    else:
        reporter = LoggingErrorReporter()
    service = BookingConfirmationService(
        booking_store=RestBookingStore(api),
        payment_gateway=get_payment_gateway(),
        config_source=RestEcommerceConfigSource(api),
        resolver=MembershipEligibilityResolver(RestMembershipDirectory(api)),
        error_reporter=reporter,
        locale=config.locale,
        currency=config.currency,
    )
    return service


@lru_cache(maxsize=1)
def get_membership_checkout_service() -> MembershipCheckoutService:
    config = get_app_config()
    return MembershipCheckoutService(
        gateway=get_payment_gateway(),
        config_source=RestEcommerceConfigSource(get_api_client()),
        locale=config.locale,
        currency=config.currency,
    )


__all__ = [
    "LoggingErrorReporter",
    "TenantErrorReporter",
    "get_api_client",
    "get_app_config",
    "get_booking_confirmation_service",
    "get_membership_checkout_service",
    "get_payment_gateway",
]

"""Booking confirmation saga coordinating bookings, payments and memberships."""

from .models import (
    BookingConfirmation,
    BookingPath,
    BookingPreview,
    SagaPhase,
    select_booking_path,
)
from .service import (
    BookingConfirmationService,
    BookingStore,
    EcommerceConfigSource,
    ErrorReporter,
    PaymentGateway,
    load_ecommerce_config,
)

__all__ = [
    "BookingConfirmation",
    "BookingConfirmationService",
    "BookingPath",
    "BookingPreview",
    "BookingStore",
    "EcommerceConfigSource",
    "ErrorReporter",
    "PaymentGateway",
    "SagaPhase",
    "load_ecommerce_config",
    "select_booking_path",
]

"""Booking requests, payload construction and the booking store."""

from .models import (
    COACH_ROLES,
    BookableType,
    BookingPayload,
    BookingRequest,
    BookingStatus,
    BookingType,
    Caller,
    CallerRole,
    CreatedBooking,
    Location,
    Person,
    Resource,
    Service,
    TimeSlot,
)
from .payload import build_booking_payload

__all__ = [
    "COACH_ROLES",
    "BookableType",
    "BookingPayload",
    "BookingRequest",
    "BookingStatus",
    "BookingType",
    "Caller",
    "CallerRole",
    "CreatedBooking",
    "Location",
    "Person",
    "Resource",
    "Service",
    "TimeSlot",
    "build_booking_payload",
]

"""Tenant API backed booking store."""
from __future__ import annotations

from ...api import TenantApiClient
from .models import BookingPayload, CreatedBooking


class RestBookingStore:
    """Creates and cancels bookings through ``/bookings``."""

    def __init__(self, api: TenantApiClient) -> None:
        self._api = api

    def create_booking(self, payload: BookingPayload) -> CreatedBooking:
        body = self._api.post("/bookings", json=payload.to_request_body())
        record = body.get("data") if isinstance(body.get("data"), dict) else body
        if not record.get("id"):
            raise ValueError("Booking service response did not include a booking id")
        return CreatedBooking.model_validate(
            {"id": record["id"], "status": record.get("status")}
        )

    def cancel_booking(self, booking_id: int) -> None:
        self._api.delete(f"/bookings/{booking_id}")

"""API routes for pricing and confirming bookings."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from ... import app_context
from ..errors import BookingFlowError
from ..schemas.bookings import (
    BookingConfirmationResponse,
    BookingConfirmRequest,
    BookingPreviewResponse,
)
from ..services import booking_confirmation as booking_services


def get_current_caller(
    authorization: Optional[str] = Header(None),
    x_active_role: Optional[str] = Header(None),
):
    return app_context.get_current_caller(authorization=authorization, active_role=x_active_role)


router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("/payment-summary", response_model=BookingPreviewResponse)
def preview_booking(
    payload: BookingConfirmRequest,
    *,
    current_caller=Depends(get_current_caller),
) -> BookingPreviewResponse:
    service = booking_services.get_booking_confirmation_service()
    try:
        preview = service.preview(payload.to_booking_request(current_caller))
    except BookingFlowError as exc:
        raise exc.to_http_exception() from exc
    return BookingPreviewResponse.from_preview(preview)


@router.post(
    "/confirm",
    response_model=BookingConfirmationResponse,
    status_code=status.HTTP_201_CREATED,
)
def confirm_booking(
    payload: BookingConfirmRequest,
    *,
    current_caller=Depends(get_current_caller),
) -> BookingConfirmationResponse:
    service = booking_services.get_booking_confirmation_service()
    try:
        confirmation = service.confirm(payload.to_booking_request(current_caller))
    except BookingFlowError as exc:
        raise exc.to_http_exception() from exc
    return BookingConfirmationResponse.from_confirmation(confirmation)

"""API routes for purchasing membership plans."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..errors import BookingFlowError
from ..schemas.memberships import (
    MembershipCheckoutBody,
    MembershipCheckoutResponse,
    MembershipQuoteResponse,
)
from ..services import booking_confirmation as booking_services
from .bookings import get_current_caller

router = APIRouter(prefix="/api/memberships", tags=["memberships"])


@router.post("/quote", response_model=MembershipQuoteResponse)
def quote_membership(
    payload: MembershipCheckoutBody,
    *,
    current_caller=Depends(get_current_caller),
) -> MembershipQuoteResponse:
    service = booking_services.get_membership_checkout_service()
    quote = service.quote(payload.to_checkout_request(current_caller))
    return MembershipQuoteResponse.from_quote(quote)


@router.post(
    "/checkout",
    response_model=MembershipCheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout_membership(
    payload: MembershipCheckoutBody,
    *,
    current_caller=Depends(get_current_caller),
) -> MembershipCheckoutResponse:
    if current_caller.is_coach:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Memberships are purchased by clients",
        )
    service = booking_services.get_membership_checkout_service()
    try:
        result = service.purchase(payload.to_checkout_request(current_caller))
    except BookingFlowError as exc:
        raise exc.to_http_exception() from exc
    return MembershipCheckoutResponse.from_result(result)

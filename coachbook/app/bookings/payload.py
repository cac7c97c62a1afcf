"""Maps a booking request onto the tenant's booking creation payload."""
from __future__ import annotations

from ..memberships import MembershipEligibility
from .models import BookableType, BookingPayload, BookingRequest, BookingStatus, BookingType


def build_booking_payload(
    request: BookingRequest,
    *,
    client_id: int,
    eligibility: MembershipEligibility,
    status: BookingStatus,
) -> BookingPayload:
    """Assemble the booking body; identical inputs always give identical output."""

    is_membership = eligibility.is_covered

    if request.coach is not None:
        bookable_type, bookable_id = BookableType.COACH, request.coach.id
    else:
        bookable_type, bookable_id = BookableType.SERVICE, request.service.id

    resource_ids = None
    if request.selected_resource is not None:
        resource_ids = (request.selected_resource.id,)

    duration_minutes = None
    if request.duration_minutes and request.service.is_variable_duration:
        duration_minutes = request.duration_minutes

    return BookingPayload(
        client_id=client_id,
        booking_type=BookingType.MEMBERSHIP if is_membership else BookingType.ONE_OFF,
        location_id=request.location.id,
        service_ids=(request.service.id,),
        bookable_type=bookable_type,
        bookable_id=bookable_id,
        start_time=request.time_slot.start_time,
        end_time=request.time_slot.end_time,
        status=status,
        notes=request.notes or "",
        resource_ids=resource_ids,
        duration_minutes=duration_minutes,
        membership_subscription_id=eligibility.subscription_id if is_membership else None,
        membership_plan_service_id=eligibility.plan_service_id if is_membership else None,
    )

"""Typed failures raised by the booking and membership checkout flows."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional

from fastapi import HTTPException, status

DEFAULT_ERROR_MESSAGE = "Something went wrong."


def _error_payload(error: object) -> Mapping[str, Any]:
    payload = getattr(error, "payload", None)
    if isinstance(payload, Mapping):
        return payload
    response = getattr(error, "response", None)
    if response is not None and hasattr(response, "json"):
        try:
            data = response.json()
        except ValueError:
            return {}
        if isinstance(data, Mapping):
            return data
    return {}


def extract_error_message(error: object, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Return the most specific human-readable message carried by ``error``.

    Structured validation errors (``{"errors": {"field": ["message"]}}``) win,
    followed by the payload's ``message`` and ``error`` keys, then the
    exception's own text and finally ``fallback``.
    """

    payload = _error_payload(error)

    validation_errors = payload.get("errors")
    if isinstance(validation_errors, Mapping) and validation_errors:
        first_field = next(iter(validation_errors.values()))
        if isinstance(first_field, (list, tuple)) and first_field:
            return str(first_field[0])

    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value

    text = str(error).strip() if error is not None else ""
    return text or fallback


@dataclass(eq=False)
class BookingFlowError(Exception):
    """Base failure surfaced to callers of the booking flows."""

    code: str
    message: str
    title: str = "Booking Failed"
    status_code: int = status.HTTP_400_BAD_REQUEST
    phase: Optional[str] = None
    detail: Optional[Mapping[str, Any]] = None

    # Whether a pending booking must be cancelled when this error escapes.
    compensable: ClassVar[bool] = False

    def __post_init__(self) -> None:
        base_detail: Dict[str, Any] = {
            "error": self.code,
            "title": self.title,
            "message": self.message,
        }
        if self.phase:
            base_detail["phase"] = self.phase
        if self.detail:
            base_detail.update(self.detail)
        object.__setattr__(self, "_payload", base_detail)
        super().__init__(self.message)

    @property
    def payload(self) -> Mapping[str, Any]:
        """Serialized representation suitable for JSON responses."""

        return self._payload

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=dict(self.payload))


@dataclass(eq=False)
class PreconditionFailure(BookingFlowError):
    """Rejected before anything was created."""

    status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY


@dataclass(eq=False)
class BookingCreationFailure(BookingFlowError):
    """The booking store refused or failed to create the booking."""

    status_code: int = status.HTTP_502_BAD_GATEWAY


@dataclass(eq=False)
class PaymentAuthorizationFailure(BookingFlowError):
    """No usable payment intent could be created for the pending booking."""

    title: str = "Payment Failed"
    status_code: int = status.HTTP_402_PAYMENT_REQUIRED

    compensable: ClassVar[bool] = True


@dataclass(eq=False)
class PaymentConfirmationFailure(BookingFlowError):
    """The card was declined or the confirmation call failed."""

    title: str = "Payment Failed"
    status_code: int = status.HTTP_402_PAYMENT_REQUIRED

    compensable: ClassVar[bool] = True


@dataclass(eq=False)
class FinalizationFailure(BookingFlowError):
    """Payment went through but the success notification did not."""

    title: str = "Payment Failed"
    status_code: int = status.HTTP_502_BAD_GATEWAY

    compensable: ClassVar[bool] = True


@dataclass(eq=False)
class CompensationFailure(BookingFlowError):
    """Cancelling a pending booking failed; reported, never raised to users."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    booking_id: Optional[int] = None


@dataclass(eq=False)
class SubscriptionCreationFailure(BookingFlowError):
    """Creating a payment method or membership subscription failed."""

    title: str = "Payment Failed"
    status_code: int = status.HTTP_402_PAYMENT_REQUIRED

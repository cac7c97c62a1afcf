from __future__ import annotations

import httpx
from fastapi import HTTPException

from coachbook.api import ApiRequestError
from coachbook.app.errors import (
    BookingCreationFailure,
    CompensationFailure,
    PaymentAuthorizationFailure,
    PaymentConfirmationFailure,
    PreconditionFailure,
    extract_error_message,
)


class ResponseError(Exception):
    def __init__(self, message: str, response: httpx.Response) -> None:
        super().__init__(message)
        self.response = response


def test_validation_errors_take_precedence():
    error = ApiRequestError(
        "The given data was invalid.",
        status_code=422,
        payload={
            "message": "The given data was invalid.",
            "errors": {"start_time": ["The start time is taken.", "Another issue."], "notes": ["Too long."]},
        },
    )

    assert extract_error_message(error) == "The start time is taken."


def test_message_then_error_keys():
    assert extract_error_message(ApiRequestError("x", payload={"message": "From message", "error": "From error"})) == "From message"
    assert extract_error_message(ApiRequestError("x", payload={"error": "From error"})) == "From error"


def test_non_list_validation_errors_are_ignored():
    error = ApiRequestError("x", payload={"message": "Top level", "errors": {"field": "not a list"}})

    assert extract_error_message(error) == "Top level"


def test_exception_text_then_fallback():
    assert extract_error_message(ValueError("Network unreachable")) == "Network unreachable"
    assert extract_error_message(ValueError()) == "Something went wrong."
    assert extract_error_message(ValueError(), "Failed to create payment.") == "Failed to create payment."
    assert extract_error_message(None) == "Something went wrong."


def test_response_payload_is_read_from_http_errors():
    response = httpx.Response(422, json={"errors": {"email": ["The email is invalid."]}})

    assert extract_error_message(ResponseError("422", response)) == "The email is invalid."


def test_undecodable_response_falls_back_to_exception_text():
    response = httpx.Response(502, text="<html>Bad gateway</html>")

    assert extract_error_message(ResponseError("Upstream failed", response)) == "Upstream failed"


def test_flow_errors_carry_payload_and_http_mapping():
    error = PaymentConfirmationFailure(
        code="payment_confirmation_failed",
        message="Your card was declined.",
        phase="payment_confirming",
    )

    http_error = error.to_http_exception()

    assert str(error) == "Your card was declined."
    assert isinstance(http_error, HTTPException)
    assert http_error.status_code == 402
    assert http_error.detail == {
        "error": "payment_confirmation_failed",
        "title": "Payment Failed",
        "message": "Your card was declined.",
        "phase": "payment_confirming",
    }


def test_only_post_booking_payment_failures_are_compensable():
    assert PaymentAuthorizationFailure(code="a", message="m").compensable
    assert PaymentConfirmationFailure(code="a", message="m").compensable
    assert not PreconditionFailure(code="a", message="m").compensable
    assert not BookingCreationFailure(code="a", message="m").compensable


def test_precondition_failure_defaults():
    error = PreconditionFailure(code="client_missing", message="Client information is missing.", title="Error")

    assert error.status_code == 422
    assert error.payload == {"error": "client_missing", "title": "Error", "message": "Client information is missing."}


def test_compensation_failure_records_booking():
    error = CompensationFailure(code="compensation_failed", message="timeout", booking_id=500, detail={"booking_id": 500})

    assert error.booking_id == 500
    assert error.status_code == 500
    assert error.payload["booking_id"] == 500

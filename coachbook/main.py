"""FastAPI application exposing booking confirmation and membership checkout."""
from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from . import app_context
from .app.bookings import Caller
from .app.routes.bookings import router as bookings_router
from .app.routes.memberships import router as memberships_router
from .app.services.booking_confirmation import get_api_client
from .app.services.callers import bearer_token, resolve_caller

load_dotenv()


def get_current_caller(
    authorization: Optional[str] = None,
    active_role: Optional[str] = None,
) -> Caller:
    return resolve_caller(
        get_api_client(),
        token=bearer_token(authorization),
        active_role=active_role,
    )


app_context.configure(get_current_caller=get_current_caller)

app = FastAPI(title="Coachbook Booking API")

app.include_router(bookings_router)
app.include_router(memberships_router)


@app.get("/api/healthz")
def healthz():
    return {"ok": True}

"""Resolves the signed-in caller from the tenant API."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from fastapi import HTTPException, status

from ...api import ApiAuthError, ApiError, TenantApiClient
from ..bookings import Caller, CallerRole, Person

logger = logging.getLogger("booking_confirmation")


def _role_names(roles: Optional[Iterable[Any]]) -> List[str]:
    names = []
    for role in roles or ():
        name = role.get("name") if isinstance(role, dict) else role
        if name:
            names.append(str(name).lower())
    return names


def _pick_role(role_names: List[str], requested: Optional[str]) -> CallerRole:
    """The requested role when the user holds it, else their first known role."""

    supported = {role.value for role in CallerRole}
    known = [name for name in role_names if name in supported]
    if requested and requested.lower() in known:
        return CallerRole(requested.lower())
    if known:
        return CallerRole(known[0])
    return CallerRole.CLIENT


def resolve_caller(
    api: TenantApiClient,
    *,
    token: Optional[str],
    active_role: Optional[str] = None,
) -> Caller:
    """Load ``GET /user`` with the caller's own token and pick the active role."""

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        body = api.get("/user", token=token)
    except ApiAuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated") from exc
    except ApiError as exc:
        logger.warning("Failed to resolve caller: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    user = body.get("data") if isinstance(body.get("data"), dict) else body
    person = Person.model_validate(user)
    return Caller(user=person, role=_pick_role(_role_names(user.get("roles")), active_role))


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()

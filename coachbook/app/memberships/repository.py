"""Tenant API backed membership lookups."""
from __future__ import annotations

from typing import Optional

from ...api import ApiNotFoundError, TenantApiClient
from .models import MembershipSubscription


class RestMembershipDirectory:
    """Reads a client's current membership from ``/clients/{id}/current-membership``."""

    def __init__(self, api: TenantApiClient) -> None:
        self._api = api

    def get_current_membership(self, client_id: int) -> Optional[MembershipSubscription]:
        try:
            body = self._api.get(f"/clients/{client_id}/current-membership")
        except ApiNotFoundError:
            return None
        data = body.get("data")
        if not data:
            return None
        return MembershipSubscription.model_validate(data)

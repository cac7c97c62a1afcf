"""Tenant API backed ecommerce configuration source."""
from __future__ import annotations

from ...api import TenantApiClient
from .models import EcommerceConfig


class RestEcommerceConfigSource:
    def __init__(self, api: TenantApiClient) -> None:
        self._api = api

    def get_ecommerce_config(self) -> EcommerceConfig:
        return EcommerceConfig.from_api(self._api.get("/config/ecommerce"))

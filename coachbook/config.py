"""Application configuration helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import os


@dataclass(frozen=True)
class AppConfig:
    """Runtime configuration for the booking client."""

    environment: str
    tenant_id: Optional[str]
    tenant_base_domain: str
    tenant_api_protocol: str
    api_token: Optional[str]
    api_timeout_seconds: float
    stripe_secret_key: Optional[str]
    currency: str
    locale: str
    report_errors: bool

    @property
    def tenant_api_url(self) -> str:
        """Base URL of the tenant API, e.g. ``https://acme.example.com/api/v1``."""

        if not self.tenant_id:
            raise ValueError("TENANT_ID must be configured to reach the tenant API")
        return f"{self.tenant_api_protocol}://{self.tenant_id}.{self.tenant_base_domain}/api/v1"


_ENVIRONMENT_DEFAULTS = {
    "development": {"base_domain": "localhost", "protocol": "http"},
    "staging": {"base_domain": "staging.coachbook.app", "protocol": "https"},
    "production": {"base_domain": "coachbook.app", "protocol": "https"},
}


def _to_bool(value: Optional[str], *, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return default


def _to_float(value: Optional[str], *, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected float value, got {value!r}") from exc


def load_app_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load :class:`AppConfig` from environment variables."""

    env_mapping = os.environ if env is None else env

    environment = (env_mapping.get("APP_ENV") or "development").strip().lower()
    defaults = _ENVIRONMENT_DEFAULTS.get(environment, _ENVIRONMENT_DEFAULTS["development"])

    tenant_id = (env_mapping.get("TENANT_ID") or "").strip() or None
    base_domain = env_mapping.get("TENANT_BASE_DOMAIN") or defaults["base_domain"]
    protocol = (env_mapping.get("TENANT_API_PROTOCOL") or defaults["protocol"]).strip().lower()

    api_timeout = max(1.0, _to_float(env_mapping.get("API_TIMEOUT_SECONDS"), default=30.0))

    return AppConfig(
        environment=environment,
        tenant_id=tenant_id,
        tenant_base_domain=base_domain.strip().strip("/"),
        tenant_api_protocol=protocol,
        api_token=env_mapping.get("API_TOKEN") or None,
        api_timeout_seconds=api_timeout,
        stripe_secret_key=env_mapping.get("STRIPE_SECRET_KEY") or None,
        currency=(env_mapping.get("CURRENCY") or "USD").strip().upper(),
        locale=(env_mapping.get("LOCALE") or "en-US").strip(),
        report_errors=_to_bool(env_mapping.get("REPORT_ERRORS"), default=True),
    )

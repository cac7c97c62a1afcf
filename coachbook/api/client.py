"""HTTP client for the tenant booking API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

import httpx

from ..config import AppConfig

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error for tenant API request failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload: Mapping[str, Any] = payload or {}


class ApiConnectionError(ApiError):
    """Raised when the tenant API cannot be reached."""


class ApiAuthError(ApiError):
    """Raised when the tenant API rejects the credentials."""


class ApiNotFoundError(ApiError):
    """Raised when the requested resource does not exist."""


class ApiRequestError(ApiError):
    """Raised for any other non-success response."""


def _decode(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {"message": response.text}
    if isinstance(data, dict):
        return data
    return {"data": data}


class TenantApiClient:
    """Authenticated JSON client scoped to a single tenant."""

    def __init__(self, config: AppConfig, http: Optional[httpx.Client] = None) -> None:
        self.config = config
        self.http = http or httpx.Client(
            base_url=config.tenant_api_url,
            timeout=httpx.Timeout(config.api_timeout_seconds, connect=10.0),
        )

    def close(self) -> None:
        self.http.close()

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Request-ID": str(uuid4()),
        }
        bearer = token or self.config.api_token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        if self.config.tenant_id:
            headers["X-Tenant"] = self.config.tenant_id
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            response = self.http.request(
                method,
                path,
                params=params,
                json=json,
                headers=self._headers(token),
            )
        except httpx.TimeoutException as exc:
            raise ApiConnectionError(f"Request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise ApiConnectionError(f"Could not reach the booking service: {exc}") from exc

        payload = _decode(response)
        if response.status_code >= 400:
            logger.debug(
                "Tenant API %s %s failed status=%s", method, path, response.status_code
            )
            message = str(payload.get("message") or f"Request failed with status {response.status_code}")
            if response.status_code in {401, 403}:
                raise ApiAuthError(message, status_code=response.status_code, payload=payload)
            if response.status_code == 404:
                raise ApiNotFoundError(message, status_code=response.status_code, payload=payload)
            raise ApiRequestError(message, status_code=response.status_code, payload=payload)
        return payload

    def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.request("GET", path, params=params, token=token)

    def post(self, path: str, json: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.request("POST", path, json=json)

    def delete(self, path: str) -> Dict[str, Any]:
        return self.request("DELETE", path)

"""Tenant API access shared by the REST-backed collaborators."""

from .client import (
    ApiAuthError,
    ApiConnectionError,
    ApiError,
    ApiNotFoundError,
    ApiRequestError,
    TenantApiClient,
)

__all__ = [
    "ApiAuthError",
    "ApiConnectionError",
    "ApiError",
    "ApiNotFoundError",
    "ApiRequestError",
    "TenantApiClient",
]

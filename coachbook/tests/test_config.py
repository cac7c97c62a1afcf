from __future__ import annotations

import pytest

from coachbook.config import load_app_config


def test_defaults_target_local_development():
    config = load_app_config({})

    assert config.environment == "development"
    assert config.tenant_id is None
    assert config.tenant_base_domain == "localhost"
    assert config.tenant_api_protocol == "http"
    assert config.api_token is None
    assert config.api_timeout_seconds == 30.0
    assert config.stripe_secret_key is None
    assert config.currency == "USD"
    assert config.locale == "en-US"
    assert config.report_errors is True


def test_production_tenant_url():
    config = load_app_config({"APP_ENV": "production", "TENANT_ID": "acme"})

    assert config.tenant_api_url == "https://acme.coachbook.app/api/v1"


def test_overrides_are_normalized():
    config = load_app_config(
        {
            "APP_ENV": "Staging",
            "TENANT_ID": " acme ",
            "TENANT_BASE_DOMAIN": "example.com/",
            "TENANT_API_PROTOCOL": "HTTPS",
            "API_TOKEN": "token-123",
            "API_TIMEOUT_SECONDS": "45",
            "STRIPE_SECRET_KEY": "sk_test_123",
            "CURRENCY": "eur",
            "LOCALE": "de-DE",
            "REPORT_ERRORS": "no",
        }
    )

    assert config.environment == "staging"
    assert config.tenant_api_url == "https://acme.example.com/api/v1"
    assert config.api_token == "token-123"
    assert config.api_timeout_seconds == 45.0
    assert config.stripe_secret_key == "sk_test_123"
    assert config.currency == "EUR"
    assert config.locale == "de-DE"
    assert config.report_errors is False


def test_timeout_has_a_floor():
    assert load_app_config({"API_TIMEOUT_SECONDS": "0.2"}).api_timeout_seconds == 1.0


def test_invalid_timeout_is_rejected():
    with pytest.raises(ValueError):
        load_app_config({"API_TIMEOUT_SECONDS": "soon"})


def test_unrecognized_boolean_keeps_default():
    assert load_app_config({"REPORT_ERRORS": "maybe"}).report_errors is True


def test_unknown_environment_uses_development_defaults():
    config = load_app_config({"APP_ENV": "qa"})

    assert config.environment == "qa"
    assert config.tenant_base_domain == "localhost"


def test_tenant_url_requires_tenant():
    with pytest.raises(ValueError):
        load_app_config({}).tenant_api_url

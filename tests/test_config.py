"""
Tests for client configuration
"""

from stpapi.config import (
    APIConfig,
    ClientConfig,
    get_default_publishable_key,
    set_default_publishable_key,
)


def test_endpoint_url():
    url = APIConfig.endpoint_url("https://api.stripe.com/v1/", "/payment_intents/pi_1")
    assert url == "https://api.stripe.com/v1/payment_intents/pi_1"


def test_defaults():
    config = ClientConfig()

    assert config.api_url == APIConfig.API_BASE_URL
    assert config.livemode_override is None
    assert config.telemetry_enabled is True
    assert config.poll_interval == 1.5


def test_from_env(monkeypatch):
    monkeypatch.setenv("STRIPE_API_URL", "http://localhost:12111/v1")
    monkeypatch.setenv("STRIPE_TIMEOUT", "5")
    monkeypatch.setenv("STRIPE_LIVEMODE", "false")
    monkeypatch.setenv("STRIPE_TELEMETRY", "0")

    config = ClientConfig.from_env()

    assert config.api_url == "http://localhost:12111/v1"
    assert config.timeout == 5.0
    assert config.livemode_override is False
    assert config.telemetry_enabled is False


def test_from_env_ignores_invalid_timeout(monkeypatch):
    monkeypatch.setenv("STRIPE_TIMEOUT", "soon")
    monkeypatch.delenv("STRIPE_LIVEMODE", raising=False)

    config = ClientConfig.from_env()

    assert config.timeout == APIConfig.DEFAULT_TIMEOUT
    assert config.livemode_override is None


def test_default_publishable_key():
    set_default_publishable_key("pk_test_default")
    assert get_default_publishable_key() == "pk_test_default"

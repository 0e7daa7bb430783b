"""
Tests for credential and header construction
"""

import json

from stpapi.config import APIConfig, set_default_publishable_key
from stpapi.headers import (
    HEADER_AUTHORIZATION,
    HEADER_LIVEMODE,
    HEADER_STRIPE_ACCOUNT,
    HEADER_STRIPE_VERSION,
    HEADER_USER_AGENT,
    ClientIdentity,
    authorization_header,
    default_headers,
    stripe_user_agent_details,
    stripe_version,
)
from stpapi.types import AppInfo, EphemeralKey


def test_stripe_version_without_betas():
    assert stripe_version() == APIConfig.API_VERSION


def test_stripe_version_sorts_betas():
    version = stripe_version({"zeta_beta=v1", "alipay_beta=v1"})
    assert version == f"{APIConfig.API_VERSION}; alipay_beta=v1; zeta_beta=v1"


def test_user_agent_details():
    details = json.loads(stripe_user_agent_details())

    assert details["lang"] == "python"
    assert details["bindings_version"] == APIConfig.SDK_VERSION
    assert "name" not in details


def test_user_agent_details_with_app_info():
    app_info = AppInfo(name="MyPlugin", partner_id="pp_123", version="1.0")
    details = json.loads(stripe_user_agent_details(app_info))

    assert details["name"] == "MyPlugin"
    assert details["partner_id"] == "pp_123"
    assert details["version"] == "1.0"
    assert "url" not in details


def test_authorization_uses_publishable_key():
    headers = authorization_header(ClientIdentity(api_key="pk_test_123"))
    assert headers == {HEADER_AUTHORIZATION: "Bearer pk_test_123"}


def test_authorization_falls_back_to_default_key():
    set_default_publishable_key("pk_test_default")
    headers = authorization_header(ClientIdentity())
    assert headers[HEADER_AUTHORIZATION] == "Bearer pk_test_default"


def test_authorization_prefers_ephemeral_key(ephemeral_key_response):
    identity = ClientIdentity(api_key="pk_test_123")

    assert authorization_header(identity, "ek_bare")[HEADER_AUTHORIZATION] == "Bearer ek_bare"

    key = EphemeralKey.model_validate(ephemeral_key_response)
    headers = authorization_header(identity, key)
    assert headers[HEADER_AUTHORIZATION] == "Bearer ek_test_secret"


def test_user_key_sends_livemode():
    identity = ClientIdentity(api_key="uk_123")

    assert authorization_header(identity)[HEADER_LIVEMODE] == "true"
    assert authorization_header(identity, livemode_override=True)[HEADER_LIVEMODE] == "true"
    assert authorization_header(identity, livemode_override=False)[HEADER_LIVEMODE] == "false"


def test_publishable_key_never_sends_livemode():
    identity = ClientIdentity(api_key="pk_live_123")
    assert HEADER_LIVEMODE not in authorization_header(identity, livemode_override=False)


def test_default_headers():
    identity = ClientIdentity(
        api_key="pk_test_123", stripe_account="acct_123", betas={"b_beta=v1"}
    )
    headers = default_headers(identity)

    assert headers[HEADER_AUTHORIZATION] == "Bearer pk_test_123"
    assert headers[HEADER_STRIPE_ACCOUNT] == "acct_123"
    assert headers[HEADER_STRIPE_VERSION] == f"{APIConfig.API_VERSION}; b_beta=v1"
    assert json.loads(headers[HEADER_USER_AGENT])["lang"] == "python"


def test_default_headers_without_account():
    headers = default_headers(ClientIdentity(api_key="pk_test_123"))
    assert HEADER_STRIPE_ACCOUNT not in headers

"""
Pytest configuration and shared fixtures
"""

import pytest
import respx

from stpapi import config as stpapi_config
from stpapi.client import APIClient
from stpapi.config import ClientConfig


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_default_publishable_key():
    """Keep the process-wide key and shared client from leaking between tests"""
    stpapi_config.set_default_publishable_key(None)
    APIClient.set_shared(None)
    yield
    stpapi_config.set_default_publishable_key(None)
    APIClient.set_shared(None)


@pytest.fixture
def respx_mock():
    """Create respx mock for httpx requests"""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def client_config():
    """Client settings with telemetry off and a fast poll interval"""
    return ClientConfig(telemetry_enabled=False, poll_interval=0.01)


@pytest.fixture
def client(client_config):
    return APIClient("pk_test_123", config=client_config)


@pytest.fixture
def ephemeral_key_response():
    return {
        "id": "ephkey_123",
        "object": "ephemeral_key",
        "secret": "ek_test_secret",
        "created": 1483575790,
        "expires": 1483579790,
        "livemode": False,
        "associated_objects": [{"id": "cus_123", "type": "customer"}],
    }

"""
Stripe API Configuration
Centralized configuration for API origins, endpoints and client settings
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class APIConfig:
    """Fixed API constants shared by every client instance"""

    SDK_VERSION = "21.8.1"
    API_VERSION = "2020-08-27"

    # Origins
    API_BASE_URL = "https://api.stripe.com/v1"
    FILE_UPLOAD_URL = "https://uploads.stripe.com/v1/files"
    CARD_METADATA_URL = "https://api.stripe.com/edge-internal/card-metadata"
    TELEMETRY_URL = "https://m.stripe.com/6"

    # Endpoint path fragments, relative to API_BASE_URL
    ENDPOINT_TOKENS = "tokens"
    ENDPOINT_SOURCES = "sources"
    ENDPOINT_CUSTOMERS = "customers"
    ENDPOINT_PAYMENT_INTENTS = "payment_intents"
    ENDPOINT_SETUP_INTENTS = "setup_intents"
    ENDPOINT_PAYMENT_METHODS = "payment_methods"
    ENDPOINT_3DS2 = "3ds2"
    ENDPOINT_FPX_STATUS = "fpx/bank_statuses"

    # Nested parameter hashes that receive telemetry / user agent fields
    PAYMENT_METHOD_DATA_HASH = "payment_method_data"
    SOURCE_DATA_HASH = "source_data"

    # Source polling
    DEFAULT_POLL_INTERVAL = 1.5
    MAX_POLL_TIMEOUT = 60.0 * 5

    DEFAULT_TIMEOUT = 30.0

    # Publishable key prefixes
    USER_KEY_PREFIX = "uk_"
    SECRET_KEY_PREFIX = "sk_"
    TESTMODE_KEY_PREFIX = "pk_test"

    @classmethod
    def endpoint_url(cls, base_url: str, endpoint: str) -> str:
        """Join an endpoint fragment onto a versioned base URL.

        Args:
            base_url: API origin including version (e.g., "https://api.stripe.com/v1")
            endpoint: Path fragment (e.g., "payment_intents/pi_123/confirm")

        Returns:
            Absolute URL string
        """
        return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


def _env_flag(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass
class ClientConfig:
    """Per-client settings.

    ``livemode_override`` replaces the ambient ``Stripe-Livemode`` environment
    lookup: when a user key (``uk_``) is in use, the ``Stripe-Livemode`` header
    is ``"false"`` only if this is explicitly ``False``.
    """

    api_url: str = APIConfig.API_BASE_URL
    upload_url: str = APIConfig.FILE_UPLOAD_URL
    card_metadata_url: str = APIConfig.CARD_METADATA_URL
    telemetry_url: str = APIConfig.TELEMETRY_URL
    timeout: float = APIConfig.DEFAULT_TIMEOUT
    livemode_override: bool | None = None
    telemetry_enabled: bool = True
    poll_interval: float = APIConfig.DEFAULT_POLL_INTERVAL
    # Shown as the merchant name on redirect-based source flows
    company_name: str | None = None

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from STRIPE_* environment variables.

        Reads STRIPE_API_URL, STRIPE_TIMEOUT, STRIPE_LIVEMODE and
        STRIPE_TELEMETRY once; unset variables keep their defaults.

        Returns:
            ClientConfig instance
        """
        config = cls()
        api_url = os.getenv("STRIPE_API_URL")
        if api_url:
            config.api_url = api_url
        timeout = os.getenv("STRIPE_TIMEOUT")
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid STRIPE_TIMEOUT value: {timeout!r}")
        config.livemode_override = _env_flag(os.getenv("STRIPE_LIVEMODE"))
        telemetry = _env_flag(os.getenv("STRIPE_TELEMETRY"))
        if telemetry is not None:
            config.telemetry_enabled = telemetry
        return config


_default_publishable_key: str | None = None


def set_default_publishable_key(key: str | None) -> None:
    """Set the process-wide publishable key used when a client has none of its own"""
    global _default_publishable_key
    _default_publishable_key = key


def get_default_publishable_key() -> str | None:
    """Get the process-wide publishable key"""
    return _default_publishable_key


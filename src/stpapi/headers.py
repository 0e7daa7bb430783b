"""
Credential and header construction for outbound requests
"""

import functools
import json
import platform
from dataclasses import dataclass, field

from stpapi.config import APIConfig, get_default_publishable_key
from stpapi.types import AppInfo, EphemeralKey

HEADER_AUTHORIZATION = "Authorization"
HEADER_STRIPE_VERSION = "Stripe-Version"
HEADER_STRIPE_ACCOUNT = "Stripe-Account"
HEADER_USER_AGENT = "X-Stripe-User-Agent"
HEADER_LIVEMODE = "Stripe-Livemode"


@dataclass
class ClientIdentity:
    """
    Credentials and identity attached to every request of one client.

    Mutated only by the owning caller. Requests snapshot the headers at send
    time, so rotating the key races with in-flight requests (last write wins).
    """

    api_key: str | None = None
    stripe_account: str | None = None
    app_info: AppInfo | None = None
    betas: set[str] = field(default_factory=set)

    @property
    def publishable_key(self) -> str | None:
        """The client's own key, else the process-wide default"""
        if self.api_key is not None:
            return self.api_key
        return get_default_publishable_key()

    @property
    def is_user_key(self) -> bool:
        key = self.publishable_key
        return bool(key) and key.startswith(APIConfig.USER_KEY_PREFIX)


@functools.lru_cache(maxsize=1)
def _platform_details() -> tuple[tuple[str, str], ...]:
    details = []
    os_version = platform.release()
    if os_version:
        details.append(("os_version", os_version))
    machine = platform.machine()
    if machine:
        details.append(("type", machine))
    system = platform.system()
    if system:
        details.append(("model", system))
    return tuple(details)


def stripe_user_agent_details(app_info: AppInfo | None = None) -> str:
    """
    Build the JSON value of the X-Stripe-User-Agent header.

    Empty or missing fields are omitted rather than sent as null.

    Args:
        app_info: Identity of the wrapping app or library (optional)

    Returns:
        Compact JSON string
    """
    details: dict[str, str] = {
        "lang": "python",
        "bindings_version": APIConfig.SDK_VERSION,
        "python_version": platform.python_version(),
    }
    details.update(_platform_details())
    if app_info is not None:
        app_fields = {
            "name": app_info.name,
            "partner_id": app_info.partner_id,
            "version": app_info.version,
            "url": app_info.url,
        }
        details.update({k: v for k, v in app_fields.items() if v})
    return json.dumps(details, separators=(",", ":"))


def stripe_version(betas: set[str] | frozenset[str] = frozenset()) -> str:
    """API version followed by enabled betas in lexicographic order, ``; ``-joined"""
    return "; ".join([APIConfig.API_VERSION, *sorted(betas)])


def authorization_header(
    identity: ClientIdentity,
    ephemeral_key: EphemeralKey | str | None = None,
    livemode_override: bool | None = None,
) -> dict[str, str]:
    """
    Build the Authorization header, plus Stripe-Livemode for user keys.

    Args:
        identity: Client identity supplying the publishable key
        ephemeral_key: Ephemeral key (object or bare secret) that takes precedence
            over the publishable key
        livemode_override: Explicit Stripe-Livemode value for user keys;
            anything but False sends "true"

    Returns:
        Header dict
    """
    if isinstance(ephemeral_key, EphemeralKey):
        ephemeral_key = ephemeral_key.secret

    bearer = identity.publishable_key or ""
    if ephemeral_key is not None:
        bearer = ephemeral_key

    headers = {HEADER_AUTHORIZATION: f"Bearer {bearer}"}
    if identity.is_user_key:
        headers[HEADER_LIVEMODE] = "false" if livemode_override is False else "true"
    return headers


def default_headers(
    identity: ClientIdentity,
    ephemeral_key: EphemeralKey | str | None = None,
    livemode_override: bool | None = None,
) -> dict[str, str]:
    """
    Headers common to every request made with ``identity``.

    Pure: depends only on its arguments (and static platform details).

    Args:
        identity: Client identity
        ephemeral_key: Optional ephemeral key for this call
        livemode_override: See ``authorization_header``

    Returns:
        Header dict
    """
    headers = {
        HEADER_USER_AGENT: stripe_user_agent_details(identity.app_info),
        HEADER_STRIPE_VERSION: stripe_version(identity.betas),
    }
    if identity.stripe_account:
        headers[HEADER_STRIPE_ACCOUNT] = identity.stripe_account
    headers.update(authorization_header(identity, ephemeral_key, livemode_override))
    return headers

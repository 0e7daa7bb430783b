"""
Telemetry and analytics - fire-and-forget side channels that never fail a request
"""

import asyncio
import logging
import platform
import time
import uuid
from typing import Any, Callable, Mapping

import httpx

from stpapi.config import APIConfig

logger = logging.getLogger(__name__)

AnalyticsSink = Callable[[str, dict[str, Any]], None]


class TelemetryClient:
    """
    Device/session identifiers added to token and source parameters.

    ``send_telemetry_data`` posts a fingerprint payload in the background;
    failures are logged and dropped.
    """

    def __init__(
        self,
        enabled: bool = True,
        url: str = APIConfig.TELEMETRY_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.enabled = enabled
        self._url = url
        self._http_client = http_client
        self.muid = str(uuid.uuid4())
        self.guid = str(uuid.uuid4())
        self.sid = str(uuid.uuid4())
        self._pending: set[asyncio.Task[None]] = set()

    def telemetry_fields(self) -> dict[str, str]:
        return {"muid": self.muid, "guid": self.guid, "sid": self.sid}

    def add_telemetry_fields(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of ``params`` with telemetry ids added; existing keys win"""
        new_params = dict(params)
        if not self.enabled:
            return new_params
        for key, value in self.telemetry_fields().items():
            new_params.setdefault(key, value)
        return new_params

    def payload(self) -> dict[str, Any]:
        return {
            "v2": 1,
            "tag": APIConfig.SDK_VERSION,
            "src": "python-sdk",
            "a": {
                "c": {"v": platform.system()},
                "d": {"v": platform.release()},
                "f": {"v": platform.machine()},
                "g": {"v": time.strftime("%z")},
            },
            "b": {
                "d": self.muid,
                "e": self.sid,
                "k": APIConfig.SDK_VERSION,
                "o": platform.python_version(),
            },
        }

    def send_telemetry_data(self) -> None:
        """Schedule the telemetry POST on the running loop, if any"""
        if not self.enabled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping telemetry")
            return
        task = loop.create_task(self._post())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _post(self) -> None:
        try:
            if self._http_client is None:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    await client.post(self._url, json=self.payload())
            else:
                await self._http_client.post(self._url, json=self.payload())
        except httpx.HTTPError as e:
            logger.debug(f"Telemetry request failed: {e!r}")

    async def drain(self) -> None:
        """Wait for in-flight telemetry posts"""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


class AnalyticsClient:
    """
    Product usage tags and a pluggable event sink.

    The tags feed the ``payment_user_agent`` parameter. Events go to ``sink``;
    sink errors are logged and dropped.
    """

    def __init__(self, sink: AnalyticsSink | None = None) -> None:
        self.product_usage: set[str] = set()
        self.sink = sink

    def add_product_usage(self, tag: str) -> None:
        self.product_usage.add(tag)

    def log(self, event: str, **params: Any) -> None:
        if self.sink is None:
            return
        payload = {k: v for k, v in params.items() if v is not None}
        payload["product_usage"] = sorted(self.product_usage)
        try:
            self.sink(event, payload)
        except Exception as e:
            logger.warning(f"Analytics sink failed for {event}: {e!r}")

    def log_token_creation_attempt(self, token_type: str | None) -> None:
        self.log("stpapi.token_creation", token_type=token_type)

    def log_source_creation_attempt(self, source_type: str | None) -> None:
        self.log("stpapi.source_creation", source_type=source_type)

    def log_payment_method_creation_attempt(self, payment_method_type: str | None) -> None:
        self.log("stpapi.payment_method_creation", source_type=payment_method_type)

    def log_payment_intent_confirmation_attempt(self, payment_method_type: str | None) -> None:
        self.log("stpapi.payment_intent_confirmation", source_type=payment_method_type)

    def log_setup_intent_confirmation_attempt(self, payment_method_type: str | None) -> None:
        self.log("stpapi.setup_intent_confirmation", source_type=payment_method_type)


def token_type_from_parameters(params: Mapping[str, Any]) -> str | None:
    """Infer the token type from the top-level key of token creation parameters"""
    for key in ("card", "bank_account", "pii", "account", "cvc_update"):
        if key in params:
            return key
    return None

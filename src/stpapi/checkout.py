"""
SubscriptionService - fetches checkout credentials from a merchant backend
"""

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from stpapi.client import APIClient

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again!"


class SubscriptionResponse(BaseModel):
    """Credentials the backend issues for one checkout"""

    payment_intent: str = Field(alias="paymentIntent")
    publishable_key: str = Field(alias="publishableKey")
    customer: str
    ephemeral_key: str = Field(alias="ephemeralKey")

    class Config:
        populate_by_name = True


class SubscriptionResponseHandler(Protocol):
    def on_result(self, subscription_result: SubscriptionResponse) -> None:
        ...

    def on_error(self, message: str) -> None:
        ...


class SubscriptionService:
    """
    Client for the merchant backend's ``/checkout`` endpoint.
    """

    def __init__(self, base_url: str, http_client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize subscription service.

        Args:
            base_url: Merchant backend base URL
            http_client: Pre-built client to use instead of creating one
        """
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(base_url=self._base_url, timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def checkout(self) -> SubscriptionResponse:
        """
        Request checkout credentials.

        Returns:
            SubscriptionResponse

        Raises:
            httpx.HTTPError: On connectivity failure or a non-2xx status
            pydantic.ValidationError: If the body does not match SubscriptionResponse
        """
        client = await self._get_client()
        response = await client.post(f"{self._base_url}/checkout")
        response.raise_for_status()
        return SubscriptionResponse.model_validate_json(response.content)

    async def get_subscription_token(self, callback: SubscriptionResponseHandler) -> None:
        """
        Request checkout credentials and report the outcome to ``callback``.

        Exactly one of ``on_result`` or ``on_error`` is called.
        """
        try:
            result = await self.checkout()
        except httpx.HTTPError as e:
            logger.error(f"Checkout request failed: {e}")
            callback.on_error(str(e) or GENERIC_ERROR_MESSAGE)
            return
        except PydanticValidationError as e:
            logger.error(f"Checkout response could not be decoded: {e}")
            callback.on_error(GENERIC_ERROR_MESSAGE)
            return
        callback.on_result(result)

    @staticmethod
    def configure_client(
        subscription_result: SubscriptionResponse, client: APIClient | None = None
    ) -> APIClient:
        """Apply the publishable key returned by the backend to ``client`` (default: shared)"""
        client = client or APIClient.shared()
        client.publishable_key = subscription_result.publishable_key
        return client

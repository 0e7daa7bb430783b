"""
Transport - issues HTTP requests over one shared connection pool
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import httpx

from stpapi.encoding import query_string
from stpapi.exceptions import TransportError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class APIRequest:
    """Immutable description of one outbound call"""

    method: str
    url: str
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes | None = None
    content_type: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def get(cls, url: str, params: Mapping[str, Any], headers: Mapping[str, str]) -> "APIRequest":
        return cls("GET", url, params, headers)

    @classmethod
    def post(
        cls, url: str, params: Mapping[str, Any], headers: Mapping[str, str]
    ) -> "APIRequest":
        return cls("POST", url, params, headers)

    @classmethod
    def multipart(
        cls, url: str, body: bytes, content_type: str, headers: Mapping[str, str]
    ) -> "APIRequest":
        return cls("POST", url, {}, headers, content=body, content_type=content_type)


@dataclass(frozen=True)
class RawResponse:
    """What came back: body and status, or a transport error with no body"""

    body: bytes | None = None
    status_code: int | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    error: TransportError | None = None

    @property
    def request_id(self) -> str | None:
        return self.headers.get("request-id")


class Transport:
    """
    Sends APIRequests with a lazily created, shared httpx.AsyncClient.

    Never raises for connectivity failures; they are returned as
    ``RawResponse.error``. Bodies of non-2xx responses are returned as-is.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize transport.

        Args:
            timeout: Per-request timeout in seconds
            http_client: Pre-built client to use instead of creating one
        """
        self._timeout = timeout
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @staticmethod
    def build_httpx_request(client: httpx.AsyncClient, request: APIRequest) -> httpx.Request:
        headers = dict(request.headers)
        url = request.url
        content: bytes | None = None

        if request.method == "GET":
            query = query_string(request.params)
            if query:
                url = f"{url}{'&' if '?' in url else '?'}{query}"
        elif request.content is not None:
            content = request.content
            if request.content_type:
                headers["Content-Type"] = request.content_type
        else:
            content = query_string(request.params).encode("utf-8")
            headers["Content-Type"] = FORM_CONTENT_TYPE

        return client.build_request(request.method, url, headers=headers, content=content)

    async def send(self, request: APIRequest) -> RawResponse:
        """
        Perform the request.

        Args:
            request: Request descriptor

        Returns:
            RawResponse with body/status, or with ``error`` set on connectivity failure
        """
        client = await self._get_client()
        httpx_request = self.build_httpx_request(client, request)
        logger.debug(f"{request.method} {request.url}")
        try:
            response = await client.send(httpx_request)
        except httpx.HTTPError as e:
            logger.error(f"Request {request.method} {request.url} failed: {e!r}")
            return RawResponse(error=TransportError(f"Network request failed: {e}", cause=e))

        logger.info(f"{request.method} {request.url} -> {response.status_code}")
        return RawResponse(
            body=response.content,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

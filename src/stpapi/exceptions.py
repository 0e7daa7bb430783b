"""
stpapi custom exception hierarchy
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Tag carried by every StripeError"""

    VALIDATION = "validation"
    NETWORK = "network"
    API = "api"
    DECODE = "decode"
    TIMEOUT = "timeout"


class StripeError(Exception):
    """stpapi base exception"""

    kind: ErrorKind = ErrorKind.API

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class ValidationError(StripeError, ValueError):
    """Malformed caller input. Raised before any request is sent; not retried."""

    kind = ErrorKind.VALIDATION


class ClientSecretFormatError(ValidationError):
    """Client secret does not match the expected format for its resource type"""

    def __init__(self, secret_name: str, expected: str):
        self.secret_name = secret_name
        self.expected = expected
        super().__init__(
            f"`{secret_name}` format does not match expected {expected} formatting."
        )


class InvalidPublishableKeyError(ValidationError):
    """Publishable key is empty or is a secret key"""

    pass


class UploadTooLargeError(ValidationError):
    """Upload data exceeds the byte budget for its purpose"""

    def __init__(self, purpose: str, size: int, max_bytes: int):
        self.purpose = purpose
        self.size = size
        self.max_bytes = max_bytes
        super().__init__(
            f"Upload for purpose {purpose!r} is {size} bytes; the maximum is {max_bytes}."
        )


class TransportError(StripeError):
    """Connectivity failure or timeout; no response body was received"""

    kind = ErrorKind.NETWORK


class DecodeError(StripeError):
    """Response body could not be decoded into the expected object"""

    kind = ErrorKind.DECODE

    GENERIC_MESSAGE = "There was an unexpected error -- try again in a few seconds"

    def __init__(self, message: str | None = None, cause: BaseException | None = None):
        super().__init__(message or self.GENERIC_MESSAGE, cause)

    @classmethod
    def failed_to_parse_response(cls) -> "DecodeError":
        return cls()


class PollingTimeoutError(StripeError):
    """Source polling reached its deadline while the resource was still pending"""

    kind = ErrorKind.TIMEOUT

    def __init__(self, identifier: str, timeout: float):
        self.identifier = identifier
        self.timeout = timeout
        super().__init__(f"Polling for {identifier} timed out after {timeout}s")


class APIError(StripeError):
    """Structured error envelope returned by the API"""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        error_type: str | None = None,
        code: str | None = None,
        decline_code: str | None = None,
        param: str | None = None,
        http_status: int | None = None,
        request_id: str | None = None,
        raw: dict[str, Any] | None = None,
    ):
        self.error_type = error_type
        self.code = code
        self.decline_code = decline_code
        self.param = param
        self.http_status = http_status
        self.request_id = request_id
        self.raw = raw or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self.code!r}, "
            f"http_status={self.http_status!r})"
        )


class CardError(APIError):
    """The card was declined or could not be processed"""

    pass


class InvalidRequestError(APIError):
    """The request had invalid parameters"""

    pass


class AuthenticationError(APIError):
    """The API key was missing or invalid"""

    pass


class RateLimitError(APIError):
    """Too many requests hit the API too quickly"""

    pass


class IdempotencyError(APIError):
    """An idempotency key was reused with different parameters"""

    pass


class ServerAPIError(APIError):
    """The API reported an internal error"""

    pass

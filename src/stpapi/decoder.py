"""
Response decoding - JSON body to typed object or typed error
"""

import json
import logging
from typing import Any, Optional, TypeVar

from stpapi.exceptions import (
    APIError,
    AuthenticationError,
    CardError,
    DecodeError,
    IdempotencyError,
    InvalidRequestError,
    RateLimitError,
    ServerAPIError,
    StripeError,
    TransportError,
)
from stpapi.transport import RawResponse
from stpapi.types import StripeObject

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=StripeObject)

# Envelope ``type`` -> exception class
API_ERROR_TYPES: dict[str, type[APIError]] = {
    "card_error": CardError,
    "invalid_request_error": InvalidRequestError,
    "authentication_error": AuthenticationError,
    "rate_limit_error": RateLimitError,
    "idempotency_error": IdempotencyError,
    "api_error": ServerAPIError,
    "api_connection_error": ServerAPIError,
}


def parse_json_body(body: bytes | None) -> Optional[dict[str, Any]]:
    """Parse a response body as a JSON object; None if absent or malformed"""
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        logger.debug("Response body is not valid JSON")
        return None
    return parsed if isinstance(parsed, dict) else None


def api_error_from_response(
    json_body: Optional[dict[str, Any]],
    http_status: int | None = None,
    request_id: str | None = None,
) -> Optional[APIError]:
    """
    Build an APIError from an ``{"error": {...}}`` envelope.

    Args:
        json_body: Parsed body
        http_status: HTTP status of the response
        request_id: Value of the request-id header

    Returns:
        APIError subclass chosen by the envelope type, or None if there is no envelope
    """
    if not json_body:
        return None
    envelope = json_body.get("error")
    if not isinstance(envelope, dict):
        return None

    error_type = envelope.get("type")
    error_cls = API_ERROR_TYPES.get(error_type or "", APIError)
    message = envelope.get("message") or DecodeError.GENERIC_MESSAGE
    return error_cls(
        message,
        error_type=error_type,
        code=envelope.get("code"),
        decline_code=envelope.get("decline_code"),
        param=envelope.get("param"),
        http_status=http_status,
        request_id=request_id,
        raw=envelope,
    )


def decode(
    object_cls: type[T],
    body: bytes | None,
    status_code: int | None = None,
    error: TransportError | None = None,
    request_id: str | None = None,
) -> tuple[Optional[T], Optional[StripeError]]:
    """
    Turn a raw response into exactly one of (object, error).

    Priority: an API error envelope in the body wins; then a transport error;
    then the decoded object; otherwise a generic "failed to parse" DecodeError.

    Args:
        object_cls: StripeObject subclass to decode into
        body: Raw response body (may be None or empty)
        status_code: HTTP status, None if no response arrived
        error: Transport error, if the request failed
        request_id: Value of the request-id header

    Returns:
        (object, None) on success, (None, error) otherwise
    """
    json_body = parse_json_body(body)

    api_error = api_error_from_response(json_body, status_code, request_id)
    if api_error is not None:
        logger.warning(
            f"API error {status_code} for {object_cls.__name__}: "
            f"type={api_error.error_type} code={api_error.code}"
        )
        return None, api_error

    if error is not None:
        return None, error

    obj = object_cls.decoded_object(json_body) if json_body is not None else None
    if obj is None or status_code is None:
        logger.warning(f"Failed to parse {object_cls.__name__} from response ({status_code})")
        return None, DecodeError.failed_to_parse_response()
    return obj, None


def decode_response(
    object_cls: type[T], response: RawResponse
) -> tuple[Optional[T], Optional[StripeError]]:
    """``decode`` applied to a RawResponse"""
    return decode(
        object_cls,
        response.body,
        status_code=response.status_code,
        error=response.error,
        request_id=response.request_id,
    )

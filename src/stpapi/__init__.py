"""
stpapi - Async client core for the Stripe payments API

Credentials and headers, form encoding, transport, response decoding,
source polling and the typed resource models.
"""

__version__ = "21.8.1"

from stpapi.client import APIClient
from stpapi.config import (
    APIConfig,
    ClientConfig,
    get_default_publishable_key,
    set_default_publishable_key,
)
from stpapi.dispatch import CompletionDispatcher
from stpapi.exceptions import (
    APIError,
    AuthenticationError,
    CardError,
    ClientSecretFormatError,
    DecodeError,
    ErrorKind,
    IdempotencyError,
    InvalidPublishableKeyError,
    InvalidRequestError,
    PollingTimeoutError,
    RateLimitError,
    ServerAPIError,
    StripeError,
    TransportError,
    UploadTooLargeError,
    ValidationError,
)
from stpapi.params import (
    AddressParams,
    BankAccountDetails,
    BankAccountParams,
    BillingDetailsParams,
    CardDetails,
    CardParams,
    ConnectAccountDetails,
    ConnectAccountParams,
    PaymentIntentParams,
    PaymentMethodParams,
    SetupIntentConfirmParams,
    SourceOwnerParams,
    SourceParams,
    SourceRedirectParams,
)
from stpapi.types import (
    AppInfo,
    CardBINMetadata,
    Customer,
    EphemeralKey,
    File,
    FilePurpose,
    FPXBankStatusResponse,
    PaymentIntent,
    PaymentIntentStatus,
    PaymentMethod,
    PaymentMethodsResult,
    PaymentMethodType,
    SetupIntent,
    SetupIntentStatus,
    Source,
    SourceFlow,
    SourceStatus,
    ThreeDS2AuthenticateResponse,
    Token,
)

__all__ = [
    "__version__",
    # Client
    "APIClient",
    "APIConfig",
    "ClientConfig",
    "CompletionDispatcher",
    "get_default_publishable_key",
    "set_default_publishable_key",
    # Exceptions
    "StripeError",
    "ErrorKind",
    "ValidationError",
    "ClientSecretFormatError",
    "InvalidPublishableKeyError",
    "UploadTooLargeError",
    "TransportError",
    "DecodeError",
    "PollingTimeoutError",
    "APIError",
    "CardError",
    "InvalidRequestError",
    "AuthenticationError",
    "RateLimitError",
    "IdempotencyError",
    "ServerAPIError",
    # Params
    "AddressParams",
    "BillingDetailsParams",
    "CardDetails",
    "CardParams",
    "BankAccountDetails",
    "BankAccountParams",
    "ConnectAccountDetails",
    "ConnectAccountParams",
    "SourceOwnerParams",
    "SourceRedirectParams",
    "SourceParams",
    "PaymentMethodParams",
    "PaymentIntentParams",
    "SetupIntentConfirmParams",
    # Types
    "AppInfo",
    "CardBINMetadata",
    "Customer",
    "EphemeralKey",
    "File",
    "FilePurpose",
    "FPXBankStatusResponse",
    "PaymentIntent",
    "PaymentIntentStatus",
    "PaymentMethod",
    "PaymentMethodsResult",
    "PaymentMethodType",
    "SetupIntent",
    "SetupIntentStatus",
    "Source",
    "SourceFlow",
    "SourceStatus",
    "ThreeDS2AuthenticateResponse",
    "Token",
]

"""
Type definitions for Stripe API objects
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class _OpenEnum(str, Enum):
    """String enum that decodes unrecognized values to UNKNOWN"""

    @classmethod
    def _missing_(cls, value: object) -> Any:
        return cls.__members__.get("UNKNOWN")


class SourceStatus(_OpenEnum):
    PENDING = "pending"
    CHARGEABLE = "chargeable"
    CONSUMED = "consumed"
    CANCELED = "canceled"
    FAILED = "failed"
    UNKNOWN = "unknown"


class SourceFlow(_OpenEnum):
    NONE = "none"
    REDIRECT = "redirect"
    CODE_VERIFICATION = "code_verification"
    RECEIVER = "receiver"
    UNKNOWN = "unknown"


class PaymentIntentStatus(_OpenEnum):
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    REQUIRES_CAPTURE = "requires_capture"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class SetupIntentStatus(_OpenEnum):
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class PaymentMethodType(_OpenEnum):
    CARD = "card"
    ALIPAY = "alipay"
    GRABPAY = "grabpay"
    IDEAL = "ideal"
    FPX = "fpx"
    SEPA_DEBIT = "sepa_debit"
    AU_BECS_DEBIT = "au_becs_debit"
    BACS_DEBIT = "bacs_debit"
    SOFORT = "sofort"
    UPI = "upi"
    BANCONTACT = "bancontact"
    GIROPAY = "giropay"
    PRZELEWY24 = "p24"
    EPS = "eps"
    OXXO = "oxxo"
    AFTERPAY_CLEARPAY = "afterpay_clearpay"
    NETBANKING = "netbanking"
    BLIK = "blik"
    WECHAT_PAY = "wechat_pay"
    BOLETO = "boleto"
    KLARNA = "klarna"
    UNKNOWN = "unknown"


class FilePurpose(_OpenEnum):
    IDENTITY_DOCUMENT = "identity_document"
    DISPUTE_EVIDENCE = "dispute_evidence"
    UNKNOWN = "unknown"


class StripeObject(BaseModel):
    """Base for every object decoded from an API response.

    Instances are immutable; ``all_response_fields`` keeps the raw JSON
    dictionary the object was decoded from.
    """

    all_response_fields: dict[str, Any] = Field(default_factory=dict, repr=False)

    class Config:
        populate_by_name = True
        frozen = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _keep_response_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and "all_response_fields" not in data:
            data = {**data, "all_response_fields": dict(data)}
        return data

    @classmethod
    def decoded_object(cls, response: Any) -> "Optional[StripeObject]":
        """
        Decode an API response dictionary.

        Args:
            response: Parsed JSON body

        Returns:
            Decoded instance, or None if the body is missing required fields
        """
        if not isinstance(response, dict):
            return None
        try:
            return cls.model_validate(response)
        except PydanticValidationError as e:
            logger.debug(f"Could not decode {cls.__name__}: {e.error_count()} error(s)")
            return None


class Address(StripeObject):
    city: Optional[str] = None
    country: Optional[str] = None
    line1: Optional[str] = None
    line2: Optional[str] = None
    postal_code: Optional[str] = None
    state: Optional[str] = None


class BillingDetails(StripeObject):
    address: Optional[Address] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class Card(StripeObject):
    """Card attached to a token"""

    id: Optional[str] = None
    brand: Optional[str] = None
    last4: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None
    funding: Optional[str] = None
    country: Optional[str] = None
    name: Optional[str] = None
    address_zip: Optional[str] = None


class BankAccount(StripeObject):
    """Bank account attached to a token"""

    id: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_holder_type: Optional[str] = None
    bank_name: Optional[str] = None
    country: Optional[str] = None
    currency: Optional[str] = None
    fingerprint: Optional[str] = None
    last4: Optional[str] = None
    routing_number: Optional[str] = None
    status: Optional[str] = None


class Token(StripeObject):
    id: str
    type: Optional[str] = None
    livemode: bool = False
    created: Optional[int] = None
    used: Optional[bool] = None
    card: Optional[Card] = None
    bank_account: Optional[BankAccount] = None


class SourceOwner(StripeObject):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None


class SourceRedirect(StripeObject):
    return_url: Optional[str] = None
    status: Optional[str] = None
    url: Optional[str] = None


class Source(StripeObject):
    id: str
    client_secret: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    created: Optional[int] = None
    flow: SourceFlow = SourceFlow.UNKNOWN
    livemode: bool = False
    status: SourceStatus = SourceStatus.UNKNOWN
    type: Optional[str] = None
    usage: Optional[str] = None
    owner: Optional[SourceOwner] = None
    redirect: Optional[SourceRedirect] = None
    metadata: dict[str, str] = Field(default_factory=dict)


class PaymentMethodCard(StripeObject):
    brand: Optional[str] = None
    country: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None
    fingerprint: Optional[str] = None
    funding: Optional[str] = None
    last4: Optional[str] = None


class PaymentMethod(StripeObject):
    id: str
    type: PaymentMethodType = PaymentMethodType.UNKNOWN
    created: Optional[int] = None
    customer: Optional[str] = None
    livemode: bool = False
    billing_details: Optional[BillingDetails] = None
    card: Optional[PaymentMethodCard] = None
    metadata: dict[str, str] = Field(default_factory=dict)


class NextAction(StripeObject):
    type: Optional[str] = None
    redirect_to_url: Optional[dict[str, Any]] = None
    use_stripe_sdk: Optional[dict[str, Any]] = None


class LastPaymentError(StripeObject):
    code: Optional[str] = None
    decline_code: Optional[str] = None
    doc_url: Optional[str] = None
    message: Optional[str] = None
    param: Optional[str] = None
    type: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None


class PaymentIntent(StripeObject):
    id: str
    client_secret: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    status: PaymentIntentStatus = PaymentIntentStatus.UNKNOWN
    capture_method: Optional[str] = None
    confirmation_method: Optional[str] = None
    canceled_at: Optional[int] = None
    cancellation_reason: Optional[str] = None
    created: Optional[int] = None
    description: Optional[str] = None
    livemode: bool = False
    next_action: Optional[NextAction] = None
    last_payment_error: Optional[LastPaymentError] = None
    payment_method: Optional[Union[PaymentMethod, str]] = None
    payment_method_types: list[str] = Field(default_factory=list)
    receipt_email: Optional[str] = None
    setup_future_usage: Optional[str] = None

    @property
    def payment_method_id(self) -> Optional[str]:
        if isinstance(self.payment_method, PaymentMethod):
            return self.payment_method.id
        return self.payment_method


class SetupIntent(StripeObject):
    id: str
    client_secret: Optional[str] = None
    status: SetupIntentStatus = SetupIntentStatus.UNKNOWN
    created: Optional[int] = None
    customer: Optional[str] = None
    description: Optional[str] = None
    livemode: bool = False
    next_action: Optional[NextAction] = None
    last_setup_error: Optional[LastPaymentError] = None
    payment_method: Optional[Union[PaymentMethod, str]] = None
    payment_method_types: list[str] = Field(default_factory=list)
    usage: Optional[str] = None


class Customer(StripeObject):
    id: str
    default_source: Optional[str] = None
    description: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    livemode: bool = False
    shipping: Optional[dict[str, Any]] = None


class File(StripeObject):
    id: str
    created: Optional[int] = None
    purpose: FilePurpose = FilePurpose.UNKNOWN
    size: Optional[int] = None
    type: Optional[str] = None


class FPXBankStatusResponse(StripeObject):
    """Online status of FPX banks, keyed by bank code"""

    bank_list_status: dict[str, bool] = Field(default_factory=dict, alias="parsed_bank_status")

    def bank_is_online(self, bank_code: str) -> bool:
        # Banks missing from the list are assumed online
        return self.bank_list_status.get(bank_code, True)


class ThreeDS2AuthenticateResponse(StripeObject):
    id: Optional[str] = None
    ares: Optional[dict[str, Any]] = None
    created: Optional[int] = None
    fallback_redirect_url: Optional[str] = None
    livemode: bool = False
    source: Optional[str] = None
    state: Optional[str] = None


class CardBINRange(StripeObject):
    account_range_high: str
    account_range_low: str
    brand: Optional[str] = None
    country: Optional[str] = None
    funding: Optional[str] = None
    pan_length: Optional[int] = None


class CardBINMetadata(StripeObject):
    ranges: list[CardBINRange] = Field(default_factory=list, alias="data")


class EmptyResponse(StripeObject):
    """Placeholder for endpoints whose body carries nothing of interest"""

    pass


class PaymentMethodListResponse(StripeObject):
    payment_methods: list[PaymentMethod] = Field(default_factory=list, alias="data")
    has_more: bool = False


class EphemeralKeyAssociatedObject(StripeObject):
    id: str
    type: str


class EphemeralKey(StripeObject):
    """Short-lived customer-scoped secret used instead of the publishable key"""

    id: str
    secret: str
    created: Optional[int] = None
    expires: Optional[int] = None
    livemode: bool = False
    associated_objects: list[EphemeralKeyAssociatedObject] = Field(default_factory=list)

    @property
    def customer_id(self) -> Optional[str]:
        for obj in self.associated_objects:
            if obj.type == "customer":
                return obj.id
        return None


class AppInfo(BaseModel):
    """Identity of a library or app wrapping this SDK, sent in X-Stripe-User-Agent"""

    name: str
    partner_id: Optional[str] = Field(None, alias="partnerId")
    version: Optional[str] = None
    url: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True


@dataclass
class PaymentMethodsResult:
    """
    Best-effort aggregate of a multi-type payment method listing.

    ``payment_methods`` holds every successfully fetched item in completion
    order; ``error`` is the last error observed, if any request failed.
    """

    payment_methods: list[PaymentMethod] = field(default_factory=list)
    error: Optional[Exception] = None

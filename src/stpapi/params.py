"""
Request parameter models.

Each model's field aliases are its form-encoding schema: ``to_parameter_tree``
in ``stpapi.encoding`` dumps a model by alias into the nested parameter tree
sent to the API.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, Field

from stpapi.types import PaymentMethodType

PAYMENT_INTENT_CLIENT_SECRET_PATTERN = re.compile(r"^pi_[^_]+_secret_[^_]+$")
SETUP_INTENT_CLIENT_SECRET_PATTERN = re.compile(r"^seti_[^_]+_secret_[^_]+$")


def id_from_client_secret(client_secret: str) -> Optional[str]:
    """Extract the resource identifier embedded in a client secret.

    Args:
        client_secret: e.g. "pi_123_secret_abc"

    Returns:
        Identifier (e.g. "pi_123"), or None if the secret has no ``_secret_`` part
    """
    identifier, sep, _ = client_secret.partition("_secret_")
    if not sep or not identifier:
        return None
    return identifier


class FormParams(BaseModel):
    """Base for parameter models.

    ``additional_api_parameters`` is merged over the encoded fields, letting
    callers send API parameters this SDK does not model yet.
    """

    additional_api_parameters: dict[str, Any] = Field(default_factory=dict, exclude=True)

    class Config:
        populate_by_name = True
        use_enum_values = True


class AddressParams(FormParams):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class BillingDetailsParams(FormParams):
    address: Optional[AddressParams] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class CardDetails(FormParams):
    number: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None
    cvc: Optional[str] = None
    name: Optional[str] = None
    currency: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zip: Optional[str] = None
    address_country: Optional[str] = None


class CardParams(FormParams):
    """Card details for creating a card token"""

    card: CardDetails


class BankAccountDetails(FormParams):
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    country: Optional[str] = None
    currency: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_holder_type: Optional[str] = None


class BankAccountParams(FormParams):
    """Bank account details for creating a bank account token"""

    bank_account: BankAccountDetails


class ConnectAccountDetails(FormParams):
    tos_shown_and_accepted: Optional[bool] = None
    business_type: Optional[str] = None
    individual: Optional[dict[str, Any]] = None
    company: Optional[dict[str, Any]] = None


class ConnectAccountParams(FormParams):
    """Connect account details for creating an account token"""

    account: ConnectAccountDetails


class SourceOwnerParams(FormParams):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[AddressParams] = None


class SourceRedirectParams(FormParams):
    return_url: str


class SourceParams(FormParams):
    type: str
    amount: Optional[int] = None
    currency: Optional[str] = None
    flow: Optional[str] = None
    usage: Optional[str] = None
    token: Optional[str] = None
    owner: Optional[SourceOwnerParams] = None
    redirect: Optional[SourceRedirectParams] = None
    metadata: Optional[dict[str, str]] = None
    type_details: Optional[dict[str, Any]] = Field(None, exclude=True)
    redirect_merchant_name: Optional[str] = Field(None, exclude=True)

    def type_specific_hash(self) -> dict[str, Any]:
        """Type-specific details keyed under the source type (e.g. ``card[number]``)"""
        details = dict(self.type_details or {})
        if self.redirect_merchant_name and self.flow == "redirect":
            details.setdefault("statement_descriptor", self.redirect_merchant_name)
        return {self.type: details} if details else {}


class PaymentMethodParams(FormParams):
    type: PaymentMethodType
    billing_details: Optional[BillingDetailsParams] = None
    card: Optional[CardDetails] = None
    type_details: Optional[dict[str, Any]] = Field(None, exclude=True)
    metadata: Optional[dict[str, str]] = None

    @property
    def raw_type_string(self) -> str:
        return PaymentMethodType(self.type).value

    def type_specific_hash(self) -> dict[str, Any]:
        """Type-specific details keyed under the payment method type"""
        if self.type_details is None or self.card is not None:
            return {}
        return {self.raw_type_string: dict(self.type_details)}


class PaymentIntentParams(FormParams):
    """Parameters for confirming a PaymentIntent. ``client_secret`` is required."""

    client_secret: str
    payment_method_id: Optional[str] = Field(None, alias="payment_method")
    payment_method_params: Optional[PaymentMethodParams] = Field(
        None, alias="payment_method_data"
    )
    source_id: Optional[str] = Field(None, alias="source")
    source_params: Optional[SourceParams] = Field(None, alias="source_data")
    receipt_email: Optional[str] = None
    save_payment_method: Optional[bool] = None
    setup_future_usage: Optional[str] = None
    return_url: Optional[str] = None
    use_stripe_sdk: Optional[bool] = None
    mandate: Optional[str] = None
    mandate_data: Optional[dict[str, Any]] = None
    payment_method_options: Optional[dict[str, Any]] = None
    shipping: Optional[dict[str, Any]] = None

    @property
    def stripe_id(self) -> Optional[str]:
        return id_from_client_secret(self.client_secret)

    @staticmethod
    def is_client_secret_valid(client_secret: str) -> bool:
        return bool(PAYMENT_INTENT_CLIENT_SECRET_PATTERN.match(client_secret))


class SetupIntentConfirmParams(FormParams):
    """Parameters for confirming a SetupIntent. ``client_secret`` is required."""

    client_secret: str
    payment_method_id: Optional[str] = Field(None, alias="payment_method")
    payment_method_params: Optional[PaymentMethodParams] = Field(
        None, alias="payment_method_data"
    )
    return_url: Optional[str] = None
    use_stripe_sdk: Optional[bool] = None
    mandate: Optional[str] = None
    mandate_data: Optional[dict[str, Any]] = None

    @staticmethod
    def is_client_secret_valid(client_secret: str) -> bool:
        return bool(SETUP_INTENT_CLIENT_SECRET_PATTERN.match(client_secret))

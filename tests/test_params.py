"""
Tests for parameter models and client secret handling
"""

from stpapi.params import (
    PaymentIntentParams,
    PaymentMethodParams,
    SetupIntentConfirmParams,
    id_from_client_secret,
)
from stpapi.types import PaymentMethodType


def test_id_from_client_secret():
    assert id_from_client_secret("pi_123_secret_abc") == "pi_123"
    assert id_from_client_secret("seti_123_secret_abc") == "seti_123"
    assert id_from_client_secret("pi_123") is None


def test_payment_intent_client_secret_format():
    assert PaymentIntentParams.is_client_secret_valid("pi_123_secret_abc")
    assert not PaymentIntentParams.is_client_secret_valid("pi_123")
    assert not PaymentIntentParams.is_client_secret_valid("seti_123_secret_abc")
    assert not PaymentIntentParams.is_client_secret_valid("pi_1_2_secret_abc")


def test_setup_intent_client_secret_format():
    assert SetupIntentConfirmParams.is_client_secret_valid("seti_123_secret_abc")
    assert not SetupIntentConfirmParams.is_client_secret_valid("pi_123_secret_abc")


def test_payment_intent_stripe_id():
    params = PaymentIntentParams(client_secret="pi_123_secret_abc")
    assert params.stripe_id == "pi_123"


def test_payment_method_raw_type_string():
    params = PaymentMethodParams(type=PaymentMethodType.PRZELEWY24)
    assert params.raw_type_string == "p24"

"""
Tests for form encoding of parameter models and trees
"""

from urllib.parse import parse_qsl

from stpapi.encoding import (
    augment_nested_hash,
    params_adding_expand,
    params_adding_payment_user_agent,
    payment_user_agent,
    query_string,
    query_string_pairs,
    to_parameter_tree,
)
from stpapi.params import (
    AddressParams,
    BillingDetailsParams,
    CardDetails,
    CardParams,
    PaymentIntentParams,
    PaymentMethodParams,
    SourceParams,
)
from stpapi.types import PaymentMethodType


class TestParameterTree:
    def test_card_params_nested_under_card(self):
        params = CardParams(card=CardDetails(number="4242424242424242", exp_month=12, cvc="123"))
        tree = to_parameter_tree(params)

        assert tree == {"card": {"number": "4242424242424242", "exp_month": 12, "cvc": "123"}}

    def test_none_fields_are_omitted(self):
        tree = to_parameter_tree(AddressParams(city="Berlin"))
        assert tree == {"city": "Berlin"}

    def test_fields_use_aliases(self):
        params = PaymentIntentParams(
            client_secret="pi_123_secret_abc",
            payment_method_id="pm_123",
            source_id="src_123",
        )
        tree = to_parameter_tree(params)

        assert tree["payment_method"] == "pm_123"
        assert tree["source"] == "src_123"
        assert "payment_method_id" not in tree

    def test_additional_api_parameters_override_fields(self):
        params = AddressParams(city="Berlin", additional_api_parameters={"city": "Paris", "x": 1})
        tree = to_parameter_tree(params)

        assert tree == {"city": "Paris", "x": 1}
        assert "additional_api_parameters" not in tree

    def test_payment_method_type_details(self):
        params = PaymentMethodParams(
            type=PaymentMethodType.IDEAL,
            type_details={"bank": "abn_amro"},
            billing_details=BillingDetailsParams(name="Jenny"),
        )
        tree = to_parameter_tree(params)

        assert tree["type"] == "ideal"
        assert tree["ideal"] == {"bank": "abn_amro"}
        assert tree["billing_details"] == {"name": "Jenny"}
        assert "type_details" not in tree

    def test_source_redirect_merchant_name(self):
        params = SourceParams(
            type="sofort",
            flow="redirect",
            type_details={"country": "DE"},
            redirect_merchant_name="Example Co",
        )
        tree = to_parameter_tree(params)

        assert tree["sofort"] == {"country": "DE", "statement_descriptor": "Example Co"}
        assert "redirect_merchant_name" not in tree


class TestQueryString:
    def test_nested_keys_use_brackets(self):
        pairs = query_string_pairs({"card": {"number": "4242", "exp_month": 12}})
        assert pairs == [("card[number]", "4242"), ("card[exp_month]", "12")]

    def test_lists_are_indexed(self):
        pairs = query_string_pairs({"expand": ["payment_method", "source"]})
        assert pairs == [("expand[0]", "payment_method"), ("expand[1]", "source")]

    def test_booleans_are_lowercase(self):
        pairs = query_string_pairs({"use_stripe_sdk": True, "save": False})
        assert pairs == [("use_stripe_sdk", "true"), ("save", "false")]

    def test_values_are_percent_encoded(self):
        encoded = query_string({"owner": {"email": "jenny+1@example.com"}})

        assert encoded == "owner[email]=jenny%2B1%40example.com"
        assert dict(parse_qsl(encoded)) == {"owner[email]": "jenny+1@example.com"}

    def test_empty_tree(self):
        assert query_string({}) == ""


class TestParameterHelpers:
    def test_payment_user_agent_sorts_product_usage(self):
        agent = payment_user_agent({"b_tag", "a_tag"})
        assert agent.endswith("; a_tag; b_tag")
        assert agent.startswith("stpapi-python/")

    def test_adding_payment_user_agent_copies(self):
        original = {"type": "card"}
        updated = params_adding_payment_user_agent(original)

        assert "payment_user_agent" in updated
        assert original == {"type": "card"}

    def test_expand_only_when_non_empty(self):
        assert params_adding_expand({"a": 1}, []) == {"a": 1}
        assert params_adding_expand({"a": 1}, None) == {"a": 1}
        assert params_adding_expand({"a": 1}, ["payment_method"]) == {
            "a": 1,
            "expand": ["payment_method"],
        }

    def test_augment_nested_hash_leaves_siblings(self):
        tree = {"payment_method_data": {"type": "card"}, "return_url": "x://y"}
        updated = augment_nested_hash(tree, "payment_method_data", lambda d: {**d, "muid": "m"})

        assert updated == {
            "payment_method_data": {"type": "card", "muid": "m"},
            "return_url": "x://y",
        }
        assert tree["payment_method_data"] == {"type": "card"}

    def test_augment_nested_hash_missing_key(self):
        tree = {"return_url": "x://y"}
        assert augment_nested_hash(tree, "source_data", lambda d: {"never": True}) == tree

"""
Form encoding for Stripe API parameters
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Callable
from urllib.parse import quote

from pydantic import BaseModel

from stpapi.config import APIConfig

ParameterTree = dict[str, Any]


def _encode_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return to_parameter_tree(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _encode_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v) for v in value if v is not None]
    return value


def to_parameter_tree(params: BaseModel) -> ParameterTree:
    """
    Convert a parameter model into a nested parameter tree.

    Fields are keyed by alias; ``None`` fields and excluded fields are dropped.
    A model may contribute extra keys through ``type_specific_hash()``, and
    ``additional_api_parameters`` is merged last.

    Args:
        params: Parameter model instance

    Returns:
        Nested dict of strings, numbers, booleans, dicts and lists
    """
    tree: ParameterTree = {}
    for name, field in type(params).model_fields.items():
        if field.exclude:
            continue
        value = getattr(params, name)
        if value is None:
            continue
        tree[field.alias or name] = _encode_value(value)

    type_specific_hash = getattr(params, "type_specific_hash", None)
    if callable(type_specific_hash):
        for key, value in type_specific_hash().items():
            tree.setdefault(key, _encode_value(value))

    additional = getattr(params, "additional_api_parameters", None)
    if additional:
        tree.update(_encode_value(additional))
    return tree


def _query_string_pairs(value: Any, field_name: str) -> list[tuple[str, str]]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        pairs: list[tuple[str, str]] = []
        for key, nested in value.items():
            nested_name = f"{field_name}[{key}]" if field_name else str(key)
            pairs.extend(_query_string_pairs(nested, nested_name))
        return pairs
    if isinstance(value, (list, tuple)):
        pairs = []
        for index, nested in enumerate(value):
            pairs.extend(_query_string_pairs(nested, f"{field_name}[{index}]"))
        return pairs
    if isinstance(value, bool):
        return [(field_name, "true" if value else "false")]
    if isinstance(value, Enum):
        return [(field_name, str(value.value))]
    return [(field_name, str(value))]


def query_string_pairs(tree: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten a parameter tree into bracket-notation key/value pairs"""
    return _query_string_pairs(tree, "")


def query_string(tree: Mapping[str, Any]) -> str:
    """
    Serialize a parameter tree as an application/x-www-form-urlencoded string.

    Nested mappings use ``parent[child]`` keys, sequences use ``parent[index]``.

    Args:
        tree: Parameter tree

    Returns:
        Encoded string (no leading ``?``)
    """
    return "&".join(
        f"{quote(key, safe='[]')}={quote(value, safe='')}"
        for key, value in query_string_pairs(tree)
    )


def payment_user_agent(product_usage: Iterable[str] = ()) -> str:
    """SDK identifier plus product usage tags, ``; ``-joined in sorted order"""
    components = [f"stpapi-python/{APIConfig.SDK_VERSION}", *sorted(set(product_usage))]
    return "; ".join(components)


def params_adding_payment_user_agent(
    params: Mapping[str, Any], product_usage: Iterable[str] = ()
) -> ParameterTree:
    """Return a copy of ``params`` with ``payment_user_agent`` set"""
    new_params = dict(params)
    new_params["payment_user_agent"] = payment_user_agent(product_usage)
    return new_params


def params_adding_expand(
    params: Mapping[str, Any], expand: Iterable[str] | None
) -> ParameterTree:
    """Return a copy of ``params`` with ``expand`` set when the sequence is non-empty"""
    new_params = dict(params)
    expand_list = list(expand or [])
    if expand_list:
        new_params["expand"] = expand_list
    return new_params


def augment_nested_hash(
    params: Mapping[str, Any],
    key: str,
    transform: Callable[[ParameterTree], ParameterTree],
) -> ParameterTree:
    """
    Apply ``transform`` to the nested mapping at ``key``, leaving siblings untouched.

    Args:
        params: Parameter tree
        key: Nested hash key (e.g. "payment_method_data")
        transform: Function receiving a copy of the nested mapping

    Returns:
        New tree; identical to ``params`` if ``key`` is absent or not a mapping
    """
    new_params = dict(params)
    nested = new_params.get(key)
    if isinstance(nested, Mapping):
        new_params[key] = transform(dict(nested))
    return new_params

"""Parameter Values - Tagged JSON values carried by node parameters

Node parameters are arbitrary JSON in the interchange format. Inside the
engine every value is one of the ValueKind tags; pydantic rejects any other
shape when a Node is built, so the helpers below are exhaustive.
"""
import copy
from typing import Any, Dict

from pydantic import JsonValue

from .enums import ValueKind
from .errors import InvalidInputError

ParameterValue = JsonValue
Parameters = Dict[str, JsonValue]


def value_kind(value: Any) -> ValueKind:
    """
    Classify a parameter value

    Raises:
        InvalidInputError: If the value is not a JSON value
    """
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, test it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise InvalidInputError(
        f"Unsupported parameter value of type {type(value).__name__}",
        details={"python_type": type(value).__name__}
    )


def is_empty_value(value: Any) -> bool:
    """True when a parameter counts as absent: null, blank string, empty list or mapping"""
    kind = value_kind(value)
    if kind == ValueKind.NULL:
        return True
    if kind == ValueKind.STRING:
        return value.strip() == ""
    if kind in (ValueKind.SEQUENCE, ValueKind.MAPPING):
        return len(value) == 0
    return False


def clone_value(value: JsonValue) -> JsonValue:
    """Deep copy a value so repaired graphs never share state with the registry"""
    return copy.deepcopy(value)

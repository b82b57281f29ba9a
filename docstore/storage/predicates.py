from typing import Any, Dict, Mapping

from .errors import InvalidPayload

SCALAR_TYPES = (str, int, float, bool, type(None))

_MISSING = object()


def validate_predicate(predicate: Any) -> Dict[str, Any]:
    """Check a filter predicate is a mapping of field name -> scalar JSON value."""
    if not isinstance(predicate, Mapping):
        raise InvalidPayload("filter must be a JSON object")
    out = {}
    for key, value in predicate.items():
        if not isinstance(key, str):
            raise InvalidPayload("filter keys must be strings")
        if not isinstance(value, SCALAR_TYPES):
            raise InvalidPayload(f"filter value for {key!r} must be a scalar")
        out[key] = value
    return out


def json_equal(a: Any, b: Any) -> bool:
    """Equality with JSON types: booleans never equal numbers, ints equal floats."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b


def matches(document: Mapping[str, Any], predicate: Mapping[str, Any]) -> bool:
    # Missing fields never match, not even a null predicate value.
    for key, expected in predicate.items():
        actual = document.get(key, _MISSING)
        if actual is _MISSING or not json_equal(actual, expected):
            return False
    return True

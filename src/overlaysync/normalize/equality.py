"""Shallow structural equality used to gate engine setter calls."""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping, Sequence
from typing import Any

_SCALARS = (str, bytes, int, float, complex, bool, type(None))


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _is_value(value: Any) -> bool:
    if isinstance(value, _SCALARS):
        return True
    if isinstance(value, tuple):
        return all(_is_value(item) for item in value)
    return False


def same_value(a: Any, b: Any) -> bool:
    """Identity, with NaN equal to itself and immutable values compared by value."""
    if a is b:
        return True
    if _is_nan(a) and _is_nan(b):
        return True
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if _is_value(a) and _is_value(b):
        return a == b
    return False


def _own_fields(value: Any) -> dict[Any, Any] | None:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return dict(enumerate(value))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if hasattr(value, "__dict__"):
        return {key: item for key, item in vars(value).items() if not key.startswith("_")}
    return None


def is_shallow_equal(a: Any, b: Any) -> bool:
    """Compare two values one level deep.

    Values are equal when they are the same value, or when both expose the
    same set of own fields (mapping keys, sequence indices, public instance
    attributes) and every pair of field values is the same value.
    """
    if same_value(a, b):
        return True
    if callable(a) or callable(b):
        return False

    fields_a = _own_fields(a)
    fields_b = _own_fields(b)
    if fields_a is None or fields_b is None:
        return False
    if fields_a.keys() != fields_b.keys():
        return False
    return all(same_value(fields_a[key], fields_b[key]) for key in fields_a)

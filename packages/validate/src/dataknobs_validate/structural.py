"""Structural helpers shared by all validators.

Values are classified by shape rather than by concrete type: anything that is
a ``Mapping`` is treated as an object, ``list`` and ``tuple`` as arrays, and
everything else as a scalar.
"""

from __future__ import annotations

import datetime
import json
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from dataknobs_config import deep_merge


class _Undefined:
    """Marker for an absent value (a missing object key or an omitted argument)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict) -> _Undefined:
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

CIRCULAR_MARKER = "[Circular]"


class StructuralKind(str, Enum):
    """Shape of a runtime value."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def classify(value: Any) -> StructuralKind:
    if isinstance(value, Mapping):
        return StructuralKind.MAPPING
    if isinstance(value, (list, tuple)):
        return StructuralKind.SEQUENCE
    return StructuralKind.SCALAR


def is_undefined(value: Any) -> bool:
    return value is UNDEFINED


def is_number(value: Any) -> bool:
    """True for ints and floats, never for booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Name a value's runtime kind the way messages report it."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "number"
    if isinstance(value, float):
        return "nan" if math.isnan(value) else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if isinstance(value, datetime.datetime):
        return "date"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    if callable(value):
        return "function"
    return type(value).__name__


def stable_key(value: Any) -> str:
    """Build a structural identity key for uniqueness checks.

    Mapping keys are sorted so that ``{"a": 1, "b": 2}`` and ``{"b": 2, "a": 1}``
    collide. A container that contains itself is replaced by the
    ``"[Circular]"`` marker, so two different cyclic structures can produce
    the same key.
    """
    return json.dumps(_normalize(value, set()), sort_keys=True, default=repr)


def _normalize(value: Any, active: set[int]) -> Any:
    if isinstance(value, (Mapping, list, tuple)):
        marker = id(value)
        if marker in active:
            return CIRCULAR_MARKER
        active.add(marker)
        try:
            if isinstance(value, Mapping):
                return {str(k): _normalize(v, active) for k, v in value.items()}
            return [_normalize(item, active) for item in value]
        finally:
            active.discard(marker)
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        # keep 1 and 1.0 identical, as numeric equality does
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, float) and not math.isfinite(value):
            return repr(value)
        return value
    return f"{type(value).__name__}:{value!r}"


def merge_mappings(left: Mapping[str, Any], right: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two parsed objects; nested mappings merge, right wins otherwise."""
    return deep_merge(_as_dict(left), _as_dict(right))


def _as_dict(value: Mapping[str, Any]) -> dict[str, Any]:
    return {
        k: _as_dict(v) if isinstance(v, Mapping) else v
        for k, v in value.items()
    }

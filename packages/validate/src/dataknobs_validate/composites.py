"""Collection validators: arrays, tuples, sets, maps and records.

Element failures abort the collection at the first invalid element and are
reported under that element's index or key.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .base import ParseContext, Validator
from .checks import Check, Length
from .primitives import EnumValidator, LiteralValidator, StringValidator
from .result import ErrorKind, ParseResult
from .structural import UNDEFINED, stable_key, type_name


def _unhashable(ctx: ParseContext, origin: str, value: Any) -> ParseResult:
    return ctx.fail(
        ErrorKind.INVALID_VALUE, origin=origin, check="unhashable", received=type_name(value),
    )


def _key_segment(key: Any) -> str | int:
    if isinstance(key, (str, int)) and not isinstance(key, bool):
        return key
    return repr(key)


@dataclass(frozen=True, eq=False)
class ArrayValidator(Validator):
    """Accepts lists or tuples whose items all satisfy ``element``; outputs a list.

    Length checks run before any element is visited. ``unique()`` runs last,
    on the validated items.
    """

    element: Validator
    checks: tuple[Check, ...] = ()
    unique_items: bool = False
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, (list, tuple)):
            return ctx.fail_kind("array", value, self.message)

        checked = ctx.run_checks(self.checks, value, "array")
        if not checked.success:
            return checked

        items = []
        for index, item in enumerate(value):
            result = self.element._validate(item, ctx)
            if not result.success:
                return result.prefixed(index)
            items.append(result.data)

        if self.unique_items:
            seen: set[str] = set()
            for index, item in enumerate(items):
                key = stable_key(item)
                if key in seen:
                    return ParseResult.fail([
                        ctx.issue(ErrorKind.NOT_UNIQUE, origin="array", check="unique", index=index)
                    ])
                seen.add(key)
        return ParseResult.ok(items)

    def _check(self, check: Check) -> ArrayValidator:
        return self._with(checks=(*self.checks, check))

    def min(self, length: int, message: str | None = None) -> ArrayValidator:
        return self._check(Length("min", minimum=length, message=message))

    def max(self, length: int, message: str | None = None) -> ArrayValidator:
        return self._check(Length("max", maximum=length, message=message))

    def length(self, length: int, message: str | None = None) -> ArrayValidator:
        return self._check(Length("length", length, length, message=message))

    def between(self, minimum: int, maximum: int, message: str | None = None) -> ArrayValidator:
        return self.min(minimum, message).max(maximum, message)

    def nonempty(self, message: str | None = None) -> ArrayValidator:
        return self._check(Length("nonempty", minimum=1, message=message))

    def unique(self) -> ArrayValidator:
        return self._with(unique_items=True)


@dataclass(frozen=True, eq=False)
class TupleValidator(Validator):
    """Fixed-length sequence with one validator per position; outputs a tuple."""

    items: tuple[Validator, ...]
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, (list, tuple)):
            return ctx.fail_kind("tuple", value, self.message)
        if len(value) != len(self.items):
            return ctx.fail(
                ErrorKind.TUPLE_LENGTH,
                origin="tuple",
                expected=len(self.items),
                received=len(value),
            )
        output = []
        for index, (validator, item) in enumerate(zip(self.items, value)):
            result = validator._validate(item, ctx)
            if not result.success:
                return result.prefixed(index)
            output.append(result.data)
        return ParseResult.ok(tuple(output))


@dataclass(frozen=True, eq=False)
class SetValidator(Validator):
    """Accepts sets whose members all satisfy ``element``.

    Member failures carry no path segment because sets are unordered.
    """

    element: Validator
    checks: tuple[Check, ...] = ()
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, (set, frozenset)):
            return ctx.fail_kind("set", value, self.message)
        checked = ctx.run_checks(self.checks, value, "set")
        if not checked.success:
            return checked
        output = set()
        for item in value:
            result = self.element._validate(item, ctx)
            if not result.success:
                return result
            try:
                output.add(result.data)
            except TypeError:
                return _unhashable(ctx, "set", result.data)
        return ParseResult.ok(output)

    def _check(self, check: Check) -> SetValidator:
        return self._with(checks=(*self.checks, check))

    def min(self, size: int, message: str | None = None) -> SetValidator:
        return self._check(Length("min", minimum=size, message=message))

    def max(self, size: int, message: str | None = None) -> SetValidator:
        return self._check(Length("max", maximum=size, message=message))

    def size(self, size: int, message: str | None = None) -> SetValidator:
        return self._check(Length("length", size, size, message=message))

    def nonempty(self, message: str | None = None) -> SetValidator:
        return self._check(Length("nonempty", minimum=1, message=message))


@dataclass(frozen=True, eq=False)
class MapValidator(Validator):
    """Accepts any mapping, validating every key and every value; outputs a dict."""

    key: Validator
    value: Validator
    message: str | None = None
    origin: str = "map"

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, Mapping):
            return ctx.fail_kind(self.origin, value, self.message)
        output = {}
        for raw_key, raw_value in value.items():
            failure = self._add_entry(output, raw_key, raw_value, ctx)
            if failure is not None:
                return failure
        return ParseResult.ok(output)

    def _add_entry(self, output: dict, raw_key: Any, raw_value: Any, ctx: ParseContext) -> ParseResult | None:
        """Validate one entry into ``output``, returning the failure if there is one."""
        segment = _key_segment(raw_key)
        key_result = self.key._validate(raw_key, ctx)
        if not key_result.success:
            return key_result.prefixed(segment)
        value_result = self.value._validate(raw_value, ctx)
        if not value_result.success:
            return value_result.prefixed(segment)
        try:
            output[key_result.data] = value_result.data
        except TypeError:
            return _unhashable(ctx, self.origin, key_result.data).prefixed(segment)
        return None


def _finite_keys(key: Validator) -> tuple[Any, ...]:
    if isinstance(key, EnumValidator):
        return key.values
    if isinstance(key, LiteralValidator):
        return (key.value,)
    return ()


@dataclass(frozen=True, eq=False)
class RecordValidator(MapValidator):
    """Mapping with string keys (by default) and uniformly validated values.

    When the key validator is an enum or a literal, every one of its keys is
    expected: a missing key is validated as the absent value, so it fails
    unless the value validator is optional. ``partial()`` lifts that rule
    and ``loose()`` copies entries whose key fails the key validator through
    unchanged.
    """

    key: Validator = StringValidator()
    value: Validator = None  # type: ignore[assignment]
    origin: str = "record"
    exhaustive: bool = True
    loose_keys: bool = False

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Record requires a value validator")

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = super()._validate(value, ctx)
        if not result.success or not self.exhaustive:
            return result
        for key in _finite_keys(self.key):
            if key in value:
                continue
            missing = self.value._validate(UNDEFINED, ctx)
            if not missing.success:
                return missing.prefixed(_key_segment(key))
            if missing.data is not UNDEFINED:
                result.data[key] = missing.data
        return result

    def _add_entry(self, output: dict, raw_key: Any, raw_value: Any, ctx: ParseContext) -> ParseResult | None:
        if self.loose_keys and not self.key._validate(raw_key, ctx).success:
            output[raw_key] = raw_value
            return None
        return super()._add_entry(output, raw_key, raw_value, ctx)

    def partial(self) -> RecordValidator:
        """Stop requiring every key of an enum or literal key validator."""
        return self._with(exhaustive=False)

    def loose(self) -> RecordValidator:
        """Pass entries with unrecognized keys through instead of failing."""
        return self._with(loose_keys=True)

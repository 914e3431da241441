"""Validators for single runtime kinds: strings, numbers, dates and friends.

Each validator first checks the kind of the value, then applies its checks
in the order they were added, stopping at the first failure.
"""

from __future__ import annotations

import datetime
import enum
import ipaddress
import json
import math
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .base import ParseContext, Validator
from .checks import Check, Length, MultipleOf, Pattern, Predicate, Range
from .exceptions import SchemaDefinitionError
from .formats import HASH_LENGTHS, STRING_FORMATS, hash_matcher
from .result import ErrorKind, ParseResult
from .structural import UNDEFINED, is_number

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
URL_REGEX = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)

MAX_SAFE_INTEGER = 2**53 - 1


def parse_iso_datetime(text: str) -> datetime.datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC."""
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(text)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Treat naive datetimes as UTC so that all dates are comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def _is_ip(text: str, version: int | None = None) -> bool:
    try:
        address = ipaddress.ip_address(text)
    except ValueError:
        return False
    return version is None or address.version == version


def _is_iso_datetime(text: str) -> bool:
    try:
        parse_iso_datetime(text)
    except ValueError:
        return False
    return "T" in text or " " in text


def _is_integral(value: Any) -> bool:
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def _is_safe_integer(value: Any) -> bool:
    return _is_integral(value) and abs(value) <= MAX_SAFE_INTEGER


def _is_odd(value: Any) -> bool:
    if isinstance(value, int):
        return value % 2 == 1
    if not math.isfinite(value):
        return False
    return abs(math.fmod(value, 2)) == 1


def literal_equal(expected: Any, value: Any) -> bool:
    """Equality that keeps booleans, numbers and strings apart (``True`` is not ``1``)."""
    if expected is UNDEFINED or expected is None:
        return value is expected
    if isinstance(expected, bool) or isinstance(value, bool):
        return isinstance(expected, bool) and isinstance(value, bool) and expected is value
    if is_number(expected):
        return is_number(value) and value == expected
    return type(value) is type(expected) and value == expected


class CheckedValidator(Validator):
    """Validator that owns an ordered tuple of checks."""

    checks: tuple[Check, ...]

    def _check(self, check: Check) -> Any:
        return self._with(checks=(*self.checks, check))


@dataclass(frozen=True, eq=False)
class StringValidator(CheckedValidator):
    """Accepts ``str`` values."""

    checks: tuple[Check, ...] = ()
    transforms: tuple[tuple[str, Callable[[str], str]], ...] = ()
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, str):
            return ctx.fail_kind("string", value, self.message)
        for _, fn in self.transforms:
            value = fn(value)
        return ctx.run_checks(self.checks, value, "string")

    def _transform(self, name: str, fn: Callable[[str], str]) -> StringValidator:
        return self._with(transforms=(*self.transforms, (name, fn)))

    def trim(self) -> StringValidator:
        return self._transform("trim", str.strip)

    def to_lower(self) -> StringValidator:
        return self._transform("to_lower", str.lower)

    def to_upper(self) -> StringValidator:
        return self._transform("to_upper", str.upper)

    def min(self, length: int, message: str | None = None) -> StringValidator:
        return self._check(Length("min", minimum=length, message=message))

    def max(self, length: int, message: str | None = None) -> StringValidator:
        return self._check(Length("max", maximum=length, message=message))

    def length(self, length: int, message: str | None = None) -> StringValidator:
        return self._check(Length("length", length, length, message=message))

    def nonempty(self, message: str | None = None) -> StringValidator:
        return self._check(Length("nonempty", minimum=1, message=message))

    def email(self, message: str | None = None) -> StringValidator:
        return self._check(Pattern(EMAIL_REGEX, "email", message))

    def url(self, message: str | None = None) -> StringValidator:
        return self._check(Pattern(URL_REGEX, "url", message))

    def uuid(self, message: str | None = None) -> StringValidator:
        return self._check(Pattern(UUID_REGEX, "uuid", message))

    def regex(self, pattern: str | re.Pattern, message: str | None = None) -> StringValidator:
        return self._check(Pattern(pattern, "regex", message))

    def starts_with(self, prefix: str, message: str | None = None) -> StringValidator:
        return self._check(Predicate(
            "starts_with", lambda s: s.startswith(prefix),
            ErrorKind.FORMAT_VIOLATION, message, prefix=prefix,
        ))

    def ends_with(self, suffix: str, message: str | None = None) -> StringValidator:
        return self._check(Predicate(
            "ends_with", lambda s: s.endswith(suffix),
            ErrorKind.FORMAT_VIOLATION, message, suffix=suffix,
        ))

    def includes(self, substring: str, message: str | None = None) -> StringValidator:
        return self._check(Predicate(
            "includes", lambda s: substring in s,
            ErrorKind.FORMAT_VIOLATION, message, substring=substring,
        ))

    def ip(self, message: str | None = None) -> StringValidator:
        return self._check(Predicate("ip", _is_ip, ErrorKind.FORMAT_VIOLATION, message))

    def ipv4(self, message: str | None = None) -> StringValidator:
        return self._check(Predicate(
            "ipv4", lambda s: _is_ip(s, 4), ErrorKind.FORMAT_VIOLATION, message,
        ))

    def ipv6(self, message: str | None = None) -> StringValidator:
        return self._check(Predicate(
            "ipv6", lambda s: _is_ip(s, 6), ErrorKind.FORMAT_VIOLATION, message,
        ))

    def datetime(self, message: str | None = None) -> StringValidator:
        return self._check(Predicate(
            "datetime", _is_iso_datetime, ErrorKind.FORMAT_VIOLATION, message,
        ))

    def format(self, name: str, message: str | None = None) -> StringValidator:
        """Add a check for one of the named formats in ``STRING_FORMATS``.

        Raises:
            SchemaDefinitionError: If no format has that name
        """
        if name not in STRING_FORMATS:
            raise SchemaDefinitionError(f"Unknown string format: {name}")
        return self.custom_format(name, STRING_FORMATS[name], message)

    def custom_format(
        self,
        name: str,
        test: str | re.Pattern | Callable[[str], bool],
        message: str | None = None,
    ) -> StringValidator:
        """Add a format check from a regex (searched) or a predicate."""
        if not callable(test):
            regex = re.compile(test) if isinstance(test, str) else test
            test = lambda s: regex.search(s) is not None  # noqa: E731
        return self._check(Predicate(
            "format", test, ErrorKind.FORMAT_VIOLATION, message, format=name,
        ))

    def hash(self, algorithm: str = "sha256", message: str | None = None) -> StringValidator:
        """Require a hex digest of the given algorithm (md5, sha1, sha256, sha384, sha512)."""
        if algorithm not in HASH_LENGTHS:
            raise SchemaDefinitionError(f"Unknown hash algorithm: {algorithm}")
        return self._check(Predicate(
            "hash", hash_matcher(algorithm), ErrorKind.FORMAT_VIOLATION, message,
            algorithm=algorithm,
        ))


@dataclass(frozen=True, eq=False)
class NumberValidator(CheckedValidator):
    """Accepts ints and floats; rejects booleans and NaN.

    Infinities pass the kind check and are rejected only by ``finite()``.
    """

    checks: tuple[Check, ...] = ()
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not is_number(value) or (isinstance(value, float) and math.isnan(value)):
            return ctx.fail_kind("number", value, self.message)
        return ctx.run_checks(self.checks, value, "number")

    def min(self, value: float, message: str | None = None) -> NumberValidator:
        return self._check(Range("min", minimum=value, message=message))

    gte = min

    def max(self, value: float, message: str | None = None) -> NumberValidator:
        return self._check(Range("max", maximum=value, message=message))

    lte = max

    def gt(self, value: float, message: str | None = None) -> NumberValidator:
        return self._check(Range("gt", minimum=value, min_exclusive=True, message=message))

    def lt(self, value: float, message: str | None = None) -> NumberValidator:
        return self._check(Range("lt", maximum=value, max_exclusive=True, message=message))

    def between(self, minimum: float, maximum: float, message: str | None = None) -> NumberValidator:
        return self.min(minimum, message).max(maximum, message)

    def int(self, message: str | None = None) -> NumberValidator:
        return self._check(Predicate("int", _is_integral, ErrorKind.INVALID_KIND, message))

    def positive(self, message: str | None = None) -> NumberValidator:
        return self._check(Range("positive", minimum=0, min_exclusive=True, message=message))

    def negative(self, message: str | None = None) -> NumberValidator:
        return self._check(Range("negative", maximum=0, max_exclusive=True, message=message))

    def nonnegative(self, message: str | None = None) -> NumberValidator:
        return self._check(Range("nonnegative", minimum=0, message=message))

    def nonpositive(self, message: str | None = None) -> NumberValidator:
        return self._check(Range("nonpositive", maximum=0, message=message))

    def finite(self, message: str | None = None) -> NumberValidator:
        return self._check(Predicate("finite", math.isfinite, message=message))

    def safe(self, message: str | None = None) -> NumberValidator:
        return self._check(Predicate("safe", _is_safe_integer, message=message))

    def multiple_of(self, divisor: float, message: str | None = None) -> NumberValidator:
        return self._check(MultipleOf(divisor, message=message))

    step = multiple_of

    def even(self, message: str | None = None) -> NumberValidator:
        return self._check(MultipleOf(2, "even", message))

    def odd(self, message: str | None = None) -> NumberValidator:
        return self._check(Predicate(
            "odd", _is_odd, ErrorKind.NOT_MULTIPLE_OF, message,
        ))


@dataclass(frozen=True, eq=False)
class BigIntValidator(CheckedValidator):
    """Accepts arbitrary precision integers (``int``, never ``bool``)."""

    checks: tuple[Check, ...] = ()
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, int) or isinstance(value, bool):
            return ctx.fail_kind("bigint", value, self.message)
        return ctx.run_checks(self.checks, value, "bigint")

    def min(self, value: int, message: str | None = None) -> BigIntValidator:
        return self._check(Range("min", minimum=value, message=message))

    def max(self, value: int, message: str | None = None) -> BigIntValidator:
        return self._check(Range("max", maximum=value, message=message))

    def positive(self, message: str | None = None) -> BigIntValidator:
        return self._check(Range("positive", minimum=0, min_exclusive=True, message=message))

    def negative(self, message: str | None = None) -> BigIntValidator:
        return self._check(Range("negative", maximum=0, max_exclusive=True, message=message))

    def nonnegative(self, message: str | None = None) -> BigIntValidator:
        return self._check(Range("nonnegative", minimum=0, message=message))

    def nonpositive(self, message: str | None = None) -> BigIntValidator:
        return self._check(Range("nonpositive", maximum=0, message=message))

    def multiple_of(self, divisor: int, message: str | None = None) -> BigIntValidator:
        return self._check(MultipleOf(divisor, message=message))


@dataclass(frozen=True, eq=False)
class BooleanValidator(Validator):
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, bool):
            return ctx.fail_kind("boolean", value, self.message)
        return ParseResult.ok(value)


@dataclass(frozen=True, eq=False)
class DateValidator(CheckedValidator):
    """Accepts ``datetime.datetime`` values.

    Bounds are inclusive. Naive datetimes are compared as if they were UTC.
    """

    checks: tuple[Check, ...] = ()
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, datetime.datetime):
            return ctx.fail_kind("date", value, self.message)
        return ctx.run_checks(self.checks, value, "date")

    def min(self, value: datetime.datetime, message: str | None = None) -> DateValidator:
        return self._check(Range("min", minimum=as_utc(value), message=message, measure=as_utc))

    def max(self, value: datetime.datetime, message: str | None = None) -> DateValidator:
        return self._check(Range("max", maximum=as_utc(value), message=message, measure=as_utc))

    def between(
        self,
        minimum: datetime.datetime,
        maximum: datetime.datetime,
        message: str | None = None,
    ) -> DateValidator:
        return self.min(minimum, message).max(maximum, message)


@dataclass(frozen=True, eq=False)
class BytesValidator(CheckedValidator):
    """Accepts ``bytes`` or ``bytearray``; the output is always ``bytes``."""

    checks: tuple[Check, ...] = ()
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, (bytes, bytearray)):
            return ctx.fail_kind("bytes", value, self.message)
        return ctx.run_checks(self.checks, bytes(value), "bytes")

    def min(self, length: int, message: str | None = None) -> BytesValidator:
        return self._check(Length("min", minimum=length, message=message))

    def max(self, length: int, message: str | None = None) -> BytesValidator:
        return self._check(Length("max", maximum=length, message=message))

    def length(self, length: int, message: str | None = None) -> BytesValidator:
        return self._check(Length("length", length, length, message=message))


class Symbol:
    """Unique token compared by identity."""

    def __init__(self, description: str | None = None):
        self.description = description

    def __repr__(self) -> str:
        return f"Symbol({self.description or ''})"


@dataclass(frozen=True, eq=False)
class SymbolValidator(Validator):
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, Symbol):
            return ctx.fail_kind("symbol", value, self.message)
        return ParseResult.ok(value)


@dataclass(frozen=True, eq=False)
class LiteralValidator(Validator):
    """Accepts exactly one value."""

    value: Any
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not literal_equal(self.value, value):
            return ctx.fail(
                ErrorKind.INVALID_VALUE,
                self.message,
                origin="literal",
                expected=self.value,
                received=value,
            )
        return ParseResult.ok(value)


@dataclass(frozen=True, eq=False)
class EnumValidator(Validator):
    """Accepts any one of a fixed set of literal values."""

    values: tuple[Any, ...]
    message: str | None = None

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("Enum requires at least one allowed value")

    @property
    def options(self) -> list[Any]:
        return list(self.values)

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not any(literal_equal(option, value) for option in self.values):
            return ctx.fail(
                ErrorKind.INVALID_VALUE,
                self.message,
                origin="enum",
                values=list(self.values),
                received=value,
            )
        return ParseResult.ok(value)

    def extract(self, *values: Any) -> EnumValidator:
        """Narrow to a subset of the options."""
        unknown = [v for v in values if not self._has(v)]
        if unknown:
            raise ValueError(f"Values not in enum: {unknown}")
        return EnumValidator(tuple(values), self.message)

    def exclude(self, *values: Any) -> EnumValidator:
        """Drop some options."""
        return EnumValidator(
            tuple(o for o in self.values if not any(literal_equal(v, o) for v in values)),
            self.message,
        )

    def _has(self, value: Any) -> bool:
        return any(literal_equal(option, value) for option in self.values)


@dataclass(frozen=True, eq=False)
class NativeEnumValidator(Validator):
    """Accepts members of a Python ``Enum`` class, or their values; returns the member."""

    enum_class: type[enum.Enum]
    message: str | None = None

    @property
    def options(self) -> list[enum.Enum]:
        return list(self.enum_class)

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if isinstance(value, self.enum_class):
            return ParseResult.ok(value)
        for member in self.enum_class:
            if literal_equal(member.value, value):
                return ParseResult.ok(member)
        return ctx.fail(
            ErrorKind.INVALID_VALUE,
            self.message,
            origin="enum",
            values=[m.value for m in self.enum_class],
            received=value,
        )


@dataclass(frozen=True, eq=False)
class AnyValidator(Validator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return ParseResult.ok(value)


@dataclass(frozen=True, eq=False)
class UnknownValidator(Validator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return ParseResult.ok(value)


@dataclass(frozen=True, eq=False)
class NeverValidator(Validator):
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return ctx.fail_kind("never", value, self.message)


@dataclass(frozen=True, eq=False)
class UndefinedValidator(Validator):
    """Accepts only the absent value."""

    message: str | None = None
    origin: str = "undefined"

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is not UNDEFINED:
            return ctx.fail_kind(self.origin, value, self.message)
        return ParseResult.ok(UNDEFINED)


@dataclass(frozen=True, eq=False)
class NullValidator(Validator):
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is not None:
            return ctx.fail_kind("null", value, self.message)
        return ParseResult.ok(None)


@dataclass(frozen=True, eq=False)
class NaNValidator(Validator):
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not (isinstance(value, float) and math.isnan(value)):
            return ctx.fail_kind("nan", value, self.message)
        return ParseResult.ok(value)


DEFAULT_TRUTHY = ("true", "1", "yes", "on", "y", "enabled")
DEFAULT_FALSY = ("false", "0", "no", "off", "n", "disabled")


@dataclass(frozen=True, eq=False)
class StringBoolValidator(Validator):
    """Reads booleans from strings such as ``"yes"`` or ``"off"``.

    Real booleans pass through unchanged. Matching ignores case unless
    ``case_sensitive`` is set.
    """

    truthy: tuple[str, ...] = DEFAULT_TRUTHY
    falsy: tuple[str, ...] = DEFAULT_FALSY
    case_sensitive: bool = False
    message: str | None = None

    def _fold(self, text: str) -> str:
        return text if self.case_sensitive else text.lower()

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if isinstance(value, bool):
            return ParseResult.ok(value)
        if not isinstance(value, str):
            return ctx.fail_kind("stringbool", value, self.message)
        token = self._fold(value)
        if token in {self._fold(t) for t in self.truthy}:
            return ParseResult.ok(True)
        if token in {self._fold(f) for f in self.falsy}:
            return ParseResult.ok(False)
        return ctx.fail(
            ErrorKind.INVALID_VALUE,
            self.message,
            origin="stringbool",
            values=[*self.truthy, *self.falsy],
            received=value,
        )

    def with_truthy(self, *values: str) -> StringBoolValidator:
        return self._with(truthy=tuple(values))

    def with_falsy(self, *values: str) -> StringBoolValidator:
        return self._with(falsy=tuple(values))

    def exact_case(self) -> StringBoolValidator:
        return self._with(case_sensitive=True)

    def ignore_case(self) -> StringBoolValidator:
        return self._with(case_sensitive=False)


def _template_fragment(part: Any) -> str:
    if not isinstance(part, Validator):
        return re.escape(_template_text(part))
    if isinstance(part, LiteralValidator):
        return re.escape(_template_text(part.value))
    if isinstance(part, EnumValidator):
        return "|".join(re.escape(_template_text(o)) for o in part.values)
    if isinstance(part, NumberValidator):
        return r"-?\d+(?:\.\d+)?"
    if isinstance(part, BigIntValidator):
        return r"-?\d+"
    if isinstance(part, BooleanValidator):
        return "true|false"
    if isinstance(part, NullValidator):
        return "null"
    if isinstance(part, UndefinedValidator):
        return "undefined"
    return ".+?"


def _template_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


@dataclass(frozen=True, eq=False)
class TemplateLiteralValidator(Validator):
    """Accepts strings shaped like a sequence of fixed text and typed slots.

    Plain parts match literally. Validator parts become regex slots:
    numbers, bigints, booleans, null, literals and enums match their text
    form, anything else matches one or more characters.

    Example:
        ```python
        v.template_literal("user-", v.number(), "-", v.enum("a", "b"))
        # accepts "user-42-a"
        ```
    """

    parts: tuple[Any, ...]
    message: str | None = None

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(
            "".join(
                re.escape(p) if isinstance(p, str) else f"(?:{_template_fragment(p)})"
                for p in self.parts
            ),
            re.DOTALL,
        )

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, str):
            return ctx.fail_kind("template_literal", value, self.message)
        pattern = self.pattern
        if pattern.fullmatch(value) is None:
            return ctx.fail(
                ErrorKind.FORMAT_VIOLATION,
                self.message,
                origin="template_literal",
                pattern=pattern.pattern,
            )
        return ParseResult.ok(value)


@dataclass(frozen=True, eq=False)
class JsonValidator(Validator):
    """Decodes a JSON string, then validates the decoded value.

    Values that are not strings are taken as already decoded.
    """

    schema: Validator | None = None
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError as e:
                return ctx.fail(ErrorKind.FORMAT_VIOLATION, self.message, origin="json", error=str(e))
        if self.schema is None:
            return ParseResult.ok(value)
        return self.schema._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class FunctionValidator(Validator):
    """Accepts any callable."""

    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not callable(value):
            return ctx.fail_kind("function", value, self.message)
        return ParseResult.ok(value)


def enum_values(values: Iterable[Any]) -> tuple[Any, ...]:
    """Normalize the arguments of ``v.enum`` (varargs or a single iterable)."""
    values = tuple(values)
    if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
        return tuple(values[0])
    return values


__all__ = [
    "AnyValidator",
    "BigIntValidator",
    "BooleanValidator",
    "BytesValidator",
    "DateValidator",
    "EnumValidator",
    "FunctionValidator",
    "JsonValidator",
    "LiteralValidator",
    "NaNValidator",
    "NativeEnumValidator",
    "NeverValidator",
    "NullValidator",
    "NumberValidator",
    "StringBoolValidator",
    "StringValidator",
    "Symbol",
    "SymbolValidator",
    "TemplateLiteralValidator",
    "UndefinedValidator",
    "UnknownValidator",
]

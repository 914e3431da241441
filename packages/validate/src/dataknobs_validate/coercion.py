"""Coercing variants of the primitive validators.

Each coercing validator converts the raw input to its target kind first,
then runs the ordinary primitive validation (including every chained check)
on the converted value. Conversion failures are reported as
``COERCION_FAILED``; later failures keep the primitive's own issue kind.
"""

from __future__ import annotations

import datetime
import math
from dataclasses import dataclass
from typing import Any

from .base import ParseContext
from .primitives import (
    BigIntValidator,
    BooleanValidator,
    DateValidator,
    NumberValidator,
    StringValidator,
    parse_iso_datetime,
)
from .result import ErrorKind, ParseResult
from .structural import UNDEFINED, type_name

TRUE_TOKENS = frozenset({"true", "1", "yes"})
FALSE_TOKENS = frozenset({"false", "0", "no"})


class CoercionError(ValueError):
    """Raised by a converter when a value cannot be converted."""

    pass


def to_string(value: Any) -> str:
    if value is None or value is UNDEFINED:
        raise CoercionError("null values cannot become strings")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        result = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise CoercionError("empty string")
        try:
            result = int(text)
        except ValueError:
            result = float(text)
    elif value is None or value is UNDEFINED:
        raise CoercionError("null values cannot become numbers")
    else:
        result = float(value)
    if isinstance(result, float) and math.isnan(result):
        raise CoercionError("not a number")
    return result


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_TOKENS:
            return True
        if token in FALSE_TOKENS:
            return False
    elif isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
    raise CoercionError(f"{value!r} is not a boolean token")


def to_bigint(value: Any) -> int:
    if isinstance(value, bool) or value is None or value is UNDEFINED:
        raise CoercionError(f"{type_name(value)} cannot become a bigint")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise CoercionError(f"{value} is not an integer")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise CoercionError("empty string")
        return int(text)
    raise CoercionError(f"{type_name(value)} cannot become a bigint")


def to_date(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return parse_iso_datetime(value.strip())
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds
        return datetime.datetime.fromtimestamp(value / 1000, tz=datetime.timezone.utc)
    raise CoercionError(f"{type_name(value)} cannot become a date")


def _coerce(
    converter: Any,
    target: str,
    value: Any,
    ctx: ParseContext,
    message: str | None,
) -> ParseResult:
    try:
        return ParseResult.ok(converter(value))
    except (ValueError, TypeError, OverflowError, OSError):
        return ctx.fail(
            ErrorKind.COERCION_FAILED,
            message,
            origin=target,
            target=target,
            received=type_name(value),
        )


@dataclass(frozen=True, eq=False)
class CoerceStringValidator(StringValidator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        converted = _coerce(to_string, "string", value, ctx, self.message)
        if not converted.success:
            return converted
        return super()._validate(converted.data, ctx)


@dataclass(frozen=True, eq=False)
class CoerceNumberValidator(NumberValidator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        converted = _coerce(to_number, "number", value, ctx, self.message)
        if not converted.success:
            return converted
        return super()._validate(converted.data, ctx)


@dataclass(frozen=True, eq=False)
class CoerceBooleanValidator(BooleanValidator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        converted = _coerce(to_boolean, "boolean", value, ctx, self.message)
        if not converted.success:
            return converted
        return super()._validate(converted.data, ctx)


@dataclass(frozen=True, eq=False)
class CoerceBigIntValidator(BigIntValidator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        converted = _coerce(to_bigint, "bigint", value, ctx, self.message)
        if not converted.success:
            return converted
        return super()._validate(converted.data, ctx)


@dataclass(frozen=True, eq=False)
class CoerceDateValidator(DateValidator):
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        converted = _coerce(to_date, "date", value, ctx, self.message)
        if not converted.success:
            return converted
        return super()._validate(converted.data, ctx)


class Coerce:
    """Namespace exposed as ``v.coerce``."""

    @staticmethod
    def string(message: str | None = None) -> CoerceStringValidator:
        return CoerceStringValidator(message=message)

    @staticmethod
    def number(message: str | None = None) -> CoerceNumberValidator:
        return CoerceNumberValidator(message=message)

    @staticmethod
    def boolean(message: str | None = None) -> CoerceBooleanValidator:
        return CoerceBooleanValidator(message=message)

    @staticmethod
    def bigint(message: str | None = None) -> CoerceBigIntValidator:
        return CoerceBigIntValidator(message=message)

    @staticmethod
    def date(message: str | None = None) -> CoerceDateValidator:
        return CoerceDateValidator(message=message)


coerce = Coerce()

"""Builder functions, meant to be used as ``from dataknobs_validate import v``.

Example:
    ```python
    from dataknobs_validate import v

    event = v.discriminated_union(
        "kind",
        v.object({"kind": v.literal("click"), "x": v.number(), "y": v.number()}),
        v.object({"kind": v.literal("key"), "code": v.string()}),
    )
    port = v.coerce.number().int().between(1, 65535)
    ```
"""

from __future__ import annotations

import enum as _enum
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any as _Any

from .base import Validator
from .codecs import Codec, codec
from .coercion import coerce
from .combinators import (
    DiscriminatedUnionValidator,
    IntersectionValidator,
    UnionValidator,
    XorValidator,
)
from .composites import ArrayValidator, MapValidator, RecordValidator, SetValidator, TupleValidator
from .modifiers import (
    LazyValidator,
    NullableValidator,
    NullishValidator,
    OptionalValidator,
    PreprocessValidator,
)
from .objects import ObjectValidator, UnknownKeys
from .primitives import (
    AnyValidator,
    BigIntValidator,
    BooleanValidator,
    BytesValidator,
    DateValidator,
    EnumValidator,
    FunctionValidator,
    JsonValidator,
    LiteralValidator,
    NaNValidator,
    NativeEnumValidator,
    NeverValidator,
    NullValidator,
    NumberValidator,
    StringBoolValidator,
    StringValidator,
    SymbolValidator,
    TemplateLiteralValidator,
    UndefinedValidator,
    UnknownValidator,
    enum_values,
)

__all__ = [
    "Codec", "any", "array", "base64", "base64url", "bigint", "boolean", "bytes",
    "cidrv4", "cidrv6", "codec", "coerce", "cuid", "cuid2", "custom", "date",
    "discriminated_union", "e164", "email", "emoji", "enum", "function", "hash",
    "hex", "hostname", "int", "intersection", "ipv4", "ipv6", "iso", "json", "jwt",
    "lazy", "literal", "loose_object", "loose_record", "mac", "map", "nan",
    "nanoid", "native_enum", "never", "null", "nullable", "nullish", "number",
    "object", "optional", "partial_record", "preprocess", "record", "set",
    "strict_object", "string", "string_format", "stringbool", "symbol",
    "template_literal", "tuple", "ulid", "undefined", "union", "unknown", "url",
    "uuid", "uuidv4", "void", "xor",
]


def string(message: str | None = None) -> StringValidator:
    return StringValidator(message=message)


def number(message: str | None = None) -> NumberValidator:
    return NumberValidator(message=message)


def int(message: str | None = None) -> NumberValidator:  # noqa: A001
    return NumberValidator(message=message).int()


def boolean(message: str | None = None) -> BooleanValidator:
    return BooleanValidator(message=message)


def bigint(message: str | None = None) -> BigIntValidator:
    return BigIntValidator(message=message)


def date(message: str | None = None) -> DateValidator:
    return DateValidator(message=message)


def bytes(message: str | None = None) -> BytesValidator:  # noqa: A001
    return BytesValidator(message=message)


def symbol(message: str | None = None) -> SymbolValidator:
    return SymbolValidator(message=message)


def literal(value: _Any, message: str | None = None) -> LiteralValidator:
    return LiteralValidator(value, message)


def enum(*values: _Any, message: str | None = None) -> EnumValidator:
    """``v.enum("a", "b")`` or ``v.enum(["a", "b"])``."""
    return EnumValidator(enum_values(values), message)


def native_enum(enum_class: type[_enum.Enum], message: str | None = None) -> NativeEnumValidator:
    return NativeEnumValidator(enum_class, message)


def any() -> AnyValidator:  # noqa: A001
    return AnyValidator()


def unknown() -> UnknownValidator:
    return UnknownValidator()


def never(message: str | None = None) -> NeverValidator:
    return NeverValidator(message)


def void(message: str | None = None) -> UndefinedValidator:
    return UndefinedValidator(message, origin="void")


def undefined(message: str | None = None) -> UndefinedValidator:
    return UndefinedValidator(message)


def null(message: str | None = None) -> NullValidator:
    return NullValidator(message)


def nan(message: str | None = None) -> NaNValidator:
    return NaNValidator(message)


def email(message: str | None = None) -> StringValidator:
    return string().email(message)


def url(message: str | None = None) -> StringValidator:
    return string().url(message)


def uuid(message: str | None = None) -> StringValidator:
    return string().uuid(message)


# String formats


def string_format(
    name: str, test: str | re.Pattern | Callable[[str], bool], message: str | None = None,
) -> StringValidator:
    """Custom named format from a regex or a predicate."""
    return string().custom_format(name, test, message)


def _format(name: str) -> Callable[..., StringValidator]:
    def build(message: str | None = None) -> StringValidator:
        return string().format(name, message)

    build.__name__ = name
    build.__doc__ = f"String in the ``{name}`` format."
    return build


hostname = _format("hostname")
emoji = _format("emoji")
base64 = _format("base64")
base64url = _format("base64url")
hex = _format("hex")  # noqa: A001
jwt = _format("jwt")
nanoid = _format("nanoid")
cuid = _format("cuid")
cuid2 = _format("cuid2")
ulid = _format("ulid")
mac = _format("mac")
cidrv4 = _format("cidrv4")
cidrv6 = _format("cidrv6")
e164 = _format("e164")
uuidv4 = _format("uuidv4")


def ipv4(message: str | None = None) -> StringValidator:
    return string().ipv4(message)


def ipv6(message: str | None = None) -> StringValidator:
    return string().ipv6(message)


def hash(algorithm: str = "sha256", message: str | None = None) -> StringValidator:  # noqa: A001
    return string().hash(algorithm, message)


class IsoFormats:
    """Namespace exposed as ``v.iso``."""

    date = staticmethod(_format("iso_date"))
    time = staticmethod(_format("iso_time"))
    datetime = staticmethod(_format("iso_datetime"))
    duration = staticmethod(_format("iso_duration"))


iso = IsoFormats()


def stringbool(
    truthy: Iterable[str] | None = None,
    falsy: Iterable[str] | None = None,
    case_sensitive: bool = False,
    message: str | None = None,
) -> StringBoolValidator:
    """Boolean read from strings such as ``"yes"``/``"no"``; see ``DEFAULT_TRUTHY``."""
    validator = StringBoolValidator(case_sensitive=case_sensitive, message=message)
    if truthy is not None:
        validator = validator.with_truthy(*truthy)
    if falsy is not None:
        validator = validator.with_falsy(*falsy)
    return validator


def template_literal(*parts: _Any, message: str | None = None) -> TemplateLiteralValidator:
    return TemplateLiteralValidator(parts, message)


def json(schema: Validator | None = None, message: str | None = None) -> JsonValidator:
    """JSON text decoded and then validated by ``schema``."""
    return JsonValidator(schema, message)


def function(message: str | None = None) -> FunctionValidator:
    return FunctionValidator(message)


# Composites


def array(element: Validator, message: str | None = None) -> ArrayValidator:
    return ArrayValidator(element, message=message)


def tuple(*items: Validator, message: str | None = None) -> TupleValidator:  # noqa: A001
    return TupleValidator(items, message)


def set(element: Validator, message: str | None = None) -> SetValidator:  # noqa: A001
    return SetValidator(element, message=message)


def map(key: Validator, value: Validator, message: str | None = None) -> MapValidator:  # noqa: A001
    return MapValidator(key, value, message)


def record(key_or_value: Validator, value: Validator | None = None, message: str | None = None) -> RecordValidator:
    """``v.record(values)`` or ``v.record(keys, values)``."""
    if value is None:
        return RecordValidator(value=key_or_value, message=message)
    return RecordValidator(key=key_or_value, value=value, message=message)


def partial_record(key: Validator, value: Validator, message: str | None = None) -> RecordValidator:
    """Record over enum or literal keys where every key is optional."""
    return record(key, value, message).partial()


def loose_record(key: Validator, value: Validator, message: str | None = None) -> RecordValidator:
    """Record that passes entries with unrecognized keys through."""
    return record(key, value, message).loose()


def object(shape: Mapping[str, Validator] | None = None, message: str | None = None) -> ObjectValidator:  # noqa: A001
    return ObjectValidator(dict(shape or {}), message=message)


def strict_object(shape: Mapping[str, Validator], message: str | None = None) -> ObjectValidator:
    return ObjectValidator(dict(shape), UnknownKeys.STRICT, message=message)


def loose_object(shape: Mapping[str, Validator], message: str | None = None) -> ObjectValidator:
    return ObjectValidator(dict(shape), UnknownKeys.PASSTHROUGH, message=message)


# Combinators


def union(*members: Validator, message: str | None = None) -> UnionValidator:
    return UnionValidator(members, message)


def discriminated_union(
    discriminator: str, *options: ObjectValidator, message: str | None = None,
) -> DiscriminatedUnionValidator:
    return DiscriminatedUnionValidator(discriminator, options, message)


def intersection(left: Validator, right: Validator, message: str | None = None) -> IntersectionValidator:
    return IntersectionValidator(left, right, message)


def xor(*options: Validator, message: str | None = None) -> XorValidator:
    return XorValidator(options, message)


def optional(inner: Validator) -> OptionalValidator:
    return OptionalValidator(inner)


def nullable(inner: Validator) -> NullableValidator:
    return NullableValidator(inner)


def nullish(inner: Validator) -> NullishValidator:
    return NullishValidator(inner)


# Modifiers


def lazy(getter: Callable[[], Validator]) -> LazyValidator:
    return LazyValidator(getter)


def preprocess(fn: Callable[[_Any], _Any], schema: Validator) -> PreprocessValidator:
    return PreprocessValidator(schema, fn)


def custom(predicate: Callable[[_Any], bool] | None = None, message: str | None = None) -> Validator:
    """Validator defined by a predicate alone; accepts anything without one."""
    if predicate is None:
        return UnknownValidator()
    return UnknownValidator().refine(predicate, message)


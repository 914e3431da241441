"""Message providers: turn an issue kind plus parameters into display text.

Messages are resolved when an issue is created. The provider used for a
call is chosen in this order:

1. the ``messages=`` argument of ``parse``/``safe_parse``
2. the provider installed with the :func:`use_messages` context manager
3. the process-wide provider set with :func:`set_message_provider`

Example:
    ```python
    from dataknobs_validate import v
    from dataknobs_validate.messages import TableMessageProvider, use_messages

    german = TableMessageProvider({"invalid_kind.string": "Ungültige Zeichenkette"})
    with use_messages(german):
        v.string().safe_parse(1)  # message: "Ungültige Zeichenkette"
    ```
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Protocol, Union, runtime_checkable

from .result import ErrorKind

logger = logging.getLogger(__name__)

Template = Union[str, Callable[[Mapping[str, Any]], str]]


@runtime_checkable
class MessageProvider(Protocol):
    """Anything that can render a message for an issue."""

    def message_for(self, kind: ErrorKind, params: Mapping[str, Any]) -> str:
        ...


DEFAULT_MESSAGES: dict[str, Template] = {
    # kind checks
    "invalid_kind": "Expected {origin}, received {received}",
    "invalid_kind.string": "Invalid string",
    "invalid_kind.number": "Invalid number",
    "invalid_kind.number.int": "Number must be an integer",
    "invalid_kind.boolean": "Invalid boolean",
    "invalid_kind.bigint": "Invalid bigint",
    "invalid_kind.date": "Invalid date",
    "invalid_kind.bytes": "Invalid bytes",
    "invalid_kind.symbol": "Invalid symbol",
    "invalid_kind.object": "Invalid object",
    "invalid_kind.array": "Invalid array",
    "invalid_kind.tuple": "Invalid tuple",
    "invalid_kind.set": "Invalid set",
    "invalid_kind.map": "Invalid map",
    "invalid_kind.record": "Invalid record",
    "invalid_kind.undefined": "Expected undefined",
    "invalid_kind.void": "Expected undefined",
    "invalid_kind.null": "Expected null",
    "invalid_kind.nan": "Expected NaN",
    "invalid_kind.never": "Never type cannot be parsed",
    "invalid_kind.function": "Expected a function",
    "invalid_kind.stringbool": "Expected a boolean string",
    "invalid_kind.template_literal": "Invalid string",
    # literal and enum
    "invalid_value": "Invalid value",
    "invalid_value.literal": "Expected {expected}, got {received}",
    "invalid_value.enum": "Expected one of [{values}], got {received}",
    "invalid_value.stringbool": "Expected one of [{values}], got {received}",
    "invalid_value.unhashable": "Value of type {received} cannot be a set member or mapping key",
    # strings
    "range_violation.string.min": "String must be at least {minimum} characters",
    "range_violation.string.max": "String must be at most {maximum} characters",
    "range_violation.string.length": "String must be exactly {exact} characters",
    "range_violation.string.nonempty": "String must not be empty",
    "format_violation": "Invalid format",
    "format_violation.string.email": "Invalid email address",
    "format_violation.string.url": "Invalid URL",
    "format_violation.string.uuid": "Invalid UUID",
    "format_violation.string.regex": "Invalid format",
    "format_violation.string.starts_with": 'String must start with "{prefix}"',
    "format_violation.string.ends_with": 'String must end with "{suffix}"',
    "format_violation.string.includes": 'String must include "{substring}"',
    "format_violation.string.ip": "Invalid IP address",
    "format_violation.string.ipv4": "Invalid IPv4 address",
    "format_violation.string.ipv6": "Invalid IPv6 address",
    "format_violation.string.datetime": "Invalid ISO datetime",
    "format_violation.string.format": "Invalid {format} format",
    "format_violation.string.hash": "Invalid {algorithm} hash",
    "format_violation.template_literal": "String does not match the template {pattern}",
    "format_violation.json": "Invalid JSON: {error}",
    # numbers
    "range_violation": "Value out of range",
    "range_violation.number.min": "Number must be at least {minimum}",
    "range_violation.number.max": "Number must be at most {maximum}",
    "range_violation.number.gt": "Number must be greater than {minimum}",
    "range_violation.number.lt": "Number must be less than {maximum}",
    "range_violation.number.positive": "Number must be positive",
    "range_violation.number.negative": "Number must be negative",
    "range_violation.number.nonnegative": "Number must be non-negative",
    "range_violation.number.nonpositive": "Number must be non-positive",
    "range_violation.number.finite": "Number must be finite",
    "range_violation.number.safe": "Number must be a safe integer",
    "not_multiple_of": "Number must be a multiple of {divisor}",
    "not_multiple_of.number.even": "Number must be even",
    "not_multiple_of.number.odd": "Number must be odd",
    "not_multiple_of.bigint": "BigInt must be a multiple of {divisor}",
    # bigints
    "range_violation.bigint.min": "BigInt must be at least {minimum}",
    "range_violation.bigint.max": "BigInt must be at most {maximum}",
    "range_violation.bigint.positive": "BigInt must be positive",
    "range_violation.bigint.negative": "BigInt must be negative",
    "range_violation.bigint.nonnegative": "BigInt must be non-negative",
    "range_violation.bigint.nonpositive": "BigInt must be non-positive",
    # dates
    "range_violation.date.min": "Date must be after {minimum}",
    "range_violation.date.max": "Date must be before {maximum}",
    # bytes
    "range_violation.bytes.min": "Bytes must be at least {minimum} long",
    "range_violation.bytes.max": "Bytes must be at most {maximum} long",
    "range_violation.bytes.length": "Bytes must be exactly {exact} long",
    # collections
    "range_violation.array.min": "Array must have at least {minimum} items",
    "range_violation.array.max": "Array must have at most {maximum} items",
    "range_violation.array.length": "Array must have exactly {exact} items",
    "range_violation.array.nonempty": "Array must not be empty",
    "range_violation.set.min": "Set must have at least {minimum} items",
    "range_violation.set.max": "Set must have at most {maximum} items",
    "range_violation.set.length": "Set must have exactly {exact} items",
    "range_violation.set.nonempty": "Set must not be empty",
    "not_unique": "Array items must be unique",
    "tuple_length": "Expected tuple of {expected} items, got {received}",
    "unexpected_keys": "Unexpected keys: {keys}",
    # combinators
    "union_no_match": "No union member matched: {errors}",
    "union_no_match.xor": "No schema matched in XOR union",
    "invalid_discriminator": (
        'Invalid discriminator value for "{key}": expected one of [{options}]'
    ),
    "xor_ambiguous": (
        "Input matches {count} schemas in XOR union, but exactly one is required"
    ),
    "intersection_error": "Intersection failed: {errors}",
    "intersection_error.merge": "Intersection results cannot be merged",
    # coercion, refinements, transforms
    "coercion_failed": "Cannot coerce {received} to {target}",
    "custom": "Invalid input",
    "custom.exception": "Refinement failed: {error}",
    "transform_error": "Transform failed: {error}",
    "codec_failed": "Codec {direction} failed: {error}",
    "codec_async_not_supported": (
        "Codec {direction} is asynchronous; use the async variant"
    ),
}


class _SafeParams(dict):
    """Leave unknown placeholders in place instead of raising."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _display(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(_display(item)) for item in value)
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    return value


class TableMessageProvider:
    """Message provider backed by a table of templates.

    Templates are looked up from the most to the least specific key:
    ``{kind}.{origin}.{check}``, ``{kind}.{origin}``, ``{kind}.{check}`` and
    finally ``{kind}``. A template is either a ``str.format`` string over the
    issue parameters or a callable receiving the parameters.
    """

    def __init__(
        self,
        messages: Mapping[str, Template],
        fallback: MessageProvider | None = None,
    ):
        """Initialize the provider.

        Args:
            messages: Template table
            fallback: Provider consulted when no key matches
        """
        self.messages = dict(messages)
        self.fallback = fallback

    def template_for(self, kind: ErrorKind, params: Mapping[str, Any]) -> Template | None:
        origin = params.get("origin")
        check = params.get("check")
        candidates = []
        if origin and check:
            candidates.append(f"{kind.value}.{origin}.{check}")
        if origin:
            candidates.append(f"{kind.value}.{origin}")
        if check:
            candidates.append(f"{kind.value}.{check}")
        candidates.append(kind.value)
        for key in candidates:
            if key in self.messages:
                return self.messages[key]
        return None

    def message_for(self, kind: ErrorKind, params: Mapping[str, Any]) -> str:
        template = self.template_for(kind, params)
        if template is None:
            if self.fallback is not None:
                return self.fallback.message_for(kind, params)
            logger.warning(f"No message template for {kind.value}")
            return kind.value
        if callable(template):
            return template(params)
        return template.format_map(
            _SafeParams({k: _display(v) for k, v in params.items()})
        )

    def extend(self, messages: Mapping[str, Template]) -> TableMessageProvider:
        """Return a provider with ``messages`` layered over this table."""
        return TableMessageProvider({**self.messages, **messages}, self.fallback)


default_provider = TableMessageProvider(DEFAULT_MESSAGES)

_global_provider: MessageProvider = default_provider
_context_provider: ContextVar[MessageProvider | None] = ContextVar(
    "dataknobs_validate_messages", default=None
)


def set_message_provider(provider: MessageProvider | None) -> None:
    """Install the process-wide provider; ``None`` restores the English default."""
    global _global_provider
    _global_provider = provider if provider is not None else default_provider


def get_message_provider() -> MessageProvider:
    """Return the provider in effect for the current context."""
    provider = _context_provider.get()
    return provider if provider is not None else _global_provider


@contextmanager
def use_messages(provider: MessageProvider) -> Iterator[MessageProvider]:
    """Use ``provider`` for every validation inside the ``with`` block."""
    token = _context_provider.set(provider)
    try:
        yield provider
    finally:
        _context_provider.reset(token)

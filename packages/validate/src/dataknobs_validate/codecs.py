"""Bidirectional codecs between a wire representation and a domain value.

A codec validates its input schema, applies ``decoder``, then validates the
output schema. ``encode`` runs the same path in reverse. The synchronous
entry points refuse asynchronous transforms; use the ``*_async`` variants
for those.

Example:
    ```python
    from dataknobs_validate import codecs

    codecs.string_to_int.parse("42")      # 42
    codecs.string_to_int.encode(42)       # "42"
    codecs.iso_datetime_to_date.parse("2024-01-01T00:00:00Z")
    ```
"""

from __future__ import annotations

import base64
import binascii
import datetime
import inspect
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, unquote

from .base import ParseContext, Validator
from .coercion import to_boolean, to_number
from .messages import MessageProvider, get_message_provider
from .primitives import (
    BigIntValidator,
    BooleanValidator,
    BytesValidator,
    DateValidator,
    NumberValidator,
    StringValidator,
    UnknownValidator,
    as_utc,
    parse_iso_datetime,
)
from .result import ErrorKind, ParseResult
from .structural import UNDEFINED

logger = logging.getLogger(__name__)

DECODE = "decode"
ENCODE = "encode"


def _is_async(fn: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(fn)


def _reject_async(direction: str, ctx: ParseContext) -> ParseResult:
    logger.debug(f"Rejected asynchronous codec {direction} in synchronous call")
    return ctx.fail(ErrorKind.CODEC_ASYNC_NOT_SUPPORTED, direction=direction)


@dataclass(frozen=True, eq=False)
class Codec(Validator):
    """Validator with a reversible transform between two schemas."""

    input_schema: Validator
    output_schema: Validator
    decoder: Callable[[Any], Any]
    encoder: Callable[[Any], Any]

    # Decode side

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return self._run(self.input_schema, self.decoder, self.output_schema, DECODE, value, ctx)

    def decode(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> Any:
        return self.parse(value, messages=messages)

    def safe_decode(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> ParseResult:
        return self.safe_parse(value, messages=messages)

    # Encode side

    def safe_encode(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> ParseResult:
        """Validate a domain value and convert it back to the wire form."""
        ctx = _context(messages)
        return self._run(self.output_schema, self.encoder, self.input_schema, ENCODE, value, ctx)

    def encode(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> Any:
        return self.safe_encode(value, messages=messages).unwrap()

    # Async variants

    async def safe_parse_async(
        self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None,
    ) -> ParseResult:
        ctx = _context(messages)
        return await self._run_async(
            self.input_schema, self.decoder, self.output_schema, DECODE, value, ctx
        )

    async def parse_async(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> Any:
        return (await self.safe_parse_async(value, messages=messages)).unwrap()

    async def safe_encode_async(
        self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None,
    ) -> ParseResult:
        ctx = _context(messages)
        return await self._run_async(
            self.output_schema, self.encoder, self.input_schema, ENCODE, value, ctx
        )

    async def encode_async(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> Any:
        return (await self.safe_encode_async(value, messages=messages)).unwrap()

    # Internals

    def _run(
        self,
        source: Validator,
        fn: Callable[[Any], Any],
        target: Validator,
        direction: str,
        value: Any,
        ctx: ParseContext,
    ) -> ParseResult:
        result = source._validate(value, ctx)
        if not result.success:
            return result
        if _is_async(fn):
            return _reject_async(direction, ctx)
        try:
            converted = fn(result.data)
        except Exception as e:
            return ctx.fail(ErrorKind.CODEC_FAILED, origin="codec", direction=direction, error=str(e))
        if inspect.isawaitable(converted):
            if inspect.iscoroutine(converted):
                converted.close()
            return _reject_async(direction, ctx)
        return target._validate(converted, ctx)

    async def _run_async(
        self,
        source: Validator,
        fn: Callable[[Any], Any],
        target: Validator,
        direction: str,
        value: Any,
        ctx: ParseContext,
    ) -> ParseResult:
        result = source._validate(value, ctx)
        if not result.success:
            return result
        try:
            converted = fn(result.data)
            if inspect.isawaitable(converted):
                converted = await converted
        except Exception as e:
            return ctx.fail(ErrorKind.CODEC_FAILED, origin="codec", direction=direction, error=str(e))
        return target._validate(converted, ctx)


def _context(messages: MessageProvider | None) -> ParseContext:
    return ParseContext(messages if messages is not None else get_message_provider())


def codec(
    input_schema: Validator,
    output_schema: Validator,
    decode: Callable[[Any], Any],
    encode: Callable[[Any], Any],
) -> Codec:
    """Build a codec from two schemas and the transforms between them."""
    return Codec(input_schema, output_schema, decode, encode)


# Predefined codecs


def _epoch_seconds(value: datetime.datetime) -> float:
    return as_utc(value).timestamp()


def _iso_string(value: datetime.datetime) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")


def _b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64_decode(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64: {e}") from e


def _uri_decode(text: str) -> str:
    return unquote(text, errors="strict")


def _uri_encode(text: str) -> str:
    return quote(text, safe="-_.!~*'()")


def _str_number(value: Any) -> str:
    return str(value)


string_to_number = codec(StringValidator(), NumberValidator(), to_number, _str_number)

string_to_int = codec(StringValidator(), NumberValidator().int(), lambda s: int(s.strip()), _str_number)

string_to_bigint = codec(StringValidator(), BigIntValidator(), lambda s: int(s.strip()), _str_number)

number_to_bigint = codec(NumberValidator().int(), BigIntValidator(), int, int)

string_to_boolean = codec(
    StringValidator(),
    BooleanValidator(),
    to_boolean,
    lambda b: "true" if b else "false",
)

iso_datetime_to_date = codec(
    StringValidator().datetime(), DateValidator(), parse_iso_datetime, _iso_string,
)

epoch_seconds_to_date = codec(
    NumberValidator().finite(),
    DateValidator(),
    lambda s: datetime.datetime.fromtimestamp(s, tz=datetime.timezone.utc),
    _epoch_seconds,
)

epoch_millis_to_date = codec(
    NumberValidator().finite(),
    DateValidator(),
    lambda ms: datetime.datetime.fromtimestamp(ms / 1000, tz=datetime.timezone.utc),
    lambda d: round(_epoch_seconds(d) * 1000),
)

uri_component = codec(StringValidator(), StringValidator(), _uri_decode, _uri_encode)

base64_to_bytes = codec(
    StringValidator(),
    BytesValidator(),
    _b64_decode,
    lambda b: base64.b64encode(b).decode("ascii"),
)

base64url_to_bytes = codec(StringValidator(), BytesValidator(), _b64url_decode, _b64url_encode)

hex_to_bytes = codec(StringValidator(), BytesValidator(), bytes.fromhex, lambda b: b.hex())

utf8_to_bytes = codec(
    StringValidator(), BytesValidator(), lambda s: s.encode("utf-8"), lambda b: b.decode("utf-8"),
)

bytes_to_utf8 = codec(
    BytesValidator(), StringValidator(), lambda b: b.decode("utf-8"), lambda s: s.encode("utf-8"),
)


def json_codec(schema: Validator | None = None) -> Codec:
    """Codec between a JSON string and a value validated by ``schema``."""
    return codec(
        StringValidator(),
        schema if schema is not None else UnknownValidator(),
        json.loads,
        json.dumps,
    )


def base64_json(schema: Validator | None = None) -> Codec:
    """Codec between base64 encoded JSON text and a value validated by ``schema``."""
    return codec(
        StringValidator(),
        schema if schema is not None else UnknownValidator(),
        lambda s: json.loads(_b64_decode(s).decode("utf-8")),
        lambda value: base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii"),
    )


def _jwt_payload(token: str) -> Any:
    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("JWT must have three segments")
    return json.loads(_b64url_decode(parts[1]).decode("utf-8"))


def _unsigned_jwt(payload: Any) -> str:
    header = _b64url_encode(json.dumps({"alg": "none", "typ": "JWT"}).encode("utf-8"))
    body = _b64url_encode(json.dumps(payload).encode("utf-8"))
    return f"{header}.{body}."


def jwt_payload(schema: Validator | None = None) -> Codec:
    """Codec reading the payload of a JWT without verifying its signature.

    Encoding produces an unsigned token (``alg: none``).
    """
    return codec(
        StringValidator(),
        schema if schema is not None else UnknownValidator(),
        _jwt_payload,
        _unsigned_jwt,
    )

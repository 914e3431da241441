"""Combinators: union, discriminated union, intersection and xor."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import ParseContext, Validator
from .exceptions import SchemaDefinitionError
from .objects import ObjectValidator
from .primitives import EnumValidator, LiteralValidator
from .result import ErrorKind, ParseResult
from .structural import UNDEFINED, merge_mappings

logger = logging.getLogger(__name__)


def _member_messages(results: list[ParseResult]) -> list[str]:
    return [result.error.first_issue.message for result in results if result.error is not None]


@dataclass(frozen=True, eq=False)
class UnionValidator(Validator):
    """Accepts a value if any member does; the first accepting member wins."""

    members: tuple[Validator, ...]
    message: str | None = None

    def __post_init__(self) -> None:
        if not self.members:
            raise SchemaDefinitionError("Union requires at least one member")

    @property
    def options(self) -> tuple[Validator, ...]:
        return self.members

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        failures = []
        for member in self.members:
            result = member._validate(value, ctx)
            if result.success:
                return result
            failures.append(result)
        return ctx.fail(
            ErrorKind.UNION_NO_MATCH,
            self.message,
            origin="union",
            errors=_member_messages(failures),
        )


def _tag_key(value: Any) -> tuple[bool, Any]:
    # keep True apart from 1 and False apart from 0
    return (isinstance(value, bool), value)


@dataclass(frozen=True, eq=False)
class DiscriminatedUnionValidator(Validator):
    """Union of object validators selected by the value of one field.

    The branch is looked up directly from the discriminator value, so only
    the matching branch ever runs.

    Raises:
        SchemaDefinitionError: At construction, if an option is not an object
            validator with a literal or enum discriminator, or if two options
            share a discriminator value
    """

    discriminator: str
    options: tuple[ObjectValidator, ...]
    message: str | None = None
    lookup: dict[tuple[bool, Any], ObjectValidator] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        lookup: dict[tuple[bool, Any], ObjectValidator] = {}
        for option in self.options:
            for tag in self._tags(option):
                key = _tag_key(tag)
                if key in lookup:
                    raise SchemaDefinitionError(
                        f"Duplicate discriminator value {tag!r} for key '{self.discriminator}'",
                        context={"discriminator": self.discriminator, "value": tag},
                    )
                lookup[key] = option
        object.__setattr__(self, "lookup", lookup)

    def _tags(self, option: Validator) -> list[Any]:
        if not isinstance(option, ObjectValidator):
            raise SchemaDefinitionError(
                "Discriminated union options must be object validators",
                context={"discriminator": self.discriminator},
            )
        tag = option.fields.get(self.discriminator)
        if isinstance(tag, LiteralValidator):
            return [tag.value]
        if isinstance(tag, EnumValidator):
            return list(tag.values)
        raise SchemaDefinitionError(
            f"Option is missing a literal discriminator '{self.discriminator}'",
            context={"discriminator": self.discriminator},
        )

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, Mapping):
            return ctx.fail_kind("object", value, self.message)
        tag = value.get(self.discriminator, UNDEFINED)
        try:
            option = self.lookup.get(_tag_key(tag))
        except TypeError:
            option = None  # unhashable tag
        if option is None:
            logger.debug(f"No branch for discriminator {self.discriminator}={tag!r}")
            return ParseResult.fail([
                ctx.issue(
                    ErrorKind.INVALID_DISCRIMINATOR,
                    self.message,
                    path=(self.discriminator,),
                    key=self.discriminator,
                    options=[key[1] for key in self.lookup],
                    received=tag,
                )
            ])
        return option._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class IntersectionValidator(Validator):
    """Accepts a value only if both members do.

    Both members see the same raw input. Mapping outputs are deep-merged;
    any other outputs must be equal.
    """

    left: Validator
    right: Validator
    message: str | None = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        left = self.left._validate(value, ctx)
        right = self.right._validate(value, ctx)
        failures = [r for r in (left, right) if not r.success]
        if failures:
            return ctx.fail(
                ErrorKind.INTERSECTION_ERROR,
                self.message,
                origin="intersection",
                check="members",
                errors=_member_messages(failures),
            )

        if isinstance(left.data, Mapping) and isinstance(right.data, Mapping):
            return ParseResult.ok(merge_mappings(left.data, right.data))
        if not isinstance(left.data, Mapping) and not isinstance(right.data, Mapping):
            if left.data == right.data:
                return ParseResult.ok(left.data)
        return ctx.fail(
            ErrorKind.INTERSECTION_ERROR,
            self.message,
            origin="intersection",
            check="merge",
        )


@dataclass(frozen=True, eq=False)
class XorValidator(Validator):
    """Accepts a value only if exactly one option does.

    Every option is evaluated, so the cost is always linear in the options.
    """

    options: tuple[Validator, ...]
    message: str | None = None

    def __post_init__(self) -> None:
        if len(self.options) < 2:
            raise SchemaDefinitionError(
                "XOR requires at least two options",
                context={"count": len(self.options)},
            )

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        results = [option._validate(value, ctx) for option in self.options]
        matches = [r for r in results if r.success]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            return ctx.fail(
                ErrorKind.UNION_NO_MATCH,
                self.message,
                origin="xor",
                errors=_member_messages(results),
            )
        return ctx.fail(
            ErrorKind.XOR_AMBIGUOUS,
            self.message,
            origin="xor",
            count=len(matches),
        )

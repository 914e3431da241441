"""Wrapping validators: optionality, defaults, refinements and transforms.

Each modifier wraps one inner validator and is itself a validator, so
modifiers chain freely and evaluate strictly in the order they were applied.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .base import ParseContext, Validator
from .result import ErrorKind, ParseResult, PathSegment, RefinementContext
from .structural import UNDEFINED


@dataclass(frozen=True, eq=False)
class WrappingValidator(Validator):
    """Base for modifiers around a single inner validator."""

    inner: Validator

    def unwrap(self) -> Validator:
        return self.inner

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return self.inner._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class OptionalValidator(WrappingValidator):
    """Also accepts the absent value."""

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is UNDEFINED:
            return ParseResult.ok(UNDEFINED)
        return self.inner._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class NullableValidator(WrappingValidator):
    """Also accepts ``None``."""

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is None:
            return ParseResult.ok(None)
        return self.inner._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class NullishValidator(WrappingValidator):
    """Also accepts ``None`` and the absent value."""

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is None or value is UNDEFINED:
            return ParseResult.ok(value)
        return self.inner._validate(value, ctx)


def _resolve(value: Any) -> Any:
    if callable(value):
        return value()
    # a fresh copy per call so mutable defaults are never shared
    return copy.deepcopy(value)


@dataclass(frozen=True, eq=False)
class DefaultValidator(WrappingValidator):
    """Substitutes a default for the absent value without validating it.

    ``value`` may be a zero-argument callable, called once per use.
    """

    value: Any = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is UNDEFINED:
            return ParseResult.ok(_resolve(self.value))
        return self.inner._validate(value, ctx)

    def remove_default(self) -> Validator:
        return self.inner


@dataclass(frozen=True, eq=False)
class PrefaultValidator(WrappingValidator):
    """Substitutes a default for the absent value, then validates it."""

    value: Any = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is UNDEFINED:
            value = _resolve(self.value)
        return self.inner._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class CatchValidator(WrappingValidator):
    """Turns any failure of the inner validator into success with a fallback.

    ``fallback`` may be a callable receiving the ValidationError.
    """

    fallback: Any = None

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = self.inner._validate(value, ctx)
        if result.success:
            return result
        if callable(self.fallback):
            return ParseResult.ok(self.fallback(result.error))
        return ParseResult.ok(copy.deepcopy(self.fallback))


@dataclass(frozen=True, eq=False)
class RefineValidator(WrappingValidator):
    """Applies a boolean predicate to the validated value."""

    predicate: Callable[[Any], bool] = None  # type: ignore[assignment]
    message: str | None = None
    path: tuple[PathSegment, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = self.inner._validate(value, ctx)
        if not result.success:
            return result
        try:
            accepted = self.predicate(result.data)
        except Exception as e:
            return ParseResult.fail([
                ctx.issue(ErrorKind.CUSTOM, self.message, self.path, check="exception", error=str(e))
            ])
        if not accepted:
            return ParseResult.fail([
                ctx.issue(ErrorKind.CUSTOM, self.message, self.path, **self.params)
            ])
        return result


@dataclass(frozen=True, eq=False)
class SuperRefineValidator(WrappingValidator):
    """Runs a callback that may record any number of issues."""

    refinement: Callable[[Any, RefinementContext], None] = None  # type: ignore[assignment]

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = self.inner._validate(value, ctx)
        if not result.success:
            return result
        refinement_ctx = RefinementContext(result.data, ctx.messages)
        try:
            self.refinement(result.data, refinement_ctx)
        except Exception as e:
            return ctx.fail(ErrorKind.CUSTOM, check="exception", error=str(e))
        if refinement_ctx.has_issues:
            return ParseResult.fail(refinement_ctx.issues)
        return result


@dataclass(frozen=True, eq=False)
class TransformValidator(WrappingValidator):
    """Maps the validated value through a function."""

    fn: Callable[[Any], Any] = None  # type: ignore[assignment]

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = self.inner._validate(value, ctx)
        if not result.success:
            return result
        try:
            return ParseResult.ok(self.fn(result.data))
        except Exception as e:
            return ctx.fail(ErrorKind.TRANSFORM_ERROR, error=str(e))


@dataclass(frozen=True, eq=False)
class PipeValidator(WrappingValidator):
    """Feeds the output of ``inner`` into ``target``."""

    target: Validator = None  # type: ignore[assignment]

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = self.inner._validate(value, ctx)
        if not result.success:
            return result
        return self.target._validate(result.data, ctx)


@dataclass(frozen=True, eq=False)
class PreprocessValidator(WrappingValidator):
    """Maps the raw input through a function before validating it."""

    fn: Callable[[Any], Any] = None  # type: ignore[assignment]

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        try:
            value = self.fn(value)
        except Exception as e:
            return ctx.fail(ErrorKind.TRANSFORM_ERROR, error=str(e))
        return self.inner._validate(value, ctx)


@dataclass(frozen=True, eq=False)
class BrandValidator(WrappingValidator):
    """Nominal tag with no runtime effect."""

    name: str | None = None


@dataclass(frozen=True, eq=False)
class ReadonlyValidator(WrappingValidator):
    """Marks the output as read-only; no runtime effect."""

    pass


@dataclass(frozen=True, eq=False)
class LazyValidator(Validator):
    """Defers building a schema until first use, for recursive schemas.

    Example:
        ```python
        category = v.lazy(lambda: v.object({
            "name": v.string(),
            "children": v.array(category),
        }))
        ```
    """

    getter: Callable[[], Validator]
    resolved: list[Validator] = field(default_factory=list, init=False, repr=False)

    @property
    def schema(self) -> Validator:
        if not self.resolved:
            self.resolved.append(self.getter())
        return self.resolved[0]

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return self.schema._validate(value, ctx)

"""Validator base class and the per-call parse context.

Every validator is an immutable dataclass. Builder methods never modify the
receiver; they return a new validator with one more rule, so a schema can be
built once and shared freely.

Example:
    ```python
    from dataknobs_validate import v

    name = v.string().trim().min(1)
    name.parse("  Ada ")            # "Ada"
    name.safe_parse("").success     # False
    ```
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from .messages import MessageProvider, get_message_provider
from .result import ErrorKind, ParseResult, PathSegment, ValidationIssue
from .structural import UNDEFINED, type_name

if TYPE_CHECKING:
    from .checks import Check
    from .combinators import IntersectionValidator, UnionValidator
    from .composites import ArrayValidator
    from .modifiers import (
        BrandValidator,
        CatchValidator,
        DefaultValidator,
        NullableValidator,
        NullishValidator,
        OptionalValidator,
        PipeValidator,
        PrefaultValidator,
        ReadonlyValidator,
        RefineValidator,
        SuperRefineValidator,
        TransformValidator,
    )
    from .result import RefinementContext

V = TypeVar("V", bound="Validator")


class ParseContext:
    """State threaded through one validation call."""

    def __init__(self, messages: MessageProvider):
        self.messages = messages

    def issue(
        self,
        kind: ErrorKind,
        message: str | None = None,
        path: Sequence[PathSegment] = (),
        **params: Any,
    ) -> ValidationIssue:
        """Create an issue, resolving its message unless one is given."""
        if message is None:
            message = self.messages.message_for(kind, params)
        return ValidationIssue(code=kind, message=message, path=tuple(path), params=params)

    def fail(self, kind: ErrorKind, message: str | None = None, **params: Any) -> ParseResult:
        return ParseResult.fail([self.issue(kind, message, **params)])

    def fail_kind(self, origin: str, value: Any, message: str | None = None, **params: Any) -> ParseResult:
        """Fail because the value is not of the kind ``origin``."""
        return self.fail(
            ErrorKind.INVALID_KIND,
            message,
            origin=origin,
            received=type_name(value),
            **params,
        )

    def run_checks(self, checks: Sequence[Check], value: Any, origin: str) -> ParseResult:
        """Apply checks in order, failing on the first one that rejects."""
        for check in checks:
            if not check.test(value):
                return self.fail(check.kind, check.message, origin=origin, **check.params())
        return ParseResult.ok(value)


class Validator(ABC):
    """Base class for every schema node.

    Subclasses are frozen dataclasses implementing :meth:`_validate`.
    Composites call their children through ``_validate`` so that issues stay
    structured until the public boundary.
    """

    @abstractmethod
    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        """Validate one value within an ongoing call."""
        pass

    # Public entry points

    def safe_parse(
        self,
        value: Any = UNDEFINED,
        *,
        messages: MessageProvider | None = None,
    ) -> ParseResult:
        """Validate ``value`` and return a result; never raises for invalid input.

        Args:
            value: Value to validate (absent when omitted)
            messages: Message provider for this call only

        Returns:
            ParseResult holding the output or the ValidationError
        """
        ctx = ParseContext(messages if messages is not None else get_message_provider())
        return self._validate(value, ctx)

    def parse(self, value: Any = UNDEFINED, *, messages: MessageProvider | None = None) -> Any:
        """Validate ``value`` and return the output.

        Raises:
            ValidationError: If the value does not conform
        """
        result = self.safe_parse(value, messages=messages)
        if not result.success:
            raise result.error  # type: ignore[misc]
        return result.data

    def is_valid(self, value: Any = UNDEFINED) -> bool:
        return self.safe_parse(value).success

    def parse_or_default(self, value: Any, default: Any) -> Any:
        """Return the parsed value, or the validated ``default`` if parsing fails."""
        result = self.safe_parse(value)
        if result.success:
            return result.data
        return self.parse(default)

    # Builders

    def _with(self: V, **changes: Any) -> V:
        return dataclasses.replace(self, **changes)  # type: ignore[type-var]

    def refine(
        self,
        predicate: Callable[[Any], bool],
        message: str | None = None,
        path: Sequence[PathSegment] = (),
        **params: Any,
    ) -> RefineValidator:
        from .modifiers import RefineValidator

        return RefineValidator(self, predicate, message, tuple(path), params)

    def super_refine(self, refinement: Callable[[Any, RefinementContext], None]) -> SuperRefineValidator:
        from .modifiers import SuperRefineValidator

        return SuperRefineValidator(self, refinement)

    def transform(self, fn: Callable[[Any], Any]) -> TransformValidator:
        from .modifiers import TransformValidator

        return TransformValidator(self, fn)

    def default(self, value: Any) -> DefaultValidator:
        from .modifiers import DefaultValidator

        return DefaultValidator(self, value)

    def prefault(self, value: Any) -> PrefaultValidator:
        from .modifiers import PrefaultValidator

        return PrefaultValidator(self, value)

    def catch(self, fallback: Any) -> CatchValidator:
        from .modifiers import CatchValidator

        return CatchValidator(self, fallback)

    def optional(self) -> OptionalValidator:
        from .modifiers import OptionalValidator

        return OptionalValidator(self)

    def nullable(self) -> NullableValidator:
        from .modifiers import NullableValidator

        return NullableValidator(self)

    def nullish(self) -> NullishValidator:
        from .modifiers import NullishValidator

        return NullishValidator(self)

    def pipe(self, target: Validator) -> PipeValidator:
        from .modifiers import PipeValidator

        return PipeValidator(self, target)

    def brand(self, name: str | None = None) -> BrandValidator:
        from .modifiers import BrandValidator

        return BrandValidator(self, name)

    def readonly(self) -> ReadonlyValidator:
        from .modifiers import ReadonlyValidator

        return ReadonlyValidator(self)

    def array(self) -> ArrayValidator:
        from .composites import ArrayValidator

        return ArrayValidator(self)

    def or_(self, other: Validator) -> UnionValidator:
        from .combinators import UnionValidator

        return UnionValidator((self, other))

    def and_(self, other: Validator) -> IntersectionValidator:
        from .combinators import IntersectionValidator

        return IntersectionValidator(self, other)

    def apply(self, fn: Callable[[Validator], Any]) -> Any:
        """Pass this validator through ``fn``, for reusable schema decorators."""
        return fn(self)

    def __or__(self, other: Validator) -> UnionValidator:
        """Combine with OR: the first member that accepts wins."""
        from .combinators import UnionValidator

        if isinstance(self, UnionValidator):
            return UnionValidator((*self.members, other))
        return UnionValidator((self, other))

    def __and__(self, other: Validator) -> IntersectionValidator:
        """Combine with AND: both members must accept."""
        return self.and_(other)

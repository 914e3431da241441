"""Issue and result types with consistent, predictable behavior.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .errors import ValidationError
    from .messages import MessageProvider

PathSegment = Union[str, int]


class ErrorKind(str, Enum):
    """Classification of a validation failure."""

    INVALID_KIND = "invalid_kind"
    INVALID_VALUE = "invalid_value"
    RANGE_VIOLATION = "range_violation"
    FORMAT_VIOLATION = "format_violation"
    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_UNIQUE = "not_unique"
    COERCION_FAILED = "coercion_failed"
    UNEXPECTED_KEYS = "unexpected_keys"
    TUPLE_LENGTH = "tuple_length"
    UNION_NO_MATCH = "union_no_match"
    INVALID_DISCRIMINATOR = "invalid_discriminator"
    XOR_AMBIGUOUS = "xor_ambiguous"
    INTERSECTION_ERROR = "intersection_error"
    CUSTOM = "custom"
    TRANSFORM_ERROR = "transform_error"
    CODEC_FAILED = "codec_failed"
    CODEC_ASYNC_NOT_SUPPORTED = "codec_async_not_supported"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """A single reason why a value was rejected.

    ``path`` locates the offending value from the root, one segment per
    composite level (object keys, array indices, map keys).
    """

    code: ErrorKind
    message: str
    path: tuple[PathSegment, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)

    def with_prefix(self, segment: PathSegment) -> ValidationIssue:
        """Return a copy located one level deeper under ``segment``."""
        return ValidationIssue(
            code=self.code,
            message=self.message,
            path=(segment, *self.path),
            params=self.params,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "path": list(self.path),
            "message": self.message,
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class ParseResult:
    """Outcome of a single ``safe_parse`` call.

    Exactly one of ``data`` or ``error`` is meaningful, selected by
    ``success``. Build instances through :meth:`ok` and :meth:`fail`.
    """

    success: bool
    data: Any = None
    error: ValidationError | None = None

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check success."""
        return self.success

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        return self.error.issues if self.error is not None else ()

    def unwrap(self) -> Any:
        """Return the parsed data or raise the captured error."""
        if not self.success:
            raise self.error  # type: ignore[misc]
        return self.data

    def prefixed(self, segment: PathSegment) -> ParseResult:
        """Prefix every issue of a failed result with ``segment``."""
        if self.success:
            return self
        return ParseResult.fail(
            [issue.with_prefix(segment) for issue in self.issues]
        )

    @classmethod
    def ok(cls, data: Any) -> ParseResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, issues: Sequence[ValidationIssue]) -> ParseResult:
        from .errors import ValidationError

        return cls(success=False, error=ValidationError(issues))


@dataclass
class RefinementContext:
    """Collects issues raised from a ``super_refine`` callback.

    Issues added here are located relative to the refined value.
    """

    value: Any
    messages: MessageProvider
    path: tuple[PathSegment, ...] = ()
    issues: list[ValidationIssue] = field(default_factory=list)

    def add_issue(
        self,
        message: str | None = None,
        code: ErrorKind | str = ErrorKind.CUSTOM,
        path: Sequence[PathSegment] = (),
        **params: Any,
    ) -> None:
        """Record an issue; the refinement fails if any issue is recorded.

        Args:
            message: Human readable message (resolved through the message
                provider when omitted)
            code: Issue classification, ``CUSTOM`` by default (an
                ``ErrorKind`` or its string value)
            path: Location relative to the refined value
            **params: Machine readable details
        """
        code = ErrorKind(code)
        if message is None:
            message = self.messages.message_for(code, params)
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                path=(*self.path, *path),
                params=params,
            )
        )

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

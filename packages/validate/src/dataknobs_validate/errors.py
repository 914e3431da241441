"""Validation error type and its projections (tree, flattened, pretty)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from dataknobs_common.exceptions import ValidationError as BaseValidationError

from .result import PathSegment, ValidationIssue


class ValidationError(BaseValidationError):
    """Raised when a value does not conform to a schema.

    Carries the ordered, non-empty list of issues that caused the failure.
    The issue dicts are also exposed through ``context["issues"]`` for code
    that handles any dataknobs error generically.
    """

    def __init__(self, issues: Iterable[ValidationIssue]):
        issues = tuple(issues)
        if not issues:
            raise ValueError("ValidationError requires at least one issue")
        self.issues: tuple[ValidationIssue, ...] = issues
        super().__init__(
            _summary(issues),
            context={"issues": [issue.to_dict() for issue in issues]},
        )

    @property
    def first_issue(self) -> ValidationIssue:
        return self.issues[0]

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def with_prefix(self, segment: PathSegment) -> ValidationError:
        return ValidationError(issue.with_prefix(segment) for issue in self.issues)

    def tree(self) -> ErrorTree:
        return treeify_error(self)

    def flatten(self) -> FlattenedErrors:
        return flatten_error(self)

    def pretty(self) -> str:
        return prettify_error(self)


def _summary(issues: tuple[ValidationIssue, ...]) -> str:
    if len(issues) == 1:
        return issues[0].message
    return f"{issues[0].message} (and {len(issues) - 1} more)"


@dataclass
class ErrorTree:
    """Issues arranged by the shape of the input.

    ``properties`` holds subtrees under string path segments and ``items``
    holds subtrees under integer segments, padded with ``None`` where an
    index has no issues.
    """

    errors: list[str] = field(default_factory=list)
    properties: dict[str, ErrorTree] = field(default_factory=dict)
    items: list[ErrorTree | None] = field(default_factory=list)

    def child(self, segment: PathSegment) -> ErrorTree:
        if isinstance(segment, int):
            while len(self.items) <= segment:
                self.items.append(None)
            node = self.items[segment]
            if node is None:
                node = self.items[segment] = ErrorTree()
            return node
        return self.properties.setdefault(str(segment), ErrorTree())

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"errors": list(self.errors)}
        if self.properties:
            result["properties"] = {
                name: node.to_dict() for name, node in self.properties.items()
            }
        if self.items:
            result["items"] = [
                node.to_dict() if node is not None else None for node in self.items
            ]
        return result


@dataclass
class FlattenedErrors:
    """Form-style view: root issues and issues grouped by top-level field."""

    form_errors: list[str] = field(default_factory=list)
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "formErrors": list(self.form_errors),
            "fieldErrors": {k: list(v) for k, v in self.field_errors.items()},
        }


def treeify_error(error: ValidationError) -> ErrorTree:
    tree = ErrorTree()
    for issue in error.issues:
        node = tree
        for segment in issue.path:
            node = node.child(segment)
        node.errors.append(issue.message)
    return tree


def flatten_error(error: ValidationError) -> FlattenedErrors:
    flattened = FlattenedErrors()
    for issue in error.issues:
        if not issue.path:
            flattened.form_errors.append(issue.message)
        else:
            name = str(issue.path[0])
            flattened.field_errors.setdefault(name, []).append(issue.message)
    return flattened


def format_path(path: Iterable[PathSegment]) -> str:
    """Render a path as ``a.b[0].c``."""
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(str(segment))
    return "".join(parts)


def prettify_error(error: ValidationError) -> str:
    lines = []
    for issue in error.issues:
        line = f"✖ {issue.message}"
        if issue.path:
            line += f"\n  → at {format_path(issue.path)}"
        lines.append(line)
    return "\n".join(lines)

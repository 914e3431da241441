"""Check implementations applied by primitive and collection validators.

A check tests an already kind-checked value and knows how to describe its
own failure (issue kind, check name and parameters). Validators hold an
ordered tuple of checks and stop at the first one that fails.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from re import Pattern as RegexPattern
from typing import Any

from .result import ErrorKind


class Check(ABC):
    """Base class for all checks."""

    kind: ErrorKind = ErrorKind.RANGE_VIOLATION

    def __init__(self, name: str, message: str | None = None):
        """Initialize the check.

        Args:
            name: Check name, used to select the message template
            message: Custom message replacing the provider's message
        """
        self.name = name
        self.message = message

    @abstractmethod
    def test(self, value: Any) -> bool:
        """Return True when the value satisfies the check."""
        pass

    def params(self) -> dict[str, Any]:
        return {"check": self.name}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Range(Check):
    """Measured value must lie between optional bounds."""

    def __init__(
        self,
        name: str,
        minimum: Any = None,
        maximum: Any = None,
        min_exclusive: bool = False,
        max_exclusive: bool = False,
        message: str | None = None,
        measure: Callable[[Any], Any] | None = None,
    ):
        """Initialize range check.

        Args:
            name: Check name
            minimum: Lower bound (inclusive unless min_exclusive)
            maximum: Upper bound (inclusive unless max_exclusive)
            min_exclusive: If True, value must be > minimum
            max_exclusive: If True, value must be < maximum
            message: Custom failure message
            measure: Function extracting the compared quantity from the value
        """
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValueError(f"minimum ({minimum}) cannot be greater than maximum ({maximum})")
        super().__init__(name, message)
        self.minimum = minimum
        self.maximum = maximum
        self.min_exclusive = min_exclusive
        self.max_exclusive = max_exclusive
        self.measure = measure

    def test(self, value: Any) -> bool:
        measured = self.measure(value) if self.measure is not None else value
        if self.minimum is not None:
            if self.min_exclusive and not measured > self.minimum:
                return False
            if not self.min_exclusive and not measured >= self.minimum:
                return False
        if self.maximum is not None:
            if self.max_exclusive and not measured < self.maximum:
                return False
            if not self.max_exclusive and not measured <= self.maximum:
                return False
        return True

    def params(self) -> dict[str, Any]:
        params = super().params()
        if self.minimum is not None:
            params["minimum"] = self.minimum
            params["inclusive"] = not self.min_exclusive
        if self.maximum is not None:
            params["maximum"] = self.maximum
            if self.minimum is None:
                params["inclusive"] = not self.max_exclusive
        return params


class Length(Range):
    """Length of a string or collection must lie between bounds."""

    def __init__(
        self,
        name: str,
        minimum: int | None = None,
        maximum: int | None = None,
        message: str | None = None,
    ):
        if minimum is not None and minimum < 0:
            raise ValueError(f"minimum length cannot be negative: {minimum}")
        if maximum is not None and maximum < 0:
            raise ValueError(f"maximum length cannot be negative: {maximum}")
        super().__init__(name, minimum, maximum, message=message, measure=len)

    def params(self) -> dict[str, Any]:
        params = super().params()
        if self.minimum is not None and self.minimum == self.maximum:
            params["exact"] = self.minimum
        return params


class Pattern(Check):
    """String value must contain a match for a regex."""

    kind = ErrorKind.FORMAT_VIOLATION

    def __init__(
        self,
        pattern: str | RegexPattern,
        name: str = "regex",
        message: str | None = None,
    ):
        super().__init__(name, message)
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def test(self, value: Any) -> bool:
        return self.regex.search(value) is not None

    def params(self) -> dict[str, Any]:
        params = super().params()
        params["pattern"] = self.regex.pattern
        return params


class MultipleOf(Check):
    """Numeric value must be an exact multiple of a divisor.

    Float operands use the raw IEEE remainder with no tolerance, so
    ``0.3`` is not a multiple of ``0.1``.
    """

    kind = ErrorKind.NOT_MULTIPLE_OF

    def __init__(self, divisor: int | float, name: str = "multiple_of", message: str | None = None):
        if divisor == 0:
            raise ValueError("divisor cannot be zero")
        super().__init__(name, message)
        self.divisor = divisor

    def test(self, value: Any) -> bool:
        if isinstance(value, int) and isinstance(self.divisor, int):
            return value % self.divisor == 0
        try:
            if not math.isfinite(value):
                return False
            return math.fmod(value, self.divisor) == 0
        except OverflowError:
            # int operand too large to convert to float
            return False

    def params(self) -> dict[str, Any]:
        params = super().params()
        params["divisor"] = self.divisor
        return params


class Predicate(Check):
    """Check backed by a plain boolean function."""

    def __init__(
        self,
        name: str,
        predicate: Callable[[Any], bool],
        kind: ErrorKind = ErrorKind.RANGE_VIOLATION,
        message: str | None = None,
        **params: Any,
    ):
        super().__init__(name, message)
        self.predicate = predicate
        self.kind = kind
        self.extra = params

    def test(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def params(self) -> dict[str, Any]:
        params = super().params()
        params.update(self.extra)
        return params

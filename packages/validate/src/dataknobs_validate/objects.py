"""Object validator with an ordered shape and shape-algebra builders.

Example:
    ```python
    from dataknobs_validate import v

    user = v.object({
        "name": v.string().min(1),
        "age": v.number().int().nonnegative().optional(),
    })

    user.parse({"name": "Ada", "extra": 1})     # {"name": "Ada"}
    user.strict().safe_parse({"name": "Ada", "extra": 1}).success  # False
    admin = user.extend({"role": v.literal("admin")})
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .base import ParseContext, Validator
from .exceptions import SchemaDefinitionError
from .result import ErrorKind, ParseResult
from .structural import UNDEFINED


class UnknownKeys(str, Enum):
    """What to do with input keys that are not part of the shape."""

    STRIP = "strip"
    STRICT = "strict"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, eq=False)
class ObjectValidator(Validator):
    """Accepts mappings whose fields satisfy the shape; outputs a dict.

    Fields are visited in shape order and validation stops at the first
    invalid field. A missing field is validated as ``UNDEFINED`` and is left
    out of the output when its validated value is still ``UNDEFINED``.
    """

    fields: Mapping[str, Validator] = field(default_factory=dict)
    unknown_keys: UnknownKeys = UnknownKeys.STRIP
    strict_message: str | None = None
    message: str | None = None

    @property
    def shape(self) -> dict[str, Validator]:
        return dict(self.fields)

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, Mapping):
            return ctx.fail_kind("object", value, self.message)

        output: dict[str, Any] = {}
        for name, validator in self.fields.items():
            result = validator._validate(value.get(name, UNDEFINED), ctx)
            if not result.success:
                return result.prefixed(name)
            if result.data is not UNDEFINED:
                output[name] = result.data

        if self.unknown_keys is UnknownKeys.STRIP:
            return ParseResult.ok(output)

        extra = [key for key in value if key not in self.fields]
        if self.unknown_keys is UnknownKeys.STRICT:
            if extra:
                return ctx.fail(
                    ErrorKind.UNEXPECTED_KEYS,
                    self.strict_message,
                    origin="object",
                    keys=extra,
                )
        else:
            for key in extra:
                output[key] = value[key]
        return ParseResult.ok(output)

    # Unknown key modes

    def strict(self, message: str | None = None) -> ObjectValidator:
        return self._with(unknown_keys=UnknownKeys.STRICT, strict_message=message)

    def passthrough(self) -> ObjectValidator:
        return self._with(unknown_keys=UnknownKeys.PASSTHROUGH)

    loose = passthrough

    def strip(self) -> ObjectValidator:
        return self._with(unknown_keys=UnknownKeys.STRIP)

    # Shape algebra

    def _select(self, keys: Iterable[str]) -> list[str]:
        keys = list(keys)
        missing = [k for k in keys if k not in self.fields]
        if missing:
            raise SchemaDefinitionError(
                f"Unknown keys: {', '.join(missing)}",
                context={"keys": missing, "shape": list(self.fields)},
            )
        return keys

    def pick(self, *keys: str) -> ObjectValidator:
        selected = set(self._select(keys))
        return self._with(fields={k: v for k, v in self.fields.items() if k in selected})

    def omit(self, *keys: str) -> ObjectValidator:
        dropped = set(self._select(keys))
        return self._with(fields={k: v for k, v in self.fields.items() if k not in dropped})

    def extend(self, shape: Mapping[str, Validator]) -> ObjectValidator:
        """Add or replace fields."""
        return self._with(fields={**self.fields, **shape})

    def safe_extend(self, shape: Mapping[str, Validator]) -> ObjectValidator:
        """Add fields, refusing to replace an existing one.

        Raises:
            SchemaDefinitionError: If any key already exists in the shape
        """
        collisions = [k for k in shape if k in self.fields]
        if collisions:
            raise SchemaDefinitionError(
                f"Cannot overwrite existing keys: {', '.join(collisions)}",
                context={"keys": collisions},
            )
        return self.extend(shape)

    def merge(self, other: ObjectValidator) -> ObjectValidator:
        """Combine shapes; fields and the unknown key mode of ``other`` win."""
        return ObjectValidator(
            fields={**self.fields, **other.fields},
            unknown_keys=other.unknown_keys,
            strict_message=other.strict_message,
            message=self.message,
        )

    def partial(self, *keys: str) -> ObjectValidator:
        """Make the given fields (all fields when none are given) optional."""
        from .modifiers import OptionalValidator

        targets = set(self._select(keys)) if keys else set(self.fields)
        return self._with(fields={
            k: OptionalValidator(v) if k in targets and not isinstance(v, OptionalValidator) else v
            for k, v in self.fields.items()
        })

    def deep_partial(self) -> ObjectValidator:
        """Make every field optional, recursing into nested object fields."""
        from .modifiers import OptionalValidator

        def loosen(validator: Validator) -> Validator:
            inner = validator.inner if isinstance(validator, OptionalValidator) else validator
            if isinstance(inner, ObjectValidator):
                inner = inner.deep_partial()
            return OptionalValidator(inner)

        return self._with(fields={k: loosen(v) for k, v in self.fields.items()})

    def required(self, *keys: str) -> ObjectValidator:
        """Undo ``partial`` for the given fields (all fields when none are given)."""
        from .modifiers import OptionalValidator

        targets = set(self._select(keys)) if keys else set(self.fields)
        return self._with(fields={
            k: v.inner if k in targets and isinstance(v, OptionalValidator) else v
            for k, v in self.fields.items()
        })

    def keyof(self) -> Validator:
        """Enum of the shape's keys."""
        from .primitives import EnumValidator

        return EnumValidator(tuple(self.fields))

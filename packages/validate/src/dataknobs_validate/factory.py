"""Factory classes for building validators from configuration."""

import logging
from typing import Any

from dataknobs_config import FactoryBase

from .base import Validator
from .coercion import (
    CoerceBigIntValidator,
    CoerceBooleanValidator,
    CoerceDateValidator,
    CoerceNumberValidator,
    CoerceStringValidator,
)
from .combinators import DiscriminatedUnionValidator, UnionValidator
from .composites import ArrayValidator, RecordValidator, SetValidator, TupleValidator
from .exceptions import SchemaDefinitionError
from .formats import STRING_FORMATS
from .messages import TableMessageProvider, default_provider, set_message_provider
from .objects import ObjectValidator, UnknownKeys
from .primitives import (
    AnyValidator,
    BigIntValidator,
    BooleanValidator,
    DateValidator,
    EnumValidator,
    LiteralValidator,
    NullValidator,
    NumberValidator,
    StringBoolValidator,
    StringValidator,
    UnknownValidator,
    parse_iso_datetime,
)

logger = logging.getLogger(__name__)

# formats with a dedicated StringValidator method; the rest come from STRING_FORMATS
METHOD_FORMATS = ("email", "url", "uuid", "ip", "ipv4", "ipv6", "datetime")
NUMBER_SIGNS = ("positive", "negative", "nonnegative", "nonpositive", "finite")

# keys every node may carry, in addition to the type-specific ones
COMMON_KEYS = {
    "type", "name", "coerce", "optional", "nullable", "required",
    "default", "description", "message",
}


class SchemaFactory(FactoryBase):
    """Factory for creating validators from configuration.

    Configuration Options:
        name (str): Schema name, used for logging
        schema (dict): A single schema node, for non-object roots
        fields (list | dict): Field definitions of a root object schema
        unknown_keys (str): strip (default), strict or passthrough
        strict (bool): Shorthand for ``unknown_keys: strict``

    Schema Node Options:
        type (str): string, number, integer, boolean, stringbool, bigint, date,
            literal, enum, array, tuple, set, record, object, union, any, unknown, null
        coerce (bool): Use the coercing variant (primitives only)
        optional / nullable (bool): Wrap the node
        required (bool): ``false`` is the same as ``optional: true``
        default (any): Value used when the field is absent
        message (str): Custom message for the kind check

    Example Configuration:
        schemas:
          - name: signup
            factory: dataknobs_validate.factory.SchemaFactory
            unknown_keys: strict
            fields:
              - name: username
                type: string
                trim: true
                min: 3
                max: 20
                pattern: "^[a-zA-Z0-9_]+$"
              - name: email
                type: string
                format: email
              - name: age
                type: integer
                coerce: true
                min: 13
                optional: true
    """

    def create(self, **config: Any) -> Validator:
        """Create a validator from configuration.

        Args:
            **config: Schema configuration

        Returns:
            Validator instance

        Raises:
            SchemaDefinitionError: If the configuration names an unknown type
        """
        name = config.get("name", "unnamed_schema")
        logger.info(f"Creating schema: {name}")

        if "schema" in config:
            return self.build(config["schema"])

        root: dict[str, Any] = {"type": "object", "fields": config.get("fields", [])}
        for key in ("unknown_keys", "strict", "passthrough", "message"):
            if key in config:
                root[key] = config[key]
        return self.build(root)

    def build(self, node: Any) -> Validator:
        """Build one schema node (a type name or a node dict)."""
        if isinstance(node, str):
            node = {"type": node}
        if not isinstance(node, dict):
            raise SchemaDefinitionError(
                "Schema node must be a type name or a mapping",
                context={"node": repr(node)},
            )

        node_type = str(node.get("type", "string")).lower()
        builder = getattr(self, f"_build_{node_type}", None)
        if builder is None:
            raise SchemaDefinitionError(
                f"Unknown schema type: {node_type}",
                context={"type": node_type},
            )
        validator, used = builder(node)
        self._warn_unknown(node_type, node, used)
        return self._wrap(validator, node)

    def _warn_unknown(self, node_type: str, node: dict[str, Any], used: set[str]) -> None:
        for key in node:
            if key not in used and key not in COMMON_KEYS:
                logger.warning(f"Unknown constraint type: {key} (on {node_type})")

    def _wrap(self, validator: Validator, node: dict[str, Any]) -> Validator:
        if node.get("nullable"):
            validator = validator.nullable()
        if "default" in node:
            return validator.default(node["default"])
        if node.get("optional") or node.get("required") is False:
            validator = validator.optional()
        return validator

    # Primitives

    def _build_string(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        cls = CoerceStringValidator if node.get("coerce") else StringValidator
        validator = cls(message=node.get("message"))
        if node.get("trim"):
            validator = validator.trim()
        if node.get("lower"):
            validator = validator.to_lower()
        if node.get("upper"):
            validator = validator.to_upper()
        if "min" in node:
            validator = validator.min(node["min"])
        if "max" in node:
            validator = validator.max(node["max"])
        if "length" in node:
            validator = validator.length(node["length"])
        if "pattern" in node:
            validator = validator.regex(node["pattern"])
        if "format" in node:
            fmt = str(node["format"]).lower()
            if fmt in METHOD_FORMATS:
                validator = getattr(validator, fmt)()
            elif fmt in STRING_FORMATS:
                validator = validator.format(fmt)
            else:
                raise SchemaDefinitionError(
                    f"Unknown string format: {fmt}",
                    context={"format": fmt, "supported": [*METHOD_FORMATS, *STRING_FORMATS]},
                )
        if "hash" in node:
            validator = validator.hash(str(node["hash"]).lower())
        return validator, {"trim", "lower", "upper", "min", "max", "length", "pattern", "format", "hash"}

    def _build_number(self, node: dict[str, Any], integer: bool = False) -> tuple[Validator, set[str]]:
        cls = CoerceNumberValidator if node.get("coerce") else NumberValidator
        validator = cls(message=node.get("message"))
        if integer or node.get("int"):
            validator = validator.int()
        if "min" in node:
            validator = validator.min(node["min"])
        if "max" in node:
            validator = validator.max(node["max"])
        if "gt" in node:
            validator = validator.gt(node["gt"])
        if "lt" in node:
            validator = validator.lt(node["lt"])
        for sign in NUMBER_SIGNS:
            if node.get(sign):
                validator = getattr(validator, sign)()
        if "multiple_of" in node:
            validator = validator.multiple_of(node["multiple_of"])
        return validator, {"int", "min", "max", "gt", "lt", "multiple_of", *NUMBER_SIGNS}

    def _build_integer(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        return self._build_number(node, integer=True)

    def _build_float(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        return self._build_number(node)

    def _build_boolean(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        cls = CoerceBooleanValidator if node.get("coerce") else BooleanValidator
        return cls(message=node.get("message")), set()

    def _build_stringbool(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        validator = StringBoolValidator(
            case_sensitive=bool(node.get("case_sensitive", False)), message=node.get("message"),
        )
        if "truthy" in node:
            validator = validator.with_truthy(*node["truthy"])
        if "falsy" in node:
            validator = validator.with_falsy(*node["falsy"])
        return validator, {"truthy", "falsy", "case_sensitive"}

    def _build_bigint(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        cls = CoerceBigIntValidator if node.get("coerce") else BigIntValidator
        validator = cls(message=node.get("message"))
        if "min" in node:
            validator = validator.min(node["min"])
        if "max" in node:
            validator = validator.max(node["max"])
        return validator, {"min", "max"}

    def _build_date(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        cls = CoerceDateValidator if node.get("coerce") else DateValidator
        validator = cls(message=node.get("message"))
        if "min" in node:
            validator = validator.min(_as_datetime(node["min"]))
        if "max" in node:
            validator = validator.max(_as_datetime(node["max"]))
        return validator, {"min", "max"}

    def _build_literal(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        if "value" not in node:
            raise SchemaDefinitionError("Literal requires a 'value'")
        return LiteralValidator(node["value"], node.get("message")), {"value"}

    def _build_enum(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        values = node.get("values") or []
        if not values:
            raise SchemaDefinitionError("Enum requires at least one value in 'values'")
        return EnumValidator(tuple(values), node.get("message")), {"values"}

    def _build_any(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        return AnyValidator(), set()

    def _build_unknown(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        return UnknownValidator(), set()

    def _build_null(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        return NullValidator(node.get("message")), set()

    # Composites

    def _build_array(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        validator = ArrayValidator(self.build(node.get("items", "unknown")), message=node.get("message"))
        if "min" in node:
            validator = validator.min(node["min"])
        if "max" in node:
            validator = validator.max(node["max"])
        if "length" in node:
            validator = validator.length(node["length"])
        if node.get("unique"):
            validator = validator.unique()
        return validator, {"items", "min", "max", "length", "unique"}

    def _build_tuple(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        items = tuple(self.build(item) for item in node.get("items", []))
        return TupleValidator(items, node.get("message")), {"items"}

    def _build_set(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        validator = SetValidator(self.build(node.get("items", "unknown")), message=node.get("message"))
        if "min" in node:
            validator = validator.min(node["min"])
        if "max" in node:
            validator = validator.max(node["max"])
        return validator, {"items", "min", "max"}

    def _build_record(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        validator = RecordValidator(
            key=self.build(node.get("keys", "string")),
            value=self.build(node.get("items", "unknown")),
            message=node.get("message"),
        )
        if node.get("partial"):
            validator = validator.partial()
        if node.get("loose"):
            validator = validator.loose()
        return validator, {"keys", "items", "partial", "loose"}

    def _build_object(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        fields = node.get("fields", {})
        if isinstance(fields, dict):
            fields = [{"name": name, **_as_node(spec)} for name, spec in fields.items()]

        shape: dict[str, Validator] = {}
        for field_config in fields:
            field_name = field_config.get("name")
            if not field_name:
                logger.warning("Field configuration missing 'name', skipping")
                continue
            shape[field_name] = self.build(field_config)

        mode = node.get("unknown_keys")
        if mode is None:
            if node.get("strict"):
                mode = UnknownKeys.STRICT
            elif node.get("passthrough"):
                mode = UnknownKeys.PASSTHROUGH
            else:
                mode = UnknownKeys.STRIP
        try:
            unknown_keys = UnknownKeys(mode)
        except ValueError as e:
            raise SchemaDefinitionError(
                f"Unknown unknown_keys mode: {mode}",
                context={"mode": mode},
            ) from e
        validator = ObjectValidator(shape, unknown_keys, message=node.get("message"))
        return validator, {"fields", "unknown_keys", "strict", "passthrough"}

    def _build_union(self, node: dict[str, Any]) -> tuple[Validator, set[str]]:
        options = tuple(self.build(option) for option in node.get("options", []))
        if "discriminator" in node:
            validator: Validator = DiscriminatedUnionValidator(
                node["discriminator"], options, node.get("message"),  # type: ignore[arg-type]
            )
        else:
            validator = UnionValidator(options, node.get("message"))
        return validator, {"options", "discriminator"}


def _as_node(spec: Any) -> dict[str, Any]:
    return {"type": spec} if isinstance(spec, str) else dict(spec)


def _as_datetime(value: Any) -> Any:
    return parse_iso_datetime(value) if isinstance(value, str) else value


class MessageProviderFactory(FactoryBase):
    """Factory for creating message providers from configuration.

    Configuration Options:
        messages (dict): Template table keyed like ``"range_violation.string.min"``
        fallback_to_default (bool): Consult the English table for missing
            keys (default: True)
        install (bool): Make the provider the process-wide default
            (default: False)

    Example Configuration:
        message_providers:
          - name: de
            factory: dataknobs_validate.factory.MessageProviderFactory
            messages:
              invalid_kind.string: "Ungültige Zeichenkette"
              range_violation.string.min: "Mindestens {minimum} Zeichen"
    """

    def create(self, **config: Any) -> TableMessageProvider:
        """Create a TableMessageProvider instance.

        Args:
            **config: Provider configuration

        Returns:
            TableMessageProvider instance
        """
        logger.info("Creating message provider")
        fallback = default_provider if config.get("fallback_to_default", True) else None
        provider = TableMessageProvider(config.get("messages", {}), fallback=fallback)
        if config.get("install", False):
            set_message_provider(provider)
        return provider


# Create singleton instances for registration
schema_factory = SchemaFactory()
message_provider_factory = MessageProviderFactory()

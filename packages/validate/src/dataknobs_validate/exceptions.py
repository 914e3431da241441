"""Build-time exceptions for schema construction."""

from dataknobs_common.exceptions import ConfigurationError

from .errors import ValidationError


class SchemaDefinitionError(ConfigurationError):
    """Raised when a schema is assembled incorrectly.

    Examples are a discriminated union whose options lack a literal
    discriminator, ``safe_extend`` overwriting an existing key, or a
    configuration that names an unknown type.
    """

    pass


__all__ = ["SchemaDefinitionError", "ValidationError"]

"""Runtime data validation with composable, immutable schemas.

This package provides:
- Immutable validators built with a fluent API (``v.string().min(3)``)
- Structured issues with paths, kinds and machine-readable parameters
- Combinators (union, discriminated union, intersection, xor)
- Coercion, refinements, transforms, defaults and bidirectional codecs
- Swappable message providers and tree/flat/pretty error projections
- Factories for building schemas from dataknobs configuration
"""

from . import codecs, v
from .base import ParseContext, Validator
from .codecs import Codec
from .coercion import coerce
from .combinators import (
    DiscriminatedUnionValidator,
    IntersectionValidator,
    UnionValidator,
    XorValidator,
)
from .composites import ArrayValidator, MapValidator, RecordValidator, SetValidator, TupleValidator
from .errors import (
    ErrorTree,
    FlattenedErrors,
    ValidationError,
    flatten_error,
    format_path,
    prettify_error,
    treeify_error,
)
from .exceptions import SchemaDefinitionError
from .formats import STRING_FORMATS
from .factory import MessageProviderFactory, SchemaFactory, message_provider_factory, schema_factory
from .messages import (
    DEFAULT_MESSAGES,
    MessageProvider,
    TableMessageProvider,
    default_provider,
    get_message_provider,
    set_message_provider,
    use_messages,
)
from .modifiers import (
    BrandValidator,
    CatchValidator,
    DefaultValidator,
    LazyValidator,
    NullableValidator,
    NullishValidator,
    OptionalValidator,
    PipeValidator,
    PrefaultValidator,
    PreprocessValidator,
    ReadonlyValidator,
    RefineValidator,
    SuperRefineValidator,
    TransformValidator,
)
from .objects import ObjectValidator, UnknownKeys
from .primitives import (
    AnyValidator,
    BigIntValidator,
    BooleanValidator,
    BytesValidator,
    DateValidator,
    EnumValidator,
    FunctionValidator,
    JsonValidator,
    LiteralValidator,
    NaNValidator,
    NativeEnumValidator,
    NeverValidator,
    NullValidator,
    NumberValidator,
    StringBoolValidator,
    StringValidator,
    Symbol,
    SymbolValidator,
    TemplateLiteralValidator,
    UndefinedValidator,
    UnknownValidator,
)
from .result import ErrorKind, ParseResult, RefinementContext, ValidationIssue
from .structural import UNDEFINED

__version__ = "0.1.0"

__all__ = [
    # Builders
    "v",
    "coerce",
    "codecs",
    # Results and errors
    "UNDEFINED",
    "ErrorKind",
    "ValidationIssue",
    "ParseResult",
    "RefinementContext",
    "ValidationError",
    "SchemaDefinitionError",
    "ErrorTree",
    "FlattenedErrors",
    "treeify_error",
    "flatten_error",
    "prettify_error",
    "format_path",
    # Messages
    "MessageProvider",
    "TableMessageProvider",
    "DEFAULT_MESSAGES",
    "default_provider",
    "get_message_provider",
    "set_message_provider",
    "use_messages",
    # Validators
    "Validator",
    "ParseContext",
    "StringValidator",
    "NumberValidator",
    "BooleanValidator",
    "BigIntValidator",
    "DateValidator",
    "BytesValidator",
    "StringBoolValidator",
    "TemplateLiteralValidator",
    "JsonValidator",
    "FunctionValidator",
    "STRING_FORMATS",
    "Symbol",
    "SymbolValidator",
    "LiteralValidator",
    "EnumValidator",
    "NativeEnumValidator",
    "AnyValidator",
    "UnknownValidator",
    "NeverValidator",
    "UndefinedValidator",
    "NullValidator",
    "NaNValidator",
    "ArrayValidator",
    "TupleValidator",
    "SetValidator",
    "MapValidator",
    "RecordValidator",
    "ObjectValidator",
    "UnknownKeys",
    "UnionValidator",
    "DiscriminatedUnionValidator",
    "IntersectionValidator",
    "XorValidator",
    "OptionalValidator",
    "NullableValidator",
    "NullishValidator",
    "DefaultValidator",
    "PrefaultValidator",
    "CatchValidator",
    "RefineValidator",
    "SuperRefineValidator",
    "TransformValidator",
    "PipeValidator",
    "PreprocessValidator",
    "BrandValidator",
    "ReadonlyValidator",
    "LazyValidator",
    "Codec",
    # Factories
    "schema_factory",
    "message_provider_factory",
    "SchemaFactory",
    "MessageProviderFactory",
]

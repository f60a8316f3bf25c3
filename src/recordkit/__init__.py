"""
recordkit: introspection and value coercion for dataclass records.

Exports the public API:
- Mapper, STD_MAPPER, FieldInfo, StructMap, tag (field trees)
- parse_text, format_value, assign_dynamic, Value (coercion)
- set_default, alloc_default, DefaultMapper (declared defaults)
- GenericCodec, Reflector (typed plain-data round trip)
"""
from .errors import (
    ConversionError,
    DuplicatePathError,
    ReflectError,
    StructuralError,
    TypeMismatchError,
    UnknownPathError,
    UnknownTypeError,
    UnsupportedKindError,
)
from .fields import (
    STD_MAPPER,
    FieldInfo,
    FieldRef,
    Mapper,
    StructMap,
    copy_struct,
    field_by_indexes,
    field_by_indexes_read_only,
    tag,
)
from .coerce import Value, assign_dynamic, format_value, parse_text, text_to_value, value_to_text
from .defaults import DefaultMapper, alloc_default, set_default
from .codec import STRUCT_NAME_KEY, GenericCodec, Reflector
from .config import ReflectConfig
from .log import configure_logging

__version__ = "0.1.0"

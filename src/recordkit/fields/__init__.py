"""
Field trees for dataclass record types.

Exports the public API:
- Mapper, STD_MAPPER, copy_struct
- FieldInfo, StructMap, tag
- FieldRef, field_by_indexes, field_by_indexes_read_only, alloc
- naming functions (std_tag_func, field_name_to_lower, ...)
"""
from .kinds import Kind, deep_equal, deref, kind_of, type_name, zero_value
from .types import EMBEDDED, FieldInfo, StructMap, tag
from .resolve import FieldRef, alloc, field_by_indexes, field_by_indexes_read_only
from .naming import (
    FLATTEN,
    IGNORE,
    OMIT_EMPTY,
    OMIT_NESTED,
    TAG_FUNCS,
    camel_case_to_underscore,
    default_tag_func,
    field_name_to_lower,
    field_name_to_underscore,
    std_tag_func,
    underscore_to_camel_case,
)
from .builder import get_mapping
from .mapper import STD_MAPPER, Mapper, copy_struct
